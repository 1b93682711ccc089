import logging
import secrets
import string
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable

from passlib.context import CryptContext

from ...core.timeutils import as_utc, utcnow

from ..ports.user_repo import UserDto

logger = logging.getLogger(__name__)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass
class OTPService:
    """Issues one-time codes onto a user record and checks candidates against them.

    Only a salted bcrypt hash of the code is kept on the record; the plaintext
    is returned once from ``issue`` for out-of-band delivery.
    """
    length: int = 6
    expiry_minutes: int = 10
    clock: Callable[[], datetime] = field(default=utcnow)

    def generate_code(self) -> str:
        return "".join(secrets.choice(string.digits) for _ in range(self.length))

    def issue(self, user: UserDto) -> str:
        code = self.generate_code()
        user.otp_hash = pwd_context.hash(code)
        user.otp_expires_at = self.clock() + timedelta(minutes=self.expiry_minutes)
        return code

    def verify(self, user: UserDto, candidate: str) -> bool:
        if not user.has_pending_otp:
            return False
        if as_utc(self.clock()) > as_utc(user.otp_expires_at):
            logger.info(f"Expired OTP presented for user {user.id}")
            return False
        if not candidate:
            return False
        try:
            return pwd_context.verify(candidate, user.otp_hash)
        except ValueError:
            logger.warning(f"Unreadable OTP hash on user {user.id}")
            return False

    def clear(self, user: UserDto) -> None:
        user.otp_hash = None
        user.otp_expires_at = None
