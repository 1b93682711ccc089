from typing import Optional, Tuple
from dataclasses import dataclass
import logging

from ...core.validators import validate_phone_number, validate_fullname
from ...core.timeutils import utcnow
from ...exceptions import BadRequestError, ConflictError, NotFoundError
from ..ports.user_repo import UserRepository, UserDto, DuplicatePhoneNumber
from ..ports.otp_sender import OTPSender
from ..ports.audit_logger import AuditLogger
from .otp_service import OTPService
from .token_service import TokenService

logger = logging.getLogger(__name__)


@dataclass
class AuthService:
    user_repo: UserRepository
    otp_service: OTPService
    tokens: TokenService
    otp_sender: OTPSender
    audit: Optional[AuditLogger] = None

    def _audit(self, action: str, phone: str, user_id: Optional[str] = None, success: bool = True, **details) -> None:
        if self.audit is not None:
            self.audit.log(action, phone, user_id=user_id, success=success, details=details or None)

    def register(self, phone_number: Optional[str], fullname: Optional[str] = None) -> UserDto:
        """Create or refresh a pending registration and send a fresh OTP.

        Also serves as the resend path: an unverified record simply gets a new
        code, overwriting the previous one.
        """
        if not phone_number or not phone_number.strip():
            raise BadRequestError("Phone number is required")
        try:
            phone_number = validate_phone_number(phone_number)
            fullname = validate_fullname(fullname) if fullname else None
        except ValueError as e:
            raise BadRequestError(str(e))

        existing = self.user_repo.get_by_phone(phone_number)
        if existing and existing.is_verified:
            self._audit("register_attempt", phone_number, existing.id, success=False, error="ALREADY_VERIFIED")
            raise ConflictError("User with this phone number already exists")

        if existing:
            user = existing
            if fullname:
                user.fullname = fullname
        else:
            if not fullname:
                raise BadRequestError("Full name is required")
            user = UserDto(fullname=fullname, phone_number=phone_number)

        code = self.otp_service.issue(user)
        user.updated_at = utcnow()

        if existing:
            user = self.user_repo.refresh_pending_otp(user)
            if user is None:
                # Verified between our read and this write
                self._audit("register_attempt", phone_number, existing.id, success=False, error="ALREADY_VERIFIED")
                raise ConflictError("User with this phone number already exists")
        else:
            try:
                user = self.user_repo.create(user)
            except DuplicatePhoneNumber:
                # Another registration for the same number won the insert
                self._audit("register_attempt", phone_number, success=False, error="DUPLICATE_PHONE")
                raise ConflictError("User with this phone number already exists")

        self.otp_sender.send(phone_number, code)
        self._audit("register_otp_sent", phone_number, user.id, resend=bool(existing))
        return user

    def verify_otp(self, phone_number: Optional[str], otp: Optional[str]) -> Tuple[UserDto, str]:
        if not phone_number or not otp:
            raise BadRequestError("Phone number and OTP are required")
        phone_number = phone_number.strip()

        user = self.user_repo.get_by_phone(phone_number)
        if not user:
            raise NotFoundError("User not found")

        if not self.otp_service.verify(user, otp.strip()):
            self._audit("otp_verify", phone_number, user.id, success=False)
            raise BadRequestError("Invalid or expired OTP")

        user.is_verified = True
        self.otp_service.clear(user)
        user.updated_at = utcnow()
        user = self.user_repo.save(user)

        access_token = self.tokens.issue(user.id, user.phone_number)
        self._audit("otp_verify", phone_number, user.id)
        return user, access_token

    def login(self, phone_number: Optional[str]) -> Tuple[UserDto, str]:
        """Issue a token for an already verified phone number.

        Possession of the number string is the only credential here.
        """
        if not phone_number or not phone_number.strip():
            raise BadRequestError("Phone number is required")
        phone_number = phone_number.strip()

        user = self.user_repo.get_by_phone(phone_number)
        if not user:
            raise NotFoundError("User not found. Please register first.")
        if not user.is_verified:
            self._audit("login", phone_number, user.id, success=False, error="NOT_VERIFIED")
            raise BadRequestError("Please verify your phone number first")

        access_token = self.tokens.issue(user.id, user.phone_number)
        self._audit("login", phone_number, user.id)
        return user, access_token

    def logout(self, user: Optional[UserDto] = None) -> None:
        # Tokens stay valid until expiry; nothing to revoke server side
        if user is not None:
            self._audit("logout", user.phone_number, user.id)
        else:
            logger.info("Logout without a resolvable session")
