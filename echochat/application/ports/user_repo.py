from typing import Protocol, Optional
from dataclasses import dataclass, field
from datetime import datetime
import uuid

from ...core.timeutils import utcnow


@dataclass
class UserDto:
    fullname: str
    phone_number: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    is_verified: bool = False
    otp_hash: Optional[str] = None
    otp_expires_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def has_pending_otp(self) -> bool:
        return bool(self.otp_hash) and self.otp_expires_at is not None

    def to_public_dict(self) -> dict:
        """Wire representation without the OTP fields."""
        return {
            "id": self.id,
            "fullname": self.fullname,
            "phoneNumber": self.phone_number,
            "isVerified": self.is_verified,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


class DuplicatePhoneNumber(Exception):
    """Raised by the store when a phone number is already taken."""

    def __init__(self, phone_number: str):
        super().__init__(f"Phone number {phone_number} is already registered")
        self.phone_number = phone_number


class UserRepository(Protocol):
    def get_by_phone(self, phone_number: str) -> Optional[UserDto]:
        ...

    def get_by_id(self, user_id: str) -> Optional[UserDto]:
        ...

    def create(self, user: UserDto) -> UserDto:
        """Insert a new record; raises DuplicatePhoneNumber on a taken phone number."""
        ...

    def save(self, user: UserDto) -> UserDto:
        ...

    def refresh_pending_otp(self, user: UserDto) -> Optional[UserDto]:
        """Store a new code and name on a record that is still unverified.

        Returns None when the record has been verified (or removed) meanwhile;
        verified records are never touched.
        """
        ...
