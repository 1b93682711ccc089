from typing import Optional
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from .....db.models import User
from .....application.ports.user_repo import UserRepository, UserDto, DuplicatePhoneNumber

class SqlUserRepository(UserRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_dto(self, user: User) -> UserDto:
        return UserDto(
            id=user.id,
            fullname=user.fullname,
            phone_number=user.phone_number,
            is_verified=bool(user.is_verified),
            otp_hash=user.otp_hash,
            otp_expires_at=user.otp_expires_at,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    def get_by_phone(self, phone_number: str) -> Optional[UserDto]:
        user = self.session.exec(select(User).where(User.phone_number == phone_number)).first()
        return self._to_dto(user) if user else None

    def get_by_id(self, user_id: str) -> Optional[UserDto]:
        user = self.session.get(User, user_id)
        return self._to_dto(user) if user else None

    def create(self, user: UserDto) -> UserDto:
        rec = User(
            id=user.id,
            fullname=user.fullname,
            phone_number=user.phone_number,
            is_verified=user.is_verified,
            otp_hash=user.otp_hash,
            otp_expires_at=user.otp_expires_at,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
        self.session.add(rec)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise DuplicatePhoneNumber(user.phone_number)
        self.session.refresh(rec)
        return self._to_dto(rec)

    def save(self, user: UserDto) -> UserDto:
        rec = self.session.get(User, user.id)
        if not rec:
            return self.create(user)
        rec.fullname = user.fullname
        rec.is_verified = user.is_verified
        rec.otp_hash = user.otp_hash
        rec.otp_expires_at = user.otp_expires_at
        rec.updated_at = user.updated_at
        self.session.add(rec)
        self.session.commit()
        self.session.refresh(rec)
        return self._to_dto(rec)

    def refresh_pending_otp(self, user: UserDto) -> Optional[UserDto]:
        # Single conditional UPDATE; a concurrent verification makes it match nothing
        stmt = (
            update(User)
            .where(User.id == user.id, User.is_verified == False)  # noqa: E712
            .values(
                fullname=user.fullname,
                otp_hash=user.otp_hash,
                otp_expires_at=user.otp_expires_at,
                updated_at=user.updated_at,
            )
        )
        result = self.session.connection().execute(stmt)
        self.session.commit()
        if result.rowcount == 0:
            return None
        return self.get_by_id(user.id)
