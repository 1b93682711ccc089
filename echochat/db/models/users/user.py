# echochat/db/models/users/user.py
from typing import Optional, List
from sqlalchemy import Column
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime
import uuid

from ....core.timeutils import utcnow
from ...types import UTCDateTime

class User(SQLModel, table=True):
    __tablename__ = "users"
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    fullname: str = Field(max_length=50)
    phone_number: str = Field(max_length=10, unique=True, index=True)
    is_verified: bool = Field(default=False)
    otp_hash: Optional[str] = Field(default=None, max_length=255)
    otp_expires_at: Optional[datetime] = Field(default=None, sa_column=Column(UTCDateTime(), nullable=True))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(UTCDateTime(), nullable=False))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(UTCDateTime(), nullable=False))

    # Relationships
    messages: List["Message"] = Relationship(back_populates="user")
