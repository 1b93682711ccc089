# echochat/db/models/chat/message.py
from typing import Optional
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, Index
from datetime import datetime
import uuid

from ....core.timeutils import utcnow
from ...types import UTCDateTime

class Message(SQLModel, table=True):
    __tablename__ = "messages"
    __table_args__ = (Index("idx_messages_user_created", "user_id", "created_at"),)
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(foreign_key="users.id")
    content: str = Field(max_length=1000)
    type: str = Field(max_length=10)  # "sent" | "received"
    is_read: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(UTCDateTime(), nullable=False))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(UTCDateTime(), nullable=False))

    # Relationships
    user: Optional["User"] = Relationship(back_populates="messages")
