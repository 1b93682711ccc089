# echochat/schemas/messages/message.py
from pydantic import BaseModel, Field
from typing import Optional

class SendMessageRequest(BaseModel):
    content: Optional[str] = Field(None, description="Message content")

class MessageResponse(BaseModel):
    id: str
    content: str
    type: str
    isRead: bool
    createdAt: str
