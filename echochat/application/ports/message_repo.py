from typing import Protocol, List, Optional
from dataclasses import dataclass
from datetime import datetime


@dataclass
class MessageDto:
    id: str
    user_id: str
    content: str
    type: str
    is_read: bool
    created_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "content": self.content,
            "type": self.type,
            "isRead": self.is_read,
            "createdAt": self.created_at.isoformat(),
        }


class MessageRepository(Protocol):
    def create(self, user_id: str, content: str, type: str) -> MessageDto:
        ...

    def list_for_user(self, user_id: str) -> List[MessageDto]:
        ...

    def get_for_user(self, message_id: str, user_id: str) -> Optional[MessageDto]:
        ...

    def delete(self, message_id: str) -> None:
        ...

    def delete_all_for_user(self, user_id: str) -> int:
        ...
