from dataclasses import dataclass
from typing import List, Optional

from ...exceptions import BadRequestError, NotFoundError
from ..ports.message_repo import MessageRepository, MessageDto

MAX_MESSAGE_LENGTH = 1000


@dataclass
class MessageService:
    repo: MessageRepository

    def send(self, user_id: str, content: Optional[str]) -> MessageDto:
        content = (content or "").strip()
        if not content:
            raise BadRequestError("Message content is required")
        if len(content) > MAX_MESSAGE_LENGTH:
            raise BadRequestError(f"Message cannot exceed {MAX_MESSAGE_LENGTH} characters")
        return self.repo.create(user_id, content, "sent")

    def list_for_user(self, user_id: str) -> List[MessageDto]:
        return self.repo.list_for_user(user_id)

    def delete(self, user_id: str, message_id: str) -> None:
        message = self.repo.get_for_user(message_id, user_id)
        if not message:
            raise NotFoundError("Message not found")
        self.repo.delete(message.id)

    def clear_all(self, user_id: str) -> int:
        return self.repo.delete_all_for_user(user_id)
