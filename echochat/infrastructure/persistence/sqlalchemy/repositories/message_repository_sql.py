from typing import List, Optional
from sqlmodel import Session, select

from .....db.models import Message
from .....application.ports.message_repo import MessageRepository, MessageDto


class SqlMessageRepository(MessageRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_dto(self, rec: Message) -> MessageDto:
        return MessageDto(
            id=rec.id,
            user_id=rec.user_id,
            content=rec.content,
            type=rec.type,
            is_read=rec.is_read,
            created_at=rec.created_at,
        )

    def create(self, user_id: str, content: str, type: str) -> MessageDto:
        rec = Message(user_id=user_id, content=content, type=type)
        self.session.add(rec)
        self.session.commit()
        self.session.refresh(rec)
        return self._to_dto(rec)

    def list_for_user(self, user_id: str) -> List[MessageDto]:
        rows = self.session.exec(
            select(Message).where(Message.user_id == user_id).order_by(Message.created_at, Message.id)
        ).all()
        return [self._to_dto(r) for r in rows]

    def get_for_user(self, message_id: str, user_id: str) -> Optional[MessageDto]:
        rec = self.session.exec(
            select(Message).where(Message.id == message_id, Message.user_id == user_id)
        ).first()
        return self._to_dto(rec) if rec else None

    def delete(self, message_id: str) -> None:
        rec = self.session.get(Message, message_id)
        if not rec:
            return
        self.session.delete(rec)
        self.session.commit()

    def delete_all_for_user(self, user_id: str) -> int:
        rows = self.session.exec(select(Message).where(Message.user_id == user_id)).all()
        for rec in rows:
            self.session.delete(rec)
        self.session.commit()
        return len(rows)
