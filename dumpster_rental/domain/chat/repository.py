"""Chat repository - Database operations for conversations and messages"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ...models import Conversation, ConversationStatus, Message


class ChatRepository:
    """Repository for chat database operations"""

    @staticmethod
    def get_conversation(db: Session, conversation_id: int) -> Optional[Conversation]:
        return (
            db.query(Conversation)
            .options(joinedload(Conversation.user), joinedload(Conversation.admin))
            .filter(Conversation.id == conversation_id)
            .first()
        )

    @staticmethod
    def get_active_for_user(db: Session, user_id: int) -> Optional[Conversation]:
        return (
            db.query(Conversation)
            .filter(Conversation.user_id == user_id, Conversation.status == ConversationStatus.ACTIVE)
            .order_by(Conversation.last_message_at.desc(), Conversation.id.desc())
            .first()
        )

    @staticmethod
    def create_conversation(db: Session, user_id: int, subject: str) -> Conversation:
        conversation = Conversation(
            user_id=user_id,
            subject=subject,
            status=ConversationStatus.ACTIVE,
            last_message_at=datetime.utcnow(),
        )
        db.add(conversation)
        db.commit()
        db.refresh(conversation)
        return conversation

    @staticmethod
    def list_conversations(db: Session, status: Optional[str] = None) -> list[Conversation]:
        query = db.query(Conversation).options(
            joinedload(Conversation.user), joinedload(Conversation.admin)
        )
        if status:
            query = query.filter(Conversation.status == status)
        return query.order_by(Conversation.last_message_at.desc(), Conversation.id.desc()).all()

    @staticmethod
    def unread_counts(db: Session, conversation_ids: list[int]) -> dict[int, int]:
        """Unread customer messages per conversation"""
        if not conversation_ids:
            return {}
        rows = (
            db.query(Message.conversation_id, func.count(Message.id))
            .join(Conversation, Conversation.id == Message.conversation_id)
            .filter(
                Message.conversation_id.in_(conversation_ids),
                Message.is_read.is_(False),
                Message.sender_id == Conversation.user_id,
            )
            .group_by(Message.conversation_id)
            .all()
        )
        return dict(rows)

    @staticmethod
    def list_messages(db: Session, conversation_id: int) -> list[Message]:
        return (
            db.query(Message)
            .options(joinedload(Message.sender))
            .filter(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.asc(), Message.id.asc())
            .all()
        )

    @staticmethod
    def add_message(db: Session, conversation: Conversation, sender_id: int, content: str) -> Message:
        message = Message(conversation_id=conversation.id, sender_id=sender_id, content=content)
        db.add(message)
        conversation.last_message_at = datetime.utcnow()
        db.commit()
        db.refresh(message)
        return message

    @staticmethod
    def mark_read(db: Session, conversation_id: int, reader_id: int) -> int:
        """Mark the other party's messages as read"""
        updated = (
            db.query(Message)
            .filter(
                Message.conversation_id == conversation_id,
                Message.sender_id != reader_id,
                Message.is_read.is_(False),
            )
            .update({Message.is_read: True}, synchronize_session=False)
        )
        db.commit()
        return updated
