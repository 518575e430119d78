"""Chat service - Customer support conversations and the admin inbox"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Conversation, ConversationStatus, Message, User
from .repository import ChatRepository
from .schemas import (
    AdminConversationResponse,
    ConversationResponse,
    CustomerChatResponse,
    MessageResponse,
)

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "Support Chat"
MAX_MESSAGE_LENGTH = 2000


def message_response(message: Message) -> MessageResponse:
    sender = message.sender
    return MessageResponse(
        id=message.id,
        conversation_id=message.conversation_id,
        sender_id=message.sender_id,
        sender_name=sender.full_name or sender.email if sender else None,
        sender_role=sender.role if sender else None,
        content=message.content,
        message_type=message.message_type,
        is_read=message.is_read,
        created_at=message.created_at,
    )


def clean_content(content: Optional[str]) -> str:
    text = (content or "").strip()
    if not text:
        raise HTTPException(status_code=400, detail="Message cannot be empty")
    if len(text) > MAX_MESSAGE_LENGTH:
        raise HTTPException(
            status_code=400, detail=f"Message cannot exceed {MAX_MESSAGE_LENGTH} characters"
        )
    return text


class ChatService:
    """Service layer for support chat business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ChatRepository()

    # ------------------------------------------------------------------
    # Customer side
    # ------------------------------------------------------------------

    def _active_conversation(self, user: User) -> Conversation:
        conversation = self.repo.get_active_for_user(self.db, user.id)
        if conversation is None:
            conversation = self.repo.create_conversation(self.db, user.id, DEFAULT_SUBJECT)
            logger.info(f"💬 Conversation {conversation.id} opened for user {user.id}")
        return conversation

    def _thread(self, conversation: Conversation, reader: User) -> list[MessageResponse]:
        messages = [message_response(m) for m in self.repo.list_messages(self.db, conversation.id)]
        self.repo.mark_read(self.db, conversation.id, reader.id)
        return messages

    def customer_chat(self, user: User) -> CustomerChatResponse:
        """The caller's open conversation with its messages; opened on first use"""
        conversation = self._active_conversation(user)
        messages = self._thread(conversation, user)
        return CustomerChatResponse(
            conversation=ConversationResponse.model_validate(conversation), messages=messages
        )

    def send_customer_message(self, content: Optional[str], user: User) -> MessageResponse:
        text = clean_content(content)
        conversation = self._active_conversation(user)
        message = self.repo.add_message(self.db, conversation, user.id, text)
        logger.info(f"💬 Message {message.id} from user {user.id} in conversation {conversation.id}")
        return message_response(message)

    # ------------------------------------------------------------------
    # Admin inbox
    # ------------------------------------------------------------------

    def _get_conversation(self, conversation_id: int) -> Conversation:
        conversation = self.repo.get_conversation(self.db, conversation_id)
        if not conversation:
            raise HTTPException(status_code=404, detail="Conversation not found")
        return conversation

    def inbox(self, status: Optional[str] = ConversationStatus.ACTIVE) -> list[AdminConversationResponse]:
        if status and status not in ConversationStatus.ALL:
            raise HTTPException(status_code=400, detail="Invalid conversation status")

        conversations = self.repo.list_conversations(self.db, status)
        unread = self.repo.unread_counts(self.db, [c.id for c in conversations])
        return [
            AdminConversationResponse(
                **ConversationResponse.model_validate(c).model_dump(),
                customer_name=c.user.full_name if c.user else None,
                customer_email=c.user.email if c.user else None,
                admin_name=c.admin.full_name if c.admin else None,
                unread_count=unread.get(c.id, 0),
            )
            for c in conversations
        ]

    def admin_thread(self, conversation_id: int, admin: User) -> list[MessageResponse]:
        """Messages of a conversation; opening an unassigned one assigns it to the reader"""
        conversation = self._get_conversation(conversation_id)
        if conversation.admin_id is None:
            conversation.admin_id = admin.id
            self.db.commit()
        return self._thread(conversation, admin)

    def send_admin_message(self, conversation_id: int, content: Optional[str], admin: User) -> MessageResponse:
        text = clean_content(content)
        conversation = self._get_conversation(conversation_id)
        if conversation.status != ConversationStatus.ACTIVE:
            raise HTTPException(status_code=400, detail="Conversation is closed")
        if conversation.admin_id is None:
            conversation.admin_id = admin.id
        message = self.repo.add_message(self.db, conversation, admin.id, text)
        logger.info(f"💬 Admin {admin.id} replied in conversation {conversation.id}")
        return message_response(message)

    def assign(self, conversation_id: int, admin: User) -> ConversationResponse:
        conversation = self._get_conversation(conversation_id)
        conversation.admin_id = admin.id
        self.db.commit()
        self.db.refresh(conversation)
        logger.info(f"👤 Conversation {conversation.id} assigned to admin {admin.id}")
        return ConversationResponse.model_validate(conversation)

    def update_status(self, conversation_id: int, status: str) -> ConversationResponse:
        if status not in ConversationStatus.ALL:
            raise HTTPException(status_code=400, detail="Invalid conversation status")
        conversation = self._get_conversation(conversation_id)
        conversation.status = status
        self.db.commit()
        self.db.refresh(conversation)
        logger.info(f"📝 Conversation {conversation.id} marked {status}")
        return ConversationResponse.model_validate(conversation)
