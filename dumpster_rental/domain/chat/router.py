"""Chat router - customer support chat and the admin inbox"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_admin, get_current_user
from ...database import get_db
from ...models import ConversationStatus, User
from ...rate_limiter import create_rate_limiter
from .schemas import (
    AdminConversationResponse,
    ConversationResponse,
    ConversationStatusUpdate,
    CustomerChatResponse,
    MessageResponse,
    SendMessageRequest,
)
from .service import ChatService

router = APIRouter(tags=["Chat"])

rate_limit_messages = create_rate_limiter(limit=30, window_seconds=60, key_prefix="chat")


def get_chat_service(db: Session = Depends(get_db)) -> ChatService:
    """Dependency injection for ChatService"""
    return ChatService(db)


@router.get("/chat", response_model=CustomerChatResponse)
async def customer_chat(
    current_user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    return service.customer_chat(current_user)


@router.post("/chat/messages", response_model=MessageResponse, status_code=201)
async def send_customer_message(
    data: SendMessageRequest,
    current_user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
    _: None = Depends(rate_limit_messages),
):
    return service.send_customer_message(data.content, current_user)


# Admin


@router.get("/admin/chat/conversations", response_model=list[AdminConversationResponse])
async def admin_inbox(
    status: Optional[str] = Query(ConversationStatus.ACTIVE),
    _: User = Depends(get_current_admin),
    service: ChatService = Depends(get_chat_service),
):
    """Conversations by latest activity, with unread customer message counts"""
    return service.inbox(status)


@router.get("/admin/chat/conversations/{conversation_id}/messages", response_model=list[MessageResponse])
async def admin_thread(
    conversation_id: int,
    admin: User = Depends(get_current_admin),
    service: ChatService = Depends(get_chat_service),
):
    return service.admin_thread(conversation_id, admin)


@router.post(
    "/admin/chat/conversations/{conversation_id}/messages",
    response_model=MessageResponse,
    status_code=201,
)
async def send_admin_message(
    conversation_id: int,
    data: SendMessageRequest,
    admin: User = Depends(get_current_admin),
    service: ChatService = Depends(get_chat_service),
):
    return service.send_admin_message(conversation_id, data.content, admin)


@router.post("/admin/chat/conversations/{conversation_id}/assign", response_model=ConversationResponse)
async def assign_conversation(
    conversation_id: int,
    admin: User = Depends(get_current_admin),
    service: ChatService = Depends(get_chat_service),
):
    return service.assign(conversation_id, admin)


@router.patch("/admin/chat/conversations/{conversation_id}/status", response_model=ConversationResponse)
async def update_conversation_status(
    conversation_id: int,
    data: ConversationStatusUpdate,
    _: User = Depends(get_current_admin),
    service: ChatService = Depends(get_chat_service),
):
    return service.update_status(conversation_id, data.status)
