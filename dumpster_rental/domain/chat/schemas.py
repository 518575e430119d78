"""Chat domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class SendMessageRequest(BaseModel):
    content: Optional[str] = None


class ConversationStatusUpdate(BaseModel):
    status: str


class MessageResponse(BaseModel):
    id: int
    conversation_id: int
    sender_id: int
    sender_name: Optional[str] = None
    sender_role: Optional[str] = None
    content: str
    message_type: str
    is_read: bool
    created_at: Optional[datetime] = None


class ConversationResponse(BaseModel):
    id: int
    user_id: int
    admin_id: Optional[int] = None
    subject: str
    status: str
    last_message_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CustomerChatResponse(BaseModel):
    conversation: ConversationResponse
    messages: list[MessageResponse]


class AdminConversationResponse(ConversationResponse):
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    admin_name: Optional[str] = None
    unread_count: int = 0
