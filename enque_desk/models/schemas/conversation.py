from typing import Any

from pydantic import BaseModel

from enque_desk.models.entities import SenderType


class MessageSender(BaseModel):
    name: str
    email: str
    type: SenderType
    is_user_reply: bool = False
    avatar_url: str | None = None


class ConversationMessage(BaseModel):
    id: str
    created_at: str | None = None
    is_private: bool = False
    attachments: list[Any] = []
    sender: MessageSender
    content: str
    reply_part: str
    quoted_part: str | None = None


class ConversationResponse(BaseModel):
    ticket_id: int
    data: list[ConversationMessage]
