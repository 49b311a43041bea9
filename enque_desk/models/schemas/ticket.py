from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from enque_desk.models.entities import (
    SortOrder,
    TicketPriority,
    TicketSortField,
    TicketStatus,
    TicketType,
)
from enque_desk.models.schemas.common import UpstreamModel


class EmailInfo(UpstreamModel):
    id: int
    email_id: str
    email_conversation_id: str | None = None
    email_subject: str | None = None
    email_sender: str | None = None
    email_received_at: datetime | None = None


class TicketRead(UpstreamModel):
    id: int
    title: str
    description: str | None = None
    status: TicketStatus
    priority: TicketPriority
    type: TicketType | None = None
    to_recipients: str | None = None
    cc_recipients: str | None = None
    bcc_recipients: str | None = None
    user_id: int | None = None
    user: dict[str, Any] | None = None
    assignee_id: int | None = None
    team_id: int | None = None
    category_id: int | None = None
    category: dict[str, Any] | None = None
    company_id: int | None = None
    due_date: datetime | None = None
    is_from_email: bool | None = None
    email_info: EmailInfo | None = None
    workspace_id: int | None = None
    last_update: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TicketCreateRequest(BaseModel):
    title: str
    description: str | None = None
    status: TicketStatus = "Unread"
    priority: TicketPriority = "Medium"
    type: TicketType = "support"
    user_id: int | None = None
    assignee_id: int | None = None
    team_id: int | None = None
    category_id: int | None = None
    company_id: int | None = None
    sent_from_id: int | None = None
    due_date: datetime | None = None


class TicketUpdateRequest(BaseModel):
    title: str | None = None
    description: str | None = None
    status: TicketStatus | None = None
    priority: TicketPriority | None = None
    type: TicketType | None = None
    user_id: int | None = None
    assignee_id: int | None = None
    team_id: int | None = None
    category_id: int | None = None
    company_id: int | None = None
    due_date: datetime | None = None


class TicketFilters(BaseModel):
    skip: int = Field(default=0, ge=0)
    limit: int = Field(default=20, ge=1, le=100)
    status: TicketStatus | None = None
    priority: TicketPriority | None = None
    type: TicketType | None = None
    user_id: int | None = None
    assignee_id: int | None = None
    team_id: int | None = None
    category_id: int | None = None
    company_id: int | None = None
    subject: str | None = None
    statuses: str | None = None
    priorities: str | None = None
    assignee_ids: str | None = None
    user_ids: str | None = None
    team_ids: str | None = None
    category_ids: str | None = None
    company_ids: str | None = None
    sort_by: TicketSortField | None = None
    order: SortOrder | None = None


class TicketDataResponse(BaseModel):
    data: TicketRead


class TicketListMeta(BaseModel):
    skip: int
    limit: int
    next_skip: int | None = None


class TicketListResponse(BaseModel):
    data: list[TicketRead]
    meta: TicketListMeta


class TicketCount(BaseModel):
    count: int


class CommentRead(UpstreamModel):
    id: int
    content: str
    is_private: bool = False
    agent: dict[str, Any] | None = None
    agent_id: int | None = None
    ticket_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CommentCreateRequest(BaseModel):
    content: str
    is_private: bool = False


class PreloadRequest(BaseModel):
    ticket_ids: list[int] = Field(min_length=1)
    priority: bool = False


class PreloadQueued(BaseModel):
    queued: int
    queue_size: int


class PreloadStatsRead(BaseModel):
    preloaded: int
    failed: int
    in_progress: int
    queue_size: int
    last_preload_time: datetime | None = None


class PreloadStatus(BaseModel):
    ticket_id: int
    cached: bool
    preloading: bool
    queued: bool
