"""Pydantic schema definitions."""

from enque_desk.models.schemas.common import (
    DataResponse,
    ListResponse,
    MessageResponse,
    RedirectTarget,
    UpstreamModel,
)
from enque_desk.models.schemas.conversation import (
    ConversationMessage,
    ConversationResponse,
    MessageSender,
)
from enque_desk.models.schemas.health import HealthResponse, LogEntry, UpstreamHealth
from enque_desk.models.schemas.ticket import (
    TicketCreateRequest,
    TicketDataResponse,
    TicketFilters,
    TicketListMeta,
    TicketListResponse,
    TicketRead,
    TicketUpdateRequest,
)

__all__ = [
    "ConversationMessage",
    "ConversationResponse",
    "DataResponse",
    "HealthResponse",
    "ListResponse",
    "LogEntry",
    "MessageResponse",
    "MessageSender",
    "RedirectTarget",
    "TicketCreateRequest",
    "TicketDataResponse",
    "TicketFilters",
    "TicketListMeta",
    "TicketListResponse",
    "TicketRead",
    "TicketUpdateRequest",
    "UpstreamHealth",
    "UpstreamModel",
]
