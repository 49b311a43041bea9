from collections.abc import Callable
from typing import Any

import structlog
from fastapi import status

from enque_desk.cache.query_cache import QueryCache, QueryKey
from enque_desk.cache.ticket_preloader import TicketPreloader, ticket_html_key
from enque_desk.clients.api_client import EnqueApiClient, clean_params
from enque_desk.core.config import Settings
from enque_desk.core.errors import AppError, UpstreamError
from enque_desk.models.schemas.conversation import ConversationResponse
from enque_desk.models.schemas.ticket import (
    CommentCreateRequest,
    CommentRead,
    TicketCreateRequest,
    TicketFilters,
    TicketListMeta,
    TicketListResponse,
    TicketRead,
    TicketUpdateRequest,
)
from enque_desk.services.conversation import build_conversation

logger = structlog.get_logger(__name__)

MAX_TITLE_LENGTH = 255


def _params_key(params: dict[str, str]) -> tuple[tuple[str, str], ...]:
    return tuple(sorted(params.items()))


def _patch_ticket(ticket_id: int, patch: dict[str, Any]) -> Callable[[Any], Any]:
    def apply(items: Any) -> Any:
        if not isinstance(items, list):
            return items
        return [
            {**item, **patch} if isinstance(item, dict) and item.get("id") == ticket_id else item
            for item in items
        ]

    return apply


def _drop_ticket(ticket_id: int) -> Callable[[Any], Any]:
    def apply(items: Any) -> Any:
        if not isinstance(items, list):
            return items
        return [item for item in items if not (isinstance(item, dict) and item.get("id") == ticket_id)]

    return apply


class TicketService:
    def __init__(
        self,
        api_client: EnqueApiClient,
        cache: QueryCache,
        settings: Settings,
        workspace_id: int,
        preloader: TicketPreloader | None = None,
        agent_id: int | str | None = None,
    ) -> None:
        self.api_client = api_client
        self.cache = cache
        self.settings = settings
        self.workspace_id = workspace_id
        self.preloader = preloader
        self.agent_id = agent_id

    @property
    def list_prefix(self) -> QueryKey:
        return ("tickets", self.workspace_id)

    @property
    def count_prefix(self) -> QueryKey:
        return ("ticketsCount", self.workspace_id)

    def list_tickets(self, filters: TicketFilters) -> TicketListResponse:
        params = clean_params(filters.model_dump(exclude_none=True))
        data = self._cached_list(("all", _params_key(params)), "/tasks/", params)
        self._preload_recent(data)
        return self._page(data, skip=filters.skip, limit=filters.limit)

    def list_assigned(self, agent_id: int, *, skip: int = 0, limit: int = 20) -> TicketListResponse:
        params = clean_params({"skip": skip, "limit": limit})
        data = self._cached_list(
            ("assignee", agent_id, _params_key(params)),
            f"/tasks/assignee/{agent_id}",
            params,
        )
        self._preload_recent(data)
        return self._page(data, skip=skip, limit=limit)

    def list_team(self, team_id: int, *, skip: int = 0, limit: int = 20) -> TicketListResponse:
        params = clean_params({"skip": skip, "limit": limit})
        data = self._cached_list(
            ("team", team_id, _params_key(params)),
            f"/tasks/team/{team_id}",
            params,
        )
        self._preload_recent(data)
        return self._page(data, skip=skip, limit=limit)

    def get_ticket(self, ticket_id: int) -> TicketRead:
        try:
            data = self.api_client.get(f"/tasks/{ticket_id}")
        except UpstreamError as exc:
            self._translate_not_found(ticket_id, exc)
            raise
        return TicketRead.model_validate(data)

    def create_ticket(self, payload: TicketCreateRequest) -> TicketRead:
        title = self._validate_title(payload.title)
        body = payload.model_dump(mode="json", exclude_none=True)
        body["title"] = title
        body["workspace_id"] = self.workspace_id

        data = self.api_client.post("/tasks/", json=body)
        ticket = TicketRead.model_validate(data)
        self.cache.invalidate(self.list_prefix)
        self.cache.invalidate(self.count_prefix)
        logger.info("Ticket created", ticket_id=ticket.id, workspace_id=self.workspace_id)
        return ticket

    def update_ticket(self, ticket_id: int, payload: TicketUpdateRequest) -> TicketRead:
        patch = payload.model_dump(mode="json", exclude_unset=True)
        if "title" in patch:
            patch["title"] = self._validate_title(patch["title"] or "")
        if not patch:
            raise AppError(
                status_code=status.HTTP_400_BAD_REQUEST,
                code="EMPTY_TICKET_UPDATE",
                message="No ticket fields to update.",
                details={"ticket_id": ticket_id},
            )

        with self.cache.optimistic_update(self.list_prefix, _patch_ticket(ticket_id, patch)):
            try:
                data = self.api_client.put(f"/tasks/{ticket_id}", json=patch)
            except UpstreamError as exc:
                self._translate_not_found(ticket_id, exc)
                raise

        self._refresh_ticket(ticket_id)
        return TicketRead.model_validate(data)

    def close_ticket(self, ticket_id: int) -> TicketRead:
        return self.update_ticket(ticket_id, TicketUpdateRequest(status="Closed"))

    def delete_ticket(self, ticket_id: int) -> None:
        with self.cache.optimistic_update(self.list_prefix, _drop_ticket(ticket_id)):
            try:
                self.api_client.delete(f"/tasks/{ticket_id}")
            except UpstreamError as exc:
                self._translate_not_found(ticket_id, exc)
                raise

        self.cache.remove(ticket_html_key(self.workspace_id, ticket_id))
        self.cache.invalidate(self.list_prefix)
        self.cache.invalidate(self.count_prefix)
        logger.info("Ticket deleted", ticket_id=ticket_id, workspace_id=self.workspace_id)

    def count_tickets(
        self,
        *,
        status: str | None = None,
        team_id: int | None = None,
        assignee_id: int | None = None,
    ) -> int:
        params = clean_params({"status": status, "team_id": team_id, "assignee_id": assignee_id})
        data = self.cache.fetch(
            (*self.count_prefix, "all", _params_key(params)),
            lambda: self.api_client.get("/tasks-optimized/count", params=params),
            stale_time=self.settings.count_stale,
            gc_time=self.settings.count_stale * 2,
        )
        return int((data or {}).get("count", 0))

    def count_assignee_tickets(self, agent_id: int, *, status: str | None = None) -> int:
        params = clean_params({"status": status})
        data = self.cache.fetch(
            (*self.count_prefix, "assignee", agent_id, _params_key(params)),
            lambda: self.api_client.get(f"/tasks-optimized/assignee/{agent_id}/count", params=params),
            stale_time=self.settings.count_stale,
            gc_time=self.settings.count_stale * 2,
        )
        return int((data or {}).get("count", 0))

    def fetch_ticket_html(self, ticket_id: int) -> Any:
        return self.api_client.get(f"/tasks/{ticket_id}/html")

    def get_conversation(self, ticket_id: int) -> ConversationResponse:
        try:
            data = self.cache.fetch(
                ticket_html_key(self.workspace_id, ticket_id),
                lambda: self.fetch_ticket_html(ticket_id),
                stale_time=self.settings.ticket_html_stale,
                gc_time=self.settings.ticket_html_gc,
            )
        except UpstreamError as exc:
            self._translate_not_found(ticket_id, exc)
            raise
        return ConversationResponse(ticket_id=ticket_id, data=build_conversation(data))

    def list_comments(self, ticket_id: int) -> list[CommentRead]:
        data = self.api_client.get(f"/tasks/{ticket_id}/comments") or []
        return [CommentRead.model_validate(item) for item in data]

    def add_comment(self, ticket_id: int, payload: CommentCreateRequest) -> CommentRead:
        content = payload.content.strip()
        if not content:
            raise AppError(
                status_code=status.HTTP_400_BAD_REQUEST,
                code="EMPTY_COMMENT",
                message="Comment content cannot be empty.",
                details={"ticket_id": ticket_id},
            )
        try:
            data = self.api_client.post(
                f"/tasks/{ticket_id}/comments",
                json={
                    "content": content,
                    "ticket_id": ticket_id,
                    "agent_id": self.agent_id,
                    "workspace_id": self.workspace_id,
                    "is_private": payload.is_private,
                },
            )
        except UpstreamError as exc:
            self._translate_not_found(ticket_id, exc)
            raise
        self._refresh_conversation(ticket_id)
        return CommentRead.model_validate(data)

    def _cached_list(self, suffix: QueryKey, path: str, params: dict[str, str]) -> list[Any]:
        data = self.cache.fetch(
            (*self.list_prefix, *suffix),
            lambda: self.api_client.get(path, params=params),
            stale_time=self.settings.tickets_list_stale,
            gc_time=self.settings.tickets_list_stale * 5,
        )
        return data or []

    def _preload_recent(self, data: list[Any]) -> None:
        if self.preloader is not None and data:
            self.preloader.preload_recent(item for item in data if isinstance(item, dict))

    def _page(self, data: list[Any], *, skip: int, limit: int) -> TicketListResponse:
        items = [TicketRead.model_validate(item) for item in data]
        return TicketListResponse(
            data=items,
            meta=TicketListMeta(
                skip=skip,
                limit=limit,
                next_skip=skip + len(items) if len(items) >= limit else None,
            ),
        )

    def _refresh_ticket(self, ticket_id: int) -> None:
        self.cache.invalidate(self.list_prefix)
        self.cache.invalidate(self.count_prefix)
        self._refresh_conversation(ticket_id)

    def _refresh_conversation(self, ticket_id: int) -> None:
        if self.preloader is not None and self.preloader.invalidate(ticket_id):
            return
        self.cache.invalidate(ticket_html_key(self.workspace_id, ticket_id))

    def _validate_title(self, title: str) -> str:
        normalized = title.strip()
        if not 1 <= len(normalized) <= MAX_TITLE_LENGTH:
            raise AppError(
                status_code=status.HTTP_400_BAD_REQUEST,
                code="INVALID_TICKET_TITLE",
                message=f"Ticket title length must be between 1 and {MAX_TITLE_LENGTH} characters.",
            )
        return normalized

    def _translate_not_found(self, ticket_id: int, exc: UpstreamError) -> None:
        if exc.upstream_status == status.HTTP_404_NOT_FOUND:
            self._raise_ticket_not_found(ticket_id, exc)

    def _raise_ticket_not_found(self, ticket_id: int, cause: Exception | None = None) -> None:
        raise AppError(
            status_code=status.HTTP_404_NOT_FOUND,
            code="TICKET_NOT_FOUND",
            message="Ticket not found.",
            details={"ticket_id": ticket_id},
        ) from cause
