from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from enque_desk.api.deps import (
    AuthedClientDep,
    CacheDep,
    RegistryDep,
    SessionDep,
    SettingsDep,
    WorkspaceIdDep,
)
from enque_desk.cache.ticket_preloader import TicketPreloader
from enque_desk.models.entities import TicketStatus
from enque_desk.models.schemas.common import DataResponse, ListResponse
from enque_desk.models.schemas.conversation import ConversationResponse
from enque_desk.models.schemas.ticket import (
    CommentCreateRequest,
    CommentRead,
    PreloadQueued,
    PreloadRequest,
    PreloadStatsRead,
    PreloadStatus,
    TicketCount,
    TicketCreateRequest,
    TicketDataResponse,
    TicketFilters,
    TicketListResponse,
    TicketUpdateRequest,
)
from enque_desk.services.ticket_service import TicketService

router = APIRouter(prefix="/tickets")


def get_ticket_preloader(
    api_client: AuthedClientDep,
    session: SessionDep,
    workspace_id: WorkspaceIdDep,
    registry: RegistryDep,
) -> TicketPreloader:
    return registry.get(
        workspace_id,
        session.id,
        lambda ticket_id: api_client.get(f"/tasks/{ticket_id}/html"),
    )


def get_ticket_service(
    api_client: AuthedClientDep,
    cache: CacheDep,
    settings: SettingsDep,
    session: SessionDep,
    workspace_id: WorkspaceIdDep,
    preloader: Annotated[TicketPreloader, Depends(get_ticket_preloader)],
) -> TicketService:
    return TicketService(
        api_client=api_client,
        cache=cache,
        settings=settings,
        workspace_id=workspace_id,
        preloader=preloader,
        agent_id=session.id,
    )


TicketServiceDep = Annotated[TicketService, Depends(get_ticket_service)]
PreloaderDep = Annotated[TicketPreloader, Depends(get_ticket_preloader)]
Skip = Annotated[int, Query(ge=0)]
Limit = Annotated[int, Query(ge=1, le=100)]


@router.get("", response_model=TicketListResponse)
def list_tickets(
    ticket_service: TicketServiceDep,
    filters: Annotated[TicketFilters, Query()],
) -> TicketListResponse:
    return ticket_service.list_tickets(filters)


@router.post("", response_model=TicketDataResponse, status_code=status.HTTP_201_CREATED)
def create_ticket(
    payload: TicketCreateRequest,
    ticket_service: TicketServiceDep,
) -> TicketDataResponse:
    ticket = ticket_service.create_ticket(payload)
    return TicketDataResponse(data=ticket)


@router.get("/count", response_model=DataResponse[TicketCount])
def count_tickets(
    ticket_service: TicketServiceDep,
    status: Annotated[TicketStatus | None, Query()] = None,
    team_id: Annotated[int | None, Query()] = None,
    assignee_id: Annotated[int | None, Query()] = None,
) -> DataResponse[TicketCount]:
    count = ticket_service.count_tickets(status=status, team_id=team_id, assignee_id=assignee_id)
    return DataResponse[TicketCount](data=TicketCount(count=count))


@router.get("/assignee/{agent_id}", response_model=TicketListResponse)
def list_assigned_tickets(
    agent_id: int,
    ticket_service: TicketServiceDep,
    skip: Skip = 0,
    limit: Limit = 20,
) -> TicketListResponse:
    return ticket_service.list_assigned(agent_id, skip=skip, limit=limit)


@router.get("/assignee/{agent_id}/count", response_model=DataResponse[TicketCount])
def count_assigned_tickets(
    agent_id: int,
    ticket_service: TicketServiceDep,
    status: Annotated[TicketStatus | None, Query()] = None,
) -> DataResponse[TicketCount]:
    count = ticket_service.count_assignee_tickets(agent_id, status=status)
    return DataResponse[TicketCount](data=TicketCount(count=count))


@router.get("/team/{team_id}", response_model=TicketListResponse)
def list_team_tickets(
    team_id: int,
    ticket_service: TicketServiceDep,
    skip: Skip = 0,
    limit: Limit = 20,
) -> TicketListResponse:
    return ticket_service.list_team(team_id, skip=skip, limit=limit)


@router.post("/preload", response_model=PreloadQueued, status_code=status.HTTP_202_ACCEPTED)
def preload_tickets(payload: PreloadRequest, preloader: PreloaderDep) -> PreloadQueued:
    queued = preloader.preload(payload.ticket_ids, priority=payload.priority)
    return PreloadQueued(queued=queued, queue_size=preloader.queue_size)


@router.get("/preload/stats", response_model=PreloadStatsRead)
def preload_stats(preloader: PreloaderDep) -> PreloadStatsRead:
    stats = preloader.stats()
    return PreloadStatsRead(
        preloaded=stats.preloaded,
        failed=stats.failed,
        in_progress=stats.in_progress,
        queue_size=stats.queue_size,
        last_preload_time=stats.last_preload_time,
    )


@router.get("/{ticket_id}", response_model=TicketDataResponse)
def get_ticket(
    ticket_id: int,
    ticket_service: TicketServiceDep,
) -> TicketDataResponse:
    ticket = ticket_service.get_ticket(ticket_id)
    return TicketDataResponse(data=ticket)


@router.put("/{ticket_id}", response_model=TicketDataResponse)
def update_ticket(
    ticket_id: int,
    payload: TicketUpdateRequest,
    ticket_service: TicketServiceDep,
) -> TicketDataResponse:
    ticket = ticket_service.update_ticket(ticket_id, payload)
    return TicketDataResponse(data=ticket)


@router.patch("/{ticket_id}/close", response_model=TicketDataResponse)
def close_ticket(
    ticket_id: int,
    ticket_service: TicketServiceDep,
) -> TicketDataResponse:
    ticket = ticket_service.close_ticket(ticket_id)
    return TicketDataResponse(data=ticket)


@router.delete("/{ticket_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_ticket(
    ticket_id: int,
    ticket_service: TicketServiceDep,
) -> Response:
    ticket_service.delete_ticket(ticket_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{ticket_id}/conversation", response_model=ConversationResponse)
def get_conversation(
    ticket_id: int,
    ticket_service: TicketServiceDep,
) -> ConversationResponse:
    return ticket_service.get_conversation(ticket_id)


@router.get("/{ticket_id}/comments", response_model=ListResponse[CommentRead])
def list_comments(
    ticket_id: int,
    ticket_service: TicketServiceDep,
) -> ListResponse[CommentRead]:
    return ListResponse[CommentRead](data=ticket_service.list_comments(ticket_id))


@router.post(
    "/{ticket_id}/comments",
    response_model=DataResponse[CommentRead],
    status_code=status.HTTP_201_CREATED,
)
def add_comment(
    ticket_id: int,
    payload: CommentCreateRequest,
    ticket_service: TicketServiceDep,
) -> DataResponse[CommentRead]:
    return DataResponse[CommentRead](data=ticket_service.add_comment(ticket_id, payload))


@router.get("/{ticket_id}/preload-status", response_model=PreloadStatus)
def preload_status(ticket_id: int, preloader: PreloaderDep) -> PreloadStatus:
    return PreloadStatus(ticket_id=ticket_id, **preloader.status(ticket_id))
