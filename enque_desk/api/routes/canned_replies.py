from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from enque_desk.api.deps import AuthedClientDep, SessionDep
from enque_desk.models.schemas.canned_reply import (
    CannedReplyCategoryCreateRequest,
    CannedReplyCategoryRead,
    CannedReplyCreateRequest,
    CannedReplyRead,
    CannedReplyToggleRequest,
    CannedReplyUpdateRequest,
)
from enque_desk.models.schemas.common import DataResponse, ListResponse
from enque_desk.services.canned_reply_service import CannedReplyService

router = APIRouter(prefix="/canned-replies")


def get_canned_reply_service(api_client: AuthedClientDep, session: SessionDep) -> CannedReplyService:
    return CannedReplyService(api_client=api_client, workspace_id=session.workspace_id)


CannedReplyServiceDep = Annotated[CannedReplyService, Depends(get_canned_reply_service)]


@router.get("", response_model=ListResponse[CannedReplyRead])
def list_canned_replies(service: CannedReplyServiceDep) -> ListResponse[CannedReplyRead]:
    return ListResponse[CannedReplyRead](data=service.list_replies())


@router.get("/search", response_model=ListResponse[CannedReplyRead])
def search_canned_replies(
    service: CannedReplyServiceDep,
    q: Annotated[str, Query(max_length=200)] = "",
) -> ListResponse[CannedReplyRead]:
    return ListResponse[CannedReplyRead](data=service.search(q))


@router.post("", response_model=DataResponse[CannedReplyRead], status_code=status.HTTP_201_CREATED)
def create_canned_reply(
    payload: CannedReplyCreateRequest,
    service: CannedReplyServiceDep,
) -> DataResponse[CannedReplyRead]:
    return DataResponse[CannedReplyRead](data=service.create_reply(payload))


@router.get("/categories", response_model=ListResponse[CannedReplyCategoryRead])
def list_canned_reply_categories(service: CannedReplyServiceDep) -> ListResponse[CannedReplyCategoryRead]:
    return ListResponse[CannedReplyCategoryRead](data=service.list_categories())


@router.post(
    "/categories",
    response_model=DataResponse[CannedReplyCategoryRead],
    status_code=status.HTTP_201_CREATED,
)
def create_canned_reply_category(
    payload: CannedReplyCategoryCreateRequest,
    service: CannedReplyServiceDep,
) -> DataResponse[CannedReplyCategoryRead]:
    return DataResponse[CannedReplyCategoryRead](data=service.create_category(payload))


@router.get("/{reply_id}", response_model=DataResponse[CannedReplyRead])
def get_canned_reply(reply_id: int, service: CannedReplyServiceDep) -> DataResponse[CannedReplyRead]:
    return DataResponse[CannedReplyRead](data=service.get_reply(reply_id))


@router.put("/{reply_id}", response_model=DataResponse[CannedReplyRead])
def update_canned_reply(
    reply_id: int,
    payload: CannedReplyUpdateRequest,
    service: CannedReplyServiceDep,
) -> DataResponse[CannedReplyRead]:
    return DataResponse[CannedReplyRead](data=service.update_reply(reply_id, payload))


@router.put("/{reply_id}/toggle", response_model=DataResponse[CannedReplyRead])
def toggle_canned_reply(
    reply_id: int,
    payload: CannedReplyToggleRequest,
    service: CannedReplyServiceDep,
) -> DataResponse[CannedReplyRead]:
    return DataResponse[CannedReplyRead](data=service.toggle_reply(reply_id, payload.is_enabled))


@router.delete("/{reply_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_canned_reply(reply_id: int, service: CannedReplyServiceDep) -> Response:
    service.delete_reply(reply_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
