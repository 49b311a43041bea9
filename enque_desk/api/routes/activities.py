from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from enque_desk.api.deps import AuthedClientDep, WorkspaceIdDep
from enque_desk.models.schemas.activity import (
    ActivityCreateRequest,
    ActivityFilters,
    ActivityRead,
    ActivityUpdateRequest,
)
from enque_desk.models.schemas.common import DataResponse, ListResponse
from enque_desk.services.activity_service import ActivityService

router = APIRouter(prefix="/activities")


def get_activity_service(api_client: AuthedClientDep, workspace_id: WorkspaceIdDep) -> ActivityService:
    return ActivityService(api_client=api_client, workspace_id=workspace_id)


ActivityServiceDep = Annotated[ActivityService, Depends(get_activity_service)]


@router.get("", response_model=ListResponse[ActivityRead])
def list_activities(
    service: ActivityServiceDep,
    filters: Annotated[ActivityFilters, Query()],
) -> ListResponse[ActivityRead]:
    return ListResponse[ActivityRead](data=service.list_activities(filters))


@router.post("", response_model=DataResponse[ActivityRead], status_code=status.HTTP_201_CREATED)
def create_activity(payload: ActivityCreateRequest, service: ActivityServiceDep) -> DataResponse[ActivityRead]:
    return DataResponse[ActivityRead](data=service.create_activity(payload))


@router.get("/{activity_id}", response_model=DataResponse[ActivityRead])
def get_activity(activity_id: int, service: ActivityServiceDep) -> DataResponse[ActivityRead]:
    return DataResponse[ActivityRead](data=service.get_activity(activity_id))


@router.put("/{activity_id}", response_model=DataResponse[ActivityRead])
def update_activity(
    activity_id: int,
    payload: ActivityUpdateRequest,
    service: ActivityServiceDep,
) -> DataResponse[ActivityRead]:
    return DataResponse[ActivityRead](data=service.update_activity(activity_id, payload))


@router.put("/{activity_id}/read", response_model=DataResponse[ActivityRead])
def mark_activity_read(activity_id: int, service: ActivityServiceDep) -> DataResponse[ActivityRead]:
    return DataResponse[ActivityRead](data=service.mark_read(activity_id))


@router.delete("/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_activity(activity_id: int, service: ActivityServiceDep) -> Response:
    service.delete_activity(activity_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
