from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from enque_desk.api.deps import AuthedClientDep, SessionDep
from enque_desk.models.schemas.common import DataResponse, ListResponse
from enque_desk.models.schemas.workflow import (
    WorkflowActionType,
    WorkflowCreateRequest,
    WorkflowRead,
    WorkflowToggleRequest,
    WorkflowTrigger,
    WorkflowUpdateRequest,
)
from enque_desk.services.workflow_service import WorkflowService

router = APIRouter(prefix="/workflows")


def get_workflow_service(api_client: AuthedClientDep, session: SessionDep) -> WorkflowService:
    return WorkflowService(api_client=api_client, workspace_id=session.workspace_id)


WorkflowServiceDep = Annotated[WorkflowService, Depends(get_workflow_service)]


@router.get("", response_model=ListResponse[WorkflowRead])
def list_workflows(service: WorkflowServiceDep) -> ListResponse[WorkflowRead]:
    return ListResponse[WorkflowRead](data=service.list_workflows())


@router.post("", response_model=DataResponse[WorkflowRead], status_code=status.HTTP_201_CREATED)
def create_workflow(payload: WorkflowCreateRequest, service: WorkflowServiceDep) -> DataResponse[WorkflowRead]:
    return DataResponse[WorkflowRead](data=service.create_workflow(payload))


@router.get("/triggers", response_model=ListResponse[WorkflowTrigger])
def list_workflow_triggers(service: WorkflowServiceDep) -> ListResponse[WorkflowTrigger]:
    return ListResponse[WorkflowTrigger](data=service.list_triggers())


@router.get("/actions", response_model=ListResponse[WorkflowActionType])
def list_workflow_actions(service: WorkflowServiceDep) -> ListResponse[WorkflowActionType]:
    return ListResponse[WorkflowActionType](data=service.list_action_types())


@router.get("/{workflow_id}", response_model=DataResponse[WorkflowRead])
def get_workflow(workflow_id: int, service: WorkflowServiceDep) -> DataResponse[WorkflowRead]:
    return DataResponse[WorkflowRead](data=service.get_workflow(workflow_id))


@router.put("/{workflow_id}", response_model=DataResponse[WorkflowRead])
def update_workflow(
    workflow_id: int,
    payload: WorkflowUpdateRequest,
    service: WorkflowServiceDep,
) -> DataResponse[WorkflowRead]:
    return DataResponse[WorkflowRead](data=service.update_workflow(workflow_id, payload))


@router.put("/{workflow_id}/toggle", response_model=DataResponse[WorkflowRead])
def toggle_workflow(
    workflow_id: int,
    payload: WorkflowToggleRequest,
    service: WorkflowServiceDep,
) -> DataResponse[WorkflowRead]:
    return DataResponse[WorkflowRead](data=service.toggle_workflow(workflow_id, payload.is_enabled))


@router.post(
    "/{workflow_id}/duplicate",
    response_model=DataResponse[WorkflowRead],
    status_code=status.HTTP_201_CREATED,
)
def duplicate_workflow(workflow_id: int, service: WorkflowServiceDep) -> DataResponse[WorkflowRead]:
    return DataResponse[WorkflowRead](data=service.duplicate_workflow(workflow_id))


@router.delete("/{workflow_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_workflow(workflow_id: int, service: WorkflowServiceDep) -> Response:
    service.delete_workflow(workflow_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
