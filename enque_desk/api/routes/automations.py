from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Response, status

from enque_desk.api.deps import AuthedClientDep, WorkspaceIdDep
from enque_desk.models.schemas.automation import (
    AutomationCreateRequest,
    AutomationRead,
    AutomationSettings,
    AutomationUpdateRequest,
    ToggleRequest,
)
from enque_desk.models.schemas.common import DataResponse, ListResponse
from enque_desk.models.schemas.notification import ApiAck
from enque_desk.services.automation_service import AutomationService

router = APIRouter(prefix="/automations")


def get_automation_service(
    api_client: AuthedClientDep,
    workspace_id: WorkspaceIdDep,
) -> AutomationService:
    return AutomationService(api_client=api_client, workspace_id=workspace_id)


AutomationServiceDep = Annotated[AutomationService, Depends(get_automation_service)]


@router.get("", response_model=ListResponse[AutomationRead])
def list_automations(
    service: AutomationServiceDep,
    active_only: Annotated[bool, Query()] = False,
) -> ListResponse[AutomationRead]:
    return ListResponse[AutomationRead](data=service.list_automations(active_only=active_only))


@router.post("", response_model=DataResponse[AutomationRead], status_code=status.HTTP_201_CREATED)
def create_automation(
    payload: AutomationCreateRequest,
    service: AutomationServiceDep,
) -> DataResponse[AutomationRead]:
    return DataResponse[AutomationRead](data=service.create_automation(payload))


@router.get("/stats", response_model=DataResponse[dict[str, Any]])
def automation_stats(service: AutomationServiceDep) -> DataResponse[dict[str, Any]]:
    return DataResponse[dict[str, Any]](data=service.stats())


@router.get("/settings", response_model=DataResponse[AutomationSettings])
def automation_settings(service: AutomationServiceDep) -> DataResponse[AutomationSettings]:
    return DataResponse[AutomationSettings](data=service.get_settings())


@router.put("/settings/weekly-summary", response_model=ApiAck)
def set_weekly_summary(payload: ToggleRequest, service: AutomationServiceDep) -> ApiAck:
    return service.set_weekly_summary(payload.is_enabled)


@router.put("/settings/{setting_id}/toggle", response_model=ApiAck)
def toggle_automation_setting(
    setting_id: int,
    payload: ToggleRequest,
    service: AutomationServiceDep,
) -> ApiAck:
    return service.toggle_setting(setting_id, payload.is_enabled)


@router.get("/{automation_id}", response_model=DataResponse[AutomationRead])
def get_automation(automation_id: int, service: AutomationServiceDep) -> DataResponse[AutomationRead]:
    return DataResponse[AutomationRead](data=service.get_automation(automation_id))


@router.put("/{automation_id}", response_model=DataResponse[AutomationRead])
def update_automation(
    automation_id: int,
    payload: AutomationUpdateRequest,
    service: AutomationServiceDep,
) -> DataResponse[AutomationRead]:
    return DataResponse[AutomationRead](data=service.update_automation(automation_id, payload))


@router.delete("/{automation_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_automation(automation_id: int, service: AutomationServiceDep) -> Response:
    service.delete_automation(automation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
