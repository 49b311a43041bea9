from typing import Annotated

from fastapi import APIRouter, Depends

from enque_desk.api.deps import AuthedClientDep, WorkspaceIdDep
from enque_desk.models.schemas.common import DataResponse
from enque_desk.models.schemas.notification import (
    ApiAck,
    ChannelConnectRequest,
    NotificationSettings,
    NotificationTemplateRequest,
    NotificationToggleRequest,
)
from enque_desk.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications")


def get_notification_service(
    api_client: AuthedClientDep,
    workspace_id: WorkspaceIdDep,
) -> NotificationService:
    return NotificationService(api_client=api_client, workspace_id=workspace_id)


NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]


@router.get("/settings", response_model=DataResponse[NotificationSettings])
def notification_settings(service: NotificationServiceDep) -> DataResponse[NotificationSettings]:
    return DataResponse[NotificationSettings](data=service.get_settings())


@router.put("/settings/{setting_id}/toggle", response_model=ApiAck)
def toggle_notification(
    setting_id: int,
    payload: NotificationToggleRequest,
    service: NotificationServiceDep,
) -> ApiAck:
    return service.toggle(setting_id, payload.is_enabled)


@router.put("/templates/{template_id}", response_model=ApiAck)
def update_notification_template(
    template_id: int,
    payload: NotificationTemplateRequest,
    service: NotificationServiceDep,
) -> ApiAck:
    return service.update_template(template_id, payload.content)


@router.post("/connect/{channel}", response_model=ApiAck)
def connect_channel(
    channel: str,
    payload: ChannelConnectRequest,
    service: NotificationServiceDep,
) -> ApiAck:
    return service.connect_channel(channel, payload)
