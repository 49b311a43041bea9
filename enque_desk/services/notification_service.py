from typing import get_args

import structlog
from fastapi import status

from enque_desk.clients.api_client import EnqueApiClient
from enque_desk.core.errors import AppError
from enque_desk.models.entities import NotificationChannel
from enque_desk.models.schemas.notification import (
    ApiAck,
    ChannelConnectRequest,
    NotificationSettings,
)

logger = structlog.get_logger(__name__)

SUPPORTED_CHANNELS: tuple[str, ...] = get_args(NotificationChannel)


class NotificationService:
    def __init__(self, api_client: EnqueApiClient, workspace_id: int) -> None:
        self.api_client = api_client
        self.workspace_id = workspace_id

    def get_settings(self) -> NotificationSettings:
        data = self.api_client.get(f"/notifications/{self.workspace_id}")
        return NotificationSettings.model_validate(data or {})

    def toggle(self, setting_id: int, is_enabled: bool) -> ApiAck:
        data = self.api_client.put(
            f"/notifications/{self.workspace_id}/toggle/{setting_id}",
            json={"is_enabled": is_enabled},
        )
        return ApiAck.model_validate(data or {})

    def update_template(self, template_id: int, content: str) -> ApiAck:
        data = self.api_client.put(
            f"/notifications/{self.workspace_id}/template/{template_id}",
            json={"content": content},
        )
        return ApiAck.model_validate(data or {})

    def connect_channel(self, channel: str, payload: ChannelConnectRequest) -> ApiAck:
        if channel not in SUPPORTED_CHANNELS:
            raise AppError(
                status_code=status.HTTP_400_BAD_REQUEST,
                code="UNSUPPORTED_CHANNEL",
                message=f"Channel {channel} not supported yet.",
                details={"channel": channel, "supported": list(SUPPORTED_CHANNELS)},
            )
        data = self.api_client.post(
            f"/notifications/{self.workspace_id}/connect/{channel}",
            json=payload.model_dump(),
        )
        logger.info("Notification channel connected", channel=channel, workspace_id=self.workspace_id)
        return ApiAck.model_validate(data or {})
