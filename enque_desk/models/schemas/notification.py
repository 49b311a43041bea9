from pydantic import BaseModel, Field, field_validator

from enque_desk.models.schemas.common import UpstreamModel

DEFAULT_TEAMS_ACTIVITY_TYPES = ["ticketCreated", "ticketAssigned", "newResponse"]


class NotificationSettings(UpstreamModel):
    agents: dict | None = None
    users: dict | None = None


class NotificationToggleRequest(BaseModel):
    is_enabled: bool


class NotificationTemplateRequest(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def _content(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Template content is required")
        return value


class ChannelConnectRequest(BaseModel):
    enable_notifications: bool = True
    activity_types: list[str] = Field(default_factory=lambda: list(DEFAULT_TEAMS_ACTIVITY_TYPES))


class ApiAck(UpstreamModel):
    success: bool = True
    message: str | None = None
