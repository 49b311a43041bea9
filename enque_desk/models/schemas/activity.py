from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from enque_desk.models.entities import ActivitySourceType, ActivityStatus
from enque_desk.models.schemas.common import UpstreamModel


class ActivityRead(UpstreamModel):
    id: int
    action: str
    agent_id: int | None = None
    source_type: ActivitySourceType
    source_id: int
    workspace_id: int | None = None
    status: ActivityStatus | None = None
    creator_user_id: int | None = None
    creator_user_name: str | None = None
    creator_user_email: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ActivityFilters(BaseModel):
    source_type: ActivitySourceType | None = None
    source_id: int | None = None
    agent_id: int | None = None
    status: ActivityStatus | None = None


class ActivityCreateRequest(BaseModel):
    action: str = Field(max_length=255)
    agent_id: int | None = None
    source_type: ActivitySourceType
    source_id: int

    @field_validator("action")
    @classmethod
    def _action(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Action is required")
        return value


class ActivityUpdateRequest(BaseModel):
    action: str | None = Field(default=None, max_length=255)
    status: ActivityStatus | None = None
