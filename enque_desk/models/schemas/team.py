from datetime import datetime

from pydantic import BaseModel, field_validator

from enque_desk.models.schemas.common import UpstreamModel


class TeamRead(UpstreamModel):
    id: int
    name: str
    description: str | None = None
    logo_url: str | None = None
    workspace_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TeamWriteRequest(BaseModel):
    name: str
    description: str | None = None
    logo_url: str | None = None

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Team name is required")
        return value


class TeamUpdateRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    logo_url: str | None = None


class TeamMemberRead(UpstreamModel):
    id: int
    team_id: int
    agent_id: int
    created_at: datetime | None = None


class TeamMemberRequest(BaseModel):
    agent_id: int
