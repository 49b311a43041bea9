from datetime import datetime

from pydantic import BaseModel, EmailStr, ValidationInfo, field_validator

from enque_desk.models.entities import AgentRole
from enque_desk.models.schemas.auth import (
    require_matching,
    require_min_length,
    validate_strong_password,
)
from enque_desk.models.schemas.common import UpstreamModel


class AgentRead(UpstreamModel):
    id: int
    name: str
    email: str
    role: AgentRole
    is_active: bool = True
    workspace_id: int | None = None
    job_title: str | None = None
    phone_number: str | None = None
    email_signature: str | None = None
    avatar_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AgentUpdateRequest(BaseModel):
    name: str | None = None
    email: EmailStr | None = None
    role: AgentRole | None = None
    is_active: bool | None = None
    job_title: str | None = None
    phone_number: str | None = None
    email_signature: str | None = None


class AgentInviteRequest(BaseModel):
    name: str
    email: EmailStr
    role: AgentRole = "agent"

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value


class AcceptInvitationRequest(BaseModel):
    token: str
    password: str
    confirm_password: str

    @field_validator("password")
    @classmethod
    def _strong_password(cls, value: str) -> str:
        return validate_strong_password(value)

    @field_validator("confirm_password")
    @classmethod
    def _passwords_match(cls, value: str, info: ValidationInfo) -> str:
        return require_matching(value, info, "password")


class AgentSignUpRequest(BaseModel):
    name: str
    email: EmailStr
    password: str
    workspace_id: int | None = None

    @field_validator("name")
    @classmethod
    def _name_length(cls, value: str) -> str:
        return require_min_length(value, 3, "Name")

    @field_validator("password")
    @classmethod
    def _password_length(cls, value: str) -> str:
        return require_min_length(value, 8, "Password")
