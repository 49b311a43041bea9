from datetime import datetime

from pydantic import BaseModel, EmailStr, field_validator

from enque_desk.models.schemas.common import UpstreamModel


class UserRead(UpstreamModel):
    id: int
    name: str
    email: str
    company_id: int | None = None
    phone: str | None = None
    avatar_url: str | None = None
    workspace_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserCreateRequest(BaseModel):
    name: str
    email: EmailStr
    company_id: int | None = None
    phone: str | None = None

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value


class UserUpdateRequest(BaseModel):
    name: str | None = None
    email: EmailStr | None = None
    company_id: int | None = None
    phone: str | None = None
