from datetime import datetime

from pydantic import BaseModel, field_validator

from enque_desk.models.schemas.common import UpstreamModel


class CompanyRead(UpstreamModel):
    id: int
    name: str
    description: str | None = None
    email_domain: str | None = None
    logo_url: str | None = None
    primary_contact_id: int | None = None
    account_manager_id: int | None = None
    workspace_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CompanyCreateRequest(BaseModel):
    name: str
    email_domain: str
    description: str | None = None
    logo_url: str | None = None

    @field_validator("name", "email_domain")
    @classmethod
    def _required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Field is required")
        return value


class CompanyUpdateRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    email_domain: str | None = None
    logo_url: str | None = None
    primary_contact_id: int | None = None
    account_manager_id: int | None = None
