import re
from datetime import datetime

from pydantic import BaseModel, EmailStr, ValidationInfo, field_validator

from enque_desk.models.schemas.auth import require_matching
from enque_desk.models.schemas.common import UpstreamModel

SETUP_SUBDOMAIN_RE = re.compile(r"[a-zA-Z0-9-]+")
SETUP_PASSWORD_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]")


def normalize_setup_subdomain(value: str) -> str:
    if len(value) < 3:
        raise ValueError("Subdomain must be at least 3 characters")
    if len(value) > 50:
        raise ValueError("Subdomain cannot be more than 50 characters")
    if not SETUP_SUBDOMAIN_RE.fullmatch(value):
        raise ValueError("Only letters, numbers and hyphens are allowed")
    return value.lower()


class WorkspaceRead(UpstreamModel):
    id: int
    name: str | None = None
    local_subdomain: str
    email_domain: str | None = None
    logo_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class GoToWorkspaceRequest(BaseModel):
    local_subdomain: str

    @field_validator("local_subdomain")
    @classmethod
    def _required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Subdomain is required")
        return value.lower()


class SubdomainAvailability(BaseModel):
    subdomain: str
    available: bool
    reason: str | None = None


class WorkspaceSetupRequest(BaseModel):
    subdomain: str
    admin_name: str
    admin_email: EmailStr
    admin_password: str
    confirm_password: str

    @field_validator("subdomain")
    @classmethod
    def _subdomain(cls, value: str) -> str:
        return normalize_setup_subdomain(value)

    @field_validator("admin_name")
    @classmethod
    def _admin_name(cls, value: str) -> str:
        if len(value) < 2:
            raise ValueError("Name must be at least 2 characters")
        if len(value) > 100:
            raise ValueError("Name cannot be more than 100 characters")
        return value

    @field_validator("admin_password")
    @classmethod
    def _admin_password(cls, value: str) -> str:
        if len(value) < 8:
            raise ValueError("Password must be at least 8 characters")
        if not SETUP_PASSWORD_RE.match(value):
            raise ValueError(
                "Password must contain at least: 1 lowercase, 1 uppercase, "
                "1 number and 1 special character"
            )
        return value

    @field_validator("confirm_password")
    @classmethod
    def _passwords_match(cls, value: str, info: ValidationInfo) -> str:
        return require_matching(value, info, "admin_password")

    def upstream_payload(self) -> dict[str, str]:
        return self.model_dump(exclude={"confirm_password"}, mode="json")


class WorkspaceSetupResult(UpstreamModel):
    access_token: str | None = None
    token_type: str | None = None
    expires_at: datetime | None = None
    workspace: WorkspaceRead | None = None


class WorkspaceUpdateRequest(BaseModel):
    name: str | None = None
    email_domain: str | None = None
    logo_url: str | None = None
