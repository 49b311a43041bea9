from pydantic import BaseModel

from enque_desk.models.entities import AuthMethod
from enque_desk.models.schemas.common import UpstreamModel


class MicrosoftAuthUrl(UpstreamModel):
    auth_url: str
    message: str | None = None


class MicrosoftAuthStatus(UpstreamModel):
    agent_id: int
    is_linked: bool
    microsoft_email: str | None = None
    auth_method: AuthMethod | None = None
    has_password: bool | None = None
    can_use_password: bool | None = None
    can_use_microsoft: bool | None = None


class MicrosoftProfile(UpstreamModel):
    id: str
    displayName: str | None = None
    givenName: str | None = None
    surname: str | None = None
    mail: str | None = None
    userPrincipalName: str | None = None
    jobTitle: str | None = None
    mobilePhone: str | None = None
    tenantId: str | None = None


class MicrosoftLinkRequest(BaseModel):
    agent_id: int
    code: str
    redirect_uri: str


class MicrosoftUnlinkRequest(BaseModel):
    agent_id: int


class MicrosoftLinkResult(UpstreamModel):
    message: str | None = None
    agent_id: int | None = None
    microsoft_email: str | None = None
    auth_method: str | None = None


class MicrosoftCallback(BaseModel):
    token: str | None = None
    is_new: bool = False
    error: str | None = None
