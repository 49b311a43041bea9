from pydantic import BaseModel

from enque_desk.models.schemas.common import UpstreamModel


class GlobalSignatureRead(UpstreamModel):
    id: int
    workspace_id: int
    content: str
    is_enabled: bool = False


class GlobalSignatureUpdateRequest(BaseModel):
    content: str
    is_enabled: bool | None = None


class GlobalSignatureToggleRequest(BaseModel):
    is_enabled: bool
