from datetime import datetime

from pydantic import BaseModel, field_validator

from enque_desk.models.schemas.common import UpstreamModel


def _required_text(value: str, label: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{label} is required")
    return value


class CannedReplyRead(UpstreamModel):
    id: int
    title: str
    content: str
    is_enabled: bool = True
    category_id: int | None = None
    workspace_id: int | None = None
    created_by: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CannedReplyCreateRequest(BaseModel):
    title: str
    content: str
    category_id: int | None = None

    @field_validator("title")
    @classmethod
    def _title(cls, value: str) -> str:
        return _required_text(value, "Title")

    @field_validator("content")
    @classmethod
    def _content(cls, value: str) -> str:
        return _required_text(value, "Content")


class CannedReplyUpdateRequest(BaseModel):
    title: str | None = None
    content: str | None = None
    category_id: int | None = None
    is_enabled: bool | None = None

    @field_validator("title")
    @classmethod
    def _title(cls, value: str | None) -> str | None:
        return None if value is None else _required_text(value, "Title")

    @field_validator("content")
    @classmethod
    def _content(cls, value: str | None) -> str | None:
        return None if value is None else _required_text(value, "Content")


class CannedReplyToggleRequest(BaseModel):
    is_enabled: bool


class CannedReplyCategoryRead(UpstreamModel):
    id: int
    name: str
    workspace_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CannedReplyCategoryCreateRequest(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def _name(cls, value: str) -> str:
        return _required_text(value, "Name")
