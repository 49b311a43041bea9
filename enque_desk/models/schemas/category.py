from datetime import datetime

from pydantic import BaseModel, field_validator

from enque_desk.models.schemas.common import UpstreamModel


class CategoryRead(UpstreamModel):
    id: int
    name: str
    workspace_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CategoryCreateRequest(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Category name is required")
        return value
