from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from enque_desk.models.schemas.common import UpstreamModel


class WorkflowCondition(BaseModel):
    field: str
    operator: str
    value: str | int | float | bool


class WorkflowAction(BaseModel):
    type: str
    config: dict[str, Any] = Field(default_factory=dict)


class WorkflowRead(UpstreamModel):
    id: int
    name: str
    description: str | None = None
    is_enabled: bool = True
    trigger: str
    conditions: list[WorkflowCondition] = Field(default_factory=list)
    actions: list[WorkflowAction] = Field(default_factory=list)
    workspace_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class WorkflowCreateRequest(BaseModel):
    name: str
    description: str = ""
    is_enabled: bool = True
    trigger: str
    conditions: list[WorkflowCondition] = Field(default_factory=list)
    actions: list[WorkflowAction] = Field(min_length=1)

    @field_validator("name", "trigger")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Field cannot be empty")
        return value


class WorkflowUpdateRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    is_enabled: bool | None = None
    trigger: str | None = None
    conditions: list[WorkflowCondition] | None = None
    actions: list[WorkflowAction] | None = Field(default=None, min_length=1)

    @field_validator("name", "trigger")
    @classmethod
    def _not_blank(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise ValueError("Field cannot be empty")
        return value


class WorkflowToggleRequest(BaseModel):
    is_enabled: bool


class WorkflowTrigger(UpstreamModel):
    id: str
    name: str
    description: str | None = None


class WorkflowActionType(UpstreamModel):
    id: str
    name: str
    description: str | None = None
    config_schema: dict[str, Any] = Field(default_factory=dict)
