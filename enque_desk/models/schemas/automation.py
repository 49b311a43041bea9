from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from enque_desk.models.entities import (
    ActionType,
    ConditionOperator,
    ConditionType,
    LogicalOperator,
)
from enque_desk.models.schemas.common import UpstreamModel


class AutomationConditionWrite(BaseModel):
    condition_type: ConditionType
    condition_operator: ConditionOperator = "eql"
    condition_value: str | None = None
    logical_operator: LogicalOperator | None = None


class AutomationActionWrite(BaseModel):
    action_type: ActionType
    action_value: str | None = None


class AutomationConditionRead(AutomationConditionWrite, UpstreamModel):
    id: int | None = None
    automation_id: int | None = None
    created_at: datetime | None = None


class AutomationActionRead(AutomationActionWrite, UpstreamModel):
    id: int | None = None
    automation_id: int | None = None
    created_at: datetime | None = None


class AutomationRead(UpstreamModel):
    id: int
    name: str
    workspace_id: int | None = None
    is_active: bool = True
    conditions_operator: LogicalOperator = "AND"
    actions_operator: LogicalOperator = "AND"
    created_by: int | None = None
    conditions: list[AutomationConditionRead] = []
    actions: list[AutomationActionRead] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AutomationCreateRequest(BaseModel):
    name: str
    is_active: bool = True
    conditions_operator: LogicalOperator = "AND"
    actions_operator: LogicalOperator = "AND"
    conditions: list[AutomationConditionWrite] = Field(min_length=1)
    actions: list[AutomationActionWrite] = Field(min_length=1)

    @field_validator("name")
    @classmethod
    def _name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Automation name is required")
        return value


class AutomationUpdateRequest(BaseModel):
    name: str | None = None
    is_active: bool | None = None
    conditions_operator: LogicalOperator | None = None
    actions_operator: LogicalOperator | None = None
    conditions: list[AutomationConditionWrite] | None = None
    actions: list[AutomationActionWrite] | None = None


class AutomationSetting(UpstreamModel):
    id: int
    is_enabled: bool
    type: str | None = None
    name: str | None = None
    description: str | None = None


class AutomationSettings(UpstreamModel):
    team_notifications: AutomationSetting | None = None
    weekly_agent_summary: AutomationSetting | None = None


class ToggleRequest(BaseModel):
    is_enabled: bool
