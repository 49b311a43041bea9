from typing import Any

import structlog
from fastapi import status

from enque_desk.clients.api_client import EnqueApiClient, clean_params
from enque_desk.core.errors import AppError, UpstreamError
from enque_desk.models.schemas.automation import (
    AutomationCreateRequest,
    AutomationRead,
    AutomationSettings,
    AutomationUpdateRequest,
)
from enque_desk.models.schemas.notification import ApiAck

logger = structlog.get_logger(__name__)


class AutomationService:
    def __init__(self, api_client: EnqueApiClient, workspace_id: int) -> None:
        self.api_client = api_client
        self.workspace_id = workspace_id

    def list_automations(self, active_only: bool = False) -> list[AutomationRead]:
        params = clean_params({"active_only": True if active_only else None})
        data = self.api_client.get("/automations/", params=params) or []
        return [AutomationRead.model_validate(item) for item in data]

    def get_automation(self, automation_id: int) -> AutomationRead:
        try:
            data = self.api_client.get(f"/automations/{automation_id}")
        except UpstreamError as exc:
            self._translate_not_found(automation_id, exc)
            raise
        return AutomationRead.model_validate(data)

    def create_automation(self, payload: AutomationCreateRequest) -> AutomationRead:
        body = payload.model_dump(mode="json")
        body["workspace_id"] = self.workspace_id
        data = self.api_client.post("/automations/", json=body)
        automation = AutomationRead.model_validate(data)
        logger.info(
            "Automation created",
            automation_id=automation.id,
            conditions=len(payload.conditions),
            actions=len(payload.actions),
        )
        return automation

    def update_automation(self, automation_id: int, payload: AutomationUpdateRequest) -> AutomationRead:
        changes = payload.model_dump(mode="json", exclude_unset=True)
        if "name" in changes:
            name = (changes["name"] or "").strip()
            if not name:
                raise AppError(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    code="INVALID_AUTOMATION",
                    message="Automation name is required.",
                )
            changes["name"] = name
        for field in ("conditions", "actions"):
            if field in changes and not changes[field]:
                raise AppError(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    code="INVALID_AUTOMATION",
                    message=f"An automation needs at least one item in {field}.",
                )
        try:
            data = self.api_client.put(f"/automations/{automation_id}", json=changes)
        except UpstreamError as exc:
            self._translate_not_found(automation_id, exc)
            raise
        return AutomationRead.model_validate(data)

    def delete_automation(self, automation_id: int) -> None:
        try:
            self.api_client.delete(f"/automations/{automation_id}")
        except UpstreamError as exc:
            self._translate_not_found(automation_id, exc)
            raise

    def stats(self) -> dict[str, Any]:
        return self.api_client.get("/automations/stats/summary") or {}

    def get_settings(self) -> AutomationSettings:
        data = self.api_client.get(f"/automation-settings/{self.workspace_id}")
        return AutomationSettings.model_validate(data or {})

    def toggle_setting(self, setting_id: int, is_enabled: bool) -> ApiAck:
        data = self.api_client.put(
            f"/automation-settings/{self.workspace_id}/toggle/{setting_id}",
            json={"is_enabled": is_enabled},
        )
        return ApiAck.model_validate(data or {})

    def set_weekly_summary(self, is_enabled: bool) -> ApiAck:
        data = self.api_client.post(
            f"/automation-settings/{self.workspace_id}/weekly-summary",
            json={"is_enabled": is_enabled},
        )
        return ApiAck.model_validate(data or {})

    def _translate_not_found(self, automation_id: int, exc: UpstreamError) -> None:
        if exc.upstream_status == status.HTTP_404_NOT_FOUND:
            raise AppError(
                status_code=status.HTTP_404_NOT_FOUND,
                code="AUTOMATION_NOT_FOUND",
                message="Automation not found.",
                details={"automation_id": automation_id},
            ) from exc
