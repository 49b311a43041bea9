import structlog
from fastapi import status

from enque_desk.clients.api_client import EnqueApiClient
from enque_desk.core.errors import AppError, UpstreamError
from enque_desk.models.schemas.workflow import (
    WorkflowActionType,
    WorkflowCreateRequest,
    WorkflowRead,
    WorkflowTrigger,
    WorkflowUpdateRequest,
)

logger = structlog.get_logger(__name__)


class WorkflowService:
    def __init__(self, api_client: EnqueApiClient, workspace_id: int | None) -> None:
        if not workspace_id or workspace_id <= 0:
            raise AppError(
                status_code=status.HTTP_400_BAD_REQUEST,
                code="INVALID_WORKSPACE",
                message="A valid workspace ID is required.",
                details={"workspace_id": workspace_id},
            )
        self.api_client = api_client
        self.workspace_id = workspace_id

    @property
    def base_path(self) -> str:
        return f"/workspaces/{self.workspace_id}/workflows"

    def list_workflows(self) -> list[WorkflowRead]:
        data = self.api_client.get(self.base_path) or []
        return [WorkflowRead.model_validate(item) for item in data]

    def get_workflow(self, workflow_id: int) -> WorkflowRead:
        try:
            data = self.api_client.get(f"{self.base_path}/{workflow_id}")
        except UpstreamError as exc:
            self._translate_not_found(workflow_id, exc)
            raise
        return WorkflowRead.model_validate(data)

    def create_workflow(self, payload: WorkflowCreateRequest) -> WorkflowRead:
        data = self.api_client.post(self.base_path, json=payload.model_dump(mode="json"))
        workflow = WorkflowRead.model_validate(data)
        logger.info("Workflow created", workflow_id=workflow.id, trigger=workflow.trigger)
        return workflow

    def update_workflow(self, workflow_id: int, payload: WorkflowUpdateRequest) -> WorkflowRead:
        changes = payload.model_dump(mode="json", exclude_unset=True)
        if not changes:
            raise AppError(
                status_code=status.HTTP_400_BAD_REQUEST,
                code="EMPTY_WORKFLOW_UPDATE",
                message="No workflow fields to update.",
                details={"workflow_id": workflow_id},
            )
        try:
            data = self.api_client.put(f"{self.base_path}/{workflow_id}", json=changes)
        except UpstreamError as exc:
            self._translate_not_found(workflow_id, exc)
            raise
        return WorkflowRead.model_validate(data)

    def delete_workflow(self, workflow_id: int) -> None:
        try:
            self.api_client.delete(f"{self.base_path}/{workflow_id}")
        except UpstreamError as exc:
            self._translate_not_found(workflow_id, exc)
            raise
        logger.info("Workflow deleted", workflow_id=workflow_id)

    def toggle_workflow(self, workflow_id: int, is_enabled: bool) -> WorkflowRead:
        try:
            data = self.api_client.put(
                f"{self.base_path}/{workflow_id}/toggle",
                json={"is_enabled": is_enabled},
            )
        except UpstreamError as exc:
            self._translate_not_found(workflow_id, exc)
            raise
        return WorkflowRead.model_validate(data)

    def duplicate_workflow(self, workflow_id: int) -> WorkflowRead:
        try:
            data = self.api_client.post(f"{self.base_path}/{workflow_id}/duplicate", json={})
        except UpstreamError as exc:
            self._translate_not_found(workflow_id, exc)
            raise
        return WorkflowRead.model_validate(data)

    def list_triggers(self) -> list[WorkflowTrigger]:
        data = self.api_client.get(f"{self.base_path}/triggers") or []
        return [WorkflowTrigger.model_validate(item) for item in data]

    def list_action_types(self) -> list[WorkflowActionType]:
        data = self.api_client.get(f"{self.base_path}/actions") or []
        return [WorkflowActionType.model_validate(item) for item in data]

    def _translate_not_found(self, workflow_id: int, exc: UpstreamError) -> None:
        if exc.upstream_status == status.HTTP_404_NOT_FOUND:
            raise AppError(
                status_code=status.HTTP_404_NOT_FOUND,
                code="WORKFLOW_NOT_FOUND",
                message="Workflow not found.",
                details={"workflow_id": workflow_id},
            ) from exc
