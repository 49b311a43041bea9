from fastapi import status

from enque_desk.clients.api_client import EnqueApiClient, filter_params
from enque_desk.core.errors import AppError, UpstreamError
from enque_desk.models.schemas.activity import (
    ActivityCreateRequest,
    ActivityFilters,
    ActivityRead,
    ActivityUpdateRequest,
)


class ActivityService:
    def __init__(self, api_client: EnqueApiClient, workspace_id: int) -> None:
        self.api_client = api_client
        self.workspace_id = workspace_id

    def list_activities(self, filters: ActivityFilters | None = None) -> list[ActivityRead]:
        values = filters.model_dump(exclude_none=True) if filters else {}
        data = self.api_client.get("/activities", params=filter_params(values)) or []
        return [ActivityRead.model_validate(item) for item in data]

    def get_activity(self, activity_id: int) -> ActivityRead:
        data = self.api_client.get("/activities", params=filter_params({"id": activity_id})) or []
        if not data:
            self._raise_activity_not_found(activity_id)
        return ActivityRead.model_validate(data[0])

    def create_activity(self, payload: ActivityCreateRequest) -> ActivityRead:
        body = payload.model_dump(exclude_none=True)
        body["workspace_id"] = self.workspace_id
        return ActivityRead.model_validate(self.api_client.post("/activities", json=body))

    def update_activity(self, activity_id: int, payload: ActivityUpdateRequest) -> ActivityRead:
        try:
            data = self.api_client.put(
                f"/activities/{activity_id}",
                json=payload.model_dump(exclude_unset=True),
            )
        except UpstreamError as exc:
            if exc.upstream_status == status.HTTP_404_NOT_FOUND:
                self._raise_activity_not_found(activity_id)
            raise
        return ActivityRead.model_validate(data)

    def mark_read(self, activity_id: int) -> ActivityRead:
        return self.update_activity(activity_id, ActivityUpdateRequest(status="read"))

    def delete_activity(self, activity_id: int) -> None:
        try:
            self.api_client.delete(f"/activities/{activity_id}")
        except UpstreamError as exc:
            if exc.upstream_status == status.HTTP_404_NOT_FOUND:
                self._raise_activity_not_found(activity_id)
            raise

    def _raise_activity_not_found(self, activity_id: int) -> None:
        raise AppError(
            status_code=status.HTTP_404_NOT_FOUND,
            code="ACTIVITY_NOT_FOUND",
            message="Activity not found.",
            details={"activity_id": activity_id},
        )
