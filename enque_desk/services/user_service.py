from collections.abc import Mapping
from typing import Any

from fastapi import status

from enque_desk.clients.api_client import EnqueApiClient, filter_params
from enque_desk.core.errors import AppError, UpstreamError
from enque_desk.models.schemas.user import UserCreateRequest, UserRead, UserUpdateRequest


class UserService:
    def __init__(self, api_client: EnqueApiClient, workspace_id: int) -> None:
        self.api_client = api_client
        self.workspace_id = workspace_id

    def list_users(self, filters: Mapping[str, Any] | None = None) -> list[UserRead]:
        data = self.api_client.get("/users", params=filter_params(filters or {})) or []
        return [UserRead.model_validate(item) for item in data]

    def list_unassigned_users(self) -> list[UserRead]:
        data = self.api_client.get("/users/unassigned") or []
        return [UserRead.model_validate(item) for item in data]

    def get_user(self, user_id: int) -> UserRead:
        matches = self.list_users({"id": user_id})
        if not matches:
            self._raise_user_not_found(user_id)
        return matches[0]

    def create_user(self, payload: UserCreateRequest) -> UserRead:
        body = payload.model_dump(exclude_none=True)
        body["workspace_id"] = self.workspace_id
        return UserRead.model_validate(self.api_client.post("/users", json=body))

    def update_user(self, user_id: int, payload: UserUpdateRequest) -> UserRead:
        try:
            data = self.api_client.put(f"/users/{user_id}", json=payload.model_dump(exclude_unset=True))
        except UpstreamError as exc:
            if exc.upstream_status == status.HTTP_404_NOT_FOUND:
                self._raise_user_not_found(user_id)
            raise
        return UserRead.model_validate(data)

    def delete_user(self, user_id: int) -> None:
        try:
            self.api_client.delete(f"/users/{user_id}")
        except UpstreamError as exc:
            if exc.upstream_status == status.HTTP_404_NOT_FOUND:
                self._raise_user_not_found(user_id)
            raise

    def _raise_user_not_found(self, user_id: int) -> None:
        raise AppError(
            status_code=status.HTTP_404_NOT_FOUND,
            code="USER_NOT_FOUND",
            message="User not found.",
            details={"user_id": user_id},
        )
