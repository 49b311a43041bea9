from fastapi import status

from enque_desk.clients.api_client import EnqueApiClient
from enque_desk.core.errors import AppError, UpstreamError
from enque_desk.models.schemas.canned_reply import (
    CannedReplyCategoryCreateRequest,
    CannedReplyCategoryRead,
    CannedReplyCreateRequest,
    CannedReplyRead,
    CannedReplyUpdateRequest,
)


class CannedReplyService:
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
        return f"/workspaces/{self.workspace_id}/canned-replies"

    def list_replies(self) -> list[CannedReplyRead]:
        data = self.api_client.get(self.base_path) or []
        return [CannedReplyRead.model_validate(item) for item in data]

    def search(self, term: str) -> list[CannedReplyRead]:
        """Enabled replies whose title or content contains ``term``, ignoring case."""
        needle = term.strip().lower()
        return [
            reply
            for reply in self.list_replies()
            if reply.is_enabled
            and (not needle or needle in reply.title.lower() or needle in reply.content.lower())
        ]

    def get_reply(self, reply_id: int) -> CannedReplyRead:
        try:
            data = self.api_client.get(f"{self.base_path}/{reply_id}")
        except UpstreamError as exc:
            self._translate_not_found(reply_id, exc)
            raise
        return CannedReplyRead.model_validate(data)

    def create_reply(self, payload: CannedReplyCreateRequest) -> CannedReplyRead:
        data = self.api_client.post(self.base_path, json=payload.model_dump(exclude_none=True))
        return CannedReplyRead.model_validate(data)

    def update_reply(self, reply_id: int, payload: CannedReplyUpdateRequest) -> CannedReplyRead:
        try:
            data = self.api_client.put(
                f"{self.base_path}/{reply_id}",
                json=payload.model_dump(exclude_unset=True),
            )
        except UpstreamError as exc:
            self._translate_not_found(reply_id, exc)
            raise
        return CannedReplyRead.model_validate(data)

    def delete_reply(self, reply_id: int) -> None:
        try:
            self.api_client.delete(f"{self.base_path}/{reply_id}")
        except UpstreamError as exc:
            self._translate_not_found(reply_id, exc)
            raise

    def toggle_reply(self, reply_id: int, is_enabled: bool) -> CannedReplyRead:
        try:
            data = self.api_client.put(
                f"{self.base_path}/{reply_id}/toggle",
                json={"is_enabled": is_enabled},
            )
        except UpstreamError as exc:
            self._translate_not_found(reply_id, exc)
            raise
        return CannedReplyRead.model_validate(data)

    def list_categories(self) -> list[CannedReplyCategoryRead]:
        data = self.api_client.get(f"{self.base_path}/categories") or []
        return [CannedReplyCategoryRead.model_validate(item) for item in data]

    def create_category(self, payload: CannedReplyCategoryCreateRequest) -> CannedReplyCategoryRead:
        data = self.api_client.post(f"{self.base_path}/categories", json={"name": payload.name})
        return CannedReplyCategoryRead.model_validate(data)

    def _translate_not_found(self, reply_id: int, exc: UpstreamError) -> None:
        if exc.upstream_status == status.HTTP_404_NOT_FOUND:
            raise AppError(
                status_code=status.HTTP_404_NOT_FOUND,
                code="CANNED_REPLY_NOT_FOUND",
                message="Canned reply not found.",
                details={"reply_id": reply_id},
            ) from exc
