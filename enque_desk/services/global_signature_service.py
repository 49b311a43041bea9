from fastapi import status

from enque_desk.clients.api_client import EnqueApiClient
from enque_desk.core.errors import UpstreamError
from enque_desk.models.schemas.global_signature import GlobalSignatureRead, GlobalSignatureUpdateRequest


class GlobalSignatureService:
    """The workspace-wide signature appended to agent replies. A workspace may not have one yet."""

    def __init__(self, api_client: EnqueApiClient, workspace_id: int) -> None:
        self.api_client = api_client
        self.workspace_id = workspace_id

    @property
    def base_path(self) -> str:
        return f"/global-signatures/{self.workspace_id}"

    def get_signature(self) -> GlobalSignatureRead | None:
        return self._get_or_none(self.base_path)

    def get_enabled_signature(self) -> GlobalSignatureRead | None:
        return self._get_or_none(f"{self.base_path}/enabled")

    def update_signature(self, payload: GlobalSignatureUpdateRequest) -> GlobalSignatureRead:
        data = self.api_client.put(self.base_path, json=payload.model_dump(exclude_none=True))
        return GlobalSignatureRead.model_validate(data)

    def toggle_signature(self, is_enabled: bool) -> GlobalSignatureRead:
        data = self.api_client.put(self.base_path, json={"is_enabled": is_enabled})
        return GlobalSignatureRead.model_validate(data)

    def _get_or_none(self, path: str) -> GlobalSignatureRead | None:
        try:
            data = self.api_client.get(path)
        except UpstreamError as exc:
            if exc.upstream_status == status.HTTP_404_NOT_FOUND:
                return None
            raise
        return GlobalSignatureRead.model_validate(data) if data else None
