from fastapi import status

from enque_desk.cache.query_cache import QueryCache
from enque_desk.clients.api_client import EnqueApiClient
from enque_desk.core.config import Settings
from enque_desk.core.errors import AppError, UpstreamError
from enque_desk.core.tenancy import workspace_lookup_key
from enque_desk.models.schemas.workspace import (
    SETUP_SUBDOMAIN_RE,
    SubdomainAvailability,
    WorkspaceRead,
    WorkspaceSetupRequest,
    WorkspaceSetupResult,
    WorkspaceUpdateRequest,
)


class WorkspaceService:
    def __init__(
        self,
        api_client: EnqueApiClient,
        settings: Settings,
        cache: QueryCache,
    ) -> None:
        self.api_client = api_client
        self.settings = settings
        self.cache = cache

    def get_by_subdomain(self, subdomain: str) -> WorkspaceRead:
        try:
            data = self.cache.fetch(
                workspace_lookup_key(subdomain),
                lambda: self.api_client.get(f"/workspaces/subdomain/{subdomain}"),
                stale_time=self.settings.workspace_lookup_stale,
                gc_time=self.settings.workspace_lookup_stale * 2,
            )
        except UpstreamError as exc:
            if exc.upstream_status == status.HTTP_404_NOT_FOUND:
                self._raise_workspace_not_found(subdomain)
            raise
        return WorkspaceRead.model_validate(data)

    def go_to_workspace(self, local_subdomain: str) -> str:
        workspace = self.get_by_subdomain(local_subdomain)
        return self.settings.platform_url(workspace.local_subdomain)

    def check_subdomain(self, subdomain: str) -> SubdomainAvailability:
        normalized = subdomain.strip().lower()
        if not 3 <= len(normalized) <= 50 or not SETUP_SUBDOMAIN_RE.fullmatch(normalized):
            return SubdomainAvailability(subdomain=normalized, available=False, reason="invalid")

        data = self.api_client.get(f"/workspaces/check-subdomain/{normalized}") or {}
        available = bool(data.get("available", False))
        return SubdomainAvailability(
            subdomain=normalized,
            available=available,
            reason=data.get("reason") or (None if available else "taken"),
        )

    def setup_workspace(self, payload: WorkspaceSetupRequest) -> WorkspaceSetupResult:
        data = self.api_client.post("/workspaces/setup", json=payload.upstream_payload())
        self.cache.remove(workspace_lookup_key(payload.subdomain))
        return WorkspaceSetupResult.model_validate(data or {})

    def update_workspace(self, workspace_id: int, payload: WorkspaceUpdateRequest) -> WorkspaceRead:
        data = self.api_client.put(
            f"/workspaces/{workspace_id}",
            json=payload.model_dump(exclude_unset=True),
        )
        self.cache.remove(("workspace",))
        return WorkspaceRead.model_validate(data)

    def delete_workspace(self, workspace_id: int) -> None:
        self.api_client.delete(f"/workspaces/{workspace_id}")
        self.cache.remove(("workspace",))

    def _raise_workspace_not_found(self, subdomain: str) -> None:
        raise AppError(
            status_code=status.HTTP_404_NOT_FOUND,
            code="WORKSPACE_NOT_FOUND",
            message="Workspace not found.",
            details={"subdomain": subdomain},
        )
