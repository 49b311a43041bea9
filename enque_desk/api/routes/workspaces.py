from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status

from enque_desk.api.deps import (
    ApiClientDep,
    AuthedClientDep,
    CacheDep,
    SettingsDep,
    WorkspaceIdDep,
    get_subdomain,
)
from enque_desk.core.errors import AppError
from enque_desk.core.session import set_session_cookie
from enque_desk.models.schemas.common import DataResponse, RedirectTarget
from enque_desk.models.schemas.workspace import (
    GoToWorkspaceRequest,
    SubdomainAvailability,
    WorkspaceRead,
    WorkspaceSetupRequest,
    WorkspaceUpdateRequest,
)
from enque_desk.services.workspace_service import WorkspaceService

router = APIRouter(prefix="/workspaces")


def get_workspace_service(
    api_client: ApiClientDep,
    settings: SettingsDep,
    cache: CacheDep,
) -> WorkspaceService:
    return WorkspaceService(api_client=api_client, settings=settings, cache=cache)


def get_authed_workspace_service(
    api_client: AuthedClientDep,
    settings: SettingsDep,
    cache: CacheDep,
) -> WorkspaceService:
    return WorkspaceService(api_client=api_client, settings=settings, cache=cache)


WorkspaceServiceDep = Annotated[WorkspaceService, Depends(get_workspace_service)]
AuthedWorkspaceServiceDep = Annotated[WorkspaceService, Depends(get_authed_workspace_service)]


def _require_own_workspace(workspace_id: int, session_workspace_id: int) -> None:
    if workspace_id != session_workspace_id:
        raise AppError(
            status_code=status.HTTP_403_FORBIDDEN,
            code="WORKSPACE_FORBIDDEN",
            message="You can only manage your own workspace.",
            details={"workspace_id": workspace_id},
        )


@router.post("/go", response_model=RedirectTarget)
def go_to_workspace(
    payload: GoToWorkspaceRequest,
    workspace_service: WorkspaceServiceDep,
) -> RedirectTarget:
    return RedirectTarget(redirect_to=workspace_service.go_to_workspace(payload.local_subdomain))


@router.get("/current", response_model=DataResponse[WorkspaceRead])
def current_workspace(
    request: Request,
    workspace_service: WorkspaceServiceDep,
    settings: SettingsDep,
    subdomain: Annotated[str | None, Depends(get_subdomain)],
) -> DataResponse[WorkspaceRead]:
    resolved = getattr(request.state, "workspace", None)
    if resolved:
        return DataResponse[WorkspaceRead](data=WorkspaceRead.model_validate(resolved))
    if subdomain is None:
        raise AppError(
            status_code=status.HTTP_404_NOT_FOUND,
            code="WORKSPACE_NOT_FOUND",
            message="No workspace in the request host.",
            details={"redirect_to": f"{settings.platform_url()}/workspace"},
        )
    return DataResponse[WorkspaceRead](data=workspace_service.get_by_subdomain(subdomain))


@router.get("/check-subdomain/{subdomain}", response_model=SubdomainAvailability)
def check_subdomain(
    subdomain: str,
    workspace_service: WorkspaceServiceDep,
) -> SubdomainAvailability:
    return workspace_service.check_subdomain(subdomain)


@router.post("/setup", response_model=RedirectTarget, status_code=status.HTTP_201_CREATED)
def setup_workspace(
    payload: WorkspaceSetupRequest,
    response: Response,
    workspace_service: WorkspaceServiceDep,
    settings: SettingsDep,
) -> RedirectTarget:
    result = workspace_service.setup_workspace(payload)
    if result.access_token:
        set_session_cookie(response, settings, result.access_token, result.expires_at)
    return RedirectTarget(redirect_to=settings.platform_url(payload.subdomain))


@router.put("/{workspace_id}", response_model=DataResponse[WorkspaceRead])
def update_workspace(
    workspace_id: int,
    payload: WorkspaceUpdateRequest,
    session_workspace_id: WorkspaceIdDep,
    workspace_service: AuthedWorkspaceServiceDep,
) -> DataResponse[WorkspaceRead]:
    _require_own_workspace(workspace_id, session_workspace_id)
    return DataResponse[WorkspaceRead](data=workspace_service.update_workspace(workspace_id, payload))


@router.delete("/{workspace_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_workspace(
    workspace_id: int,
    session_workspace_id: WorkspaceIdDep,
    workspace_service: AuthedWorkspaceServiceDep,
) -> Response:
    _require_own_workspace(workspace_id, session_workspace_id)
    workspace_service.delete_workspace(workspace_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
