from datetime import UTC, datetime
from typing import Annotated
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import RedirectResponse

from enque_desk.api.deps import ApiClientDep, AuthedClientDep, SettingsDep, get_subdomain
from enque_desk.core.errors import AppError
from enque_desk.core.session import decode_session, set_session_cookie
from enque_desk.models.schemas.microsoft import (
    MicrosoftAuthStatus,
    MicrosoftAuthUrl,
    MicrosoftLinkRequest,
    MicrosoftLinkResult,
    MicrosoftProfile,
    MicrosoftUnlinkRequest,
)
from enque_desk.services.microsoft_auth_service import MicrosoftAuthService, parse_callback

router = APIRouter(prefix="/auth/microsoft")

SubdomainDep = Annotated[str | None, Depends(get_subdomain)]


def get_microsoft_auth_service(api_client: ApiClientDep) -> MicrosoftAuthService:
    return MicrosoftAuthService(api_client=api_client)


def get_authed_microsoft_auth_service(api_client: AuthedClientDep) -> MicrosoftAuthService:
    return MicrosoftAuthService(api_client=api_client)


MicrosoftServiceDep = Annotated[MicrosoftAuthService, Depends(get_microsoft_auth_service)]
AuthedMicrosoftServiceDep = Annotated[
    MicrosoftAuthService, Depends(get_authed_microsoft_auth_service)
]


def _request_workspace_id(request: Request, workspace_id: int | None) -> int:
    workspace = getattr(request.state, "workspace", None) or {}
    resolved = workspace.get("id") or workspace_id
    if not resolved:
        raise AppError(
            status_code=status.HTTP_400_BAD_REQUEST,
            code="INVALID_WORKSPACE",
            message="A workspace is required to sign in with Microsoft.",
        )
    return int(resolved)


@router.get("/url", response_model=MicrosoftAuthUrl)
def microsoft_auth_url(
    request: Request,
    service: MicrosoftServiceDep,
    workspace_id: Annotated[int | None, Query(ge=1)] = None,
) -> MicrosoftAuthUrl:
    hostname = request.headers.get("host", "")
    return service.get_auth_url(_request_workspace_id(request, workspace_id), hostname)


@router.get("/login")
def microsoft_login(
    request: Request,
    service: MicrosoftServiceDep,
    workspace_id: Annotated[int | None, Query(ge=1)] = None,
) -> RedirectResponse:
    hostname = request.headers.get("host", "")
    auth = service.get_auth_url(_request_workspace_id(request, workspace_id), hostname)
    return RedirectResponse(auth.auth_url, status_code=status.HTTP_302_FOUND)


@router.get("/callback")
def microsoft_callback(
    request: Request,
    settings: SettingsDep,
    subdomain: SubdomainDep,
) -> RedirectResponse:
    callback = parse_callback(request.query_params)
    if callback.token:
        session = decode_session(callback.token)
        response = RedirectResponse(
            f"{settings.platform_url(subdomain)}/dashboard",
            status_code=status.HTTP_302_FOUND,
        )
        expires_at = None
        if session is not None and session.exp is not None:
            expires_at = datetime.fromtimestamp(session.exp, UTC)
        set_session_cookie(response, settings, callback.token, expires_at)
        return response

    target = settings.signin_url(subdomain)
    if callback.error:
        target = f"{target}?{urlencode({'error': callback.error})}"
    return RedirectResponse(target, status_code=status.HTTP_302_FOUND)


@router.get("/status", response_model=MicrosoftAuthStatus)
def microsoft_status(service: AuthedMicrosoftServiceDep) -> MicrosoftAuthStatus:
    return service.status()


@router.get("/profile", response_model=MicrosoftProfile)
def microsoft_profile(
    service: AuthedMicrosoftServiceDep,
    agent_id: Annotated[int | None, Query(ge=1)] = None,
) -> MicrosoftProfile:
    return service.profile(agent_id)


@router.post("/link", response_model=MicrosoftLinkResult)
def microsoft_link(
    payload: MicrosoftLinkRequest,
    service: AuthedMicrosoftServiceDep,
) -> MicrosoftLinkResult:
    return service.link(payload.agent_id, payload.code, payload.redirect_uri)


@router.post("/unlink", response_model=MicrosoftLinkResult)
def microsoft_unlink(
    payload: MicrosoftUnlinkRequest,
    service: AuthedMicrosoftServiceDep,
) -> MicrosoftLinkResult:
    return service.unlink(payload.agent_id)
