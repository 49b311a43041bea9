"""Request-scoped dependencies shared by the route modules."""

from typing import Annotated

from fastapi import Depends, Header, Request, status

from enque_desk.cache.query_cache import QueryCache
from enque_desk.cache.ticket_preloader import PreloaderRegistry
from enque_desk.clients.api_client import EnqueApiClient
from enque_desk.core.config import Settings, get_settings
from enque_desk.core.errors import AppError
from enque_desk.core.session import UserSession, decode_session, require_workspace_id


def get_api_client(request: Request) -> EnqueApiClient:
    return request.app.state.api_client


def get_query_cache(request: Request) -> QueryCache:
    return request.app.state.query_cache


def get_preloader_registry(request: Request) -> PreloaderRegistry:
    return request.app.state.preloader_registry


def get_subdomain(request: Request) -> str | None:
    return getattr(request.state, "subdomain", None)


def get_access_token(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
    authorization: Annotated[str | None, Header()] = None,
) -> str | None:
    token = request.cookies.get(settings.access_token_cookie)
    if token:
        return token
    if authorization and authorization.lower().startswith("bearer "):
        return authorization[7:].strip() or None
    return None


def get_session(
    token: Annotated[str | None, Depends(get_access_token)],
    settings: Annotated[Settings, Depends(get_settings)],
    subdomain: Annotated[str | None, Depends(get_subdomain)],
) -> UserSession:
    session = decode_session(token)
    if session is None:
        raise AppError(
            status_code=status.HTTP_401_UNAUTHORIZED,
            code="AUTH_REQUIRED",
            message="Sign in to continue.",
            details={"redirect_to": settings.signin_url(subdomain)},
        )
    return session


def get_workspace_id(session: Annotated[UserSession, Depends(get_session)]) -> int:
    return require_workspace_id(session)


def get_authed_client(
    api_client: Annotated[EnqueApiClient, Depends(get_api_client)],
    token: Annotated[str | None, Depends(get_access_token)],
    _: Annotated[UserSession, Depends(get_session)],
) -> EnqueApiClient:
    return api_client.with_token(token)


SettingsDep = Annotated[Settings, Depends(get_settings)]
ApiClientDep = Annotated[EnqueApiClient, Depends(get_api_client)]
AuthedClientDep = Annotated[EnqueApiClient, Depends(get_authed_client)]
SessionDep = Annotated[UserSession, Depends(get_session)]
WorkspaceIdDep = Annotated[int, Depends(get_workspace_id)]
CacheDep = Annotated[QueryCache, Depends(get_query_cache)]
RegistryDep = Annotated[PreloaderRegistry, Depends(get_preloader_registry)]
