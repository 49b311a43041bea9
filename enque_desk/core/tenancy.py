"""
Workspace resolution from the request host.

Every workspace is served on its own subdomain (``acme.enque.cc``). Requests
on a tenant subdomain are checked against the REST API before they reach a
route; unknown workspaces are sent back to the base app.
"""

from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode

import structlog
from fastapi import Request, status
from fastapi.responses import RedirectResponse
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from enque_desk.cache.query_cache import QueryCache
from enque_desk.clients.api_client import EnqueApiClient
from enque_desk.core.config import Settings
from enque_desk.core.errors import AppError, UpstreamError, error_response

logger = structlog.get_logger(__name__)

IGNORED_SUBDOMAINS = frozenset({"www"})


@dataclass(slots=True)
class WorkspaceResolution:
    subdomain: str
    workspace: dict[str, Any] | None = None
    error: str | None = None


def subdomain_from_host(host: str, settings: Settings) -> str | None:
    hostname = host.strip().lower().split(":", 1)[0]
    for domain in dict.fromkeys((settings.base_domain.lower(), settings.app_host.lower())):
        suffix = f".{domain}"
        if not hostname.endswith(suffix):
            continue
        subdomain = hostname[: -len(suffix)]
        if not subdomain or subdomain == settings.base_subdomain or subdomain in IGNORED_SUBDOMAINS:
            return None
        return subdomain
    return None


def workspace_lookup_key(subdomain: str) -> tuple[str, str]:
    return ("workspace", subdomain)


def resolve_workspace(
    subdomain: str,
    api_client: EnqueApiClient,
    cache: QueryCache,
    stale_time: float,
) -> WorkspaceResolution:
    """Look up the workspace behind ``subdomain``; other upstream failures propagate."""
    try:
        workspace = cache.fetch(
            workspace_lookup_key(subdomain),
            lambda: api_client.get(f"/workspaces/subdomain/{subdomain}"),
            stale_time=stale_time,
            gc_time=stale_time * 2,
        )
    except UpstreamError as exc:
        if exc.upstream_status == status.HTTP_404_NOT_FOUND:
            return WorkspaceResolution(subdomain=subdomain, error="invalid_subdomain")
        raise
    if not workspace:
        return WorkspaceResolution(subdomain=subdomain, error="invalid_subdomain")
    return WorkspaceResolution(subdomain=subdomain, workspace=workspace)


def base_app_url(settings: Settings, error: str, subdomain: str | None = None) -> str:
    params = {"error": error}
    if subdomain:
        params["subdomain"] = subdomain
    return f"{settings.base_url}/?{urlencode(params)}"


class TenancyMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: Any, settings: Settings) -> None:
        super().__init__(app)
        self.settings = settings

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.workspace = None
        subdomain = subdomain_from_host(request.headers.get("host", ""), self.settings)
        request.state.subdomain = subdomain
        if subdomain is None:
            return await call_next(request)

        is_api = request.url.path.startswith(self.settings.api_prefix)
        try:
            resolution = await run_in_threadpool(
                resolve_workspace,
                subdomain,
                request.app.state.api_client,
                request.app.state.query_cache,
                self.settings.workspace_lookup_stale,
            )
        except AppError as exc:
            logger.error("Workspace lookup failed", subdomain=subdomain, error=exc.message)
            if is_api:
                return error_response(
                    status_code=exc.status_code,
                    code=exc.code,
                    message=exc.message,
                    details=exc.details,
                )
            return RedirectResponse(base_app_url(self.settings, "workspace_check_failed"))

        if resolution.workspace is None:
            logger.info("Unknown workspace subdomain", subdomain=subdomain)
            if is_api:
                return error_response(
                    status_code=status.HTTP_404_NOT_FOUND,
                    code="WORKSPACE_NOT_FOUND",
                    message="Workspace not found.",
                    details={"subdomain": subdomain},
                )
            return RedirectResponse(base_app_url(self.settings, "invalid_subdomain", subdomain))

        request.state.workspace = resolution.workspace
        if request.url.path == "/":
            return RedirectResponse("/signin", status_code=status.HTTP_307_TEMPORARY_REDIRECT)
        return await call_next(request)
