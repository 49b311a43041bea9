import pytest
from enque_desk.cache.query_cache import QueryCache
from enque_desk.core.config import Settings
from enque_desk.core.errors import register_exception_handlers
from enque_desk.core.tenancy import (
    TenancyMiddleware,
    base_app_url,
    resolve_workspace,
    subdomain_from_host,
)
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from tests.helpers.upstream import FakeUpstream

SETTINGS = Settings(app_host="localhost", base_domain="enque.cc", base_subdomain="app")


@pytest.mark.parametrize(
    ("host", "expected"),
    [
        ("acme.enque.cc", "acme"),
        ("ACME.enque.cc:443", "acme"),
        ("acme.localhost:3000", "acme"),
        ("app.enque.cc", None),
        ("www.enque.cc", None),
        ("enque.cc", None),
        ("localhost:3000", None),
        ("testserver", None),
    ],
)
def test_subdomain_from_host(host: str, expected: str | None) -> None:
    assert subdomain_from_host(host, SETTINGS) == expected


def test_base_app_url_carries_error() -> None:
    assert base_app_url(SETTINGS, "invalid_subdomain", "ghost") == (
        "http://app.enque.cc/?error=invalid_subdomain&subdomain=ghost"
    )


def test_resolve_workspace_caches_lookups() -> None:
    upstream = FakeUpstream()
    upstream.on("GET", "/workspaces/subdomain/acme", {"id": 3, "local_subdomain": "acme"})
    cache = QueryCache()

    first = resolve_workspace("acme", upstream.client(), cache, stale_time=60)
    second = resolve_workspace("acme", upstream.client(), cache, stale_time=60)

    assert first.workspace == {"id": 3, "local_subdomain": "acme"}
    assert second.workspace == first.workspace
    assert len(upstream.requests) == 1


def test_resolve_workspace_unknown_subdomain() -> None:
    upstream = FakeUpstream()

    resolution = resolve_workspace("ghost", upstream.client(), QueryCache(), stale_time=60)

    assert resolution.workspace is None
    assert resolution.error == "invalid_subdomain"


def _tenant_app(upstream: FakeUpstream) -> TestClient:
    app = FastAPI()
    app.state.api_client = upstream.client()
    app.state.query_cache = QueryCache()
    app.add_middleware(TenancyMiddleware, settings=SETTINGS)
    register_exception_handlers(app)

    @app.get("/api/whoami")
    def whoami(request: Request) -> dict[str, object]:
        return {"workspace": request.state.workspace, "subdomain": request.state.subdomain}

    @app.get("/dashboard")
    def dashboard() -> dict[str, str]:
        return {"page": "dashboard"}

    return TestClient(app, follow_redirects=False)


def test_middleware_attaches_workspace() -> None:
    upstream = FakeUpstream()
    upstream.on("GET", "/workspaces/subdomain/acme", {"id": 3, "local_subdomain": "acme"})
    client = _tenant_app(upstream)

    response = client.get("/api/whoami", headers={"host": "acme.enque.cc"})

    assert response.status_code == 200
    assert response.json() == {
        "workspace": {"id": 3, "local_subdomain": "acme"},
        "subdomain": "acme",
    }


def test_middleware_redirects_root_to_signin() -> None:
    upstream = FakeUpstream()
    upstream.on("GET", "/workspaces/subdomain/acme", {"id": 3, "local_subdomain": "acme"})
    client = _tenant_app(upstream)

    response = client.get("/", headers={"host": "acme.enque.cc"})

    assert response.status_code == 307
    assert response.headers["location"] == "/signin"


def test_middleware_unknown_workspace() -> None:
    client = _tenant_app(FakeUpstream())

    page = client.get("/dashboard", headers={"host": "ghost.enque.cc"})
    api = client.get("/api/whoami", headers={"host": "ghost.enque.cc"})

    assert page.status_code == 307
    assert page.headers["location"] == (
        "http://app.enque.cc/?error=invalid_subdomain&subdomain=ghost"
    )
    assert api.status_code == 404
    assert api.json()["error"]["code"] == "WORKSPACE_NOT_FOUND"


def test_middleware_lookup_failure_redirects_to_base_app() -> None:
    upstream = FakeUpstream()
    upstream.on("GET", "/workspaces/subdomain/acme", {"detail": "boom"}, status_code=500)
    client = _tenant_app(upstream)

    response = client.get("/dashboard", headers={"host": "acme.enque.cc"})

    assert response.status_code == 307
    assert response.headers["location"] == "http://app.enque.cc/?error=workspace_check_failed"


def test_requests_without_subdomain_pass_through() -> None:
    upstream = FakeUpstream()
    client = _tenant_app(upstream)

    response = client.get("/api/whoami")

    assert response.json() == {"workspace": None, "subdomain": None}
    assert upstream.requests == []
