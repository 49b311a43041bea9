import base64
import json

from enque_desk.api.deps import get_api_client
from enque_desk.core.config import get_settings
from enque_desk.main import app
from enque_desk.services.microsoft_auth_service import build_state, parse_callback
from fastapi import status
from fastapi.testclient import TestClient

from tests.helpers.upstream import FakeUpstream, make_token

AUTH_URL = "https://login.microsoftonline.com/common/oauth2/v2.0/authorize?client_id=abc"


def _override(upstream: FakeUpstream) -> None:
    api_client = upstream.client()
    app.dependency_overrides[get_api_client] = lambda: api_client


def _decode_state(state: str) -> dict[str, str]:
    padded = state + "=" * (-len(state) % 4)
    return json.loads(base64.urlsafe_b64decode(padded))


def test_state_round_trips_without_padding() -> None:
    state = build_state(3, "acme.enque.cc")

    assert "=" not in state
    assert _decode_state(state) == {"workspace_id": "3", "original_hostname": "acme.enque.cc"}


def test_parse_callback() -> None:
    success = parse_callback({"m365_auth": "success", "token": "tok", "is_new": "true"})
    failure = parse_callback({"error": "access%20denied"})
    empty = parse_callback({"m365_auth": "success"})

    assert (success.token, success.is_new, success.error) == ("tok", True, None)
    assert (failure.token, failure.error) == (None, "access denied")
    assert empty.token is None
    assert empty.error is None


def test_auth_url_carries_workspace_state() -> None:
    upstream = FakeUpstream()
    upstream.on("GET", "/microsoft/auth/authorize", {"auth_url": AUTH_URL})
    _override(upstream)
    response = TestClient(app).get("/api/auth/microsoft/url?workspace_id=3")
    app.dependency_overrides.clear()

    assert response.json()["auth_url"] == AUTH_URL
    state = upstream.requests[0].url.params["state"]
    assert _decode_state(state) == {"workspace_id": "3", "original_hostname": "testserver"}


def test_auth_url_requires_workspace(client: TestClient) -> None:
    upstream = FakeUpstream()
    _override(upstream)
    response = client.get("/api/auth/microsoft/url")
    app.dependency_overrides.clear()

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"]["code"] == "INVALID_WORKSPACE"
    assert upstream.requests == []


def test_login_redirects_to_microsoft() -> None:
    upstream = FakeUpstream()
    upstream.on("GET", "/microsoft/auth/authorize", {"auth_url": AUTH_URL})
    _override(upstream)
    client = TestClient(app, follow_redirects=False)
    response = client.get("/api/auth/microsoft/login?workspace_id=3")
    app.dependency_overrides.clear()

    assert response.status_code == status.HTTP_302_FOUND
    assert response.headers["location"] == AUTH_URL


def test_callback_with_token_signs_in() -> None:
    token = make_token(sub="7", workspace_id=3, exp=4102444800)
    client = TestClient(app, follow_redirects=False)

    response = client.get(f"/api/auth/microsoft/callback?m365_auth=success&token={token}")

    assert response.status_code == status.HTTP_302_FOUND
    assert response.headers["location"] == f"{get_settings().platform_url()}/dashboard"
    cookie = response.headers["set-cookie"]
    assert cookie.startswith(f"accessToken={token};")
    assert "expires=Fri, 01 Jan 2100" in cookie
    assert "HttpOnly" in cookie


def test_callback_error_returns_to_signin() -> None:
    client = TestClient(app, follow_redirects=False)

    response = client.get("/api/auth/microsoft/callback?error=access%20denied")

    assert response.status_code == status.HTTP_302_FOUND
    assert response.headers["location"] == f"{get_settings().signin_url()}?error=access+denied"
    assert "set-cookie" not in response.headers


def test_status_requires_session(client: TestClient) -> None:
    response = client.get("/api/auth/microsoft/status")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_status_and_unlink(client: TestClient, auth_headers: dict[str, str]) -> None:
    upstream = FakeUpstream()
    upstream.on(
        "GET",
        "/microsoft/auth/status",
        {"agent_id": 7, "is_linked": True, "microsoft_email": "ada@acme.io", "auth_method": "both"},
    )
    upstream.on("POST", "/microsoft/auth/unlink", {"message": "unlinked", "agent_id": 7})
    _override(upstream)
    linked = client.get("/api/auth/microsoft/status", headers=auth_headers)
    unlinked = client.post("/api/auth/microsoft/unlink", headers=auth_headers, json={"agent_id": 7})
    app.dependency_overrides.clear()

    assert linked.json()["is_linked"] is True
    assert unlinked.json()["message"] == "unlinked"
    sent = json.loads(upstream.calls("POST", "/microsoft/auth/unlink")[0].content)
    assert sent == {"agent_id": 7, "confirm": True}
