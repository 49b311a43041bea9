from datetime import UTC, datetime

from enque_desk.api.routes.auth import get_auth_service, get_signup_service
from enque_desk.core.config import get_settings
from enque_desk.core.errors import AppError
from enque_desk.main import app
from enque_desk.models.schemas.agent import AcceptInvitationRequest, AgentRead, AgentSignUpRequest
from enque_desk.models.schemas.auth import (
    PasswordResetConfirm,
    PasswordResetRequest,
    RegisterRequest,
    SignInRequest,
    TokenRead,
)
from fastapi import status
from fastapi.testclient import TestClient

EXPIRES_AT = datetime(2030, 1, 1, tzinfo=UTC)


class _FakeAuthService:
    def __init__(self) -> None:
        self.reset_requests: list[str] = []
        self.registered: list[RegisterRequest] = []

    def sign_in(self, payload: SignInRequest) -> TokenRead:
        if payload.password != "correct-horse":
            raise AppError(
                status_code=status.HTTP_401_UNAUTHORIZED,
                code="INVALID_CREDENTIALS",
                message="Incorrect email or password",
            )
        return TokenRead(access_token="signed-token", expires_at=EXPIRES_AT)

    def current_agent(self) -> AgentRead:
        return AgentRead(id=7, name="Ada Agent", email="ada@acme.io", role="admin")

    def sign_out_url(self, subdomain: str | None) -> str:
        return get_settings().signin_url(subdomain)

    def register(self, payload: RegisterRequest) -> str:
        self.registered.append(payload)
        return get_settings().signin_url(payload.subdomain)

    def request_password_reset(self, payload: PasswordResetRequest) -> None:
        self.reset_requests.append(payload.email)

    def reset_password(self, payload: PasswordResetConfirm) -> None:
        _ = payload


class _FakeAgentService:
    def __init__(self) -> None:
        self.created: list[AgentSignUpRequest] = []

    def create_agent(self, payload: AgentSignUpRequest) -> AgentRead:
        self.created.append(payload)
        return AgentRead(id=8, name=payload.name, email=payload.email, role="agent")

    def accept_invitation(self, payload: AcceptInvitationRequest) -> TokenRead:
        _ = payload
        return TokenRead(access_token="invited-token", expires_at=EXPIRES_AT)


def test_sign_in_sets_session_cookie(client: TestClient) -> None:
    app.dependency_overrides[get_auth_service] = _FakeAuthService
    response = client.post(
        "/api/auth/signin",
        json={"email": "ada@acme.io", "password": "correct-horse"},
    )
    app.dependency_overrides.clear()

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["redirect_to"] == get_settings().platform_url()
    cookie = response.headers["set-cookie"]
    assert cookie.startswith("accessToken=signed-token;")
    assert "HttpOnly" in cookie


def test_sign_in_rejects_bad_credentials(client: TestClient) -> None:
    app.dependency_overrides[get_auth_service] = _FakeAuthService
    response = client.post(
        "/api/auth/signin",
        json={"email": "ada@acme.io", "password": "wrong-password"},
    )
    app.dependency_overrides.clear()

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"
    assert "set-cookie" not in response.headers


def test_sign_in_validation_errors_are_grouped_by_field(client: TestClient) -> None:
    app.dependency_overrides[get_auth_service] = _FakeAuthService
    response = client.post("/api/auth/signin", json={"email": "not-an-email", "password": "short"})
    app.dependency_overrides.clear()

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
    field_errors = response.json()["error"]["details"]["field_errors"]
    assert set(field_errors) == {"email", "password"}
    assert field_errors["password"] == ["Password must be at least 8 characters long"]
    assert "short" not in response.text


def test_me_requires_session(client: TestClient) -> None:
    app.dependency_overrides[get_auth_service] = _FakeAuthService
    response = client.get("/api/auth/me")
    app.dependency_overrides.clear()

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    payload = response.json()["error"]
    assert payload["code"] == "AUTH_REQUIRED"
    assert payload["details"]["redirect_to"] == get_settings().signin_url()


def test_me_returns_current_agent(client: TestClient, auth_headers: dict[str, str]) -> None:
    app.dependency_overrides[get_auth_service] = _FakeAuthService
    response = client.get("/api/auth/me", headers=auth_headers)
    app.dependency_overrides.clear()

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["email"] == "ada@acme.io"


def test_session_endpoint_reads_token_claims(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.get("/api/session", headers=auth_headers)

    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]
    assert data["id"] == 7
    assert data["workspace_id"] == 3
    assert data["role"] == "admin"


def test_sign_out_clears_cookie(client: TestClient) -> None:
    app.dependency_overrides[get_auth_service] = _FakeAuthService
    response = client.post("/api/auth/signout")
    app.dependency_overrides.clear()

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["redirect_to"] == get_settings().signin_url()
    assert 'accessToken=""' in response.headers["set-cookie"]


def test_register_checks_password_confirmation(client: TestClient) -> None:
    app.dependency_overrides[get_auth_service] = _FakeAuthService
    response = client.post(
        "/api/auth/register",
        json={
            "name": "Ada",
            "email": "ada@acme.io",
            "password": "longenough",
            "confirm_password": "different1",
            "subdomain": "acme",
        },
    )
    app.dependency_overrides.clear()

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
    field_errors = response.json()["error"]["details"]["field_errors"]
    assert field_errors["confirm_password"] == ["Passwords do not match"]


def test_register_redirects_to_workspace_signin(client: TestClient) -> None:
    fake = _FakeAuthService()
    app.dependency_overrides[get_auth_service] = lambda: fake
    response = client.post(
        "/api/auth/register",
        json={
            "name": "Ada",
            "email": "ada@acme.io",
            "password": "longenough",
            "confirm_password": "longenough",
            "subdomain": "acme-support",
        },
    )
    app.dependency_overrides.clear()

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["redirect_to"] == get_settings().signin_url("acme-support")
    assert fake.registered[0].subdomain == "acme-support"


def test_register_rejects_subdomain_with_trailing_newline(client: TestClient) -> None:
    fake = _FakeAuthService()
    app.dependency_overrides[get_auth_service] = lambda: fake
    response = client.post(
        "/api/auth/register",
        json={
            "name": "Ada",
            "email": "ada@acme.io",
            "password": "longenough",
            "confirm_password": "longenough",
            "subdomain": "acme\n",
        },
    )
    app.dependency_overrides.clear()

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
    assert "subdomain" in response.json()["error"]["details"]["field_errors"]
    assert fake.registered == []


def test_signup_requires_three_character_name(client: TestClient) -> None:
    fake = _FakeAgentService()
    app.dependency_overrides[get_signup_service] = lambda: fake
    response = client.post(
        "/api/auth/signup",
        json={"name": "Bo", "email": "bo@acme.io", "password": "longenough"},
    )
    app.dependency_overrides.clear()

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
    assert fake.created == []


def test_signup_creates_agent_and_redirects_to_signin(client: TestClient) -> None:
    fake = _FakeAgentService()
    app.dependency_overrides[get_signup_service] = lambda: fake
    response = client.post(
        "/api/auth/signup",
        json={"name": "Bob", "email": "bob@acme.io", "password": "longenough", "workspace_id": 3},
    )
    app.dependency_overrides.clear()

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["redirect_to"] == get_settings().signin_url()
    assert fake.created[0].workspace_id == 3


def test_accept_invitation_requires_strong_password(client: TestClient) -> None:
    app.dependency_overrides[get_signup_service] = _FakeAgentService
    weak = client.post(
        "/api/auth/accept-invitation",
        json={"token": "t", "password": "password1!", "confirm_password": "password1!"},
    )
    strong = client.post(
        "/api/auth/accept-invitation",
        json={"token": "t", "password": "Sup3r$ecret", "confirm_password": "Sup3r$ecret"},
    )
    app.dependency_overrides.clear()

    assert weak.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
    assert weak.json()["error"]["details"]["field_errors"]["password"] == [
        "Must contain at least one uppercase letter"
    ]
    assert strong.status_code == status.HTTP_200_OK
    assert strong.headers["set-cookie"].startswith("accessToken=invited-token;")


def test_password_reset_request_is_accepted(client: TestClient) -> None:
    fake = _FakeAuthService()
    app.dependency_overrides[get_auth_service] = lambda: fake
    response = client.post("/api/auth/password-reset/request", json={"email": "ada@acme.io"})
    app.dependency_overrides.clear()

    assert response.status_code == status.HTTP_202_ACCEPTED
    assert fake.reset_requests == ["ada@acme.io"]


def test_password_reset_enforces_minimum_length(client: TestClient) -> None:
    app.dependency_overrides[get_auth_service] = _FakeAuthService
    response = client.post(
        "/api/auth/password-reset/confirm",
        json={"token": "t", "new_password": "short", "confirm_password": "short"},
    )
    app.dependency_overrides.clear()

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
    assert response.json()["error"]["details"]["field_errors"]["new_password"] == [
        "Password must be at least 8 characters"
    ]
