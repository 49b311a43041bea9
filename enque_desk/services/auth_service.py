import structlog
from fastapi import status

from enque_desk.clients.api_client import EnqueApiClient
from enque_desk.core.config import Settings
from enque_desk.core.errors import AppError, UpstreamError
from enque_desk.models.schemas.agent import AgentRead
from enque_desk.models.schemas.auth import (
    PasswordResetConfirm,
    PasswordResetRequest,
    RegisterRequest,
    SignInRequest,
    TokenRead,
)

logger = structlog.get_logger(__name__)


class AuthService:
    def __init__(self, api_client: EnqueApiClient, settings: Settings) -> None:
        self.api_client = api_client
        self.settings = settings

    def sign_in(self, payload: SignInRequest) -> TokenRead:
        try:
            data = self.api_client.post(
                "/auth/login",
                form={"username": payload.email, "password": payload.password},
            )
        except UpstreamError as exc:
            if exc.upstream_status in (status.HTTP_400_BAD_REQUEST, status.HTTP_401_UNAUTHORIZED):
                logger.info("Sign-in rejected", email=payload.email)
                raise AppError(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    code="INVALID_CREDENTIALS",
                    message=exc.message,
                ) from exc
            raise
        logger.info("Agent signed in", email=payload.email)
        return TokenRead.model_validate(data)

    def current_agent(self) -> AgentRead:
        return AgentRead.model_validate(self.api_client.get("/auth/me"))

    def sign_out_url(self, subdomain: str | None) -> str:
        return self.settings.signin_url(subdomain)

    def register(self, payload: RegisterRequest) -> str:
        self.api_client.post(
            "/auth/register",
            json={
                "name": payload.name,
                "email": payload.email,
                "password": payload.password,
                "subdomain": payload.subdomain,
            },
        )
        logger.info("Workspace registered", subdomain=payload.subdomain)
        return self.settings.signin_url(payload.subdomain)

    def request_password_reset(self, payload: PasswordResetRequest) -> None:
        self.api_client.post("/auth/password-reset/request", json={"email": payload.email})

    def reset_password(self, payload: PasswordResetConfirm) -> None:
        self.api_client.post(
            "/auth/password-reset/confirm",
            json={"token": payload.token, "new_password": payload.new_password},
        )
