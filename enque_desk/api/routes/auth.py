from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from enque_desk.api.deps import (
    ApiClientDep,
    SessionDep,
    SettingsDep,
    get_access_token,
    get_subdomain,
)
from enque_desk.core.session import clear_session_cookie, set_session_cookie
from enque_desk.models.schemas.agent import AcceptInvitationRequest, AgentRead, AgentSignUpRequest
from enque_desk.models.schemas.auth import (
    PasswordResetConfirm,
    PasswordResetRequest,
    RegisterRequest,
    SignInRequest,
    SignInResponse,
)
from enque_desk.models.schemas.common import DataResponse, MessageResponse, RedirectTarget
from enque_desk.services.agent_service import AgentService
from enque_desk.services.auth_service import AuthService

router = APIRouter(prefix="/auth")

SubdomainDep = Annotated[str | None, Depends(get_subdomain)]


def get_auth_service(
    api_client: ApiClientDep,
    settings: SettingsDep,
    token: Annotated[str | None, Depends(get_access_token)],
) -> AuthService:
    return AuthService(api_client=api_client.with_token(token), settings=settings)


def get_signup_service(api_client: ApiClientDep) -> AgentService:
    return AgentService(api_client=api_client)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


@router.post("/signin", response_model=SignInResponse)
def sign_in(
    payload: SignInRequest,
    response: Response,
    auth_service: AuthServiceDep,
    settings: SettingsDep,
    subdomain: SubdomainDep,
) -> SignInResponse:
    token = auth_service.sign_in(payload)
    set_session_cookie(response, settings, token.access_token, token.expires_at)
    return SignInResponse(redirect_to=settings.platform_url(subdomain), expires_at=token.expires_at)


@router.get("/me", response_model=DataResponse[AgentRead])
def current_agent(
    _: SessionDep,
    auth_service: AuthServiceDep,
) -> DataResponse[AgentRead]:
    return DataResponse[AgentRead](data=auth_service.current_agent())


@router.post("/signout", response_model=RedirectTarget)
def sign_out(
    response: Response,
    auth_service: AuthServiceDep,
    settings: SettingsDep,
    subdomain: SubdomainDep,
) -> RedirectTarget:
    clear_session_cookie(response, settings)
    return RedirectTarget(redirect_to=auth_service.sign_out_url(subdomain))


@router.post("/register", response_model=RedirectTarget, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, auth_service: AuthServiceDep) -> RedirectTarget:
    return RedirectTarget(redirect_to=auth_service.register(payload))


@router.post("/signup", response_model=RedirectTarget, status_code=status.HTTP_201_CREATED)
def sign_up(
    payload: AgentSignUpRequest,
    agent_service: Annotated[AgentService, Depends(get_signup_service)],
    settings: SettingsDep,
    subdomain: SubdomainDep,
) -> RedirectTarget:
    agent_service.create_agent(payload)
    return RedirectTarget(redirect_to=settings.signin_url(subdomain))


@router.post("/accept-invitation", response_model=RedirectTarget)
def accept_invitation(
    payload: AcceptInvitationRequest,
    response: Response,
    agent_service: Annotated[AgentService, Depends(get_signup_service)],
    settings: SettingsDep,
    subdomain: SubdomainDep,
) -> RedirectTarget:
    token = agent_service.accept_invitation(payload)
    set_session_cookie(response, settings, token.access_token, token.expires_at)
    return RedirectTarget(redirect_to=settings.platform_url(subdomain))


@router.post(
    "/password-reset/request",
    response_model=MessageResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
def request_password_reset(
    payload: PasswordResetRequest,
    auth_service: AuthServiceDep,
) -> MessageResponse:
    auth_service.request_password_reset(payload)
    return MessageResponse(message="If the email exists, a reset link has been sent.")


@router.post("/password-reset/confirm", response_model=MessageResponse)
def confirm_password_reset(
    payload: PasswordResetConfirm,
    auth_service: AuthServiceDep,
) -> MessageResponse:
    auth_service.reset_password(payload)
    return MessageResponse(message="Password updated.")
