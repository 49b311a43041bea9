"""
Agent sessions carried by the ``accessToken`` cookie.

The BFF never verifies the JWT signature itself; the REST API does that on
every call. The claims are only decoded to know who is signed in and which
workspace the session belongs to.
"""

from datetime import datetime
from typing import Any

from fastapi import Response, status
from jose import jwt
from jose.exceptions import JOSEError
from pydantic import BaseModel

from enque_desk.core.config import Settings
from enque_desk.core.errors import AppError


class UserSession(BaseModel):
    id: int | str
    name: str = "Enque User"
    email: str = ""
    role: str = "user"
    workspace_id: int | None = None
    job_title: str | None = None
    phone_number: str | None = None
    email_signature: str | None = None
    avatar: str | None = None
    iat: int | None = None
    exp: int | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def decode_session(token: str | None) -> UserSession | None:
    """Read the session claims from an access token, or ``None`` when it cannot be decoded."""
    if not token:
        return None
    try:
        claims = jwt.get_unverified_claims(token)
    except JOSEError:
        return None

    subject = claims.get("sub")
    if subject is None:
        return None
    agent_id = _as_int(subject)

    return UserSession(
        id=agent_id if agent_id is not None else str(subject),
        name=claims.get("name") or "Enque User",
        email=claims.get("email") or "",
        role=claims.get("role") or "user",
        workspace_id=_as_int(claims.get("workspace_id")),
        job_title=claims.get("job_title"),
        phone_number=claims.get("phone_number"),
        email_signature=claims.get("email_signature"),
        avatar=claims.get("avatar"),
        iat=_as_int(claims.get("iat")),
        exp=_as_int(claims.get("exp")),
    )


def cookie_domain(settings: Settings) -> str | None:
    if settings.app_host == "localhost":
        return None
    return f".{settings.app_host}"


def set_session_cookie(
    response: Response,
    settings: Settings,
    token: str,
    expires_at: datetime | None = None,
) -> None:
    response.set_cookie(
        key=settings.access_token_cookie,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
        expires=expires_at,
        domain=cookie_domain(settings),
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.access_token_cookie,
        path="/",
        domain=cookie_domain(settings),
    )


def require_workspace_id(session: UserSession) -> int:
    if session.workspace_id is None:
        raise AppError(
            status_code=status.HTTP_400_BAD_REQUEST,
            code="INVALID_WORKSPACE",
            message="The session is not bound to a workspace.",
            details={"agent_id": session.id},
        )
    return session.workspace_id
