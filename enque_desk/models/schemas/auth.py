import re
from datetime import datetime

from pydantic import BaseModel, EmailStr, ValidationInfo, field_validator

from enque_desk.models.schemas.common import UpstreamModel

COMMON_PASSWORDS = frozenset(
    {
        "password",
        "123456",
        "password123",
        "admin",
        "qwerty",
        "letmein",
        "welcome",
        "monkey",
        "dragon",
        "master",
        "hello",
        "freedom",
        "whatever",
        "qazwsx",
        "trustno1",
    }
)
SPECIAL_CHARACTER_RE = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?~`]")
REGISTER_SUBDOMAIN_RE = re.compile(r"[a-z][a-z0-9-]*")


def require_min_length(value: str, minimum: int, label: str) -> str:
    if len(value) < minimum:
        raise ValueError(f"{label} must be at least {minimum} characters long")
    return value


def validate_strong_password(value: str) -> str:
    """Password rules shared by the reset and invitation forms."""
    if len(value) < 8:
        raise ValueError("Password must be at least 8 characters")
    if len(value) > 128:
        raise ValueError("Password cannot be more than 128 characters")
    if not re.search(r"[a-z]", value):
        raise ValueError("Must contain at least one lowercase letter")
    if not re.search(r"[A-Z]", value):
        raise ValueError("Must contain at least one uppercase letter")
    if not re.search(r"\d", value):
        raise ValueError("Must contain at least one number")
    if not SPECIAL_CHARACTER_RE.search(value):
        raise ValueError("Must contain at least one special character")
    if value.lower() in COMMON_PASSWORDS:
        raise ValueError("Cannot be a common password")
    return value


def require_matching(value: str, info: ValidationInfo, field: str) -> str:
    # The compared field is missing from info.data when it failed its own validation.
    if field in info.data and info.data[field] != value:
        raise ValueError("Passwords do not match")
    return value


class SignInRequest(BaseModel):
    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def _password_length(cls, value: str) -> str:
        return require_min_length(value, 8, "Password")


class TokenRead(UpstreamModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime | None = None


class SignInResponse(BaseModel):
    redirect_to: str
    expires_at: datetime | None = None


class RegisterRequest(BaseModel):
    name: str
    email: EmailStr
    password: str
    confirm_password: str
    subdomain: str

    @field_validator("password")
    @classmethod
    def _password_length(cls, value: str) -> str:
        return require_min_length(value, 8, "Password")

    @field_validator("confirm_password")
    @classmethod
    def _passwords_match(cls, value: str, info: ValidationInfo) -> str:
        return require_matching(value, info, "password")

    @field_validator("subdomain")
    @classmethod
    def _subdomain_format(cls, value: str) -> str:
        if not REGISTER_SUBDOMAIN_RE.fullmatch(value):
            raise ValueError(
                "Subdomain must start with a lowercase letter and contain only "
                "lowercase letters, numbers and hyphens"
            )
        return value


class PasswordResetRequest(BaseModel):
    email: EmailStr


class PasswordResetConfirm(BaseModel):
    token: str
    new_password: str
    confirm_password: str

    @field_validator("new_password")
    @classmethod
    def _strong_password(cls, value: str) -> str:
        return validate_strong_password(value)

    @field_validator("confirm_password")
    @classmethod
    def _passwords_match(cls, value: str, info: ValidationInfo) -> str:
        return require_matching(value, info, "new_password")
