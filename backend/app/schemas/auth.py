"""
Auth request/response schemas.
"""
from datetime import datetime
from uuid import UUID

from pydantic import ConfigDict, EmailStr, field_validator, model_validator

from app.schemas.common import ApiModel, Envelope

NAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 6


def _check_name(v: str | None) -> str | None:
    if v is None:
        return None
    v = " ".join(v.split())
    if not v or len(v) > NAME_MAX_LENGTH:
        raise ValueError(f"Name must be between 1 and {NAME_MAX_LENGTH} characters")
    return v


def _check_password(v: str) -> str:
    if len(v) < PASSWORD_MIN_LENGTH:
        raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    return v


class RegisterRequest(ApiModel):
    """Payload for POST /auth/register."""

    name: str
    email: EmailStr
    password: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _check_name(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _check_password(v)


class LoginRequest(ApiModel):
    """Payload for POST /auth/login."""

    email: EmailStr
    password: str


class UpdateProfileRequest(ApiModel):
    """Payload for PUT /auth/profile. Omitted fields are left alone."""

    name: str | None = None
    email: EmailStr | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return _check_name(v)

    @model_validator(mode="after")
    def require_one_field(self) -> "UpdateProfileRequest":
        if self.name is None and self.email is None:
            raise ValueError("Provide a name or an email to update")
        return self


class ChangePasswordRequest(ApiModel):
    """Payload for POST /auth/change-password."""

    current_password: str
    new_password: str

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v: str) -> str:
        return _check_password(v)


class UserResponse(ApiModel):
    """Public-facing user profile."""

    id: UUID
    name: str
    email: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuthSession(ApiModel):
    """Returned by register and login."""

    user: UserResponse
    token: str
    token_type: str = "bearer"


AuthEnvelope = Envelope[AuthSession]
UserEnvelope = Envelope[UserResponse]
MessageEnvelope = Envelope[None]
