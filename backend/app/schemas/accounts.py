"""
Demo account service schemas.

Fields are optional at the schema level so a missing one produces the
demo's own "All fields are required." error rather than a validation
envelope.
"""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class AccountRegisterRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    password: str | None = None


class AccountLoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class AccountResponse(BaseModel):
    """Account as shown to callers; the password hash never leaves the service."""

    id: UUID
    name: str
    email: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AccountMessage(BaseModel):
    message: str
    user: AccountResponse
