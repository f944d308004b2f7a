from __future__ import annotations

from datetime import datetime  # noqa: TCH003

from pydantic import Field

from notegeek.core.models.base import CamelModel


class CredentialsRequest(CamelModel):
    """Email and password, used by both register and login.

    Fields are optional here so that missing values get the same 400 message
    as empty ones.
    """

    email: str | None = Field(default=None, description="User's email address")
    password: str | None = Field(default=None, description="User's password")


class SSOValidateRequest(CamelModel):
    token: str | None = Field(default=None, description="Token issued by GeekBase")


class AuthResponse(CamelModel):
    """User identity plus the bearer token to use for API calls."""

    id: str
    email: str
    created_at: datetime
    token: str


class UserRead(CamelModel):
    id: str
    email: str
