from __future__ import annotations

from pydantic import ConfigDict, Field

from notegeek.core.models.base import AppBaseModel


class AuthUser(AppBaseModel):
    """Authenticated user attached to a request after token verification."""

    id: str
    email: str


class TokenClaims(AppBaseModel):
    """Claims carried by NoteGeek and GeekBase tokens.

    Token payloads are untrusted input: they are validated against this schema
    after the signature check instead of being read as free-form JSON.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1)
    email: str | None = None
    username: str | None = None
    app: str | None = None
    exp: int | None = None
