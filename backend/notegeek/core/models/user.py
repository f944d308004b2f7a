from __future__ import annotations

from datetime import datetime  # noqa: TCH003
from uuid import uuid4

from pydantic import Field, field_validator

from .base import AppBaseModel, utcnow


class User(AppBaseModel):
    """Account record. Ids are strings so that SSO-issued ids can be adopted as-is."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    email: str
    password_hash: str
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()
