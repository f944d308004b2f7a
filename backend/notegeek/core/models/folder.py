from __future__ import annotations

from datetime import datetime  # noqa: TCH003
from uuid import UUID, uuid4

from pydantic import Field

from .base import AppBaseModel, utcnow


class Folder(AppBaseModel):
    """Legacy grouping of notes; name is unique per owner."""

    id: UUID = Field(default_factory=uuid4)
    user_id: str
    name: str = Field(..., min_length=1)
    created_at: datetime = Field(default_factory=utcnow)
