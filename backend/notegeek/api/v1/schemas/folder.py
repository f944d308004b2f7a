from __future__ import annotations

from datetime import datetime  # noqa: TCH003
from uuid import UUID  # noqa: TCH003

from notegeek.core.models.base import CamelModel


class FolderWrite(CamelModel):
    name: str | None = None


class FolderRead(CamelModel):
    id: UUID
    user_id: str
    name: str
    created_at: datetime
