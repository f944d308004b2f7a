from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from notegeek.core.models.folder import Folder


class FolderRepository(ABC):
    """Abstract repository interface for legacy folders."""

    @abstractmethod
    async def create(self, folder: Folder) -> Folder:  # pragma: no cover - interface only
        ...

    @abstractmethod
    async def get(self, folder_id: UUID) -> Folder | None:  # pragma: no cover
        ...

    @abstractmethod
    async def list(self, *, user_id: str | None = None) -> Sequence[Folder]:  # pragma: no cover
        """Return folders sorted by name; all owners when ``user_id`` is None."""

    @abstractmethod
    async def find_by_name(
        self, *, user_id: str, name: str, exclude_id: UUID | None = None
    ) -> Folder | None:  # pragma: no cover
        """Exact, case-sensitive lookup of a user's folder by name."""

    @abstractmethod
    async def rename(self, folder_id: UUID, name: str) -> Folder | None:  # pragma: no cover
        ...

    @abstractmethod
    async def delete(self, folder_id: UUID) -> bool:  # pragma: no cover
        ...
