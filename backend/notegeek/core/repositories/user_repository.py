from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from notegeek.core.models.user import User


class UserRepository(ABC):
    """Abstract repository interface for user accounts."""

    @abstractmethod
    async def create(self, user: User) -> User:  # pragma: no cover - interface only
        """Persist a new user and return the stored entity."""

    @abstractmethod
    async def get(self, user_id: str) -> User | None:  # pragma: no cover
        ...

    @abstractmethod
    async def get_by_email(self, email: str) -> User | None:  # pragma: no cover
        """Lookup by lowercased email."""
