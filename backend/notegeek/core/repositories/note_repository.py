from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from notegeek.core.models.note import Note
    from notegeek.core.schemas.note_search import NoteSearchResult


class NoteRepository(ABC):
    """Abstract repository interface for notes.

    Contract used by services and dependency injection. Implementations should
    perform I/O (database, network) and therefore expose async methods.
    Ownership checks are the caller's job; ``user_id`` arguments only scope queries.
    """

    @abstractmethod
    async def create(self, note: Note) -> Note:  # pragma: no cover - interface only
        """Persist a new note and return the stored entity."""

    @abstractmethod
    async def get(self, note_id: UUID) -> Note | None:  # pragma: no cover
        """Fetch a note by id or return None if not found."""

    @abstractmethod
    async def list(
        self,
        *,
        user_id: str | None = None,
        tag: str | None = None,
        prefix: str | None = None,
        folder_id: UUID | None = None,
    ) -> Sequence[Note]:  # pragma: no cover
        """Return notes ordered by update time descending.

        Args:
            user_id: Restrict to one owner (None means every owner, for maintenance jobs)
            tag: Keep notes having exactly this tag
            prefix: Keep notes having a tag that starts with this string
            folder_id: Keep notes in this legacy folder
        """

    @abstractmethod
    async def update_fields(self, note_id: UUID, changes: dict) -> Note | None:  # pragma: no cover
        """Partially update fields on a note and return the updated entity, or None if missing."""

    @abstractmethod
    async def delete(self, note_id: UUID) -> bool:  # pragma: no cover
        """Delete a note by id. Return True if a row was removed, False otherwise."""

    @abstractmethod
    async def delete_in_folder(self, *, user_id: str, folder_id: UUID) -> int:  # pragma: no cover
        """Delete the user's notes in a folder and return how many were removed."""

    @abstractmethod
    async def detach_folder(self, *, user_id: str, folder_id: UUID) -> int:  # pragma: no cover
        """Clear the folder association of the user's notes and return how many changed."""

    @abstractmethod
    async def list_tag_sets(self, *, user_id: str) -> list[list[str]]:  # pragma: no cover
        """Return the tags array of every note owned by the user."""

    @abstractmethod
    async def search_notes(self, *, user_id: str, query: str) -> Sequence[NoteSearchResult]: ...
