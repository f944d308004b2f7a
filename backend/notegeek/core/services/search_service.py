from __future__ import annotations

from typing import TYPE_CHECKING

from notegeek.core.exceptions import ValidationFailed

if TYPE_CHECKING:
    from collections.abc import Sequence

    from notegeek.core.repositories.note_repository import NoteRepository
    from notegeek.core.schemas.note_search import NoteSearchResult


class SearchService:
    """Service for searching notes.

    Keeps application logic (validation, ordering) outside transport layer.
    """

    def __init__(self, repo: NoteRepository) -> None:
        self._repo = repo

    async def search_notes(self, *, user_id: str, query: str | None) -> Sequence[NoteSearchResult]:
        """Full-text search over title, content and tags, best match first."""
        cleaned = (query or "").strip()
        if not cleaned:
            raise ValidationFailed("Search query cannot be empty")

        results = await self._repo.search_notes(user_id=user_id, query=cleaned)
        return sorted(results, key=lambda r: r.rank, reverse=True)
