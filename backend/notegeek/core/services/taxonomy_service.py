from __future__ import annotations

from typing import TYPE_CHECKING

from notegeek.utils.logging import get_logger

if TYPE_CHECKING:
    from notegeek.core.repositories.note_repository import NoteRepository


logger = get_logger(__name__)


class TagService:
    """Tags are not stored on their own; they are projected from the user's notes."""

    def __init__(self, repo: NoteRepository) -> None:
        self._repo = repo

    async def list_tags(self, *, user_id: str) -> list[str]:
        """Return the distinct tags across the user's notes, sorted."""
        tag_set: set[str] = set()
        for tags in await self._repo.list_tag_sets(user_id=user_id):
            tag_set.update(tags)
        logger.debug("Collected %d tags for user %s", len(tag_set), user_id)
        return sorted(tag_set)
