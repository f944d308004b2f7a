from __future__ import annotations

from notegeek.core.models.note import Note


class NoteSearchResult(Note):
    """Note row returned by full-text search together with its relevance score."""

    rank: float = 0.0
