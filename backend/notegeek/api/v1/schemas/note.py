from __future__ import annotations

from datetime import datetime  # noqa: TCH003
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TCH003

from pydantic import Field

from notegeek.core.models.base import CamelModel
from notegeek.core.models.note import NoteType  # noqa: TCH001

if TYPE_CHECKING:
    from notegeek.core.models.note import Note
    from notegeek.core.schemas.note_search import NoteSearchResult

LOCKED_MESSAGE = "Note is locked. Content not available without unlock."
LOCKED_SEARCH_MESSAGE = "Note is locked. Content not available."


class NoteCreate(CamelModel):
    # Checked by the note service so that failures carry domain messages
    title: str | None = Field(default=None, description="Note title")
    content: str | None = Field(default=None, description="Note content")
    type: str | None = Field(default=None, description="Type of note")
    tags: list[str] | None = Field(default=None, description="Slash-hierarchical tags")
    folder_id: UUID | None = None
    is_locked: bool = False
    is_encrypted: bool = False
    lock_password: str | None = Field(default=None, description="Password that locks this note")


class NoteUpdate(CamelModel):
    title: str | None = None
    content: str | None = None
    type: str | None = None
    tags: list[str] | None = None
    folder_id: UUID | None = None


class NoteMetadata(CamelModel):
    id: UUID
    user_id: str
    title: str | None
    type: NoteType
    tags: list[str]
    folder_id: UUID | None
    is_locked: bool
    is_encrypted: bool
    created_at: datetime
    updated_at: datetime


class NoteRead(NoteMetadata):
    content: str


class LockedNoteRead(NoteMetadata):
    """Metadata of a locked note; the content is withheld."""

    message: str = LOCKED_MESSAGE


class NoteSearchHit(NoteRead):
    score: float


class LockedNoteSearchHit(LockedNoteRead):
    score: float
    message: str = LOCKED_SEARCH_MESSAGE


class NoteDeleted(CamelModel):
    message: str = "Note deleted successfully"


def present_note(note: Note) -> NoteRead | LockedNoteRead:
    """Public view of a note; lock hashes are never exposed and locked content is withheld."""
    data = note.model_dump(exclude={"lock_hash", "content"})
    if note.is_locked:
        return LockedNoteRead(**data)
    return NoteRead(**data, content=note.content)


def present_search_result(result: NoteSearchResult) -> NoteSearchHit | LockedNoteSearchHit:
    data = result.model_dump(exclude={"lock_hash", "content", "rank"})
    if result.is_locked:
        return LockedNoteSearchHit(**data, score=result.rank)
    return NoteSearchHit(**data, content=result.content, score=result.rank)
