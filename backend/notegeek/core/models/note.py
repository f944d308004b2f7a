from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from pydantic import Field

from .base import TimestampedModel

DEFAULT_TITLE = "Untitled Note"
MAX_TAG_LENGTH = 100

CONTENT_REQUIRED_MESSAGE = "Note content cannot be empty"
INVALID_TAGS_MESSAGE = (
    "Tags must be unique, non-empty, and contain only letters, numbers, "
    "underscores, hyphens, and forward slashes"
)
INVALID_TYPE_MESSAGE = "Invalid note type"

_TAG_PATTERN = re.compile(r"[a-zA-Z0-9/_-]+")

TagHierarchy = dict[str, "TagHierarchy | None"]


class NoteType(str, Enum):
    """How the note content is interpreted by the editors."""

    TEXT = "text"
    MARKDOWN = "markdown"
    CODE = "code"
    MINDMAP = "mindmap"
    HANDWRITTEN = "handwritten"


class Note(TimestampedModel):
    """Note domain model, one row of the ``notes`` table."""

    id: UUID = Field(default_factory=uuid4, description="Unique note identifier")
    user_id: str = Field(..., description="Owner of the note")

    title: str | None = Field(default=None, description="Note title")
    content: str = Field(..., description="Note content; format depends on type")
    type: NoteType = Field(default=NoteType.TEXT, description="Type of note")
    tags: list[str] = Field(default_factory=list, description="Slash-hierarchical tags")

    # Legacy folder association, superseded by folder/<name> tags
    folder_id: UUID | None = None

    is_locked: bool = False
    is_encrypted: bool = False
    lock_hash: str | None = None

    @property
    def tag_hierarchy(self) -> TagHierarchy:
        """Nested mapping of tag path segments; leaf segments map to None."""
        return build_tag_hierarchy(self.tags)


def build_tag_hierarchy(tags: list[str]) -> TagHierarchy:
    hierarchy: TagHierarchy = {}
    for tag in tags:
        node = hierarchy
        segments = [s for s in tag.split("/") if s]
        for i, segment in enumerate(segments):
            is_leaf = i == len(segments) - 1
            if is_leaf:
                node.setdefault(segment, None)
                break
            child = node.get(segment)
            if child is None:
                child = {}
                node[segment] = child
            node = child
    return hierarchy


@dataclass
class FieldError:
    field: str
    message: str


@dataclass
class ValidationResult:
    """Outcome of validating a note document; ``ok`` is False when errors exist."""

    errors: list[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def message(self) -> str:
        return "; ".join(e.message for e in self.errors)


def validate_note_fields(*, content: Any, tags: Any, type: Any) -> ValidationResult:
    """Check the stored-document invariants of a note.

    Tags are not normalized here: any tag that is empty, too long, contains
    a disallowed character or repeats another tag fails the whole list.
    """
    result = ValidationResult()

    if not isinstance(content, str) or not content:
        result.errors.append(FieldError("content", CONTENT_REQUIRED_MESSAGE))

    if not _tags_are_valid(tags):
        result.errors.append(FieldError("tags", INVALID_TAGS_MESSAGE))

    if isinstance(type, NoteType):
        pass
    elif type not in {t.value for t in NoteType}:
        result.errors.append(FieldError("type", INVALID_TYPE_MESSAGE))

    return result


def _tags_are_valid(tags: Any) -> bool:
    if not isinstance(tags, list):
        return False
    seen: set[str] = set()
    for tag in tags:
        if not isinstance(tag, str) or not tag or len(tag) > MAX_TAG_LENGTH:
            return False
        if not _TAG_PATTERN.fullmatch(tag) or tag in seen:
            return False
        seen.add(tag)
    return True
