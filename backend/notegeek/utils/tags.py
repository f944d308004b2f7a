"""Normalization helpers for user-entered tags.

These are lenient: whitespace becomes underscores and duplicates are dropped.
Note persistence does not call them; stored notes are checked by the stricter
rules in ``notegeek.core.models.note``.
"""
from __future__ import annotations

import re
from typing import Any

_WHITESPACE = re.compile(r"\s+")
_ALLOWED = re.compile(r"[a-zA-Z0-9_\-/]+")


def format_tag(tag: Any) -> str:
    """Return ``tag`` trimmed, with whitespace runs turned into ``_``.

    Raises:
        ValueError: if the tag is not a string, is empty after trimming or
            contains characters other than letters, digits, ``_``, ``-`` and ``/``.
    """
    if not isinstance(tag, str):
        raise ValueError("Tag must be a string")

    formatted = _WHITESPACE.sub("_", tag.strip())

    if not formatted:
        raise ValueError("Tag cannot be empty")

    if not _ALLOWED.fullmatch(formatted):
        raise ValueError(
            "Tag can only contain letters, numbers, underscores, hyphens, and forward slashes"
        )

    return formatted


def validate_tags(tags: Any) -> list[str]:
    """Format every tag and drop duplicates, keeping first-seen order."""
    if not isinstance(tags, list):
        raise ValueError("Tags must be an array")

    formatted = [format_tag(tag) for tag in tags]
    return list(dict.fromkeys(formatted))
