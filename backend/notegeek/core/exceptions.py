"""Domain exceptions raised by services and mapped to HTTP responses.

Each exception carries the status code it is rendered with, so endpoints stay
free of translation logic.
"""
from __future__ import annotations

from typing import Any


class NoteGeekError(Exception):
    """Base exception for all NoteGeek errors.

    Attributes:
        message: Human-readable error message
        details: Additional context about the error
    """

    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"message": self.message}
        data.update(self.details)
        return data


class ValidationFailed(NoteGeekError):
    """Raised when request data is missing or malformed."""

    status_code = 400


class Unauthorized(NoteGeekError):
    """Raised when a credential is missing, malformed, expired or wrong."""

    status_code = 401


class Forbidden(NoteGeekError):
    """Raised when the owner may not perform an operation on a note in its current state."""

    status_code = 403


class NotFound(NoteGeekError):
    """Raised when an entity does not exist or is not owned by the caller."""

    status_code = 404


class Conflict(NoteGeekError):
    """Raised when a uniqueness rule would be broken."""

    status_code = 409


class TooManyRequests(NoteGeekError):
    status_code = 429

    def __init__(self, message: str, headers: dict[str, str] | None = None):
        super().__init__(message)
        self.headers = headers or {}
