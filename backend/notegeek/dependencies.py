from __future__ import annotations

import math
import time
from contextlib import contextmanager
from typing import TYPE_CHECKING

from fastapi import Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from notegeek.config import settings
from notegeek.core.exceptions import NoteGeekError, TooManyRequests, Unauthorized
from notegeek.core.repositories.implementations.supabase.folder_repository import (
    SupabaseFolderRepository,
)
from notegeek.core.repositories.implementations.supabase.note_repository import (
    SupabaseNoteRepository,
)
from notegeek.core.repositories.implementations.supabase.user_repository import (
    SupabaseUserRepository,
)
from notegeek.core.schemas.auth import AuthUser  # noqa: TCH001
from notegeek.core.services.auth_service import AuthService
from notegeek.core.services.folder_service import FolderService
from notegeek.core.services.note_service import NoteService
from notegeek.core.services.search_service import SearchService
from notegeek.core.services.taxonomy_service import TagService
from notegeek.db.base import get_supabase_admin_client
from notegeek.utils.logging import get_logger

logger = get_logger(__name__)

# Use auto_error=False to handle missing tokens gracefully
http_bearer = HTTPBearer(auto_error=False)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from supabase import Client

    from notegeek.core.repositories.folder_repository import FolderRepository
    from notegeek.core.repositories.note_repository import NoteRepository
    from notegeek.core.repositories.user_repository import UserRepository


# In-memory rate limiting of failed auth attempts
_failed_attempts: dict[str, list[float]] = {}


def _identifier(request: Request, operation: str) -> str:
    client_ip = request.client.host if request.client else "unknown"
    return f"{operation}:{client_ip}"


def _recent_failures(identifier: str, now: float) -> list[float]:
    """Drop failures outside the window; identifiers with none left are forgotten."""
    window_start = now - settings.login_attempt_window
    attempts = [a for a in _failed_attempts.get(identifier, []) if a > window_start]
    if attempts:
        _failed_attempts[identifier] = attempts
    else:
        _failed_attempts.pop(identifier, None)
    return attempts


def _is_rate_limited(identifier: str) -> bool:
    """Check if the identifier has used up its failed attempts."""
    if not settings.enable_rate_limiting:
        return False
    return len(_recent_failures(identifier, time.time())) >= settings.max_login_attempts


def record_failed_attempt(request: Request, operation: str) -> None:
    if not settings.enable_rate_limiting:
        return
    identifier = _identifier(request, operation)
    now = time.time()
    _recent_failures(identifier, now)
    _failed_attempts.setdefault(identifier, []).append(now)


def reset_rate_limits() -> None:
    _failed_attempts.clear()


def rate_limit_by_ip(request: Request, operation: str = "default") -> None:
    """Rate limiting check called by the public auth endpoints.

    Only failed attempts count towards the limit; see ``record_failed_attempt``.

    Args:
        request: FastAPI request object
        operation: Operation identifier for rate limiting (e.g., "login", "register")

    Raises:
        TooManyRequests: If rate limit is exceeded
    """
    identifier = _identifier(request, operation)
    if _is_rate_limited(identifier):
        client_ip = request.client.host if request.client else "unknown"
        logger.warning(f"Rate limited {operation} attempt", extra={"ip": client_ip})

        now = time.time()
        window_seconds = settings.login_attempt_window
        limit = settings.max_login_attempts

        attempts = _failed_attempts.get(identifier, [])
        earliest_attempt = min(attempts) if attempts else now
        seconds_until_reset = max(1, math.ceil(window_seconds - (now - earliest_attempt)))

        headers = {
            "Retry-After": str(seconds_until_reset),
            "RateLimit-Limit": str(limit),
            "RateLimit-Remaining": "0",
            "RateLimit-Reset": str(seconds_until_reset),
        }

        raise TooManyRequests(
            f"Too many {operation} attempts. Please try again later.",
            headers=headers,
        )


@contextmanager
def throttled_attempt(request: Request, operation: str) -> Iterator[None]:
    """Reject the attempt when throttled; count it if the wrapped call fails."""
    rate_limit_by_ip(request, operation)
    try:
        yield
    except NoteGeekError:
        record_failed_attempt(request, operation)
        raise


def get_db_client() -> Client:
    return get_supabase_admin_client()


def get_note_repository(client: Client = Depends(get_db_client)) -> NoteRepository:
    return SupabaseNoteRepository(client)


def get_folder_repository(client: Client = Depends(get_db_client)) -> FolderRepository:
    return SupabaseFolderRepository(client)


def get_user_repository(client: Client = Depends(get_db_client)) -> UserRepository:
    return SupabaseUserRepository(client)


def get_note_service(
    repo: NoteRepository = Depends(get_note_repository),
    folder_repo: FolderRepository = Depends(get_folder_repository),
) -> NoteService:
    """Get a request-scoped note service instance."""
    return NoteService(repo, folder_repo)


def get_search_service(repo: NoteRepository = Depends(get_note_repository)) -> SearchService:
    return SearchService(repo)


def get_tag_service(repo: NoteRepository = Depends(get_note_repository)) -> TagService:
    return TagService(repo)


def get_folder_service(
    repo: FolderRepository = Depends(get_folder_repository),
    note_repo: NoteRepository = Depends(get_note_repository),
) -> FolderService:
    return FolderService(repo, note_repo)


def get_auth_service(users: UserRepository = Depends(get_user_repository)) -> AuthService:
    """Get a request-scoped auth service instance."""
    return AuthService(users)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Security(http_bearer),
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthUser:
    """Validate the bearer JWT and return the user it belongs to."""
    if not credentials or not credentials.credentials:
        raise Unauthorized("Not authorized, no token")
    jwt = credentials.credentials
    if len(jwt.split(".")) != 3:
        raise Unauthorized("Invalid token")
    return await auth_service.authenticate_token(jwt)
