from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends

from notegeek.api.v1.schemas.note import (
    LockedNoteSearchHit,
    NoteSearchHit,
    present_search_result,
)
from notegeek.dependencies import get_current_user, get_search_service

if TYPE_CHECKING:
    from notegeek.core.schemas.auth import AuthUser
    from notegeek.core.services.search_service import SearchService

router = APIRouter()


@router.get("", response_model=list[NoteSearchHit | LockedNoteSearchHit])
async def search_notes(
    q: str | None = None,
    current_user: AuthUser = Depends(get_current_user),
    service: SearchService = Depends(get_search_service),
):
    """Search notes for the authenticated user.

    Uses lexical search with server-side ranking; locked notes come back
    without content.
    """
    results = await service.search_notes(user_id=current_user.id, query=q)
    return [present_search_result(r) for r in results]
