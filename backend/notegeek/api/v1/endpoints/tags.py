from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends

from notegeek.dependencies import get_current_user, get_tag_service

if TYPE_CHECKING:
    from notegeek.core.schemas.auth import AuthUser
    from notegeek.core.services.taxonomy_service import TagService


router = APIRouter()


@router.get("", response_model=list[str])
async def list_tags(
    current_user: AuthUser = Depends(get_current_user),
    service: TagService = Depends(get_tag_service),
) -> list[str]:
    """Return every distinct tag used in the caller's notes, sorted."""
    return await service.list_tags(user_id=current_user.id)
