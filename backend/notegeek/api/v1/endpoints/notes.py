from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TCH003

from fastapi import APIRouter, Depends, Query, status

from notegeek.api.v1.schemas.note import (
    LockedNoteRead,
    NoteCreate,
    NoteDeleted,
    NoteRead,
    NoteUpdate,
    present_note,
)
from notegeek.core.schemas.taxonomy import TagNode
from notegeek.dependencies import get_current_user, get_note_service

if TYPE_CHECKING:
    from notegeek.core.schemas.auth import AuthUser
    from notegeek.core.services.note_service import NoteService

router = APIRouter()


@router.post("", response_model=NoteRead | LockedNoteRead, status_code=status.HTTP_201_CREATED)
async def create_note(
    payload: NoteCreate,
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    note = await service.create_note(payload, user_id=current_user.id)
    return present_note(note)


@router.get("", response_model=list[NoteRead | LockedNoteRead])
async def list_notes(
    tag: str | None = None,
    prefix: str | None = None,
    folder_id: UUID | None = Query(default=None, alias="folderId"),
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    """List the caller's notes, newest update first.

    ``tag`` matches one tag exactly; ``prefix`` matches any tag starting with it.
    Locked notes are listed without their content.
    """
    notes = await service.list_notes(current_user.id, tag=tag, prefix=prefix, folder_id=folder_id)
    return [present_note(n) for n in notes]


@router.get("/tags", response_model=dict[str, TagNode])
async def get_tag_hierarchy(
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    return await service.tag_hierarchy(current_user.id)


@router.get("/{note_id}", response_model=NoteRead | LockedNoteRead)
async def get_note(
    note_id: UUID,
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    note = await service.get_note(note_id, user_id=current_user.id)
    return present_note(note)


@router.put("/{note_id}", response_model=NoteRead)
async def update_note(
    note_id: UUID,
    payload: NoteUpdate,
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    note = await service.update_note(note_id, payload, user_id=current_user.id)
    return present_note(note)


@router.delete("/{note_id}", response_model=NoteDeleted)
async def delete_note(
    note_id: UUID,
    current_user: AuthUser = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
):
    await service.delete_note(note_id, user_id=current_user.id)
    return NoteDeleted()
