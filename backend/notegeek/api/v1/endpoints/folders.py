from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TCH003

from fastapi import APIRouter, Depends, Query, status

from notegeek.api.v1.schemas.folder import FolderRead, FolderWrite
from notegeek.dependencies import get_current_user, get_folder_service

if TYPE_CHECKING:
    from notegeek.core.schemas.auth import AuthUser
    from notegeek.core.services.folder_service import FolderService

router = APIRouter()


@router.get("", response_model=list[FolderRead])
async def list_folders(
    current_user: AuthUser = Depends(get_current_user),
    service: FolderService = Depends(get_folder_service),
):
    folders = await service.list_folders(user_id=current_user.id)
    return [FolderRead.model_validate(f) for f in folders]


@router.post("", response_model=FolderRead, status_code=status.HTTP_201_CREATED)
async def create_folder(
    payload: FolderWrite,
    current_user: AuthUser = Depends(get_current_user),
    service: FolderService = Depends(get_folder_service),
):
    folder = await service.create_folder(user_id=current_user.id, name=payload.name)
    return FolderRead.model_validate(folder)


@router.put("/{folder_id}", response_model=FolderRead)
async def update_folder(
    folder_id: UUID,
    payload: FolderWrite,
    current_user: AuthUser = Depends(get_current_user),
    service: FolderService = Depends(get_folder_service),
):
    folder = await service.rename_folder(user_id=current_user.id, folder_id=folder_id, name=payload.name)
    return FolderRead.model_validate(folder)


@router.delete("/{folder_id}")
async def delete_folder(
    folder_id: UUID,
    delete_notes: bool = Query(default=False, alias="deleteNotes"),
    current_user: AuthUser = Depends(get_current_user),
    service: FolderService = Depends(get_folder_service),
):
    """Delete a folder; ``deleteNotes=true`` also deletes the notes filed in it."""
    await service.delete_folder(user_id=current_user.id, folder_id=folder_id, delete_notes=delete_notes)
    return {"message": "Folder deleted successfully"}
