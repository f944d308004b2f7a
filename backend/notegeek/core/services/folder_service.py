from __future__ import annotations

from typing import TYPE_CHECKING

from notegeek.core.exceptions import Conflict, NotFound, ValidationFailed
from notegeek.core.models.folder import Folder
from notegeek.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from notegeek.core.repositories.folder_repository import FolderRepository
    from notegeek.core.repositories.note_repository import NoteRepository

logger = get_logger(__name__)

FOLDER_NOT_FOUND = "Folder not found or does not belong to user"


class FolderService:
    """Legacy folder management; kept for clients that still group notes by folder."""

    def __init__(self, repo: FolderRepository, note_repo: NoteRepository) -> None:
        self._repo = repo
        self._notes = note_repo

    async def list_folders(self, *, user_id: str) -> Sequence[Folder]:
        return await self._repo.list(user_id=user_id)

    async def create_folder(self, *, user_id: str, name: str | None) -> Folder:
        clean = self._clean_name(name)
        if await self._repo.find_by_name(user_id=user_id, name=clean):
            raise Conflict(f"Folder with name '{clean}' already exists")
        return await self._repo.create(Folder(user_id=user_id, name=clean))

    async def rename_folder(self, *, user_id: str, folder_id: UUID, name: str | None) -> Folder:
        clean = self._clean_name(name)
        if await self._repo.find_by_name(user_id=user_id, name=clean, exclude_id=folder_id):
            raise Conflict(f"Another folder with name '{clean}' already exists")
        await self._get_owned(user_id=user_id, folder_id=folder_id)
        renamed = await self._repo.rename(folder_id, clean)
        if not renamed:
            raise NotFound(FOLDER_NOT_FOUND)
        return renamed

    async def delete_folder(self, *, user_id: str, folder_id: UUID, delete_notes: bool = False) -> None:
        """Delete a folder, either removing its notes or detaching them."""
        await self._get_owned(user_id=user_id, folder_id=folder_id)

        if delete_notes:
            count = await self._notes.delete_in_folder(user_id=user_id, folder_id=folder_id)
            logger.info("Deleted %d notes associated with folder %s", count, folder_id)
        else:
            count = await self._notes.detach_folder(user_id=user_id, folder_id=folder_id)
            logger.info("Unassigned %d notes from folder %s", count, folder_id)

        await self._repo.delete(folder_id)

    async def _get_owned(self, *, user_id: str, folder_id: UUID) -> Folder:
        folder = await self._repo.get(folder_id)
        if not folder or folder.user_id != user_id:
            raise NotFound(FOLDER_NOT_FOUND)
        return folder

    @staticmethod
    def _clean_name(name: str | None) -> str:
        clean = (name or "").strip()
        if not clean:
            raise ValidationFailed("Folder name cannot be empty")
        return clean
