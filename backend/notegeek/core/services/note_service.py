from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING
from uuid import UUID

from notegeek.config import settings
from notegeek.core.exceptions import Forbidden, NotFound, ValidationFailed
from notegeek.core.models.note import DEFAULT_TITLE, Note, NoteType, validate_note_fields
from notegeek.core.schemas.taxonomy import TagNode
from notegeek.utils.logging import get_logger
from notegeek.utils.security import hash_secret

if TYPE_CHECKING:
    from collections.abc import Sequence

    from notegeek.api.v1.schemas.note import NoteCreate, NoteUpdate
    from notegeek.core.repositories.folder_repository import FolderRepository
    from notegeek.core.repositories.note_repository import NoteRepository

logger = get_logger(__name__)

NOTE_NOT_FOUND = "Note not found or does not belong to user"
FOLDER_NOT_FOUND = "Folder not found or does not belong to user"


class NoteService:
    """Service for managing notes with user-scoped access."""

    def __init__(self, repo: NoteRepository, folder_repo: FolderRepository) -> None:
        self._repo = repo
        self._folders = folder_repo

    async def create_note(self, create_dto: NoteCreate, user_id: str) -> Note:
        """Validate and store a new note owned by ``user_id``."""
        tags = create_dto.tags if create_dto.tags is not None else []
        note_type = create_dto.type or NoteType.TEXT.value

        self._raise_if_invalid(content=create_dto.content, tags=tags, note_type=note_type)

        if create_dto.folder_id is not None:
            await self._require_folder(create_dto.folder_id, user_id)

        lock_hash = None
        if create_dto.is_locked:
            password = create_dto.lock_password or ""
            if len(password) < settings.min_lock_password_length:
                raise ValidationFailed(
                    f"A password of at least {settings.min_lock_password_length} "
                    "characters is required to lock the note"
                )
            lock_hash = await asyncio.to_thread(hash_secret, password)

        note = Note(
            user_id=user_id,
            title=(create_dto.title or "").strip() or DEFAULT_TITLE,
            content=create_dto.content,
            type=NoteType(note_type),
            tags=tags,
            folder_id=create_dto.folder_id,
            is_locked=bool(create_dto.is_locked),
            is_encrypted=bool(create_dto.is_encrypted),
            lock_hash=lock_hash,
        )
        created = await self._repo.create(note)
        logger.info("Note created", extra={"note_id": str(created.id), "user_id": user_id})
        return created

    async def get_note(self, note_id: str | UUID, user_id: str) -> Note:
        """Return the note if it exists and belongs to the user.

        Notes owned by someone else are reported exactly like missing ones.
        """
        try:
            note_uuid = UUID(str(note_id))
        except ValueError as err:
            raise ValidationFailed("Invalid Note ID format") from err
        note = await self._repo.get(note_uuid)
        if not note or note.user_id != user_id:
            raise NotFound(NOTE_NOT_FOUND)
        return note

    async def list_notes(
        self,
        user_id: str,
        *,
        tag: str | None = None,
        prefix: str | None = None,
        folder_id: UUID | None = None,
    ) -> Sequence[Note]:
        """List the user's notes, most recently updated first."""
        return await self._repo.list(user_id=user_id, tag=tag, prefix=prefix, folder_id=folder_id)

    async def update_note(self, note_id: str | UUID, update_dto: NoteUpdate, user_id: str) -> Note:
        """Apply the fields present in ``update_dto`` to an unlocked, unencrypted note."""
        existing = await self.get_note(note_id, user_id)
        self._ensure_mutable(existing, action="update")

        changes = update_dto.model_dump(exclude_unset=True)
        allowed_fields = {"title", "content", "tags", "type", "folder_id"}
        changes = {k: v for k, v in changes.items() if k in allowed_fields}

        if "tags" in changes and changes["tags"] is None:
            changes["tags"] = []
        if "type" in changes and changes["type"] is None:
            changes.pop("type")

        self._raise_if_invalid(
            content=changes.get("content", existing.content),
            tags=changes.get("tags", existing.tags),
            note_type=changes.get("type", existing.type),
        )
        if "type" in changes:
            changes["type"] = NoteType(changes["type"])

        if changes.get("folder_id") is not None:
            await self._require_folder(changes["folder_id"], user_id)

        updated = await self._repo.update_fields(existing.id, changes)
        if not updated:
            raise NotFound(NOTE_NOT_FOUND)
        return updated

    async def delete_note(self, note_id: str | UUID, user_id: str) -> None:
        note = await self.get_note(note_id, user_id)
        self._ensure_mutable(note, action="delete")
        if not await self._repo.delete(note.id):
            raise NotFound(NOTE_NOT_FOUND)
        logger.info("Note deleted", extra={"note_id": str(note.id), "user_id": user_id})

    async def tag_hierarchy(self, user_id: str) -> dict[str, TagNode]:
        """Count tag path segments across all of the user's notes."""
        root: dict[str, TagNode] = {}
        for tags in await self._repo.list_tag_sets(user_id=user_id):
            for tag in tags:
                level = root
                segments = [s for s in tag.split("/") if s]
                for i, segment in enumerate(segments):
                    node = level.setdefault(segment, TagNode())
                    node.count += 1
                    if i < len(segments) - 1:
                        if node.children is None:
                            node.children = {}
                        level = node.children
        return root

    @staticmethod
    def _ensure_mutable(note: Note, *, action: str) -> None:
        # There is no unlock flow, so locked and encrypted notes stay read-only
        if note.is_locked:
            raise Forbidden(f"Cannot {action} a locked note. Please unlock first.")
        if note.is_encrypted:
            raise Forbidden(f"Cannot {action} an encrypted note yet.")

    @staticmethod
    def _raise_if_invalid(*, content, tags, note_type) -> None:
        result = validate_note_fields(content=content, tags=tags, type=note_type)
        if not result.ok:
            raise ValidationFailed(
                result.message,
                details={"errors": [{"field": e.field, "message": e.message} for e in result.errors]},
            )

    async def _require_folder(self, folder_id: UUID, user_id: str) -> None:
        folder = await self._folders.get(folder_id)
        if not folder or folder.user_id != user_id:
            raise NotFound(FOLDER_NOT_FOUND)
