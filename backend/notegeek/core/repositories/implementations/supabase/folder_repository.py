from __future__ import annotations

from typing import TYPE_CHECKING, Any

from notegeek.core.models.folder import Folder
from notegeek.core.repositories.folder_repository import FolderRepository

from .base import first_row, run_blocking

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from supabase import Client


class SupabaseFolderRepository(FolderRepository):
    """Supabase implementation of the FolderRepository.

    Expects a `folders` table with a unique (user_id, name) constraint.
    """

    TABLE_NAME = "folders"

    def __init__(self, client: Client) -> None:
        self._client: Client = client

    async def create(self, folder: Folder) -> Folder:
        row = folder.model_dump(mode="json")
        resp = await run_blocking(
            lambda: self._client.table(self.TABLE_NAME).insert(row).execute()
        )
        return Folder.model_validate(first_row(resp.data))

    async def get(self, folder_id: UUID) -> Folder | None:
        resp = await run_blocking(
            lambda: self._client.table(self.TABLE_NAME)
            .select("*")
            .eq("id", str(folder_id))
            .limit(1)
            .execute()
        )
        items = resp.data or []
        return Folder.model_validate(items[0]) if items else None

    async def list(self, *, user_id: str | None = None) -> Sequence[Folder]:
        def _query():
            q = self._client.table(self.TABLE_NAME).select("*")
            if user_id is not None:
                q = q.eq("user_id", user_id)
            return q.order("name").execute()

        resp = await run_blocking(_query)
        return [Folder.model_validate(r) for r in resp.data or []]

    async def find_by_name(
        self, *, user_id: str, name: str, exclude_id: UUID | None = None
    ) -> Folder | None:
        def _query():
            q = (
                self._client.table(self.TABLE_NAME)
                .select("*")
                .eq("user_id", user_id)
                .eq("name", name)
            )
            if exclude_id is not None:
                q = q.neq("id", str(exclude_id))
            return q.limit(1).execute()

        resp = await run_blocking(_query)
        items: list[dict[str, Any]] = resp.data or []
        return Folder.model_validate(items[0]) if items else None

    async def rename(self, folder_id: UUID, name: str) -> Folder | None:
        resp = await run_blocking(
            lambda: self._client.table(self.TABLE_NAME)
            .update({"name": name})
            .eq("id", str(folder_id))
            .execute()
        )
        items = resp.data or []
        return Folder.model_validate(items[0]) if items else None

    async def delete(self, folder_id: UUID) -> bool:
        resp = await run_blocking(
            lambda: self._client.table(self.TABLE_NAME)
            .delete()
            .eq("id", str(folder_id))
            .execute()
        )
        return len(resp.data or []) > 0
