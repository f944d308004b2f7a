from __future__ import annotations

from typing import TYPE_CHECKING, Any

from notegeek.core.models.base import utcnow
from notegeek.core.models.note import Note
from notegeek.core.repositories.note_repository import NoteRepository
from notegeek.core.schemas.note_search import NoteSearchResult
from notegeek.utils.logging import get_logger

from .base import first_row, run_blocking

logger = get_logger(__name__)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from supabase import Client


class SupabaseNoteRepository(NoteRepository):
    """Supabase implementation of the NoteRepository.

    Uses Supabase's PostgREST client for CRUD. Assumes a `notes` table with columns
    matching the `Note` model fields (tags as a text[] column) and a
    `search_notes(p_user_id, p_query)` function that ranks rows with ts_rank.
    """

    TABLE_NAME = "notes"
    PAGE_SIZE = 1000

    def __init__(self, client: Client) -> None:
        self._client: Client = client

    async def create(self, note: Note) -> Note:
        row = self._note_to_row(note)
        resp = await run_blocking(
            lambda: self._client.table(self.TABLE_NAME)
            .insert(row)
            .execute()
        )
        return self._row_to_note(first_row(resp.data))

    async def get(self, note_id: UUID) -> Note | None:
        resp = await run_blocking(
            lambda: self._client.table(self.TABLE_NAME)
            .select("*")
            .eq("id", str(note_id))
            .limit(1)
            .execute()
        )
        items = resp.data or []
        if not items:
            return None
        return self._row_to_note(items[0])

    async def list(
        self,
        *,
        user_id: str | None = None,
        tag: str | None = None,
        prefix: str | None = None,
        folder_id: UUID | None = None,
    ) -> Sequence[Note]:
        def _query():
            q = self._client.table(self.TABLE_NAME).select("*")
            if user_id is not None:
                q = q.eq("user_id", user_id)
            if tag:
                q = q.contains("tags", [tag])
            if folder_id is not None:
                q = q.eq("folder_id", str(folder_id))
            return q.order("updated_at", desc=True).execute()

        resp = await run_blocking(_query)
        notes = [self._row_to_note(i) for i in resp.data or []]
        if prefix:
            # PostgREST has no per-element LIKE on array columns
            notes = [n for n in notes if any(t.startswith(prefix) for t in n.tags)]
        return notes

    async def update_fields(self, note_id: UUID, changes: dict) -> Note | None:
        # Ensure we only send fields that belong to the row schema and avoid id/user_id mutation
        sanitized: dict[str, Any] = {
            k: v for k, v in (changes or {}).items()
            if k not in {"id", "user_id", "created_at", "updated_at"}
        }
        if not sanitized:
            return await self.get(note_id)

        sanitized["updated_at"] = utcnow().isoformat()
        for key in ("folder_id", "type"):
            if key in sanitized and sanitized[key] is not None:
                sanitized[key] = str(getattr(sanitized[key], "value", sanitized[key]))

        resp = await run_blocking(
            lambda: self._client.table(self.TABLE_NAME)
            .update(sanitized)
            .eq("id", str(note_id))
            .execute()
        )
        items = resp.data or []
        if not items:
            return None
        return self._row_to_note(items[0])

    async def delete(self, note_id: UUID) -> bool:
        resp = await run_blocking(
            lambda: self._client.table(self.TABLE_NAME)
            .delete()
            .eq("id", str(note_id))
            .execute()
        )
        return len(resp.data or []) > 0

    async def delete_in_folder(self, *, user_id: str, folder_id: UUID) -> int:
        resp = await run_blocking(
            lambda: self._client.table(self.TABLE_NAME)
            .delete()
            .eq("user_id", user_id)
            .eq("folder_id", str(folder_id))
            .execute()
        )
        return len(resp.data or [])

    async def detach_folder(self, *, user_id: str, folder_id: UUID) -> int:
        resp = await run_blocking(
            lambda: self._client.table(self.TABLE_NAME)
            .update({"folder_id": None})
            .eq("user_id", user_id)
            .eq("folder_id", str(folder_id))
            .execute()
        )
        return len(resp.data or [])

    async def list_tag_sets(self, *, user_id: str) -> list[list[str]]:
        offset = 0
        tag_sets: list[list[str]] = []

        while True:
            def _fetch_page(start: int, size: int) -> Any:
                return (
                    self._client
                    .table(self.TABLE_NAME)
                    .select("tags")
                    .eq("user_id", user_id)
                    .range(start, start + size - 1)
                    .execute()
                )

            resp = await run_blocking(lambda: _fetch_page(offset, self.PAGE_SIZE))
            rows: list[dict[str, Any]] = resp.data or []
            for row in rows:
                tags = row.get("tags") or []
                if isinstance(tags, list):
                    tag_sets.append([t for t in tags if isinstance(t, str)])

            if len(rows) < self.PAGE_SIZE:
                break
            offset += self.PAGE_SIZE

        return tag_sets

    async def search_notes(self, *, user_id: str, query: str) -> Sequence[NoteSearchResult]:
        def _rpc():
            params: dict[str, Any] = {"p_user_id": user_id, "p_query": query}
            return self._client.rpc("search_notes", params=params).execute()

        resp = await run_blocking(_rpc)
        rows: list[dict[str, Any]] = resp.data or []
        return [self._row_to_search_result(r) for r in rows]

    @staticmethod
    def _normalize_row(row: dict[str, Any]) -> dict[str, Any]:
        normalized = dict(row)
        # Full-text index column maintained by the database
        normalized.pop("lexeme", None)
        if normalized.get("tags") is None:
            normalized["tags"] = []
        return normalized

    @staticmethod
    def _row_to_note(row: dict[str, Any]) -> Note:
        normalized = SupabaseNoteRepository._normalize_row(row)
        normalized.pop("rank", None)
        return Note.model_validate(normalized)

    @staticmethod
    def _row_to_search_result(row: dict[str, Any]) -> NoteSearchResult:
        return NoteSearchResult.model_validate(SupabaseNoteRepository._normalize_row(row))

    @staticmethod
    def _note_to_row(note: Note) -> dict[str, Any]:
        # JSON mode turns UUIDs, enums and datetimes into what PostgREST expects
        data = note.model_dump(mode="json")
        if data.get("tags") is None:
            data["tags"] = []
        return data
