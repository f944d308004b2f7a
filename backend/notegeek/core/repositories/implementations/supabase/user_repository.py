from __future__ import annotations

from typing import TYPE_CHECKING

from notegeek.core.models.user import User
from notegeek.core.repositories.user_repository import UserRepository

from .base import first_row, run_blocking

if TYPE_CHECKING:
    from supabase import Client


class SupabaseUserRepository(UserRepository):
    """Supabase implementation of the UserRepository.

    Expects a `users` table with a unique lowercased `email` column.
    """

    TABLE_NAME = "users"

    def __init__(self, client: Client) -> None:
        self._client: Client = client

    async def create(self, user: User) -> User:
        row = user.model_dump(mode="json")
        resp = await run_blocking(
            lambda: self._client.table(self.TABLE_NAME).insert(row).execute()
        )
        return User.model_validate(first_row(resp.data))

    async def get(self, user_id: str) -> User | None:
        return await self._find_one("id", user_id)

    async def get_by_email(self, email: str) -> User | None:
        return await self._find_one("email", email.strip().lower())

    async def _find_one(self, column: str, value: str) -> User | None:
        resp = await run_blocking(
            lambda: self._client.table(self.TABLE_NAME)
            .select("*")
            .eq(column, value)
            .limit(1)
            .execute()
        )
        items = resp.data or []
        return User.model_validate(items[0]) if items else None
