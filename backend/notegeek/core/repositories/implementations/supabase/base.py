from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable


async def run_blocking(func: Callable[[], Any]) -> Any:
    """Run a blocking supabase-py call in a worker thread."""
    return await asyncio.to_thread(func)


def first_row(data: Any) -> dict[str, Any]:
    if isinstance(data, list) and data:
        return data[0]
    if isinstance(data, dict):
        return data
    return {}
