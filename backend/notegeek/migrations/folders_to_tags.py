"""Move notes out of legacy folders and into ``folder/<name>`` tags.

Run with ``python -m notegeek.migrations.folders_to_tags [--drop-folders]``.
"""
from __future__ import annotations

import argparse
import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from notegeek.utils.logging import get_logger, setup_logging
from notegeek.utils.tags import format_tag

if TYPE_CHECKING:
    from notegeek.core.models.folder import Folder
    from notegeek.core.repositories.folder_repository import FolderRepository
    from notegeek.core.repositories.note_repository import NoteRepository

logger = get_logger(__name__)


@dataclass
class MigrationReport:
    folders_processed: int = 0
    notes_updated: int = 0
    folders_dropped: int = 0
    skipped_folders: list[str] = field(default_factory=list)


def folder_tag(folder: Folder) -> str:
    """Tag that replaces membership in ``folder``; raises ValueError if none is possible."""
    return format_tag(f"folder/{folder.name.replace('/', '-')}")


async def migrate_folders_to_tags(
    notes: NoteRepository,
    folders: FolderRepository,
    *,
    drop_folders: bool = False,
) -> MigrationReport:
    report = MigrationReport()
    all_folders = await folders.list()
    logger.info("Found %d folders to migrate", len(all_folders))

    for folder in all_folders:
        try:
            tag = folder_tag(folder)
        except ValueError as err:
            logger.warning("Skipping folder %r: %s", folder.name, err)
            report.skipped_folders.append(folder.name)
            continue

        members = await notes.list(user_id=folder.user_id, folder_id=folder.id)
        for note in members:
            tags = list(dict.fromkeys([*note.tags, tag]))
            await notes.update_fields(note.id, {"tags": tags, "folder_id": None})
        report.folders_processed += 1
        report.notes_updated += len(members)
        logger.info("Updated %d notes with folder tag: %s", len(members), tag)

        if drop_folders and await folders.delete(folder.id):
            report.folders_dropped += 1

    return report


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--drop-folders",
        action="store_true",
        help="delete each folder once its notes carry the folder tag",
    )
    args = parser.parse_args(argv)
    setup_logging()

    from notegeek.core.repositories.implementations.supabase.folder_repository import (
        SupabaseFolderRepository,
    )
    from notegeek.core.repositories.implementations.supabase.note_repository import (
        SupabaseNoteRepository,
    )
    from notegeek.db.base import get_supabase_admin_client

    client = get_supabase_admin_client()
    report = asyncio.run(
        migrate_folders_to_tags(
            SupabaseNoteRepository(client),
            SupabaseFolderRepository(client),
            drop_folders=args.drop_folders,
        )
    )
    logger.info(
        "Migration completed: %d folders, %d notes, %d dropped, %d skipped",
        report.folders_processed,
        report.notes_updated,
        report.folders_dropped,
        len(report.skipped_folders),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
