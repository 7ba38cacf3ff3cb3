"""
Vault Watcher — watches the vault with ``watchfiles`` and turns each note
edit into a ``ContentModified`` event for the scheduler.

The note edited most recently is treated as the one focused in the editor,
so it becomes the vault's active document.  Front-matter rewrites made by
Quick Alias itself are not reported.
"""

import asyncio
import logging
from pathlib import Path

from watchfiles import Change, awatch

from quick_alias.host import MARKDOWN_EXTENSION
from quick_alias.services.scheduler import ContentModified
from quick_alias.services.vault_host import LocalVault, is_hidden

logger = logging.getLogger(__name__)


def classify_changes(vault: LocalVault, changes: set[tuple[Change, str]]) -> list[ContentModified]:
    """
    Keep user edits and additions of markdown notes, oldest first.  Marks the
    newest one as the active document.
    """
    edited = []
    for change_type, path_str in changes:
        if change_type not in (Change.modified, Change.added):
            continue
        path = Path(path_str)
        if path.suffix != f".{MARKDOWN_EXTENSION}":
            continue
        try:
            doc = vault.document(path)
            mtime = path.stat().st_mtime
        except (OSError, ValueError):
            # Gone again, or outside the vault.
            continue
        if is_hidden(Path(doc.path)):
            continue
        if vault.is_own_write(doc):
            continue
        edited.append((mtime, doc))

    edited.sort(key=lambda item: (item[0], item[1].path))
    if edited:
        vault.active_document = edited[-1][1]
    return [ContentModified(doc) for _, doc in edited]


async def watch(
    vault: LocalVault,
    events: asyncio.Queue,
    stop_event: asyncio.Event | None = None,
) -> None:
    """
    Puts an event on *events* for every note edit until *stop_event* is set
    or the task is cancelled.
    """
    logger.info("Starting vault watcher — %s", vault.vault_path)
    async for changes in awatch(vault.vault_path, stop_event=stop_event):
        for event in classify_changes(vault, changes):
            logger.debug("Modified: %s", event.document.path)
            await events.put(event)
    logger.info("Vault watcher stopped")
