"""
Orchestrator — ties the Quick Alias services together.

Entry points:
  1. open_file   — a note is opened: scan it right away
  2. scan_vault  — scan every note whose name matches the pattern
  3. watch       — watch the vault and scan the active note after each
                   debounced burst of edits, until interrupted
"""

import asyncio
import logging
from pathlib import Path

from quick_alias import config
from quick_alias.host import Document
from quick_alias.services.pattern_matcher import matches
from quick_alias.services.pipeline import DocumentPipeline
from quick_alias.services.scheduler import ChangeScheduler, FileOpened
from quick_alias.services.settings import SettingsManager
from quick_alias.services.vault_host import LocalVault
from quick_alias.services import vault_watcher

logger = logging.getLogger(__name__)


class QuickAliasAgent:
    """Top-level object that owns the vault host, settings and scheduler."""

    def __init__(self, vault_path: Path | None = None, setup_logging: bool = True):
        if setup_logging:
            self._setup_logging()
        self.vault = LocalVault(vault_path)
        self.settings = SettingsManager(self.vault)
        current = self.settings.load()
        self.pipeline = DocumentPipeline(self.vault, current)
        self.scheduler = ChangeScheduler(self.vault, self.pipeline, current)
        self.settings.subscribe(self.pipeline.apply_config)
        self.settings.subscribe(self.scheduler.apply_config)

    def _setup_logging(self) -> None:
        logging.basicConfig(
            level=getattr(logging, config.LOG_LEVEL, logging.INFO),
            format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
            handlers=[
                logging.StreamHandler(),
                logging.FileHandler(config.LOG_FILE),
            ],
        )

    # ── File open ─────────────────────────────────────────────────────

    async def open_file(self, path: Path | str) -> Document:
        """Focus a note and deliver the file-open event, waiting for its scan."""
        doc = self.vault.open_document(path)
        logger.info("Opened: %s", doc.path)
        self.scheduler.dispatch(FileOpened(doc))
        await self.scheduler.drain()
        return doc

    # ── Whole vault ───────────────────────────────────────────────────

    async def scan_vault(self) -> int:
        """Scan every matching note once.  Returns the number of target updates."""
        pattern = self.settings.config.file_pattern
        sources = [d for d in self.vault.markdown_documents() if matches(d.basename, pattern)]
        logger.info("Scanning %d note(s) matching %r", len(sources), pattern)
        total = 0
        for doc in sources:
            total += await self.pipeline.process(doc)
        return total

    # ── Watch ─────────────────────────────────────────────────────────

    async def watch(self) -> None:
        """Watch for edits and feed them through the scheduler until cancelled."""
        events: asyncio.Queue = asyncio.Queue()
        consumer = asyncio.create_task(self.scheduler.run(events))
        try:
            await vault_watcher.watch(self.vault, events)
        finally:
            self.scheduler.cancel_pending()
            consumer.cancel()
            await self.scheduler.drain()
