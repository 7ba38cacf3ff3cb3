"""
Document Pipeline — one scan of one source note.

  1. Skip notes whose base name does not match the configured pattern
  2. Read the note and extract its alias map
  3. Resolve each target through the host (misses are skipped)
  4. Merge the aliases into each target's front-matter, one atomic
     read-modify-write per target
  5. Surface a single summary notice for the whole batch

A failure on one target never stops the remaining targets.
"""

import functools
import logging

from quick_alias.errors import ConfigError, DocumentIOError, ResolutionMiss
from quick_alias.host import Document, Host
from quick_alias.services.alias_extractor import extract
from quick_alias.services.alias_merger import apply_aliases
from quick_alias.services.pattern_matcher import matches
from quick_alias.services.settings import PluginConfig

logger = logging.getLogger(__name__)


class DocumentPipeline:
    """Extracts aliases from a source note and writes them to its targets."""

    def __init__(self, host: Host, config: PluginConfig):
        self.host = host
        self.config = config

    def apply_config(self, config: PluginConfig) -> None:
        self.config = config

    async def process(self, doc: Document) -> int:
        """Run one scan of *doc*.  Returns the number of targets updated."""
        config = self.config
        try:
            if not matches(doc.basename, config.file_pattern):
                return 0
        except ConfigError as e:
            logger.error("File pattern %r rejected: %s", config.file_pattern, e)
            self.host.notify(str(e))
            return 0

        try:
            content = await self.host.read_text(doc)
        except Exception as e:
            logger.exception("Error processing file %s", doc.path)
            self.host.notify(f"Error processing file {doc.basename}: {e}")
            return 0

        updated = 0
        for target, aliases in extract(content).items():
            try:
                if await self._update_target(doc, target, aliases):
                    updated += 1
            except Exception as e:
                logger.exception('Error updating aliases for "%s" from %s', target, doc.path)
                self.host.notify(f'Error updating aliases for "{target}": {e}')

        if updated:
            logger.info("Updated aliases in %d note(s) linked from %s", updated, doc.path)
            if config.show_notice:
                self.host.notify(f"Updated aliases in {updated} referenced note(s).")
        return updated

    async def _resolve(self, source: Document, target: str) -> Document:
        dest = await self.host.resolve_link(target, source.path)
        if dest is None or not dest.is_markdown:
            raise ResolutionMiss(f'Skipped alias update for "{target}" (note not found)')
        return dest

    async def _update_target(self, source: Document, target: str, aliases: list[str]) -> bool:
        try:
            dest = await self._resolve(source, target)
        except ResolutionMiss as e:
            self.host.log(str(e))
            return False

        try:
            return await self.host.transform_metadata(
                dest, functools.partial(apply_aliases, aliases=aliases)
            )
        except DocumentIOError as e:
            logger.error("Error updating front-matter for %s: %s", dest.path, e)
            self.host.notify(f"Error updating aliases in {dest.basename}: {e}")
            return False
