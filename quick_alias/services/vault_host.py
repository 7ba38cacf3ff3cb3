"""
Local Vault — the ``Host`` implementation over an Obsidian vault directory:

  - Reading notes and resolving wikilink targets to files
  - Atomic read-modify-write of a note's YAML front-matter
  - Tracking the active (focused) note
  - Loading and saving the plugin settings blob
  - Showing notices
"""

import asyncio
import json
import logging
import re
from collections import deque
from pathlib import Path, PurePosixPath
from typing import Any

import yaml

from quick_alias import config
from quick_alias.errors import DocumentIOError, MetadataWriteError
from quick_alias.host import MARKDOWN_EXTENSION, Document, MetadataTransform

logger = logging.getLogger(__name__)

FRONTMATTER_PATTERN = re.compile(r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE)
SUBPATH_PATTERN = re.compile(r"[#^].*$")

# Most recent notices kept for inspection
NOTICE_HISTORY = 50


def split_front_matter(content: str) -> tuple[dict[str, Any], str, bool]:
    """
    Split a note into (metadata, body, had_block).  Raises ``MetadataWriteError``
    when the block exists but is not a YAML mapping.
    """
    match = FRONTMATTER_PATTERN.match(content)
    if not match:
        return {}, content, False
    try:
        data = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as e:
        raise MetadataWriteError(f"Unparseable front-matter: {e}") from e
    if not isinstance(data, dict):
        raise MetadataWriteError("Front-matter is not a key/value mapping")
    return data, content[match.end():], True


def join_front_matter(metadata: dict[str, Any], body: str) -> str:
    block = yaml.safe_dump(metadata, default_flow_style=False, allow_unicode=True, sort_keys=False)
    return f"---\n{block}---\n{body}"


class LocalVault:
    """Reads, resolves and rewrites notes inside a vault directory."""

    def __init__(self, vault_path: Path | None = None, settings_file: str | None = None):
        self.vault_path = Path(vault_path or config.QUICK_ALIAS_VAULT_PATH)
        self.settings_path = self.vault_path / (settings_file or config.QUICK_ALIAS_SETTINGS_FILE)
        self.active_document: Document | None = None
        self.notices: deque[str] = deque(maxlen=NOTICE_HISTORY)
        self._locks: dict[str, asyncio.Lock] = {}
        self._own_writes: dict[str, str] = {}

    # ── Documents ─────────────────────────────────────────────────────

    def document(self, path: Path | str) -> Document:
        """Document for an absolute or vault-relative path."""
        path = Path(path)
        if path.is_absolute():
            path = path.resolve().relative_to(self.vault_path.resolve())
        return Document(PurePosixPath(path).as_posix())

    def path_of(self, doc: Document) -> Path:
        return self.vault_path / doc.path

    def markdown_documents(self) -> list[Document]:
        return sorted(
            (self.document(p.relative_to(self.vault_path))
             for p in self.vault_path.rglob(f"*.{MARKDOWN_EXTENSION}")
             if not is_hidden(p.relative_to(self.vault_path))),
            key=lambda d: d.path,
        )

    def open_document(self, path: Path | str) -> Document:
        """Mark a note as the one focused in the editor."""
        self.active_document = self.document(path)
        return self.active_document

    def get_active_document(self) -> Document | None:
        return self.active_document

    async def read_text(self, doc: Document) -> str:
        try:
            return self.path_of(doc).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentIOError(f"Could not read {doc.path}: {e}") from e

    # ── Link resolution ───────────────────────────────────────────────

    async def resolve_link(self, name: str, from_path: str) -> Document | None:
        """
        Best single match for a wikilink target, the way Obsidian picks one:
        the note at that path relative to the source's folder, otherwise the
        shortest vault path ending in the link text.  Case-insensitive.
        """
        linkpath = SUBPATH_PATTERN.sub("", name).strip()
        if not linkpath:
            return None
        if not linkpath.lower().endswith(f".{MARKDOWN_EXTENSION}"):
            linkpath = f"{linkpath}.{MARKDOWN_EXTENSION}"

        wanted = linkpath.lower()
        source_folder = Document(from_path).folder
        beside_source = f"{source_folder.lower()}/{wanted}" if source_folder else wanted
        hits = [
            doc for doc in self.markdown_documents()
            if doc.path.lower() == wanted or doc.path.lower().endswith(f"/{wanted}")
        ]
        if not hits:
            return None
        for doc in hits:
            if doc.path.lower() == beside_source:
                return doc
        return min(hits, key=lambda d: (len(d.path), d.path))

    # ── Front-matter ──────────────────────────────────────────────────

    async def transform_metadata(self, doc: Document, fn: MetadataTransform) -> bool:
        """Apply *fn* to the note's front-matter under a per-note lock."""
        lock = self._locks.setdefault(doc.path, asyncio.Lock())
        async with lock:
            path = self.path_of(doc)
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise MetadataWriteError(f"Could not read {doc.path}: {e}") from e

            metadata, body, had_block = split_front_matter(content)
            before = json.dumps(metadata, sort_keys=True, default=str)
            updated = fn(dict(metadata))
            unchanged = json.dumps(updated, sort_keys=True, default=str) == before
            if unchanged and (had_block or not updated):
                return False

            try:
                new_content = join_front_matter(updated, body)
                path.write_text(new_content, encoding="utf-8")
                self._own_writes[doc.path] = new_content
            except OSError as e:
                raise MetadataWriteError(f"Could not write {doc.path}: {e}") from e
            logger.info("Front-matter updated → %s", doc.path)
            return True

    def is_own_write(self, doc: Document) -> bool:
        """True when the note still holds exactly what our last front-matter write left."""
        written = self._own_writes.get(doc.path)
        if written is None:
            return False
        try:
            return self.path_of(doc).read_text(encoding="utf-8") == written
        except (OSError, UnicodeDecodeError):
            return False

    # ── Settings blob ─────────────────────────────────────────────────

    def load_config(self) -> dict[str, Any] | None:
        if not self.settings_path.exists():
            return None
        return json.loads(self.settings_path.read_text(encoding="utf-8"))

    def save_config(self, data: dict[str, Any]) -> None:
        self.settings_path.parent.mkdir(parents=True, exist_ok=True)
        self.settings_path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    # ── Notices ───────────────────────────────────────────────────────

    def notify(self, message: str) -> None:
        logger.info("Notice: %s", message)
        self.notices.append(message)
        print(message)

    def log(self, message: str) -> None:
        logger.info(message)


def is_hidden(rel: Path) -> bool:
    return any(part.startswith(".") for part in rel.parts)
