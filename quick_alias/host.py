"""
Host boundary — what Quick Alias needs from the note application.

The document store, the active-editor lookup, the settings blob and the
notice area all sit behind the ``Host`` protocol.  ``LocalVault`` in
``quick_alias.services.vault_host`` implements it over a vault directory;
the tests use an in-memory fake.
"""

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any, Callable, Protocol

MARKDOWN_EXTENSION = "md"

MetadataTransform = Callable[[dict[str, Any]], dict[str, Any]]


@dataclass(frozen=True)
class Document:
    """A note, identified by its vault-relative POSIX path."""
    path: str

    @property
    def basename(self) -> str:
        return PurePosixPath(self.path).stem

    @property
    def extension(self) -> str:
        return PurePosixPath(self.path).suffix.lstrip(".")

    @property
    def folder(self) -> str:
        parent = str(PurePosixPath(self.path).parent)
        return "" if parent == "." else parent

    @property
    def is_markdown(self) -> bool:
        return self.extension == MARKDOWN_EXTENSION


class Host(Protocol):
    async def read_text(self, doc: Document) -> str:
        """Return the full content of *doc*; raises ``DocumentIOError``."""

    async def resolve_link(self, name: str, from_path: str) -> Document | None:
        """Best single match for a link target, or ``None``."""

    def get_active_document(self) -> Document | None:
        ...

    async def transform_metadata(self, doc: Document, fn: MetadataTransform) -> bool:
        """
        Atomic read-modify-write of *doc*'s front-matter.  Returns True when
        the stored metadata changed.  Raises ``MetadataWriteError``.
        """

    def load_config(self) -> dict[str, Any] | None:
        ...

    def save_config(self, data: dict[str, Any]) -> None:
        ...

    def notify(self, message: str) -> None:
        ...

    def log(self, message: str) -> None:
        ...
