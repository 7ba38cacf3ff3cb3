import asyncio

import pytest

from quick_alias.errors import DocumentIOError, MetadataWriteError
from quick_alias.host import Document
from quick_alias.services.pipeline import DocumentPipeline
from quick_alias.services.settings import PluginConfig


class FakeHost:
    """In-memory host: notes are plain strings, front-matter is a dict per path."""

    def __init__(self):
        self.texts: dict[str, str] = {}
        self.metadata: dict[str, dict] = {}
        self.active: Document | None = None
        self.notices: list[str] = []
        self.logs: list[str] = []
        self.reads: list[str] = []
        self.writes: list[str] = []
        self.unreadable: set[str] = set()
        self.unwritable: set[str] = set()
        self.config_blob: dict | None = None
        self.fail_config_load = False
        self.fail_config_save = False

    def add_note(self, path: str, text: str = "", **metadata) -> Document:
        self.texts[path] = text
        self.metadata[path] = dict(metadata)
        return Document(path)

    async def read_text(self, doc):
        await asyncio.sleep(0)
        self.reads.append(doc.path)
        if doc.path in self.unreadable or doc.path not in self.texts:
            raise DocumentIOError(f"Could not read {doc.path}")
        return self.texts[doc.path]

    async def resolve_link(self, name, from_path):
        await asyncio.sleep(0)
        for path in self.texts:
            if Document(path).basename == name:
                return Document(path)
        return None

    def get_active_document(self):
        return self.active

    async def transform_metadata(self, doc, fn):
        await asyncio.sleep(0)
        if doc.path in self.unwritable:
            raise MetadataWriteError(f"Could not write {doc.path}")
        before = dict(self.metadata.get(doc.path, {}))
        after = fn(dict(before))
        if after == before:
            return False
        self.metadata[doc.path] = after
        self.writes.append(doc.path)
        return True

    def load_config(self):
        if self.fail_config_load:
            raise OSError("settings unreadable")
        return self.config_blob

    def save_config(self, data):
        if self.fail_config_save:
            raise OSError("settings unwritable")
        self.config_blob = dict(data)

    def notify(self, message):
        self.notices.append(message)

    def log(self, message):
        self.logs.append(message)


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def pipeline(host):
    return DocumentPipeline(host, PluginConfig())
