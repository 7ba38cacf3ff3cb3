"""
Change Scheduler — decides when the pipeline runs.

Two kinds of host events arrive, one at a time, on the event loop:

  - ``FileOpened``: a markdown note was opened; scanned immediately.
  - ``ContentModified``: a note was edited; (re)arms the single debounce
    timer.  When the timer fires the note must still be markdown and still be
    the active document, otherwise the scan is dropped.

There is one timer for the whole vault, so a newer edit always replaces the
pending one, even when it belongs to another note.
"""

import asyncio
import logging
from dataclasses import dataclass, field

from quick_alias.host import Document, Host
from quick_alias.services.pipeline import DocumentPipeline
from quick_alias.services.settings import PluginConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileOpened:
    document: Document


@dataclass(frozen=True)
class ContentModified:
    document: Document


HostEvent = FileOpened | ContentModified


@dataclass
class SchedulerState:
    """Debounce state shared across events: at most one armed timer."""
    pending: asyncio.TimerHandle | None = None
    pending_document: Document | None = None
    running: set[asyncio.Task] = field(default_factory=set)


class ChangeScheduler:
    """Routes host events to ``DocumentPipeline.process``."""

    def __init__(
        self,
        host: Host,
        pipeline: DocumentPipeline,
        config: PluginConfig,
        state: SchedulerState | None = None,
    ):
        self.host = host
        self.pipeline = pipeline
        self.config = config
        self.state = state or SchedulerState()

    def apply_config(self, config: PluginConfig) -> None:
        # Takes effect the next time the timer is armed.
        self.config = config

    # ── Event intake ──────────────────────────────────────────────────

    def dispatch(self, event: HostEvent) -> None:
        """Handle one event.  Must be called from the running event loop."""
        doc = event.document
        if isinstance(event, FileOpened):
            if doc.is_markdown:
                self._launch(doc)
        elif isinstance(event, ContentModified):
            self._arm(doc)
        else:
            raise TypeError(f"Unknown host event: {event!r}")

    async def run(self, events: asyncio.Queue) -> None:
        """Consume events serially until a ``None`` sentinel arrives."""
        while True:
            event = await events.get()
            try:
                if event is None:
                    return
                self.dispatch(event)
            finally:
                events.task_done()

    # ── Debounce ──────────────────────────────────────────────────────

    def _arm(self, doc: Document) -> None:
        self.cancel_pending()
        loop = asyncio.get_running_loop()
        self.state.pending = loop.call_later(
            self.config.debounce_seconds, self._fire, doc
        )
        self.state.pending_document = doc

    def _fire(self, doc: Document) -> None:
        self.state.pending = None
        self.state.pending_document = None
        if not doc.is_markdown:
            logger.debug("Debounced scan of %s skipped: not markdown", doc.path)
            return
        if doc != self.host.get_active_document():
            logger.debug("Debounced scan of %s skipped: no longer active", doc.path)
            return
        self._launch(doc)

    def cancel_pending(self) -> None:
        if self.state.pending is not None:
            self.state.pending.cancel()
        self.state.pending = None
        self.state.pending_document = None

    # ── Pipeline runs ─────────────────────────────────────────────────

    def _launch(self, doc: Document) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(self.pipeline.process(doc))
        self.state.running.add(task)
        task.add_done_callback(self._finished)
        return task

    def _finished(self, task: asyncio.Task) -> None:
        self.state.running.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Pipeline run failed", exc_info=exc)

    async def drain(self) -> None:
        """Wait for every pipeline run started so far."""
        while self.state.running:
            await asyncio.gather(*list(self.state.running), return_exceptions=True)
