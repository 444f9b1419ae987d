"""Debounced, collision-safe renaming of documents after their content."""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from auto_filename.core.collision import resolve
from auto_filename.core.ports.storage import DocumentStorage
from auto_filename.core.sanitize import derive
from auto_filename.models import Configuration, Document

logger = logging.getLogger(__name__)

RenameListener = Callable[[str, str], None]


class SchedulerState(str, enum.Enum):
    IDLE = "idle"
    ARMED = "armed"
    EXECUTING = "executing"


@dataclass
class BatchContext:
    """State shared by the concurrent renames of one batch.

    ``reserved`` holds paths already claimed by members of the batch whose
    renames may not have landed in storage yet.
    """

    completed: int = 0
    reserved: set[str] = field(default_factory=set)


@dataclass(frozen=True)
class BatchSummary:
    attempted: int
    completed: int
    failures: list[tuple[str, BaseException]] = field(default_factory=list)


@dataclass(eq=False)
class _PendingRename:
    document: Document
    config: Configuration
    handle: asyncio.TimerHandle = field(init=False)


def in_target_folder(document: Document, config: Configuration) -> bool:
    if not config.include_folders:
        return True
    return document.parent in config.include_folders


def should_rename(document: Document, config: Configuration) -> bool:
    if not in_target_folder(document, config):
        return False
    if config.skip_named_files and not document.is_untitled:
        return False
    return True


class RenameScheduler:
    """Run the read -> derive -> resolve -> rename pipeline for documents.

    Debounced requests share a single timer slot by default. A request for
    the slotted document restarts its timer; a request for another document
    takes over the slot, and the earlier timer still fires but can no longer
    be restarted. Pass ``per_document=True`` to keep one restartable timer
    per document path instead.
    """

    def __init__(self, storage: DocumentStorage, *, per_document: bool = False) -> None:
        self._storage = storage
        self._per_document = per_document
        self._timers: dict[str, _PendingRename] = {}
        self._orphaned: set[_PendingRename] = set()
        self._fired: set[asyncio.Task[str | None]] = set()
        self._executing = 0
        self._listeners: list[RenameListener] = []

    @property
    def state(self) -> SchedulerState:
        if self._executing:
            return SchedulerState.EXECUTING
        if self._timers or self._orphaned:
            return SchedulerState.ARMED
        return SchedulerState.IDLE

    @property
    def armed_paths(self) -> frozenset[str]:
        return frozenset(self._timers) | {pending.document.path for pending in self._orphaned}

    def add_listener(self, listener: RenameListener) -> None:
        """Call ``listener(old_path, new_path)`` after every successful rename."""
        self._listeners.append(listener)

    async def request(
        self,
        document: Document,
        config: Configuration,
        *,
        no_delay: bool = False,
        batch: BatchContext | None = None,
    ) -> str | None:
        """Ask for ``document`` to be renamed after its content.

        With ``no_delay`` the pipeline runs now and the new path (or None when
        nothing was renamed) is returned; storage errors propagate. Otherwise
        the rename is debounced by ``config.check_interval`` and None is
        returned immediately.
        """
        if not should_rename(document, config):
            return None
        if no_delay:
            return await self.run_pipeline(document, config, batch=batch)
        self._arm(document, config)
        return None

    async def run_pipeline(
        self,
        document: Document,
        config: Configuration,
        *,
        batch: BatchContext | None = None,
    ) -> str | None:
        self._executing += 1
        try:
            content = await self._storage.read(document)
            base_name = derive(content, config)
            reserved = batch.reserved if batch is not None else frozenset()
            new_path = resolve(document.parent, base_name, self._storage.exists, reserved, current=document)
            if new_path is None:
                logger.debug("%s already matches its content", document.path)
                return None
            if batch is not None:
                batch.reserved.add(new_path)
            await self._storage.rename(document, new_path)
            if batch is not None:
                batch.completed += 1
        finally:
            self._executing -= 1

        logger.info("Renamed %s -> %s", document.path, new_path)
        self._follow_rename(document.path, new_path)
        for listener in self._listeners:
            listener(document.path, new_path)
        return new_path

    def cancel_pending(self) -> None:
        for pending in [*self._timers.values(), *self._orphaned]:
            pending.handle.cancel()
        self._timers.clear()
        self._orphaned.clear()

    async def wait_idle(self) -> None:
        """Wait until every timer-fired rename has finished."""
        while self._fired:
            await asyncio.gather(*self._fired, return_exceptions=True)

    def _arm(self, document: Document, config: Configuration) -> None:
        previous = self._timers.pop(document.path, None)
        if previous is not None:
            previous.handle.cancel()
        if not self._per_document:
            # Timers of other documents leave the slot but still fire
            self._orphaned.update(self._timers.values())
            self._timers.clear()

        pending = _PendingRename(document, config)
        loop = asyncio.get_running_loop()
        pending.handle = loop.call_later(config.check_interval / 1000, self._fire, pending)
        self._timers[document.path] = pending
        logger.debug("Armed rename of %s in %d ms", document.path, config.check_interval)

    def _fire(self, pending: _PendingRename) -> None:
        path = pending.document.path
        if self._timers.get(path) is pending:
            del self._timers[path]
        else:
            self._orphaned.discard(pending)
        task = asyncio.create_task(self._run_fired(pending.document, pending.config))
        self._fired.add(task)
        task.add_done_callback(self._fired.discard)

    def _follow_rename(self, old_path: str, new_path: str) -> None:
        """Point timers still armed for ``old_path`` at the renamed document."""
        moved = Document(new_path)
        for pending in [*self._timers.values(), *self._orphaned]:
            if pending.document.path == old_path:
                pending.document = moved
        if old_path in self._timers:
            displaced = self._timers.get(new_path)
            if displaced is not None:
                self._orphaned.add(displaced)
            self._timers[new_path] = self._timers.pop(old_path)

    async def _run_fired(self, document: Document, config: Configuration) -> str | None:
        try:
            return await self.run_pipeline(document, config)
        except FileNotFoundError:
            logger.debug("%s is gone, nothing to rename", document.path)
            return None
        except Exception:
            logger.exception("Debounced rename of %s failed", document.path)
            return None


async def rename_all(
    scheduler: RenameScheduler,
    storage: DocumentStorage,
    config: Configuration,
) -> BatchSummary:
    """Rename every Markdown document in the target folders concurrently.

    One failing document does not stop the others; failures are logged and
    reported in the summary.
    """
    documents = [d for d in await storage.list_markdown_documents() if in_target_folder(d, config)]
    batch = BatchContext()
    results = await asyncio.gather(
        *(scheduler.request(d, config, no_delay=True, batch=batch) for d in documents),
        return_exceptions=True,
    )

    failures: list[tuple[str, BaseException]] = []
    for document, result in zip(documents, results):
        if isinstance(result, BaseException):
            logger.error("Failed to rename %s: %s", document.path, result, exc_info=result)
            failures.append((document.path, result))

    logger.info("Renamed %d/%d files", batch.completed, len(documents))
    return BatchSummary(attempted=len(documents), completed=batch.completed, failures=failures)
