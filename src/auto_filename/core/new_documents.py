from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from auto_filename.core.ports.storage import DocumentStorage
from auto_filename.core.scheduler import RenameScheduler
from auto_filename.models import Configuration, Document

logger = logging.getLogger(__name__)

SETTLE_DELAY = 0.1
POLL_INTERVAL = 0.3
CONTENT_TIMEOUT = 10.0


class NewDocumentWatch:
    """Handle to a pending rename of a freshly created document."""

    def __init__(self, document: Document, task: asyncio.Task[str | None]) -> None:
        self.document = document
        self._task = task

    @property
    def done(self) -> bool:
        return self._task.done()

    @property
    def error(self) -> BaseException | None:
        if not self._task.done() or self._task.cancelled():
            return None
        return self._task.exception()

    def cancel(self) -> None:
        self._task.cancel()

    def add_done_callback(self, callback: Callable[[NewDocumentWatch], None]) -> None:
        self._task.add_done_callback(lambda _: callback(self))

    async def wait(self) -> str | None:
        """Return the new path, or None if nothing was renamed or the watch was cancelled."""
        await asyncio.wait({self._task})
        if self._task.cancelled():
            return None
        return self._task.result()


def watch_new_document(
    scheduler: RenameScheduler,
    storage: DocumentStorage,
    document: Document,
    config: Configuration,
    *,
    settle_delay: float = SETTLE_DELAY,
    poll_interval: float = POLL_INTERVAL,
    timeout: float = CONTENT_TIMEOUT,
) -> NewDocumentWatch:
    """Rename ``document`` as soon as it has content.

    Empty documents are re-read every ``poll_interval`` seconds; the watch
    gives up after ``timeout`` seconds.
    """
    task = asyncio.create_task(
        _rename_when_filled(scheduler, storage, document, config, settle_delay, poll_interval, timeout)
    )
    return NewDocumentWatch(document, task)


async def _rename_when_filled(
    scheduler: RenameScheduler,
    storage: DocumentStorage,
    document: Document,
    config: Configuration,
    settle_delay: float,
    poll_interval: float,
    timeout: float,
) -> str | None:
    await asyncio.sleep(settle_delay)
    try:
        if not await _has_content(storage, document):
            async with asyncio.timeout(timeout):
                while True:
                    await asyncio.sleep(poll_interval)
                    if await _has_content(storage, document):
                        break
    except TimeoutError:
        logger.info("No content in %s after %.1fs, leaving its name alone", document.path, timeout)
        return None
    except FileNotFoundError:
        logger.debug("%s disappeared before it got any content", document.path)
        return None
    return await scheduler.request(document, config, no_delay=True)


async def _has_content(storage: DocumentStorage, document: Document) -> bool:
    return (await storage.read(document)).strip() != ""
