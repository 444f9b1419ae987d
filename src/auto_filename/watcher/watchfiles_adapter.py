from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Coroutine
from pathlib import Path
from typing import Any

from watchfiles import Change, awatch

from auto_filename.core.collision import MARKDOWN_EXTENSION
from auto_filename.storage.filesystem import is_hidden

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[set[str], set[str]], Coroutine[Any, Any, None]]


def _is_markdown_file(relative: Path) -> bool:
    return relative.suffix == MARKDOWN_EXTENSION and not is_hidden(relative)


class WatchfilesWatcher:
    """Watch a vault for Markdown changes and report them as vault-relative paths.

    ``on_change(created, modified)`` receives the paths added and modified in
    one batch of filesystem events. Implements the ``VaultWatcherPort``
    protocol.
    """

    def __init__(self, directory: str | Path, on_change: ChangeCallback) -> None:
        self._directory = Path(directory).resolve()
        self._on_change = on_change
        self._task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._watch())
        logger.info("Watcher started for %s", self._directory)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Watcher stopped for %s", self._directory)

    def _relative(self, raw_path: str) -> Path | None:
        try:
            return Path(raw_path).relative_to(self._directory)
        except ValueError:
            return None

    async def _watch(self) -> None:
        async for changes in awatch(self._directory):
            created: set[str] = set()
            modified: set[str] = set()
            for change, raw_path in changes:
                relative = self._relative(raw_path)
                if relative is None or not _is_markdown_file(relative):
                    continue
                if change == Change.added:
                    created.add(relative.as_posix())
                elif change == Change.modified:
                    modified.add(relative.as_posix())
            if created or modified:
                logger.info("Detected %d new and %d modified document(s)", len(created), len(modified))
                try:
                    await self._on_change(created, modified)
                except Exception:
                    logger.exception("Error in watcher callback")
