from __future__ import annotations

import logging
import time

from auto_filename.core.new_documents import NewDocumentWatch, watch_new_document
from auto_filename.core.ports.storage import DocumentStorage
from auto_filename.core.scheduler import BatchSummary, RenameScheduler, rename_all
from auto_filename.core.selection import rename_to_selection
from auto_filename.models import Configuration, Document

logger = logging.getLogger(__name__)

# Seconds a path we renamed to is ignored when the watcher reports it as added
OWN_RENAME_TTL = 5.0


class AutoFilenameService:
    """Keeps document names in sync with their content.

    Turns create/modify events into rename requests and offers the manual
    operations (rename one, rename all, rename to a selection).
    """

    def __init__(
        self,
        storage: DocumentStorage,
        config: Configuration,
        *,
        scheduler: RenameScheduler | None = None,
        own_rename_ttl: float = OWN_RENAME_TTL,
    ) -> None:
        self.storage = storage
        self.config = config
        self.scheduler = scheduler or RenameScheduler(storage)
        self.scheduler.add_listener(self._remember_rename)
        self._own_rename_ttl = own_rename_ttl
        self._own_renames: dict[str, float] = {}
        self._new_documents: dict[str, NewDocumentWatch] = {}

    def _remember_rename(self, old_path: str, new_path: str) -> None:
        self._own_renames[new_path] = time.monotonic() + self._own_rename_ttl

    def _is_own_rename(self, path: str) -> bool:
        now = time.monotonic()
        self._own_renames = {p: expiry for p, expiry in self._own_renames.items() if expiry > now}
        return self._own_renames.pop(path, None) is not None

    async def handle_changes(self, created: set[str], modified: set[str]) -> None:
        for path in sorted(created):
            self.on_created(Document(path))
        for path in sorted(modified):
            await self.on_modified(Document(path))

    def on_created(self, document: Document) -> NewDocumentWatch | None:
        if self._is_own_rename(document.path):
            return None
        if document.path in self._new_documents:
            return self._new_documents[document.path]

        watch = watch_new_document(self.scheduler, self.storage, document, self.config)
        self._new_documents[document.path] = watch
        watch.add_done_callback(self._forget_watch)
        return watch

    def _forget_watch(self, watch: NewDocumentWatch) -> None:
        if watch.error is not None:
            logger.error("Renaming new document %s failed", watch.document.path, exc_info=watch.error)
        if self._new_documents.get(watch.document.path) is watch:
            del self._new_documents[watch.document.path]

    async def on_modified(self, document: Document) -> None:
        if document.path in self._new_documents:
            # Renamed by its new-document watch as soon as content shows up
            return
        await self.scheduler.request(document, self.config)

    async def rename_document(self, document: Document) -> str | None:
        return await self.scheduler.request(document, self.config, no_delay=True)

    async def rename_all(self) -> BatchSummary:
        return await rename_all(self.scheduler, self.storage, self.config)

    async def rename_to_selection(self, document: Document, selection: str) -> str | None:
        new_path = await rename_to_selection(self.storage, document, selection)
        if new_path is not None:
            self._remember_rename(document.path, new_path)
        return new_path

    async def close(self) -> None:
        self.scheduler.cancel_pending()
        for watch in list(self._new_documents.values()):
            watch.cancel()
        for watch in list(self._new_documents.values()):
            await watch.wait()
        await self.scheduler.wait_idle()
        logger.info("Service stopped")
