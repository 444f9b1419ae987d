from __future__ import annotations

import logging

from auto_filename.core.collision import MARKDOWN_EXTENSION, join_path, resolve
from auto_filename.core.ports.storage import DocumentStorage
from auto_filename.core.sanitize import sanitize_selection
from auto_filename.models import Document

logger = logging.getLogger(__name__)


async def rename_to_selection(storage: DocumentStorage, document: Document, selection: str) -> str | None:
    """Rename ``document`` to the given selected text.

    Returns the new path, or None when the document already has that name.
    Raises ValueError for an empty selection.
    """
    if not selection:
        raise ValueError("Select the text to use as filename first.")

    name = sanitize_selection(selection)
    if document.path == join_path(document.parent, f"{name}{MARKDOWN_EXTENSION}"):
        logger.info("%s is already named after the selection", document.path)
        return None

    new_path = resolve(document.parent, name, storage.exists, (), current=document)
    if new_path is None:
        return None
    await storage.rename(document, new_path)
    logger.info("Renamed %s -> %s", document.path, new_path)
    return new_path
