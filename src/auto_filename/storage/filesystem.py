from __future__ import annotations

import logging
from pathlib import Path

from auto_filename.core.collision import MARKDOWN_EXTENSION
from auto_filename.models import Document

logger = logging.getLogger(__name__)


def is_hidden(relative: Path) -> bool:
    """True for paths inside dot-directories such as ``.obsidian`` or ``.git``."""
    return any(part.startswith(".") for part in relative.parts[:-1])


class FilesystemStorage:
    """Document storage over a vault directory on disk.

    Document paths are POSIX paths relative to ``root``.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()

    def document_for(self, path: str | Path) -> Document:
        file_path = Path(path)
        if file_path.is_absolute():
            file_path = file_path.resolve().relative_to(self.root)
        return Document(file_path.as_posix())

    def _abs(self, path: str) -> Path:
        return self.root / path

    async def read(self, document: Document) -> str:
        file_path = self._abs(document.path)
        try:
            return file_path.read_text(encoding="utf-8-sig")
        except UnicodeDecodeError:
            return file_path.read_bytes().decode("utf-8-sig", errors="replace")

    def exists(self, path: str) -> bool:
        return self._abs(path).exists()

    async def rename(self, document: Document, new_path: str) -> None:
        source = self._abs(document.path)
        target = self._abs(new_path)
        if not source.exists():
            raise FileNotFoundError(str(source))
        # A case-only rename on a case-insensitive filesystem sees the target as existing
        if target.exists() and not source.samefile(target):
            raise FileExistsError(str(target))
        source.rename(target)
        logger.debug("Moved %s to %s", source, target)

    async def list_markdown_documents(self) -> list[Document]:
        documents: list[Document] = []
        for file_path in sorted(self.root.rglob(f"*{MARKDOWN_EXTENSION}")):
            relative = file_path.relative_to(self.root)
            if file_path.is_file() and not is_hidden(relative):
                documents.append(Document(relative.as_posix()))
        return documents
