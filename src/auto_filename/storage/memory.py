from __future__ import annotations

from auto_filename.core.collision import MARKDOWN_EXTENSION
from auto_filename.models import Document


class InMemoryStorage:
    """Document storage backed by a ``path -> content`` dict."""

    def __init__(self, documents: dict[str, str] | None = None) -> None:
        self.documents: dict[str, str] = dict(documents or {})
        self.renames: list[tuple[str, str]] = []
        self.reads: list[str] = []

    def add(self, path: str, content: str = "") -> Document:
        self.documents[path] = content
        return Document(path)

    async def read(self, document: Document) -> str:
        self.reads.append(document.path)
        try:
            return self.documents[document.path]
        except KeyError:
            raise FileNotFoundError(document.path) from None

    def exists(self, path: str) -> bool:
        return path in self.documents

    async def rename(self, document: Document, new_path: str) -> None:
        if document.path not in self.documents:
            raise FileNotFoundError(document.path)
        if new_path in self.documents:
            raise FileExistsError(new_path)
        self.documents[new_path] = self.documents.pop(document.path)
        self.renames.append((document.path, new_path))

    async def list_markdown_documents(self) -> list[Document]:
        return [Document(path) for path in sorted(self.documents) if path.endswith(MARKDOWN_EXTENSION)]
