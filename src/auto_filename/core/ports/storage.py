from typing import Protocol

from auto_filename.models import Document


class DocumentStorage(Protocol):
    async def read(self, document: Document) -> str: ...

    def exists(self, path: str) -> bool: ...

    async def rename(self, document: Document, new_path: str) -> None: ...

    async def list_markdown_documents(self) -> list[Document]: ...
