from auto_filename.storage.filesystem import FilesystemStorage
from auto_filename.storage.memory import InMemoryStorage

__all__ = [
    "FilesystemStorage",
    "InMemoryStorage",
]
