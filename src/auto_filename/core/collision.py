from __future__ import annotations

from collections.abc import Callable, Collection

from auto_filename.models import ROOT_FOLDER, Document

MARKDOWN_EXTENSION = ".md"


def join_path(directory: str, filename: str) -> str:
    """Join a vault folder and a filename; ``""`` and ``"/"`` mean the vault root."""
    if directory in ("", ROOT_FOLDER):
        return filename
    return f"{directory.rstrip('/')}/{filename}"


def resolve(
    directory: str,
    base_name: str,
    exists: Callable[[str], bool],
    reserved: Collection[str],
    *,
    current: Document | None = None,
) -> str | None:
    """Return the first free ``base_name.md`` / ``base_name (N).md`` path in ``directory``.

    Returns None when ``current`` already sits on the path it would be given,
    unless it is an untitled document. ``reserved`` is never modified.
    """
    candidate = join_path(directory, f"{base_name}{MARKDOWN_EXTENSION}")
    counter = 1
    while True:
        if current is not None and current.path == candidate and not current.is_untitled:
            return None
        if not exists(candidate) and candidate not in reserved:
            return candidate
        counter += 1
        candidate = join_path(directory, f"{base_name} ({counter}){MARKDOWN_EXTENSION}")
