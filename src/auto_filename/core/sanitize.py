"""Derive a filesystem-safe filename from Markdown content."""

from __future__ import annotations

import re

from auto_filename.models import FALLBACK_TITLE, Configuration, clamp_char_count

FRONT_MATTER_DELIMITER = "---"
ELLIPSIS = "..."

# Characters that should be avoided in filenames
ILLEGAL_CHARS = frozenset('\\/:*?"<>|#^[]')

# Device names that are illegal in some OSs
RESERVED_NAMES = frozenset(
    ["CON", "PRN", "AUX", "NUL"] + [f"COM{i}" for i in range(10)] + [f"LPT{i}" for i in range(10)]
)

_HEADING_RE = re.compile(r"#{1,6} ")
_WHITESPACE_RE = re.compile(r"\s+")
_EMOJI_RE = re.compile(
    "["
    "\u2011-\u26ff"  # punctuation, arrows, technical and misc symbols
    "\u2700-\u27bf"  # dingbats
    "\ue000-\uf8ff"  # private use area
    "\U0001f000-\U0001f7ff"  # tiles, cards, pictographs, emoticons, transport
    "\U0001f910-\U0001f9ff"  # supplemental symbols and pictographs
    "]"
)


def strip_front_matter(content: str) -> str:
    if not content.startswith(FRONT_MATTER_DELIMITER):
        return content
    index = content.find(FRONT_MATTER_DELIMITER, len(FRONT_MATTER_DELIMITER))
    if index == -1:
        return content
    return content[index + len(FRONT_MATTER_DELIMITER) :].lstrip()


def extract_heading(content: str) -> str | None:
    """Return the text of a leading ``#``..``######`` heading, or None."""
    match = _HEADING_RE.match(content)
    if match is None:
        return None
    end = content.find("\n")
    if end == -1:
        return content[match.end() :]
    return content[match.end() : end]


def _scan(content: str, char_count: int, use_first_line: bool) -> str:
    chars: list[str] = []
    for i, char in enumerate(content):
        if i >= char_count:
            return "".join(chars).rstrip() + ELLIPSIS
        if char == "\n" and use_first_line:
            return "".join(chars).rstrip() + ELLIPSIS
        if char not in ILLEGAL_CHARS:
            chars.append(char)
    return "".join(chars)


def _finalize(name: str) -> str:
    name = _WHITESPACE_RE.sub(" ", name.strip())
    name = name.lstrip(".")
    if name == "" or name.upper() in RESERVED_NAMES:
        return FALLBACK_TITLE
    return name


def derive(content: str, config: Configuration) -> str:
    """Turn document content into a candidate filename (without extension).

    Always returns a non-empty name free of ``ILLEGAL_CHARS`` and
    ``RESERVED_NAMES``; falls back to ``Untitled``.
    """
    if config.support_yaml:
        content = strip_front_matter(content)

    if config.use_header:
        heading = extract_heading(content)
        if heading is not None:
            content = heading

    name = _scan(content, clamp_char_count(config.char_count), config.use_first_line)

    if not config.include_emojis:
        name = _EMOJI_RE.sub("", name)

    return _finalize(name)


def sanitize_selection(text: str) -> str:
    """Clean user-selected text for use as a filename."""
    name = "".join(char for char in text if char not in ILLEGAL_CHARS)
    name = _WHITESPACE_RE.sub(" ", name.strip())
    return name or FALLBACK_TITLE
