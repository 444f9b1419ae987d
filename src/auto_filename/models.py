from __future__ import annotations

from dataclasses import dataclass
from posixpath import basename, dirname

from pydantic import BaseModel, ConfigDict, Field, field_validator

MIN_CHAR_COUNT = 10
MAX_CHAR_COUNT = 100

FALLBACK_TITLE = "Untitled"
ROOT_FOLDER = "/"


class Configuration(BaseModel):
    """Resolved settings for one pipeline invocation.

    Field aliases match the keys of the editor plugin's ``data.json`` so an
    existing settings file can be loaded as-is.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    include_folders: list[str] = Field(default_factory=list, alias="includeFolders")
    use_header: bool = Field(default=True, alias="useHeader")
    use_first_line: bool = Field(default=False, alias="useFirstLine")
    support_yaml: bool = Field(default=True, alias="supportYAML")
    include_emojis: bool = Field(default=True, alias="includeEmojis")
    char_count: int = Field(default=50, alias="charCount")
    check_interval: int = Field(default=500, alias="checkInterval")
    skip_named_files: bool = Field(default=False, alias="skipNamedFiles")

    @field_validator("include_folders", mode="before")
    @classmethod
    def _drop_blank_folders(cls, value: object) -> object:
        # A textarea with a trailing newline yields empty entries.
        if isinstance(value, (list, tuple)):
            return [v for v in value if not isinstance(v, str) or v.strip()]
        return value

    @field_validator("char_count")
    @classmethod
    def _clamp_char_count(cls, value: int) -> int:
        return clamp_char_count(value)

    @field_validator("check_interval")
    @classmethod
    def _clamp_check_interval(cls, value: int) -> int:
        return max(0, value)


def clamp_char_count(value: int) -> int:
    return max(MIN_CHAR_COUNT, min(MAX_CHAR_COUNT, value))


@dataclass(frozen=True)
class Document:
    """Snapshot of a vault-relative document path, e.g. ``notes/Idea.md``."""

    path: str

    @property
    def parent(self) -> str:
        """Parent folder, ``"/"`` for documents at the vault root."""
        return dirname(self.path) or ROOT_FOLDER

    @property
    def name(self) -> str:
        return basename(self.path)

    @property
    def basename(self) -> str:
        stem, dot, _ = self.name.rpartition(".")
        return stem if dot else self.name

    @property
    def extension(self) -> str:
        _, dot, suffix = self.name.rpartition(".")
        return f".{suffix}" if dot else ""

    @property
    def is_untitled(self) -> bool:
        return self.basename == "" or self.basename.startswith(FALLBACK_TITLE)
