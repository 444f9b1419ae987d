import json
import os
from pathlib import Path
from typing import Any

from auto_filename.models import Configuration

SETTINGS_ENV_VAR = "AUTO_FILENAME_SETTINGS"
DEFAULT_SETTINGS_FILE = ".auto-filename.json"


def settings_path(vault: str | Path) -> Path:
    """Settings file for ``vault``; ``AUTO_FILENAME_SETTINGS`` takes precedence."""
    override = os.getenv(SETTINGS_ENV_VAR)
    if override:
        return Path(override)
    return Path(vault) / DEFAULT_SETTINGS_FILE


def load_configuration(path: str | Path | None = None, **overrides: Any) -> Configuration:
    """Load settings from a JSON file over the defaults, then apply ``overrides``.

    A missing file yields the defaults. ``overrides`` use field names and
    skip ``None`` values, so unset CLI options pass straight through.
    """
    data: dict[str, Any] = {}
    if path is not None and Path(path).is_file():
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {path} must contain a JSON object")

    config = Configuration.model_validate(data)
    updates = {k: v for k, v in overrides.items() if v is not None}
    if not updates:
        return config
    return Configuration.model_validate({**config.model_dump(), **updates})
