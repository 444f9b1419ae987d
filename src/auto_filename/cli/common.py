from pathlib import Path
from typing import Annotated, Any

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from auto_filename.config import load_configuration, settings_path
from auto_filename.models import Configuration

console = Console()

VaultArgument = Annotated[
    Path,
    typer.Argument(help="Vault directory.", exists=True, file_okay=False, dir_okay=True),
]
SettingsOption = Annotated[
    Path | None,
    typer.Option("--settings", "-s", help="JSON settings file (default: <vault>/.auto-filename.json)."),
]


def get_configuration(vault: Path | None, settings: Path | None, **overrides: Any) -> Configuration:
    """Resolve settings for a command, exiting with an error on invalid values."""
    path = settings if settings is not None else (settings_path(vault) if vault is not None else None)
    try:
        return load_configuration(path, **overrides)
    except (ValidationError, ValueError) as exc:
        console.print(f"[red]Invalid settings:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc
