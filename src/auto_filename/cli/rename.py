import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from auto_filename.cli.common import SettingsOption, VaultArgument, console, get_configuration
from auto_filename.core.sanitize import derive
from auto_filename.core.service import AutoFilenameService
from auto_filename.storage.filesystem import FilesystemStorage


def _service(vault: Path, settings: Path | None) -> tuple[AutoFilenameService, FilesystemStorage]:
    storage = FilesystemStorage(vault)
    return AutoFilenameService(storage, get_configuration(vault, settings)), storage


def derive_name(
    file: Annotated[Path | None, typer.Argument(help="Markdown file to derive a name from.")] = None,
    text: Annotated[str | None, typer.Option(help="Derive from this text instead of a file.")] = None,
    settings: SettingsOption = None,
    char_count: Annotated[int | None, typer.Option(help="Characters to use (10-100).")] = None,
    first_line: Annotated[bool | None, typer.Option(help="Only use the first line.")] = None,
    header: Annotated[bool | None, typer.Option(help="Use a leading heading as the name.")] = None,
    emojis: Annotated[bool | None, typer.Option(help="Keep emojis in the name.")] = None,
) -> None:
    """Print the filename derived from a document's content."""
    if file is not None and text is None:
        try:
            content = file.read_text(encoding="utf-8-sig")
        except OSError as exc:
            console.print(f"[red]Cannot read {escape(str(file))}:[/red] {escape(str(exc))}")
            raise typer.Exit(1) from exc
    elif text is not None and file is None:
        content = text
    else:
        console.print("[red]Pass either a FILE or --text.[/red]")
        raise typer.Exit(1)

    config = get_configuration(
        None,
        settings,
        char_count=char_count,
        use_first_line=first_line,
        use_header=header,
        include_emojis=emojis,
    )
    console.print(derive(content, config), markup=False, highlight=False)


def rename(
    vault: VaultArgument,
    file: Annotated[Path, typer.Argument(help="Document to rename.")],
    settings: SettingsOption = None,
) -> None:
    """Rename one document after its content right away."""
    service, storage = _service(vault, settings)

    async def _run() -> str | None:
        return await service.rename_document(storage.document_for(_in_vault(vault, file)))

    try:
        new_path = asyncio.run(_run())
    except (OSError, ValueError) as exc:
        console.print(f"[red]Rename failed:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc
    if new_path is None:
        console.print("[yellow]Nothing to rename.[/yellow]")
    else:
        console.print(f"[green]Renamed[/green] to {escape(new_path)}")


def rename_all(
    vault: VaultArgument,
    settings: SettingsOption = None,
) -> None:
    """Rename every document in the target folders."""
    service, _ = _service(vault, settings)

    console.print("Renaming files, please wait...")
    summary = asyncio.run(service.rename_all())
    for path, error in summary.failures:
        console.print(f"[red]Failed[/red] {escape(path)}: {escape(str(error))}")
    colour = "green" if not summary.failures else "yellow"
    console.print(f"[{colour}]Renamed {summary.completed}/{summary.attempted} files.[/{colour}]")
    if summary.failures:
        raise typer.Exit(1)


def rename_selection(
    vault: VaultArgument,
    file: Annotated[Path, typer.Argument(help="Document to rename.")],
    selection: Annotated[str, typer.Argument(help="Selected text to use as the filename.")],
    settings: SettingsOption = None,
) -> None:
    """Rename a document to the given text."""
    service, storage = _service(vault, settings)

    async def _run() -> str | None:
        return await service.rename_to_selection(storage.document_for(_in_vault(vault, file)), selection)

    try:
        new_path = asyncio.run(_run())
    except (OSError, ValueError) as exc:
        console.print(f"[red]Rename failed:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc
    if new_path is None:
        console.print("[yellow]The filename is already the selected text.[/yellow]")
    else:
        console.print(f"[green]Renamed[/green] to {escape(new_path)}")


def _in_vault(vault: Path, file: Path) -> Path:
    """Accept documents given relative to the vault or to the working directory."""
    if file.is_absolute() or not (vault / file).exists():
        return file.resolve()
    return file
