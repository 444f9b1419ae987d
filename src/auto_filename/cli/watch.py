import asyncio
import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from auto_filename.cli.common import SettingsOption, VaultArgument, console, get_configuration
from auto_filename.core.ports.watcher import VaultWatcherPort
from auto_filename.core.scheduler import RenameScheduler
from auto_filename.core.service import AutoFilenameService
from auto_filename.storage.filesystem import FilesystemStorage
from auto_filename.watcher.watchfiles_adapter import WatchfilesWatcher


def watch(
    vault: VaultArgument,
    settings: SettingsOption = None,
    per_document: Annotated[
        bool, typer.Option(help="Debounce each document separately instead of sharing one timer.")
    ] = False,
    log_level: Annotated[str, typer.Option(help="Logging level.")] = "INFO",
) -> None:
    """Watch a vault and rename documents as their content changes."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )
    config = get_configuration(vault, settings)
    storage = FilesystemStorage(vault)

    async def _run() -> None:
        service = AutoFilenameService(storage, config, scheduler=RenameScheduler(storage, per_document=per_document))
        watcher: VaultWatcherPort = WatchfilesWatcher(storage.root, service.handle_changes)
        await watcher.start()
        try:
            await asyncio.Event().wait()
        finally:
            await watcher.stop()
            await service.close()

    console.print(f"[green]Watching {storage.root}[/green] (Ctrl+C to stop)")
    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        console.print("Stopped.")
