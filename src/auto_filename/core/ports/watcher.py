from typing import Protocol


class VaultWatcherPort(Protocol):
    """Source of document change events for a vault."""

    async def start(self) -> None: ...

    async def stop(self) -> None: ...
