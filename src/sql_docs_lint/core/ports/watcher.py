from typing import Protocol


class CorpusWatcherPort(Protocol):
    """Re-runs the corpus check whenever a document changes."""

    async def start(self) -> None: ...

    async def stop(self) -> None: ...
