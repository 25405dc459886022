from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Coroutine
from pathlib import Path
from typing import Any

from watchfiles import awatch

from sql_docs_lint.core.documents import is_corpus_file

logger = logging.getLogger(__name__)


class WatchfilesWatcher:
    """Watch a corpus directory and call back with the changed documents.

    Implements the ``CorpusWatcherPort`` protocol. Changes to files that are
    neither Markdown nor SQL are ignored.
    """

    def __init__(
        self,
        directory: str | Path,
        on_change: Callable[[set[Path]], Coroutine[Any, Any, None]],
    ) -> None:
        self._directory = Path(directory)
        self._on_change = on_change
        self._task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._watch())
        logger.info("Watching %s for document changes", self._directory)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Stopped watching %s", self._directory)

    async def _watch(self) -> None:
        async for changes in awatch(self._directory):
            paths = {Path(p) for _, p in changes if is_corpus_file(Path(p))}
            if not paths:
                continue
            logger.info("Detected changes in %d document(s)", len(paths))
            try:
                await self._on_change(paths)
            except Exception:
                logger.exception("Re-running the corpus check failed")
