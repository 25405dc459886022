import asyncio
import contextlib
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from sql_docs_lint.cli.output import build_config, console, err_console, print_report
from sql_docs_lint.config import LintConfig, configure_logging
from sql_docs_lint.core.errors import CorpusReadError
from sql_docs_lint.core.report import check_corpus
from sql_docs_lint.watcher.watchfiles_adapter import WatchfilesWatcher


def _run_check(root: Path, config: LintConfig) -> bool:
    """Run one check and print it; returns False when the run fails (strict mode counts warnings)."""
    try:
        report = check_corpus(root, config)
    except CorpusReadError as exc:
        # A file may be caught mid-write; the next change event retries.
        err_console.print(f"[red]Skipped run:[/red] {escape(exc.message)}")
        return False
    print_report(report)
    if report.failed(config.strict):
        err_console.print("[red]FAILED[/red]" + (" (warnings count as errors)" if config.strict else ""))
        return False
    return True


def watch(
    root: Annotated[
        Path, typer.Argument(help="Corpus root directory.", exists=True, file_okay=False, dir_okay=True)
    ],
    strict: Annotated[bool, typer.Option("--strict", "-W", help="Treat warnings as errors.")] = False,
    keyword: Annotated[
        list[str] | None,
        typer.Option("--keyword", "-k", help="Allowed leading SQL keyword; repeat to replace the defaults."),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    """Check ROOT now and again every time a document changes (Ctrl-C to stop)."""
    configure_logging(verbose)
    config = build_config(strict, keyword)

    async def _on_change(paths: set[Path]) -> None:
        console.rule(f"{len(paths)} document(s) changed")
        _run_check(root, config)

    async def _run() -> None:
        _run_check(root, config)
        watcher = WatchfilesWatcher(root, _on_change)
        await watcher.start()
        try:
            await asyncio.Event().wait()
        finally:
            await watcher.stop()

    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(_run())
