from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from sql_docs_lint.cli.output import OutputFormat, build_config, err_console, print_report
from sql_docs_lint.config import configure_logging
from sql_docs_lint.core.errors import CorpusReadError
from sql_docs_lint.core.report import check_corpus


def check(
    root: Annotated[Path, typer.Argument(help="Corpus root directory (or a single .md/.sql file).")],
    strict: Annotated[bool, typer.Option("--strict", "-W", help="Treat warnings as errors.")] = False,
    output_format: Annotated[OutputFormat, typer.Option("--format", help="Report format.")] = OutputFormat.TEXT,
    keyword: Annotated[
        list[str] | None,
        typer.Option("--keyword", "-k", help="Allowed leading SQL keyword; repeat to replace the defaults."),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    """Validate SQL examples, template markers and links under ROOT."""
    configure_logging(verbose)
    config = build_config(strict, keyword)

    try:
        report = check_corpus(root, config)
    except CorpusReadError as exc:
        err_console.print(f"[red]Aborted:[/red] {escape(exc.message)}")
        raise typer.Exit(2) from exc

    print_report(report, output_format)
    if report.failed(config.strict):
        raise typer.Exit(1)
