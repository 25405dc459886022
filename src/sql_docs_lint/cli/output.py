from enum import Enum

from rich.console import Console

from sql_docs_lint.config import LintConfig
from sql_docs_lint.models import Report

# Findings quote raw SQL, so markup, emoji codes and highlighting stay off.
console = Console(highlight=False, soft_wrap=True, emoji=False)
err_console = Console(stderr=True, highlight=False, soft_wrap=True, emoji=False)


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"


def build_config(strict: bool, keywords: list[str] | None) -> LintConfig:
    if keywords:
        return LintConfig(strict=strict, allowed_keywords=tuple(keywords))
    return LintConfig(strict=strict)


def print_report(report: Report, output_format: OutputFormat = OutputFormat.TEXT) -> None:
    if output_format is OutputFormat.JSON:
        console.print(report.model_dump_json(indent=2), markup=False)
        return

    for finding in report.findings:
        console.print(finding.render(), markup=False)

    errors, warnings = len(report.errors), len(report.warnings)
    colour = "red" if errors else "yellow" if warnings else "green"
    err_console.print(
        f"[{colour}]{errors} error(s), {warnings} warning(s)[/{colour}] "
        f"in {report.documents} document(s), {report.fragments} SQL fragment(s)"
    )
