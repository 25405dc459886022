"""End-to-end checks over the sample documentation corpus."""

from __future__ import annotations

import shutil
from pathlib import Path

from typer.testing import CliRunner

from sql_docs_lint.cli.app import app
from sql_docs_lint.core.report import check_corpus

runner = CliRunner()


def test_sample_corpus_is_clean(fixture_corpus: Path) -> None:
    report = check_corpus(fixture_corpus)

    assert report.findings == []
    assert report.documents == 5
    # four standalone files plus four SQL fences in the guide
    assert report.fragments == 8


def test_cli_reports_broken_copy_of_corpus(fixture_corpus: Path, tmp_path: Path) -> None:
    corpus = tmp_path / "corpus"
    shutil.copytree(fixture_corpus, corpus)
    guide = corpus / "README.md"
    guide.write_text(
        guide.read_text(encoding="utf-8")
        .replace("(#field-filters)", "(#field-filter)")
        .replace("WHERE {{category}}\nORDER BY", "WHERE {{category}\nORDER BY"),
        encoding="utf-8",
    )
    (corpus / "example_queries" / "basic_variables.sql").unlink()

    result = runner.invoke(app, ["check", str(corpus)])

    assert result.exit_code == 1
    lines = [line for line in result.output.splitlines() if ": error: " in line]
    assert lines == [
        "README.md:9: error: broken link '#field-filter': no heading '#field-filter' in README.md",
        "README.md:34: error: UnclosedMarker: variable '{{' opened here is never closed",
        "README.md:74: error: broken link 'example_queries/basic_variables.sql': "
        "example_queries/basic_variables.sql does not exist",
    ]
