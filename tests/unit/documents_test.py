"""Unit tests for document discovery, kind detection and loading."""

from pathlib import Path

import pytest

from sql_docs_lint.config import LintConfig
from sql_docs_lint.core.documents import (
    detect_kind_from_path,
    discover_documents,
    load_document,
    normalize_info_string,
)
from sql_docs_lint.core.errors import CorpusReadError


def test_detects_kind_from_extension() -> None:
    cases = {
        "guide.md": "markdown",
        "GUIDE.MD": "markdown",
        "notes.markdown": "markdown",
        "queries.sql": "sql",
    }
    for filename, expected in cases.items():
        assert detect_kind_from_path(Path(filename)) == expected


def test_rejects_unknown_extension() -> None:
    with pytest.raises(ValueError, match="Unsupported file extension"):
        detect_kind_from_path(Path("notes.txt"))


@pytest.mark.parametrize(
    ("info", "expected"),
    [
        ("sql", "sql"),
        ("SQL", "sql"),
        ("postgresql", "sql"),
        ('mysql title="orders"', "sql"),
        ("{.sql}", "sql"),
        ("bash", None),
        ("", None),
        (None, None),
    ],
)
def test_normalize_info_string(info: str | None, expected: str | None) -> None:
    assert normalize_info_string(info) == expected


def test_discovers_markdown_and_sql_sorted(write_corpus) -> None:
    root = write_corpus(
        {
            "b.md": "# B\n",
            "a/queries.sql": "SELECT 1;\n",
            "notes.txt": "ignored\n",
            "node_modules/pkg/README.md": "# vendored\n",
        }
    )
    found = [p.relative_to(root).as_posix() for p in discover_documents(root)]
    assert found == ["a/queries.sql", "b.md"]


def test_excluded_dirs_are_configurable(write_corpus) -> None:
    root = write_corpus({"drafts/x.md": "# X\n", "y.md": "# Y\n"})
    found = discover_documents(root, LintConfig(excluded_dirs=("drafts",)))
    assert [p.name for p in found] == ["y.md"]


def test_single_file_root(write_corpus) -> None:
    root = write_corpus({"only.sql": "SELECT 1;\n"})
    target = root / "only.sql"

    assert discover_documents(target) == [target]
    assert load_document(target, target).display_path == "only.sql"


def test_single_file_root_must_be_markdown_or_sql(write_corpus) -> None:
    root = write_corpus({"notes.txt": "not a document\n"})
    with pytest.raises(CorpusReadError, match="not a Markdown or SQL file"):
        discover_documents(root / "notes.txt")


def test_load_document_uses_relative_display_path(write_corpus) -> None:
    root = write_corpus({"docs/guide.md": "# Guide\n"})
    document = load_document(root / "docs" / "guide.md", root)

    assert document.display_path == "docs/guide.md"
    assert document.kind == "markdown"
    assert document.text == "# Guide\n"
