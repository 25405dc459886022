"""Shared fixtures and helpers for tests."""

from collections.abc import Callable
from pathlib import Path
from textwrap import dedent

import pytest

from sql_docs_lint.models import Document, Fragment

_TESTS_ROOT = Path(__file__).parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_TESTS_ROOT)
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fixture_corpus() -> Path:
    """Return the path to the sample documentation corpus."""
    return _TESTS_ROOT / "fixtures" / "corpus"


@pytest.fixture
def make_document(tmp_path: Path) -> Callable[..., Document]:
    """Build an in-memory document; its path lives under ``tmp_path`` but is not written."""

    def _make(text: str, name: str = "guide.md") -> Document:
        path = tmp_path / name
        return Document(
            path=path,
            display_path=name,
            text=dedent(text),
            kind="sql" if name.endswith(".sql") else "markdown",
        )

    return _make


@pytest.fixture
def make_fragment() -> Callable[..., Fragment]:
    def _make(content: str, start_line: int = 1) -> Fragment:
        return Fragment(
            display_path="queries.sql",
            start_line=start_line,
            end_line=start_line + content.count("\n"),
            content=content,
            origin="file",
        )

    return _make


@pytest.fixture
def write_corpus(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Write ``{relative path: text}`` files under a fresh corpus root."""

    def _write(files: dict[str, str]) -> Path:
        root = tmp_path / "corpus"
        for name, text in files.items():
            path = root / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(dedent(text), encoding="utf-8")
        return root

    return _write
