import logging
from pathlib import Path

from sql_docs_lint.config import LintConfig
from sql_docs_lint.core.errors import CorpusReadError
from sql_docs_lint.models import Document, DocumentKind

logger = logging.getLogger(__name__)

_EXTENSION_KIND_MAP: dict[str, DocumentKind] = {
    ".markdown": "markdown",
    ".md": "markdown",
    ".sql": "sql",
}

_SQL_INFO_ALIASES = {
    "bigquery",
    "metabase",
    "mysql",
    "pgsql",
    "plsql",
    "postgres",
    "postgresql",
    "redshift",
    "snowflake",
    "sql",
    "sqlite",
    "tsql",
}


def detect_kind_from_path(file_path: Path) -> DocumentKind:
    suffix = file_path.suffix.lower()
    if suffix in _EXTENSION_KIND_MAP:
        return _EXTENSION_KIND_MAP[suffix]
    raise ValueError(f"Unsupported file extension: {suffix}")


def is_corpus_file(file_path: Path) -> bool:
    return file_path.suffix.lower() in _EXTENSION_KIND_MAP


def normalize_info_string(info: str | None) -> str | None:
    """Return ``"sql"`` when a fence info string names a SQL dialect, else ``None``.

    Only the first word counts, so ``sql title="orders"`` and ``{.sql}`` are
    both recognised.
    """
    if not info:
        return None
    words = info.strip().split()
    if not words:
        return None
    first = words[0].strip("{}.").lower()
    return "sql" if first in _SQL_INFO_ALIASES else None


def discover_documents(root: Path, config: LintConfig | None = None) -> list[Path]:
    """List corpus files under *root* in a stable order."""
    config = config or LintConfig()
    if not root.exists():
        raise CorpusReadError(root, "no such file or directory")
    if root.is_file():
        if not is_corpus_file(root):
            raise CorpusReadError(root, "not a Markdown or SQL file")
        return [root]

    excluded = set(config.excluded_dirs)
    paths = [
        path
        for path in root.rglob("*")
        if path.is_file() and is_corpus_file(path) and not excluded.intersection(path.relative_to(root).parts)
    ]
    paths.sort(key=lambda p: p.relative_to(root).as_posix())
    logger.debug("Discovered %d document(s) under %s", len(paths), root)
    return paths


def display_path_for(path: Path, root: Path) -> str:
    base = root.parent if root.is_file() else root
    try:
        return path.relative_to(base).as_posix()
    except ValueError:
        return path.as_posix()


def load_document(path: Path, root: Path) -> Document:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CorpusReadError(path, str(exc)) from exc

    return Document(
        path=path,
        display_path=display_path_for(path, root),
        text=text,
        kind=detect_kind_from_path(path),
    )
