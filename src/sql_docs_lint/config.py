import logging
import os
import sys

from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_ALLOWED_KEYWORDS = ("SELECT", "WITH", "CREATE", "EXPLAIN")
DEFAULT_EXCLUDED_DIRS = (".git", ".venv", "node_modules", "__pycache__")

_LOG_FORMAT = "%(levelname)s: %(name)s: %(message)s"


class LintConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    allowed_keywords: tuple[str, ...] = DEFAULT_ALLOWED_KEYWORDS
    excluded_dirs: tuple[str, ...] = DEFAULT_EXCLUDED_DIRS
    strict: bool = False

    @field_validator("allowed_keywords")
    @classmethod
    def _upper_keywords(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        keywords = tuple(k.strip().upper() for k in value if k.strip())
        if not keywords:
            raise ValueError("At least one allowed leading keyword is required.")
        return keywords


def get_log_level() -> str:
    return os.getenv("SQL_DOCS_LINT_LOG_LEVEL", "WARNING").upper()


def configure_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.getLevelNamesMapping().get(get_log_level(), logging.WARNING)
    logging.basicConfig(level=level, format=_LOG_FORMAT, stream=sys.stderr, force=True)
