from pathlib import Path

from sql_docs_lint.models import Finding, Severity


class LintError(Exception):
    """Base class for problems found while scanning a document.

    Every subclass except ``CorpusReadError`` is recovered by the report
    aggregator and turned into an ``error`` finding.
    """

    code = "lint-error"

    def __init__(self, message: str, line: int = 1, column: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def to_finding(self, display_path: str) -> Finding:
        return Finding(
            display_path=display_path,
            line=self.line,
            column=self.column,
            severity=Severity.ERROR,
            code=self.code,
            message=f"{type(self).__name__}: {self.message}",
        )


class MalformedDocument(LintError):
    code = "malformed-document"


class MarkerError(LintError):
    code = "marker-error"


class UnbalancedMarker(MarkerError):
    code = "unbalanced-marker"


class UnclosedMarker(MarkerError):
    code = "unclosed-marker"


class InvalidNesting(MarkerError):
    code = "invalid-nesting"


class CorpusReadError(LintError):
    code = "read-error"

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"cannot read {path}: {reason}")
        self.path = path
