from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class MarkerKind(str, Enum):
    VARIABLE = "variable"
    OPTIONAL_CLAUSE = "optional-clause"


DocumentKind = Literal["markdown", "sql"]


class Document(BaseModel):
    """A single Markdown or SQL file of the corpus.

    The document owns its raw text; fragments, anchors and links are derived
    from it on demand.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    display_path: str
    text: str
    kind: DocumentKind


class Fragment(BaseModel):
    model_config = ConfigDict(frozen=True)

    display_path: str
    start_line: int
    end_line: int
    content: str
    origin: Literal["fenced", "file"]
    info_string: str | None = None

    def location(self, offset: int) -> tuple[int, int]:
        """Map an offset into ``content`` to a 1-based (line, column) in the document."""
        before = self.content[:offset]
        line = self.start_line + before.count("\n")
        column = offset - (before.rfind("\n") + 1) + 1
        return line, column


class TemplateMarker(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: MarkerKind
    start: int
    end: int
    line: int
    column: int
    depth: int


class Anchor(BaseModel):
    model_config = ConfigDict(frozen=True)

    slug: str
    display_path: str
    line: int


class Link(BaseModel):
    model_config = ConfigDict(frozen=True)

    display_path: str
    target: str
    path: str
    slug: str | None
    line: int
    column: int


class Finding(BaseModel):
    model_config = ConfigDict(frozen=True)

    display_path: str
    line: int
    column: int | None = None
    severity: Severity
    code: str
    message: str

    def sort_key(self) -> tuple[str, int, int, str, str]:
        return (self.display_path, self.line, self.column or 0, self.code, self.message)

    def render(self) -> str:
        return f"{self.display_path}:{self.line}: {self.severity.value}: {self.message}"


class Report(BaseModel):
    findings: list[Finding] = Field(default_factory=list)
    documents: int = 0
    fragments: int = 0

    @property
    def errors(self) -> list[Finding]:
        return [f for f in self.findings if f.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[Finding]:
        return [f for f in self.findings if f.severity is Severity.WARNING]

    def failed(self, strict: bool = False) -> bool:
        if self.errors:
            return True
        return strict and bool(self.warnings)
