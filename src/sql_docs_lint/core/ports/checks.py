from typing import Protocol

from sql_docs_lint.config import LintConfig
from sql_docs_lint.models import Finding, Fragment, TemplateMarker


class FragmentCheck(Protocol):
    def __call__(
        self, fragment: Fragment, markers: list[TemplateMarker], config: LintConfig | None = None
    ) -> list[Finding]: ...
