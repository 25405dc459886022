"""Lightweight structural checks on SQL text.

This is not a parser: it only tracks comments, quoted literals, parenthesis
depth and top-level ``;`` boundaries, which is enough to spot typos in
documentation examples. Everything reported here is a warning.
"""

import re
from dataclasses import dataclass, field

from sql_docs_lint.config import LintConfig
from sql_docs_lint.models import Finding, Fragment, MarkerKind, Severity, TemplateMarker

_VARIABLE_PLACEHOLDER = "_"
_LEADING_TOKEN_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*|\S")


def mask_markers(content: str, markers: list[TemplateMarker]) -> str:
    """Blank out template markers without moving any character.

    Variables become runs of ``_`` and optional-clause delimiters become
    spaces; newlines are kept so line/column positions are unchanged.
    """
    chars = list(content)
    for marker in markers:
        if marker.kind is MarkerKind.VARIABLE:
            span = list(range(marker.start, marker.end))
            fill = _VARIABLE_PLACEHOLDER
        else:
            span = [marker.start, marker.start + 1, marker.end - 2, marker.end - 1]
            fill = " "
        for i in span:
            if chars[i] != "\n":
                chars[i] = fill
    return "".join(chars)


def restore_markers(masked: str, content: str, markers: list[TemplateMarker]) -> str:
    """Put the original marker text back into a string produced by ``mask_markers``."""
    chars = list(masked)
    for marker in markers:
        if marker.kind is MarkerKind.VARIABLE:
            chars[marker.start : marker.end] = content[marker.start : marker.end]
        else:
            chars[marker.start : marker.start + 2] = content[marker.start : marker.start + 2]
            chars[marker.end - 2 : marker.end] = content[marker.end - 2 : marker.end]
    return "".join(chars)


@dataclass
class _ScanState:
    parens: list[int] = field(default_factory=list)
    statement_starts: list[int] = field(default_factory=list)
    pending_statement: bool = True
    problems: list[tuple[int, str, str]] = field(default_factory=list)

    def warn(self, offset: int, code: str, message: str) -> None:
        self.problems.append((offset, code, message))


def _scan(text: str) -> _ScanState:
    state = _ScanState()
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]
        pair = text[i : i + 2]

        if pair == "--":
            newline = text.find("\n", i)
            i = n if newline == -1 else newline + 1
            continue

        if pair == "/*":
            close = text.find("*/", i + 2)
            if close == -1:
                state.warn(i, "unterminated-comment", "block comment '/*' is never closed")
                break
            i = close + 2
            continue

        if ch.isspace():
            i += 1
            continue

        if state.pending_statement and ch != ";":
            state.statement_starts.append(i)
            state.pending_statement = False

        if ch in ("'", '"'):
            end = _string_end(text, i)
            if end is None:
                kind = "single" if ch == "'" else "double"
                state.warn(i, "unterminated-string", f"{kind}-quoted literal starting with {ch} is never closed")
                break
            i = end + 1
            continue

        if ch == "(":
            state.parens.append(i)
        elif ch == ")":
            if state.parens:
                state.parens.pop()
            else:
                state.warn(i, "unmatched-parenthesis", "')' has no matching '('")
        elif ch == ";" and not state.parens:
            state.pending_statement = True

        i += 1

    for offset in state.parens:
        state.warn(offset, "unclosed-parenthesis", "'(' is never closed")
    return state


def _string_end(text: str, start: int) -> int | None:
    quote = text[start]
    i = start + 1
    while i < len(text):
        if text[i] == quote:
            if text[i + 1 : i + 2] == quote:
                i += 2
                continue
            return i
        i += 1
    return None


def check_shape(fragment: Fragment, markers: list[TemplateMarker], config: LintConfig | None = None) -> list[Finding]:
    config = config or LintConfig()
    masked = mask_markers(fragment.content, markers)
    state = _scan(masked)

    def _finding(offset: int, code: str, message: str, severity: Severity = Severity.WARNING) -> Finding:
        line, column = fragment.location(offset)
        return Finding(
            display_path=fragment.display_path,
            line=line,
            column=column,
            severity=severity,
            code=code,
            message=message,
        )

    findings = [_finding(offset, code, message) for offset, code, message in state.problems]

    if not state.statement_starts:
        findings.append(_finding(0, "empty-fragment", "SQL block contains no statement", Severity.INFO))

    allowed = set(config.allowed_keywords)
    for offset in state.statement_starts:
        match = _LEADING_TOKEN_RE.match(masked, offset)
        token = match.group(0) if match else ""
        if token.upper() not in allowed:
            shown = fragment.content[offset : offset + len(token)] or token
            findings.append(
                _finding(
                    offset,
                    "unexpected-leading-keyword",
                    f"statement starts with {shown!r}; expected one of {', '.join(config.allowed_keywords)}",
                )
            )

    findings.sort(key=lambda f: f.sort_key())
    return findings
