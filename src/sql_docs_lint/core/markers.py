"""Syntactic validation of ``{{variable}}`` and ``[[optional clause]]`` markers."""

from dataclasses import dataclass

from sql_docs_lint.core.errors import InvalidNesting, UnbalancedMarker, UnclosedMarker
from sql_docs_lint.models import Fragment, MarkerKind, TemplateMarker

_OPENERS = {"{{": MarkerKind.VARIABLE, "[[": MarkerKind.OPTIONAL_CLAUSE}
_CLOSERS = {"}}": MarkerKind.VARIABLE, "]]": MarkerKind.OPTIONAL_CLAUSE}


@dataclass
class _OpenMarker:
    kind: MarkerKind
    start: int
    depth: int


def _delimiter(kind: MarkerKind, opening: bool) -> str:
    if kind is MarkerKind.VARIABLE:
        return "{{" if opening else "}}"
    return "[[" if opening else "]]"


def validate_markers(fragment: Fragment) -> list[TemplateMarker]:
    """Scan *fragment* and return its markers ordered by opening position.

    Raises ``UnbalancedMarker``, ``InvalidNesting`` or ``UnclosedMarker`` on the
    first problem found; locations are reported in document coordinates.
    """
    text = fragment.content
    stack: list[_OpenMarker] = []
    markers: list[TemplateMarker] = []
    i = 0

    while i < len(text) - 1:
        pair = text[i : i + 2]

        if pair in _OPENERS:
            kind = _OPENERS[pair]
            if kind is MarkerKind.OPTIONAL_CLAUSE and any(m.kind is MarkerKind.VARIABLE for m in stack):
                line, column = fragment.location(i)
                raise InvalidNesting(
                    "optional-clause '[[' cannot appear inside a variable '{{ }}'",
                    line=line,
                    column=column,
                )
            stack.append(_OpenMarker(kind=kind, start=i, depth=len(stack)))
            i += 2
            continue

        if pair in _CLOSERS:
            kind = _CLOSERS[pair]
            line, column = fragment.location(i)
            if not stack:
                raise UnbalancedMarker(
                    f"{kind.value} closer '{pair}' has no matching '{_delimiter(kind, True)}'",
                    line=line,
                    column=column,
                )
            top = stack[-1]
            if top.kind is not kind:
                raise UnbalancedMarker(
                    f"'{pair}' closes {kind.value} but the innermost open marker is "
                    f"{top.kind.value} '{_delimiter(top.kind, True)}'",
                    line=line,
                    column=column,
                )
            stack.pop()
            open_line, open_column = fragment.location(top.start)
            markers.append(
                TemplateMarker(
                    kind=kind,
                    start=top.start,
                    end=i + 2,
                    line=open_line,
                    column=open_column,
                    depth=top.depth,
                )
            )
            i += 2
            continue

        i += 1

    if stack:
        innermost = stack[-1]
        line, column = fragment.location(innermost.start)
        raise UnclosedMarker(
            f"{innermost.kind.value} '{_delimiter(innermost.kind, True)}' opened here is never closed",
            line=line,
            column=column,
        )

    markers.sort(key=lambda m: m.start)
    return markers
