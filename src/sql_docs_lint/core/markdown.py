"""Block structure of a Markdown document, parsed with tree-sitter.

Only the pieces the checks need are kept: fenced code blocks (with their
info string and whether they were ever closed), headings, and the lines
covered by code blocks so that links inside code are not mistaken for real
links. All line numbers are 1-based.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass
from functools import lru_cache
from typing import cast

from tree_sitter import Node, Parser
from tree_sitter_language_pack import SupportedLanguage, get_parser

_CONTAINER_PREFIX_RE = re.compile(r"^[ \t>]*")
_FENCE_OPEN_RE = re.compile(r"^[ \t>]*(?P<fence>`{3,}|~{3,})(?P<info>.*)$")
_ATX_RE = re.compile(r"^[ \t]*#{1,6}(?:[ \t]+(?P<text>.*?))?(?:[ \t]+#+)?[ \t]*$")

_CODE_BLOCK_TYPES = frozenset({"fenced_code_block", "indented_code_block"})


@dataclass(frozen=True)
class FencedBlock:
    line: int
    info_string: str
    content_lines: tuple[str, ...]
    closed: bool

    @property
    def content_start_line(self) -> int:
        return self.line + 1


@dataclass(frozen=True)
class Heading:
    text: str
    line: int


@dataclass(frozen=True)
class MarkdownOutline:
    fences: tuple[FencedBlock, ...]
    headings: tuple[Heading, ...]
    code_lines: frozenset[int]


@lru_cache(maxsize=1)
def _markdown_parser() -> Parser:
    return get_parser(cast(SupportedLanguage, "markdown"))


def _walk(node: Node) -> Iterator[Node]:
    yield node
    for child in node.children:
        yield from _walk(child)


def _node_text(source: bytes, node: Node) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def _last_row(node: Node) -> int:
    """0-based row of the last line that belongs to *node*."""
    row, column = node.end_point[0], node.end_point[1]
    if column == 0 and row > node.start_point[0]:
        return row - 1
    return row


def _strip_container(line: str) -> str:
    return _CONTAINER_PREFIX_RE.sub("", line, count=1)


def _strip_container_to(line: str, width: int) -> str:
    """Drop up to *width* leading block-quote or indentation characters."""
    i = 0
    while i < width and i < len(line) and line[i] in " \t>":
        i += 1
    return line[i:]


def _fenced_block(source: bytes, node: Node) -> FencedBlock:
    lines = _node_text(source, node).split("\n")
    opening = _FENCE_OPEN_RE.match(lines[0])
    fence = opening.group("fence") if opening else "```"
    info = opening.group("info").strip() if opening else ""

    # Body lines carry the raw prefix of any enclosing block quote or list item.
    line_start = source.rfind(b"\n", 0, node.start_byte) + 1
    raw_opening = source[line_start : node.end_byte].split(b"\n", 1)[0].decode("utf-8", errors="replace")
    width = max(node.start_point[1], len(raw_opening) - len(_strip_container(raw_opening)))
    body = [_strip_container_to(line, width) for line in lines[1:]]
    opened_body = list(body)
    while body and not body[-1].strip():
        body.pop()

    closed = False
    if body:
        candidate = _strip_container(body[-1]).rstrip()
        if candidate and set(candidate) == {fence[0]} and len(candidate) >= len(fence):
            closed = True
            body.pop()

    if closed:
        content = tuple(body)
    else:
        content = tuple(opened_body)
        while content and not content[-1].strip():
            content = content[:-1]

    return FencedBlock(
        line=node.start_point[0] + 1,
        info_string=info,
        content_lines=content,
        closed=closed,
    )


def _heading(source: bytes, node: Node) -> Heading | None:
    lines = [line for line in _node_text(source, node).split("\n") if line.strip()]
    if not lines:
        return None

    if node.type == "atx_heading":
        match = _ATX_RE.match(_strip_container(lines[0]))
        text = (match.group("text") or "") if match else lines[0].lstrip("# ")
    else:
        text = " ".join(_strip_container(line).strip() for line in lines[:-1])

    return Heading(text=text.strip(), line=node.start_point[0] + 1)


def parse_markdown(text: str) -> MarkdownOutline:
    source = text.encode("utf-8")
    tree = _markdown_parser().parse(source)

    fences: list[FencedBlock] = []
    headings: list[Heading] = []
    code_lines: set[int] = set()

    for node in _walk(tree.root_node):
        if node.type in _CODE_BLOCK_TYPES:
            code_lines.update(range(node.start_point[0] + 1, _last_row(node) + 2))
        if node.type == "fenced_code_block":
            fences.append(_fenced_block(source, node))
        elif node.type in ("atx_heading", "setext_heading"):
            heading = _heading(source, node)
            if heading is not None:
                headings.append(heading)

    fences.sort(key=lambda f: f.line)
    headings.sort(key=lambda h: h.line)
    return MarkdownOutline(fences=tuple(fences), headings=tuple(headings), code_lines=frozenset(code_lines))
