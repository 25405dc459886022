import logging
import re
from collections.abc import Iterable, Mapping
from pathlib import Path
from urllib.parse import unquote

from sql_docs_lint.core.markdown import MarkdownOutline, parse_markdown
from sql_docs_lint.models import Anchor, Document, Finding, Link, Severity

logger = logging.getLogger(__name__)

_INLINE_LINK_RE = re.compile(
    r"!?\[(?P<text>[^\]]*)\]\((?P<target><[^>]*>|[^)\s]+)(?:\s+(?:\"[^\"]*\"|'[^']*'))?\s*\)"
)
_REFERENCE_DEF_RE = re.compile(r"^[ \t]{0,3}\[[^\]]+\]:[ \t]*(?P<target><[^>]*>|\S+)")
_CODE_SPAN_RE = re.compile(r"(`+).*?\1")
_HTML_ANCHOR_RE = re.compile(r"<a\s[^>]*?\b(?:name|id)\s*=\s*[\"'](?P<slug>[^\"']+)[\"']", re.IGNORECASE)
_MARKDOWN_LINK_TEXT_RE = re.compile(r"!?\[([^\]]*)\]\([^)]*\)")
_HTML_TAG_RE = re.compile(r"<[^>]+>")
_EMPHASIS_RE = re.compile(r"(?<![\w*])(\*{1,3}|_{1,3})(?=\S)(.+?)(?<=\S)\1(?![\w*])")
_SLUG_DROP_RE = re.compile(r"[^\w\- ]")
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")


def slugify(text: str) -> str:
    """GitHub-style heading slug: ``"Field Filters & JOINs"`` -> ``"field-filters--joins"``."""
    text = _MARKDOWN_LINK_TEXT_RE.sub(r"\1", text)
    text = _HTML_TAG_RE.sub("", text)
    while True:
        stripped = _EMPHASIS_RE.sub(r"\2", text)
        if stripped == text:
            break
        text = stripped
    text = _SLUG_DROP_RE.sub("", text.strip().lower())
    return text.replace(" ", "-")


def _is_external(target: str) -> bool:
    return target.startswith("//") or bool(_SCHEME_RE.match(target))


def _visible_lines(document: Document, outline: MarkdownOutline) -> Iterable[tuple[int, str]]:
    for line_no, line in enumerate(document.text.split("\n"), start=1):
        if line_no in outline.code_lines:
            continue
        yield line_no, _CODE_SPAN_RE.sub(lambda m: " " * len(m.group(0)), line)


def collect_anchors(document: Document, outline: MarkdownOutline | None = None) -> list[Anchor]:
    if document.kind != "markdown":
        return []
    outline = outline or parse_markdown(document.text)

    anchors: list[Anchor] = []
    # Suffixes skip any slug already taken, so "Foo", "Foo", "Foo-1" give foo, foo-1, foo-1-1.
    occurrences: dict[str, int] = {}
    for heading in outline.headings:
        base = slugify(heading.text)
        if not base:
            continue
        slug = base
        while slug in occurrences:
            occurrences[base] += 1
            slug = f"{base}-{occurrences[base]}"
        occurrences[slug] = 0
        anchors.append(Anchor(slug=slug, display_path=document.display_path, line=heading.line))

    for line_no, line in _visible_lines(document, outline):
        for match in _HTML_ANCHOR_RE.finditer(line):
            anchors.append(Anchor(slug=match.group("slug"), display_path=document.display_path, line=line_no))

    anchors.sort(key=lambda a: a.line)
    return anchors


def _make_link(document: Document, raw: str, line: int, column: int) -> Link:
    target = raw[1:-1] if raw.startswith("<") and raw.endswith(">") else raw
    path, _, slug = target.partition("#")
    path = path.split("?", 1)[0]
    return Link(
        display_path=document.display_path,
        target=target,
        path=unquote(path),
        slug=unquote(slug) or None,
        line=line,
        column=column,
    )


def collect_links(document: Document, outline: MarkdownOutline | None = None) -> list[Link]:
    """Internal links of a Markdown document, in source order."""
    if document.kind != "markdown":
        return []
    outline = outline or parse_markdown(document.text)

    links: list[Link] = []
    for line_no, line in _visible_lines(document, outline):
        candidates = [(m.group("target"), m.start() + 1) for m in _INLINE_LINK_RE.finditer(line)]
        reference = _REFERENCE_DEF_RE.match(line)
        if reference:
            candidates.append((reference.group("target"), reference.start("target") + 1))
        for raw, column in candidates:
            link = _make_link(document, raw, line_no, column)
            if _is_external(link.target) or (not link.path and link.slug is None):
                continue
            links.append(link)
    return links


class AnchorIndex:
    """Heading slugs of every corpus document, keyed by resolved file path."""

    def __init__(self) -> None:
        self._documents: dict[Path, tuple[str, frozenset[str]]] = {}

    def add(self, document: Document, anchors: Iterable[Anchor]) -> None:
        self._documents[document.path.resolve()] = (
            document.display_path,
            frozenset(a.slug for a in anchors),
        )

    def lookup(self, path: Path) -> tuple[str, frozenset[str]] | None:
        return self._documents.get(path.resolve())

    def __len__(self) -> int:
        return len(self._documents)


def build_anchor_index(
    documents: Iterable[Document], outlines: Mapping[Path, MarkdownOutline] | None = None
) -> AnchorIndex:
    outlines = outlines or {}
    index = AnchorIndex()
    for document in documents:
        index.add(document, collect_anchors(document, outlines.get(document.path)))
    logger.debug("Indexed anchors for %d document(s)", len(index))
    return index


def check_links(document: Document, index: AnchorIndex, outline: MarkdownOutline | None = None) -> list[Finding]:
    """Resolve every internal link of *document* against *index*.

    Relative paths resolve from the document's own directory, so no corpus
    root is needed. Pass *outline* to reuse an already-parsed document.
    """
    if document.kind != "markdown":
        return []

    findings: list[Finding] = []

    def _add(link: Link, message: str, severity: Severity = Severity.ERROR) -> None:
        findings.append(
            Finding(
                display_path=document.display_path,
                line=link.line,
                column=link.column,
                severity=severity,
                code="broken-link",
                message=message,
            )
        )

    for link in collect_links(document, outline):
        target_path = document.path if not link.path else document.path.parent / link.path
        entry = index.lookup(target_path)

        if entry is None:
            if not target_path.exists():
                _add(link, f"broken link '{link.target}': {link.path} does not exist")
            elif link.slug is not None:
                _add(
                    link,
                    f"link '{link.target}' points outside the checked corpus; anchor not verified",
                    Severity.WARNING,
                )
            continue

        if link.slug is None:
            continue

        target_display, slugs = entry
        if not slugs:
            _add(link, f"broken link '{link.target}': {target_display} has no headings to link to")
        elif link.slug not in slugs:
            _add(link, f"broken link '{link.target}': no heading '#{link.slug}' in {target_display}")

    return findings
