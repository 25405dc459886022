import logging
from collections.abc import Sequence
from pathlib import Path

from sql_docs_lint.config import LintConfig
from sql_docs_lint.core.documents import discover_documents, load_document
from sql_docs_lint.core.errors import MalformedDocument, MarkerError
from sql_docs_lint.core.extract import extract_fragments
from sql_docs_lint.core.links import AnchorIndex, build_anchor_index, check_links
from sql_docs_lint.core.markdown import MarkdownOutline, parse_markdown
from sql_docs_lint.core.markers import validate_markers
from sql_docs_lint.core.ports.checks import FragmentCheck
from sql_docs_lint.core.shape import check_shape
from sql_docs_lint.models import Document, Finding, Report

logger = logging.getLogger(__name__)

DEFAULT_FRAGMENT_CHECKS: tuple[FragmentCheck, ...] = (check_shape,)


def check_document(
    document: Document,
    index: AnchorIndex,
    config: LintConfig | None = None,
    fragment_checks: Sequence[FragmentCheck] = DEFAULT_FRAGMENT_CHECKS,
    outline: MarkdownOutline | None = None,
) -> tuple[list[Finding], int]:
    """Run every check over one document.

    Returns (findings, number of fragments checked). Marker problems are
    recorded per fragment and scanning moves on; an unclosed code fence
    stops the remaining checks for this document.
    """
    config = config or LintConfig()
    if outline is None and document.kind == "markdown":
        outline = parse_markdown(document.text)
    findings: list[Finding] = []
    fragments = 0

    try:
        for fragment in extract_fragments(document, outline):
            fragments += 1
            try:
                markers = validate_markers(fragment)
            except MarkerError as exc:
                findings.append(exc.to_finding(document.display_path))
                continue
            for check in fragment_checks:
                findings.extend(check(fragment, markers, config))
    except MalformedDocument as exc:
        findings.append(exc.to_finding(document.display_path))
        logger.debug("Stopped checking %s: %s", document.display_path, exc.message)
        return findings, fragments

    findings.extend(check_links(document, index, outline))
    logger.debug("%s: %d fragment(s), %d finding(s)", document.display_path, fragments, len(findings))
    return findings, fragments


def check_documents(documents: Sequence[Document], config: LintConfig | None = None) -> Report:
    outlines = {d.path: parse_markdown(d.text) for d in documents if d.kind == "markdown"}
    index = build_anchor_index(documents, outlines)
    report = Report(documents=len(documents))
    for document in documents:
        findings, fragments = check_document(document, index, config, outline=outlines.get(document.path))
        report.findings.extend(findings)
        report.fragments += fragments
    report.findings.sort(key=lambda f: f.sort_key())
    return report


def check_corpus(root: Path, config: LintConfig | None = None) -> Report:
    """Check every Markdown and SQL file under *root*.

    Raises ``CorpusReadError`` if any file cannot be read; nothing else aborts
    the run.
    """
    config = config or LintConfig()
    documents = [load_document(path, root) for path in discover_documents(root, config)]
    return check_documents(documents, config)
