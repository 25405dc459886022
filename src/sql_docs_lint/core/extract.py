import logging
from collections.abc import Iterator

from sql_docs_lint.core.documents import normalize_info_string
from sql_docs_lint.core.errors import MalformedDocument
from sql_docs_lint.core.markdown import FencedBlock, MarkdownOutline, parse_markdown
from sql_docs_lint.models import Document, Fragment

logger = logging.getLogger(__name__)


class FragmentStream:
    """Lazy, restartable view over the SQL fragments of a document.

    Each iteration re-scans the document from the top and yields fragments in
    source order. A fence that is opened but never closed raises
    ``MalformedDocument`` once iteration reaches it.
    """

    def __init__(self, document: Document, outline: MarkdownOutline | None = None) -> None:
        self._document = document
        self._outline = outline

    def __iter__(self) -> Iterator[Fragment]:
        if self._document.kind == "sql":
            yield from self._whole_file()
        else:
            yield from self._fenced_blocks()

    def _whole_file(self) -> Iterator[Fragment]:
        text = self._document.text
        if not text.strip():
            return
        yield Fragment(
            display_path=self._document.display_path,
            start_line=1,
            end_line=max(1, len(text.splitlines())),
            content=text,
            origin="file",
        )

    def _fenced_blocks(self) -> Iterator[Fragment]:
        outline = self._outline or parse_markdown(self._document.text)
        for block in outline.fences:
            if not block.closed:
                raise MalformedDocument(
                    f"code fence opened here is never closed (info string {block.info_string or 'empty'!r})",
                    line=block.line,
                    column=1,
                )
            fragment = _fragment_from_block(self._document, block)
            if fragment is not None:
                logger.debug("Extracted fragment %s:%d", fragment.display_path, fragment.start_line)
                yield fragment


def _fragment_from_block(document: Document, block: FencedBlock) -> Fragment | None:
    if normalize_info_string(block.info_string) != "sql":
        return None
    if not any(line.strip() for line in block.content_lines):
        return None
    return Fragment(
        display_path=document.display_path,
        start_line=block.content_start_line,
        end_line=block.content_start_line + len(block.content_lines) - 1,
        content="\n".join(block.content_lines),
        origin="fenced",
        info_string=block.info_string,
    )


def extract_fragments(document: Document, outline: MarkdownOutline | None = None) -> FragmentStream:
    return FragmentStream(document, outline)
