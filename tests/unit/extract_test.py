"""Unit tests for Markdown structure parsing and fragment extraction."""

from __future__ import annotations

import pytest

from sql_docs_lint.config import LintConfig
from sql_docs_lint.core.errors import MalformedDocument
from sql_docs_lint.core.extract import extract_fragments
from sql_docs_lint.core.markdown import parse_markdown
from sql_docs_lint.core.report import check_corpus

GUIDE = """\
# Guide

Intro paragraph.

```sql
SELECT *
FROM products
WHERE category = {{category}};
```

```bash
echo "not sql"
```

## Optional clauses

~~~postgresql title="optional"
SELECT * FROM products [[WHERE {{category}}]];
~~~

Setext heading
--------------

- In a list:

  ```sql
  SELECT 1;
  ```
"""


class TestParseMarkdown:
    def test_finds_fences_with_info_strings(self) -> None:
        outline = parse_markdown(GUIDE)
        assert [(f.line, f.info_string, f.closed) for f in outline.fences] == [
            (5, "sql", True),
            (11, "bash", True),
            (17, 'postgresql title="optional"', True),
            (26, "sql", True),
        ]

    def test_fence_content_lines(self) -> None:
        outline = parse_markdown(GUIDE)
        assert outline.fences[0].content_lines == ("SELECT *", "FROM products", "WHERE category = {{category}};")

    def test_finds_atx_and_setext_headings(self) -> None:
        outline = parse_markdown(GUIDE)
        assert [(h.text, h.line) for h in outline.headings] == [
            ("Guide", 1),
            ("Optional clauses", 15),
            ("Setext heading", 21),
        ]

    def test_code_lines_cover_fences(self) -> None:
        outline = parse_markdown(GUIDE)
        assert {5, 6, 7, 8, 9, 11, 12, 13}.issubset(outline.code_lines)
        assert 3 not in outline.code_lines

    def test_block_quoted_fence_drops_quote_prefix(self) -> None:
        outline = parse_markdown("# G\n\n> ```sql\n> SELECT 1;\n>   FROM t;\n> ```\n")
        (fence,) = outline.fences
        assert fence.closed is True
        assert fence.content_lines == ("SELECT 1;", "  FROM t;")

    def test_unclosed_fence(self) -> None:
        outline = parse_markdown("# Title\n\n```sql\nSELECT 1;\n")
        assert len(outline.fences) == 1
        assert outline.fences[0].closed is False
        assert outline.fences[0].line == 3


class TestExtractFragments:
    def test_markdown_yields_sql_fences_in_order(self, make_document) -> None:
        fragments = list(extract_fragments(make_document(GUIDE)))

        assert [f.start_line for f in fragments] == [6, 18, 27]
        assert all(f.origin == "fenced" for f in fragments)
        first = fragments[0]
        assert first.end_line == 8
        assert first.content.splitlines()[0] == "SELECT *"
        assert fragments[1].info_string == 'postgresql title="optional"'
        assert "SELECT 1;" in fragments[2].content

    def test_stream_is_restartable(self, make_document) -> None:
        stream = extract_fragments(make_document(GUIDE))
        assert list(stream) == list(stream)

    def test_sql_file_is_one_fragment(self, make_document) -> None:
        text = "-- Example 1\nSELECT 1;\n\n-- Example 2\nSELECT 2;\n"
        fragments = list(extract_fragments(make_document(text, name="queries.sql")))

        assert len(fragments) == 1
        assert fragments[0].origin == "file"
        assert fragments[0].start_line == 1
        assert fragments[0].end_line == 5
        assert fragments[0].content == text

    def test_empty_sql_fence_is_skipped(self, make_document) -> None:
        assert list(extract_fragments(make_document("```sql\n```\n"))) == []

    def test_unclosed_fence_raises_after_earlier_fragments(self, make_document) -> None:
        document = make_document("```sql\nSELECT 1;\n```\n\nText.\n\n```sql\nSELECT 2;\n")
        stream = iter(extract_fragments(document))

        assert next(stream).start_line == 2
        with pytest.raises(MalformedDocument) as exc_info:
            next(stream)
        assert exc_info.value.line == 7

    def test_block_quoted_sql_is_clean(self, write_corpus) -> None:
        root = write_corpus({"g.md": "# G\n\n> ```sql\n> SELECT 1;\n> ```\n"})
        assert check_corpus(root, LintConfig(strict=True)).findings == []
