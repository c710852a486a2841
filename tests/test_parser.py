"""Tests for the block grammar."""

from __future__ import annotations

from pathlib import Path

import pytest

from knots.exceptions import DocumentReadError, ParseError
from knots.parser import parse_blocks, parse_document, parse_file
from knots.schemas import (
    BlockQuote,
    CalloutBox,
    CodeBlock,
    DiagramBlock,
    Heading,
    HorizontalRule,
    Image,
    Italic,
    ListBlock,
    MathBlock,
    Paragraph,
    PlainText,
    Table,
)


def para(value: str) -> Paragraph:
    return Paragraph(children=(PlainText(text=value),))


def blocks(text: str) -> tuple:
    return parse_document(text, source_name="test.knots").root.children


class TestParagraphs:
    """Tests for the paragraph fallback."""

    def test_plain_sentence_is_one_paragraph(self) -> None:
        """The line terminator is not part of the text."""
        assert blocks("Just a plain sentence.\n") == (para("Just a plain sentence."),)

    def test_one_paragraph_per_line(self) -> None:
        assert blocks("First line\nSecond line") == (para("First line"), para("Second line"))

    def test_leading_whitespace_and_blank_lines_are_skipped(self) -> None:
        assert blocks("\n\n   indented paragraph\n\n") == (para("indented paragraph"),)

    def test_crlf_line_endings(self) -> None:
        assert blocks("# Title\r\nText\r\n") == (Heading(level=1, text="Title"), para("Text"))


class TestHorizontalRulesAndHeadings:
    """Tests for rules and headings."""

    def test_rules(self) -> None:
        assert blocks("***\n---\n___***\n") == (HorizontalRule(),) * 3

    def test_heading_levels(self) -> None:
        assert blocks("# One\n## Two\n### Three\n") == (
            Heading(level=1, text="One"),
            Heading(level=2, text="Two"),
            Heading(level=3, text="Three"),
        )

    def test_heading_text_is_trimmed(self) -> None:
        assert blocks("#   Spaced out   ") == (Heading(level=1, text="Spaced out"),)

    def test_longest_marker_wins(self) -> None:
        """Extra hashes stay in the text of a level 3 heading."""
        assert blocks("####x") == (Heading(level=3, text="#x"),)

    def test_rule_takes_priority_over_list(self) -> None:
        assert blocks("---") == (HorizontalRule(),)


class TestLists:
    """Tests for indentation-scoped lists."""

    def test_flat_list(self) -> None:
        assert blocks("- a\n- b\n") == (ListBlock(items=((para("a"),), (para("b"),))),)

    def test_nested_list_with_spaces(self) -> None:
        """An item one level deeper nests inside the previous item."""
        result = blocks("- a\n    - b\n- c\n")

        assert result == (
            ListBlock(
                items=(
                    (para("a"), ListBlock(items=((para("b"),),))),
                    (para("c"),),
                )
            ),
        )

    def test_nested_list_with_tab(self) -> None:
        result = blocks("- a\n\t- b\n")

        assert result == (ListBlock(items=((para("a"), ListBlock(items=((para("b"),),))),)),)

    def test_two_levels_of_nesting(self) -> None:
        result = blocks("- a\n    - b\n        - c\n")

        inner = ListBlock(items=((para("c"),),))
        middle = ListBlock(items=((para("b"), inner),))
        assert result == (ListBlock(items=((para("a"), middle),)),)

    def test_continuation_paragraph(self) -> None:
        assert blocks("- a\n    more text\n") == (ListBlock(items=((para("a"), para("more text")),)),)

    def test_wrong_depth_starts_a_new_block(self) -> None:
        """An item two levels deeper is not absorbed by the list."""
        result = blocks("- a\n        - deep\n")

        assert result == (
            ListBlock(items=((para("a"),),)),
            ListBlock(items=((para("deep"),),)),
        )

    def test_ragged_indentation_starts_a_new_block(self) -> None:
        result = blocks("- a\n  - b\n")

        assert len(result) == 2
        assert all(isinstance(block, ListBlock) for block in result)

    def test_blank_line_ends_the_list(self) -> None:
        assert len(blocks("- a\n\n- b")) == 2

    def test_item_with_inline_markup(self) -> None:
        result = blocks("- some *emphasis*")

        item = result[0].items[0]
        assert item == (
            Paragraph(children=(PlainText(text="some "), Italic(children=(PlainText(text="emphasis"),)))),
        )

    def test_bad_inline_markup_in_item_is_an_error(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            blocks("- fine\n- 2 * 3\n")

        assert exc_info.value.line_number == 2

    def test_indented_code_fence_ends_the_item(self) -> None:
        """A fence one level under an item becomes the next block."""
        result = blocks("- item\n    ```py\n    x = 1\n    ```\n")

        assert len(result) == 2
        assert result[0] == ListBlock(items=((para("item"),),))
        assert isinstance(result[1], CodeBlock)
        assert result[1].language == "py"
        assert "x = 1" in result[1].text

    def test_indented_display_math_ends_the_item(self) -> None:
        result = blocks("- item\n    $$x^2$$\n")

        assert result == (
            ListBlock(items=((para("item"),),)),
            MathBlock(latex="x^2"),
        )

    def test_bad_inline_markup_in_continuation_is_an_error(self) -> None:
        """The line leaves the list and then fails as a paragraph."""
        with pytest.raises(ParseError) as exc_info:
            blocks("- item\n    text *unclosed\n")

        assert exc_info.value.line_number == 2
        assert exc_info.value.line == "    text *unclosed"


class TestTables:
    """Tests for tables."""

    def test_table(self) -> None:
        result = blocks("| a | b |\n|---|---|\n| 1 | 2 |\n|3|4|\n")

        def cell(value: str) -> tuple:
            return (PlainText(text=value),)

        assert result == (
            Table(
                header=(cell("a"), cell("b")),
                rows=((cell("1"), cell("2")), (cell("3"), cell("4"))),
            ),
        )

    def test_aligned_delimiter(self) -> None:
        result = blocks("|a|b|\n|:---|---:|\n|1|2|")

        assert isinstance(result[0], Table)

    def test_row_with_wrong_cell_count_is_an_error(self) -> None:
        """Rows are never padded to the header width."""
        with pytest.raises(ParseError) as exc_info:
            blocks("|a|b|\n|---|---|\n|1|2|3|\n")

        assert exc_info.value.line_number == 3
        assert exc_info.value.line == "|1|2|3|"

    def test_table_without_rows_is_an_error(self) -> None:
        with pytest.raises(ParseError):
            blocks("|a|\n|---|\n")

    def test_pipes_without_delimiter_are_a_paragraph(self) -> None:
        assert blocks("|not a table|\n") == (para("|not a table|"),)


class TestFencedBlocks:
    """Tests for code, diagram and display math blocks."""

    def test_code_block_language_is_lowercased(self) -> None:
        assert blocks("```Python\nprint('hi')\n```\n") == (
            CodeBlock(language="python", text="print('hi')"),
        )

    def test_code_block_without_language(self) -> None:
        assert blocks("```\nx = 1\n```") == (CodeBlock(language=None, text="x = 1"),)

    def test_code_block_contents_are_verbatim(self) -> None:
        assert blocks("```\n**not bold** $x$\n    indented\n```") == (
            CodeBlock(text="**not bold** $x$\n    indented"),
        )

    def test_diagram_keyword(self) -> None:
        assert blocks("```Mermaid\ngraph TD;\nA-->B;\n```") == (
            DiagramBlock(text="graph TD;\nA-->B;"),
        )

    def test_unterminated_code_block_is_an_error(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            blocks("Intro\n```\ncode")

        assert exc_info.value.line_number == 2

    def test_display_math(self) -> None:
        assert blocks("$$\nx^2\n$$") == (MathBlock(latex="\nx^2\n"),)

    def test_unterminated_display_math_is_an_error(self) -> None:
        with pytest.raises(ParseError):
            blocks("$$x")


class TestPrefixedBlocks:
    """Tests for images, callouts and quotes."""

    def test_image(self) -> None:
        assert blocks("![A cat](cat.png)") == (Image(alt="A cat", source="cat.png"),)

    def test_callouts(self) -> None:
        result = blocks("?> info text\n!> careful\nx> broken\n")

        assert result == (
            CalloutBox(callout="info", children=(para("info text"),)),
            CalloutBox(callout="warning", children=(para("careful"),)),
            CalloutBox(callout="error", children=(para("broken"),)),
        )

    def test_block_quote(self) -> None:
        result = blocks("> quoted *words*")

        assert result == (
            BlockQuote(
                children=(
                    Paragraph(children=(PlainText(text="quoted "), Italic(children=(PlainText(text="words"),)))),
                )
            ),
        )


class TestFailurePolicy:
    """Tests for syntax errors and residue."""

    def test_reports_first_offending_line(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            blocks("Fine line\nbad * line\nalso fine\n")

        assert exc_info.value.line_number == 2
        assert exc_info.value.line == "bad * line"

    def test_line_numbers_count_metadata_lines(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse_document("%title T\nbad * line", source_name="x")

        assert exc_info.value.line_number == 2

    def test_parse_blocks_returns_residue(self) -> None:
        root, residue = parse_blocks("ok\nbad * line\n")

        assert root.children == (para("ok"),)
        assert residue == "bad * line\n"

    def test_trailing_whitespace_leaves_no_residue(self) -> None:
        _, residue = parse_blocks("ok\n\n   \n")

        assert residue == ""


class TestParseDocument:
    """Tests for whole-document parsing."""

    def test_metadata_and_body(self) -> None:
        document = parse_document("%title Notes\n%author Ann\n# Hi\n", source_name="n.knots")

        assert document.metadata.title == "Notes"
        assert document.metadata.authors == ["Ann"]
        assert document.root.children == (Heading(level=1, text="Hi"),)

    def test_parse_file_uses_file_name_as_title(self, tmp_path: Path) -> None:
        path = tmp_path / "notes.knots"
        path.write_text("Hello\n", encoding="utf-8")

        document = parse_file(path)

        assert document.metadata.title == "notes.knots"
        assert document.root.children == (para("Hello"),)

    def test_parse_file_missing(self, tmp_path: Path) -> None:
        with pytest.raises(DocumentReadError, match="Failed to open file"):
            parse_file(tmp_path / "missing.knots")
