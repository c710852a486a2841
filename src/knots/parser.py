"""Parse knots markup into a document tree."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable

from knots.config import DIAGRAM_LANGUAGE, INDENT_WIDTH
from knots.exceptions import DocumentReadError, ParseError
from knots.inline import match_inline
from knots.metadata import scan_metadata
from knots.schemas import (
    BlockQuote,
    CalloutBox,
    CodeBlock,
    DiagramBlock,
    Heading,
    HorizontalRule,
    Image,
    ListBlock,
    MathBlock,
    Node,
    Paragraph,
    ParsedDocument,
    Root,
    Table,
)

logger = logging.getLogger(__name__)

_HORIZONTAL_RULE_RE = re.compile(r"(?:\*\*\*|---|___)[*_-]*[ \t]*")
_LIST_ITEM_RE = re.compile(r"(?P<indent>[ \t]*)-[ \t]*(?P<body>\S.*)")
_TABLE_ROW_RE = re.compile(r"\|(?P<cells>.*)\|[ \t]*")
_TABLE_DELIMITER_CELL_RE = re.compile(r"[ \t]*:?-+:?[ \t]*")
_CODE_FENCE_RE = re.compile(r"```(?P<language>[A-Za-z0-9]*)[ \t]*")
_IMAGE_RE = re.compile(r"!\[(?P<alt>[^\]]*)\]\((?P<source>[^)]*)\)")
_CALLOUT_PREFIXES = (("?>", "info"), ("!>", "warning"), ("x>", "error"))


def parse_file(path: Path | str) -> ParsedDocument:
    """Read and parse a knots file.

    The file name stands in for the title when the document has none.

    Raises:
        DocumentReadError: If the file cannot be read as UTF-8 text.
        ParseError: If the contents do not match the grammar.
    """
    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentReadError(f"Failed to open file {source}: {exc}") from exc
    return parse_document(text, source_name=source.name)


def parse_document(text: str, *, source_name: str) -> ParsedDocument:
    """Parse metadata lines and the document body.

    Args:
        text: Full document text.
        source_name: Fallback title, usually the source file name.

    Returns:
        The parsed document.

    Raises:
        ParseError: If any non-whitespace input cannot be parsed. The error
            names the first offending line.
    """
    text = text.replace("\r\n", "\n")
    metadata, body = scan_metadata(text, source_name=source_name)
    first_line = text.count("\n", 0, len(text) - len(body)) + 1

    root, residue = parse_blocks(body, first_line=first_line)
    if residue:
        offset = len(body) - len(residue)
        line_start = body.rfind("\n", 0, offset) + 1
        line_end = body.find("\n", offset)
        line = body[line_start : line_end if line_end != -1 else len(body)]
        line_number = first_line + body.count("\n", 0, offset)
        raise ParseError(
            f"Syntax error on line {line_number}: {line!r}",
            line_number=line_number,
            line=line,
        )

    logger.debug("Parsed %d top-level blocks from %s", len(root.children), source_name)
    return ParsedDocument(metadata=metadata, root=root)


def parse_blocks(text: str, *, first_line: int = 1) -> tuple[Root, str]:
    """Apply the block rules until the input is exhausted or none matches.

    Args:
        text: Document body, without metadata lines.
        first_line: Line number of the first line of ``text``, for errors.

    Returns:
        Tuple of (root node, unparsed residue). The residue is empty when the
        whole input was consumed.

    Raises:
        ParseError: If a rule that matched its opening fails further on
            (unterminated fence, malformed table, bad inline markup inside a
            list item, callout or quote).
    """
    return _BlockParser(text.replace("\r\n", "\n"), first_line=first_line).parse()


def _indent_depth(indent: str) -> int | None:
    """Count nesting levels in leading whitespace; ``None`` if it is ragged."""
    depth = 0
    pos = 0
    unit = " " * INDENT_WIDTH
    while pos < len(indent):
        if indent[pos] == "\t":
            pos += 1
        elif indent.startswith(unit, pos):
            pos += INDENT_WIDTH
        else:
            return None
        depth += 1
    return depth


def _split_cells(cells: str) -> list[str]:
    return [cell.strip(" \t") for cell in cells.split("|")]


class _BlockParser:
    """Cursor over the body text applying block rules in priority order."""

    def __init__(self, text: str, *, first_line: int) -> None:
        self._text = text
        self._pos = 0
        self._first_line = first_line
        self._alternatives: tuple[Callable[[], Node | None], ...] = (
            self._horizontal_rule,
            self._heading,
            self._list,
            self._table,
            self._code_block,
            self._math_block,
            self._image,
            self._callout,
            self._block_quote,
            self._paragraph,
        )

    def parse(self) -> tuple[Root, str]:
        blocks: list[Node] = []
        while True:
            self._skip_whitespace()
            if self._at_end():
                break
            block = self._parse_block()
            if block is None:
                break
            blocks.append(block)
        return Root(children=tuple(blocks)), self._text[self._pos :]

    def _parse_block(self) -> Node | None:
        for alternative in self._alternatives:
            block = alternative()
            if block is not None:
                return block
        return None

    # cursor helpers

    def _at_end(self) -> bool:
        return self._pos >= len(self._text)

    def _skip_whitespace(self) -> None:
        while not self._at_end() and self._text[self._pos].isspace():
            self._pos += 1

    def _line_end(self, pos: int | None = None) -> int:
        start = self._pos if pos is None else pos
        end = self._text.find("\n", start)
        return len(self._text) if end == -1 else end

    def _current_line(self) -> str:
        return self._text[self._pos : self._line_end()]

    def _advance_line(self) -> None:
        self._pos = min(self._line_end() + 1, len(self._text))

    def _error(self, message: str, pos: int) -> ParseError:
        line_start = self._text.rfind("\n", 0, pos) + 1
        line = self._text[line_start : self._line_end(line_start)]
        line_number = self._first_line + self._text.count("\n", 0, pos)
        return ParseError(
            f"{message} on line {line_number}: {line!r}",
            line_number=line_number,
            line=line,
        )

    def _inline(self, segment: str, pos: int) -> tuple[Node, ...]:
        nodes, end = match_inline(segment)
        if end != len(segment):
            raise self._error("Cannot parse inline text", pos)
        return nodes

    # block rules

    def _horizontal_rule(self) -> HorizontalRule | None:
        if not _HORIZONTAL_RULE_RE.fullmatch(self._current_line()):
            return None
        self._advance_line()
        return HorizontalRule()

    def _heading(self) -> Heading | None:
        line = self._current_line()
        for level in (3, 2, 1):
            marker = "#" * level
            if line.startswith(marker):
                self._advance_line()
                return Heading(level=level, text=line[level:].strip(" \t"))
        return None

    def _list(self) -> ListBlock | None:
        return self._list_at(depth=0)

    def _match_item(self, depth: int) -> str | None:
        match = _LIST_ITEM_RE.fullmatch(self._current_line())
        if not match or _indent_depth(match.group("indent")) != depth:
            return None
        return match.group("body")

    def _list_at(self, depth: int) -> ListBlock | None:
        items: list[tuple[Node, ...]] = []
        while not self._at_end():
            body = self._match_item(depth)
            if body is None:
                break
            item: list[Node] = [Paragraph(children=self._inline(body, self._pos))]
            self._advance_line()

            # Continuation lines sit exactly one level deeper than the item.
            while not self._at_end():
                line = self._current_line()
                content = line.lstrip(" \t")
                if not content or _indent_depth(line[: len(line) - len(content)]) != depth + 1:
                    break
                if self._match_item(depth + 1) is not None:
                    nested = self._list_at(depth + 1)
                    if nested is not None:
                        item.append(nested)
                    continue
                # Anything but a paragraph ends the item and is parsed as a block.
                nodes, end = match_inline(content)
                if not nodes or end != len(content):
                    break
                item.append(Paragraph(children=nodes))
                self._advance_line()
            items.append(tuple(item))

        if not items:
            return None
        return ListBlock(items=tuple(items))

    def _table(self) -> Table | None:
        header_match = _TABLE_ROW_RE.fullmatch(self._current_line())
        if not header_match:
            return None
        header_pos = self._pos
        next_line_start = self._line_end() + 1
        if next_line_start > len(self._text):
            return None
        delimiter_match = _TABLE_ROW_RE.fullmatch(
            self._text[next_line_start : self._line_end(next_line_start)]
        )
        if not delimiter_match:
            return None
        delimiter_cells = delimiter_match.group("cells").split("|")
        if not all(_TABLE_DELIMITER_CELL_RE.fullmatch(cell) for cell in delimiter_cells):
            return None

        header_cells = _split_cells(header_match.group("cells"))
        width = len(header_cells)
        if len(delimiter_cells) != width:
            raise self._error(
                f"Table delimiter has {len(delimiter_cells)} cells, header has {width}",
                next_line_start,
            )
        header = tuple(self._inline(cell, header_pos) for cell in header_cells)
        self._pos = next_line_start
        self._advance_line()

        rows: list[tuple[tuple[Node, ...], ...]] = []
        while not self._at_end():
            row_match = _TABLE_ROW_RE.fullmatch(self._current_line())
            if not row_match:
                break
            cells = _split_cells(row_match.group("cells"))
            if len(cells) != width:
                raise self._error(f"Table row has {len(cells)} cells, header has {width}", self._pos)
            rows.append(tuple(self._inline(cell, self._pos) for cell in cells))
            self._advance_line()

        if not rows:
            raise self._error("Table has no data rows", header_pos)
        return Table(header=header, rows=tuple(rows))

    def _code_block(self) -> CodeBlock | DiagramBlock | None:
        match = _CODE_FENCE_RE.fullmatch(self._current_line())
        if not match:
            return None
        fence_pos = self._pos
        body_start = self._line_end() + 1
        body_end = self._text.find("```", body_start) if body_start <= len(self._text) else -1
        if body_end == -1:
            raise self._error("Unterminated code block", fence_pos)

        body = self._text[body_start:body_end]
        if body.endswith("\n"):
            body = body[:-1]
        self._pos = body_end + 3

        language = match.group("language").lower() or None
        if language == DIAGRAM_LANGUAGE:
            return DiagramBlock(text=body)
        return CodeBlock(language=language, text=body)

    def _math_block(self) -> MathBlock | None:
        if not self._text.startswith("$$", self._pos):
            return None
        end = self._text.find("$$", self._pos + 2)
        if end == -1:
            raise self._error("Unterminated maths block", self._pos)
        latex = self._text[self._pos + 2 : end]
        self._pos = end + 2
        return MathBlock(latex=latex)

    def _image(self) -> Image | None:
        match = _IMAGE_RE.match(self._current_line())
        if not match:
            return None
        self._pos += match.end()
        return Image(alt=match.group("alt"), source=match.group("source"))

    def _prefixed_paragraph(self, prefix: str) -> tuple[Node, ...] | None:
        line = self._current_line()
        if not line.startswith(prefix):
            return None
        body = line[len(prefix) :].lstrip(" \t")
        if not body.strip():
            return None
        children = (Paragraph(children=self._inline(body, self._pos)),)
        self._advance_line()
        return children

    def _callout(self) -> CalloutBox | None:
        for prefix, callout in _CALLOUT_PREFIXES:
            children = self._prefixed_paragraph(prefix)
            if children is not None:
                return CalloutBox(callout=callout, children=children)
        return None

    def _block_quote(self) -> BlockQuote | None:
        children = self._prefixed_paragraph(">")
        if children is None:
            return None
        return BlockQuote(children=children)

    def _paragraph(self) -> Paragraph | None:
        line = self._current_line()
        nodes, end = match_inline(line)
        if not nodes or end != len(line):
            return None
        self._advance_line()
        return Paragraph(children=nodes)
