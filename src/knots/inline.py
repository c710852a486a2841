"""Inline grammar: links, emphasis, math, code and plain text."""

from __future__ import annotations

from typing import Callable, Optional

from knots.exceptions import ParseError
from knots.schemas import Bold, InlineCode, Italic, Link, MathInline, Node, PlainText

# Characters that may open an inline construct and therefore end plain text.
_RESERVED = frozenset("[*_`$")
# A dollar followed by one of these is currency, not a math opener.
_CURRENCY_FOLLOWERS = frozenset(" ?!.,;")

_Parsed = Optional[tuple[Node, int]]


def parse_inline(segment: str) -> tuple[Node, ...]:
    """Parse a whole line segment into inline nodes.

    Raises:
        ParseError: If some part of the segment matches no inline rule.
    """
    nodes, end = match_inline(segment)
    if end != len(segment):
        raise ParseError(
            f"Cannot parse inline text at column {end + 1}: {segment!r}",
            line=segment,
        )
    return nodes


def match_inline(segment: str, pos: int = 0) -> tuple[tuple[Node, ...], int]:
    """Parse as many inline nodes as possible starting at ``pos``.

    Returns:
        Tuple of (nodes, end position). Parsing stops at the first position
        where no inline rule applies.
    """
    nodes, end = _parse_run(segment, pos)
    return tuple(nodes), end


def _parse_run(text: str, pos: int) -> tuple[list[Node], int]:
    nodes: list[Node] = []
    while pos < len(text):
        parsed = _parse_one(text, pos)
        if parsed is None:
            break
        node, pos = parsed
        nodes.append(node)
    return nodes, pos


def _parse_one(text: str, pos: int) -> _Parsed:
    for alternative in _ALTERNATIVES:
        parsed = alternative(text, pos)
        if parsed is not None:
            return parsed
    return None


def _link(text: str, pos: int) -> _Parsed:
    if not text.startswith("[", pos):
        return None
    label_end = text.find("]", pos + 1)
    if label_end == -1 or not text.startswith("(", label_end + 1):
        return None
    target_end = text.find(")", label_end + 2)
    if target_end == -1:
        return None
    link = Link(label=text[pos + 1 : label_end], target=text[label_end + 2 : target_end])
    return link, target_end + 1


def _wrapped(text: str, pos: int, delimiters: tuple[str, ...], factory: type[Bold] | type[Italic]) -> _Parsed:
    for delimiter in delimiters:
        if not text.startswith(delimiter, pos):
            continue
        children, end = _parse_run(text, pos + len(delimiter))
        if children and text.startswith(delimiter, end):
            return factory(children=tuple(children)), end + len(delimiter)
    return None


def _bold(text: str, pos: int) -> _Parsed:
    return _wrapped(text, pos, ("**", "__"), Bold)


def _italic(text: str, pos: int) -> _Parsed:
    return _wrapped(text, pos, ("*", "_"), Italic)


def _inline_math(text: str, pos: int) -> _Parsed:
    if not text.startswith("$", pos):
        return None
    start = pos + 1
    if start >= len(text) or text[start] in _CURRENCY_FOLLOWERS:
        return None
    end = text.find("$", start)
    if end <= start:
        return None
    return MathInline(latex=text[start:end]), end + 1


def _inline_code(text: str, pos: int) -> _Parsed:
    if not text.startswith("`", pos):
        return None
    end = text.find("`", pos + 1)
    if end <= pos + 1:
        return None
    return InlineCode(text=text[pos + 1 : end]), end + 1


def _plain_text(text: str, pos: int) -> _Parsed:
    end = pos
    while end < len(text):
        char = text[end]
        if char == "$":
            following = text[end + 1 : end + 2]
            if following and following not in _CURRENCY_FOLLOWERS:
                break
        elif char in _RESERVED:
            break
        end += 1
    if end == pos:
        return None
    return PlainText(text=text[pos:end]), end


# Tried in this order at every position; the first match wins.
_ALTERNATIVES: tuple[Callable[[str, int], _Parsed], ...] = (
    _link,
    _bold,
    _italic,
    _inline_math,
    _inline_code,
    _plain_text,
)
