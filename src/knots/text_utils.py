"""Numbering, anchor and escaping helpers for HTML output."""

from __future__ import annotations

import json
import string

_ALPHABET = string.ascii_uppercase
_ROMAN_UNITS = ("", "I", "II", "III", "IV", "V", "VI", "VII", "VIII", "IX")
_ANCHOR_EXTRA_CHARS = frozenset("_-!?")


def get_roman_numeral(num: int) -> str:
    """Return the level 1 heading label for ``num``.

    Tens are written as repeated ``X``, so labels stop being proper roman
    numerals from 40 on (``40`` gives ``XXXX``).
    """
    return "X" * (num // 10) + _ROMAN_UNITS[num % 10]


def get_alpha_numeral(num: int) -> str:
    """Return the level 2 heading label for ``num`` (1 -> A), clamped to Z."""
    index = min(max(num, 1), len(_ALPHABET)) - 1
    return _ALPHABET[index]


def heading_anchor(level: int, lvl1_count: int, lvl2_count: int, text: str) -> str:
    """Build the anchor id of a heading from the counters and its text."""
    anchor = ""
    if level >= 1:
        anchor += f"{lvl1_count}-"
    if level >= 2:
        anchor += f"{lvl2_count}-"
    if level >= 3:
        anchor += "part-"
    slug = "".join(
        char
        for char in text.replace(" ", "-")
        if (char.isascii() and char.isalnum()) or char in _ANCHOR_EXTRA_CHARS
    )
    return anchor + slug


def escape_html(text: str) -> str:
    """Escape ``&``, ``<`` and ``>``; quotes are left alone."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def escape_attribute(value: str) -> str:
    return escape_html(value).replace('"', "&quot;")


def js_string(text: str) -> str:
    """Encode ``text`` as a JavaScript string literal safe inside <script>."""
    return json.dumps(text).replace("</", "<\\/")
