"""Stateful HTML writer shared by every node of one render pass."""

from __future__ import annotations

import base64
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from knots.exceptions import ImageReadError, TagStackError
from knots.text_utils import (
    escape_attribute,
    get_alpha_numeral,
    get_roman_numeral,
    heading_anchor,
    js_string,
)

logger = logging.getLogger(__name__)

Attributes = Iterable[tuple[str, str]]

_REMOTE_PREFIXES = ("http://", "https://")


@dataclass(frozen=True)
class HeadingEntry:
    """One heading as listed in the document summary.

    Attributes:
        anchor: Element id of the heading.
        level: Heading level, 1 to 3.
        label: Displayed text, prefixed with its number for levels 1 and 2.
    """

    anchor: str
    level: int
    label: str


@dataclass(frozen=True)
class AssetFlags:
    """What the page assembler must append after the document body."""

    math_script: str
    include_math: bool
    include_highlight: bool
    include_diagrams: bool
    languages: frozenset[str]


class RenderEngine:
    """Writes indented HTML and tracks state no single node can decide.

    One engine renders one document; it is not reentrant.

    Args:
        base_dir: Directory local image paths are resolved against. Defaults
            to the working directory.
        depth: Indentation level the output will be embedded at.
    """

    def __init__(self, *, base_dir: Path | None = None, depth: int = 0) -> None:
        self._buf: list[str] = []
        self._tags: list[str] = []
        self._depth = depth
        self._base_dir = base_dir
        # class of the container content returns to after wide blocks
        self.current_container = "container"
        self._lvl1_titles = 0
        self._lvl2_titles = 0
        self._maths_blocks = 0
        self._languages: set[str] = set()
        self._math_statements: list[str] = []
        self._headings: list[HeadingEntry] = []
        self.include_math = False
        self.include_highlight = False
        self.include_diagrams = False

    @property
    def indentation(self) -> int:
        return self._depth + len(self._tags)

    @property
    def headings(self) -> tuple[HeadingEntry, ...]:
        return tuple(self._headings)

    @property
    def math_script(self) -> str:
        return "".join(self._math_statements)

    @property
    def assets(self) -> AssetFlags:
        return AssetFlags(
            math_script=self.math_script,
            include_math=self.include_math,
            include_highlight=self.include_highlight,
            include_diagrams=self.include_diagrams,
            languages=frozenset(self._languages),
        )

    def finish(self) -> str:
        """Return the rendered markup.

        Raises:
            TagStackError: If some tags were never closed.
        """
        if self._tags:
            raise TagStackError(f"Unclosed tags: {', '.join(self._tags)}")
        return "".join(self._buf)

    # writing

    def start_tag(self, tag_name: str, attributes: Attributes = ()) -> None:
        self._buf.append(self._format_start_tag(tag_name, attributes))
        self._tags.append(tag_name)

    def end_tag(self) -> None:
        """Close the most recently opened tag.

        Raises:
            TagStackError: If no tag is open.
        """
        if not self._tags:
            raise TagStackError("end_tag() called with no open tag")
        tag_name = self._tags.pop()
        self._buf.append(f"{self._blanks()}</{tag_name}>\n")

    def orphan_tag(self, tag_name: str, attributes: Attributes = ()) -> None:
        """Write a tag that has no closing counterpart (``<hr>``, ``<img>``)."""
        self._buf.append(self._format_start_tag(tag_name, attributes))

    def inline_tag(self, tag_name: str, attributes: Attributes, contents: str) -> None:
        """Write an element and its contents on one line, contents verbatim."""
        self._buf.append(f"{self._blanks()}{self.format_tag(tag_name, attributes, contents)}\n")

    def write_content(self, content: str) -> None:
        """Write text inside the current tag, indenting every line."""
        blanks = self._blanks()
        content = content.replace("\r\n", "\n").replace("\n", "\n" + blanks)
        self._buf.append(f"{blanks}{content}\n")

    def write_raw(self, markup: str) -> None:
        """Append already indented markup unchanged."""
        if markup and not markup.endswith("\n"):
            markup += "\n"
        self._buf.append(markup)

    @staticmethod
    def format_tag(tag_name: str, attributes: Attributes, contents: str) -> str:
        return f"<{tag_name}{_format_attributes(attributes)}>{contents}</{tag_name}>"

    # cross-node state

    def add_heading(self, level: int, text: str) -> HeadingEntry:
        """Number a heading, build its anchor and add it to the summary."""
        if level == 1:
            self._lvl1_titles += 1
            # a new section restarts the level 2 numbering
            self._lvl2_titles = 0
            number = get_roman_numeral(self._lvl1_titles)
        elif level == 2:
            self._lvl2_titles += 1
            number = get_alpha_numeral(self._lvl2_titles)
        elif level == 3:
            number = ""
        else:
            raise ValueError(f"Unsupported heading level: {level}")

        anchor = heading_anchor(level, self._lvl1_titles, self._lvl2_titles, text)
        label = f"{number} - {text}" if number else text
        entry = HeadingEntry(anchor=anchor, level=level, label=label)
        self._headings.append(entry)
        return entry

    def next_math_id(self) -> str:
        """Reserve the element id of the next maths placeholder."""
        self.include_math = True
        self._maths_blocks += 1
        return f"maths{self._maths_blocks}"

    def defer_math(self, latex: str, element_id: str, *, display: bool = False) -> None:
        """Queue the script statement rendering ``latex`` into ``element_id``."""
        options = "{ throwOnError: false, displayMode: %s }" % ("true" if display else "false")
        self._math_statements.append(
            f"katex.render({js_string(latex)}, document.getElementById({js_string(element_id)}), {options});\n"
        )

    def add_language(self, language: str | None) -> None:
        self.include_highlight = True
        if language:
            self._languages.add(language)

    def read_image(self, source: str) -> str:
        """Return an ``src`` value for an image.

        Web addresses are kept as they are; local files are inlined as base64
        ``data:`` URIs so the page stays self-contained.

        Raises:
            ImageReadError: If the local file cannot be read.
        """
        if source.startswith(_REMOTE_PREFIXES):
            return source

        path = Path(source)
        if not path.is_absolute() and self._base_dir is not None:
            path = self._base_dir / path
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise ImageReadError(f"Unable to open image {source}: {exc}") from exc

        logger.debug("Embedding image %s (%d bytes)", path, len(data))
        mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"

    def _blanks(self) -> str:
        return "\t" * self.indentation

    def _format_start_tag(self, tag_name: str, attributes: Attributes) -> str:
        return f"{self._blanks()}<{tag_name}{_format_attributes(attributes)}>\n"


def _format_attributes(attributes: Attributes) -> str:
    return "".join(f' {name}="{escape_attribute(value)}"' for name, value in attributes)
