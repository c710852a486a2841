"""Document tree models.

Every node is an immutable pydantic model tagged by its ``kind`` field; the
``Node`` union dispatches on that tag. Nodes never reference their parent.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)


class PlainText(_Node):
    """A run of text written as-is."""

    kind: Literal["text"] = "text"
    text: str


class LineBreak(_Node):
    kind: Literal["line_break"] = "line_break"


class HorizontalRule(_Node):
    kind: Literal["horizontal_rule"] = "horizontal_rule"


class InlineCode(_Node):
    """Backtick-delimited code, kept verbatim."""

    kind: Literal["inline_code"] = "inline_code"
    text: str


class MathInline(_Node):
    """Inline LaTeX expression delimited by single dollars."""

    kind: Literal["math_inline"] = "math_inline"
    latex: str

    @field_validator("latex")
    @classmethod
    def _no_delimiter(cls, value: str) -> str:
        if "$" in value:
            raise ValueError("inline math cannot contain '$'")
        return value


class MathBlock(_Node):
    """Display LaTeX expression delimited by double dollars."""

    kind: Literal["math_block"] = "math_block"
    latex: str

    @field_validator("latex")
    @classmethod
    def _no_delimiter(cls, value: str) -> str:
        if "$$" in value:
            raise ValueError("display math cannot contain '$$'")
        return value


class Link(_Node):
    kind: Literal["link"] = "link"
    label: str
    target: str


class Image(_Node):
    kind: Literal["image"] = "image"
    alt: str
    source: str


class Bold(_Node):
    kind: Literal["bold"] = "bold"
    children: tuple[Node, ...] = ()


class Italic(_Node):
    kind: Literal["italic"] = "italic"
    children: tuple[Node, ...] = ()


class Paragraph(_Node):
    kind: Literal["paragraph"] = "paragraph"
    children: tuple[Node, ...] = ()


class BlockQuote(_Node):
    kind: Literal["block_quote"] = "block_quote"
    children: tuple[Node, ...] = ()


class CalloutBox(_Node):
    """Highlighted info, warning or error box."""

    kind: Literal["callout"] = "callout"
    callout: Literal["info", "warning", "error"]
    children: tuple[Node, ...] = ()


class Heading(_Node):
    kind: Literal["heading"] = "heading"
    level: int = Field(..., ge=1, le=3)
    text: str


class CodeBlock(_Node):
    """Fenced code block with an optional lowercase language token."""

    kind: Literal["code_block"] = "code_block"
    language: str | None = None
    text: str

    @field_validator("language")
    @classmethod
    def _lowercase(cls, value: str | None) -> str | None:
        return value.lower() if value else None


class DiagramBlock(_Node):
    """Fenced block holding diagram source for the client-side renderer."""

    kind: Literal["diagram"] = "diagram"
    text: str


class ListBlock(_Node):
    """Unordered list; each item is a non-empty node sequence."""

    kind: Literal["list"] = "list"
    items: tuple[tuple[Node, ...], ...]

    @field_validator("items")
    @classmethod
    def _non_empty_items(cls, items: tuple[tuple[Node, ...], ...]) -> tuple[tuple[Node, ...], ...]:
        if not items:
            raise ValueError("a list needs at least one item")
        if any(not item for item in items):
            raise ValueError("list items cannot be empty")
        return items


class Table(_Node):
    """Table with a header row; cells are inline node sequences."""

    kind: Literal["table"] = "table"
    header: tuple[tuple[Node, ...], ...]
    rows: tuple[tuple[tuple[Node, ...], ...], ...]

    @model_validator(mode="after")
    def _rectangular(self) -> Table:
        if not self.header:
            raise ValueError("a table needs at least one header cell")
        width = len(self.header)
        for index, row in enumerate(self.rows, start=1):
            if len(row) != width:
                raise ValueError(f"row {index} has {len(row)} cells, header has {width}")
        return self


class Root(_Node):
    """The single top-level node owning the whole block sequence."""

    kind: Literal["root"] = "root"
    children: tuple[Node, ...] = ()


Node = Annotated[
    Union[
        Root,
        Heading,
        Paragraph,
        BlockQuote,
        CalloutBox,
        ListBlock,
        Table,
        CodeBlock,
        DiagramBlock,
        MathBlock,
        MathInline,
        Bold,
        Italic,
        Link,
        Image,
        InlineCode,
        HorizontalRule,
        LineBreak,
        PlainText,
    ],
    Field(discriminator="kind"),
]

for _model in (Bold, Italic, Paragraph, BlockQuote, CalloutBox, ListBlock, Table, Root):
    _model.model_rebuild()
