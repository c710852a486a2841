"""Shared schemas for knots."""

from knots.schemas.document import DocumentMetadata, ParsedDocument
from knots.schemas.nodes import (
    BlockQuote,
    Bold,
    CalloutBox,
    CodeBlock,
    DiagramBlock,
    Heading,
    HorizontalRule,
    Image,
    InlineCode,
    Italic,
    LineBreak,
    Link,
    ListBlock,
    MathBlock,
    MathInline,
    Node,
    Paragraph,
    PlainText,
    Root,
    Table,
)

__all__ = [
    "BlockQuote",
    "Bold",
    "CalloutBox",
    "CodeBlock",
    "DiagramBlock",
    "DocumentMetadata",
    "Heading",
    "HorizontalRule",
    "Image",
    "InlineCode",
    "Italic",
    "LineBreak",
    "Link",
    "ListBlock",
    "MathBlock",
    "MathInline",
    "Node",
    "Paragraph",
    "ParsedDocument",
    "PlainText",
    "Root",
    "Table",
]
