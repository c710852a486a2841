"""knots: convert knots markup documents into HTML pages."""

from knots.engine import AssetFlags, HeadingEntry, RenderEngine
from knots.exceptions import (
    DocumentReadError,
    ImageReadError,
    KnotsError,
    ParseError,
    RenderError,
    RendererUnavailableError,
    TagStackError,
)
from knots.inline import parse_inline
from knots.metadata import scan_metadata
from knots.parser import parse_blocks, parse_document, parse_file
from knots.renderer import render
from knots.schemas import DocumentMetadata, ParsedDocument
from knots.transpiler import TranspileOptions, transpile, transpile_file

__all__ = [
    "AssetFlags",
    "DocumentMetadata",
    "DocumentReadError",
    "HeadingEntry",
    "ImageReadError",
    "KnotsError",
    "ParseError",
    "ParsedDocument",
    "RenderEngine",
    "RenderError",
    "RendererUnavailableError",
    "TagStackError",
    "TranspileOptions",
    "parse_blocks",
    "parse_document",
    "parse_file",
    "parse_inline",
    "render",
    "scan_metadata",
    "transpile",
    "transpile_file",
]
