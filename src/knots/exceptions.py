"""Custom exceptions for knots."""

from __future__ import annotations


class KnotsError(Exception):
    """Base exception for knots operations."""


class DocumentReadError(KnotsError):
    """Error reading a source document from disk."""


class ParseError(KnotsError):
    """Input text does not match the markup grammar.

    Attributes:
        line_number: 1-based line number of the first offending line.
        line: The offending line, verbatim.
    """

    def __init__(self, message: str, *, line_number: int | None = None, line: str | None = None) -> None:
        super().__init__(message)
        self.line_number = line_number
        self.line = line


class RenderError(KnotsError):
    """Error during document rendering."""


class TagStackError(RenderError):
    """Tag open/close calls are unbalanced."""


class ImageReadError(RenderError):
    """A local image could not be read for embedding."""


class RendererUnavailableError(KnotsError):
    """No HTML to PDF engine is installed."""
