"""Parsed document models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from knots.schemas.nodes import Root


class DocumentMetadata(BaseModel):
    """Metadata collected from the ``%key value`` lines heading a document."""

    title: str
    authors: list[str] = Field(default_factory=list)
    license: str | None = None


class ParsedDocument(BaseModel):
    """Final parser output: metadata plus the document tree."""

    metadata: DocumentMetadata
    root: Root
