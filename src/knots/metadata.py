"""Scan the ``%key value`` metadata lines at the top of a document."""

from __future__ import annotations

import logging
import re

from knots.schemas import DocumentMetadata

logger = logging.getLogger(__name__)

_VARIABLE_RE = re.compile(r"%(?P<key>[A-Za-z]+)[ \t]+(?P<value>[^\r\n]*)(?:\r\n|\n|\r|$)")


def scan_metadata(text: str, *, source_name: str) -> tuple[DocumentMetadata, str]:
    """Consume metadata lines from the top of ``text``.

    Lines are read until the first one that is not a ``%key value`` pair.
    ``title`` and ``license`` keep their last value, ``author`` lines
    accumulate in order, anything else is warned about and skipped.

    Args:
        text: Full document text.
        source_name: Title used when the document declares none.

    Returns:
        Tuple of (metadata, remaining text).
    """
    title: str | None = None
    license_: str | None = None
    authors: list[str] = []

    pos = 0
    while pos < len(text):
        match = _VARIABLE_RE.match(text, pos)
        if not match or match.end() == pos:
            break
        key, value = match.group("key"), match.group("value")
        if key == "title":
            title = value
        elif key == "author":
            authors.append(value)
        elif key == "license":
            license_ = value
        else:
            logger.warning("unknown metadata: %s", key)
        pos = match.end()

    metadata = DocumentMetadata(
        title=title if title is not None else source_name,
        authors=authors,
        license=license_,
    )
    return metadata, text[pos:]
