"""Convert rendered HTML pages to PDF with WeasyPrint."""

from __future__ import annotations

import logging

from knots.exceptions import RendererUnavailableError

logger = logging.getLogger(__name__)

try:
    from weasyprint import CSS, HTML

    PDF_AVAILABLE = True
except Exception:
    PDF_AVAILABLE = False

# Scripts do not run during PDF layout: show every block and drop screen-only chrome.
_PRINT_CSS = """
@page { margin: 1.5cm 0; }
.anchor-icon { display: none; }
body { background-color: white; }
"""


def render_pdf(html: str, *, title: str, base_url: str | None = None) -> bytes:
    """Render an HTML page to PDF bytes.

    Args:
        html: The complete HTML page.
        title: Document title stored in the PDF metadata.
        base_url: Base used to resolve relative URLs inside the page.

    Returns:
        The PDF document.

    Raises:
        RendererUnavailableError: If WeasyPrint is not installed.
    """
    if not PDF_AVAILABLE:
        raise RendererUnavailableError(
            "WeasyPrint is required for PDF output (pip install 'knots[pdf]')."
        )

    logger.debug("Rendering PDF for %s", title)
    document = HTML(string=html, base_url=base_url).render(stylesheets=[CSS(string=_PRINT_CSS)])
    document.metadata.title = title
    return document.write_pdf()


__all__ = ["PDF_AVAILABLE", "render_pdf"]
