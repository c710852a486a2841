"""Assemble a complete HTML page from a parsed document."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from knots.assets import load_asset
from knots.config import KNOTS_KATEX_URL, KNOTS_MERMAID_URL, KNOTS_PRISM_URL
from knots.engine import AssetFlags, HeadingEntry, RenderEngine
from knots.highlight import find_plugins
from knots.parser import parse_file
from knots.renderer import render
from knots.schemas import DocumentMetadata, ParsedDocument
from knots.text_utils import escape_html

logger = logging.getLogger(__name__)

# <html> and <body> enclose the rendered document
_BODY_DEPTH = 2


@dataclass
class TranspileOptions:
    """Options for page assembly.

    Attributes:
        summary: If True, list the document headings before the body.
    """

    summary: bool = True


def transpile(
    document: ParsedDocument,
    *,
    options: TranspileOptions | None = None,
    base_dir: Path | None = None,
) -> str:
    """Render a parsed document into a standalone HTML page.

    Args:
        document: Parser output.
        options: Page options. Uses defaults if None.
        base_dir: Directory local image paths are resolved against.

    Returns:
        The HTML page.

    Raises:
        ImageReadError: If a local image cannot be read.
    """
    opts = options or TranspileOptions()
    metadata = document.metadata

    body = RenderEngine(base_dir=base_dir, depth=_BODY_DEPTH)
    body.start_tag("div", [("class", "container")])
    render(document.root, body)
    body.end_tag()  # </div>
    body_html = body.finish()
    assets = body.assets

    page = RenderEngine()
    page.orphan_tag("!DOCTYPE html")
    page.start_tag("html")

    page.start_tag("head")
    page.orphan_tag("meta", [("charset", "utf-8")])
    page.orphan_tag("meta", [("name", "viewport"), ("content", "width=device-width, initial-scale=1")])
    page.start_tag("title")
    page.write_content(escape_html(metadata.title))
    page.end_tag()  # </title>
    page.start_tag("style")
    page.write_content(load_asset("style.css"))
    page.end_tag()  # </style>
    page.end_tag()  # </head>

    page.start_tag("body")
    _write_header(page, metadata)
    if opts.summary and body.headings:
        _write_summary(page, body.headings)
    page.write_raw(body_html)
    _write_assets(page, assets)
    if metadata.license:
        _write_license(page, metadata.license)
    page.end_tag()  # </body>
    page.end_tag()  # </html>

    logger.debug(
        "Rendered %s: %d headings, math=%s, code=%s, diagrams=%s",
        metadata.title,
        len(body.headings),
        assets.include_math,
        assets.include_highlight,
        assets.include_diagrams,
    )
    return page.finish()


def transpile_file(path: Path | str, *, options: TranspileOptions | None = None) -> str:
    """Parse a knots file and render it; images resolve next to the file."""
    source = Path(path)
    document = parse_file(source)
    return transpile(document, options=options, base_dir=source.resolve().parent)


def _write_header(page: RenderEngine, metadata: DocumentMetadata) -> None:
    page.start_tag("header")
    page.start_tag("h1", [("id", "doctitle")])
    page.write_content(escape_html(metadata.title))
    page.end_tag()  # </h1>
    if metadata.authors:
        page.start_tag("div", [("class", "docinfo")])
        page.write_content(load_asset("profile.svg"))
        page.write_content(escape_html(", ".join(metadata.authors)))
        page.end_tag()  # </div>
    page.end_tag()  # </header>


def _write_summary(page: RenderEngine, headings: Sequence[HeadingEntry]) -> None:
    """Write the table of contents as nested lists.

    A heading never nests more than one list deeper than the previous one,
    so a level 3 heading right after a level 1 heading sits at level 2.
    """
    page.start_tag("nav", [("id", "summary")])
    depth = 0
    for entry in headings:
        target = min(entry.level, depth + 1)
        if target > depth:
            page.start_tag("ul")
            depth += 1
        else:
            page.end_tag()  # </li>
            while depth > target:
                page.end_tag()  # </ul>
                page.end_tag()  # </li>
                depth -= 1
        page.start_tag("li")
        page.inline_tag("a", [("href", f"#{entry.anchor}")], entry.label)
    while depth:
        page.end_tag()  # </li>
        page.end_tag()  # </ul>
        depth -= 1
    page.end_tag()  # </nav>


def _write_assets(page: RenderEngine, assets: AssetFlags) -> None:
    if assets.include_math:
        page.orphan_tag("link", [("rel", "stylesheet"), ("href", f"{KNOTS_KATEX_URL}/katex.min.css")])
        page.inline_tag("script", [("src", f"{KNOTS_KATEX_URL}/katex.min.js")], "")
        page.start_tag("script")
        page.write_content(assets.math_script.rstrip("\n"))
        page.end_tag()  # </script>

    if assets.include_highlight:
        page.orphan_tag("link", [("rel", "stylesheet"), ("href", f"{KNOTS_PRISM_URL}/themes/prism.min.css")])
        page.inline_tag("script", [("src", f"{KNOTS_PRISM_URL}/prism.min.js")], "")
        for plugin in find_plugins(assets.languages):
            page.inline_tag("script", [("src", f"{KNOTS_PRISM_URL}/components/prism-{plugin}.min.js")], "")

    if assets.include_diagrams:
        page.inline_tag("script", [("src", KNOTS_MERMAID_URL)], "")
        page.start_tag("script")
        page.write_content("mermaid.initialize({ startOnLoad: true });")
        page.end_tag()  # </script>


def _write_license(page: RenderEngine, license_name: str) -> None:
    page.start_tag("div", [("class", "docinfo discreet"), ("id", "license")])
    page.orphan_tag("hr")
    page.write_content(load_asset("ereader.svg"))
    page.write_content(f"This work is available under the {escape_html(license_name)} license")
    page.end_tag()  # </div>
