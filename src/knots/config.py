"""Local configuration for knots."""

from __future__ import annotations

import os


DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_KATEX_URL = "https://cdn.jsdelivr.net/npm/katex@0.16.11/dist"
DEFAULT_PRISM_URL = "https://cdn.jsdelivr.net/npm/prismjs@1.29.0"
DEFAULT_MERMAID_URL = "https://cdn.jsdelivr.net/npm/mermaid@10.9.1/dist/mermaid.min.js"

# Code blocks fenced with this language become diagrams.
DIAGRAM_LANGUAGE = "mermaid"
# Spaces per list nesting level (a single tab also counts as one level).
INDENT_WIDTH = 4

KNOTS_LOG_LEVEL = os.getenv("KNOTS_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
KNOTS_KATEX_URL = os.getenv("KNOTS_KATEX_URL", DEFAULT_KATEX_URL).rstrip("/")
KNOTS_PRISM_URL = os.getenv("KNOTS_PRISM_URL", DEFAULT_PRISM_URL).rstrip("/")
KNOTS_MERMAID_URL = os.getenv("KNOTS_MERMAID_URL", DEFAULT_MERMAID_URL)
