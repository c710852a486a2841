"""Stylesheet and icons embedded into rendered pages."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

ASSETS_DIR = Path(__file__).parent


@lru_cache(maxsize=None)
def load_asset(name: str) -> str:
    """Return the text of a bundled asset file, e.g. ``"style.css"``."""
    return (ASSETS_DIR / name).read_text(encoding="utf-8").strip()
