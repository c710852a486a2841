"""Test setup for knots."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from knots.engine import RenderEngine  # noqa: E402
from knots.renderer import render  # noqa: E402

# 1x1 transparent PNG
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d49484452000000010000000108060000001f15c489"
    "0000000d49444154789c63f8ffff3f0005fe02fea7d6a4590000000049454e44ae426082"
)


@pytest.fixture
def png_file(tmp_path: Path) -> Path:
    """A small PNG image on disk."""
    path = tmp_path / "pic.png"
    path.write_bytes(PNG_BYTES)
    return path


def render_fragment(*nodes, engine: RenderEngine | None = None) -> tuple[str, RenderEngine]:
    """Render nodes inside a regular container, as the page assembler does."""
    engine = engine or RenderEngine()
    engine.start_tag("div", [("class", "container")])
    for node in nodes:
        render(node, engine)
    engine.end_tag()
    return engine.finish(), engine
