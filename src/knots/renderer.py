"""Render document tree nodes through a RenderEngine."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterable, Iterator

from knots.assets import load_asset
from knots.engine import RenderEngine
from knots.exceptions import RenderError
from knots.schemas import (
    BlockQuote,
    Bold,
    CalloutBox,
    CodeBlock,
    DiagramBlock,
    Heading,
    Image,
    InlineCode,
    Italic,
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
from knots.text_utils import escape_html

# heading level -> (container holding the heading, container opened after it)
_HEADING_CONTAINERS = {
    1: ("container-lvl1", "container-lvl2"),
    2: ("container-lvl2", "container"),
    3: ("container", "container"),
}
_WIDE_CONTAINER = "container-lg"


def render(node: Node, engine: RenderEngine) -> None:
    """Write ``node`` and its descendants to ``engine``."""
    renderer = _RENDERERS.get(node.kind)
    if renderer is None:
        raise RenderError(f"No renderer for node kind {node.kind!r}")
    renderer(node, engine)


def render_all(nodes: Iterable[Node], engine: RenderEngine) -> None:
    for node in nodes:
        render(node, engine)


@contextmanager
def _wide_container(engine: RenderEngine) -> Iterator[None]:
    """Swap the current container for a wider one, then restore it."""
    engine.end_tag()
    engine.start_tag("div", [("class", _WIDE_CONTAINER)])
    yield
    engine.end_tag()
    engine.start_tag("div", [("class", engine.current_container)])


def _render_root(node: Root, engine: RenderEngine) -> None:
    render_all(node.children, engine)


def _render_heading(node: Heading, engine: RenderEngine) -> None:
    title_container, next_container = _HEADING_CONTAINERS[node.level]
    entry = engine.add_heading(node.level, node.text)

    engine.end_tag()  # </div>
    engine.start_tag("div", [("class", title_container)])
    engine.start_tag(f"h{node.level}", [("class", f"lvl{node.level}"), ("id", entry.anchor)])
    engine.start_tag("a", [("href", f"#{entry.anchor}")])
    engine.write_content(entry.label)
    engine.write_content(load_asset("link.svg"))
    engine.end_tag()  # </a>
    engine.end_tag()  # </hN>
    engine.end_tag()  # </div>
    engine.start_tag("div", [("class", next_container)])
    engine.current_container = next_container


def _render_wrapped(tag_name: str) -> Callable[[Paragraph | Bold | Italic | BlockQuote, RenderEngine], None]:
    def _render(node: Paragraph | Bold | Italic | BlockQuote, engine: RenderEngine) -> None:
        engine.start_tag(tag_name)
        render_all(node.children, engine)
        engine.end_tag()

    return _render


def _render_callout(node: CalloutBox, engine: RenderEngine) -> None:
    engine.start_tag("div", [("class", f"callout callout-{node.callout}")])
    render_all(node.children, engine)
    engine.end_tag()


def _render_list(node: ListBlock, engine: RenderEngine) -> None:
    engine.start_tag("ul")
    for item in node.items:
        engine.start_tag("li")
        render_all(item, engine)
        engine.end_tag()  # </li>
    engine.end_tag()  # </ul>


def _render_table(node: Table, engine: RenderEngine) -> None:
    engine.start_tag("table")
    engine.start_tag("thead")
    _render_row(node.header, "th", engine)
    engine.end_tag()  # </thead>
    engine.start_tag("tbody")
    for row in node.rows:
        _render_row(row, "td", engine)
    engine.end_tag()  # </tbody>
    engine.end_tag()  # </table>


def _render_row(cells: Iterable[Iterable[Node]], cell_tag: str, engine: RenderEngine) -> None:
    engine.start_tag("tr")
    for cell in cells:
        engine.start_tag(cell_tag)
        render_all(cell, engine)
        engine.end_tag()
    engine.end_tag()  # </tr>


def _render_code_block(node: CodeBlock, engine: RenderEngine) -> None:
    engine.add_language(node.language)
    code_attributes = [("class", f"language-{node.language}")] if node.language else []
    with _wide_container(engine):
        # one line so the <pre> keeps the code's own whitespace
        engine.inline_tag(
            "pre",
            [("class", "codeblock")],
            engine.format_tag("code", code_attributes, escape_html(node.text)),
        )


def _render_diagram(node: DiagramBlock, engine: RenderEngine) -> None:
    engine.include_diagrams = True
    with _wide_container(engine):
        engine.inline_tag("div", [("class", "mermaid")], escape_html(node.text))


def _render_image(node: Image, engine: RenderEngine) -> None:
    source = engine.read_image(node.source)
    with _wide_container(engine):
        engine.orphan_tag("img", [("alt", node.alt), ("src", source)])


def _render_math_block(node: MathBlock, engine: RenderEngine) -> None:
    element_id = engine.next_math_id()
    engine.start_tag("div", [("id", element_id), ("class", "mathsblock")])
    engine.end_tag()
    engine.defer_math(node.latex, element_id, display=True)


def _render_math_inline(node: MathInline, engine: RenderEngine) -> None:
    element_id = engine.next_math_id()
    engine.inline_tag("span", [("id", element_id)], "")
    engine.defer_math(node.latex, element_id)


def _render_link(node: Link, engine: RenderEngine) -> None:
    engine.inline_tag("a", [("href", node.target), ("class", "link")], node.label)


def _render_inline_code(node: InlineCode, engine: RenderEngine) -> None:
    engine.inline_tag("code", [("class", "inline-code")], escape_html(node.text))


def _render_horizontal_rule(node: Node, engine: RenderEngine) -> None:
    engine.orphan_tag("hr")


def _render_line_break(node: Node, engine: RenderEngine) -> None:
    engine.orphan_tag("br")


def _render_text(node: PlainText, engine: RenderEngine) -> None:
    engine.write_content(node.text)


_RENDERERS: dict[str, Callable[..., None]] = {
    "root": _render_root,
    "heading": _render_heading,
    "paragraph": _render_wrapped("p"),
    "block_quote": _render_wrapped("blockquote"),
    "callout": _render_callout,
    "list": _render_list,
    "table": _render_table,
    "code_block": _render_code_block,
    "diagram": _render_diagram,
    "math_block": _render_math_block,
    "math_inline": _render_math_inline,
    "bold": _render_wrapped("b"),
    "italic": _render_wrapped("i"),
    "link": _render_link,
    "image": _render_image,
    "inline_code": _render_inline_code,
    "horizontal_rule": _render_horizontal_rule,
    "line_break": _render_line_break,
    "text": _render_text,
}
