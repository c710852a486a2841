"""Resolve code block languages to the Prism components that highlight them."""

from __future__ import annotations

import logging
from typing import Iterable

logger = logging.getLogger(__name__)

# Languages already bundled in prism.min.js.
CORE_LANGUAGES = frozenset({"markup", "css", "clike", "javascript"})

# component -> components it needs loaded first
PRISM_COMPONENTS: dict[str, tuple[str, ...]] = {
    "bash": (),
    "c": ("clike",),
    "cpp": ("c",),
    "csharp": ("clike",),
    "clike": (),
    "css": (),
    "dart": ("clike",),
    "diff": (),
    "docker": (),
    "elixir": (),
    "erlang": (),
    "go": ("clike",),
    "haskell": (),
    "ini": (),
    "java": ("clike",),
    "javascript": ("clike",),
    "json": (),
    "jsx": ("markup", "javascript"),
    "julia": (),
    "kotlin": ("clike",),
    "latex": (),
    "lua": (),
    "makefile": (),
    "markdown": ("markup",),
    "markup": (),
    "markup-templating": ("markup",),
    "ocaml": (),
    "php": ("markup-templating",),
    "python": (),
    "r": (),
    "ruby": ("clike",),
    "rust": (),
    "scala": ("java",),
    "sql": (),
    "swift": (),
    "toml": (),
    "tsx": ("jsx", "typescript"),
    "typescript": ("javascript",),
    "yaml": (),
    "zig": (),
}

LANGUAGE_ALIASES: dict[str, str] = {
    "cs": "csharp",
    "dockerfile": "docker",
    "hs": "haskell",
    "html": "markup",
    "js": "javascript",
    "kt": "kotlin",
    "md": "markdown",
    "py": "python",
    "rb": "ruby",
    "rs": "rust",
    "sh": "bash",
    "shell": "bash",
    "svg": "markup",
    "tex": "latex",
    "ts": "typescript",
    "xml": "markup",
    "yml": "yaml",
}


def resolve_language(language: str) -> str | None:
    """Return the Prism component name for a code block language."""
    name = LANGUAGE_ALIASES.get(language.lower(), language.lower())
    return name if name in PRISM_COMPONENTS else None


def find_plugins(languages: Iterable[str]) -> list[str]:
    """List the Prism components to load for ``languages``.

    Prerequisites come before the components needing them, components bundled
    with the Prism core are left out and unknown languages are skipped.
    """
    ordered: list[str] = []
    seen: set[str] = set()

    def visit(component: str) -> None:
        if component in seen:
            return
        seen.add(component)
        for requirement in PRISM_COMPONENTS[component]:
            visit(requirement)
        if component not in CORE_LANGUAGES:
            ordered.append(component)

    for language in sorted(set(languages)):
        component = resolve_language(language)
        if component is None:
            logger.debug("No highlighting component for language %r", language)
            continue
        visit(component)
    return ordered
