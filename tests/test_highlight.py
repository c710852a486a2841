"""Tests for highlighting component resolution."""

from __future__ import annotations

import pytest

from knots.highlight import CORE_LANGUAGES, PRISM_COMPONENTS, find_plugins, resolve_language


class TestResolveLanguage:
    """Tests for resolve_language."""

    @pytest.mark.parametrize(
        "language,expected",
        [("python", "python"), ("py", "python"), ("JS", "javascript"), ("html", "markup"), ("brainfuck", None)],
    )
    def test_resolve(self, language: str, expected: str | None) -> None:
        assert resolve_language(language) == expected


class TestFindPlugins:
    """Tests for find_plugins."""

    def test_single_language(self) -> None:
        assert find_plugins(["python"]) == ["python"]

    def test_requirements_come_first(self) -> None:
        assert find_plugins(["cpp"]) == ["c", "cpp"]

    def test_core_languages_are_not_loaded(self) -> None:
        assert find_plugins(["py", "js", "css"]) == ["python"]

    def test_transitive_requirements(self) -> None:
        assert find_plugins(["tsx"]) == ["jsx", "typescript", "tsx"]
        assert find_plugins(["php"]) == ["markup-templating", "php"]

    def test_shared_requirements_load_once(self) -> None:
        assert find_plugins(["c", "cpp"]) == ["c", "cpp"]

    def test_unknown_language_is_skipped(self) -> None:
        assert find_plugins(["nosuchlang", "rust"]) == ["rust"]

    def test_no_languages(self) -> None:
        assert find_plugins([]) == []

    def test_requirements_are_known_components(self) -> None:
        for requirements in PRISM_COMPONENTS.values():
            assert set(requirements) <= set(PRISM_COMPONENTS)
        assert CORE_LANGUAGES <= set(PRISM_COMPONENTS)
