"""
Tests for genforge.parsing.language
=====================================
"""

import pytest

from genforge.core.enums import ContentType
from genforge.parsing.language import classify_path


class TestClassifyPath:
    """classify_path() maps extensions to content types and never fails."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("src/index.css", ContentType.STYLE),
            ("src/App.jsx", ContentType.SCRIPT),
            ("src/main.ts", ContentType.SCRIPT),
            ("src/Widget.tsx", ContentType.SCRIPT),
            ("lib/util.mjs", ContentType.SCRIPT),
            ("public/index.html", ContentType.MARKUP),
            ("README.md", ContentType.DOC),
            ("notes.txt", ContentType.PLAIN),
        ],
    )
    def test_known_extensions(self, path: str, expected: ContentType) -> None:
        assert classify_path(path) == expected

    def test_case_insensitive(self) -> None:
        assert classify_path("STYLES/MAIN.CSS") == ContentType.STYLE

    def test_no_extension(self) -> None:
        assert classify_path("Dockerfile") == ContentType.PLAIN

    def test_dot_in_directory_is_ignored(self) -> None:
        assert classify_path("my.styles/Makefile") == ContentType.PLAIN

    def test_empty_path(self) -> None:
        assert classify_path("") == ContentType.PLAIN

    def test_trailing_dot(self) -> None:
        assert classify_path("weird.") == ContentType.PLAIN
