"""Tests for docsite.server.media."""

from __future__ import annotations

import pytest

from docsite.server.media import DEFAULT_MEDIA_TYPES, is_bootstrap_module, media_type_for


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/index.html", "text/html"),
        ("/src/app.MJS", "application/javascript"),
        ("/favicon.ico", "image/x-icon"),
        ("/maps/bundle.js.map", "application/json"),
        ("/README", "application/octet-stream"),
    ],
)
def test_media_type_for(path: str, expected: str) -> None:
    assert media_type_for(path) == expected


def test_default_table_is_read_only() -> None:
    with pytest.raises(TypeError):
        DEFAULT_MEDIA_TYPES[".md"] = "text/markdown"  # type: ignore[index]


def test_custom_table_replaces_defaults() -> None:
    assert media_type_for("/notes.md", {".md": "text/markdown"}) == "text/markdown"
    assert media_type_for("/index.html", {".md": "text/markdown"}) == "application/octet-stream"


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/src/main.ts", True),
        ("/main.ts", True),
        ("/src/other.ts", False),
        ("/src/main.js", False),
        ("/src/main.ts.map", False),
    ],
)
def test_is_bootstrap_module(path: str, expected: bool) -> None:
    assert is_bootstrap_module(path, "main.ts") is expected
