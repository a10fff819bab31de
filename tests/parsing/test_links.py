from __future__ import annotations

import pytest

from docsite.parsing.links import rewrite_link, route_id_from_path


@pytest.mark.parametrize(
    ("relative_path", "expected"),
    [
        ("guide/intro.md", "guide/intro"),
        ("getting-started/overview.markdown", "getting-started/overview"),
        ("guide\\windows.md", "guide/windows"),
        ("index.md", "home"),
        ("guide/index.md", "guide/index"),
        ("top.md", "top"),
    ],
)
def test_route_id_from_path(relative_path: str, expected: str) -> None:
    assert route_id_from_path(relative_path) == expected


def test_root_index_uses_configured_home_route() -> None:
    assert route_id_from_path("index.md", home_route="welcome") == "welcome"


def test_document_link_becomes_hash_route_with_anchor() -> None:
    rewritten = rewrite_link("setup.md#install", document_path="guide/intro.md")

    assert rewritten is not None
    assert rewritten.href == "#/guide/setup"
    assert rewritten.anchor == "install"
    assert rewritten.route_id == "guide/setup"


def test_parent_relative_document_link_is_resolved() -> None:
    rewritten = rewrite_link("../api/client.md", document_path="guide/intro.md")

    assert rewritten is not None
    assert rewritten.href == "#/api/client"


def test_extensionless_link_is_treated_as_route() -> None:
    rewritten = rewrite_link("quickstart", document_path="getting-started/overview.md")

    assert rewritten is not None
    assert rewritten.href == "#/getting-started/quickstart"
    assert rewritten.anchor is None


def test_file_link_points_into_content_directory() -> None:
    rewritten = rewrite_link("images/flow chart.png?v=2", document_path="guide/intro.md")

    assert rewritten is not None
    assert rewritten.href == "/content/guide/images/flow%20chart.png?v=2"
    assert rewritten.route_id is None


@pytest.mark.parametrize(
    "href",
    [
        "https://example.com/page.md",
        "//cdn.example.com/lib.js",
        "mailto:team@example.com",
        "#local-anchor",
        "/absolute/path",
        "../../outside.md",
        "",
    ],
)
def test_links_left_untouched(href: str) -> None:
    assert rewrite_link(href, document_path="guide/intro.md") is None
