"""Tests for the built-site link check."""

from __future__ import annotations

from pathlib import Path

import pytest

from docsite.errors import FetchError
from docsite.models import RouteDescriptor, RouteManifest
from docsite.postproc.links import LinkValidator, output_fetcher


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _manifest(*route_ids: str) -> RouteManifest:
    return RouteManifest([RouteDescriptor(id=route_id, title=route_id) for route_id in route_ids])


def test_clean_site_has_no_issues(tmp_path: Path) -> None:
    _write(tmp_path / "content" / "home.html", '<a href="#/guide/intro">Intro</a>')
    _write(
        tmp_path / "content" / "guide" / "intro.html",
        '<a href="#">Home</a> <img src="/content/guide/arch.png">',
    )
    _write(tmp_path / "content" / "guide" / "arch.png", "png")

    issues = LinkValidator().validate(tmp_path, _manifest("home", "guide/intro"))

    assert issues == []


def test_broken_route_link_is_reported(tmp_path: Path) -> None:
    _write(tmp_path / "content" / "guide" / "intro.html", '<a href="#/guide/missing">x</a>')

    issues = LinkValidator().validate(tmp_path, _manifest("guide/intro"))

    assert issues == ["Broken link in 'guide/intro': #/guide/missing"]


def test_route_without_fragment_is_reported(tmp_path: Path) -> None:
    _write(tmp_path / "content" / "guide" / "intro.html", "<h1>Intro</h1>")

    issues = LinkValidator().validate(tmp_path, _manifest("guide/intro", "guide/gone"))

    assert issues == ["Route 'guide/gone' has no content fragment"]


def test_missing_media_is_reported(tmp_path: Path) -> None:
    _write(tmp_path / "content" / "guide" / "intro.html", '<img src="/content/guide/none.png">')

    issues = LinkValidator().validate(tmp_path, _manifest("guide/intro"))

    assert issues == ["Link target not found in 'guide/intro': /content/guide/none.png"]


def test_output_fetcher_refuses_paths_outside_root(tmp_path: Path) -> None:
    root = tmp_path / "website"
    _write(root / "content" / "a.html", "A")
    _write(tmp_path / "secret.html", "secret")
    fetch = output_fetcher(root)

    assert fetch("/content/a.html") == "A"
    with pytest.raises(FetchError) as excinfo:
        fetch("/../secret.html")
    assert excinfo.value.status == 404
