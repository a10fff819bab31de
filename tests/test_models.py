"""Tests for docsite.models and docsite.utils."""

from __future__ import annotations

from pathlib import Path

import pytest

from docsite.errors import WriteError
from docsite.models import RouteDescriptor, RouteManifest
from docsite.utils import atomic_write_text, humanize_name


def test_descriptor_serialization_omits_empty_category_and_order() -> None:
    assert RouteDescriptor(id="about", title="About", order=5).to_dict() == {
        "id": "about",
        "title": "About",
    }
    assert RouteDescriptor(id="", title="Guide", category="guide").to_dict() == {
        "id": "",
        "title": "Guide",
        "category": "guide",
    }


def test_manifest_json_uses_two_space_indent_and_trailing_newline() -> None:
    manifest = RouteManifest([RouteDescriptor(id="café", title="Café")])

    text = manifest.to_json()

    assert text == '[\n  {\n    "id": "café",\n    "title": "Café"\n  }\n]\n'
    assert RouteManifest.from_json(text).find("café") is not None


@pytest.mark.parametrize(
    "payload",
    ['{"id": "a"}', '[{"id": 1, "title": "x"}]', '[{"id": "a", "title": "A", "category": 3}]'],
)
def test_invalid_manifest_payloads_raise(payload: str) -> None:
    with pytest.raises(ValueError):
        RouteManifest.from_json(payload)


def test_headers_are_not_navigable() -> None:
    manifest = RouteManifest(
        [RouteDescriptor(id="", title="Guide", category="guide"), RouteDescriptor(id="g", title="G")]
    )

    assert [descriptor.id for descriptor in manifest.routes()] == ["g"]
    assert manifest.find("") is None
    assert len(manifest) == 2


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("getting-started", "Getting Started"),
        ("keys_management-spec", "Keys Management"),
        ("api", "Api"),
    ],
)
def test_humanize_name(name: str, expected: str) -> None:
    assert humanize_name(name) == expected


def test_atomic_write_replaces_file_without_leftovers(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "routes.json"

    atomic_write_text(target, "first\n")
    atomic_write_text(target, "second\n")

    assert target.read_text(encoding="utf-8") == "second\n"
    assert [path.name for path in target.parent.iterdir()] == ["routes.json"]


def test_atomic_write_wraps_os_errors(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file", encoding="utf-8")

    with pytest.raises(WriteError) as excinfo:
        atomic_write_text(blocker / "child.html", "x")

    assert excinfo.value.operation == "write"
