"""Tests for docsite.assets."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from docsite.assets import AssetMaterializer, REQUIRED_DIRECTORIES
from docsite.config import load_config
from docsite.rendering import site_context


def _materializer(root: Path) -> AssetMaterializer:
    return AssetMaterializer(site_context(load_config(root, environ={})))


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_root_files_are_copied_when_absent(tmp_path: Path) -> None:
    root = tmp_path / "project"
    output = root / "website"
    _write(root / "index.html", '<html><script src="/src/bundle.js"></script></html>\n')
    _write(root / "CNAME", "docs.example.com\n")
    _write(root / ".nojekyll", "")

    result = _materializer(root).materialize(root, output)

    assert sorted(result.copied) == [".nojekyll", "CNAME", "index.html"]
    assert (output / "CNAME").read_text(encoding="utf-8") == "docs.example.com\n"
    assert not (output / "favicon.svg").exists()
    assert result.synthesized_shell is False
    assert result.warnings == []


def test_existing_destination_is_never_overwritten(tmp_path: Path) -> None:
    root = tmp_path / "project"
    output = root / "website"
    _write(root / "index.html", "<html>source</html>\n")
    _write(output / "index.html", '<html>edited <script src="/src/bundle.js"></script></html>\n')

    result = _materializer(root).materialize(root, output)

    assert "index.html" in result.preserved
    assert "index.html" not in result.copied
    assert "edited" in (output / "index.html").read_text(encoding="utf-8")


def test_missing_shell_is_synthesized_with_warning(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    root = tmp_path / "project"
    root.mkdir()
    output = root / "website"

    with caplog.at_level(logging.WARNING, logger="docsite"):
        result = _materializer(root).materialize(root, output)

    shell = (output / "index.html").read_text(encoding="utf-8")
    assert result.synthesized_shell is True
    assert shell.startswith("<!DOCTYPE html>\n<!-- docsite: generated shell (index.html missing) -->")
    assert '<script src="/src/bundle.js"></script>' in shell
    assert 'id="content-area"' in shell
    assert "index.html not found" in caplog.text


def test_required_directories_and_artifacts_are_created(tmp_path: Path) -> None:
    root = tmp_path / "project"
    root.mkdir()
    output = root / "website"

    result = _materializer(root).materialize(root, output)

    for relative in REQUIRED_DIRECTORIES:
        assert (output / relative).is_dir()
    assert sorted(result.generated) == [
        "assets/css/prettydocs.css",
        "src/bundle.js",
        "src/main.js",
    ]
    bundle = (output / "src" / "bundle.js").read_text(encoding="utf-8")
    assert 'var MANIFEST_URL = "/content/routes.json";' in bundle
    assert 'var HOME_ROUTE = "home";' in bundle


def test_generated_artifacts_are_left_alone_once_present(tmp_path: Path) -> None:
    root = tmp_path / "project"
    root.mkdir()
    output = root / "website"
    _write(output / "src" / "bundle.js", "// customised\n")

    first = _materializer(root).materialize(root, output)
    second = _materializer(root).materialize(root, output)

    assert "src/bundle.js" in first.preserved
    assert (output / "src" / "bundle.js").read_text(encoding="utf-8") == "// customised\n"
    assert second.generated == []
    assert second.copied == []


def test_shell_without_router_script_is_reported(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    root = tmp_path / "project"
    output = root / "website"
    _write(root / "index.html", "<html><body>no scripts</body></html>\n")

    with caplog.at_level(logging.WARNING, logger="docsite"):
        result = _materializer(root).materialize(root, output)

    assert any("/src/bundle.js" in warning for warning in result.warnings)
    assert (output / "index.html").read_text(encoding="utf-8") == (
        "<html><body>no scripts</body></html>\n"
    )
