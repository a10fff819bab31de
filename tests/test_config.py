"""Tests for docsite.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from docsite.config import ConfigError, DocsiteConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path, environ={})

    assert isinstance(config, DocsiteConfig)
    assert config.root == tmp_path.resolve()
    assert config.content_dir == tmp_path.resolve() / "docs"
    assert config.output_dir == tmp_path.resolve() / "website"
    assert config.root_dir == tmp_path.resolve()
    assert config.exclude_paths == []
    assert config.diagram_languages == ["mermaid"]
    assert config.home_route == "home"
    assert config.categories == {}
    assert config.site.title == "Documentation"
    assert config.server.port == 3000
    assert config.server.static_roots == [config.output_dir, config.root_dir]
    assert config.server.bootstrap_module == "main.ts"


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".docsite.yml"
    config_file.write_text(
        """
content_dir: content
output_dir: build/site
exclude_paths:
  - "drafts/"
diagram_languages: [Mermaid, plantuml]
home_route: welcome
categories:
  getting-started: Start Here
  api:
site:
  title: "Acme Docs"
  tagline: "Everything about Acme"
  start_route: guide/intro
  github_url: https://github.com/acme/acme
server:
  host: 0.0.0.0
  port: 8080
  static_roots: [build/site, public]
""",
        encoding="utf-8",
    )

    config = load_config(config_file, environ={})

    root = tmp_path.resolve()
    assert config.content_dir == root / "content"
    assert config.output_dir == root / "build" / "site"
    assert config.exclude_paths == ["drafts/"]
    assert config.diagram_languages == ["mermaid", "plantuml"]
    assert config.home_route == "welcome"
    assert config.categories == {"getting-started": "Start Here", "api": "Api"}
    assert config.site.title == "Acme Docs"
    assert config.site.tagline == "Everything about Acme"
    assert config.site.start_route == "guide/intro"
    assert config.site.github_url == "https://github.com/acme/acme"
    assert config.server.host == "0.0.0.0"
    assert config.server.port == 8080
    assert config.server.static_roots == [root / "build" / "site", root / "public"]


def test_port_environment_variable_overrides_file(tmp_path: Path) -> None:
    (tmp_path / ".docsite.yml").write_text("server:\n  port: 8080\n", encoding="utf-8")

    config = load_config(tmp_path, environ={"PORT": "4321"})

    assert config.server.port == 4321


def test_invalid_port_environment_variable_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path, environ={"PORT": "http"})


def test_invalid_yaml_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / ".docsite.yml").write_text("site: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path, environ={})


def test_non_mapping_document_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / ".docsite.yml").write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path, environ={})


def test_overrides_replace_output_in_static_roots(tmp_path: Path) -> None:
    config = load_config(tmp_path, environ={})

    config.with_overrides(output_dir=tmp_path / "dist", port=9000)

    assert config.output_dir == (tmp_path / "dist").resolve()
    assert config.server.static_roots[0] == (tmp_path / "dist").resolve()
    assert config.server.port == 9000
