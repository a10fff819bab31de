"""Configuration loading for docsite (.docsite.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from .utils import humanize_name

CONFIG_FILENAME = ".docsite.yml"
DEFAULT_PORT = 3000
PORT_ENV_VAR = "PORT"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class SiteConfig:
    """Values rendered into the generated shell and client scripts."""

    title: str = "Documentation"
    tagline: str = "Documentation"
    start_route: str = "getting-started/overview"
    quickstart_route: Optional[str] = "getting-started/quickstart"
    github_url: Optional[str] = None


@dataclass
class ServeConfig:
    """Dev/static server settings."""

    host: str = "127.0.0.1"
    port: int = DEFAULT_PORT
    static_roots: List[Path] = field(default_factory=list)
    bootstrap_module: str = "main.ts"


@dataclass
class DocsiteConfig:
    """Represents the settings defined in .docsite.yml."""

    root: Path
    content_dir: Path
    output_dir: Path
    root_dir: Path
    exclude_paths: List[str] = field(default_factory=list)
    diagram_languages: List[str] = field(default_factory=lambda: ["mermaid"])
    home_route: str = "home"
    categories: Dict[str, str] = field(default_factory=dict)
    site: SiteConfig = field(default_factory=SiteConfig)
    server: ServeConfig = field(default_factory=ServeConfig)

    @property
    def content_url_prefix(self) -> str:
        return "/content"

    def with_overrides(
        self,
        *,
        content_dir: Path | None = None,
        output_dir: Path | None = None,
        host: str | None = None,
        port: int | None = None,
    ) -> "DocsiteConfig":
        """Apply CLI overrides in place and return the config."""
        if content_dir is not None:
            self.content_dir = Path(content_dir).expanduser().resolve()
        if output_dir is not None:
            previous = self.output_dir
            self.output_dir = Path(output_dir).expanduser().resolve()
            self.server.static_roots = [
                self.output_dir if root == previous else root
                for root in self.server.static_roots
            ]
        if host is not None:
            self.server.host = host
        if port is not None:
            self.server.port = port
        return self


def load_config(
    config_path: Path, *, environ: Mapping[str, str] | None = None
) -> DocsiteConfig:
    """Load configuration from disk, applying environment overrides."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()
    env = os.environ if environ is None else environ

    data: Dict[str, Any] = {}
    if config_file.exists():
        data = _read_config(config_file)
        if not isinstance(data, dict):
            raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    content_dir = _resolve_dir(root, _as_str(data.get("content_dir")), "docs")
    output_dir = _resolve_dir(root, _as_str(data.get("output_dir")), "website")
    root_dir = _resolve_dir(root, _as_str(data.get("root_dir")), ".")

    site = SiteConfig()
    site_data = _as_dict(data.get("site"))
    if site_data:
        site.title = _as_str(site_data.get("title")) or site.title
        site.tagline = _as_str(site_data.get("tagline")) or site.tagline
        site.start_route = _as_str(site_data.get("start_route")) or site.start_route
        if "quickstart_route" in site_data:
            site.quickstart_route = _as_str(site_data.get("quickstart_route"))
        site.github_url = _as_str(site_data.get("github_url"))

    server = ServeConfig()
    server_data = _as_dict(data.get("server"))
    if server_data:
        server.host = _as_str(server_data.get("host")) or server.host
        port = _as_int(server_data.get("port"))
        if port is not None:
            server.port = port
        server.bootstrap_module = (
            _as_str(server_data.get("bootstrap_module")) or server.bootstrap_module
        )
        server.static_roots = [
            _resolve_dir(root, entry, ".")
            for entry in _as_str_list(server_data.get("static_roots"))
        ]
    if not server.static_roots:
        server.static_roots = [output_dir, root_dir]

    env_port = env.get(PORT_ENV_VAR)
    if env_port:
        parsed = _as_int(env_port)
        if parsed is None:
            raise ConfigError(f"{PORT_ENV_VAR} must be an integer, got {env_port!r}")
        server.port = parsed

    diagram_languages = _as_str_list(data.get("diagram_languages")) or ["mermaid"]

    categories: Dict[str, str] = {}
    for key, value in _as_dict(data.get("categories")).items():
        title = _as_str(value)
        categories[str(key)] = title if title else humanize_name(str(key))

    return DocsiteConfig(
        root=root,
        content_dir=content_dir,
        output_dir=output_dir,
        root_dir=root_dir,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        diagram_languages=[language.lower() for language in diagram_languages],
        home_route=_as_str(data.get("home_route")) or "home",
        categories=categories,
        site=site,
        server=server,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _resolve_dir(root: Path, value: Optional[str], default: str) -> Path:
    candidate = Path(value or default).expanduser()
    if not candidate.is_absolute():
        candidate = root / candidate
    return candidate.resolve()


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DEFAULT_PORT",
    "DocsiteConfig",
    "PORT_ENV_VAR",
    "ServeConfig",
    "SiteConfig",
    "load_config",
]
