"""Jinja2 rendering for the build-owned site artifacts."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from .config import DocsiteConfig

TEMPLATES_DIR = Path(__file__).with_name("templates")

SHELL_TEMPLATE = "index.html.j2"
STYLESHEET_TEMPLATE = "prettydocs.css.j2"
BOOTSTRAP_TEMPLATE = "main.js.j2"
ROUTER_TEMPLATE = "bundle.js.j2"


class TemplateRenderer:
    """Renders packaged templates with the site context."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir or TEMPLATES_DIR
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(enabled_extensions=("html.j2",), default=False),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )

    def render(self, template_name: str, context: Dict[str, Any]) -> str:
        return self.env.get_template(template_name).render(**context)


def site_context(config: DocsiteConfig) -> Dict[str, Any]:
    """Template variables derived from the configuration."""
    prefix = config.content_url_prefix
    return {
        "site_title": config.site.title,
        "site_tagline": config.site.tagline,
        "start_route": config.site.start_route,
        "quickstart_route": config.site.quickstart_route,
        "github_url": config.site.github_url,
        "home_route": config.home_route,
        "content_prefix": prefix,
        "manifest_url": f"{prefix}/routes.json",
        "diagram_languages": list(config.diagram_languages),
    }


__all__ = [
    "BOOTSTRAP_TEMPLATE",
    "ROUTER_TEMPLATE",
    "SHELL_TEMPLATE",
    "STYLESHEET_TEMPLATE",
    "TEMPLATES_DIR",
    "TemplateRenderer",
    "site_context",
]
