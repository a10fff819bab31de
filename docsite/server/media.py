"""Extension to media-type resolution for the static server."""

from __future__ import annotations

from pathlib import PurePosixPath
from types import MappingProxyType
from typing import Mapping

DEFAULT_MEDIA_TYPE = "application/octet-stream"
SCRIPT_MEDIA_TYPE = "application/javascript"
HTML_MEDIA_TYPE = "text/html"

DEFAULT_MEDIA_TYPES: Mapping[str, str] = MappingProxyType(
    {
        ".html": HTML_MEDIA_TYPE,
        ".css": "text/css",
        ".js": SCRIPT_MEDIA_TYPE,
        ".mjs": SCRIPT_MEDIA_TYPE,
        ".ts": SCRIPT_MEDIA_TYPE,
        ".json": "application/json",
        ".png": "image/png",
        ".jpg": "image/jpeg",
        ".jpeg": "image/jpeg",
        ".gif": "image/gif",
        ".svg": "image/svg+xml",
        ".ico": "image/x-icon",
        ".txt": "text/plain",
        ".pdf": "application/pdf",
        ".woff": "font/woff",
        ".woff2": "font/woff2",
        ".ttf": "font/ttf",
        ".eot": "application/vnd.ms-fontobject",
        ".otf": "font/otf",
        ".map": "application/json",
    }
)


def media_type_for(path: str, table: Mapping[str, str] = DEFAULT_MEDIA_TYPES) -> str:
    """Look up the media type for ``path`` by its lower-cased extension."""
    return table.get(PurePosixPath(path).suffix.lower(), DEFAULT_MEDIA_TYPE)


def is_bootstrap_module(path: str, bootstrap_module: str) -> bool:
    """True when ``path`` names the bootstrap module that must be served as script text."""
    if not bootstrap_module:
        return False
    module = PurePosixPath(bootstrap_module)
    if not module.suffix:
        return False
    return path.lower().endswith(module.suffix.lower()) and module.name in path


__all__ = [
    "DEFAULT_MEDIA_TYPE",
    "DEFAULT_MEDIA_TYPES",
    "HTML_MEDIA_TYPE",
    "SCRIPT_MEDIA_TYPE",
    "is_bootstrap_module",
    "media_type_for",
]
