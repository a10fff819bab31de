"""Route id derivation and cross-document link rewriting."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional
from urllib.parse import quote, unquote, urlsplit

DOCUMENT_SUFFIXES = (".md", ".markdown")


def route_id_from_path(relative_path: str, *, home_route: str = "home") -> str:
    """Return the route id for a document path relative to the content root.

    The extension is stripped and separators are normalised to ``/``. A
    root-level ``index`` document maps to ``home_route``.
    """
    normalised = relative_path.replace("\\", "/").strip("/")
    path = PurePosixPath(normalised)
    if path.suffix.lower() in DOCUMENT_SUFFIXES:
        path = path.with_suffix("")
    route_id = path.as_posix()
    if route_id == ".":
        return ""
    if route_id.lower() == "index":
        return home_route
    return route_id


@dataclass(frozen=True)
class RewrittenLink:
    """Outcome of rewriting one relative reference."""

    href: str
    anchor: Optional[str] = None
    route_id: Optional[str] = None


def rewrite_link(
    href: str,
    *,
    document_path: str,
    content_prefix: str = "/content",
    home_route: str = "home",
) -> Optional[RewrittenLink]:
    """Rewrite a relative ``href`` found in ``document_path``.

    Links to other documents become hash routes (``#/<route-id>``); links to
    other files are pointed into the content directory of the output tree.
    Returns ``None`` when the reference should be left untouched.
    """
    target = href.strip()
    if not target or target.startswith(("#", "/", "mailto:", "tel:", "data:")):
        return None
    parts = urlsplit(target)
    if parts.scheme or parts.netloc:
        return None
    if not parts.path:
        return None

    base_dir = posixpath.dirname(document_path.replace("\\", "/"))
    joined = posixpath.normpath(posixpath.join(base_dir, unquote(parts.path)))
    if joined == "." or joined == ".." or joined.startswith("../"):
        return None

    suffix = PurePosixPath(joined).suffix.lower()
    if suffix in DOCUMENT_SUFFIXES or not suffix:
        route_id = route_id_from_path(joined, home_route=home_route)
        anchor = parts.fragment or None
        return RewrittenLink(href=f"#/{route_id}", anchor=anchor, route_id=route_id)

    rewritten = f"{content_prefix.rstrip('/')}/{quote(joined)}"
    if parts.query:
        rewritten += f"?{parts.query}"
    if parts.fragment:
        rewritten += f"#{parts.fragment}"
    return RewrittenLink(href=rewritten)


__all__ = ["DOCUMENT_SUFFIXES", "RewrittenLink", "rewrite_link", "route_id_from_path"]
