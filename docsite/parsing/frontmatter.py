"""Frontmatter extraction for Markdown source documents."""

from __future__ import annotations

from typing import Any, Dict, Tuple

import yaml

OPENING_MARKER = "---"
CLOSING_MARKERS = ("---", "...")


class FrontmatterError(ValueError):
    """Raised when a frontmatter block is present but malformed."""


def split_frontmatter(text: str) -> Tuple[Dict[str, str], str]:
    """Return ``(frontmatter, body)`` for a document.

    Frontmatter is recognised only when the very first line is ``---``. Values
    are coerced to strings and key order follows the document.
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].rstrip("\r\n").rstrip() != OPENING_MARKER:
        return {}, text

    for index in range(1, len(lines)):
        if lines[index].rstrip("\r\n").rstrip() in CLOSING_MARKERS:
            block = "".join(lines[1:index])
            body = "".join(lines[index + 1 :])
            return _load_block(block), body

    raise FrontmatterError("frontmatter block is not closed")


def _load_block(block: str) -> Dict[str, str]:
    if not block.strip():
        return {}
    try:
        loaded = yaml.safe_load(block)
    except yaml.YAMLError as exc:
        raise FrontmatterError(f"invalid frontmatter: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise FrontmatterError("frontmatter must be a mapping")
    return {str(key): _as_text(value) for key, value in loaded.items()}


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ", ".join(_as_text(item) for item in value)
    if isinstance(value, dict):
        return ", ".join(f"{key}: {_as_text(item)}" for key, item in value.items())
    return str(value)


__all__ = ["FrontmatterError", "split_frontmatter"]
