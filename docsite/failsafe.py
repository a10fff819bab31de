"""Fail-safe site shell used when no index.html is available."""

from __future__ import annotations

from typing import Any, Dict

from .rendering import SHELL_TEMPLATE, TemplateRenderer

_DOCTYPE = "<!DOCTYPE html>"


def build_shell_stub(
    context: Dict[str, Any],
    *,
    reason: str | None = None,
    renderer: TemplateRenderer | None = None,
) -> str:
    """Return a minimal, valid site shell wired to the generated scripts."""
    renderer = renderer or TemplateRenderer()
    shell = renderer.render(SHELL_TEMPLATE, context)
    note = _format_reason(reason)
    if note and shell.startswith(_DOCTYPE):
        shell = f"{_DOCTYPE}\n<!-- docsite: generated shell ({note}) -->{shell[len(_DOCTYPE):]}"
    return shell


def _format_reason(reason: str | None) -> str | None:
    if not reason:
        return None
    cleaned = " ".join(reason.strip().split()).replace("--", "-")
    if not cleaned:
        return None
    return cleaned[:200] + ("…" if len(cleaned) > 200 else "")


__all__ = ["build_shell_stub"]
