"""Checks that run over a freshly built site."""

from .links import LinkValidator

__all__ = ["LinkValidator"]
