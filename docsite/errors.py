"""Error taxonomy shared by the build pipeline and the server."""

from __future__ import annotations

from pathlib import Path


class DocsiteError(RuntimeError):
    """Base class for docsite failures."""


class SourceReadError(DocsiteError):
    """Raised when a source document cannot be read or parsed.

    The manifest builder recovers from it by skipping the document.
    """

    def __init__(self, path: Path | str, operation: str, reason: str) -> None:
        self.path = Path(path)
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation} failed for {path}: {reason}")


class AssetMissingError(DocsiteError):
    """Raised when an expected top-level asset is absent."""

    def __init__(self, name: str, searched: list[Path]) -> None:
        self.name = name
        self.searched = searched
        locations = ", ".join(str(path) for path in searched) or "(nowhere)"
        super().__init__(f"{name} not found in {locations}")


class WriteError(DocsiteError):
    """Raised when the output tree cannot be created or written. Always fatal."""

    def __init__(self, path: Path | str, operation: str, reason: str) -> None:
        self.path = Path(path)
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation} failed for {path}: {reason}")


class NotFoundError(DocsiteError):
    """Raised when neither a static file nor the SPA fallback matches a request."""

    def __init__(self, request_path: str) -> None:
        self.request_path = request_path
        super().__init__(f"No static file for {request_path}")


class FetchError(DocsiteError):
    """Raised by content fetchers when a manifest or fragment cannot be loaded."""

    def __init__(self, url: str, status: int | None = None) -> None:
        self.url = url
        self.status = status
        detail = f" (status {status})" if status is not None else ""
        super().__init__(f"Failed to fetch {url}{detail}")


__all__ = [
    "AssetMissingError",
    "DocsiteError",
    "FetchError",
    "NotFoundError",
    "SourceReadError",
    "WriteError",
]
