"""Small filesystem and naming helpers used across the build pipeline."""

from __future__ import annotations

import os
import re
import tempfile
from pathlib import Path

from .errors import WriteError

_SPEC_SUFFIX = re.compile(r"[-_]spec$", re.IGNORECASE)


def humanize_name(name: str) -> str:
    """Turn a file or directory name such as ``keys-management`` into a title."""
    stem = _SPEC_SUFFIX.sub("", name)
    words = stem.replace("-", " ").replace("_", " ").split()
    return " ".join(word[:1].upper() + word[1:] for word in words)


def atomic_write_text(path: Path, content: str) -> None:
    """Replace ``path`` with ``content`` so readers never observe a partial file."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
                handle.write(content)
            # mkstemp creates 0600 files; published output must be world-readable.
            os.chmod(tmp_name, 0o666 & ~_current_umask())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as exc:
        raise WriteError(path, "write", str(exc)) from exc


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def ensure_directory(path: Path) -> bool:
    """Create ``path`` if missing. Returns True when the directory was created."""
    if path.is_dir():
        return False
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise WriteError(path, "mkdir", str(exc)) from exc
    return True


__all__ = ["atomic_write_text", "ensure_directory", "humanize_name"]
