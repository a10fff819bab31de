"""Content tree scanning for the documentation build."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence

from .parsing.links import DOCUMENT_SUFFIXES

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".idea",
    ".docsite",
}

_EXCLUDED_FILES = {
    ".DS_Store",
    "Thumbs.db",
}


@dataclass
class IgnoreRule:
    """Represents an exclusion rule from .docsite.yml ``exclude_paths``."""

    pattern: str
    directory_only: bool
    anchored: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            return self.directory_only and rel_path.startswith(f"{self.pattern}/")

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_ignore_rule(pattern: str) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern or pattern.startswith("#"):
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        has_slash="/" in pattern,
    )


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    return any(rule.matches(rel_path, is_dir) for rule in rules)


@dataclass(frozen=True)
class ContentFile:
    """A document discovered under the content root."""

    path: Path
    relative_path: str


class ContentScanner:
    """Walks the content root in a stable, sorted order."""

    def __init__(
        self,
        exclude_paths: Iterable[str] = (),
        suffixes: Sequence[str] = DOCUMENT_SUFFIXES,
    ) -> None:
        self.rules: List[IgnoreRule] = [
            rule for rule in (build_ignore_rule(p) for p in exclude_paths) if rule is not None
        ]
        self.suffixes = tuple(suffix.lower() for suffix in suffixes)

    def scan(self, root: Path) -> List[ContentFile]:
        """Return the documents under ``root``.

        Files of a directory come before its subdirectories; both are sorted by
        name, so the order doubles as the category discovery order.
        """
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Content root not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Content root is not a directory: {root}")
        # os.walk swallows errors by default; an unreadable root must surface.
        os.listdir(root_path)
        return list(self._iter_files(root_path))

    def _iter_files(self, root: Path) -> Iterator[ContentFile]:
        for dirpath, dirnames, filenames in os.walk(root):
            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

            kept = []
            for name in sorted(dirnames):
                if name in _EXCLUDED_DIRS or name.startswith("."):
                    continue
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if _should_ignore(rel_path, True, self.rules):
                    continue
                kept.append(name)
            dirnames[:] = kept

            for filename in sorted(filenames):
                if filename in _EXCLUDED_FILES or filename.startswith("."):
                    continue
                if not filename.lower().endswith(self.suffixes):
                    continue
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if _should_ignore(rel_path, False, self.rules):
                    continue
                yield ContentFile(path=current_dir / filename, relative_path=rel_path)


__all__ = ["ContentFile", "ContentScanner", "IgnoreRule", "build_ignore_rule"]
