"""Rebuild-on-change watcher used by ``docsite dev``."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from ..errors import DocsiteError
from ..logging import get_logger
from ..parsing import DOCUMENT_SUFFIXES

DEFAULT_DEBOUNCE_SECONDS = 0.3
_VCS_DIRS = frozenset({".git", ".hg", ".svn"})

logger = get_logger("watcher")


class RebuildHandler(FileSystemEventHandler):
    """Coalesces bursts of file events into a single rebuild."""

    def __init__(
        self,
        rebuild: Callable[[], object],
        *,
        suffixes: Sequence[str] = DOCUMENT_SUFFIXES,
        filenames: Iterable[str] = (),
        ignore_dirs: Iterable[Path] = (),
        debounce: float = DEFAULT_DEBOUNCE_SECONDS,
    ) -> None:
        self.rebuild = rebuild
        self.suffixes = tuple(suffix.lower() for suffix in suffixes)
        self.filenames = frozenset(filenames)
        self.ignore_dirs = tuple(Path(path).resolve() for path in ignore_dirs)
        self.debounce = debounce
        self._timer: Optional[threading.Timer] = None
        self._timer_lock = threading.Lock()
        self._build_lock = threading.Lock()

    def is_relevant(self, path: str | Path) -> bool:
        candidate = Path(path)
        resolved = candidate.resolve()
        for ignored in self.ignore_dirs:
            if resolved == ignored or resolved.is_relative_to(ignored):
                return False
        if candidate.name.startswith(".") or any(part in _VCS_DIRS for part in candidate.parts):
            return False
        return candidate.suffix.lower() in self.suffixes or candidate.name in self.filenames

    def handle(self, path: str, is_directory: bool) -> None:
        if is_directory or not self.is_relevant(path):
            return
        logger.info("Change detected: %s", path)
        if Path(path).name in self.filenames:
            logger.info(
                "%s is copied only when missing from the output; "
                "run `docsite clean --all` to publish edits",
                Path(path).name,
            )
        self.schedule()

    def schedule(self) -> None:
        with self._timer_lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.debounce, self.run_rebuild)
            self._timer.daemon = True
            self._timer.start()

    def run_rebuild(self) -> None:
        with self._build_lock:
            try:
                self.rebuild()
            except (DocsiteError, OSError) as exc:
                logger.error("Rebuild failed: %s", exc)
            else:
                logger.info("Rebuild complete")

    def cancel(self) -> None:
        with self._timer_lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def on_modified(self, event: FileSystemEvent) -> None:
        self.handle(event.src_path, event.is_directory)

    def on_created(self, event: FileSystemEvent) -> None:
        self.handle(event.src_path, event.is_directory)

    def on_deleted(self, event: FileSystemEvent) -> None:
        self.handle(event.src_path, event.is_directory)

    def on_moved(self, event: FileSystemEvent) -> None:
        self.handle(event.dest_path, event.is_directory)


class DevWatcher:
    """Runs a watchdog observer over the content root and the site root files."""

    def __init__(
        self,
        handler: RebuildHandler,
        content_dir: Path,
        root_dir: Optional[Path] = None,
    ) -> None:
        self.handler = handler
        self.content_dir = Path(content_dir)
        self.root_dir = Path(root_dir) if root_dir is not None else None
        self._observer: Optional[Observer] = None

    def start(self) -> None:
        observer = Observer()
        observer.schedule(self.handler, str(self.content_dir), recursive=True)
        if self.root_dir is not None and self.root_dir.resolve() != self.content_dir.resolve():
            observer.schedule(self.handler, str(self.root_dir), recursive=False)
        observer.start()
        self._observer = observer
        logger.info("Watching %s for changes", self.content_dir)

    def stop(self) -> None:
        self.handler.cancel()
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join()
        self._observer = None

    def __enter__(self) -> "DevWatcher":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()


__all__ = ["DEFAULT_DEBOUNCE_SECONDS", "DevWatcher", "RebuildHandler"]
