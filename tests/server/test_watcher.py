"""Tests for the dev rebuild watcher."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from watchdog.events import DirModifiedEvent, FileModifiedEvent, FileMovedEvent

from docsite.errors import WriteError
from docsite.server.watcher import DevWatcher, RebuildHandler


def test_relevant_paths(tmp_path: Path) -> None:
    handler = RebuildHandler(
        lambda: None,
        filenames=["index.html"],
        ignore_dirs=[tmp_path / "website"],
    )

    assert handler.is_relevant(tmp_path / "docs" / "guide" / "intro.md")
    assert handler.is_relevant(tmp_path / "docs" / "notes.MARKDOWN")
    assert handler.is_relevant(tmp_path / "index.html")
    assert not handler.is_relevant(tmp_path / "docs" / "image.png")
    assert not handler.is_relevant(tmp_path / "website" / "content" / "page.md")
    assert not handler.is_relevant(tmp_path / "docs" / ".git" / "HEAD.md")


def test_burst_of_events_triggers_one_rebuild(tmp_path: Path) -> None:
    calls: list[int] = []
    done = threading.Event()

    def rebuild() -> None:
        calls.append(1)
        done.set()

    handler = RebuildHandler(rebuild, debounce=0.05)
    for name in ("a.md", "b.md", "c.md"):
        handler.on_modified(FileModifiedEvent(str(tmp_path / name)))

    assert done.wait(timeout=5)
    handler.cancel()
    assert calls == [1]


def test_directory_and_irrelevant_events_are_ignored(tmp_path: Path) -> None:
    handler = RebuildHandler(lambda: None, debounce=60)

    handler.on_modified(DirModifiedEvent(str(tmp_path)))
    handler.on_modified(FileModifiedEvent(str(tmp_path / "image.png")))

    assert handler._timer is None


def test_moved_event_uses_destination(tmp_path: Path) -> None:
    handler = RebuildHandler(lambda: None, debounce=60)

    handler.on_moved(FileMovedEvent(str(tmp_path / "draft.tmp"), str(tmp_path / "page.md")))

    assert handler._timer is not None
    handler.cancel()


def test_rebuild_failure_is_logged_not_raised(tmp_path: Path, caplog) -> None:
    def rebuild() -> None:
        raise WriteError(tmp_path / "website", "write", "disk full")

    handler = RebuildHandler(rebuild)
    handler.run_rebuild()

    assert "Rebuild failed" in caplog.text


def test_watcher_start_and_stop(tmp_path: Path) -> None:
    content = tmp_path / "docs"
    content.mkdir()
    handler = RebuildHandler(lambda: None)

    with DevWatcher(handler, content, tmp_path) as watcher:
        assert watcher._observer is not None

    assert watcher._observer is None


def test_root_file_change_points_to_clean_all(tmp_path: Path, caplog) -> None:
    caplog.set_level(logging.INFO, logger="docsite")
    handler = RebuildHandler(lambda: None, filenames=["CNAME"], debounce=60)

    handler.on_modified(FileModifiedEvent(str(tmp_path / "CNAME")))
    handler.on_modified(FileModifiedEvent(str(tmp_path / "docs" / "intro.md")))
    handler.cancel()

    notices = [r for r in caplog.records if "docsite clean --all" in r.getMessage()]
    assert len(notices) == 1
    assert notices[0].levelname == "INFO"
    assert "CNAME" in notices[0].getMessage()
