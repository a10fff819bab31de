"""Tests for docsite.logging."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from docsite.logging import configure_logging, get_logger, uvicorn_log_level


def test_get_logger_nests_under_docsite() -> None:
    assert get_logger("manifest").name == "docsite.manifest"
    assert get_logger().name == "docsite"


@pytest.mark.parametrize(
    ("verbose", "quiet", "level", "uvicorn_level"),
    [
        (False, False, logging.INFO, "info"),
        (True, False, logging.DEBUG, "debug"),
        (True, True, logging.WARNING, "warning"),
    ],
)
def test_configure_logging_levels(verbose: bool, quiet: bool, level: int, uvicorn_level: str) -> None:
    logger = configure_logging(verbose=verbose, quiet=quiet)

    assert logger.level == level
    assert logger.propagate is False
    assert uvicorn_log_level() == uvicorn_level


def test_repeated_configuration_replaces_handlers() -> None:
    configure_logging()
    logger = configure_logging(verbose=True)

    assert len(logger.handlers) == 1


def test_verbose_console_shows_component(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(verbose=True)

    get_logger("watcher").debug("Watching docs")

    assert "[docsite] DEBUG watcher: Watching docs" in capsys.readouterr().err


def test_log_file_receives_debug_records(tmp_path: Path) -> None:
    log_file = tmp_path / "docsite.log"
    logger = configure_logging(log_file=log_file)

    get_logger("manifest").debug("Wrote fragment")
    for handler in logger.handlers:
        handler.flush()

    assert "DEBUG docsite.manifest: Wrote fragment" in log_file.read_text(encoding="utf-8")
