from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests._fixtures.site_builder import SiteBuilder


@pytest.fixture
def site_builder(tmp_path: Path) -> SiteBuilder:
    """Provide a reusable site builder rooted at the pytest tmp_path."""
    return SiteBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _propagating_docsite_logger():
    """Undo configure_logging() so caplog sees docsite records."""

    def _reset() -> None:
        logger = logging.getLogger("docsite")
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.propagate = True
        logger.setLevel(logging.NOTSET)

    _reset()
    yield
    _reset()
