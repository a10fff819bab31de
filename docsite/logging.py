"""Logging setup shared by the build pipeline, the watcher and the server."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "docsite"

_CONSOLE_FORMAT = "[docsite] %(levelname)s %(message)s"
# Verbose runs interleave build, watcher and request logs; show the component.
_VERBOSE_FORMAT = "[docsite] %(levelname)s %(component)s: %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_UVICORN_LEVELS = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warning",
}


class _ComponentFilter(logging.Filter):
    """Adds ``record.component``: the logger name below ``docsite``."""

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        prefix = f"{_LOGGER_NAME}."
        record.component = name[len(prefix):] if name.startswith(prefix) else name
        return True


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a component logger such as ``docsite.manifest``."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, quiet: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Install console (and optional file) handlers on the ``docsite`` logger.

    ``quiet`` keeps only warnings and errors on the console and wins over
    ``verbose``. Calling this again replaces the handlers of the previous call.
    """
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.addFilter(_ComponentFilter())
    stream_handler.setFormatter(
        logging.Formatter(_VERBOSE_FORMAT if level == logging.DEBUG else _CONSOLE_FORMAT)
    )
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)

    return logger


def uvicorn_log_level() -> str:
    """Map the configured ``docsite`` level onto uvicorn's ``log_level`` names."""
    level = logging.getLogger(_LOGGER_NAME).getEffectiveLevel()
    if level <= logging.DEBUG:
        return "debug"
    return _UVICORN_LEVELS.get(level, "warning" if level <= logging.WARNING else "error")


__all__ = ["configure_logging", "get_logger", "uvicorn_log_level"]
