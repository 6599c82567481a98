"""Logging configuration for the terminal application.

Logs go to a size-rotated file under the user log directory. A console
handler would write into the full-screen terminal UI, so none is installed.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from platformdirs import user_log_dir

from .config import APP_NAME

LOG_FILENAME = f"{APP_NAME}.log"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_BYTES = 1024 * 1024
LOG_BACKUP_COUNT = 3
DEFAULT_LOG_LEVEL = "INFO"


def default_log_path() -> Path:
    return Path(user_log_dir(APP_NAME, appauthor=False)) / LOG_FILENAME


def parse_log_level(value: str | None) -> int:
    """Map a level name like ``"debug"`` to its numeric value (INFO fallback)."""
    level = logging.getLevelName(str(value or DEFAULT_LOG_LEVEL).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: str | None = None, log_file: Path | None = None) -> Path | None:
    """Attach a rotating file handler to the ``treepeek`` logger.

    Returns the log path, or ``None`` when the file could not be opened (the
    application then runs without logging rather than failing to start).
    """
    path = Path(log_file) if log_file is not None else default_log_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8")
    except OSError:
        return None
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))

    logger = logging.getLogger(APP_NAME)
    for existing in list(logger.handlers):
        if isinstance(existing, RotatingFileHandler):
            logger.removeHandler(existing)
            existing.close()
    logger.addHandler(handler)
    logger.setLevel(parse_log_level(level))
    logger.propagate = False
    logger.info("session started, logging to %s", path)
    return path


__all__ = [
    "LOG_FILENAME",
    "default_log_path",
    "parse_log_level",
    "configure_logging",
]
