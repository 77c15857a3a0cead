"""Logging configuration for msh.

Diagnostics go to stderr; an optional log file receives the same records.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Environment variable overriding the configured level
LOG_ENV_VAR = "MSH_LOG"

_handlers: list[logging.Handler] = []


def resolve_level(verbosity: int = 0, configured: Optional[str] = None) -> int:
    """Pick a log level from -v count, MSH_LOG, then config.

    Args:
        verbosity: Number of -v flags (1 = INFO, 2+ = DEBUG)
        configured: Level name from the config file

    Returns:
        A logging level, WARNING when nothing is set.
    """
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO

    for name in (os.environ.get(LOG_ENV_VAR), configured):
        if not name:
            continue
        level = logging.getLevelName(name.upper())
        if isinstance(level, int):
            return level
    return logging.WARNING


def configure_logging(level: int = logging.WARNING, log_file: Optional[Path] = None) -> None:
    """Attach handlers to the msh logger.

    Calling again replaces the handlers from the previous call.

    Args:
        level: Level for the msh logger and its handlers
        log_file: Optional file that receives the same records
    """
    close_logging()

    logger = logging.getLogger("msh")
    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    stream_handler.setLevel(level)
    logger.addHandler(stream_handler)
    _handlers.append(stream_handler)

    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as e:
            logger.warning(f"Cannot open log file {log_file}: {e}")
        else:
            file_handler.setFormatter(formatter)
            file_handler.setLevel(level)
            logger.addHandler(file_handler)
            _handlers.append(file_handler)


def close_logging() -> None:
    """Remove and close handlers installed by configure_logging."""
    logger = logging.getLogger("msh")
    while _handlers:
        handler = _handlers.pop()
        logger.removeHandler(handler)
        handler.close()
