"""Logging configuration for pro-match.

Sets up standard logging to stderr with a consistent format.
Import the ``logger`` instance from this module in entry points;
library modules log through ``logging.getLogger(__name__)``.

Call :func:`configure_file_logging` to add a timestamped file handler
under ``data/logs/`` for post-run diagnosis.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path

# Create logger
logger = logging.getLogger("pro-match")
logger.setLevel(logging.INFO)

# Create handler to stderr
handler = logging.StreamHandler(sys.stderr)
handler.setLevel(logging.INFO)

# Create formatter (shared between stderr and file handlers)
_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

formatter = logging.Formatter(_LOG_FORMAT, datefmt=_LOG_DATEFMT)
handler.setFormatter(formatter)

# Add handler to logger
logger.addHandler(handler)

# Package modules log under "promatch.*"; route them through the same handler
_package_logger = logging.getLogger("promatch")
_package_logger.setLevel(logging.INFO)
_package_logger.addHandler(handler)

# Default log directory
DEFAULT_LOG_DIR = "data/logs"


def set_level(level: int) -> None:
    """Apply *level* to the stderr handler and both named loggers."""
    handler.setLevel(level)
    logger.setLevel(level)
    _package_logger.setLevel(level)


def configure_file_logging(
    log_dir: str = DEFAULT_LOG_DIR,
    *,
    level: int = logging.INFO,
) -> logging.FileHandler:
    """Add a timestamped file handler to the logger.

    Creates ``log_dir`` if it does not exist.  Returns the handler so
    callers (or tests) can remove it later.

    Args:
        log_dir: Directory for log files.  Created automatically.
        level: Logging level for the file handler (default: INFO).

    Returns:
        The :class:`logging.FileHandler` that was added.
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S")
    filename = log_path / f"pro-match_{timestamp}.log"

    file_handler = logging.FileHandler(str(filename), encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_LOG_DATEFMT))

    # Ensure the loggers capture messages at the lowest requested level
    if level < logger.level:
        logger.setLevel(level)
    if level < _package_logger.level:
        _package_logger.setLevel(level)

    logger.addHandler(file_handler)
    _package_logger.addHandler(file_handler)
    return file_handler


def remove_file_logging(file_handler: logging.FileHandler) -> None:
    """Detach and close a handler added by :func:`configure_file_logging`."""
    logger.removeHandler(file_handler)
    _package_logger.removeHandler(file_handler)
    file_handler.close()


__all__ = ["configure_file_logging", "logger", "remove_file_logging", "set_level"]
