"""
Logging configuration for the tracker.

Logs to stderr and, when a log file is configured, to a rotating file.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_handlers = []


def configure_logging(
    level: str = "WARNING", log_file: Optional[Union[str, Path]] = None
) -> None:
    """Configure the root logger. Calling again replaces earlier handlers."""
    level = level.upper()
    root = logging.getLogger()
    for handler in _handlers:
        root.removeHandler(handler)
        handler.close()
    _handlers.clear()

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(fmt)
    _handlers.append(console)

    if log_file:
        # Keeps last 5 x 1MB log files
        file_handler = RotatingFileHandler(
            filename=str(log_file),
            maxBytes=1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(fmt)
        _handlers.append(file_handler)

    root.setLevel(level)
    for handler in _handlers:
        root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Call this at the top of every module."""
    return logging.getLogger(name)
