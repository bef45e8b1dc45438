"""
Logging utilities for aldexClr.

This module contains logging configuration and utilities.
"""

import logging
import sys
from typing import Callable, Optional, Union
from pathlib import Path


LOG_FORMAT = '%(asctime)s | %(levelname)s | %(name)s:%(lineno)d | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Names of loggers that carry their own console handler
_OWN_HANDLER_LOGGERS = set()


def get_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """
    Get a logger instance for the given name.

    A console handler is attached only when the root logger has none, so
    that loggers created after setup_logging() do not print twice.

    Args:
        name: Logger name
        level: Logging level

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers and not logging.getLogger().handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(console_handler)
        logger.setLevel(level)
        logger.propagate = False
        _OWN_HANDLER_LOGGERS.add(name)

    return logger


def progress_logger(logger: logging.Logger, verbose: bool) -> Callable[..., None]:
    """Return the logging method used for progress messages: INFO when verbose, DEBUG otherwise."""
    return logger.info if verbose else logger.debug


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    log_format: Optional[str] = None
) -> None:
    """
    Setup logging configuration for the entire application.

    Args:
        level: Logging level (number or name such as "DEBUG")
        log_file: Optional log file path
        log_format: Optional custom log format
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown logging level: {level}")

    if log_format is None:
        log_format = LOG_FORMAT

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(log_format, datefmt=DATE_FORMAT))
    root_logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(log_format, datefmt=DATE_FORMAT))
        root_logger.addHandler(file_handler)

    # Loggers created before setup keep their own handler; hand them to root
    for name in list(_OWN_HANDLER_LOGGERS):
        existing = logging.getLogger(name)
        existing.handlers.clear()
        existing.propagate = True
        existing.setLevel(logging.NOTSET)
        _OWN_HANDLER_LOGGERS.discard(name)
