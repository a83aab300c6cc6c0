"""Logging configuration for ScrapeLens."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from scrapelens.config import settings


def setup_logger(
    name: str = "scrapelens",
    level: Optional[int | str] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """Set up and return the package logger.

    Args:
        name: Logger name.
        level: Logging level.  Defaults to ``settings.log_level``.
        log_file: Optional file path for logging.

    Returns:
        Configured logger instance.
    """
    logger = logging.getLogger(name)

    # setup_logger may run more than once (CLI callback, app factory, import)
    if logger.handlers:
        return logger

    level = level if level is not None else settings.log_level
    logger.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


logger = setup_logger()


def get_module_logger(module_name: str) -> logging.Logger:
    """Return a child logger such as ``scrapelens.pipeline``.

    Child loggers inherit the package logger's handlers and level; their name
    shows which stage produced each message.
    """
    return logging.getLogger(f"scrapelens.{module_name}")
