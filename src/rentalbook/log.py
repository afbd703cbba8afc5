"""Logging setup for the ``rentalbook`` logger tree."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "rentalbook"

_logger: logging.Logger | None = None


def setup_logging(verbose: bool = False, console: Console | None = None) -> logging.Logger:
    """Attach one rich handler to the package logger.

    Calling it again only adjusts the level. Records do not propagate to
    the root logger.
    """
    global _logger

    level = logging.DEBUG if verbose else logging.INFO
    if _logger is not None:
        _logger.setLevel(level)
        return _logger

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False

    _logger = logger
    return logger


def reset_logging() -> None:
    """Drop handlers and forget the configured logger. Mainly for tests."""
    global _logger
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    _logger = None
