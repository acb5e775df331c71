"""Logging configuration for lopper."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "lopper"


def setup_logging(verbose: bool = False, debug: bool = False) -> logging.Logger:
    """Configure the package logger.

    Log records go to stderr so they never mix with the branch report on stdout.

    Args:
        verbose: If True, show INFO level messages
        debug: If True, show DEBUG level messages with source paths

    Returns:
        The configured package logger
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=debug,
        show_path=debug,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setLevel(level)
    logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger below the package logger.

    Args:
        name: Name of the module (typically __name__)
    """
    if name == LOGGER_NAME or name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
