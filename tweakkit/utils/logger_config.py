"""
Logging configuration for TweakKit.

All modules log through children of the ``tweakkit`` logger. Output goes to
stderr by default so it never interleaves with the line console, which
speaks the command protocol on stdout.
"""

import logging
import sys
from typing import IO, List, Optional

from tweakkit.config.settings import Settings

ROOT_LOGGER = "tweakkit"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Marks handlers installed here so reconfiguring leaves foreign ones alone
_OWNED = "_tweakkit_owned"


def _owned_handlers(logger: logging.Logger) -> List[logging.Handler]:
    return [h for h in logger.handlers if getattr(h, _OWNED, False)]


def setup_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
    log_file: Optional[str] = None,
    stream: Optional[IO[str]] = None
) -> logging.Logger:
    """
    Set up logging for the tweakkit logger tree.

    Calling it again replaces the handlers it installed before; handlers
    added by the host application are kept.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Log message format
        log_file: Optional file to also write logs to
        stream: Console stream (stderr if None)

    Returns:
        The tweakkit logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(numeric_level)

    for handler in _owned_handlers(logger):
        logger.removeHandler(handler)
        handler.close()

    handlers: List[logging.Handler] = [logging.StreamHandler(stream or sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        setattr(handler, _OWNED, True)
        logger.addHandler(handler)

    return logger


def setup_logging_from_settings(settings: Settings) -> logging.Logger:
    """Configure logging with the level and format from settings."""
    return setup_logging(settings.log_level, settings.log_format)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger in the tweakkit tree.

    Args:
        name: Dotted name below ``tweakkit`` (None for the tweakkit logger)
    """
    if name:
        return logging.getLogger(f"{ROOT_LOGGER}.{name}")
    return logging.getLogger(ROOT_LOGGER)
