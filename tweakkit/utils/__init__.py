"""
Utility module for TweakKit.

Provides logging configuration.
"""

from tweakkit.utils.logger_config import (
    setup_logging,
    setup_logging_from_settings,
    get_logger,
)

__all__ = [
    "setup_logging",
    "setup_logging_from_settings",
    "get_logger",
]
