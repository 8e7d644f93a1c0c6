"""
Configuration module for TweakKit.

Provides environment-driven settings for the server transports.
"""

from tweakkit.config.settings import (
    Settings,
    get_settings,
    configure,
    reset_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "configure",
    "reset_settings",
]
