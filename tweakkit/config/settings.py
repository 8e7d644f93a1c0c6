"""
Global configuration settings for TweakKit.

Loads transport configuration from environment variables (and a ``.env``
file when present). The core registry never reads these settings; they are
consumed by the HTTP/WebSocket server at the composition root.
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from tweakkit.core.events import DEFAULT_HISTORY_CAPACITY

load_dotenv()


NETWORK_MODES = ("localhost", "lan")


def resolve_bind_host(network_mode: str, host: Optional[str] = None) -> str:
    """
    Interface to bind for a network mode; an explicit host wins.

    Raises:
        ValueError: If the network mode is unknown
    """
    if network_mode not in NETWORK_MODES:
        raise ValueError(
            f"Invalid network mode: {network_mode}. Valid modes: {list(NETWORK_MODES)}"
        )
    if host:
        return host
    return "127.0.0.1" if network_mode == "localhost" else "0.0.0.0"


@dataclass
class Settings:
    """Global settings for TweakKit."""

    # Server
    host: Optional[str] = None
    port: int = 8080
    network_mode: str = "localhost"  # "localhost" binds 127.0.0.1, "lan" binds all interfaces

    # Registry
    history_capacity: int = DEFAULT_HISTORY_CAPACITY

    # Logging
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def __post_init__(self):
        """Load settings from environment variables."""
        self.host = os.getenv("TWEAKKIT_HOST", self.host)
        self.network_mode = os.getenv("TWEAKKIT_NETWORK_MODE", self.network_mode).lower()
        self.log_level = os.getenv("LOG_LEVEL", self.log_level)

        if os.getenv("TWEAKKIT_PORT"):
            self.port = int(os.getenv("TWEAKKIT_PORT"))
        if os.getenv("TWEAKKIT_HISTORY_CAPACITY"):
            self.history_capacity = int(os.getenv("TWEAKKIT_HISTORY_CAPACITY"))

        if self.network_mode not in NETWORK_MODES:
            raise ValueError(
                f"Invalid network mode: {self.network_mode}. Valid modes: {list(NETWORK_MODES)}"
            )
        if self.history_capacity < 1:
            raise ValueError("history_capacity must be at least 1")

    @property
    def bind_host(self) -> str:
        """Interface to bind; an explicit host wins over the network mode."""
        return resolve_bind_host(self.network_mode, self.host)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "host": self.bind_host,
            "port": self.port,
            "network_mode": self.network_mode,
            "history_capacity": self.history_capacity,
            "log_level": self.log_level,
        }


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def configure(**kwargs) -> Settings:
    """
    Configure global settings.

    Args:
        **kwargs: Settings fields to override

    Returns:
        Configured Settings instance
    """
    settings = get_settings()

    for key, value in kwargs.items():
        if hasattr(settings, key):
            setattr(settings, key, value)

    return settings


def reset_settings() -> None:
    """Drop the global settings so the next access reloads the environment."""
    global _settings
    _settings = None
