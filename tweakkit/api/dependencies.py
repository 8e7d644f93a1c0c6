"""
Dependency injection for the TweakKit API.

The default registry lives here, at the composition root; the core never
creates one on its own. Routes read the registry and session table that
``create_app`` stored on ``app.state``.
"""

import logging
from typing import Optional

from starlette.requests import HTTPConnection

from tweakkit.config.settings import get_settings
from tweakkit.core.registry import TweakRegistry
from tweakkit.server.commands import CommandInterpreter
from tweakkit.server.sessions import SessionTable

logger = logging.getLogger(__name__)


# =============================================================================
# Default Registry
# =============================================================================

_registry: Optional[TweakRegistry] = None


def get_registry() -> TweakRegistry:
    """Get or create the application-wide default registry."""
    global _registry
    if _registry is None:
        settings = get_settings()
        _registry = TweakRegistry(history_capacity=settings.history_capacity)
        logger.info(f"Created default tweak registry (history capacity {settings.history_capacity})")
    return _registry


def initialize_registry(history_capacity: Optional[int] = None) -> TweakRegistry:
    """
    Replace the default registry with a fresh one.

    Args:
        history_capacity: History size (settings value if None)

    Returns:
        Initialized TweakRegistry
    """
    global _registry
    if history_capacity is None:
        history_capacity = get_settings().history_capacity
    _registry = TweakRegistry(history_capacity=history_capacity)
    return _registry


# =============================================================================
# Per-App State
# =============================================================================

def app_registry(connection: HTTPConnection) -> TweakRegistry:
    return connection.app.state.registry


def app_sessions(connection: HTTPConnection) -> SessionTable:
    return connection.app.state.sessions


def app_interpreter(connection: HTTPConnection) -> CommandInterpreter:
    return connection.app.state.interpreter
