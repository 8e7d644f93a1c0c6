"""
API Routes for TweakKit.

- console: HTML terminal, health check, command WebSocket
- tweaks: Tweak listing and change history
"""

from tweakkit.api.routes.console import router as console_router
from tweakkit.api.routes.tweaks import router as tweaks_router

__all__ = [
    "console_router",
    "tweaks_router",
]
