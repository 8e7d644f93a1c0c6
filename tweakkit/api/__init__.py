"""
TweakKit API.

HTTP/WebSocket transport for the tweak console.
"""

from tweakkit.api.main import create_app
from tweakkit.api.server import TweakServer

__all__ = [
    "create_app",
    "TweakServer",
]
