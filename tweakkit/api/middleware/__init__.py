"""
TweakKit API Middleware.
"""

from tweakkit.api.middleware.logging import RequestLoggingMiddleware

__all__ = [
    "RequestLoggingMiddleware",
]
