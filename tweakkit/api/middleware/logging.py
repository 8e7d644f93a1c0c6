"""
API middleware for request logging.
"""

import time
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

# Polled by supervisors; logged at debug only
QUIET_PATHS = frozenset({"/health"})


# =============================================================================
# Request Logging
# =============================================================================

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log HTTP requests (WebSocket traffic is logged per session)."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        client = request.client.host if request.client else "-"
        level = logging.DEBUG if request.url.path in QUIET_PATHS else logging.INFO
        logger.log(
            level,
            f"{client} {request.method} {request.url.path} "
            f"-> {response.status_code} ({elapsed_ms:.1f}ms)"
        )
        return response
