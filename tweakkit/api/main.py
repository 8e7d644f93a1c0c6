"""
TweakKit API - Main FastAPI Application.

Serves the tweak console over HTTP and WebSocket.

Provides endpoints for:
- Browser console (GET /)
- Health check (GET /health)
- Tweak listing and history (GET /api/tweaks, GET /api/history)
- Command protocol (WebSocket /ws)
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from tweakkit import __version__
from tweakkit.api.dependencies import get_registry
from tweakkit.api.middleware import RequestLoggingMiddleware
from tweakkit.api.routes import console_router, tweaks_router
from tweakkit.config.settings import Settings, get_settings
from tweakkit.core.registry import TweakRegistry
from tweakkit.server.commands import CommandInterpreter, format_event
from tweakkit.server.sessions import SessionBroadcaster, SessionTable

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Starts broadcasting registry events to sessions on startup and stops on
    shutdown.
    """
    logger.info("Starting TweakKit server...")
    app.state.broadcaster.attach()

    yield

    logger.info("Shutting down TweakKit server...")
    app.state.broadcaster.detach()
    app.state.sessions.clear()


def create_app(
    registry: Optional[TweakRegistry] = None,
    settings: Optional[Settings] = None
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        registry: Registry to serve (default registry if None)
        settings: Settings (global settings if None)

    Returns:
        Configured FastAPI instance
    """
    settings = settings or get_settings()
    registry = registry if registry is not None else get_registry()

    app = FastAPI(
        title="TweakKit",
        description="Live inspection and adjustment of runtime tweaks.",
        version=__version__,
        lifespan=lifespan,
    )

    sessions = SessionTable()
    app.state.settings = settings
    app.state.registry = registry
    app.state.sessions = sessions
    app.state.interpreter = CommandInterpreter(registry, sessions)
    app.state.broadcaster = SessionBroadcaster(registry, sessions, format_event)

    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(console_router)
    app.include_router(tweaks_router)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "code": "INTERNAL_ERROR"
            }
        )

    return app


# Create the app instance
app = create_app()


# Entry point for running with uvicorn
if __name__ == "__main__":
    import uvicorn

    from tweakkit.utils.logger_config import setup_logging_from_settings

    settings = get_settings()
    setup_logging_from_settings(settings)

    uvicorn.run(
        "tweakkit.api.main:app",
        host=settings.bind_host,
        port=settings.port,
        log_level=settings.log_level.lower()
    )
