"""
Embeddable TweakKit server.

Runs the FastAPI app with uvicorn on a background thread so an application
can expose its tweaks without giving up its main loop:

    registry = TweakRegistry()
    speed = registry.tweak("speed", 1.0, Constraints(min=0.0, max=10.0, step=0.5))
    server = TweakServer(registry)
    server.start(port=8080)
    ...
    server.stop()
"""

import logging
import threading
import time
from typing import Optional

import uvicorn

from tweakkit.api.main import create_app
from tweakkit.config.settings import Settings, get_settings, resolve_bind_host
from tweakkit.core.registry import TweakRegistry

logger = logging.getLogger(__name__)


class TweakServer:
    """HTTP/WebSocket console for one registry."""

    def __init__(
        self,
        registry: TweakRegistry,
        settings: Optional[Settings] = None
    ):
        self.registry = registry
        self.settings = settings or get_settings()
        self.app = create_app(registry, self.settings)
        self._server: Optional[uvicorn.Server] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def port(self) -> Optional[int]:
        if self._server is None:
            return None
        return self._server.config.port

    def build_config(
        self,
        port: Optional[int] = None,
        network_mode: Optional[str] = None
    ) -> uvicorn.Config:
        """
        Build the uvicorn config.

        Args:
            port: Port to listen on (settings value if None)
            network_mode: "localhost" or "lan" (settings value if None)
        """
        settings = self.settings
        mode = network_mode if network_mode is not None else settings.network_mode
        return uvicorn.Config(
            self.app,
            host=resolve_bind_host(mode, settings.host),
            port=port if port is not None else settings.port,
            log_level=settings.log_level.lower(),
        )

    def start(
        self,
        port: Optional[int] = None,
        network_mode: Optional[str] = None,
        startup_timeout: float = 5.0
    ) -> None:
        """
        Start serving on a background thread.

        Raises:
            RuntimeError: If already running or the server fails to start
        """
        if self.is_running:
            raise RuntimeError("TweakServer is already running")

        config = self.build_config(port, network_mode)
        self._server = uvicorn.Server(config)
        self._thread = threading.Thread(target=self._server.run, name="tweakkit-server", daemon=True)
        self._thread.start()

        deadline = time.monotonic() + startup_timeout
        while not self._server.started:
            if not self._thread.is_alive() or time.monotonic() > deadline:
                raise RuntimeError(f"TweakServer failed to start on {config.host}:{config.port}")
            time.sleep(0.05)
        logger.info(f"TweakServer listening on {config.host}:{config.port}")

    def stop(self, timeout: float = 5.0) -> None:
        """Stop serving and wait for the thread to finish."""
        if self._server is None or self._thread is None:
            return
        self._server.should_exit = True
        self._thread.join(timeout)
        self._server = None
        self._thread = None
