"""
Console routes: HTML terminal, health check and the command WebSocket.

Each WebSocket connection gets one session. Responses and pushed event
lines go through a per-connection outbox drained by a writer task, so
registry observers running on any thread never touch the socket directly.
"""

import asyncio
import logging
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from fastapi.responses import HTMLResponse, PlainTextResponse

from tweakkit.api.dependencies import app_interpreter, app_sessions
from tweakkit.api.static import CONSOLE_HTML
from tweakkit.server.commands import BANNER_LINES, CommandInterpreter
from tweakkit.server.sessions import SessionTable

logger = logging.getLogger(__name__)


router = APIRouter(tags=["console"])


class WebSocketSink:
    """Queues outgoing text for a connection's writer task."""

    def __init__(self, loop: asyncio.AbstractEventLoop, outbox: asyncio.Queue):
        self._loop = loop
        self._outbox = outbox
        self._closed = False

    def send_text(self, text: str) -> None:
        if self._closed:
            raise ConnectionError("WebSocket connection is closed")
        try:
            self._loop.call_soon_threadsafe(self._outbox.put_nowait, text)
        except RuntimeError as e:
            raise ConnectionError(f"Event loop unavailable: {e}") from e

    def close(self) -> None:
        self._closed = True


async def _drain(websocket: WebSocket, outbox: asyncio.Queue) -> None:
    while True:
        text = await outbox.get()
        try:
            await websocket.send_text(text)
        except (WebSocketDisconnect, RuntimeError) as e:
            logger.debug(f"Stopped writing to closed WebSocket: {e}")
            return


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def console_page():
    """Browser terminal for the command protocol."""
    return HTMLResponse(CONSOLE_HTML)


@router.get("/health", response_class=PlainTextResponse)
async def health_check():
    """Liveness probe."""
    return PlainTextResponse("OK")


@router.websocket("/ws")
async def console_socket(
    websocket: WebSocket,
    sessions: SessionTable = Depends(app_sessions),
    interpreter: CommandInterpreter = Depends(app_interpreter)
):
    """Command protocol over a WebSocket: one text frame per response."""
    await websocket.accept()

    outbox: asyncio.Queue = asyncio.Queue()
    sink = WebSocketSink(asyncio.get_running_loop(), outbox)
    session_id = sessions.open(sink)
    writer = asyncio.create_task(_drain(websocket, outbox))

    sink.send_text("\n".join(BANNER_LINES))
    try:
        while True:
            message = (await websocket.receive_text()).strip()
            if not message:
                continue
            lines = interpreter.execute(message, session_id)
            if lines:
                sink.send_text("\n".join(lines))
    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected: session {session_id}")
    finally:
        sink.close()
        sessions.close(session_id)
        writer.cancel()
