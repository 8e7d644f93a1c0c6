"""
Line console transport.

Drives the command protocol over a pair of text streams (stdin/stdout by
default). Useful for in-process debugging and for embedding a tweak console
in an application's own REPL.
"""

import logging
import sys
import threading
from typing import Optional, TextIO

from tweakkit.core.events import EventSource
from tweakkit.core.registry import TweakRegistry
from tweakkit.server.commands import BANNER_LINES, CommandInterpreter, format_event
from tweakkit.server.sessions import SessionBroadcaster, SessionTable

logger = logging.getLogger(__name__)

EXIT_COMMANDS = frozenset({"exit", "quit"})


class StreamSink:
    """Writes pushed messages to a text stream, one message per line block."""

    def __init__(self, stream: TextIO):
        self._stream = stream
        self._lock = threading.Lock()

    def send_text(self, text: str) -> None:
        with self._lock:
            try:
                self._stream.write(text + "\n")
                self._stream.flush()
            except (OSError, ValueError) as e:
                raise ConnectionError(f"Console stream closed: {e}") from e


class Console:
    """
    Interactive console bound to a registry.

    Example:
        registry = TweakRegistry()
        registry.tweak("speed", 1.0)
        Console(registry).run()
    """

    def __init__(
        self,
        registry: TweakRegistry,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        prompt: str = "> ",
        source: EventSource = EventSource.WEB
    ):
        self.registry = registry
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.prompt = prompt
        self.sessions = SessionTable()
        self.interpreter = CommandInterpreter(registry, self.sessions, source=source)
        self._sink = StreamSink(self.stdout)
        self._broadcaster = SessionBroadcaster(registry, self.sessions, format_event)

    def run(self) -> int:
        """
        Read commands until EOF or ``exit``/``quit``.

        Returns:
            Number of commands executed
        """
        session_id = self.sessions.open(self._sink)
        self._broadcaster.attach()
        executed = 0
        try:
            self._sink.send_text("\n".join(BANNER_LINES))
            while True:
                if self.prompt:
                    self.stdout.write(self.prompt)
                    self.stdout.flush()
                line = self.stdin.readline()
                if not line:
                    break
                line = line.strip()
                if not line:
                    continue
                if line.lower() in EXIT_COMMANDS:
                    break
                lines = self.interpreter.execute(line, session_id)
                executed += 1
                if lines:
                    self._sink.send_text("\n".join(lines))
        finally:
            self._broadcaster.detach()
            self.sessions.close(session_id)
        logger.debug(f"Console finished after {executed} commands")
        return executed


def run_console(registry: TweakRegistry, **kwargs) -> int:
    """Run a Console over stdin/stdout."""
    return Console(registry, **kwargs).run()
