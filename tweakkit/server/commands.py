"""
Command interpreter for the TweakKit text protocol.

Translates one command line into registry operations and returns the
response as a list of text lines. Transports join the lines with a newline
and send them as a single message.

Commands:
- help
- list [filter]
- get <key>
- set <key> <value>
- reset <key>
- reset-all
- last
- history [n]
- watch [key] | watch off
"""

import logging
from typing import Callable, Dict, List, Optional

from tweakkit.core.events import EventSource, TweakEvent, format_timestamp
from tweakkit.core.registry import TweakRegistry
from tweakkit.core.tweak import Tweak
from tweakkit.server.parser import tokenize
from tweakkit.server.sessions import SessionTable

logger = logging.getLogger(__name__)


DEFAULT_HISTORY_LINES = 10

BANNER_LINES = [
    "TweakKit Server",
    "Type 'help' for commands.",
    "",
]

HELP_LINES = [
    "Commands:",
    "  help",
    "  list [filter]",
    "  get <key>",
    "  set <key> <value>",
    "  reset <key>",
    "  reset-all",
    "  last",
    "  history [n]",
    "  watch [key] | watch off",
]


# =============================================================================
# Formatting
# =============================================================================

def describe_tweak(tweak: Tweak) -> str:
    """``<key> = <current> (default: <default>) [<type>] {min=.., max=.., step=..}``"""
    line = f"{tweak.key} = {tweak.current_string} (default: {tweak.default_string}) [{tweak.type_name}]"
    info = tweak.constraints_info
    if info is not None:
        pieces = []
        if info.min is not None:
            pieces.append(f"min={info.min}")
        if info.max is not None:
            pieces.append(f"max={info.max}")
        if info.step is not None:
            pieces.append(f"step={info.step}")
        if pieces:
            line += " {" + ", ".join(pieces) + "}"
    return line


def format_event(event: TweakEvent) -> str:
    """``[<timestamp>] <key>: <old> -> <new> (<source>)``"""
    return (
        f"[{format_timestamp(event.timestamp)}] {event.key}: "
        f"{event.old_value} -> {event.new_value} ({event.source.value})"
    )


def _parse_count(text: Optional[str]) -> Optional[int]:
    if text is None:
        return None
    try:
        return int(text)
    except ValueError:
        return None


# =============================================================================
# Interpreter
# =============================================================================

class CommandInterpreter:
    """
    Executes protocol commands against a registry.

    Changes made through the interpreter are tagged with ``source``
    (``web`` by default).
    """

    def __init__(
        self,
        registry: TweakRegistry,
        sessions: Optional[SessionTable] = None,
        source: EventSource = EventSource.WEB
    ):
        """
        Initialize CommandInterpreter.

        Args:
            registry: Registry the commands operate on
            sessions: Session table backing ``watch`` (watch is unavailable if None)
            source: Event source for changes made by commands
        """
        self.registry = registry
        self.sessions = sessions
        self.source = source
        self._commands: Dict[str, Callable[[List[str], Optional[str]], List[str]]] = {
            "help": self._help,
            "list": self._list,
            "get": self._get,
            "set": self._set,
            "reset": self._reset,
            "reset-all": self._reset_all,
            "last": self._last,
            "history": self._history,
            "watch": self._watch,
        }

    def execute(self, line: str, session_id: Optional[str] = None) -> List[str]:
        """
        Run one command line.

        Args:
            line: Raw command text
            session_id: Session of the issuing connection, if any

        Returns:
            Response lines (empty for blank input)
        """
        tokens = tokenize(line)
        if not tokens:
            return []

        command = tokens[0].lower()
        handler = self._commands.get(command)
        if handler is None:
            return [f"Unknown command: {command}"]

        logger.debug(f"Executing command: {command} (session={session_id})")
        return handler(tokens[1:], session_id)

    def respond(self, line: str, session_id: Optional[str] = None) -> str:
        """Run one command line and join the response lines."""
        return "\n".join(self.execute(line, session_id))

    # =========================================================================
    # Commands
    # =========================================================================

    def _help(self, args: List[str], session_id: Optional[str]) -> List[str]:
        return list(HELP_LINES)

    def _list(self, args: List[str], session_id: Optional[str]) -> List[str]:
        tweaks = self.registry.list(args[0] if args else None)
        if not tweaks:
            return ["No tweaks found."]
        return [describe_tweak(tweak) for tweak in tweaks]

    def _get(self, args: List[str], session_id: Optional[str]) -> List[str]:
        if not args:
            return ["usage: get <key>"]
        key = args[0]
        tweak = self.registry.get(key)
        if tweak is None:
            return [f"No tweak with key: {key}"]
        return [describe_tweak(tweak)]

    def _set(self, args: List[str], session_id: Optional[str]) -> List[str]:
        if len(args) < 2:
            return ["usage: set <key> <value>"]
        key, value = args[0], args[1]
        result = self.registry.set(key, value, self.source)
        if not result.ok:
            return [f"Error: {result.error}"]
        return [f"Set {key} to {value}"]

    def _reset(self, args: List[str], session_id: Optional[str]) -> List[str]:
        if not args:
            return ["usage: reset <key>"]
        key = args[0]
        result = self.registry.reset(key, self.source)
        if not result.ok:
            return [f"Error: {result.error}"]
        return [f"Reset {key}"]

    def _reset_all(self, args: List[str], session_id: Optional[str]) -> List[str]:
        count = self.registry.reset_all(self.source)
        return [f"Reset {count} tweaks"]

    def _last(self, args: List[str], session_id: Optional[str]) -> List[str]:
        event = self.registry.last_event
        if event is None:
            return ["No tweaks yet."]
        return [format_event(event)]

    def _history(self, args: List[str], session_id: Optional[str]) -> List[str]:
        requested = _parse_count(args[0] if args else None)
        limit = max(1, requested if requested is not None else DEFAULT_HISTORY_LINES)
        events = self.registry.tail(limit)
        if not events:
            return ["No history."]
        return [format_event(event) for event in events]

    def _watch(self, args: List[str], session_id: Optional[str]) -> List[str]:
        if self.sessions is None or session_id is None:
            return ["Watch is not available on this connection."]

        if args and args[0].lower() == "off":
            self.sessions.unwatch(session_id)
            return ["Watch disabled"]

        watch_key = args[0] if args else None
        self.sessions.watch(session_id, watch_key)
        if watch_key is not None:
            return [f"Watching {watch_key}"]
        return ["Watching all tweaks"]
