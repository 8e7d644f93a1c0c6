"""
Command protocol for TweakKit.

Provides the tokenizer, the command interpreter, per-connection sessions
with event broadcasting, and a line console transport.
"""

from tweakkit.server.parser import tokenize
from tweakkit.server.commands import (
    CommandInterpreter,
    describe_tweak,
    format_event,
    BANNER_LINES,
    HELP_LINES,
)
from tweakkit.server.sessions import (
    Session,
    SessionSink,
    SessionTable,
    SessionBroadcaster,
)
from tweakkit.server.console import Console, StreamSink, run_console

__all__ = [
    # Parser
    "tokenize",
    # Interpreter
    "CommandInterpreter",
    "describe_tweak",
    "format_event",
    "BANNER_LINES",
    "HELP_LINES",
    # Sessions
    "Session",
    "SessionSink",
    "SessionTable",
    "SessionBroadcaster",
    # Console
    "Console",
    "StreamSink",
    "run_console",
]
