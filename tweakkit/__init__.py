"""
TweakKit - Live runtime tweaks

Named, typed configuration values that can be inspected and changed while an
application runs, with every change recorded and broadcast.

Key Features:
- Typed tweaks (str, bool, int, float, custom kinds) with min/max/step constraints
- Thread-safe registry with a bounded change history and observers
- Text command protocol usable over any transport
- Per-connection watch sessions for pushed change events
- FastAPI console (HTTP + WebSocket) in tweakkit.api
"""

__version__ = "0.1.0"
__author__ = "TweakKit Team"

from tweakkit.core.constraints import Constraints
from tweakkit.core.errors import (
    TweakError,
    InvalidValue,
    OutOfRange,
    StepMismatch,
    TweakResult,
)
from tweakkit.core.events import EventSource, TweakEvent
from tweakkit.core.registry import TweakRegistry
from tweakkit.core.tweak import Tweak
from tweakkit.server.commands import CommandInterpreter

__all__ = [
    # Core
    "Tweak",
    "Constraints",
    "TweakRegistry",
    # Events
    "EventSource",
    "TweakEvent",
    # Errors
    "TweakError",
    "InvalidValue",
    "OutOfRange",
    "StepMismatch",
    "TweakResult",
    # Protocol
    "CommandInterpreter",
]
