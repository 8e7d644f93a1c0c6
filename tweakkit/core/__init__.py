"""
Core module for TweakKit.

Contains the tweak abstraction, value kinds, constraints, change events and
the concurrent registry.
"""

from tweakkit.core.values import (
    ValueKind,
    Ordered,
    NumericProjectable,
    TypeChecked,
    StringKind,
    BoolKind,
    IntKind,
    FloatKind,
    STRING,
    BOOL,
    INT,
    FLOAT,
    kind_for,
    register_kind,
)
from tweakkit.core.errors import (
    TweakError,
    InvalidValue,
    OutOfRange,
    StepMismatch,
    TweakResult,
)
from tweakkit.core.constraints import (
    Constraints,
    ConstraintInfo,
    STEP_EPSILON,
    check_constraints,
)
from tweakkit.core.tweak import Tweak
from tweakkit.core.events import (
    EventSource,
    TweakEvent,
    TweakHistory,
    DEFAULT_HISTORY_CAPACITY,
    format_timestamp,
)
from tweakkit.core.registry import TweakRegistry, EventHandler

__all__ = [
    # Values
    "ValueKind",
    "Ordered",
    "NumericProjectable",
    "TypeChecked",
    "StringKind",
    "BoolKind",
    "IntKind",
    "FloatKind",
    "STRING",
    "BOOL",
    "INT",
    "FLOAT",
    "kind_for",
    "register_kind",
    # Errors
    "TweakError",
    "InvalidValue",
    "OutOfRange",
    "StepMismatch",
    "TweakResult",
    # Constraints
    "Constraints",
    "ConstraintInfo",
    "STEP_EPSILON",
    "check_constraints",
    # Tweak
    "Tweak",
    # Events
    "EventSource",
    "TweakEvent",
    "TweakHistory",
    "DEFAULT_HISTORY_CAPACITY",
    "format_timestamp",
    # Registry
    "TweakRegistry",
    "EventHandler",
]
