"""
Value kinds for TweakKit.

A value kind knows how to turn one concrete Python type into its display
string and back. Ordering and numeric projection are separate, optional
capabilities so that, for example, strings can be range-checked but never
step-checked, and booleans support neither.
"""

import math
from typing import Any, Dict, Optional, Protocol, runtime_checkable


# Tolerance used when projecting a real back onto an integral kind.
INTEGRAL_TOLERANCE = 1e-7


# =============================================================================
# Capabilities
# =============================================================================

@runtime_checkable
class ValueKind(Protocol):
    """Parse/describe capability shared by every kind."""

    name: str

    def parse(self, text: str) -> Optional[Any]:
        ...

    def describe(self, value: Any) -> str:
        ...


@runtime_checkable
class Ordered(Protocol):
    """Total order over values of a kind."""

    def compare(self, a: Any, b: Any) -> int:
        ...


@runtime_checkable
class NumericProjectable(Protocol):
    """Projection of values onto real numbers, used for step checks."""

    def as_real(self, value: Any) -> float:
        ...

    def from_real(self, x: float) -> Optional[Any]:
        ...


@runtime_checkable
class TypeChecked(Protocol):
    """Membership test for values handed in by application code."""

    def accepts(self, value: Any) -> bool:
        ...


def _compare(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


# =============================================================================
# Built-in Kinds
# =============================================================================

class StringKind:
    """Plain text; ordered lexicographically."""

    name = "str"

    def parse(self, text: str) -> Optional[str]:
        return text

    def describe(self, value: str) -> str:
        return value

    def accepts(self, value: Any) -> bool:
        return isinstance(value, str)

    def compare(self, a: str, b: str) -> int:
        return _compare(a, b)


class BoolKind:
    """Booleans, displayed as ``true``/``false``."""

    name = "bool"

    TRUE_WORDS = frozenset({"true", "1", "yes", "y", "on"})
    FALSE_WORDS = frozenset({"false", "0", "no", "n", "off"})

    def parse(self, text: str) -> Optional[bool]:
        word = text.strip().lower()
        if word in self.TRUE_WORDS:
            return True
        if word in self.FALSE_WORDS:
            return False
        return None

    def describe(self, value: bool) -> str:
        return "true" if value else "false"

    def accepts(self, value: Any) -> bool:
        return isinstance(value, bool)


class IntKind:
    """Integers; ordered and numeric."""

    name = "int"

    def parse(self, text: str) -> Optional[int]:
        try:
            return int(text)
        except ValueError:
            pass
        # Integral reals such as "3.0" or "1e3" are accepted
        try:
            real = float(text)
        except ValueError:
            return None
        if not math.isfinite(real):
            return None
        return self.from_real(real)

    def describe(self, value: int) -> str:
        return str(value)

    def accepts(self, value: Any) -> bool:
        return isinstance(value, int) and not isinstance(value, bool)

    def compare(self, a: int, b: int) -> int:
        return _compare(a, b)

    def as_real(self, value: int) -> float:
        return float(value)

    def from_real(self, x: float) -> Optional[int]:
        rounded = round(x)
        if abs(x - rounded) >= INTEGRAL_TOLERANCE:
            return None
        return int(rounded)


class FloatKind:
    """Floating-point numbers; ordered and numeric."""

    name = "float"

    def parse(self, text: str) -> Optional[float]:
        try:
            value = float(text)
        except ValueError:
            return None
        # nan, inf and overflowing literals have no usable display round trip
        if not math.isfinite(value):
            return None
        return value

    def describe(self, value: float) -> str:
        return repr(float(value))

    def accepts(self, value: Any) -> bool:
        return isinstance(value, float) and math.isfinite(value)

    def compare(self, a: float, b: float) -> int:
        return _compare(a, b)

    def as_real(self, value: float) -> float:
        return float(value)

    def from_real(self, x: float) -> Optional[float]:
        return x


STRING = StringKind()
BOOL = BoolKind()
INT = IntKind()
FLOAT = FloatKind()


# =============================================================================
# Kind Lookup
# =============================================================================

# bool must be looked up before int because bool subclasses int
_KINDS_BY_TYPE: Dict[type, ValueKind] = {
    bool: BOOL,
    str: STRING,
    int: INT,
    float: FLOAT,
}


def register_kind(python_type: type, kind: ValueKind) -> None:
    """
    Make ``kind`` the inferred kind for defaults of ``python_type``.

    Args:
        python_type: Type of default values handled by the kind
        kind: Value kind instance
    """
    if not isinstance(kind, ValueKind):
        raise TypeError(f"{kind!r} does not implement parse/describe")
    _KINDS_BY_TYPE[python_type] = kind


def kind_for(value: Any) -> ValueKind:
    """
    Infer the value kind for a default value.

    Raises:
        TypeError: If no kind is registered for the value's type
    """
    kind = _KINDS_BY_TYPE.get(type(value))
    if kind is not None:
        return kind
    for python_type, candidate in _KINDS_BY_TYPE.items():
        if isinstance(value, python_type):
            return candidate
    raise TypeError(f"No value kind registered for type {type(value).__name__}")
