"""
Error kinds and operation results for TweakKit.

Errors are returned inside a TweakResult rather than raised, so callers
(application code, the command interpreter, transports) can always turn a
failed change into a message without a try/except.
"""

from dataclasses import dataclass
from typing import Optional


class TweakError(Exception):
    """Base class for tweak validation failures."""

    @property
    def description(self) -> str:
        return str(self)


class InvalidValue(TweakError):
    """A value could not be parsed, or the key is unknown."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid value: {value}")


class OutOfRange(TweakError):
    """A value violates the min and/or max bound."""

    def __init__(self, min: Optional[str] = None, max: Optional[str] = None):
        self.min = min
        self.max = max
        super().__init__(
            f"Value out of range (min: {min if min is not None else '-'} "
            f"max: {max if max is not None else '-'} )"
        )


class StepMismatch(TweakError):
    """A value is not aligned to the configured step."""

    def __init__(self, step: str):
        self.step = step
        super().__init__(f"Value must align to step {step}")


@dataclass(frozen=True)
class TweakResult:
    """
    Outcome of a tweak operation.

    Attributes:
        error: The failure, or None on success
        changed: Whether the display value of the tweak changed
    """
    error: Optional[TweakError] = None
    changed: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, changed: bool = False) -> "TweakResult":
        return cls(error=None, changed=changed)

    @classmethod
    def failure(cls, error: TweakError) -> "TweakResult":
        return cls(error=error, changed=False)
