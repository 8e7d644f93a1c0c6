"""
Range and step constraints for tweaks.

Checks run only when the value kind carries the needed capability:
range checks need Ordered, step checks need NumericProjectable.
"""

import math
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from tweakkit.core.errors import OutOfRange, StepMismatch, TweakResult
from tweakkit.core.values import NumericProjectable, Ordered, ValueKind

T = TypeVar("T")

STEP_EPSILON = 1e-7


@dataclass(frozen=True)
class Constraints(Generic[T]):
    """
    Optional bounds and step for a tweak value.

    Attributes:
        min: Inclusive lower bound
        max: Inclusive upper bound
        step: Alignment step, measured from ``min`` (or 0)
        tolerance: Absolute tolerance for the step alignment check
    """
    min: Optional[T] = None
    max: Optional[T] = None
    step: Optional[T] = None
    tolerance: float = STEP_EPSILON

    @property
    def is_empty(self) -> bool:
        return self.min is None and self.max is None and self.step is None


@dataclass(frozen=True)
class ConstraintInfo:
    """Display strings for the constraints that are present."""
    min: Optional[str] = None
    max: Optional[str] = None
    step: Optional[str] = None

    def to_dict(self) -> dict:
        return {"min": self.min, "max": self.max, "step": self.step}


def describe_constraints(constraints: Constraints, kind: ValueKind) -> ConstraintInfo:
    def show(value: Any) -> Optional[str]:
        return kind.describe(value) if value is not None else None

    return ConstraintInfo(
        min=show(constraints.min),
        max=show(constraints.max),
        step=show(constraints.step),
    )


def check_constraints(
    constraints: Optional[Constraints],
    kind: ValueKind,
    value: Any
) -> TweakResult:
    """
    Validate a candidate value against constraints.

    Args:
        constraints: Constraints to check (None means unconstrained)
        kind: Value kind of the tweak
        value: Candidate value

    Returns:
        Success, or a failure carrying OutOfRange / StepMismatch
    """
    if constraints is None:
        return TweakResult.success()

    range_result = _check_range(constraints, kind, value)
    if not range_result.ok:
        return range_result

    return _check_step(constraints, kind, value)


def _check_range(constraints: Constraints, kind: ValueKind, value: Any) -> TweakResult:
    if not isinstance(kind, Ordered):
        return TweakResult.success()

    info = describe_constraints(constraints, kind)
    if constraints.min is not None and kind.compare(value, constraints.min) < 0:
        return TweakResult.failure(OutOfRange(info.min, info.max))
    if constraints.max is not None and kind.compare(value, constraints.max) > 0:
        return TweakResult.failure(OutOfRange(info.min, info.max))
    return TweakResult.success()


def _check_step(constraints: Constraints, kind: ValueKind, value: Any) -> TweakResult:
    if constraints.step is None or not isinstance(kind, NumericProjectable):
        return TweakResult.success()

    mismatch = TweakResult.failure(StepMismatch(kind.describe(constraints.step)))
    base_value = constraints.min if constraints.min is not None else 0

    # Integers of any size are checked exactly
    if all(_is_integer(v) for v in (value, base_value, constraints.step)):
        if (value - base_value) % constraints.step == 0:
            return TweakResult.success()
        return mismatch

    try:
        step = kind.as_real(constraints.step)
        base = kind.as_real(constraints.min) if constraints.min is not None else 0.0
        offset = kind.as_real(value) - base
    except OverflowError:
        return mismatch
    if not (math.isfinite(offset) and math.isfinite(step)):
        return mismatch

    remainder = math.fmod(offset, step)
    epsilon = constraints.tolerance
    if abs(remainder) < epsilon or abs(remainder - step) < epsilon:
        return TweakResult.success()
    return mismatch


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_constraints(constraints: Constraints, kind: ValueKind) -> None:
    """
    Reject constraint sets that would make every check fail or crash.

    Bounds on an unordered kind and steps on a non-numeric kind are
    allowed; those checks are skipped at validation time.

    Raises:
        ValueError: If the step is not positive or min exceeds max
    """
    if constraints.step is not None and isinstance(kind, NumericProjectable):
        if kind.as_real(constraints.step) <= 0:
            raise ValueError(f"step must be positive, got {kind.describe(constraints.step)}")

    if (
        isinstance(kind, Ordered)
        and constraints.min is not None
        and constraints.max is not None
        and kind.compare(constraints.min, constraints.max) > 0
    ):
        raise ValueError("min cannot exceed max")
