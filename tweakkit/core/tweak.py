"""
Tweak: one named, typed, runtime-overridable value.

A Tweak owns its default, its optional override and its validation. It
never records events; the registry wraps every mutation with before/after
display strings and decides whether a change happened.
"""

from typing import Any, Dict, Generic, Optional, TypeVar

from tweakkit.core.constraints import (
    ConstraintInfo,
    Constraints,
    check_constraints,
    describe_constraints,
    validate_constraints,
)
from tweakkit.core.errors import InvalidValue, TweakResult
from tweakkit.core.values import TypeChecked, ValueKind, kind_for

T = TypeVar("T")

_UNSET = object()


class Tweak(Generic[T]):
    """
    A named value with an immutable default and an optional override.

    The registry only uses the string-based surface (``set_from_string``,
    ``reset``, ``current_string`` and the metadata properties), so tweaks
    of any kind can live in the same map.
    """

    def __init__(
        self,
        key: str,
        default: T,
        constraints: Optional[Constraints[T]] = None,
        kind: Optional[ValueKind] = None
    ):
        """
        Initialize a Tweak.

        Args:
            key: Unique identifier
            default: Default value, also used to infer the kind
            constraints: Optional min/max/step
            kind: Explicit value kind (inferred from ``default`` if None)

        Raises:
            TypeError: If no kind can be inferred for ``default``
            ValueError: If the constraints are inconsistent
        """
        if not key:
            raise ValueError("Tweak key must be a non-empty string")

        self.key = key
        self.default = default
        self.kind = kind if kind is not None else kind_for(default)
        if constraints is not None and constraints.is_empty:
            constraints = None
        if constraints is not None:
            validate_constraints(constraints, self.kind)
        self.constraints = constraints
        self._override: Any = _UNSET

    def __repr__(self) -> str:
        return f"Tweak({self.key!r}, value={self.current_string!r}, type={self.type_name})"

    # =========================================================================
    # Values
    # =========================================================================

    @property
    def value(self) -> T:
        """Current value: the override if set, else the default."""
        override = self._override
        return self.default if override is _UNSET else override

    @property
    def has_override(self) -> bool:
        return self._override is not _UNSET

    @property
    def type_name(self) -> str:
        return self.kind.name

    @property
    def default_string(self) -> str:
        return self.kind.describe(self.default)

    @property
    def current_string(self) -> str:
        return self.kind.describe(self.value)

    @property
    def constraints_info(self) -> Optional[ConstraintInfo]:
        if self.constraints is None:
            return None
        return describe_constraints(self.constraints, self.kind)

    # =========================================================================
    # Mutation
    # =========================================================================

    def accepts(self, value: Any) -> bool:
        """Whether ``value`` is a value of this tweak's kind."""
        if isinstance(self.kind, TypeChecked):
            return self.kind.accepts(value)
        try:
            self.kind.describe(value)
        except (TypeError, ValueError, AttributeError):
            return False
        return True

    def validate(self, value: T) -> TweakResult:
        if not self.accepts(value):
            return TweakResult.failure(InvalidValue(repr(value)))
        return check_constraints(self.constraints, self.kind, value)

    def set(self, value: T) -> TweakResult:
        """
        Override the value if it passes validation.

        Values of the wrong type fail with InvalidValue. On failure the
        tweak is left untouched.
        """
        result = self.validate(value)
        if result.ok:
            self._override = value
        return result

    def set_from_string(self, text: str) -> TweakResult:
        """Parse ``text`` with the tweak's kind, then ``set`` it."""
        parsed = self.kind.parse(text)
        if parsed is None:
            return TweakResult.failure(InvalidValue(text))
        return self.set(parsed)

    def reset(self) -> bool:
        """
        Clear the override.

        Returns:
            True if an override was cleared
        """
        if self._override is _UNSET:
            return False
        self._override = _UNSET
        return True

    # =========================================================================
    # Listing
    # =========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """Listing record: key, type, default, current, constraints."""
        record: Dict[str, Any] = {
            "key": self.key,
            "type": self.type_name,
            "default": self.default_string,
            "current": self.current_string,
        }
        info = self.constraints_info
        if info is not None:
            record["constraints"] = info.to_dict()
        return record
