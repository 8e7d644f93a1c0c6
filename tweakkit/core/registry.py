"""
Tweak Registry for TweakKit.

Central owner of all tweaks, the change history and the observer set:
- Registration and lookup by key
- Sorted, case-insensitive listing
- String-driven set/reset with change events
- Bounded history and last-event tracking
- Observer fan-out outside the lock
"""

import logging
import threading
import uuid
from typing import Any, Callable, Dict, List, Optional, Tuple

from tweakkit.core.constraints import Constraints
from tweakkit.core.errors import InvalidValue, TweakResult
from tweakkit.core.events import (
    DEFAULT_HISTORY_CAPACITY,
    EventSource,
    TweakEvent,
    TweakHistory,
)
from tweakkit.core.tweak import Tweak
from tweakkit.core.values import ValueKind

logger = logging.getLogger(__name__)

EventHandler = Callable[[TweakEvent], None]


class TweakRegistry:
    """
    Concurrent registry of tweaks.

    Every mutation runs in one critical section together with the history
    append, so the history order always matches the order of changes.
    Observers are invoked after the lock is released; a handler may call
    back into ``get``/``list`` without deadlocking.
    """

    def __init__(self, history_capacity: int = DEFAULT_HISTORY_CAPACITY):
        """
        Initialize TweakRegistry.

        Args:
            history_capacity: Maximum number of events kept (default: 100)
        """
        self._lock = threading.RLock()
        self._tweaks: Dict[str, Tweak] = {}
        self._observers: Dict[str, EventHandler] = {}
        self._history = TweakHistory(history_capacity)
        self._last_event: Optional[TweakEvent] = None

    # =========================================================================
    # Registration
    # =========================================================================

    def register(self, tweak: Tweak) -> Tweak:
        """
        Register a tweak, replacing any tweak with the same key.

        Returns:
            The registered tweak
        """
        with self._lock:
            previous = self._tweaks.get(tweak.key)
            self._tweaks[tweak.key] = tweak

        if previous is not None and previous is not tweak:
            logger.warning(f"Tweak {tweak.key} was registered again; replacing previous tweak")
        else:
            logger.debug(f"Registered tweak {tweak.key} [{tweak.type_name}]")
        return tweak

    def tweak(
        self,
        key: str,
        default: Any,
        constraints: Optional[Constraints] = None,
        kind: Optional[ValueKind] = None
    ) -> Tweak:
        """Create a Tweak and register it."""
        return self.register(Tweak(key, default, constraints=constraints, kind=kind))

    def get(self, key: str) -> Optional[Tweak]:
        with self._lock:
            return self._tweaks.get(key)

    def list(self, filter: Optional[str] = None) -> List[Tweak]:
        """
        List tweaks sorted by key.

        Args:
            filter: Case-insensitive substring of the key (all if empty)

        Returns:
            Matching tweaks in ascending key order
        """
        with self._lock:
            tweaks = list(self._tweaks.values())

        if filter:
            needle = filter.casefold()
            tweaks = [t for t in tweaks if needle in t.key.casefold()]
        return sorted(tweaks, key=lambda t: t.key)

    def listing(self, filter: Optional[str] = None) -> List[Dict[str, Any]]:
        """Listing records for introspection endpoints."""
        return [tweak.to_dict() for tweak in self.list(filter)]

    def __len__(self) -> int:
        with self._lock:
            return len(self._tweaks)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._tweaks

    # =========================================================================
    # Mutation
    # =========================================================================

    def set(self, key: str, value_string: str, source: EventSource) -> TweakResult:
        """
        Set a tweak from its string form.

        Returns:
            Success (``changed`` tells whether an event was recorded), or
            InvalidValue / OutOfRange / StepMismatch
        """
        return self._apply(key, source, lambda tweak: tweak.set_from_string(value_string))

    def set_value(
        self,
        key: str,
        value: Any,
        source: EventSource = EventSource.CODE
    ) -> TweakResult:
        """Set a tweak from a typed value (application code path)."""
        return self._apply(key, source, lambda tweak: tweak.set(value))

    def reset(self, key: str, source: EventSource) -> TweakResult:
        """Clear a tweak's override."""
        return self._apply(key, source, self._reset_tweak)

    def reset_all(self, source: EventSource) -> int:
        """
        Reset every tweak.

        Returns:
            Number of tweaks whose value actually changed
        """
        count = 0
        for tweak in self.list():
            if self.reset(tweak.key, source).changed:
                count += 1
        return count

    @staticmethod
    def _reset_tweak(tweak: Tweak) -> TweakResult:
        tweak.reset()
        return TweakResult.success()

    def _apply(
        self,
        key: str,
        source: EventSource,
        operation: Callable[[Tweak], TweakResult]
    ) -> TweakResult:
        with self._lock:
            tweak = self._tweaks.get(key)
            if tweak is None:
                return TweakResult.failure(InvalidValue(f"Unknown key: {key}"))

            old_value = tweak.current_string
            result = operation(tweak)
            if not result.ok:
                return result

            new_value = tweak.current_string
            if old_value == new_value:
                return TweakResult.success(changed=False)

            event = TweakEvent(
                key=key,
                old_value=old_value,
                new_value=new_value,
                source=EventSource(source),
            )
            handlers = self._append_locked(event)

        self._notify(handlers, event)
        return TweakResult.success(changed=True)

    # =========================================================================
    # Events
    # =========================================================================

    def record(self, event: TweakEvent) -> None:
        """Append an event to the history and notify observers."""
        with self._lock:
            handlers = self._append_locked(event)
        self._notify(handlers, event)

    def _append_locked(self, event: TweakEvent) -> List[Tuple[str, EventHandler]]:
        self._history.append(event)
        self._last_event = event
        return list(self._observers.items())

    def _notify(self, handlers: List[Tuple[str, EventHandler]], event: TweakEvent) -> None:
        for observer_id, handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception(f"Observer {observer_id} failed handling event for {event.key}")

    @property
    def last_event(self) -> Optional[TweakEvent]:
        with self._lock:
            return self._last_event

    @property
    def history(self) -> List[TweakEvent]:
        """Snapshot of the history, oldest first."""
        with self._lock:
            return list(self._history)

    @property
    def history_capacity(self) -> int:
        return self._history.capacity

    def tail(self, count: int) -> List[TweakEvent]:
        """Last ``count`` events, oldest first."""
        with self._lock:
            return self._history.tail(count)

    # =========================================================================
    # Observers
    # =========================================================================

    def add_observer(self, handler: EventHandler) -> str:
        """
        Register an event handler.

        Returns:
            Observer id to pass to ``remove_observer``
        """
        observer_id = str(uuid.uuid4())
        with self._lock:
            self._observers[observer_id] = handler
        return observer_id

    def remove_observer(self, observer_id: str) -> bool:
        """
        Remove an event handler.

        Returns:
            True if the observer was registered
        """
        with self._lock:
            return self._observers.pop(observer_id, None) is not None
