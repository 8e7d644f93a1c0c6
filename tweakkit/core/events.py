"""
Change events and the bounded change history.
"""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Deque, Dict, Iterator, List


DEFAULT_HISTORY_CAPACITY = 100


class EventSource(str, Enum):
    """Which actor made a change."""
    CODE = "code"
    UI = "ui"
    WEB = "web"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TweakEvent:
    """One observed change to a tweak's display value."""
    key: str
    old_value: str
    new_value: str
    source: EventSource
    timestamp: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for structured transports."""
        return {
            "key": self.key,
            "old_value": self.old_value,
            "new_value": self.new_value,
            "source": self.source.value,
            "timestamp": format_timestamp(self.timestamp),
        }


def format_timestamp(timestamp: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a ``Z`` suffix."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    utc = timestamp.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class TweakHistory:
    """
    Insertion-ordered log of events, bounded to ``capacity``.

    The oldest events are evicted first. Not thread-safe on its own; the
    registry guards it with its lock.
    """

    def __init__(self, capacity: int = DEFAULT_HISTORY_CAPACITY):
        if capacity < 1:
            raise ValueError(f"History capacity must be at least 1, got {capacity}")
        self._events: Deque[TweakEvent] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._events.maxlen

    def append(self, event: TweakEvent) -> None:
        self._events.append(event)

    def tail(self, count: int) -> List[TweakEvent]:
        """Last ``count`` events, oldest first."""
        if count <= 0:
            return []
        if count >= len(self._events):
            return list(self._events)
        return list(self._events)[-count:]

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[TweakEvent]:
        return iter(list(self._events))
