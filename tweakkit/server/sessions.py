"""
Session management for TweakKit transports.

Each live connection owns one Session, keyed by an id issued at connect
time and removed at disconnect. The broadcaster pushes change events to
watching sessions:
- snapshot deliverable sessions under the table lock
- release the lock
- send to each sink
"""

import logging
import threading
import uuid
import weakref
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Protocol, Tuple

from tweakkit.core.events import TweakEvent
from tweakkit.core.registry import TweakRegistry

logger = logging.getLogger(__name__)


class SessionSink(Protocol):
    """Transport-side endpoint that can receive a pushed text message."""

    def send_text(self, text: str) -> None:
        ...


@dataclass
class Session:
    """
    Watch state for one connection.

    The sink is held weakly; once the transport drops its connection object
    the session is unreachable and is removed on the next broadcast.
    """
    session_id: str
    sink_ref: Callable[[], Optional[SessionSink]] = field(repr=False)
    is_watching: bool = False
    watch_key: Optional[str] = None

    @property
    def sink(self) -> Optional[SessionSink]:
        return self.sink_ref()

    def wants(self, key: str) -> bool:
        """Whether an event for ``key`` should be delivered."""
        if not self.is_watching:
            return False
        return self.watch_key is None or self.watch_key == key


class SessionTable:
    """Thread-safe table of live sessions."""

    def __init__(self):
        self._lock = threading.Lock()
        self._sessions: Dict[str, Session] = {}

    def open(self, sink: SessionSink) -> str:
        """
        Create a session for a new connection.

        Args:
            sink: Connection endpoint for pushed messages (held weakly)

        Returns:
            Session id
        """
        session_id = uuid.uuid4().hex
        session = Session(session_id=session_id, sink_ref=weakref.ref(sink))
        with self._lock:
            self._sessions[session_id] = session
        logger.info(f"Session opened: {session_id}")
        return session_id

    def close(self, session_id: str) -> bool:
        """Remove a session; unknown ids are ignored."""
        with self._lock:
            removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.info(f"Session closed: {session_id}")
        return removed

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def get(self, session_id: str) -> Optional[Session]:
        with self._lock:
            return self._sessions.get(session_id)

    def watch(self, session_id: str, key: Optional[str] = None) -> bool:
        """
        Subscribe a session to change events.

        Args:
            session_id: Session id
            key: Only deliver events for this key (all keys if None)

        Returns:
            False if the session no longer exists
        """
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return False
            session.is_watching = True
            session.watch_key = key
            return True

    def unwatch(self, session_id: str) -> bool:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return False
            session.is_watching = False
            session.watch_key = None
            return True

    def recipients(self, key: str) -> List[Tuple[str, SessionSink]]:
        """
        Snapshot the sinks that should receive an event for ``key``.

        Sessions whose sink has been reclaimed are dropped.
        """
        targets: List[Tuple[str, SessionSink]] = []
        with self._lock:
            for session_id, session in list(self._sessions.items()):
                sink = session.sink
                if sink is None:
                    del self._sessions[session_id]
                    logger.warning(f"Dropped unreachable session: {session_id}")
                    continue
                if session.wants(key):
                    targets.append((session_id, sink))
        return targets

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions


class SessionBroadcaster:
    """
    Registry observer that pushes formatted event lines to watching sessions.
    """

    def __init__(
        self,
        registry: TweakRegistry,
        sessions: SessionTable,
        formatter: Callable[[TweakEvent], str]
    ):
        self.registry = registry
        self.sessions = sessions
        self._formatter = formatter
        self._observer_id: Optional[str] = None

    @property
    def is_attached(self) -> bool:
        return self._observer_id is not None

    def attach(self) -> None:
        """Start observing the registry (idempotent)."""
        if self._observer_id is None:
            self._observer_id = self.registry.add_observer(self.broadcast)

    def detach(self) -> None:
        if self._observer_id is not None:
            self.registry.remove_observer(self._observer_id)
            self._observer_id = None

    def broadcast(self, event: TweakEvent) -> int:
        """
        Deliver one event to every interested session.

        Returns:
            Number of sessions the line was sent to
        """
        line = self._formatter(event)
        delivered = 0
        for session_id, sink in self.sessions.recipients(event.key):
            try:
                sink.send_text(line)
            except ConnectionError as e:
                logger.warning(f"Dropping session {session_id} after failed send: {e}")
                self.sessions.close(session_id)
                continue
            delivered += 1
        return delivered
