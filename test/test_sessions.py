"""
Tests for sessions and event broadcasting.

Tests session lifecycle, watch filtering, lazy cleanup of unreachable
sessions and the broadcaster's observer wiring.
"""

import gc
import logging

import pytest

from tweakkit.core.events import EventSource
from tweakkit.server.commands import format_event
from tweakkit.server.sessions import SessionBroadcaster, SessionTable


@pytest.fixture
def broadcaster(populated_registry, sessions):
    """Broadcaster attached to the populated registry."""
    broadcaster = SessionBroadcaster(populated_registry, sessions, format_event)
    broadcaster.attach()
    yield broadcaster
    broadcaster.detach()


# =============================================================================
# Session Table Tests
# =============================================================================

class TestSessionTable:
    """Test session lifecycle."""

    def test_open_creates_idle_session(self, sessions, sink):
        session_id = sessions.open(sink)
        session = sessions.get(session_id)

        assert session_id in sessions
        assert len(sessions) == 1
        assert session.is_watching is False
        assert session.watch_key is None
        assert session.sink is sink

    def test_ids_are_unique(self, sessions, sink):
        assert sessions.open(sink) != sessions.open(sink)

    def test_close(self, sessions, sink):
        session_id = sessions.open(sink)

        assert sessions.close(session_id) is True
        assert sessions.close(session_id) is False
        assert sessions.get(session_id) is None

    def test_watch_removed_session(self, sessions, sink):
        """Operations on removed ids are tolerated."""
        session_id = sessions.open(sink)
        sessions.close(session_id)

        assert sessions.watch(session_id, "x") is False
        assert sessions.unwatch(session_id) is False

    def test_session_filter(self, sessions, sink):
        session = sessions.get(sessions.open(sink))
        assert session.wants("x") is False

        session.is_watching = True
        assert session.wants("x") is True

        session.watch_key = "x"
        assert session.wants("x") is True
        assert session.wants("y") is False

    def test_clear(self, sessions, sink):
        sessions.open(sink)
        sessions.open(sink)
        sessions.clear()
        assert len(sessions) == 0


# =============================================================================
# Broadcast Tests
# =============================================================================

class TestBroadcast:
    """Test delivery of change events to sessions."""

    def test_filtered_watch(self, populated_registry, sessions, sink, broadcaster):
        """A session watching speed ignores other keys."""
        session_id = sessions.open(sink)
        sessions.watch(session_id, "speed")

        populated_registry.set("retries", "5", EventSource.WEB)
        assert sink.messages == []

        populated_registry.set("speed", "2.5", EventSource.WEB)
        assert sink.messages == [format_event(populated_registry.last_event)]

    def test_watch_all(self, populated_registry, sessions, sink, broadcaster):
        sessions.watch(sessions.open(sink))

        populated_registry.set("retries", "5", EventSource.WEB)
        populated_registry.set("speed", "2.5", EventSource.WEB)

        assert len(sink.messages) == 2
        assert sink.messages[0].endswith("retries: 3 -> 5 (web)")

    def test_idle_sessions_receive_nothing(self, populated_registry, sessions, sink, broadcaster):
        session_id = sessions.open(sink)
        sessions.watch(session_id)
        sessions.unwatch(session_id)

        populated_registry.set("speed", "2.5", EventSource.WEB)

        assert sink.messages == []

    def test_no_event_no_delivery(self, populated_registry, sessions, sink, broadcaster):
        sessions.watch(sessions.open(sink))

        populated_registry.set("speed", "1.0", EventSource.WEB)
        populated_registry.set("speed", "99", EventSource.WEB)

        assert sink.messages == []

    def test_broadcast_count(self, populated_registry, sessions, make_sink, broadcaster):
        watchers = [make_sink() for _ in range(3)]
        for watcher in watchers:
            sessions.watch(sessions.open(watcher))
        idle = make_sink()
        sessions.open(idle)

        populated_registry.set("speed", "2.5", EventSource.WEB)

        assert broadcaster.broadcast(populated_registry.last_event) == 3
        assert all(len(w.messages) == 2 for w in watchers)
        assert idle.messages == []

    def test_unreachable_session_is_dropped(self, populated_registry, sessions, make_sink, broadcaster, caplog):
        """Sessions whose sink was reclaimed are removed on the next broadcast."""
        transient = make_sink()
        session_id = sessions.open(transient)
        sessions.watch(session_id)
        del transient
        gc.collect()

        assert session_id in sessions
        with caplog.at_level(logging.WARNING, logger="tweakkit.server.sessions"):
            populated_registry.set("speed", "2.5", EventSource.WEB)

        assert session_id not in sessions
        assert "unreachable session" in caplog.text

    def test_failed_send_drops_session(self, populated_registry, sessions, sink, broken_sink, broadcaster):
        broken_id = sessions.open(broken_sink)
        sessions.watch(broken_id)
        healthy_id = sessions.open(sink)
        sessions.watch(healthy_id)

        populated_registry.set("speed", "2.5", EventSource.WEB)

        assert broken_id not in sessions
        assert healthy_id in sessions
        assert len(sink.messages) == 1

    def test_sink_may_call_back_into_sessions(self, populated_registry, sessions, broadcaster):
        """Sends happen outside the session lock."""
        table = sessions

        class ReentrantSink:
            def __init__(self):
                self.seen = []

            def send_text(self, text):
                self.seen.append(len(table))

        reentrant = ReentrantSink()
        sessions.watch(sessions.open(reentrant))

        populated_registry.set("speed", "2.5", EventSource.WEB)

        assert reentrant.seen == [1]


# =============================================================================
# Broadcaster Wiring Tests
# =============================================================================

class TestBroadcasterWiring:
    """Test attaching and detaching the broadcaster."""

    def test_attach_is_idempotent(self, populated_registry, sink):
        sessions = SessionTable()
        broadcaster = SessionBroadcaster(populated_registry, sessions, format_event)
        broadcaster.attach()
        broadcaster.attach()
        sessions.watch(sessions.open(sink))

        populated_registry.set("speed", "2.5", EventSource.WEB)

        assert len(sink.messages) == 1
        broadcaster.detach()

    def test_detach_stops_delivery(self, populated_registry, sink):
        sessions = SessionTable()
        broadcaster = SessionBroadcaster(populated_registry, sessions, format_event)
        broadcaster.attach()
        sessions.watch(sessions.open(sink))

        broadcaster.detach()
        populated_registry.set("speed", "2.5", EventSource.WEB)

        assert broadcaster.is_attached is False
        assert sink.messages == []


# =============================================================================
# Run Tests
# =============================================================================

if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
