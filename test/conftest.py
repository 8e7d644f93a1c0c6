"""
Shared fixtures and configuration for TweakKit tests.
"""

import pytest

from tweakkit.core.constraints import Constraints
from tweakkit.core.registry import TweakRegistry
from tweakkit.server.commands import CommandInterpreter
from tweakkit.server.sessions import SessionTable


# =============================================================================
# Registry Fixtures
# =============================================================================

@pytest.fixture
def registry():
    """Create an empty TweakRegistry."""
    return TweakRegistry()


@pytest.fixture
def populated_registry(registry):
    """Registry with one tweak of each built-in kind."""
    registry.tweak("ui.theme", "dark")
    registry.tweak("feature.enabled", False)
    registry.tweak("retries", 3, Constraints(min=0, max=10))
    registry.tweak("speed", 1.0, Constraints(min=0.0, max=10.0, step=0.5))
    return registry


@pytest.fixture
def recorded_events(registry):
    """List that receives every event recorded by ``registry``."""
    events = []
    observer_id = registry.add_observer(events.append)
    yield events
    registry.remove_observer(observer_id)


# =============================================================================
# Protocol Fixtures
# =============================================================================

class FakeSink:
    """Collects pushed messages in memory."""

    def __init__(self):
        self.messages = []

    def send_text(self, text):
        self.messages.append(text)


class BrokenSink:
    """Sink whose connection has gone away."""

    def send_text(self, text):
        raise ConnectionError("socket closed")


@pytest.fixture
def sink():
    return FakeSink()


@pytest.fixture
def broken_sink():
    return BrokenSink()


@pytest.fixture
def make_sink():
    """Factory for additional in-memory sinks."""
    return FakeSink


@pytest.fixture
def sessions():
    return SessionTable()


@pytest.fixture
def interpreter(populated_registry, sessions):
    """CommandInterpreter over the populated registry with a session table."""
    return CommandInterpreter(populated_registry, sessions)
