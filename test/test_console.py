"""
Tests for the line console transport.
"""

import io

import pytest

from tweakkit.core.events import EventSource
from tweakkit.server.console import Console, StreamSink


def _run(registry, script: str) -> tuple:
    stdout = io.StringIO()
    console = Console(registry, stdin=io.StringIO(script), stdout=stdout, prompt="")
    executed = console.run()
    return executed, stdout.getvalue()


class TestConsole:
    """Test driving the command protocol over text streams."""

    def test_banner_and_commands(self, populated_registry):
        executed, output = _run(populated_registry, "set speed 2.5\nget speed\n")

        assert executed == 2
        assert output.startswith("TweakKit Server\nType 'help' for commands.\n")
        assert "Set speed to 2.5\n" in output
        assert "speed = 2.5 (default: 1.0) [float] {min=0.0, max=10.0, step=0.5}\n" in output

    def test_blank_lines_are_skipped(self, populated_registry):
        executed, _ = _run(populated_registry, "\n   \nhelp\n")
        assert executed == 1

    def test_exit_stops_reading(self, populated_registry):
        executed, output = _run(populated_registry, "set retries 4\nquit\nset retries 5\n")

        assert executed == 1
        assert populated_registry.get("retries").value == 4

    def test_changes_are_tagged_web(self, populated_registry):
        _run(populated_registry, "set retries 4\n")
        assert populated_registry.last_event.source == EventSource.WEB

    def test_watch_pushes_event_lines(self, populated_registry):
        _, output = _run(populated_registry, "watch speed\nset retries 4\nset speed 3.0\n")
        lines = output.splitlines()

        assert "Watching speed" in lines
        pushed = [line for line in lines if " -> " in line]
        assert len(pushed) == 1
        assert pushed[0].endswith("speed: 1.0 -> 3.0 (web)")
        assert lines.index(pushed[0]) < lines.index("Set speed to 3.0")

    def test_session_and_observer_are_released(self, populated_registry):
        stdout = io.StringIO()
        console = Console(populated_registry, stdin=io.StringIO("watch\n"), stdout=stdout, prompt="")
        console.run()
        written = stdout.getvalue()

        populated_registry.set_value("speed", 4.0)

        assert len(console.sessions) == 0
        assert stdout.getvalue() == written

    def test_prompt_is_written(self, populated_registry):
        stdout = io.StringIO()
        Console(populated_registry, stdin=io.StringIO("help\n"), stdout=stdout, prompt="tweak> ").run()
        assert stdout.getvalue().count("tweak> ") == 2


class TestStreamSink:
    """Test writing pushed messages to a stream."""

    def test_send_text(self):
        stream = io.StringIO()
        StreamSink(stream).send_text("hello")
        assert stream.getvalue() == "hello\n"

    def test_closed_stream_raises_connection_error(self):
        stream = io.StringIO()
        stream.close()
        with pytest.raises(ConnectionError):
            StreamSink(stream).send_text("hello")


# =============================================================================
# Run Tests
# =============================================================================

if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
