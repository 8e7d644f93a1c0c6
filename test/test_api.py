"""
API Tests for TweakKit.

Tests the HTTP endpoints and the command WebSocket.
Uses pytest with FastAPI TestClient.
"""

import pytest
from fastapi.testclient import TestClient

from tweakkit.api.main import create_app
from tweakkit.config.settings import Settings
from tweakkit.core.constraints import Constraints
from tweakkit.core.events import EventSource


BANNER = "TweakKit Server\nType 'help' for commands.\n"


@pytest.fixture
def app(populated_registry):
    """App serving the populated registry."""
    return create_app(registry=populated_registry, settings=Settings())


@pytest.fixture
def client(app):
    """Create test client (runs the app lifespan)."""
    with TestClient(app) as client:
        yield client


# =============================================================================
# Console & Health Endpoints
# =============================================================================

class TestConsoleEndpoints:
    """Test the HTML console and health check."""

    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.text == "OK"
        assert response.headers["content-type"].startswith("text/plain")

    def test_console_page(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "TweakKit Console" in response.text
        assert "/ws" in response.text


# =============================================================================
# Tweak Endpoints
# =============================================================================

class TestTweaksAPI:
    """Test /api endpoints."""

    def test_list_tweaks(self, client):
        response = client.get("/api/tweaks")
        assert response.status_code == 200
        data = response.json()

        assert [t["key"] for t in data] == ["feature.enabled", "retries", "speed", "ui.theme"]
        speed = data[2]
        assert speed == {
            "key": "speed",
            "type": "float",
            "default": "1.0",
            "current": "1.0",
            "constraints": {"min": "0.0", "max": "10.0", "step": "0.5"},
        }

    def test_absent_constraints_are_omitted(self, client):
        data = {t["key"]: t for t in client.get("/api/tweaks").json()}

        assert "constraints" not in data["ui.theme"]
        assert data["retries"]["constraints"] == {"min": "0", "max": "10"}

    def test_list_tweaks_filter(self, client):
        data = client.get("/api/tweaks", params={"filter": "SPE"}).json()
        assert [t["key"] for t in data] == ["speed"]

    def test_list_reflects_current_value(self, client, populated_registry):
        populated_registry.set("feature.enabled", "on", EventSource.UI)
        data = {t["key"]: t for t in client.get("/api/tweaks").json()}
        assert data["feature.enabled"]["current"] == "true"
        assert data["feature.enabled"]["default"] == "false"

    def test_history(self, client, populated_registry):
        populated_registry.set("speed", "2.0", EventSource.CODE)
        populated_registry.set("speed", "2.5", EventSource.UI)

        data = client.get("/api/history", params={"limit": 1}).json()

        assert data["capacity"] == 100
        assert len(data["events"]) == 1
        event = data["events"][0]
        assert event["key"] == "speed"
        assert event["old_value"] == "2.0"
        assert event["new_value"] == "2.5"
        assert event["source"] == "ui"
        assert event["timestamp"].endswith("Z")

    def test_history_rejects_zero_limit(self, client):
        response = client.get("/api/history", params={"limit": 0})
        assert response.status_code == 422


# =============================================================================
# WebSocket Tests
# =============================================================================

class TestConsoleSocket:
    """Test the command protocol over /ws."""

    def test_banner_and_command(self, client):
        with client.websocket_connect("/ws") as ws:
            assert ws.receive_text() == BANNER

            ws.send_text("get speed")
            assert ws.receive_text() == "speed = 1.0 (default: 1.0) [float] {min=0.0, max=10.0, step=0.5}"

    def test_multi_line_response_is_one_message(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.receive_text()
            ws.send_text("list")
            assert len(ws.receive_text().split("\n")) == 4

    def test_set_and_error(self, client, populated_registry):
        with client.websocket_connect("/ws") as ws:
            ws.receive_text()

            ws.send_text("set speed 2.5")
            assert ws.receive_text() == "Set speed to 2.5"
            ws.send_text("set speed 10.3")
            assert ws.receive_text() == "Error: Value out of range (min: 0.0 max: 10.0 )"

        assert populated_registry.get("speed").value == 2.5
        assert populated_registry.last_event.source == EventSource.WEB

    def test_bad_numbers_keep_connection_open(self, client, populated_registry):
        populated_registry.tweak("gain", 1.0, Constraints(step=0.5))
        populated_registry.tweak("n", 1, Constraints(step=1))

        with client.websocket_connect("/ws") as ws:
            ws.receive_text()

            ws.send_text("set gain inf")
            assert ws.receive_text() == "Error: Invalid value: inf"
            ws.send_text("set n " + "9" * 400)
            assert ws.receive_text() == "Set n to " + "9" * 400
            ws.send_text("get gain")
            assert ws.receive_text() == "gain = 1.0 (default: 1.0) [float] {step=0.5}"

    def test_blank_messages_get_no_reply(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.receive_text()
            ws.send_text("   ")
            ws.send_text("last")
            assert ws.receive_text() == "No tweaks yet."

    def test_watch_filters_other_connections(self, client):
        """A watcher only receives events for its key."""
        with client.websocket_connect("/ws") as watcher, client.websocket_connect("/ws") as actor:
            watcher.receive_text()
            actor.receive_text()

            watcher.send_text("watch speed")
            assert watcher.receive_text() == "Watching speed"

            actor.send_text("set retries 5")
            assert actor.receive_text() == "Set retries to 5"
            actor.send_text("set speed 2.5")
            assert actor.receive_text() == "Set speed to 2.5"

            assert watcher.receive_text().endswith("speed: 1.0 -> 2.5 (web)")

    def test_event_precedes_own_response(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.receive_text()
            ws.send_text("watch")
            assert ws.receive_text() == "Watching all tweaks"

            ws.send_text("set retries 7")
            assert ws.receive_text().endswith("retries: 3 -> 7 (web)")
            assert ws.receive_text() == "Set retries to 7"

    def test_changes_from_application_code_are_pushed(self, client, populated_registry):
        with client.websocket_connect("/ws") as ws:
            ws.receive_text()
            ws.send_text("watch ui.theme")
            ws.receive_text()

            populated_registry.set_value("ui.theme", "light")

            assert ws.receive_text().endswith("ui.theme: dark -> light (code)")

    def test_lifespan_wires_broadcaster(self, app):
        with TestClient(app) as client:
            assert app.state.broadcaster.is_attached
            with client.websocket_connect("/ws") as ws:
                ws.receive_text()

        assert not app.state.broadcaster.is_attached
        assert len(app.state.sessions) == 0


# =============================================================================
# Run Tests
# =============================================================================

if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
