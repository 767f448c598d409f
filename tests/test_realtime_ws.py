"""End-to-end websocket and HTTP tests against the real app with stub backends."""

import asyncio
import time

import pytest
from fastapi.testclient import TestClient

from main import create_app
from services.violet.intent_classifier import IntentClassifier
from services.violet.response_generator import (
    ADMIN_ACTIVATION_MESSAGE,
    CUSTOMER_OFFLINE_MESSAGE,
    TECHNICAL_DIFFICULTIES_MESSAGE,
    ResponseGenerator,
)
from utils.settings import Settings

from conftest import FailingBackend, RecordingBackend


class SleepyBackend(RecordingBackend):
    async def generate(self, system_prompt, history):
        if "slow" in history[-1]["content"]:
            await asyncio.sleep(1.0)
            return "slow reply"
        return await super().generate(system_prompt, history)


@pytest.fixture
def app(tmp_path):
    return create_app(Settings(openai_api_key=None, database_dir=tmp_path / "db"))


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


def _new_session(client):
    resp = client.post("/api/chat/session")
    assert resp.status_code == 200
    return resp.json()["sessionId"]


def _join(ws, session_id):
    ws.send_json({"type": "join", "sessionId": session_id})
    return ws.receive_json(), ws.receive_json()


class TestSessionRoutes:
    def test_create_session_shape(self, client):
        data = client.post("/api/chat/session").json()
        assert data["sessionId"]
        assert data["isAdminMode"] is False

    def test_health_reports_backend(self, client):
        data = client.get("/health").json()
        assert data == {"ok": True, "db_initialized": True, "openai_available": False}

    def test_intent_without_backend_is_default(self, client):
        data = client.post("/api/chat/intent", json={"message": "where is my order"}).json()
        assert data == {"intent": "general_inquiry", "entities": [], "confidence": 0.5}

    def test_intent_with_backend(self, app, client):
        app.state.intent_classifier = IntentClassifier(RecordingBackend())
        data = client.post("/api/chat/intent", json={"message": "lipstick"}).json()
        assert data["intent"] == "product_search"

    def test_intent_requires_text(self, client):
        assert client.post("/api/chat/intent", json={"message": "  "}).status_code == 400


class TestJoin:
    def test_join_emits_joined_then_connected(self, client):
        session_id = _new_session(client)
        with client.websocket_connect("/ws") as ws:
            joined, connected = _join(ws, session_id)
        assert joined == {"type": "joined", "sessionId": session_id}
        assert connected == {"type": "connected"}

    def test_unknown_session_is_an_error_and_stays_pending(self, client):
        session_id = _new_session(client)
        with client.websocket_connect("/ws") as ws:
            ws.send_json({"type": "join", "sessionId": "abc"})
            assert ws.receive_json() == {"type": "error", "message": "Session not found"}
            joined, connected = _join(ws, session_id)
            assert joined["type"] == "joined"
            assert connected["type"] == "connected"

    def test_second_connection_is_rejected(self, client):
        session_id = _new_session(client)
        with client.websocket_connect("/ws") as first:
            _join(first, session_id)
            with client.websocket_connect("/ws") as second:
                second.send_json({"type": "join", "sessionId": session_id})
                assert second.receive_json()["type"] == "error"
            first.send_json({"type": "message", "content": "still here?"})
            assert first.receive_json()["type"] == "message"

    def test_closed_session_cannot_be_rejoined(self, client):
        session_id = _new_session(client)
        with client.websocket_connect("/ws") as ws:
            _join(ws, session_id)
        with client.websocket_connect("/ws") as ws:
            ws.send_json({"type": "join", "sessionId": session_id})
            assert ws.receive_json()["type"] == "error"


class TestMessages:
    def test_message_before_join_is_an_error(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.send_json({"type": "message", "content": "hi"})
            event = ws.receive_json()
        assert event["type"] == "error"

    def test_malformed_frames_keep_connection_open(self, client):
        session_id = _new_session(client)
        with client.websocket_connect("/ws") as ws:
            ws.send_text("not json")
            assert ws.receive_json()["type"] == "error"
            ws.send_json({"type": "dance"})
            assert ws.receive_json()["type"] == "error"
            ws.send_json({"type": "join"})
            assert ws.receive_json()["type"] == "error"
            joined, _ = _join(ws, session_id)
            assert joined["type"] == "joined"

    def test_hi_gets_one_assistant_message(self, client):
        session_id = _new_session(client)
        with client.websocket_connect("/ws") as ws:
            _join(ws, session_id)
            ws.send_json({"type": "message", "content": "hi"})
            event = ws.receive_json()
        assert event["type"] == "message"
        assert event["message"]["sender"] == "violet"
        assert event["message"]["content"] == CUSTOMER_OFFLINE_MESSAGE
        assert event["message"]["sessionId"] == session_id

    def test_trigger_code_activates_admin_mode(self, app, client):
        session_id = _new_session(client)
        with client.websocket_connect("/ws") as ws:
            _join(ws, session_id)
            ws.send_json({"type": "message", "content": "please use code shopglow-admin"})
            assert ws.receive_json() == {"type": "admin_mode_activated"}
            event = ws.receive_json()
            assert event["type"] == "message"
            assert event["message"]["content"] == ADMIN_ACTIVATION_MESSAGE
            assert app.state.session_store.get(session_id).mode == "admin"

    def test_admin_mode_is_not_reactivated(self, app, client):
        backend = RecordingBackend(reply="Sales are up 12%.")
        app.state.response_generator = ResponseGenerator(backend)
        session_id = _new_session(client)
        with client.websocket_connect("/ws") as ws:
            _join(ws, session_id)
            ws.send_json({"type": "message", "content": "shopglow-admin"})
            assert ws.receive_json()["type"] == "admin_mode_activated"
            ws.receive_json()
            ws.send_json({"type": "message", "content": "shopglow-admin report please"})
            event = ws.receive_json()
            assert event["type"] == "message"
            assert event["message"]["content"] == "Sales are up 12%."
            transcript = app.state.session_store.get(session_id).messages
            assert [m.sender for m in transcript] == ["user", "violet", "admin", "violet"]
        assert "ADMIN MODE" in backend.calls[0]["system_prompt"]

    def test_backend_failure_is_a_message_not_an_error(self, app, client):
        app.state.response_generator = ResponseGenerator(FailingBackend())
        session_id = _new_session(client)
        with client.websocket_connect("/ws") as ws:
            _join(ws, session_id)
            ws.send_json({"type": "message", "content": "hi"})
            event = ws.receive_json()
        assert event["type"] == "message"
        assert event["message"]["content"] == TECHNICAL_DIFFICULTIES_MESSAGE

    def test_replies_follow_message_order(self, app, client):
        backend = RecordingBackend()
        app.state.response_generator = ResponseGenerator(backend)
        session_id = _new_session(client)
        with client.websocket_connect("/ws") as ws:
            _join(ws, session_id)
            for text in ("one", "two", "three"):
                ws.send_json({"type": "message", "content": text})
            replies = [ws.receive_json() for _ in range(3)]
        assert all(r["type"] == "message" for r in replies)
        assert [call["history"][-1]["content"] for call in backend.calls] == ["one", "two", "three"]
        assert len(backend.calls[2]["history"]) == 5

    def test_empty_content_is_an_error(self, client):
        session_id = _new_session(client)
        with client.websocket_connect("/ws") as ws:
            _join(ws, session_id)
            ws.send_json({"type": "message", "content": "   "})
            assert ws.receive_json()["type"] == "error"

    def test_slow_session_does_not_delay_another(self, app, client):
        app.state.response_generator = ResponseGenerator(SleepyBackend())
        slow_id, fast_id = _new_session(client), _new_session(client)
        with client.websocket_connect("/ws") as slow_ws, client.websocket_connect("/ws") as fast_ws:
            _join(slow_ws, slow_id)
            _join(fast_ws, fast_id)
            slow_ws.send_json({"type": "message", "content": "slow question"})
            started = time.monotonic()
            fast_ws.send_json({"type": "message", "content": "hi"})
            fast_reply = fast_ws.receive_json()
            elapsed = time.monotonic() - started
            assert fast_reply["message"]["content"] == "Happy to help!"
            assert elapsed < 0.5
            assert slow_ws.receive_json()["message"]["content"] == "slow reply"
