"""API tests for the chat endpoint."""

import pytest
from starlette.testclient import TestClient

from app import main
from app.game.prompts import ALREADY_WON_MESSAGE
from app.services.turn_service import TurnService


@pytest.fixture()
def client(monkeypatch: pytest.MonkeyPatch, service: TurnService, store):
    monkeypatch.setattr(main, "turn_service", service)
    monkeypatch.setattr(main, "session_store", store)
    with TestClient(main.app, raise_server_exceptions=False) as test_client:
        yield test_client


def _chat(client: TestClient, messages, headers=None):
    return client.post("/api/chat", json={"messages": messages}, headers=headers or {})


class TestMalformedInput:
    def test_empty_messages_rejected(self, client: TestClient):
        response = _chat(client, [])
        assert response.status_code == 400

    def test_missing_messages_rejected(self, client: TestClient):
        response = client.post("/api/chat", json={"question": "is it alive"})
        assert response.status_code == 400

    def test_bad_role_rejected(self, client: TestClient):
        response = _chat(client, [{"role": "wizard", "content": "hi"}])
        assert response.status_code == 400

    def test_non_json_rejected(self, client: TestClient):
        response = client.post("/api/chat", content=b"not json", headers={"Content-Type": "application/json"})
        assert response.status_code == 400


class TestChat:
    def test_streams_model_answer_and_issues_session(self, client: TestClient):
        response = _chat(client, [{"role": "user", "content": "is it alive"}])

        assert response.status_code == 200
        assert response.text == "Yes (19 questions left)"
        assert response.headers["content-type"].startswith("text/plain")
        assert response.headers["X-Session-ID"]

    def test_session_header_is_honoured(self, client: TestClient, store):
        headers = {"X-Session-ID": "front-end-token"}
        _chat(client, [{"role": "user", "content": "is it alive"}], headers=headers)
        response = _chat(client, [{"role": "user", "content": "is it big"}], headers=headers)

        assert response.headers["X-Session-ID"] == "front-end-token"
        assert store.get("front-end-token").questions_asked == 2

    def test_session_id_in_body(self, client: TestClient, store):
        response = client.post(
            "/api/chat",
            json={"messages": [{"role": "user", "content": "is it alive"}], "sessionId": "body-token"},
        )

        assert response.headers["X-Session-ID"] == "body-token"
        assert store.get("body-token").questions_asked == 1

    def test_blank_session_header_gets_fresh_session(self, client: TestClient):
        first = _chat(client, [{"role": "user", "content": "is it alive"}], headers={"X-Session-ID": "   "})
        second = _chat(client, [{"role": "user", "content": "is it alive"}], headers={"X-Session-ID": "   "})

        assert first.headers["X-Session-ID"].strip()
        assert first.headers["X-Session-ID"] != second.headers["X-Session-ID"]

    def test_sessions_do_not_share_a_game(self, client: TestClient, store):
        _chat(client, [{"role": "user", "content": "is it alive"}], headers={"X-Session-ID": "alice"})
        _chat(client, [{"role": "user", "content": "is it alive"}], headers={"X-Session-ID": "bob"})

        assert store.get("alice").questions_asked == 1
        assert store.get("bob").questions_asked == 1

    def test_fixed_reply_is_plain_text(self, client: TestClient, store):
        headers = {"X-Session-ID": "winner"}
        _chat(client, [{"role": "user", "content": "is it alive"}], headers=headers)
        client.portal.call(store.mark_won, "winner")

        response = _chat(client, [{"role": "user", "content": "again?"}], headers=headers)

        assert response.status_code == 200
        assert response.text == ALREADY_WON_MESSAGE


def test_health(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert "minting" in response.json()["services"]
