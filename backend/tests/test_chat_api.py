from unittest.mock import AsyncMock, patch

import pytest

from app.core.dependencies import memory_context_repository
from app.services.ai.chat.service import FALLBACK_RESPONSE
from app.services.mood import MoodLabel


def _chat_body(*contents):
    return {"messages": [{"role": "user", "content": c} for c in contents]}


@pytest.mark.asyncio
async def test_chat_requires_messages(client):
    resp = await client.post("/api/v1/chat", json={"messages": []})
    assert resp.status_code == 400
    assert resp.text == "No messages provided"


@pytest.mark.asyncio
async def test_chat_rejects_unknown_role(client):
    resp = await client.post("/api/v1/chat", json={"messages": [{"role": "system", "content": "x"}]})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_chat_streams_mock_reply_with_mood_header(client, monkeypatch):
    monkeypatch.setenv("AI_CHAT_PROVIDER", "mock")
    resp = await client.post("/api/v1/chat", json=_chat_body("I am so anxious and stressed about work"))
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    assert resp.headers["x-mood"] == "negative"
    assert resp.headers["cache-control"] == "no-store"
    assert resp.text.startswith("I hear that you're feeling anxious")


@pytest.mark.asyncio
async def test_chat_anonymous_does_not_store_context(client):
    resp = await client.post("/api/v1/chat", json=_chat_body("I feel happy"))
    assert resp.status_code == 200
    assert resp.headers["x-mood"] == "positive"
    assert memory_context_repository.load("sam@example.com") is None


@pytest.mark.asyncio
async def test_chat_records_context_for_signed_in_user(user_client):
    await user_client.post("/api/v1/chat", json=_chat_body("I am so anxious and stressed about work"))
    await user_client.post("/api/v1/chat", json=_chat_body("a bit better, feeling okay"))

    ctx = memory_context_repository.load("sam@example.com")
    assert ctx is not None
    assert ctx.message_count == 2
    assert ctx.mood == MoodLabel.NEUTRAL
    assert set(ctx.previous_topics) >= {"anxious", "stressed", "okay"}


@pytest.mark.asyncio
async def test_chat_provider_failure_returns_fallback(client):
    failing = AsyncMock(side_effect=RuntimeError("upstream timeout"))
    with patch("app.api.v1.chat.generate_reply", failing):
        resp = await client.post("/api/v1/chat", json=_chat_body("hello"))
    assert resp.status_code == 500
    assert resp.text == FALLBACK_RESPONSE


@pytest.mark.asyncio
async def test_chat_truncates_history(client, monkeypatch):
    monkeypatch.setenv("CHAT_MAX_MESSAGES", "2")
    seen = {}

    async def fake_generate(messages):
        seen["count"] = len(messages)
        from app.services.ai.chat.service import ChatReply

        return ChatReply(text="ok", provider="mock", model="", latency_ms=0)

    with patch("app.api.v1.chat.generate_reply", fake_generate):
        resp = await client.post("/api/v1/chat", json=_chat_body("one", "two", "three", "four"))
    assert resp.status_code == 200
    assert resp.text == "ok"
    assert seen["count"] == 2


@pytest.mark.asyncio
async def test_chat_rate_limited(client, monkeypatch):
    monkeypatch.setenv("RATE_LIMIT_CHAT_PER_MIN", "1")
    first = await client.post("/api/v1/chat", json=_chat_body("hi"))
    second = await client.post("/api/v1/chat", json=_chat_body("hi"))
    assert first.status_code == 200
    assert second.status_code == 429


@pytest.mark.asyncio
async def test_mood_endpoint_returns_plan_and_matches(client):
    resp = await client.post("/api/v1/chat/mood", json={"message": "I feel happy and grateful today"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["mood"] == "positive"
    assert data["reply"].startswith("I'm so glad to hear you're feeling positive!")
    assert len(data["suggestions"]) == 4
    assert data["counts"] == {"positive": 2, "negative": 0, "neutral": 0}
    assert sorted(data["matched"]["positive"]) == ["grateful", "happy"]


@pytest.mark.asyncio
async def test_mood_endpoint_empty_message_is_neutral(client):
    resp = await client.post("/api/v1/chat/mood", json={})
    assert resp.status_code == 200
    assert resp.json()["mood"] == "neutral"


@pytest.mark.asyncio
async def test_welcome_uses_query_name(client):
    resp = await client.get("/api/v1/chat/welcome", params={"name": "Ana"})
    assert resp.status_code == 200
    assert "Ana" in resp.json()["message"]


@pytest.mark.asyncio
async def test_welcome_defaults_to_session_name_then_friend(user_client):
    resp = await user_client.get("/api/v1/chat/welcome")
    assert "Sam" in resp.json()["message"]

    await user_client.post("/api/v1/auth/logout")
    user_client.cookies.clear()
    resp = await user_client.get("/api/v1/chat/welcome")
    assert "friend" in resp.json()["message"]
