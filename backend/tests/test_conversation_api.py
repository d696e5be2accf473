import pytest


@pytest.mark.asyncio
async def test_context_requires_login(client):
    for method in ("GET", "DELETE"):
        resp = await client.request(method, "/api/v1/conversation/context")
        assert resp.status_code == 401
    resp = await client.put("/api/v1/conversation/context", json={})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_context_missing_until_first_chat(user_client):
    resp = await user_client.get("/api/v1/conversation/context")
    assert resp.status_code == 404

    await user_client.post(
        "/api/v1/chat",
        json={"messages": [{"role": "user", "content": "I feel sad and worried"}]},
    )
    resp = await user_client.get("/api/v1/conversation/context")
    assert resp.status_code == 200
    data = resp.json()
    assert data["mood"] == "negative"
    assert data["messageCount"] == 1
    assert data["previousTopics"] == ["sad", "worried"]
    assert data["sessionStart"].endswith("Z")


@pytest.mark.asyncio
async def test_put_then_delete_context(user_client):
    payload = {
        "mood": "positive",
        "previousTopics": ["grateful"],
        "sessionStart": "2024-01-15T14:30:00Z",
        "messageCount": 7,
    }
    resp = await user_client.put("/api/v1/conversation/context", json=payload)
    assert resp.status_code == 200
    assert resp.json() == payload

    resp = await user_client.get("/api/v1/conversation/context")
    assert resp.json() == payload

    resp = await user_client.delete("/api/v1/conversation/context")
    assert resp.status_code == 204

    resp = await user_client.get("/api/v1/conversation/context")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_put_rejects_negative_count(user_client):
    resp = await user_client.put("/api/v1/conversation/context", json={"messageCount": -1})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_chat_after_put_does_not_duplicate_topic_case(user_client):
    resp = await user_client.put("/api/v1/conversation/context", json={"previousTopics": ["Grateful"]})
    assert resp.json()["previousTopics"] == ["grateful"]

    await user_client.post("/api/v1/chat", json={"messages": [{"role": "user", "content": "so grateful"}]})

    data = (await user_client.get("/api/v1/conversation/context")).json()
    assert data["previousTopics"] == ["grateful"]
    assert data["messageCount"] == 1
