import pytest


@pytest.mark.asyncio
async def test_api_responses_carry_strict_csp(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.headers["content-security-policy"].startswith("default-src 'none'")
    assert resp.headers["x-frame-options"] == "DENY"
    assert resp.headers["x-content-type-options"] == "nosniff"


@pytest.mark.asyncio
async def test_swagger_page_is_not_blocked_by_csp(client):
    resp = await client.get("/docs")
    assert resp.status_code == 200
    assert "content-security-policy" not in resp.headers
    assert resp.headers["x-content-type-options"] == "nosniff"
