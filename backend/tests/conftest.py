import os

import httpx
import pytest
import pytest_asyncio

from app.core.config import get_settings

BASE_URL = os.getenv("BASE_URL", "http://127.0.0.1:8000")


@pytest.fixture(autouse=True)
def _reset_settings_cache(monkeypatch):
    # Tests mutate env vars; never leak a cached Settings instance across tests.
    monkeypatch.setenv("CHAT_STREAM_DELAY_MS", "0")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _reset_process_state():
    from app.core.dependencies import memory_context_repository
    from app.services.user_store import user_store
    from app.utils.rate_limit import chat_limiter

    user_store.reset()
    memory_context_repository.reset()
    chat_limiter.reset()
    yield
    user_store.reset()
    memory_context_repository.reset()
    chat_limiter.reset()


async def _make_asgi_client(headers: dict | None = None) -> httpx.AsyncClient:
    """Create an in-process ASGI client."""
    from app.main import app

    # Importing the app caches Settings; let per-test env overrides take effect.
    get_settings.cache_clear()

    transport = httpx.ASGITransport(app=app)
    return httpx.AsyncClient(transport=transport, base_url="http://test", headers=headers or {})


@pytest_asyncio.fixture
async def client():
    # Set USE_LIVE_SERVER=true to run against a running server at BASE_URL.
    use_live_server = os.getenv("USE_LIVE_SERVER", "").strip().lower() in {"1", "true", "yes"}
    if use_live_server:
        async with httpx.AsyncClient(base_url=BASE_URL) as c:
            yield c
        return

    c = await _make_asgi_client()
    async with c:
        yield c


@pytest_asyncio.fixture
async def user_client(client):
    """Client holding a user session cookie for ``sam@example.com``."""
    resp = await client.post(
        "/api/v1/auth/signup",
        json={"name": "Sam", "email": "sam@example.com", "password": "s3cret-pass"},
    )
    assert resp.status_code == 200
    yield client


@pytest_asyncio.fixture
async def admin_client(client):
    resp = await client.post("/api/v1/admin/login", json={"username": "admin", "password": "admin123"})
    assert resp.status_code == 200
    yield client
