import logging

import pytest

from app.core.auth import KIND_ADMIN, KIND_USER, USER_SESSION_COOKIE, decode_session_token, issue_session_token


@pytest.mark.asyncio
async def test_signup_sets_session_cookie(client):
    resp = await client.post(
        "/api/v1/auth/signup",
        json={"name": "Sam", "email": "Sam@Example.com", "password": "s3cret-pass"},
    )
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "user": {"email": "sam@example.com", "name": "Sam"}}

    set_cookie = resp.headers["set-cookie"]
    assert set_cookie.startswith(f"{USER_SESSION_COOKIE}=")
    assert "HttpOnly" in set_cookie
    assert "samesite=lax" in set_cookie.lower()

    token = client.cookies.get(USER_SESSION_COOKIE)
    user = decode_session_token(token, kind=KIND_USER)
    assert user is not None and user.id == "sam@example.com"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {},
        {"name": "Sam", "email": "sam@example.com"},
        {"name": " ", "email": "sam@example.com", "password": "x"},
        {"name": "Sam", "email": "", "password": "x"},
    ],
)
async def test_signup_missing_fields(client, body):
    resp = await client.post("/api/v1/auth/signup", json=body)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Name, email, and password are required"}


@pytest.mark.asyncio
async def test_signup_duplicate(user_client):
    resp = await user_client.post(
        "/api/v1/auth/signup",
        json={"name": "Other", "email": "SAM@example.com", "password": "x"},
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "User already exists"}


@pytest.mark.asyncio
async def test_check_without_session(client):
    resp = await client.get("/api/v1/auth/check")
    assert resp.status_code == 200
    assert resp.json() == {"isAuthenticated": False, "user": None}


@pytest.mark.asyncio
async def test_check_with_session(user_client):
    resp = await user_client.get("/api/v1/auth/check")
    assert resp.json() == {"isAuthenticated": True, "user": {"email": "sam@example.com", "name": "Sam"}}


@pytest.mark.asyncio
async def test_check_rejects_tampered_and_admin_tokens(client):
    client.cookies.set(USER_SESSION_COOKIE, "not-a-jwt")
    resp = await client.get("/api/v1/auth/check")
    assert resp.json()["isAuthenticated"] is False

    admin_token = issue_session_token("admin", "admin", kind=KIND_ADMIN, max_age_seconds=60)
    client.cookies.set(USER_SESSION_COOKIE, admin_token)
    resp = await client.get("/api/v1/auth/check")
    assert resp.json()["isAuthenticated"] is False


@pytest.mark.asyncio
async def test_check_after_store_reset(user_client):
    from app.services.user_store import user_store

    user_store.reset()
    resp = await user_client.get("/api/v1/auth/check")
    assert resp.json()["isAuthenticated"] is False


@pytest.mark.asyncio
async def test_login_registers_unknown_email(client):
    resp = await client.post("/api/v1/auth/login", json={"email": "new.person@example.com", "password": "pw"})
    assert resp.status_code == 200
    assert resp.json()["user"] == {"email": "new.person@example.com", "name": "new.person"}
    assert client.cookies.get(USER_SESSION_COOKIE)


@pytest.mark.asyncio
async def test_login_existing_user(user_client):
    user_client.cookies.clear()
    resp = await user_client.post("/api/v1/auth/login", json={"email": "sam@example.com", "password": "s3cret-pass"})
    assert resp.status_code == 200
    assert resp.json()["user"]["name"] == "Sam"


@pytest.mark.asyncio
async def test_login_wrong_password(user_client):
    user_client.cookies.clear()
    resp = await user_client.post("/api/v1/auth/login", json={"email": "sam@example.com", "password": "nope"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid email or password"}
    assert user_client.cookies.get(USER_SESSION_COOKIE) is None


@pytest.mark.asyncio
async def test_login_missing_fields(client):
    resp = await client.post("/api/v1/auth/login", json={"email": "sam@example.com"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Email and password are required"}


@pytest.mark.asyncio
async def test_logout_clears_session(user_client):
    resp = await user_client.post("/api/v1/auth/logout")
    assert resp.status_code == 200
    assert resp.json()["success"] is True
    assert user_client.cookies.get(USER_SESSION_COOKIE) is None

    resp = await user_client.get("/api/v1/auth/check")
    assert resp.json()["isAuthenticated"] is False


@pytest.mark.asyncio
async def test_rejected_login_is_logged_as_warning(user_client, caplog):
    user_client.cookies.clear()
    with caplog.at_level(logging.WARNING, logger="app.api.v1.auth"):
        await user_client.post("/api/v1/auth/login", json={"email": "sam@example.com", "password": "nope"})
    assert any(r.levelno == logging.WARNING and "Login rejected" in r.getMessage() for r in caplog.records)
