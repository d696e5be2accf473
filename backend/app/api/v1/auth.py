"""User signup / login / session check for the demo account flow."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.core.auth import (
    KIND_USER,
    USER_SESSION_COOKIE,
    CurrentUser,
    clear_session_cookie,
    get_optional_user,
    issue_session_token,
    set_session_cookie,
)
from app.core.config import get_settings
from app.schemas.auth import AuthCheckResponse, LoginRequest, SignupRequest, UserOut
from app.services.user_store import StoredUser, UserExistsError, user_store

logger = logging.getLogger(__name__)

router = APIRouter()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _session_response(user: StoredUser) -> JSONResponse:
    settings = get_settings()
    response = JSONResponse(content={"success": True, "user": {"email": user.email, "name": user.name}})
    token = issue_session_token(
        user.email,
        user.name,
        kind=KIND_USER,
        max_age_seconds=settings.session_max_age_seconds,
    )
    set_session_cookie(
        response,
        key=USER_SESSION_COOKIE,
        token=token,
        max_age_seconds=settings.session_max_age_seconds,
    )
    return response


@router.post("/auth/signup")
def signup(body: SignupRequest):
    name = (body.name or "").strip()
    email = (body.email or "").strip()
    if not name or not email or not body.password:
        return _error(400, "Name, email, and password are required")

    try:
        user = user_store.create(email=email, name=name, password=body.password)
    except UserExistsError:
        return _error(400, "User already exists")

    return _session_response(user)


@router.post("/auth/login")
def login(body: LoginRequest):
    email = (body.email or "").strip()
    if not email or not body.password:
        return _error(400, "Email and password are required")

    user = user_store.authenticate_or_register(email=email, password=body.password)
    if user is None:
        logger.warning("Login rejected: password mismatch")
        return _error(401, "Invalid email or password")

    return _session_response(user)


@router.get("/auth/check", response_model=AuthCheckResponse)
def check(user: Optional[CurrentUser] = Depends(get_optional_user)):
    if user is None:
        return AuthCheckResponse(isAuthenticated=False)
    stored = user_store.get(user.id)
    if stored is None:
        # Token outlived the in-memory store (process restart).
        return AuthCheckResponse(isAuthenticated=False)
    return AuthCheckResponse(isAuthenticated=True, user=UserOut(email=stored.email, name=stored.name))


@router.post("/auth/logout")
def logout():
    response = JSONResponse(content={"success": True, "message": "Logged out successfully"})
    clear_session_cookie(response, key=USER_SESSION_COOKIE)
    return response
