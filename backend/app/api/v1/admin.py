"""Admin session endpoints and the flagged-conversation dashboard."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.core.auth import (
    ADMIN_SESSION_COOKIE,
    KIND_ADMIN,
    CurrentUser,
    check_admin_credentials,
    clear_session_cookie,
    get_optional_admin,
    issue_session_token,
    set_session_cookie,
)
from app.core.config import get_settings
from app.schemas.auth import AdminLoginRequest
from app.services.admin_dashboard import build_dashboard_view
from app.utils.rate_limit import get_client_ip

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/admin/login")
def admin_login(body: AdminLoginRequest, request: Request):
    username = (body.username or "").strip()
    password = body.password or ""
    if not username or not password:
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": "Username and password are required"},
        )

    if not check_admin_credentials(username, password):
        logger.warning("Admin login failed username=%r ip=%s", username, get_client_ip(request))
        return JSONResponse(
            status_code=401,
            content={"success": False, "message": "Invalid admin credentials"},
        )

    settings = get_settings()
    token = issue_session_token(
        username,
        username,
        kind=KIND_ADMIN,
        max_age_seconds=settings.admin_session_max_age_seconds,
    )
    response = JSONResponse(
        content={"success": True, "message": "Admin login successful", "admin": {"username": username}},
    )
    set_session_cookie(
        response,
        key=ADMIN_SESSION_COOKIE,
        token=token,
        max_age_seconds=settings.admin_session_max_age_seconds,
    )
    logger.info("Admin login username=%r", username)
    return response


@router.post("/admin/logout")
def admin_logout():
    response = JSONResponse(content={"success": True, "message": "Admin logged out successfully"})
    clear_session_cookie(response, key=ADMIN_SESSION_COOKIE)
    return response


@router.get("/admin/data")
def admin_data(admin: Optional[CurrentUser] = Depends(get_optional_admin)):
    if admin is None:
        return JSONResponse(
            status_code=401,
            content={"success": False, "message": "Unauthorized - Admin login required"},
        )
    return {"success": True, "data": build_dashboard_view()}
