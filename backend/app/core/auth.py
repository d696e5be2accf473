import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Cookie, Depends, HTTPException, Response

from app.core.config import get_settings

logger = logging.getLogger(__name__)

USER_SESSION_COOKIE = "session"
ADMIN_SESSION_COOKIE = "admin_session"

KIND_USER = "user"
KIND_ADMIN = "admin"

_ALGORITHM = "HS256"


@dataclass
class CurrentUser:
    id: str
    name: str
    kind: str = KIND_USER


def issue_session_token(subject: str, name: str, *, kind: str, max_age_seconds: int) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "name": name,
        "kind": kind,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=max_age_seconds)).timestamp()),
    }
    token = jwt.encode(payload, settings.session_secret, algorithm=_ALGORITHM)
    if isinstance(token, bytes):
        token = token.decode("utf-8")
    return token


def decode_session_token(token: Optional[str], *, kind: str) -> Optional[CurrentUser]:
    """Return the session owner, or None for a missing/invalid/expired/wrong-kind token."""
    if not token:
        return None
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.session_secret, algorithms=[_ALGORITHM])
    except jwt.InvalidTokenError as exc:
        logger.debug("Session token rejected: %s", exc)
        return None

    if payload.get("kind") != kind:
        return None
    subject = payload.get("sub")
    if not subject:
        return None
    return CurrentUser(id=str(subject), name=str(payload.get("name") or ""), kind=kind)


def set_session_cookie(response: Response, *, key: str, token: str, max_age_seconds: int) -> None:
    settings = get_settings()
    response.set_cookie(
        key=key,
        value=token,
        max_age=max_age_seconds,
        httponly=True,
        secure=settings.session_cookie_secure or settings.is_production,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response, *, key: str) -> None:
    response.delete_cookie(key=key, path="/")


def get_optional_user(
    session: Optional[str] = Cookie(None, alias=USER_SESSION_COOKIE),
) -> Optional[CurrentUser]:
    return decode_session_token(session, kind=KIND_USER)


def get_current_user(user: Optional[CurrentUser] = Depends(get_optional_user)) -> CurrentUser:
    if user is None:
        raise HTTPException(401, "Login required")
    return user


def get_optional_admin(
    admin_session: Optional[str] = Cookie(None, alias=ADMIN_SESSION_COOKIE),
) -> Optional[CurrentUser]:
    return decode_session_token(admin_session, kind=KIND_ADMIN)


def check_admin_credentials(username: str, password: str) -> bool:
    settings = get_settings()
    expected = settings.admin_credentials.get(username)
    if expected is None:
        return False
    return secrets.compare_digest(password.encode(), expected.encode())
