"""In-memory demo user store.

Accounts live for the process lifetime only. Passwords are hashed with
passlib before they are kept.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from passlib.context import CryptContext

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class UserExistsError(Exception):
    pass


@dataclass(frozen=True)
class StoredUser:
    email: str
    name: str
    password_hash: str


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def default_name_for(email: str) -> str:
    return normalize_email(email).split("@", 1)[0]


class InMemoryUserStore:
    def __init__(self) -> None:
        self._users: dict[str, StoredUser] = {}
        self._lock = threading.Lock()

    def get(self, email: str) -> StoredUser | None:
        with self._lock:
            return self._users.get(normalize_email(email))

    def create(self, *, email: str, name: str, password: str) -> StoredUser:
        key = normalize_email(email)
        user = StoredUser(email=key, name=name.strip(), password_hash=pwd_context.hash(password))
        with self._lock:
            if key in self._users:
                raise UserExistsError(key)
            self._users[key] = user
        logger.info("User created name_len=%d", len(user.name))
        return user

    def authenticate_or_register(self, *, email: str, password: str) -> StoredUser | None:
        """Demo login: unknown emails are registered on the spot; known ones must match."""
        existing = self.get(email)
        if existing is None:
            try:
                return self.create(email=email, name=default_name_for(email), password=password)
            except UserExistsError:
                existing = self.get(email)
                if existing is None:
                    return None
        if not pwd_context.verify(password, existing.password_hash):
            return None
        return existing

    def reset(self) -> None:
        with self._lock:
            self._users.clear()


user_store = InMemoryUserStore()
