"""Per-user conversation context (mood, topics, session start, message count).

The chat flow loads the caller's context, folds the classified message into
it with ``record_message`` and saves it back. Concurrent writers for the same
user get last-write-wins; nothing stronger is promised.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Iterable, Protocol

from sqlalchemy.orm import Session

from app.models.conversation import ConversationContextRecord
from app.services.mood.contracts import MoodLabel

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOPICS = 20


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _as_aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes for timezone-aware columns.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _parse_mood(raw: Any) -> MoodLabel | None:
    if raw is None or raw == "":
        return None
    try:
        return MoodLabel(str(raw).lower().strip())
    except ValueError:
        return None


def _parse_datetime(raw: Any) -> datetime | None:
    if isinstance(raw, datetime):
        return _as_aware(raw)
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        return _as_aware(datetime.fromisoformat(raw.strip().replace("Z", "+00:00")))
    except ValueError:
        return None


def _merge_topics(existing: Iterable[Any], new: Iterable[Any] = ()) -> list[str]:
    """Lowercased, stripped topics; a repeat moves to the end."""
    merged: list[str] = []
    for topic in (*existing, *new):
        t = str(topic).strip().lower()
        if not t:
            continue
        if t in merged:
            merged.remove(t)
        merged.append(t)
    return merged


@dataclass(frozen=True)
class ConversationContext:
    mood: MoodLabel | None = None
    previous_topics: list[str] = field(default_factory=list)
    session_start: datetime = field(default_factory=_now_utc)
    message_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "mood": self.mood.value if self.mood else None,
            "previousTopics": list(self.previous_topics),
            "sessionStart": self.session_start.isoformat().replace("+00:00", "Z"),
            "messageCount": self.message_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ConversationContext":
        """Build from a stored blob; accepts camelCase or snake_case keys."""
        topics_raw = data.get("previousTopics", data.get("previous_topics")) or []
        if not isinstance(topics_raw, list):
            topics_raw = []
        start = _parse_datetime(data.get("sessionStart", data.get("session_start")))
        try:
            count = int(data.get("messageCount", data.get("message_count")) or 0)
        except (TypeError, ValueError):
            count = 0
        return cls(
            mood=_parse_mood(data.get("mood")),
            previous_topics=_merge_topics(topics_raw),
            session_start=start or _now_utc(),
            message_count=max(0, count),
        )


def record_message(
    context: ConversationContext | None,
    mood: MoodLabel,
    *,
    topics: Iterable[str] = (),
    now: datetime | None = None,
    max_topics: int = DEFAULT_MAX_TOPICS,
) -> ConversationContext:
    """Fold one classified message into *context* and return the new value."""
    if context is None:
        context = ConversationContext(session_start=now or _now_utc())

    merged = _merge_topics(context.previous_topics, topics)
    if max_topics > 0:
        merged = merged[-max_topics:]

    return replace(
        context,
        mood=mood,
        previous_topics=merged,
        message_count=context.message_count + 1,
    )


class ConversationContextRepository(Protocol):
    def load(self, user_id: str) -> ConversationContext | None: ...

    def save(self, user_id: str, context: ConversationContext) -> None: ...

    def clear(self, user_id: str) -> None: ...


class InMemoryContextRepository:
    def __init__(self) -> None:
        self._items: dict[str, ConversationContext] = {}
        self._lock = threading.Lock()

    def load(self, user_id: str) -> ConversationContext | None:
        with self._lock:
            return self._items.get(user_id)

    def save(self, user_id: str, context: ConversationContext) -> None:
        with self._lock:
            self._items[user_id] = context

    def clear(self, user_id: str) -> None:
        with self._lock:
            self._items.pop(user_id, None)

    def reset(self) -> None:
        with self._lock:
            self._items.clear()


class SqlContextRepository:
    """Stores one row per user; callers own the transaction (no commit here)."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def load(self, user_id: str) -> ConversationContext | None:
        row = self._db.get(ConversationContextRecord, user_id)
        if row is None:
            return None
        topics = row.previous_topics if isinstance(row.previous_topics, list) else []
        mood = _parse_mood(row.mood)
        if row.mood and mood is None:
            logger.warning("Conversation context for %s has unknown mood %r", user_id, row.mood)
        return ConversationContext(
            mood=mood,
            previous_topics=_merge_topics(topics),
            session_start=_as_aware(row.session_start),
            message_count=row.message_count or 0,
        )

    def save(self, user_id: str, context: ConversationContext) -> None:
        row = self._db.get(ConversationContextRecord, user_id)
        if row is None:
            row = ConversationContextRecord(user_id=user_id)
        row.mood = context.mood.value if context.mood else None
        row.previous_topics = list(context.previous_topics)
        row.session_start = context.session_start
        row.message_count = context.message_count
        self._db.add(row)
        self._db.flush()

    def clear(self, user_id: str) -> None:
        row = self._db.get(ConversationContextRecord, user_id)
        if row is not None:
            self._db.delete(row)
            self._db.flush()
