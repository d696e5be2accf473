"""Admin dashboard read model.

Conversation data is a fixed demo sample; flagged words are computed from it
with the same crisis phrase list the review queue uses.
"""

from __future__ import annotations

from typing import Any

CRISIS_PHRASES: tuple[str, ...] = (
    "suicidal",
    "suicide",
    "kill myself",
    "end my life",
    "ending it all",
    "want to die",
    "self-harm",
    "can't take this",
    "hopeless",
    "depressed",
    "depression",
)

_DEMO_TOTAL_USERS = 1247
_DEMO_TOTAL_CONVERSATIONS = 3891

_DEMO_MESSAGES: tuple[dict[str, str], ...] = (
    {
        "user": "user123@email.com",
        "message": (
            "I've been feeling really depressed lately and sometimes think about ending it all. "
            "Nothing seems to matter anymore."
        ),
        "timestamp": "2024-01-15 14:30",
    },
    {
        "user": "anonymous_user_456",
        "message": "I can't take this anymore. I feel suicidal and don't know what to do. Everything is falling apart.",
        "timestamp": "2024-01-15 12:15",
    },
    {
        "user": "helpme789@gmail.com",
        "message": "I've been having thoughts of self-harm again. The depression is getting worse and I feel hopeless.",
        "timestamp": "2024-01-15 09:45",
    },
    {
        "user": "user1@email.com",
        "message": (
            "Thank you for listening. I'm feeling much better after our conversation about anxiety "
            "management techniques."
        ),
        "timestamp": "2024-01-15 16:20",
    },
    {
        "user": "student_user",
        "message": (
            "The breathing exercises you suggested really helped during my panic attack. "
            "I'm grateful for this support."
        ),
        "timestamp": "2024-01-15 15:45",
    },
    {
        "user": "working_parent",
        "message": "I'm struggling to balance work and family life. The stress is overwhelming sometimes.",
        "timestamp": "2024-01-15 14:10",
    },
    {
        "user": "college_student",
        "message": (
            "Finals week is approaching and I'm feeling really anxious about my performance. "
            "Any tips for managing study stress?"
        ),
        "timestamp": "2024-01-15 13:30",
    },
    {
        "user": "new_user_2024",
        "message": (
            "This is my first time using a mental health chatbot. "
            "I'm not sure where to start but I need someone to talk to."
        ),
        "timestamp": "2024-01-15 12:50",
    },
)

_DEMO_NOTIFICATIONS: tuple[dict[str, str], ...] = (
    {"type": "warning", "message": "High-risk message detected requiring immediate review", "timestamp": "2024-01-15 14:30"},
    {"type": "error", "message": "System alert: Multiple flagged messages from same user", "timestamp": "2024-01-15 12:15"},
    {"type": "info", "message": "Daily user engagement report is ready for review", "timestamp": "2024-01-15 09:00"},
    {"type": "warning", "message": "Unusual spike in crisis-related conversations detected", "timestamp": "2024-01-15 08:30"},
)


def find_crisis_phrases(text: str) -> list[str]:
    """Crisis phrases present in *text*, ordered by where they first appear."""
    lowered = (text or "").lower().replace("’", "'")
    hits = [(lowered.find(p), p) for p in CRISIS_PHRASES if p in lowered]
    return [p for _, p in sorted(hits)]


def build_dashboard_view() -> dict[str, Any]:
    flagged: list[dict[str, Any]] = []
    recent: list[dict[str, Any]] = []
    for item in _DEMO_MESSAGES:
        words = find_crisis_phrases(item["message"])
        if words:
            flagged.append({"id": str(len(flagged) + 1), **item, "flaggedWords": words})
        else:
            recent.append({"id": str(len(recent) + 1), **item})

    notifications = [{"id": str(i), **n} for i, n in enumerate(_DEMO_NOTIFICATIONS, start=1)]

    return {
        "totalUsers": _DEMO_TOTAL_USERS,
        "totalConversations": _DEMO_TOTAL_CONVERSATIONS,
        "flaggedMessages": flagged,
        "recentMessages": recent,
        "notifications": notifications,
    }
