"""Keyword mood classification and response planning.

Everything here is a pure function over the static tables in ``contracts``:
- ``classify_mood`` buckets a message into positive / negative / neutral
- ``plan_response`` maps a label to a canned reply + four quick replies
- ``welcome_message`` picks a greeting (random, injectable source)

Matching is plain substring containment on the lower-cased message, so
"sadness" counts for "sad" and "download" counts for "down". Each keyword
contributes at most 1 to its set's count.
"""

from __future__ import annotations

import random
from typing import Any, Protocol

from .contracts import KEYWORD_SETS, MoodLabel, ResponsePlan


class ChoiceSource(Protocol):
    def choice(self, seq: Any) -> Any: ...


WELCOME_TEMPLATES: tuple[str, ...] = (
    "Hello {name}! I'm MindfulBot, your personal wellness companion. How are you feeling today?",
    "Hi {name}! I'm here to listen and support you. What's on your mind right now?",
    "Welcome back, {name}! I'm glad you're here. How has your day been so far?",
    "Hello {name}! I'm MindfulBot, and I'm here to help you with whatever you're going through. How are you doing?",
)

_PLANS: dict[MoodLabel, ResponsePlan] = {
    MoodLabel.POSITIVE: ResponsePlan(
        reply=(
            "I'm so glad to hear you're feeling positive! That's wonderful. "
            "What's been contributing to these good feelings?"
        ),
        suggestions=(
            "Tell me more about what's going well",
            "How can you maintain this positive energy?",
            "What are you most grateful for today?",
            "Share a recent accomplishment",
        ),
    ),
    MoodLabel.NEGATIVE: ResponsePlan(
        reply=(
            "I hear that you're going through a difficult time right now. That takes courage to share. "
            "Would you like to talk about what's been weighing on you?"
        ),
        suggestions=(
            "I'd like to try a breathing exercise",
            "Can you help me process these feelings?",
            "What coping strategies have helped before?",
            "I need some encouragement right now",
        ),
    ),
    MoodLabel.NEUTRAL: ResponsePlan(
        reply=(
            "Thank you for sharing how you're feeling. Sometimes neutral is exactly where we need to be. "
            "What's been on your mind lately?"
        ),
        suggestions=(
            "Help me check in with my emotions",
            "What self-care do I need today?",
            "I'd like to set a small goal",
            "Tell me something uplifting",
        ),
    ),
}

DEFAULT_PLAN = ResponsePlan(
    reply="I'm here to listen to whatever you'd like to share. How can I support you today?",
    suggestions=(
        "I'm feeling anxious",
        "I need some motivation",
        "Help me relax",
        "I want to talk about my day",
    ),
)


def _normalize(message: str | None) -> str:
    return (message or "").lower()


def matched_keywords(message: str | None) -> dict[MoodLabel, list[str]]:
    """Keywords from each set found in *message*, in keyword-list order."""
    text = _normalize(message)
    return {label: [word for word in words if word in text] for label, words in KEYWORD_SETS.items()}


def count_keyword_matches(message: str | None) -> dict[MoodLabel, int]:
    return {label: len(words) for label, words in matched_keywords(message).items()}


def classify_mood(message: str | None) -> MoodLabel:
    """Return the label whose keyword count strictly beats both others, else NEUTRAL."""
    counts = count_keyword_matches(message)
    positive = counts[MoodLabel.POSITIVE]
    negative = counts[MoodLabel.NEGATIVE]
    neutral = counts[MoodLabel.NEUTRAL]

    if positive > negative and positive > neutral:
        return MoodLabel.POSITIVE
    if negative > positive and negative > neutral:
        return MoodLabel.NEGATIVE
    return MoodLabel.NEUTRAL


def plan_response(label: MoodLabel | str | None) -> ResponsePlan:
    """Canned reply and suggestions for *label*; unknown values get ``DEFAULT_PLAN``."""
    try:
        key = MoodLabel(label)
    except (TypeError, ValueError):
        return DEFAULT_PLAN
    return _PLANS.get(key, DEFAULT_PLAN)


def welcome_message(user_name: str, *, rng: ChoiceSource | None = None) -> str:
    """Greeting for *user_name*, chosen uniformly from ``WELCOME_TEMPLATES``.

    Not deterministic unless a seeded ``random.Random`` is passed as *rng*.
    The name is inserted verbatim; escaping is the renderer's job.
    """
    source = rng if rng is not None else random
    template = source.choice(WELCOME_TEMPLATES)
    return template.format(name=user_name)
