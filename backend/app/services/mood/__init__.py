"""Keyword mood classification and response planning."""

from .contracts import MoodLabel, ResponsePlan
from .service import (
    DEFAULT_PLAN,
    WELCOME_TEMPLATES,
    classify_mood,
    count_keyword_matches,
    matched_keywords,
    plan_response,
    welcome_message,
)

__all__ = [
    "DEFAULT_PLAN",
    "WELCOME_TEMPLATES",
    "MoodLabel",
    "ResponsePlan",
    "classify_mood",
    "count_keyword_matches",
    "matched_keywords",
    "plan_response",
    "welcome_message",
]
