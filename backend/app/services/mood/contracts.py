"""Contracts for keyword mood classification and canned response planning."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class MoodLabel(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


# Order matters only for diagnostics (matched keywords are reported in list order).
POSITIVE_KEYWORDS: tuple[str, ...] = (
    "happy",
    "good",
    "great",
    "excellent",
    "wonderful",
    "amazing",
    "fantastic",
    "joy",
    "excited",
    "grateful",
    "blessed",
    "love",
    "perfect",
    "awesome",
)

NEGATIVE_KEYWORDS: tuple[str, ...] = (
    "sad",
    "depressed",
    "anxious",
    "worried",
    "stressed",
    "angry",
    "frustrated",
    "upset",
    "down",
    "terrible",
    "awful",
    "hate",
    "mad",
    "furious",
)

NEUTRAL_KEYWORDS: tuple[str, ...] = (
    "okay",
    "fine",
    "alright",
    "normal",
    "usual",
    "same",
    "nothing",
    "regular",
)

KEYWORD_SETS: dict[MoodLabel, tuple[str, ...]] = {
    MoodLabel.POSITIVE: POSITIVE_KEYWORDS,
    MoodLabel.NEGATIVE: NEGATIVE_KEYWORDS,
    MoodLabel.NEUTRAL: NEUTRAL_KEYWORDS,
}


@dataclass(frozen=True)
class ResponsePlan:
    """Assistant reply plus the quick-reply chips shown under it."""

    reply: str
    suggestions: tuple[str, ...]
