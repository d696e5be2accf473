"""Mock provider: deterministic supportive replies for tests and fallback."""

from __future__ import annotations

import time

from .base import BaseProvider, ProviderResult

_KEYWORD_REPLIES: tuple[tuple[tuple[str, ...], str], ...] = (
    (
        ("anxious", "anxiety"),
        "I hear that you're feeling anxious, and that's completely understandable. Anxiety is a natural "
        "response, and you're not alone in feeling this way. Have you tried any breathing exercises or "
        "grounding techniques that help you feel more centered?",
    ),
    (
        ("sad", "depressed", "down"),
        "I'm sorry you're feeling down right now. Your feelings are valid, and it takes courage to reach out. "
        "Sometimes when we're feeling low, small self-care activities can help - like taking a warm bath, "
        "listening to music, or reaching out to a friend. What usually helps you feel a little better?",
    ),
    (
        ("stress", "overwhelmed"),
        "It sounds like you're dealing with a lot of stress right now. Feeling overwhelmed is your mind's way "
        "of telling you that you need some support. Try breaking things down into smaller, manageable steps. "
        "What's one small thing you could do today to reduce some of that pressure?",
    ),
    (
        ("sleep", "tired"),
        "Sleep challenges can really affect how we feel during the day. Good sleep hygiene can make a big "
        "difference - like keeping a consistent bedtime, limiting screen time before bed, and creating a "
        "calming bedtime routine. What's your current sleep routine like?",
    ),
)

DEFAULT_REPLY = (
    "Thank you for sharing that with me. I'm here to listen and support you. It's important to acknowledge "
    "your feelings and know that seeking support is a sign of strength. How are you feeling right now, and "
    "what would be most helpful for you today?"
)


def _last_user_turn(prompt: str) -> str:
    """Text after the last ``User:`` marker, or the whole prompt."""
    marker = "\nUser: "
    idx = prompt.rfind(marker)
    if idx == -1:
        return prompt
    return prompt[idx + len(marker) :]


def mock_reply(message: str) -> str:
    text = message.lower()
    for keywords, reply in _KEYWORD_REPLIES:
        if any(k in text for k in keywords):
            return reply
    return DEFAULT_REPLY


class MockProvider(BaseProvider):
    name = "mock"

    async def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        model: str = "",
        temperature: float = 0.3,
        max_tokens: int = 1024,
        timeout_seconds: float = 8.0,
    ) -> ProviderResult:
        t0 = time.monotonic()
        text = mock_reply(_last_user_turn(prompt))
        elapsed = (time.monotonic() - t0) * 1000
        return ProviderResult(
            raw_text=text,
            model=model or "mock-v1",
            provider=self.name,
            prompt_tokens=len(prompt.split()),
            completion_tokens=len(text.split()),
            latency_ms=round(elapsed, 2),
        )
