"""Support chat: prompt assembly, provider call, word-by-word streaming.

The provider reply is generated in full first and then re-emitted one word
at a time with a small delay, so the client sees a typing effect regardless
of whether the provider itself streams.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass

from app.schemas.chat import ChatMessage, ChatRole
from app.services.ai.common import router as ai_router

logger = logging.getLogger(__name__)

CHAT_SYSTEM_PROMPT = """You are a compassionate AI mental health support assistant. You provide empathetic, supportive responses while being careful not to give medical advice. Your role is to:

- Listen actively and validate feelings
- Provide emotional support and encouragement
- Suggest healthy coping strategies and resources
- Encourage professional help when appropriate
- Always be warm, non-judgmental, and supportive

Important guidelines:
- Never diagnose or provide medical advice
- Always encourage seeking professional help for serious concerns
- Be empathetic and understanding
- Provide practical, evidence-based coping strategies
- Keep responses conversational and supportive (not too clinical)

Please respond to the user's message with care and compassion."""

FALLBACK_RESPONSE = (
    "I'm here to support you, but I'm having a technical issue connecting right now. "
    "Your feelings are valid and important. Please try again in a moment, or if you're in crisis, "
    "please reach out to a mental health professional or crisis hotline."
)


@dataclass(frozen=True)
class ChatReply:
    text: str
    provider: str
    model: str
    latency_ms: float


def _speaker(message: ChatMessage) -> str:
    return "User" if message.role == ChatRole.USER else "Assistant"


def build_prompt(messages: Sequence[ChatMessage]) -> str:
    """Render the transcript: earlier turns as history, the last one as the user's turn."""
    if not messages:
        raise ValueError("No messages provided")

    history = "\n\n".join(f"{_speaker(m)}: {m.content}" for m in messages[:-1])
    return f"Previous conversation:\n{history}\n\nUser: {messages[-1].content}"


def last_user_message(messages: Sequence[ChatMessage]) -> str:
    for message in reversed(messages):
        if message.role == ChatRole.USER:
            return message.content
    return ""


async def generate_reply(messages: Sequence[ChatMessage]) -> ChatReply:
    """Ask the configured chat provider for a reply. Provider errors propagate."""
    prompt = build_prompt(messages)
    config = ai_router.resolve_chat()

    result = await config.provider.generate(
        prompt,
        system_prompt=CHAT_SYSTEM_PROMPT,
        model=config.model,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        timeout_seconds=config.timeout_seconds,
    )
    logger.info(
        "Chat reply provider=%s model=%s turns=%d chars=%d latency_ms=%.1f",
        result.provider,
        result.model,
        len(messages),
        len(result.raw_text),
        result.latency_ms,
    )
    return ChatReply(
        text=result.raw_text.strip(),
        provider=result.provider,
        model=result.model,
        latency_ms=result.latency_ms,
    )


async def stream_words(text: str, *, delay_seconds: float = 0.05) -> AsyncIterator[str]:
    """Yield *text* split on single spaces; every word after the first carries its leading space."""
    words = text.split(" ")
    for index, word in enumerate(words):
        if index and delay_seconds > 0:
            await asyncio.sleep(delay_seconds)
        yield word if index == 0 else f" {word}"
