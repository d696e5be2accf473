"""Support chat endpoints: streamed assistant reply, mood plan, welcome greeting."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse, StreamingResponse

from app.core.auth import CurrentUser, get_optional_user
from app.core.config import get_settings
from app.core.dependencies import get_context_repository
from app.schemas.chat import ChatRequest, MoodRequest, MoodResponse, WelcomeResponse
from app.services.ai.chat.service import (
    FALLBACK_RESPONSE,
    generate_reply,
    last_user_message,
    stream_words,
)
from app.services.conversation_context import ConversationContextRepository, record_message
from app.services.mood import classify_mood, matched_keywords, plan_response, welcome_message

logger = logging.getLogger(__name__)

router = APIRouter()

TEXT_MEDIA_TYPE = "text/plain; charset=utf-8"
DEFAULT_GREETING_NAME = "friend"


def _remember_mood(
    repo: ConversationContextRepository,
    user: CurrentUser,
    message: str,
) -> str:
    mood = classify_mood(message)
    topics = [word for words in matched_keywords(message).values() for word in words]
    context = repo.load(user.id)
    repo.save(user.id, record_message(context, mood, topics=topics))
    return mood.value


@router.post("/chat")
async def chat(
    body: ChatRequest,
    user: Optional[CurrentUser] = Depends(get_optional_user),
    repo: ConversationContextRepository = Depends(get_context_repository),
):
    if not body.messages:
        return PlainTextResponse("No messages provided", status_code=400)

    settings = get_settings()
    messages = body.messages[-settings.chat_max_messages :] if settings.chat_max_messages > 0 else body.messages

    latest = last_user_message(messages)
    if user is not None and latest:
        mood = _remember_mood(repo, user, latest)
    else:
        mood = classify_mood(latest).value

    try:
        reply = await generate_reply(messages)
    except Exception:
        logger.exception("Chat provider failed")
        return PlainTextResponse(FALLBACK_RESPONSE, status_code=500, media_type=TEXT_MEDIA_TYPE)

    return StreamingResponse(
        stream_words(reply.text, delay_seconds=settings.chat_stream_delay_ms / 1000),
        media_type=TEXT_MEDIA_TYPE,
        headers={"X-Mood": mood, "Cache-Control": "no-store"},
    )


@router.post("/chat/mood", response_model=MoodResponse)
def chat_mood(body: MoodRequest):
    mood = classify_mood(body.message)
    plan = plan_response(mood)
    matched = matched_keywords(body.message)
    return MoodResponse(
        mood=mood.value,
        reply=plan.reply,
        suggestions=list(plan.suggestions),
        counts={label.value: len(words) for label, words in matched.items()},
        matched={label.value: words for label, words in matched.items()},
    )


@router.get("/chat/welcome", response_model=WelcomeResponse)
def chat_welcome(
    name: Optional[str] = Query(None, max_length=100),
    user: Optional[CurrentUser] = Depends(get_optional_user),
):
    display = (name or "").strip()
    if not display and user is not None:
        display = user.name
    if not display:
        display = DEFAULT_GREETING_NAME
    return WelcomeResponse(message=welcome_message(display))
