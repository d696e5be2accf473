"""Read / replace / clear the signed-in user's conversation context."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.core.auth import CurrentUser, get_current_user
from app.core.dependencies import get_context_repository
from app.schemas.chat import ConversationContextPayload
from app.services.conversation_context import ConversationContext, ConversationContextRepository

router = APIRouter()


@router.get("/conversation/context", response_model=ConversationContextPayload)
def get_context(
    user: CurrentUser = Depends(get_current_user),
    repo: ConversationContextRepository = Depends(get_context_repository),
):
    context = repo.load(user.id)
    if context is None:
        raise HTTPException(404, "No conversation context")
    return ConversationContextPayload(**context.to_dict())


@router.put("/conversation/context", response_model=ConversationContextPayload)
def put_context(
    body: ConversationContextPayload,
    user: CurrentUser = Depends(get_current_user),
    repo: ConversationContextRepository = Depends(get_context_repository),
):
    context = ConversationContext.from_dict(body.model_dump())
    repo.save(user.id, context)
    return ConversationContextPayload(**context.to_dict())


@router.delete("/conversation/context", status_code=204)
def delete_context(
    user: CurrentUser = Depends(get_current_user),
    repo: ConversationContextRepository = Depends(get_context_repository),
):
    repo.clear(user.id)
