"""AI Router: resolves the chat provider + model from ENV, falling back to mock."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from app.core.config import get_settings

from .providers import BaseProvider, get_provider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedConfig:
    """Final resolved provider + model after the fallback chain."""

    provider: BaseProvider
    model: str
    temperature: float
    max_tokens: int
    timeout_seconds: float


def resolve_chat() -> ResolvedConfig:
    """Resolve provider + model for the support chat.

    ``AI_CHAT_PROVIDER`` / ``AI_CHAT_MODEL`` win; an empty provider means mock.
    A model outside the provider's allowlist is replaced by the first allowed
    one, and the model is blanked whenever the provider degrades to mock.
    """
    settings = get_settings()

    provider_name = settings.ai_chat_provider.lower().strip() or "mock"
    model = settings.ai_chat_model.strip()

    allowed_models = settings.ai_allowed_models.get(provider_name, [])
    if allowed_models and model and model not in allowed_models:
        logger.warning(
            "Model %r not in allowlist for %r, using first allowed: %r",
            model,
            provider_name,
            allowed_models[0],
        )
        model = allowed_models[0]

    if allowed_models and not model:
        model = allowed_models[0]

    provider = get_provider(provider_name)
    if provider.name == "mock":
        model = ""

    return ResolvedConfig(
        provider=provider,
        model=model,
        temperature=settings.ai_temperature,
        max_tokens=settings.ai_max_tokens,
        timeout_seconds=settings.ai_timeout_seconds,
    )
