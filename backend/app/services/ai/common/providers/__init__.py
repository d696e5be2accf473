"""Provider factory: Gemini when configured, the mock provider otherwise."""

from __future__ import annotations

import logging

from app.core.config import get_settings

from .base import BaseProvider, ProviderResult
from .mock import MockProvider

logger = logging.getLogger(__name__)

__all__ = ["get_provider", "BaseProvider", "ProviderResult", "MockProvider"]

KNOWN_PROVIDERS = ("mock", "gemini")


def get_provider(provider_name: str) -> BaseProvider:
    """Return a provider instance for *provider_name*.

    Anything that cannot be served (not allowlisted, unknown, Gemini without
    ``GEMINI_API_KEY``) degrades to ``MockProvider`` with a warning, so the
    chat endpoint always has something to call.
    """
    settings = get_settings()
    name = provider_name.lower().strip()

    if name not in settings.ai_allowed_providers:
        logger.warning("Provider %r not in allowlist, falling back to mock", name)
        return MockProvider()
    if name not in KNOWN_PROVIDERS:
        logger.warning("Unknown provider %r, falling back to mock", name)
        return MockProvider()
    if name == "mock":
        return MockProvider()

    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY not set, falling back to mock")
        return MockProvider()

    from .gemini import GeminiProvider

    return GeminiProvider(api_key=settings.gemini_api_key)
