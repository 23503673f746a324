from __future__ import annotations

from typing import Optional

from listing_ai.config import settings
from listing_ai.providers import mock_provider, openrouter
from listing_ai.providers.protocols import LlmFn


def build_llm_fn(mode: Optional[str] = None) -> LlmFn:
    resolved_mode = (mode or settings.provider_mode).strip().lower()
    if resolved_mode == "prod":
        return openrouter.chat_completion
    if resolved_mode == "mock":
        return mock_provider.chat_completion
    raise RuntimeError(f"Unsupported provider mode: {resolved_mode}")
