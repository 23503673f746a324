"""LLM providers used by the content service."""

from listing_ai.providers.factory import build_llm_fn
from listing_ai.providers.protocols import LlmFn, LlmProvider, ProviderError

__all__ = [
    "LlmFn",
    "LlmProvider",
    "ProviderError",
    "build_llm_fn",
]
