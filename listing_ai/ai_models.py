"""Per-endpoint model settings.

Each endpoint that asks the model for structured content gets its model id,
sampling temperature, output token cap and request timeout from this table.
The table is immutable; the content service receives a ``ModelTable`` at
construction and resolves per-request overrides against it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from types import MappingProxyType
from typing import Any, Mapping, Optional

EndpointName = str

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AiModelConfig:
    model: str
    temperature: float
    max_tokens: int
    timeout_seconds: float
    description: str = ""
    allow_override: bool = False


DEFAULT_AI_MODELS: Mapping[EndpointName, AiModelConfig] = MappingProxyType(
    {
        "suggest_data": AiModelConfig(
            model="google/gemini-2.5-flash-preview-09-2025",
            temperature=0.7,
            max_tokens=4000,
            timeout_seconds=30.0,
            description="Market analysis and keyword suggestion",
        ),
        "optimize": AiModelConfig(
            model="openai/gpt-4o-mini",
            temperature=0.7,
            max_tokens=2000,
            timeout_seconds=60.0,
            description="Content optimization for keywords",
        ),
        "generate_ads": AiModelConfig(
            model="openai/gpt-4o-mini",
            temperature=0.7,
            max_tokens=3000,
            timeout_seconds=60.0,
            description="Generate ads for social media platforms",
            allow_override=True,
        ),
        "generate_landing_page": AiModelConfig(
            model="deepseek/deepseek-v3.2-exp",
            temperature=0.85,
            max_tokens=8000,
            timeout_seconds=180.0,
            description="Generate complete HTML landing page",
            allow_override=True,
        ),
        "suggest_segmentation": AiModelConfig(
            model="x-ai/grok-4-fast",
            temperature=0.5,
            max_tokens=8192,
            timeout_seconds=200.0,
            description="Generate 3 detailed customer personas",
        ),
        "generate_content_from_segmentation": AiModelConfig(
            model="x-ai/grok-4-fast",
            temperature=0.7,
            max_tokens=4096,
            timeout_seconds=60.0,
            description="Generate optimized content from segmentation data",
        ),
        "discover_products": AiModelConfig(
            model="google/gemini-2.5-flash-preview-09-2025",
            temperature=0.7,
            max_tokens=3000,
            timeout_seconds=60.0,
            description="Suggest trending product opportunities",
        ),
    }
)

AVAILABLE_MODELS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "openai": ("openai/gpt-4o", "openai/gpt-4o-mini", "openai/gpt-4-turbo"),
        "google": ("google/gemini-2.5-flash-preview-09-2025", "google/gemini-pro-1.5"),
        "xai": ("x-ai/grok-4-fast", "x-ai/grok-2"),
        "deepseek": ("deepseek/deepseek-v3.2-exp", "deepseek/deepseek-coder"),
        "anthropic": ("anthropic/claude-3.5-sonnet", "anthropic/claude-3-opus"),
    }
)

_CONFIG_FIELDS = {item.name for item in fields(AiModelConfig)}


class ModelTable:
    def __init__(
        self,
        configs: Optional[Mapping[EndpointName, AiModelConfig]] = None,
        available_models: Optional[Mapping[str, tuple[str, ...]]] = None,
    ) -> None:
        self._configs: Mapping[EndpointName, AiModelConfig] = MappingProxyType(dict(configs or DEFAULT_AI_MODELS))
        catalog = available_models if available_models is not None else AVAILABLE_MODELS
        self._known_models = frozenset(model for models in catalog.values() for model in models)

    def is_available(self, model: str) -> bool:
        return model in self._known_models

    def __contains__(self, endpoint: object) -> bool:
        return endpoint in self._configs

    def endpoints(self) -> list[EndpointName]:
        return list(self._configs)

    def get(self, endpoint: EndpointName) -> AiModelConfig:
        try:
            return self._configs[endpoint]
        except KeyError:
            raise KeyError(f"Unknown API name: {endpoint}") from None

    def resolve(
        self,
        endpoint: EndpointName,
        overrides: Optional[Mapping[str, Any]] = None,
        *,
        requested_model: Optional[str] = None,
    ) -> AiModelConfig:
        """Return the endpoint config with operator overrides applied.

        ``overrides`` come from code and may change any field. A
        ``requested_model`` comes from a request body and is honored only for
        endpoints that allow it and only when it names a known model.
        """
        config = self.get(endpoint)
        if overrides:
            unknown = set(overrides) - _CONFIG_FIELDS
            if unknown:
                raise ValueError(f"Unknown model config field(s): {', '.join(sorted(unknown))}")
            config = replace(config, **dict(overrides))

        model = (requested_model or "").strip()
        if not model or not config.allow_override:
            return config
        if not self.is_available(model):
            logger.warning("%s: ignoring unknown requested model %r", endpoint, model)
            return config
        return replace(config, model=model)
