from __future__ import annotations

import pytest

from listing_ai.ai_models import DEFAULT_AI_MODELS, AiModelConfig, ModelTable


def test_resolve_returns_default_config() -> None:
    config = ModelTable().resolve("suggest_segmentation")

    assert config.model == "x-ai/grok-4-fast"
    assert config.max_tokens == 8192
    assert config.timeout_seconds == 200.0


def test_resolve_applies_overrides_without_touching_defaults() -> None:
    table = ModelTable()

    config = table.resolve("optimize", {"max_tokens": 512, "temperature": 0.2})

    assert config.max_tokens == 512
    assert config.temperature == 0.2
    assert table.get("optimize").max_tokens == 2000


def test_resolve_rejects_unknown_override_fields() -> None:
    with pytest.raises(ValueError):
        ModelTable().resolve("optimize", {"top_p": 0.9})


def test_unknown_endpoint_raises_key_error() -> None:
    with pytest.raises(KeyError):
        ModelTable().resolve("generate_video")


def test_requested_model_only_honored_when_allowed() -> None:
    table = ModelTable()

    landing = table.resolve("generate_landing_page", requested_model="anthropic/claude-3.5-sonnet")
    optimize = table.resolve("optimize", requested_model="anthropic/claude-3.5-sonnet")

    assert landing.model == "anthropic/claude-3.5-sonnet"
    assert optimize.model == "openai/gpt-4o-mini"


def test_default_table_is_read_only() -> None:
    with pytest.raises(TypeError):
        DEFAULT_AI_MODELS["optimize"] = AiModelConfig(  # type: ignore[index]
            model="x", temperature=0.1, max_tokens=1, timeout_seconds=1.0
        )


def test_custom_table_is_isolated() -> None:
    custom = {"optimize": AiModelConfig(model="local/test", temperature=0.0, max_tokens=64, timeout_seconds=5.0)}
    table = ModelTable(custom)

    assert table.endpoints() == ["optimize"]
    assert "suggest_data" not in table
    assert table.resolve("optimize").model == "local/test"


def test_requested_model_must_be_a_known_model() -> None:
    table = ModelTable()

    config = table.resolve("generate_landing_page", requested_model="made-up/model")

    assert config.model == table.get("generate_landing_page").model
    assert table.is_available("deepseek/deepseek-v3.2-exp")
    assert not table.is_available("made-up/model")


def test_custom_model_catalog() -> None:
    table = ModelTable(available_models={"local": ("local/small",)})

    assert table.resolve("generate_ads", requested_model="local/small").model == "local/small"
    assert table.resolve("generate_ads", requested_model="openai/gpt-4o").model == "openai/gpt-4o-mini"
