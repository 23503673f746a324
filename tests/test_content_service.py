from __future__ import annotations

import logging

import pytest

from listing_ai.ai_models import ModelTable
from listing_ai.models import (
    DiscoverProductsRequest,
    GenerateAdsRequest,
    LandingPageRequest,
    OptimizeRequest,
    SegmentationRequest,
    SegmentContentRequest,
    SuggestDataRequest,
)
from listing_ai.providers import mock_provider
from listing_ai.providers.protocols import ProviderError
from listing_ai.services.content_service import ContentService
from listing_ai.services.fallbacks import optimize_fallback, segmentation_fallback
from listing_ai.services.llm_trace import ExtractionTraceCollector, bind_trace_collector


def _static_llm(response: str, calls: list[dict[str, object]] | None = None):  # type: ignore[no-untyped-def]
    async def fake_llm(**kwargs) -> str:  # type: ignore[no-untyped-def]
        if calls is not None:
            calls.append(kwargs)
        return response

    return fake_llm


@pytest.mark.asyncio
async def test_optimize_returns_repaired_model_output() -> None:
    calls: list[dict[str, object]] = []
    service = ContentService(
        llm_fn=_static_llm(
            "```json\n{\"new_title\": \"'Best' Dress\", \"new_description\": \"<p>It's light</p>\",}\n```",
            calls,
        )
    )

    response = await service.optimize(OptimizeRequest(productTitle="Dress", keywords=["dress"]))

    assert not response.usedFallback
    assert response.failureReason is None
    assert response.data == {"new_title": "Best Dress", "new_description": "<p>It's light</p>"}
    assert {"stripped_fence", "removed_trailing_comma"} <= {repair.kind for repair in response.repairs}
    assert calls[0]["model"] == "openai/gpt-4o-mini"
    assert calls[0]["max_tokens"] == 2000
    assert calls[0]["title"] == "Product Optimize Content"


@pytest.mark.asyncio
async def test_no_json_falls_back_to_endpoint_payload() -> None:
    request = OptimizeRequest(productTitle="Dress", productDescription="Light cotton")
    service = ContentService(llm_fn=_static_llm("Sorry, I cannot help with that."))

    response = await service.optimize(request)

    assert response.usedFallback
    assert response.failureReason == "no_json_found"
    assert response.data == optimize_fallback(request)


@pytest.mark.asyncio
async def test_missing_required_keys_is_a_schema_mismatch() -> None:
    service = ContentService(llm_fn=_static_llm('{"keywords": {"informational": []}}'))

    response = await service.suggest_data(SuggestDataRequest(productTitle="Dress"))

    assert response.usedFallback
    assert response.failureReason == "schema_mismatch"
    assert "target_customers" in response.data


@pytest.mark.asyncio
async def test_truncation_inside_string_uses_fallback() -> None:
    request = SegmentationRequest(productTitle="Dress")
    service = ContentService(llm_fn=_static_llm('{"status": "success", "segmentations": [{"name": "Tín đồ'))

    response = await service.suggest_segmentation(request)

    assert response.usedFallback
    assert response.failureReason == "truncated_beyond_recovery"
    assert response.data == segmentation_fallback(request)


@pytest.mark.asyncio
async def test_provider_errors_propagate() -> None:
    async def failing_llm(**kwargs) -> str:  # type: ignore[no-untyped-def]
        raise ProviderError("OpenRouter request failed (503): upstream unavailable", status_code=503)

    service = ContentService(llm_fn=failing_llm)

    with pytest.raises(ProviderError):
        await service.generate_ads(GenerateAdsRequest(productTitle="Dress"))


@pytest.mark.asyncio
async def test_requested_model_is_used_when_endpoint_allows_it() -> None:
    calls: list[dict[str, object]] = []
    service = ContentService(llm_fn=_static_llm('{"html": "<html></html>"}', calls))

    response = await service.generate_landing_page(
        LandingPageRequest(productTitle="Dress", aiModel="anthropic/claude-3.5-sonnet")
    )

    assert response.model == "anthropic/claude-3.5-sonnet"
    assert calls[0]["model"] == "anthropic/claude-3.5-sonnet"
    assert calls[0]["timeout_seconds"] == 180.0


@pytest.mark.asyncio
async def test_model_table_is_injected_at_construction() -> None:
    calls: list[dict[str, object]] = []
    table = ModelTable()
    service = ContentService(llm_fn=_static_llm('{"title": "t", "description": "d"}', calls), models=table)

    await service.generate_content_from_segmentation(
        SegmentContentRequest(productTitle="Dress", segment={"name": "Office"})
    )

    assert calls[0]["model"] == table.get("generate_content_from_segmentation").model


@pytest.mark.asyncio
async def test_discover_products_expects_array_root() -> None:
    object_service = ContentService(llm_fn=_static_llm('{"product_name": "Mini thermos"}'))
    array_service = ContentService(llm_fn=_static_llm('[{"product_name": "Mini thermos"}]'))
    request = DiscoverProductsRequest(category="Household")

    wrong_shape = await object_service.discover_products(request)
    ok = await array_service.discover_products(request)

    assert wrong_shape.usedFallback
    assert ok.data == [{"product_name": "Mini thermos"}]


@pytest.mark.asyncio
async def test_trace_collector_records_each_extraction() -> None:
    collector = ExtractionTraceCollector()
    service = ContentService(llm_fn=_static_llm("nothing useful"))

    with bind_trace_collector(collector):
        await service.suggest_data(SuggestDataRequest(productTitle="Dress"))

    assert len(collector.entries) == 1
    entry = collector.entries[0]
    assert entry.endpoint == "suggest_data"
    assert entry.used_fallback
    assert entry.failure_reason == "no_json_found"
    assert entry.metadata["rootKind"] == "object"
    assert collector.fallbacks() == [entry]


@pytest.mark.asyncio
async def test_failure_logging_is_bounded(caplog: pytest.LogCaptureFixture) -> None:
    service = ContentService(llm_fn=_static_llm("Sorry " + "x" * 5000), snippet_chars=120)

    with caplog.at_level(logging.WARNING, logger="listing_ai.services.content_service"):
        await service.suggest_data(SuggestDataRequest(productTitle="Dress"))

    assert caplog.records
    assert all(len(record.getMessage()) < 600 for record in caplog.records)


@pytest.mark.asyncio
async def test_mock_completions_are_all_recoverable() -> None:
    service = ContentService(llm_fn=mock_provider.chat_completion)

    responses = [
        await service.suggest_data(SuggestDataRequest(productTitle="Váy công sở")),
        await service.optimize(OptimizeRequest(productTitle="Váy công sở")),
        await service.generate_ads(GenerateAdsRequest(productTitle="Váy công sở")),
        await service.generate_landing_page(LandingPageRequest(productTitle="Váy công sở")),
        await service.suggest_segmentation(SegmentationRequest(productTitle="Váy công sở")),
        await service.generate_content_from_segmentation(
            SegmentContentRequest(productTitle="Váy công sở", segment={"name": "Tín đồ vintage"})
        ),
        await service.discover_products(DiscoverProductsRequest(category="Đồ gia dụng")),
    ]

    assert [response.usedFallback for response in responses] == [False] * len(responses)
    segmentation = responses[4].data
    assert segmentation["segmentations"][0]["name"] == "Tín đồ vintage"
    assert "closed_braces" in {repair.kind for repair in responses[4].repairs}


@pytest.mark.asyncio
async def test_deeply_nested_output_falls_back_instead_of_raising() -> None:
    service = ContentService(llm_fn=_static_llm('{"keywords":' * 1500 + "1"))

    response = await service.suggest_data(SuggestDataRequest(productTitle="Dress"))

    assert response.usedFallback
    assert response.failureReason == "truncated_beyond_recovery"
    assert "target_customers" in response.data


@pytest.mark.asyncio
async def test_bracketed_prose_before_the_array_is_a_schema_mismatch() -> None:
    service = ContentService(llm_fn=_static_llm('Top [3] ideas: [{"product_name": "A"}]'))

    response = await service.discover_products(DiscoverProductsRequest(category="Household"))

    assert response.usedFallback
    assert response.failureReason == "schema_mismatch"
    assert response.data[0]["product_name"] == "Sản phẩm tiềm năng"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "completion",
    ["[]", '[{"product_name": "A"}, {"image_query": "b"}]', '[{"product_name": "A"}, "B"]'],
)
async def test_array_items_must_carry_required_keys(completion: str) -> None:
    service = ContentService(llm_fn=_static_llm(completion))

    response = await service.discover_products(DiscoverProductsRequest(category="Household"))

    assert response.usedFallback
    assert response.failureReason == "schema_mismatch"


@pytest.mark.asyncio
async def test_unknown_requested_model_keeps_configured_default() -> None:
    calls: list[dict[str, object]] = []
    service = ContentService(llm_fn=_static_llm('{"versions": []}', calls))

    response = await service.generate_ads(GenerateAdsRequest(productTitle="Dress", aiModel="made-up/model"))

    assert response.model == "openai/gpt-4o-mini"
    assert calls[0]["model"] == "openai/gpt-4o-mini"
