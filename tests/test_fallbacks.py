from __future__ import annotations

import json
from typing import Any

import pytest

from listing_ai.ai_models import DEFAULT_AI_MODELS
from listing_ai.models import (
    DiscoverProductsRequest,
    GenerateAdsRequest,
    LandingPageRequest,
    OptimizeRequest,
    SegmentationRequest,
    SegmentContentRequest,
    SuggestDataRequest,
)
from listing_ai.services.fallbacks import FALLBACK_BUILDERS, select_fallback

SAMPLE_REQUESTS: dict[str, Any] = {
    "suggest_data": SuggestDataRequest(productTitle="Váy công sở", productDescription="Chống nhăn"),
    "optimize": OptimizeRequest(productTitle="Váy công sở", productDescription="Chống nhăn", keywords=["váy"]),
    "generate_ads": GenerateAdsRequest(productTitle="Váy công sở", platform="tiktok"),
    "generate_landing_page": LandingPageRequest(productTitle="Váy <b>công sở</b>"),
    "suggest_segmentation": SegmentationRequest(productTitle="Váy công sở"),
    "generate_content_from_segmentation": SegmentContentRequest(
        productTitle="Váy công sở",
        segment={"name": "Dân văn phòng"},
    ),
    "discover_products": DiscoverProductsRequest(category="Đồ gia dụng"),
}


def test_every_configured_endpoint_has_a_fallback() -> None:
    assert set(FALLBACK_BUILDERS) == set(DEFAULT_AI_MODELS)


@pytest.mark.parametrize("endpoint", sorted(SAMPLE_REQUESTS))
def test_fallback_is_deterministic(endpoint: str) -> None:
    request = SAMPLE_REQUESTS[endpoint]

    first = select_fallback(endpoint, request)
    second = select_fallback(endpoint, request)

    assert json.dumps(first, ensure_ascii=False, sort_keys=True) == json.dumps(
        second, ensure_ascii=False, sort_keys=True
    )


def test_mutating_a_fallback_does_not_leak_into_the_next_call() -> None:
    request = SAMPLE_REQUESTS["suggest_data"]

    first = select_fallback("suggest_data", request)
    first["target_customers"].clear()

    assert len(select_fallback("suggest_data", request)["target_customers"]) == 3


def test_optimize_fallback_echoes_original_content() -> None:
    payload = select_fallback("optimize", SAMPLE_REQUESTS["optimize"])
    assert payload == {"new_title": "Váy công sở", "new_description": "Chống nhăn"}


def test_tiktok_ads_fallback_includes_visual_idea() -> None:
    version = select_fallback("generate_ads", SAMPLE_REQUESTS["generate_ads"])["versions"][0]
    assert version["ad_visual_idea"]
    assert version["cta"] == "Mua ngay"


def test_landing_page_fallback_escapes_title() -> None:
    html = select_fallback("generate_landing_page", SAMPLE_REQUESTS["generate_landing_page"])["html"]
    assert "&lt;b&gt;" in html
    assert "<b>" not in html


def test_unknown_endpoint_has_no_fallback() -> None:
    with pytest.raises(KeyError):
        select_fallback("generate_video", None)
