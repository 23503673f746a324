"""Hand-authored default payloads, one per endpoint.

When a completion cannot be recovered, the endpoint answers with these
schema-shaped defaults instead of an error. Builders are pure functions of
the request, so the same request always produces byte-identical content.
"""

from __future__ import annotations

import copy
from html import escape
from typing import Any, Callable

from listing_ai.models import (
    DiscoverProductsRequest,
    GenerateAdsRequest,
    LandingPageRequest,
    OptimizeRequest,
    SegmentationRequest,
    SegmentContentRequest,
    SuggestDataRequest,
)


def _keyword(keyword: str, volume: int, cpc: float, competition: str) -> dict[str, Any]:
    return {"keyword": keyword, "volume": volume, "cpc": cpc, "competition": competition}


SUGGEST_DATA_FALLBACK: dict[str, Any] = {
    "keywords": {
        "informational": [
            _keyword("cách sử dụng sản phẩm", 1000, 0.5, "Low"),
            _keyword("hướng dẫn sản phẩm", 800, 0.4, "Low"),
            _keyword("đánh giá sản phẩm", 900, 0.7, "Medium"),
        ],
        "transactional": [
            _keyword("mua sản phẩm", 2000, 1.5, "High"),
            _keyword("giá sản phẩm", 1500, 1.2, "High"),
            _keyword("khuyến mãi sản phẩm", 1000, 1.4, "High"),
        ],
        "comparative": [
            _keyword("sản phẩm nào tốt", 800, 1.0, "High"),
            _keyword("so sánh sản phẩm", 600, 0.8, "High"),
            _keyword("top sản phẩm", 700, 1.1, "High"),
        ],
        "painpoint_related": [
            _keyword("vấn đề sản phẩm", 600, 0.7, "Medium"),
            _keyword("giải pháp sản phẩm", 500, 0.9, "Medium"),
            _keyword("lợi ích sản phẩm", 700, 0.6, "Medium"),
        ],
    },
    "target_customers": [
        {
            "name": "Người dùng trẻ tuổi (18-25)",
            "common_painpoints": ["Không biết cách sử dụng", "Lo lắng về chất lượng", "Muốn tiết kiệm chi phí"],
            "market_share_percent": 30,
            "age_range": "18-25",
            "locations": ["Hà Nội", "TP.HCM", "Đà Nẵng"],
        },
        {
            "name": "Người dùng trung niên (26-40)",
            "common_painpoints": ["Cần hiệu quả cao", "Quan tâm đến an toàn", "Muốn tiết kiệm thời gian"],
            "market_share_percent": 45,
            "age_range": "26-40",
            "locations": ["TP.HCM", "Hà Nội", "Cần Thơ"],
        },
        {
            "name": "Người dùng cao tuổi (41+)",
            "common_painpoints": ["Khó sử dụng công nghệ", "Cần hướng dẫn chi tiết", "Quan tâm đến độ bền"],
            "market_share_percent": 25,
            "age_range": "41+",
            "locations": ["Hà Nội", "TP.HCM", "Hải Phòng"],
        },
    ],
}

SEGMENTATION_FALLBACK: dict[str, Any] = {
    "status": "fallback",
    "segmentations": [
        {
            "name": "Khách hàng thực dụng",
            "personaProfile": {
                "demographics": "25-40 tuổi, thu nhập trung bình",
                "psychographics": "Ưu tiên công năng và độ bền",
            },
            "painpoints": ["Sợ mua phải hàng kém chất lượng", "Không có thời gian so sánh"],
            "winRate": 0.5,
        },
        {
            "name": "Người mua theo xu hướng",
            "personaProfile": {
                "demographics": "18-28 tuổi, sống ở thành phố lớn",
                "psychographics": "Thích sản phẩm mới, hay xem review",
            },
            "painpoints": ["Sản phẩm nhanh lỗi mốt", "Khó chọn giữa quá nhiều lựa chọn"],
            "winRate": 0.4,
        },
        {
            "name": "Người mua làm quà",
            "personaProfile": {
                "demographics": "25-45 tuổi, mua dịp lễ",
                "psychographics": "Quan tâm hình thức và đóng gói",
            },
            "painpoints": ["Không chắc người nhận có thích", "Lo giao hàng trễ"],
            "winRate": 0.3,
        },
    ],
}

DISCOVER_PRODUCTS_FALLBACK: list[dict[str, Any]] = [
    {
        "product_name": "Sản phẩm tiềm năng",
        "image_query": "trending product",
        "metrics": {
            "demand_score": 7,
            "competition_score": 5,
            "profit_potential": "Trung bình",
            "trend": "Ổn định",
        },
        "ai_summary": "Đây là một cơ hội sản phẩm tiềm năng dựa trên phân tích thị trường.",
    }
]

DEFAULT_AD_COPY = (
    "Sản phẩm chất lượng cao với nhiều tính năng vượt trội. "
    "Được thiết kế để mang lại trải nghiệm tuyệt vời cho người dùng."
)


def suggest_data_fallback(request: SuggestDataRequest) -> dict[str, Any]:
    _ = request
    return copy.deepcopy(SUGGEST_DATA_FALLBACK)


def optimize_fallback(request: OptimizeRequest) -> dict[str, Any]:
    return {
        "new_title": request.productTitle,
        "new_description": request.productDescription,
    }


def generate_ads_fallback(request: GenerateAdsRequest) -> dict[str, Any]:
    version: dict[str, Any] = {
        "ad_headline": f"Khám phá {request.productTitle} - Giải pháp hoàn hảo cho bạn",
        "ad_copy": (
            f"{request.productDescription.strip() or DEFAULT_AD_COPY}\n\n"
            "✨ Chất lượng đảm bảo\n🚀 Giao hàng nhanh chóng\n💯 Hỗ trợ 24/7"
        ),
        "cta": "Mua ngay",
    }
    if request.platform == "tiktok":
        version["ad_visual_idea"] = (
            "Video 15 giây: hiển thị sản phẩm từ nhiều góc độ, nhấn mạnh tính năng chính, kết thúc với CTA mạnh mẽ"
        )
    version["expected_performance"] = "Dự kiến CTR cao với targeting chính xác"
    return {"versions": [version]}


def landing_page_fallback(request: LandingPageRequest) -> dict[str, Any]:
    title = escape(request.productTitle)
    description = escape(request.productDescription.strip() or DEFAULT_AD_COPY)
    html = (
        '<!DOCTYPE html><html lang="vi"><head><meta charset="utf-8">'
        f"<title>{title}</title></head><body>"
        f'<section class="hero"><h1>{title}</h1><p>{description}</p></section>'
        '<section class="cta"><a href="#order">Mua ngay</a></section>'
        "</body></html>"
    )
    return {"html": html, "sections": ["hero", "cta"]}


def segmentation_fallback(request: SegmentationRequest) -> dict[str, Any]:
    _ = request
    return copy.deepcopy(SEGMENTATION_FALLBACK)


def segment_content_fallback(request: SegmentContentRequest) -> dict[str, Any]:
    return {
        "title": request.productTitle,
        "description": f"<p>{escape(request.productDescription.strip() or DEFAULT_AD_COPY)}</p>",
    }


def discover_products_fallback(request: DiscoverProductsRequest) -> list[dict[str, Any]]:
    _ = request
    return copy.deepcopy(DISCOVER_PRODUCTS_FALLBACK)


FALLBACK_BUILDERS: dict[str, Callable[[Any], Any]] = {
    "suggest_data": suggest_data_fallback,
    "optimize": optimize_fallback,
    "generate_ads": generate_ads_fallback,
    "generate_landing_page": landing_page_fallback,
    "suggest_segmentation": segmentation_fallback,
    "generate_content_from_segmentation": segment_content_fallback,
    "discover_products": discover_products_fallback,
}


def select_fallback(endpoint: str, request: Any) -> Any:
    try:
        builder = FALLBACK_BUILDERS[endpoint]
    except KeyError:
        raise KeyError(f"No fallback payload registered for endpoint: {endpoint}") from None
    return builder(request)
