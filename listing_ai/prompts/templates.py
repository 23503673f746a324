from __future__ import annotations

import json
from typing import Any

ENDPOINT_TITLES: dict[str, str] = {
    "suggest_data": "Product Optimize Suggest",
    "optimize": "Product Optimize Content",
    "generate_ads": "Product Optimize Ads Generator",
    "generate_landing_page": "Product Landing Page Generator",
    "suggest_segmentation": "Product Segmentation Suggest",
    "generate_content_from_segmentation": "Product Segment Content",
    "discover_products": "Product Discovery",
}

JSON_ONLY_RULE = "Return ONLY valid JSON. No extra text, no markdown formatting."


def _language_name(language: str) -> str:
    return "Vietnamese" if language.strip().lower() in {"vi", "vn", "vietnamese"} else "English"


def _product_block(title: str, description: str) -> str:
    return f"Product: {title.strip()}\nDescription: {description.strip() or 'n/a'}"


def _compact(value: Any, *, max_chars: int = 600) -> str:
    text = " ".join(json.dumps(value, ensure_ascii=False).split())
    if len(text) <= max_chars:
        return text
    return f"{text[: max_chars - 3]}..."


def suggest_data_prompt(title: str, description: str) -> tuple[str, str]:
    system_prompt = f"You are a market analysis expert. {JSON_ONLY_RULE}"
    user_prompt = (
        f"{_product_block(title, description)}\n\n"
        "Suggest 10 keywords for each group (informational, transactional, comparative, painpoint_related) "
        "and 3 target customer segments with concrete painpoints.\n"
        "Return JSON shaped as:\n"
        '{"keywords": {"informational": [{"keyword": "", "volume": 0, "cpc": 0.0, "competition": "Low"}], '
        '"transactional": [], "comparative": [], "painpoint_related": []}, '
        '"target_customers": [{"name": "", "common_painpoints": [], "market_share_percent": 0, '
        '"age_range": "", "locations": []}]}'
    )
    return system_prompt, user_prompt


def optimize_prompt(
    title: str,
    description: str,
    *,
    mode: str,
    tone: str,
    focus: str,
) -> tuple[str, str]:
    system_prompt = f"You are an e-commerce copywriter. {JSON_ONLY_RULE}"
    user_prompt = (
        f"{_product_block(title, description)}\n"
        f"Optimization mode: {mode}\nFocus: {focus}\nTone: {tone}\n\n"
        "Write an SEO-optimized title and a responsive HTML description (h3, p, ul, li, strong, inline CSS).\n"
        'Return JSON: {"new_title": "", "new_description": ""}'
    )
    return system_prompt, user_prompt


def ads_prompt(
    title: str,
    description: str,
    *,
    platform: str,
    ad_format: str,
    num_versions: int,
    language: str,
    angle: str | None,
) -> tuple[str, str]:
    system_prompt = f"You are an advertising expert. {JSON_ONLY_RULE}"
    visual_field = '"ad_visual_idea": "", ' if platform == "tiktok" else ""
    user_prompt = (
        f"{_product_block(title, description)}\n"
        f"Platform: {platform}\nFormat: {ad_format}\nLanguage: {_language_name(language)}\n"
        f"Angle: {angle or 'general'}\n\n"
        f"Write {num_versions} distinct ad versions, each with ad_headline, ad_copy and cta.\n"
        f'Return JSON: {{"versions": [{{"ad_headline": "", "ad_copy": "", "cta": "", {visual_field}'
        '"expected_performance": ""}]}'
    )
    return system_prompt, user_prompt


def landing_page_prompt(title: str, description: str, *, style: str, language: str) -> tuple[str, str]:
    system_prompt = f"You are a conversion-focused web designer. {JSON_ONLY_RULE}"
    user_prompt = (
        f"{_product_block(title, description)}\n"
        f"Visual style: {style}\nLanguage: {_language_name(language)}\n\n"
        "Build a complete single-file HTML landing page with inline CSS. Escape every double quote inside the HTML.\n"
        'Return JSON: {"html": "<!DOCTYPE html>...", "sections": ["hero", "..."]}'
    )
    return system_prompt, user_prompt


def segmentation_prompt(title: str, description: str, *, target_market: str, language: str) -> tuple[str, str]:
    system_prompt = f"You are a customer research strategist. {JSON_ONLY_RULE}"
    user_prompt = (
        f"{_product_block(title, description)}\n"
        f"Target market: {target_market}\nLanguage: {_language_name(language)}\n\n"
        "Describe the 3 customer personas most likely to buy this product.\n"
        'Return JSON: {"status": "success", "segmentations": [{"name": "", '
        '"personaProfile": {"demographics": "", "psychographics": ""}, "painpoints": [], "winRate": 0.0}]}'
    )
    return system_prompt, user_prompt


def segment_content_prompt(
    title: str,
    description: str,
    *,
    segment: dict[str, Any],
    language: str,
) -> tuple[str, str]:
    system_prompt = f"You are an e-commerce copywriter who writes for one persona at a time. {JSON_ONLY_RULE}"
    user_prompt = (
        f"{_product_block(title, description)}\n"
        f"Persona: {_compact(segment)}\nLanguage: {_language_name(language)}\n\n"
        "Write a product title and an HTML description that speak directly to this persona.\n"
        'Return JSON: {"title": "", "description": ""}'
    )
    return system_prompt, user_prompt


def discover_products_prompt(category: str, *, market: str, count: int) -> tuple[str, str]:
    system_prompt = f"You are a product sourcing analyst. {JSON_ONLY_RULE}"
    user_prompt = (
        f"Category: {category}\nMarket: {market}\n\n"
        f"List {count} trending product opportunities as a JSON array:\n"
        '[{"product_name": "", "image_query": "", "metrics": {"demand_score": 0, "competition_score": 0, '
        '"profit_potential": "", "trend": ""}, "ai_summary": ""}]'
    )
    return system_prompt, user_prompt
