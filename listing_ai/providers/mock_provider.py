"""Deterministic offline completions.

Each canned completion carries the kind of noise real models produce
(fences, leading prose, emphasis quotes, trailing commas, raw line breaks)
so the extraction engine is exercised even without network access.
"""

from __future__ import annotations

from typing import Optional

from listing_ai.prompts.templates import ENDPOINT_TITLES

MOCK_COMPLETIONS: dict[str, str] = {
    "suggest_data": (
        "```json\n"
        "{\n"
        '  "keywords": {\n'
        '    "informational": [{"keyword": "cách chọn váy công sở", "volume": 1200, "cpc": 0.4, "competition": "Low"},],\n'
        '    "transactional": [{"keyword": "mua váy công sở", "volume": 2400, "cpc": 1.3, "competition": "High"}],\n'
        '    "comparative": [{"keyword": "váy công sở nào tốt", "volume": 700, "cpc": 0.9, "competition": "Medium"}],\n'
        '    "painpoint_related": [{"keyword": "váy công sở bị nhăn", "volume": 500, "cpc": 0.6, "competition": "Low"}]\n'
        "  },\n"
        '  "target_customers": [\n'
        '    {"name": "Dân văn phòng trẻ", "common_painpoints": ["Ít thời gian phối đồ", "Ngân sách hạn chế"],'
        ' "market_share_percent": 45, "age_range": "22-30", "locations": ["Hà Nội", "TP.HCM"]},\n'
        "  ]\n"
        "}\n"
        "```"
    ),
    "optimize": (
        "Here is the optimized content:\n"
        '{"new_title": "Váy Công Sở Chống Nhăn - \'Phối 5 bộ\' Chỉ Với 1 Chiếc",'
        ' "new_description": "<h3>Thanh lịch mỗi ngày</h3>\n<p>It\'s easy to style.</p>"}'
    ),
    "generate_ads": (
        '{"versions": [\n'
        '  {"ad_headline": "Mặc đẹp không cần ủi", "ad_copy": "Chất vải chống nhăn,\tgiao nhanh 2h.",'
        ' "cta": "Mua ngay", "expected_performance": "CTR cao với nhóm văn phòng",},\n'
        "]}"
    ),
    "generate_landing_page": (
        "```html\n"
        '{"html": "<!DOCTYPE html><html><body><h1>Váy Công Sở</h1><p>Ưu đãi { hôm nay }</p></body></html>",'
        ' "sections": ["hero", "benefits", "cta"]}\n'
        "```"
    ),
    "suggest_segmentation": (
        'Sure! {"status": "success", "segmentations": ['
        '{"name": "Tín đồ \'vintage\'", "personaProfile": {"demographics": "Nữ 22-30", "psychographics": "Yêu phong cách cổ điển"},'
        ' "painpoints": ["Khó tìm đồ độc bản"], "winRate": 0.75,},'
        '{"name": "Mẹ bỉm bận rộn", "personaProfile": {"demographics": "Nữ 28-38", "psychographics": "Ưu tiên tiện lợi"},'
        ' "painpoints": ["Không có thời gian mua sắm"], "winRate": 0.6}],'
        ' "summary": {"top_segment": "Tín đồ vintage"}'
    ),
    "generate_content_from_segmentation": (
        "```json\n"
        '{"title": "Váy Vintage Độc Bản Cho Cô Nàng Cá Tính",'
        ' "description": "<p>Phong cách cổ điển, chất liệu thoáng mát.</p>"}\n'
        "```"
    ),
    "discover_products": (
        "Danh sách cơ hội:\n"
        '[{"product_name": "Bình giữ nhiệt mini", "image_query": "mini thermos bottle",'
        ' "metrics": {"demand_score": 8, "competition_score": 4, "profit_potential": "Cao", "trend": "Tăng"},'
        ' "ai_summary": "Nhu cầu tăng mạnh mùa lạnh.",},]'
    ),
}

_TITLE_TO_ENDPOINT = {title: endpoint for endpoint, title in ENDPOINT_TITLES.items()}


async def chat_completion(
    *,
    model: str,
    system_prompt: str,
    user_prompt: str,
    temperature: float = 0.7,
    max_tokens: int = 2000,
    timeout_seconds: float = 60.0,
    title: Optional[str] = None,
) -> str:
    _ = (model, system_prompt, user_prompt, temperature, max_tokens, timeout_seconds)
    endpoint = _TITLE_TO_ENDPOINT.get(title or "", "")
    return MOCK_COMPLETIONS.get(endpoint, "I'm sorry, I cannot help with that.")
