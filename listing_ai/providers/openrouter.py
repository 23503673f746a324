from __future__ import annotations

from typing import Any, Optional

import httpx

from listing_ai.config import settings
from listing_ai.providers.protocols import ProviderError


def _chat_endpoint() -> str:
    if not settings.has_openrouter_credentials():
        raise ProviderError("OpenRouter API key not configured. Set OPENROUTER_API_KEY.")
    return f"{settings.openrouter_base_url.rstrip('/')}/chat/completions"


def _headers(title: Optional[str]) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {settings.openrouter_api_key}",
        "Content-Type": "application/json",
        "HTTP-Referer": settings.openrouter_http_referer,
        "X-Title": title or settings.openrouter_app_title,
    }


def completion_text(body: Any) -> str:
    if not isinstance(body, dict):
        return ""
    choices = body.get("choices") or []
    if not choices or not isinstance(choices[0], dict):
        return ""
    message = choices[0].get("message") or {}
    content = message.get("content") if isinstance(message, dict) else None
    return content if isinstance(content, str) else ""


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
    endpoint = _chat_endpoint()
    payload: dict[str, Any] = {
        "model": model,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        "temperature": temperature,
        "max_tokens": max_tokens,
    }

    try:
        async with httpx.AsyncClient(timeout=timeout_seconds) as client:
            response = await client.post(endpoint, headers=_headers(title), json=payload)
    except httpx.TimeoutException as exc:
        raise ProviderError(f"OpenRouter request timed out after {timeout_seconds:.0f}s") from exc
    except httpx.HTTPError as exc:
        raise ProviderError(f"OpenRouter request failed: {exc}") from exc

    if response.status_code >= 400:
        raise ProviderError(
            f"OpenRouter request failed ({response.status_code}): {response.text[:500]}",
            status_code=response.status_code,
        )

    try:
        body = response.json()
    except ValueError as exc:
        raise ProviderError("OpenRouter returned a non-JSON response body.") from exc
    return completion_text(body)
