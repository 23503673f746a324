from __future__ import annotations

from typing import Iterator

import httpx
import pytest

from listing_ai.config import settings
from listing_ai.providers import openrouter
from listing_ai.providers.protocols import ProviderError


@pytest.fixture
def api_key() -> Iterator[str]:
    original = settings.openrouter_api_key
    object.__setattr__(settings, "openrouter_api_key", "test-key")
    try:
        yield "test-key"
    finally:
        object.__setattr__(settings, "openrouter_api_key", original)


def _patch_transport(monkeypatch: pytest.MonkeyPatch, handler) -> None:  # type: ignore[no-untyped-def]
    real_client = httpx.AsyncClient

    def client_factory(*args, **kwargs):  # type: ignore[no-untyped-def]
        return real_client(*args, transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(openrouter.httpx, "AsyncClient", client_factory)


def test_completion_text_reads_first_choice() -> None:
    body = {"choices": [{"message": {"content": '{"a": 1}'}}]}
    assert openrouter.completion_text(body) == '{"a": 1}'


@pytest.mark.parametrize("body", [None, {}, {"choices": []}, {"choices": [{"message": {"content": None}}]}])
def test_completion_text_tolerates_empty_bodies(body: object) -> None:
    assert openrouter.completion_text(body) == ""


@pytest.mark.asyncio
async def test_chat_completion_requires_api_key() -> None:
    original = settings.openrouter_api_key
    object.__setattr__(settings, "openrouter_api_key", None)
    try:
        with pytest.raises(ProviderError):
            await openrouter.chat_completion(model="m", system_prompt="s", user_prompt="u")
    finally:
        object.__setattr__(settings, "openrouter_api_key", original)


@pytest.mark.asyncio
async def test_chat_completion_posts_openrouter_payload(monkeypatch: pytest.MonkeyPatch, api_key: str) -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["title"] = request.headers.get("X-Title")
        seen["body"] = request.read().decode("utf-8")
        return httpx.Response(200, json={"choices": [{"message": {"content": "```json\n{}\n```"}}]})

    _patch_transport(monkeypatch, handler)

    content = await openrouter.chat_completion(
        model="openai/gpt-4o-mini",
        system_prompt="Return JSON",
        user_prompt="Hi",
        max_tokens=50,
        title="Product Optimize Content",
    )

    assert content == "```json\n{}\n```"
    assert str(seen["url"]).endswith("/chat/completions")
    assert seen["auth"] == f"Bearer {api_key}"
    assert seen["title"] == "Product Optimize Content"
    assert '"max_tokens": 50' in str(seen["body"]) or '"max_tokens":50' in str(seen["body"])


@pytest.mark.asyncio
async def test_chat_completion_raises_on_http_error(monkeypatch: pytest.MonkeyPatch, api_key: str) -> None:
    _ = api_key
    _patch_transport(monkeypatch, lambda request: httpx.Response(429, text="rate limited"))

    with pytest.raises(ProviderError) as raised:
        await openrouter.chat_completion(model="m", system_prompt="s", user_prompt="u")

    assert raised.value.status_code == 429
