from __future__ import annotations

from typing import Awaitable, Callable, Optional, Protocol


class LlmProvider(Protocol):
    async def __call__(
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 2000,
        timeout_seconds: float = 60.0,
        title: Optional[str] = None,
    ) -> str: ...


class ProviderError(RuntimeError):
    """The model call itself failed; there is no completion to extract from."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


LlmFn = Callable[..., Awaitable[str]]
