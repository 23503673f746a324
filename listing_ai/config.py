from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


def _as_bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _as_int(value: Optional[str], default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _as_nonempty(value: Optional[str], default: str) -> str:
    if value is None:
        return default
    trimmed = value.strip()
    return trimmed if trimmed else default


@dataclass(frozen=True)
class Settings:
    port: int = _as_int(os.getenv("PORT"), 8790)
    log_level: str = _as_nonempty(os.getenv("LOG_LEVEL"), "INFO").upper()
    provider_mode_raw: Optional[str] = os.getenv("PROVIDER_MODE")
    use_mock_providers: bool = _as_bool(os.getenv("USE_MOCK_PROVIDERS"), True)

    openrouter_api_key: Optional[str] = os.getenv("OPENROUTER_API_KEY")
    openrouter_base_url: str = _as_nonempty(os.getenv("OPENROUTER_BASE_URL"), "https://openrouter.ai/api/v1")
    openrouter_http_referer: str = _as_nonempty(os.getenv("OPENROUTER_HTTP_REFERER"), "http://localhost:3000")
    openrouter_app_title: str = _as_nonempty(os.getenv("OPENROUTER_APP_TITLE"), "Listing AI")

    extraction_snippet_chars: int = _as_int(os.getenv("EXTRACTION_SNIPPET_CHARS"), 200)

    @property
    def provider_mode(self) -> str:
        raw = (self.provider_mode_raw or "").strip().lower()
        if raw in {"mock", "prod"}:
            return raw
        return "mock" if self.use_mock_providers else "prod"

    def has_openrouter_credentials(self) -> bool:
        return bool(self.openrouter_api_key and self.openrouter_api_key.strip())


settings = Settings()
