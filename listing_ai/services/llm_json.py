from __future__ import annotations

import json
import logging
from typing import Any

from listing_ai.services.extraction import (
    ExtractionFailure,
    ExtractionResult,
    ExtractionSuccess,
    NoJsonFoundError,
    RepairReport,
    RootKind,
    close_truncated,
    normalize,
    scan_window,
    strip_fences,
)

logger = logging.getLogger(__name__)

DEFAULT_SNIPPET_CHARS = 200
MIN_SNIPPET_CHARS = 16


class JsonExtractionError(ValueError):
    def __init__(self, failure: ExtractionFailure) -> None:
        super().__init__(f"{failure.reason}: {failure.message}")
        self.failure = failure


def bounded_snippet(text: str, *, max_chars: int = DEFAULT_SNIPPET_CHARS, around: int = 0) -> str:
    """Return at most ``max_chars`` characters of ``text`` centered on ``around``."""
    limit = max(max_chars, MIN_SNIPPET_CHARS)
    if len(text) <= limit:
        return text

    body = limit - 6
    start = max(0, min(around - body // 2, len(text) - body))
    end = start + body
    prefix = "..." if start > 0 else ""
    suffix = "..." if end < len(text) else ""
    return f"{prefix}{text[start:end]}{suffix}"


def extract_json(
    raw: str,
    *,
    root: RootKind = "object",
    snippet_chars: int = DEFAULT_SNIPPET_CHARS,
) -> ExtractionResult:
    """Recover one JSON value from a raw model completion.

    Runs fence stripping, window scanning, lexical normalization and brace
    repair, then decodes with the standard library. Malformed input never
    raises; it comes back as an ``ExtractionFailure`` carrying a bounded
    snippet so callers can log it and substitute their own fallback.
    """
    report = RepairReport()
    text = strip_fences(raw or "", report)

    try:
        window = scan_window(text, root)
    except NoJsonFoundError as error:
        return ExtractionFailure(
            reason="no_json_found",
            raw_snippet=bounded_snippet(text, max_chars=snippet_chars),
            message=str(error),
            report=report,
        )

    if window.start > 0 or window.end < len(text):
        report.add("extracted_window", offset=window.start, count=window.end - window.start)

    normalized = normalize(window.slice(text), report, base=window.start)
    repaired = close_truncated(normalized, report, root, end_offset=window.end)

    try:
        value = json.loads(repaired)
    except (json.JSONDecodeError, RecursionError) as error:
        truncated = window.truncated or "closed_braces" in report or "closed_array" in report
        if isinstance(error, json.JSONDecodeError):
            around, message = error.pos, f"{error.msg} at offset {error.pos}"
        else:
            around, message = 0, "JSON nesting too deep to decode"
        failure = ExtractionFailure(
            reason="truncated_beyond_recovery" if truncated else "decode_error",
            raw_snippet=bounded_snippet(repaired, max_chars=snippet_chars, around=around),
            message=message,
            report=report,
        )
        logger.debug("JSON extraction failed (%s) after repairs %s", failure.reason, report.kinds())
        return failure

    if report.actions:
        logger.debug("JSON extracted after repairs %s", report.kinds())
    return ExtractionSuccess(value=value, report=report)


def parse_json_object(text: str) -> dict[str, Any]:
    result = extract_json(text)
    if isinstance(result, ExtractionFailure):
        raise JsonExtractionError(result)
    payload = result.value
    if not isinstance(payload, dict):
        raise ValueError("Model output JSON must be an object.")
    return payload
