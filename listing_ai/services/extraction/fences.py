from __future__ import annotations

import re
from typing import Optional

from listing_ai.services.extraction.types import RepairReport

OPENING_FENCE_PATTERN = re.compile(r"\A```[A-Za-z0-9_+.\-]*[ \t]*(?:\r?\n)?")
CLOSING_FENCE_PATTERN = re.compile(r"(?:\r?\n)?[ \t]*```\Z")


def _strip_once(text: str) -> tuple[str, int]:
    stripped = text.strip()
    removed = 0

    opening = OPENING_FENCE_PATTERN.match(stripped)
    if opening:
        stripped = stripped[opening.end() :]
        removed += 1

    closing = CLOSING_FENCE_PATTERN.search(stripped)
    if closing:
        stripped = stripped[: closing.start()]
        removed += 1

    return stripped.strip(), removed


def strip_fences(text: str, report: Optional[RepairReport] = None) -> str:
    """Remove markdown code fences that wrap the whole completion.

    Only fences touching the very start or end of the trimmed text are
    removed, so fence-like sequences inside JSON string values survive.
    Nested wrappers are peeled until the text is stable, which keeps the
    function idempotent.
    """
    current = text.strip()
    while True:
        stripped, removed = _strip_once(current)
        if not removed:
            return current
        if report is not None:
            report.add("stripped_fence", count=removed)
        current = stripped
