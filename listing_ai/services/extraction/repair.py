from __future__ import annotations

from typing import Optional

from listing_ai.services.extraction.scanner import count_unclosed
from listing_ai.services.extraction.types import RepairReport, RootKind


def close_truncated(
    text: str,
    report: RepairReport,
    root: RootKind = "object",
    *,
    end_offset: Optional[int] = None,
) -> str:
    """Append the closing braces a tail-truncated completion is missing.

    This assumes the cut happened at an object boundary. Text cut inside a
    string literal or a nested array stays invalid and is left for the
    decoder to reject. ``end_offset`` is where the appended closers land in
    the caller's coordinates; it defaults to the end of ``text``.
    """
    offset = len(text) if end_offset is None else end_offset
    repaired = text
    missing_braces = count_unclosed(text, "{", "}")
    if missing_braces > 0:
        repaired = f"{repaired}{'}' * missing_braces}"
        report.add("closed_braces", offset=offset, count=missing_braces)

    if root == "array" and repaired.startswith("[") and count_unclosed(repaired, "[", "]") > 0:
        report.add("closed_array", offset=offset, count=1)
        repaired = f"{repaired}]"

    return repaired
