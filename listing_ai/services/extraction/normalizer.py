from __future__ import annotations

import re
from typing import Sequence

from listing_ai.services.extraction.types import RepairReport

# Private-use code point; never produced by the models we call.
APOSTROPHE_SENTINEL = "\ue000"

CONTRACTION_PATTERN = re.compile("(?<=\\w)['\u2019](?=(?:s|t|re|ve|d|ll|m)\\b)", re.IGNORECASE)
SINGLE_QUOTE_PATTERN = re.compile("['\u2018\u2019]")
TRAILING_COMMA_PATTERN = re.compile(r",(\s*[}\]])")
WHITESPACE_NOISE_PATTERN = re.compile(r"[ \t\r\n]{2,}|[\t\r\n]")


def _source_offset(position: int, deleted: Sequence[int]) -> int:
    """Map a position in text with ``deleted`` characters removed back to the source."""
    source = position
    for removed in deleted:
        if removed > source:
            break
        source += 1
    return source


def protect_contractions(text: str, report: RepairReport, *, base: int = 0) -> str:
    matches = list(CONTRACTION_PATTERN.finditer(text))
    if not matches:
        return text
    for match in matches:
        report.add("protected_contraction", offset=base + match.start())
    return CONTRACTION_PATTERN.sub(APOSTROPHE_SENTINEL, text)


def strip_single_quotes(text: str, report: RepairReport, *, base: int = 0) -> str:
    """Delete emphasis quotes such as 'Phối 5 bộ'.

    Models never pair these consistently, so they are dropped rather than
    promoted to JSON string delimiters.
    """
    matches = list(SINGLE_QUOTE_PATTERN.finditer(text))
    if not matches:
        return text
    for match in matches:
        report.add("stripped_single_quote", offset=base + match.start())
    return SINGLE_QUOTE_PATTERN.sub("", text)


def restore_contractions(text: str) -> str:
    if APOSTROPHE_SENTINEL not in text:
        return text
    return text.replace(APOSTROPHE_SENTINEL, "'")


def remove_trailing_commas(
    text: str,
    report: RepairReport,
    *,
    base: int = 0,
    deleted: Sequence[int] = (),
) -> str:
    matches = list(TRAILING_COMMA_PATTERN.finditer(text))
    if not matches:
        return text
    for match in matches:
        report.add("removed_trailing_comma", offset=base + _source_offset(match.start(), deleted))
    return TRAILING_COMMA_PATTERN.sub(r"\1", text)


def flatten_whitespace(text: str, report: RepairReport) -> str:
    flattened, replaced = WHITESPACE_NOISE_PATTERN.subn(" ", text)
    if replaced:
        report.add("flattened_whitespace", count=replaced)
    return flattened


def normalize(text: str, report: RepairReport, *, base: int = 0) -> str:
    """Rewrite conversational characters that break strict JSON.

    The order is fixed: contractions are shielded before stray quotes are
    deleted, and whitespace is flattened last so trailing commas followed by
    line breaks are still recognized.

    Reported offsets point into ``text`` as given, shifted by ``base``. The
    engine passes the window start, so every offset indexes the
    fence-stripped completion.
    """
    shielded = protect_contractions(text, report, base=base)
    deleted = [match.start() for match in SINGLE_QUOTE_PATTERN.finditer(shielded)]
    normalized = strip_single_quotes(shielded, report, base=base)
    normalized = restore_contractions(normalized)
    normalized = remove_trailing_commas(normalized, report, base=base, deleted=deleted)
    return flatten_whitespace(normalized, report)
