from __future__ import annotations

from typing import Iterator

from listing_ai.services.extraction.types import (
    ROOT_DELIMITERS,
    ExtractionWindow,
    NoJsonFoundError,
    RootKind,
)


def iter_structural(text: str, start: int = 0) -> Iterator[tuple[int, str]]:
    """Yield (offset, char) for every character outside double-quoted strings.

    Backslash escapes inside strings are honored, so an escaped quote does
    not end the literal. Quote characters themselves are not yielded.
    """
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
            continue
        yield index, char


def count_unclosed(text: str, opener: str = "{", closer: str = "}") -> int:
    depth = 0
    for _, char in iter_structural(text):
        if char == opener:
            depth += 1
        elif char == closer and depth > 0:
            depth -= 1
    return depth


def scan_window(text: str, root: RootKind = "object") -> ExtractionWindow:
    """Locate the first top-level JSON value of the requested root kind.

    The window opens at the first root opener and closes where the
    string-aware depth returns to zero. When it never does, the window ends
    at the last closer anywhere after the start, or runs to the end of the
    text when there is none; both cases are flagged as truncated.
    """
    opener, closer = ROOT_DELIMITERS[root]
    start = text.find(opener)
    if start < 0:
        raise NoJsonFoundError(f"No JSON {root} found in model output.")

    depth = 0
    for index, char in iter_structural(text, start):
        if char == opener:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                return ExtractionWindow(start=start, end=index + 1)

    last_closer = text.rfind(closer, start + 1)
    if last_closer > start:
        return ExtractionWindow(start=start, end=last_closer + 1, truncated=True)
    return ExtractionWindow(start=start, end=len(text), truncated=True)
