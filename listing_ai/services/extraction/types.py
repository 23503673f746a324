from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Union

RootKind = Literal["object", "array"]
ExtractionErrorKind = Literal["no_json_found", "truncated_beyond_recovery", "decode_error"]
RepairKind = Literal[
    "stripped_fence",
    "extracted_window",
    "protected_contraction",
    "stripped_single_quote",
    "removed_trailing_comma",
    "flattened_whitespace",
    "closed_braces",
    "closed_array",
]

ROOT_DELIMITERS: dict[str, tuple[str, str]] = {
    "object": ("{", "}"),
    "array": ("[", "]"),
}


class NoJsonFoundError(ValueError):
    """Raised by the boundary scanner when the text has no root opener at all."""


@dataclass(frozen=True)
class ExtractionWindow:
    start: int
    end: int
    truncated: bool = False

    def __post_init__(self) -> None:
        if self.start < 0 or self.end <= self.start:
            raise ValueError(f"Invalid extraction window ({self.start}, {self.end}).")

    def slice(self, text: str) -> str:
        return text[self.start : self.end]


@dataclass(frozen=True)
class RepairAction:
    """One applied repair.

    ``offset`` indexes the fence-stripped completion. Closing repairs point at
    the end of the extraction window, where the closers are appended.
    """

    kind: RepairKind
    offset: int | None = None
    count: int | None = None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"kind": self.kind}
        if self.offset is not None:
            payload["offset"] = self.offset
        if self.count is not None:
            payload["count"] = self.count
        return payload


@dataclass
class RepairReport:
    actions: list[RepairAction] = field(default_factory=list)

    def add(self, kind: RepairKind, *, offset: int | None = None, count: int | None = None) -> None:
        self.actions.append(RepairAction(kind=kind, offset=offset, count=count))

    def kinds(self) -> list[str]:
        return [action.kind for action in self.actions]

    def count(self, kind: RepairKind) -> int:
        return sum(1 for action in self.actions if action.kind == kind)

    def __contains__(self, kind: object) -> bool:
        return any(action.kind == kind for action in self.actions)

    def __len__(self) -> int:
        return len(self.actions)


@dataclass(frozen=True)
class ExtractionSuccess:
    value: Any
    report: RepairReport

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class ExtractionFailure:
    reason: ExtractionErrorKind
    raw_snippet: str
    message: str = ""
    report: RepairReport = field(default_factory=RepairReport)

    @property
    def ok(self) -> bool:
        return False


ExtractionResult = Union[ExtractionSuccess, ExtractionFailure]
