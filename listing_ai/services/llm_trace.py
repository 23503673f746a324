"""Per-request record of what the extraction engine did.

The HTTP layer binds one collector per request; the content service records
an entry for every completion it extracts. Nothing is recorded when no
collector is bound.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Iterator


@dataclass
class ExtractionTraceEntry:
    endpoint: str
    model: str
    used_fallback: bool
    failure_reason: str | None = None
    repairs: list[str] = field(default_factory=list)
    snippet: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class ExtractionTraceCollector:
    entries: list[ExtractionTraceEntry] = field(default_factory=list)

    def record(self, entry: ExtractionTraceEntry) -> None:
        self.entries.append(entry)

    def fallbacks(self) -> list[ExtractionTraceEntry]:
        return [entry for entry in self.entries if entry.used_fallback]

    def repair_kinds(self) -> list[str]:
        """Distinct repair kinds across all entries, in first-seen order."""
        seen: dict[str, None] = {}
        for entry in self.entries:
            for kind in entry.repairs:
                seen.setdefault(kind, None)
        return list(seen)

    def response_headers(self) -> dict[str, str]:
        return {
            "X-Extraction-Fallbacks": str(len(self.fallbacks())),
            "X-Extraction-Repairs": ",".join(self.repair_kinds()) or "none",
        }


_collector: ContextVar[ExtractionTraceCollector | None] = ContextVar("extraction_trace_collector", default=None)
_endpoint_scope: ContextVar[tuple[str, dict[str, Any]]] = ContextVar(
    "extraction_trace_endpoint", default=("unknown_endpoint", {})
)


@contextmanager
def bind_trace_collector(collector: ExtractionTraceCollector) -> Iterator[ExtractionTraceCollector]:
    token = _collector.set(collector)
    try:
        yield collector
    finally:
        _collector.reset(token)


@contextmanager
def trace_endpoint(endpoint: str, metadata: dict[str, Any] | None = None) -> Iterator[None]:
    token = _endpoint_scope.set((endpoint, dict(metadata or {})))
    try:
        yield
    finally:
        _endpoint_scope.reset(token)


def record_extraction_trace(
    *,
    model: str,
    used_fallback: bool,
    failure_reason: str | None = None,
    repairs: list[str] | None = None,
    snippet: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> None:
    collector = _collector.get()
    if collector is None:
        return

    endpoint, scope_metadata = _endpoint_scope.get()
    collector.record(
        ExtractionTraceEntry(
            endpoint=endpoint,
            model=model,
            used_fallback=used_fallback,
            failure_reason=failure_reason,
            repairs=list(repairs or []),
            snippet=snippet,
            metadata={**scope_metadata, **(metadata or {})},
        )
    )
