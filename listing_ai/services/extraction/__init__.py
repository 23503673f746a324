from listing_ai.services.extraction.fences import strip_fences
from listing_ai.services.extraction.normalizer import normalize
from listing_ai.services.extraction.repair import close_truncated
from listing_ai.services.extraction.scanner import count_unclosed, iter_structural, scan_window
from listing_ai.services.extraction.types import (
    ExtractionErrorKind,
    ExtractionFailure,
    ExtractionResult,
    ExtractionSuccess,
    ExtractionWindow,
    NoJsonFoundError,
    RepairAction,
    RepairReport,
    RootKind,
)

__all__ = [
    "ExtractionErrorKind",
    "ExtractionFailure",
    "ExtractionResult",
    "ExtractionSuccess",
    "ExtractionWindow",
    "NoJsonFoundError",
    "RepairAction",
    "RepairReport",
    "RootKind",
    "close_truncated",
    "count_unclosed",
    "iter_structural",
    "normalize",
    "scan_window",
    "strip_fences",
]
