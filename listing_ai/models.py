from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

OptimizeMode = Literal["keyword", "segmentation", "painpoint"]
AdPlatform = Literal["facebook", "instagram", "tiktok"]
FailureReason = Literal[
    "no_json_found",
    "truncated_beyond_recovery",
    "decode_error",
    "schema_mismatch",
]


class ProductInput(BaseModel):
    productTitle: str = Field(min_length=1)
    productDescription: str = ""


class SuggestDataRequest(ProductInput):
    pass


class OptimizeRequest(ProductInput):
    mode: OptimizeMode = "keyword"
    tone: str = "professional"
    keywords: list[str] = Field(default_factory=list)
    segmentName: Optional[str] = None
    painpoint: Optional[str] = None
    customer: Optional[str] = None


class GenerateAdsRequest(ProductInput):
    platform: AdPlatform = "facebook"
    format: str = "single_image"
    numVersions: int = Field(default=3, ge=1, le=5)
    language: str = "vi"
    angle: Optional[str] = None
    aiModel: Optional[str] = None


class LandingPageRequest(ProductInput):
    style: str = "modern"
    language: str = "vi"
    aiModel: Optional[str] = None


class SegmentationRequest(ProductInput):
    targetMarket: str = "Vietnam"
    language: str = "vi"


class SegmentContentRequest(ProductInput):
    segment: dict[str, Any]
    language: str = "vi"


class DiscoverProductsRequest(BaseModel):
    category: str = Field(min_length=1)
    market: str = "Vietnam"
    count: int = Field(default=5, ge=1, le=10)


class RepairActionModel(BaseModel):
    kind: str
    offset: Optional[int] = None
    count: Optional[int] = None


class GenerationResponse(BaseModel):
    endpoint: str
    model: str
    data: Any
    usedFallback: bool = False
    failureReason: Optional[FailureReason] = None
    repairs: list[RepairActionModel] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error: str


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
