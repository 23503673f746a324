from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from listing_ai.ai_models import ModelTable
from listing_ai.config import settings
from listing_ai.models import (
    DiscoverProductsRequest,
    GenerateAdsRequest,
    GenerationResponse,
    LandingPageRequest,
    OptimizeRequest,
    RepairActionModel,
    SegmentationRequest,
    SegmentContentRequest,
    SuggestDataRequest,
)
from listing_ai.prompts.templates import (
    ENDPOINT_TITLES,
    ads_prompt,
    discover_products_prompt,
    landing_page_prompt,
    optimize_prompt,
    segment_content_prompt,
    segmentation_prompt,
    suggest_data_prompt,
)
from listing_ai.providers.factory import build_llm_fn
from listing_ai.providers.protocols import LlmFn
from listing_ai.services.extraction import ExtractionFailure, RootKind
from listing_ai.services.fallbacks import select_fallback
from listing_ai.services.llm_json import extract_json
from listing_ai.services.llm_trace import record_extraction_trace, trace_endpoint

logger = logging.getLogger(__name__)


def _missing_keys(value: Any, required_keys: Sequence[str], root: RootKind) -> list[str] | None:
    """Return the missing keys, or None when the value has the wrong shape.

    Array roots must be a non-empty list of objects, each holding every
    required key.
    """
    if root == "array":
        if not isinstance(value, list) or not value or not all(isinstance(item, dict) for item in value):
            return None
        return sorted({key for item in value for key in required_keys if key not in item})
    if not isinstance(value, dict):
        return None
    return [key for key in required_keys if key not in value]


def _optimize_focus(request: OptimizeRequest) -> str:
    if request.mode == "segmentation":
        return f"customer segment {request.segmentName or 'general'}"
    if request.mode == "painpoint":
        return f"pain point '{request.painpoint or 'n/a'}' for {request.customer or 'general customers'}"
    return f"keywords {', '.join(request.keywords) or 'n/a'}"


class ContentService:
    """Calls the model for each content endpoint and recovers its JSON.

    Every model response goes through the extraction engine exactly once.
    Unrecoverable or wrongly shaped output is replaced with the endpoint's
    fallback payload; only provider failures propagate.
    """

    def __init__(
        self,
        *,
        llm_fn: Optional[LlmFn] = None,
        models: Optional[ModelTable] = None,
        snippet_chars: Optional[int] = None,
    ) -> None:
        self._llm_fn = llm_fn or build_llm_fn()
        self._models = models or ModelTable()
        self._snippet_chars = snippet_chars or settings.extraction_snippet_chars

    async def _generate(
        self,
        endpoint: str,
        request: Any,
        *,
        system_prompt: str,
        user_prompt: str,
        required_keys: Sequence[str] = (),
        root: RootKind = "object",
        requested_model: Optional[str] = None,
    ) -> GenerationResponse:
        config = self._models.resolve(endpoint, requested_model=requested_model)

        with trace_endpoint(endpoint, {"maxTokens": config.max_tokens, "rootKind": root}):
            raw = await self._llm_fn(
                model=config.model,
                system_prompt=system_prompt,
                user_prompt=user_prompt,
                temperature=config.temperature,
                max_tokens=config.max_tokens,
                timeout_seconds=config.timeout_seconds,
                title=ENDPOINT_TITLES[endpoint],
            )
            result = extract_json(raw, root=root, snippet_chars=self._snippet_chars)
            repairs = [RepairActionModel(**action.as_dict()) for action in result.report.actions]

            failure_reason: Optional[str] = None
            snippet: Optional[str] = None
            if isinstance(result, ExtractionFailure):
                failure_reason = result.reason
                snippet = result.raw_snippet
                logger.warning(
                    "%s: model output could not be recovered (%s: %s); snippet=%r",
                    endpoint,
                    result.reason,
                    result.message,
                    snippet,
                )
            else:
                missing = _missing_keys(result.value, required_keys, root)
                if missing is None or missing:
                    failure_reason = "schema_mismatch"
                    logger.warning(
                        "%s: model JSON does not match the expected shape (missing=%s)",
                        endpoint,
                        missing if missing is not None else f"<{root} expected>",
                    )

            used_fallback = failure_reason is not None
            data = select_fallback(endpoint, request) if used_fallback else result.value
            record_extraction_trace(
                model=config.model,
                used_fallback=used_fallback,
                failure_reason=failure_reason,
                repairs=result.report.kinds(),
                snippet=snippet,
            )

        return GenerationResponse(
            endpoint=endpoint,
            model=config.model,
            data=data,
            usedFallback=used_fallback,
            failureReason=failure_reason,
            repairs=repairs,
        )

    async def suggest_data(self, request: SuggestDataRequest) -> GenerationResponse:
        system_prompt, user_prompt = suggest_data_prompt(request.productTitle, request.productDescription)
        return await self._generate(
            "suggest_data",
            request,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            required_keys=("keywords", "target_customers"),
        )

    async def optimize(self, request: OptimizeRequest) -> GenerationResponse:
        system_prompt, user_prompt = optimize_prompt(
            request.productTitle,
            request.productDescription,
            mode=request.mode,
            tone=request.tone,
            focus=_optimize_focus(request),
        )
        return await self._generate(
            "optimize",
            request,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            required_keys=("new_title", "new_description"),
        )

    async def generate_ads(self, request: GenerateAdsRequest) -> GenerationResponse:
        system_prompt, user_prompt = ads_prompt(
            request.productTitle,
            request.productDescription,
            platform=request.platform,
            ad_format=request.format,
            num_versions=request.numVersions,
            language=request.language,
            angle=request.angle,
        )
        return await self._generate(
            "generate_ads",
            request,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            required_keys=("versions",),
            requested_model=request.aiModel,
        )

    async def generate_landing_page(self, request: LandingPageRequest) -> GenerationResponse:
        system_prompt, user_prompt = landing_page_prompt(
            request.productTitle,
            request.productDescription,
            style=request.style,
            language=request.language,
        )
        return await self._generate(
            "generate_landing_page",
            request,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            required_keys=("html",),
            requested_model=request.aiModel,
        )

    async def suggest_segmentation(self, request: SegmentationRequest) -> GenerationResponse:
        system_prompt, user_prompt = segmentation_prompt(
            request.productTitle,
            request.productDescription,
            target_market=request.targetMarket,
            language=request.language,
        )
        return await self._generate(
            "suggest_segmentation",
            request,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            required_keys=("segmentations",),
        )

    async def generate_content_from_segmentation(self, request: SegmentContentRequest) -> GenerationResponse:
        system_prompt, user_prompt = segment_content_prompt(
            request.productTitle,
            request.productDescription,
            segment=request.segment,
            language=request.language,
        )
        return await self._generate(
            "generate_content_from_segmentation",
            request,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            required_keys=("title", "description"),
        )

    async def discover_products(self, request: DiscoverProductsRequest) -> GenerationResponse:
        system_prompt, user_prompt = discover_products_prompt(
            request.category,
            market=request.market,
            count=request.count,
        )
        return await self._generate(
            "discover_products",
            request,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            required_keys=("product_name",),
            root="array",
        )
