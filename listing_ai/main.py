from __future__ import annotations

import logging
from typing import Awaitable, Callable

import uvicorn
from fastapi import FastAPI, HTTPException, Response

from listing_ai.config import settings
from listing_ai.logging_setup import configure_logging
from listing_ai.models import (
    DiscoverProductsRequest,
    ErrorResponse,
    GenerateAdsRequest,
    GenerationResponse,
    LandingPageRequest,
    OptimizeRequest,
    SegmentationRequest,
    SegmentContentRequest,
    SuggestDataRequest,
    now_iso,
)
from listing_ai.providers.protocols import ProviderError
from listing_ai.services.content_service import ContentService
from listing_ai.services.llm_trace import ExtractionTraceCollector, bind_trace_collector

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Listing AI", version="0.1.0")
content_service = ContentService()

PROVIDER_ERROR_RESPONSES = {502: {"model": ErrorResponse}}


async def _traced(call: Callable[[], Awaitable[GenerationResponse]], response: Response) -> GenerationResponse:
    """Run one endpoint call under a fresh extraction trace.

    Provider failures become 502s. The trace is summarized in response
    headers, and fallbacks are logged once per request.
    """
    collector = ExtractionTraceCollector()
    with bind_trace_collector(collector):
        try:
            result = await call()
        except ProviderError as error:
            raise HTTPException(status_code=502, detail=str(error)) from error

    response.headers.update(collector.response_headers())
    for entry in collector.fallbacks():
        logger.info("%s served fallback content (%s, model=%s)", entry.endpoint, entry.failure_reason, entry.model)
    return result


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "timestamp": now_iso(), "providerMode": settings.provider_mode}


@app.post("/v1/optimize/suggest-data", response_model=GenerationResponse, responses=PROVIDER_ERROR_RESPONSES)
async def suggest_data(request: SuggestDataRequest, response: Response) -> GenerationResponse:
    return await _traced(lambda: content_service.suggest_data(request), response)


@app.post("/v1/optimize/optimize", response_model=GenerationResponse, responses=PROVIDER_ERROR_RESPONSES)
async def optimize(request: OptimizeRequest, response: Response) -> GenerationResponse:
    return await _traced(lambda: content_service.optimize(request), response)


@app.post("/v1/optimize/generate-ads", response_model=GenerationResponse, responses=PROVIDER_ERROR_RESPONSES)
async def generate_ads(request: GenerateAdsRequest, response: Response) -> GenerationResponse:
    return await _traced(lambda: content_service.generate_ads(request), response)


@app.post(
    "/v1/optimize/generate-landing-page",
    response_model=GenerationResponse,
    responses=PROVIDER_ERROR_RESPONSES,
)
async def generate_landing_page(request: LandingPageRequest, response: Response) -> GenerationResponse:
    return await _traced(lambda: content_service.generate_landing_page(request), response)


@app.post(
    "/v1/optimize/suggest-segmentation",
    response_model=GenerationResponse,
    responses=PROVIDER_ERROR_RESPONSES,
)
async def suggest_segmentation(request: SegmentationRequest, response: Response) -> GenerationResponse:
    return await _traced(lambda: content_service.suggest_segmentation(request), response)


@app.post(
    "/v1/optimize/generate-content-from-segmentation",
    response_model=GenerationResponse,
    responses=PROVIDER_ERROR_RESPONSES,
)
async def generate_content_from_segmentation(request: SegmentContentRequest, response: Response) -> GenerationResponse:
    return await _traced(lambda: content_service.generate_content_from_segmentation(request), response)


@app.post("/v1/optimize/discover-products", response_model=GenerationResponse, responses=PROVIDER_ERROR_RESPONSES)
async def discover_products(request: DiscoverProductsRequest, response: Response) -> GenerationResponse:
    return await _traced(lambda: content_service.discover_products(request), response)


if __name__ == "__main__":
    uvicorn.run("listing_ai.main:app", host="0.0.0.0", port=settings.port, reload=False)
