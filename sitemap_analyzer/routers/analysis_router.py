# ==============================================================================
# analysis_router.py — Site analysis endpoints
# ==============================================================================
# Purpose: Expose the analysis pipeline and URL discovery over HTTP
# Sections: Imports, Request models, Router definition
# ==============================================================================

# ==============================================================================
# Imports
# ==============================================================================

# Standard Library -----
from typing import Optional, Union

# Third Party -----
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

# Sitemap Analyzer ----
from sitemap_analyzer.crawler.fetch_client import create_client_from_config
from sitemap_analyzer.services.analysis_service import SiteAnalysisService, apply_url_cap
from sitemap_analyzer.services.config_service import config_service
from sitemap_analyzer.utils.observer import LoggingObserver
from sitemap_analyzer.utils.url_utils import is_valid_url

# ==============================================================================
# Request models
# ==============================================================================

class AnalyzeRequest(BaseModel):
    """Body of an analysis request"""
    sitemap_url: str
    max_urls: Optional[Union[int, str]] = "all"

# ==============================================================================
# Router definition
# ==============================================================================

router = APIRouter(prefix="/api/v1", tags=["analysis"])

def _validate_request(sitemap_url: str, max_urls: Optional[Union[int, str]]) -> None:
    if not is_valid_url(sitemap_url):
        raise HTTPException(status_code=400, detail=f"Invalid sitemap URL: {sitemap_url}")
    try:
        apply_url_cap([], max_urls)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.post("/analyze")
async def analyze_site(request: AnalyzeRequest):
    """Runs the full pipeline for a site or sitemap URL"""
    _validate_request(request.sitemap_url, request.max_urls)

    observer = LoggingObserver()
    async with create_client_from_config(config_service, observer) as client:
        service = SiteAnalysisService(client, observer=observer)
        result = await service.analyze_site(request.sitemap_url, request.max_urls)

    response = {
        "results": result.to_array(),
        "categorized": result.categorized(),
        "stats": result.stats.model_dump(),
    }
    if not result.records:
        response["warning"] = f"No URLs found for {request.sitemap_url}"
    return response

@router.get("/urls")
async def list_urls(sitemap_url: str, max_urls: Optional[str] = "all"):
    """Discovers and classifies a site's URLs without fetching the pages"""
    _validate_request(sitemap_url, max_urls)

    observer = LoggingObserver()
    async with create_client_from_config(config_service, observer) as client:
        service = SiteAnalysisService(client, observer=observer)
        buckets = await service.discover_and_classify(sitemap_url, max_urls)

    if not buckets.all_urls():
        return {"warning": f"No URLs found for {sitemap_url}", "urls": []}

    return {
        "urls": buckets.all_urls(),
        "categorized": buckets.model_dump(),
        "counts": buckets.counts(),
    }
