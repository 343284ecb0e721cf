# ==============================================================================
# analysis_service.py — Site analysis orchestration
# ==============================================================================
# Purpose: Orchestrate discovery, classification, extraction and coverage
#          into one pipeline result
# Sections: Imports, Public exports, Main Classes, Helper Functions
# ==============================================================================

# ==============================================================================
# Imports
# ==============================================================================

# Standard Library -----
from typing import Dict, List, Optional, Tuple, Union

# Sitemap Analyzer ----
from sitemap_analyzer.crawler.fetch_client import RateLimitedClient
from sitemap_analyzer.crawler.page_extractor import PageExtractor, fallback_record
from sitemap_analyzer.crawler.sitemap_crawler import SitemapCrawler
from sitemap_analyzer.models.page_models import CategoryBuckets, PageRecord, PageType, PipelineResult
from sitemap_analyzer.services.config_service import config_service
from sitemap_analyzer.services.coverage_service import CoverageService
from sitemap_analyzer.utils.batch_scheduler import BatchScheduler, create_batch_scheduler_from_config, is_failure
from sitemap_analyzer.utils.observer import LoggingObserver, PipelineObserver
from sitemap_analyzer.utils.url_classifier import categorize_urls
from sitemap_analyzer.utils.url_utils import is_valid_url, unique_urls

# ==============================================================================
# Public exports
# ==============================================================================
__all__ = ["SiteAnalysisService", "apply_url_cap"]

MaxUrls = Optional[Union[int, str]]

# ==============================================================================
# Main Classes
# ==============================================================================

class SiteAnalysisService:
    """
    Main orchestration service for site analysis.

    The client must already be open (``async with``); every collaborator not
    passed in is built from configuration and shares the same observer.
    """

    def __init__(
        self,
        client: RateLimitedClient,
        observer: Optional[PipelineObserver] = None,
        scheduler: Optional[BatchScheduler] = None,
        crawler: Optional[SitemapCrawler] = None,
        extractor: Optional[PageExtractor] = None,
        coverage: Optional[CoverageService] = None,
        probe_common_pages: Optional[bool] = None,
    ):
        self.client = client
        self.observer = observer or LoggingObserver()
        self.scheduler = scheduler or create_batch_scheduler_from_config(config_service, self.observer)
        self.crawler = crawler or SitemapCrawler(
            client, self.scheduler, self.observer, max_depth=config_service.max_sitemap_depth
        )
        self.extractor = extractor or PageExtractor(
            client, observer=self.observer, timeout=config_service.page_timeout
        )
        self.coverage = coverage or CoverageService(
            client,
            self.scheduler,
            observer=self.observer,
            category_crawl_limit=config_service.category_crawl_limit,
        )
        if probe_common_pages is None:
            probe_common_pages = config_service.probe_common_pages
        self.probe_common_pages = probe_common_pages

    async def analyze_site(self, entry_url: str, max_urls: MaxUrls = "all") -> PipelineResult:
        """
        Discover a site's URLs and run the pipeline over them.

        Args:
            entry_url: Site root or sitemap URL
            max_urls: Cap applied to the discovered URLs, or "all"/None

        Returns:
            Pipeline result; empty when discovery finds nothing
        """
        urls = apply_url_cap(await self.crawler.discover(entry_url), max_urls)
        self.observer.emit("pipeline.discovered", entry=entry_url, urls=len(urls))
        return await self.run(urls, site_url=entry_url)

    async def discover_and_classify(self, entry_url: str, max_urls: MaxUrls = "all") -> CategoryBuckets:
        """Discovery and classification only, without fetching pages."""
        urls = apply_url_cap(await self.crawler.discover(entry_url), max_urls)
        return categorize_urls(urls, self.coverage.rules, self.observer)

    async def run(self, urls: List[str], site_url: Optional[str] = None) -> PipelineResult:
        """
        Classify, supplement, extract and backfill.

        Args:
            urls: Page URLs to analyze
            site_url: URL whose origin is used for supplementary crawling and
                synthetic records, defaults to the first URL

        Returns:
            Records keyed by URL with counts taken from the records' types
        """
        urls = unique_urls(url for url in urls if is_valid_url(url))
        if not urls:
            self.observer.emit("pipeline.empty")
            return PipelineResult()

        site_url = site_url or urls[0]

        if self.probe_common_pages:
            urls = await self.coverage.probe_common_pages(site_url, urls)

        buckets = categorize_urls(urls, self.coverage.rules, self.observer)
        self.observer.emit("pipeline.classified", **buckets.counts())

        await self.coverage.supplement(buckets, site_url)

        work: List[Tuple[str, PageType]] = [
            (url, page_type) for page_type in PageType for url in buckets.urls(page_type)
        ]
        results = await self.scheduler.run(work, self._extract_item)

        records: Dict[str, PageRecord] = {}
        for (url, page_type), result in zip(work, results):
            record = fallback_record(url, result["error"]) if is_failure(result) else result
            update = {"type": page_type}
            # others has no payload variant
            if page_type == PageType.OTHERS:
                update["details"] = None
            records[url] = record.model_copy(update=update)

        self.coverage.inject_synthetic_records(records, site_url, buckets.all_urls())
        self.coverage.ensure_blog_record(records, site_url)

        result = PipelineResult.from_records(records)
        self.observer.emit("pipeline.done", **result.stats.model_dump())
        return result

    async def _extract_item(self, item: Tuple[str, PageType]) -> PageRecord:
        url, page_type = item
        return await self.extractor.extract(url, page_type)

# ==============================================================================
# Helper Functions
# ==============================================================================

def apply_url_cap(urls: List[str], max_urls: MaxUrls) -> List[str]:
    """
    Truncate discovered URLs.

    Args:
        urls: Discovered URLs
        max_urls: Non-negative integer, numeric string, or "all"/None for no cap

    Returns:
        The first max_urls URLs
    """
    if max_urls is None or (isinstance(max_urls, str) and max_urls.strip().lower() == "all"):
        return list(urls)

    if isinstance(max_urls, bool):
        raise ValueError("max_urls must be an integer or 'all'")

    try:
        cap = int(max_urls)
    except (TypeError, ValueError):
        raise ValueError(f"max_urls must be an integer or 'all', got {max_urls!r}")

    if cap < 0:
        raise ValueError("max_urls must not be negative")

    return list(urls[:cap])
