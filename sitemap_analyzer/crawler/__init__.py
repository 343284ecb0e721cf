# ==============================================================================
# crawler/__init__.py — Web Crawling Components
# ==============================================================================
# Purpose: Components for fetching sitemaps and extracting page content
# ==============================================================================

from .fetch_client import RateLimitedClient
from .sitemap_crawler import SitemapCrawler
from .page_extractor import PageExtractor

__all__ = [
    'RateLimitedClient',
    'SitemapCrawler',
    'PageExtractor',
]
