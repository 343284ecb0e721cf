# ==============================================================================
# sitemap_analyzer/__init__.py — Sitemap Analyzer Application
# ==============================================================================
# Purpose: Main application package with public API
# ==============================================================================

# Version information
__version__ = "1.0.0"

# Service layer (config first: crawler and utils read it at import time)
from .services import config_service, ConfigService, CoverageService, SiteAnalysisService, create_static_page_data

# Crawling
from .crawler import RateLimitedClient, SitemapCrawler, PageExtractor

# Models
from .models import (
    PageType,
    PageRecord,
    CategoryBuckets,
    PipelineResult,
    PipelineStats,
)

# Utilities
from .utils import BatchScheduler, classify, categorize_urls, LoggingObserver, RecordingObserver

__all__ = [
    # Services
    'config_service',
    'ConfigService',
    'CoverageService',
    'SiteAnalysisService',
    'create_static_page_data',

    # Crawling
    'RateLimitedClient',
    'SitemapCrawler',
    'PageExtractor',

    # Models
    'PageType',
    'PageRecord',
    'CategoryBuckets',
    'PipelineResult',
    'PipelineStats',

    # Utilities
    'BatchScheduler',
    'classify',
    'categorize_urls',
    'LoggingObserver',
    'RecordingObserver',

    # Metadata
    '__version__',
]
