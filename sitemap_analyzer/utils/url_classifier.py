# ==============================================================================
# url_classifier.py — URL classification
# ==============================================================================
# Purpose: Map URLs to page categories with ordered prefix rules
# Sections: Imports, Public exports, Public API, Helper Functions
# ==============================================================================

# ==============================================================================
# Imports
# ==============================================================================

# Standard Library -----
from typing import Iterable, List, Optional, Tuple
from urllib.parse import urlparse

# Sitemap Analyzer ----
from sitemap_analyzer.models.config_models import UrlRules
from sitemap_analyzer.models.page_models import CategoryBuckets, PageType
from sitemap_analyzer.services.config_service import config_service
from sitemap_analyzer.utils.observer import PipelineObserver

# ==============================================================================
# Public exports
# ==============================================================================
__all__ = ["classify", "categorize_urls"]

# ==============================================================================
# Public API Functions
# ==============================================================================

def classify(url: str, rules: Optional[UrlRules] = None, observer: Optional[PipelineObserver] = None) -> PageType:
    """
    Classify a URL by its path.

    Rules are checked in a fixed order and the first match wins:

    1. root path -> static
    2. primary product prefix -> product
    3. blog content prefix -> blog
    4. category prefix -> category
    5. product category prefix outside /blog/ -> category
    6. any product prefix -> product
    7. blog prefix without a blog category sub-prefix -> blog
    8. static prefix on the query-less path -> static
    9. otherwise -> others

    Empty, non-string and unparseable input is static. Never raises.

    Args:
        url: URL to classify
        rules: Prefix tables, defaults to url_rules.yaml
        observer: Optional sink for the classification event

    Returns:
        The page category
    """
    page_type, rule = _classify(url, rules or config_service.load_url_rules())
    if observer is not None:
        observer.emit("classify", url=url, type=page_type.value, rule=rule)
    return page_type

def categorize_urls(
    urls: Iterable[str],
    rules: Optional[UrlRules] = None,
    observer: Optional[PipelineObserver] = None,
) -> CategoryBuckets:
    """Classify every URL into ordered, de-duplicated buckets."""
    rules = rules or config_service.load_url_rules()
    buckets = CategoryBuckets()
    for url in urls:
        buckets.add(classify(url, rules, observer), url)
    return buckets

# ==============================================================================
# Helper Functions
# ==============================================================================

def _classify(url: str, rules: UrlRules) -> Tuple[PageType, str]:
    if not url or not isinstance(url, str):
        return PageType.STATIC, "invalid"

    try:
        path = urlparse(url).path.lower() or "/"
    except ValueError:
        return PageType.STATIC, "invalid"

    if path == "/":
        return PageType.STATIC, "root"

    if _starts_with_any(path, rules.primary_product_prefixes):
        return PageType.PRODUCT, "primary_product"

    if _starts_with_any(path, rules.blog_content_prefixes):
        return PageType.BLOG, "blog_content"

    if _starts_with_any(path, rules.category_prefixes):
        return PageType.CATEGORY, "category"

    if _starts_with_any(path, rules.product_category_prefixes) and "/blog/" not in path:
        return PageType.CATEGORY, "product_category"

    if _starts_with_any(path, rules.product_prefixes):
        return PageType.PRODUCT, "product"

    if _starts_with_any(path, rules.blog_prefixes) and not _contains_any(path, rules.blog_category_prefixes):
        return PageType.BLOG, "blog"

    # urlparse already drops the query string
    if _starts_with_any(path, rules.static_prefixes):
        return PageType.STATIC, "static"

    return PageType.OTHERS, "fallback"

def _starts_with_any(path: str, prefixes: List[str]) -> bool:
    return any(path.startswith(prefix) for prefix in prefixes)

def _contains_any(path: str, fragments: List[str]) -> bool:
    return any(fragment in path for fragment in fragments)
