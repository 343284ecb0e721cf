# ==============================================================================
# page_extractor.py — Page content extraction
# ==============================================================================
# Purpose: Fetch one page and extract its category-specific fields through
#          configured selector fallback chains
# Sections: Imports, Public exports, Main Classes, Helper Functions
# ==============================================================================

# ==============================================================================
# Imports
# ==============================================================================

# Standard Library -----
import json
import re
from datetime import date
from typing import Any, List, Optional

# Third Party -----
from bs4 import BeautifulSoup, Tag

# Sitemap Analyzer ----
from sitemap_analyzer.crawler.fetch_client import RateLimitedClient
from sitemap_analyzer.models.config_models import ExtractionConfig, SelectorRule
from sitemap_analyzer.models.page_models import (
    BlogDetails,
    CategoryDetails,
    PageComment,
    PageRecord,
    PageType,
    ProductDetails,
    StaticDetails,
)
from sitemap_analyzer.services.config_service import config_service
from sitemap_analyzer.utils.observer import PipelineObserver, NullObserver
from sitemap_analyzer.utils.selector_chain import all_matches, first_element_list, first_match
from sitemap_analyzer.utils.url_utils import humanize_slug, last_path_segment, resolve_url, unique_urls

# ==============================================================================
# Public exports
# ==============================================================================
__all__ = ["PageExtractor", "truncate"]

OG_IMAGE_RULE = SelectorRule(selector='meta[property="og:image"]', attrs=["content"], text=False)

DETECTION_ORDER = [PageType.BLOG, PageType.PRODUCT, PageType.CATEGORY]

BLOG_DESCRIPTION_LIMIT = 160
BLOG_CONTENT_LIMIT = 300
STATIC_DESCRIPTION_LIMIT = 200

# ==============================================================================
# Main Classes
# ==============================================================================

class PageExtractor:
    """
    Turns one URL into a PageRecord.

    Common fields are read for every page; the page shape (given by the
    caller or detected from URL and DOM markers) then selects the extractor
    that fills the category payload. Fetch or parse failures never raise:
    they produce a minimal fallback record carrying the error.
    """

    def __init__(
        self,
        client: RateLimitedClient,
        selectors: Optional[ExtractionConfig] = None,
        observer: Optional[PipelineObserver] = None,
        timeout: float = 15,
    ):
        self.client = client
        self.selectors = selectors or config_service.load_selectors()
        self.observer = observer or NullObserver()
        self.timeout = timeout

    async def extract(self, url: str, page_type: Optional[PageType] = None) -> PageRecord:
        """
        Fetch and extract one page.

        Args:
            url: Page URL
            page_type: Known page category; ``others`` or None means detect

        Returns:
            Extracted record, or the fallback record when anything fails
        """
        try:
            html = await self.client.get_text(url, timeout=self.timeout)
            record = self.parse(url, html, page_type)
        except Exception as e:
            self.observer.emit("extract.failed", url=url, error=str(e))
            return fallback_record(url, str(e))

        self.observer.emit("extract.done", url=url, type=record.type.value)
        return record

    def parse(self, url: str, html: str, page_type: Optional[PageType] = None) -> PageRecord:
        """Extract a record from already fetched HTML."""
        soup = BeautifulSoup(html, "html.parser")
        common = self.selectors.common

        title = first_match(soup, common.title) or _title_from_url(url) or url
        description = first_match(soup, common.description) or title

        if page_type is None or page_type == PageType.OTHERS:
            page_type = self._detect_type(url, soup)

        record = PageRecord(
            url=url,
            title=title,
            description=description,
            type=page_type,
            images=self._common_images(soup, url),
            breadcrumb=all_matches(soup, common.breadcrumb),
            structured_data=extract_structured_data(soup),
        )

        if page_type == PageType.PRODUCT:
            return self._extract_product(record, soup)
        if page_type == PageType.BLOG:
            return self._extract_blog(record, soup, html)
        if page_type == PageType.CATEGORY:
            return self._extract_category(record, soup)
        return self._extract_static(record, soup)

    # --------------------------------------------------------------------------
    # Type detection
    # --------------------------------------------------------------------------

    def _detect_type(self, url: str, soup: BeautifulSoup) -> PageType:
        """Blog, then product, then category; static when nothing matches."""
        url_lower = url.lower()
        for candidate in DETECTION_ORDER:
            markers = self.selectors.detection.get(candidate.value)
            if markers is None:
                continue
            if any(marker in url_lower for marker in markers.url_markers):
                return candidate
            if markers.dom_markers and soup.select_one(markers.dom_markers) is not None:
                return candidate
        return PageType.STATIC

    def _common_images(self, soup: BeautifulSoup, url: str) -> List[str]:
        common = self.selectors.common
        images = all_matches(soup, common.images)[:common.image_limit]
        return _resolve_images(images, url)

    # --------------------------------------------------------------------------
    # Per-category extractors
    # --------------------------------------------------------------------------

    def _extract_product(self, record: PageRecord, soup: BeautifulSoup) -> PageRecord:
        product = self.selectors.product

        stock_text = first_match(soup, product.stock)
        in_stock = True
        if stock_text:
            lowered = stock_text.lower()
            in_stock = not any(keyword in lowered for keyword in product.out_of_stock_keywords)

        features = all_matches(soup, product.features) or all_matches(soup, product.feature_paragraphs)

        category = first_match(soup, product.category)
        if not category and len(record.breadcrumb) > 1:
            category = record.breadcrumb[-2]

        images = record.images
        if not images:
            images = _resolve_images(all_matches(soup, product.images), record.url)

        details = ProductDetails(
            price=first_match(soup, product.price),
            stock_status=stock_text or "Available",
            in_stock=in_stock,
            features=features,
            category=category or "Products",
            comments=self._extract_comments(soup),
        )
        return record.model_copy(update={"details": details, "images": images})

    def _extract_comments(self, soup: BeautifulSoup) -> List[PageComment]:
        selectors = self.selectors.product.comments
        comments = []
        for item in first_element_list(soup, selectors.items):
            content = first_match(item, selectors.content) or item.get_text(" ", strip=True)
            if not content:
                continue
            comments.append(PageComment(
                author=first_match(item, selectors.author) or "",
                content=content,
                date=first_match(item, selectors.date) or "",
            ))
        return comments

    def _extract_blog(self, record: PageRecord, soup: BeautifulSoup, html: str) -> PageRecord:
        blog = self.selectors.blog

        published = first_match(soup, blog.date) or _scan_date(html, blog.date_patterns) or date.today().isoformat()

        description = first_match(soup, blog.description)
        if not description:
            description = self._description_from_paragraphs(soup)
        if not description:
            description = f"{record.title}: Blog post on this topic."

        categories = all_matches(soup, blog.categories)
        if blog.category_slug_pattern:
            slug_match = re.search(blog.category_slug_pattern, record.url, re.IGNORECASE)
            if slug_match:
                slug_category = humanize_slug(slug_match.group(1))
                if slug_category not in categories:
                    categories.append(slug_category)

        content = first_match(soup, blog.content)

        details = BlogDetails(
            date=published,
            blog_categories=categories or ["Uncategorized"],
            blog_content=truncate(content, BLOG_CONTENT_LIMIT) if content else None,
        )
        return record.model_copy(update={
            "description": description,
            "details": details,
            "images": self._blog_images(soup, record.url),
        })

    def _description_from_paragraphs(self, soup: BeautifulSoup) -> Optional[str]:
        """First two paragraphs of the first content container that has any."""
        for rule in self.selectors.blog.paragraphs:
            paragraphs = soup.select(rule.selector)[:2]
            text = " ".join(paragraph.get_text(" ", strip=True) for paragraph in paragraphs).strip()
            if len(text) > 10:
                return truncate(text, BLOG_DESCRIPTION_LIMIT)
        return None

    def _blog_images(self, soup: BeautifulSoup, url: str) -> List[str]:
        """Featured, then content images, then og:image, then a placeholder."""
        blog = self.selectors.blog

        def large_enough(element: Tag) -> bool:
            width = _int_attr(element, "width")
            height = _int_attr(element, "height")
            if width > 0 and height > 0:
                return width >= blog.min_image_size and height >= blog.min_image_size
            return True

        images = all_matches(soup, blog.featured_images, element_filter=large_enough)
        if not images:
            images = [
                src for src in all_matches(soup, blog.content_images)
                if not any(word in src.lower() for word in blog.image_excludes)
            ]

        images = _resolve_images(images, url)
        if not images:
            og_image = first_match(soup, [OG_IMAGE_RULE])
            images = _resolve_images([og_image], url) if og_image else []

        return images or [blog.placeholder_image]

    def _extract_category(self, record: PageRecord, soup: BeautifulSoup) -> PageRecord:
        selectors = self.selectors.category

        category = None
        slug_match = re.search(selectors.slug_pattern, record.url, re.IGNORECASE)
        if slug_match:
            category = humanize_slug(slug_match.group(2))
        if not category:
            category = first_match(soup, selectors.heading)
        if not category:
            category = humanize_slug(last_path_segment(record.url)) or record.title

        return record.model_copy(update={"details": CategoryDetails(category=category)})

    def _extract_static(self, record: PageRecord, soup: BeautifulSoup) -> PageRecord:
        selectors = self.selectors.static
        update: dict = {"details": StaticDetails()}

        heading = first_match(soup, selectors.heading)
        if heading:
            update["title"] = heading

        content = first_match(soup, selectors.content)
        if content:
            update["description"] = truncate(content, STATIC_DESCRIPTION_LIMIT)

        return record.model_copy(update=update)

# ==============================================================================
# Helper Functions
# ==============================================================================

def truncate(text: str, limit: int) -> str:
    """Cut text to limit characters, marking the cut with '...'."""
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + "..."

def extract_structured_data(soup: BeautifulSoup) -> Optional[Any]:
    """First JSON-LD block that parses to something non-empty."""
    for script in soup.select('script[type="application/ld+json"]'):
        raw = script.string or script.get_text()
        if not raw or not raw.strip():
            continue
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            continue
        if data:
            return data
    return None

def fallback_record(url: str, error: str) -> PageRecord:
    """Minimal record for a page that could not be fetched or parsed."""
    title = _title_from_url(url) or url
    return PageRecord(url=url, title=title, type=PageType.OTHERS, images=[], error=error)

def _title_from_url(url: str) -> str:
    return humanize_slug(last_path_segment(url))

def _scan_date(html: str, patterns: List[str]) -> Optional[str]:
    for pattern in patterns:
        match = re.search(pattern, html)
        if match:
            return match.group(0)
    return None

def _int_attr(element: Tag, name: str) -> int:
    try:
        return int(str(element.get(name, "0")).strip().rstrip("px") or 0)
    except ValueError:
        return 0

def _resolve_images(sources: List[str], page_url: str) -> List[str]:
    return unique_urls(resolved for resolved in (resolve_url(src, page_url) for src in sources) if resolved)
