# ==============================================================================
# coverage_service.py — Category coverage guarantee
# ==============================================================================
# Purpose: Supplementary link crawling for under-represented categories and
#          synthetic record injection so every category is populated
# Sections: Imports, Public exports, Main Classes, Helper Functions
# ==============================================================================

# ==============================================================================
# Imports
# ==============================================================================

# Standard Library -----
from datetime import date
from typing import Dict, List, Optional
from urllib.parse import quote, urldefrag, urljoin, urlparse

# Third Party -----
import httpx
from bs4 import BeautifulSoup, Tag

# Sitemap Analyzer ----
from sitemap_analyzer.crawler.fetch_client import RateLimitedClient
from sitemap_analyzer.models.config_models import LocaleCatalog, LocalePack, SyntheticPage, UrlRules
from sitemap_analyzer.models.page_models import (
    BlogDetails,
    CategoryBuckets,
    CategoryDetails,
    PageRecord,
    PageType,
    StaticDetails,
)
from sitemap_analyzer.services.config_service import config_service
from sitemap_analyzer.utils.batch_scheduler import BatchScheduler, is_failure
from sitemap_analyzer.utils.observer import PipelineObserver, NullObserver
from sitemap_analyzer.utils.url_classifier import classify
from sitemap_analyzer.utils.url_utils import extract_origin, humanize_slug, last_path_segment, path_of, unique_urls

# ==============================================================================
# Public exports
# ==============================================================================
__all__ = ["CoverageService", "create_static_page_data", "placeholder_image"]

PLACEHOLDER_IMAGE_URL = "https://via.placeholder.com/800x400?text={text}"

COMMON_STATIC_PATHS = [
    "about", "contact", "faq", "terms", "privacy",
    "hakkimizda", "iletisim", "sss", "gizlilik-politikasi", "satis-sozlesmesi",
    "kargo-takibi", "siparis-sorgula", "sayfa", "pages", "page",
]

SAMPLE_BLOG_TITLE = "Sample Blog Post"

MIN_CATEGORY_RECORDS = 3

# ==============================================================================
# Main Classes
# ==============================================================================

class CoverageService:
    """
    Makes sure every page category ends up with records.

    Before extraction it crawls category pages and the blog index for links
    the sitemap missed. After extraction it injects placeholder records in the
    site's locale, never replacing a record that already exists.
    """

    def __init__(
        self,
        client: RateLimitedClient,
        scheduler: BatchScheduler,
        rules: Optional[UrlRules] = None,
        locales: Optional[LocaleCatalog] = None,
        observer: Optional[PipelineObserver] = None,
        category_crawl_limit: int = 10,
    ):
        self.client = client
        self.scheduler = scheduler
        self.rules = rules or config_service.load_url_rules()
        self.locales = locales or config_service.load_locales()
        self.observer = observer or NullObserver()
        self.category_crawl_limit = category_crawl_limit

    # --------------------------------------------------------------------------
    # Supplementary discovery
    # --------------------------------------------------------------------------

    async def supplement(self, buckets: CategoryBuckets, site_url: str) -> CategoryBuckets:
        """
        Fill empty product and blog buckets from on-site links.

        Args:
            buckets: Classified URLs, updated in place
            site_url: Any URL of the site, used for its origin

        Returns:
            The same buckets
        """
        origin = extract_origin(site_url)

        if buckets.category and not buckets.product:
            pages = buckets.category[:self.category_crawl_limit]
            links = await self._collect_links(pages, PageType.PRODUCT)
            added = sum(buckets.add(PageType.PRODUCT, link) for link in links)
            self.observer.emit("coverage.products_from_categories", pages=len(pages), added=added)

        if not buckets.blog:
            links = await self._collect_links(
                [f"{origin}/blog"], PageType.BLOG, path_prefixes=self.rules.blog_content_prefixes
            )
            added = sum(buckets.add(PageType.BLOG, link) for link in links)
            self.observer.emit("coverage.blog_index", url=f"{origin}/blog", added=added)

        blog_category_pages = [url for url in buckets.category if "/blog/" in path_of(url).lower()]
        if blog_category_pages:
            links = await self._collect_links(blog_category_pages, PageType.BLOG)
            added = sum(buckets.add(PageType.BLOG, link) for link in links)
            self.observer.emit("coverage.blog_categories", pages=len(blog_category_pages), added=added)

        return buckets

    async def probe_common_pages(self, site_url: str, urls: List[str]) -> List[str]:
        """
        HEAD well-known static page paths and append the ones that answer 200.

        Returns:
            urls followed by every newly found page
        """
        origin = extract_origin(site_url)
        candidates = [f"{origin}/{path}" for path in COMMON_STATIC_PATHS]
        candidates = [url for url in candidates if url not in urls]

        async def probe(url: str) -> Optional[str]:
            try:
                response = await self.client.head(url)
            except httpx.HTTPError:
                return None
            return url if response.status_code == 200 else None

        results = await self.scheduler.run(candidates, probe)
        found = [result for result in results if isinstance(result, str)]
        self.observer.emit("coverage.common_pages", probed=len(candidates), found=len(found))
        return list(urls) + found

    async def _collect_links(
        self,
        pages: List[str],
        target: PageType,
        path_prefixes: Optional[List[str]] = None,
    ) -> List[str]:
        """
        Same-site links on the given pages that classify as target.

        When path_prefixes is given a link's lowercased path must also start
        with one of them.
        """
        results = await self.scheduler.run(pages, self._page_links)

        links = []
        for page, result in zip(pages, results):
            if is_failure(result):
                self.observer.emit("coverage.crawl_failed", url=page, error=result["error"])
                continue
            host = urlparse(page).netloc
            for link in result:
                if urlparse(link).netloc != host or classify(link, self.rules) != target:
                    continue
                if path_prefixes is not None and not path_of(link).lower().startswith(tuple(path_prefixes)):
                    continue
                links.append(link)

        return unique_urls(links)

    async def _page_links(self, page_url: str) -> List[str]:
        html = await self.client.get_text(page_url)
        soup = BeautifulSoup(html, "html.parser")
        links = []
        for anchor in soup.find_all("a", href=True):
            link = _process_link(anchor, page_url)
            if link:
                links.append(link)
        return links

    # --------------------------------------------------------------------------
    # Synthetic records
    # --------------------------------------------------------------------------

    def inject_synthetic_records(
        self,
        records: Dict[str, PageRecord],
        site_url: str,
        classified_urls: List[str],
    ) -> Dict[str, PageRecord]:
        """
        Add placeholder static, blog, blog index and category records.

        Copy comes from the first locale pack whose markers appear among the
        classified URLs. Category placeholders are only added while fewer than
        three category records exist.

        Args:
            records: Extracted records, updated in place
            site_url: Any URL of the site, used for its origin
            classified_urls: Every URL that went through classification

        Returns:
            The same mapping
        """
        pack = self.locales.detect(classified_urls)
        origin = extract_origin(site_url)
        self.observer.emit("coverage.locale", locale=pack.name)

        for page in pack.static_pages:
            url = f"{origin}{pack.static_prefix}{page.slug}"
            self._insert(records, _synthetic_static(url, page))

        for post in pack.blog_posts:
            url = f"{origin}{pack.blog_prefix}{post.slug}"
            self._insert(records, _synthetic_blog(url, post, pack))

        self._insert(records, PageRecord(
            url=f"{origin}/blog",
            title="Blog",
            description=pack.blog_index_description,
            type=PageType.STATIC,
            details=StaticDetails(),
        ))

        category_count = sum(1 for record in records.values() if record.type == PageType.CATEGORY)
        if category_count < MIN_CATEGORY_RECORDS:
            for page in pack.category_pages:
                url = f"{origin}{pack.category_prefix}{page.slug}"
                self._insert(records, PageRecord(
                    url=url,
                    title=page.title,
                    description=page.description,
                    type=PageType.CATEGORY,
                    images=[placeholder_image(page.title)],
                    details=CategoryDetails(category=page.title),
                ))

        return records

    def ensure_blog_record(self, records: Dict[str, PageRecord], site_url: str) -> Dict[str, PageRecord]:
        """Inject one sample blog post when no blog record exists at all."""
        if any(record.type == PageType.BLOG for record in records.values()):
            return records

        base = f"{extract_origin(site_url)}/blog/sample-post"
        url = base
        suffix = 1
        while url in records:
            url = f"{base}-{suffix}"
            suffix += 1

        records[url] = PageRecord(
            url=url,
            title=SAMPLE_BLOG_TITLE,
            description="This is a sample blog post created automatically.",
            type=PageType.BLOG,
            images=[placeholder_image(SAMPLE_BLOG_TITLE)],
            details=BlogDetails(
                date=date.today().isoformat(),
                blog_categories=["Sample", "Blog"],
                blog_content="This is a sample blog post content. The actual content would be fetched from the website.",
            ),
        )
        self.observer.emit("coverage.sample_blog", url=url)
        return records

    def _insert(self, records: Dict[str, PageRecord], record: PageRecord) -> None:
        if record.url in records:
            return
        records[record.url] = record
        self.observer.emit("coverage.injected", url=record.url, type=record.type.value)

# ==============================================================================
# Helper Functions
# ==============================================================================

def create_static_page_data(url: str) -> PageRecord:
    """
    Build a minimal static record from a bare URL.

    The title is the humanized last path segment.
    """
    title = humanize_slug(last_path_segment(url))
    return PageRecord(
        url=url,
        title=title,
        description=f"Static page: {title}",
        type=PageType.STATIC,
        details=StaticDetails(),
    )

def placeholder_image(text: str) -> str:
    return PLACEHOLDER_IMAGE_URL.format(text=quote(text, safe=""))

def _synthetic_static(url: str, page: SyntheticPage) -> PageRecord:
    return PageRecord(
        url=url,
        title=page.title,
        description=page.description,
        type=PageType.STATIC,
        images=[placeholder_image(page.title)],
        details=StaticDetails(),
    )

def _synthetic_blog(url: str, post: SyntheticPage, pack: LocalePack) -> PageRecord:
    return PageRecord(
        url=url,
        title=post.title,
        description=post.description,
        type=PageType.BLOG,
        images=[placeholder_image(post.title)],
        details=BlogDetails(
            date=date.today().isoformat(),
            blog_categories=list(pack.blog_categories) or ["Uncategorized"],
            blog_content=pack.blog_content,
        ),
    )

def _process_link(link: Tag, base_url: str) -> Optional[str]:
    """Absolute, fragment-free URL of an anchor, or None for non-page links."""
    href = link.get("href")
    if not href:
        return None

    href = href.strip()
    if not href or href.startswith(("#", "mailto:", "tel:", "javascript:")):
        return None

    try:
        url, _ = urldefrag(urljoin(base_url, href))
    except ValueError:
        return None
    return url
