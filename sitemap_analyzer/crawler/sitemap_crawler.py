# ==============================================================================
# sitemap_crawler.py — Sitemap discovery
# ==============================================================================
# Purpose: Resolve a site or sitemap URL into a flat list of page URLs,
#          recursing through sitemap indexes
# Sections: Imports, Public exports, Main Classes
# ==============================================================================

# ==============================================================================
# Imports
# ==============================================================================

# Standard Library -----
import re
import xml.etree.ElementTree as ET
from typing import List, Optional, Tuple

# Third Party -----
import httpx

# Sitemap Analyzer ----
from sitemap_analyzer.crawler.fetch_client import RateLimitedClient
from sitemap_analyzer.utils.batch_scheduler import BatchScheduler, is_failure
from sitemap_analyzer.utils.observer import PipelineObserver, NullObserver
from sitemap_analyzer.utils.url_utils import extract_origin, is_valid_url, unique_urls

# ==============================================================================
# Public exports
# ==============================================================================
__all__ = ["SitemapCrawler", "SITEMAP_CANDIDATE_PATHS"]

SITEMAP_CANDIDATE_PATHS = [
    "/sitemap.xml",
    "/sitemap_index.xml",
    "/sitemap/sitemap.xml",
    "/wp-sitemap.xml",
    "/page-sitemap.xml",
]

ROBOTS_SITEMAP_PATTERN = re.compile(r"^\s*Sitemap:\s*(\S+)\s*$", re.IGNORECASE | re.MULTILINE)

# ==============================================================================
# Main Classes
# ==============================================================================

class SitemapCrawler:
    """Sitemap discovery with sitemap index recursion and alternate-location probing."""

    def __init__(
        self,
        client: RateLimitedClient,
        scheduler: BatchScheduler,
        observer: Optional[PipelineObserver] = None,
        max_depth: int = 5,
    ):
        self.client = client
        self.scheduler = scheduler
        self.observer = observer or NullObserver()
        self.max_depth = max_depth

    async def discover(self, entry_url: str, depth: int = 0) -> List[str]:
        """
        Collect every page URL reachable from an entry URL.

        Args:
            entry_url: Site root or sitemap URL
            depth: Current sitemap index nesting, 0 for the caller

        Returns:
            Absolute page URLs, de-duplicated in discovery order. A node that
            cannot be fetched or parsed contributes an empty list.
        """
        if depth > self.max_depth:
            self.observer.emit("sitemap.depth_exceeded", url=entry_url, depth=depth)
            return []

        sitemap_url = entry_url
        if "sitemap" not in entry_url.lower():
            sitemap_url = await self._locate_sitemap(entry_url)

        try:
            content = await self.client.get_text(sitemap_url)
            kind, locations = self._parse_sitemap_document(content)
        except (httpx.HTTPError, ET.ParseError) as e:
            self.observer.emit("sitemap.failed", url=sitemap_url, depth=depth, error=str(e))
            return []

        if kind == "sitemapindex":
            self.observer.emit("sitemap.index", url=sitemap_url, depth=depth, children=len(locations))
            child_results = await self.scheduler.run(
                locations, lambda child: self.discover(child, depth + 1)
            )
            urls = []
            for result in child_results:
                if not is_failure(result):
                    urls.extend(result)
        else:
            urls = locations
            self.observer.emit("sitemap.urlset", url=sitemap_url, depth=depth, urls=len(urls))

        return unique_urls(url for url in urls if is_valid_url(url))

    async def _locate_sitemap(self, entry_url: str) -> str:
        """Probe robots.txt and well-known locations; first HEAD 200 wins."""
        origin = extract_origin(entry_url)
        candidates = [entry_url] + [f"{origin}{path}" for path in SITEMAP_CANDIDATE_PATHS]

        robots_sitemap = await self._robots_sitemap(origin)
        if robots_sitemap:
            candidates.insert(0, robots_sitemap)

        for candidate in candidates:
            try:
                response = await self.client.head(candidate)
            except httpx.HTTPError:
                continue
            if response.status_code == 200:
                self.observer.emit("sitemap.located", entry=entry_url, sitemap=candidate)
                return candidate

        self.observer.emit("sitemap.not_located", entry=entry_url)
        return entry_url

    async def _robots_sitemap(self, origin: str) -> Optional[str]:
        """First ``Sitemap:`` directive of robots.txt, if any."""
        try:
            robots = await self.client.get_text(f"{origin}/robots.txt")
        except httpx.HTTPError:
            return None

        match = ROBOTS_SITEMAP_PATTERN.search(robots)
        return match.group(1) if match else None

    def _parse_sitemap_document(self, content: str) -> Tuple[str, List[str]]:
        """
        Parse sitemap XML.

        Returns:
            ``("sitemapindex", child sitemap locations)`` or
            ``("urlset", page locations)``
        """
        root = ET.fromstring(content.strip().encode("utf-8"))
        root_name = _local_name(root.tag).lower()

        entry_name = "sitemap" if root_name == "sitemapindex" else "url"
        locations = []
        for element in root.iter():
            if _local_name(element.tag) != entry_name:
                continue
            for child in element:
                if _local_name(child.tag) == "loc" and child.text and child.text.strip():
                    locations.append(child.text.strip())
                    break

        return ("sitemapindex" if root_name == "sitemapindex" else "urlset"), locations

def _local_name(tag: str) -> str:
    """Strip the '{namespace}' prefix ElementTree puts on tags."""
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""
