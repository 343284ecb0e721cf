# ==============================================================================
# url_utils.py — URL Processing Utilities
# ==============================================================================
# Purpose: URL validation, resolution and slug helpers shared by the pipeline
# Sections: Imports, Public API
# ==============================================================================

# ==============================================================================
# Imports
# ==============================================================================

# Standard Library -----
import re
from typing import Iterable, List
from urllib.parse import unquote, urljoin, urlparse

# ==============================================================================
# Public exports
# ==============================================================================
__all__ = [
    'is_valid_url',
    'extract_origin',
    'path_of',
    'last_path_segment',
    'humanize_slug',
    'resolve_url',
    'unique_urls',
]

# ==============================================================================
# Public API Functions
# ==============================================================================

def is_valid_url(url: str) -> bool:
    """
    Check if URL has valid format.

    Args:
        url: URL to validate

    Returns:
        True if URL is absolute, with both scheme and host
    """
    if not url or not isinstance(url, str):
        return False

    try:
        parsed = urlparse(url)

        return bool(parsed.scheme and parsed.netloc)
    except ValueError:
        return False

def extract_origin(url: str) -> str:
    """Scheme and host of a URL, without a trailing slash."""
    parsed = urlparse(url)
    if parsed.scheme and parsed.netloc:
        return f"{parsed.scheme}://{parsed.netloc}"
    return url.rstrip("/")

def path_of(url: str) -> str:
    """Path component of a URL, '/' when empty."""
    return urlparse(url).path or "/"

def last_path_segment(url: str) -> str:
    """Last non-empty path segment, or '' for the root."""
    segments = [segment for segment in urlparse(url).path.split("/") if segment]
    return segments[-1] if segments else ""

def humanize_slug(slug: str) -> str:
    """Turn 'yeni-gelenler' into 'Yeni Gelenler'."""
    text = unquote(slug).replace("-", " ").strip()
    return re.sub(r"\b\w", lambda match: match.group(0).upper(), text)

def resolve_url(src: str, page_url: str) -> str:
    """
    Resolve an image or link reference against the page it came from.

    Protocol-relative references get https; data: URIs are kept as is.

    Args:
        src: Raw attribute value
        page_url: URL of the page the reference was found on

    Returns:
        Absolute URL, or '' for an empty reference
    """
    src = (src or "").strip()
    if not src:
        return ""
    if src.startswith("//"):
        return f"https:{src}"
    if src.startswith("data:") or is_valid_url(src):
        return src
    return urljoin(page_url, src)

def unique_urls(urls: Iterable[str]) -> List[str]:
    """De-duplicate while keeping first-seen order."""
    seen = set()
    ordered = []
    for url in urls:
        if url not in seen:
            seen.add(url)
            ordered.append(url)
    return ordered
