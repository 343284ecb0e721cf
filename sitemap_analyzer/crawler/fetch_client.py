# ==============================================================================
# fetch_client.py — Rate-limited HTTP client
# ==============================================================================
# Purpose: GET/HEAD wrapper with timeout, identifying user agent and
#          transparent retry-after handling on HTTP 429
# Sections: Imports, Public exports, Main Classes, Helper Functions
# ==============================================================================

# ==============================================================================
# Imports
# ==============================================================================

# Standard Library -----
import asyncio
from typing import Awaitable, Callable, Optional

# Third Party -----
import httpx

# Sitemap Analyzer ----
from sitemap_analyzer.services.config_service import DEFAULT_USER_AGENT
from sitemap_analyzer.utils.observer import PipelineObserver, NullObserver

# ==============================================================================
# Public exports
# ==============================================================================
__all__ = ["RateLimitedClient", "create_client_from_config"]

# ==============================================================================
# Main Classes
# ==============================================================================

class RateLimitedClient:
    """
    Async HTTP client that waits out HTTP 429 responses.

    Every 429 costs exactly one wait of ``retry-after`` seconds followed by the
    identical request; a server that keeps answering 429 keeps the loop going.
    Any other error status is raised as ``httpx.HTTPStatusError``.
    """

    def __init__(
        self,
        timeout: float = 10,
        user_agent: str = DEFAULT_USER_AGENT,
        default_retry_after: int = 30,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        observer: Optional[PipelineObserver] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the client.

        Args:
            timeout: Default per-request timeout in seconds
            user_agent: User-Agent header sent with every request
            default_retry_after: Wait used when retry-after is absent or unusable
            sleep: Awaitable used for the 429 wait, replaceable in tests
            observer: Event sink
            client: Existing httpx client to use instead of creating one
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self.default_retry_after = default_retry_after
        self._sleep = sleep
        self.observer = observer or NullObserver()
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self):
        """Async context manager for HTTP client lifecycle."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, follow_redirects=True)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Clean up HTTP client."""
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def request(self, method: str, url: str, timeout: Optional[float] = None) -> httpx.Response:
        """Issue a request, retrying after every 429 until another status arrives."""
        if not self._client:
            raise RuntimeError("RateLimitedClient must be used as async context manager")

        while True:
            response = await self._client.request(
                method,
                url,
                headers={"User-Agent": self.user_agent},
                timeout=timeout if timeout is not None else self.timeout,
                follow_redirects=True,
            )
            if response.status_code != 429:
                return response

            wait = retry_after_seconds(response.headers.get("retry-after"), self.default_retry_after)
            self.observer.emit("fetch.rate_limited", url=url, method=method, retry_after=wait)
            await self._sleep(wait)

    async def get(self, url: str, timeout: Optional[float] = None) -> httpx.Response:
        response = await self.request("GET", url, timeout=timeout)
        response.raise_for_status()
        return response

    async def head(self, url: str, timeout: Optional[float] = None) -> httpx.Response:
        response = await self.request("HEAD", url, timeout=timeout)
        response.raise_for_status()
        return response

    async def get_text(self, url: str, timeout: Optional[float] = None) -> str:
        """GET a URL and return the decoded body."""
        response = await self.get(url, timeout=timeout)
        return response.text

# ==============================================================================
# Helper Functions
# ==============================================================================

def retry_after_seconds(header_value: Optional[str], default: int = 30) -> int:
    """
    Parse a retry-after header as whole seconds.

    Args:
        header_value: Raw header value, possibly missing
        default: Returned when the value is missing, not an integer or not positive

    Returns:
        Seconds to wait before retrying
    """
    if header_value is None:
        return default

    try:
        seconds = int(header_value.strip())
    except (TypeError, ValueError):
        return default

    return seconds if seconds > 0 else default

def create_client_from_config(config_service, observer: Optional[PipelineObserver] = None) -> RateLimitedClient:
    """
    Create a fetch client from configuration.

    Args:
        config_service: Configuration service instance
        observer: Event sink shared with the rest of the pipeline

    Returns:
        Configured RateLimitedClient instance
    """
    return RateLimitedClient(
        timeout=config_service.request_timeout,
        user_agent=config_service.user_agent,
        default_retry_after=config_service.default_retry_after,
        observer=observer,
    )
