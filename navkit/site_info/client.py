"""Site metadata client: page scrape, icon validation, download and storage."""

import logging
from typing import Any, Optional
from urllib.parse import urlsplit

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
)

from navkit.core import (
    CacheBackend,
    EmptyResponseError,
    FetchFailedError,
    IconDownloadError,
    IconError,
    IconInvalidError,
    InvalidURLError,
    NavError,
    NoIconFoundError,
    PersistenceError,
    RequestTimeoutError,
    SiteInfo,
    SiteInfoConfig,
    StoredFile,
    TransientNetworkError,
    UnexpectedStatusError,
)
from navkit.core.exceptions import RETRYABLE_ERRORS
from navkit.site_info.extract import (
    extract_description,
    extract_icon_candidates,
    extract_title,
    parse_html,
    validate_url,
)
from navkit.storage import FileStore, detect_image_format

logger = logging.getLogger(__name__)

PAGE_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"
ICON_ACCEPT = "image/*,*/*;q=0.8"


class SiteInfoClient:
    """Fetches title, description and a locally stored icon for a site.

    Each network step (page GET, icon HEAD, icon GET) has its own attempt
    ceiling and backoff. Only an invalid URL or an unreachable page yields
    ``None``; icon problems leave ``icon`` unset and keep the rest.

    Example:
        >>> async with SiteInfoClient() as client:
        ...     info = await client.fetch_site_info("https://example.com")
        >>> info.title if info else "enter details manually"
    """

    CACHE_PREFIX = "site_info:"

    def __init__(
        self,
        config: Optional[SiteInfoConfig] = None,
        store: Optional[FileStore] = None,
        cache_backend: Optional[CacheBackend] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize site info client.

        Args:
            config: Timeouts, attempt ceilings and backoff
            store: Where downloaded icons are written
            cache_backend: Cache for memoizing results (optional)
            transport: Custom httpx transport (tests, proxies)
        """
        self.config = config or SiteInfoConfig()
        self.store = store or FileStore()
        self.cache_backend = cache_backend

        # HTTP client
        self.client = httpx.AsyncClient(
            headers={"User-Agent": self.config.user_agent},
            follow_redirects=True,
            transport=transport,
        )

        # Metrics
        self._total_requests = 0
        self._cache_hits = 0
        self._cache_misses = 0

    async def fetch_site_info(self, url: str) -> Optional[SiteInfo]:
        """Scrape metadata for ``url`` and store its icon locally.

        Args:
            url: Absolute http(s) URL of the site

        Returns:
            Site info (``icon`` may be None), or None if the URL is invalid
            or the page could not be retrieved
        """
        try:
            url = validate_url(url)
        except InvalidURLError as e:
            logger.warning(f"Rejected site info request: {e}")
            return None

        self._total_requests += 1
        cache_key = f"{self.CACHE_PREFIX}{url}"
        cached = await self._get_cached(cache_key)
        if cached:
            self._cache_hits += 1
            return SiteInfo(**cached)
        self._cache_misses += 1

        try:
            html, page_url = await self._fetch_page(url)
        except FetchFailedError as e:
            logger.warning(f"Could not retrieve site info: {e}")
            return None

        soup = parse_html(html)
        title = extract_title(soup) or (urlsplit(url).hostname or "")
        description = extract_description(soup)

        try:
            icon = await self._resolve_icon(extract_icon_candidates(soup, page_url))
        except (IconError, PersistenceError, OSError) as e:
            logger.warning(f"No icon for {url}: {e}")
            icon = None

        info = SiteInfo(title=title, description=description, icon=icon)
        await self._store_cached(cache_key, info.model_dump())
        return info

    async def download_icon(self, icon_url: str) -> Optional[str]:
        """Download a known icon URL into local storage.

        Args:
            icon_url: Absolute http(s) URL of the image

        Returns:
            Public URL of the stored copy, or None on any failure
        """
        try:
            icon_url = validate_url(icon_url)
            stored = await self._download_and_store(icon_url)
        except (InvalidURLError, IconError, PersistenceError, OSError) as e:
            logger.warning(f"Icon download failed: {e}")
            return None
        return stored.url

    def _retrying(self, attempts: int) -> AsyncRetrying:
        backoff = self.config.backoff_seconds
        return AsyncRetrying(
            stop=stop_after_attempt(attempts),
            wait=wait_incrementing(start=backoff, increment=backoff),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    async def _send(
        self,
        method: str,
        url: str,
        timeout: float,
        source: str,
        headers: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        """Issue one request and classify its failure.

        Raises:
            RequestTimeoutError: On any httpx timeout
            TransientNetworkError: On connect/read/write failures (incl. DNS)
            UnexpectedStatusError: On a non-2xx final response
            httpx.HTTPError: Anything else, not retried
        """
        try:
            response = await self.client.request(method, url, headers=headers, timeout=timeout)
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(
                f"{method} {url} timed out after {timeout}s", source=source
            ) from e
        except httpx.NetworkError as e:
            raise TransientNetworkError(f"{method} {url} failed: {e!r}", source=source) from e

        if not response.is_success:
            raise UnexpectedStatusError(response.status_code, url, source=source)
        return response

    async def _fetch_page(self, url: str) -> tuple[str, str]:
        """GET the page HTML.

        Returns:
            Page HTML and the final URL after redirects

        Raises:
            FetchFailedError: If every attempt failed or a fatal error occurred
        """
        headers = {
            "Accept": PAGE_ACCEPT,
            "Accept-Language": self.config.accept_language,
            "Cache-Control": "no-cache",
            "Pragma": "no-cache",
        }
        try:
            async for attempt in self._retrying(self.config.page_attempts):
                with attempt:
                    response = await self._send(
                        "GET", url, self.config.page_timeout, "page", headers=headers
                    )
        except (NavError, httpx.HTTPError) as e:
            raise FetchFailedError(f"Could not retrieve {url}: {e}", source="page") from e

        return response.text, str(response.url)

    async def _is_valid_icon(self, icon_url: str) -> bool:
        """HEAD the candidate and check that it is served as an image."""
        try:
            async for attempt in self._retrying(self.config.head_attempts):
                with attempt:
                    response = await self._send(
                        "HEAD", icon_url, self.config.head_timeout, "icon-head"
                    )
        except (NavError, httpx.HTTPError) as e:
            logger.debug(f"Icon candidate rejected: {icon_url} ({e})")
            return False

        content_type = response.headers.get("content-type", "").lower()
        return content_type.startswith("image/") or "icon" in content_type

    async def _resolve_icon(self, candidates: list[str]) -> str:
        """Download the first candidate that validates.

        Raises:
            NoIconFoundError: If no candidate validates
            IconError: If the chosen icon cannot be downloaded or verified
            PersistenceError: If the stored copy fails its integrity check
            OSError: If the uploads directory cannot be used
        """
        for candidate in candidates:
            if await self._is_valid_icon(candidate):
                stored = await self._download_and_store(candidate)
                return stored.url
        raise NoIconFoundError(
            f"None of {len(candidates)} icon candidates validated", source="icon-head"
        )

    async def _download_and_store(self, icon_url: str) -> StoredFile:
        """GET the icon, verify its bytes and persist it.

        Raises:
            IconDownloadError: If every attempt failed
            IconInvalidError: If the response is not a genuine image
            PersistenceError: If the written file does not verify
        """
        source = "icon-download"
        try:
            async for attempt in self._retrying(self.config.download_attempts):
                with attempt:
                    response = await self._send(
                        "GET",
                        icon_url,
                        self.config.download_timeout,
                        source,
                        headers={"Accept": ICON_ACCEPT},
                    )
                    content_type = response.headers.get("content-type", "")
                    if not content_type.lower().startswith("image/"):
                        raise IconInvalidError(
                            f"Not an image content type: {content_type!r}", source=source
                        )
                    content = response.content
                    if not content:
                        raise EmptyResponseError(f"Empty body from {icon_url}", source=source)
        except IconInvalidError:
            raise
        except (NavError, httpx.HTTPError) as e:
            raise IconDownloadError(f"Could not download {icon_url}: {e}", source=source) from e

        if len(content) > self.config.max_icon_bytes:
            raise IconInvalidError(
                f"Icon is {len(content)} bytes, limit {self.config.max_icon_bytes}", source=source
            )
        if detect_image_format(content) is None:
            raise IconInvalidError(
                f"Content from {icon_url} matches no image signature", source=source
            )

        return await self.store.save_icon(content, content_type)

    async def _get_cached(self, cache_key: str) -> Optional[dict[str, Any]]:
        if not self.cache_backend:
            return None

        try:
            return await self.cache_backend.get(cache_key)
        except Exception as e:
            # Cache errors should not break scraping
            logger.warning(f"Cache read failed for {cache_key}: {e}")
            return None

    async def _store_cached(self, cache_key: str, value: dict[str, Any]) -> None:
        if not self.cache_backend:
            return

        try:
            await self.cache_backend.set(cache_key, value, self.config.cache_ttl)
        except Exception as e:
            logger.warning(f"Cache write failed for {cache_key}: {e}")

    def get_cache_stats(self) -> dict[str, Any]:
        """Get cache statistics.

        Returns:
            Request, hit and miss counts with the hit rate
        """
        hit_rate = self._cache_hits / self._total_requests if self._total_requests > 0 else 0.0

        return {
            "total_requests": self._total_requests,
            "cache_hits": self._cache_hits,
            "cache_misses": self._cache_misses,
            "hit_rate": round(hit_rate, 3),
            "hit_rate_percent": round(hit_rate * 100, 1),
        }

    def reset_stats(self) -> None:
        """Reset cache statistics."""
        self._total_requests = 0
        self._cache_hits = 0
        self._cache_misses = 0

    async def close(self) -> None:
        """Close HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "SiteInfoClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
