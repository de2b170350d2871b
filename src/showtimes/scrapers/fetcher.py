"""Paced HTTP page fetching shared by the HTML sources."""

import asyncio
import logging

import httpx

from showtimes.config import settings

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; TheaterShowtimesBot/1.0)"


class PageFetcher:
    """
    Async HTML fetcher that spaces out requests to one site.

    At most ``parallelism`` requests are in flight, and consecutive requests
    start at least ``delay`` seconds apart.
    """

    def __init__(
        self,
        delay: float | None = None,
        parallelism: int | None = None,
        timeout: float | None = None,
    ) -> None:
        self.delay = settings.request_delay if delay is None else delay
        self.parallelism = parallelism or settings.request_parallelism
        self.timeout = timeout or settings.scrape_timeout
        self._semaphore = asyncio.Semaphore(self.parallelism)
        self._pace_lock = asyncio.Lock()
        self._last_request: float | None = None
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "PageFetcher":
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        )
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def get_html(self, url: str) -> str:
        """
        Fetch a page and return its body.

        Raises:
            httpx.HTTPError: On transport errors or non-2xx responses
        """
        if self._client is None:
            raise RuntimeError("PageFetcher must be used as an async context manager")

        async with self._semaphore:
            await self._wait_turn()
            logger.debug(f"Visiting: {url}")
            response = await self._client.get(url)
            response.raise_for_status()
            return response.text

    async def _wait_turn(self) -> None:
        async with self._pace_lock:
            loop = asyncio.get_running_loop()
            if self._last_request is not None and self.delay > 0:
                remaining = self._last_request + self.delay - loop.time()
                if remaining > 0:
                    await asyncio.sleep(remaining)
            self._last_request = loop.time()
