"""Fixtures shared by the scraper tests."""

import httpx
import pytest


class FakeFetcher:
    """Stand-in for PageFetcher serving canned HTML by URL."""

    def __init__(self, pages: dict[str, str]) -> None:
        self.pages = pages
        self.requested: list[str] = []

    async def __aenter__(self) -> "FakeFetcher":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None

    async def get_html(self, url: str) -> str:
        self.requested.append(url)
        if url not in self.pages:
            request = httpx.Request("GET", url)
            raise httpx.HTTPStatusError(
                "404 Not Found", request=request, response=httpx.Response(404, request=request)
            )
        return self.pages[url]


@pytest.fixture
def fake_fetcher():
    return FakeFetcher
