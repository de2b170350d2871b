"""Cinemagic Theater scraper using BeautifulSoup HTML parsing."""

import logging
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup, Tag

from showtimes.exceptions import SourceError
from showtimes.schemas.theater import Theater
from showtimes.scrapers.base import BaseSource
from showtimes.scrapers.fetcher import PageFetcher
from showtimes.scrapers.models import RawCandidate
from showtimes.scrapers.selectors import child_attr, child_text, first_match, own_attr, own_text

logger = logging.getLogger(__name__)

BASE_URL = "https://tickets.thecinemagictheater.com"
NOW_SHOWING_URL = f"{BASE_URL}/now-showing"

TITLE_STRATEGIES = (
    child_text("h1.movie-title"),
    child_text("h1.title"),
    child_text("h1"),
    child_text(".movie-title"),
    child_attr("[data-title]", "data-title"),
)

FORMAT_STRATEGIES = (
    child_text(".format-badge"),
    child_text(".film-format"),
    child_attr("[data-format]", "data-format"),
    child_text("[data-format]"),
    child_text(".badge:-soup-contains('mm')"),
    child_text(".badge:-soup-contains('igital')"),
)


def _date_from_datetime_attr(node: Tag) -> str | None:
    """"2026-02-12T19:30:00-08:00" or "2026-02-12" -> "2026-02-12"."""
    value = str(node.get("datetime") or "").strip()
    return value[:10] if len(value) >= 10 else None


DATE_STRATEGIES = (
    _date_from_datetime_attr,
    own_attr("data-date"),
    child_attr("time[datetime]", "datetime"),
    child_text(".date"),
    child_text(".date-label"),
    own_text(),
)


def _time_from_datetime_attr(node: Tag) -> str | None:
    """"2026-02-12T19:30:00-08:00" -> "19:30"."""
    value = node.get("datetime")
    if not value or "T" not in str(value):
        return None
    time_part = str(value).split("T", 1)[1]
    return time_part[:5] if len(time_part) >= 5 else None


TIME_STRATEGIES = (
    _time_from_datetime_attr,
    own_attr("data-time"),
    child_text(".time"),
    own_text(),
)

# Flat listings carry date and time on the same element
ITEM_TIME_STRATEGIES = (
    _time_from_datetime_attr,
    own_attr("data-time"),
    child_attr("[data-time]", "data-time"),
    child_text(".time"),
)


class CinemagicSource(BaseSource):
    """
    Scraper for the Cinemagic Theater (Portland).

    The now-showing page links to one page per movie; each movie page lists
    its own showtimes, either grouped by date or as a flat list of items.
    """

    theater = Theater(
        id="cinemagic-theater",
        name="Cinemagic Theater",
        address="2021 SE Hawthorne Blvd",
        city="Portland",
        zip="97214",
        website="https://www.thecinemagictheater.com",
    )

    NOW_SHOWING_URL = NOW_SHOWING_URL

    def __init__(self, fetcher: PageFetcher | None = None) -> None:
        self.fetcher = fetcher

    async def fetch_candidates(self) -> list[RawCandidate]:
        """Fetch the now-showing page, then every movie page it links to."""
        async with self.fetcher or PageFetcher() as fetcher:
            try:
                listing = await fetcher.get_html(self.NOW_SHOWING_URL)
            except httpx.HTTPError as e:
                raise SourceError(self.source_id, f"failed to fetch now-showing page: {e}") from e

            movie_urls = self._parse_movie_links(listing, self.NOW_SHOWING_URL)
            logger.info(f"Cinemagic: found {len(movie_urls)} movie pages")

            candidates: list[RawCandidate] = []
            for url in movie_urls:
                try:
                    html = await fetcher.get_html(url)
                except httpx.HTTPError as e:
                    logger.warning(f"Cinemagic: failed to fetch {url}: {e}")
                    continue
                candidates.extend(self._parse_movie_page(html, url))

        logger.info(f"Cinemagic: found {len(candidates)} candidates")
        return candidates

    def _parse_movie_links(self, html: str, page_url: str) -> list[str]:
        """Unique absolute movie page URLs, in page order."""
        soup = BeautifulSoup(html, "html.parser")
        urls: dict[str, None] = {}
        for link in soup.select("a[href*='/movie/']"):
            href = str(link.get("href") or "").strip()
            if href:
                urls[urljoin(page_url, href)] = None
        return list(urls)

    def _parse_movie_page(self, html: str, url: str) -> list[RawCandidate]:
        """Extract every showtime listed on one movie page."""
        soup = BeautifulSoup(html, "html.parser")
        body = soup.body or soup

        title = first_match(body, TITLE_STRATEGIES)
        if not title:
            logger.warning(f"Cinemagic: could not extract title from {url}")
            return []

        format_text = first_match(body, FORMAT_STRATEGIES) or ""

        candidates = self._parse_date_groups(body, title, format_text, url)
        if not candidates:
            candidates = self._parse_flat_items(body, title, format_text, url)

        logger.debug(f"Cinemagic: {len(candidates)} showtimes for '{title}'")
        return candidates

    def _parse_date_groups(
        self, body: Tag, title: str, format_text: str, url: str
    ) -> list[RawCandidate]:
        candidates: list[RawCandidate] = []
        for group in body.select(".showtime-date, .date-group, [data-date]"):
            date_text = first_match(group, DATE_STRATEGIES)
            if not date_text:
                continue
            for time_node in group.select(".time, .showtime, [data-time]"):
                time_text = first_match(time_node, TIME_STRATEGIES)
                if time_text:
                    candidates.append(
                        RawCandidate(
                            title=title,
                            date_text=date_text,
                            time_text=time_text,
                            format_text=format_text,
                            link=url,
                        )
                    )
        return candidates

    def _parse_flat_items(
        self, body: Tag, title: str, format_text: str, url: str
    ) -> list[RawCandidate]:
        candidates: list[RawCandidate] = []
        for item in body.select(".showtime-item, .screening, [data-showtime]"):
            date_text = first_match(item, DATE_STRATEGIES[:-1])
            time_text = first_match(item, ITEM_TIME_STRATEGIES)
            if date_text and time_text:
                candidates.append(
                    RawCandidate(
                        title=title,
                        date_text=date_text,
                        time_text=time_text,
                        format_text=format_text,
                        link=url,
                    )
                )
        return candidates
