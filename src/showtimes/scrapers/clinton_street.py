"""Clinton Street Theater scraper for its events-calendar pages."""

import logging
from datetime import date

import httpx
from bs4 import BeautifulSoup, Tag
from dateutil.relativedelta import relativedelta

from showtimes.exceptions import SourceError
from showtimes.schemas.theater import Theater
from showtimes.scrapers.base import BaseSource
from showtimes.scrapers.fetcher import PageFetcher
from showtimes.scrapers.models import RawCandidate
from showtimes.scrapers.selectors import child_attr, child_text, first_match
from showtimes.utils.text import clean_event_title, is_non_film_event

logger = logging.getLogger(__name__)

MONTHS_TO_SCRAPE = 3

# Calendar entries without an explicit time start at 7 PM
DEFAULT_TIME = "19:00"
DEFAULT_PRICE = "$10"

CALENDAR_EVENT = "article.tribe-events-calendar-month__calendar-event"
CALENDAR_DAY = ".tribe-events-calendar-month__day"
LIST_EVENT = ".tribe-events-calendar-list__event"

CALENDAR_TITLE_STRATEGIES = (
    child_text(".tribe-events-calendar-month__calendar-event-title a"),
    child_text("a"),
)
CALENDAR_LINK_STRATEGIES = (
    child_attr(".tribe-events-calendar-month__calendar-event-title a", "href"),
    child_attr("a", "href"),
)
LIST_TITLE_STRATEGIES = (
    child_text(".tribe-events-calendar-list__event-title-link"),
    child_text("h3"),
)
LIST_LINK_STRATEGIES = (
    child_attr(".tribe-events-calendar-list__event-title-link", "href"),
    child_attr("a", "href"),
)
LIST_DATETIME_STRATEGIES = (
    child_text(".tribe-events-calendar-list__event-datetime"),
    child_text("time"),
)
PRICE_STRATEGIES = (
    child_text(".tribe-events-c-small-cta__price"),
    child_text("a[href*='square.site']"),
)


class ClintonStreetSource(BaseSource):
    """
    Scraper for the Clinton Street Theater (Portland).

    The theater publishes a month-view events calendar that mixes film
    screenings with live events. Live events are filtered out by title, and
    presenter prefixes or guest suffixes are stripped from film titles.
    """

    theater = Theater(
        id="clinton-street-theater",
        name="Clinton Street Theater",
        address="2522 SE Clinton Street",
        city="Portland",
        zip="97202",
        website="https://cstpdx.com",
        phone="(971) 808-3331",
    )

    # Several events can share a start time on the calendar
    uses_title_in_id = True

    def __init__(self, fetcher: PageFetcher | None = None, today: date | None = None) -> None:
        self.fetcher = fetcher
        self.today = today

    def clean_title(self, raw_title: str) -> str | None:
        title = clean_event_title(raw_title)
        if not title or is_non_film_event(title, raw_title):
            return None
        return title

    def month_urls(self) -> list[str]:
        """Calendar pages for the current month and the following ones."""
        start = (self.today or date.today()).replace(day=1)
        return [
            f"{self.theater.website}/schedule/month/{month:%Y-%m}/"
            for month in (start + relativedelta(months=i) for i in range(MONTHS_TO_SCRAPE))
        ]

    async def fetch_candidates(self) -> list[RawCandidate]:
        """Fetch each calendar month; fail only if no month could be fetched."""
        candidates: list[RawCandidate] = []
        failures = 0
        urls = self.month_urls()

        async with self.fetcher or PageFetcher() as fetcher:
            for url in urls:
                try:
                    html = await fetcher.get_html(url)
                except httpx.HTTPError as e:
                    logger.warning(f"Clinton Street: failed to scrape {url}: {e}")
                    failures += 1
                    continue
                candidates.extend(self._parse_html(html))

        if failures == len(urls):
            raise SourceError(self.source_id, "no calendar page could be fetched")

        logger.info(f"Clinton Street: found {len(candidates)} candidates")
        return candidates

    def _parse_html(self, html: str) -> list[RawCandidate]:
        """Extract events from month-view and list-view markup."""
        soup = BeautifulSoup(html, "html.parser")
        candidates: list[RawCandidate] = []

        for event in soup.select(CALENDAR_EVENT):
            candidate = self._parse_calendar_event(event)
            if candidate:
                candidates.append(candidate)

        for event in soup.select(LIST_EVENT):
            candidate = self._parse_list_event(event)
            if candidate:
                candidates.append(candidate)

        return candidates

    def _parse_calendar_event(self, event: Tag) -> RawCandidate | None:
        title = first_match(event, CALENDAR_TITLE_STRATEGIES)
        if not title:
            return None

        # The date lives on the enclosing day cell, not on the event
        date_text = None
        day = event.find_parent(class_=CALENDAR_DAY.lstrip("."))
        if day is not None:
            for time_tag in day.select("time[datetime]"):
                value = str(time_tag.get("datetime") or "")
                if len(value) == 10:
                    date_text = value
                    break
        if not date_text:
            return None

        time_text = (
            child_attr(".tribe-events-calendar-month__calendar-event-datetime time", "datetime")(event)
            or DEFAULT_TIME
        )

        return RawCandidate(
            title=title,
            date_text=date_text,
            time_text=time_text,
            link=first_match(event, CALENDAR_LINK_STRATEGIES),
            price_text=first_match(event, PRICE_STRATEGIES) or DEFAULT_PRICE,
        )

    def _parse_list_event(self, event: Tag) -> RawCandidate | None:
        title = first_match(event, LIST_TITLE_STRATEGIES)
        if not title:
            return None

        # "Wednesday, February 11 @ 7:00 PM"
        datetime_text = first_match(event, LIST_DATETIME_STRATEGIES) or ""
        parts = datetime_text.split("@")
        if len(parts) != 2:
            return None

        return RawCandidate(
            title=title,
            date_text=parts[0].strip(),
            time_text=parts[1].strip(),
            link=first_match(event, LIST_LINK_STRATEGIES),
            price_text=first_match(event, PRICE_STRATEGIES),
        )
