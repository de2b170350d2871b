"""Unit tests for the Cinemagic Theater scraper."""

import pytest

from showtimes.exceptions import SourceError
from showtimes.scrapers.cinemagic import NOW_SHOWING_URL, CinemagicSource

NOW_SHOWING_HTML = """
<html><body>
  <div class="movies">
    <a href="/movie/blade-runner">Blade Runner</a>
    <a href="/movie/blade-runner"><img src="poster.jpg"></a>
    <a href="https://tickets.thecinemagictheater.com/movie/heat">Heat</a>
    <a href="/about">About us</a>
  </div>
</body></html>
"""

GROUPED_MOVIE_HTML = """
<html><body>
  <h1 class="movie-title">Blade Runner (Director's Cut)</h1>
  <span class="format-badge">35MM</span>
  <div class="showtime-date">
    <span class="date">February 12, 2026</span>
    <a class="time">7:30 PM</a>
    <a class="time">9:45 PM</a>
  </div>
  <div class="showtime-date" data-date="2026-02-13">
    <button class="showtime" data-time="19:00">7:00 PM</button>
  </div>
</body></html>
"""

FLAT_MOVIE_HTML = """
<html><body>
  <h1>Heat</h1>
  <ul>
    <li class="showtime-item" datetime="2026-02-14T20:15:00-08:00">Sat 8:15 PM</li>
    <li class="screening"><span class="date">2/15/2026</span><span class="time">6:00 PM</span></li>
    <li class="screening"><span class="date">2/16/2026</span></li>
  </ul>
</body></html>
"""

BLADE_RUNNER_URL = "https://tickets.thecinemagictheater.com/movie/blade-runner"
HEAT_URL = "https://tickets.thecinemagictheater.com/movie/heat"


@pytest.fixture
def scraper() -> CinemagicSource:
    return CinemagicSource()


# ---------------------------------------------------------------------------
# _parse_movie_links: pure parsing, no HTTP
# ---------------------------------------------------------------------------


class TestCinemagicParseMovieLinks:
    def test_absolute_unique_links_in_page_order(self, scraper: CinemagicSource) -> None:
        urls = scraper._parse_movie_links(NOW_SHOWING_HTML, NOW_SHOWING_URL)
        assert urls == [BLADE_RUNNER_URL, HEAT_URL]

    def test_no_links(self, scraper: CinemagicSource) -> None:
        assert scraper._parse_movie_links("<html><body></body></html>", NOW_SHOWING_URL) == []


# ---------------------------------------------------------------------------
# _parse_movie_page: pure parsing, no HTTP
# ---------------------------------------------------------------------------


class TestCinemagicParseMoviePage:
    def test_grouped_showtimes(self, scraper: CinemagicSource) -> None:
        candidates = scraper._parse_movie_page(GROUPED_MOVIE_HTML, BLADE_RUNNER_URL)

        assert [(c.date_text, c.time_text) for c in candidates] == [
            ("February 12, 2026", "7:30 PM"),
            ("February 12, 2026", "9:45 PM"),
            ("2026-02-13", "19:00"),
        ]

    def test_raw_title_and_format_passed_through(self, scraper: CinemagicSource) -> None:
        candidate = scraper._parse_movie_page(GROUPED_MOVIE_HTML, BLADE_RUNNER_URL)[0]

        assert candidate.title == "Blade Runner (Director's Cut)"
        assert candidate.format_text == "35MM"
        assert candidate.link == BLADE_RUNNER_URL

    def test_flat_items_fallback(self, scraper: CinemagicSource) -> None:
        candidates = scraper._parse_movie_page(FLAT_MOVIE_HTML, HEAT_URL)

        assert [(c.date_text, c.time_text) for c in candidates] == [
            ("2026-02-14", "20:15"),
            ("2/15/2026", "6:00 PM"),
        ]
        assert all(c.format_text == "" for c in candidates)

    def test_missing_title_yields_nothing(self, scraper: CinemagicSource) -> None:
        html = '<html><body><div class="showtime-date"><span class="date">2/12/2026</span></div></body></html>'
        assert scraper._parse_movie_page(html, HEAT_URL) == []


# ---------------------------------------------------------------------------
# fetch_candidates: with a canned fetcher
# ---------------------------------------------------------------------------


class TestCinemagicFetchCandidates:
    async def test_visits_listing_then_movie_pages(self, fake_fetcher) -> None:
        fetcher = fake_fetcher(
            {
                NOW_SHOWING_URL: NOW_SHOWING_HTML,
                BLADE_RUNNER_URL: GROUPED_MOVIE_HTML,
                HEAT_URL: FLAT_MOVIE_HTML,
            }
        )

        candidates = await CinemagicSource(fetcher=fetcher).fetch_candidates()

        assert fetcher.requested == [NOW_SHOWING_URL, BLADE_RUNNER_URL, HEAT_URL]
        assert len(candidates) == 5

    async def test_failed_movie_page_is_skipped(self, fake_fetcher) -> None:
        fetcher = fake_fetcher({NOW_SHOWING_URL: NOW_SHOWING_HTML, HEAT_URL: FLAT_MOVIE_HTML})

        candidates = await CinemagicSource(fetcher=fetcher).fetch_candidates()

        assert {c.title for c in candidates} == {"Heat"}

    async def test_failed_listing_raises_source_error(self, fake_fetcher) -> None:
        with pytest.raises(SourceError) as excinfo:
            await CinemagicSource(fetcher=fake_fetcher({})).fetch_candidates()
        assert excinfo.value.source_id == "cinemagic-theater"
