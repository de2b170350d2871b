"""Scrape job that runs theater sources and merges their schedules into the dataset."""

import asyncio
import logging
from datetime import date, datetime, timezone

from showtimes.config import settings
from showtimes.exceptions import SourceError, StorageError
from showtimes.schemas import RunOutcome, Showtime
from showtimes.scrapers import BaseSource, RawCandidate, SourceRegistry, build_default_registry
from showtimes.services.metadata_resolver import MetadataResolver
from showtimes.services.validator import build_showtime, collapse_duplicates
from showtimes.storage import DatasetStore
from showtimes.utils.parsing import normalize_date, normalize_format, normalize_time, parse_price

logger = logging.getLogger(__name__)


def normalize_candidates(
    source: BaseSource, candidates: list[RawCandidate], today: date | None = None
) -> list[Showtime]:
    """
    Normalize and validate raw candidates into showtimes.

    Non-film events, malformed entries and dates outside the validity window
    are dropped silently. When two candidates produce the same id, the one
    extracted first is kept.
    """
    showtimes: list[Showtime] = []
    for candidate in candidates:
        title = source.clean_title(candidate.title)
        if not title:
            logger.debug(f"{source.source_id}: skipping non-film listing {candidate.title!r}")
            continue

        showtime = build_showtime(
            source.source_id,
            title,
            normalize_date(candidate.date_text, today),
            normalize_time(candidate.time_text),
            normalize_format(candidate.format_text),
            link=candidate.link,
            price=parse_price(candidate.price_text),
            screen=candidate.screen,
            include_title=source.uses_title_in_id,
            today=today,
        )
        if showtime:
            showtimes.append(showtime)

    return collapse_duplicates(showtimes)


def _outcome(
    theater_id: str,
    status: str,
    error_message: str | None = None,
    movies_scraped: int = 0,
    showtimes_scraped: int = 0,
) -> RunOutcome:
    return RunOutcome(
        last_updated=datetime.now(timezone.utc),
        theater_id=theater_id,
        status=status,
        error_message=error_message,
        movies_scraped=movies_scraped,
        showtimes_scraped=showtimes_scraped,
    )


async def run_source(
    source: BaseSource,
    store: DatasetStore,
    resolver: MetadataResolver,
    today: date | None = None,
) -> RunOutcome:
    """
    Scrape, normalize, enrich and merge one theater.

    A failed scrape leaves the theater's stored showtimes untouched.
    """
    theater_id = source.source_id
    logger.info(f"=== Scraping {source.theater.name} ===")

    try:
        candidates = await source.fetch_candidates()
    except SourceError as e:
        logger.error(f"Error scraping {theater_id}: {e}")
        return _outcome(theater_id, "error", str(e))
    except Exception as e:
        logger.error(f"Unexpected error scraping {theater_id}: {e}", exc_info=True)
        return _outcome(theater_id, "error", str(e))

    showtimes = normalize_candidates(source, candidates, today)
    logger.info(
        f"{theater_id}: {len(showtimes)} valid showtimes from {len(candidates)} candidates"
    )

    showtimes, movies = await resolver.enrich_showtimes(showtimes)
    limited = sum(1 for movie in movies.values() if movie.limited_info)
    if limited:
        logger.info(f"{theater_id}: {limited} of {len(movies)} movies have limited info")

    # Stored showtimes never reference unsaved movies
    try:
        await asyncio.to_thread(store.merge_movies, movies)
        await asyncio.to_thread(store.replace_theater_showtimes, theater_id, showtimes)
    except StorageError as e:
        logger.error(f"Failed to store showtimes for {theater_id}: {e}", exc_info=True)
        return _outcome(theater_id, "error", str(e))

    return _outcome(
        theater_id,
        "success",
        movies_scraped=len(movies),
        showtimes_scraped=len(showtimes),
    )


async def run_once(
    theater_ids: list[str] | None = None,
    *,
    registry: SourceRegistry | None = None,
    store: DatasetStore | None = None,
    resolver: MetadataResolver | None = None,
    today: date | None = None,
) -> list[RunOutcome]:
    """
    Run the requested sources once and merge their results.

    Sources run concurrently, bounded by ``settings.max_concurrent_theaters``.
    Each attempted theater contributes exactly one RunOutcome, which is also
    appended to the stored run history.

    Args:
        theater_ids: Theaters to scrape, or None for every registered source
        registry: Available sources (builds the default registry if not provided)
        store: Dataset store (uses the configured data path if not provided)
        resolver: Metadata resolver (creates default if not provided)
        today: Reference date for date parsing and the validity window

    Returns:
        One RunOutcome per attempted theater, in the order requested
    """
    registry = registry or build_default_registry()
    store = store or DatasetStore()
    resolver = resolver or MetadataResolver()
    today = today or date.today()

    sources = registry.select(theater_ids)
    if not sources:
        logger.warning(f"No valid sources to run. Available: {', '.join(registry.ids())}")
        return []

    await asyncio.to_thread(store.save_theaters, [source.theater for source in registry.all()])

    logger.info(f"Running {len(sources)} source(s)")
    semaphore = asyncio.Semaphore(settings.max_concurrent_theaters)

    async def run_guarded(source: BaseSource) -> RunOutcome:
        async with semaphore:
            outcome = await run_source(source, store, resolver, today)
        await asyncio.to_thread(store.append_run_outcome, outcome)
        return outcome

    outcomes = list(await asyncio.gather(*(run_guarded(source) for source in sources)))

    successes = sum(1 for outcome in outcomes if outcome.status == "success")
    total = sum(outcome.showtimes_scraped for outcome in outcomes)
    logger.info(
        f"Scrape complete: {successes} succeeded, {len(outcomes) - successes} failed, "
        f"{total} showtimes stored"
    )
    return outcomes
