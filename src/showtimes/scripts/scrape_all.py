"""Run every registered theater source once and merge the results.

Run with:
    python -m showtimes.scripts.scrape_all
"""

import asyncio
import logging

from showtimes.config import settings
from showtimes.scrapers import build_default_registry
from showtimes.services.metadata_resolver import MetadataResolver
from showtimes.services.movie_cache import MovieCache
from showtimes.storage import DatasetStore
from showtimes.tasks.scrape_job import run_once

logging.basicConfig(level=settings.log_level, format="%(levelname)s %(message)s")
logger = logging.getLogger(__name__)


async def scrape_all() -> int:
    registry = build_default_registry()
    store = DatasetStore()

    with MovieCache() as cache:
        resolver = MetadataResolver(cache=cache)
        outcomes = await run_once(registry=registry, store=store, resolver=resolver)

    for outcome in outcomes:
        if outcome.status == "success":
            logger.info(
                f"  ✓ {outcome.theater_id}: {outcome.showtimes_scraped} showtimes, "
                f"{outcome.movies_scraped} movies"
            )
        else:
            logger.warning(f"  ✗ {outcome.theater_id}: {outcome.error_message}")

    dataset = store.load()
    logger.info(
        f"Dataset now holds {len(dataset.showtimes)} showtimes "
        f"and {len(dataset.movies)} movies across {len(dataset.theaters)} theaters"
    )
    return 0 if all(outcome.status == "success" for outcome in outcomes) else 1


if __name__ == "__main__":
    raise SystemExit(asyncio.run(scrape_all()))
