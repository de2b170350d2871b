"""Remove placeholder movies from the dataset.

A placeholder is stored when a title can't be matched to TMDb. Dropping
placeholders from movies.json lets the next scrape look those titles up
again, e.g. after the title normalization has been improved.

Run with:
    python -m showtimes.scripts.clean_placeholders
"""

import logging

from showtimes.config import settings
from showtimes.storage import DatasetStore

logging.basicConfig(level=settings.log_level, format="%(levelname)s %(message)s")
logger = logging.getLogger(__name__)


def clean_placeholders() -> int:
    store = DatasetStore()
    removed = store.remove_placeholder_movies()
    logger.info(f"Removed {removed} placeholder movie(s) from {store.data_path}")
    return removed


if __name__ == "__main__":
    clean_placeholders()
