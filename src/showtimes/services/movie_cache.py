"""In-memory, time-boxed cache of resolved movie metadata."""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from showtimes.config import settings
from showtimes.schemas.movie import Movie

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class _CacheEntry:
    key: str
    movie: Movie
    expires_at: datetime


class MovieCache:
    """
    TTL cache for Movie records, shared by concurrent resolutions.

    Writers (``set``, ``clear``, the expiry sweep) are serialized by a lock.
    Readers never take it: the entry map is only ever replaced or mutated
    one key at a time, so a lookup sees either the old or the new entry.

    The expiry sweep is an APScheduler interval job owned by the cache. It is
    started by ``start()`` and stopped by ``shutdown()``; the cache can also
    be used as a context manager.
    """

    SWEEP_JOB_ID = "movie_cache_sweep"

    def __init__(
        self,
        ttl: timedelta | None = None,
        sweep_interval: timedelta | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """
        Initialize the cache.

        Args:
            ttl: Lifetime of an entry (uses settings if not provided)
            sweep_interval: How often expired entries are purged (uses settings if not provided)
            clock: Source of the current time, overridable in tests
        """
        self.ttl = ttl or timedelta(hours=settings.cache_ttl_hours)
        self.sweep_interval = sweep_interval or timedelta(minutes=settings.cache_sweep_minutes)
        self._clock = clock
        self._entries: dict[str, _CacheEntry] = {}
        self._lock = threading.RLock()
        self._scheduler: BackgroundScheduler | None = None

    def get(self, key: str) -> Movie | None:
        """Return the cached movie for *key*, or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() > entry.expires_at:
            return None
        return entry.movie.model_copy(deep=True)

    def set(self, key: str, movie: Movie) -> None:
        """Store *movie* under *key* for one TTL."""
        entry = _CacheEntry(
            key=key,
            movie=movie.model_copy(deep=True),
            expires_at=self._clock() + self.ttl,
        )
        with self._lock:
            self._entries[key] = entry

    def purge_expired(self) -> int:
        """Remove expired entries and return how many were dropped."""
        with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._entries.items() if now > entry.expires_at]
            for key in expired:
                del self._entries[key]

        if expired:
            logger.debug(f"Movie cache sweep removed {len(expired)} expired entries")
        return len(expired)

    def clear(self) -> None:
        """Drop every entry immediately."""
        with self._lock:
            self._entries = {}
        logger.info("Movie cache cleared")

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    # ------------------------------------------------------------------
    # Sweep lifecycle
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self) -> None:
        """Start the background expiry sweep."""
        if self.running:
            return

        scheduler = BackgroundScheduler()
        scheduler.add_job(
            self.purge_expired,
            trigger=IntervalTrigger(seconds=self.sweep_interval.total_seconds()),
            id=self.SWEEP_JOB_ID,
            name="Purge expired movie cache entries",
            replace_existing=True,
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info(f"Movie cache sweep started, every {self.sweep_interval}")

    def shutdown(self) -> None:
        """Stop the background expiry sweep."""
        if self._scheduler is None:
            return
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("Movie cache sweep shut down")

    def __enter__(self) -> "MovieCache":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()
