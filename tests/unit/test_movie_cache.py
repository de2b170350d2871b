"""Tests for the TTL movie cache."""

import threading
from datetime import datetime, timedelta, timezone

from showtimes.schemas import Movie
from showtimes.services.movie_cache import MovieCache

START = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


def make_cache(clock: FakeClock, ttl: timedelta = timedelta(hours=1)) -> MovieCache:
    return MovieCache(ttl=ttl, sweep_interval=timedelta(minutes=5), clock=clock)


class TestGetSet:
    def test_returns_none_for_missing_key(self) -> None:
        cache = make_cache(FakeClock())
        assert cache.get("nosferatu") is None

    def test_returns_stored_movie(self) -> None:
        cache = make_cache(FakeClock())
        cache.set("nosferatu", Movie(tmdb_id=1, title="Nosferatu"))

        movie = cache.get("nosferatu")

        assert movie is not None
        assert movie.tmdb_id == 1

    def test_entry_valid_until_expiry(self) -> None:
        clock = FakeClock()
        cache = make_cache(clock)
        cache.set("nosferatu", Movie(tmdb_id=1, title="Nosferatu"))

        clock.advance(timedelta(hours=1))

        assert cache.get("nosferatu") is not None

    def test_entry_expires_after_ttl(self) -> None:
        clock = FakeClock()
        cache = make_cache(clock)
        cache.set("nosferatu", Movie(tmdb_id=1, title="Nosferatu"))

        clock.advance(timedelta(hours=1, seconds=1))

        assert cache.get("nosferatu") is None

    def test_returned_movie_is_a_copy(self) -> None:
        cache = make_cache(FakeClock())
        cache.set("nosferatu", Movie(tmdb_id=1, title="Nosferatu", genres=["Horror"]))

        cache.get("nosferatu").genres.append("Comedy")  # type: ignore[union-attr]

        assert cache.get("nosferatu").genres == ["Horror"]  # type: ignore[union-attr]

    def test_set_replaces_existing_entry(self) -> None:
        cache = make_cache(FakeClock())
        cache.set("key", Movie(tmdb_id=1, title="Old"))
        cache.set("key", Movie(tmdb_id=2, title="New"))

        assert cache.get("key").title == "New"  # type: ignore[union-attr]
        assert len(cache) == 1


class TestMaintenance:
    def test_purge_removes_only_expired_entries(self) -> None:
        clock = FakeClock()
        cache = make_cache(clock)
        cache.set("old", Movie(title="Old"))
        clock.advance(timedelta(minutes=45))
        cache.set("new", Movie(title="New"))
        clock.advance(timedelta(minutes=30))

        removed = cache.purge_expired()

        assert removed == 1
        assert "old" not in cache
        assert "new" in cache
        assert len(cache) == 1

    def test_clear_drops_everything(self) -> None:
        cache = make_cache(FakeClock())
        cache.set("a", Movie(title="A"))
        cache.set("b", Movie(title="B"))

        cache.clear()

        assert len(cache) == 0
        assert cache.get("a") is None

    def test_concurrent_writers_do_not_lose_entries(self) -> None:
        cache = make_cache(FakeClock())

        def writer(prefix: str) -> None:
            for i in range(200):
                cache.set(f"{prefix}-{i}", Movie(title=f"{prefix} {i}"))

        threads = [threading.Thread(target=writer, args=(f"t{n}",)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(cache) == 800


class TestSweepLifecycle:
    def test_start_registers_sweep_job(self) -> None:
        cache = make_cache(FakeClock())
        cache.start()
        try:
            assert cache.running
            job = cache._scheduler.get_job(MovieCache.SWEEP_JOB_ID)  # type: ignore[union-attr]
            assert job is not None
            assert job.func == cache.purge_expired
        finally:
            cache.shutdown()

        assert not cache.running

    def test_start_is_idempotent(self) -> None:
        cache = make_cache(FakeClock())
        cache.start()
        scheduler = cache._scheduler
        cache.start()
        try:
            assert cache._scheduler is scheduler
        finally:
            cache.shutdown()

    def test_context_manager_starts_and_stops_sweep(self) -> None:
        with make_cache(FakeClock()) as cache:
            assert cache.running
        assert not cache.running

    def test_shutdown_without_start_is_a_no_op(self) -> None:
        cache = make_cache(FakeClock())
        cache.shutdown()
        assert not cache.running
