"""Shared test fixtures."""

from collections.abc import Callable
from datetime import date
from pathlib import Path

import pytest

from showtimes.schemas import Showtime
from showtimes.storage import DatasetStore

TODAY = date(2026, 1, 1)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def store(tmp_path: Path) -> DatasetStore:
    return DatasetStore(tmp_path / "data")


@pytest.fixture
def make_showtime() -> Callable[..., Showtime]:
    """Factory for showtimes with sensible defaults."""

    def factory(
        id: str = "theater-a-20260215-1900",
        theater_id: str = "theater-a",
        movie_title: str = "Movie A",
        date: str = "2026-02-15",
        time: str = "19:00",
        format: str = "digital",
        **kwargs: object,
    ) -> Showtime:
        return Showtime(
            id=id,
            theater_id=theater_id,
            movie_title=movie_title,
            date=date,
            time=time,
            format=format,
            **kwargs,
        )

    return factory
