"""Read-side filters over the merged showtime list."""

from showtimes.schemas.showtime import Showtime


def filter_showtimes(
    showtimes: list[Showtime],
    theater_id: str | None = None,
    date: str | None = None,
    movie_title: str | None = None,
) -> list[Showtime]:
    """
    Filter showtimes by exact theater id, date and movie title.

    Any filter left as None (or empty) is not applied.
    """
    return [
        showtime
        for showtime in showtimes
        if (not theater_id or showtime.theater_id == theater_id)
        and (not date or showtime.date == date)
        and (not movie_title or showtime.movie_title == movie_title)
    ]


def sort_showtimes(showtimes: list[Showtime]) -> list[Showtime]:
    """Chronological order, then theater, then id, so output is stable across runs."""
    return sorted(showtimes, key=lambda s: (s.date, s.time, s.theater_id, s.id))
