"""Validity-window checks and deterministic identities for showtimes."""

import logging
from datetime import date, datetime

from dateutil.relativedelta import relativedelta
from pydantic import ValidationError

from showtimes.config import settings
from showtimes.schemas.showtime import Showtime
from showtimes.utils.parsing import CANONICAL_DATE
from showtimes.utils.text import slugify

logger = logging.getLogger(__name__)


def window_bounds(today: date | None = None, months: int | None = None) -> tuple[date, date]:
    """Return the inclusive (first, last) dates a showtime may fall on."""
    today = today or date.today()
    months = settings.validity_months if months is None else months
    return today, today + relativedelta(months=months)


def is_within_window(show_date: date, today: date | None = None, months: int | None = None) -> bool:
    """Check that *show_date* lies in ``[today, today + months]``, both ends inclusive."""
    first, last = window_bounds(today, months)
    return first <= show_date <= last


def showtime_id(theater_id: str, date_str: str, time_str: str, title: str | None = None) -> str:
    """
    Build the stable identity for a showtime.

    Args:
        theater_id: Owning theater
        date_str: Canonical date (YYYY-MM-DD)
        time_str: Canonical time (HH:MM)
        title: Movie title, for sources that can list two films in one slot

    Returns:
        "theater-YYYYMMDD-HHMM", or "theater-title-slug-YYYYMMDDHHMM" with a title
    """
    compact_date = date_str.replace("-", "")
    compact_time = time_str.replace(":", "")
    if title:
        return f"{theater_id}-{slugify(title)}-{compact_date}{compact_time}"
    return f"{theater_id}-{compact_date}-{compact_time}"


def build_showtime(
    theater_id: str,
    movie_title: str,
    date_str: str,
    time_str: str,
    film_format: str = "digital",
    *,
    link: str | None = None,
    price: float | None = None,
    screen: str | None = None,
    include_title: bool = False,
    today: date | None = None,
) -> Showtime | None:
    """
    Turn normalized fields into a Showtime, or None if the record is unusable.

    Records with an empty date or time, an unparsable date, or a date outside
    the validity window are dropped without raising.
    """
    if not date_str or not time_str or not movie_title:
        return None

    try:
        show_date = datetime.strptime(date_str, CANONICAL_DATE).date()
    except ValueError:
        return None

    if not is_within_window(show_date, today):
        logger.debug(f"Dropping {movie_title!r} on {date_str}: outside validity window")
        return None

    try:
        return Showtime(
            id=showtime_id(theater_id, date_str, time_str, movie_title if include_title else None),
            theater_id=theater_id,
            movie_title=movie_title,
            date=date_str,
            time=time_str,
            format=film_format,
            price=price,
            link=link or None,
            screen=screen or None,
        )
    except ValidationError as e:
        logger.debug(f"Dropping malformed showtime for {movie_title!r}: {e}")
        return None


def collapse_duplicates(showtimes: list[Showtime]) -> list[Showtime]:
    """Keep the first showtime for each id, preserving extraction order."""
    seen: dict[str, Showtime] = {}
    for showtime in showtimes:
        if showtime.id in seen:
            logger.debug(f"Duplicate showtime id {showtime.id}, keeping first")
            continue
        seen[showtime.id] = showtime
    return list(seen.values())
