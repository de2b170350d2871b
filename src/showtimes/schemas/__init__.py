"""Pydantic schemas for the showtimes dataset."""

from showtimes.schemas.dataset import Dataset
from showtimes.schemas.movie import PLACEHOLDER_POSTER, Movie
from showtimes.schemas.run import RunOutcome
from showtimes.schemas.showtime import FilmFormat, Showtime
from showtimes.schemas.theater import Theater

__all__ = [
    "Dataset",
    "FilmFormat",
    "Movie",
    "PLACEHOLDER_POSTER",
    "RunOutcome",
    "Showtime",
    "Theater",
]
