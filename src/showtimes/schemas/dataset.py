"""Pydantic schema for the full merged dataset."""

from pydantic import BaseModel, Field

from showtimes.schemas.movie import Movie
from showtimes.schemas.run import RunOutcome
from showtimes.schemas.showtime import Showtime
from showtimes.schemas.theater import Theater


class Dataset(BaseModel):
    """Snapshot of everything the store holds."""

    theaters: list[Theater] = Field(default_factory=list)
    showtimes: list[Showtime] = Field(default_factory=list)
    movies: list[Movie] = Field(default_factory=list)
    history: list[RunOutcome] = Field(default_factory=list)
