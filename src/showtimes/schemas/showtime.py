"""Pydantic schemas for showtime data."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

FilmFormat = Literal["digital", "35mm", "70mm", "IMAX"]


class Showtime(BaseModel):
    """A single canonical screening at a theater."""

    model_config = ConfigDict(frozen=True)

    id: str
    theater_id: str
    movie_title: str
    tmdb_id: int | None = None
    date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")  # YYYY-MM-DD
    time: str = Field(pattern=r"^\d{2}:\d{2}$")  # HH:MM, 24-hour
    format: FilmFormat = "digital"
    price: float | None = None
    link: str | None = None
    screen: str | None = None
