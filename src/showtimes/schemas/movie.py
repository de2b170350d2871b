"""Pydantic schemas for movie metadata."""

from pydantic import BaseModel, Field

PLACEHOLDER_POSTER = "/assets/placeholder-poster.png"


class Movie(BaseModel):
    """
    Movie metadata resolved from TMDb.

    Placeholder records (``limited_info=True``) are synthesized when
    resolution fails; they always carry ``tmdb_id == 0``.
    """

    tmdb_id: int = 0
    title: str
    original_title: str = ""
    overview: str = ""
    runtime: int = 0
    rating: str = "NR"
    genres: list[str] = Field(default_factory=list)
    release_date: str = ""
    poster_path: str = ""
    backdrop_path: str = ""
    tmdb_rating: float = 0.0
    vote_count: int = 0
    popularity: float = 0.0
    cast: list[str] = Field(default_factory=list)
    director: str = ""
    limited_info: bool = False

    @classmethod
    def placeholder(cls, title: str) -> "Movie":
        """Build the stand-in record used when TMDb has nothing for *title*."""
        return cls(
            tmdb_id=0,
            title=title,
            overview="",
            rating="NR",
            genres=[],
            poster_path=PLACEHOLDER_POSTER,
            limited_info=True,
        )
