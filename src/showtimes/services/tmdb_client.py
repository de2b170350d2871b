"""TMDb API client for fetching movie metadata."""

import logging
from typing import Any

import httpx

from showtimes.config import settings

logger = logging.getLogger(__name__)


class TMDbClient:
    """Client for The Movie Database (TMDb) API."""

    BASE_URL = "https://api.themoviedb.org/3"
    IMAGE_BASE_URL = "https://image.tmdb.org/t/p"
    POSTER_SIZE = "w500"
    BACKDROP_SIZE = "w1280"

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        language: str | None = None,
    ) -> None:
        """
        Initialize TMDb client.

        Args:
            api_key: TMDb API key (uses settings if not provided)
            timeout: Per-request timeout in seconds (uses settings if not provided)
            language: Response language (uses settings if not provided)
        """
        self.api_key = api_key or settings.tmdb_api_key
        self.timeout = timeout or settings.tmdb_timeout
        self.language = language or settings.tmdb_language
        if not self.api_key:
            logger.warning("TMDb API key not configured")

    async def search_movies(self, query: str) -> list[dict[str, Any]]:
        """
        Search for movies matching a free-text query.

        Args:
            query: Movie title to search for

        Returns:
            Match candidates in TMDb's order; empty on no match or error
        """
        if not self.api_key:
            logger.warning("Cannot search TMDb without API key")
            return []

        params: dict[str, Any] = {
            "api_key": self.api_key,
            "query": query,
            "language": self.language,
            "page": 1,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(f"{self.BASE_URL}/search/movie", params=params)
                response.raise_for_status()
                data = response.json()

                results = data.get("results") or []
                # Entries without an object shape are unusable
                results = [result for result in results if isinstance(result, dict)]
                if not results:
                    logger.info(f"No TMDb results for: {query}")
                return results

        except Exception as e:
            logger.error(f"TMDb search error for '{query}': {e}")
            return []

    async def get_movie_details(self, tmdb_id: int) -> dict[str, Any] | None:
        """
        Get full movie details including credits and release certifications.

        Args:
            tmdb_id: TMDb movie ID

        Returns:
            Movie details or None if error
        """
        if not self.api_key:
            logger.warning("Cannot fetch TMDb details without API key")
            return None

        params = {
            "api_key": self.api_key,
            "language": self.language,
            "append_to_response": "credits,release_dates",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(f"{self.BASE_URL}/movie/{tmdb_id}", params=params)
                response.raise_for_status()
                data = response.json()
                if not isinstance(data, dict):
                    raise ValueError(f"unexpected payload type {type(data).__name__}")
                return data

        except Exception as e:
            logger.error(f"TMDb details error for ID {tmdb_id}: {e}")
            return None

    def extract_director(self, credits: dict[str, Any]) -> str:
        """Return the first crew member whose job is Director, or ""."""
        for person in _records(credits, "crew"):
            if person.get("job") == "Director" and person.get("name"):
                return str(person["name"])
        return ""

    def extract_cast(self, credits: dict[str, Any], n: int = 5) -> list[str]:
        """
        Extract top-billed cast member names from TMDb credits.

        Args:
            credits: TMDb credits data
            n: Maximum number of cast members to return

        Returns:
            List of actor names (up to n), in billing order
        """
        cast = _records(credits, "cast")
        return [str(person["name"]) for person in cast[:n] if person.get("name")]

    def extract_genres(self, details: dict[str, Any]) -> list[str]:
        """Genre names in the order TMDb lists them, without repeats."""
        genres: list[str] = []
        for genre in _records(details, "genres"):
            name = genre.get("name")
            if name and str(name) not in genres:
                genres.append(str(name))
        return genres

    def extract_certification(self, details: dict[str, Any], region: str = "US") -> str:
        """
        Find the content rating for a region.

        Args:
            details: TMDb movie details with release_dates appended
            region: ISO 3166-1 country code

        Returns:
            First non-empty certification for the region, else "NR"
        """
        release_dates = details.get("release_dates")
        for result in _records(release_dates, "results"):
            if result.get("iso_3166_1") != region:
                continue
            for release in _records(result, "release_dates"):
                certification = str(release.get("certification") or "").strip()
                if certification:
                    return certification
            break
        return "NR"

    def build_image_url(self, path: str | None, size: str) -> str:
        """Turn a TMDb image path into a full URL; empty paths stay empty."""
        if not path:
            return ""
        return f"{self.IMAGE_BASE_URL}/{size}{path}"


def _records(container: Any, key: str) -> list[dict[str, Any]]:
    """The dict entries of ``container[key]``; anything else in the payload is skipped."""
    if not isinstance(container, dict):
        return []
    value = container.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]
