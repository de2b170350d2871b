"""Movie metadata resolution with caching and placeholder fallback."""

import asyncio
import logging
from typing import Any

from pydantic import ValidationError
from rapidfuzz import fuzz

from showtimes.config import settings
from showtimes.schemas.movie import Movie
from showtimes.schemas.showtime import Showtime
from showtimes.services.movie_cache import MovieCache
from showtimes.services.tmdb_client import TMDbClient
from showtimes.utils.text import normalise_title

logger = logging.getLogger(__name__)


class MetadataResolver:
    """
    Service for resolving scraped movie titles to TMDb metadata.

    Uses a multi-stage process:
    1. Check the shared cache under the normalized title
    2. Search TMDb and pick the best-matching result
    3. Fetch details (runtime, genres, credits, certifications)
    4. Fall back to a placeholder record if any stage fails
    5. Cache whatever was produced, placeholders included
    """

    def __init__(
        self,
        tmdb_client: TMDbClient | None = None,
        cache: MovieCache | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        Initialize the resolver.

        Args:
            tmdb_client: TMDb client (creates default if not provided)
            cache: Shared movie cache (creates a private one if not provided)
            timeout: Upper bound in seconds on one title's search plus details lookup
        """
        self.tmdb_client = tmdb_client or TMDbClient()
        self.cache = cache or MovieCache()
        # A lookup is a search followed by a details request
        self.timeout = timeout if timeout is not None else settings.tmdb_timeout * 2

    @staticmethod
    def cache_key(title: str) -> str:
        """Cache key for a title lookup."""
        return (normalise_title(title) or title.strip()).lower()

    async def resolve(self, title: str) -> Movie:
        """
        Resolve a movie title to metadata. Never raises.

        Args:
            title: Movie title as it appears in the schedule

        Returns:
            Resolved Movie, or a placeholder with ``limited_info=True``
        """
        key = self.cache_key(title)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Cache hit for '{title}'")
            return cached

        query = normalise_title(title) or title.strip()
        logger.info(f"Resolving movie: '{title}' -> '{query}'")

        try:
            movie = await asyncio.wait_for(self._lookup(query), timeout=self.timeout)
        except TimeoutError:
            logger.warning(f"TMDb lookup for '{query}' timed out after {self.timeout}s")
            movie = None
        except Exception as e:
            logger.warning(f"TMDb lookup for '{query}' failed: {e}", exc_info=True)
            movie = None

        if movie is None:
            logger.info(f"Using placeholder for: {title}")
            movie = Movie.placeholder(title)

        self.cache.set(key, movie)
        return movie

    async def resolve_by_id(self, tmdb_id: int) -> Movie | None:
        """
        Fetch metadata directly by TMDb ID.

        Args:
            tmdb_id: TMDb movie ID

        Returns:
            Movie, or None if TMDb could not supply details
        """
        key = f"id-{tmdb_id}"
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        try:
            details = await asyncio.wait_for(
                self.tmdb_client.get_movie_details(tmdb_id), timeout=self.timeout
            )
        except TimeoutError:
            logger.warning(f"TMDb details for ID {tmdb_id} timed out after {self.timeout}s")
            return None

        if not details:
            return None

        try:
            movie = self._movie_from_details(details)
        except ValidationError as e:
            logger.warning(f"Unusable TMDb details for ID {tmdb_id}: {e}")
            return None
        self.cache.set(key, movie)
        return movie

    async def enrich_showtimes(
        self, showtimes: list[Showtime]
    ) -> tuple[list[Showtime], dict[str, Movie]]:
        """
        Attach TMDb identity to each showtime.

        Each distinct title is resolved once per call, in the order it first
        appears.

        Args:
            showtimes: Validated showtimes for one run

        Returns:
            Showtimes with ``tmdb_id`` set (None for placeholders) and the
            resolved movies keyed by movie title
        """
        movies: dict[str, Movie] = {}
        for title in dict.fromkeys(showtime.movie_title for showtime in showtimes):
            movies[title] = await self.resolve(title)

        enriched = [
            showtime.model_copy(update={"tmdb_id": movies[showtime.movie_title].tmdb_id or None})
            for showtime in showtimes
        ]
        return enriched, movies

    async def _lookup(self, query: str) -> Movie | None:
        """Search TMDb and build a Movie from the best result's details."""
        results = await self.tmdb_client.search_movies(query)
        if not results:
            return None

        best = self._best_match(query, results)
        tmdb_id = best.get("id")
        if not tmdb_id:
            return None

        details = await self.tmdb_client.get_movie_details(tmdb_id)
        if not details:
            return None

        return self._movie_from_details(details, search_result=best)

    def _best_match(self, query: str, results: list[dict[str, Any]]) -> dict[str, Any]:
        """Pick the result whose title is closest to the query; earlier results win ties."""
        query = query.lower()
        scored = [
            (fuzz.ratio(query, str(result.get("title") or "").lower()), -index, result)
            for index, result in enumerate(results)
        ]
        score, _, best = max(scored, key=lambda item: (item[0], item[1]))
        logger.debug(f"Best TMDb match for '{query}': {best.get('title')!r} ({score:.1f}%)")
        return best

    def _movie_from_details(
        self, details: dict[str, Any], search_result: dict[str, Any] | None = None
    ) -> Movie:
        """Map TMDb details (falling back to search fields) onto a Movie."""
        fallback = search_result or {}

        def field(name: str, default: Any) -> Any:
            value = details.get(name)
            if value is None:
                value = fallback.get(name)
            return default if value is None else value

        credits = details.get("credits") or {}
        client = self.tmdb_client

        return Movie(
            tmdb_id=field("id", 0),
            title=field("title", ""),
            original_title=field("original_title", ""),
            overview=field("overview", ""),
            runtime=field("runtime", 0),
            rating=client.extract_certification(details),
            genres=client.extract_genres(details),
            release_date=field("release_date", ""),
            poster_path=client.build_image_url(field("poster_path", ""), client.POSTER_SIZE),
            backdrop_path=client.build_image_url(field("backdrop_path", ""), client.BACKDROP_SIZE),
            tmdb_rating=field("vote_average", 0.0),
            vote_count=field("vote_count", 0),
            popularity=field("popularity", 0.0),
            cast=client.extract_cast(credits),
            director=client.extract_director(credits),
        )
