"""JSON file persistence for the shared showtimes dataset."""

import json
import logging
import os
import tempfile
import threading
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from showtimes.config import settings
from showtimes.exceptions import StorageError
from showtimes.schemas import Dataset, Movie, RunOutcome, Showtime, Theater

logger = logging.getLogger(__name__)

THEATERS_FILE = "theaters.json"
SHOWTIMES_FILE = "showtimes.json"
MOVIES_FILE = "movies.json"
METADATA_FILE = "metadata.json"

_theaters = TypeAdapter(list[Theater])
_showtimes = TypeAdapter(list[Showtime])
_movie_map = TypeAdapter(dict[str, Movie])
_movie_list = TypeAdapter(list[Movie])
_history = TypeAdapter(list[RunOutcome])


class DatasetStore:
    """
    File-backed store for theaters, showtimes, movies and run history.

    Every write goes to a temporary file that is then renamed over the
    target, so a reader always sees a whole file. Read-modify-write cycles
    hold an exclusive lock; plain reads do not need it.
    """

    def __init__(self, data_path: str | Path | None = None, history_limit: int | None = None) -> None:
        """
        Initialize the store, creating the data directory if needed.

        Args:
            data_path: Directory holding the JSON files (uses settings if not provided)
            history_limit: Number of run outcomes kept (uses settings if not provided)
        """
        self.data_path = Path(data_path or settings.data_path)
        self.history_limit = history_limit or settings.history_limit
        self._lock = threading.Lock()

        try:
            self.data_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"failed to create data directory {self.data_path}: {e}") from e

    # ------------------------------------------------------------------
    # Theaters
    # ------------------------------------------------------------------

    def save_theaters(self, theaters: list[Theater]) -> None:
        with self._lock:
            self._write(THEATERS_FILE, _theaters.dump_python(theaters, mode="json"))

    def load_theaters(self) -> list[Theater]:
        return self._load(THEATERS_FILE, _theaters, [])

    # ------------------------------------------------------------------
    # Showtimes
    # ------------------------------------------------------------------

    def save_showtimes(self, showtimes: list[Showtime]) -> None:
        """Overwrite the whole showtime list."""
        with self._lock:
            self._write(SHOWTIMES_FILE, _showtimes.dump_python(showtimes, mode="json"))

    def load_showtimes(self) -> list[Showtime]:
        return self._load(SHOWTIMES_FILE, _showtimes, [])

    def replace_theater_showtimes(self, theater_id: str, showtimes: list[Showtime]) -> None:
        """
        Swap one theater's showtimes for a new set.

        Showtimes of every other theater are kept as stored, in their
        existing order; the new ones follow them. An empty list clears the
        theater's schedule.

        Args:
            theater_id: Theater whose slice is replaced
            showtimes: The theater's complete new schedule

        Raises:
            StorageError: If the dataset cannot be read or written
        """
        with self._lock:
            raw = self._read(SHOWTIMES_FILE) or []
            if not isinstance(raw, list) or not all(isinstance(item, dict) for item in raw):
                raise StorageError(f"{SHOWTIMES_FILE} does not hold a list of showtime objects")

            kept = [item for item in raw if item.get("theater_id") != theater_id]
            added = _showtimes.dump_python(showtimes, mode="json")
            self._write(SHOWTIMES_FILE, kept + added)

        logger.info(
            f"Replaced showtimes for {theater_id}: {len(added)} stored, "
            f"{len(kept)} from other theaters kept"
        )

    # ------------------------------------------------------------------
    # Movies
    # ------------------------------------------------------------------

    def load_movie_map(self) -> dict[str, Movie]:
        """
        Load movies keyed by title.

        Accepts both the title-keyed mapping this store writes and the older
        plain list layout.
        """
        raw = self._read(MOVIES_FILE)
        if raw is None:
            return {}

        try:
            if isinstance(raw, dict):
                movies = {title: movie for title, movie in raw.items() if movie is not None}
                return _movie_map.validate_python(movies)
            return {movie.title: movie for movie in _movie_list.validate_python(raw)}
        except ValidationError as e:
            raise StorageError(f"invalid data in {MOVIES_FILE}: {e}") from e

    def load_movies(self) -> list[Movie]:
        """All stored movies, ordered by title."""
        return sorted(self.load_movie_map().values(), key=lambda movie: movie.title)

    def save_movies(self, movies: dict[str, Movie]) -> None:
        """Overwrite the movie mapping."""
        with self._lock:
            self._write_movies(movies)

    def merge_movies(self, movies: dict[str, Movie]) -> None:
        """Add or update movies by title, leaving other entries in place."""
        if not movies:
            return
        with self._lock:
            merged = self.load_movie_map()
            merged.update(movies)
            self._write_movies(merged)

    def remove_placeholder_movies(self) -> int:
        """Drop ``limited_info`` movies so the next run looks them up again."""
        with self._lock:
            movies = self.load_movie_map()
            kept = {title: movie for title, movie in movies.items() if not movie.limited_info}
            self._write_movies(kept)
        return len(movies) - len(kept)

    def _write_movies(self, movies: dict[str, Movie]) -> None:
        ordered = {title: movies[title] for title in sorted(movies)}
        self._write(MOVIES_FILE, _movie_map.dump_python(ordered, mode="json"))

    # ------------------------------------------------------------------
    # Run history
    # ------------------------------------------------------------------

    def append_run_outcome(self, outcome: RunOutcome) -> None:
        """Record a run, keeping only the most recent ``history_limit`` entries."""
        with self._lock:
            history = self._load(METADATA_FILE, _history, [])
            history.append(outcome)
            history = history[-self.history_limit :]
            self._write(METADATA_FILE, _history.dump_python(history, mode="json"))

    def load_run_history(self) -> list[RunOutcome]:
        return self._load(METADATA_FILE, _history, [])

    def get_last_update(self) -> datetime | None:
        """Timestamp of the most recent run outcome, or None if nothing has run."""
        history = self.load_run_history()
        if not history:
            return None
        return history[-1].last_updated

    # ------------------------------------------------------------------
    # Whole dataset
    # ------------------------------------------------------------------

    def load(self) -> Dataset:
        return Dataset(
            theaters=self.load_theaters(),
            showtimes=self.load_showtimes(),
            movies=self.load_movies(),
            history=self.load_run_history(),
        )

    # ------------------------------------------------------------------
    # File helpers
    # ------------------------------------------------------------------

    def _load(self, name: str, adapter: TypeAdapter, default: Any) -> Any:
        raw = self._read(name)
        if raw is None:
            return default
        try:
            return adapter.validate_python(raw)
        except ValidationError as e:
            raise StorageError(f"invalid data in {name}: {e}") from e

    def _read(self, name: str) -> Any:
        """Decode a JSON file; a missing file reads as None."""
        path = self.data_path / name
        try:
            with path.open(encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            return None
        except json.JSONDecodeError as e:
            raise StorageError(f"failed to decode {path}: {e}") from e
        except OSError as e:
            raise StorageError(f"failed to open {path}: {e}") from e

    def _write(self, name: str, data: Any) -> None:
        """Write JSON atomically via a temporary file in the same directory."""
        path = self.data_path / name
        temp_name: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", delete=False, dir=self.data_path, suffix=".tmp"
            ) as tf:
                temp_name = tf.name
                json.dump(data, tf, ensure_ascii=False, indent=2)
                tf.flush()
                os.fsync(tf.fileno())
            os.replace(temp_name, path)
            temp_name = None
        except OSError as e:
            raise StorageError(f"failed to write {path}: {e}") from e
        finally:
            if temp_name and os.path.exists(temp_name):
                os.remove(temp_name)
