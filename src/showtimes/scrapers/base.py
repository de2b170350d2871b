"""Base source interface for all theater scrapers."""

from abc import ABC, abstractmethod

from showtimes.schemas.theater import Theater
from showtimes.scrapers.models import RawCandidate
from showtimes.utils.text import normalise_title


class BaseSource(ABC):
    """
    Abstract base class for all theater sources.

    A source knows which theater it serves and how to turn that theater's
    pages into raw candidates. Normalization, validation and enrichment are
    applied afterwards by the pipeline.
    """

    theater: Theater

    # Sources that can list two films in the same slot include the title in ids
    uses_title_in_id: bool = False

    @property
    def source_id(self) -> str:
        return self.theater.id

    @abstractmethod
    async def fetch_candidates(self) -> list[RawCandidate]:
        """
        Scrape the theater's current schedule.

        Returns:
            Raw candidates in the order they were extracted

        Raises:
            SourceError: If the schedule could not be fetched at all. Failures
                on individual pages or entries are logged and skipped.
        """

    def clean_title(self, raw_title: str) -> str | None:
        """
        Normalize a scraped title for matching.

        Args:
            raw_title: Title text from the theater website

        Returns:
            Normalized title, or None if the listing is not a film screening
        """
        return normalise_title(raw_title) or None
