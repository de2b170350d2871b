"""Registry of theater sources, built once at startup and passed around explicitly."""

import logging

from showtimes.scrapers.base import BaseSource

logger = logging.getLogger(__name__)


class SourceRegistry:
    """Sources keyed by theater id."""

    def __init__(self, sources: list[BaseSource] | None = None) -> None:
        self._sources: dict[str, BaseSource] = {}
        for source in sources or []:
            self.register(source)

    def register(self, source: BaseSource) -> None:
        """
        Add a source.

        Raises:
            ValueError: If a source for the same theater is already registered
        """
        if source.source_id in self._sources:
            raise ValueError(f"Source already registered: {source.source_id}")
        self._sources[source.source_id] = source

    def get(self, source_id: str) -> BaseSource | None:
        return self._sources.get(source_id)

    def ids(self) -> list[str]:
        """Registered theater ids, sorted."""
        return sorted(self._sources)

    def all(self) -> list[BaseSource]:
        """Registered sources, sorted by theater id."""
        return [self._sources[source_id] for source_id in self.ids()]

    def select(self, source_ids: list[str] | None = None) -> list[BaseSource]:
        """
        Resolve requested ids to sources.

        Args:
            source_ids: Theater ids to run, or None for every source

        Returns:
            Matching sources; unknown ids are logged and skipped
        """
        if source_ids is None:
            return self.all()

        selected: list[BaseSource] = []
        for source_id in dict.fromkeys(source_ids):
            source = self.get(source_id)
            if source is None:
                logger.warning(
                    f"Source '{source_id}' not found, skipping "
                    f"(available: {', '.join(self.ids())})"
                )
                continue
            selected.append(source)
        return selected

    def __len__(self) -> int:
        return len(self._sources)

    def __contains__(self, source_id: str) -> bool:
        return source_id in self._sources
