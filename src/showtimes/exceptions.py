"""Exceptions raised by the showtimes pipeline."""


class ShowtimesError(Exception):
    """Base class for pipeline errors."""


class SourceError(ShowtimesError):
    """A theater source failed to produce its schedule."""

    def __init__(self, source_id: str, message: str) -> None:
        self.source_id = source_id
        super().__init__(f"{source_id}: {message}")


class StorageError(ShowtimesError):
    """The shared dataset could not be read or written."""
