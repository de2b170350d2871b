"""Data models for scrapers."""

from dataclasses import dataclass


@dataclass
class RawCandidate:
    """
    One showtime as scraped, before any normalization.

    This is the output format that all sources must return. The pipeline
    normalizes each field, validates the result and discards the candidate.
    """

    title: str  # Movie title as it appears on the theater website
    date_text: str  # e.g. "February 12, 2026", "2/12/2026", "2026-02-12"
    time_text: str  # e.g. "7:30 PM", "19:30"
    format_text: str = ""  # Format badge text, e.g. "35MM", "IMAX"
    link: str | None = None  # Event or booking page
    price_text: str | None = None  # e.g. "$10"
    screen: str | None = None  # Screen/auditorium name
