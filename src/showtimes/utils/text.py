"""Text normalization utilities for movie title matching."""

import re

_YEAR_IN_PARENS = re.compile(r"\s*\(\d{4}\)\s*")
_TRAILING_PAREN_TAG = re.compile(r"\s*\([^)]*\)\s*$")
_PRESENTS_PREFIX = re.compile(r"^.*?\bpresents:\s*", re.IGNORECASE)
_WITH_SUFFIX = re.compile(r"\s+with\s+", re.IGNORECASE)

# Live events some theaters list alongside screenings
NON_FILM_KEYWORDS = (
    "comedy night",
    "live concert",
    "drag show",
    "stand up",
    "standup",
    "performance",
)


def normalise_title(title: str) -> str:
    """
    Normalize a movie title for TMDb search and identity.

    Removes common variations to improve matching accuracy:
    - Parenthetical suffixes: "Blade Runner (Director's Cut)" → "Blade Runner"
    - Dash suffixes: "Movie Title - 25th Anniversary" → "Movie Title"
    - Year indicators: "The Matrix (1999)" → "The Matrix"

    A leading parenthetical is part of the title and is kept, so
    "(500) Days of Summer" is unchanged. A dash suffix is only removed when
    the remaining prefix is longer than three characters.

    Args:
        title: Raw movie title

    Returns:
        Normalized title suitable for matching
    """
    title = title.strip()

    paren = title.find("(")
    if paren > 0:
        base = title[:paren].strip()
        if base:
            title = base

    dash = title.find(" - ")
    if dash > 0:
        base = title[:dash].strip()
        if len(base) > 3:
            title = base

    title = _YEAR_IN_PARENS.sub(" ", title)

    return title.strip()


def clean_event_title(title: str) -> str:
    """
    Reduce an event-calendar listing to the film title it screens.

    Handles listings of the form "Festival presents: Movie (1999) with Guest"
    as well as trailing series tags such as "Movie (Church of Film)".
    """
    cleaned = title.strip()

    cleaned = _PRESENTS_PREFIX.sub("", cleaned, count=1)

    # Guest screenings: "Movie Title with Director Q&A" -> "Movie Title"
    match = _WITH_SUFFIX.search(cleaned)
    if match and match.start() > 0:
        cleaned = cleaned[: match.start()]

    cleaned = _YEAR_IN_PARENS.sub(" ", cleaned).strip()
    cleaned = _TRAILING_PAREN_TAG.sub("", cleaned)

    return cleaned.strip()


def is_non_film_event(title: str, raw_title: str) -> bool:
    """Return True if either form of the title names a live, non-film event."""
    lower_title = title.lower()
    lower_raw = raw_title.lower()
    return any(
        keyword in lower_title or keyword in lower_raw for keyword in NON_FILM_KEYWORDS
    )


def slugify(text: str) -> str:
    """
    Convert text to a URL-safe slug.

    Args:
        text: Text to slugify

    Returns:
        Lowercase slug with runs of non-alphanumerics collapsed to one hyphen
    """
    text = text.lower()
    text = re.sub(r"[^a-z0-9]+", "-", text)
    return text.strip("-")
