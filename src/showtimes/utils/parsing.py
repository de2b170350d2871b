"""Parsers that reduce scraped date, time, format and price text to canonical form.

Every function here is total: an empty string (or ``None`` for prices) means
the input could not be normalized and the caller should drop the record.
"""

import re
from datetime import date, datetime

CANONICAL_DATE = "%Y-%m-%d"

# Tried in order; first layout that parses wins. %m/%d also accept unpadded values.
DATE_LAYOUTS = (
    "%m/%d/%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%A, %B %d, %Y",
)

# Layouts without a year; the current year is implied.
YEARLESS_DATE_LAYOUTS = (
    "%A, %B %d",
    "%a, %b %d",
)

_CANONICAL_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_CANONICAL_TIME_RE = re.compile(r"^(\d{2}):(\d{2})$")
_CLOCK_TIME_RE = re.compile(r"^(\d{1,2})(?::(\d{2}))?\s*([ap]m)?$", re.IGNORECASE)


def normalize_date(text: str, today: date | None = None) -> str:
    """
    Convert a scraped date string to ``YYYY-MM-DD``.

    Args:
        text: Date text, e.g. "2/12/2026", "February 12, 2026", "Wednesday, February 11"
        today: Reference date for yearless layouts; dates before it roll into next year

    Returns:
        Canonical date string, or "" if no known layout matches
    """
    text = text.strip()
    if not text:
        return ""

    if _CANONICAL_DATE_RE.match(text):
        try:
            return datetime.strptime(text, CANONICAL_DATE).strftime(CANONICAL_DATE)
        except ValueError:
            return ""

    for layout in DATE_LAYOUTS:
        try:
            return datetime.strptime(text, layout).strftime(CANONICAL_DATE)
        except ValueError:
            continue

    # Append the year before parsing so that Feb 29 resolves in leap years.
    # A date already past this year rolls over to next year.
    today = today or date.today()
    for layout in YEARLESS_DATE_LAYOUTS:
        for year in (today.year, today.year + 1):
            try:
                parsed = datetime.strptime(f"{text} {year}", f"{layout} %Y")
            except ValueError:
                continue
            if parsed.date() >= today or year > today.year:
                return parsed.strftime(CANONICAL_DATE)

    return ""


def normalize_time(text: str) -> str:
    """
    Convert a scraped time string to 24-hour ``HH:MM``.

    Handles "19:30", "7:30 PM", "7:30pm", "7 PM" and unpadded "9:15".
    12 AM becomes 00, 12 PM stays 12, other PM hours gain 12.
    """
    text = text.strip()

    canonical = _CANONICAL_TIME_RE.match(text)
    if canonical:
        hour, minute = int(canonical.group(1)), int(canonical.group(2))
        return text if hour <= 23 and minute <= 59 else ""

    match = _CLOCK_TIME_RE.match(text)
    if not match:
        return ""

    hour = int(match.group(1))
    minute = int(match.group(2)) if match.group(2) else 0
    period = match.group(3).lower() if match.group(3) else None

    if period is None:
        # A bare hour is too ambiguous to place
        if match.group(2) is None or hour > 23:
            return ""
    else:
        if not 1 <= hour <= 12:
            return ""
        if period == "am" and hour == 12:
            hour = 0
        elif period == "pm" and hour != 12:
            hour += 12

    if minute > 59:
        return ""
    return f"{hour:02d}:{minute:02d}"


def normalize_format(text: str) -> str:
    """
    Collapse a format badge to one of digital, 35mm, 70mm or IMAX.

    Examples:
        "35MM", "35 mm" → "35mm"
        "IMAX Laser" → "IMAX"
        "Digital", "" → "digital"
    """
    text = text.strip().lower()

    if "35" in text:
        return "35mm"
    if "70" in text:
        return "70mm"
    if "imax" in text:
        return "IMAX"

    return "digital"


def parse_price(text: str | None) -> float | None:
    """Extract a price from strings like "$10", "[$12.50]" or "Tickets: 8"."""
    if not text:
        return None

    cleaned = re.sub(r"[^\d.]", "", text)
    if not cleaned:
        return None

    try:
        return float(cleaned)
    except ValueError:
        return None
