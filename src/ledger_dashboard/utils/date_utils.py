"""Calendar month arithmetic.

Months are zero-based (0 = January) throughout, matching the ledger's
month keys.
"""

from datetime import date, datetime, timedelta


def current_period(today: date) -> tuple[int, int]:
    """Get the (year, zero-based month) pair for a date.

    Args:
        today: Reference date.

    Returns:
        Tuple of (year, month index 0-11).
    """
    return (today.year, today.month - 1)


def month_ordinal(year: int, month: int) -> int:
    """Convert a (year, month index) pair to a single comparable integer."""
    return year * 12 + month


def from_ordinal(ordinal: int) -> tuple[int, int]:
    """Inverse of month_ordinal."""
    return divmod(ordinal, 12)


def month_range(start: tuple[int, int], end: tuple[int, int]) -> list[tuple[int, int]]:
    """Generate consecutive (year, month index) pairs from start to end inclusive.

    Args:
        start: First (year, month index).
        end: Last (year, month index).

    Returns:
        List of (year, month index) tuples, empty if start is after end.
    """
    first = month_ordinal(*start)
    last = month_ordinal(*end)
    return [from_ordinal(o) for o in range(first, last + 1)]


def ledger_date(year: int, month: int, day_index: int) -> date:
    """Build the calendar date for a ledger day slot.

    Day indices past the end of the month roll forward into the following
    month, so index 30 in a 30-day month lands on the 1st of the next month.

    Args:
        year: Calendar year.
        month: Month index 0-11.
        day_index: Zero-based day within the month (0 = day 1).

    Returns:
        The corresponding date.

    Raises:
        OverflowError: If the slot rolls past the last representable date.
    """
    return date(year, month + 1, 1) + timedelta(days=day_index)


def date_to_iso(d: date) -> str:
    """Convert a date to ISO 8601 format (YYYY-MM-DD)."""
    return d.isoformat()


def safe_parse_date(raw_date: object, default: date | None = None) -> date | None:
    """Parse an ISO date string (or a date/datetime prefix), returning default on failure.

    Args:
        raw_date: ISO string like "2025-06-01" or "2025-06-01T10:00:00Z", or a date.

    Returns:
        Parsed date or default.
    """
    if isinstance(raw_date, datetime):
        return raw_date.date()
    if isinstance(raw_date, date):
        return raw_date
    if not isinstance(raw_date, str) or not raw_date.strip():
        return default

    try:
        return date.fromisoformat(raw_date.strip()[:10])
    except ValueError:
        return default
