"""Period selection: which year and which months a report covers."""

from datetime import date
from typing import Iterable, Optional

from ledger_dashboard.models.ledger import MonthSummary
from ledger_dashboard.utils.date_utils import (
    current_period,
    from_ordinal,
    month_ordinal,
    month_range,
)
from ledger_dashboard.utils.logging_config import get_logger

logger = get_logger(__name__)

Period = tuple[int, int]


def available_years(year_keys: Iterable[str]) -> list[str]:
    """Year keys ordered most recent first (string comparison)."""
    return sorted(set(year_keys), reverse=True)


def select_year(year_keys: Iterable[str], selected_year: Optional[str] = None) -> Optional[str]:
    """Resolve the year a report is scoped to.

    The requested year wins when the ledger has it. Otherwise the largest
    year key by string comparison is taken as the most recent, which matches
    numeric order only while every key has the same number of digits.

    Args:
        year_keys: Year keys present in the ledger.
        selected_year: Year requested by the caller, if any.

    Returns:
        The resolved year key, or None when the ledger has no years.
    """
    keys = available_years(year_keys)
    if not keys:
        return None

    if selected_year is not None:
        requested = str(selected_year).strip()
        if requested in keys:
            return requested
        logger.info(f"Requested year {requested} not in ledger, using {keys[0]}")

    return keys[0]


def find_month(
    summaries: Iterable[MonthSummary],
    year: int,
    month: int,
    group_labels: list[str],
) -> MonthSummary:
    """Look up one (year, month) summary, defaulting to all zeros."""
    for summary in summaries:
        if summary.year == year and summary.month == month:
            return summary
    return MonthSummary.zero(year, month, group_labels)


def current_month_summary(
    summaries: Iterable[MonthSummary],
    today: date,
    group_labels: list[str],
) -> MonthSummary:
    """Summary for the calendar month containing ``today``."""
    year, month = current_period(today)
    return find_month(summaries, year, month, group_labels)


def trailing_window(summaries: list[MonthSummary], today: date, size: int) -> list[Period]:
    """Consecutive calendar months for the trailing trend charts.

    The window ends at the current month (or at the latest ledger month if
    the ledger runs past today) and reaches back ``size`` months, but never
    before the earliest ledger month.

    Args:
        summaries: Normalized months sorted ascending.
        today: Reference date.
        size: Maximum number of months.

    Returns:
        (year, month index) pairs with no gaps; empty for an empty ledger.
    """
    if not summaries or size < 1:
        return []

    earliest = month_ordinal(summaries[0].year, summaries[0].month)
    latest = month_ordinal(summaries[-1].year, summaries[-1].month)
    end = max(month_ordinal(*current_period(today)), latest)
    start = max(end - size + 1, earliest)
    return month_range(from_ordinal(start), from_ordinal(end))


def year_window(summaries: list[MonthSummary], year: int, today: date) -> list[Period]:
    """Months of one year for year-scoped charts.

    Runs from January through the last month of ``year`` with data, or
    through the current month when ``year`` is the current year and that is
    later.

    Args:
        summaries: Normalized months sorted ascending.
        year: Calendar year.
        today: Reference date.

    Returns:
        (year, month index) pairs with no gaps; empty when the year has no
        data and is not the current year.
    """
    last_month: Optional[int] = None
    for summary in summaries:
        if summary.year == year:
            last_month = summary.month if last_month is None else max(last_month, summary.month)

    now_year, now_month = current_period(today)
    if year == now_year:
        last_month = now_month if last_month is None else max(last_month, now_month)

    if last_month is None:
        return []
    return month_range((year, 0), (year, last_month))


def fill_window(
    summaries: Iterable[MonthSummary],
    window: list[Period],
    group_labels: list[str],
) -> list[MonthSummary]:
    """One summary per window slot, with zero summaries for months without data."""
    by_period = {(s.year, s.month): s for s in summaries}
    return [
        by_period.get(period) or MonthSummary.zero(period[0], period[1], group_labels)
        for period in window
    ]


def summaries_in_year(summaries: Iterable[MonthSummary], year: int) -> list[MonthSummary]:
    """Months with data in one year, in month order."""
    return [s for s in summaries if s.year == year]


def spans_multiple_years(window: list[Period]) -> bool:
    return len({year for year, _ in window}) > 1
