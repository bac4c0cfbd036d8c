"""Ledger normalizer: turns raw month records into numeric summaries.

This is the only place where missing or malformed ledger entries are
defaulted. Everything downstream works on fully populated MonthSummary
objects.
"""

from decimal import Decimal
from typing import Optional

from ledger_dashboard.models.ledger import Ledger, LedgerMonth, MonthRecord, MonthSummary
from ledger_dashboard.models.taxonomy import CategoryTaxonomy
from ledger_dashboard.utils.decimal_utils import ZERO, safe_decimal
from ledger_dashboard.utils.logging_config import get_logger

logger = get_logger(__name__)


def coerce_amount(value: object) -> Decimal:
    """Convert a daily ledger value to a Decimal; anything non-numeric is 0."""
    return safe_decimal(value, default=ZERO)  # type: ignore[return-value]


def normalize_month(record: Optional[MonthRecord]) -> dict[str, Decimal]:
    """Sum each category's daily values.

    Never raises: a missing record gives an empty summary, and non-numeric
    daily values count as 0.

    Args:
        record: Month record, or None for a missing month.

    Returns:
        Category key -> total, in document order.
    """
    if record is None:
        return {}

    totals: dict[str, Decimal] = {}
    for key, values in record.categories.items():
        total = ZERO
        for value in values:
            total += coerce_amount(value)
        totals[key] = total
    return totals


def summarize_month(month: LedgerMonth, taxonomy: CategoryTaxonomy) -> MonthSummary:
    """Classify one month's category totals into income and expense groups.

    Args:
        month: Located month record.
        taxonomy: Category taxonomy.

    Returns:
        MonthSummary with income, expense and per-group totals.
    """
    totals = normalize_month(month.record)

    income = ZERO
    expense_by_group = {label: ZERO for label in taxonomy.expense_group_labels}
    unclassified: list[str] = []

    for key, total in totals.items():
        group = taxonomy.classify(key)
        if group is None:
            unclassified.append(key)
        elif group.is_income:
            income += total
        else:
            expense_by_group[group.label] += total

    if unclassified:
        logger.debug(
            f"{month.year}-{month.month + 1:02d}: ignoring unclassified categories "
            f"{', '.join(unclassified)}"
        )

    return MonthSummary(
        year=month.year,
        month=month.month,
        income=income,
        expense=sum(expense_by_group.values(), ZERO),
        expense_by_group=expense_by_group,
        category_totals=totals,
        custom_names=dict(month.record.custom_names),
    )


class Normalizer:
    """Normalizes every month of a ledger against a taxonomy."""

    def __init__(self, taxonomy: CategoryTaxonomy):
        """Initialize normalizer.

        Args:
            taxonomy: Category taxonomy used for classification.
        """
        self.taxonomy = taxonomy

    def normalize(self, ledger: Ledger) -> list[MonthSummary]:
        """Summarize all months of a ledger.

        Args:
            ledger: Parsed ledger.

        Returns:
            MonthSummary list sorted ascending by (year, month).
        """
        summaries = [summarize_month(m, self.taxonomy) for m in ledger.months()]
        logger.debug(f"Normalized {len(summaries)} months across {len(ledger.years)} years")
        return summaries
