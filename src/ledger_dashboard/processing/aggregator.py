"""Aggregation of normalized months and derivation of transaction records."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Optional

from ledger_dashboard.models.ledger import FlatTransaction, LedgerMonth, MonthSummary
from ledger_dashboard.models.report import RecentTransaction, TransactionType
from ledger_dashboard.models.taxonomy import CategoryTaxonomy
from ledger_dashboard.processing.normalizer import coerce_amount
from ledger_dashboard.utils.date_utils import date_to_iso, ledger_date
from ledger_dashboard.utils.decimal_utils import ZERO
from ledger_dashboard.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class Aggregate:
    """Totals over a scope of months.

    Attributes:
        total_income: Sum of monthly income.
        total_expense: Sum of monthly expense.
        expense_by_group: Expense group label -> total, in taxonomy order.
        per_month: The months aggregated, in the order given.
    """

    total_income: Decimal = ZERO
    total_expense: Decimal = ZERO
    expense_by_group: dict[str, Decimal] = field(default_factory=dict)
    per_month: list[MonthSummary] = field(default_factory=list)

    @property
    def net_profit(self) -> Decimal:
        """Running net profit, sum of (income - expense) over the months."""
        net = ZERO
        for month in self.per_month:
            net += month.income - month.expense
        return net

    @property
    def months_with_income(self) -> int:
        return sum(1 for m in self.per_month if m.income > 0)


def aggregate(
    months: Iterable[MonthSummary],
    group_labels: Optional[list[str]] = None,
) -> Aggregate:
    """Reduce month summaries to scope totals.

    Args:
        months: Summaries in scope, in month order.
        group_labels: Expense group labels to pre-seed with zero so every
            group appears even when no month has it.

    Returns:
        Aggregate over the scope; all zeros for an empty scope.
    """
    result = Aggregate(expense_by_group={label: ZERO for label in group_labels or []})

    for month in months:
        result.per_month.append(month)
        result.total_income += month.income
        for label, value in month.expense_by_group.items():
            result.expense_by_group[label] = result.expense_by_group.get(label, ZERO) + value

    result.total_expense = sum(result.expense_by_group.values(), ZERO)
    return result


def derive_ledger_transactions(
    months: Iterable[LedgerMonth],
    taxonomy: CategoryTaxonomy,
) -> list[RecentTransaction]:
    """Build one transaction per positive daily value of a classified category.

    Direction comes only from taxonomy membership: income-group categories
    are inflows, everything else classified is an outflow. Zero, negative and
    non-numeric values, and unclassified categories, produce nothing.

    Args:
        months: Ledger months in ascending order.
        taxonomy: Category taxonomy.

    Returns:
        Records in insertion order (month, then category document order, then day).
    """
    records: list[RecentTransaction] = []

    for month in months:
        record = month.record
        for key, values in record.categories.items():
            group = taxonomy.classify(key)
            if group is None:
                continue
            label = taxonomy.display_label(key, record.custom_names)
            txn_type = TransactionType.INFLOW if group.is_income else TransactionType.OUTFLOW

            for day, value in enumerate(values):
                amount = coerce_amount(value)
                if amount <= 0:
                    continue
                try:
                    txn_date = ledger_date(month.year, month.month, day)
                except (OverflowError, ValueError):
                    logger.debug(
                        f"Skipping {key} day {day} of {month.year_key}-{month.month}: "
                        "date out of range"
                    )
                    continue
                records.append(RecentTransaction(
                    id=f"{month.year_key}-{month.month}-{day}-{key}",
                    description=label,
                    amount=amount,
                    type=txn_type,
                    date=txn_date,
                ))

    return records


def derive_flat_transactions(transactions: Iterable[FlatTransaction]) -> list[RecentTransaction]:
    """Build transaction records from a flat transactions array.

    Direction comes from the sign: amount >= 0 is an inflow. Amounts are
    reported as absolute values.

    Args:
        transactions: Parsed flat transactions in document order.

    Returns:
        Records in document order.
    """
    records: list[RecentTransaction] = []
    for index, txn in enumerate(transactions):
        txn_type = TransactionType.INFLOW if txn.amount >= 0 else TransactionType.OUTFLOW
        records.append(RecentTransaction(
            id=txn.id or f"{date_to_iso(txn.date)}-{index}-{txn_type.value}",
            description=txn.description,
            amount=abs(txn.amount),
            type=txn_type,
            date=txn.date,
        ))
    return records


def recent_transactions(
    records: list[RecentTransaction],
    limit: int,
) -> list[RecentTransaction]:
    """Most recent records first, truncated to ``limit``.

    The sort is stable, so records sharing a date keep insertion order.
    """
    ordered = sorted(records, key=lambda r: r.date, reverse=True)
    return ordered[:limit]
