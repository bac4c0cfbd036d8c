"""Tests for aggregation and transaction derivation."""

from datetime import date
from decimal import Decimal

from ledger_dashboard.models.ledger import FlatTransaction, LedgerMonth, MonthRecord, MonthSummary
from ledger_dashboard.models.report import RecentTransaction, TransactionType
from ledger_dashboard.models.taxonomy import DEFAULT_TAXONOMY
from ledger_dashboard.processing.aggregator import (
    aggregate,
    derive_flat_transactions,
    derive_ledger_transactions,
    recent_transactions,
)

GROUPS = ["Suppliers", "Fixed Expenses"]


def create_summary(month: int, income: str, suppliers: str = "0", fixed: str = "0") -> MonthSummary:
    """Helper to create a 2025 month summary with two expense groups."""
    by_group = {"Suppliers": Decimal(suppliers), "Fixed Expenses": Decimal(fixed)}
    return MonthSummary(
        year=2025,
        month=month,
        income=Decimal(income),
        expense=sum(by_group.values(), Decimal("0")),
        expense_by_group=by_group,
    )


def create_record(txn_id: str, day: date, amount: str = "10") -> RecentTransaction:
    """Helper to create a transaction record."""
    return RecentTransaction(
        id=txn_id,
        description=txn_id,
        amount=Decimal(amount),
        type=TransactionType.INFLOW,
        date=day,
    )


class TestAggregate:
    """Tests for aggregate()."""

    def test_totals(self) -> None:
        result = aggregate(
            [create_summary(0, "1000", suppliers="200"), create_summary(1, "500", fixed="300")],
            GROUPS,
        )

        assert result.total_income == Decimal("1500")
        assert result.total_expense == Decimal("500")
        assert result.expense_by_group == {"Suppliers": Decimal("200"), "Fixed Expenses": Decimal("300")}

    def test_net_profit_equals_income_minus_expense(self) -> None:
        result = aggregate(
            [create_summary(0, "1000", suppliers="1200"), create_summary(1, "800", fixed="100")],
            GROUPS,
        )

        assert result.net_profit == result.total_income - result.total_expense == Decimal("500")

    def test_empty_scope(self) -> None:
        result = aggregate([], GROUPS)

        assert result.total_income == Decimal("0")
        assert result.total_expense == Decimal("0")
        assert result.net_profit == Decimal("0")
        assert result.expense_by_group == {"Suppliers": Decimal("0"), "Fixed Expenses": Decimal("0")}

    def test_months_with_income(self) -> None:
        result = aggregate(
            [create_summary(0, "100"), create_summary(1, "0"), create_summary(2, "50")], GROUPS
        )

        assert result.months_with_income == 2


class TestDeriveLedgerTransactions:
    """Tests for records derived from daily ledger values."""

    def create_month(self, categories: dict, custom_names: dict | None = None) -> LedgerMonth:
        record = MonthRecord(
            categories={k: tuple(v) for k, v in categories.items()},
            custom_names=custom_names or {},
        )
        return LedgerMonth(year_key="2025", year=2025, month=5, record=record)

    def test_positive_values_only(self) -> None:
        month = self.create_month({"sales_cash": [100, 0, -5, "x", 50]})

        records = derive_ledger_transactions([month], DEFAULT_TAXONOMY)

        assert [r.id for r in records] == ["2025-5-0-sales_cash", "2025-5-4-sales_cash"]
        assert [r.date for r in records] == [date(2025, 6, 1), date(2025, 6, 5)]
        assert all(r.type is TransactionType.INFLOW for r in records)

    def test_expense_is_outflow(self) -> None:
        month = self.create_month({"rent": [0, 4500]})

        records = derive_ledger_transactions([month], DEFAULT_TAXONOMY)

        assert len(records) == 1
        assert records[0].type is TransactionType.OUTFLOW
        assert records[0].amount == Decimal("4500")
        assert records[0].description == "rent"

    def test_unclassified_key_ignored(self) -> None:
        month = self.create_month({"mystery": [100]})

        assert derive_ledger_transactions([month], DEFAULT_TAXONOMY) == []

    def test_custom_name_used_as_description(self) -> None:
        month = self.create_month({"sales_credit": [10]}, {"sales_credit": "Card sales"})

        records = derive_ledger_transactions([month], DEFAULT_TAXONOMY)

        assert records[0].description == "Card sales"

    def test_day_past_month_end_rolls_over(self) -> None:
        """June has 30 days, so day index 30 is July 1."""
        month = self.create_month({"rent": [0] * 30 + [100]})

        records = derive_ledger_transactions([month], DEFAULT_TAXONOMY)

        assert records[0].date == date(2025, 7, 1)

    def test_day_past_last_calendar_date_skipped(self) -> None:
        """A slot rolling past 9999-12-31 yields no record instead of failing."""
        record = MonthRecord(categories={"rent": (5,) + (0,) * 30 + (7,)})
        month = LedgerMonth(year_key="9999", year=9999, month=11, record=record)

        records = derive_ledger_transactions([month], DEFAULT_TAXONOMY)

        assert [r.id for r in records] == ["9999-11-0-rent"]
        assert records[0].date == date(9999, 12, 1)


class TestDeriveFlatTransactions:
    """Tests for records derived from the flat transactions array."""

    def test_sign_sets_direction(self) -> None:
        records = derive_flat_transactions([
            FlatTransaction(id="a", date=date(2025, 6, 1), description="Deposit", amount=Decimal("250")),
            FlatTransaction(id=None, date=date(2025, 6, 2), description="Fuel", amount=Decimal("-40")),
            FlatTransaction(id=None, date=date(2025, 6, 3), description="Zero", amount=Decimal("0")),
        ])

        assert [r.type for r in records] == [
            TransactionType.INFLOW, TransactionType.OUTFLOW, TransactionType.INFLOW,
        ]
        assert records[1].amount == Decimal("40")
        assert records[0].id == "a"
        assert records[1].id == "2025-06-02-1-outflow"


class TestRecentTransactions:
    """Tests for recent_transactions()."""

    def test_stable_ordering_for_equal_dates(self) -> None:
        """Records sharing a date keep their original order."""
        records = [
            create_record("first", date(2025, 6, 1)),
            create_record("second", date(2025, 6, 2)),
            create_record("third", date(2025, 6, 1)),
        ]

        result = recent_transactions(records, 2)

        assert [r.id for r in result] == ["second", "first"]

    def test_limit_larger_than_records(self) -> None:
        records = [create_record("a", date(2025, 1, 1)), create_record("b", date(2025, 3, 1))]

        assert [r.id for r in recent_transactions(records, 5)] == ["b", "a"]

    def test_zero_limit(self) -> None:
        assert recent_transactions([create_record("a", date(2025, 1, 1))], 0) == []
