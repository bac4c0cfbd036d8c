"""Tests for year and window selection."""

from datetime import date
from decimal import Decimal

from ledger_dashboard.models.ledger import MonthSummary
from ledger_dashboard.processing.period_selector import (
    available_years,
    current_month_summary,
    fill_window,
    select_year,
    spans_multiple_years,
    trailing_window,
    year_window,
)

GROUPS = ["Suppliers", "Fixed Expenses"]


def create_summary(year: int, month: int, income: str = "0", expense: str = "0") -> MonthSummary:
    """Helper to create a month summary."""
    return MonthSummary(
        year=year,
        month=month,
        income=Decimal(income),
        expense=Decimal(expense),
        expense_by_group={"Suppliers": Decimal(expense), "Fixed Expenses": Decimal("0")},
    )


class TestSelectYear:
    """Tests for resolving the selected year."""

    def test_requested_year_present(self) -> None:
        assert select_year(["2023", "2025", "2024"], "2024") == "2024"

    def test_missing_requested_year_falls_back_to_latest(self) -> None:
        assert select_year(["2023", "2025", "2024"], "1999") == "2025"

    def test_no_request_takes_latest(self) -> None:
        assert select_year(["2024", "2025"]) == "2025"

    def test_requested_year_is_trimmed(self) -> None:
        assert select_year(["2024", "2025"], " 2024 ") == "2024"

    def test_no_years(self) -> None:
        assert select_year([], "2025") is None

    def test_string_ordering(self) -> None:
        """Latest year is the largest key by string comparison."""
        assert select_year(["999", "2025"]) == "999"

    def test_available_years_descending(self) -> None:
        assert available_years(["2023", "2025", "2024", "2025"]) == ["2025", "2024", "2023"]


class TestTrailingWindow:
    """Tests for the trailing trend window."""

    def test_window_ends_at_current_month(self) -> None:
        summaries = [create_summary(2024, 0), create_summary(2025, 5)]

        window = trailing_window(summaries, date(2025, 7, 15), 6)

        assert window == [(2025, 1), (2025, 2), (2025, 3), (2025, 4), (2025, 5), (2025, 6)]

    def test_window_clipped_at_earliest_month(self) -> None:
        summaries = [create_summary(2025, 4)]

        window = trailing_window(summaries, date(2025, 7, 1), 6)

        assert window == [(2025, 4), (2025, 5), (2025, 6)]

    def test_window_crosses_year_boundary(self) -> None:
        summaries = [create_summary(2024, 10)]

        window = trailing_window(summaries, date(2025, 1, 10), 3)

        assert window == [(2024, 10), (2024, 11), (2025, 0)]

    def test_ledger_past_today_extends_window(self) -> None:
        summaries = [create_summary(2025, 0), create_summary(2025, 9)]

        window = trailing_window(summaries, date(2025, 3, 1), 2)

        assert window == [(2025, 8), (2025, 9)]

    def test_empty_ledger(self) -> None:
        assert trailing_window([], date(2025, 7, 1), 6) == []


class TestYearWindow:
    """Tests for year-scoped month slots."""

    def test_past_year_runs_to_last_data_month(self) -> None:
        summaries = [create_summary(2024, 2), create_summary(2024, 7)]

        window = year_window(summaries, 2024, date(2025, 7, 1))

        assert window[0] == (2024, 0)
        assert window[-1] == (2024, 7)
        assert len(window) == 8

    def test_current_year_runs_to_current_month(self) -> None:
        summaries = [create_summary(2025, 1)]

        window = year_window(summaries, 2025, date(2025, 4, 20))

        assert window == [(2025, 0), (2025, 1), (2025, 2), (2025, 3)]

    def test_year_without_data(self) -> None:
        assert year_window([create_summary(2024, 1)], 2023, date(2025, 1, 1)) == []


class TestFillWindow:
    """Tests for zero-filling window slots."""

    def test_gaps_are_zero_filled(self) -> None:
        summaries = [create_summary(2025, 4, income="100"), create_summary(2025, 6, income="300")]

        filled = fill_window(summaries, [(2025, 4), (2025, 5), (2025, 6)], GROUPS)

        assert [s.income for s in filled] == [Decimal("100"), Decimal("0"), Decimal("300")]
        assert filled[1].expense_by_group == {"Suppliers": Decimal("0"), "Fixed Expenses": Decimal("0")}

    def test_length_matches_window(self) -> None:
        window = [(2025, m) for m in range(6)]
        assert len(fill_window([], window, GROUPS)) == 6


class TestCurrentMonth:
    """Tests for the current-month lookup."""

    def test_current_month_with_data(self) -> None:
        summaries = [create_summary(2025, 6, income="150")]

        current = current_month_summary(summaries, date(2025, 7, 4), GROUPS)

        assert current.income == Decimal("150")

    def test_current_month_without_data(self) -> None:
        current = current_month_summary([create_summary(2025, 5, income="10")], date(2025, 7, 4), GROUPS)

        assert (current.year, current.month) == (2025, 6)
        assert current.income == Decimal("0")
        assert current.net == Decimal("0")


class TestSpansMultipleYears:
    def test_single_year(self) -> None:
        assert not spans_multiple_years([(2025, 0), (2025, 1)])

    def test_two_years(self) -> None:
        assert spans_multiple_years([(2024, 11), (2025, 0)])
