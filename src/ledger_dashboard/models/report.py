"""Report data models for dashboard output."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from ledger_dashboard.utils.date_utils import date_to_iso
from ledger_dashboard.utils.decimal_utils import to_number

# Chart series keys, in output order
CHART_EXPENSE_COMPOSITION = "expenseComposition"
CHART_INCOME_BY_CATEGORY = "incomeByCategory"
CHART_INCOME_VS_EXPENSE = "incomeVsExpense"
CHART_EXPENSE_TREND = "expenseTrend"
CHART_YEARLY_INCOME_VS_EXPENSE = "yearlyIncomeVsExpense"

CHART_KEYS = (
    CHART_EXPENSE_COMPOSITION,
    CHART_INCOME_BY_CATEGORY,
    CHART_INCOME_VS_EXPENSE,
    CHART_EXPENSE_TREND,
    CHART_YEARLY_INCOME_VS_EXPENSE,
)


class TransactionType(Enum):
    """Direction of money for a recent transaction."""

    INFLOW = "inflow"
    OUTFLOW = "outflow"


@dataclass
class Kpis:
    """Rounded KPI scalars.

    Attributes:
        total_income: Income for the selected year.
        total_expense: Expense for the selected year.
        net_profit: Year-to-date net profit (income minus expense) for the selected year.
        current_month_income: Income for the current calendar month.
        current_month_expense: Expense for the current calendar month.
        current_month_profit: Income minus expense for the current calendar month.
        avg_monthly_income: Selected-year income averaged over months with income.
        transaction_count: Positive daily entries in the selected year.
    """

    total_income: int = 0
    total_expense: int = 0
    net_profit: int = 0
    current_month_income: int = 0
    current_month_expense: int = 0
    current_month_profit: int = 0
    avg_monthly_income: int = 0
    transaction_count: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "totalIncome": self.total_income,
            "totalExpense": self.total_expense,
            "netProfit": self.net_profit,
            "currentMonthIncome": self.current_month_income,
            "currentMonthExpense": self.current_month_expense,
            "currentMonthProfit": self.current_month_profit,
            "avgMonthlyIncome": self.avg_monthly_income,
            "transactionCount": self.transaction_count,
        }


@dataclass
class SeriesPoint:
    """A single labelled value, e.g. one slice of a composition chart."""

    name: str
    value: Decimal
    color: Optional[str] = None

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {"name": self.name, "value": to_number(self.value)}
        if self.color is not None:
            data["color"] = self.color
        return data


@dataclass
class TrendPoint:
    """Income and expense for one period of a trend chart."""

    name: str
    income: Decimal
    expense: Decimal

    @property
    def profit(self) -> Decimal:
        return self.income - self.expense

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "income": to_number(self.income),
            "expense": to_number(self.expense),
            "profit": to_number(self.profit),
        }


@dataclass
class StackedPoint:
    """Per-group expense values for one period of a stacked chart."""

    name: str
    values: dict[str, Decimal] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {"name": self.name}
        for label, value in self.values.items():
            data[label] = to_number(value)
        return data


@dataclass
class RecentTransaction:
    """A single dated inflow or outflow shown in the recent-activity feed."""

    id: str
    description: str
    amount: Decimal
    type: TransactionType
    date: date

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "description": self.description,
            "amount": to_number(self.amount),
            "type": self.type.value,
            "date": date_to_iso(self.date),
        }


ChartSeries = list[SeriesPoint] | list[TrendPoint] | list[StackedPoint]


@dataclass
class Report:
    """Complete dashboard report for one request.

    Attributes:
        kpi: Rounded KPI scalars.
        charts: Chart key -> ordered series.
        recent_transactions: Recent-activity feed, or None when disabled.
        available_years: Year keys in the ledger, most recent first.
        selected_year: Year the year-scoped figures were computed for.
        has_data: False for the empty-ledger sentinel.
    """

    kpi: Kpis
    charts: dict[str, ChartSeries] = field(default_factory=dict)
    recent_transactions: Optional[list[RecentTransaction]] = None
    available_years: list[str] = field(default_factory=list)
    selected_year: Optional[str] = None
    has_data: bool = True

    @classmethod
    def empty(
        cls,
        charts: Optional[dict[str, ChartSeries]] = None,
        include_transactions: bool = True,
    ) -> "Report":
        """Sentinel report for a ledger with no years."""
        return cls(
            kpi=Kpis(),
            charts=charts if charts is not None else {key: [] for key in CHART_KEYS},
            recent_transactions=[] if include_transactions else None,
            available_years=[],
            selected_year=None,
            has_data=False,
        )

    def to_dict(self) -> dict[str, object]:
        """JSON-ready representation with camelCase keys."""
        data: dict[str, object] = {
            "kpi": self.kpi.to_dict(),
            "charts": {
                key: [point.to_dict() for point in series]
                for key, series in self.charts.items()
            },
        }
        if self.recent_transactions is not None:
            data["recentTransactions"] = [t.to_dict() for t in self.recent_transactions]
        data["availableYears"] = list(self.available_years)
        data["selectedYear"] = self.selected_year
        data["hasData"] = self.has_data
        return data
