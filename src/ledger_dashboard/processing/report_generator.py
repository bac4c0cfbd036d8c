"""Report generation: shapes aggregates into KPI scalars and chart series.

Single entry point for building a dashboard report from a parsed ledger.
Used by the dashboard service, the CLI and the Excel writer alike.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from ledger_dashboard.config import EmptySeriesPolicy, ReportSettings, TransactionDirection
from ledger_dashboard.models.ledger import Ledger, MonthSummary
from ledger_dashboard.models.report import (
    CHART_EXPENSE_COMPOSITION,
    CHART_EXPENSE_TREND,
    CHART_INCOME_BY_CATEGORY,
    CHART_INCOME_VS_EXPENSE,
    CHART_YEARLY_INCOME_VS_EXPENSE,
    ChartSeries,
    Kpis,
    RecentTransaction,
    Report,
    SeriesPoint,
    StackedPoint,
    TrendPoint,
)
from ledger_dashboard.models.taxonomy import CategoryTaxonomy
from ledger_dashboard.processing.aggregator import (
    aggregate,
    derive_flat_transactions,
    derive_ledger_transactions,
    recent_transactions,
)
from ledger_dashboard.processing.normalizer import Normalizer
from ledger_dashboard.processing.period_selector import (
    available_years,
    current_month_summary,
    fill_window,
    select_year,
    spans_multiple_years,
    summaries_in_year,
    trailing_window,
    year_window,
)
from ledger_dashboard.utils.decimal_utils import ZERO, round_half_up
from ledger_dashboard.utils.logging_config import get_logger

logger = get_logger(__name__)


def round_kpi(value: Decimal) -> int:
    """Round a KPI scalar to the nearest whole number, halves away from zero."""
    return int(round_half_up(value, 0))


def month_label(year: int, month: int, multi_year: bool, month_names: list[str]) -> str:
    """Display name for a month: "Jul 2025" across years, "Jul" within one."""
    name = month_names[month]
    return f"{name} {year}" if multi_year else name


def expense_composition(
    expense_by_group: dict[str, Decimal],
    taxonomy: CategoryTaxonomy,
    settings: ReportSettings,
) -> list[SeriesPoint]:
    """Expense groups with a positive total, largest first.

    Groups with equal totals keep taxonomy order.
    """
    positive = [(label, value) for label, value in expense_by_group.items() if value > 0]
    positive.sort(key=lambda item: item[1], reverse=True)
    return [
        SeriesPoint(
            name=label,
            value=round_half_up(value, settings.decimal_places),
            color=taxonomy.color_for(label, settings.fallback_color),
        )
        for label, value in positive
    ]


def income_by_category(
    summaries: list[MonthSummary],
    taxonomy: CategoryTaxonomy,
    settings: ReportSettings,
) -> list[SeriesPoint]:
    """Income totals per display label, largest first, colors cycled from the palette.

    Labels are resolved per month, so a category renamed mid-year shows
    under each name it carried.
    """
    totals: dict[str, Decimal] = {}
    for summary in summaries:
        for key, value in summary.category_totals.items():
            if not taxonomy.is_income(key):
                continue
            label = taxonomy.display_label(key, summary.custom_names)
            totals[label] = totals.get(label, ZERO) + value

    positive = [(label, value) for label, value in totals.items() if value > 0]
    positive.sort(key=lambda item: item[1], reverse=True)
    palette = settings.category_palette
    return [
        SeriesPoint(
            name=label,
            value=round_half_up(value, settings.decimal_places),
            color=palette[index % len(palette)],
        )
        for index, (label, value) in enumerate(positive)
    ]


def income_vs_expense(months: list[MonthSummary], settings: ReportSettings) -> list[TrendPoint]:
    """Income and expense per month, one point per window slot."""
    multi_year = spans_multiple_years([(m.year, m.month) for m in months])
    return [
        TrendPoint(
            name=month_label(m.year, m.month, multi_year, settings.month_names),
            income=round_half_up(m.income, settings.decimal_places),
            expense=round_half_up(m.expense, settings.decimal_places),
        )
        for m in months
    ]


def expense_trend(
    months: list[MonthSummary],
    group_labels: list[str],
    settings: ReportSettings,
) -> list[StackedPoint]:
    """Per-group expense per month for a stacked chart."""
    multi_year = spans_multiple_years([(m.year, m.month) for m in months])
    return [
        StackedPoint(
            name=month_label(m.year, m.month, multi_year, settings.month_names),
            values={
                label: round_half_up(m.expense_by_group.get(label, ZERO), settings.decimal_places)
                for label in group_labels
            },
        )
        for m in months
    ]


def _placeholders(settings: ReportSettings, group_labels: list[str]) -> dict[str, ChartSeries]:
    label = settings.placeholder_label
    composition = [SeriesPoint(name=label, value=Decimal("1"), color=settings.fallback_color)]
    trend = [TrendPoint(name=label, income=ZERO, expense=ZERO)]
    stacked = [StackedPoint(name=label, values={g: ZERO for g in group_labels})]
    return {
        CHART_EXPENSE_COMPOSITION: composition,
        CHART_INCOME_BY_CATEGORY: list(composition),
        CHART_INCOME_VS_EXPENSE: trend,
        CHART_EXPENSE_TREND: stacked,
        CHART_YEARLY_INCOME_VS_EXPENSE: list(trend),
    }


def apply_empty_policy(
    charts: dict[str, ChartSeries],
    settings: ReportSettings,
    group_labels: list[str],
) -> dict[str, ChartSeries]:
    """Replace empty series with a placeholder row when the policy asks for it."""
    if settings.empty_series is EmptySeriesPolicy.EMPTY:
        return charts

    placeholders = _placeholders(settings, group_labels)
    return {
        key: series if series else placeholders[key]
        for key, series in charts.items()
    }


def _derive_records(
    ledger: Ledger,
    taxonomy: CategoryTaxonomy,
    settings: ReportSettings,
    year_key: Optional[str] = None,
) -> list[RecentTransaction]:
    """Transaction records under the configured direction convention."""
    if settings.transaction_direction is TransactionDirection.AMOUNT_SIGN:
        records = derive_flat_transactions(ledger.transactions)
        if year_key is not None:
            records = [r for r in records if r.date.year == int(year_key)]
        return records

    months = ledger.months_in_year(year_key) if year_key is not None else ledger.months()
    return derive_ledger_transactions(months, taxonomy)


def generate_report(
    ledger: Ledger,
    taxonomy: CategoryTaxonomy,
    settings: ReportSettings,
    today: date,
    selected_year: Optional[str] = None,
) -> Report:
    """Build the dashboard report for one ledger.

    Year-scoped figures (totals, composition, yearly chart) use the selected
    year, falling back to the most recent year. Trend charts use the trailing
    window ending at ``today``. Current-month KPIs use the month containing
    ``today``.

    Args:
        ledger: Parsed ledger.
        taxonomy: Category taxonomy.
        settings: Report shaping settings.
        today: Reference date for "current month" and trailing windows.
        selected_year: Year requested by the caller, if any.

    Returns:
        The report; the empty sentinel when the ledger has no years.
    """
    group_labels = taxonomy.expense_group_labels

    year_key = select_year(ledger.year_keys, selected_year)
    if year_key is None:
        logger.info("Ledger has no years, returning empty report")
        charts = apply_empty_policy(
            Report.empty().charts, settings, group_labels
        )
        return Report.empty(charts, include_transactions=settings.include_recent_transactions)

    year = int(year_key)
    summaries = Normalizer(taxonomy).normalize(ledger)

    year_agg = aggregate(summaries_in_year(summaries, year), group_labels)
    current = current_month_summary(summaries, today, group_labels)
    trailing = fill_window(
        summaries, trailing_window(summaries, today, settings.trend_window), group_labels
    )
    year_slots = fill_window(summaries, year_window(summaries, year, today), group_labels)

    months_with_income = year_agg.months_with_income
    avg_income = year_agg.total_income / months_with_income if months_with_income else ZERO

    year_records = _derive_records(ledger, taxonomy, settings, year_key)

    kpi = Kpis(
        total_income=round_kpi(year_agg.total_income),
        total_expense=round_kpi(year_agg.total_expense),
        net_profit=round_kpi(year_agg.net_profit),
        current_month_income=round_kpi(current.income),
        current_month_expense=round_kpi(current.expense),
        current_month_profit=round_kpi(current.net),
        avg_monthly_income=round_kpi(avg_income),
        transaction_count=len(year_records),
    )

    charts: dict[str, ChartSeries] = {
        CHART_EXPENSE_COMPOSITION: expense_composition(year_agg.expense_by_group, taxonomy, settings),
        CHART_INCOME_BY_CATEGORY: income_by_category(year_agg.per_month, taxonomy, settings),
        CHART_INCOME_VS_EXPENSE: income_vs_expense(trailing, settings),
        CHART_EXPENSE_TREND: expense_trend(trailing, group_labels, settings),
        CHART_YEARLY_INCOME_VS_EXPENSE: income_vs_expense(year_slots, settings),
    }
    charts = apply_empty_policy(charts, settings, group_labels)

    feed: Optional[list[RecentTransaction]] = None
    if settings.include_recent_transactions:
        feed = recent_transactions(
            _derive_records(ledger, taxonomy, settings),
            settings.recent_transactions_limit,
        )

    logger.info(
        f"Report for {year_key}: income {kpi.total_income}, expense {kpi.total_expense}, "
        f"{len(summaries)} months"
    )

    return Report(
        kpi=kpi,
        charts=charts,
        recent_transactions=feed,
        available_years=available_years(ledger.year_keys),
        selected_year=year_key,
        has_data=True,
    )
