"""Ledger processing pipeline components."""

from ledger_dashboard.processing.aggregator import (
    Aggregate,
    aggregate,
    derive_flat_transactions,
    derive_ledger_transactions,
    recent_transactions,
)
from ledger_dashboard.processing.normalizer import (
    Normalizer,
    coerce_amount,
    normalize_month,
    summarize_month,
)
from ledger_dashboard.processing.period_selector import (
    available_years,
    select_year,
    trailing_window,
    year_window,
)
from ledger_dashboard.processing.report_generator import generate_report

__all__ = [
    "Aggregate",
    "aggregate",
    "derive_flat_transactions",
    "derive_ledger_transactions",
    "recent_transactions",
    "Normalizer",
    "coerce_amount",
    "normalize_month",
    "summarize_month",
    "available_years",
    "select_year",
    "trailing_window",
    "year_window",
    "generate_report",
]
