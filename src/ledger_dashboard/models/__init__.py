"""Data models for ledgers, the category taxonomy, and reports."""

from ledger_dashboard.models.ledger import (
    DataShapeError,
    FlatTransaction,
    Ledger,
    LedgerMonth,
    MonthRecord,
    MonthSummary,
)
from ledger_dashboard.models.report import (
    Kpis,
    RecentTransaction,
    Report,
    SeriesPoint,
    StackedPoint,
    TransactionType,
    TrendPoint,
)
from ledger_dashboard.models.taxonomy import (
    DEFAULT_TAXONOMY,
    CategoryGroup,
    CategoryTaxonomy,
    GroupKind,
)

__all__ = [
    "DataShapeError",
    "FlatTransaction",
    "Ledger",
    "LedgerMonth",
    "MonthRecord",
    "MonthSummary",
    "Kpis",
    "RecentTransaction",
    "Report",
    "SeriesPoint",
    "StackedPoint",
    "TransactionType",
    "TrendPoint",
    "DEFAULT_TAXONOMY",
    "CategoryGroup",
    "CategoryTaxonomy",
    "GroupKind",
]
