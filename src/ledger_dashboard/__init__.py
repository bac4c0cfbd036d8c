"""Ledger dashboard: KPIs and chart series from per-user daily ledgers."""

__version__ = "1.0.0"

from ledger_dashboard.config import Config, ConfigError, load_config
from ledger_dashboard.models.ledger import DataShapeError, Ledger
from ledger_dashboard.models.report import Report
from ledger_dashboard.models.taxonomy import DEFAULT_TAXONOMY, CategoryTaxonomy
from ledger_dashboard.processing.report_generator import generate_report
from ledger_dashboard.service import DashboardService
from ledger_dashboard.store import JsonLedgerStore, LedgerNotFoundError, LedgerStore

__all__ = [
    "__version__",
    "Config",
    "ConfigError",
    "load_config",
    "DataShapeError",
    "Ledger",
    "Report",
    "DEFAULT_TAXONOMY",
    "CategoryTaxonomy",
    "generate_report",
    "DashboardService",
    "JsonLedgerStore",
    "LedgerNotFoundError",
    "LedgerStore",
]
