"""Output generation for report exports."""

from ledger_dashboard.output.excel_writer import ExcelWriter

__all__ = ["ExcelWriter"]
