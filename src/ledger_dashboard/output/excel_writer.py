"""Excel workbook writer for dashboard reports."""

from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from ledger_dashboard.config import Config
from ledger_dashboard.models.report import (
    CHART_EXPENSE_COMPOSITION,
    CHART_EXPENSE_TREND,
    CHART_INCOME_BY_CATEGORY,
    CHART_INCOME_VS_EXPENSE,
    CHART_YEARLY_INCOME_VS_EXPENSE,
    Report,
    SeriesPoint,
    StackedPoint,
    TrendPoint,
)
from ledger_dashboard.utils.date_utils import date_to_iso
from ledger_dashboard.utils.decimal_utils import to_number
from ledger_dashboard.utils.logging_config import get_logger
from ledger_dashboard.utils.sanitize import sanitize_for_csv

logger = get_logger(__name__)

KPI_LABELS = [
    ("total_income", "Total Income"),
    ("total_expense", "Total Expense"),
    ("net_profit", "Net Profit (YTD)"),
    ("current_month_income", "Current Month Income"),
    ("current_month_expense", "Current Month Expense"),
    ("current_month_profit", "Current Month Profit"),
    ("avg_monthly_income", "Average Monthly Income"),
    ("transaction_count", "Transactions"),
]


class ExcelWriter:
    """Writes a dashboard report to a multi-sheet Excel workbook.

    Generates sheets:
    - Summary (KPIs)
    - Expense Composition
    - Income by Category
    - Income vs Expense (trailing window)
    - Yearly Income vs Expense
    - Expense Trend
    - Recent Transactions (when the report has a feed)
    """

    def __init__(self, config: Config):
        """Initialize Excel writer.

        Args:
            config: Application configuration.
        """
        self.config = config
        self.decimal_places = config.report.decimal_places

        self.header_font = Font(bold=True, color="FFFFFF")
        self.header_fill = PatternFill(
            start_color="4472C4", end_color="4472C4", fill_type="solid"
        )
        self.money_positive = Font(color="006600")
        self.money_negative = Font(color="CC0000")
        self.right_aligned = Alignment(horizontal="right")

    def write(self, output_path: Path, report: Report) -> None:
        """Write a report to an Excel workbook.

        Args:
            output_path: Path for output file.
            report: Report to write.
        """
        logger.info(f"Writing Excel workbook to {output_path}")

        wb = Workbook()
        if wb.active:
            wb.remove(wb.active)

        self._create_summary(wb, report)
        self._create_series_sheet(
            wb, "Expense Composition", report.charts.get(CHART_EXPENSE_COMPOSITION, [])
        )
        self._create_series_sheet(
            wb, "Income by Category", report.charts.get(CHART_INCOME_BY_CATEGORY, [])
        )
        self._create_trend_sheet(
            wb, "Income vs Expense", report.charts.get(CHART_INCOME_VS_EXPENSE, [])
        )
        self._create_trend_sheet(
            wb, "Yearly Income vs Expense", report.charts.get(CHART_YEARLY_INCOME_VS_EXPENSE, [])
        )
        self._create_stacked_sheet(
            wb, "Expense Trend", report.charts.get(CHART_EXPENSE_TREND, [])
        )
        if report.recent_transactions is not None:
            self._create_transactions_sheet(wb, report)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(output_path)
        logger.info(f"Excel workbook saved: {output_path}")

    def _write_headers(self, ws: Worksheet, headers: list[str]) -> None:
        for col, header in enumerate(headers, 1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = self.header_font
            cell.fill = self.header_fill
            ws.column_dimensions[get_column_letter(col)].width = max(14, len(header) + 4)

    def _write_money(self, ws: Worksheet, row: int, column: int, value: object) -> None:
        cell = ws.cell(row=row, column=column, value=value)
        cell.number_format = self._money_format()
        cell.alignment = self.right_aligned
        if isinstance(value, (int, float)):
            cell.font = self.money_negative if value < 0 else self.money_positive

    def _create_summary(self, wb: Workbook, report: Report) -> None:
        ws = wb.create_sheet("Summary")
        self._write_headers(ws, ["Metric", "Value"])
        ws.column_dimensions["A"].width = 28

        row = 2
        ws.cell(row=row, column=1, value="Selected Year")
        ws.cell(row=row, column=2, value=report.selected_year or "")
        row += 1
        ws.cell(row=row, column=1, value="Available Years")
        ws.cell(row=row, column=2, value=", ".join(report.available_years))
        row += 1

        for attr, label in KPI_LABELS:
            ws.cell(row=row, column=1, value=label)
            value = getattr(report.kpi, attr)
            if attr == "transaction_count":
                ws.cell(row=row, column=2, value=value)
            else:
                self._write_money(ws, row, 2, value)
            row += 1

        if not report.has_data:
            ws.cell(row=row + 1, column=1, value="No ledger data")

    def _create_series_sheet(self, wb: Workbook, title: str, series: list) -> None:
        ws = wb.create_sheet(title)
        self._write_headers(ws, ["Name", "Value", "Color"])
        ws.column_dimensions["A"].width = 30

        point: SeriesPoint
        for row, point in enumerate(series, 2):
            ws.cell(row=row, column=1, value=sanitize_for_csv(point.name))
            self._write_money(ws, row, 2, to_number(point.value))
            ws.cell(row=row, column=3, value=point.color or "")

    def _create_trend_sheet(self, wb: Workbook, title: str, series: list) -> None:
        ws = wb.create_sheet(title)
        self._write_headers(ws, ["Month", "Income", "Expense", "Profit"])

        point: TrendPoint
        for row, point in enumerate(series, 2):
            ws.cell(row=row, column=1, value=sanitize_for_csv(point.name))
            self._write_money(ws, row, 2, to_number(point.income))
            self._write_money(ws, row, 3, to_number(point.expense))
            self._write_money(ws, row, 4, to_number(point.profit))

    def _create_stacked_sheet(self, wb: Workbook, title: str, series: list) -> None:
        ws = wb.create_sheet(title)
        labels = list(self.config.taxonomy.expense_group_labels)
        self._write_headers(ws, ["Month"] + labels)

        point: StackedPoint
        for row, point in enumerate(series, 2):
            ws.cell(row=row, column=1, value=sanitize_for_csv(point.name))
            for col, label in enumerate(labels, 2):
                value = point.values.get(label)
                if value is not None:
                    self._write_money(ws, row, col, to_number(value))

    def _create_transactions_sheet(self, wb: Workbook, report: Report) -> None:
        ws = wb.create_sheet("Recent Transactions")
        self._write_headers(ws, ["Date", "Description", "Amount", "Type", "ID"])
        ws.column_dimensions["B"].width = 30

        for row, txn in enumerate(report.recent_transactions or [], 2):
            ws.cell(row=row, column=1, value=date_to_iso(txn.date))
            ws.cell(row=row, column=2, value=sanitize_for_csv(txn.description))
            self._write_money(ws, row, 3, to_number(txn.amount))
            ws.cell(row=row, column=4, value=txn.type.value)
            ws.cell(row=row, column=5, value=sanitize_for_csv(txn.id))

    def _money_format(self) -> str:
        """Number format honoring the configured decimal places."""
        if self.decimal_places <= 0:
            return "#,##0"
        return "#,##0." + "0" * self.decimal_places
