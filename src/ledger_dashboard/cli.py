"""Command-line interface for the ledger dashboard."""

import argparse
import asyncio
import json
import os
import sys
from datetime import date
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from ledger_dashboard import __version__
from ledger_dashboard.config import Config, ConfigError, load_config
from ledger_dashboard.models.ledger import DataShapeError
from ledger_dashboard.models.report import Report
from ledger_dashboard.service import DashboardService
from ledger_dashboard.store import JsonLedgerStore, LedgerNotFoundError
from ledger_dashboard.utils.logging_config import get_logger, setup_logging

# Load environment variables from .env file (if it exists)
load_dotenv()

console = Console()
# Status messages go here while stdout carries the JSON report
err_console = Console(stderr=True)
logger = get_logger(__name__)

DATA_DIR_ENV = "LEDGER_DASHBOARD_DATA_DIR"

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NOT_FOUND = 2


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog="ledger-dashboard",
        description="Build dashboard KPIs and chart series from a per-user daily ledger",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s user123 --data-dir ./ledgers
  %(prog)s user123 --year 2024 -o report.json
  %(prog)s user123 --today 2025-07-15 --xlsx dashboard.xlsx
  %(prog)s --validate-only --config-dir ./config
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "user_id",
        nargs="?",
        default=None,
        help="User whose ledger to report on",
    )

    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help=f"Directory of <user_id>.json ledger documents (default: ${DATA_DIR_ENV} or ./data)",
    )

    parser.add_argument(
        "--year",
        default=None,
        help="Year to scope totals to (default: most recent year in the ledger)",
    )

    parser.add_argument(
        "--today",
        type=lambda s: date.fromisoformat(s),
        default=None,
        help="Reference date for current-month figures (YYYY-MM-DD, default: today)",
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Write the report as JSON to this file (default: stdout)",
    )

    parser.add_argument(
        "--xlsx",
        type=Path,
        default=None,
        metavar="FILE",
        help="Also write the report to an Excel workbook",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to settings.yaml (default: config/settings.yaml)",
    )

    parser.add_argument(
        "--taxonomy",
        type=Path,
        default=None,
        help="Path to taxonomy.yaml (default: config/taxonomy.yaml)",
    )

    parser.add_argument(
        "--config-dir",
        type=Path,
        default=Path("config"),
        help="Base config directory (default: ./config)",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase output verbosity (-v, -vv)",
    )

    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Validate configuration files only",
    )

    return parser


def get_log_level(verbosity: int) -> str:
    """Convert verbosity count to log level.

    Args:
        verbosity: Number of -v flags.

    Returns:
        Log level string.
    """
    if verbosity >= 2:
        return "DEBUG"
    elif verbosity >= 1:
        return "INFO"
    else:
        return "WARNING"


def resolve_data_dir(data_dir: Path | None) -> Path:
    """Pick the ledger directory from the flag, the environment, or ./data."""
    if data_dir is not None:
        return data_dir
    env_value = os.environ.get(DATA_DIR_ENV)
    if env_value:
        return Path(env_value)
    return Path("data")


def validate_config(args: argparse.Namespace) -> int:
    """Validate configuration files.

    Args:
        args: Parsed command-line arguments.

    Returns:
        0 if valid, 1 if errors found.
    """
    console.print("[bold]Validating configuration files...[/bold]\n")

    warnings = []
    config_dir = args.config_dir
    if not config_dir.exists():
        warnings.append(f"Config directory not found: {config_dir}")

    settings_path = args.config or (config_dir / "settings.yaml")
    if settings_path.exists():
        console.print(f"[green]✓[/green] Settings: {settings_path}")
    else:
        warnings.append(f"Settings file not found: {settings_path} (defaults apply)")

    taxonomy_path = args.taxonomy or (config_dir / "taxonomy.yaml")
    if taxonomy_path.exists():
        console.print(f"[green]✓[/green] Taxonomy: {taxonomy_path}")
    else:
        warnings.append(f"Taxonomy file not found: {taxonomy_path} (built-in taxonomy applies)")

    try:
        config = load_config(
            settings_path=args.config,
            taxonomy_path=args.taxonomy,
            config_dir=config_dir,
        )
    except (ConfigError, FileNotFoundError) as e:
        console.print(f"\n[red]Errors:[/red]\n  - Failed to load configuration: {e}")
        return EXIT_ERROR

    console.print("\n[green]✓[/green] Configuration loaded successfully")
    console.print(f"  - {len(config.taxonomy)} category groups")
    console.print(f"  - trend window: {config.report.trend_window} months")
    console.print(f"  - empty series: {config.report.empty_series.value}")
    console.print(f"  - transaction direction: {config.report.transaction_direction.value}")

    if warnings:
        console.print("\n[yellow]Warnings:[/yellow]")
        for w in warnings:
            console.print(f"  - {w}")

    console.print("\n[green]Configuration is valid.[/green]")
    return EXIT_OK


def display_report(report: Report) -> None:
    """Print the KPI summary of a report.

    Args:
        report: Report to display.
    """
    if not report.has_data:
        console.print("[yellow]Ledger has no data.[/yellow]")
        return

    table = Table(title=f"Dashboard {report.selected_year}")
    table.add_column("Metric")
    table.add_column("Value", justify="right")

    kpi = report.kpi
    table.add_row("Total income", f"{kpi.total_income:,}")
    table.add_row("Total expense", f"{kpi.total_expense:,}")
    table.add_row("Net profit (YTD)", f"{kpi.net_profit:,}")
    table.add_row("Current month income", f"{kpi.current_month_income:,}")
    table.add_row("Current month expense", f"{kpi.current_month_expense:,}")
    table.add_row("Current month profit", f"{kpi.current_month_profit:,}")
    table.add_row("Average monthly income", f"{kpi.avg_monthly_income:,}")
    table.add_row("Transactions", f"{kpi.transaction_count:,}")
    console.print(table)

    console.print(f"Available years: {', '.join(report.available_years)}")


def build_report(
    config: Config,
    data_dir: Path,
    user_id: str,
    selected_year: str | None,
    today: date | None,
) -> Report:
    """Run the dashboard service for one user."""
    service = DashboardService(JsonLedgerStore(data_dir), config)
    return asyncio.run(service.build_report(user_id, selected_year, today))


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Returns:
        Exit code (0 for success, 1 for errors, 2 when the ledger is not found).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    log_level = get_log_level(args.verbose)
    setup_logging(level=log_level, console_output=args.verbose > 0)

    if args.validate_only:
        return validate_config(args)

    if args.user_id is None:
        console.print("[red]Error: USER_ID is required[/red]")
        parser.print_usage()
        return EXIT_ERROR

    try:
        config = load_config(
            settings_path=args.config,
            taxonomy_path=args.taxonomy,
            config_dir=args.config_dir,
        )
    except (ConfigError, FileNotFoundError) as e:
        console.print(f"[red]Error: {e}[/red]")
        console.print("Run with --validate-only to check configuration files.")
        return EXIT_ERROR

    # Reconfigure with the configured log file; -v flags override the configured level
    setup_logging(
        level=log_level if args.verbose else config.logging.level,
        log_file=config.logging.file,
        console_output=args.verbose > 0,
    )

    data_dir = resolve_data_dir(args.data_dir)

    try:
        report = build_report(config, data_dir, args.user_id, args.year, args.today)
    except LedgerNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        return EXIT_NOT_FOUND
    except DataShapeError as e:
        console.print(f"[red]Error: malformed ledger: {e}[/red]")
        return EXIT_ERROR

    payload = json.dumps(report.to_dict(), ensure_ascii=False, indent=2)
    status_console = console
    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(payload + "\n", encoding="utf-8")
        console.print(f"[green]Report written to {args.output}[/green]")
        display_report(report)
    else:
        print(payload)
        status_console = err_console

    if args.xlsx is not None:
        from ledger_dashboard.output import ExcelWriter

        ExcelWriter(config).write(args.xlsx, report)
        status_console.print(f"[green]Excel file written to {args.xlsx}[/green]")

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
