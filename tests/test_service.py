"""Tests for ledger stores and the dashboard service."""

import asyncio
import json
from datetime import date
from pathlib import Path

import pytest

from ledger_dashboard.config import Config, ReportSettings
from ledger_dashboard.models.ledger import DataShapeError
from ledger_dashboard.service import DashboardService
from ledger_dashboard.store import InMemoryLedgerStore, JsonLedgerStore, LedgerNotFoundError

DOCUMENT = {
    "years": {
        "2025": {"6": {"categories": {"sales_cash": [100, 0, 50], "rent": [0, 40]}}},
    }
}


def run(coro):
    """Helper to run a coroutine to completion."""
    return asyncio.run(coro)


class TestInMemoryLedgerStore:
    """Tests for the dict-backed store."""

    def test_fetch(self) -> None:
        store = InMemoryLedgerStore({"u1": DOCUMENT})
        assert run(store.fetch("u1")) is DOCUMENT

    def test_unknown_user(self) -> None:
        with pytest.raises(LedgerNotFoundError, match="User with ID 'ghost' not found."):
            run(InMemoryLedgerStore().fetch("ghost"))


class TestJsonLedgerStore:
    """Tests for the directory-backed store."""

    def test_fetch(self, tmp_path: Path) -> None:
        (tmp_path / "u1.json").write_text(json.dumps(DOCUMENT), encoding="utf-8")

        assert run(JsonLedgerStore(tmp_path).fetch("u1")) == DOCUMENT

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(LedgerNotFoundError) as exc_info:
            run(JsonLedgerStore(tmp_path).fetch("u2"))
        assert exc_info.value.user_id == "u2"

    def test_path_traversal_rejected(self, tmp_path: Path) -> None:
        data_dir = tmp_path / "data"
        data_dir.mkdir()
        (tmp_path / "secret.json").write_text("{}", encoding="utf-8")

        with pytest.raises(LedgerNotFoundError):
            run(JsonLedgerStore(data_dir).fetch("../secret"))

    def test_empty_user_id(self, tmp_path: Path) -> None:
        with pytest.raises(LedgerNotFoundError):
            JsonLedgerStore(tmp_path).path_for("  ")

    def test_invalid_json(self, tmp_path: Path) -> None:
        (tmp_path / "u1.json").write_text("{not json", encoding="utf-8")

        with pytest.raises(DataShapeError, match="not valid JSON"):
            run(JsonLedgerStore(tmp_path).fetch("u1"))


class TestDashboardService:
    """Tests for DashboardService.build_report."""

    def test_builds_report(self) -> None:
        service = DashboardService(InMemoryLedgerStore({"u1": DOCUMENT}))

        report = run(service.build_report("u1", today=date(2025, 7, 20)))

        assert report.has_data
        assert report.selected_year == "2025"
        assert report.kpi.current_month_income == 150
        assert report.kpi.current_month_expense == 40
        assert report.kpi.transaction_count == 3

    def test_not_found_propagates(self) -> None:
        service = DashboardService(InMemoryLedgerStore())

        with pytest.raises(LedgerNotFoundError):
            run(service.build_report("missing"))

    def test_malformed_document(self) -> None:
        service = DashboardService(InMemoryLedgerStore({"u1": {"years": "oops"}}))

        with pytest.raises(DataShapeError):
            run(service.build_report("u1"))

    def test_uses_configured_settings(self) -> None:
        config = Config(report=ReportSettings(include_recent_transactions=False))
        service = DashboardService(InMemoryLedgerStore({"u1": DOCUMENT}), config)

        report = run(service.build_report("u1", today=date(2025, 7, 20)))

        assert report.recent_transactions is None

    def test_concurrent_requests(self) -> None:
        """Requests for different users do not interfere."""
        store = InMemoryLedgerStore({
            "u1": DOCUMENT,
            "u2": {"years": {"2024": {"0": {"categories": {"sales_cash": [7]}}}}},
        })
        service = DashboardService(store)

        async def both():
            return await asyncio.gather(
                service.build_report("u1", today=date(2025, 7, 20)),
                service.build_report("u2", today=date(2025, 7, 20)),
            )

        first, second = run(both())

        assert first.selected_year == "2025"
        assert second.selected_year == "2024"
        assert second.kpi.total_income == 7
