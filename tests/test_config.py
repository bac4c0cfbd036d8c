"""Tests for configuration loading."""

from pathlib import Path

import pytest

from ledger_dashboard.config import (
    ConfigError,
    EmptySeriesPolicy,
    ReportSettings,
    TransactionDirection,
    load_config,
    load_settings,
    load_taxonomy,
    load_yaml_file,
)
from ledger_dashboard.models.taxonomy import DEFAULT_TAXONOMY


def write_file(path: Path, content: str) -> Path:
    """Helper to write a config file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


TAXONOMY_YAML = """
groups:
  - id: income
    label: Revenue
    type: income
    color: "#10b981"
    categories: [sales, tips]
  - id: costs
    label: Costs
    type: expense
    categories: [rent]
"""


class TestLoadYamlFile:
    """Tests for load_yaml_file."""

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_yaml_file(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path: Path) -> None:
        assert load_yaml_file(write_file(tmp_path / "empty.yaml", "")) == {}

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = write_file(tmp_path / "bad.yaml", "report: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_yaml_file(path)

    def test_non_mapping(self, tmp_path: Path) -> None:
        path = write_file(tmp_path / "list.yaml", "- a\n- b\n")
        with pytest.raises(ConfigError, match="must contain a mapping"):
            load_yaml_file(path)


class TestLoadSettings:
    """Tests for settings.yaml."""

    def test_values_applied(self, tmp_path: Path) -> None:
        path = write_file(tmp_path / "settings.yaml", """
report:
  trend_window: 12
  decimal_places: 0
  empty_series: empty
  transaction_direction: amount_sign
  recent_transactions:
    enabled: false
    limit: 10
logging:
  level: DEBUG
  file: out.log
""")

        report, logging_config = load_settings(path)

        assert report.trend_window == 12
        assert report.decimal_places == 0
        assert report.empty_series is EmptySeriesPolicy.EMPTY
        assert report.transaction_direction is TransactionDirection.AMOUNT_SIGN
        assert report.include_recent_transactions is False
        assert report.recent_transactions_limit == 10
        assert logging_config.level == "DEBUG"
        assert logging_config.file == "out.log"

    def test_defaults_when_sections_missing(self, tmp_path: Path) -> None:
        report, logging_config = load_settings(write_file(tmp_path / "settings.yaml", "{}\n"))

        assert report == ReportSettings()
        assert logging_config.level == "INFO"

    @pytest.mark.parametrize("value", ["\"false\"", "0", "\"no thanks\""])
    def test_feed_toggle_must_be_boolean(self, tmp_path: Path, value: str) -> None:
        path = write_file(
            tmp_path / "settings.yaml",
            f"report:\n  recent_transactions:\n    enabled: {value}\n",
        )
        with pytest.raises(ConfigError, match="recent_transactions.enabled"):
            load_settings(path)

    def test_null_log_file_disables_file_logging(self, tmp_path: Path) -> None:
        path = write_file(tmp_path / "settings.yaml", "logging:\n  file: null\n")

        _, logging_config = load_settings(path)

        assert logging_config.file is None

    def test_unknown_policy(self, tmp_path: Path) -> None:
        path = write_file(tmp_path / "settings.yaml", "report:\n  empty_series: zeros\n")
        with pytest.raises(ConfigError, match="empty_series"):
            load_settings(path)

    def test_non_numeric_window(self, tmp_path: Path) -> None:
        path = write_file(tmp_path / "settings.yaml", "report:\n  trend_window: six\n")
        with pytest.raises(ConfigError, match="Invalid report settings"):
            load_settings(path)

    def test_report_not_mapping(self, tmp_path: Path) -> None:
        path = write_file(tmp_path / "settings.yaml", "report: 5\n")
        with pytest.raises(ConfigError, match="'report' must be a mapping"):
            load_settings(path)


class TestReportSettingsValidation:
    """Tests for ReportSettings range checks."""

    def test_window_must_be_positive(self) -> None:
        with pytest.raises(ConfigError, match="trend_window"):
            ReportSettings(trend_window=0)

    def test_negative_decimal_places(self) -> None:
        with pytest.raises(ConfigError, match="decimal_places"):
            ReportSettings(decimal_places=-1)

    def test_month_names_count(self) -> None:
        with pytest.raises(ConfigError, match="12 entries"):
            ReportSettings(month_names=["Jan"])

    def test_empty_palette(self) -> None:
        with pytest.raises(ConfigError, match="category_palette"):
            ReportSettings(category_palette=[])


class TestLoadTaxonomy:
    """Tests for taxonomy.yaml."""

    def test_groups_in_file_order(self, tmp_path: Path) -> None:
        taxonomy = load_taxonomy(write_file(tmp_path / "taxonomy.yaml", TAXONOMY_YAML))

        assert [g.label for g in taxonomy.groups] == ["Revenue", "Costs"]
        assert taxonomy.is_income("tips")
        assert taxonomy.expense_group_labels == ["Costs"]

    def test_missing_groups(self, tmp_path: Path) -> None:
        path = write_file(tmp_path / "taxonomy.yaml", "groups: []\n")
        with pytest.raises(ConfigError, match="non-empty list"):
            load_taxonomy(path)

    def test_key_in_two_groups(self, tmp_path: Path) -> None:
        path = write_file(tmp_path / "taxonomy.yaml", """
groups:
  - {id: a, label: A, type: income, categories: [x]}
  - {id: b, label: B, type: expense, categories: [x]}
""")
        with pytest.raises(ConfigError, match="Invalid taxonomy"):
            load_taxonomy(path)

    def test_shipped_example_matches_default(self) -> None:
        example = Path(__file__).parent.parent / "config" / "taxonomy.example.yaml"

        taxonomy = load_taxonomy(example)

        assert [g.label for g in taxonomy.groups] == [g.label for g in DEFAULT_TAXONOMY.groups]
        assert taxonomy.income_keys() == DEFAULT_TAXONOMY.income_keys()


class TestLoadConfig:
    """Tests for load_config."""

    def test_missing_files_use_defaults(self, tmp_path: Path) -> None:
        config = load_config(config_dir=tmp_path)

        assert config.taxonomy is DEFAULT_TAXONOMY
        assert config.report == ReportSettings()

    def test_files_from_config_dir(self, tmp_path: Path) -> None:
        write_file(tmp_path / "settings.yaml", "report:\n  trend_window: 3\n")
        write_file(tmp_path / "taxonomy.yaml", TAXONOMY_YAML)

        config = load_config(config_dir=tmp_path)

        assert config.report.trend_window == 3
        assert len(config.taxonomy) == 2

    def test_explicit_paths_override_dir(self, tmp_path: Path) -> None:
        settings = write_file(tmp_path / "custom" / "s.yaml", "report:\n  trend_window: 9\n")

        config = load_config(settings_path=settings, config_dir=tmp_path / "missing")

        assert config.report.trend_window == 9
