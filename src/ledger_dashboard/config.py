"""Configuration loading and validation for the ledger dashboard."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

import yaml

from ledger_dashboard.models.taxonomy import (
    DEFAULT_TAXONOMY,
    FALLBACK_COLOR,
    CategoryGroup,
    CategoryTaxonomy,
)
from ledger_dashboard.utils.logging_config import DEFAULT_LOG_FILE, get_logger

logger = get_logger(__name__)


class ConfigError(Exception):
    """Exception raised for configuration errors."""

    pass


class EmptySeriesPolicy(Enum):
    """What a chart series holds when it has nothing to show."""

    EMPTY = "empty"  # Empty list
    PLACEHOLDER = "placeholder"  # Single synthetic "no data" row


class TransactionDirection(Enum):
    """How recent transactions are derived and given a direction."""

    TAXONOMY = "taxonomy"  # Daily ledger values; income groups are inflows
    AMOUNT_SIGN = "amount_sign"  # Flat transactions array; amount >= 0 is an inflow


DEFAULT_MONTH_NAMES = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]
DEFAULT_CATEGORY_PALETTE = ["#0ea5e9", "#8b5cf6", "#10b981", "#f97316", "#ef4444"]


def _parse_enum(enum_cls: type[Enum], value: object, setting: str) -> Enum:
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        choices = ", ".join(m.value for m in enum_cls)
        raise ConfigError(f"Invalid {setting} '{value}' (expected one of: {choices})") from None


@dataclass
class ReportSettings:
    """Settings for report shaping.

    Attributes:
        trend_window: Number of months in the trailing trend charts.
        decimal_places: Rounding for chart values (KPIs are always whole numbers).
        empty_series: Empty-series convention applied to every chart.
        placeholder_label: Name of the synthetic "no data" row.
        transaction_direction: Recent-transactions derivation convention.
        include_recent_transactions: Whether the report carries a recent-activity feed.
        recent_transactions_limit: Maximum entries in the feed.
        fallback_color: Color for labels without a configured color.
        category_palette: Colors cycled over income categories.
        month_names: Twelve month display names, January first.
    """

    trend_window: int = 6
    decimal_places: int = 2
    empty_series: EmptySeriesPolicy = EmptySeriesPolicy.PLACEHOLDER
    placeholder_label: str = "No data"
    transaction_direction: TransactionDirection = TransactionDirection.TAXONOMY
    include_recent_transactions: bool = True
    recent_transactions_limit: int = 5
    fallback_color: str = FALLBACK_COLOR
    category_palette: list[str] = field(default_factory=lambda: list(DEFAULT_CATEGORY_PALETTE))
    month_names: list[str] = field(default_factory=lambda: list(DEFAULT_MONTH_NAMES))

    def __post_init__(self) -> None:
        if self.trend_window < 1:
            raise ConfigError(f"trend_window must be at least 1, got {self.trend_window}")
        if self.decimal_places < 0:
            raise ConfigError(f"decimal_places must not be negative, got {self.decimal_places}")
        if self.recent_transactions_limit < 0:
            raise ConfigError(
                f"recent_transactions limit must not be negative, got {self.recent_transactions_limit}"
            )
        if len(self.month_names) != 12:
            raise ConfigError(f"month_names must have 12 entries, got {len(self.month_names)}")
        if not self.category_palette:
            raise ConfigError("category_palette must not be empty")

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "ReportSettings":
        """Create from dictionary."""
        recent = data.get("recent_transactions") or {}
        if not isinstance(recent, dict):
            raise ConfigError("'recent_transactions' must be a mapping")
        enabled = recent.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ConfigError(
                f"recent_transactions.enabled must be true or false, got {enabled!r}"
            )

        try:
            return cls(
                trend_window=int(data.get("trend_window", 6)),  # type: ignore[arg-type]
                decimal_places=int(data.get("decimal_places", 2)),  # type: ignore[arg-type]
                empty_series=_parse_enum(  # type: ignore[arg-type]
                    EmptySeriesPolicy, data.get("empty_series", "placeholder"), "empty_series"
                ),
                placeholder_label=str(data.get("placeholder_label", "No data")),
                transaction_direction=_parse_enum(  # type: ignore[arg-type]
                    TransactionDirection,
                    data.get("transaction_direction", "taxonomy"),
                    "transaction_direction",
                ),
                include_recent_transactions=enabled,
                recent_transactions_limit=int(recent.get("limit", 5)),
                fallback_color=str(data.get("fallback_color", FALLBACK_COLOR)),
                category_palette=[
                    str(c) for c in data.get("category_palette", DEFAULT_CATEGORY_PALETTE)  # type: ignore[union-attr]
                ],
                month_names=[
                    str(m) for m in data.get("month_names", DEFAULT_MONTH_NAMES)  # type: ignore[union-attr]
                ],
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid report settings: {e}") from e


@dataclass
class LoggingConfig:
    """Configuration for logging.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Path to log file, or None to log to stderr only.
    """

    level: str = "INFO"
    file: Optional[str] = DEFAULT_LOG_FILE

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "LoggingConfig":
        """Create from dictionary. An empty or null ``file`` disables file logging."""
        log_file = data.get("file", DEFAULT_LOG_FILE)
        return cls(
            level=str(data.get("level", "INFO")),
            file=str(log_file) if log_file else None,
        )


@dataclass
class Config:
    """Main configuration container.

    Attributes:
        taxonomy: Category taxonomy used for every income/expense decision.
        report: Report shaping settings.
        logging: Logging configuration.
    """

    taxonomy: CategoryTaxonomy = DEFAULT_TAXONOMY
    report: ReportSettings = field(default_factory=ReportSettings)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_yaml_file(path: Path) -> dict[str, object]:
    """Load a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed YAML content.

    Raises:
        FileNotFoundError: If file doesn't exist.
        ConfigError: If the file is not valid YAML or not a mapping.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not content:
        return {}
    if not isinstance(content, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(content).__name__}")
    return content


def load_settings(path: Path) -> tuple[ReportSettings, LoggingConfig]:
    """Load settings from settings.yaml.

    Args:
        path: Path to settings.yaml.

    Returns:
        Tuple of (ReportSettings, LoggingConfig).
    """
    data = load_yaml_file(path)

    report = ReportSettings()
    if data.get("report") is not None:
        if not isinstance(data["report"], dict):
            raise ConfigError("'report' must be a mapping")
        report = ReportSettings.from_dict(data["report"])

    logging_config = LoggingConfig()
    if data.get("logging") is not None:
        if not isinstance(data["logging"], dict):
            raise ConfigError("'logging' must be a mapping")
        logging_config = LoggingConfig.from_dict(data["logging"])

    return report, logging_config


def load_taxonomy(path: Path) -> CategoryTaxonomy:
    """Load the category taxonomy from taxonomy.yaml.

    Args:
        path: Path to taxonomy.yaml.

    Returns:
        CategoryTaxonomy with groups in file order.

    Raises:
        ConfigError: If the file is malformed or a category key is in two groups.
    """
    data = load_yaml_file(path)

    group_list = data.get("groups")
    if not isinstance(group_list, list) or not group_list:
        raise ConfigError(f"'groups' must be a non-empty list in {path}")

    try:
        groups = [CategoryGroup.from_dict(g) for g in group_list]
        return CategoryTaxonomy(groups)
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigError(f"Invalid taxonomy in {path}: {e}") from e


def load_config(
    settings_path: Optional[Path] = None,
    taxonomy_path: Optional[Path] = None,
    config_dir: Optional[Path] = None,
) -> Config:
    """Load complete configuration from config files.

    Both files are optional; defaults are used for whatever is missing.

    Args:
        settings_path: Path to settings.yaml (or None to use default).
        taxonomy_path: Path to taxonomy.yaml (or None to use default).
        config_dir: Base config directory (default: ./config).

    Returns:
        Complete Config object.
    """
    if config_dir is None:
        config_dir = Path("config")

    if settings_path is None:
        settings_path = config_dir / "settings.yaml"
    if taxonomy_path is None:
        taxonomy_path = config_dir / "taxonomy.yaml"

    config = Config()

    if settings_path.exists():
        config.report, config.logging = load_settings(settings_path)
        logger.info(f"Loaded settings from {settings_path}")
    else:
        logger.warning(f"Settings file not found: {settings_path}, using defaults")

    if taxonomy_path.exists():
        config.taxonomy = load_taxonomy(taxonomy_path)
        logger.info(f"Loaded {len(config.taxonomy)} category groups from {taxonomy_path}")
    else:
        logger.info(f"Taxonomy file not found: {taxonomy_path}, using built-in taxonomy")

    return config
