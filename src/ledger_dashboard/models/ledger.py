"""Ledger data models: the raw per-user document and its normalized months."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import MAXYEAR, MINYEAR, date
from decimal import Decimal
from typing import Optional

from ledger_dashboard.utils.date_utils import safe_parse_date
from ledger_dashboard.utils.decimal_utils import ZERO, safe_decimal
from ledger_dashboard.utils.logging_config import get_logger

logger = get_logger(__name__)

MONTHS_PER_YEAR = 12


class DataShapeError(Exception):
    """Raised when a required top-level field of a ledger document has the wrong shape."""

    def __init__(self, message: str, field_name: Optional[str] = None):
        """Initialize DataShapeError.

        Args:
            message: Error message.
            field_name: Optional name of the offending field.
        """
        self.field_name = field_name
        super().__init__(message)


@dataclass
class MonthRecord:
    """One month of a ledger.

    Attributes:
        categories: Category key -> daily values (index 0 = day 1). Values are
            kept as stored; coercion to numbers happens in the normalizer.
        custom_names: Category key -> display label override.
    """

    categories: dict[str, tuple[object, ...]] = field(default_factory=dict)
    custom_names: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: object) -> "MonthRecord":
        """Create a MonthRecord from a raw month value, tolerating missing branches.

        Args:
            data: Raw month value from the document.

        Returns:
            A MonthRecord; empty when the value is not a mapping.
        """
        if not isinstance(data, Mapping):
            if data is not None:
                logger.debug(f"Month record is {type(data).__name__}, treating as empty")
            return cls()

        raw_categories = data.get("categories")
        categories: dict[str, tuple[object, ...]] = {}
        if isinstance(raw_categories, Mapping):
            for key, values in raw_categories.items():
                if isinstance(values, (list, tuple)):
                    categories[str(key)] = tuple(values)
                else:
                    logger.debug(f"Category '{key}' values are not a list, treating as empty")
                    categories[str(key)] = ()

        raw_names = data.get("customNames")
        custom_names: dict[str, str] = {}
        if isinstance(raw_names, Mapping):
            custom_names = {
                str(k): v for k, v in raw_names.items() if isinstance(v, str)
            }

        return cls(categories=categories, custom_names=custom_names)


@dataclass(frozen=True)
class LedgerMonth:
    """A month record located in time."""

    year_key: str
    year: int
    month: int
    record: MonthRecord

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.year, self.month)


@dataclass(frozen=True)
class FlatTransaction:
    """An entry of the optional flat ``transactions`` array.

    Attributes:
        id: Identifier from the document, if any.
        date: Transaction date.
        description: Free-text description.
        amount: Signed amount (>= 0 is money in).
    """

    id: Optional[str]
    date: date
    description: str
    amount: Decimal

    @classmethod
    def from_dict(cls, data: object) -> Optional["FlatTransaction"]:
        """Create a FlatTransaction, or None if the entry has no usable date or amount."""
        if not isinstance(data, Mapping):
            return None

        txn_date = safe_parse_date(data.get("date"))
        amount = safe_decimal(data.get("amount"), default=None)
        if txn_date is None or amount is None:
            return None

        raw_id = data.get("id")
        return cls(
            id=str(raw_id) if raw_id not in (None, "") else None,
            date=txn_date,
            description=str(data.get("description") or data.get("company") or ""),
            amount=amount,
        )


def _is_valid_year_key(key: str) -> bool:
    return key.isdecimal() and MINYEAR <= int(key) <= MAXYEAR


def _parse_month_key(key: object) -> Optional[int]:
    try:
        month = int(str(key))
    except ValueError:
        return None
    if 0 <= month < MONTHS_PER_YEAR:
        return month
    return None


@dataclass
class Ledger:
    """Parsed per-user ledger.

    Attributes:
        years: Year key -> month index -> MonthRecord. Year keys are kept as
            strings so "most recent year" can use string ordering.
        transactions: Entries of the flat transactions array (may be empty).
    """

    years: dict[str, dict[int, MonthRecord]] = field(default_factory=dict)
    transactions: list[FlatTransaction] = field(default_factory=list)

    @classmethod
    def from_document(cls, document: object) -> "Ledger":
        """Validate the top-level shape of a raw document and parse it.

        Per-entry problems (bad month keys, malformed month records, bad
        transaction rows) are skipped. Top-level fields of the wrong type
        raise DataShapeError.

        Args:
            document: The raw ledger document.

        Returns:
            A Ledger instance.

        Raises:
            DataShapeError: If the document, ``years``, a year value or
                ``transactions`` has the wrong shape.
        """
        if not isinstance(document, Mapping):
            raise DataShapeError(
                f"Ledger document must be an object, got {type(document).__name__}"
            )

        raw_years = document.get("years")
        if raw_years is None:
            raw_years = {}
        if not isinstance(raw_years, Mapping):
            raise DataShapeError(
                f"'years' must be an object, got {type(raw_years).__name__}",
                field_name="years",
            )

        years: dict[str, dict[int, MonthRecord]] = {}
        for raw_year_key, year_value in raw_years.items():
            year_key = str(raw_year_key)
            if not _is_valid_year_key(year_key):
                logger.warning(f"Skipping invalid year key '{year_key}'")
                continue

            if year_value is None:
                month_items: list[tuple[object, object]] = []
            elif isinstance(year_value, Mapping):
                month_items = list(year_value.items())
            elif isinstance(year_value, list):
                month_items = list(enumerate(year_value))
            else:
                raise DataShapeError(
                    f"Year '{year_key}' must be an object or list, "
                    f"got {type(year_value).__name__}",
                    field_name=f"years.{year_key}",
                )

            months: dict[int, MonthRecord] = {}
            for raw_month_key, month_value in month_items:
                month = _parse_month_key(raw_month_key)
                if month is None:
                    logger.warning(f"Skipping invalid month key '{raw_month_key}' in {year_key}")
                    continue
                if month_value is None:
                    continue
                months[month] = MonthRecord.from_dict(month_value)
            years[year_key] = months

        raw_transactions = document.get("transactions")
        if raw_transactions is None:
            raw_transactions = []
        if not isinstance(raw_transactions, list):
            raise DataShapeError(
                f"'transactions' must be an array, got {type(raw_transactions).__name__}",
                field_name="transactions",
            )

        transactions: list[FlatTransaction] = []
        for i, entry in enumerate(raw_transactions):
            txn = FlatTransaction.from_dict(entry)
            if txn is None:
                logger.debug(f"Skipping transaction #{i}: missing date or amount")
                continue
            transactions.append(txn)

        return cls(years=years, transactions=transactions)

    @property
    def year_keys(self) -> list[str]:
        return list(self.years.keys())

    @property
    def is_empty(self) -> bool:
        """True when the ledger has no years at all."""
        return not self.years

    def months(self) -> list[LedgerMonth]:
        """All months present, sorted ascending by (year, month)."""
        result = [
            LedgerMonth(year_key=year_key, year=int(year_key), month=month, record=record)
            for year_key, months in self.years.items()
            for month, record in months.items()
        ]
        result.sort(key=lambda m: m.sort_key)
        return result

    def months_in_year(self, year_key: str) -> list[LedgerMonth]:
        """Months present in one year, sorted ascending."""
        return [m for m in self.months() if m.year_key == year_key]


@dataclass
class MonthSummary:
    """Normalized totals for one month.

    Attributes:
        year: Calendar year.
        month: Month index 0-11.
        income: Sum of all income-group category totals.
        expense: Sum of all expense-group totals.
        expense_by_group: Expense group label -> total, in taxonomy order.
        category_totals: Category key -> summed daily values (all keys, classified or not).
        custom_names: Display label overrides for this month.
    """

    year: int
    month: int
    income: Decimal = ZERO
    expense: Decimal = ZERO
    expense_by_group: dict[str, Decimal] = field(default_factory=dict)
    category_totals: dict[str, Decimal] = field(default_factory=dict)
    custom_names: dict[str, str] = field(default_factory=dict)

    @property
    def net(self) -> Decimal:
        return self.income - self.expense

    @classmethod
    def zero(cls, year: int, month: int, group_labels: list[str]) -> "MonthSummary":
        """All-zero summary for a month with no ledger data."""
        return cls(
            year=year,
            month=month,
            expense_by_group={label: ZERO for label in group_labels},
        )
