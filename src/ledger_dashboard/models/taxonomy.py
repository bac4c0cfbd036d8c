"""Category taxonomy: the fixed grouping of ledger category keys.

The taxonomy is the single source for every income/expense decision in the
engine. Integrators extend it by building a new ``CategoryTaxonomy`` (or
loading ``taxonomy.yaml``) rather than touching aggregation code.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

# Neutral gray used for any label without a configured color
FALLBACK_COLOR = "#6b7280"


class GroupKind(Enum):
    """Whether a group's categories count as income or expense."""

    INCOME = "income"
    EXPENSE = "expense"


@dataclass(frozen=True)
class CategoryGroup:
    """A named collection of category keys sharing a role.

    Attributes:
        id: Stable group identifier.
        label: Display label, also the key in chart series.
        kind: Income or expense classification.
        categories: Ordered category keys owned by this group.
        color: Chart color for this group.
    """

    id: str
    label: str
    kind: GroupKind
    categories: tuple[str, ...]
    color: Optional[str] = None

    @property
    def is_income(self) -> bool:
        return self.kind is GroupKind.INCOME

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "CategoryGroup":
        """Create a CategoryGroup from a dictionary (e.g., from YAML config).

        Args:
            data: Dictionary with id, label, type, categories and color.

        Returns:
            A new CategoryGroup instance.

        Raises:
            ValueError: If the type is unknown or categories is not a list.
        """
        type_str = str(data.get("type", "expense")).lower()
        try:
            kind = GroupKind(type_str)
        except ValueError:
            raise ValueError(
                f"Group '{data.get('id')}' has unknown type '{type_str}' "
                "(expected 'income' or 'expense')"
            ) from None

        categories = data.get("categories") or []
        if not isinstance(categories, list):
            raise ValueError(f"Group '{data.get('id')}' categories must be a list")

        group_id = str(data["id"])
        return cls(
            id=group_id,
            label=str(data.get("label", group_id)),
            kind=kind,
            categories=tuple(str(c) for c in categories),
            color=str(data["color"]) if data.get("color") else None,
        )


class CategoryTaxonomy:
    """Immutable, ordered mapping of groups to the category keys they own.

    A category key belongs to at most one group. Keys found in a ledger but
    absent from the taxonomy are unclassified and count toward nothing.
    """

    def __init__(self, groups: Iterable[CategoryGroup]):
        """Build the taxonomy and its key index.

        Args:
            groups: Groups in display order.

        Raises:
            ValueError: If a category key, group id or group label repeats.
        """
        self._groups = tuple(groups)
        index: dict[str, CategoryGroup] = {}
        seen_ids: set[str] = set()
        seen_labels: set[str] = set()

        for group in self._groups:
            if group.id in seen_ids:
                raise ValueError(f"Duplicate group id '{group.id}'")
            if group.label in seen_labels:
                raise ValueError(f"Duplicate group label '{group.label}'")
            seen_ids.add(group.id)
            seen_labels.add(group.label)

            for key in group.categories:
                if key in index:
                    raise ValueError(
                        f"Category '{key}' belongs to both '{index[key].label}' "
                        f"and '{group.label}'"
                    )
                index[key] = group

        self._index: Mapping[str, CategoryGroup] = MappingProxyType(index)
        self._income_keys = frozenset(
            key for group in self._groups if group.is_income for key in group.categories
        )

    @property
    def groups(self) -> tuple[CategoryGroup, ...]:
        return self._groups

    @property
    def expense_group_labels(self) -> list[str]:
        """Expense group labels in taxonomy order."""
        return [g.label for g in self._groups if not g.is_income]

    def classify(self, key: str) -> Optional[CategoryGroup]:
        """Return the group owning a category key, or None if unclassified."""
        return self._index.get(key)

    def is_income(self, key: str) -> bool:
        return key in self._income_keys

    def income_keys(self) -> frozenset[str]:
        """All category keys belonging to income groups."""
        return self._income_keys

    def expense_groups(self) -> dict[str, tuple[str, ...]]:
        """Expense group label -> member keys, in taxonomy order."""
        return {g.label: g.categories for g in self._groups if not g.is_income}

    def display_label(self, key: str, custom_names: Optional[Mapping[str, str]] = None) -> str:
        """Resolve the display label for a category key.

        A non-empty custom name wins; otherwise underscores in the key become spaces.
        """
        if custom_names:
            custom = custom_names.get(key)
            if isinstance(custom, str) and custom.strip():
                return custom
        return key.replace("_", " ")

    def color_for(self, label: str, fallback: str = FALLBACK_COLOR) -> str:
        """Look up the chart color for a group label."""
        for group in self._groups:
            if group.label == label and group.color:
                return group.color
        return fallback

    def __len__(self) -> int:
        return len(self._groups)

    def __repr__(self) -> str:
        labels = ", ".join(g.label for g in self._groups)
        return f"CategoryTaxonomy({labels})"


DEFAULT_TAXONOMY = CategoryTaxonomy([
    CategoryGroup(
        id="income",
        label="Income",
        kind=GroupKind.INCOME,
        categories=(
            "sales_cash",
            "sales_credit",
            "sales_checks",
            "sales_transfer",
            "sales_exempt",
            "other_income",
        ),
        color="#10b981",
    ),
    CategoryGroup(
        id="suppliers",
        label="Suppliers",
        kind=GroupKind.EXPENSE,
        categories=(
            "suppliers_cash",
            "suppliers_credit",
            "suppliers_checks",
            "suppliers_transfer",
        ),
        color="#0ea5e9",
    ),
    CategoryGroup(
        id="fixed_expenses",
        label="Fixed Expenses",
        kind=GroupKind.EXPENSE,
        categories=(
            "rent",
            "electricity",
            "water",
            "municipal_tax",
            "phone_internet",
            "insurance",
            "accounting",
            "software",
        ),
        color="#8b5cf6",
    ),
    CategoryGroup(
        id="variable_expenses",
        label="Variable Expenses",
        kind=GroupKind.EXPENSE,
        categories=(
            "fuel",
            "maintenance",
            "marketing",
            "office_supplies",
            "shipping",
            "misc_expenses",
        ),
        color="#f97316",
    ),
    CategoryGroup(
        id="payroll",
        label="Payroll",
        kind=GroupKind.EXPENSE,
        categories=(
            "salaries",
            "national_insurance",
            "pension",
        ),
        color="#ef4444",
    ),
    CategoryGroup(
        id="financing",
        label="Financing",
        kind=GroupKind.EXPENSE,
        categories=(
            "loan_repayment",
            "bank_fees",
            "credit_card_fees",
            "interest",
        ),
        color="#eab308",
    ),
    CategoryGroup(
        id="taxes",
        label="Taxes",
        kind=GroupKind.EXPENSE,
        categories=(
            "vat",
            "income_tax_advance",
        ),
        color="#64748b",
    ),
])
