"""Decimal utilities for ledger calculations.

All monetary calculations use Decimal to avoid floating-point drift when
summing many daily entries.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Optional

ZERO = Decimal("0")

# Values of 1e100 or more are treated as malformed entries
MAX_ADJUSTED_EXPONENT = 99


def safe_decimal(value: Optional[object], default: Optional[Decimal] = ZERO) -> Optional[Decimal]:
    """Safely convert a value to a finite Decimal.

    Booleans are not treated as numbers, and NaN, infinite or absurdly
    large values are rejected, so a single bad entry cannot poison a sum.

    Args:
        value: Value to convert (string, int, float, Decimal or anything else).
        default: Value returned when conversion fails.

    Returns:
        Decimal value or default.
    """
    if value is None or isinstance(value, bool):
        return default

    try:
        if isinstance(value, Decimal):
            result = value
        elif isinstance(value, int):
            result = Decimal(value)
        elif isinstance(value, float):
            # Convert float to string first for precision
            result = Decimal(str(value))
        elif isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                return default
            result = Decimal(stripped)
        else:
            return default
    except (InvalidOperation, ValueError):
        return default

    if not result.is_finite() or result.adjusted() > MAX_ADJUSTED_EXPONENT:
        return default
    return result


def _digits_needed(amount: Decimal, decimal_places: int) -> int:
    """Precision that holds every integer digit of amount plus decimal_places."""
    return max(amount.adjusted(), 0) + decimal_places + 2


def round_half_up(amount: Decimal, decimal_places: int = 0) -> Decimal:
    """Round a Decimal using ROUND_HALF_UP.

    Args:
        amount: The amount to round.
        decimal_places: Number of decimal places to keep.

    Returns:
        Rounded Decimal.
    """
    quantum = Decimal(1).scaleb(-decimal_places)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, _digits_needed(amount, decimal_places))
        return amount.quantize(quantum, rounding=ROUND_HALF_UP)


def to_number(amount: Decimal) -> int | float:
    """Convert a Decimal to a JSON-friendly number.

    Integral values become int, everything else float.
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, _digits_needed(amount, 0))
        if amount == amount.to_integral_value():
            return int(amount)
    return float(amount)

