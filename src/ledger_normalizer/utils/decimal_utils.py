"""Decimal utilities for ledger amounts.

All monetary calculations must use Decimal to avoid floating-point precision issues.
The ledger service sends amounts as strings ("-50.0000"); manual entries created
on the device may arrive as numbers.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

ZERO = Decimal("0")


def parse_decimal(value: object | None) -> Decimal | None:
    """Convert a raw amount to Decimal.

    Args:
        value: Value to convert (string, int, float, Decimal or None).

    Returns:
        Decimal value, or None if the value is missing or not a finite number.
    """
    if value is None or isinstance(value, bool):
        return None

    try:
        if isinstance(value, Decimal):
            result = value
        elif isinstance(value, (int, float)):
            # Go through str so floats keep their displayed precision
            result = Decimal(str(value))
        elif isinstance(value, str):
            stripped = value.strip().replace(",", "")
            if not stripped:
                return None
            result = Decimal(stripped)
        else:
            return None
    except (InvalidOperation, ValueError):
        return None

    if not result.is_finite():
        return None
    return result


def safe_decimal(value: object | None, default: Decimal = ZERO) -> Decimal:
    """Safely convert a value to Decimal.

    Args:
        value: Value to convert.
        default: Default value if conversion fails.

    Returns:
        Decimal value or default.
    """
    parsed = parse_decimal(value)
    return default if parsed is None else parsed


def magnitude_of(value: object | None) -> Decimal:
    """Return the non-negative magnitude of a raw amount (zero when invalid)."""
    return abs(safe_decimal(value))


def format_currency(
    amount: Decimal,
    decimal_places: int = 2,
    include_sign: bool = True,
) -> str:
    """Format a Decimal amount for display.

    Args:
        amount: The amount to format.
        decimal_places: Number of decimal places (default 2).
        include_sign: Whether to include sign for negative amounts.

    Returns:
        Formatted string like "-1234.56" or "1234.56".
    """
    quantize_str = "1" if decimal_places <= 0 else "0." + "0" * decimal_places
    rounded = amount.quantize(Decimal(quantize_str), rounding=ROUND_HALF_UP)
    if rounded == 0:
        rounded = abs(rounded)  # Normalize -0

    if include_sign and rounded < 0:
        return str(rounded)
    return str(abs(rounded))
