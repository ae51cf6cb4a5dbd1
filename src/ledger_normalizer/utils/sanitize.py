"""Sanitization utilities for safe CSV output of ledger text fields."""

# Leading characters that spreadsheet applications treat as a formula.
# Payees and notes come straight from bank feeds, so any of them may carry one.
_FORMULA_CHARS = ("=", "+", "-", "@", "\t", "\r", "\n", "|")


def sanitize_for_csv(value: str | None) -> str | None:
    """Prefix formula-triggering text with a single quote.

    Args:
        value: Text to sanitize, or None.

    Returns:
        Sanitized text, or None if input was None.
    """
    if not value:
        return value

    if value.startswith(_FORMULA_CHARS):
        return "'" + value

    return value


def sanitize_row(values: list[object]) -> list[object]:
    """Sanitize the free-text cells of an output row.

    Numbers are left untouched so signed amounts stay numeric.

    Args:
        values: Row cell values.

    Returns:
        New list with every string cell sanitized.
    """
    return [sanitize_for_csv(v) if isinstance(v, str) else v for v in values]
