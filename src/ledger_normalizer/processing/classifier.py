"""Income vs. expense classification for ledger entries.

Rules are applied in a fixed priority order:
1. A categorized entry with an explicit ``is_income`` flag is trusted as-is.
2. Provider metadata with a two-item classification list naming exactly one
   of "credit" / "debit" decides (credit is income).
3. Bank-linked entries use the aggregator's outflow-positive convention:
   negative amounts are income.
4. Everything else uses the ledger convention: negative amounts are expenses.

The same order is used for the display list and for pre-filling the edit
form, so reopening an entry never reclassifies it.
"""

from typing import Any

from ledger_normalizer.models.entry import Direction, RawEntry
from ledger_normalizer.processing.account_resolver import is_bank_linked
from ledger_normalizer.processing.metadata import entry_metadata
from ledger_normalizer.utils.decimal_utils import safe_decimal

CREDIT_MARKER = "credit"
DEBIT_MARKER = "debit"


def metadata_direction(metadata: dict[str, Any] | None) -> Direction | None:
    """Read a credit/debit marker from provider metadata.

    Args:
        metadata: Parsed provider metadata.

    Returns:
        INCOME for credit, EXPENSE for debit, None if the classification list
        is missing, not two items long, or names both or neither marker.
    """
    if not metadata:
        return None

    classification = metadata.get("category")
    if not isinstance(classification, (list, tuple)) or len(classification) != 2:
        return None

    markers = {str(item).strip().lower() for item in classification if item is not None}
    has_credit = CREDIT_MARKER in markers
    has_debit = DEBIT_MARKER in markers
    if has_credit == has_debit:
        return None
    return Direction.INCOME if has_credit else Direction.EXPENSE


def resolve_direction(entry: RawEntry, linked: bool | None = None) -> Direction:
    """Classify an entry as income or expense.

    Args:
        entry: Entry to classify.
        linked: Bank linkage to apply; computed from the entry when None.

    Returns:
        Direction.INCOME or Direction.EXPENSE.
    """
    if entry.is_categorized and isinstance(entry.is_income, bool):
        return Direction.INCOME if entry.is_income else Direction.EXPENSE

    from_metadata = metadata_direction(entry_metadata(entry))
    if from_metadata is not None:
        return from_metadata

    if linked is None:
        linked = is_bank_linked(entry)

    amount = safe_decimal(entry.amount)
    if linked:
        return Direction.INCOME if amount < 0 else Direction.EXPENSE
    return Direction.INCOME if amount >= 0 else Direction.EXPENSE
