"""Edit-form pre-population for existing entries.

The form shows the entry's magnitude and a separate income/expense toggle.
The toggle is filled with the same classification used for the display list;
using any other rule would flip the entry's sign when the form is saved.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ledger_normalizer.config import Config
from ledger_normalizer.models.account import AccountDirectory
from ledger_normalizer.models.entry import Direction, NormalizedEntry, RawEntry
from ledger_normalizer.processing.account_resolver import AccountNameResolver, is_bank_linked
from ledger_normalizer.processing.classifier import resolve_direction
from ledger_normalizer.processing.datetime_resolver import DateTimeResolver
from ledger_normalizer.utils.decimal_utils import format_currency, magnitude_of
from ledger_normalizer.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class EditFormDefaults:
    """Initial values for the edit form of an existing entry.

    Attributes:
        entry_id: Id of the entry being edited.
        amount: Magnitude as a display string (never signed).
        direction: Income/expense/transfer toggle.
        payee: Payee text.
        date: Canonical calendar date.
        time: Meaningful time-of-day as HH:MM:SS, or None.
        notes: Notes text.
        category_id: Category id, if any.
        asset_id: Manual account id, if any.
        account_label: Account label shown on the form.
        tags: Tag names.
        is_editable: Whether saving is allowed.
        lock_reason: Why saving is not allowed (None when editable).
    """

    entry_id: Any
    amount: str
    direction: Direction
    payee: str
    date: str
    time: str | None
    notes: str
    category_id: Any
    asset_id: Any
    account_label: str
    tags: tuple[str, ...]
    is_editable: bool
    lock_reason: str | None = None


def build_edit_form(
    entry: NormalizedEntry | RawEntry,
    directory: AccountDirectory | None = None,
    overrides: Mapping[Any, str] | None = None,
    config: Config | None = None,
) -> EditFormDefaults:
    """Pre-populate the edit form for an entry.

    Args:
        entry: A normalized entry from the display list, or a raw entry
            fetched on its own.
        directory: Account directory for editability checks.
        overrides: Local map of entry id to full timestamp.
        config: Application configuration.

    Returns:
        Form defaults.
    """
    config = config or Config()
    directory = directory if directory is not None else AccountDirectory()
    accounts = AccountNameResolver(directory, config.normalization)
    decimal_places = config.output.decimal_places

    if isinstance(entry, NormalizedEntry):
        raw = entry.raw
        direction = entry.direction
        magnitude = entry.magnitude
        corrected_date = entry.corrected_date
        corrected_time = entry.corrected_time
        account_label = entry.display_account_name
        is_group = entry.is_group
    else:
        raw = entry
        datetimes = DateTimeResolver(config.normalization)
        linked = is_bank_linked(raw)
        direction = resolve_direction(raw, linked=linked)
        magnitude = magnitude_of(raw.amount)
        corrected_date = datetimes.resolve_date(raw)
        corrected_time = datetimes.resolve_time(raw, overrides, linked=linked)
        account_label = accounts.label(raw, linked=linked)
        is_group = False

    lock_reason = accounts.lock_reason(raw, is_group=is_group)
    if lock_reason:
        logger.debug(f"Entry {raw.id} opened read-only: {lock_reason}")

    return EditFormDefaults(
        entry_id=raw.id,
        amount=format_currency(magnitude, decimal_places),
        direction=direction,
        payee=raw.payee,
        date=corrected_date,
        time=corrected_time.isoformat() if corrected_time else None,
        notes=raw.notes,
        category_id=raw.category_id,
        asset_id=raw.asset_id,
        account_label=account_label,
        tags=raw.tags,
        is_editable=lock_reason is None,
        lock_reason=lock_reason,
    )
