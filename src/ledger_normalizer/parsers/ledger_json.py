"""Readers for ledger service JSON payloads.

Accepts the service's native field names (``plaid_account_id``,
``plaid_metadata``, ``subtype_name`` ...) as well as the model's own names,
so both raw API dumps and hand-written fixtures load.
"""

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from ledger_normalizer.models.account import AccountDirectory, AccountDirectoryEntry
from ledger_normalizer.models.entry import RawEntry
from ledger_normalizer.parsers.base import LoaderError
from ledger_normalizer.utils.logging_config import get_logger

logger = get_logger(__name__)

# Model field -> accepted payload keys, first match wins
ENTRY_ALIASES: dict[str, tuple[str, ...]] = {
    "bank_account_id": ("bank_account_id", "plaid_account_id"),
    "provider_metadata": ("provider_metadata", "plaid_metadata", "metadata"),
    "bank_account_display_name": (
        "bank_account_display_name",
        "plaid_account_display_name",
        "plaid_account_name",
    ),
    "institution_name": ("institution_name", "plaid_account_institution_name"),
}

CLOSED_STATUSES = {"closed", "inactive", "deactivated"}


def _first(data: Mapping[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _tags(value: Any) -> tuple[str, ...]:
    """Tags arrive as names or as {"id", "name"} objects."""
    if not isinstance(value, list):
        return ()
    names = []
    for tag in value:
        if isinstance(tag, Mapping):
            name = tag.get("name")
            if name:
                names.append(str(name))
        elif tag is not None:
            names.append(str(tag))
    return tuple(names)


def _asset_name(data: Mapping[str, Any]) -> str | None:
    """Hand-written fixtures name the manual account under a bare "asset" key."""
    value = data.get("asset")
    return value if isinstance(value, str) else None


def entry_from_dict(data: Mapping[str, Any], leg: bool = False) -> RawEntry:
    """Build a RawEntry from one transaction object.

    Group legs nested under ``children`` may omit their id; top-level
    transactions may not.

    Args:
        data: Transaction object from the ledger service.
        leg: True when building a child of a group parent.

    Returns:
        RawEntry with children built recursively.

    Raises:
        LoaderError: If the object is not a mapping, or is a top-level
            transaction without an id.
    """
    if not isinstance(data, Mapping):
        raise LoaderError(f"Transaction must be an object, got {type(data).__name__}")
    if data.get("id") is None and not leg:
        raise LoaderError("Transaction has no id")

    is_income = data.get("is_income")
    children_data = data.get("children") or []
    if not isinstance(children_data, list):
        children_data = []

    return RawEntry(
        id=data.get("id"),
        date=_text(data.get("date")),
        amount=data.get("amount"),
        payee=_text(data.get("payee")),
        notes=_text(data.get("notes")),
        category_id=data.get("category_id"),
        category_name=_optional_text(data.get("category_name")),
        is_income=is_income if isinstance(is_income, bool) else None,
        recurring_id=data.get("recurring_id"),
        tags=_tags(data.get("tags")),
        asset_id=data.get("asset_id"),
        bank_account_id=_first(data, ENTRY_ALIASES["bank_account_id"]),
        institution_name=_optional_text(_first(data, ENTRY_ALIASES["institution_name"])),
        provider_metadata=_first(data, ENTRY_ALIASES["provider_metadata"]),
        group_id=data.get("group_id"),
        is_group=bool(data.get("is_group")),
        children=tuple(entry_from_dict(child, leg=True) for child in children_data),
        account_display_name=_optional_text(data.get("account_display_name")),
        asset_display_name=_optional_text(
            _first(data, ("asset_display_name", "asset_name")) or _asset_name(data)
        ),
        bank_account_display_name=_optional_text(
            _first(data, ENTRY_ALIASES["bank_account_display_name"])
        ),
        account=_optional_text(data.get("account")),
        currency=_optional_text(data.get("currency")),
    )


def directory_entry_from_dict(
    data: Mapping[str, Any],
    bank: bool | None = None,
) -> AccountDirectoryEntry:
    """Build an AccountDirectoryEntry from an asset or aggregator account object.

    Args:
        data: Account object.
        bank: True for aggregator accounts, False for manual assets, None to
            decide from the object's own fields.

    Returns:
        Directory entry.

    Raises:
        LoaderError: If the object is not a mapping or has no id.
    """
    if not isinstance(data, Mapping):
        raise LoaderError(f"Account must be an object, got {type(data).__name__}")
    if data.get("id") is None:
        raise LoaderError("Account has no id")

    bank_account_id = _first(data, ("bank_account_id", "plaid_account_id"))
    if bank is None:
        bank = bank_account_id is not None or data.get("source") in ("bank", "plaid")
    if bank and bank_account_id is None:
        bank_account_id = data["id"]
    if not bank:
        bank_account_id = None

    status = _text(data.get("status")).strip().lower()
    closed = (
        bool(data.get("closed"))
        or data.get("closed_on") is not None
        or status in CLOSED_STATUSES
    )

    name = _optional_text(_first(data, ("display_name", "name")))
    return AccountDirectoryEntry(
        id=data["id"],
        display_name=name or "",
        currency=_text(data.get("currency") or "usd").lower(),
        subtype=_optional_text(_first(data, ("subtype", "subtype_name"))),
        institution_name=_optional_text(data.get("institution_name")),
        bank_account_id=bank_account_id,
        closed=closed,
    )


def load_json(path: Path) -> Any:
    """Read a JSON file.

    Raises:
        LoaderError: If the file is missing or not valid JSON.
    """
    if not path.exists():
        raise LoaderError(f"File not found: {path}", path)
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise LoaderError(f"Invalid JSON in {path}: {e}", path) from e
    except OSError as e:
        raise LoaderError(f"Cannot read {path}: {e}", path) from e


def _items(payload: Any, keys: Iterable[str], path: Path) -> tuple[list[Any], str | None]:
    """Unwrap a bare array or an object holding one under a known key."""
    if isinstance(payload, list):
        return payload, None
    if isinstance(payload, Mapping):
        for key in keys:
            value = payload.get(key)
            if isinstance(value, list):
                return value, key
    raise LoaderError(f"Unexpected payload shape in {path}", path)


def parse_transactions(items: Iterable[Any], strict: bool = False) -> list[RawEntry]:
    """Build RawEntry objects, skipping malformed objects unless strict.

    Args:
        items: Transaction objects.
        strict: Raise on the first malformed object instead of skipping it.

    Returns:
        Entries in payload order.
    """
    entries: list[RawEntry] = []
    for index, item in enumerate(items):
        try:
            entries.append(entry_from_dict(item))
        except LoaderError as e:
            if strict:
                raise
            logger.warning(f"Skipping transaction #{index}: {e}")
    return entries


def load_transactions(path: Path, strict: bool = False) -> list[RawEntry]:
    """Load a transaction batch (``{"transactions": [...]}`` or a bare array)."""
    items, _ = _items(load_json(path), ("transactions",), path)
    entries = parse_transactions(items, strict=strict)
    logger.info(f"Loaded {len(entries)} transactions from {path}")
    return entries


def load_directory(paths: Iterable[Path], strict: bool = False) -> AccountDirectory:
    """Load and merge account directory files.

    ``{"assets": [...]}`` files hold manual accounts, ``{"plaid_accounts":
    [...]}`` files hold aggregator accounts; bare arrays are decided per item.
    """
    accounts: list[AccountDirectoryEntry] = []
    for path in paths:
        items, key = _items(load_json(path), ("assets", "plaid_accounts", "accounts"), path)
        bank = {"assets": False, "plaid_accounts": True}.get(key or "")
        for index, item in enumerate(items):
            try:
                accounts.append(directory_entry_from_dict(item, bank=bank))
            except LoaderError as e:
                if strict:
                    raise
                logger.warning(f"Skipping account #{index} in {path}: {e}")

    directory = AccountDirectory(accounts)
    logger.info(f"Loaded {len(directory)} accounts")
    return directory


def load_overrides(path: Path | None) -> dict[str, str]:
    """Load the local entry-id -> timestamp map.

    A missing path yields an empty map; the store is optional.
    """
    if path is None or not path.exists():
        return {}

    payload = load_json(path)
    if not isinstance(payload, Mapping):
        raise LoaderError(f"Override map in {path} must be an object", path)

    overrides = {str(k): str(v) for k, v in payload.items() if v is not None}
    logger.info(f"Loaded {len(overrides)} local time overrides from {path}")
    return overrides
