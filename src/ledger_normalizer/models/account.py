"""Account directory models for manual and bank-linked accounts."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any

# Key prefix for aggregator-issued account ids. Manual and aggregator ids are
# allocated independently and can collide numerically.
BANK_KEY_PREFIX = "bank_"

# The only subtype a user may edit entries for
PHYSICAL_CASH_SUBTYPE = "physical cash"


class AccountSource(Enum):
    """Where an account directory entry comes from."""

    MANUAL = "manual"
    BANK = "bank"


@dataclass(frozen=True)
class AccountDirectoryEntry:
    """An account known to the ledger service.

    Attributes:
        id: Account id within its id space (manual or aggregator).
        display_name: Human-readable account name.
        currency: ISO currency code.
        subtype: Account subtype (e.g., "physical cash", "checking").
        institution_name: Name of the financial institution.
        bank_account_id: Aggregator-issued id, set for bank-linked accounts.
        closed: Whether the account is closed.
    """

    id: Any
    display_name: str
    currency: str = "usd"
    subtype: str | None = None
    institution_name: str | None = None
    bank_account_id: Any = None
    closed: bool = False

    @property
    def source(self) -> AccountSource:
        return AccountSource.BANK if self.bank_account_id is not None else AccountSource.MANUAL

    @property
    def key(self) -> str:
        """Directory key: the plain id, or "bank_{id}" for aggregator accounts."""
        if self.bank_account_id is not None:
            return bank_key(self.bank_account_id)
        return str(self.id)

    def __repr__(self) -> str:
        return f"AccountDirectoryEntry(key={self.key!r}, name={self.display_name!r})"


def bank_key(bank_account_id: Any) -> str:
    """Return the directory key for an aggregator account id."""
    return f"{BANK_KEY_PREFIX}{bank_account_id}"


class AccountDirectory:
    """Read-only account lookup over both id spaces.

    Manual accounts are keyed by their id, aggregator accounts by
    "bank_{id}". Later entries with a duplicate key replace earlier ones.
    """

    def __init__(self, entries: Iterable[AccountDirectoryEntry] = ()):
        by_key: dict[str, AccountDirectoryEntry] = {}
        for entry in entries:
            by_key[entry.key] = entry
        self._by_key = MappingProxyType(by_key)

    def get(self, key: Any) -> AccountDirectoryEntry | None:
        """Look up an entry by raw directory key."""
        if key is None:
            return None
        return self._by_key.get(str(key))

    def get_asset(self, asset_id: Any) -> AccountDirectoryEntry | None:
        """Look up a manual account by its internal id."""
        if asset_id is None:
            return None
        return self._by_key.get(str(asset_id))

    def get_bank_account(self, bank_account_id: Any) -> AccountDirectoryEntry | None:
        """Look up an aggregator account by its aggregator id."""
        if bank_account_id is None:
            return None
        return self._by_key.get(bank_key(bank_account_id))

    def __contains__(self, key: object) -> bool:
        return str(key) in self._by_key

    def __iter__(self) -> Iterator[AccountDirectoryEntry]:
        return iter(self._by_key.values())

    def __len__(self) -> int:
        return len(self._by_key)

    def __repr__(self) -> str:
        return f"AccountDirectory({len(self)} accounts)"
