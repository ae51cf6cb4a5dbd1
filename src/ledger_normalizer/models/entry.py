"""Ledger entry data models: raw entries as received and normalized output."""

from dataclasses import dataclass
from datetime import time
from decimal import Decimal
from enum import Enum
from typing import Any


class Direction(Enum):
    """Which way money moved, as shown to the user."""

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class GroupKind(Enum):
    """How a multi-leg group was reconciled."""

    NONE = "none"
    TRANSFER = "transfer"
    SPLIT_PAYMENT = "splitPayment"
    PAYMENT_REFUND = "paymentRefund"


@dataclass(frozen=True)
class RawEntry:
    """A ledger entry exactly as the ledger service returned it.

    Attributes:
        id: Entry id (numeric on the ledger service, kept as received).
        date: Posting date; may include a time component.
        amount: Signed amount as received (string, number, or None).
        payee: Payee / merchant text.
        notes: Free-text notes.
        category_id: Category id, if categorized.
        category_name: Category name, if categorized.
        is_income: Explicit income flag; only meaningful when categorized.
        recurring_id: Id of the recurring rule that created this entry.
        tags: Tag names.
        asset_id: Internal (manual) account id.
        bank_account_id: Aggregator-issued account id.
        institution_name: Bank name reported by the aggregator.
        provider_metadata: Opaque aggregator metadata (JSON text or mapping).
        group_id: Parent group id when this entry is a leg of a group.
        is_group: True for group parents.
        children: Legs of a group parent.
        account_display_name: Account label chosen by the ledger service.
        asset_display_name: Display name of the manual account.
        bank_account_display_name: Display name of the aggregator account.
        account: Raw account field, last resort for labels.
        currency: ISO currency code.
    """

    id: Any
    date: str = ""
    amount: Any = None
    payee: str = ""
    notes: str = ""
    category_id: Any = None
    category_name: str | None = None
    is_income: bool | None = None
    recurring_id: Any = None
    tags: tuple[str, ...] = ()
    asset_id: Any = None
    bank_account_id: Any = None
    institution_name: str | None = None
    provider_metadata: Any = None
    group_id: Any = None
    is_group: bool = False
    children: tuple["RawEntry", ...] = ()
    account_display_name: str | None = None
    asset_display_name: str | None = None
    bank_account_display_name: str | None = None
    account: str | None = None
    currency: str | None = None

    @property
    def is_categorized(self) -> bool:
        """True if the entry carries a category id or name."""
        return self.category_id is not None or bool(self.category_name)

    @property
    def numeric_id(self) -> int:
        """Entry id as an integer for ordering (0 when not numeric)."""
        try:
            return int(self.id)
        except (TypeError, ValueError):
            return 0


@dataclass(frozen=True)
class NormalizedEntry:
    """Display-ready entry produced by the pipeline.

    ``amount`` keeps the raw signed amount for ordinary entries only; reconciled
    groups expose ``magnitude`` alone.
    """

    raw: RawEntry
    corrected_date: str
    direction: Direction
    display_account_name: str
    is_bank_linked: bool
    magnitude: Decimal
    amount: Decimal | None = None
    corrected_time: time | None = None
    group_kind: GroupKind = GroupKind.NONE
    group_legs: tuple[RawEntry, ...] = ()
    group_dates: tuple[str, ...] = ()
    transfer_from: str | None = None
    transfer_to: str | None = None
    flags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.magnitude < 0:
            raise ValueError(f"Magnitude must be non-negative, got {self.magnitude}")

    @property
    def id(self) -> Any:
        return self.raw.id

    @property
    def payee(self) -> str:
        return self.raw.payee

    @property
    def notes(self) -> str:
        return self.raw.notes

    @property
    def category_name(self) -> str | None:
        return self.raw.category_name

    @property
    def is_recurring(self) -> bool:
        return self.raw.recurring_id is not None

    @property
    def is_group(self) -> bool:
        """True if this entry was reconciled from a multi-leg group."""
        return self.group_kind is not GroupKind.NONE

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-ready view of the entry."""
        return {
            "id": self.raw.id,
            "date": self.raw.date,
            "correctedDate": self.corrected_date,
            "correctedTime": self.corrected_time.isoformat() if self.corrected_time else None,
            "payee": self.raw.payee,
            "notes": self.raw.notes,
            "categoryId": self.raw.category_id,
            "categoryName": self.raw.category_name,
            "recurringId": self.raw.recurring_id,
            "tags": list(self.raw.tags),
            "currency": self.raw.currency,
            "amount": str(self.amount) if self.amount is not None else None,
            "magnitude": str(self.magnitude),
            "direction": self.direction.value,
            "displayAccountName": self.display_account_name,
            "isBankLinked": self.is_bank_linked,
            "groupKind": self.group_kind.value,
            "groupLegIds": [leg.id for leg in self.group_legs],
            "groupDates": list(self.group_dates),
            "transferFrom": self.transfer_from,
            "transferTo": self.transfer_to,
            "flags": list(self.flags),
        }

    def __repr__(self) -> str:
        return (
            f"NormalizedEntry(id={self.raw.id!r}, date={self.corrected_date}, "
            f"payee={self.raw.payee[:30]!r}, magnitude={self.magnitude}, "
            f"direction={self.direction.value}, kind={self.group_kind.value})"
        )
