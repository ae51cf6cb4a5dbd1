"""Multi-leg group detection and reconciliation.

The ledger service returns a group parent (``is_group``) together with its
legs, and also returns each leg as a standalone entry carrying ``group_id``.
The reconciler drops the standalone legs and turns every parent into a single
entry:

- transfer groups (category "Transfer"/"Transfers") with exactly one
  outgoing and one incoming leg become a from → to transfer;
- other groups become a split payment (all legs share a sign) or a
  payment/refund pair (mixed signs).

Anything that does not fit passes through as an ordinary entry.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from ledger_normalizer.config import NormalizationConfig
from ledger_normalizer.models.account import AccountDirectory
from ledger_normalizer.models.entry import GroupKind, RawEntry
from ledger_normalizer.processing.account_resolver import (
    AccountNameResolver,
    is_bank_linked,
    is_group_bank_linked,
)
from ledger_normalizer.utils.date_utils import calendar_date
from ledger_normalizer.utils.decimal_utils import ZERO, parse_decimal
from ledger_normalizer.utils.logging_config import get_logger

logger = get_logger(__name__)

TRANSFER_ARROW = " → "

FLAG_INVALID_AMOUNT = "invalid_amount"
FLAG_AMBIGUOUS_TRANSFER = "ambiguous_transfer"


@dataclass(frozen=True)
class GroupResolution:
    """Account, linkage and amount facts for one surviving entry.

    Standalone entries get a resolution too, with ``kind`` NONE.
    """

    entry: RawEntry
    kind: GroupKind
    magnitude: Decimal
    display_account_name: str
    is_bank_linked: bool
    legs: tuple[RawEntry, ...] = ()
    dates: tuple[str, ...] = ()
    transfer_from: str | None = None
    transfer_to: str | None = None
    flags: tuple[str, ...] = ()

    @property
    def signed_amount(self) -> Decimal | None:
        """Raw signed amount, withheld for reconciled groups."""
        if self.kind is not GroupKind.NONE:
            return None
        return parse_decimal(self.entry.amount)


def filter_group_legs(entries: Sequence[RawEntry]) -> list[RawEntry]:
    """Drop legs that are already represented by their group parent.

    An entry with a ``group_id`` is kept only if its own id belongs to a
    group parent. Parents and standalone entries are never dropped.

    Args:
        entries: Raw batch in upstream order.

    Returns:
        Surviving entries, in the same order.
    """
    parent_ids = {str(e.id) for e in entries if e.is_group}
    kept = [e for e in entries if e.group_id is None or str(e.id) in parent_ids]

    dropped = len(entries) - len(kept)
    if dropped:
        logger.debug(f"Dropped {dropped} group legs represented by {len(parent_ids)} parents")
    return kept


class GroupReconciler:
    """Classifies group parents and resolves their account labels.

    Note: Stateless apart from its inputs; safe to reuse across runs.
    """

    def __init__(self, directory: AccountDirectory, config: NormalizationConfig | None = None):
        """Initialize reconciler.

        Args:
            directory: Account directory for the current run.
            config: Engine policy values (defaults if None).
        """
        self.config = config or NormalizationConfig()
        self.accounts = AccountNameResolver(directory, self.config)

    def reconcile(self, entries: Sequence[RawEntry]) -> list[GroupResolution]:
        """Resolve every entry of an already filtered batch.

        Args:
            entries: Entries surviving ``filter_group_legs``.

        Returns:
            One resolution per entry, in input order.
        """
        resolutions = [self.resolve(entry) for entry in entries]

        group_count = sum(1 for r in resolutions if r.kind is not GroupKind.NONE)
        logger.debug(f"Reconciled {group_count} groups out of {len(resolutions)} entries")
        return resolutions

    def resolve(self, entry: RawEntry) -> GroupResolution:
        """Resolve a single entry, reconciling it if it is a real group."""
        if entry.is_group and len(entry.children) >= 2:
            if self.config.is_transfer_category(entry.category_name):
                transfer = self._resolve_transfer(entry)
                if transfer is not None:
                    return transfer
                return self._resolve_plain(entry, extra_flags=(FLAG_AMBIGUOUS_TRANSFER,))
            return self._resolve_non_transfer(entry)
        return self._resolve_plain(entry)

    def _resolve_plain(
        self, entry: RawEntry, extra_flags: tuple[str, ...] = ()
    ) -> GroupResolution:
        """Resolve an entry using only its own fields."""
        amount, flags = self._amount(entry)
        linked = is_bank_linked(entry)
        return GroupResolution(
            entry=entry,
            kind=GroupKind.NONE,
            magnitude=abs(amount),
            display_account_name=self.accounts.label(entry, linked=linked),
            is_bank_linked=linked,
            flags=flags + extra_flags,
        )

    def _resolve_transfer(self, entry: RawEntry) -> GroupResolution | None:
        """Match the outgoing and incoming legs of a transfer group.

        Returns:
            Transfer resolution, or None unless there is exactly one leg of
            each sign.
        """
        outgoing = [c for c in entry.children if self._leg_amount(c) < 0]
        incoming = [c for c in entry.children if self._leg_amount(c) > 0]

        if len(outgoing) != 1 or len(incoming) != 1:
            logger.info(
                f"Transfer group {entry.id} has {len(outgoing)} outgoing and "
                f"{len(incoming)} incoming legs, showing as a plain entry"
            )
            return None

        debit_leg, credit_leg = outgoing[0], incoming[0]
        source = self.accounts.label(debit_leg)
        destination = self.accounts.label(credit_leg)

        return GroupResolution(
            entry=entry,
            kind=GroupKind.TRANSFER,
            magnitude=abs(self._leg_amount(debit_leg)),
            display_account_name=f"{source}{TRANSFER_ARROW}{destination}",
            is_bank_linked=is_group_bank_linked(entry),
            legs=entry.children,
            dates=self._leg_dates(entry),
            transfer_from=source,
            transfer_to=destination,
        )

    def _resolve_non_transfer(self, entry: RawEntry) -> GroupResolution:
        """Classify a split-payment or payment/refund group."""
        leg_amounts = [self._leg_amount(c) for c in entry.children]
        has_negative = any(a < 0 for a in leg_amounts)
        has_positive = any(a > 0 for a in leg_amounts)
        kind = (
            GroupKind.PAYMENT_REFUND if has_negative and has_positive else GroupKind.SPLIT_PAYMENT
        )

        amount, flags = self._amount(entry)
        total = abs(amount)

        main_leg = entry.children[0]
        for child, child_amount in zip(entry.children, leg_amounts):
            if abs(child_amount) > total:
                main_leg = child
                break

        linked = is_group_bank_linked(entry)
        return GroupResolution(
            entry=entry,
            kind=kind,
            magnitude=total,
            display_account_name=self.accounts.label(main_leg, linked=linked),
            is_bank_linked=linked,
            legs=entry.children,
            dates=self._leg_dates(entry),
            flags=flags,
        )

    def _amount(self, entry: RawEntry) -> tuple[Decimal, tuple[str, ...]]:
        amount = parse_decimal(entry.amount)
        if amount is None:
            logger.warning(f"Entry {entry.id} has invalid amount {entry.amount!r}, using 0")
            return ZERO, (FLAG_INVALID_AMOUNT,)
        return amount, ()

    @staticmethod
    def _leg_amount(leg: RawEntry) -> Decimal:
        amount = parse_decimal(leg.amount)
        return ZERO if amount is None else amount

    @staticmethod
    def _leg_dates(entry: RawEntry) -> tuple[str, ...]:
        dates = [calendar_date(c.date) or c.date for c in entry.children if c.date]
        return tuple(sorted(dates))


def reconcile_groups(
    entries: Sequence[RawEntry],
    directory: AccountDirectory,
    config: NormalizationConfig | None = None,
) -> list[GroupResolution]:
    """Convenience function to filter legs and reconcile a raw batch.

    Args:
        entries: Raw batch in upstream order.
        directory: Account directory for the current run.
        config: Engine policy values.

    Returns:
        One resolution per surviving entry.
    """
    reconciler = GroupReconciler(directory, config)
    return reconciler.reconcile(filter_group_legs(entries))
