"""Account label and bank-linkage resolution for entries and group legs."""

from ledger_normalizer.config import NormalizationConfig
from ledger_normalizer.models.account import AccountDirectory
from ledger_normalizer.models.entry import RawEntry
from ledger_normalizer.processing.metadata import has_metadata
from ledger_normalizer.utils.logging_config import get_logger

logger = get_logger(__name__)


def _non_empty(value: object | None) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def is_bank_linked(entry: RawEntry) -> bool:
    """Check whether an entry or leg came from the bank aggregator.

    Only the entry's own fields are consulted: an aggregator account id or
    display name, an institution name, or non-empty provider metadata.
    """
    return (
        entry.bank_account_id is not None
        or _non_empty(entry.bank_account_display_name) is not None
        or _non_empty(entry.institution_name) is not None
        or has_metadata(entry)
    )


def is_group_bank_linked(entry: RawEntry) -> bool:
    """Linkage for a group: the parent or any one of its legs."""
    return is_bank_linked(entry) or any(is_bank_linked(child) for child in entry.children)


class AccountNameResolver:
    """Resolves display labels and editability for entry accounts.

    Label priority:
    1. Account display name on the entry
    2. Asset display name (entry field, then directory by asset id)
    3. Bank-account display name (entry field, then directory by "bank_{id}")
    4. Raw account field
    5. The unknown-account label
    """

    def __init__(self, directory: AccountDirectory, config: NormalizationConfig | None = None):
        """Initialize resolver.

        Args:
            directory: Account directory for the current run.
            config: Engine policy values (defaults if None).
        """
        self.directory = directory
        self.config = config or NormalizationConfig()

    def base_label(self, entry: RawEntry) -> str:
        """Return the account label without any link indicator."""
        asset_name = _non_empty(entry.asset_display_name)
        if asset_name is None:
            asset = self.directory.get_asset(entry.asset_id)
            asset_name = _non_empty(asset.display_name) if asset else None

        bank_name = _non_empty(entry.bank_account_display_name)
        if bank_name is None:
            bank_account = self.directory.get_bank_account(entry.bank_account_id)
            bank_name = _non_empty(bank_account.display_name) if bank_account else None

        candidates = (
            _non_empty(entry.account_display_name),
            asset_name,
            bank_name,
            _non_empty(entry.account),
        )
        for candidate in candidates:
            if candidate:
                return candidate

        logger.debug(f"No account label for entry {entry.id}, using fallback")
        return self.config.unknown_account_label

    def label(self, entry: RawEntry, linked: bool | None = None) -> str:
        """Return the display label for an entry or leg.

        Args:
            entry: Entry or group leg.
            linked: Linkage to apply; computed from the entry when None.

        Returns:
            Label, prefixed with the link indicator when linked.
        """
        if linked is None:
            linked = is_bank_linked(entry)
        base = self.base_label(entry)
        return f"{self.config.link_indicator}{base}" if linked else base

    def is_editable(self, entry: RawEntry, is_group: bool = False) -> bool:
        """Check whether the entry's account allows edits.

        Only manual physical-cash accounts are editable. Groups, transfer
        pseudo-accounts and entries owned by a recurring rule never are.

        Args:
            entry: Entry to check.
            is_group: True if the entry is shown as a reconciled group.

        Returns:
            True if the entry may be edited.
        """
        return self.lock_reason(entry, is_group) is None

    def lock_reason(self, entry: RawEntry, is_group: bool = False) -> str | None:
        """Explain why an entry cannot be edited, or None if it can."""
        if is_group or entry.is_group or entry.children:
            return "group"
        if entry.recurring_id is not None:
            return "recurring"
        if is_bank_linked(entry):
            return "bank_linked"

        account = self.directory.get_asset(entry.asset_id)
        if account is None:
            return "unknown_account"
        subtype = (account.subtype or "").strip().lower()
        if subtype != self.config.manual_cash_subtype.strip().lower():
            return "account_subtype"
        return None
