"""Canonical date and time-of-day resolution for ledger entries.

Aggregator entries often carry the settlement date in ``entry.date``; the
provider metadata date, when present, is the real transaction date. Times are
only reported when they are real: provider and client defaults fill missing
times with sentinel values such as midnight.
"""

from collections.abc import Mapping
from datetime import time
from typing import Any

from ledger_normalizer.config import NormalizationConfig
from ledger_normalizer.models.entry import RawEntry
from ledger_normalizer.processing.account_resolver import is_bank_linked
from ledger_normalizer.processing.metadata import entry_metadata
from ledger_normalizer.utils.date_utils import (
    calendar_date,
    is_meaningful_time,
    time_of_day,
)
from ledger_normalizer.utils.logging_config import get_logger

logger = get_logger(__name__)


def lookup_override(overrides: Mapping[Any, str] | None, entry_id: Any) -> str | None:
    """Find a locally stored timestamp for an entry.

    The local store is keyed by string id, but maps built in code may use the
    numeric id directly; both are accepted.
    """
    if not overrides or entry_id is None:
        return None
    value = overrides.get(str(entry_id))
    if value is None:
        value = overrides.get(entry_id)
    return value


class DateTimeResolver:
    """Resolves ``corrected_date`` and ``corrected_time`` for one entry."""

    def __init__(self, config: NormalizationConfig | None = None):
        self.config = config or NormalizationConfig()

    def _meaningful(self, value: time | None) -> bool:
        return is_meaningful_time(value, self.config.sentinels)

    def resolve_date(self, entry: RawEntry) -> str:
        """Return the canonical calendar date for an entry.

        Priority: metadata ``date``, then the date part of a parseable
        metadata ``datetime``, then ``entry.date``.

        Args:
            entry: Entry to resolve.

        Returns:
            Calendar date string (YYYY-MM-DD when readable).
        """
        metadata = entry_metadata(entry)
        if metadata:
            meta_date = metadata.get("date")
            if isinstance(meta_date, str) and meta_date.strip():
                return calendar_date(meta_date) or meta_date.strip()

            meta_datetime_date = calendar_date(metadata.get("datetime"))
            if meta_datetime_date:
                return meta_datetime_date

        entry_date = calendar_date(entry.date)
        if entry_date:
            return entry_date

        if entry.date:
            logger.debug(f"Entry {entry.id} has unreadable date {entry.date!r}, keeping as-is")
        return entry.date or ""

    def resolve_time(
        self,
        entry: RawEntry,
        overrides: Mapping[Any, str] | None = None,
        linked: bool | None = None,
    ) -> time | None:
        """Return a meaningful time-of-day for an entry, or None.

        Bank-linked entries only trust the metadata ``datetime``; their
        ``entry.date`` time is never used. Manual entries use ``entry.date``,
        then the local override store.

        Args:
            entry: Entry to resolve.
            overrides: Local map of entry id to full timestamp.
            linked: Bank linkage to apply; computed from the entry when None.

        Returns:
            Time-of-day, or None when no meaningful time is available.
        """
        if linked is None:
            linked = is_bank_linked(entry)

        if linked:
            metadata = entry_metadata(entry)
            if metadata:
                meta_time = time_of_day(metadata.get("datetime"))
                if self._meaningful(meta_time):
                    return meta_time
            return None

        entry_time = time_of_day(entry.date)
        if self._meaningful(entry_time):
            return entry_time

        override_time = time_of_day(lookup_override(overrides, entry.id))
        if self._meaningful(override_time):
            return override_time

        return None
