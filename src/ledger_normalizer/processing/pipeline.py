"""Normalization pipeline: filter, reconcile, resolve and order a raw batch."""

from collections.abc import Mapping, Sequence
from datetime import time
from typing import Any

from ledger_normalizer.config import Config, NormalizationConfig
from ledger_normalizer.models.account import AccountDirectory
from ledger_normalizer.models.entry import Direction, GroupKind, NormalizedEntry, RawEntry
from ledger_normalizer.processing.classifier import resolve_direction
from ledger_normalizer.processing.datetime_resolver import DateTimeResolver
from ledger_normalizer.processing.group_reconciler import (
    GroupReconciler,
    GroupResolution,
    filter_group_legs,
)
from ledger_normalizer.utils.logging_config import LogContext, get_logger

logger = get_logger(__name__)


def sort_key(entry: NormalizedEntry) -> tuple[str, bool, time, int]:
    """Ordering key, used with ``reverse=True``.

    Newest date first; within a date, timed entries before untimed ones and
    later times first; then higher ids first.
    """
    has_time = entry.corrected_time is not None
    return (
        entry.corrected_date,
        has_time,
        entry.corrected_time if has_time else time.min,
        entry.raw.numeric_id,
    )


def sort_entries(entries: Sequence[NormalizedEntry]) -> list[NormalizedEntry]:
    """Order entries for display.

    Python's sort stays stable with ``reverse=True``, so fully tied entries
    keep their upstream order.
    """
    return sorted(entries, key=sort_key, reverse=True)


class Pipeline:
    """Turns a raw ledger batch into an ordered list of NormalizedEntry.

    The pipeline:
    - Drops group legs already represented by their parent
    - Reconciles transfer, split-payment and payment/refund groups
    - Resolves date, time-of-day and direction for every entry
    - Orders the result newest first

    A run has no side effects; the same inputs always produce the same output.
    """

    def __init__(self, config: Config | None = None):
        """Initialize pipeline with configuration.

        Args:
            config: Application configuration (defaults if None).
        """
        self.config = config or Config()
        self.settings: NormalizationConfig = self.config.normalization
        self.datetimes = DateTimeResolver(self.settings)

    def normalize(
        self,
        entries: Sequence[RawEntry],
        directory: AccountDirectory | None = None,
        overrides: Mapping[Any, str] | None = None,
    ) -> list[NormalizedEntry]:
        """Normalize a raw batch.

        Args:
            entries: Raw batch in upstream order.
            directory: Account directory for this run.
            overrides: Local map of entry id to full timestamp.

        Returns:
            Normalized entries, newest first.
        """
        directory = directory if directory is not None else AccountDirectory()

        with LogContext(logger, "normalize", entries=len(entries), accounts=len(directory)):
            surviving = filter_group_legs(entries)
            reconciler = GroupReconciler(directory, self.settings)
            resolutions = reconciler.reconcile(surviving)

            normalized = [self._finalize(r, overrides) for r in resolutions]
            ordered = sort_entries(normalized)

        logger.info(
            f"Normalized {len(ordered)}/{len(entries)} entries "
            f"({len(entries) - len(surviving)} group legs folded)"
        )
        return ordered

    def _finalize(
        self,
        resolution: GroupResolution,
        overrides: Mapping[Any, str] | None,
    ) -> NormalizedEntry:
        """Attach date, time and direction to a resolved entry."""
        entry = resolution.entry
        linked = resolution.is_bank_linked

        if resolution.kind is GroupKind.TRANSFER:
            direction = Direction.TRANSFER
        else:
            direction = resolve_direction(entry, linked=linked)

        return NormalizedEntry(
            raw=entry,
            corrected_date=self.datetimes.resolve_date(entry),
            corrected_time=self.datetimes.resolve_time(entry, overrides, linked=linked),
            direction=direction,
            display_account_name=resolution.display_account_name,
            is_bank_linked=linked,
            magnitude=resolution.magnitude,
            amount=resolution.signed_amount,
            group_kind=resolution.kind,
            group_legs=resolution.legs,
            group_dates=resolution.dates,
            transfer_from=resolution.transfer_from,
            transfer_to=resolution.transfer_to,
            flags=resolution.flags,
        )


def normalize_entries(
    entries: Sequence[RawEntry],
    directory: AccountDirectory | None = None,
    overrides: Mapping[Any, str] | None = None,
    config: Config | None = None,
) -> list[NormalizedEntry]:
    """Convenience function to normalize a raw batch.

    Args:
        entries: Raw batch in upstream order.
        directory: Account directory for this run.
        overrides: Local map of entry id to full timestamp.
        config: Application configuration.

    Returns:
        Normalized entries, newest first.
    """
    pipeline = Pipeline(config)
    return pipeline.normalize(entries, directory, overrides)
