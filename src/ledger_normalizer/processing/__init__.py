"""Normalization engine components."""

from ledger_normalizer.processing.account_resolver import (
    AccountNameResolver,
    is_bank_linked,
    is_group_bank_linked,
)
from ledger_normalizer.processing.classifier import resolve_direction
from ledger_normalizer.processing.datetime_resolver import DateTimeResolver
from ledger_normalizer.processing.edit_form import EditFormDefaults, build_edit_form
from ledger_normalizer.processing.group_reconciler import (
    GroupReconciler,
    GroupResolution,
    filter_group_legs,
    reconcile_groups,
)
from ledger_normalizer.processing.metadata import parse_metadata
from ledger_normalizer.processing.pipeline import (
    Pipeline,
    normalize_entries,
    sort_entries,
)

__all__ = [
    "parse_metadata",
    "DateTimeResolver",
    "resolve_direction",
    "AccountNameResolver",
    "is_bank_linked",
    "is_group_bank_linked",
    "GroupReconciler",
    "GroupResolution",
    "filter_group_legs",
    "reconcile_groups",
    "Pipeline",
    "normalize_entries",
    "sort_entries",
    "EditFormDefaults",
    "build_edit_form",
]
