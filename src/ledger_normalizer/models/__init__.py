"""Data models for ledger entries and the account directory."""

from ledger_normalizer.models.account import (
    AccountDirectory,
    AccountDirectoryEntry,
    AccountSource,
)
from ledger_normalizer.models.entry import (
    Direction,
    GroupKind,
    NormalizedEntry,
    RawEntry,
)

__all__ = [
    "RawEntry",
    "NormalizedEntry",
    "Direction",
    "GroupKind",
    "AccountDirectory",
    "AccountDirectoryEntry",
    "AccountSource",
]
