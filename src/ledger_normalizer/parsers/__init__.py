"""Readers for ledger service payloads."""

from ledger_normalizer.parsers.base import LoaderError, ParseError
from ledger_normalizer.parsers.ledger_json import (
    directory_entry_from_dict,
    entry_from_dict,
    load_directory,
    load_overrides,
    load_transactions,
    parse_transactions,
)

__all__ = [
    "ParseError",
    "LoaderError",
    "entry_from_dict",
    "directory_entry_from_dict",
    "parse_transactions",
    "load_transactions",
    "load_directory",
    "load_overrides",
]
