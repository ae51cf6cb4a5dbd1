"""Transaction normalization and grouping for ledger service batches."""

__version__ = "0.1.0"
