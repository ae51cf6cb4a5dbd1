"""Output generation for normalized entries."""

from ledger_normalizer.output.csv_exporter import CSVExporter

__all__ = ["CSVExporter"]
