"""Tests for CSV export."""

import csv
from pathlib import Path

from ledger_normalizer.config import Config, OutputConfig
from ledger_normalizer.models.entry import RawEntry
from ledger_normalizer.output.csv_exporter import HEADERS, CSVExporter
from ledger_normalizer.processing.pipeline import normalize_entries


def read_rows(path: Path) -> list[dict[str, str]]:
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.DictReader(f))


class TestCSVExporter:
    """Tests for CSVExporter class."""

    def test_export_rows(self, tmp_path: Path) -> None:
        """Test that every entry becomes one row in display order."""
        entries = normalize_entries(
            [
                RawEntry(id=1, date="2024-06-01", amount="-4.5", payee="Coffee"),
                RawEntry(id=2, date="2024-06-02T13:05:00", amount="100", payee="Refund"),
            ]
        )
        path = CSVExporter().export(tmp_path / "out" / "list.csv", entries)
        rows = read_rows(path)

        assert list(rows[0].keys()) == HEADERS
        assert [r["ID"] for r in rows] == ["2", "1"]
        assert rows[0]["Time"] == "13:05"
        assert rows[0]["Amount"] == "100.00"
        assert rows[1]["Amount"] == "-4.50"
        assert rows[1]["Direction"] == "expense"

    def test_transfer_row(self, tmp_path: Path) -> None:
        """Test that a transfer row carries both accounts and no sign."""
        group = RawEntry(
            id=1,
            date="2024-06-01",
            amount="-50",
            category_name="Transfer",
            is_group=True,
            children=(
                RawEntry(id=2, amount="-50", asset_display_name="Cash"),
                RawEntry(id=3, amount="50", asset_display_name="Savings"),
            ),
        )
        path = CSVExporter().export(tmp_path / "list.csv", normalize_entries([group]))
        row = read_rows(path)[0]

        assert row["Amount"] == "50.00"
        assert row["Group"] == "transfer"
        assert row["From"] == "Cash"
        assert row["To"] == "Savings"
        assert row["Account"] == "Cash → Savings"

    def test_formula_payee_escaped(self, tmp_path: Path) -> None:
        """Test that formula-like payees are neutralized."""
        entries = normalize_entries([RawEntry(id=1, date="2024-06-01", amount="-1", payee="=SUM(A1)")])
        path = CSVExporter().export(tmp_path / "list.csv", entries)
        assert read_rows(path)[0]["Payee"] == "'=SUM(A1)"

    def test_empty_list(self, tmp_path: Path) -> None:
        """Test that an empty list writes only the header."""
        path = CSVExporter().export(tmp_path / "list.csv", [])
        assert path.read_text(encoding="utf-8").strip() == ",".join(HEADERS)

    def test_configured_date_format(self, tmp_path: Path) -> None:
        """Test that the output date format is applied to the Date column."""
        config = Config(output=OutputConfig(date_format="%d/%m/%Y"))
        entries = normalize_entries([RawEntry(id=1, date="2024-06-01", amount="-1")])

        path = CSVExporter(config).export(tmp_path / "list.csv", entries)

        assert read_rows(path)[0]["Date"] == "01/06/2024"
