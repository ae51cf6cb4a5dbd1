"""CSV export of normalized entries."""

import csv
from decimal import Decimal
from pathlib import Path

from ledger_normalizer.config import Config
from ledger_normalizer.models.entry import Direction, NormalizedEntry
from ledger_normalizer.utils.date_utils import format_date
from ledger_normalizer.utils.decimal_utils import format_currency
from ledger_normalizer.utils.logging_config import get_logger
from ledger_normalizer.utils.sanitize import sanitize_row

logger = get_logger(__name__)

HEADERS = [
    "ID",
    "Date",
    "Time",
    "Payee",
    "Direction",
    "Amount",
    "Account",
    "Bank Linked",
    "Group",
    "From",
    "To",
    "Category",
    "Notes",
    "Flags",
]


class CSVExporter:
    """Writes the display list to a single CSV file, one row per entry.

    Amounts are written as signed display values: expenses negative, income
    positive, transfers unsigned.
    """

    def __init__(self, config: Config | None = None):
        """Initialize CSV exporter.

        Args:
            config: Application configuration.
        """
        self.config = config or Config()
        self.output_config = self.config.output

    def export(self, output_path: Path, entries: list[NormalizedEntry]) -> Path:
        """Export entries to CSV.

        Args:
            output_path: Destination file.
            entries: Normalized entries in display order.

        Returns:
            Path to the created file.
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(HEADERS)
            for entry in entries:
                writer.writerow(sanitize_row(self._row(entry)))

        logger.info(f"Exported {len(entries)} entries to {output_path}")
        return output_path

    def _row(self, entry: NormalizedEntry) -> list[object]:
        return [
            entry.id,
            format_date(entry.corrected_date, self.output_config.date_format),
            entry.corrected_time.strftime(self.output_config.time_format)
            if entry.corrected_time
            else "",
            entry.payee,
            entry.direction.value,
            self.display_amount(entry),
            entry.display_account_name,
            "yes" if entry.is_bank_linked else "no",
            entry.group_kind.value,
            entry.transfer_from or "",
            entry.transfer_to or "",
            entry.category_name or "",
            entry.notes,
            ";".join(entry.flags),
        ]

    def display_amount(self, entry: NormalizedEntry) -> Decimal:
        """Return the magnitude with the sign implied by the direction.

        Kept as a Decimal so the cell is not mistaken for a formula and quoted.
        """
        amount = Decimal(format_currency(entry.magnitude, self.output_config.decimal_places))
        if entry.direction is Direction.EXPENSE and amount != 0:
            return -amount
        return amount
