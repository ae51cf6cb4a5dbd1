"""Command-line interface for the ledger normalizer."""

import argparse
import json
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ledger_normalizer import __version__
from ledger_normalizer.config import Config, ConfigError, load_config
from ledger_normalizer.models.account import AccountDirectory
from ledger_normalizer.models.entry import Direction, GroupKind, NormalizedEntry
from ledger_normalizer.utils.date_utils import format_date
from ledger_normalizer.utils.decimal_utils import format_currency
from ledger_normalizer.utils.logging_config import get_logger, setup_logging

# Load environment variables from .env file (if it exists)
load_dotenv()

console = Console()
logger = get_logger(__name__)

# Settings file used when --config is not given
SETTINGS_ENV_VAR = "LEDGER_NORMALIZER_SETTINGS"

DIRECTION_STYLES = {
    Direction.INCOME: "green",
    Direction.EXPENSE: "red",
    Direction.TRANSFER: "cyan",
}


def _env_path(name: str) -> Path | None:
    value = os.environ.get(name, "").strip()
    return Path(value) if value else None


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog="ledger-normalizer",
        description=(
            "Normalize a ledger service transaction batch into an ordered, "
            "display-ready list"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s -t transactions.json -a assets.json -a plaid_accounts.json
  %(prog)s -t transactions.json -a assets.json --overrides times.json -o list.csv
  %(prog)s -t transactions.json --json --limit 20
  %(prog)s -t transactions.json -a assets.json --edit 1234
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "-t", "--transactions",
        type=Path,
        default=None,
        help="Transaction batch JSON ({\"transactions\": [...]} or an array)",
    )

    parser.add_argument(
        "-a", "--accounts",
        type=Path,
        action="append",
        default=[],
        help="Account directory JSON (assets or plaid_accounts); may be repeated",
    )

    parser.add_argument(
        "--overrides",
        type=Path,
        default=None,
        help="Local entry-id -> timestamp map JSON",
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Write the normalized list to this CSV file",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the normalized list as JSON instead of a table",
    )

    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Show at most this many entries",
    )

    parser.add_argument(
        "--edit",
        metavar="ENTRY_ID",
        default=None,
        help="Show edit-form defaults for one entry",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=_env_path(SETTINGS_ENV_VAR),
        help=f"Path to settings.yaml (default: ${SETTINGS_ENV_VAR}, then config/settings.yaml)",
    )

    parser.add_argument(
        "--config-dir",
        type=Path,
        default=Path("config"),
        help="Base config directory (default: ./config)",
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Strict mode: abort on the first malformed transaction or account",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase output verbosity (-v, -vv)",
    )

    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Validate configuration files only",
    )

    return parser


def get_log_level(verbosity: int) -> str:
    """Convert verbosity count to log level.

    Args:
        verbosity: Number of -v flags.

    Returns:
        Log level string.
    """
    if verbosity >= 2:
        return "DEBUG"
    elif verbosity >= 1:
        return "INFO"
    else:
        return "WARNING"


def validate_config(args: argparse.Namespace) -> int:
    """Validate configuration files.

    Args:
        args: Parsed command-line arguments.

    Returns:
        0 if valid, 1 if errors found.
    """
    console.print("[bold]Validating configuration...[/bold]\n")

    settings_path = args.config or (args.config_dir / "settings.yaml")
    if not settings_path.exists():
        console.print(f"[yellow]Settings file not found: {settings_path} (defaults apply)[/yellow]")

    try:
        config = load_config(settings_path=args.config, config_dir=args.config_dir)
    except (ConfigError, FileNotFoundError) as e:
        console.print(f"\n[red]Errors:[/red]\n  - {e}")
        return 1

    settings = config.normalization
    console.print("[green]✓[/green] Configuration loaded successfully")
    console.print(f"  - Sentinel times: {', '.join(settings.sentinel_times)}")
    console.print(f"  - Transfer categories: {', '.join(settings.transfer_category_names)}")
    console.print(f"  - Editable subtype: {settings.manual_cash_subtype}")
    return 0


def format_amount(entry: NormalizedEntry, config: Config) -> str:
    """Format an entry's amount for the table."""
    text = f"{config.output.currency_symbol}{format_currency(entry.magnitude, config.output.decimal_places)}"
    if entry.direction is Direction.EXPENSE:
        return f"-{text}"
    return text


def build_table(entries: list[NormalizedEntry], config: Config) -> Table:
    """Build a rich table of normalized entries.

    Args:
        entries: Entries in display order.
        config: Application configuration.

    Returns:
        Rich Table ready to print.
    """
    table = Table(title="Transactions", show_lines=False)
    table.add_column("Date")
    table.add_column("Time")
    table.add_column("Payee")
    table.add_column("Amount", justify="right")
    table.add_column("Account")
    table.add_column("Kind")
    table.add_column("ID", justify="right", style="dim")

    for entry in entries:
        style = DIRECTION_STYLES[entry.direction]
        table.add_row(
            format_date(entry.corrected_date, config.output.date_format),
            entry.corrected_time.strftime(config.output.time_format) if entry.corrected_time else "",
            escape(entry.payee or "Unknown"),
            f"[{style}]{format_amount(entry, config)}[/{style}]",
            escape(entry.display_account_name),
            "" if entry.group_kind is GroupKind.NONE else entry.group_kind.value,
            str(entry.id),
        )
    return table


def display_summary(entries: list[NormalizedEntry], raw_count: int) -> None:
    """Display processing summary.

    Args:
        entries: Normalized entries.
        raw_count: Number of entries in the raw batch.
    """
    groups = sum(1 for e in entries if e.is_group)
    linked = sum(1 for e in entries if e.is_bank_linked)
    timed = sum(1 for e in entries if e.corrected_time is not None)
    flagged = [e for e in entries if e.flags]

    console.print("\n[bold]Normalization Summary[/bold]")
    console.print(f"  Raw entries: {raw_count}")
    console.print(f"  Normalized entries: {len(entries)}")
    console.print(f"  Reconciled groups: {groups}")
    console.print(f"  Bank-linked: {linked}")
    console.print(f"  With time of day: {timed}")

    if flagged:
        console.print(f"\n[yellow]Flagged entries ({len(flagged)}):[/yellow]")
        for entry in flagged[:10]:
            console.print(f"  - {entry.id}: {', '.join(entry.flags)}")
        if len(flagged) > 10:
            console.print(f"  ... and {len(flagged) - 10} more")


def show_edit_form(
    entry_id: str,
    entries: list[NormalizedEntry],
    directory: AccountDirectory,
    overrides: dict[str, str],
    config: Config,
) -> int:
    """Print the edit-form defaults for one entry.

    Returns:
        0 if the entry was found, 1 otherwise.
    """
    from ledger_normalizer.processing import build_edit_form

    match: NormalizedEntry | None = next(
        (e for e in entries if str(e.id) == str(entry_id)), None
    )
    if match is None:
        console.print(f"[red]Error: entry {entry_id} not in the normalized list[/red]")
        return 1

    form = build_edit_form(match, directory, overrides, config)
    console.print(f"[bold]Edit form for entry {form.entry_id}[/bold]")
    console.print(f"  Amount: {form.amount} ({form.direction.value})")
    console.print(f"  Payee: {form.payee}")
    console.print(f"  Date: {form.date} {form.time or ''}".rstrip())
    console.print(f"  Account: {form.account_label}")
    if form.is_editable:
        console.print("  [green]Editable[/green]")
    else:
        console.print(f"  [yellow]Read-only ({form.lock_reason})[/yellow]")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Arguments (defaults to sys.argv).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    log_level = get_log_level(args.verbose)
    setup_logging(level=log_level, log_file="", console_output=args.verbose > 0)

    if args.validate_only:
        return validate_config(args)

    if args.transactions is None:
        console.print("[red]Error: --transactions is required[/red]")
        parser.print_usage()
        return 1

    try:
        config = load_config(settings_path=args.config, config_dir=args.config_dir)
    except (ConfigError, FileNotFoundError) as e:
        console.print(f"[red]Error: {e}[/red]")
        console.print("Run with --validate-only to check configuration files.")
        return 1

    if config.logging.file and args.verbose > 0:
        setup_logging(level=log_level, log_file=config.logging.file, console_output=True)

    from ledger_normalizer.output import CSVExporter
    from ledger_normalizer.parsers import (
        LoaderError,
        load_directory,
        load_overrides,
        load_transactions,
    )
    from ledger_normalizer.processing import Pipeline

    try:
        raw_entries = load_transactions(args.transactions, strict=args.strict)
        directory = load_directory(args.accounts, strict=args.strict)
        overrides = load_overrides(args.overrides)
    except LoaderError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    entries = Pipeline(config).normalize(raw_entries, directory, overrides)

    if args.edit is not None:
        return show_edit_form(args.edit, entries, directory, overrides, config)

    shown = entries[: args.limit] if args.limit is not None else entries

    if args.json:
        print(json.dumps([e.to_dict() for e in shown], indent=2, ensure_ascii=False, default=str))
    else:
        console.print(build_table(shown, config))
        display_summary(entries, len(raw_entries))

    if args.output is not None:
        path = CSVExporter(config).export(args.output, entries)
        if not args.json:
            console.print(f"\n[green]Wrote {len(entries)} entries to {path}[/green]")

    return 0


if __name__ == "__main__":
    sys.exit(main())
