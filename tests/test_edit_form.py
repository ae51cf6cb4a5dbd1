"""Tests for edit-form pre-population."""

import json

import pytest

from ledger_normalizer.models.account import AccountDirectory, AccountDirectoryEntry
from ledger_normalizer.models.entry import Direction, RawEntry
from ledger_normalizer.processing.edit_form import build_edit_form
from ledger_normalizer.processing.pipeline import normalize_entries


@pytest.fixture
def directory() -> AccountDirectory:
    return AccountDirectory(
        [
            AccountDirectoryEntry(id=7, display_name="Wallet", subtype="physical cash"),
            AccountDirectoryEntry(id=8, display_name="Brokerage", subtype="investment"),
        ]
    )


class TestBuildEditForm:
    """Tests for build_edit_form function."""

    def test_manual_expense(self, directory: AccountDirectory) -> None:
        """Test a plain editable cash expense."""
        entry = RawEntry(
            id=5,
            date="2024-04-02",
            amount="-12.5",
            payee="Bakery",
            notes="bread",
            category_id=2,
            category_name="Food",
            is_income=False,
            asset_id=7,
            tags=("daily",),
        )
        form = build_edit_form(entry, directory)

        assert form.entry_id == 5
        assert form.amount == "12.50"
        assert form.direction == Direction.EXPENSE
        assert form.payee == "Bakery"
        assert form.date == "2024-04-02"
        assert form.time is None
        assert form.account_label == "Wallet"
        assert form.tags == ("daily",)
        assert form.is_editable is True
        assert form.lock_reason is None

    def test_amount_never_signed(self, directory: AccountDirectory) -> None:
        """Test that the form amount is a magnitude."""
        form = build_edit_form(RawEntry(id=1, amount="-99.99", asset_id=7), directory)
        assert form.amount == "99.99"

    def test_bank_linked_toggle_matches_display(self) -> None:
        """Test that a bank-linked negative amount opens as income, as in the list."""
        entry = RawEntry(id=1, date="2024-04-02", amount="-500", bank_account_id=4)
        displayed = normalize_entries([entry])[0]

        form = build_edit_form(entry)

        assert displayed.direction == Direction.INCOME
        assert form.direction == displayed.direction
        assert form.is_editable is False
        assert form.lock_reason == "bank_linked"

    def test_metadata_marker_toggle(self) -> None:
        """Test that a debit marker opens as expense."""
        entry = RawEntry(
            id=1,
            amount="-20",
            bank_account_id=4,
            provider_metadata=json.dumps({"category": ["Shops", "Debit"]}),
        )
        assert build_edit_form(entry).direction == Direction.EXPENSE

    def test_from_normalized_entry(self, directory: AccountDirectory) -> None:
        """Test that a displayed entry keeps its resolved facts."""
        entry = RawEntry(id=3, date="2024-04-02T14:45:00", amount="8", asset_id=7)
        displayed = normalize_entries([entry], directory)[0]

        form = build_edit_form(displayed, directory)

        assert form.direction == Direction.INCOME
        assert form.amount == "8.00"
        assert form.time == "14:45:00"
        assert form.is_editable is True

    def test_override_time(self, directory: AccountDirectory) -> None:
        """Test that the local store time fills the form."""
        entry = RawEntry(id=3, date="2024-04-02", amount="-8", asset_id=7)
        form = build_edit_form(entry, directory, overrides={"3": "2024-04-02T09:30:00"})
        assert form.time == "09:30:00"

    def test_group_locked(self, directory: AccountDirectory) -> None:
        """Test that a reconciled group opens read-only."""
        group = RawEntry(
            id=1,
            amount="-10",
            category_name="Dining",
            is_group=True,
            children=(
                RawEntry(id=2, amount="-4", asset_id=7),
                RawEntry(id=3, amount="-6", asset_id=7),
            ),
        )
        displayed = normalize_entries([group], directory)[0]

        form = build_edit_form(displayed, directory)

        assert form.is_editable is False
        assert form.lock_reason == "group"

    def test_recurring_locked(self, directory: AccountDirectory) -> None:
        """Test that a recurring-rule entry opens read-only."""
        form = build_edit_form(RawEntry(id=1, amount="-1", asset_id=7, recurring_id=2), directory)
        assert form.lock_reason == "recurring"

    def test_non_cash_subtype_locked(self, directory: AccountDirectory) -> None:
        """Test that only physical-cash accounts are editable."""
        form = build_edit_form(RawEntry(id=1, amount="-1", asset_id=8), directory)
        assert form.lock_reason == "account_subtype"
