"""Tests for income/expense classification."""

import json

from ledger_normalizer.models.entry import Direction, RawEntry
from ledger_normalizer.processing.classifier import metadata_direction, resolve_direction


def create_entry(amount: object = "-10.00", **kwargs: object) -> RawEntry:
    """Helper to create a RawEntry for testing."""
    metadata = kwargs.pop("metadata", None)
    if isinstance(metadata, dict):
        metadata = json.dumps(metadata)
    return RawEntry(id=1, date="2024-01-01", amount=amount, provider_metadata=metadata, **kwargs)


class TestExplicitIncomeFlag:
    """Tests for rule 1: categorized entries with is_income."""

    def test_categorized_income(self) -> None:
        """Test that is_income=True is trusted for categorized entries."""
        entry = create_entry(amount="-25.00", category_id=3, is_income=True)
        assert resolve_direction(entry) == Direction.INCOME

    def test_categorized_expense(self) -> None:
        """Test that is_income=False is trusted for categorized entries."""
        entry = create_entry(amount="25.00", category_name="Dining", is_income=False)
        assert resolve_direction(entry) == Direction.EXPENSE

    def test_explicit_flag_outranks_metadata(self) -> None:
        """Test that is_income outranks a contradictory debit marker."""
        entry = create_entry(
            category_id=3,
            is_income=True,
            metadata={"category": ["Payment", "Debit"]},
        )
        assert resolve_direction(entry) == Direction.INCOME

    def test_uncategorized_flag_ignored(self) -> None:
        """Test that is_income is ignored when the entry is uncategorized."""
        entry = create_entry(amount="-25.00", is_income=True)
        assert resolve_direction(entry) == Direction.EXPENSE


class TestMetadataMarker:
    """Tests for rule 2: credit/debit markers in metadata."""

    def test_credit_marker(self) -> None:
        """Test that a credit marker means income."""
        entry = create_entry(amount="40.00", metadata={"category": ["Transfer", "Credit"]})
        assert resolve_direction(entry) == Direction.INCOME

    def test_debit_marker(self) -> None:
        """Test that a debit marker means expense."""
        entry = create_entry(amount="-40.00", metadata={"category": ["Transfer", "debit"]})
        assert resolve_direction(entry) == Direction.EXPENSE

    def test_both_markers_ignored(self) -> None:
        """Test that a list naming both markers is not used."""
        assert metadata_direction({"category": ["Credit", "Debit"]}) is None

    def test_list_length_must_be_two(self) -> None:
        """Test that only two-item classification lists count."""
        assert metadata_direction({"category": ["Credit"]}) is None
        assert metadata_direction({"category": ["Transfer", "Credit", "Other"]}) is None

    def test_non_list_ignored(self) -> None:
        """Test that a string classification is not used."""
        assert metadata_direction({"category": "Credit"}) is None

    def test_marker_outranks_sign(self) -> None:
        """Test that the marker wins over the bank-linked sign convention."""
        entry = create_entry(
            amount="-40.00",
            bank_account_id=5,
            metadata={"category": ["Service", "Debit"]},
        )
        assert resolve_direction(entry) == Direction.EXPENSE


class TestSignConventions:
    """Tests for rules 3 and 4: amount sign."""

    def test_bank_linked_negative_is_income(self) -> None:
        """Test the aggregator's inverted convention for negative amounts."""
        entry = create_entry(amount="-100.00", bank_account_id=5)
        assert resolve_direction(entry) == Direction.INCOME

    def test_bank_linked_positive_is_expense(self) -> None:
        """Test the aggregator's inverted convention for positive amounts."""
        entry = create_entry(amount="100.00", institution_name="First Bank")
        assert resolve_direction(entry) == Direction.EXPENSE

    def test_bank_linked_zero_is_expense(self) -> None:
        """Test that zero is an expense under the inverted convention."""
        entry = create_entry(amount="0", bank_account_id=5)
        assert resolve_direction(entry) == Direction.EXPENSE

    def test_manual_positive_is_income(self) -> None:
        """Test the standard convention for positive amounts."""
        assert resolve_direction(create_entry(amount="12.50")) == Direction.INCOME

    def test_manual_negative_is_expense(self) -> None:
        """Test the standard convention for negative amounts."""
        assert resolve_direction(create_entry(amount="-12.50")) == Direction.EXPENSE

    def test_manual_zero_is_income(self) -> None:
        """Test that zero is income under the standard convention."""
        assert resolve_direction(create_entry(amount=0)) == Direction.INCOME

    def test_invalid_amount_treated_as_zero(self) -> None:
        """Test that an unparseable amount does not raise."""
        assert resolve_direction(create_entry(amount="n/a")) == Direction.INCOME

    def test_linkage_override(self) -> None:
        """Test that caller-supplied linkage switches the convention."""
        entry = create_entry(amount="-12.50")
        assert resolve_direction(entry, linked=True) == Direction.INCOME
