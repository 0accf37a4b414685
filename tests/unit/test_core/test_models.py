#!/usr/bin/env python3
"""Tests for the bank-agnostic core models."""

from dataclasses import FrozenInstanceError
from datetime import datetime, timezone

import pytest

from fingrab.core.models import Account, Transaction
from fingrab.core.money import Money


class TestTransaction:
    """Test the universal Transaction model."""

    def test_defaults(self):
        """Test optional fields default to empty."""
        txn = Transaction(
            amount=Money(-280, "GBP"),
            reference="TfL",
            category="transport",
            created_at=datetime(2025, 1, 25, 10, tzinfo=timezone.utc),
        )
        assert txn.is_deposit is False
        assert txn.bank_name == ""
        assert txn.notes == ""

    def test_immutable(self):
        """Test transactions cannot be modified after export."""
        txn = Transaction(Money(1, "GBP"), "ref", "cat", datetime(2025, 1, 1, tzinfo=timezone.utc))
        with pytest.raises(FrozenInstanceError):
            txn.reference = "other"  # type: ignore[misc]


class TestAccount:
    """Test the Account model."""

    def test_minimal_account(self):
        """Test only id and type are required."""
        account = Account(id="acc_1", type="uk_retail")
        assert account.created_at is None
        assert account.name == ""
