#!/usr/bin/env python3
"""Tests for Monzo response models and error decoding."""

import json
from datetime import datetime, timezone

import pytest

from fingrab.core.money import Money
from fingrab.monzo.models import (
    MonzoAccount,
    MonzoAPIError,
    MonzoCounterParty,
    MonzoMerchant,
    MonzoPot,
    MonzoTransaction,
    decode_error,
)


@pytest.mark.monzo
class TestMonzoTransaction:
    """Test parsing Monzo transactions."""

    def test_from_dict(self, sample_monzo_transaction):
        """Test amounts are lifted into Money and notes are kept."""
        txn = MonzoTransaction.from_dict(sample_monzo_transaction)

        assert txn.id == "tx_0001"
        assert txn.amount == Money(-280, "GBP")
        assert txn.local_amount == Money(-280, "GBP")
        assert txn.created_at == datetime(2025, 1, 25, 10, tzinfo=timezone.utc)
        assert txn.settled_at == datetime(2025, 1, 26, 2, tzinfo=timezone.utc)
        assert txn.user_notes == "Travel"
        assert txn.merchant.name == "TfL"
        assert txn.counter_party is None
        assert txn.decline_reason == ""

    def test_foreign_currency(self, sample_monzo_transaction):
        """Test local amounts keep their own currency."""
        sample_monzo_transaction.update(amount=-1052, local_amount=-1200, local_currency="EUR")
        txn = MonzoTransaction.from_dict(sample_monzo_transaction)

        assert str(txn.amount) == "-10.52"
        assert txn.local_amount == Money(-1200, "EUR")

    def test_unexpanded_merchant(self, sample_monzo_transaction):
        """Test a bare merchant id is accepted."""
        sample_monzo_transaction["merchant"] = "merch_123"
        txn = MonzoTransaction.from_dict(sample_monzo_transaction)
        assert txn.merchant == MonzoMerchant(id="merch_123")

    def test_null_fields(self, sample_monzo_transaction):
        """Test null optional fields become empty values."""
        sample_monzo_transaction.update(merchant=None, notes=None, settled="", metadata=None, counterparty=None)
        txn = MonzoTransaction.from_dict(sample_monzo_transaction)

        assert txn.merchant is None
        assert txn.user_notes == ""
        assert txn.settled_at is None
        assert txn.metadata == {}

    def test_null_text_fields(self, sample_monzo_transaction):
        """Test JSON nulls in text fields become empty strings."""
        sample_monzo_transaction.update(description=None, category=None, currency=None, merchant={"id": "m", "name": None})
        txn = MonzoTransaction.from_dict(sample_monzo_transaction)

        assert txn.description == ""
        assert txn.category == ""
        assert txn.amount.currency == ""
        assert txn.merchant.name == ""

    def test_missing_created(self, sample_monzo_transaction):
        """Test transactions must carry a creation time."""
        del sample_monzo_transaction["created"]
        with pytest.raises(ValueError, match="no created timestamp"):
            MonzoTransaction.from_dict(sample_monzo_transaction)

    def test_active_card_check(self, sample_monzo_transaction):
        """Test the zero-value card check is recognised."""
        sample_monzo_transaction.update(amount=0, metadata={"notes": "Active card check"})
        assert MonzoTransaction.from_dict(sample_monzo_transaction).is_active_card_check

        sample_monzo_transaction.update(amount=-1)
        assert not MonzoTransaction.from_dict(sample_monzo_transaction).is_active_card_check


@pytest.mark.monzo
class TestMonzoSupportingModels:
    """Test accounts, pots and counterparties."""

    def test_account(self):
        """Test accounts parse owners and creation time."""
        account = MonzoAccount.from_dict(
            {
                "id": "acc_1",
                "description": "user_000",
                "created": "2019-05-01T12:00:00.000Z",
                "type": "uk_retail",
                "currency": "GBP",
                "owners": [{"user_id": "user_1", "preferred_name": "Sam"}],
            }
        )

        assert account.id == "acc_1"
        assert account.type == "uk_retail"
        assert account.created_at == datetime(2019, 5, 1, 12, tzinfo=timezone.utc)
        assert account.owners[0].preferred_name == "Sam"

    def test_pot(self):
        """Test pots parse their name."""
        pot = MonzoPot.from_dict({"id": "pot_1", "name": "Holiday", "deleted": False})
        assert (pot.id, pot.name) == ("pot_1", "Holiday")

    def test_empty_counterparty_is_none(self):
        """Test an all-empty counterparty object means no counterparty."""
        assert MonzoCounterParty.from_value({}) is None
        assert MonzoCounterParty.from_value({"name": "", "user_id": ""}) is None
        assert MonzoCounterParty.from_value({"name": "Alex"}).name == "Alex"


@pytest.mark.monzo
class TestDecodeError:
    """Test decoding Monzo error bodies."""

    def test_monzo_error(self):
        """Test code and message are exposed with the status."""
        body = json.dumps({"code": "forbidden.verification_required", "message": "Verification required"})
        error = decode_error(403, body.encode())

        assert isinstance(error, MonzoAPIError)
        assert error.status_code == 403
        assert error.code == "forbidden.verification_required"
        assert str(error) == "Verification required (http status=403)"

    def test_empty_body(self):
        """Test an empty body becomes an unknown error."""
        error = decode_error(500, b"")
        assert error.code == "unknown"
        assert str(error) == "unknown (http status=500)"

    @pytest.mark.parametrize("body", [b"<html>bad gateway</html>", b'{"message": "no code"}', b"[]"])
    def test_not_a_monzo_error(self, body):
        """Test non-Monzo bodies fall back to the generic error."""
        assert decode_error(502, body) is None
