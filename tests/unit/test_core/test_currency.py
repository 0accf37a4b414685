#!/usr/bin/env python3
"""Tests for the ISO-4217 currency table and minor-unit formatting."""

import pytest

from fingrab.core.currency import fraction_digits, is_known_currency, minor_units_to_str


class TestFractionDigits:
    """Test currency precision lookups."""

    @pytest.mark.currency
    @pytest.mark.parametrize(
        "currency,expected",
        [("GBP", 2), ("EUR", 2), ("USD", 2), ("JPY", 0), ("KRW", 0), ("KWD", 3), ("BHD", 3), ("CLF", 4)],
    )
    def test_known_currencies(self, currency, expected):
        """Test the table covers common and non-decimal currencies."""
        assert fraction_digits(currency) == expected
        assert is_known_currency(currency)

    @pytest.mark.currency
    def test_unknown_currency(self):
        """Test unknown codes are not guessed."""
        assert fraction_digits("ABC") is None
        assert not is_known_currency("")

    @pytest.mark.currency
    def test_codes_are_case_sensitive(self):
        """Test lower-case codes are not accepted."""
        assert fraction_digits("gbp") is None


class TestMinorUnitsToStr:
    """Test integer-only amount rendering."""

    @pytest.mark.currency
    @pytest.mark.parametrize(
        "minor_units,fraction,expected",
        [
            (-280, 2, "-2.80"),
            (10050, 0, "10050"),
            (5, 3, "0.005"),
            (-1, 2, "-0.01"),
            (100, 2, "1.00"),
            (0, 2, "0.00"),
            (12345, 4, "1.2345"),
        ],
    )
    def test_rendering(self, minor_units, fraction, expected):
        """Test sign, padding and precision."""
        assert minor_units_to_str(minor_units, fraction) == expected
