#!/usr/bin/env python3
"""
Money Primitive Type

Immutable currency value wrapper that stores the amount in minor units
together with its ISO-4217 code. Prevents floating-point errors when
rendering amounts exported by the banks.
"""

from dataclasses import dataclass
from typing import Any

from .currency import fraction_digits, minor_units_to_str


@dataclass(frozen=True)
class Money:
    """
    Immutable money value in the currency's smallest unit.

    Outgoing amounts are negative and incoming amounts positive, as reported
    by the providers. No arithmetic is defined; exporters only carry and
    render amounts.

    Examples:
        >>> str(Money(minor_units=10050, currency="GBP"))
        '100.50'

        >>> str(Money(minor_units=10050, currency="JPY"))
        '10050'

        >>> str(Money(minor_units=10050, currency="INVALID"))
        'invalid currency: 10050 (INVALID)'
    """

    minor_units: int
    currency: str

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "Money":
        """
        Create Money from a ``{"minorUnits": ..., "currency": ...}`` object.

        Args:
            data: Dictionary as returned by the Starling API, or None

        Returns:
            Money object (zero with an empty currency when data is missing)
        """
        if not data:
            return cls(minor_units=0, currency="")
        return cls(minor_units=int(data.get("minorUnits") or 0), currency=data.get("currency") or "")

    @property
    def is_valid_currency(self) -> bool:
        """True if the currency code is a known ISO-4217 code."""
        return fraction_digits(self.currency) is not None

    def to_major_units(self) -> float:
        """
        Convert to major units (pence to pounds, cents to dollars).

        For an unknown currency the raw minor-unit value is returned
        unchanged, since there is no fraction to divide by.

        Returns:
            Amount in major units
        """
        fraction = fraction_digits(self.currency)
        if fraction is None:
            return float(self.minor_units)
        return self.minor_units / 10**fraction

    def __str__(self) -> str:
        """Format in major units with the currency's precision."""
        fraction = fraction_digits(self.currency)
        if fraction is None:
            return f"invalid currency: {self.minor_units} ({self.currency})"
        return minor_units_to_str(self.minor_units, fraction)

    def __repr__(self) -> str:
        """Repr format."""
        return f"Money(minor_units={self.minor_units}, currency={self.currency!r})"
