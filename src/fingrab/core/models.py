#!/usr/bin/env python3
"""
Core Data Models for fingrab

Bank-agnostic structures produced by the exporters and consumed by the
formatters. Provider-specific shapes live in the provider packages and are
converted into these models before leaving an exporter.
"""

from dataclasses import dataclass
from datetime import datetime

from .money import Money


@dataclass(frozen=True)
class Transaction:
    """
    Universal transaction model exported from any bank.

    Created once per export and never modified afterwards.
    """

    amount: Money
    reference: str
    category: str
    created_at: datetime  # aware, UTC
    is_deposit: bool = False  # True for money coming in
    bank_name: str = ""
    notes: str = ""


@dataclass(frozen=True)
class Account:
    """A bank account as reported by a provider."""

    id: str
    type: str
    created_at: datetime | None = None
    name: str = ""
    currency: str = ""
