#!/usr/bin/env python3
"""
YNAB CSV Formatter

Columns: Date (MM/DD/YYYY), Payee, Memo, Amount. This is the layout YNAB's
file-based import accepts.
"""

from ..core.models import Transaction
from .csv_formatter import CSVFormatter
from .registry import register

YNAB = "ynab"
DATE_FORMAT = "%m/%d/%Y"
HEADER = ["Date", "Payee", "Memo", "Amount"]


class YNABFormatter(CSVFormatter):
    """Writes transactions in YNAB's CSV import layout."""

    def write_header(self) -> None:
        self.write_row(HEADER)

    def write_transaction(self, transaction: Transaction) -> None:
        self.write_row(
            [
                self.format_date(transaction.created_at, DATE_FORMAT),
                transaction.reference,
                transaction.notes,
                str(transaction.amount),
            ]
        )


register(YNAB, YNABFormatter)
