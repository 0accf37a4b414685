#!/usr/bin/env python3
"""
MoneyDance CSV Formatter

Columns: check number, date, description, category, amount, memo. Deposits
are marked "Dep" and everything else "Trn" in the check number column.
"""

from ..core.models import Transaction
from .csv_formatter import CSVFormatter
from .registry import register

MONEYDANCE = "moneydance"
DATE_FORMAT = "%Y-%m-%d"
HEADER = ["check number", "date", "description", "category", "amount", "memo"]


class MoneyDanceFormatter(CSVFormatter):
    """Writes transactions in MoneyDance's CSV import layout."""

    def write_header(self) -> None:
        self.write_row(HEADER)

    def write_transaction(self, transaction: Transaction) -> None:
        check_number = "Dep" if transaction.is_deposit else "Trn"
        self.write_row(
            [
                check_number,
                self.format_date(transaction.created_at, DATE_FORMAT),
                transaction.reference,
                transaction.category,
                str(transaction.amount),
                transaction.notes,
            ]
        )


register(MONEYDANCE, MoneyDanceFormatter)
