"""
Formatters Package

Output formats for exported transactions. Importing this package registers
the "moneydance" and "ynab" formatters with the global formatter registry.
"""

from .csv_formatter import CSVFormatter
from .moneydance import MONEYDANCE, MoneyDanceFormatter
from .registry import (
    Formatter,
    FormatterConstructor,
    FormatterRegistry,
    all_types,
    formatter_registry,
    new_formatter,
    register,
    write_collection,
)
from .ynab import YNAB, YNABFormatter

__all__ = [
    "MONEYDANCE",
    "YNAB",
    "CSVFormatter",
    "Formatter",
    "FormatterConstructor",
    "FormatterRegistry",
    "MoneyDanceFormatter",
    "YNABFormatter",
    "all_types",
    "formatter_registry",
    "new_formatter",
    "register",
    "write_collection",
]
