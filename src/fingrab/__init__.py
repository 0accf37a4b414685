"""
fingrab - Bank Transaction Exporter

Exports personal banking transactions from retail-bank APIs into CSV files
that personal-finance software can import.

Key Features:
- Monzo and Starling exporters with per-bank pagination and enrichment rules
- MoneyDance and YNAB CSV output
- Retrying HTTP client with typed provider errors
- OAuth login through the browser when no token is configured

Domain Packages:
- core: Money, currency table, models, errors, config, HTTP client
- export: Export options, exporter registry and pipeline
- monzo / starling: Provider API clients and exporters
- formatters: Output formats
- auth: Token resolution and the OAuth flow
- cli: Command-line interface

Example Usage:
    from fingrab import monzo  # registers the "Monzo" exporter
    from fingrab.export import ExportOptions, transactions
    from fingrab.formatters import new_formatter, write_collection
"""

__version__ = "0.1.0"
__author__ = "HallyG"

from .core.config import Environment, get_config
from .core.models import Account, Transaction
from .core.money import Money

__all__ = [
    "Account",
    "Environment",
    "Money",
    "Transaction",
    "get_config",
]
