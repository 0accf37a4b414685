"""
Core Utilities Package

Shared building blocks used by every bank and output format.

This package provides:
- Currency handling with integer arithmetic for precision
- Bank-agnostic transaction and account models
- The error hierarchy raised throughout fingrab
- Configuration management and logging setup
- The retrying REST client substrate
"""

from .config import Config, Environment, get_config, reload_config
from .currency import fraction_digits, is_known_currency, minor_units_to_str
from .errors import (
    APIError,
    ConstructorError,
    DateRangeTooLongError,
    ExportCancelledError,
    FingrabError,
    FormatterError,
    InvalidOptionsError,
    NoAccountsError,
    OAuthError,
    PaginationLimitError,
    ParseAccountIDError,
    TransportError,
    UnsupportedTypeError,
)
from .http import BaseClient, RetryPolicy
from .models import Account, Transaction
from .money import Money

__all__ = [
    "APIError",
    "Account",
    "BaseClient",
    # Configuration
    "Config",
    "ConstructorError",
    "DateRangeTooLongError",
    "Environment",
    "ExportCancelledError",
    # Errors
    "FingrabError",
    "FormatterError",
    "InvalidOptionsError",
    "Money",
    "NoAccountsError",
    "OAuthError",
    "PaginationLimitError",
    "ParseAccountIDError",
    "RetryPolicy",
    # Data models
    "Transaction",
    "TransportError",
    "UnsupportedTypeError",
    # Currency utilities
    "fraction_digits",
    "get_config",
    "is_known_currency",
    "minor_units_to_str",
    "reload_config",
]
