"""
Monzo Package

Monzo API client, response models and the "Monzo" exporter. Importing this
package registers the exporter with the global exporter registry.
"""

from .client import FetchTransactionOptions, MonzoClient
from .exporter import MONZO, MonzoExporter, determine_reference
from .models import (
    MonzoAccount,
    MonzoAPIError,
    MonzoCounterParty,
    MonzoMerchant,
    MonzoOwner,
    MonzoPot,
    MonzoTransaction,
)

__all__ = [
    "MONZO",
    "FetchTransactionOptions",
    "MonzoAPIError",
    "MonzoAccount",
    "MonzoClient",
    "MonzoCounterParty",
    "MonzoExporter",
    "MonzoMerchant",
    "MonzoOwner",
    "MonzoPot",
    "MonzoTransaction",
    "determine_reference",
]
