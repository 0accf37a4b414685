"""
Starling Package

Starling API client, response models and the "Starling" exporter. Importing
this package registers the exporter with the global exporter registry.
"""

from .client import FetchTransactionOptions, StarlingClient
from .exporter import STARLING, StarlingExporter, determine_reference
from .models import (
    NIL_UUID,
    Direction,
    FeedItem,
    FeedItemStatus,
    RoundUp,
    SavingsGoal,
    StarlingAccount,
    StarlingAPIError,
    parse_uuid,
)

__all__ = [
    "NIL_UUID",
    "STARLING",
    "Direction",
    "FeedItem",
    "FeedItemStatus",
    "FetchTransactionOptions",
    "RoundUp",
    "SavingsGoal",
    "StarlingAPIError",
    "StarlingAccount",
    "StarlingClient",
    "StarlingExporter",
    "determine_reference",
    "parse_uuid",
]
