#!/usr/bin/env python3
"""
Starling Domain Models

Type-safe models representing Starling API data structures. Identifiers are
UUIDs; the API sends them as strings which are trimmed before parsing, and a
missing or empty identifier becomes the nil UUID.
"""

import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from ..core.dates import parse_rfc3339
from ..core.errors import APIError
from ..core.money import Money

NIL_UUID = uuid.UUID(int=0)


def parse_uuid(value: str | None) -> uuid.UUID:
    """
    Parse a UUID string from the API.

    Raises:
        ValueError: If the trimmed value is not a valid UUID
    """
    if value is None or not value.strip():
        return NIL_UUID
    return uuid.UUID(value.strip())


class Direction(str, Enum):
    """Direction of money movement relative to the account."""

    IN = "IN"
    OUT = "OUT"


class FeedItemStatus(str, Enum):
    """Lifecycle status of a feed item."""

    UPCOMING = "UPCOMING"
    UPCOMING_CANCELLED = "UPCOMING_CANCELLED"
    PENDING = "PENDING"
    REVERSED = "REVERSED"
    SETTLED = "SETTLED"
    DECLINED = "DECLINED"
    REFUNDED = "REFUNDED"
    RETRYING = "RETRYING"
    ACCOUNT_CHECK = "ACCOUNT_CHECK"


@dataclass
class StarlingAccount:
    """
    Starling account from API.

    Every account has a default spending category whose feed holds the
    account's everyday transactions.
    """

    id: uuid.UUID
    type: str
    default_category_id: uuid.UUID
    currency: str = ""
    created_at: datetime | None = None
    name: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StarlingAccount":
        """
        Create StarlingAccount from API dict.

        Args:
            data: One element of the ``accounts`` envelope

        Returns:
            StarlingAccount instance
        """
        return cls(
            id=parse_uuid(data.get("accountUid")),
            type=data.get("accountType") or "",
            default_category_id=parse_uuid(data.get("defaultCategory")),
            currency=data.get("currency") or "",
            created_at=parse_rfc3339(data.get("createdAt")),
            name=data.get("name") or "",
        )


@dataclass
class SavingsGoal:
    """A savings goal ("space"); its id doubles as a feed category id."""

    id: uuid.UUID
    name: str
    state: str = ""
    target: Money = field(default_factory=lambda: Money(0, ""))
    total_saved: Money = field(default_factory=lambda: Money(0, ""))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SavingsGoal":
        return cls(
            id=parse_uuid(data.get("savingsGoalUid")),
            name=data.get("name") or "",
            state=data.get("state") or "",
            target=Money.from_dict(data.get("target")),
            total_saved=Money.from_dict(data.get("totalSaved")),
        )


@dataclass
class RoundUp:
    """Round-up moved to a savings goal as part of a card payment."""

    goal_category_id: uuid.UUID
    amount: Money

    @classmethod
    def from_value(cls, value: dict[str, Any] | None) -> "RoundUp | None":
        if not value:
            return None
        return cls(
            goal_category_id=parse_uuid(value.get("goalCategoryUid")),
            amount=Money.from_dict(value.get("amount")),
        )


@dataclass
class FeedItem:
    """
    Starling feed item from API.

    ``amount`` is unsigned and in the account's currency; ``direction``
    says which way the money moved.
    """

    id: uuid.UUID
    amount: Money
    transacted_at: datetime
    category_id: uuid.UUID
    direction: str
    status: str = ""
    settled_at: datetime | None = None
    category_name: str = ""  # spendingCategory, e.g. "GROCERIES"
    description: str = ""  # reference
    user_note: str = ""
    source: str = ""  # e.g. "MASTER_CARD", "INTERNAL_TRANSFER"
    source_sub_type: str = ""  # e.g. "ONLINE", "ATM", "DEPOSIT"
    counter_party_type: str = ""  # e.g. "MERCHANT", "STARLING", "SENDER"
    counter_party_id: uuid.UUID = NIL_UUID
    counter_party_sub_entity_id: str = ""
    counter_party_name: str = ""
    round_up: RoundUp | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FeedItem":
        """
        Create FeedItem from API dict.

        Args:
            data: One element of the ``feedItems`` envelope

        Returns:
            FeedItem instance

        Raises:
            ValueError: If an identifier or timestamp is malformed
        """
        transacted_at = parse_rfc3339(data.get("transactionTime"))
        if transacted_at is None:
            raise ValueError(f"feed item {data.get('feedItemUid')!r} has no transaction time")

        return cls(
            id=parse_uuid(data.get("feedItemUid")),
            amount=Money.from_dict(data.get("amount")),
            transacted_at=transacted_at,
            settled_at=parse_rfc3339(data.get("settlementTime")),
            category_id=parse_uuid(data.get("categoryUid")),
            category_name=data.get("spendingCategory") or "",
            description=data.get("reference") or "",
            status=data.get("status") or "",
            user_note=data.get("userNote") or "",
            direction=data.get("direction") or "",
            source=data.get("source") or "",
            source_sub_type=data.get("sourceSubType") or "",
            counter_party_type=data.get("counterPartyType") or "",
            counter_party_id=parse_uuid(data.get("counterPartyUid")),
            counter_party_sub_entity_id=data.get("counterPartySubEntityUid") or "",
            counter_party_name=data.get("counterPartyName") or "",
            round_up=RoundUp.from_value(data.get("roundUp")),
        )


class StarlingAPIError(APIError):
    """
    Error response from the Starling API.

    Starling reports errors either OAuth-style (``error`` plus
    ``error_description``) or as a list of ``errors`` messages.
    """

    def __init__(
        self,
        status_code: int,
        code: str = "",
        message: str = "",
        messages: list[str] | None = None,
        body: str = "",
    ):
        self.code = code
        self.api_message = message
        self.messages = messages or []
        super().__init__(self._render(status_code), status_code=status_code, body=body)

    def _render(self, status_code: int) -> str:
        parts = []
        if self.api_message:
            parts.append(self.api_message)
        if self.messages:
            parts.append(f"[{', '.join(self.messages)}]")
        if status_code:
            parts.append(f"(http status={status_code})")
        return " ".join(parts)


def decode_error(status_code: int, body: bytes) -> StarlingAPIError | None:
    """Decode a Starling error body; None when the body is not JSON."""
    if not body:
        return StarlingAPIError(status_code, code="unknown", message="unknown")

    try:
        data = json.loads(body)
    except ValueError:
        return None

    if not isinstance(data, dict):
        return None

    return StarlingAPIError(
        status_code,
        code=data.get("error") or "",
        message=data.get("error_description") or "",
        messages=[e.get("message") or "" for e in data.get("errors") or [] if isinstance(e, dict)],
        body=body.decode("utf-8", errors="replace"),
    )
