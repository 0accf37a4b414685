#!/usr/bin/env python3
"""
Monzo Domain Models

Type-safe models representing Monzo API data structures. These mirror the
API's JSON and are only used inside the Monzo package; the exporter converts
them into the bank-agnostic core models.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..core.dates import parse_rfc3339
from ..core.errors import APIError
from ..core.money import Money


@dataclass
class MonzoOwner:
    """Owner of a Monzo account."""

    user_id: str
    preferred_name: str = ""
    preferred_first_name: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MonzoOwner":
        return cls(
            user_id=data.get("user_id") or "",
            preferred_name=data.get("preferred_name") or "",
            preferred_first_name=data.get("preferred_first_name") or "",
        )


@dataclass
class MonzoAccount:
    """
    Monzo account from API.

    ``type`` is e.g. "uk_retail" or "uk_retail_joint".
    """

    id: str
    description: str
    created_at: datetime | None
    closed: bool = False
    currency: str = ""
    type: str = ""
    owner_type: str = ""
    country_code: str = ""
    account_number: str = ""
    sort_code: str = ""
    owners: list[MonzoOwner] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MonzoAccount":
        """
        Create MonzoAccount from API dict.

        Args:
            data: One element of the ``accounts`` envelope

        Returns:
            MonzoAccount instance
        """
        return cls(
            id=data["id"],
            description=data.get("description") or "",
            created_at=parse_rfc3339(data.get("created")),
            closed=data.get("closed") or False,
            currency=data.get("currency") or "",
            type=data.get("type") or "",
            owner_type=data.get("owner_type") or "",
            country_code=data.get("country_code") or "",
            account_number=data.get("account_number") or "",
            sort_code=data.get("sort_code") or "",
            owners=[MonzoOwner.from_dict(owner) for owner in data.get("owners") or []],
        )


@dataclass
class MonzoPot:
    """A named sub-balance on a Monzo account."""

    id: str
    name: str
    deleted: bool = False
    currency: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MonzoPot":
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            deleted=data.get("deleted") or False,
            currency=data.get("currency") or "",
        )


@dataclass
class MonzoMerchant:
    """Merchant attached to a transaction (expanded with ``expand[]=merchant``)."""

    id: str
    name: str = ""
    category: str = ""
    online: bool = False
    atm: bool = False

    @classmethod
    def from_value(cls, value: Any) -> "MonzoMerchant | None":
        """
        Create MonzoMerchant from the ``merchant`` field.

        The field is an object when expanded, a bare merchant id otherwise,
        or null for transactions without a merchant.
        """
        if not value:
            return None
        if isinstance(value, str):
            return cls(id=value)
        return cls(
            id=value.get("id") or "",
            name=value.get("name") or "",
            category=value.get("category") or "",
            online=value.get("online") or False,
            atm=value.get("atm") or False,
        )


@dataclass
class MonzoCounterParty:
    """Other side of a bank transfer or shared payment."""

    account_number: str = ""
    name: str = ""
    sort_code: str = ""
    user_id: str = ""

    @classmethod
    def from_value(cls, value: dict[str, Any] | None) -> "MonzoCounterParty | None":
        """Create from the ``counterparty`` object; an all-empty object means none."""
        if not value:
            return None
        counter_party = cls(
            account_number=value.get("account_number") or "",
            name=value.get("name") or "",
            sort_code=value.get("sort_code") or "",
            user_id=value.get("user_id") or "",
        )
        if counter_party == cls():
            return None
        return counter_party


@dataclass
class MonzoTransaction:
    """
    Monzo transaction from API.

    Amounts arrive as separate minor-unit and currency fields and are lifted
    into Money values; ``amount`` is in the account currency and
    ``local_amount`` in the currency the payment was made in.
    """

    id: str
    description: str
    created_at: datetime
    amount: Money
    local_amount: Money
    category: str = ""
    user_notes: str = ""
    settled_at: datetime | None = None
    updated_at: datetime | None = None
    account_id: str = ""
    amount_is_pending: bool = False
    scheme: str = ""
    merchant: MonzoMerchant | None = None
    counter_party: MonzoCounterParty | None = None
    decline_reason: str = ""
    metadata: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MonzoTransaction":
        """
        Create MonzoTransaction from API dict.

        Args:
            data: One element of the ``transactions`` envelope

        Returns:
            MonzoTransaction instance

        Raises:
            ValueError: If a timestamp is not valid RFC-3339
        """
        created_at = parse_rfc3339(data.get("created"))
        if created_at is None:
            raise ValueError(f"transaction {data.get('id')!r} has no created timestamp")

        return cls(
            id=data["id"],
            description=data.get("description") or "",
            created_at=created_at,
            amount=Money(minor_units=int(data.get("amount") or 0), currency=data.get("currency") or ""),
            local_amount=Money(
                minor_units=int(data.get("local_amount") or 0), currency=data.get("local_currency") or ""
            ),
            category=data.get("category") or "",
            user_notes=data.get("notes") or "",
            settled_at=parse_rfc3339(data.get("settled")),
            updated_at=parse_rfc3339(data.get("updated")),
            account_id=data.get("account_id") or "",
            amount_is_pending=data.get("amount_is_pending") or False,
            scheme=data.get("scheme") or "",
            merchant=MonzoMerchant.from_value(data.get("merchant")),
            counter_party=MonzoCounterParty.from_value(data.get("counterparty")),
            decline_reason=data.get("decline_reason") or "",
            metadata={str(k): str(v) for k, v in (data.get("metadata") or {}).items()},
        )

    @property
    def is_active_card_check(self) -> bool:
        """Zero-value authorisation Monzo makes when a card is added somewhere."""
        return self.amount.minor_units == 0 and self.metadata.get("notes") == "Active card check"


class MonzoAPIError(APIError):
    """
    Error response from the Monzo API.

    Examples of what Monzo returns:
        400 bad_request.invalid_time_range: the requested range is too large
        403 forbidden.verification_required: requesting transactions older
            than 90 days without re-authenticating in the app
    """

    def __init__(self, status_code: int, code: str, message: str, body: str = ""):
        super().__init__(f"{message} (http status={status_code})", status_code=status_code, body=body)
        self.code = code
        self.api_message = message


def decode_error(status_code: int, body: bytes) -> MonzoAPIError | None:
    """
    Decode a Monzo error body.

    Returns None for bodies that are not a Monzo error object, so the
    generic HTTP error is raised instead.
    """
    if not body:
        return MonzoAPIError(status_code, code="unknown", message="unknown")

    try:
        data = json.loads(body)
    except ValueError:
        return None

    if not isinstance(data, dict) or not data.get("code"):
        return None

    return MonzoAPIError(
        status_code,
        code=data["code"],
        message=data.get("message") or "",
        body=body.decode("utf-8", errors="replace"),
    )
