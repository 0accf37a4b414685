#!/usr/bin/env python3
"""
Starling API Client

Typed wrapper over the REST substrate for the Starling v2 endpoints fingrab
uses: accounts, savings goals and the per-category transaction feed.

API reference: https://developer.starlingbank.com/docs
"""

import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime

import httpx

from ..core.dates import format_rfc3339
from ..core.errors import InvalidOptionsError
from ..core.http import BaseClient, RetryPolicy
from .models import NIL_UUID, FeedItem, SavingsGoal, StarlingAccount, decode_error

logger = logging.getLogger(__name__)

PROD_API = "https://api.starlingbank.com"
ACCOUNTS_ROUTE = "/api/v2/accounts"
TRANSACTIONS_ROUTE = "/api/v2/feed/account/{account_id}/category/{category_id}/transactions-between"
FEED_ITEM_ROUTE = "/api/v2/feed/account/{account_id}/category/{category_id}/{feed_item_id}"
SAVINGS_GOALS_ROUTE = "/api/v2/account/{account_id}/savings-goals"


@dataclass
class FetchTransactionOptions:
    """Options for ``transactions-between`` on one account category."""

    account_id: uuid.UUID
    category_id: uuid.UUID
    start: datetime | None = None
    end: datetime | None = None

    def validate(self) -> None:
        if self.account_id == NIL_UUID:
            raise InvalidOptionsError("account ID is required")
        if self.category_id == NIL_UUID:
            raise InvalidOptionsError("category ID is required")
        if self.end is None:
            raise InvalidOptionsError("end time is required")
        if self.start is not None and self.start >= self.end:
            raise InvalidOptionsError("start time must be before end time", kind="invalid-time-range")


class StarlingClient(BaseClient):
    """Starling API client."""

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        *,
        auth_token: str | None = None,
        base_url: str | None = None,
        retry_policy: RetryPolicy | None = None,
        cancel_event: threading.Event | None = None,
    ):
        super().__init__(
            base_url or PROD_API,
            http_client,
            auth_token=auth_token,
            error_decoder=decode_error,
            retry_policy=retry_policy,
            cancel_event=cancel_event,
        )

    def fetch_accounts(self) -> list[StarlingAccount]:
        """List every account the token can see."""
        return self.execute(
            "GET",
            ACCOUNTS_ROUTE,
            result=lambda payload: [StarlingAccount.from_dict(a) for a in payload.get("accounts") or []],
        )

    def fetch_savings_goals(self, account_id: uuid.UUID) -> list[SavingsGoal]:
        """List the savings goals on an account."""
        return self.execute(
            "GET",
            SAVINGS_GOALS_ROUTE.format(account_id=account_id),
            result=lambda payload: [SavingsGoal.from_dict(g) for g in payload.get("savingsGoalList") or []],
        )

    def fetch_feed_item(self, account_id: uuid.UUID, category_id: uuid.UUID, feed_item_id: uuid.UUID) -> FeedItem:
        """Fetch a single feed item."""
        return self.execute(
            "GET",
            FEED_ITEM_ROUTE.format(account_id=account_id, category_id=category_id, feed_item_id=feed_item_id),
            result=FeedItem.from_dict,
        )

    def fetch_transactions_since(self, opts: FetchTransactionOptions) -> list[FeedItem]:
        """
        Fetch every feed item in a category between two instants.

        Raises:
            InvalidOptionsError: If the options fail validation
        """
        try:
            opts.validate()
        except InvalidOptionsError as e:
            raise e.add_context("invalid options")

        if opts.end is None:
            raise InvalidOptionsError("invalid options: end time is required")
        query: list[tuple[str, str]] = []
        if opts.start is not None:
            query.append(("minTransactionTimestamp", format_rfc3339(opts.start)))
        query.append(("maxTransactionTimestamp", format_rfc3339(opts.end)))

        return self.execute(
            "GET",
            TRANSACTIONS_ROUTE.format(account_id=opts.account_id, category_id=opts.category_id),
            query=query,
            result=lambda payload: [FeedItem.from_dict(item) for item in payload.get("feedItems") or []],
        )
