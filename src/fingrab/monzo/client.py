#!/usr/bin/env python3
"""
Monzo API Client

Typed wrapper over the REST substrate for the Monzo endpoints fingrab uses.
Every response is a single-key JSON envelope that is unwrapped here.

API reference: https://docs.monzo.com/
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime

import httpx

from ..core.dates import format_rfc3339
from ..core.errors import InvalidOptionsError
from ..core.http import BaseClient, RetryPolicy
from .models import MonzoAccount, MonzoPot, MonzoTransaction, decode_error

logger = logging.getLogger(__name__)

PROD_API = "https://api.monzo.com"
ACCOUNTS_ROUTE = "/accounts"
POTS_ROUTE = "/pots"
TRANSACTIONS_ROUTE = "/transactions"
MAX_RESULTS_PER_PAGE = 100


@dataclass
class FetchTransactionOptions:
    """
    Options for one page of ``GET /transactions``.

    Attributes:
        account_id: Account to list (required)
        start: Inclusive lower bound, used when no cursor is given
        end: Exclusive upper bound sent as ``before``; None for no bound
        since_id: Transaction id cursor; takes precedence over ``start``
        limit: Page size; 0 means the API maximum of 100
    """

    account_id: str
    start: datetime | None = None
    end: datetime | None = None
    since_id: str = ""
    limit: int = 0

    def validate(self) -> None:
        """
        Raises:
            InvalidOptionsError: If the account is missing, the limit is
                negative, or start is not before end
        """
        if not self.account_id:
            raise InvalidOptionsError("account ID is required")
        if self.limit < 0:
            raise InvalidOptionsError("limit must be non-negative")
        if self.start is not None and self.end is not None and self.start >= self.end:
            raise InvalidOptionsError("start time must be before end time", kind="invalid-time-range")


class MonzoClient(BaseClient):
    """Monzo API client."""

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

    def fetch_accounts(self) -> list[MonzoAccount]:
        """List every account owned by the token's user."""
        return self.execute(
            "GET",
            ACCOUNTS_ROUTE,
            result=lambda payload: [MonzoAccount.from_dict(a) for a in payload.get("accounts") or []],
        )

    def fetch_pots(self, account_id: str) -> list[MonzoPot]:
        """List the pots attached to a current account."""
        return self.execute(
            "GET",
            POTS_ROUTE,
            query={"current_account_id": account_id},
            result=lambda payload: [MonzoPot.from_dict(p) for p in payload.get("pots") or []],
        )

    def fetch_transaction(self, transaction_id: str) -> MonzoTransaction:
        """Fetch a single transaction by id."""
        return self.execute(
            "GET",
            f"{TRANSACTIONS_ROUTE}/{transaction_id}",
            result=lambda payload: MonzoTransaction.from_dict(payload["transaction"]),
        )

    def fetch_transactions_since(self, opts: FetchTransactionOptions) -> list[MonzoTransaction]:
        """
        Fetch one page of transactions.

        Merchants are always expanded. The cursor (``since_id``) wins over
        the start time when both are given.

        Raises:
            InvalidOptionsError: If the options fail validation
        """
        try:
            opts.validate()
        except InvalidOptionsError as e:
            raise e.add_context("invalid options")

        query: list[tuple[str, str]] = [
            ("account_id", opts.account_id),
            ("expand[]", "merchant"),
            ("limit", str(opts.limit or MAX_RESULTS_PER_PAGE)),
        ]
        if opts.end is not None:
            query.append(("before", format_rfc3339(opts.end)))
        if opts.since_id:
            query.append(("since", opts.since_id))
        elif opts.start is not None:
            query.append(("since", format_rfc3339(opts.start)))

        return self.execute(
            "GET",
            TRANSACTIONS_ROUTE,
            query=query,
            result=lambda payload: [MonzoTransaction.from_dict(t) for t in payload.get("transactions") or []],
        )
