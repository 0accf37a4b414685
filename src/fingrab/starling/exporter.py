#!/usr/bin/env python3
"""
Starling Exporter

Exports Starling feed items and accounts into the core models.

Round-ups are not in the spending category's feed: each card payment with a
round-up points at the savings goal that received it, and the matching
transfer lives in that goal's feed. The exporter fetches each goal's feed
once and appends the transfers as outgoing payments.
"""

import logging
import uuid
from datetime import datetime, timedelta

from ..core.errors import FingrabError, InvalidOptionsError, NoAccountsError, ParseAccountIDError
from ..core.models import Account, Transaction
from ..core.money import Money
from ..export.options import ExportOptions
from ..export.registry import Exporter, register
from .client import FetchTransactionOptions, StarlingClient
from .models import NIL_UUID, Direction, FeedItem, FeedItemStatus, StarlingAccount, parse_uuid

logger = logging.getLogger(__name__)

STARLING = "Starling"


def determine_reference(item: FeedItem) -> str:
    """
    Pick the reference shown for a feed item.

    First match wins:
    - transfer from a savings space -> "Savings Pot"
    - interest paid by Starling -> "Interest Capitalisation"
    - merchant payment -> merchant name
    - payment from a person -> "<reference> (<sender>)"
    - otherwise the trimmed reference
    """
    if (
        item.category_name == "TRANSFERS"
        and item.counter_party_type == "CATEGORY"
        and item.source == "INTERNAL_TRANSFER"
        and item.source_sub_type == ""
    ):
        return "Savings Pot"

    if (
        item.category_name == "INCOME"
        and item.counter_party_type == "STARLING"
        and item.source == "INTEREST_PAYMENT"
        and item.source_sub_type == "DEPOSIT"
    ):
        return "Interest Capitalisation"

    if item.counter_party_name and item.counter_party_type == "MERCHANT":
        return item.counter_party_name

    if item.counter_party_name and item.counter_party_type == "SENDER":
        return f"{item.description} ({item.counter_party_name})"

    return item.description.strip()


def to_domain(item: FeedItem) -> Transaction:
    """Convert a feed item into a core Transaction with a signed amount."""
    is_deposit = item.direction == Direction.IN.value
    sign = 1 if is_deposit else -1

    return Transaction(
        amount=Money(minor_units=item.amount.minor_units * sign, currency=item.amount.currency),
        reference=determine_reference(item),
        category=item.category_name,
        created_at=item.transacted_at,
        is_deposit=is_deposit,
        bank_name=STARLING,
        notes=item.user_note,
    )


class StarlingExporter(Exporter):
    """Exporter for Starling personal and joint accounts."""

    def __init__(self, client: StarlingClient):
        if client is None:
            raise ValueError("starling client is required")
        self.client = client

    @classmethod
    def from_options(cls, opts: ExportOptions) -> "StarlingExporter":
        """Build the exporter and its API client from export options."""
        client = StarlingClient(
            opts.new_http_client(),
            auth_token=opts.bearer_auth_token(),
            base_url=opts.base_url,
            retry_policy=opts.retry_policy,
            cancel_event=opts.cancel_event,
        )
        return cls(client)

    def type(self) -> str:
        return STARLING

    def max_date_range(self) -> timedelta:
        # The feed endpoint accepts any range.
        return timedelta(0)

    def export_transactions(self, opts: ExportOptions) -> list[Transaction]:
        """Export the default category's feed plus its round-ups, minus declined items."""
        if opts.start_date is None or opts.end_date is None:
            raise InvalidOptionsError("start and end dates are required")

        try:
            account_id = parse_uuid(opts.account_id)
        except ValueError as e:
            raise ParseAccountIDError(f"parse account id: {e}") from e

        logger.info(f"Starting Starling export from {opts.start_date:%Y-%m-%d} to {opts.end_date:%Y-%m-%d}")

        account = self._fetch_account(account_id)
        items = self._fetch_feed(account, opts.start_date, opts.end_date)

        logger.info(f"Exported {len(items)} Starling transactions")
        return [to_domain(item) for item in items]

    def export_accounts(self, opts: ExportOptions) -> list[Account]:
        try:
            accounts = self.client.fetch_accounts()
        except FingrabError as e:
            raise e.add_context("fetch accounts")

        return [
            Account(
                id=str(account.id),
                type=account.type,
                created_at=account.created_at,
                name=account.name,
                currency=account.currency,
            )
            for account in accounts
        ]

    def _fetch_account(self, account_id: uuid.UUID) -> StarlingAccount:
        try:
            accounts = self.client.fetch_accounts()
        except FingrabError as e:
            raise e.add_context("fetch accounts")

        if not accounts:
            raise NoAccountsError("no accounts found, exiting")

        selected = accounts[0]
        if account_id != NIL_UUID:
            selected = next((a for a in accounts if a.id == account_id), selected)

        logger.info(f"Found {len(accounts)} Starling accounts")
        logger.info(f"Selected account {selected.id} (category {selected.default_category_id})")
        return selected

    def _fetch_feed(
        self, account: StarlingAccount, start: datetime | None, end: datetime | None
    ) -> list[FeedItem]:
        try:
            items = self.client.fetch_transactions_since(
                FetchTransactionOptions(
                    account_id=account.id,
                    category_id=account.default_category_id,
                    start=start,
                    end=end,
                )
            )
        except FingrabError as e:
            raise e.add_context("fetch transactions")

        items = items + self._fetch_round_ups(account.id, start, end, items)
        kept = [item for item in items if item.status != FeedItemStatus.DECLINED.value]

        logger.info(f"Fetched {len(kept)} feed items for account {account.id}")
        return kept

    def _fetch_round_ups(
        self, account_id: uuid.UUID, start: datetime | None, end: datetime | None, items: list[FeedItem]
    ) -> list[FeedItem]:
        """Collect the savings-goal side of every round-up, one request per goal."""
        seen_goals: set[uuid.UUID] = set()
        round_ups: list[FeedItem] = []

        for item in items:
            if item.round_up is None or item.round_up.goal_category_id in seen_goals:
                continue

            goal_id = item.round_up.goal_category_id
            logger.debug(f"Fetching round-ups from goal category {goal_id}")
            try:
                goal_items = self.client.fetch_transactions_since(
                    FetchTransactionOptions(account_id=account_id, category_id=goal_id, start=start, end=end)
                )
            except FingrabError as e:
                raise e.add_context("fetch roundup transactions")
            seen_goals.add(goal_id)

            for goal_item in goal_items:
                if goal_item.counter_party_id != item.category_id:
                    continue
                # Money leaves the spending category for the goal.
                goal_item.direction = Direction.OUT.value
                round_ups.append(goal_item)

        logger.debug(f"Found {len(round_ups)} round-ups across {len(seen_goals)} goals")
        return round_ups


register(STARLING, StarlingExporter.from_options)
