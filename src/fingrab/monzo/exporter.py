#!/usr/bin/env python3
"""
Monzo Exporter

Exports Monzo transactions and accounts into the core models.

Monzo lists transactions a page at a time, either from a start time or from
a transaction-id cursor, but not both reliably. The exporter starts from the
start time, then follows the cursor until a page comes back empty or runs
past the end of the requested range.
"""

import logging
import math
from datetime import datetime, timedelta, timezone

from ..core.errors import (
    ExportCancelledError,
    FingrabError,
    InvalidOptionsError,
    NoAccountsError,
    PaginationLimitError,
)
from ..core.models import Account, Transaction
from ..export.options import ExportOptions
from ..export.registry import Exporter, register
from .client import MAX_RESULTS_PER_PAGE, FetchTransactionOptions, MonzoClient
from .models import MonzoAccount, MonzoTransaction

logger = logging.getLogger(__name__)

MONZO = "Monzo"
MAX_DATE_RANGE = timedelta(days=90)


def max_pages(start: datetime, end: datetime) -> int:
    """Upper bound on non-empty pages for a range: two per day, at least one."""
    days = (end - start).total_seconds() / timedelta(days=1).total_seconds()
    return max(1, math.ceil(days * 2))


def determine_reference(txn: MonzoTransaction) -> tuple[str, str]:
    """
    Pick the reference and notes for a Monzo transaction.

    Split payments carry both a counterparty and a merchant; the person is
    the reference and the merchant goes into the notes.

    Returns:
        (reference, notes), both trimmed
    """
    counter_party_name = txn.counter_party.name if txn.counter_party else ""
    merchant_name = txn.merchant.name if txn.merchant else ""

    reference, notes = txn.description, ""
    if counter_party_name and merchant_name:
        reference, notes = counter_party_name, merchant_name
    elif counter_party_name:
        reference = counter_party_name
    elif merchant_name:
        reference = merchant_name

    return reference.strip(), notes.strip()


def to_domain(txn: MonzoTransaction) -> Transaction:
    """Convert a Monzo transaction into a core Transaction."""
    reference, notes = determine_reference(txn)
    if txn.user_notes:
        notes = txn.user_notes

    return Transaction(
        amount=txn.amount,
        reference=reference,
        category=txn.category,
        created_at=txn.created_at,
        is_deposit=txn.local_amount.minor_units > 0,
        bank_name=MONZO,
        notes=notes,
    )


class MonzoExporter(Exporter):
    """Exporter for Monzo current and joint accounts."""

    def __init__(self, client: MonzoClient):
        if client is None:
            raise ValueError("monzo client is required")
        self.client = client

    @classmethod
    def from_options(cls, opts: ExportOptions) -> "MonzoExporter":
        """Build the exporter and its API client from export options."""
        client = MonzoClient(
            opts.new_http_client(),
            auth_token=opts.bearer_auth_token(),
            base_url=opts.base_url,
            retry_policy=opts.retry_policy,
            cancel_event=opts.cancel_event,
        )
        return cls(client)

    def type(self) -> str:
        return MONZO

    def max_date_range(self) -> timedelta:
        return MAX_DATE_RANGE

    def export_transactions(self, opts: ExportOptions) -> list[Transaction]:
        """
        Export every settled or pending transaction in the range.

        Declined transactions and active card checks are dropped, and
        transfers to pots are labelled with the pot's name.
        """
        if opts.start_date is None:
            raise InvalidOptionsError("start date is required")

        end_text = f"{opts.end_date:%Y-%m-%d}" if opts.end_date else "now"
        logger.info(f"Starting Monzo export from {opts.start_date:%Y-%m-%d} to {end_text}")

        account = self._fetch_account(opts.account_id)
        transactions = self._fetch_transactions(opts, account.id, opts.start_date, opts.end_date)
        self._enrich_pot_descriptions(account.id, transactions)

        logger.info(f"Exported {len(transactions)} Monzo transactions")
        return [to_domain(txn) for txn in transactions]

    def export_accounts(self, opts: ExportOptions) -> list[Account]:
        try:
            accounts = self.client.fetch_accounts()
        except FingrabError as e:
            raise e.add_context("fetch accounts")

        return [
            Account(
                id=account.id,
                type=account.type,
                created_at=account.created_at,
                name=account.description,
                currency=account.currency,
            )
            for account in accounts
        ]

    def _fetch_account(self, account_id: str) -> MonzoAccount:
        try:
            accounts = self.client.fetch_accounts()
        except FingrabError as e:
            raise e.add_context("fetch accounts")

        if not accounts:
            raise NoAccountsError("no accounts found, exiting")

        selected = next((a for a in accounts if account_id and a.id == account_id), accounts[0])

        logger.info(f"Found {len(accounts)} Monzo accounts")
        logger.info(f"Selected account {selected.id}")
        return selected

    def _fetch_transactions(
        self, opts: ExportOptions, account_id: str, start: datetime, end: datetime | None
    ) -> list[MonzoTransaction]:
        # The end date names a whole day, so the range runs up to midnight after it.
        end_exclusive = end + timedelta(days=1) if end is not None else None
        page_limit = max_pages(start, end_exclusive or datetime.now(timezone.utc))

        transactions: list[MonzoTransaction] = []
        since_id = ""
        pages = 0

        logger.debug(f"Fetching transactions for {account_id} (limit {MAX_RESULTS_PER_PAGE}, max {page_limit} pages)")

        while True:
            if opts.is_cancelled():
                raise ExportCancelledError("fetch transactions: cancelled")

            try:
                page = self.client.fetch_transactions_since(
                    FetchTransactionOptions(
                        account_id=account_id,
                        start=start,
                        end=end_exclusive,
                        since_id=since_id,
                        limit=MAX_RESULTS_PER_PAGE,
                    )
                )
            except FingrabError as e:
                raise e.add_context("fetch transactions")

            if not page:
                break

            pages += 1
            if pages > page_limit:
                raise PaginationLimitError(f"fetch transactions: more than {page_limit} pages returned for {account_id}")

            latest = page[0]
            for txn in page:
                if txn.created_at > latest.created_at:
                    latest = txn

                if txn.is_active_card_check or txn.decline_reason:
                    continue
                if end_exclusive is None or txn.created_at <= end_exclusive:
                    transactions.append(txn)

            logger.debug(f"Fetched page {pages} with {len(page)} transactions, latest {latest.id}")
            since_id = latest.id

            if end_exclusive is not None and latest.created_at > end_exclusive:
                break

        logger.info(f"Fetched {len(transactions)} transactions for account {account_id}")
        return transactions

    def _enrich_pot_descriptions(self, account_id: str, transactions: list[MonzoTransaction]) -> None:
        """Replace pot ids in transaction descriptions with "<name> Pot"."""
        try:
            pots = self.client.fetch_pots(account_id)
        except FingrabError as e:
            raise e.add_context("fetch pots")

        logger.debug(f"Fetched {len(pots)} pots for account {account_id}")

        pot_names = {pot.id: pot.name for pot in pots}
        for txn in transactions:
            if txn.description in pot_names:
                txn.description = f"{pot_names[txn.description]} Pot"


register(MONZO, MonzoExporter.from_options)
