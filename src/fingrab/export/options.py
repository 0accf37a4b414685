#!/usr/bin/env python3
"""
Export Options

The shared input to every exporter: date range, account selection,
credentials and the per-request HTTP settings.
"""

import threading
from dataclasses import dataclass
from datetime import datetime, timezone

import httpx

from ..core.errors import InvalidOptionsError
from ..core.http import RetryPolicy

DEFAULT_TIMEOUT = 5.0  # seconds
BEARER_PREFIX = "Bearer "


@dataclass
class ExportOptions:
    """
    Options for a single export call.

    Attributes:
        auth_token: Access token, with or without the "Bearer " prefix
        start_date: Inclusive start of the export range (timezone-aware)
        end_date: End of the export range (timezone-aware)
        account_id: Provider account id; empty selects the first account
        timeout: Per-request HTTP timeout in seconds
        base_url: Override for the provider's API base URL
        cancel_event: Set to abort the export between requests
        http_client: Pre-built HTTP client; one is created from ``timeout``
            when omitted
        retry_policy: Override for the HTTP retry policy
    """

    auth_token: str
    start_date: datetime | None = None
    end_date: datetime | None = None
    account_id: str = ""
    timeout: float = DEFAULT_TIMEOUT
    base_url: str | None = None
    cancel_event: threading.Event | None = None
    http_client: httpx.Client | None = None
    retry_policy: RetryPolicy | None = None

    def validate(self, require_dates: bool = True, now: datetime | None = None) -> None:
        """
        Check required fields and date ordering.

        Args:
            require_dates: Whether start and end dates must be present
            now: Reference time for the "not in the future" check

        Raises:
            InvalidOptionsError: Describing the first problem found
        """
        if not self.auth_token or not self.auth_token.strip():
            raise InvalidOptionsError("auth token is required")

        if self.timeout <= 0:
            raise InvalidOptionsError(f"timeout must be positive, got {self.timeout}")

        if not require_dates:
            return

        if self.start_date is None:
            raise InvalidOptionsError("start date is required")
        if self.end_date is None:
            raise InvalidOptionsError("end date is required")
        if self.start_date.tzinfo is None or self.end_date.tzinfo is None:
            raise InvalidOptionsError("start and end dates must be timezone-aware")

        now = now or datetime.now(timezone.utc)
        if self.start_date > now:
            raise InvalidOptionsError(f"start date {self.start_date.isoformat()} is in the future")
        if self.end_date < self.start_date:
            raise InvalidOptionsError(
                f"end date {self.end_date.isoformat()} is before start date {self.start_date.isoformat()}"
            )

    def bearer_auth_token(self) -> str:
        """
        Normalize the token into an Authorization header value.

        Examples:
            " abc " -> "Bearer abc"
            "Bearer abc" -> "Bearer abc"
        """
        token = self.auth_token.strip()
        if token.startswith(BEARER_PREFIX):
            return token
        return f"{BEARER_PREFIX}{token}"

    def new_http_client(self) -> httpx.Client:
        """HTTP client for the provider API, carrying the per-request timeout."""
        if self.http_client is not None:
            return self.http_client
        return httpx.Client(timeout=self.timeout)

    def is_cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()
