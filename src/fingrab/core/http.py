#!/usr/bin/env python3
"""
REST Client Substrate

Shared HTTP plumbing for the provider API clients:
- base URL and Authorization header handling
- bounded retry with capped exponential back-off on transport errors and 5xx
- DEBUG logging of every request attempt
- typed error decoding for 4xx/5xx responses

Retry Strategy:
    Up to ``retry_count`` retries after the first attempt. The delay doubles
    from ``wait`` and is capped at ``max_wait``:
    - Attempt 1 fails -> wait 2s
    - Attempt 2 fails -> wait 4s
    - Attempt 3 fails -> wait 8s
    4xx responses are returned immediately without retrying.
"""

import logging
import threading
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from .errors import APIError, ExportCancelledError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0  # seconds
DEFAULT_RETRY_COUNT = 3
DEFAULT_RETRY_WAIT = 2.0
DEFAULT_MAX_RETRY_WAIT = 10.0
AUTHORIZATION_HEADER = "Authorization"

# Turns an error response into a typed exception, or None to fall back to
# the generic "HTTP <status>: <body>" error.
ErrorDecoder = Callable[[int, bytes], Exception | None]
QueryParams = Mapping[str, Any] | Iterable[tuple[str, Any]]


@dataclass
class RetryPolicy:
    """
    Retry settings for a client.

    Attributes:
        retry_count: Retries after the first attempt
        wait: Delay before the first retry, in seconds
        max_wait: Upper bound for any single delay, in seconds
        sleep: Function used to wait between attempts (swappable in tests)
    """

    retry_count: int = DEFAULT_RETRY_COUNT
    wait: float = DEFAULT_RETRY_WAIT
    max_wait: float = DEFAULT_MAX_RETRY_WAIT
    sleep: Callable[[float], None] = time.sleep

    def delay(self, attempt: int) -> float:
        """Delay after the given (1-based) failed attempt."""
        return min(self.wait * 2 ** (attempt - 1), self.max_wait)

    def should_retry(self, response: httpx.Response | None, error: Exception | None) -> bool:
        """Retry on transport errors and server errors only."""
        if error is not None:
            return True
        return response is not None and response.status_code >= 500


def encode_query(query: QueryParams | None) -> str:
    """
    Serialize query parameters verbatim.

    Values are joined as ``key=value`` pairs without percent re-escaping, so
    keys such as ``expand[]`` and RFC-3339 timestamps reach the server
    exactly as written.
    """
    if not query:
        return ""
    items = query.items() if isinstance(query, Mapping) else query
    return "&".join(f"{key}={value}" for key, value in items)


class BaseClient:
    """
    Base REST client shared by the Monzo and Starling API clients.

    The injected ``httpx.Client`` carries the per-request timeout. When none
    is given a client with a 60 second timeout is created.
    """

    def __init__(
        self,
        base_url: str,
        http_client: httpx.Client | None = None,
        *,
        auth_token: str | None = None,
        error_decoder: ErrorDecoder | None = None,
        retry_policy: RetryPolicy | None = None,
        cancel_event: threading.Event | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.http_client = http_client or httpx.Client(timeout=DEFAULT_TIMEOUT)
        self.headers: dict[str, str] = {"Accept": "application/json"}
        self.error_decoder = error_decoder
        self.retry_policy = retry_policy or RetryPolicy()
        self.cancel_event = cancel_event

        if auth_token:
            self.set_auth_token(auth_token)

    def set_auth_token(self, auth_token: str) -> None:
        """Send ``auth_token`` as the Authorization header on every request."""
        self.headers[AUTHORIZATION_HEADER] = auth_token

    def set_base_url(self, base_url: str) -> None:
        """Override the base URL for all subsequent requests."""
        self.base_url = base_url.rstrip("/")

    def set_error_decoder(self, error_decoder: ErrorDecoder) -> None:
        """Register a decoder for error responses."""
        self.error_decoder = error_decoder

    def build_url(self, path: str, query: QueryParams | None = None) -> str:
        """Join base URL, path and the verbatim query string."""
        url = f"{self.base_url}/{path.lstrip('/')}"
        query_string = encode_query(query)
        if query_string:
            url = f"{url}{'&' if '?' in url else '?'}{query_string}"
        return url

    def execute(
        self,
        method: str,
        path: str,
        query: QueryParams | None = None,
        result: Callable[[Any], Any] | None = None,
    ) -> Any:
        """
        Perform a request and decode the JSON response.

        Args:
            method: HTTP method, e.g. "GET"
            path: Route relative to the base URL
            query: Query parameters, serialized verbatim
            result: Optional callable applied to the decoded JSON payload

        Returns:
            ``result(payload)`` when ``result`` is given, else the payload

        Raises:
            TransportError: If the request failed after all retries
            APIError: For responses with status >= 400 (or the decoder's type)
            ExportCancelledError: If the cancel event was set
        """
        url = self.build_url(path, query)
        response = self._send(method, url)

        if response.status_code >= 400:
            raise self._decode_error(response)

        try:
            payload = response.json()
            return result(payload) if result else payload
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise APIError(
                f"decode {method} {url}: {e!r}", status_code=response.status_code, body=response.text
            ) from e

    def _send(self, method: str, url: str) -> httpx.Response:
        policy = self.retry_policy
        attempts = policy.retry_count + 1
        response: httpx.Response | None = None
        error: httpx.HTTPError | None = None

        for attempt in range(1, attempts + 1):
            self._check_cancelled(method, url)

            response, error = None, None
            started = time.monotonic()
            try:
                response = self.http_client.request(method, url, headers=self.headers)
            except httpx.HTTPError as e:
                error = e
            duration_ms = (time.monotonic() - started) * 1000

            status = response.status_code if response is not None else 0
            logger.debug(
                "performed HTTP request %s %s status=%d duration_ms=%.0f err=%s",
                method,
                url,
                status,
                duration_ms,
                error,
                extra={
                    "http": {
                        "method": method,
                        "url": url,
                        "status_code": status,
                        "duration_ms": round(duration_ms),
                        "err": str(error) if error else None,
                    }
                },
            )

            if not policy.should_retry(response, error) or attempt == attempts:
                break

            delay = policy.delay(attempt)
            logger.debug("retrying %s %s in %.1fs (attempt %d/%d)", method, url, delay, attempt, attempts)
            self._wait(delay, method, url)

        if response is None:
            raise TransportError(f"execute {method} {url}: {error}") from error
        return response

    def _wait(self, delay: float, method: str, url: str) -> None:
        if self.cancel_event is None:
            self.retry_policy.sleep(delay)
            return
        if self.cancel_event.wait(delay):
            self._check_cancelled(method, url)

    def _check_cancelled(self, method: str, url: str) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise ExportCancelledError(f"execute {method} {url}: cancelled")

    def _decode_error(self, response: httpx.Response) -> Exception:
        if self.error_decoder is not None:
            decoded = self.error_decoder(response.status_code, response.content)
            if decoded is not None:
                return decoded
        return APIError(
            f"HTTP {response.status_code}: {response.text}",
            status_code=response.status_code,
            body=response.text,
        )
