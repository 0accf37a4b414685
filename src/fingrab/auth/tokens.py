#!/usr/bin/env python3
"""
Auth Token Resolution

Finds the access token for a bank, in order:

1. the ``--token`` command-line option
2. the ``<BANK>_TOKEN`` environment variable
3. the OAuth flow, using ``<BANK>_CLIENT_ID`` and ``<BANK>_CLIENT_SECRET``
"""

import logging
import threading
from collections.abc import Callable
from typing import TextIO

from ..core.config import Config
from ..core.errors import OAuthError
from .oauth import OAuthConfig, exchange

logger = logging.getLogger(__name__)

# Per-bank OAuth endpoints, keyed by lower-case bank name.
BANK_OAUTH_ENDPOINTS: dict[str, dict] = {
    "monzo": {
        "auth_url": "https://auth.monzo.com",
        "token_url": "https://api.monzo.com/oauth2/token",
        "wait_for_approval_in_app": True,
    },
    "starling": {
        "auth_url": "https://oauth.starlingbank.com/oauth/authorize",
        "token_url": "https://api.starlingbank.com/oauth2/token",
        "wait_for_approval_in_app": False,
    },
}


def oauth_config_for(bank: str, config: Config) -> OAuthConfig:
    """
    Build the OAuth client settings for a bank.

    Raises:
        OAuthError: If the bank has no known OAuth endpoints
    """
    endpoints = BANK_OAUTH_ENDPOINTS.get(bank.lower())
    if endpoints is None:
        supported = ", ".join(sorted(BANK_OAUTH_ENDPOINTS))
        raise OAuthError(f"unsupported bank type: {bank} (supported types: {supported})")

    bank_config = config.bank(bank)
    return OAuthConfig(
        client_id=(bank_config.client_id or "").strip(),
        client_secret=(bank_config.client_secret or "").strip(),
        **endpoints,
    )


def resolve_auth_token(
    bank: str,
    flag_token: str | None,
    config: Config,
    stdin: TextIO,
    *,
    cancel_event: threading.Event | None = None,
    exchange_fn: Callable[..., str] = exchange,
) -> str:
    """
    Find the access token for a bank.

    Args:
        bank: Bank name, e.g. "monzo"
        flag_token: Value of the ``--token`` option, if any
        config: Loaded configuration (environment credentials)
        stdin: Stream for the in-app approval prompt
        cancel_event: Set to abandon the OAuth flow
        exchange_fn: OAuth exchange implementation (swappable in tests)

    Returns:
        Access token, without any "Bearer " normalization
    """
    if flag_token and flag_token.strip():
        logger.debug("using auth token from cli flag")
        return flag_token.strip()

    bank_config = config.bank(bank)
    if bank_config.token:
        logger.debug(f"using auth token from environment variable {bank.upper()}_TOKEN")
        return bank_config.token.strip()

    logger.debug(f"no auth token found, starting OAuth flow for {bank}")
    return exchange_fn(oauth_config_for(bank, config), stdin, cancel_event=cancel_event)
