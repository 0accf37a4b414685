"""
Auth Package

Access-token resolution and the OAuth 2.0 loopback flow used when no token
is configured.
"""

from .oauth import REDIRECT_PORT, OAuthConfig, exchange, wait_for_approval_in_app
from .tokens import BANK_OAUTH_ENDPOINTS, oauth_config_for, resolve_auth_token

__all__ = [
    "BANK_OAUTH_ENDPOINTS",
    "REDIRECT_PORT",
    "OAuthConfig",
    "exchange",
    "oauth_config_for",
    "resolve_auth_token",
    "wait_for_approval_in_app",
]
