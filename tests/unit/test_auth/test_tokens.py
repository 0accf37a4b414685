#!/usr/bin/env python3
"""Tests for access-token resolution."""

import io

import pytest

from fingrab.auth.tokens import oauth_config_for, resolve_auth_token
from fingrab.core.config import Config
from fingrab.core.errors import OAuthError


class RecordingExchange:
    """Stand-in for the OAuth flow."""

    def __init__(self, token: str = "oauth-token"):
        self.token = token
        self.configs = []

    def __call__(self, cfg, stdin, *, cancel_event=None):
        self.configs.append(cfg)
        return self.token


class TestResolveAuthToken:
    """Test the token resolution order."""

    def test_flag_wins(self, monkeypatch):
        """Test the command-line token is used first."""
        monkeypatch.setenv("MONZO_TOKEN", "env-token")
        exchange = RecordingExchange()

        token = resolve_auth_token(
            "monzo", "  flag-token ", Config.from_environment(), io.StringIO(), exchange_fn=exchange
        )

        assert token == "flag-token"
        assert exchange.configs == []

    def test_environment_token(self, monkeypatch):
        """Test <BANK>_TOKEN is used when no flag is given."""
        monkeypatch.setenv("STARLING_TOKEN", "env-token")
        exchange = RecordingExchange()

        token = resolve_auth_token("Starling", None, Config.from_environment(), io.StringIO(), exchange_fn=exchange)

        assert token == "env-token"
        assert exchange.configs == []

    def test_oauth_fallback(self, monkeypatch):
        """Test the OAuth flow runs with the bank's endpoints and client."""
        monkeypatch.setenv("MONZO_CLIENT_ID", "client")
        monkeypatch.setenv("MONZO_CLIENT_SECRET", "secret")
        exchange = RecordingExchange()

        token = resolve_auth_token("monzo", "  ", Config.from_environment(), io.StringIO(), exchange_fn=exchange)

        assert token == "oauth-token"
        [cfg] = exchange.configs
        assert cfg.client_id == "client"
        assert cfg.client_secret == "secret"
        assert cfg.auth_url == "https://auth.monzo.com"
        assert cfg.wait_for_approval_in_app is True


class TestOAuthConfigFor:
    """Test per-bank OAuth settings."""

    def test_starling(self, monkeypatch):
        """Test Starling does not wait for app approval."""
        monkeypatch.setenv("STARLING_CLIENT_ID", " client ")
        cfg = oauth_config_for("starling", Config.from_environment())

        assert cfg.client_id == "client"
        assert cfg.token_url == "https://api.starlingbank.com/oauth2/token"
        assert cfg.wait_for_approval_in_app is False

    def test_unsupported_bank(self):
        """Test banks without OAuth endpoints are rejected."""
        with pytest.raises(OAuthError, match="unsupported bank type: revolut"):
            oauth_config_for("revolut", Config.from_environment())
