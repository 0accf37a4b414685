#!/usr/bin/env python3
"""
OAuth 2.0 Authorization Code Flow

Obtains an access token through the browser, the way installed apps do:

1. A short-lived HTTP listener is started on localhost:64131
2. The user's browser is opened at the bank's authorization page
3. The bank redirects back to http://localhost:64131/callback with a code
4. The code is exchanged for an access token at the bank's token endpoint
5. Optionally, the user confirms the login in the bank's mobile app

Authorization URLs, state and the token request are handled by authlib's
httpx client. The redirect URI must be registered with the bank for the
OAuth client.
"""

import logging
import threading
import time
import webbrowser
from collections.abc import Callable
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any, TextIO

import httpx
from authlib.common.errors import AuthlibBaseError
from authlib.integrations.httpx_client import OAuth2Client
from authlib.oauth2.rfc6749.errors import MismatchingStateException

from ..core.errors import ExportCancelledError, OAuthError

logger = logging.getLogger(__name__)

REDIRECT_HOST = "localhost"
REDIRECT_PORT = 64131
REDIRECT_PATH = "/callback"
CALLBACK_TIMEOUT = 300.0  # seconds
TOKEN_TIMEOUT = 30.0  # seconds
POLL_INTERVAL = 0.1  # seconds

CALLBACK_PAGE = b"""<!DOCTYPE html>
<html><body><p>Authorization complete. You can close this window and return to the terminal.</p></body></html>
"""


@dataclass
class OAuthConfig:
    """OAuth client settings for one bank."""

    client_id: str
    client_secret: str
    auth_url: str
    token_url: str
    wait_for_approval_in_app: bool = False  # Monzo asks for approval in its app after login
    scopes: list[str] = field(default_factory=list)

    def validate(self) -> list:
        """Validate configuration and return list of errors."""
        errors = []
        if not self.client_id:
            errors.append("client id is required")
        if not self.client_secret:
            errors.append("client secret is required")
        if not self.auth_url:
            errors.append("auth url is required")
        if not self.token_url:
            errors.append("token url is required")
        return errors

    def new_client(self, redirect_uri: str, transport: httpx.BaseTransport | None = None) -> OAuth2Client:
        """OAuth client for this bank; the secret is sent in the token request body."""
        return OAuth2Client(
            client_id=self.client_id,
            client_secret=self.client_secret,
            token_endpoint_auth_method="client_secret_post",
            redirect_uri=redirect_uri,
            scope=self.scopes or None,
            timeout=TOKEN_TIMEOUT,
            transport=transport,
        )


class _CallbackHandler(BaseHTTPRequestHandler):
    """Records the redirect back from the bank."""

    server: "_CallbackServer"

    def do_GET(self) -> None:
        if self.path.split("?", 1)[0] != REDIRECT_PATH:
            self.send_error(404)
            return

        self.server.callback_url = f"http://{REDIRECT_HOST}:{self.server.server_address[1]}{self.path}"

        self.send_response(200)
        self.send_header("Content-Type", "text/html; charset=utf-8")
        self.send_header("Content-Length", str(len(CALLBACK_PAGE)))
        self.end_headers()
        self.wfile.write(CALLBACK_PAGE)

        self.server.callback_received.set()

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug(format % args)


class _CallbackServer(HTTPServer):
    def __init__(self, host: str, port: int):
        super().__init__((host, port), _CallbackHandler)
        self.callback_url = ""
        self.callback_received = threading.Event()

    @property
    def redirect_uri(self) -> str:
        return f"http://{REDIRECT_HOST}:{self.server_address[1]}{REDIRECT_PATH}"


def exchange(
    cfg: OAuthConfig,
    stdin: TextIO,
    *,
    cancel_event: threading.Event | None = None,
    open_browser: Callable[[str], bool] = webbrowser.open,
    transport: httpx.BaseTransport | None = None,
    port: int = REDIRECT_PORT,
    callback_timeout: float = CALLBACK_TIMEOUT,
) -> str:
    """
    Run the authorization code flow and return the access token.

    Args:
        cfg: OAuth client settings
        stdin: Stream read for the in-app approval confirmation
        cancel_event: Set to abandon the flow
        open_browser: Opens a URL in the user's browser
        transport: httpx transport for the token request
        port: Loopback port for the redirect
        callback_timeout: Seconds to wait for the browser redirect

    Raises:
        OAuthError: If the config is invalid or any step of the flow fails
        ExportCancelledError: If the cancel event was set
    """
    errors = cfg.validate()
    if errors:
        raise OAuthError(f"invalid oauth2 config: {'; '.join(errors)}")

    try:
        server = _CallbackServer(REDIRECT_HOST, port)
    except OSError as e:
        raise OAuthError(f"listen on {REDIRECT_HOST}:{port}: {e}") from e

    with cfg.new_client(server.redirect_uri, transport) as client:
        login_url, state = client.create_authorization_url(cfg.auth_url)

        serve_thread = threading.Thread(target=server.serve_forever, name="oauth-callback", daemon=True)
        serve_thread.start()
        try:
            login_with_browser(login_url, open_browser)
            callback_url = _wait_for_callback(server, cancel_event, callback_timeout)
        finally:
            server.shutdown()
            server.server_close()
            serve_thread.join()

        access_token = _fetch_access_token(client, cfg.token_url, callback_url, state)
    logger.debug("exchanged oauth token")

    if cfg.wait_for_approval_in_app:
        wait_for_approval_in_app(stdin, cancel_event)

    return access_token


def login_with_browser(login_url: str, open_browser: Callable[[str], bool]) -> None:
    """Open the login page, logging the URL in case the browser does not open."""
    logger.info("you will be redirected to your web browser to complete the login process")
    logger.info(f"if the page did not open automatically, open this URL manually: {login_url}")

    try:
        opened = open_browser(login_url)
    except webbrowser.Error as e:
        logger.warning(f"could not open browser: {e}")
        return

    if opened is False:
        logger.warning("could not open browser")


def wait_for_approval_in_app(stdin: TextIO, cancel_event: threading.Event | None = None) -> None:
    """
    Block until the user presses Enter.

    The read happens on a daemon thread so cancellation does not wait for it.

    Raises:
        OAuthError: If stdin is closed or unreadable
        ExportCancelledError: If the cancel event was set
    """
    logger.info("please open your app and approve this application to access your account")
    logger.info("press Enter once you have approved the application...")

    done = threading.Event()
    outcome: dict[str, Any] = {}

    def read_line() -> None:
        try:
            outcome["line"] = stdin.readline()
        except (OSError, ValueError) as e:
            outcome["error"] = e
        finally:
            done.set()

    threading.Thread(target=read_line, name="oauth-approval", daemon=True).start()

    while not done.wait(POLL_INTERVAL):
        if cancel_event is not None and cancel_event.is_set():
            raise ExportCancelledError("cancelled while waiting for user approval")

    if "error" in outcome:
        raise OAuthError(f"failed waiting for app approval: {outcome['error']}") from outcome["error"]
    if not outcome.get("line"):
        raise OAuthError("failed waiting for app approval: end of input")


def _wait_for_callback(server: _CallbackServer, cancel_event: threading.Event | None, timeout: float) -> str:
    deadline = time.monotonic() + timeout
    while not server.callback_received.wait(POLL_INTERVAL):
        if cancel_event is not None and cancel_event.is_set():
            raise ExportCancelledError("cancelled while waiting for auth")
        if time.monotonic() > deadline:
            raise OAuthError(f"authorization error: no callback received within {timeout:.0f}s")
    return server.callback_url


def _fetch_access_token(client: OAuth2Client, token_url: str, callback_url: str, state: str) -> str:
    params = httpx.URL(callback_url).params
    if "error" in params:
        description = params.get("error_description", "")
        raise OAuthError(f"authorization error: {params['error']} {description}".strip())
    # Without a code authlib would fall back to another grant type
    if not params.get("code"):
        raise OAuthError("authorization error: no code in callback")

    try:
        token = client.fetch_token(token_url, authorization_response=callback_url, state=state)
    except MismatchingStateException as e:
        raise OAuthError("authorization error: state mismatch in callback") from e
    except AuthlibBaseError as e:
        description = f" {e.description}" if e.description else ""
        raise OAuthError(f"could not get oauth token: {e.error}{description}") from e
    except (httpx.HTTPError, ValueError) as e:
        raise OAuthError(f"could not get oauth token: {e}") from e

    access_token = token.get("access_token")
    if not access_token:
        raise OAuthError("could not get oauth token: no access_token in response")
    return access_token
