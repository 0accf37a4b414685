#!/usr/bin/env python3
"""
Error Taxonomy

Every failure raised by fingrab derives from FingrabError, so the CLI can
report any of them uniformly. Each layer adds a short phase label to the
message and keeps the original exception as ``__cause__``.
"""


class FingrabError(Exception):
    """Base class for all fingrab errors."""

    def add_context(self, label: str) -> "FingrabError":
        """
        Prefix the message with a phase label.

        The exception keeps its type and attributes (e.g. ``status_code``), so
        callers further up can still match on it.

        Example:
            raise e.add_context("exporter")  # "exporter: constructor: boom"
        """
        self.args = (f"{label}: {self}",)
        return self


class InvalidOptionsError(FingrabError):
    """Raised when export options or request options fail validation."""

    def __init__(self, message: str, kind: str = "invalid-options"):
        super().__init__(message)
        self.kind = kind


class UnsupportedTypeError(FingrabError):
    """Raised when an export or format type is not registered."""

    pass


class ConstructorError(FingrabError):
    """Raised when a registered constructor fails to build its component."""

    pass


class ParseAccountIDError(FingrabError):
    """Raised when an account id cannot be parsed for a provider."""

    pass


class NoAccountsError(FingrabError):
    """Raised when a provider reports no accounts for the user."""

    pass


class APIError(FingrabError):
    """
    Error response from a provider API.

    Exposes the HTTP status so callers can match on e.g. 401 without
    inspecting the message.
    """

    def __init__(self, message: str, status_code: int = 0, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class TransportError(FingrabError):
    """Raised when a request could not be completed after all retries."""

    pass


class ExportCancelledError(FingrabError):
    """Raised when the cancellation signal is set during an export."""

    pass


class DateRangeTooLongError(FingrabError):
    """Raised when the requested range exceeds the provider's maximum."""

    def __init__(self, days: int, max_days: int):
        super().__init__(f"date range {days} days is too long, max is {max_days} days")
        self.days = days
        self.max_days = max_days


class PaginationLimitError(FingrabError):
    """Raised when paging does not terminate within the allowed page count."""

    pass


class FormatterError(FingrabError):
    """Raised when a formatter fails in one of its write phases."""

    def __init__(self, phase: str, cause: Exception):
        super().__init__(f"{phase}: {cause}")
        self.phase = phase


class OAuthError(FingrabError):
    """Raised when the OAuth authorization code flow fails."""

    pass
