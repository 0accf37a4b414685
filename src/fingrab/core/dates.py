#!/usr/bin/env python3
"""
RFC-3339 Timestamp Helpers

Both bank APIs exchange timestamps as RFC-3339 strings in UTC with a
trailing "Z" and a variable number of fractional-second digits. These
helpers convert between those strings and timezone-aware datetimes.
"""

import re
from datetime import datetime, timezone

_RFC3339_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})$"
)


def parse_rfc3339(value: str | None) -> datetime | None:
    """
    Parse an RFC-3339 timestamp into an aware UTC datetime.

    Fractional seconds beyond microsecond precision are truncated.

    Args:
        value: Timestamp string; None or empty means "not set"

    Returns:
        Aware datetime in UTC, or None when value is empty

    Raises:
        ValueError: If the string is not a valid RFC-3339 timestamp

    Examples:
        parse_rfc3339("2025-01-25T10:00:00Z") -> 2025-01-25 10:00:00+00:00
        parse_rfc3339("2025-02-19T16:37:59.123456789Z") -> ...59.123456+00:00
    """
    if not value:
        return None

    match = _RFC3339_RE.match(value.strip())
    if match is None:
        raise ValueError(f"invalid RFC-3339 timestamp: {value!r}")

    fraction = (match.group("fraction") or "").ljust(6, "0")[:6]
    offset = match.group("offset")
    if offset in ("Z", "z"):
        offset = "+00:00"

    parsed = datetime.fromisoformat(f"{match.group('base').replace(' ', 'T')}.{fraction}{offset}")
    return parsed.astimezone(timezone.utc)


def format_rfc3339(value: datetime) -> str:
    """
    Format an aware datetime as an RFC-3339 UTC string.

    Whole seconds only, with a "Z" suffix, e.g. "2025-01-25T10:00:00Z".
    Naive datetimes are taken to be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
