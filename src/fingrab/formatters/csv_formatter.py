#!/usr/bin/env python3
"""
CSV Formatter Base

Shared CSV plumbing for the output formats: comma separated, LF line
endings, minimal quoting, no byte-order mark.
"""

import csv
from datetime import datetime, timezone, tzinfo
from typing import TextIO

from .registry import Formatter


class CSVFormatter(Formatter):
    """Base class for formatters that write CSV rows."""

    def __init__(self, stream: TextIO, tz: tzinfo = timezone.utc):
        self.stream = stream
        self.tz = tz
        self.writer = csv.writer(stream, delimiter=",", lineterminator="\n", quoting=csv.QUOTE_MINIMAL)

    def write_row(self, row: list[str]) -> None:
        self.writer.writerow(row)

    def format_date(self, value: datetime, pattern: str) -> str:
        """Render an instant in the formatter's timezone."""
        return value.astimezone(self.tz).strftime(pattern)

    def flush(self) -> None:
        # Buffered write failures (e.g. a closed pipe) surface here.
        flush = getattr(self.stream, "flush", None)
        if flush is not None:
            flush()
