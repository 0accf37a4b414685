#!/usr/bin/env python3
"""
Formatter Registry

Maps output format types ("moneydance", "ynab") to formatter constructors and
drives the three-phase write of a transaction collection.
"""

import csv
import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from datetime import timezone, tzinfo
from typing import TextIO

from ..core.errors import ConstructorError, FormatterError, UnsupportedTypeError
from ..core.models import Transaction

logger = logging.getLogger(__name__)


class Formatter(ABC):
    """
    Abstract base class for output formatters.

    A formatter writes one header, then one record per transaction, then is
    flushed. Dates are rendered in the formatter's timezone.
    """

    @abstractmethod
    def write_header(self) -> None:
        pass

    @abstractmethod
    def write_transaction(self, transaction: Transaction) -> None:
        pass

    @abstractmethod
    def flush(self) -> None:
        """Flush buffered output, raising any error deferred by earlier writes."""
        pass


FormatterConstructor = Callable[[TextIO, tzinfo], Formatter]

# Errors a formatter may raise while writing to its stream.
WRITE_ERRORS = (OSError, ValueError, csv.Error)


class FormatterRegistry:
    """
    Registry of formatter constructors keyed by format type.

    Lookups and registrations share one re-entrant lock, so concurrent
    lookups are serialized on purpose rather than run in parallel.
    """

    def __init__(self) -> None:
        """Initialize empty formatter registry."""
        self._constructors: dict[str, FormatterConstructor] = {}
        self._lock = threading.RLock()

    def register(self, format_type: str, constructor: FormatterConstructor) -> None:
        """Register a formatter constructor, replacing any existing one for the type."""
        with self._lock:
            if format_type in self._constructors:
                logger.debug(f"Overwriting existing formatter: {format_type}")
            self._constructors[format_type] = constructor

    def all_types(self) -> list[str]:
        """Registered format types in lexicographic order."""
        with self._lock:
            return sorted(self._constructors)

    def new_formatter(self, format_type: str, stream: TextIO, tz: tzinfo | None = None) -> Formatter:
        """
        Build the formatter registered for a type.

        Args:
            format_type: Case-sensitive type tag, e.g. "ynab"
            stream: Text stream the CSV is written to
            tz: Timezone for rendered dates (UTC when omitted)

        Raises:
            UnsupportedTypeError: If no formatter is registered for the type
            ConstructorError: If the constructor fails
        """
        with self._lock:
            constructor = self._constructors.get(format_type)

        if constructor is None:
            raise UnsupportedTypeError(f"unsupported type: {format_type}")

        try:
            return constructor(stream, tz or timezone.utc)
        except Exception as e:
            raise ConstructorError(f"constructor: {e}") from e


# Global formatter registry instance
formatter_registry = FormatterRegistry()


def register(format_type: str, constructor: FormatterConstructor) -> None:
    """Register a formatter with the global registry."""
    formatter_registry.register(format_type, constructor)


def all_types() -> list[str]:
    """Format types known to the global registry, sorted."""
    return formatter_registry.all_types()


def new_formatter(format_type: str, stream: TextIO, tz: tzinfo | None = None) -> Formatter:
    """Build a formatter from the global registry."""
    return formatter_registry.new_formatter(format_type, stream, tz)


def write_collection(formatter: Formatter, transactions: Iterable[Transaction]) -> None:
    """
    Write a header, every transaction in order, then flush.

    The first failure aborts the write.

    Raises:
        FormatterError: Labelled "write header", "write transaction" or "flush"
    """
    try:
        formatter.write_header()
    except WRITE_ERRORS as e:
        raise FormatterError("write header", e) from e

    for transaction in transactions:
        try:
            formatter.write_transaction(transaction)
        except WRITE_ERRORS as e:
            raise FormatterError("write transaction", e) from e

    try:
        formatter.flush()
    except WRITE_ERRORS as e:
        raise FormatterError("flush", e) from e
