#!/usr/bin/env python3
"""
Exporter Registry

Maps export types ("Monzo", "Starling") to exporter constructors. Provider
packages register themselves when imported; the CLI and the pipeline only
ever look exporters up by type.
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import timedelta

from ..core.errors import ConstructorError, UnsupportedTypeError
from ..core.models import Account, Transaction
from .options import ExportOptions

logger = logging.getLogger(__name__)


class Exporter(ABC):
    """
    Abstract base class for bank exporters.

    An exporter fetches provider data through its API client and converts it
    into bank-agnostic transactions and accounts. Provider DTOs never leave
    the exporter.
    """

    @abstractmethod
    def type(self) -> str:
        """Export type tag this exporter is registered under."""
        pass

    def max_date_range(self) -> timedelta:
        """Longest date range one export may cover; zero means unbounded."""
        return timedelta(0)

    @abstractmethod
    def export_transactions(self, opts: ExportOptions) -> list[Transaction]:
        """Fetch and convert every transaction in the options' date range."""
        pass

    @abstractmethod
    def export_accounts(self, opts: ExportOptions) -> list[Account]:
        """Fetch and convert every account visible to the token."""
        pass


ExporterConstructor = Callable[[ExportOptions], Exporter]


class ExporterRegistry:
    """
    Registry of exporter constructors keyed by export type.

    Lookups and registrations share one re-entrant lock, so concurrent
    lookups are serialized on purpose. A constructor may itself consult
    the registry.
    """

    def __init__(self) -> None:
        """Initialize empty exporter registry."""
        self._constructors: dict[str, ExporterConstructor] = {}
        self._lock = threading.RLock()

    def register(self, export_type: str, constructor: ExporterConstructor) -> None:
        """
        Register an exporter constructor.

        Registering an existing type replaces the previous constructor.

        Args:
            export_type: Case-sensitive type tag, e.g. "Monzo"
            constructor: Callable building an Exporter from ExportOptions
        """
        with self._lock:
            if export_type in self._constructors:
                logger.debug(f"Overwriting existing exporter: {export_type}")
            self._constructors[export_type] = constructor
        logger.debug(f"Registered exporter: {export_type}")

    def all_types(self) -> list[str]:
        """Registered export types in lexicographic order."""
        with self._lock:
            return sorted(self._constructors)

    def new_exporter(self, export_type: str, opts: ExportOptions) -> Exporter:
        """
        Build the exporter registered for a type.

        Raises:
            UnsupportedTypeError: If no exporter is registered for the type
            ConstructorError: If the constructor fails
        """
        with self._lock:
            constructor = self._constructors.get(export_type)

        if constructor is None:
            raise UnsupportedTypeError(f"unsupported type: {export_type}")

        try:
            return constructor(opts)
        except Exception as e:
            raise ConstructorError(f"constructor: {e}") from e


# Global exporter registry instance
exporter_registry = ExporterRegistry()


def register(export_type: str, constructor: ExporterConstructor) -> None:
    """Register an exporter with the global registry."""
    exporter_registry.register(export_type, constructor)


def all_types() -> list[str]:
    """Export types known to the global registry, sorted."""
    return exporter_registry.all_types()


def new_exporter(export_type: str, opts: ExportOptions) -> Exporter:
    """Build an exporter from the global registry."""
    return exporter_registry.new_exporter(export_type, opts)
