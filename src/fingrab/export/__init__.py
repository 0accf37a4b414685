"""
Export Package

Provider-agnostic export pipeline: the shared options, the exporter
registry and the ``transactions`` / ``accounts`` entry points.

Provider packages (``fingrab.monzo``, ``fingrab.starling``) register their
exporters here when imported.
"""

from .options import ExportOptions
from .pipeline import accounts, transactions
from .registry import (
    Exporter,
    ExporterConstructor,
    ExporterRegistry,
    all_types,
    exporter_registry,
    new_exporter,
    register,
)

__all__ = [
    "ExportOptions",
    "Exporter",
    "ExporterConstructor",
    "ExporterRegistry",
    "accounts",
    "all_types",
    "exporter_registry",
    "new_exporter",
    "register",
    "transactions",
]
