#!/usr/bin/env python3
"""
Export Pipeline

Top-level entry points used by the CLI: validate the options, build the
exporter for the requested type, enforce its date-range bound and run it.
Every failure is re-raised with a short label naming the phase it came from.
"""

import logging
import math

from ..core.errors import DateRangeTooLongError, ExportCancelledError, FingrabError, InvalidOptionsError
from ..core.models import Account, Transaction
from .options import ExportOptions
from .registry import ExporterRegistry, exporter_registry

logger = logging.getLogger(__name__)


def transactions(
    export_type: str, opts: ExportOptions, registry: ExporterRegistry | None = None
) -> list[Transaction]:
    """
    Export all transactions for the options' date range.

    Args:
        export_type: Registered export type, e.g. "Monzo"
        opts: Export options; start and end dates are required
        registry: Registry to resolve the exporter from (global by default)

    Returns:
        Domain transactions in provider order

    Raises:
        InvalidOptionsError: If the options fail validation
        DateRangeTooLongError: If the range exceeds the exporter's bound
        FingrabError: Any exporter failure, labelled with its phase
    """
    registry = registry or exporter_registry

    try:
        opts.validate(require_dates=True)
    except FingrabError as e:
        raise e.add_context("invalid options")

    try:
        exporter = registry.new_exporter(export_type, opts)
    except FingrabError as e:
        raise e.add_context("exporter")

    if opts.start_date is None or opts.end_date is None:
        raise InvalidOptionsError("invalid options: start and end dates are required")
    max_range = exporter.max_date_range()
    date_range = opts.end_date - opts.start_date
    if max_range.total_seconds() > 0 and date_range > max_range:
        raise DateRangeTooLongError(
            days=math.ceil(date_range.total_seconds() / 86400),
            max_days=math.floor(max_range.total_seconds() / 86400),
        )

    if opts.is_cancelled():
        raise ExportCancelledError("transactions: cancelled")

    logger.info(
        f"Exporting {export_type} transactions from {opts.start_date.isoformat()} to {opts.end_date.isoformat()}"
    )
    try:
        result = exporter.export_transactions(opts)
    except FingrabError as e:
        raise e.add_context("transactions")

    logger.info(f"Exported {len(result)} {export_type} transactions")
    return result


def accounts(export_type: str, opts: ExportOptions, registry: ExporterRegistry | None = None) -> list[Account]:
    """
    Export every account visible to the options' token.

    Only the token and timeout are validated; dates are ignored.
    """
    registry = registry or exporter_registry

    try:
        opts.validate(require_dates=False)
    except FingrabError as e:
        raise e.add_context("invalid options")

    try:
        exporter = registry.new_exporter(export_type, opts)
    except FingrabError as e:
        raise e.add_context("exporter")

    try:
        result = exporter.export_accounts(opts)
    except FingrabError as e:
        raise e.add_context("accounts")

    logger.info(f"Exported {len(result)} {export_type} accounts")
    return result
