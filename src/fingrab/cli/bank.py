#!/usr/bin/env python3
"""
Bank CLI - Transaction and Account Export

One command group per registered exporter, e.g. ``fingrab monzo`` and
``fingrab starling``, each with ``transactions`` and ``accounts`` commands.
"""

import io
import threading
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import click

from .. import export, formatters
from ..auth import resolve_auth_token
from ..core.config import Config
from ..core.errors import FingrabError, InvalidOptionsError

DATE_FORMAT = "%Y-%m-%d"
ONE_DAY = timedelta(days=1)

TOKEN_HELP = "API auth token (default: <BANK>_TOKEN, then the OAuth flow)"
TIMEOUT_HELP = "API request timeout in seconds (default: FINGRAB_TIMEOUT or 5)"


def resolve_date_range(
    start: datetime, end: datetime | None, now: datetime | None = None
) -> tuple[datetime, datetime]:
    """
    Turn the --start/--end dates into a UTC export range.

    Dates are UTC midnights. A missing end date means "up to and including
    today". The start may not be in the future, the end may not precede the
    start, and the end may be at most one day past today.

    Raises:
        InvalidOptionsError: If a rule is broken
    """
    now = now or datetime.now(timezone.utc)
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)

    start = start.replace(tzinfo=timezone.utc)
    end = end.replace(tzinfo=timezone.utc) if end is not None else today + ONE_DAY

    if start > today:
        raise InvalidOptionsError(f'start date "{start:{DATE_FORMAT}}" cannot be in the future')
    if end < start:
        raise InvalidOptionsError(f'end date "{end:{DATE_FORMAT}}" must be after start date "{start:{DATE_FORMAT}}"')
    if end > today + ONE_DAY:
        raise InvalidOptionsError("end date cannot be more than 1 day in the future")

    return start, end


def _load_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise click.BadParameter(f"unknown timezone: {name}", param_hint="'--timezone'") from e


def _auth_token(name: str, token: str | None, config: Config, cancel_event: threading.Event) -> str:
    try:
        return resolve_auth_token(
            name, token, config, click.get_text_stream("stdin"), cancel_event=cancel_event
        )
    except FingrabError as e:
        raise click.ClickException(f"{name}: authentication failed: {e}") from e


def bank_group(export_type: str) -> click.Group:
    """Build the command group for one export type."""
    name = export_type.lower()

    @click.group(name=name, help=f"{export_type} bank commands.")
    def group() -> None:
        pass

    @group.command(help=f"Export transactions from {export_type} for the specified date range.")
    @click.option("--start", required=True, type=click.DateTime(formats=[DATE_FORMAT]), help="Start date (YYYY-MM-DD)")
    @click.option(
        "--end", type=click.DateTime(formats=[DATE_FORMAT]), help="End date (YYYY-MM-DD), defaults to tomorrow"
    )
    @click.option("--token", help=TOKEN_HELP)
    @click.option("--timeout", type=click.FloatRange(min=0, min_open=True), help=TIMEOUT_HELP)
    @click.option("--account", "account_id", default="", help="Account ID (default: first account)")
    @click.option(
        "--format",
        "format_type",
        type=click.Choice(formatters.all_types()),
        help="Output format (default: FINGRAB_FORMAT or moneydance)",
    )
    @click.option("--timezone", "tz_name", help="Timezone for output dates (default: FINGRAB_TIMEZONE or UTC)")
    @click.pass_context
    def transactions(
        ctx: click.Context,
        start: datetime,
        end: datetime | None,
        token: str | None,
        timeout: float | None,
        account_id: str,
        format_type: str | None,
        tz_name: str | None,
    ) -> None:
        """
        Examples:
          fingrab monzo transactions --token <api-token> --start 2025-03-01 --end 2025-03-31
          fingrab starling transactions --start 2025-03-01 --format ynab
        """
        config: Config = ctx.obj["config"]
        tz = _load_timezone(tz_name or config.timezone)

        try:
            start_date, end_date = resolve_date_range(start, end)
        except InvalidOptionsError as e:
            raise click.ClickException(f"{name}: {e}") from e

        output = io.StringIO()
        try:
            formatter = formatters.new_formatter(format_type or config.default_format, output, tz)
        except FingrabError as e:
            raise click.ClickException(f"{name}: formatter: {e}") from e

        cancel_event = threading.Event()
        opts = export.ExportOptions(
            auth_token=_auth_token(name, token, config, cancel_event),
            start_date=start_date,
            end_date=end_date,
            account_id=account_id,
            timeout=timeout or config.timeout,
            base_url=config.bank(name).base_url or None,
            cancel_event=cancel_event,
        )

        try:
            result = export.transactions(export_type, opts)
            formatters.write_collection(formatter, result)
        except KeyboardInterrupt:
            cancel_event.set()
            raise click.Abort() from None
        except FingrabError as e:
            raise click.ClickException(f"{name}: export: {e}") from e

        click.echo(output.getvalue(), nl=False)

    @group.command(help=f"List the {export_type} account IDs available to the authenticated user.")
    @click.option("--token", help=TOKEN_HELP)
    @click.option("--timeout", type=click.FloatRange(min=0, min_open=True), help=TIMEOUT_HELP)
    @click.pass_context
    def accounts(ctx: click.Context, token: str | None, timeout: float | None) -> None:
        config: Config = ctx.obj["config"]

        cancel_event = threading.Event()
        opts = export.ExportOptions(
            auth_token=_auth_token(name, token, config, cancel_event),
            timeout=timeout or config.timeout,
            base_url=config.bank(name).base_url or None,
            cancel_event=cancel_event,
        )

        try:
            result = export.accounts(export_type, opts)
        except KeyboardInterrupt:
            cancel_event.set()
            raise click.Abort() from None
        except FingrabError as e:
            raise click.ClickException(f"{name}: export: {e}") from e

        for account in result:
            click.echo(account.id)

    return group
