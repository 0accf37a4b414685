#!/usr/bin/env python3
"""
Main CLI Entry Point for fingrab

Provides the ``fingrab`` command: one sub-group per supported bank plus the
``version`` and ``config`` utility commands.
"""

import click

# Importing the provider and formatter packages registers them.
from .. import formatters, monzo, starling  # noqa: F401
from ..core.config import get_config
from ..export import all_types
from .bank import bank_group


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--no-colour", is_flag=True, help="Disable coloured log output")
@click.pass_context
def main(ctx: click.Context, verbose: bool, no_colour: bool) -> None:
    """
    fingrab - export bank transactions to CSV

    Fetches transactions from Monzo or Starling and writes them in a format
    MoneyDance or YNAB can import.
    """
    # Ensure context object exists
    ctx.ensure_object(dict)

    try:
        config = get_config()
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    config.setup_logging(verbose=verbose, colour=not no_colour)

    # Store global options
    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = config


@main.command()
def version() -> None:
    """Show version information."""
    from fingrab import __author__, __version__

    click.echo(f"fingrab v{__version__}")
    click.echo(f"Author: {__author__}")


@main.command()
@click.pass_context
def config(ctx: click.Context) -> None:
    """Show current configuration (secrets redacted)."""
    settings = ctx.obj["config"].to_dict()

    click.echo("Current Configuration:")
    click.echo(f"  Environment: {settings['environment']}")
    click.echo(f"  Log Level: {settings['log_level']}")
    click.echo(f"  Timeout: {settings['timeout']}s")
    click.echo(f"  Timezone: {settings['timezone']}")
    click.echo(f"  Default Format: {settings['default_format']}")
    for bank in ("monzo", "starling"):
        bank_settings = settings[bank]
        click.echo(f"  {bank.capitalize()}:")
        click.echo(f"    Base URL: {bank_settings['base_url']}")
        click.echo(f"    Token: {bank_settings['token'] or 'not set'}")
        click.echo(f"    Client ID: {bank_settings['client_id'] or 'not set'}")
        click.echo(f"    Client Secret: {bank_settings['client_secret'] or 'not set'}")


for _export_type in all_types():
    main.add_command(bank_group(_export_type))


if __name__ == "__main__":
    main()
