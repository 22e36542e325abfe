#!/usr/bin/env python3
"""
Main CLI Entry Point for the Budget Engine

Thin command-line surface over the engine: reads backups and CSV files,
calls the engine, prints results.
"""

import logging
import os

import click

from ..core.config import get_config


@click.group()
@click.option(
    "--config-env",
    type=click.Choice(["development", "test", "production"]),
    help="Override environment configuration",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_env: str | None, verbose: bool, debug: bool) -> None:
    """
    Budget Engine - Forecasts, balances and bank imports

    Projects recurring income and expenses, resolves anchored balances and
    previews bank CSV imports against an exported backup.
    """
    ctx.ensure_object(dict)

    if config_env:
        os.environ["BUDGET_ENV"] = config_env

    if debug:
        os.environ["LOG_LEVEL"] = "DEBUG"
        logging.getLogger("budget").setLevel(logging.DEBUG)

    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug
    ctx.obj["config"] = get_config()

    if verbose:
        click.echo(f"Environment: {ctx.obj['config'].environment.value}")

    if debug:
        click.echo("Debug logging enabled")


@main.command()
def version() -> None:
    """Show version information."""
    from budget import __author__, __version__

    click.echo(f"Budget Engine v{__version__}")
    click.echo(f"Author: {__author__}")


@main.command()
@click.pass_context
def config(ctx: click.Context) -> None:
    """Show current configuration."""
    config_obj = ctx.obj["config"]

    click.echo("Current Configuration:")
    click.echo(f"  Environment: {config_obj.environment.value}")
    click.echo(f"  Debug Mode: {config_obj.debug}")
    click.echo(f"  Log Level: {config_obj.log_level}")
    click.echo(f"  Import Source: {config_obj.imports.source_tag}")
    click.echo(f"  Import Timezone: {config_obj.imports.timezone or 'timestamp offset'}")
    click.echo(f"  Similarity Window: {config_obj.projection.similarity_window_days} days")
    click.echo(f"  Projection Limit: {config_obj.projection.max_projection_months} months")
    click.echo(f"  Log Buffer Size: {config_obj.diagnostics.buffer_size}")
    categories = ", ".join(config_obj.diagnostics.debug_categories) or "none"
    click.echo(f"  Debug Categories: {categories}")


from .forecast import balance, forecast  # noqa: E402
from .imports import import_csv, similar  # noqa: E402

main.add_command(forecast)
main.add_command(balance)
main.add_command(import_csv)
main.add_command(similar)


if __name__ == "__main__":
    main()
