#!/usr/bin/env python3
"""
Import and Matching CLI Commands

Previews a bank CSV import against an exported backup and looks up
near-duplicate transactions.
"""

from collections import Counter

import click

from ..core.config import get_config
from ..core.currency import format_cents
from ..core.diagnostics import LogBuffer, capture_logs, parse_debug_categories
from ..core.json_utils import read_text
from ..imports.csv_rows import read_csv_rows
from ..imports.dedup import reconcile_batches
from ..imports.generic_csv import auto_detect_mapping, parse_generic_csv
from ..imports.rules import apply_rules_to_batch
from ..imports.up_csv import parse_up_csv
from ..matching.similarity import find_similar_forecast_rules, find_similar_transactions
from .common import load_engine_data, validate_amount, validate_date, validate_timezone


@click.command("import-csv")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--backup", type=click.Path(exists=True, dir_okay=False), help="Backup to reconcile against")
@click.option(
    "--format",
    "csv_format",
    type=click.Choice(["up", "generic"]),
    default="up",
    help="CSV layout (default: up)",
)
@click.option("--tz", callback=validate_timezone, help="IANA timezone for bank timestamps (overrides BUDGET_TIMEZONE)")
@click.option("--show-log", is_flag=True, help="Print buffered diagnostics after the preview")
@click.pass_context
def import_csv(
    ctx: click.Context,
    csv_file: str,
    backup: str | None,
    csv_format: str,
    tz: str | None,
    show_log: bool,
) -> None:
    """
    Preview a bank CSV import without writing anything.

    Examples:
      budget import-csv up-export.csv
      budget import-csv up-export.csv --backup backup.json --tz Australia/Sydney
      budget import-csv bank.csv --format generic
    """
    config = get_config()
    buffer = LogBuffer(config.diagnostics.buffer_size)
    categories = parse_debug_categories(",".join(config.diagnostics.debug_categories))

    with capture_logs(buffer, categories):
        raw_text = read_text(csv_file)
        if csv_format == "up":
            batch = parse_up_csv(raw_text, tz=tz or config.imports.timezone, source=config.imports.source_tag)
            transactions, skipped, errors = batch.transactions, batch.skipped, batch.errors
            warnings: list[str] = []
        else:
            mapping = auto_detect_mapping(read_csv_rows(raw_text).headers)
            amount_mode = "single" if mapping.amount else "split"
            result = parse_generic_csv(raw_text, mapping, amount_mode)
            transactions, skipped, errors, warnings = result.transactions, [], result.errors, result.warnings

        existing: set[str] = set()
        rules = []
        if backup:
            data = load_engine_data(backup)
            existing = data.existing_fingerprints()
            rules = data.category_rules

        reconciled = reconcile_batches([transactions], existing)
        categorized = apply_rules_to_batch(reconciled.unique, rules)

    click.echo(f"New transactions: {len(reconciled.unique)}")
    click.echo(f"Already imported: {len(reconciled.duplicates)}")
    click.echo(f"Repeated in file: {len(reconciled.cross_batch_duplicates)}")
    click.echo(f"Skipped rows: {len(skipped)}")
    if rules:
        click.echo(f"Matched by category rules: {len(categorized)}")

    for reason, count in Counter(row.reason for row in skipped).most_common():
        click.echo(f"  {reason}: {count}")

    if ctx.obj.get("verbose", False):
        for transaction in reconciled.unique:
            click.echo(
                f"  {transaction.date}  {transaction.type.value:<7} "
                f"{format_cents(transaction.amount_cents):>12}  {transaction.description}"
            )

    for message in warnings:
        click.echo(f"Warning: {message}", err=True)
    for message in errors:
        click.echo(f"Error: {message}", err=True)

    if show_log:
        click.echo(buffer.export_json())


@click.command()
@click.argument("backup", type=click.Path(exists=True, dir_okay=False))
@click.option("--description", required=True, help="Description being entered")
@click.option("--amount", required=True, callback=validate_amount, help="Amount in dollars, e.g. 50.00")
@click.option("--date", "on_date", callback=validate_date, help="Transaction date (YYYY-MM-DD)")
@click.option("--exclude-id", help="Id of the record being edited")
def similar(backup: str, description: str, amount: int, on_date: str | None, exclude_id: str | None) -> None:
    """
    List transactions (or, without --date, forecast rules) similar to a new entry.

    Examples:
      budget similar backup.json --description Groceries --amount 50 --date 2026-01-15
      budget similar backup.json --description Rent --amount 2000
    """
    data = load_engine_data(backup)

    if on_date is None:
        rules = find_similar_forecast_rules(description, amount, data.forecast_rules, exclude_id)
        if not rules:
            click.echo("No similar forecast rules")
            return
        for rule in rules:
            click.echo(f"{rule.id}  {rule.cadence.value:<11} {format_cents(rule.amount_cents):>12}  {rule.description}")
        return

    window = get_config().projection.similarity_window_days
    matches = find_similar_transactions(description, amount, on_date, data.transactions, exclude_id, window)
    if not matches:
        click.echo("No similar transactions")
        return
    for entry in matches:
        click.echo(f"{entry.id}  {entry.date}  {format_cents(entry.amount_cents):>12}  {entry.description}")
