#!/usr/bin/env python3
"""
Shared CLI helpers: loading backups and parsing option values.
"""

from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import click

from ..core.currency import parse_cents_from_input
from ..core.dates import parse_iso_date
from ..core.exceptions import AmountTooLargeError, BackupValidationError
from ..core.json_utils import read_text
from ..imports.backup import EngineData, load_backup


def load_engine_data(path: str | Path, scenario_id: str | None = None) -> EngineData:
    """Read, validate and convert a backup file, turning failures into CLI errors."""
    try:
        backup = load_backup(read_text(path))
    except OSError as e:
        raise click.ClickException(f"Could not read {path}: {e}") from e
    except BackupValidationError as e:
        raise click.ClickException(str(e)) from e
    return backup.to_engine(scenario_id)


def validate_date(ctx: click.Context, param: click.Parameter, value: str | None) -> str | None:
    """Click callback accepting YYYY-MM-DD dates."""
    if value is None:
        return None
    try:
        return parse_iso_date(value).isoformat()
    except ValueError as e:
        raise click.BadParameter(f"expected YYYY-MM-DD, got {value!r}") from e


def validate_amount(ctx: click.Context, param: click.Parameter, value: str | None) -> int | None:
    """Click callback turning a dollar amount into cents."""
    if value is None:
        return None
    try:
        return parse_cents_from_input(value)
    except AmountTooLargeError as e:
        raise click.BadParameter(str(e)) from e


def validate_timezone(ctx: click.Context, param: click.Parameter, value: str | None) -> str | None:
    """Click callback accepting IANA timezone names."""
    if value is None:
        return None
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise click.BadParameter(f"unknown timezone {value!r}") from e
    return value
