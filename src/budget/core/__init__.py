"""
Core Utilities Package

Shared primitives used by every engine package:
- Integer-cent money handling and cadence conversion
- ISO calendar date helpers
- Typed domain models
- Configuration management and diagnostics
"""

from .config import (
    Config,
    Environment,
    get_config,
    is_test,
    reload_config,
)
from .currency import (
    MAX_AMOUNT_CENTS,
    cents_to_dollars_str,
    dollars_to_cents,
    format_cents,
    format_cents_short,
    from_monthly_cents,
    parse_cents_from_input,
    round_half_away,
    to_monthly_cents,
    validate_amount_cents,
)
from .dates import calendar_day_distance, format_iso_date, get_months_between, parse_iso_date
from .diagnostics import BufferHandler, ConsoleCategoryFilter, LogBuffer, LogEntry, capture_logs, parse_debug_categories
from .exceptions import AmountTooLargeError, BackupValidationError
from .models import (
    BalanceAnchor,
    Cadence,
    Compounding,
    ForecastType,
    ImportBatch,
    InterestRateEntry,
    LedgerEntry,
    Occurrence,
    ParsedTransaction,
    RecurringRule,
    SavingsAnchor,
    SavingsGoal,
    SkippedRow,
    TransactionType,
)

__all__ = [
    "MAX_AMOUNT_CENTS",
    "AmountTooLargeError",
    "BackupValidationError",
    "BalanceAnchor",
    "BufferHandler",
    "Cadence",
    "Compounding",
    "Config",
    "ConsoleCategoryFilter",
    "Environment",
    "ForecastType",
    "ImportBatch",
    "InterestRateEntry",
    "LedgerEntry",
    "LogBuffer",
    "LogEntry",
    "Occurrence",
    "ParsedTransaction",
    "RecurringRule",
    "SavingsAnchor",
    "SavingsGoal",
    "SkippedRow",
    "TransactionType",
    "calendar_day_distance",
    "capture_logs",
    "cents_to_dollars_str",
    "dollars_to_cents",
    "format_cents",
    "format_cents_short",
    "format_iso_date",
    "from_monthly_cents",
    "get_config",
    "get_months_between",
    "is_test",
    "parse_cents_from_input",
    "parse_debug_categories",
    "reload_config",
    "round_half_away",
    "to_monthly_cents",
    "validate_amount_cents",
]
