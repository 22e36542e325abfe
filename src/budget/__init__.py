"""
Budget Engine - Forecasts, Balances and Bank Imports

Pure computation behind a personal budgeting app: expands recurring rules
into dated occurrences, resolves anchored balances and interest schedules,
and reconciles bank CSV exports against an existing ledger.

Domain Packages:
- core: Money and date primitives, models, configuration, diagnostics
- forecast: Cadence expansion and monthly figures
- savings: Interest schedules, compounding and goal projections
- balances: Anchor-based balance resolution
- imports: Bank CSV parsing, fingerprints, category rules, backups
- matching: Near-duplicate detection for hand-entered records
- cli: Command-line interface

Example Usage:
    from budget.forecast import expand_rules
    from budget.balances import resolve_balance
    from budget.imports import parse_up_csv, filter_duplicates
"""

__version__ = "0.1.0"
__author__ = "Budget Engine Contributors"

from .core.config import Environment, get_config
from .core.currency import format_cents, from_monthly_cents, to_monthly_cents
from .core.models import (
    BalanceAnchor,
    Cadence,
    ForecastType,
    LedgerEntry,
    Occurrence,
    RecurringRule,
    SavingsGoal,
)

__all__ = [
    "BalanceAnchor",
    "Cadence",
    "Environment",
    "ForecastType",
    "LedgerEntry",
    "Occurrence",
    "RecurringRule",
    "SavingsGoal",
    "format_cents",
    "from_monthly_cents",
    "get_config",
    "to_monthly_cents",
]
