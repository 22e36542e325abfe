#!/usr/bin/env python3
"""
Similar Transaction Detection

Flags likely duplicates while a transaction or forecast rule is being entered
by hand. A candidate is similar when its description matches
(case-insensitive, trimmed), its absolute amount is equal, and for dated
records it lies within a few calendar days.

Amounts are compared sign-agnostically so a savings withdrawal stored as a
negative amount still matches a positive query.
"""

import logging
from collections.abc import Iterable
from typing import TypeVar

from ..core.dates import calendar_day_distance
from ..core.models import LedgerEntry, RecurringRule

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 3

T = TypeVar("T", LedgerEntry, RecurringRule)


def _normalize(description: str) -> str:
    return description.strip().lower()


def _same_description_and_amount(candidate: T, description: str, amount_cents: int) -> bool:
    return _normalize(candidate.description) == description and abs(candidate.amount_cents) == amount_cents


def find_similar_transactions(
    description: str,
    amount_cents: int,
    date: str,
    candidates: Iterable[LedgerEntry],
    exclude_id: str | None = None,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> list[LedgerEntry]:
    """
    Transactions that look like the one being entered.

    Args:
        description: Description being entered
        amount_cents: Amount being entered (sign ignored)
        date: ISO date being entered
        candidates: Existing ledger entries
        exclude_id: Id of the entry being edited, never reported
        window_days: Maximum calendar-day distance, inclusive

    Returns:
        Matching entries in candidate order; empty for a blank description or
        a zero amount
    """
    target = _normalize(description)
    amount = abs(amount_cents)
    if not target or amount == 0:
        return []

    matches = [
        c
        for c in candidates
        if c.id != exclude_id
        and _same_description_and_amount(c, target, amount)
        and calendar_day_distance(c.date, date) <= window_days
    ]
    if matches:
        logger.debug("Found %d similar transactions for %r", len(matches), description)
    return matches


def find_similar_forecast_rules(
    description: str,
    amount_cents: int,
    rules: Iterable[RecurringRule],
    exclude_id: str | None = None,
) -> list[RecurringRule]:
    """Forecast rules with the same description and absolute amount (rules are undated)."""
    target = _normalize(description)
    amount = abs(amount_cents)
    if not target or amount == 0:
        return []
    return [r for r in rules if r.id != exclude_id and _same_description_and_amount(r, target, amount)]
