#!/usr/bin/env python3
"""
Balance Anchor Resolution

An anchor records a known balance on a date. The balance on any later date is
the most recent anchor at or before it plus the signed ledger movements after
the anchor date, up to and including the query date.

Transactions dated on the anchor day are treated as already reflected in the
anchored balance, so replay starts strictly after the anchor date.
"""

import logging
from collections.abc import Iterable, Sequence

from ..core.dates import iter_days
from ..core.models import BalanceAnchor, LedgerEntry, SavingsAnchor, TransactionType

logger = logging.getLogger(__name__)

# Entry types that increase the cash balance; everything else decreases it
_INFLOW_TYPES = frozenset({TransactionType.INCOME, TransactionType.ADJUSTMENT})


def sort_anchors(anchors: Iterable[BalanceAnchor]) -> list[BalanceAnchor]:
    """Anchors newest first; anchors sharing a date keep their input order."""
    return sorted(anchors, key=lambda a: a.date, reverse=True)


def sort_savings_anchors(anchors: Iterable[SavingsAnchor]) -> list[SavingsAnchor]:
    """Savings anchors grouped by goal id, newest first within each goal."""
    newest_first = sorted(anchors, key=lambda a: a.date, reverse=True)
    return sorted(newest_first, key=lambda a: a.savings_goal_id)


def get_active_anchor(sorted_anchors: Sequence[BalanceAnchor], as_of: str) -> BalanceAnchor | None:
    """
    Most recent anchor dated on or before as_of.

    Args:
        sorted_anchors: Anchors from sort_anchors (newest first)
        as_of: ISO query date

    Returns:
        The active anchor, or None when every anchor is later than as_of
    """
    for anchor in sorted_anchors:
        if anchor.date <= as_of:
            return anchor
    return None


def get_active_savings_anchor(
    sorted_anchors: Sequence[SavingsAnchor], savings_goal_id: str, as_of: str
) -> SavingsAnchor | None:
    """Most recent anchor of one savings goal dated on or before as_of."""
    for anchor in sorted_anchors:
        if anchor.savings_goal_id == savings_goal_id and anchor.date <= as_of:
            return anchor
    return None


def earliest_anchor_date(anchors: Iterable[BalanceAnchor | SavingsAnchor]) -> str | None:
    """Date of the oldest anchor, or None without anchors."""
    return min((a.date for a in anchors), default=None)


def signed_amount(entry: LedgerEntry) -> int:
    """Effect of a ledger entry on the cash balance."""
    if entry.type in _INFLOW_TYPES:
        return entry.amount_cents
    return -entry.amount_cents


def replay_balance(anchor: BalanceAnchor, ledger: Iterable[LedgerEntry], as_of: str) -> int:
    """
    Anchor balance plus every signed movement in (anchor.date, as_of].

    Args:
        anchor: Starting anchor
        ledger: Ledger entries in any order
        as_of: ISO query date

    Returns:
        Balance in cents
    """
    balance = anchor.balance_cents
    for entry in ledger:
        if anchor.date < entry.date <= as_of:
            balance += signed_amount(entry)
    return balance


def resolve_balance(anchors: Iterable[BalanceAnchor], ledger: Iterable[LedgerEntry], as_of: str) -> int | None:
    """
    Cash balance on a date.

    Args:
        anchors: Balance anchors in any order
        ledger: Ledger entries
        as_of: ISO query date

    Returns:
        Balance in cents, or None when no anchor is at or before as_of
    """
    anchor = get_active_anchor(sort_anchors(anchors), as_of)
    if anchor is None:
        logger.debug("No balance anchor on or before %s", as_of)
        return None
    return replay_balance(anchor, ledger, as_of)


def resolve_savings_balance(
    savings_anchors: Iterable[SavingsAnchor],
    ledger: Iterable[LedgerEntry],
    savings_goal_id: str,
    as_of: str,
) -> int:
    """
    Balance of one savings goal on a date.

    Savings entries of the goal contribute their stored amount as-is, so
    withdrawals (stored negative) reduce the goal. Without an anchor the goal
    is replayed from zero across its whole history.

    Args:
        savings_anchors: Savings anchors of any goals
        ledger: Ledger entries
        savings_goal_id: Goal to resolve
        as_of: ISO query date

    Returns:
        Goal balance in cents
    """
    anchor = get_active_savings_anchor(sort_savings_anchors(savings_anchors), savings_goal_id, as_of)
    balance = anchor.balance_cents if anchor else 0
    after = anchor.date if anchor else ""

    for entry in ledger:
        if entry.type != TransactionType.SAVINGS or entry.savings_goal_id != savings_goal_id:
            continue
        if after < entry.date <= as_of:
            balance += entry.amount_cents
    return balance


def daily_balance_series(
    anchors: Iterable[BalanceAnchor],
    ledger: Iterable[LedgerEntry],
    start: str,
    end: str,
) -> list[tuple[str, int | None]]:
    """
    Balance for every day of [start, end].

    Days before the first anchor carry None. When a newer anchor takes effect
    the series resets to its recorded balance.

    Returns:
        List of (ISO date, balance cents or None), one per day
    """
    sorted_anchors = sort_anchors(anchors)
    entries = list(ledger)
    series: list[tuple[str, int | None]] = []
    for day in iter_days(start, end):
        anchor = get_active_anchor(sorted_anchors, day)
        series.append((day, replay_balance(anchor, entries, day) if anchor else None))
    return series
