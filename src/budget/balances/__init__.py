"""
Balances Package

Current and historical balances derived from anchors and the ledger.
"""

from .anchors import (
    daily_balance_series,
    earliest_anchor_date,
    get_active_anchor,
    get_active_savings_anchor,
    replay_balance,
    resolve_balance,
    resolve_savings_balance,
    signed_amount,
    sort_anchors,
    sort_savings_anchors,
)

__all__ = [
    "daily_balance_series",
    "earliest_anchor_date",
    "get_active_anchor",
    "get_active_savings_anchor",
    "replay_balance",
    "resolve_balance",
    "resolve_savings_balance",
    "signed_amount",
    "sort_anchors",
    "sort_savings_anchors",
]
