#!/usr/bin/env python3
"""
Forecast Expansion Across Rules

Combines the occurrences of many rules into one chronological series and
derives the monthly figures budgets and charts display.
"""

import logging
from collections.abc import Iterable

import pandas as pd

from ..core.currency import to_monthly_cents
from ..core.dates import get_months_between
from ..core.models import ForecastType, Occurrence, RecurringRule
from .cadence import expand_rule

logger = logging.getLogger(__name__)


def expand_rules(rules: Iterable[RecurringRule], window_start: str, window_end: str) -> list[Occurrence]:
    """
    Expand every rule over the window and merge the results.

    Args:
        rules: Recurring rules in display order
        window_start: ISO window start, inclusive
        window_end: ISO window end, inclusive

    Returns:
        Occurrences sorted by date; occurrences on the same date keep rule order
    """
    expanded: list[Occurrence] = []
    for rule in rules:
        expanded.extend(expand_rule(rule, window_start, window_end))
    expanded.sort(key=lambda o: o.date)
    return expanded


def split_by_type(occurrences: Iterable[Occurrence]) -> dict[ForecastType, list[Occurrence]]:
    """Group occurrences into income, expense and savings lists (order kept)."""
    grouped: dict[ForecastType, list[Occurrence]] = {t: [] for t in ForecastType}
    for occurrence in occurrences:
        grouped[occurrence.type].append(occurrence)
    return grouped


def monthly_equivalent_totals(rules: Iterable[RecurringRule]) -> dict[ForecastType, int]:
    """
    Smooth monthly figure per forecast type.

    Each rule contributes its cadence-converted monthly amount, so a yearly
    bill shows up as one twelfth in every month rather than a lump sum.
    """
    totals = {t: 0 for t in ForecastType}
    for rule in rules:
        totals[rule.type] += to_monthly_cents(rule.amount_cents, rule.cadence)
    return totals


def monthly_occurrence_totals(
    occurrences: Iterable[Occurrence], window_start: str, window_end: str
) -> dict[str, dict[str, int]]:
    """
    Dense month-by-month totals of occurrences per type.

    Every month overlapping the window appears, with zeros where nothing falls.

    Args:
        occurrences: Occurrences (typically from expand_rules over the same window)
        window_start: ISO window start
        window_end: ISO window end

    Returns:
        {"YYYY-MM": {"income": cents, "expense": cents, "savings": cents}}
    """
    months = get_months_between(window_start, window_end)
    type_names = [t.value for t in ForecastType]

    records = [
        {"month": o.date[:7], "type": o.type.value, "amount_cents": o.amount_cents} for o in occurrences
    ]
    if records:
        df = pd.DataFrame.from_records(records)
        table = df.pivot_table(index="month", columns="type", values="amount_cents", aggfunc="sum", fill_value=0)
    else:
        table = pd.DataFrame()

    table = table.reindex(index=months, columns=type_names, fill_value=0).fillna(0)
    logger.debug("Aggregated occurrences into %d months", len(months))

    return {month: {name: int(table.at[month, name]) for name in type_names} for month in months}
