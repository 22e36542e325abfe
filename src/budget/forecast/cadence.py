#!/usr/bin/env python3
"""
Cadence Expansion

Expands a recurring rule into the concrete dates it falls on inside a window.

Expansion is pure and deterministic: the same rule and window always give the
same occurrences, and a wider window always gives a superset of a narrower
one.

Anchoring per cadence:
- weekly: every day_of_week in the window
- fortnightly: every second day_of_week, counted from the rule's own start
  (or a fixed epoch) so parity never depends on the query window
- monthly / quarterly / yearly: day_of_month in the selected month, clamped to
  the month's last day (31 -> Feb 28/29)
"""

import logging
from collections.abc import Iterator
from datetime import date, timedelta

from ..core.dates import clamped_date, parse_iso_date
from ..core.models import Cadence, Occurrence, RecurringRule

logger = logging.getLogger(__name__)

# Parity reference for fortnightly rules without a start date
FORTNIGHT_EPOCH = date(1970, 1, 1)


def sunday_weekday(value: date) -> int:
    """Day of week with Sunday as 0 and Saturday as 6."""
    return (value.weekday() + 1) % 7


def _clamp(value: int | None, low: int, high: int, default: int) -> int:
    if value is None:
        return default
    return max(low, min(high, int(value)))


def first_weekday_on_or_after(value: date, day_of_week: int) -> date:
    """First date on or after value falling on day_of_week (0 = Sunday)."""
    return value + timedelta(days=(day_of_week - sunday_weekday(value)) % 7)


def effective_window(rule: RecurringRule, window_start: str, window_end: str) -> tuple[date, date] | None:
    """
    Intersect the query window with the rule's own lifetime.

    Returns:
        (start, end) dates, or None when the intersection is empty
    """
    start = window_start
    end = window_end
    if rule.start_date and rule.start_date > start:
        start = rule.start_date
    if rule.end_date and rule.end_date < end:
        end = rule.end_date
    if start > end:
        return None
    return parse_iso_date(start), parse_iso_date(end)


def weekly_dates(start: date, end: date, day_of_week: int) -> Iterator[date]:
    """Every day_of_week between start and end inclusive."""
    current = first_weekday_on_or_after(start, day_of_week)
    while current <= end:
        yield current
        current += timedelta(weeks=1)


def fortnightly_dates(start: date, end: date, day_of_week: int, anchor: date) -> Iterator[date]:
    """
    Every second day_of_week between start and end, phased from anchor.

    The first occurrence of day_of_week on or after anchor fixes the parity;
    the window only selects which members of that fixed series are returned.
    """
    reference = first_weekday_on_or_after(anchor, day_of_week)
    offset_days = (start - reference).days
    periods = -(-offset_days // 14)  # ceiling division
    current = reference + timedelta(days=14 * periods)
    while current <= end:
        yield current
        current += timedelta(days=14)


def _month_dates(start: date, end: date, first_month: int, step: int, day_of_month: int) -> Iterator[date]:
    """
    Dates on day_of_month every `step` months, beginning in the period containing start.

    Args:
        first_month: 1-based month of the first candidate in start's year
        step: months between candidates (1, 3 or 12)
    """
    year, month = start.year, first_month
    while True:
        candidate = clamped_date(year, month, day_of_month)
        if candidate > end:
            return
        if candidate >= start:
            yield candidate
        month += step
        while month > 12:
            month -= 12
            year += 1


def occurrence_dates(rule: RecurringRule, window_start: str, window_end: str) -> list[date]:
    """
    Dates a rule falls on within [window_start, window_end].

    Out-of-range day fields are clamped rather than rejected.

    Args:
        rule: Recurring rule (never mutated)
        window_start: ISO window start, inclusive
        window_end: ISO window end, inclusive

    Returns:
        Ascending list of dates, empty when nothing falls inside the window
    """
    window = effective_window(rule, window_start, window_end)
    if window is None:
        return []
    start, end = window

    day_of_week = _clamp(rule.day_of_week, 0, 6, 0)
    day_of_month = _clamp(rule.day_of_month, 1, 31, 1)
    cadence = Cadence(rule.cadence)

    if cadence == Cadence.WEEKLY:
        dates = weekly_dates(start, end, day_of_week)
    elif cadence == Cadence.FORTNIGHTLY:
        anchor = parse_iso_date(rule.start_date) if rule.start_date else FORTNIGHT_EPOCH
        dates = fortnightly_dates(start, end, day_of_week, anchor)
    elif cadence == Cadence.MONTHLY:
        dates = _month_dates(start, end, start.month, 1, day_of_month)
    elif cadence == Cadence.QUARTERLY:
        month_of_quarter = _clamp(rule.month_of_quarter, 0, 2, 0)
        quarter_start = (start.month - 1) // 3 * 3 + 1
        dates = _month_dates(start, end, quarter_start + month_of_quarter, 3, day_of_month)
    else:
        month_of_year = _clamp(rule.month_of_year, 0, 11, 0)
        dates = _month_dates(start, end, month_of_year + 1, 12, day_of_month)

    excluded = set(rule.excluded_dates)
    return [d for d in dates if d.isoformat() not in excluded]


def expand_rule(rule: RecurringRule, window_start: str, window_end: str) -> list[Occurrence]:
    """
    Expand a recurring rule into occurrences over a window.

    Args:
        rule: Recurring rule template
        window_start: ISO window start, inclusive
        window_end: ISO window end, inclusive

    Returns:
        Occurrences sorted ascending by date
    """
    occurrences = [
        Occurrence(
            date=d.isoformat(),
            amount_cents=rule.amount_cents,
            source_rule_id=rule.id,
            type=rule.type,
            description=rule.description,
            category_id=rule.category_id,
            savings_goal_id=rule.savings_goal_id,
        )
        for d in occurrence_dates(rule, window_start, window_end)
    ]
    logger.debug(
        "Expanded rule %s (%s) into %d occurrences for %s..%s",
        rule.id,
        Cadence(rule.cadence).value,
        len(occurrences),
        window_start,
        window_end,
    )
    return occurrences
