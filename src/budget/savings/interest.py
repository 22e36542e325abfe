#!/usr/bin/env python3
"""
Interest Schedule Resolution and Compounding

Resolves the annual rate that applies to a savings goal on any date and
compounds balances over time.

Rates are percentages on a 0-100 scale (4.5 means 4.5% p.a.). Balances stay in
integer cents; only the growth factor is computed in floating point and the
result is rounded half away from zero.
"""

import logging
from dataclasses import dataclass
from datetime import date

from ..core.currency import round_half_away
from ..core.dates import get_months_between
from ..core.models import Compounding, SavingsGoal

logger = logging.getLogger(__name__)

# Simulation cap for goal completion estimates (50 years)
DEFAULT_MAX_MONTHS = 600


@dataclass(frozen=True)
class GoalProjection:
    """Estimated month a savings goal is reached."""

    month: str  # "YYYY-MM", or "reached" when the goal is already met
    months_away: int


@dataclass(frozen=True)
class InterestAccrual:
    """Interest credited to a goal for one month."""

    month: str
    rate: float
    interest_cents: int
    balance_cents: int


def get_effective_rate(goal: SavingsGoal, on_date: str) -> float:
    """
    Annual interest rate in effect for a goal on a date.

    The schedule is walked in ascending effective_date order, keeping the last
    entry dated on or before the query date. Entries sharing a date keep their
    list order, so the later one wins.

    Args:
        goal: Savings goal with optional base rate and schedule
        on_date: ISO query date

    Returns:
        Rate in percent; the goal's base rate (or 0) when no entry applies
    """
    rate = goal.annual_interest_rate or 0
    for entry in sorted(goal.interest_rate_schedule, key=lambda e: e.effective_date):
        if entry.effective_date <= on_date:
            rate = entry.annual_rate
        else:
            break
    return rate


def calculate_compound_interest(
    principal_cents: int,
    annual_rate_percent: float,
    compounding: Compounding | str,
    years: float,
) -> int:
    """
    Final balance after compounding: P * (1 + r/n) ** (n * t).

    Args:
        principal_cents: Starting balance in cents
        annual_rate_percent: Annual rate in percent
        compounding: yearly, monthly or daily
        years: Duration in years (fractions allowed)

    Returns:
        Final balance in cents; the principal unchanged when the rate or the
        duration is not positive

    Example:
        calculate_compound_interest(10000, 10, "yearly", 2) -> 12100
    """
    if annual_rate_percent <= 0 or years <= 0:
        return principal_cents

    periods = Compounding(compounding).periods_per_year
    rate = annual_rate_percent / 100
    growth = (1 + rate / periods) ** (periods * years)
    return round_half_away(principal_cents * growth)


def calculate_interest_earned(
    principal_cents: int,
    annual_rate_percent: float,
    compounding: Compounding | str,
    years: float,
) -> int:
    """Interest portion of calculate_compound_interest (final balance minus principal)."""
    return calculate_compound_interest(principal_cents, annual_rate_percent, compounding, years) - principal_cents


def _add_months(start: date, months: int) -> str:
    total = start.year * 12 + (start.month - 1) + months
    return f"{total // 12:04d}-{total % 12 + 1:02d}"


def estimate_goal_completion(
    current_balance_cents: int,
    target_cents: int,
    avg_monthly_contribution_cents: float,
    annual_rate_percent: float | None,
    *,
    max_months: int = DEFAULT_MAX_MONTHS,
    today: date | None = None,
) -> GoalProjection | None:
    """
    Estimate when a savings goal will be reached.

    Simulates month by month: add the average contribution, then credit one
    month of interest on the new balance.

    Args:
        current_balance_cents: Balance today
        target_cents: Goal target
        avg_monthly_contribution_cents: Average monthly contribution
        annual_rate_percent: Annual rate in percent (None or 0 for no interest)
        max_months: Simulation cap
        today: Reference date for the returned month (default: today)

    Returns:
        GoalProjection, or None when the goal cannot be reached within max_months
    """
    if target_cents <= 0:
        return None
    if current_balance_cents >= target_cents:
        return GoalProjection(month="reached", months_away=0)

    rate = annual_rate_percent or 0
    if avg_monthly_contribution_cents <= 0 and rate <= 0:
        return None

    monthly_rate = rate / 100 / 12
    balance = float(current_balance_cents)
    months = 0
    while balance < target_cents and months < max_months:
        balance += avg_monthly_contribution_cents
        balance += balance * monthly_rate
        months += 1

    if balance < target_cents:
        logger.debug("Goal of %d cents not reachable within %d months", target_cents, max_months)
        return None

    reference = today or date.today()
    return GoalProjection(month=_add_months(reference, months), months_away=months)


def project_monthly_interest(
    goal: SavingsGoal,
    opening_balance_cents: int,
    start_date: str,
    end_date: str,
) -> list[InterestAccrual]:
    """
    Accrue monthly interest on a goal across rate-schedule changes.

    Each month compounds once at the rate effective on that month's first day
    (the first month uses start_date), so a rate change applies from the month
    it takes effect.

    Args:
        goal: Savings goal providing the base rate and schedule
        opening_balance_cents: Balance at start_date
        start_date: ISO start of the projection
        end_date: ISO end of the projection

    Returns:
        One InterestAccrual per month in the window
    """
    balance = opening_balance_cents
    accruals: list[InterestAccrual] = []
    for index, month in enumerate(get_months_between(start_date, end_date)):
        rate_date = start_date if index == 0 else f"{month}-01"
        rate = get_effective_rate(goal, rate_date)
        interest = round_half_away(balance * rate / 100 / 12) if rate > 0 and balance > 0 else 0
        balance += interest
        accruals.append(InterestAccrual(month=month, rate=rate, interest_cents=interest, balance_cents=balance))
    return accruals
