"""
Savings Package

Interest rate schedules, compounding and goal completion estimates.
"""

from .interest import (
    GoalProjection,
    InterestAccrual,
    calculate_compound_interest,
    calculate_interest_earned,
    estimate_goal_completion,
    get_effective_rate,
    project_monthly_interest,
)

__all__ = [
    "GoalProjection",
    "InterestAccrual",
    "calculate_compound_interest",
    "calculate_interest_earned",
    "estimate_goal_completion",
    "get_effective_rate",
    "project_monthly_interest",
]
