"""
Forecast Package

Expansion of recurring rules into dated occurrences and the monthly
figures derived from them.
"""

from .cadence import expand_rule, occurrence_dates
from .expander import (
    expand_rules,
    monthly_equivalent_totals,
    monthly_occurrence_totals,
    split_by_type,
)

__all__ = [
    "expand_rule",
    "expand_rules",
    "monthly_equivalent_totals",
    "monthly_occurrence_totals",
    "occurrence_dates",
    "split_by_type",
]
