"""
Matching Package

Near-duplicate detection for hand-entered transactions and forecast rules.
"""

from .similarity import find_similar_forecast_rules, find_similar_transactions

__all__ = ["find_similar_forecast_rules", "find_similar_transactions"]
