#!/usr/bin/env python3
"""
Category Rules

User-defined rules that assign a category to imported transactions by
matching their description, optionally constrained by amount and type.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..core.models import ParsedTransaction, TransactionType

logger = logging.getLogger(__name__)


class MatchType(Enum):
    """How match_value is compared to the description (case-insensitive)."""

    CONTAINS = "contains"
    STARTS_WITH = "startsWith"
    EQUALS = "equals"


@dataclass(frozen=True)
class CategoryRule:
    """A description matcher that assigns category_id. Lower priority runs first."""

    id: str
    match_type: MatchType
    match_value: str
    category_id: str
    amount_min_cents: int | None = None
    amount_max_cents: int | None = None
    transaction_type: TransactionType | None = None
    priority: int = 0
    enabled: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CategoryRule":
        """Create CategoryRule from an exported rule dict."""
        transaction_type = data.get("transactionType")
        return cls(
            id=data["id"],
            match_type=MatchType(data["matchType"]),
            match_value=data["matchValue"],
            category_id=data["categoryId"],
            amount_min_cents=data.get("amountMinCents"),
            amount_max_cents=data.get("amountMaxCents"),
            transaction_type=TransactionType(transaction_type) if transaction_type else None,
            priority=int(data.get("priority", 0)),
            enabled=bool(data.get("enabled", True)),
        )


def matches_rule(transaction: ParsedTransaction, rule: CategoryRule) -> bool:
    """True when every constraint of the rule holds for the transaction."""
    if rule.transaction_type is not None and transaction.type != rule.transaction_type:
        return False
    if rule.amount_min_cents is not None and transaction.amount_cents < rule.amount_min_cents:
        return False
    if rule.amount_max_cents is not None and transaction.amount_cents > rule.amount_max_cents:
        return False

    field_value = transaction.description.lower()
    match_value = rule.match_value.lower()
    if rule.match_type == MatchType.CONTAINS:
        return match_value in field_value
    if rule.match_type == MatchType.STARTS_WITH:
        return field_value.startswith(match_value)
    return field_value == match_value


def active_rules(rules: Iterable[CategoryRule]) -> list[CategoryRule]:
    """Enabled rules in ascending priority (ties keep their order)."""
    return sorted((r for r in rules if r.enabled), key=lambda r: r.priority)


def apply_rules(transaction: ParsedTransaction, rules: Iterable[CategoryRule]) -> str | None:
    """
    Category of the first matching enabled rule.

    Args:
        transaction: Parsed transaction
        rules: Rules in any order

    Returns:
        category_id, or None when no rule matches
    """
    for rule in active_rules(rules):
        if matches_rule(transaction, rule):
            return rule.category_id
    return None


def apply_rules_to_batch(
    transactions: Sequence[ParsedTransaction], rules: Iterable[CategoryRule]
) -> dict[int, str]:
    """
    Apply rules to a whole batch, sorting the rules once.

    Returns:
        {transaction index: category_id} for matched transactions only
    """
    ordered = active_rules(rules)
    matched: dict[int, str] = {}
    for index, transaction in enumerate(transactions):
        for rule in ordered:
            if matches_rule(transaction, rule):
                matched[index] = rule.category_id
                break
    logger.debug("Category rules matched %d of %d transactions", len(matched), len(transactions))
    return matched
