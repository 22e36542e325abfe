#!/usr/bin/env python3
"""
Core Data Models for the Budget Engine

Typed values the engine reads and produces. Records arrive already validated
from a persistence collaborator; the engine never mutates them and every
derived value (occurrences, balances, import batches) is ephemeral.

Conventions:
- Amounts are integer cents
- Dates are ISO "YYYY-MM-DD" strings (lexicographic order == chronological order)
- from_dict() accepts the camelCase keys used by exported data
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Cadence(Enum):
    """Repetition period of a recurring rule."""

    WEEKLY = "weekly"
    FORTNIGHTLY = "fortnightly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class ForecastType(Enum):
    """Kinds of forecast (recurring) rules."""

    INCOME = "income"
    EXPENSE = "expense"
    SAVINGS = "savings"


class TransactionType(Enum):
    """Kinds of ledger entries."""

    INCOME = "income"
    EXPENSE = "expense"
    SAVINGS = "savings"
    ADJUSTMENT = "adjustment"  # Positive corrective entry


class Compounding(Enum):
    """Interest compounding frequency."""

    YEARLY = "yearly"
    MONTHLY = "monthly"
    DAILY = "daily"

    @property
    def periods_per_year(self) -> int:
        """Number of compounding periods in one year."""
        return {"yearly": 1, "monthly": 12, "daily": 365}[self.value]


def _optional_int(value: Any) -> int | None:
    return None if value is None else int(value)


@dataclass(frozen=True)
class RecurringRule:
    """
    Recurring income/expense/savings template.

    Day fields follow the exported format: day_of_week is 0-6 with Sunday as 0,
    month_of_quarter is 0-2 and month_of_year is 0-11 (0 = January).
    """

    id: str
    type: ForecastType
    amount_cents: int
    cadence: Cadence
    description: str = ""

    day_of_week: int | None = None
    day_of_month: int | None = None
    month_of_quarter: int | None = None
    month_of_year: int | None = None

    # Optional lifetime of the rule
    start_date: str | None = None
    end_date: str | None = None

    category_id: str | None = None
    savings_goal_id: str | None = None
    excluded_dates: tuple[str, ...] = ()
    notes: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RecurringRule":
        """Create RecurringRule from an exported forecast rule dict."""
        return cls(
            id=data["id"],
            type=ForecastType(data["type"]),
            amount_cents=int(data["amountCents"]),
            cadence=Cadence(data["cadence"]),
            description=data.get("description") or "",
            day_of_week=_optional_int(data.get("dayOfWeek")),
            day_of_month=_optional_int(data.get("dayOfMonth")),
            month_of_quarter=_optional_int(data.get("monthOfQuarter")),
            month_of_year=_optional_int(data.get("monthOfYear")),
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
            category_id=data.get("categoryId"),
            savings_goal_id=data.get("savingsGoalId"),
            excluded_dates=tuple(data.get("excludedDates") or ()),
            notes=data.get("notes"),
        )


@dataclass(frozen=True)
class Occurrence:
    """One concrete, dated instance of a recurring rule."""

    date: str
    amount_cents: int
    source_rule_id: str
    type: ForecastType
    description: str = ""
    category_id: str | None = None
    savings_goal_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "date": self.date,
            "amountCents": self.amount_cents,
            "sourceRuleId": self.source_rule_id,
            "type": self.type.value,
            "description": self.description,
            "categoryId": self.category_id,
            "savingsGoalId": self.savings_goal_id,
        }


@dataclass(frozen=True)
class BalanceAnchor:
    """Trusted point-in-time cash balance."""

    id: str
    date: str
    balance_cents: int
    label: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BalanceAnchor":
        """Create BalanceAnchor from an exported dict."""
        return cls(
            id=data["id"],
            date=data["date"],
            balance_cents=int(data["balanceCents"]),
            label=data.get("label"),
        )


@dataclass(frozen=True)
class SavingsAnchor:
    """Trusted point-in-time balance of a single savings goal."""

    id: str
    savings_goal_id: str
    date: str
    balance_cents: int
    label: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SavingsAnchor":
        """Create SavingsAnchor from an exported dict."""
        return cls(
            id=data["id"],
            savings_goal_id=data["savingsGoalId"],
            date=data["date"],
            balance_cents=int(data["balanceCents"]),
            label=data.get("label"),
        )


@dataclass(frozen=True)
class InterestRateEntry:
    """A rate change taking effect on effective_date (annual percent, 0-100)."""

    effective_date: str
    annual_rate: float


@dataclass(frozen=True)
class SavingsGoal:
    """Savings target with an optional base rate and rate-change schedule."""

    id: str
    name: str
    target_amount_cents: int
    deadline: str | None = None
    annual_interest_rate: float | None = None
    compounding_frequency: Compounding | None = None
    is_emergency_fund: bool = False
    interest_rate_schedule: tuple[InterestRateEntry, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SavingsGoal":
        """Create SavingsGoal from an exported dict."""
        compounding = data.get("compoundingFrequency")
        return cls(
            id=data["id"],
            name=data["name"],
            target_amount_cents=int(data["targetAmountCents"]),
            deadline=data.get("deadline"),
            annual_interest_rate=data.get("annualInterestRate"),
            compounding_frequency=Compounding(compounding) if compounding else None,
            is_emergency_fund=bool(data.get("isEmergencyFund", False)),
            interest_rate_schedule=tuple(
                InterestRateEntry(effective_date=e["effectiveDate"], annual_rate=float(e["annualRate"]))
                for e in data.get("interestRateSchedule") or ()
            ),
        )


@dataclass(frozen=True)
class LedgerEntry:
    """
    Actual transaction in the ledger.

    amount_cents is non-negative for ordinary transactions. Savings entries carry
    their direction in the sign (withdrawals negative).
    """

    id: str
    type: TransactionType
    date: str
    amount_cents: int
    description: str = ""
    category_id: str | None = None
    savings_goal_id: str | None = None
    payment_method: str | None = None
    notes: str | None = None
    import_fingerprint: str | None = None
    import_source: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LedgerEntry":
        """Create LedgerEntry from an exported transaction dict."""
        return cls(
            id=data["id"],
            type=TransactionType(data["type"]),
            date=data["date"],
            amount_cents=int(data["amountCents"]),
            description=data.get("description") or "",
            category_id=data.get("categoryId"),
            savings_goal_id=data.get("savingsGoalId"),
            payment_method=data.get("paymentMethod"),
            notes=data.get("notes"),
            import_fingerprint=data.get("importFingerprint"),
            import_source=data.get("importSource"),
        )


@dataclass(frozen=True)
class ParsedTransaction:
    """Normalized transaction candidate produced by an import parser."""

    date: str
    description: str
    amount_cents: int  # Always positive; direction lives in type
    type: TransactionType
    fingerprint: str
    category: str | None = None
    payment_method: str | None = None
    notes: str = ""
    source: str = "unknown"


@dataclass
class SkippedRow:
    """An input row deliberately left out of an import, with the reason."""

    row: dict[str, str]
    reason: str
    line: int | None = None


@dataclass
class ImportBatch:
    """Ephemeral result of parsing one import file."""

    transactions: list[ParsedTransaction] = field(default_factory=list)
    skipped: list[SkippedRow] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        """Rows that were classified (imported or skipped)."""
        return len(self.transactions) + len(self.skipped)
