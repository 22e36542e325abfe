#!/usr/bin/env python3
"""
Backup Deserialization

Parses an exported JSON backup into fixed, allow-listed pydantic models.
Only declared fields are read (unknown keys, including prototype-pollution
keys such as "__proto__", are ignored by every model), every field is bounded
the way the export format bounds it, and older export versions are migrated
to the current layout.

Example:
    backup = load_backup(read_text("budget-backup.json"))
    data = backup.to_engine()
    resolve_balance(data.balance_anchors, data.transactions, "2026-02-01")
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from ..core.exceptions import BackupValidationError
from ..core.models import (
    BalanceAnchor,
    LedgerEntry,
    RecurringRule,
    SavingsAnchor,
    SavingsGoal,
)
from .rules import CategoryRule

logger = logging.getLogger(__name__)

CURRENT_DATA_VERSION = 2

# Largest integer exported amounts may hold (2**53 - 1)
MAX_SAFE_INTEGER = 9_007_199_254_740_991

CadenceName = Literal["weekly", "fortnightly", "monthly", "quarterly", "yearly"]

_INVALID_FILE_MESSAGE = (
    "The file doesn't appear to be a valid budget export. Make sure the file was exported from this app."
)


class BackupModel(BaseModel):
    """Base for backup records: camelCase keys, undeclared keys dropped."""

    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)


class EntityRecord(BackupModel):
    id: str = Field(..., min_length=1)
    user_id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class ScenarioRecord(EntityRecord):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    is_default: bool = False


class CategoryRecord(EntityRecord):
    name: str = Field(..., min_length=1, max_length=100)
    is_archived: bool = False


class BudgetRuleRecord(EntityRecord):
    scenario_id: str = Field(..., min_length=1)
    category_id: str = Field(..., min_length=1)
    amount_cents: int = Field(..., ge=0, le=MAX_SAFE_INTEGER)
    cadence: CadenceName
    day_of_week: int | None = Field(default=None, ge=0, le=6)
    day_of_month: int | None = Field(default=None, ge=1, le=31)
    month_of_quarter: int | None = Field(default=None, ge=0, le=2)
    start_date: str | None = None
    end_date: str | None = None


class ForecastRuleRecord(EntityRecord):
    scenario_id: str = Field(..., min_length=1)
    type: Literal["income", "expense", "savings"]
    amount_cents: int = Field(..., ge=0, le=MAX_SAFE_INTEGER)
    cadence: CadenceName
    day_of_month: int | None = Field(default=None, ge=1, le=31)
    day_of_week: int | None = Field(default=None, ge=0, le=6)
    month_of_year: int | None = Field(default=None, ge=0, le=11)
    month_of_quarter: int | None = Field(default=None, ge=0, le=2)
    start_date: str | None = None
    end_date: str | None = None
    description: str = Field(..., max_length=500)
    category_id: str | None = None
    savings_goal_id: str | None = None
    notes: str | None = Field(default=None, max_length=1000)
    excluded_dates: list[str] | None = None


class TransactionRecord(EntityRecord):
    type: Literal["income", "expense", "savings", "adjustment"]
    date: str
    # Negative for savings withdrawals
    amount_cents: int = Field(..., ge=-MAX_SAFE_INTEGER, le=MAX_SAFE_INTEGER)
    description: str = Field(..., max_length=500)
    category_id: str | None = None
    savings_goal_id: str | None = None
    payment_method: str | None = Field(default=None, max_length=100)
    notes: str | None = Field(default=None, max_length=1000)
    import_fingerprint: str | None = Field(default=None, max_length=500)
    import_source: str | None = Field(default=None, max_length=50)
    imported_at: str | None = None


class InterestRateRecord(BackupModel):
    effective_date: str
    annual_rate: float = Field(..., ge=0, le=100)


class SavingsGoalRecord(EntityRecord):
    name: str = Field(..., min_length=1, max_length=100)
    target_amount_cents: int = Field(..., ge=0, le=MAX_SAFE_INTEGER)
    deadline: str | None = None
    annual_interest_rate: float | None = Field(default=None, ge=0, le=100)
    compounding_frequency: Literal["daily", "monthly", "yearly"] | None = None
    is_emergency_fund: bool | None = None
    interest_rate_schedule: list[InterestRateRecord] | None = Field(default=None, max_length=100)


class BalanceAnchorRecord(EntityRecord):
    date: str
    balance_cents: int = Field(..., le=MAX_SAFE_INTEGER)
    label: str | None = Field(default=None, max_length=100)


class SavingsAnchorRecord(EntityRecord):
    savings_goal_id: str = Field(..., min_length=1)
    date: str
    balance_cents: int = Field(..., ge=0, le=MAX_SAFE_INTEGER)
    label: str | None = Field(default=None, max_length=100)


class CategoryRuleRecord(EntityRecord):
    name: str = Field(..., min_length=1, max_length=100)
    match_field: Literal["description", "payee"] = "description"
    match_type: Literal["contains", "startsWith", "equals"]
    match_value: str = Field(..., max_length=200)
    category_id: str = Field(..., min_length=1)
    amount_min_cents: int | None = Field(default=None, ge=0)
    amount_max_cents: int | None = Field(default=None, ge=0)
    transaction_type: Literal["income", "expense"] | None = None
    priority: int = Field(..., ge=0)
    enabled: bool


@dataclass
class EngineData:
    """Backup contents converted to engine models."""

    forecast_rules: list[RecurringRule] = field(default_factory=list)
    transactions: list[LedgerEntry] = field(default_factory=list)
    savings_goals: list[SavingsGoal] = field(default_factory=list)
    balance_anchors: list[BalanceAnchor] = field(default_factory=list)
    savings_anchors: list[SavingsAnchor] = field(default_factory=list)
    category_rules: list[CategoryRule] = field(default_factory=list)

    def existing_fingerprints(self) -> set[str]:
        """Import fingerprints already present in the ledger."""
        return {t.import_fingerprint for t in self.transactions if t.import_fingerprint}


class BudgetBackup(BackupModel):
    """A complete exported backup."""

    version: int | None = Field(default=None, ge=1)
    exported_at: str | None = None

    scenarios: list[ScenarioRecord] = Field(..., max_length=100)
    categories: list[CategoryRecord] = Field(..., max_length=500)
    transactions: list[TransactionRecord] = Field(..., max_length=100_000)
    budget_rules: list[BudgetRuleRecord] = Field(..., max_length=1000)
    forecast_rules: list[ForecastRuleRecord] = Field(..., max_length=1000)
    # Removed in version 2; accepted so older exports still load
    forecast_events: list[Any] | None = Field(default=None, max_length=10_000)
    savings_goals: list[SavingsGoalRecord] = Field(..., max_length=100)
    balance_anchors: list[BalanceAnchorRecord] | None = Field(default=None, max_length=100)
    savings_anchors: list[SavingsAnchorRecord] | None = Field(default=None, max_length=1000)
    category_rules: list[CategoryRuleRecord] | None = Field(default=None, max_length=500)

    active_scenario_id: str | None = None

    def to_engine(self, scenario_id: str | None = None) -> EngineData:
        """
        Convert records into engine models.

        Args:
            scenario_id: Only keep forecast rules of this scenario (default:
                the active scenario when set, otherwise every rule)

        Returns:
            EngineData
        """
        scenario = scenario_id or self.active_scenario_id
        rules = [r for r in self.forecast_rules if scenario is None or r.scenario_id == scenario]

        def dump(record: BackupModel) -> dict[str, Any]:
            return record.model_dump(by_alias=True)

        return EngineData(
            forecast_rules=[RecurringRule.from_dict(dump(r)) for r in rules],
            transactions=[LedgerEntry.from_dict(dump(t)) for t in self.transactions],
            savings_goals=[SavingsGoal.from_dict(dump(g)) for g in self.savings_goals],
            balance_anchors=[BalanceAnchor.from_dict(dump(a)) for a in self.balance_anchors or []],
            savings_anchors=[SavingsAnchor.from_dict(dump(a)) for a in self.savings_anchors or []],
            category_rules=[CategoryRule.from_dict(dump(r)) for r in self.category_rules or []],
        )


def backup_error_message(error: ValidationError) -> str:
    """
    Human-readable message for the first validation problem.

    Args:
        error: pydantic validation error

    Returns:
        Message naming the offending path, e.g.
        "The import file contains invalid data (transactions > 0 > amountCents: ...)"
    """
    issues = error.errors()
    if not issues:
        return _INVALID_FILE_MESSAGE
    first = issues[0]
    path = " > ".join(str(part) for part in first.get("loc", ()))
    if path:
        return (
            f"The import file contains invalid data ({path}: {first['msg']}). "
            "Make sure the file was exported from this app."
        )
    return first["msg"]


def migrate_backup(backup: BudgetBackup) -> BudgetBackup:
    """
    Bring an older backup to CURRENT_DATA_VERSION without mutating it.

    Version 1 exports carried standalone forecast events; those are dropped.
    Missing anchor lists become empty lists.
    """
    version = backup.version or 1
    if version >= CURRENT_DATA_VERSION:
        return backup

    logger.info("Migrating backup from version %d to %d", version, CURRENT_DATA_VERSION)
    if backup.forecast_events:
        logger.info("Discarding %d forecast events (removed in version 2)", len(backup.forecast_events))

    return backup.model_copy(
        update={
            "version": CURRENT_DATA_VERSION,
            "forecast_events": None,
            "balance_anchors": backup.balance_anchors or [],
            "savings_anchors": backup.savings_anchors or [],
        }
    )


def load_backup(raw: str | bytes | dict[str, Any]) -> BudgetBackup:
    """
    Validate and migrate an exported backup.

    Args:
        raw: JSON text, or an already decoded object

    Returns:
        Validated BudgetBackup at CURRENT_DATA_VERSION

    Raises:
        BackupValidationError: If the content is not JSON or fails validation
    """
    if isinstance(raw, (str, bytes)):
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise BackupValidationError(_INVALID_FILE_MESSAGE) from e
    else:
        data = raw

    if not isinstance(data, dict):
        raise BackupValidationError(_INVALID_FILE_MESSAGE)

    try:
        backup = BudgetBackup.model_validate(data)
    except ValidationError as e:
        message = backup_error_message(e)
        logger.warning("Rejected backup: %s", message)
        raise BackupValidationError(message) from e

    return migrate_backup(backup)
