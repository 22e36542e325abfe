"""
Pytest Configuration and Shared Fixtures

Provides common test fixtures and configuration for the entire test suite.
"""

import json
from pathlib import Path
from typing import Any

import pytest

import budget.core.config as config_module
from budget.core.models import BalanceAnchor, Cadence, ForecastType, LedgerEntry, RecurringRule, TransactionType


@pytest.fixture
def temp_dir(tmp_path) -> Path:
    """Temporary directory for test files."""
    return tmp_path


@pytest.fixture
def monthly_rule() -> RecurringRule:
    """Monthly rent expense on the 1st."""
    return RecurringRule(
        id="rule-rent",
        type=ForecastType.EXPENSE,
        amount_cents=200000,
        cadence=Cadence.MONTHLY,
        description="Rent",
        day_of_month=1,
    )


@pytest.fixture
def sample_ledger() -> list[LedgerEntry]:
    """A few ledger entries around January 2026."""
    return [
        LedgerEntry(id="t1", type=TransactionType.INCOME, date="2026-01-10", amount_cents=300000, description="Salary"),
        LedgerEntry(id="t2", type=TransactionType.EXPENSE, date="2026-01-12", amount_cents=5000, description="Groceries"),
        LedgerEntry(id="t3", type=TransactionType.EXPENSE, date="2026-01-20", amount_cents=2500, description="Fuel"),
        LedgerEntry(
            id="t4", type=TransactionType.ADJUSTMENT, date="2026-01-25", amount_cents=100, description="Correction"
        ),
    ]


@pytest.fixture
def sample_anchor() -> BalanceAnchor:
    """Anchor of $1,000.00 on 2026-01-10."""
    return BalanceAnchor(id="a1", date="2026-01-10", balance_cents=100000)


@pytest.fixture
def backup_data() -> dict[str, Any]:
    """A small, valid version 2 backup export."""
    entity = {"userId": "local", "createdAt": "2026-01-01T00:00:00Z", "updatedAt": "2026-01-01T00:00:00Z"}
    return {
        "version": 2,
        "exportedAt": "2026-02-01T00:00:00Z",
        "scenarios": [{"id": "s1", "name": "Default", "isDefault": True, **entity}],
        "categories": [{"id": "c-groceries", "name": "Groceries", "isArchived": False, **entity}],
        "transactions": [
            {
                "id": "t1",
                "type": "income",
                "date": "2026-01-10",
                "amountCents": 300000,
                "description": "Salary",
                "categoryId": None,
                "savingsGoalId": None,
                **entity,
            },
            {
                "id": "t2",
                "type": "expense",
                "date": "2026-01-12",
                "amountCents": 5000,
                "description": "Groceries",
                "categoryId": "c-groceries",
                "savingsGoalId": None,
                "importFingerprint": "up-csv:2026-01-12|5000|groceries",
                **entity,
            },
            {
                "id": "t3",
                "type": "savings",
                "date": "2026-01-15",
                "amountCents": 20000,
                "description": "Holiday fund",
                "categoryId": None,
                "savingsGoalId": "g1",
                **entity,
            },
        ],
        "budgetRules": [],
        "forecastRules": [
            {
                "id": "r1",
                "scenarioId": "s1",
                "type": "expense",
                "amountCents": 200000,
                "cadence": "monthly",
                "dayOfMonth": 1,
                "description": "Rent",
                "categoryId": None,
                "savingsGoalId": None,
                **entity,
            },
            {
                "id": "r2",
                "scenarioId": "s1",
                "type": "savings",
                "amountCents": 50000,
                "cadence": "monthly",
                "dayOfMonth": 15,
                "description": "Holiday fund",
                "categoryId": None,
                "savingsGoalId": "g1",
                **entity,
            },
        ],
        "savingsGoals": [
            {
                "id": "g1",
                "name": "Holiday",
                "targetAmountCents": 500000,
                "annualInterestRate": 4.0,
                "compoundingFrequency": "monthly",
                "interestRateSchedule": [{"effectiveDate": "2026-03-01", "annualRate": 4.5}],
                **entity,
            }
        ],
        "balanceAnchors": [{"id": "a1", "date": "2026-01-10", "balanceCents": 100000, **entity}],
        "savingsAnchors": [],
        "categoryRules": [
            {
                "id": "cr1",
                "name": "Supermarkets",
                "matchField": "description",
                "matchType": "contains",
                "matchValue": "woolworths",
                "categoryId": "c-groceries",
                "priority": 0,
                "enabled": True,
                **entity,
            }
        ],
        "activeScenarioId": "s1",
    }


@pytest.fixture
def backup_file(temp_dir, backup_data) -> Path:
    """backup_data written to a JSON file."""
    path = temp_dir / "backup.json"
    path.write_text(json.dumps(backup_data), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """Set up test environment variables and reset cached configuration."""
    monkeypatch.setenv("BUDGET_ENV", "test")
    for name in (
        "LOG_LEVEL",
        "DEBUG",
        "BUDGET_TIMEZONE",
        "BUDGET_DEBUG",
        "BUDGET_IMPORT_SOURCE",
        "BUDGET_SIMILARITY_WINDOW_DAYS",
        "BUDGET_PROJECTION_MAX_MONTHS",
        "BUDGET_LOG_BUFFER_SIZE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config_module, "_config", None)


# Test markers for categorizing tests
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for complete workflows")
    config.addinivalue_line("markers", "currency: Tests for currency handling and precision")
    config.addinivalue_line("markers", "forecast: Tests for cadence expansion and monthly figures")
    config.addinivalue_line("markers", "interest: Tests for interest schedules and compounding")
    config.addinivalue_line("markers", "anchors: Tests for anchor-based balance resolution")
    config.addinivalue_line("markers", "imports: Tests for CSV parsing, dedup and backups")
    config.addinivalue_line("markers", "matching: Tests for similarity matching")
