"""Shared fixtures building small plan snapshots for the engine tests."""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

import pandas as pd
import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config.settings import get_settings
from core.models import (
    ExpenseCategory,
    ExpenseItem,
    Frequency,
    Goal,
    GoalCategory,
    GoalType,
    IncomeSource,
    InstallmentPlan,
)


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Keep tests independent of any PLAINPLAN_* variables on the host."""

    for name in ("PLAINPLAN_DEFAULT_MONTHS", "PLAINPLAN_CURRENCY", "PLAINPLAN_CURRENCY_SYMBOL", "PLAINPLAN_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def make_income():
    def _make(amount: float = 5000.0, **overrides) -> IncomeSource:
        fields = {
            "id": "income-1",
            "name": "Salary",
            "amount": amount,
            "frequency": Frequency.MONTHLY,
            "start_date": date(2024, 1, 1),
        }
        fields.update(overrides)
        return IncomeSource(**fields)

    return _make


@pytest.fixture()
def make_expense():
    def _make(amount: float = 1500.0, **overrides) -> ExpenseItem:
        fields = {
            "id": "expense-1",
            "name": "Rent",
            "amount": amount,
            "category": ExpenseCategory.HOUSING,
            "frequency": Frequency.MONTHLY,
        }
        fields.update(overrides)
        return ExpenseItem(**fields)

    return _make


@pytest.fixture()
def make_installment(make_expense):
    def _make(amount: float, months: int, start: str, **overrides) -> ExpenseItem:
        overrides.setdefault("id", "installment-1")
        overrides.setdefault("name", "Laptop")
        overrides.setdefault("category", ExpenseCategory.SHOPPING)
        return make_expense(
            amount,
            recurring=False,
            frequency=None,
            installment=InstallmentPlan(months=months, start_month=pd.Period(start, freq="M")),
            **overrides,
        )

    return _make


@pytest.fixture()
def make_goal():
    def _make(target: float = 10000.0, **overrides) -> Goal:
        fields = {
            "id": "goal-1",
            "name": "Emergency Fund",
            "target_amount": target,
            "current_amount": 0.0,
            "target_date": date(2024, 12, 31),
            "goal_type": GoalType.FIXED_AMOUNT,
            "priority_order": 1,
            "category": GoalCategory.EMERGENCY_FUND,
        }
        fields.update(overrides)
        return Goal(**fields)

    return _make
