"""Tests for the rule-based suggestion generator."""

from __future__ import annotations

from datetime import date

import pytest

from core.models import ExpenseCategory, ForecastConfig, GoalCategory, Priority, UserPlan
from core.suggestions import generate_suggestions, get_high_priority_suggestions, get_suggestions_by_category

CONFIG = ForecastConfig(months=12, start_date="2024-01")


@pytest.fixture()
def overspending_plan(make_income, make_expense):
    return UserPlan(income=(make_income(1000),), expenses=(make_expense(1500),), forecast_config=CONFIG)


@pytest.fixture()
def healthy_plan(make_income, make_expense, make_goal):
    return UserPlan(
        income=(make_income(8000),),
        expenses=(
            make_expense(2000),
            make_expense(800, id="food", name="Groceries", category=ExpenseCategory.FOOD),
            make_expense(500, id="car", name="Car", category=ExpenseCategory.TRANSPORTATION),
        ),
        goals=(make_goal(20000, current_amount=19000),),
        forecast_config=CONFIG,
    )


def test_overspending_plan_is_ranked(overspending_plan):
    suggestions = generate_suggestions(overspending_plan)

    assert [row["id"] for row in suggestions] == [
        "negative-cash-flow-warning",
        "build-emergency-fund",
        "improve-savings-rate",
        "reduce-top-expense-category",
    ]
    warning = suggestions[0]
    assert warning["priority"] is Priority.CRITICAL
    assert warning["estimated_impact"] == pytest.approx(500)
    assert "12 months with negative balance" in warning["description"]
    assert suggestions[1]["estimated_impact"] == pytest.approx(750)
    assert suggestions[2]["estimated_impact"] == pytest.approx(700)
    assert suggestions[3]["title"] == "Reduce Housing Spending"


def test_limits_and_threshold(overspending_plan):
    assert len(generate_suggestions(overspending_plan, max_suggestions=2)) == 2
    assert [row["id"] for row in generate_suggestions(overspending_plan, min_impact=600)] == [
        "build-emergency-fund",
        "improve-savings-rate",
    ]


def test_focus_areas(overspending_plan):
    by_category = get_suggestions_by_category(overspending_plan, "expense")
    high = get_high_priority_suggestions(overspending_plan)

    assert [row["id"] for row in by_category] == ["reduce-top-expense-category"]
    assert [row["id"] for row in high] == ["negative-cash-flow-warning", "build-emergency-fund"]


def test_well_funded_plan_suggests_investing(healthy_plan):
    ids = [row["id"] for row in generate_suggestions(healthy_plan)]

    assert "consider-investing" in ids
    assert "negative-cash-flow-warning" not in ids
    assert "improve-savings-rate" not in ids


def test_debt_payoff_needs_goal_and_payments(make_income, make_expense, make_goal):
    plan = UserPlan(
        income=(make_income(6000),),
        expenses=(make_expense(400, id="loan", name="Loan", category=ExpenseCategory.DEBT_PAYMENTS),),
        goals=(make_goal(0, category=GoalCategory.DEBT_PAYOFF, target_date=date(2025, 1, 31)),),
        forecast_config=CONFIG,
    )

    ids = [row["id"] for row in generate_suggestions(plan, max_suggestions=10)]

    assert "prioritize-debt-payoff" in ids


def test_suggestions_are_deterministic(overspending_plan):
    assert generate_suggestions(overspending_plan) == generate_suggestions(overspending_plan)
