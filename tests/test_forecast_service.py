"""End-to-end tests for the forecast and allocation schedule entry points."""

from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from config.settings import get_settings
from core.forecast_service import default_config, generate_forecast, generate_monthly_goal_allocation_schedule
from core.models import ForecastConfig, GoalType, UserPlan


@pytest.fixture()
def schedule_plan(make_income, make_expense, make_goal):
    return UserPlan(
        income=(make_income(5000),),
        expenses=(make_expense(2000),),
        goals=(
            make_goal(1000, id="fund", name="Emergency Fund", target_date=date(2024, 6, 30)),
            make_goal(0, id="brokerage", name="Brokerage", goal_type=GoalType.OPEN_ENDED, priority_order=2),
        ),
        forecast_config=ForecastConfig(months=3, starting_balance=500, start_date="2024-01-01"),
        id="plan-1",
    )


def test_generate_forecast_shape(schedule_plan):
    result = generate_forecast(schedule_plan)

    assert [row["month"] for row in result["monthly_forecasts"]] == ["2024-01", "2024-02", "2024-03"]
    assert result["summary"]["total_goal_contributions"] == pytest.approx(9000)
    assert result["summary"]["final_balance"] == pytest.approx(500)
    assert [row["id"] for row in result["goal_progress"]] == ["fund", "brokerage"]


def test_generate_forecast_is_repeatable(schedule_plan):
    assert generate_forecast(schedule_plan) == generate_forecast(schedule_plan)


def test_default_config_uses_settings(monkeypatch, make_income):
    plan = UserPlan(income=(make_income(),), current_balance=750)
    assert default_config(plan) == ForecastConfig(months=12, starting_balance=750)

    monkeypatch.setenv("PLAINPLAN_DEFAULT_MONTHS", "6")
    get_settings.cache_clear()
    result = generate_forecast(plan, today=date(2024, 1, 5))

    assert len(result["monthly_forecasts"]) == 6
    assert result["monthly_forecasts"][0]["starting_balance"] == 750


def test_schedule_rows_and_guidance(schedule_plan):
    schedule = generate_monthly_goal_allocation_schedule(schedule_plan)
    first, second, _ = schedule["monthly_schedule"]

    assert first["total_surplus"] == pytest.approx(3000)
    assert [(row["goal_id"], row["amount"], row["remaining_amount"]) for row in first["goal_allocations"]] == [
        ("fund", 1000, 0),
        ("brokerage", 2000, None),
    ]
    assert first["guidance"] == "Allocate $3,000 across 2 goals. Focus on Brokerage ($2,000)."
    assert second["guidance"] == "Allocate $3,000 to Brokerage."
    assert all(row["is_on_track"] for month in schedule["monthly_schedule"] for row in month["goal_allocations"])

    assert schedule["summary"] == {
        "total_allocated": pytest.approx(9000),
        "goals_on_track": 2,
        "goals_behind_schedule": 0,
        "average_monthly_allocation": pytest.approx(3000),
    }


def test_schedule_forces_goal_contributions(schedule_plan):
    plan = replace(
        schedule_plan,
        forecast_config=replace(schedule_plan.forecast_config, include_goal_contributions=False),
    )

    schedule = generate_monthly_goal_allocation_schedule(plan)

    assert schedule["summary"]["total_allocated"] == pytest.approx(9000)


def test_schedule_guidance_without_allocations(make_income, make_expense, make_goal):
    config = ForecastConfig(months=2, start_date="2024-01")
    funded = UserPlan(
        income=(make_income(5000),),
        expenses=(make_expense(2000),),
        goals=(make_goal(1000, name="Fund"),),
        forecast_config=config,
    )
    no_goals = UserPlan(income=(make_income(5000),), expenses=(make_expense(2000),), forecast_config=config)
    deficit = UserPlan(income=(make_income(1000),), expenses=(make_expense(2000),), forecast_config=config)

    funded_months = generate_monthly_goal_allocation_schedule(funded)["monthly_schedule"]
    assert [month["guidance"] for month in funded_months] == [
        "Allocate $1,000 to Fund.",
        "All active goals are funded. Keep the $3,000 surplus in your balance.",
    ]
    assert (
        generate_monthly_goal_allocation_schedule(no_goals)["monthly_schedule"][0]["guidance"]
        == "Surplus available but no active goals to allocate to."
    )
    deficit_schedule = generate_monthly_goal_allocation_schedule(deficit)
    assert deficit_schedule["monthly_schedule"][0]["guidance"] == (
        "No surplus available for goal contributions this month."
    )
    assert deficit_schedule["summary"]["total_allocated"] == 0


def test_behind_goals_are_counted(make_income, make_expense, make_goal):
    plan = UserPlan(
        income=(make_income(1500),),
        expenses=(make_expense(1000),),
        goals=(
            make_goal(12000, id="house", target_date=date(2024, 6, 30)),
            make_goal(500, id="paused", is_active=False),
        ),
        forecast_config=ForecastConfig(months=6, start_date="2024-01"),
    )

    summary = generate_monthly_goal_allocation_schedule(plan)["summary"]

    assert summary["goals_on_track"] == 0
    assert summary["goals_behind_schedule"] == 1
