"""Horizon-level aggregation of the monthly forecast series."""

from __future__ import annotations

from typing import Iterable

import numpy as np
import pandas as pd

from analytics.frequency import monthly_equivalent
from core.models import (
    ExpenseItem,
    ForecastResult,
    ForecastSummary,
    FinancialSummary,
    Frequency,
    GoalType,
    MonthlyForecast,
    UserPlan,
)

__all__ = [
    "FORECAST_COLUMNS",
    "build_forecast_frame",
    "summarize_forecast",
    "steady_state_expense",
    "build_financial_summary",
]


FORECAST_COLUMNS = [
    "starting_balance",
    "income",
    "expenses",
    "goal_contributions",
    "net_change",
    "ending_balance",
]


def build_forecast_frame(forecasts: Iterable[MonthlyForecast]) -> pd.DataFrame:
    """Return one row per simulated month indexed by a monthly ``PeriodIndex``.

    A ``surplus`` column (income minus expenses) is added for charting the
    pool that was available to goals.
    """

    records = [{column: float(row[column]) for column in FORECAST_COLUMNS} for row in forecasts]
    months = [row["month"] for row in forecasts]

    frame = pd.DataFrame(records, columns=FORECAST_COLUMNS)
    frame.index = pd.PeriodIndex(months, freq="M", name="month")
    frame["surplus"] = frame["income"] - frame["expenses"]
    return frame


def summarize_forecast(forecasts: list[MonthlyForecast], starting_balance: float) -> ForecastSummary:
    """Reduce the monthly series into totals, averages and balance extremes.

    ``lowest_balance`` and ``highest_balance`` consider the starting balance
    as well as every month-end balance.
    """

    frame = build_forecast_frame(forecasts)
    months = len(frame)

    total_income = float(frame["income"].sum())
    total_expenses = float(frame["expenses"].sum())
    total_contributions = float(frame["goal_contributions"].sum())

    balances = np.append(float(starting_balance), frame["ending_balance"].to_numpy(dtype=float))
    final_balance = float(balances[-1])
    divisor = months if months else 1

    return {
        "total_income": total_income,
        "total_expenses": total_expenses,
        "total_goal_contributions": total_contributions,
        "final_balance": final_balance,
        "average_monthly_income": total_income / divisor,
        "average_monthly_expenses": total_expenses / divisor,
        "average_monthly_net": (total_income - total_expenses - total_contributions) / divisor,
        "lowest_balance": float(balances.min()),
        "highest_balance": float(balances.max()),
        "months_with_negative_balance": int((frame["ending_balance"] < 0).sum()),
    }


def steady_state_expense(expense: ExpenseItem) -> float:
    """Typical monthly cost of an expense, ignoring calendar windows."""

    if expense.installment is not None:
        return float(expense.amount) / max(int(expense.installment.months), 1)
    if expense.recurring and expense.frequency is not Frequency.ONE_TIME:
        return monthly_equivalent(expense.amount, expense.frequency)
    return 0.0


def build_financial_summary(plan: UserPlan, forecast: ForecastResult | None = None) -> FinancialSummary:
    """Return the dashboard snapshot of the plan's recurring position."""

    monthly_income = sum(
        monthly_equivalent(source.amount, source.frequency) for source in plan.income if source.is_active
    )

    expense_frame = pd.DataFrame(
        [
            {"category": expense.category.value, "amount": steady_state_expense(expense)}
            for expense in plan.expenses
            if expense.is_active
        ],
        columns=["category", "amount"],
    )
    expenses_by_category = (
        expense_frame.groupby("category")["amount"].sum().sort_values(ascending=False)
    )
    monthly_expenses = float(expense_frame["amount"].sum()) if not expense_frame.empty else 0.0

    active_goals = [goal for goal in plan.goals if goal.is_active]
    goal_frame = pd.DataFrame(
        [{"category": goal.category.value, "amount": float(goal.current_amount)} for goal in active_goals],
        columns=["category", "amount"],
    )
    goals_by_category = goal_frame.groupby("category")["amount"].sum()

    total_goal_target = sum(
        float(goal.target_amount) for goal in active_goals if goal.goal_type is GoalType.FIXED_AMOUNT
    )
    savings_rate = (monthly_income - monthly_expenses) / monthly_income * 100 if monthly_income > 0 else 0.0
    projected_balance = (
        forecast["summary"]["final_balance"] if forecast is not None else float(plan.current_balance)
    )

    return {
        "total_monthly_income": float(monthly_income),
        "total_monthly_expenses": monthly_expenses,
        "total_goal_progress": float(goal_frame["amount"].sum()) if not goal_frame.empty else 0.0,
        "total_goal_target": float(total_goal_target),
        "current_balance": float(plan.current_balance),
        "projected_balance": float(projected_balance),
        "savings_rate": float(savings_rate),
        "expenses_by_category": {str(key): float(value) for key, value in expenses_by_category.items()},
        "goals_by_category": {str(key): float(value) for key, value in goals_by_category.items()},
    }
