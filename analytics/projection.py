"""Month-by-month cash-flow projection over the forecast horizon."""

from __future__ import annotations

from datetime import date
from typing import Final

import pandas as pd

from analytics.allocation import allocate_surplus
from analytics.frequency import installment_share, monthly_equivalent, one_time_share
from core.dates import month_key, parse_month
from core.errors import ForecastConfigError
from core.models import (
    ExpenseItem,
    ForecastConfig,
    Frequency,
    IncomeSource,
    LineItem,
    MonthlyForecast,
    UserPlan,
)

__all__ = [
    "CONSERVATIVE_INCOME_FACTOR",
    "CONSERVATIVE_EXPENSE_FACTOR",
    "resolve_start_month",
    "is_income_active",
    "income_for_month",
    "expenses_for_month",
    "project_cash_flow",
]


CONSERVATIVE_INCOME_FACTOR: Final[float] = 0.9
CONSERVATIVE_EXPENSE_FACTOR: Final[float] = 1.1


def resolve_start_month(config: ForecastConfig, today: date | None = None) -> pd.Period:
    """Validate ``config`` and return the first simulated month.

    Raises
    ------
    ForecastConfigError
        If the horizon is not a positive integer or the start date cannot be
        parsed.
    """

    months = config.months
    if isinstance(months, bool) or not isinstance(months, int):
        raise ForecastConfigError(f"months must be an integer, got {months!r}")
    if months <= 0:
        raise ForecastConfigError(f"months must be a positive integer, got {months}")

    if config.start_date is None:
        return pd.Period(today or date.today(), freq="M")
    try:
        return parse_month(config.start_date)
    except ValueError as exc:
        raise ForecastConfigError(f"start_date is not a valid date: {config.start_date!r}") from exc


def is_income_active(source: IncomeSource, month: pd.Period) -> bool:
    if not source.is_active:
        return False
    if source.start_date is not None and parse_month(source.start_date) > month:
        return False
    if source.end_date is not None and parse_month(source.end_date) < month:
        return False
    return True


def income_for_month(
    income: tuple[IncomeSource, ...],
    month: pd.Period,
    *,
    conservative: bool = False,
) -> list[LineItem]:
    factor = CONSERVATIVE_INCOME_FACTOR if conservative else 1.0
    items: list[LineItem] = []
    for source in income:
        if not is_income_active(source, month):
            continue
        amount = monthly_equivalent(source.amount, source.frequency) * factor
        if amount > 0:
            items.append({"id": source.id, "name": source.name, "amount": amount})
    return items


def _expense_amount(expense: ExpenseItem, month: pd.Period, include_one_time: bool) -> float:
    if expense.installment is not None:
        return installment_share(expense, month)
    if expense.recurring and expense.frequency is not Frequency.ONE_TIME:
        # due_date marks the first month a recurring expense is charged
        if expense.due_date is not None and parse_month(expense.due_date) > month:
            return 0.0
        return monthly_equivalent(expense.amount, expense.frequency)
    if include_one_time:
        return one_time_share(expense, month)
    return 0.0


def expenses_for_month(
    expenses: tuple[ExpenseItem, ...],
    month: pd.Period,
    *,
    conservative: bool = False,
    include_one_time: bool = False,
) -> list[LineItem]:
    factor = CONSERVATIVE_EXPENSE_FACTOR if conservative else 1.0
    items: list[LineItem] = []
    for expense in expenses:
        if not expense.is_active:
            continue
        amount = _expense_amount(expense, month, include_one_time) * factor
        if amount > 0:
            items.append({"id": expense.id, "name": expense.name, "amount": amount})
    return items


def project_cash_flow(
    plan: UserPlan,
    config: ForecastConfig,
    *,
    today: date | None = None,
) -> tuple[list[MonthlyForecast], dict[str, float]]:
    """Simulate the account balance forward over ``config.months`` months.

    Each month's pool for goal allocation is the net new cash
    (income minus expenses); the running balance is never drawn on.

    Returns
    -------
    tuple[list[MonthlyForecast], dict[str, float]]
        The per-month series and the total granted to each goal over the
        horizon, keyed by goal id.
    """

    start = resolve_start_month(config, today)
    allocated: dict[str, float] = {goal.id: 0.0 for goal in plan.goals}
    forecasts: list[MonthlyForecast] = []
    balance = float(config.starting_balance)

    for offset in range(config.months):
        month = start + offset

        income_items = income_for_month(plan.income, month, conservative=config.conservative_mode)
        expense_items = expenses_for_month(
            plan.expenses,
            month,
            conservative=config.conservative_mode,
            include_one_time=config.include_one_time_expenses,
        )
        income = sum(item["amount"] for item in income_items)
        expenses = sum(item["amount"] for item in expense_items)

        goal_items: list[LineItem] = []
        if config.include_goal_contributions:
            goal_items = allocate_surplus(income - expenses, plan.goals, allocated)
        contributions = sum(item["amount"] for item in goal_items)

        net_change = income - expenses - contributions
        ending_balance = balance + net_change

        forecasts.append(
            {
                "month": month_key(month),
                "starting_balance": balance,
                "income": float(income),
                "expenses": float(expenses),
                "goal_contributions": float(contributions),
                "net_change": float(net_change),
                "ending_balance": float(ending_balance),
                "income_breakdown": income_items,
                "expense_breakdown": expense_items,
                "goal_breakdown": goal_items,
            }
        )
        balance = ending_balance

    return forecasts, allocated
