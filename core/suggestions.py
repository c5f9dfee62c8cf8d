"""Rule-based financial suggestions derived from a plan's forecast."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Callable, Iterable

from analytics.summary import build_financial_summary
from core.forecast_service import default_config, generate_forecast
from core.formatting import format_currency, format_percent
from core.models import (
    ExpenseCategory,
    FinancialSummary,
    ForecastResult,
    GoalCategory,
    GoalType,
    Priority,
    Suggestion,
    UserPlan,
)

__all__ = [
    "SUGGESTION_CATEGORIES",
    "generate_suggestions",
    "get_suggestions_by_category",
    "get_high_priority_suggestions",
]

logger = logging.getLogger(__name__)

SUGGESTION_CATEGORIES = ("income", "expense", "goal", "general")
EMERGENCY_FUND_MONTHS = 6
TARGET_SAVINGS_RATE = 20.0
DOMINANT_CATEGORY_SHARE = 30.0


@dataclass(frozen=True)
class _Context:
    plan: UserPlan
    forecast: ForecastResult
    snapshot: FinancialSummary

    @property
    def average_net(self) -> float:
        return self.forecast["summary"]["average_monthly_net"]

    @property
    def horizon(self) -> int:
        return max(len(self.forecast["monthly_forecasts"]), 1)


@dataclass(frozen=True)
class _Rule:
    id: str
    category: str
    priority: Priority
    condition: Callable[[_Context], bool]
    build: Callable[[_Context], tuple[str, str, float]]


def _suggestion(rule: _Rule, title: str, description: str, impact: float) -> Suggestion:
    return {
        "id": rule.id,
        "title": title,
        "description": description,
        "category": rule.category,
        "priority": rule.priority,
        "actionable": True,
        "estimated_impact": float(impact),
    }


def _behind_goals(ctx: _Context) -> list:
    return [row for row in ctx.forecast["goal_progress"] if not row["on_track"]]


def _top_expense_category(ctx: _Context) -> tuple[str, float, float] | None:
    categories = ctx.snapshot["expenses_by_category"]
    total = ctx.snapshot["total_monthly_expenses"]
    if not categories or total <= 0:
        return None
    name, amount = max(categories.items(), key=lambda item: item[1])
    return name, amount, amount / total * 100


def _emergency_fund(ctx: _Context):
    return next(
        (goal for goal in ctx.plan.goals if goal.category is GoalCategory.EMERGENCY_FUND and goal.is_active),
        None,
    )


def _emergency_shortfall(ctx: _Context) -> float:
    fund = _emergency_fund(ctx)
    recommended = ctx.snapshot["total_monthly_expenses"] * EMERGENCY_FUND_MONTHS
    current = float(fund.current_amount) if fund is not None else 0.0
    return recommended - current


def _savings_rate(ctx: _Context) -> float:
    income = ctx.snapshot["total_monthly_income"]
    return ctx.average_net / income * 100 if income > 0 else 0.0


def _accelerable_goal(ctx: _Context):
    return next(
        (
            row
            for row in ctx.forecast["goal_progress"]
            if row["goal_type"] is GoalType.FIXED_AMOUNT
            and row["on_track"]
            and row["projected_progress"] is not None
            and row["projected_progress"] < 80
        ),
        None,
    )


def _income_build(ctx: _Context) -> tuple[str, str, float]:
    shortfall = sum(
        max(0.0, row["target_amount"] - row["projected_amount"])
        for row in _behind_goals(ctx)
        if row["goal_type"] is GoalType.FIXED_AMOUNT
    )
    needed = shortfall / ctx.horizon
    return (
        "Consider Increasing Your Income",
        f"To stay on track with your goals, consider increasing your monthly income by "
        f"{format_currency(needed)}. This could be through a side hustle, freelancing, or asking for a raise.",
        needed,
    )


def _expense_build(ctx: _Context) -> tuple[str, str, float]:
    name, amount, share = _top_expense_category(ctx)
    label = name.replace("_", " ")
    reduction = amount * 0.1
    return (
        f"Reduce {label.capitalize()} Spending",
        f"Your {label} expenses account for {format_percent(share)} of your total spending. "
        f"Consider reducing this by {format_currency(reduction)} per month to improve your financial position.",
        reduction,
    )


def _negative_build(ctx: _Context) -> tuple[str, str, float]:
    months = ctx.forecast["summary"]["months_with_negative_balance"]
    deficit = abs(ctx.average_net)
    return (
        "Address Negative Cash Flow",
        f"Your forecast shows {months} months with negative balance. Consider reducing expenses by "
        f"{format_currency(deficit)} per month or increasing income to avoid financial stress.",
        deficit,
    )


def _emergency_build(ctx: _Context) -> tuple[str, str, float]:
    shortfall = _emergency_shortfall(ctx)
    monthly = shortfall / 12
    return (
        "Build Your Emergency Fund",
        f"Financial experts recommend having {EMERGENCY_FUND_MONTHS} months of expenses saved. You need "
        f"{format_currency(shortfall)} more to reach this goal. Consider saving {format_currency(monthly)} per month.",
        monthly,
    )


def _savings_build(ctx: _Context) -> tuple[str, str, float]:
    rate = _savings_rate(ctx)
    additional = ctx.snapshot["total_monthly_income"] * (TARGET_SAVINGS_RATE - rate) / 100
    return (
        "Improve Your Savings Rate",
        f"Your current savings rate is {format_percent(rate)}. Financial experts recommend saving at least "
        f"{TARGET_SAVINGS_RATE:.0f}% of income. Try to save an additional {format_currency(additional)} per month.",
        additional,
    )


def _accelerate_build(ctx: _Context) -> tuple[str, str, float]:
    row = _accelerable_goal(ctx)
    remaining = row["target_amount"] - row["projected_amount"]
    extra = min(remaining * 0.2, ctx.average_net * 0.5)
    return (
        "Accelerate Your Goal Progress",
        f"You're on track with \"{row['name']}\" but could reach it faster. Consider contributing an extra "
        f"{format_currency(extra)} per month to complete it ahead of schedule.",
        extra,
    )


def _debt_build(ctx: _Context) -> tuple[str, str, float]:
    extra = ctx.average_net * 0.3
    return (
        "Prioritize Debt Payoff",
        f"Consider allocating {format_currency(extra)} extra per month toward debt repayment. Paying off "
        "high-interest debt should be a priority to reduce long-term financial burden.",
        extra,
    )


def _invest_build(ctx: _Context) -> tuple[str, str, float]:
    amount = ctx.average_net * 0.4
    return (
        "Consider Starting to Invest",
        f"With a solid emergency fund in place, consider investing {format_currency(amount)} per month for "
        "long-term wealth building. Look into index funds or retirement accounts.",
        amount,
    )


def _has_dominant_category(ctx: _Context) -> bool:
    top = _top_expense_category(ctx)
    return top is not None and top[2] > DOMINANT_CATEGORY_SHARE


def _has_debt_focus(ctx: _Context) -> bool:
    debt_goal = any(goal.category is GoalCategory.DEBT_PAYOFF and goal.is_active for goal in ctx.plan.goals)
    debt_expense = any(
        expense.category is ExpenseCategory.DEBT_PAYMENTS and expense.is_active for expense in ctx.plan.expenses
    )
    return debt_goal and debt_expense and ctx.average_net > 0


def _ready_to_invest(ctx: _Context) -> bool:
    funded = any(
        goal.category is GoalCategory.EMERGENCY_FUND and goal.current_amount >= goal.target_amount * 0.8
        for goal in ctx.plan.goals
    )
    investing = any(goal.category is GoalCategory.INVESTMENT and goal.is_active for goal in ctx.plan.goals)
    return funded and not investing and ctx.average_net > 500


def _emergency_underfunded(ctx: _Context) -> bool:
    fund = _emergency_fund(ctx)
    recommended = ctx.snapshot["total_monthly_expenses"] * EMERGENCY_FUND_MONTHS
    target_short = fund is None or fund.target_amount < recommended
    return target_short and _emergency_shortfall(ctx) > 0


_RULES: tuple[_Rule, ...] = (
    _Rule(
        "increase-income-for-goals",
        "income",
        Priority.HIGH,
        lambda ctx: bool(_behind_goals(ctx)) and ctx.snapshot["total_monthly_income"] > 0,
        _income_build,
    ),
    _Rule(
        "reduce-top-expense-category",
        "expense",
        Priority.MEDIUM,
        _has_dominant_category,
        _expense_build,
    ),
    _Rule(
        "negative-cash-flow-warning",
        "general",
        Priority.CRITICAL,
        lambda ctx: ctx.forecast["summary"]["months_with_negative_balance"] > 0,
        _negative_build,
    ),
    _Rule("build-emergency-fund", "goal", Priority.HIGH, _emergency_underfunded, _emergency_build),
    _Rule(
        "improve-savings-rate",
        "general",
        Priority.MEDIUM,
        lambda ctx: ctx.snapshot["total_monthly_income"] > 0 and _savings_rate(ctx) < TARGET_SAVINGS_RATE,
        _savings_build,
    ),
    _Rule(
        "accelerate-goal-progress",
        "goal",
        Priority.MEDIUM,
        lambda ctx: _accelerable_goal(ctx) is not None and ctx.average_net > 0,
        _accelerate_build,
    ),
    _Rule("prioritize-debt-payoff", "goal", Priority.HIGH, _has_debt_focus, _debt_build),
    _Rule("consider-investing", "goal", Priority.MEDIUM, _ready_to_invest, _invest_build),
)


def generate_suggestions(
    plan: UserPlan,
    *,
    max_suggestions: int = 5,
    min_impact: float = 10.0,
    focus_areas: Iterable[str] | None = None,
    conservative_mode: bool = False,
    today: date | None = None,
) -> list[Suggestion]:
    """Evaluate the suggestion rules against the plan's forecast.

    Suggestions whose absolute impact is below ``min_impact`` are dropped; the
    rest are ordered by priority, then by absolute impact, and truncated to
    ``max_suggestions``.
    """

    areas = set(focus_areas) if focus_areas is not None else set(SUGGESTION_CATEGORIES)
    config = replace(default_config(plan), conservative_mode=conservative_mode)
    forecast = generate_forecast(plan, config, today=today)
    ctx = _Context(plan=plan, forecast=forecast, snapshot=build_financial_summary(plan, forecast))

    suggestions: list[Suggestion] = []
    for rule in _RULES:
        if rule.category not in areas or not rule.condition(ctx):
            continue
        title, description, impact = rule.build(ctx)
        if abs(impact) < min_impact:
            logger.debug("Suggestion %s dropped, impact %.2f below threshold", rule.id, impact)
            continue
        logger.debug("Suggestion %s fired with impact %.2f", rule.id, impact)
        suggestions.append(_suggestion(rule, title, description, impact))

    suggestions.sort(key=lambda row: (-row["priority"].rank, -abs(row["estimated_impact"])))
    return suggestions[:max_suggestions]


def get_suggestions_by_category(plan: UserPlan, category: str, **kwargs) -> list[Suggestion]:
    return generate_suggestions(plan, focus_areas=[category], **kwargs)


def get_high_priority_suggestions(plan: UserPlan, **kwargs) -> list[Suggestion]:
    return [
        row
        for row in generate_suggestions(plan, **kwargs)
        if row["priority"] in (Priority.CRITICAL, Priority.HIGH)
    ]
