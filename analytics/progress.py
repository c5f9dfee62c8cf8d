"""Goal progress, completion month and on-track estimation."""

from __future__ import annotations

from typing import Iterable, Mapping

from analytics.allocation import ALLOCATION_TOLERANCE
from core.dates import months_between, parse_month
from core.models import Goal, GoalProgress, GoalType, MonthlyForecast

__all__ = ["required_monthly_pace", "find_completion_month", "estimate_goal_progress"]


def required_monthly_pace(goal: Goal, start_month: str) -> float:
    """Monthly saving needed to reach the target by the goal's target month.

    The window counts the start month and the target month inclusively and
    never drops below one month, so overdue goals need their full remainder
    immediately.
    """

    remaining = max(0.0, float(goal.target_amount) - float(goal.current_amount))
    window = months_between(parse_month(start_month), parse_month(goal.target_date)) + 1
    return remaining / max(window, 1)


def find_completion_month(goal: Goal, forecasts: Iterable[MonthlyForecast]) -> str | None:
    """Return the first month in which a fixed goal's projected amount reaches its target.

    Only months in which the goal received an allocation can complete it; a
    goal already funded before the horizon starts has no completion month.
    """

    if goal.goal_type is not GoalType.FIXED_AMOUNT:
        return None

    accumulated = float(goal.current_amount)
    target = float(goal.target_amount)
    for forecast in forecasts:
        received = [item["amount"] for item in forecast["goal_breakdown"] if item["id"] == goal.id]
        if not received:
            continue
        accumulated += sum(received)
        if accumulated >= target - ALLOCATION_TOLERANCE:
            return forecast["month"]
    return None


def _is_on_track(
    goal: Goal,
    completion_month: str | None,
    average_allocation: float,
    start_month: str | None,
) -> bool:
    match goal.goal_type:
        case GoalType.OPEN_ENDED:
            return average_allocation > 0
        case GoalType.FIXED_AMOUNT:
            if completion_month is not None:
                return parse_month(completion_month) <= parse_month(goal.target_date)
            if start_month is None:
                return False
            return required_monthly_pace(goal, start_month) <= average_allocation
    raise ValueError(f"Unsupported goal type: {goal.goal_type!r}")


def _projected_progress(goal: Goal, projected_amount: float) -> float | None:
    if goal.goal_type is GoalType.OPEN_ENDED:
        return None
    if goal.target_amount <= 0:
        return 100.0
    return min(100.0, projected_amount / float(goal.target_amount) * 100)


def estimate_goal_progress(
    goals: Iterable[Goal],
    forecasts: list[MonthlyForecast],
    allocated: Mapping[str, float],
    months: int,
) -> list[GoalProgress]:
    """Summarise each goal's position at the end of the simulated horizon.

    ``allocated`` holds the per-goal totals accumulated by the scheduler;
    ``months`` is the horizon length used for the average allocation.
    """

    start_month = forecasts[0]["month"] if forecasts else None
    rows: list[GoalProgress] = []

    for goal in goals:
        total = float(allocated.get(goal.id, 0.0))
        projected_amount = float(goal.current_amount) + total
        average_allocation = total / months if months > 0 else 0.0
        completion_month = find_completion_month(goal, forecasts)

        rows.append(
            {
                "id": goal.id,
                "name": goal.name,
                "goal_type": goal.goal_type,
                "target_amount": float(goal.target_amount),
                "current_amount": float(goal.current_amount),
                "projected_amount": projected_amount,
                "projected_progress": _projected_progress(goal, projected_amount),
                "on_track": _is_on_track(goal, completion_month, average_allocation, start_month),
                "estimated_completion_month": completion_month,
                "average_monthly_allocation": average_allocation,
            }
        )

    return rows
