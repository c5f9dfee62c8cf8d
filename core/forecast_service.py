"""Entry points producing forecasts and goal allocation schedules for a plan."""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from dataclasses import replace
from datetime import date

from analytics.allocation import remaining_need
from analytics.progress import estimate_goal_progress
from analytics.projection import project_cash_flow
from analytics.summary import summarize_forecast
from config.settings import get_settings
from core.formatting import build_guidance
from core.models import (
    AllocationSchedule,
    ForecastConfig,
    ForecastResult,
    MonthlyAllocation,
    ScheduledAllocation,
    UserPlan,
)

__all__ = ["default_config", "generate_forecast", "generate_monthly_goal_allocation_schedule"]

logger = logging.getLogger(__name__)


def default_config(plan: UserPlan) -> ForecastConfig:
    """Return the plan's stored forecast settings, or defaults seeded from the plan."""

    if plan.forecast_config is not None:
        return plan.forecast_config
    return ForecastConfig(
        months=get_settings().default_months,
        starting_balance=float(plan.current_balance),
    )


def generate_forecast(
    plan: UserPlan,
    config: ForecastConfig | None = None,
    *,
    today: date | None = None,
) -> ForecastResult:
    """Project the plan's cash position and goal progress over the horizon.

    ``today`` only matters when the configuration has no start date; it
    defaults to the current date.

    Raises
    ------
    core.errors.ForecastConfigError
        If the configuration has a non-positive horizon or an unparsable start
        date.
    """

    config = config if config is not None else default_config(plan)
    forecasts, allocated = project_cash_flow(plan, config, today=today)

    logger.debug(
        "Forecast %s: %d months from %s, %d goals",
        plan.id or "<unnamed>",
        config.months,
        forecasts[0]["month"],
        len(plan.goals),
    )

    return {
        "monthly_forecasts": forecasts,
        "summary": summarize_forecast(forecasts, config.starting_balance),
        "goal_progress": estimate_goal_progress(plan.goals, forecasts, allocated, config.months),
    }


def generate_monthly_goal_allocation_schedule(
    plan: UserPlan,
    *,
    today: date | None = None,
) -> AllocationSchedule:
    """Return month-by-month goal funding guidance for the plan.

    Uses :func:`default_config` with goal contributions always enabled, since
    a schedule without allocations carries no guidance.
    """

    config = replace(default_config(plan), include_goal_contributions=True)
    forecast = generate_forecast(plan, config, today=today)

    goals_by_id = {goal.id: goal for goal in plan.goals}
    progress_by_id = {row["id"]: row for row in forecast["goal_progress"]}
    has_active_goals = any(goal.is_active for goal in plan.goals)
    granted: defaultdict[str, float] = defaultdict(float)

    schedule: list[MonthlyAllocation] = []
    for month in forecast["monthly_forecasts"]:
        surplus = month["income"] - month["expenses"]
        rows: list[ScheduledAllocation] = []

        for item in month["goal_breakdown"]:
            goal = goals_by_id[item["id"]]
            granted[goal.id] += item["amount"]
            need = remaining_need(goal, granted[goal.id])
            rows.append(
                {
                    "goal_id": goal.id,
                    "goal_name": goal.name,
                    "amount": item["amount"],
                    "priority": goal.priority,
                    "priority_order": goal.priority_order,
                    "is_on_track": progress_by_id[goal.id]["on_track"],
                    "remaining_amount": None if math.isinf(need) else need,
                    "target_date": goal.target_date,
                }
            )

        schedule.append(
            {
                "month": month["month"],
                "total_surplus": surplus,
                "goal_allocations": rows,
                "guidance": build_guidance(surplus, rows, has_active_goals=has_active_goals),
            }
        )

    active_progress = [progress_by_id[goal.id] for goal in plan.goals if goal.is_active]
    goals_on_track = sum(1 for row in active_progress if row["on_track"])
    total_allocated = sum(month["goal_contributions"] for month in forecast["monthly_forecasts"])

    return {
        "monthly_schedule": schedule,
        "summary": {
            "total_allocated": float(total_allocated),
            "goals_on_track": goals_on_track,
            "goals_behind_schedule": len(active_progress) - goals_on_track,
            "average_monthly_allocation": float(total_allocated) / max(len(schedule), 1),
        },
    }
