"""Forecast analytics: normalisation, projection, allocation and aggregation."""

from analytics.allocation import allocate_surplus, prioritise_goals, remaining_need
from analytics.frequency import installment_share, monthly_equivalent, monthly_multiplier, one_time_share
from analytics.progress import estimate_goal_progress, find_completion_month, required_monthly_pace
from analytics.projection import (
    expenses_for_month,
    income_for_month,
    project_cash_flow,
    resolve_start_month,
)
from analytics.summary import build_financial_summary, build_forecast_frame, summarize_forecast

__all__ = [
    "allocate_surplus",
    "prioritise_goals",
    "remaining_need",
    "installment_share",
    "monthly_equivalent",
    "monthly_multiplier",
    "one_time_share",
    "estimate_goal_progress",
    "find_completion_month",
    "required_monthly_pace",
    "expenses_for_month",
    "income_for_month",
    "project_cash_flow",
    "resolve_start_month",
    "build_financial_summary",
    "build_forecast_frame",
    "summarize_forecast",
]
