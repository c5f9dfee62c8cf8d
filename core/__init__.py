"""Core domain package for the PlainPlan forecast engine.

The forecast entry points live in :mod:`core.forecast_service` and
:mod:`core.suggestions`; they depend on :mod:`analytics`, which itself builds
on the records exported here.
"""

from .dates import month_key, month_label, parse_date, parse_month
from .errors import ForecastConfigError, PlanFormatError
from .models import (
    AllocationSchedule,
    AllocationSummary,
    ExpenseCategory,
    ExpenseItem,
    FinancialSummary,
    ForecastConfig,
    ForecastResult,
    ForecastSummary,
    Frequency,
    Goal,
    GoalCategory,
    GoalProgress,
    GoalType,
    IncomeSource,
    InstallmentPlan,
    LineItem,
    MonthlyAllocation,
    MonthlyForecast,
    Priority,
    ScheduledAllocation,
    Suggestion,
    UserPlan,
)
from .plan_loader import config_from_mapping, plan_from_mapping

__all__ = [
    "AllocationSchedule",
    "AllocationSummary",
    "ExpenseCategory",
    "ExpenseItem",
    "FinancialSummary",
    "ForecastConfig",
    "ForecastConfigError",
    "ForecastResult",
    "ForecastSummary",
    "Frequency",
    "Goal",
    "GoalCategory",
    "GoalProgress",
    "GoalType",
    "IncomeSource",
    "InstallmentPlan",
    "LineItem",
    "MonthlyAllocation",
    "MonthlyForecast",
    "PlanFormatError",
    "Priority",
    "ScheduledAllocation",
    "Suggestion",
    "UserPlan",
    "config_from_mapping",
    "month_key",
    "month_label",
    "parse_date",
    "parse_month",
    "plan_from_mapping",
]
