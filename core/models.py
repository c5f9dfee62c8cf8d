"""Shared data model definitions for the PlainPlan forecast engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import TypedDict

import pandas as pd


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"
    ONE_TIME = "one_time"


class GoalType(str, Enum):
    FIXED_AMOUNT = "fixed_amount"
    OPEN_ENDED = "open_ended"


class ExpenseCategory(str, Enum):
    HOUSING = "housing"
    TRANSPORTATION = "transportation"
    FOOD = "food"
    UTILITIES = "utilities"
    INSURANCE = "insurance"
    HEALTHCARE = "healthcare"
    ENTERTAINMENT = "entertainment"
    PERSONAL_CARE = "personal_care"
    EDUCATION = "education"
    DEBT_PAYMENTS = "debt_payments"
    SAVINGS = "savings"
    TRAVEL = "travel"
    SHOPPING = "shopping"
    KIDS = "kids"
    MISCELLANEOUS = "miscellaneous"


class GoalCategory(str, Enum):
    EMERGENCY_FUND = "emergency_fund"
    RETIREMENT = "retirement"
    EDUCATION = "education"
    HOME_PURCHASE = "home_purchase"
    VACATION = "vacation"
    DEBT_PAYOFF = "debt_payoff"
    MAJOR_PURCHASE = "major_purchase"
    INVESTMENT = "investment"
    OTHER = "other"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        """Sort weight, higher is more urgent."""

        return _PRIORITY_RANKS[self]


_PRIORITY_RANKS = {
    Priority.LOW: 1,
    Priority.MEDIUM: 2,
    Priority.HIGH: 3,
    Priority.CRITICAL: 4,
}

DEFAULT_PRIORITY_ORDER = 999


@dataclass(frozen=True, slots=True)
class IncomeSource:
    id: str
    name: str
    amount: float
    start_date: date | None = None
    frequency: Frequency = Frequency.MONTHLY
    end_date: date | None = None
    is_active: bool = True
    description: str = ""


@dataclass(frozen=True, slots=True)
class InstallmentPlan:
    """Fixed schedule splitting an expense evenly across consecutive months."""

    months: int
    start_month: pd.Period


@dataclass(frozen=True, slots=True)
class ExpenseItem:
    id: str
    name: str
    amount: float
    category: ExpenseCategory = ExpenseCategory.MISCELLANEOUS
    is_active: bool = True
    recurring: bool = True
    frequency: Frequency | None = None
    installment: InstallmentPlan | None = None
    due_date: date | None = None
    priority: Priority = Priority.MEDIUM
    description: str = ""


@dataclass(frozen=True, slots=True)
class Goal:
    id: str
    name: str
    target_amount: float
    current_amount: float
    target_date: date
    is_active: bool = True
    goal_type: GoalType = GoalType.FIXED_AMOUNT
    priority_order: int = DEFAULT_PRIORITY_ORDER
    category: GoalCategory = GoalCategory.OTHER
    priority: Priority = Priority.MEDIUM
    description: str = ""


@dataclass(frozen=True, slots=True)
class ForecastConfig:
    """Simulation settings.

    ``start_date`` accepts anything :func:`core.dates.parse_month`
    understands; ``None`` means the current calendar month.
    """

    months: int = 12
    starting_balance: float = 0.0
    start_date: date | str | pd.Period | None = None
    include_goal_contributions: bool = True
    conservative_mode: bool = False
    include_one_time_expenses: bool = False


@dataclass(frozen=True, slots=True)
class UserPlan:
    income: tuple[IncomeSource, ...] = field(default_factory=tuple)
    expenses: tuple[ExpenseItem, ...] = field(default_factory=tuple)
    goals: tuple[Goal, ...] = field(default_factory=tuple)
    current_balance: float = 0.0
    forecast_config: ForecastConfig | None = None
    id: str = ""


class LineItem(TypedDict):
    id: str
    name: str
    amount: float


class MonthlyForecast(TypedDict):
    month: str
    starting_balance: float
    income: float
    expenses: float
    goal_contributions: float
    net_change: float
    ending_balance: float
    income_breakdown: list[LineItem]
    expense_breakdown: list[LineItem]
    goal_breakdown: list[LineItem]


class ForecastSummary(TypedDict):
    total_income: float
    total_expenses: float
    total_goal_contributions: float
    final_balance: float
    average_monthly_income: float
    average_monthly_expenses: float
    average_monthly_net: float
    lowest_balance: float
    highest_balance: float
    months_with_negative_balance: int


class GoalProgress(TypedDict):
    id: str
    name: str
    goal_type: GoalType
    target_amount: float
    current_amount: float
    projected_amount: float
    projected_progress: float | None
    on_track: bool
    estimated_completion_month: str | None
    average_monthly_allocation: float


class ForecastResult(TypedDict):
    monthly_forecasts: list[MonthlyForecast]
    summary: ForecastSummary
    goal_progress: list[GoalProgress]


class ScheduledAllocation(TypedDict):
    goal_id: str
    goal_name: str
    amount: float
    priority: Priority
    priority_order: int
    is_on_track: bool
    remaining_amount: float | None
    target_date: date


class MonthlyAllocation(TypedDict):
    month: str
    total_surplus: float
    goal_allocations: list[ScheduledAllocation]
    guidance: str


class AllocationSummary(TypedDict):
    total_allocated: float
    goals_on_track: int
    goals_behind_schedule: int
    average_monthly_allocation: float


class AllocationSchedule(TypedDict):
    monthly_schedule: list[MonthlyAllocation]
    summary: AllocationSummary


class FinancialSummary(TypedDict):
    total_monthly_income: float
    total_monthly_expenses: float
    total_goal_progress: float
    total_goal_target: float
    current_balance: float
    projected_balance: float
    savings_rate: float
    expenses_by_category: dict[str, float]
    goals_by_category: dict[str, float]


class Suggestion(TypedDict):
    id: str
    title: str
    description: str
    category: str
    priority: Priority
    actionable: bool
    estimated_impact: float


__all__ = [
    "Frequency",
    "GoalType",
    "ExpenseCategory",
    "GoalCategory",
    "Priority",
    "DEFAULT_PRIORITY_ORDER",
    "IncomeSource",
    "InstallmentPlan",
    "ExpenseItem",
    "Goal",
    "ForecastConfig",
    "UserPlan",
    "LineItem",
    "MonthlyForecast",
    "ForecastSummary",
    "GoalProgress",
    "ForecastResult",
    "ScheduledAllocation",
    "MonthlyAllocation",
    "AllocationSummary",
    "AllocationSchedule",
    "FinancialSummary",
    "Suggestion",
]
