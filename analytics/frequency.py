"""Normalisation of periodic amounts into monthly cash flow."""

from __future__ import annotations

from typing import Final

import pandas as pd

from core.dates import months_between, parse_month
from core.models import ExpenseItem, Frequency

__all__ = [
    "AVERAGE_DAYS_PER_MONTH",
    "AVERAGE_WEEKS_PER_MONTH",
    "AVERAGE_BIWEEKS_PER_MONTH",
    "monthly_multiplier",
    "monthly_equivalent",
    "installment_share",
    "one_time_share",
]


AVERAGE_DAYS_PER_MONTH: Final[float] = 30.44
AVERAGE_WEEKS_PER_MONTH: Final[float] = 4.33
AVERAGE_BIWEEKS_PER_MONTH: Final[float] = 2.17


def monthly_multiplier(frequency: Frequency) -> float:
    """Return the factor converting one ``frequency`` payment into a monthly figure."""

    match frequency:
        case Frequency.DAILY:
            return AVERAGE_DAYS_PER_MONTH
        case Frequency.WEEKLY:
            return AVERAGE_WEEKS_PER_MONTH
        case Frequency.BIWEEKLY:
            return AVERAGE_BIWEEKS_PER_MONTH
        case Frequency.MONTHLY:
            return 1.0
        case Frequency.QUARTERLY:
            return 1 / 3
        case Frequency.YEARLY:
            return 1 / 12
        case Frequency.ONE_TIME:
            # dated events, never part of the recurring series
            return 0.0
    raise ValueError(f"Unsupported frequency: {frequency!r}")


def monthly_equivalent(amount: float, frequency: Frequency | None) -> float:
    """Return the monthly-equivalent value of ``amount`` paid every ``frequency``.

    A missing frequency is treated as monthly.
    """

    return float(amount) * monthly_multiplier(frequency or Frequency.MONTHLY)


def installment_share(expense: ExpenseItem, month: pd.Period | str) -> float:
    """Return the slice of an installment expense that falls due in ``month``.

    The amount is split evenly across ``installment.months`` consecutive
    calendar months starting at ``installment.start_month``; months outside
    that window contribute nothing. Expenses without an installment plan
    return ``0.0``.
    """

    plan = expense.installment
    if plan is None:
        return 0.0

    months = max(int(plan.months), 1)
    offset = months_between(parse_month(plan.start_month), parse_month(month))
    if 0 <= offset < months:
        return float(expense.amount) / months
    return 0.0


def one_time_share(expense: ExpenseItem, month: pd.Period | str) -> float:
    """Return the full amount of a dated one-off expense in its due month."""

    if expense.installment is not None or expense.due_date is None:
        return 0.0
    if expense.recurring and expense.frequency is not Frequency.ONE_TIME:
        return 0.0
    if parse_month(expense.due_date) == parse_month(month):
        return float(expense.amount)
    return 0.0
