"""Build immutable plan snapshots from plain mappings."""

from __future__ import annotations

import logging
from datetime import date
from enum import Enum
from typing import Any, Mapping, Sequence, TypeVar

from core.dates import parse_date, parse_month
from core.errors import PlanFormatError
from core.models import (
    DEFAULT_PRIORITY_ORDER,
    ExpenseCategory,
    ExpenseItem,
    ForecastConfig,
    Frequency,
    Goal,
    GoalCategory,
    GoalType,
    IncomeSource,
    InstallmentPlan,
    Priority,
    UserPlan,
)

__all__ = [
    "plan_from_mapping",
    "config_from_mapping",
    "income_from_mapping",
    "expense_from_mapping",
    "goal_from_mapping",
]

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

_TRUE_STRINGS = {"true", "1", "yes", "y", "on"}


def _get(record: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first non-null value among ``keys`` (camelCase or snake_case)."""

    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return default


def _coerce_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _coerce_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _coerce_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def _coerce_enum(enum_cls: type[E], value: Any, default: E, *, field: str) -> E:
    if value is None or value == "":
        return default
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        logger.warning("Unknown %s %r, falling back to %s", field, value, default.value)
        return default


def _optional_date(value: Any, *, field: str) -> date | None:
    if value is None or value == "":
        return None
    try:
        return parse_date(value)
    except ValueError:
        logger.warning("Ignoring unparsable %s %r", field, value)
        return None


def _records(data: Mapping[str, Any], key: str) -> Sequence[Mapping[str, Any]]:
    records = data.get(key)
    if records is None:
        return []
    if not isinstance(records, (list, tuple)):
        raise PlanFormatError(f"'{key}' must be a list, got {type(records).__name__}")
    for index, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise PlanFormatError(f"'{key}[{index}]' must be a mapping, got {type(record).__name__}")
    return records


def income_from_mapping(record: Mapping[str, Any], index: int = 0) -> IncomeSource:
    return IncomeSource(
        id=str(_get(record, "id", default=f"income-{index + 1}")),
        name=str(_get(record, "name", default="")),
        amount=_coerce_float(_get(record, "amount")),
        frequency=_coerce_enum(Frequency, _get(record, "frequency"), Frequency.MONTHLY, field="frequency"),
        start_date=_optional_date(_get(record, "startDate", "start_date"), field="income start date"),
        end_date=_optional_date(_get(record, "endDate", "end_date"), field="income end date"),
        is_active=_coerce_bool(_get(record, "isActive", "is_active"), True),
        description=str(_get(record, "description", default="")),
    )


def _installment_from_mapping(record: Mapping[str, Any], name: str) -> InstallmentPlan | None:
    nested = _get(record, "installment")
    if isinstance(nested, Mapping):
        months_raw = _get(nested, "months")
        start_raw = _get(nested, "startMonth", "start_month")
    elif _coerce_bool(_get(record, "isInstallment", "is_installment"), False):
        months_raw = _get(record, "installmentMonths", "installment_months")
        start_raw = _get(record, "installmentStartMonth", "installment_start_month")
    else:
        return None

    months = _coerce_int(months_raw, 0)
    try:
        start_month = parse_month(start_raw)
    except ValueError:
        start_month = None

    if months_raw is None or start_month is None:
        logger.warning("Expense %r has an incomplete installment window, treating it as a regular expense", name)
        return None
    if months < 1:
        logger.warning("Expense %r has %r installment months, using 1", name, months_raw)
        months = 1
    return InstallmentPlan(months=months, start_month=start_month)


def expense_from_mapping(record: Mapping[str, Any], index: int = 0) -> ExpenseItem:
    name = str(_get(record, "name", default=""))
    frequency_raw = _get(record, "frequency")
    frequency = (
        _coerce_enum(Frequency, frequency_raw, Frequency.MONTHLY, field="frequency")
        if frequency_raw not in (None, "")
        else None
    )

    return ExpenseItem(
        id=str(_get(record, "id", default=f"expense-{index + 1}")),
        name=name,
        amount=_coerce_float(_get(record, "amount")),
        category=_coerce_enum(
            ExpenseCategory,
            _get(record, "category"),
            ExpenseCategory.MISCELLANEOUS,
            field="expense category",
        ),
        is_active=_coerce_bool(_get(record, "isActive", "is_active"), True),
        recurring=_coerce_bool(_get(record, "recurring"), True),
        frequency=frequency,
        installment=_installment_from_mapping(record, name),
        due_date=_optional_date(_get(record, "dueDate", "due_date"), field="expense due date"),
        priority=_coerce_enum(Priority, _get(record, "priority"), Priority.MEDIUM, field="priority"),
        description=str(_get(record, "description", default="")),
    )


def goal_from_mapping(record: Mapping[str, Any], index: int = 0) -> Goal:
    name = str(_get(record, "name", default=""))
    target_raw = _get(record, "targetDate", "target_date")
    try:
        target_date = parse_date(target_raw)
    except ValueError as exc:
        raise PlanFormatError(f"Goal {name!r} has no valid target date: {target_raw!r}") from exc

    return Goal(
        id=str(_get(record, "id", default=f"goal-{index + 1}")),
        name=name,
        target_amount=_coerce_float(_get(record, "targetAmount", "target_amount")),
        current_amount=_coerce_float(_get(record, "currentAmount", "current_amount")),
        target_date=target_date,
        is_active=_coerce_bool(_get(record, "isActive", "is_active"), True),
        goal_type=_coerce_enum(GoalType, _get(record, "goalType", "goal_type"), GoalType.FIXED_AMOUNT, field="goal type"),
        priority_order=_coerce_int(_get(record, "priorityOrder", "priority_order"), DEFAULT_PRIORITY_ORDER),
        category=_coerce_enum(GoalCategory, _get(record, "category"), GoalCategory.OTHER, field="goal category"),
        priority=_coerce_enum(Priority, _get(record, "priority"), Priority.MEDIUM, field="priority"),
        description=str(_get(record, "description", default="")),
    )


def config_from_mapping(record: Mapping[str, Any], *, default_balance: float = 0.0) -> ForecastConfig:
    """Return a :class:`ForecastConfig` from stored forecast settings.

    ``months`` and ``startDate`` are passed through unchanged when they cannot
    be coerced so the engine can reject them with a descriptive error. A blank
    ``startDate`` means the current month.
    """

    months_raw = _get(record, "months", default=12)
    months = months_raw
    if isinstance(months_raw, str) and months_raw.strip().lstrip("-").isdigit():
        months = int(months_raw)
    elif isinstance(months_raw, float) and months_raw.is_integer():
        months = int(months_raw)

    start_date = _get(record, "startDate", "start_date")
    if isinstance(start_date, str) and not start_date.strip():
        start_date = None

    return ForecastConfig(
        months=months,
        starting_balance=_coerce_float(_get(record, "startingBalance", "starting_balance"), default_balance),
        start_date=start_date,
        include_goal_contributions=_coerce_bool(
            _get(record, "includeGoalContributions", "include_goal_contributions"), True
        ),
        conservative_mode=_coerce_bool(_get(record, "conservativeMode", "conservative_mode"), False),
        include_one_time_expenses=_coerce_bool(
            _get(record, "includeOneTimeExpenses", "include_one_time_expenses"), False
        ),
    )


def plan_from_mapping(data: Mapping[str, Any]) -> UserPlan:
    """Return a :class:`UserPlan` built from a plain (for example JSON-decoded) mapping.

    Missing optional fields fall back to documented defaults. Only structural
    problems raise :class:`PlanFormatError`.
    """

    if not isinstance(data, Mapping):
        raise PlanFormatError(f"plan must be a mapping, got {type(data).__name__}")

    current_balance = _coerce_float(_get(data, "currentBalance", "current_balance"))
    stored_config = _get(data, "forecastConfig", "forecast_config")
    if stored_config is not None and not isinstance(stored_config, Mapping):
        raise PlanFormatError("'forecastConfig' must be a mapping")

    return UserPlan(
        income=tuple(income_from_mapping(record, index) for index, record in enumerate(_records(data, "income"))),
        expenses=tuple(
            expense_from_mapping(record, index) for index, record in enumerate(_records(data, "expenses"))
        ),
        goals=tuple(goal_from_mapping(record, index) for index, record in enumerate(_records(data, "goals"))),
        current_balance=current_balance,
        forecast_config=(
            config_from_mapping(stored_config, default_balance=current_balance) if stored_config is not None else None
        ),
        id=str(_get(data, "id", default="")),
    )
