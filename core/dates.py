"""Calendar-month helpers shared by the loader and the forecast engine."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

import pandas as pd

__all__ = ["parse_month", "parse_date", "month_key", "month_label", "months_between"]


def parse_month(value: Any) -> pd.Period:
    """Return the monthly period containing ``value``.

    Accepts ``"YYYY-MM"`` keys, ISO date strings, ``date``/``datetime``,
    ``pandas.Timestamp`` and ``pandas.Period`` values. Raises ``ValueError``
    when the value cannot be interpreted as a calendar month.
    """

    if isinstance(value, pd.Period):
        return value.asfreq("M")
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError("month value is empty")
    if isinstance(value, (date, datetime, pd.Timestamp)):
        return pd.Period(value, freq="M")
    try:
        period = pd.Period(str(value).strip()[:10], freq="M")
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Unparsable month value: {value!r}") from exc
    if pd.isna(period):
        raise ValueError(f"Unparsable month value: {value!r}")
    return period


def parse_date(value: Any) -> date:
    """Return a plain ``date`` for ISO strings and date-like values."""

    if isinstance(value, pd.Timestamp):
        return value.date()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, pd.Period):
        return value.to_timestamp(how="start").date()
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError("date value is empty")
    try:
        timestamp = pd.Timestamp(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Unparsable date value: {value!r}") from exc
    if pd.isna(timestamp):
        raise ValueError(f"Unparsable date value: {value!r}")
    return timestamp.date()


def month_key(period: pd.Period) -> str:
    return period.strftime("%Y-%m")


def month_label(period: pd.Period) -> str:
    return period.strftime("%B %Y")


def months_between(start: pd.Period, end: pd.Period) -> int:
    """Signed number of whole months from ``start`` to ``end``."""

    return (end.year - start.year) * 12 + (end.month - start.month)
