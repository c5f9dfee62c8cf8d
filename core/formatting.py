"""Formatting helpers for PlainPlan guidance text."""

from __future__ import annotations

from typing import Sequence

from config.settings import get_settings
from core.models import ScheduledAllocation

__all__ = ["format_currency", "format_percent", "build_guidance"]


def format_currency(amount: float, symbol: str | None = None) -> str:
    """Format ``amount`` with thousands separators and at most two decimals."""

    if symbol is None:
        symbol = get_settings().resolved_currency_symbol
    sign = "-" if amount < 0 else ""
    text = f"{abs(amount):,.2f}"
    if text.endswith(".00"):
        text = text[:-3]
    return f"{sign}{symbol}{text}"


def format_percent(value: float) -> str:
    return f"{value:.1f}%"


def build_guidance(
    surplus: float,
    allocations: Sequence[ScheduledAllocation],
    *,
    has_active_goals: bool,
    symbol: str | None = None,
) -> str:
    """Return the one-line instruction shown next to a month of the schedule."""

    if surplus <= 0:
        return "No surplus available for goal contributions this month."

    if not allocations:
        if has_active_goals:
            return (
                f"All active goals are funded. Keep the {format_currency(surplus, symbol)} "
                "surplus in your balance."
            )
        return "Surplus available but no active goals to allocate to."

    top = max(allocations, key=lambda row: row["amount"])
    if len(allocations) == 1:
        return f"Allocate {format_currency(top['amount'], symbol)} to {top['goal_name']}."

    total = sum(row["amount"] for row in allocations)
    return (
        f"Allocate {format_currency(total, symbol)} across {len(allocations)} goals. "
        f"Focus on {top['goal_name']} ({format_currency(top['amount'], symbol)})."
    )
