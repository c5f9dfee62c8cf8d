"""Priority waterfall distributing monthly surplus across savings goals."""

from __future__ import annotations

import math
from typing import Final, Iterable, MutableMapping

from core.models import Goal, GoalType, LineItem

__all__ = ["ALLOCATION_TOLERANCE", "prioritise_goals", "remaining_need", "allocate_surplus"]


# rounding residue below this is treated as a fully funded goal
ALLOCATION_TOLERANCE: Final[float] = 1e-9


def prioritise_goals(goals: Iterable[Goal]) -> list[Goal]:
    """Return active goals ordered by ``priority_order``.

    Lower values are served first. ``sorted`` is stable, so goals sharing a
    priority keep their declaration order.
    """

    return sorted((goal for goal in goals if goal.is_active), key=lambda goal: goal.priority_order)


def remaining_need(goal: Goal, allocated: float = 0.0) -> float:
    """Return how much more ``goal`` can absorb after ``allocated`` was granted.

    Open-ended goals have no cap and return ``math.inf``.
    """

    match goal.goal_type:
        case GoalType.FIXED_AMOUNT:
            return max(0.0, float(goal.target_amount) - float(goal.current_amount) - allocated)
        case GoalType.OPEN_ENDED:
            return math.inf
    raise ValueError(f"Unsupported goal type: {goal.goal_type!r}")


def allocate_surplus(
    pool: float,
    goals: Iterable[Goal],
    allocated: MutableMapping[str, float],
) -> list[LineItem]:
    """Grant this month's ``pool`` to goals in strict priority order.

    Parameters
    ----------
    pool:
        Net new cash for the month (income minus expenses). Zero or negative
        pools allocate nothing.
    goals:
        The plan's goals; inactive ones are ignored.
    allocated:
        Running per-goal totals granted earlier in the same simulation. It is
        updated in place with this month's grants.

    Returns
    -------
    list[LineItem]
        One entry per goal that received a positive amount, in the order the
        goals were served.
    """

    remaining_pool = max(0.0, float(pool))
    allocations: list[LineItem] = []
    if remaining_pool <= 0:
        return allocations

    for goal in prioritise_goals(goals):
        if remaining_pool <= 0:
            break

        need = remaining_need(goal, allocated.get(goal.id, 0.0))
        if need <= ALLOCATION_TOLERANCE:
            continue

        amount = min(remaining_pool, need)
        allocations.append({"id": goal.id, "name": goal.name, "amount": amount})
        allocated[goal.id] = allocated.get(goal.id, 0.0) + amount
        remaining_pool -= amount

    return allocations
