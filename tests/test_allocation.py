"""Tests for the priority waterfall that distributes monthly surplus."""

from __future__ import annotations

import math

import pytest

from analytics.allocation import allocate_surplus, prioritise_goals, remaining_need
from core.models import GoalType


@pytest.fixture()
def two_goals(make_goal):
    return [
        make_goal(600, id="a", name="Emergency Fund", priority_order=1),
        make_goal(1000, id="b", name="Vacation", priority_order=2),
    ]


def test_higher_priority_is_filled_first(two_goals):
    allocated: dict[str, float] = {}

    grants = allocate_surplus(1000, two_goals, allocated)

    assert [(row["id"], row["amount"]) for row in grants] == [("a", 600), ("b", 400)]
    assert allocated == {"a": 600, "b": 400}


def test_running_totals_cap_later_months(two_goals):
    allocated: dict[str, float] = {}

    allocate_surplus(1000, two_goals, allocated)
    second = allocate_surplus(1000, two_goals, allocated)

    assert [(row["id"], row["amount"]) for row in second] == [("b", 600)]
    assert allocated["b"] == pytest.approx(1000)


def test_non_positive_pool_allocates_nothing(two_goals):
    allocated: dict[str, float] = {}

    assert allocate_surplus(0, two_goals, allocated) == []
    assert allocate_surplus(-250, two_goals, allocated) == []
    assert allocated == {}


def test_ties_keep_declaration_order(make_goal):
    goals = [
        make_goal(500, id="first", priority_order=3),
        make_goal(500, id="second", priority_order=3),
        make_goal(500, id="urgent", priority_order=1),
    ]

    assert [goal.id for goal in prioritise_goals(goals)] == ["urgent", "first", "second"]
    grants = allocate_surplus(800, goals, {})
    assert [(row["id"], row["amount"]) for row in grants] == [("urgent", 500), ("first", 300)]


def test_inactive_and_completed_goals_are_skipped(make_goal):
    goals = [
        make_goal(500, id="paused", priority_order=1, is_active=False),
        make_goal(500, id="done", priority_order=2, current_amount=500),
        make_goal(500, id="open", priority_order=3),
    ]

    grants = allocate_surplus(300, goals, {})

    assert [(row["id"], row["amount"]) for row in grants] == [("open", 300)]


def test_open_ended_goal_absorbs_the_rest(make_goal):
    goals = [
        make_goal(200, id="capped", priority_order=1),
        make_goal(0, id="invest", priority_order=2, goal_type=GoalType.OPEN_ENDED),
        make_goal(500, id="starved", priority_order=3),
    ]

    grants = allocate_surplus(1000, goals, {})

    assert [(row["id"], row["amount"]) for row in grants] == [("capped", 200), ("invest", 800)]


def test_remaining_need(make_goal):
    assert remaining_need(make_goal(1000, current_amount=250), 500) == pytest.approx(250)
    assert remaining_need(make_goal(1000, current_amount=1200)) == 0.0
    assert math.isinf(remaining_need(make_goal(0, goal_type=GoalType.OPEN_ENDED)))
