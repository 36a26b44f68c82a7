"""Goal hierarchy helpers: timeframe ordering, traversal, progress roll-up."""

from __future__ import annotations

import math
from typing import Optional

from .models import Goal, GoalHierarchy, GoalTimeframe

TIMEFRAME_ORDER: list[GoalTimeframe] = [
    GoalTimeframe.ANNUAL,
    GoalTimeframe.QUARTERLY,
    GoalTimeframe.MONTHLY,
    GoalTimeframe.WEEKLY,
    GoalTimeframe.DAILY,
]


def create_empty_goal_hierarchy() -> GoalHierarchy:
    return GoalHierarchy()


def get_goals_by_timeframe(hierarchy: GoalHierarchy, timeframe: GoalTimeframe) -> list[Goal]:
    return getattr(hierarchy, GoalTimeframe(timeframe).value)


def all_goals(hierarchy: GoalHierarchy) -> list[Goal]:
    """Flatten the hierarchy, coarsest timeframe first."""
    goals: list[Goal] = []
    for timeframe in TIMEFRAME_ORDER:
        goals.extend(get_goals_by_timeframe(hierarchy, timeframe))
    return goals


def add_goal(hierarchy: GoalHierarchy, goal: Goal) -> None:
    """Append a goal to the list matching its timeframe."""
    get_goals_by_timeframe(hierarchy, goal.timeframe).append(goal)


def get_child_goals(hierarchy: GoalHierarchy, parent_id: str) -> list[Goal]:
    return [g for g in all_goals(hierarchy) if g.parent_goal_id == parent_id]


def calculate_goal_progress(hierarchy: GoalHierarchy, goal_id: str) -> int:
    """Mean progress of a goal's children, rounded. 0 when it has none."""
    children = get_child_goals(hierarchy, goal_id)
    if not children:
        return 0
    total = sum(child.progress for child in children)
    return round_half_up(total / len(children))


def get_next_timeframe(timeframe: GoalTimeframe) -> Optional[GoalTimeframe]:
    """The next finer timeframe, or None for daily."""
    idx = TIMEFRAME_ORDER.index(GoalTimeframe(timeframe))
    if idx == len(TIMEFRAME_ORDER) - 1:
        return None
    return TIMEFRAME_ORDER[idx + 1]


def get_previous_timeframe(timeframe: GoalTimeframe) -> Optional[GoalTimeframe]:
    """The next coarser timeframe, or None for annual."""
    idx = TIMEFRAME_ORDER.index(GoalTimeframe(timeframe))
    if idx == 0:
        return None
    return TIMEFRAME_ORDER[idx - 1]


def is_finer(child: GoalTimeframe, parent: GoalTimeframe) -> bool:
    return TIMEFRAME_ORDER.index(GoalTimeframe(child)) > TIMEFRAME_ORDER.index(GoalTimeframe(parent))


def validate_links(hierarchy: GoalHierarchy) -> list[str]:
    """Check parent/child consistency across the hierarchy.

    Returns a list of human-readable problems; empty means the hierarchy is a
    consistent tree:
      - every parent_goal_id points at a goal that lists the child back
      - every child_goal_ids entry points at a goal whose parent is this goal
      - a child's timeframe is strictly finer than its parent's
    """
    by_id = {g.id: g for g in all_goals(hierarchy)}
    problems: list[str] = []

    for goal in by_id.values():
        if goal.parent_goal_id:
            parent = by_id.get(goal.parent_goal_id)
            if parent is None:
                problems.append(f"{goal.id}: parent {goal.parent_goal_id} not found")
            else:
                if goal.id not in parent.child_goal_ids:
                    problems.append(f"{goal.id}: not listed in parent {parent.id} children")
                if not is_finer(goal.timeframe, parent.timeframe):
                    problems.append(
                        f"{goal.id}: timeframe {goal.timeframe.value} is not finer "
                        f"than parent {parent.timeframe.value}"
                    )
        for child_id in goal.child_goal_ids:
            child = by_id.get(child_id)
            if child is None:
                problems.append(f"{goal.id}: child {child_id} not found")
            elif child.parent_goal_id != goal.id:
                problems.append(f"{goal.id}: child {child_id} has parent {child.parent_goal_id}")

    return problems


def round_half_up(value: float) -> int:
    """Round halves toward +infinity (2.5 -> 3, -2.5 -> -2), unlike round()."""
    return math.floor(value + 0.5)
