"""Tests for goal hierarchy helpers."""

import pytest

from looops.hierarchy import (
    add_goal,
    all_goals,
    calculate_goal_progress,
    create_empty_goal_hierarchy,
    get_child_goals,
    get_goals_by_timeframe,
    get_next_timeframe,
    get_previous_timeframe,
    round_half_up,
    validate_links,
)
from looops.models import GoalHierarchy, GoalTimeframe


def _tree(goal_factory):
    annual = goal_factory("a", child_goal_ids=["q1", "q2"])
    q1 = goal_factory("q1", timeframe="quarterly", parent_goal_id="a", progress=40)
    q2 = goal_factory("q2", timeframe="quarterly", parent_goal_id="a", progress=25)
    return GoalHierarchy(annual=[annual], quarterly=[q1, q2])


class TestTimeframes:
    @pytest.mark.parametrize("timeframe,expected", [
        ("annual", "quarterly"),
        ("quarterly", "monthly"),
        ("monthly", "weekly"),
        ("weekly", "daily"),
        ("daily", None),
    ])
    def test_next(self, timeframe, expected):
        result = get_next_timeframe(GoalTimeframe(timeframe))
        assert (result.value if result else None) == expected

    def test_previous(self):
        assert get_previous_timeframe(GoalTimeframe.ANNUAL) is None
        assert get_previous_timeframe(GoalTimeframe.DAILY) == GoalTimeframe.WEEKLY


class TestTraversal:
    def test_empty(self):
        hierarchy = create_empty_goal_hierarchy()
        assert all_goals(hierarchy) == []
        assert get_goals_by_timeframe(hierarchy, GoalTimeframe.WEEKLY) == []

    def test_add_goal_files_by_timeframe(self, goal_factory):
        hierarchy = create_empty_goal_hierarchy()
        add_goal(hierarchy, goal_factory("w", timeframe="weekly"))
        assert [g.id for g in hierarchy.weekly] == ["w"]

    def test_children(self, goal_factory):
        hierarchy = _tree(goal_factory)
        assert [g.id for g in get_child_goals(hierarchy, "a")] == ["q1", "q2"]
        assert get_child_goals(hierarchy, "q1") == []

    def test_progress_is_rounded_mean(self, goal_factory):
        # (40 + 25) / 2 = 32.5 -> 33
        assert calculate_goal_progress(_tree(goal_factory), "a") == 33

    def test_progress_without_children(self, goal_factory):
        assert calculate_goal_progress(_tree(goal_factory), "q1") == 0


class TestValidateLinks:
    def test_consistent_tree(self, goal_factory):
        assert validate_links(_tree(goal_factory)) == []

    def test_child_missing_from_parent_list(self, goal_factory):
        hierarchy = _tree(goal_factory)
        hierarchy.annual[0].child_goal_ids = ["q1"]
        problems = validate_links(hierarchy)
        assert problems == ["q2: not listed in parent a children"]

    def test_child_points_elsewhere(self, goal_factory):
        hierarchy = _tree(goal_factory)
        hierarchy.quarterly[1].parent_goal_id = None
        assert validate_links(hierarchy) == ["a: child q2 has parent None"]

    def test_timeframe_must_be_finer(self, goal_factory):
        parent = goal_factory("m", timeframe="monthly", child_goal_ids=["x"])
        child = goal_factory("x", timeframe="annual", parent_goal_id="m")
        problems = validate_links(GoalHierarchy(annual=[child], monthly=[parent]))
        assert problems == ["x: timeframe annual is not finer than parent monthly"]

    def test_dangling_references(self, goal_factory):
        orphan = goal_factory("o", timeframe="monthly", parent_goal_id="gone")
        parent = goal_factory("p", child_goal_ids=["missing"])
        problems = validate_links(GoalHierarchy(annual=[parent], monthly=[orphan]))
        assert "o: parent gone not found" in problems
        assert "p: child missing not found" in problems


class TestRoundHalfUp:
    @pytest.mark.parametrize("value,expected", [
        (2.5, 3), (3.5, 4), (2.49, 2), (0, 0), (-2.5, -2), (49.14, 49),
    ])
    def test_rounding(self, value, expected):
        assert round_half_up(value) == expected
