"""Tests for server tool logic (testing underlying modules directly)."""

import pytest

from looops.config import ensure_data_dirs
from looops.db import init_db


@pytest.fixture(autouse=True)
def setup_db(temp_data_dir):
    """Ensure DB is initialized for each test."""
    ensure_data_dirs()
    init_db()


def _suggest(count=24):
    from looops.goal_engine import generate_goal_suggestions
    from looops.goals import get_goal_hierarchy
    from looops.loop_states import get_loop_states
    from looops.profile import get_directional_document, get_prototype

    return generate_goal_suggestions(
        get_prototype(), get_loop_states(), get_goal_hierarchy(),
        get_directional_document(), count,
    )


class TestSuggestTools:
    def test_fresh_install_is_neutral(self):
        suggestions = _suggest()
        assert {s.relevance_score for s in suggestions} == {55}

    def test_loop_state_changes_ranking(self):
        from looops.loop_states import set_loop_state
        set_loop_state("Meaning", "BUILD")
        top = _suggest(count=4)
        assert [s.template.loop.value for s in top] == ["Meaning"] * 4
        assert top[0].relevance_score == 65

    def test_existing_annual_goal_downweights_loop(self):
        from looops.goal_engine import create_goal_from_template
        from looops.goals import create_goal
        from looops.templates import get_template

        create_goal(create_goal_from_template(get_template("fun_hobby_mastery")))
        fun = [s for s in _suggest() if s.template.loop.value == "Fun"]
        assert len(fun) == 3
        assert all(s.relevance_score == 22 for s in fun)

    def test_stored_prototype_and_directions_used(self):
        from looops.models import ArchetypeBlend, DirectionalDocument, UserPrototype
        from looops.profile import save_directional_document, save_prototype

        save_prototype(UserPrototype(archetype_blend=ArchetypeBlend(
            primary="Machine", secondary="Scientist",
            scores={"Machine": 70, "Scientist": 30},
        )))
        save_directional_document(DirectionalDocument.model_validate({
            "status": "complete",
            "loop_priority_ranking": ["Maintenance"],
        }))
        top = _suggest(count=1)[0]
        # 100*(0.95*.7*.5 + 0.85*.3*.35) = 42.175, x1.1 -> 46, +28 top priority
        assert top.template.id == "maintenance_systems_automate"
        assert top.relevance_score == 74
        assert top.reasoning == (
            "Maintenance is your top priority loop. Highly aligned with your Machine nature"
        )


class TestGoalTools:
    def test_create_decompose_balance(self):
        from looops.goal_engine import (
            calculate_goal_balance,
            create_goal_from_template,
            get_loops_needing_goals,
        )
        from looops.goals import create_goal, decompose_goal, get_goal_hierarchy
        from looops.models import LoopId
        from looops.templates import get_template

        goal = create_goal(create_goal_from_template(get_template("wealth_debt_freedom")))
        decompose_goal(goal.id)

        hierarchy = get_goal_hierarchy()
        assert len(hierarchy.quarterly) == 4
        assert calculate_goal_balance(hierarchy)[LoopId.WEALTH] == 1
        assert LoopId.WEALTH not in get_loops_needing_goals(hierarchy)
        assert len(get_loops_needing_goals(hierarchy)) == 6

    def test_goal_json_serializable(self):
        import json

        from looops.goal_engine import create_goal_from_template
        from looops.goals import create_goal
        from looops.templates import get_template

        goal = create_goal(create_goal_from_template(get_template("work_skill_mastery")))
        data = json.loads(json.dumps(goal.model_dump(mode="json")))
        assert data["loop"] == "Work"
        assert data["timeframe"] == "annual"
        assert data["metrics"][0]["name"] == "Learning hours"
