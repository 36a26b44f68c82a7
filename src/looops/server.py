"""MCP server entry point - goal engine tools for Looops."""

from __future__ import annotations

import json
import logging
import sys

from fastmcp import FastMCP

from . import config
from .config import ensure_data_dirs
from .db import get_connection, get_stats, init_db

# Configure logging to stderr (stdout is reserved for MCP JSON-RPC)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger("looops")

# Initialize data directories and database
ensure_data_dirs()
init_db()

# Create the MCP server
mcp = FastMCP(
    "Looops",
    instructions=(
        "Looops organizes a life around seven loops: Health, Wealth, Family, "
        "Work, Fun, Maintenance, Meaning. Use these tools to suggest goals, "
        "store and break down goals, and set each loop's capacity state."
    ),
)


def _suggestion_dict(s) -> dict:
    return {
        "template_id": s.template.id,
        "title": s.template.title,
        "loop": s.template.loop.value,
        "relevance_score": s.relevance_score,
        "reasoning": s.reasoning,
    }


def _goal_dict(goal) -> dict:
    return goal.model_dump(mode="json")


# =============================================================================
# Suggestion Tools (2)
# =============================================================================

@mcp.tool()
def goal_suggest(count: int | None = None) -> str:
    """Suggest annual goals ranked for the user.

    Uses the stored archetype blend, loop states, existing goals and
    directional document. Loops that already have an annual goal are ranked
    lower but still shown.
    """
    from .goal_engine import generate_goal_suggestions
    from .goals import get_goal_hierarchy
    from .loop_states import get_loop_states
    from .profile import get_directional_document, get_prototype

    try:
        suggestions = generate_goal_suggestions(
            get_prototype(),
            get_loop_states(),
            get_goal_hierarchy(),
            get_directional_document(),
            count if count is not None else config.DEFAULT_SUGGESTION_COUNT,
        )
        return json.dumps({
            "count": len(suggestions),
            "suggestions": [_suggestion_dict(s) for s in suggestions],
        })
    except Exception as e:
        logger.error("goal_suggest failed: %s", e, exc_info=True)
        return json.dumps({"error": str(e)})


@mcp.tool()
def goal_suggest_for_loop(loop: str) -> str:
    """Rank one loop's goal templates by archetype affinity."""
    from .goal_engine import get_loop_goal_suggestions
    from .models import LoopId
    from .profile import get_prototype

    try:
        suggestions = get_loop_goal_suggestions(LoopId(loop), get_prototype())
        return json.dumps({
            "loop": loop,
            "suggestions": [_suggestion_dict(s) for s in suggestions],
        })
    except Exception as e:
        logger.error("goal_suggest_for_loop failed: %s", e, exc_info=True)
        return json.dumps({"error": str(e)})


# =============================================================================
# Goal Tools (8)
# =============================================================================

@mcp.tool()
def goal_create_from_template(
    template_id: str,
    title: str | None = None,
    description: str | None = None,
) -> str:
    """Create an annual goal from a suggestion template, with its suggested metrics."""
    from .goal_engine import create_goal_from_template
    from .goals import create_goal
    from .templates import get_template

    try:
        template = get_template(template_id)
        if template is None:
            return json.dumps({"error": f"Unknown template: {template_id}"})
        goal = create_goal(create_goal_from_template(template, title, description))
        return json.dumps({"status": "created", "goal": _goal_dict(goal)})
    except Exception as e:
        logger.error("goal_create_from_template failed: %s", e, exc_info=True)
        return json.dumps({"error": str(e)})


@mcp.tool()
def goal_list(loop: str | None = None) -> str:
    """List stored goals grouped by timeframe, optionally for one loop."""
    from .goals import get_goal_hierarchy

    try:
        hierarchy = get_goal_hierarchy(loop)
        return json.dumps(hierarchy.model_dump(mode="json"))
    except Exception as e:
        logger.error("goal_list failed: %s", e, exc_info=True)
        return json.dumps({"error": str(e)})


@mcp.tool()
def goal_get(goal_id: str) -> str:
    """Get one goal with its children, metrics and rolled-up child progress."""
    from .goals import get_goal, get_goal_hierarchy
    from .hierarchy import calculate_goal_progress

    try:
        goal = get_goal(goal_id)
        if goal is None:
            return json.dumps({"error": f"Goal {goal_id} not found"})
        result = _goal_dict(goal)
        result["children_progress"] = calculate_goal_progress(get_goal_hierarchy(), goal_id)
        return json.dumps(result)
    except Exception as e:
        logger.error("goal_get failed: %s", e, exc_info=True)
        return json.dumps({"error": str(e)})


@mcp.tool()
def goal_update_progress(goal_id: str, progress: float) -> str:
    """Set a goal's progress percentage (0-100)."""
    from .goals import update_goal_progress

    try:
        goal = update_goal_progress(goal_id, progress)
        if goal is None:
            return json.dumps({"error": f"Goal {goal_id} not found"})
        return json.dumps({"status": "updated", "goal_id": goal_id, "progress": goal.progress})
    except Exception as e:
        logger.error("goal_update_progress failed: %s", e, exc_info=True)
        return json.dumps({"error": str(e)})


@mcp.tool()
def goal_set_status(goal_id: str, status: str) -> str:
    """Change a goal's status: active, completed, abandoned, paused."""
    from .goals import set_goal_status

    try:
        goal = set_goal_status(goal_id, status)
        if goal is None:
            return json.dumps({"error": f"Goal {goal_id} not found"})
        return json.dumps({"status": "updated", "goal_id": goal_id, "goal_status": goal.status.value})
    except Exception as e:
        logger.error("goal_set_status failed: %s", e, exc_info=True)
        return json.dumps({"error": str(e)})


@mcp.tool()
def goal_delete(goal_id: str) -> str:
    """Delete a goal. Its milestone children are kept but detached."""
    from .goals import delete_goal

    try:
        if delete_goal(goal_id):
            return json.dumps({"status": "deleted", "goal_id": goal_id})
        return json.dumps({"status": "not_found", "goal_id": goal_id})
    except Exception as e:
        logger.error("goal_delete failed: %s", e, exc_info=True)
        return json.dumps({"error": str(e)})


@mcp.tool()
def goal_decompose(goal_id: str) -> str:
    """Break an annual goal into quarters, or a quarterly goal into months."""
    from .goals import decompose_goal

    try:
        result = decompose_goal(goal_id)
        if "error" in result:
            return json.dumps(result)
        return json.dumps({
            "status": result["status"],
            "goal_id": goal_id,
            "children": [_goal_dict(c) for c in result["children"]],
        })
    except Exception as e:
        logger.error("goal_decompose failed: %s", e, exc_info=True)
        return json.dumps({"error": str(e)})


@mcp.tool()
def goal_balance() -> str:
    """Annual goal count per loop, the loops with none, and store stats."""
    from .goal_engine import calculate_goal_balance, get_loops_needing_goals
    from .goals import get_goal_hierarchy
    from .hierarchy import validate_links

    try:
        hierarchy = get_goal_hierarchy()
        conn = get_connection()
        try:
            stats = get_stats(conn)
        finally:
            conn.close()
        return json.dumps({
            "balance": {loop.value: n for loop, n in calculate_goal_balance(hierarchy).items()},
            "loops_needing_goals": [loop.value for loop in get_loops_needing_goals(hierarchy)],
            "link_problems": validate_links(hierarchy),
            "stats": stats,
        })
    except Exception as e:
        logger.error("goal_balance failed: %s", e, exc_info=True)
        return json.dumps({"error": str(e)})


# =============================================================================
# Loop State Tools (2)
# =============================================================================

@mcp.tool()
def loop_state_get() -> str:
    """Current state of every loop (BUILD, MAINTAIN, RECOVER, HIBERNATE)."""
    from .loop_states import get_loop_states

    try:
        return json.dumps({loop.value: state.value for loop, state in get_loop_states().items()})
    except Exception as e:
        logger.error("loop_state_get failed: %s", e, exc_info=True)
        return json.dumps({"error": str(e)})


@mcp.tool()
def loop_state_set(loop: str, state: str) -> str:
    """Set a loop's state: BUILD, MAINTAIN, RECOVER or HIBERNATE."""
    from .loop_states import set_loop_state

    try:
        new_state = set_loop_state(loop, state)
        return json.dumps({"status": "updated", "loop": loop, "state": new_state.value})
    except Exception as e:
        logger.error("loop_state_set failed: %s", e, exc_info=True)
        return json.dumps({"error": str(e)})


# =============================================================================
# Profile Tools (2)
# =============================================================================

@mcp.tool()
def prototype_set(
    primary: str,
    secondary: str,
    scores: dict[str, float],
    tertiary: str | None = None,
    name: str = "",
) -> str:
    """Store the user's archetype blend.

    Archetypes: Machine, Warrior, Artist, Scientist, Stoic, Visionary.
    Scores are blend percentages (0-100) keyed by archetype.
    """
    from .models import ArchetypeBlend, UserPrototype
    from .profile import save_prototype

    try:
        blend = ArchetypeBlend(
            primary=primary, secondary=secondary, tertiary=tertiary,
            scores=scores, name=name,
        )
        save_prototype(UserPrototype(archetype_blend=blend))
        return json.dumps({"status": "saved", "archetype_blend": blend.model_dump(mode="json")})
    except Exception as e:
        logger.error("prototype_set failed: %s", e, exc_info=True)
        return json.dumps({"error": str(e)})


@mcp.tool()
def directions_set(
    loop_priority_ranking: list[str],
    loops: dict[str, dict] | None = None,
    status: str = "complete",
) -> str:
    """Store the directional document used to bias goal suggestions.

    loop_priority_ranking: loops from highest to lowest priority.
    loops: per-loop {current_allocation, desired_allocation,
    current_satisfaction, current_season}; season is building, maintaining,
    recovering or hibernating. A "draft" document is stored but not used.
    """
    from .models import DirectionalDocument
    from .profile import save_directional_document

    try:
        doc = DirectionalDocument.model_validate({
            "status": status,
            "loop_priority_ranking": loop_priority_ranking,
            "loops": loops or {},
        })
        save_directional_document(doc)
        return json.dumps({"status": "saved", "document_status": doc.status.value})
    except Exception as e:
        logger.error("directions_set failed: %s", e, exc_info=True)
        return json.dumps({"error": str(e)})


# =============================================================================
# Server entry point
# =============================================================================

def main():
    """Run the MCP server."""
    logger.info("Looops MCP server starting...")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
