"""Goal store: persist goals and read them back as a GoalHierarchy."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Optional

from .db import (
    delete_goal_row,
    get_connection,
    get_goal_row,
    insert_goal,
    insert_goal_metric,
    list_child_ids,
    list_goal_rows,
    list_metric_rows,
    update_goal,
)
from .decomposition import decompose_annual_to_quarterly, decompose_quarterly_to_monthly
from .hierarchy import add_goal
from .models import Goal, GoalHierarchy, GoalMetric, GoalStatus, GoalTimeframe, LoopId

logger = logging.getLogger(__name__)


def _parse_goal_row(conn, row) -> Goal:
    """Convert a database row to a Goal model, with children and metrics."""
    return Goal(
        id=row["id"],
        title=row["title"],
        description=row["description"],
        loop=LoopId(row["loop"]),
        timeframe=GoalTimeframe(row["timeframe"]),
        parent_goal_id=row["parent_goal_id"],
        child_goal_ids=list_child_ids(conn, row["id"]),
        status=GoalStatus(row["status"]),
        progress=row["progress"],
        start_date=date.fromisoformat(row["start_date"]),
        target_date=date.fromisoformat(row["target_date"]),
        completed_at=datetime.fromisoformat(row["completed_at"]) if row["completed_at"] else None,
        metrics=[
            GoalMetric(
                id=m["id"],
                name=m["name"],
                unit=m["unit"],
                target=m["target"],
                current=m["current"],
            )
            for m in list_metric_rows(conn, row["id"])
        ],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


def _insert(conn, goal: Goal) -> None:
    insert_goal(
        conn, goal.id, goal.title, goal.description,
        goal.loop.value, goal.timeframe.value, goal.parent_goal_id,
        goal.status.value, goal.progress,
        goal.start_date.isoformat(), goal.target_date.isoformat(),
        goal.created_at.isoformat(), goal.updated_at.isoformat(),
        goal.completed_at.isoformat() if goal.completed_at else None,
    )
    for m in goal.metrics:
        insert_goal_metric(conn, m.id, goal.id, m.name, m.unit, m.target, m.current)


def save_goals(goals: list[Goal]) -> list[Goal]:
    """Insert goals in order (parents before children) in one transaction.

    Returns the stored goals as read back, so child_goal_ids reflect the
    database rather than the caller's copies.
    """
    conn = get_connection()
    try:
        for goal in goals:
            _insert(conn, goal)
        conn.commit()
        logger.info("Saved %d goal(s)", len(goals))
        return [_parse_goal_row(conn, get_goal_row(conn, g.id)) for g in goals]
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def create_goal(goal: Goal) -> Goal:
    return save_goals([goal])[0]


def get_goal(goal_id: str) -> Optional[Goal]:
    conn = get_connection()
    try:
        row = get_goal_row(conn, goal_id)
        if not row:
            return None
        return _parse_goal_row(conn, row)
    finally:
        conn.close()


def get_goal_hierarchy(loop: Optional[str] = None) -> GoalHierarchy:
    """Load every stored goal, grouped by timeframe."""
    hierarchy = GoalHierarchy()
    conn = get_connection()
    try:
        for row in list_goal_rows(conn, loop=loop):
            add_goal(hierarchy, _parse_goal_row(conn, row))
    finally:
        conn.close()
    return hierarchy


def update_goal_progress(goal_id: str, progress: float) -> Optional[Goal]:
    """Set progress (clamped to 0-100). Returns None if not found."""
    progress = max(0.0, min(100.0, progress))
    conn = get_connection()
    try:
        if not update_goal(conn, goal_id, progress=progress):
            return None
        return _parse_goal_row(conn, get_goal_row(conn, goal_id))
    finally:
        conn.close()


def set_goal_status(goal_id: str, status: str) -> Optional[Goal]:
    """Change status. Completing a goal stamps completed_at; other statuses clear it."""
    status = GoalStatus(status)
    completed_at = (
        datetime.now(timezone.utc).isoformat() if status == GoalStatus.COMPLETED else None
    )
    conn = get_connection()
    try:
        if not update_goal(conn, goal_id, status=status.value, completed_at=completed_at):
            return None
        return _parse_goal_row(conn, get_goal_row(conn, goal_id))
    finally:
        conn.close()


def delete_goal(goal_id: str) -> bool:
    """Delete a goal and its metrics. Its children are kept, detached."""
    conn = get_connection()
    try:
        deleted = delete_goal_row(conn, goal_id)
        if deleted:
            logger.info("Deleted goal %s", goal_id)
        return deleted
    finally:
        conn.close()


def decompose_goal(goal_id: str, now: Optional[datetime] = None) -> dict:
    """Create and store milestone children for a stored annual or quarterly goal.

    A goal is broken down once; a goal that already has children is left alone.
    """
    goal = get_goal(goal_id)
    if goal is None:
        return {"error": f"Goal {goal_id} not found"}
    if goal.child_goal_ids:
        return {"error": f"Goal {goal_id} already has milestones"}

    if goal.timeframe == GoalTimeframe.ANNUAL:
        children = decompose_annual_to_quarterly(goal, now=now)
    elif goal.timeframe == GoalTimeframe.QUARTERLY:
        children = decompose_quarterly_to_monthly(goal, now=now)
    else:
        return {
            "error": f"Cannot decompose a {goal.timeframe.value} goal; "
            "only annual and quarterly goals have milestone breakdowns"
        }

    stored = save_goals(children)
    logger.info("Decomposed %s goal %s into %d children", goal.timeframe.value, goal_id, len(stored))
    return {
        "status": "decomposed",
        "goal": get_goal(goal_id),
        "children": stored,
    }
