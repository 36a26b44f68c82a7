"""SQLite database initialization, schema, and CRUD operations."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from typing import Optional

from .config import DB_PATH, ensure_data_dirs


def get_connection() -> sqlite3.Connection:
    """Get a database connection with row access by column name."""
    ensure_data_dirs()
    conn = sqlite3.connect(str(DB_PATH))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def init_db() -> None:
    """Initialize the database schema."""
    conn = get_connection()
    try:
        conn.executescript(SCHEMA_SQL)
        conn.commit()
    finally:
        conn.close()


SCHEMA_SQL = """
-- Goals table (children are found through parent_goal_id)
CREATE TABLE IF NOT EXISTS goals (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    loop TEXT NOT NULL,
    timeframe TEXT NOT NULL,
    parent_goal_id TEXT REFERENCES goals(id) ON DELETE SET NULL,
    status TEXT NOT NULL DEFAULT 'active',
    progress REAL NOT NULL DEFAULT 0,
    start_date TEXT NOT NULL,
    target_date TEXT NOT NULL,
    completed_at TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_goals_timeframe ON goals(timeframe);
CREATE INDEX IF NOT EXISTS idx_goals_loop ON goals(loop);
CREATE INDEX IF NOT EXISTS idx_goals_parent ON goals(parent_goal_id);

-- Goal metrics
CREATE TABLE IF NOT EXISTS goal_metrics (
    id TEXT PRIMARY KEY,
    goal_id TEXT NOT NULL REFERENCES goals(id) ON DELETE CASCADE,
    name TEXT NOT NULL,
    unit TEXT NOT NULL DEFAULT '',
    target REAL NOT NULL,
    current REAL NOT NULL DEFAULT 0
);

CREATE INDEX IF NOT EXISTS idx_goal_metrics_goal ON goal_metrics(goal_id);

-- Per-loop capacity state
CREATE TABLE IF NOT EXISTS loop_states (
    loop TEXT PRIMARY KEY,
    state TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


# --- CRUD Helpers ---

def now_iso() -> str:
    """Return current UTC time as ISO string."""
    return datetime.now(timezone.utc).isoformat()


def insert_goal(
    conn: sqlite3.Connection,
    goal_id: str,
    title: str,
    description: str,
    loop: str,
    timeframe: str,
    parent_goal_id: Optional[str],
    status: str,
    progress: float,
    start_date: str,
    target_date: str,
    created_at: str,
    updated_at: str,
    completed_at: Optional[str] = None,
) -> None:
    conn.execute(
        """INSERT INTO goals
        (id, title, description, loop, timeframe, parent_goal_id, status,
         progress, start_date, target_date, completed_at, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        (goal_id, title, description, loop, timeframe, parent_goal_id, status,
         progress, start_date, target_date, completed_at, created_at, updated_at),
    )


def insert_goal_metric(
    conn: sqlite3.Connection,
    metric_id: str,
    goal_id: str,
    name: str,
    unit: str,
    target: float,
    current: float = 0.0,
) -> None:
    conn.execute(
        """INSERT INTO goal_metrics (id, goal_id, name, unit, target, current)
        VALUES (?, ?, ?, ?, ?, ?)""",
        (metric_id, goal_id, name, unit, target, current),
    )


def update_goal(conn: sqlite3.Connection, goal_id: str, **fields) -> bool:
    """Update goal fields. Returns True if a row was updated."""
    if not fields:
        return False
    fields["updated_at"] = now_iso()
    set_clause = ", ".join(f"{k} = ?" for k in fields)
    values = list(fields.values()) + [goal_id]
    cursor = conn.execute(
        f"UPDATE goals SET {set_clause} WHERE id = ?", values
    )
    conn.commit()
    return cursor.rowcount > 0


def get_goal_row(conn: sqlite3.Connection, goal_id: str) -> Optional[sqlite3.Row]:
    return conn.execute("SELECT * FROM goals WHERE id = ?", (goal_id,)).fetchone()


def list_goal_rows(
    conn: sqlite3.Connection,
    timeframe: Optional[str] = None,
    loop: Optional[str] = None,
) -> list[sqlite3.Row]:
    """List goals in creation order with optional filters."""
    query = "SELECT * FROM goals WHERE 1=1"
    params: list = []
    if timeframe:
        query += " AND timeframe = ?"
        params.append(timeframe)
    if loop:
        query += " AND loop = ?"
        params.append(loop)
    query += " ORDER BY created_at, rowid"
    return conn.execute(query, params).fetchall()


def list_child_ids(conn: sqlite3.Connection, goal_id: str) -> list[str]:
    rows = conn.execute(
        "SELECT id FROM goals WHERE parent_goal_id = ? ORDER BY start_date, rowid",
        (goal_id,),
    ).fetchall()
    return [r["id"] for r in rows]


def list_metric_rows(conn: sqlite3.Connection, goal_id: str) -> list[sqlite3.Row]:
    return conn.execute(
        "SELECT * FROM goal_metrics WHERE goal_id = ? ORDER BY rowid", (goal_id,)
    ).fetchall()


def delete_goal_row(conn: sqlite3.Connection, goal_id: str) -> bool:
    cursor = conn.execute("DELETE FROM goals WHERE id = ?", (goal_id,))
    conn.commit()
    return cursor.rowcount > 0


def upsert_loop_state(conn: sqlite3.Connection, loop: str, state: str) -> None:
    conn.execute(
        """INSERT INTO loop_states (loop, state, updated_at) VALUES (?, ?, ?)
        ON CONFLICT(loop) DO UPDATE SET state = excluded.state,
        updated_at = excluded.updated_at""",
        (loop, state, now_iso()),
    )
    conn.commit()


def list_loop_state_rows(conn: sqlite3.Connection) -> list[sqlite3.Row]:
    return conn.execute("SELECT * FROM loop_states").fetchall()


def get_stats(conn: sqlite3.Connection) -> dict:
    """Goal counts by timeframe and status."""
    by_timeframe = {
        r["timeframe"]: r["n"]
        for r in conn.execute(
            "SELECT timeframe, COUNT(*) AS n FROM goals GROUP BY timeframe"
        ).fetchall()
    }
    by_status = {
        r["status"]: r["n"]
        for r in conn.execute(
            "SELECT status, COUNT(*) AS n FROM goals GROUP BY status"
        ).fetchall()
    }
    return {
        "goal_count": sum(by_timeframe.values()),
        "by_timeframe": by_timeframe,
        "by_status": by_status,
    }
