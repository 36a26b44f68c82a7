"""Loop state store. Loops never set explicitly read as MAINTAIN."""

from __future__ import annotations

import logging

from .db import get_connection, list_loop_state_rows, upsert_loop_state
from .models import ALL_LOOPS, LoopId, LoopStateType

logger = logging.getLogger(__name__)

DEFAULT_LOOP_STATE = LoopStateType.MAINTAIN


def get_loop_states() -> dict[LoopId, LoopStateType]:
    """Current state for every loop."""
    states = {loop: DEFAULT_LOOP_STATE for loop in ALL_LOOPS}
    conn = get_connection()
    try:
        rows = list_loop_state_rows(conn)
    finally:
        conn.close()

    for r in rows:
        try:
            states[LoopId(r["loop"])] = LoopStateType(r["state"])
        except ValueError:
            logger.warning("Skipping invalid stored loop state %s=%s", r["loop"], r["state"])
    return states


def set_loop_state(loop: str, state: str) -> LoopStateType:
    """Set one loop's state. Raises ValueError for unknown loops or states."""
    loop_id = LoopId(loop)
    new_state = LoopStateType(state)
    conn = get_connection()
    try:
        upsert_loop_state(conn, loop_id.value, new_state.value)
    finally:
        conn.close()
    logger.info("Loop %s set to %s", loop_id.value, new_state.value)
    return new_state
