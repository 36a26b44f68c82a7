"""Tests for the loop state store."""

import pytest

from looops.config import ensure_data_dirs
from looops.db import init_db
from looops.loop_states import DEFAULT_LOOP_STATE, get_loop_states, set_loop_state
from looops.models import ALL_LOOPS, LoopId, LoopStateType


@pytest.fixture(autouse=True)
def setup_db(temp_data_dir):
    ensure_data_dirs()
    init_db()


class TestLoopStates:
    def test_defaults_to_maintain(self):
        states = get_loop_states()
        assert set(states) == set(ALL_LOOPS)
        assert all(s == DEFAULT_LOOP_STATE == LoopStateType.MAINTAIN for s in states.values())

    def test_set_and_get(self):
        assert set_loop_state("Health", "BUILD") == LoopStateType.BUILD
        set_loop_state("Fun", "HIBERNATE")
        states = get_loop_states()
        assert states[LoopId.HEALTH] == LoopStateType.BUILD
        assert states[LoopId.FUN] == LoopStateType.HIBERNATE
        assert states[LoopId.WORK] == LoopStateType.MAINTAIN

    def test_overwrite(self):
        set_loop_state("Work", "BUILD")
        set_loop_state("Work", "RECOVER")
        assert get_loop_states()[LoopId.WORK] == LoopStateType.RECOVER

    def test_unknown_loop_rejected(self):
        with pytest.raises(ValueError):
            set_loop_state("Spirit", "BUILD")

    def test_unknown_state_rejected(self):
        with pytest.raises(ValueError):
            set_loop_state("Health", "SPRINT")

    def test_corrupt_row_skipped(self):
        from looops.db import upsert_loop_state, get_connection
        conn = get_connection()
        try:
            upsert_loop_state(conn, "Health", "SPRINT")
        finally:
            conn.close()
        assert get_loop_states()[LoopId.HEALTH] == LoopStateType.MAINTAIN
