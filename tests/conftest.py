"""Shared test fixtures."""

from datetime import date, datetime, timezone

import pytest


@pytest.fixture(autouse=True)
def temp_data_dir(monkeypatch, tmp_path):
    """Override data directories to use a temp dir for each test."""
    import looops.config as config

    data_dir = tmp_path / "data"
    data_dir.mkdir()

    monkeypatch.setattr(config, "DATA_DIR", data_dir)
    monkeypatch.setattr(config, "DB_PATH", data_dir / "looops.db")
    monkeypatch.setattr(config, "PROFILE_PATH", data_dir / "profile.yaml")

    # Also patch the db module's reference to DB_PATH
    import looops.db as db_module
    monkeypatch.setattr(db_module, "DB_PATH", data_dir / "looops.db")

    # Patch profile module's imported references
    import looops.profile as profile_mod
    monkeypatch.setattr(profile_mod, "PROFILE_PATH", data_dir / "profile.yaml")

    return data_dir


@pytest.fixture
def fixed_now():
    return datetime(2026, 5, 14, 9, 30, tzinfo=timezone.utc)


def make_goal(
    goal_id="goal_test",
    title="Transform my physical fitness",
    loop="Health",
    timeframe="annual",
    start=date(2026, 1, 1),
    end=date(2026, 12, 31),
    **extra,
):
    """Build a Goal without touching the database."""
    from looops.models import Goal

    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    return Goal(
        id=goal_id,
        title=title,
        loop=loop,
        timeframe=timeframe,
        start_date=start,
        target_date=end,
        created_at=now,
        updated_at=now,
        **extra,
    )


@pytest.fixture
def goal_factory():
    return make_goal
