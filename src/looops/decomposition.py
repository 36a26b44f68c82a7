"""Break goals into finer-grained milestone goals.

Children are placeholders: "Q2 milestone", "May milestone", with a description
inviting the user to define them. Neither function checks the source goal's
timeframe; goals.decompose_goal picks the right one from the stored goal.
"""

from __future__ import annotations

import calendar
import uuid
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from .models import Goal, GoalStatus, GoalTimeframe


def _generate_id() -> str:
    return uuid.uuid4().hex[:12]


def _milestone(
    parent: Goal,
    label: str,
    suffix: str,
    timeframe: GoalTimeframe,
    start: date,
    end: date,
    now: datetime,
) -> Goal:
    return Goal(
        id=f"goal_{_generate_id()}_{suffix}",
        title=f"{label} milestone",
        description=f"Define your {label} milestone for: {parent.title}",
        loop=parent.loop,
        timeframe=timeframe,
        parent_goal_id=parent.id,
        child_goal_ids=[],
        status=GoalStatus.ACTIVE,
        progress=0,
        start_date=start,
        target_date=end,
        created_at=now,
        updated_at=now,
    )


def quarter_ranges(year: int) -> list[tuple[str, date, date]]:
    """(label, first day, last day) for each calendar quarter of ``year``."""
    ranges = []
    for q in range(4):
        first_month = q * 3 + 1
        last_month = first_month + 2
        last_day = calendar.monthrange(year, last_month)[1]
        ranges.append((f"Q{q + 1}", date(year, first_month, 1), date(year, last_month, last_day)))
    return ranges


def month_ranges(start: date, end: date) -> list[tuple[str, date, date]]:
    """(month name, first day, last day) for every month from start to end inclusive.

    The first range starts at ``start``; the last ends at ``end``.
    """
    ranges = []
    current = start
    while current <= end:
        month_end = date(current.year, current.month, calendar.monthrange(current.year, current.month)[1])
        ranges.append((calendar.month_name[current.month], current, min(month_end, end)))
        current = month_end + timedelta(days=1)
    return ranges


def decompose_annual_to_quarterly(annual_goal: Goal, now: Optional[datetime] = None) -> list[Goal]:
    """Four quarterly milestones under an annual goal.

    Quarters belong to the calendar year of ``now``, not the goal's own dates.
    """
    now = now or datetime.now(timezone.utc)
    return [
        _milestone(annual_goal, label, f"q{i + 1}", GoalTimeframe.QUARTERLY, start, end, now)
        for i, (label, start, end) in enumerate(quarter_ranges(now.year))
    ]


def decompose_quarterly_to_monthly(quarterly_goal: Goal, now: Optional[datetime] = None) -> list[Goal]:
    """One monthly milestone per calendar month the goal's date range touches."""
    now = now or datetime.now(timezone.utc)
    months = month_ranges(quarterly_goal.start_date, quarterly_goal.target_date)
    return [
        _milestone(quarterly_goal, label, f"m{i + 1}", GoalTimeframe.MONTHLY, start, end, now)
        for i, (label, start, end) in enumerate(months)
    ]
