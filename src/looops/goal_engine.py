"""Goal engine: archetype- and direction-driven goal suggestions.

Scores every catalog template for a user and explains each score:

  base      archetype blend affinity (0-100), or a neutral 50 / 20 without one
  x state   BUILD 1.3, MAINTAIN 1.1, RECOVER 0.9, HIBERNATE 0.7
  + dirs    priority rank, dissatisfaction, allocation gap, season
            (only for a non-draft directional document)

The result is clamped to 0-100. Everything here is a pure function of its
inputs; persistence lives in goals.py.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from .hierarchy import round_half_up
from .models import (
    ALL_LOOPS,
    ArchetypeBlend,
    ArchetypeId,
    DirectionalDocument,
    Goal,
    GoalHierarchy,
    GoalMetric,
    GoalStatus,
    GoalSuggestion,
    GoalTemplate,
    LoopId,
    LoopSeason,
    LoopStateType,
    UserPrototype,
)
from .templates import GOAL_TEMPLATES, templates_for_loop

logger = logging.getLogger(__name__)

# Blend weights for primary / secondary / tertiary archetypes
PRIMARY_WEIGHT = 0.5
SECONDARY_WEIGHT = 0.35
TERTIARY_WEIGHT = 0.15

NEUTRAL_BASE_SCORE = 50
COVERED_LOOP_BASE_SCORE = 20

STATE_MULTIPLIERS: dict[LoopStateType, float] = {
    LoopStateType.BUILD: 1.3,
    LoopStateType.MAINTAIN: 1.1,
    LoopStateType.RECOVER: 0.9,
    LoopStateType.HIBERNATE: 0.7,
}

SEASON_ADJUSTMENTS: dict[LoopSeason, int] = {
    LoopSeason.BUILDING: 10,
    LoopSeason.MAINTAINING: 0,
    LoopSeason.RECOVERING: -5,
    LoopSeason.HIBERNATING: -10,
}

TOP_PRIORITY_BONUS = 28
PRIORITY_RANK_STEP = 4
MAX_DISSATISFACTION_BONUS = 20
MAX_ALLOCATION_BONUS = 15
ALLOCATION_GAP_SCALE = 50

# Affinity at or above this earns an archetype clause in the reasoning
STRONG_AFFINITY = 0.8


def _generate_id() -> str:
    return uuid.uuid4().hex[:12]


def _valid_blend(prototype: Optional[UserPrototype]) -> Optional[ArchetypeBlend]:
    """The prototype's blend if it has both a primary and a secondary archetype."""
    if prototype is None or prototype.archetype_blend is None:
        return None
    blend = prototype.archetype_blend
    return blend if blend.is_valid else None


def _normalize_loop_states(loop_states: dict) -> dict[LoopId, LoopStateType]:
    """Coerce keys and values to enums, dropping entries that aren't valid."""
    states: dict[LoopId, LoopStateType] = {}
    for loop, state in (loop_states or {}).items():
        try:
            states[LoopId(loop)] = LoopStateType(state)
        except ValueError:
            logger.warning("Ignoring invalid loop state %r=%r", loop, state)
    return states


def _active_directions(doc: Optional[DirectionalDocument]) -> Optional[DirectionalDocument]:
    if doc is None or not doc.is_active:
        return None
    return doc


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

def archetype_base_score(template: GoalTemplate, blend: ArchetypeBlend) -> float:
    """Weighted blend affinity scaled to 0-100."""
    score = (
        template.affinity(blend.primary) * (blend.score(blend.primary) / 100) * PRIMARY_WEIGHT
        + template.affinity(blend.secondary) * (blend.score(blend.secondary) / 100) * SECONDARY_WEIGHT
    )
    if blend.tertiary is not None:
        score += template.affinity(blend.tertiary) * (blend.score(blend.tertiary) / 100) * TERTIARY_WEIGHT
    return score * 100


def base_score(
    template: GoalTemplate,
    blend: Optional[ArchetypeBlend],
    covered_loops: set[LoopId],
) -> float:
    if blend is not None:
        return archetype_base_score(template, blend)
    if template.loop in covered_loops:
        return COVERED_LOOP_BASE_SCORE
    return NEUTRAL_BASE_SCORE


def state_multiplier(state: Optional[LoopStateType]) -> float:
    """Multiplier for a loop state. Unknown or missing state leaves the score alone."""
    if state is None:
        return 1.0
    return STATE_MULTIPLIERS.get(state, 1.0)


class DirectionalAdjustment(BaseModel):
    """Additive score change from a directional document, with its reasons."""

    bonus: int = 0
    reasons: list[str] = Field(default_factory=list)


def directional_adjustment(loop: LoopId, doc: DirectionalDocument) -> DirectionalAdjustment:
    adj = DirectionalAdjustment()
    name = loop.value

    ranking = doc.loop_priority_ranking
    if loop in ranking:
        rank = ranking.index(loop)
        adj.bonus += TOP_PRIORITY_BONUS - rank * PRIORITY_RANK_STEP
        if rank == 0:
            adj.reasons.append(f"{name} is your top priority loop")
        elif rank <= 2:
            adj.reasons.append(f"{name} is one of your top 3 priorities")

    directions = doc.loops.get(loop)
    if directions is None:
        return adj

    dissatisfaction = 100 - directions.current_satisfaction
    adj.bonus += round_half_up(dissatisfaction / 100 * MAX_DISSATISFACTION_BONUS)
    if dissatisfaction >= 50:
        adj.reasons.append(
            f"Low satisfaction in {name} ({_fmt_number(directions.current_satisfaction)}%)"
        )

    gap = directions.desired_allocation - directions.current_allocation
    if gap > 0:
        adj.bonus += round_half_up(gap / ALLOCATION_GAP_SCALE * MAX_ALLOCATION_BONUS)
        if gap >= 20:
            adj.reasons.append(f"You want more time in {name} (+{_fmt_number(gap)}%)")

    adj.bonus += SEASON_ADJUSTMENTS.get(directions.current_season, 0)
    if directions.current_season == LoopSeason.BUILDING:
        adj.reasons.append(f"{name} is in a building season")

    return adj


def _fmt_number(value: float) -> str:
    """Render 30.0 as '30' and 12.5 as '12.5'."""
    return str(int(value)) if float(value).is_integer() else str(value)


def score_template(
    template: GoalTemplate,
    blend: Optional[ArchetypeBlend],
    loop_states: dict[LoopId, LoopStateType],
    covered_loops: set[LoopId],
    directions: Optional[DirectionalDocument] = None,
) -> GoalSuggestion:
    """Score one template and build its reasoning."""
    state = loop_states.get(template.loop)
    score = round_half_up(base_score(template, blend, covered_loops) * state_multiplier(state))

    reasons: list[str] = []
    if directions is not None:
        adj = directional_adjustment(template.loop, directions)
        score += adj.bonus
        reasons = adj.reasons

    score = min(100, max(0, score))

    if blend is not None:
        reasoning = generate_reasoning(template, blend.primary, blend.secondary, state)
    else:
        reasoning = generate_state_based_reasoning(template, state)
    if reasons:
        reasoning = ". ".join(reasons) + ". " + reasoning

    return GoalSuggestion(template=template, relevance_score=score, reasoning=reasoning)


def generate_goal_suggestions(
    prototype: Optional[UserPrototype],
    loop_states: dict[LoopId, LoopStateType],
    existing_goals: GoalHierarchy,
    directional_document: Optional[DirectionalDocument] = None,
    count: int = 10,
) -> list[GoalSuggestion]:
    """Rank every catalog template for this user and return the top ``count``.

    Loops that already have an annual goal are de-weighted, never excluded.
    Equal scores keep catalog order.
    """
    if count <= 0:
        return []

    blend = _valid_blend(prototype)
    directions = _active_directions(directional_document)
    states = _normalize_loop_states(loop_states)
    covered_loops = {g.loop for g in existing_goals.annual}

    suggestions = [
        score_template(template, blend, states, covered_loops, directions)
        for template in GOAL_TEMPLATES
    ]
    suggestions.sort(key=lambda s: (-s.relevance_score, s.template.catalog_index))

    logger.debug(
        "Scored %d templates (blend=%s, directions=%s)",
        len(suggestions), blend is not None, directions is not None,
    )
    return suggestions[:count]


# ---------------------------------------------------------------------------
# Reasoning
# ---------------------------------------------------------------------------

def generate_state_based_reasoning(
    template: GoalTemplate, loop_state: Optional[LoopStateType]
) -> str:
    """Fallback explanation when the user has no archetype blend yet."""
    loop = template.loop.value
    parts: list[str] = []

    if loop_state == LoopStateType.BUILD:
        parts.append(f"Your {loop} loop is in BUILD mode - perfect time for ambitious goals")
    elif loop_state == LoopStateType.MAINTAIN:
        parts.append(f"A steady goal for your {loop} loop while maintaining")
    elif loop_state == LoopStateType.RECOVER:
        parts.append(f"A gentle option as your {loop} loop recovers")
    elif loop_state == LoopStateType.HIBERNATE:
        parts.append(f"Consider when your {loop} loop is ready to grow")

    parts.append("Complete the identity questionnaire for personalized recommendations")
    return ". ".join(parts)


def generate_reasoning(
    template: GoalTemplate,
    primary: ArchetypeId,
    secondary: ArchetypeId,
    loop_state: Optional[LoopStateType],
) -> str:
    loop = template.loop.value
    parts: list[str] = []

    if template.affinity(primary) >= STRONG_AFFINITY:
        parts.append(f"Highly aligned with your {primary.value} nature")
    elif template.affinity(secondary) >= STRONG_AFFINITY:
        parts.append(f"Resonates with your {secondary.value} side")

    if loop_state == LoopStateType.BUILD:
        parts.append(f"Your {loop} loop is in BUILD mode - great time to pursue ambitious goals")
    elif loop_state == LoopStateType.RECOVER:
        parts.append(f"Consider as your {loop} loop recovers")

    return ". ".join(parts) or f"A solid goal for your {loop} loop"


# ---------------------------------------------------------------------------
# Goal creation and coverage
# ---------------------------------------------------------------------------

def create_goal_from_template(
    template: GoalTemplate,
    title: Optional[str] = None,
    description: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Goal:
    """Turn a template into a fresh active goal running from now to year end."""
    now = now or datetime.now(timezone.utc)
    return Goal(
        id=f"goal_{_generate_id()}",
        title=title or template.title,
        description=description or template.description,
        loop=template.loop,
        timeframe=template.timeframe,
        status=GoalStatus.ACTIVE,
        progress=0,
        start_date=now.date(),
        target_date=date(now.year, 12, 31),
        metrics=[
            GoalMetric(
                id=f"metric_{_generate_id()}",
                name=m.name,
                unit=m.unit,
                target=m.suggested_target,
                current=0,
            )
            for m in template.suggested_metrics
        ],
        created_at=now,
        updated_at=now,
    )


def get_loop_goal_suggestions(
    loop: LoopId, prototype: Optional[UserPrototype]
) -> list[GoalSuggestion]:
    """Rank one loop's templates by primary (60%) / secondary (40%) affinity."""
    blend = _valid_blend(prototype)
    results = []
    for template in templates_for_loop(loop):
        if blend is None:
            score = 0
            reasoning = f"A solid goal for your {loop.value} loop"
        else:
            score = round_half_up(
                (template.affinity(blend.primary) * 0.6 + template.affinity(blend.secondary) * 0.4) * 100
            )
            reasoning = f"Aligned with your {blend.primary.value} archetype"
        results.append(GoalSuggestion(template=template, relevance_score=score, reasoning=reasoning))

    results.sort(key=lambda s: (-s.relevance_score, s.template.catalog_index))
    return results


def calculate_goal_balance(goals: GoalHierarchy) -> dict[LoopId, int]:
    """Annual goal count per loop (every loop present, zero if uncovered)."""
    balance = {loop: 0 for loop in ALL_LOOPS}
    for goal in goals.annual:
        balance[goal.loop] += 1
    return balance


def get_loops_needing_goals(goals: GoalHierarchy) -> list[LoopId]:
    balance = calculate_goal_balance(goals)
    return [loop for loop in ALL_LOOPS if balance[loop] == 0]
