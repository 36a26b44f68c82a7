"""Pydantic data models for Looops."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Enums ---

class LoopId(str, Enum):
    HEALTH = "Health"
    WEALTH = "Wealth"
    FAMILY = "Family"
    WORK = "Work"
    FUN = "Fun"
    MAINTENANCE = "Maintenance"
    MEANING = "Meaning"


ALL_LOOPS: list[LoopId] = list(LoopId)


class LoopStateType(str, Enum):
    BUILD = "BUILD"
    MAINTAIN = "MAINTAIN"
    RECOVER = "RECOVER"
    HIBERNATE = "HIBERNATE"


class ArchetypeId(str, Enum):
    MACHINE = "Machine"
    WARRIOR = "Warrior"
    ARTIST = "Artist"
    SCIENTIST = "Scientist"
    STOIC = "Stoic"
    VISIONARY = "Visionary"


class GoalTimeframe(str, Enum):
    ANNUAL = "annual"
    QUARTERLY = "quarterly"
    MONTHLY = "monthly"
    WEEKLY = "weekly"
    DAILY = "daily"


class GoalStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ABANDONED = "abandoned"
    PAUSED = "paused"


class LoopSeason(str, Enum):
    BUILDING = "building"
    MAINTAINING = "maintaining"
    RECOVERING = "recovering"
    HIBERNATING = "hibernating"


class DocumentStatus(str, Enum):
    DRAFT = "draft"
    COMPLETE = "complete"
    NEEDS_UPDATE = "needs_update"


# --- Goal Models ---

class GoalMetric(BaseModel):
    id: str
    name: str
    target: float
    current: float = 0.0
    unit: str = ""


class Goal(BaseModel):
    id: str
    title: str
    description: str = ""
    loop: LoopId
    timeframe: GoalTimeframe
    parent_goal_id: Optional[str] = None
    child_goal_ids: list[str] = Field(default_factory=list)
    status: GoalStatus = GoalStatus.ACTIVE
    progress: float = Field(default=0.0, ge=0.0, le=100.0, description="Percent complete")
    start_date: date
    target_date: date
    completed_at: Optional[datetime] = None
    metrics: list[GoalMetric] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class GoalHierarchy(BaseModel):
    annual: list[Goal] = Field(default_factory=list)
    quarterly: list[Goal] = Field(default_factory=list)
    monthly: list[Goal] = Field(default_factory=list)
    weekly: list[Goal] = Field(default_factory=list)
    daily: list[Goal] = Field(default_factory=list)


# --- Template Models ---

class SuggestedMetric(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    unit: str
    suggested_target: float


class GoalTemplate(BaseModel):
    """A catalog entry. ``catalog_index`` fixes its position for tie-breaking."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    loop: LoopId
    timeframe: GoalTimeframe
    archetype_affinity: dict[ArchetypeId, float] = Field(default_factory=dict)
    suggested_metrics: tuple[SuggestedMetric, ...] = ()
    catalog_index: int = 0

    def affinity(self, archetype: Optional[ArchetypeId]) -> float:
        """Affinity for an archetype, 0.0 when the template doesn't list it."""
        if archetype is None:
            return 0.0
        return self.archetype_affinity.get(archetype, 0.0)


class GoalSuggestion(BaseModel):
    template: GoalTemplate
    relevance_score: int = Field(ge=0, le=100)
    reasoning: str


# --- Identity Models ---

class ArchetypeBlend(BaseModel):
    primary: Optional[ArchetypeId] = None
    secondary: Optional[ArchetypeId] = None
    tertiary: Optional[ArchetypeId] = None
    scores: dict[ArchetypeId, float] = Field(
        default_factory=dict, description="Blend percentage per archetype (0-100)"
    )
    name: str = ""

    @property
    def is_valid(self) -> bool:
        return self.primary is not None and self.secondary is not None

    def score(self, archetype: Optional[ArchetypeId]) -> float:
        if archetype is None:
            return 0.0
        return self.scores.get(archetype, 0.0)


class UserPrototype(BaseModel):
    id: str = ""
    user_id: str = ""
    archetype_blend: Optional[ArchetypeBlend] = None


# --- Directional Document Models ---

class LoopDirections(BaseModel):
    loop_id: LoopId
    current_allocation: float = Field(default=0.0, ge=0.0, le=100.0)
    desired_allocation: float = Field(default=0.0, ge=0.0, le=100.0)
    current_satisfaction: float = Field(default=50.0, ge=0.0, le=100.0)
    current_season: LoopSeason = LoopSeason.MAINTAINING


class DirectionalDocument(BaseModel):
    id: str = ""
    user_id: str = ""
    status: DocumentStatus = DocumentStatus.DRAFT
    loop_priority_ranking: list[LoopId] = Field(
        default_factory=list, description="Loops ordered from highest to lowest priority"
    )
    loops: dict[LoopId, LoopDirections] = Field(default_factory=dict)

    @field_validator("loops", mode="before")
    @classmethod
    def _loop_id_from_key(cls, v):
        """Fill each entry's loop_id from its key; a conflicting loop_id is an error."""
        if not isinstance(v, dict):
            return v
        filled = {}
        for key, entry in v.items():
            name = key.value if isinstance(key, LoopId) else key
            if isinstance(entry, LoopDirections):
                entry = entry.model_dump()
            if isinstance(entry, dict):
                given = entry.get("loop_id")
                given = given.value if isinstance(given, LoopId) else given
                if given is not None and given != name:
                    raise ValueError(f"loops.{name} has loop_id {given}")
                entry = {**entry, "loop_id": name}
            filled[key] = entry
        return filled

    @property
    def is_active(self) -> bool:
        return self.status != DocumentStatus.DRAFT
