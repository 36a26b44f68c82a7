"""Goal template catalog.

Templates are annual goals tagged with a loop and an affinity (0-1) per
archetype. Catalog order is significant: suggestions with equal scores keep
this order, so every template carries its position as ``catalog_index``.
"""

from __future__ import annotations

from typing import Optional

from .models import ArchetypeId, GoalTemplate, GoalTimeframe, LoopId, SuggestedMetric

M = ArchetypeId.MACHINE
W = ArchetypeId.WARRIOR
A = ArchetypeId.ARTIST
S = ArchetypeId.SCIENTIST
ST = ArchetypeId.STOIC
V = ArchetypeId.VISIONARY

_CATALOG: list[dict] = [
    # --- Health ---
    {
        "id": "health_fitness_transform",
        "title": "Transform my physical fitness",
        "description": "Achieve significant improvement in strength, endurance, or body composition",
        "loop": LoopId.HEALTH,
        "affinity": {M: 0.9, W: 0.95, S: 0.6},
        "metrics": [("Workouts per week", "sessions", 4), ("Body fat percentage", "%", 15)],
    },
    {
        "id": "health_sleep_optimize",
        "title": "Optimize my sleep quality",
        "description": "Establish consistent, high-quality sleep patterns",
        "loop": LoopId.HEALTH,
        "affinity": {S: 0.9, ST: 0.8, M: 0.7},
        "metrics": [("Hours of sleep", "hours", 7.5), ("Sleep quality score", "score", 85)],
    },
    {
        "id": "health_nutrition_overhaul",
        "title": "Overhaul my nutrition",
        "description": "Develop sustainable healthy eating habits",
        "loop": LoopId.HEALTH,
        "affinity": {S: 0.85, M: 0.8, ST: 0.7},
        "metrics": [("Home-cooked meals", "per week", 15), ("Water intake", "liters/day", 3)],
    },
    {
        "id": "health_mental_resilience",
        "title": "Build mental resilience",
        "description": "Develop practices for mental health and stress management",
        "loop": LoopId.HEALTH,
        "affinity": {ST: 0.95, W: 0.8, A: 0.7},
        "metrics": [("Meditation sessions", "per week", 5), ("Stress level (1-10)", "avg", 4)],
    },
    # --- Wealth ---
    {
        "id": "wealth_emergency_fund",
        "title": "Build emergency fund",
        "description": "Save 3-6 months of expenses for financial security",
        "loop": LoopId.WEALTH,
        "affinity": {M: 0.85, S: 0.8, ST: 0.75},
        "metrics": [("Months of expenses saved", "months", 6), ("Monthly savings rate", "%", 20)],
    },
    {
        "id": "wealth_income_growth",
        "title": "Grow my income significantly",
        "description": "Increase earning potential through skills, promotion, or side income",
        "loop": LoopId.WEALTH,
        "affinity": {V: 0.9, W: 0.85, M: 0.7},
        "metrics": [("Income increase", "%", 20), ("New skills acquired", "skills", 3)],
    },
    {
        "id": "wealth_debt_freedom",
        "title": "Achieve debt freedom",
        "description": "Pay off all consumer debt (credit cards, loans)",
        "loop": LoopId.WEALTH,
        "affinity": {W: 0.9, M: 0.85, ST: 0.8},
        "metrics": [("Debt remaining", "$", 0), ("Monthly debt payment", "$", 1000)],
    },
    {
        "id": "wealth_invest_consistently",
        "title": "Build investment habit",
        "description": "Establish consistent investment practice for long-term wealth",
        "loop": LoopId.WEALTH,
        "affinity": {S: 0.9, V: 0.85, M: 0.75},
        "metrics": [("Monthly investment", "$", 500), ("Investment knowledge score", "1-10", 8)],
    },
    # --- Family ---
    {
        "id": "family_quality_time",
        "title": "Prioritize quality family time",
        "description": "Create consistent, meaningful time with family members",
        "loop": LoopId.FAMILY,
        "affinity": {A: 0.9, ST: 0.8, V: 0.7},
        "metrics": [("Family dinners per week", "dinners", 5), ("Weekend activities together", "per month", 4)],
    },
    {
        "id": "family_parenting_level_up",
        "title": "Level up my parenting",
        "description": "Become a more present, effective, and connected parent",
        "loop": LoopId.FAMILY,
        "affinity": {ST: 0.85, S: 0.8, W: 0.7},
        "metrics": [("1-on-1 time per child", "hours/week", 3), ("Parenting books read", "books", 4)],
    },
    {
        "id": "family_relationship_strengthen",
        "title": "Strengthen primary relationship",
        "description": "Deepen connection with partner through intentional effort",
        "loop": LoopId.FAMILY,
        "affinity": {A: 0.85, ST: 0.8, V: 0.75},
        "metrics": [("Date nights per month", "dates", 4), ("Relationship satisfaction", "1-10", 9)],
    },
    # --- Work ---
    {
        "id": "work_career_advance",
        "title": "Advance my career",
        "description": "Achieve promotion, new role, or significant career milestone",
        "loop": LoopId.WORK,
        "affinity": {W: 0.9, M: 0.85, V: 0.8},
        "metrics": [("Key projects delivered", "projects", 3), ("Performance review rating", "1-5", 4.5)],
    },
    {
        "id": "work_skill_mastery",
        "title": "Master a critical skill",
        "description": "Achieve expertise in a skill that advances your career",
        "loop": LoopId.WORK,
        "affinity": {S: 0.95, M: 0.85, A: 0.7},
        "metrics": [("Learning hours", "hours", 200), ("Skill certifications", "certs", 2)],
    },
    {
        "id": "work_side_project",
        "title": "Launch a meaningful side project",
        "description": "Build and launch something of your own creation",
        "loop": LoopId.WORK,
        "affinity": {V: 0.95, A: 0.9, S: 0.75},
        "metrics": [("Hours invested", "hours", 300), ("Users/customers", "people", 100)],
    },
    {
        "id": "work_productivity_system",
        "title": "Build an unbreakable productivity system",
        "description": "Create sustainable habits and systems for consistent output",
        "loop": LoopId.WORK,
        "affinity": {M: 0.95, S: 0.85, ST: 0.8},
        "metrics": [("Deep work hours per week", "hours", 20), ("Tasks completed per week", "tasks", 30)],
    },
    # --- Fun ---
    {
        "id": "fun_hobby_mastery",
        "title": "Master a fulfilling hobby",
        "description": "Develop genuine skill and joy in a personal pursuit",
        "loop": LoopId.FUN,
        "affinity": {A: 0.95, S: 0.8, V: 0.7},
        "metrics": [("Practice hours per week", "hours", 5), ("Skill level improvement", "1-10", 8)],
    },
    {
        "id": "fun_adventure_seeking",
        "title": "Have meaningful adventures",
        "description": "Create memorable experiences through exploration and novelty",
        "loop": LoopId.FUN,
        "affinity": {V: 0.9, W: 0.85, A: 0.8},
        "metrics": [("New experiences", "experiences", 24), ("Major trips", "trips", 3)],
    },
    {
        "id": "fun_social_connection",
        "title": "Deepen friendships",
        "description": "Invest in meaningful friendships and social connections",
        "loop": LoopId.FUN,
        "affinity": {A: 0.85, ST: 0.75, V: 0.7},
        "metrics": [("Close friend meetups", "per month", 4), ("New meaningful connections", "people", 6)],
    },
    # --- Maintenance ---
    {
        "id": "maintenance_home_optimize",
        "title": "Optimize my living space",
        "description": "Create an organized, functional, and peaceful home environment",
        "loop": LoopId.MAINTENANCE,
        "affinity": {M: 0.9, ST: 0.8, A: 0.7},
        "metrics": [("Rooms decluttered", "rooms", 8), ("Home satisfaction", "1-10", 9)],
    },
    {
        "id": "maintenance_systems_automate",
        "title": "Automate life admin",
        "description": "Reduce friction in recurring tasks through systems and automation",
        "loop": LoopId.MAINTENANCE,
        "affinity": {M: 0.95, S: 0.85, ST: 0.7},
        "metrics": [("Recurring tasks automated", "tasks", 10), ("Weekly admin time", "hours", 2)],
    },
    # --- Meaning ---
    {
        "id": "meaning_purpose_clarity",
        "title": "Clarify my life purpose",
        "description": "Develop a clear sense of purpose and direction",
        "loop": LoopId.MEANING,
        "affinity": {V: 0.95, ST: 0.9, A: 0.8},
        "metrics": [("Clarity score", "1-10", 9), ("Purpose-aligned decisions", "%", 80)],
    },
    {
        "id": "meaning_spiritual_practice",
        "title": "Deepen spiritual practice",
        "description": "Develop consistent practices for inner growth and peace",
        "loop": LoopId.MEANING,
        "affinity": {ST: 0.95, A: 0.85, S: 0.7},
        "metrics": [("Daily practice streak", "days", 300), ("Inner peace score", "1-10", 8)],
    },
    {
        "id": "meaning_legacy_building",
        "title": "Start building my legacy",
        "description": "Begin work on something that will outlast you",
        "loop": LoopId.MEANING,
        "affinity": {V: 0.95, A: 0.9, ST: 0.8},
        "metrics": [("Legacy project hours", "hours", 200), ("People impacted", "people", 100)],
    },
    {
        "id": "meaning_wisdom_cultivation",
        "title": "Cultivate wisdom",
        "description": "Study, reflect, and grow in understanding of life",
        "loop": LoopId.MEANING,
        "affinity": {S: 0.9, ST: 0.9, V: 0.8},
        "metrics": [("Books read", "books", 24), ("Journal entries", "entries", 150)],
    },
]


def _build_catalog() -> tuple[GoalTemplate, ...]:
    return tuple(
        GoalTemplate(
            id=entry["id"],
            title=entry["title"],
            description=entry["description"],
            loop=entry["loop"],
            timeframe=GoalTimeframe.ANNUAL,
            archetype_affinity=entry["affinity"],
            suggested_metrics=tuple(
                SuggestedMetric(name=name, unit=unit, suggested_target=target)
                for name, unit, target in entry["metrics"]
            ),
            catalog_index=i,
        )
        for i, entry in enumerate(_CATALOG)
    )


GOAL_TEMPLATES: tuple[GoalTemplate, ...] = _build_catalog()

_BY_ID: dict[str, GoalTemplate] = {t.id: t for t in GOAL_TEMPLATES}


def get_template(template_id: str) -> Optional[GoalTemplate]:
    """Look up a template by id. Returns None if unknown."""
    return _BY_ID.get(template_id)


def templates_for_loop(loop: LoopId) -> list[GoalTemplate]:
    return [t for t in GOAL_TEMPLATES if t.loop == loop]
