"""
Fatigue-aware exercise selection for one target muscle.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from .config import (
    MAX_SETS_COMPOUND,
    MAX_SETS_ISOLATION,
    PROBE_REPS,
    PROBE_RIR,
    PROBE_SETS,
    QUICK_SESSION_MINUTES,
    TIER_ORDER,
    TOP_TIERS,
)
from .fatigue import SessionFatigueManager, base_sfr, calculate_exercise_fatigue
from .models import ExerciseEntry, Experience

logger = logging.getLogger(__name__)


@dataclass
class ExerciseSelection:
    exercise: ExerciseEntry
    sets: int


def _difficulty_ok(exercise: ExerciseEntry, experience: Experience) -> bool:
    if exercise.tier in TOP_TIERS or experience == "advanced":
        return True
    if experience == "novice":
        return exercise.difficulty == "beginner"
    return exercise.difficulty != "advanced"


def _injury_free(exercise: ExerciseEntry, injuries: frozenset[str]) -> bool:
    if exercise.primary_muscle in injuries:
        return False
    return not any(m in injuries for m in exercise.secondary_muscles)


def filter_candidates(
    catalog: Sequence[ExerciseEntry],
    muscle: str,
    available_equipment: frozenset[str],
    injuries: frozenset[str],
    experience: Experience,
    session_minutes: int = 60,
) -> list[ExerciseEntry]:
    """
    Catalog entries suitable for ``muscle``, in catalog order.

    Filters on primary muscle, equipment, injuries and difficulty (S/A tier
    exercises pass the difficulty check at any level).  When nothing passes,
    the difficulty filter is dropped, then the equipment filter, then any
    exercise for the muscle is accepted.  Quick sessions keep only S/A tier
    candidates when there are any.
    """
    for_muscle = [e for e in catalog if e.primary_muscle == muscle]
    with_equipment = [e for e in for_muscle if e.equipment in available_equipment]
    safe_with_equipment = [e for e in with_equipment if _injury_free(e, injuries)]
    safe = [e for e in for_muscle if _injury_free(e, injuries)]

    candidates = [e for e in safe_with_equipment if _difficulty_ok(e, experience)]
    if not candidates:
        candidates = safe_with_equipment
        if candidates:
            logger.debug("%s: dropped difficulty filter", muscle)
    if not candidates:
        candidates = safe
        if candidates:
            logger.debug("%s: dropped equipment filter", muscle)
    if not candidates:
        candidates = for_muscle
        if candidates:
            logger.debug("%s: accepting any exercise for the muscle", muscle)

    if session_minutes <= QUICK_SESSION_MINUTES:
        top = [e for e in candidates if e.tier in TOP_TIERS]
        if top:
            candidates = top
    return candidates


def rank_candidates(candidates: Sequence[ExerciseEntry], starting_position: int) -> list[ExerciseEntry]:
    """
    Sort by hypertrophy tier (S first), then compounds first when the muscle
    opens the session (position <= 2), then higher base SFR.  Stable, so
    ties keep catalog order.
    """
    compound_first = starting_position <= 2

    def key(e: ExerciseEntry) -> tuple[int, int, float]:
        return (
            TIER_ORDER.index(e.tier),
            0 if (e.is_compound or not compound_first) else 1,
            -base_sfr(e.pattern, e.equipment),
        )

    return sorted(candidates, key=key)


def select_exercises_with_fatigue(
    catalog: Sequence[ExerciseEntry],
    muscle: str,
    sets_needed: int,
    available_equipment: frozenset[str],
    injuries: frozenset[str],
    experience: Experience,
    manager: SessionFatigueManager,
    starting_position: int = 1,
    session_minutes: int = 60,
) -> list[ExerciseSelection]:
    """
    Choose exercises and distribute ``sets_needed`` among them.

    Each ranked candidate is probed with min(remaining, 3) sets of 8 reps at
    RIR 2 in its prospective slot; accepted candidates take up to 4 sets
    (compound) or 3 (isolation).  Sets still unassigned after the candidate
    list is exhausted go round-robin onto the chosen exercises.  When no
    candidate passes the probe the top-ranked one is returned with all sets;
    the session builder re-checks it against the budget.

    Args:
        catalog: Exercise catalog snapshot
        muscle: Target muscle
        sets_needed: Sets to prescribe for the muscle this session
        available_equipment: Equipment the trainee has
        injuries: Muscles to avoid
        experience: Experience level
        manager: The session's fatigue manager (read via can_add_exercise)
        starting_position: Slot the first chosen exercise would take
        session_minutes: Session length; <= 25 favours S/A tier exercises

    Returns:
        Ordered selections; empty only when the catalog has nothing for the
        muscle or sets_needed < 1
    """
    if sets_needed < 1:
        return []

    candidates = filter_candidates(
        catalog, muscle, available_equipment, injuries, experience, session_minutes
    )
    if not candidates:
        logger.debug("%s: catalog has no exercises", muscle)
        return []
    ranked = rank_candidates(candidates, starting_position)

    selected: list[ExerciseSelection] = []
    remaining = sets_needed
    for exercise in ranked:
        if remaining <= 0:
            break
        probe = calculate_exercise_fatigue(
            exercise,
            min(remaining, PROBE_SETS),
            PROBE_REPS,
            PROBE_RIR,
            starting_position + len(selected),
        )
        check = manager.can_add_exercise(probe)
        if not check.allowed:
            logger.debug("%s: %s rejected (%s)", muscle, exercise.id, check.reason)
            continue
        cap = MAX_SETS_COMPOUND if exercise.is_compound else MAX_SETS_ISOLATION
        assigned = min(remaining, cap)
        selected.append(ExerciseSelection(exercise, assigned))
        remaining -= assigned

    if not selected:
        return [ExerciseSelection(ranked[0], sets_needed)]

    i = 0
    while remaining > 0:
        selected[i % len(selected)].sets += 1
        remaining -= 1
        i += 1
    return selected
