"""
Weekly volume distribution: sets and training frequency per muscle.
"""

from collections.abc import Iterable

from .config import (
    BASE_WEEKLY_SETS,
    DEFAULT_WEEKLY_SETS,
    FIXED_SPLIT_FREQUENCY,
    FULL_BODY_HIGH_FREQUENCY_MUSCLES,
    GOAL_VOLUME_MULTIPLIER,
    LAGGING_AREA_MUSCLES,
    LAGGING_VOLUME_BOOST,
    TRACKED_MUSCLES,
)
from .metrics import round_half_up
from .models import EXPERIENCE_LEVELS, Experience, Goal, MuscleVolume, RecoveryFactors, SplitType


def recommend_volume(muscle: str, experience: Experience, goal: Goal) -> int:
    """
    Weekly hard sets for a muscle before recovery scaling.

    >>> recommend_volume("back", "intermediate", "bulk")   # 16 × 1.1 = 17.6
    18
    """
    row = BASE_WEEKLY_SETS.get(muscle)
    base = row[EXPERIENCE_LEVELS.index(experience)] if row else DEFAULT_WEEKLY_SETS
    return round_half_up(base * GOAL_VOLUME_MULTIPLIER[goal])


def resolve_lagging_muscles(lagging_areas: Iterable[str]) -> set[str]:
    """
    Map free-text lagging-area hints onto muscles.

    Accepts region names ("arms", "legs", "trunk"), side-qualified mentions
    ("left arm", "Right Leg") and plain muscle names ("calves").
    """
    muscles: set[str] = set()
    for raw in lagging_areas:
        hint = raw.strip().lower()
        if not hint:
            continue
        if hint in LAGGING_AREA_MUSCLES:
            muscles.update(LAGGING_AREA_MUSCLES[hint])
        elif "arm" in hint:
            muscles.update(LAGGING_AREA_MUSCLES["arms"])
        elif "leg" in hint:
            muscles.update(LAGGING_AREA_MUSCLES["legs"])
        elif hint in TRACKED_MUSCLES:
            muscles.add(hint)
    return muscles


def split_frequency(split: SplitType, muscle: str, days_per_week: int) -> int:
    """Times per week a split trains ``muscle`` before recovery scaling."""
    if split == "Full Body":
        cap = 3 if muscle in FULL_BODY_HIGH_FREQUENCY_MUSCLES else 2
        return min(days_per_week, cap)
    if split == "PPL":
        return 2 if days_per_week >= 6 else 1
    return FIXED_SPLIT_FREQUENCY[split]


def calculate_volume_distribution(
    split: SplitType,
    days_per_week: int,
    experience: Experience,
    goal: Goal,
    recovery: RecoveryFactors,
    lagging_areas: Iterable[str] = (),
) -> dict[str, MuscleVolume]:
    """
    Weekly sets and frequency for every tracked muscle.

    sets      = round(round(round(base × goal) [× 1.15 if lagging]) × volume multiplier)
    frequency = max(1, round(split frequency × frequency multiplier))

    Args:
        split: Split type in use
        days_per_week: Training days per week
        experience: Experience level (selects the base-sets column)
        goal: Training goal (cut ×0.7, bulk ×1.1)
        recovery: Recovery factors
        lagging_areas: Optional free-text hints (see resolve_lagging_muscles)

    Returns:
        Dict keyed by muscle, in TRACKED_MUSCLES order
    """
    lagging = resolve_lagging_muscles(lagging_areas)
    distribution: dict[str, MuscleVolume] = {}
    for muscle in TRACKED_MUSCLES:
        base = recommend_volume(muscle, experience, goal)
        if muscle in lagging:
            base = round_half_up(base * LAGGING_VOLUME_BOOST)
        frequency = split_frequency(split, muscle, days_per_week)
        distribution[muscle] = MuscleVolume(
            muscle=muscle,
            sets=round_half_up(base * recovery.volume_multiplier),
            frequency=max(1, round_half_up(frequency * recovery.frequency_multiplier)),
            lagging=muscle in lagging,
        )
    return distribution
