"""
Rep range, RIR and tempo prescription.

calculate_rep_range() layers several shifts on a goal-based starting range:
fiber type of the target muscle, slot in the session, phase of the
mesocycle and an experience floor.  Daily-undulating sessions use fixed
day-type tables instead (calculate_dup_rep_range).
"""

import math

from .config import (
    BASE_REP_RANGES,
    DUP_DAY_PARAMS,
    ISOLATION_PATTERNS,
    MUSCLE_FIBER_PROFILE,
    NOVICE_MAX_REPS,
    NOVICE_MIN_REPS,
    REP_MAX_CEILING,
    REP_MIN_BOUNDS,
    REST_PERIODS,
    RIR_BOUNDS,
    RIR_PROGRESSION,
)
from .metrics import clamp
from .models import (
    DupDayType,
    Experience,
    FiberType,
    Goal,
    PeriodizationModel,
    PositionCategory,
    RepRangeConfig,
)


def get_fiber_type(muscle: str) -> FiberType:
    return MUSCLE_FIBER_PROFILE.get(muscle, "mixed")  # type: ignore[return-value]


def get_position_category(position: int, total: int) -> PositionCategory:
    """
    Bucket a 1-based slot in the session.

    Slot 1 is always "first"; the rest split at 33% and 66% of ``total``.
    """
    if position <= 1:
        return "first"
    fraction = position / max(total, 1)
    if fraction < 0.33:
        return "early"
    if fraction < 0.66:
        return "mid"
    return "late"


def _tighten(lo: int, hi: int, drop_min: int, drop_max: int, floor: int = 3) -> tuple[int, int]:
    """Shift both bounds down, keeping min >= floor and max >= min + 2."""
    lo = max(floor, lo - drop_min)
    hi = max(lo + 2, hi - drop_max)
    return lo, hi


def _phase_shift(lo: int, hi: int, model: PeriodizationModel, progress: float) -> tuple[int, int]:
    if model == "linear":
        if progress < 0.33:
            return lo + 2, hi + 2
        if progress > 0.66:
            return _tighten(lo, hi, 1, 1)
    elif model == "block":
        if progress < 0.5:
            return lo + 2, hi + 3
        if progress < 0.85:
            return _tighten(lo, hi, 2, 2)
        return _tighten(lo, hi, 3, 3, floor=1)
    return lo, hi


def _target_rir(experience: Experience, progress: float) -> int:
    start, drop = RIR_PROGRESSION[experience]
    return int(clamp(start - math.floor(progress * drop), *RIR_BOUNDS))


def _tempo(goal: Goal, is_compound: bool, progress: float) -> str:
    if goal == "cut":
        return "2-0-1-0" if is_compound else "2-1-1-0"
    if goal == "bulk" and progress < 0.5:
        return "3-0-1-1" if is_compound else "3-1-1-0"
    return "2-0-1-0"


def calculate_rep_range(
    goal: Goal,
    experience: Experience,
    pattern: str,
    muscle: str,
    position: PositionCategory,
    model: PeriodizationModel,
    week: int,
    total_weeks: int,
) -> RepRangeConfig:
    """
    Rep range, target RIR, tempo and rest for one exercise slot.

    Args:
        goal: Training goal (selects the base range)
        experience: Experience level (novice floor, RIR start)
        pattern: Movement pattern of the exercise
        muscle: Target muscle (fiber-type shift)
        position: Position category in the session
        model: Periodization model (phase shift)
        week: 1-based mesocycle week
        total_weeks: Mesocycle length in weeks

    Returns:
        RepRangeConfig with min_reps <= max_reps - 2
    """
    is_compound = pattern not in ISOLATION_PATTERNS
    compound_range, isolation_range = BASE_REP_RANGES[goal]
    lo, hi = compound_range if is_compound else isolation_range
    progress = week / total_weeks if total_weeks > 0 else 0.0
    notes: list[str] = []

    fiber = get_fiber_type(muscle)
    if fiber == "fast":
        lo, hi = _tighten(lo, hi, 1, 1)
        notes.append(f"{muscle.capitalize()} responds well to heavier loads")
    elif fiber == "slow":
        lo, hi = lo + 2, hi + 3
        notes.append(f"{muscle.capitalize()} benefits from higher reps and time under tension")

    if position == "first":
        lo = max(3, lo - 1)
    elif position == "mid":
        lo, hi = lo + 1, hi + 1
    elif position == "late":
        lo, hi = lo + 2, hi + 2
        notes.append("Accumulated fatigue - prioritize form over load")

    lo, hi = _phase_shift(lo, hi, model, progress)

    if experience == "novice":
        lo = max(NOVICE_MIN_REPS, lo)
        hi = max(NOVICE_MAX_REPS, hi)

    lo = int(clamp(lo, *REP_MIN_BOUNDS))
    hi = max(lo + 2, min(REP_MAX_CEILING, hi))

    rir = _target_rir(experience, progress)
    if rir <= 1:
        notes.append("High intensity week - push close to failure")
    elif rir >= 3:
        notes.append("Submaximal - focus on movement quality")

    compound_rest, isolation_rest = REST_PERIODS[goal]
    return RepRangeConfig(
        min_reps=lo,
        max_reps=hi,
        target_rir=rir,
        tempo=_tempo(goal, is_compound, progress),
        rest_seconds=compound_rest if is_compound else isolation_rest,
        notes=". ".join(notes),
    )


def calculate_dup_rep_range(day_type: DupDayType, pattern: str, muscle: str) -> RepRangeConfig:
    """Prescription for a daily-undulating hypertrophy/strength/power day."""
    params = DUP_DAY_PARAMS[day_type]
    is_compound = pattern not in ISOLATION_PATTERNS
    lo, hi = params.compound_reps if is_compound else params.isolation_reps

    fiber = get_fiber_type(muscle)
    if fiber == "slow" and day_type == "hypertrophy":
        lo, hi = lo + 3, hi + 4
    elif fiber == "fast" and day_type != "power":
        lo, hi = max(3, lo - 1), max(5, hi - 1)

    return RepRangeConfig(
        min_reps=lo,
        max_reps=hi,
        target_rir=params.target_rir,
        tempo=params.compound_tempo if is_compound else params.isolation_tempo,
        rest_seconds=params.compound_rest if is_compound else params.isolation_rest,
        notes=params.note,
    )


def format_rir(rir: int) -> str:
    """'to failure' for 0, otherwise 'N RIR (RPE 10-N)'."""
    if rir == 0:
        return "to failure"
    return f"{rir} RIR (RPE {10 - rir})"


def format_rep_range(min_reps: int, max_reps: int, rir: int) -> str:
    return f"{min_reps}-{max_reps} reps @ {format_rir(rir)}"


def build_load_guidance(min_reps: int, max_reps: int, rir: int, tempo: str) -> str:
    """
    Human-readable load guidance line.

    >>> build_load_guidance(8, 12, 2, "3-0-1-1")
    '8-12 reps @ 2 RIR (RPE 8). Tempo: 3-0-1-1'
    """
    return f"{format_rep_range(min_reps, max_reps, rir)}. Tempo: {tempo}"
