"""
Session builder: turns one session template into a DetailedSession.

For each target muscle (larger muscles first) the builder checks weekly
residual fatigue, sizes the muscle's sets, asks the selector for exercises
and prescribes reps/RIR/tempo for each.  Every exercise must pass the
session's fatigue budget and the wall-clock budget before it is added.
"""

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

from .config import (
    COMPOUND_SET_SECONDS,
    DUP_DAY_PARAMS,
    ISOLATION_SET_SECONDS,
    LOWER_BODY_MUSCLES,
    MUSCLE_TRAINING_ORDER,
    RECOVERY_READY_THRESHOLD,
    RESIDUAL_FATIGUE_SKIP,
    REST_PERIODS,
    RIR_BOUNDS,
    SESSION_OVERHEAD_MINUTES,
    SET_MINUTES_ESTIMATE,
    TIME_BUDGET_SLACK_MINUTES,
    TRANSITION_SECONDS,
    UPPER_BODY_MUSCLES,
    WARMUP_SECONDS,
)
from .fatigue import SessionFatigueManager, WeeklyFatigueTracker, calculate_exercise_fatigue
from .metrics import clamp, round_half_up
from .models import (
    DetailedExercise,
    DetailedSession,
    DupDayType,
    ExerciseEntry,
    Goal,
    MuscleVolume,
    PeriodizationModel,
    RepRangeConfig,
    SessionTemplate,
    UserProfile,
    WeeklyProgression,
)
from .rep_ranges import (
    build_load_guidance,
    calculate_dup_rep_range,
    calculate_rep_range,
    get_position_category,
)
from .selector import select_exercises_with_fatigue

logger = logging.getLogger(__name__)

LOWER_WARMUP = [
    "5 min bike or walking",
    "Leg swings (front/back, side to side) x 10 each",
    "Goblet squat x 10 (bodyweight or light)",
    "Glute bridges x 10",
]
UPPER_WARMUP = [
    "5 min rowing or arm circles",
    "Band pull-aparts x 15",
    "Push-ups x 10",
    "Face pulls x 10 (light)",
]
FULL_WARMUP = [
    "5 min cardio",
    "World's greatest stretch x 5 each side",
    "Arm circles and leg swings",
    "Bodyweight squats x 10",
    "Push-ups x 10",
]


@dataclass(frozen=True)
class SessionContext:
    """Inputs shared by every session of one mesocycle week."""

    profile: UserProfile
    catalog: Sequence[ExerciseEntry]
    volume: dict[str, MuscleVolume]
    model: PeriodizationModel
    progression: WeeklyProgression
    total_weeks: int
    session_minutes: int


# =============================================================================
# Time budget
# =============================================================================


def estimate_exercise_minutes(is_compound: bool, rest_seconds: int, sets: int, include_warmup: bool) -> float:
    """
    Wall-clock minutes for one exercise.

    (set duration + rest) × sets − final rest, plus a 4-minute ramp-up for a
    compound on a muscle not yet warmed up, plus one minute of transition.
    """
    set_seconds = COMPOUND_SET_SECONDS if is_compound else ISOLATION_SET_SECONDS
    working = (set_seconds + rest_seconds) * sets - rest_seconds
    warmup = WARMUP_SECONDS if include_warmup and is_compound else 0
    return (max(0, working) + warmup + TRANSITION_SECONDS) / 60


def get_max_exercises_for_time(session_minutes: int, goal: Goal) -> int:
    """Exercises that fit in a session, assuming 3 sets each and half compounds."""
    compound_rest, isolation_rest = REST_PERIODS[goal]
    with_warmup = estimate_exercise_minutes(True, compound_rest, 3, True)
    without_warmup = estimate_exercise_minutes(True, compound_rest, 3, False)
    compound_avg = (with_warmup + 2 * without_warmup) / 3
    isolation_avg = estimate_exercise_minutes(False, isolation_rest, 3, False)
    average = 0.5 * compound_avg + 0.5 * isolation_avg
    return max(1, math.floor(session_minutes / average))


def generate_warmup(muscles: Sequence[str]) -> list[str]:
    """Lower-body, upper-body or full-body warm-up depending on the targets."""
    lower = any(m in LOWER_BODY_MUSCLES for m in muscles)
    upper = any(m in UPPER_BODY_MUSCLES for m in muscles)
    if lower and not upper:
        return list(LOWER_WARMUP)
    if upper and not lower:
        return list(UPPER_WARMUP)
    return list(FULL_WARMUP)


def order_muscles(muscles: Sequence[str]) -> list[str]:
    """Template muscles in training order; unknown muscles go last, as listed."""
    known = [m for m in MUSCLE_TRAINING_ORDER if m in muscles]
    return known + [m for m in muscles if m not in MUSCLE_TRAINING_ORDER]


# =============================================================================
# Session
# =============================================================================


def _muscle_sets(volume: MuscleVolume, volume_modifier: float, residual: float) -> int:
    sets = math.ceil(volume.sets / volume.frequency)
    sets = max(1, round_half_up(sets * volume_modifier))
    if residual > RECOVERY_READY_THRESHOLD:
        sets = max(1, round_half_up(sets * (1 - (residual - RECOVERY_READY_THRESHOLD) / 100)))
    return sets


def _prescription(
    context: SessionContext,
    exercise: ExerciseEntry,
    muscle: str,
    position: int,
    total_slots: int,
    week: int,
    day_type: DupDayType | None,
) -> RepRangeConfig:
    if day_type is not None:
        return calculate_dup_rep_range(day_type, exercise.pattern, muscle)
    return calculate_rep_range(
        goal=context.profile.goal,
        experience=context.profile.experience,
        pattern=exercise.pattern,
        muscle=muscle,
        position=get_position_category(position, total_slots),
        model=context.model,
        week=week,
        total_weeks=context.total_weeks,
    )


def build_detailed_session(
    template: SessionTemplate,
    day_label: str,
    day_offset: int,
    context: SessionContext,
    manager: SessionFatigueManager,
    tracker: WeeklyFatigueTracker,
    day_type: DupDayType | None = None,
) -> DetailedSession:
    """
    Build one session from a template.

    Args:
        template: Split day template
        day_label: Weekday label ("Mon")
        day_offset: Day index within the week for the weekly tracker
        context: Week-level inputs
        manager: Fresh fatigue manager for this session
        tracker: The week's fatigue tracker (mutated)
        day_type: DUP day type, or None for standard prescription

    Returns:
        DetailedSession; never raises for a valid context
    """
    profile = context.profile
    progression = context.progression
    muscles = order_muscles(template.muscles)
    total_slots = len(muscles) * 2
    max_exercises = get_max_exercises_for_time(context.session_minutes, profile.goal)
    volume_modifier = progression.volume_modifier
    if day_type is not None:
        volume_modifier *= DUP_DAY_PARAMS[day_type].volume_modifier
    rir_shift = round_half_up((1 - progression.intensity_modifier) * 3)

    session = DetailedSession(
        day=day_label,
        name=template.day,
        focus=f"{template.focus} - {day_type.upper()} Day" if day_type else template.focus,
        day_offset=day_offset,
        muscles=tuple(muscles),
        warmup=generate_warmup(muscles),
        day_type=day_type,
    )
    minutes_used = 0.0
    warmed_up: set[str] = set()
    position = 1

    for muscle in muscles:
        if len(session.exercises) >= max_exercises:
            break
        if minutes_used >= context.session_minutes - TIME_BUDGET_SLACK_MINUTES:
            break
        if muscle in profile.injury_history:
            session.skipped.append(f"{muscle}: skipped due to injury history")
            continue
        volume = context.volume.get(muscle)
        if volume is None:
            continue

        readiness = tracker.can_train_muscle(muscle, day_offset)
        if not readiness.ready and readiness.current_fatigue > RESIDUAL_FATIGUE_SKIP:
            session.skipped.append(f"{muscle}: {readiness.recommendation}")
            logger.debug("%s %s: skipping %s (fatigue %.1f)", day_label, template.day, muscle, readiness.current_fatigue)
            continue

        sets_needed = _muscle_sets(volume, volume_modifier, readiness.current_fatigue)
        selections = select_exercises_with_fatigue(
            context.catalog,
            muscle,
            sets_needed,
            profile.available_equipment,
            profile.injury_history,
            profile.experience,
            manager,
            starting_position=position,
            session_minutes=context.session_minutes,
        )

        for selection in selections:
            if len(session.exercises) >= max_exercises:
                break
            exercise = selection.exercise
            sets = selection.sets
            rep = _prescription(context, exercise, muscle, position, total_slots, progression.week, day_type)
            needs_warmup = muscle not in warmed_up

            minutes = estimate_exercise_minutes(exercise.is_compound, rep.rest_seconds, sets, needs_warmup)
            if minutes_used + minutes > context.session_minutes + TIME_BUDGET_SLACK_MINUTES:
                if sets <= 1:
                    continue
                sets -= 1
                minutes = estimate_exercise_minutes(exercise.is_compound, rep.rest_seconds, sets, needs_warmup)
                if minutes_used + minutes > context.session_minutes + TIME_BUDGET_SLACK_MINUTES:
                    continue

            rir = int(clamp(rep.target_rir + rir_shift, *RIR_BOUNDS))
            avg_reps = round_half_up((rep.min_reps + rep.max_reps) / 2)
            fatigue = calculate_exercise_fatigue(exercise, sets, avg_reps, rir, position)
            check = manager.can_add_exercise(fatigue)
            if not check.allowed and sets > 1:
                sets -= 1
                fatigue = calculate_exercise_fatigue(exercise, sets, avg_reps, rir, position)
                check = manager.can_add_exercise(fatigue)
                minutes = estimate_exercise_minutes(exercise.is_compound, rep.rest_seconds, sets, needs_warmup)
            if not check.allowed:
                logger.debug("%s: dropped %s (%s)", muscle, exercise.id, check.reason)
                continue

            manager.add_exercise(fatigue)
            tracker.record_training(muscle, day_offset, fatigue.local_cost.get(muscle, 0.0), sets)

            notes = [n for n in (exercise.notes, rep.notes) if n]
            if check.efficiency == "suboptimal":
                notes.append("Consider swapping for more efficient alternative")
            session.exercises.append(
                DetailedExercise(
                    exercise=exercise,
                    target_muscle=muscle,
                    sets=sets,
                    min_reps=rep.min_reps,
                    max_reps=rep.max_reps,
                    rir=rir,
                    tempo=rep.tempo,
                    rest_seconds=rep.rest_seconds,
                    fatigue=fatigue,
                    efficiency=check.efficiency,
                    notes=". ".join(notes),
                    load_guidance=build_load_guidance(rep.min_reps, rep.max_reps, rir, rep.tempo),
                )
            )
            minutes_used += minutes
            warmed_up.add(muscle)
            position += 1

    total_sets = session.total_sets
    rest_minutes = sum(e.sets * e.rest_seconds for e in session.exercises) / 60
    session.estimated_minutes = round_half_up(
        rest_minutes + total_sets * SET_MINUTES_ESTIMATE + SESSION_OVERHEAD_MINUTES
    )
    session.fatigue_summary = manager.get_session_summary()
    return session
