"""
Mesocycle generator: the engine's entry point.

generate_full_mesocycle() derives recovery factors, split, periodization,
weekly volume and the fatigue budget from a profile, then builds every
session of every week.  All state (fatigue managers, weekly trackers) is
created inside the call, so repeated calls with equal inputs return equal
programs.
"""

import logging
from collections.abc import Iterable
from dataclasses import replace

from .catalog import ExerciseRepository
from .config import (
    DUP_ROTATION,
    LOW_SFR_WARNING,
    QUICK_SESSION_MINUTES,
    REFERENCE_SESSION_MINUTES,
    SESSION_TIME_WARNING_RATIO,
    SHORT_SESSION_MINUTES,
)
from .fatigue import SessionFatigueManager, WeeklyFatigueTracker, create_fatigue_budget, scale_budget
from .metrics import analyze_body_composition, round_half_up
from .models import (
    SPLIT_TYPES,
    DetailedSession,
    FullProgramRecommendation,
    MesocycleWeek,
    MuscleVolume,
    SplitType,
    UserProfile,
)
from .periodization import build_periodization_plan
from .recovery import calculate_recovery_factors
from .session_builder import SessionContext, build_detailed_session
from .splits import (
    build_session_templates,
    get_session_day_offsets,
    get_weekly_schedule,
    recommend_split,
)
from .volume import calculate_volume_distribution, resolve_lagging_muscles

logger = logging.getLogger(__name__)

MODEL_LABELS = {
    "linear": "Linear progression",
    "daily_undulating": "Daily undulating (DUP)",
    "weekly_undulating": "Weekly undulating (WUP)",
    "block": "Block periodization",
}


def _shorten_volume(volume: dict[str, MuscleVolume], factor: float) -> dict[str, MuscleVolume]:
    return {m: replace(v, sets=max(2, round_half_up(v.sets * factor))) for m, v in volume.items()}


def _program_warnings(
    weeks: list[MesocycleWeek],
    profile: UserProfile,
    session_minutes: int,
) -> list[str]:
    warnings: list[str] = []
    sessions = [s for w in weeks if not w.is_deload for s in w.sessions]
    if not sessions:
        return warnings

    average_minutes = sum(s.estimated_minutes for s in sessions) / len(sessions)
    if average_minutes > session_minutes * SESSION_TIME_WARNING_RATIO:
        warnings.append(
            f"Average session time ({round_half_up(average_minutes)} min) exceeds your "
            f"{session_minutes} min target - consider supersets or fewer exercises"
        )

    exercises = [e for s in sessions for e in s.exercises]
    if exercises:
        average_sfr = sum(e.fatigue.stimulus_per_fatigue for e in exercises) / len(exercises)
        if average_sfr < LOW_SFR_WARNING:
            warnings.append(
                f"Average SFR ({average_sfr:.2f}) is below optimal. "
                "Consider switching to more efficient exercises."
            )

    missing = sorted(
        {e.exercise.equipment for w in weeks for s in w.sessions for e in s.exercises}
        - profile.available_equipment
    )
    if missing:
        warnings.append(f"Some exercises require equipment you may not have: {', '.join(missing)}")

    for session in weeks[0].sessions:
        if not session.exercises:
            warnings.append(f"No exercises could be scheduled for {session.day} {session.name}")
    return warnings


def _average_capacity(sessions: list[DetailedSession]) -> int | None:
    used = [s.fatigue_summary.capacity_used_percent for s in sessions if s.fatigue_summary]
    if not used:
        return None
    return round_half_up(sum(used) / len(used))


def generate_full_mesocycle(
    profile: UserProfile,
    repository: ExerciseRepository,
    days_per_week: int = 4,
    session_minutes: int = 60,
    lagging_areas: Iterable[str] = (),
    split: SplitType | None = None,
) -> FullProgramRecommendation:
    """
    Generate a complete mesocycle for a trainee.

    Args:
        profile: Validated trainee profile
        repository: Exercise source; fetch_all() is called exactly once
        days_per_week: Training days per week (2-6)
        session_minutes: Target session length in minutes
        lagging_areas: Free-text lagging-area hints ("arms", "left leg", ...)
        split: Force a split instead of the recommended one

    Returns:
        FullProgramRecommendation with one MesocycleWeek per periodization
        week (the last is the deload)

    Raises:
        ValueError: For out-of-range days, non-positive session length or an
            unknown split (caller contract violations)
    """
    if session_minutes <= 0:
        raise ValueError("session_minutes must be positive")
    if split is not None and split not in SPLIT_TYPES:
        raise ValueError(f"Unknown split: {split!r}. Must be one of {list(SPLIT_TYPES)}")

    catalog = tuple(repository.fetch_all())
    lagging = tuple(lagging_areas)

    recovery = calculate_recovery_factors(profile)
    recommendation = recommend_split(days_per_week, profile.goal, profile.experience, session_minutes)
    if split is None or split == recommendation.split:
        split_type = recommendation.split
        split_reason = recommendation.reason
        alternatives = recommendation.alternatives
    else:
        split_type = split
        split_reason = f"Chosen over the recommended {recommendation.split}"
        alternatives = (recommendation.split,)

    plan = build_periodization_plan(profile, recovery)
    volume = calculate_volume_distribution(
        split_type, days_per_week, profile.experience, profile.goal, recovery, lagging
    )
    budget = create_fatigue_budget(profile)

    warnings = list(recovery.warnings)
    mode_notes: list[str] = []
    if session_minutes <= QUICK_SESSION_MINUTES:
        budget = scale_budget(budget, 0.5)
        mode_notes.append(
            f"Quick session mode ({session_minutes} min): fatigue budget halved, "
            "top-tier exercises prioritized"
        )
    elif session_minutes < SHORT_SESSION_MINUTES:
        factor = min(1.0, session_minutes / REFERENCE_SESSION_MINUTES)
        budget = scale_budget(budget, factor)
        volume = _shorten_volume(volume, factor)
        mode_notes.append(
            f"Short session mode ({session_minutes} min): volume and fatigue budget scaled to {factor:.0%}"
        )

    body_composition = analyze_body_composition(profile)
    if body_composition is not None:
        warnings.extend(body_composition.warnings)

    templates = build_session_templates(split_type, days_per_week)
    schedule = get_weekly_schedule(days_per_week)
    offsets = get_session_day_offsets(days_per_week)

    weeks: list[MesocycleWeek] = []
    for progression in plan.weekly_progression:
        # residual fatigue does not carry over between weeks
        tracker = WeeklyFatigueTracker(profile)
        week_budget = scale_budget(budget, 0.5) if progression.is_deload else budget
        context = SessionContext(
            profile=profile,
            catalog=catalog,
            volume=volume,
            model=plan.model,
            progression=progression,
            total_weeks=plan.mesocycle_weeks,
            session_minutes=session_minutes,
        )
        sessions = []
        for index, template in enumerate(templates):
            day_type = None
            if plan.model == "daily_undulating" and not progression.is_deload:
                day_type = DUP_ROTATION[index % len(DUP_ROTATION)]
            sessions.append(
                build_detailed_session(
                    template,
                    schedule[index],
                    offsets[index],
                    context,
                    SessionFatigueManager(week_budget),
                    tracker,
                    day_type,  # type: ignore[arg-type]
                )
            )
        logger.debug("week %d: %d sessions built", progression.week, len(sessions))
        weeks.append(
            MesocycleWeek(
                week_number=progression.week,
                focus=progression.focus,
                intensity_modifier=progression.intensity_modifier,
                volume_modifier=progression.volume_modifier,
                rpe=progression.rpe,
                sessions=sessions,
                is_deload=progression.is_deload,
            )
        )

    warnings.extend(_program_warnings(weeks, profile, session_minutes))

    notes = [f"Split: {split_type} - {split_reason}"]
    if alternatives:
        notes.append(f"Alternatives: {', '.join(alternatives)}")
    notes.append(f"Periodization: {MODEL_LABELS[plan.model]}")
    notes.append(
        f"Mesocycle length: {plan.mesocycle_weeks} weeks "
        f"({plan.training_weeks} training + 1 deload)"
    )
    notes.append(
        "Deload strategy: reactive - deload when performance stalls or fatigue accumulates"
        if plan.deload_strategy == "reactive"
        else f"Deload strategy: proactive - scheduled every {plan.deload_frequency_weeks} weeks"
    )
    notes.append(f"Systemic fatigue limit: {budget.systemic_limit:g}/session")
    notes.append(f"Minimum SFR threshold: {budget.min_sfr_threshold:.2f}")
    lagging_muscles = [m for m in volume if m in resolve_lagging_muscles(lagging)]
    if lagging_muscles:
        notes.append(f"Extra volume (+15%) for lagging areas: {', '.join(lagging_muscles)}")
    notes.extend(mode_notes)
    capacity = _average_capacity([s for w in weeks if not w.is_deload for s in w.sessions])
    if capacity is not None and capacity < 60:
        notes.append(
            f"Sessions use {capacity}% of fatigue capacity on average - there is room to add volume"
        )
    if body_composition is not None:
        notes.append(
            f"FFMI {body_composition.normalized_ffmi:.1f} ({body_composition.classification}), "
            f"{body_composition.percent_of_natural_limit:.0f}% of natural limit"
        )
        notes.extend(body_composition.notes)

    return FullProgramRecommendation(
        split=split_type,
        split_reason=split_reason,
        alternatives=alternatives,
        weekly_schedule=schedule,
        periodization=plan,
        recovery_factors=recovery,
        volume=volume,
        fatigue_budget=budget,
        weeks=weeks,
        warnings=warnings,
        notes=notes,
        body_composition=body_composition,
    )
