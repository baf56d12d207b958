"""
Periodization planner: model choice and week-by-week progression.

Every plan is ``training_weeks`` progression entries followed by exactly one
deload entry.  Within a training span, modifiers ramp linearly from their
start value (week 1) to their end value (last training week).
"""

import math

from .config import (
    BLOCK_HYPERTROPHY_SHARE,
    BLOCK_STRENGTH_SHARE,
    DELOAD_FOCUS,
    DELOAD_INTENSITY,
    DELOAD_RPE,
    DELOAD_VOLUME,
)
from .models import (
    PeriodizationModel,
    PeriodizationPlan,
    RecoveryFactors,
    RpeTarget,
    UserProfile,
    WeeklyProgression,
)


def select_periodization_model(profile: UserProfile) -> PeriodizationModel:
    """
    Choose a periodization model.

    novice or training age < 1 year      -> linear
    intermediate or training age < 3     -> daily undulating (bulk) /
                                            weekly undulating (cut, maintain)
    otherwise                            -> block
    """
    if profile.experience == "novice" or profile.training_age < 1:
        return "linear"
    if profile.experience == "intermediate" or profile.training_age < 3:
        return "daily_undulating" if profile.goal == "bulk" else "weekly_undulating"
    return "block"


def _ramp(start: float, end: float, index: int, count: int) -> float:
    """Value at 0-based ``index`` of a linear ramp spanning ``count`` weeks."""
    if count <= 1:
        return end
    return round(start + (end - start) * index / (count - 1), 3)


def _linear_weeks(n: int) -> list[WeeklyProgression]:
    weeks = []
    for i in range(n):
        p = i / n
        weeks.append(
            WeeklyProgression(
                week=i + 1,
                intensity_modifier=_ramp(0.85, 1.0, i, n),
                volume_modifier=_ramp(0.90, 1.0, i, n),
                rpe=RpeTarget(6 + math.floor(p * 2), 7 + math.floor(p * 2)),
                focus="Technique and base building" if p < 0.5 else "Progressive overload",
            )
        )
    return weeks


def _daily_undulating_weeks(n: int) -> list[WeeklyProgression]:
    return [
        WeeklyProgression(
            week=i + 1,
            intensity_modifier=_ramp(0.90, 1.0, i, n),
            volume_modifier=_ramp(0.85, 1.0, i, n),
            rpe=RpeTarget(7, 9),
            focus=f"DUP Week {i + 1}: Rotate hypertrophy/strength/power daily",
        )
        for i in range(n)
    ]


def _weekly_undulating_weeks(n: int) -> list[WeeklyProgression]:
    """
    Odd weeks accumulate volume, even weeks push intensity.

    Intensity stays between 0.85 and 1.0 here, so the session RIR shift
    ``round((1 - intensity) * 3)`` is 0 in both week types.  The two weeks
    differ in volume and in the RPE target, not in RIR.
    """
    weeks = []
    for i in range(n):
        p = (i + 1) / n
        if (i + 1) % 2 == 1:
            weeks.append(
                WeeklyProgression(
                    week=i + 1,
                    intensity_modifier=round(0.85 + p * 0.1, 3),
                    volume_modifier=round(1.0 + p * 0.1, 3),
                    rpe=RpeTarget(7, 8),
                    focus="Volume accumulation",
                )
            )
        else:
            weeks.append(
                WeeklyProgression(
                    week=i + 1,
                    intensity_modifier=round(0.95 + p * 0.05, 3),
                    volume_modifier=0.7,
                    rpe=RpeTarget(8, 9),
                    focus="Intensity/recovery",
                )
            )
    return weeks


def block_phase_lengths(n: int) -> tuple[int, int, int]:
    """Split ``n`` training weeks into (hypertrophy, strength, peaking)."""
    hypertrophy = min(n, math.ceil(n * BLOCK_HYPERTROPHY_SHARE))
    strength = min(n - hypertrophy, math.ceil(n * BLOCK_STRENGTH_SHARE))
    return hypertrophy, strength, n - hypertrophy - strength


def _block_weeks(n: int) -> list[WeeklyProgression]:
    hypertrophy, strength, peak = block_phase_lengths(n)
    weeks = []
    for i in range(hypertrophy):
        weeks.append(
            WeeklyProgression(
                week=len(weeks) + 1,
                intensity_modifier=_ramp(0.70, 0.80, i, hypertrophy),
                volume_modifier=1.1,
                rpe=RpeTarget(7, 8),
                focus="Hypertrophy block: Volume accumulation, moderate loads",
            )
        )
    for i in range(strength):
        weeks.append(
            WeeklyProgression(
                week=len(weeks) + 1,
                intensity_modifier=_ramp(0.85, 0.95, i, strength),
                volume_modifier=0.8,
                rpe=RpeTarget(8, 9),
                focus="Strength block: Moderate volume, heavy loads",
            )
        )
    for i in range(peak):
        weeks.append(
            WeeklyProgression(
                week=len(weeks) + 1,
                intensity_modifier=_ramp(0.95, 1.0, i, peak),
                volume_modifier=0.6,
                rpe=RpeTarget(9, 10),
                focus="Peaking block: Low volume, maximal intensity",
            )
        )
    return weeks


_PROGRESSION_BUILDERS = {
    "linear": _linear_weeks,
    "daily_undulating": _daily_undulating_weeks,
    "weekly_undulating": _weekly_undulating_weeks,
    "block": _block_weeks,
}


def build_weekly_progression(model: PeriodizationModel, training_weeks: int) -> list[WeeklyProgression]:
    """
    Week-by-week modifiers for ``training_weeks`` weeks plus the deload week.

    Args:
        model: Periodization model
        training_weeks: Number of training weeks before the deload (>= 1)

    Returns:
        training_weeks + 1 entries; the last one is the deload

    Raises:
        ValueError: If training_weeks < 1 or the model is unknown
    """
    if training_weeks < 1:
        raise ValueError("training_weeks must be at least 1")
    if model not in _PROGRESSION_BUILDERS:
        raise ValueError(f"Unknown periodization model: {model!r}")

    weeks = _PROGRESSION_BUILDERS[model](training_weeks)
    weeks.append(
        WeeklyProgression(
            week=training_weeks + 1,
            intensity_modifier=DELOAD_INTENSITY,
            volume_modifier=DELOAD_VOLUME,
            rpe=RpeTarget(*DELOAD_RPE),
            focus=DELOAD_FOCUS,
            is_deload=True,
        )
    )
    return weeks


def build_periodization_plan(profile: UserProfile, recovery: RecoveryFactors) -> PeriodizationPlan:
    """
    Build the mesocycle's periodization plan.

    Training weeks equal the recovery-derived deload cadence; novices get a
    reactive deload strategy (deload when fatigue signals appear), everyone
    else a proactive one (always scheduled).
    """
    model = select_periodization_model(profile)
    training_weeks = recovery.deload_frequency_weeks
    return PeriodizationPlan(
        model=model,
        training_weeks=training_weeks,
        mesocycle_weeks=training_weeks + 1,
        weekly_progression=tuple(build_weekly_progression(model, training_weeks)),
        deload_strategy="reactive" if profile.experience == "novice" else "proactive",
        deload_frequency_weeks=recovery.deload_frequency_weeks,
    )
