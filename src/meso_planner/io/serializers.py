"""
JSON serialization for profiles and generated programs.

Handles conversion between dataclasses and JSON-compatible dicts.
Profiles are read from JSON or YAML; programs are only ever written.
"""

import json
from pathlib import Path
from typing import Any

import yaml

from ..core.models import (
    EQUIPMENT_KINDS,
    EXPERIENCE_LEVELS,
    GOALS,
    BodyCompositionAnalysis,
    BodyCompositionSnapshot,
    DetailedExercise,
    DetailedSession,
    FatigueBudgetConfig,
    FullProgramRecommendation,
    MesocycleWeek,
    MuscleVolume,
    PeriodizationPlan,
    RecoveryFactors,
    SessionFatigueSummary,
    SplitRecommendation,
    UserProfile,
)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_choice(value: Any, choices: tuple[str, ...], name: str) -> str:
    """
    Validate that value is one of the allowed strings.

    Raises:
        ValidationError: If value is not in choices
    """
    if value not in choices:
        raise ValidationError(f"Invalid {name}: {value!r}. Must be one of {list(choices)}")
    return value


def validate_rating(value: Any, name: str) -> int:
    """
    Validate a 1-5 self-rating (sleep quality, stress level).

    Raises:
        ValidationError: If value is not an integer between 1 and 5
    """
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 5:
        raise ValidationError(f"Invalid {name}: {value!r}. Must be an integer from 1 to 5")
    return value


def validate_positive(value: int | float, name: str) -> int | float:
    """
    Validate that value is positive.

    Raises:
        ValidationError: If value is not a positive number
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ValidationError(f"{name} must be positive, got {value!r}")
    return value


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that value is non-negative.

    Raises:
        ValidationError: If value is negative or not a number
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value!r}")
    return value


# =============================================================================
# Profile
# =============================================================================


def _body_composition_to_dict(snapshot: BodyCompositionSnapshot) -> dict[str, Any]:
    return {
        "scan_date": snapshot.scan_date,
        "weight_kg": snapshot.weight_kg,
        "lean_mass_kg": snapshot.lean_mass_kg,
        "fat_mass_kg": snapshot.fat_mass_kg,
        "body_fat_percent": snapshot.body_fat_percent,
    }


def _dict_to_body_composition(data: dict[str, Any]) -> BodyCompositionSnapshot:
    for key in ("weight_kg", "lean_mass_kg"):
        validate_positive(data.get(key), key)
    validate_non_negative(data.get("fat_mass_kg", 0), "fat_mass_kg")
    validate_non_negative(data.get("body_fat_percent"), "body_fat_percent")
    return BodyCompositionSnapshot(
        scan_date=str(data.get("scan_date", "")),
        weight_kg=float(data["weight_kg"]),
        lean_mass_kg=float(data["lean_mass_kg"]),
        fat_mass_kg=float(data.get("fat_mass_kg", 0.0)),
        body_fat_percent=float(data["body_fat_percent"]),
    )


def user_profile_to_dict(profile: UserProfile) -> dict[str, Any]:
    """
    Convert UserProfile to JSON-compatible dict.

    Collections are written as sorted lists so the output is stable.
    """
    d: dict[str, Any] = {
        "goal": profile.goal,
        "experience": profile.experience,
        "age": profile.age,
        "sleep_quality": profile.sleep_quality,
        "stress_level": profile.stress_level,
        "training_age": profile.training_age,
        "available_equipment": sorted(profile.available_equipment),
        "injury_history": sorted(profile.injury_history),
    }
    if profile.height_cm is not None:
        d["height_cm"] = profile.height_cm
    if profile.latest_body_composition is not None:
        d["latest_body_composition"] = _body_composition_to_dict(profile.latest_body_composition)
    return d


def dict_to_user_profile(data: dict[str, Any]) -> UserProfile:
    """
    Convert dict to UserProfile.

    Only goal, experience and age are required; everything else falls back
    to the UserProfile defaults.

    Args:
        data: Dict representation

    Returns:
        UserProfile instance

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("Profile must be a mapping")

    validate_choice(data.get("goal"), GOALS, "goal")
    validate_choice(data.get("experience"), EXPERIENCE_LEVELS, "experience")
    validate_positive(data.get("age"), "age")
    validate_rating(data.get("sleep_quality", 3), "sleep_quality")
    validate_rating(data.get("stress_level", 3), "stress_level")
    validate_non_negative(data.get("training_age", 0), "training_age")

    equipment = data.get("available_equipment")
    if equipment is None:
        equipment = list(EQUIPMENT_KINDS)
    for kind in equipment:
        validate_choice(kind, EQUIPMENT_KINDS, "equipment")

    height = data.get("height_cm")
    if height is not None:
        validate_positive(height, "height_cm")

    raw_scan = data.get("latest_body_composition")
    try:
        return UserProfile(
            goal=data["goal"],
            experience=data["experience"],
            age=int(data["age"]),
            sleep_quality=int(data.get("sleep_quality", 3)),
            stress_level=int(data.get("stress_level", 3)),
            training_age=float(data.get("training_age", 0.0)),
            available_equipment=frozenset(equipment),
            injury_history=frozenset(str(m) for m in data.get("injury_history") or ()),
            height_cm=float(height) if height is not None else None,
            latest_body_composition=_dict_to_body_composition(raw_scan) if raw_scan else None,
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e


def load_profile(path: str | Path) -> UserProfile:
    """
    Read a profile from a JSON or YAML file (chosen by suffix).

    Raises:
        FileNotFoundError: If the file does not exist
        ValidationError: If the file cannot be parsed or the profile is invalid
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValidationError(f"Cannot parse {path}: {e}") from e
    return dict_to_user_profile(data)


def save_profile(profile: UserProfile, path: str | Path) -> Path:
    """Write a profile as indented JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(user_profile_to_dict(profile), f, indent=2)
        f.write("\n")
    return path


# =============================================================================
# Program output
# =============================================================================


def recovery_factors_to_dict(recovery: RecoveryFactors) -> dict[str, Any]:
    return {
        "volume_multiplier": recovery.volume_multiplier,
        "frequency_multiplier": recovery.frequency_multiplier,
        "deload_frequency_weeks": recovery.deload_frequency_weeks,
        "warnings": list(recovery.warnings),
    }


def fatigue_budget_to_dict(budget: FatigueBudgetConfig) -> dict[str, Any]:
    return {
        "systemic_limit": budget.systemic_limit,
        "local_limit": budget.local_limit,
        "min_sfr_threshold": budget.min_sfr_threshold,
        "warning_threshold": budget.warning_threshold,
    }


def split_recommendation_to_dict(rec: SplitRecommendation) -> dict[str, Any]:
    return {"split": rec.split, "reason": rec.reason, "alternatives": list(rec.alternatives)}


def periodization_to_dict(plan: PeriodizationPlan) -> dict[str, Any]:
    return {
        "model": plan.model,
        "training_weeks": plan.training_weeks,
        "mesocycle_weeks": plan.mesocycle_weeks,
        "deload_strategy": plan.deload_strategy,
        "deload_frequency_weeks": plan.deload_frequency_weeks,
        "weekly_progression": [
            {
                "week": w.week,
                "intensity_modifier": w.intensity_modifier,
                "volume_modifier": w.volume_modifier,
                "rpe": [w.rpe.low, w.rpe.high],
                "focus": w.focus,
                "is_deload": w.is_deload,
            }
            for w in plan.weekly_progression
        ],
    }


def volume_to_dict(volume: dict[str, MuscleVolume]) -> dict[str, Any]:
    return {
        m: {"sets": v.sets, "frequency": v.frequency, "lagging": v.lagging}
        for m, v in volume.items()
    }


def _fatigue_summary_to_dict(summary: SessionFatigueSummary) -> dict[str, Any]:
    return {
        "total_systemic": summary.total_systemic,
        "systemic_limit": summary.systemic_limit,
        "capacity_used_percent": summary.capacity_used_percent,
        "local_by_muscle": dict(summary.local_by_muscle),
        "average_sfr": summary.average_sfr,
        "exercise_count": summary.exercise_count,
        "warnings": list(summary.warnings),
        "recommendation": summary.recommendation,
    }


def detailed_exercise_to_dict(item: DetailedExercise) -> dict[str, Any]:
    return {
        "exercise_id": item.exercise.id,
        "name": item.exercise.name,
        "target_muscle": item.target_muscle,
        "equipment": item.exercise.equipment,
        "sets": item.sets,
        "reps": [item.min_reps, item.max_reps],
        "rir": item.rir,
        "tempo": item.tempo,
        "rest_seconds": item.rest_seconds,
        "systemic_fatigue": item.fatigue.systemic_cost,
        "sfr": item.fatigue.stimulus_per_fatigue,
        "efficiency": item.efficiency,
        "load_guidance": item.load_guidance,
        "notes": item.notes,
    }


def detailed_session_to_dict(session: DetailedSession) -> dict[str, Any]:
    d: dict[str, Any] = {
        "day": session.day,
        "name": session.name,
        "focus": session.focus,
        "muscles": list(session.muscles),
        "warmup": list(session.warmup),
        "exercises": [detailed_exercise_to_dict(e) for e in session.exercises],
        "total_sets": session.total_sets,
        "estimated_minutes": session.estimated_minutes,
        "skipped": list(session.skipped),
    }
    if session.day_type is not None:
        d["day_type"] = session.day_type
    if session.fatigue_summary is not None:
        d["fatigue_summary"] = _fatigue_summary_to_dict(session.fatigue_summary)
    return d


def mesocycle_week_to_dict(week: MesocycleWeek) -> dict[str, Any]:
    return {
        "week": week.week_number,
        "focus": week.focus,
        "intensity_modifier": week.intensity_modifier,
        "volume_modifier": week.volume_modifier,
        "rpe": [week.rpe.low, week.rpe.high],
        "is_deload": week.is_deload,
        "sessions": [detailed_session_to_dict(s) for s in week.sessions],
    }


def body_composition_analysis_to_dict(analysis: BodyCompositionAnalysis) -> dict[str, Any]:
    return {
        "ffmi": analysis.ffmi,
        "normalized_ffmi": analysis.normalized_ffmi,
        "percent_of_natural_limit": analysis.percent_of_natural_limit,
        "classification": analysis.classification,
        "body_fat_percent": analysis.body_fat_percent,
        "notes": list(analysis.notes),
        "warnings": list(analysis.warnings),
    }


def program_to_dict(program: FullProgramRecommendation) -> dict[str, Any]:
    """
    Convert a generated program to a JSON-compatible dict.

    Args:
        program: Output of generate_full_mesocycle()

    Returns:
        Nested dict; exercise entries are referenced by id and name only
    """
    d: dict[str, Any] = {
        "split": program.split,
        "split_reason": program.split_reason,
        "alternatives": list(program.alternatives),
        "weekly_schedule": list(program.weekly_schedule),
        "periodization": periodization_to_dict(program.periodization),
        "recovery_factors": recovery_factors_to_dict(program.recovery_factors),
        "fatigue_budget": fatigue_budget_to_dict(program.fatigue_budget),
        "volume": volume_to_dict(program.volume),
        "weeks": [mesocycle_week_to_dict(w) for w in program.weeks],
        "warnings": list(program.warnings),
        "notes": list(program.notes),
    }
    if program.body_composition is not None:
        d["body_composition"] = body_composition_analysis_to_dict(program.body_composition)
    return d
