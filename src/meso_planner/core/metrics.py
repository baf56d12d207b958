"""
Numeric helpers and body-composition metrics.

Rounding in the engine is half-up (2.5 -> 3), not Python's round-half-even,
so set counts and frequencies do not flip between neighbouring inputs.
"""

import math

from .config import (
    BULK_BODY_FAT_CEILING,
    CUT_BODY_FAT_FLOOR,
    FFMI_CLASSES,
    FFMI_HEIGHT_REFERENCE_M,
    FFMI_HEIGHT_SLOPE,
    FFMI_NATURAL_LIMIT,
    FFMI_NEAR_LIMIT_PERCENT,
)
from .models import BodyCompositionAnalysis, FfmiClass, UserProfile


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties away from zero for positives."""
    return int(math.floor(value + 0.5))


def round_to(value: float, step: float) -> float:
    """
    Round value to the nearest multiple of step (half-up).

    The result is passed through round(..., 10) to drop float noise such as
    0.30000000000000004.
    """
    return round(math.floor(value / step + 0.5) * step, 10)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


# =============================================================================
# Body composition
# =============================================================================


def calculate_ffmi(lean_mass_kg: float, height_cm: float) -> tuple[float, float]:
    """
    Fat-free mass index and its height-normalized variant.

    FFMI = lean_kg / h², normalized = FFMI + 6.1 × (1.8 − h), h in metres.

    Args:
        lean_mass_kg: Lean (fat-free) mass in kg
        height_cm: Height in centimetres

    Returns:
        (ffmi, normalized_ffmi), both rounded to 0.1

    Raises:
        ValueError: If height or lean mass is not positive
    """
    if height_cm <= 0:
        raise ValueError("height_cm must be positive")
    if lean_mass_kg <= 0:
        raise ValueError("lean_mass_kg must be positive")
    h = height_cm / 100
    ffmi = lean_mass_kg / (h * h)
    normalized = ffmi + FFMI_HEIGHT_SLOPE * (FFMI_HEIGHT_REFERENCE_M - h)
    return round_to(ffmi, 0.1), round_to(normalized, 0.1)


def classify_ffmi(normalized_ffmi: float) -> FfmiClass:
    for upper, label in FFMI_CLASSES:
        if normalized_ffmi < upper:
            return label  # type: ignore[return-value]
    return "suspicious"


def analyze_body_composition(profile: UserProfile) -> BodyCompositionAnalysis | None:
    """
    Read the profile's latest scan against the natural FFMI limit.

    Returns None when the profile carries no scan or no height.
    """
    scan = profile.latest_body_composition
    if scan is None or profile.height_cm is None:
        return None

    ffmi, normalized = calculate_ffmi(scan.lean_mass_kg, profile.height_cm)
    percent = round_to(min(normalized / FFMI_NATURAL_LIMIT * 100, 100.0), 0.1)

    notes: list[str] = []
    warnings: list[str] = []
    if percent > FFMI_NEAR_LIMIT_PERCENT:
        notes.append("You're near your genetic potential - focus on maintaining and small improvements")
    if scan.body_fat_percent > BULK_BODY_FAT_CEILING and profile.goal == "bulk":
        warnings.append(
            "Consider a mini-cut before continuing to bulk - you're above 20% body fat"
        )
    if scan.body_fat_percent < CUT_BODY_FAT_FLOOR and profile.goal == "cut":
        warnings.append("You're already quite lean - be careful not to cut too aggressively")

    return BodyCompositionAnalysis(
        ffmi=ffmi,
        normalized_ffmi=normalized,
        percent_of_natural_limit=percent,
        classification=classify_ffmi(normalized),
        body_fat_percent=scan.body_fat_percent,
        notes=tuple(notes),
        warnings=tuple(warnings),
    )
