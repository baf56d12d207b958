"""
Recovery factors: how much volume and frequency a trainee can absorb.

Five stages run in a fixed order (age, sleep, stress, training age; goal is
applied later by the volume distributor).  Each stage multiplies the volume
and frequency multipliers and may move the deload cadence; the products are
clamped at the end.
"""

from .config import (
    AGE_RECOVERY_BANDS,
    BASE_DELOAD_WEEKS,
    BEGINNER_TRAINING_AGE,
    BEGINNER_VOLUME_MULTIPLIER,
    FREQUENCY_MULTIPLIER_BOUNDS,
    HIGH_STRESS_THRESHOLD,
    HIGH_STRESS_WARNING,
    MIN_DELOAD_WEEKS,
    NOVICE_TRAINING_AGE_DELOAD_WEEKS,
    POOR_SLEEP_THRESHOLD,
    POOR_SLEEP_WARNING,
    SLEEP_FREQUENCY_MULTIPLIER,
    SLEEP_VOLUME_MULTIPLIER,
    STRESS_FREQUENCY_MULTIPLIER,
    STRESS_VOLUME_MULTIPLIER,
    VETERAN_TRAINING_AGE,
    VOLUME_MULTIPLIER_BOUNDS,
)
from .metrics import clamp
from .models import RecoveryFactors, UserProfile


def _age_band(age: float) -> tuple[float, float, int | None, str | None]:
    for upper, volume, frequency, deload, warning in AGE_RECOVERY_BANDS:
        if age < upper:
            return volume, frequency, deload, warning
    raise ValueError(f"No age band for age {age}")


def _shorten_deload(weeks: int) -> int:
    return max(MIN_DELOAD_WEEKS, weeks - 1)


def calculate_recovery_factors(profile: UserProfile) -> RecoveryFactors:
    """
    Derive volume/frequency multipliers and deload cadence from a profile.

    Deload cadence follows the stages in order: the age band sets it, poor
    sleep and high stress each pull it one week earlier, a training age under
    one year resets it to 8 weeks, and five or more years pulls it one week
    earlier again.  It never drops below 3 weeks.

    Args:
        profile: Validated trainee profile

    Returns:
        RecoveryFactors with clamped multipliers and ordered warnings
    """
    volume = 1.0
    frequency = 1.0
    deload = BASE_DELOAD_WEEKS
    warnings: list[str] = []

    # Stage 1: age
    age_volume, age_frequency, age_deload, age_warning = _age_band(profile.age)
    volume *= age_volume
    frequency *= age_frequency
    if age_deload is not None:
        deload = age_deload
    if age_warning:
        warnings.append(age_warning)

    # Stage 2: sleep
    volume *= SLEEP_VOLUME_MULTIPLIER[profile.sleep_quality]
    frequency *= SLEEP_FREQUENCY_MULTIPLIER[profile.sleep_quality]
    if profile.sleep_quality <= POOR_SLEEP_THRESHOLD:
        warnings.append(POOR_SLEEP_WARNING)
        deload = _shorten_deload(deload)

    # Stage 3: stress
    volume *= STRESS_VOLUME_MULTIPLIER[profile.stress_level]
    frequency *= STRESS_FREQUENCY_MULTIPLIER[profile.stress_level]
    if profile.stress_level >= HIGH_STRESS_THRESHOLD:
        warnings.append(HIGH_STRESS_WARNING)
        deload = _shorten_deload(deload)

    # Stage 4: training age
    if profile.training_age < BEGINNER_TRAINING_AGE:
        volume *= BEGINNER_VOLUME_MULTIPLIER
        deload = NOVICE_TRAINING_AGE_DELOAD_WEEKS
    elif profile.training_age >= VETERAN_TRAINING_AGE:
        deload = _shorten_deload(deload)

    return RecoveryFactors(
        volume_multiplier=round(clamp(volume, *VOLUME_MULTIPLIER_BOUNDS), 2),
        frequency_multiplier=round(clamp(frequency, *FREQUENCY_MULTIPLIER_BOUNDS), 2),
        deload_frequency_weeks=max(MIN_DELOAD_WEEKS, int(deload)),
        warnings=tuple(warnings),
    )
