"""
Fatigue budgeting.

- create_fatigue_budget: per-session systemic/local ceilings for a profile
- calculate_exercise_fatigue: cost and stimulus-to-fatigue ratio (SFR) of
  one prescribed exercise
- SessionFatigueManager: accumulates accepted exercises within one session
  and never lets the systemic total exceed its limit
- WeeklyFatigueTracker: per-muscle residual fatigue with linear daily decay
  across the sessions of one week
"""

import logging
import math
from dataclasses import dataclass

from .config import (
    AGE_BUDGET_ADJUSTMENTS,
    BASE_LOCAL_LIMIT,
    BASE_MIN_SFR,
    BASE_RECOVERY_DAYS,
    BASE_RECOVERY_RATE,
    BASE_SFR,
    BASE_SYSTEMIC_LIMIT,
    CAPACITY_BANDS,
    CAPACITY_MAX_RECOMMENDATION,
    CUT_LOCAL_MULTIPLIER,
    CUT_SYSTEMIC_MULTIPLIER,
    DEFAULT_BASE_SFR,
    DEFAULT_PATTERN_FATIGUE,
    EQUIPMENT_FATIGUE_MODIFIER,
    EXPERIENCE_BUDGET_ADJUSTMENTS,
    FIBER_RECOVERY_MODIFIER,
    FULLY_RECOVERED_DAY,
    FULLY_RECOVERED_RECOMMENDATION,
    HEAVY_RECOVERY_PATTERNS,
    HIGH_REP_MODIFIER,
    HIGH_REP_THRESHOLD,
    INTENSITY_FACTOR_PER_RIR,
    LOCAL_COST_PRIMARY,
    LOCAL_COST_SECONDARY,
    LOW_REP_MODIFIER,
    LOW_REP_THRESHOLD,
    MIN_POSITION_SFR_FACTOR,
    NOT_RECOVERED_RECOMMENDATION,
    POSITION_FATIGUE_PENALTY,
    POSITION_SFR_DECAY,
    RECOVERY_BANDS,
    RECOVERY_READY_THRESHOLD,
    SFR_ACCEPTABLE,
    SFR_OPTIMAL,
    SMALL_MUSCLES,
    SYSTEMIC_FATIGUE_BY_PATTERN,
    TRACKED_MUSCLES,
    VOLUME_FACTOR_GROWTH,
    VOLUME_FACTOR_SCALE,
    WARNING_THRESHOLD,
    WEEKLY_SETS_LARGE,
    WEEKLY_SETS_SMALL,
)
from .metrics import round_half_up, round_to
from .models import (
    Efficiency,
    ExerciseAddResult,
    ExerciseEntry,
    ExerciseFatigueProfile,
    FatigueBudgetConfig,
    MuscleVolumeStatus,
    RecoveryCheck,
    SessionFatigueSummary,
    UserProfile,
)
from .rep_ranges import get_fiber_type

logger = logging.getLogger(__name__)


# =============================================================================
# Budget
# =============================================================================


def recovery_capacity_multiplier(sleep_quality: int, stress_level: int) -> float:
    """
    Sleep × stress scaling of the systemic limit, within [0.7, 1.3].

    r = (sleep / 5) × (1 − (stress − 1) / 8);  multiplier = 0.7 + 0.6 r
    """
    r = (sleep_quality / 5) * (1 - (stress_level - 1) / 8)
    return 0.7 + r * 0.6


def create_fatigue_budget(profile: UserProfile) -> FatigueBudgetConfig:
    """
    Per-session fatigue ceilings for a profile.

    Adjustments apply in order: age, experience, sleep × stress, cut goal.
    Age and experience each set the minimum SFR threshold when they apply;
    experience is applied second and therefore wins.

    Args:
        profile: Trainee profile

    Returns:
        FatigueBudgetConfig with integer limits
    """
    systemic = BASE_SYSTEMIC_LIMIT
    local = BASE_LOCAL_LIMIT
    min_sfr = BASE_MIN_SFR

    for min_age, systemic_mult, local_mult, threshold in AGE_BUDGET_ADJUSTMENTS:
        if profile.age >= min_age:
            systemic *= systemic_mult
            local *= local_mult
            min_sfr = threshold
            break

    systemic_mult, local_mult, threshold = EXPERIENCE_BUDGET_ADJUSTMENTS[profile.experience]
    systemic *= systemic_mult
    local *= local_mult
    if threshold is not None:
        min_sfr = threshold

    systemic *= recovery_capacity_multiplier(profile.sleep_quality, profile.stress_level)

    if profile.goal == "cut":
        systemic *= CUT_SYSTEMIC_MULTIPLIER
        local *= CUT_LOCAL_MULTIPLIER

    return FatigueBudgetConfig(
        systemic_limit=round_half_up(systemic),
        local_limit=round_half_up(local),
        min_sfr_threshold=round(min_sfr, 2),
        warning_threshold=WARNING_THRESHOLD,
    )


def scale_budget(budget: FatigueBudgetConfig, systemic_factor: float) -> FatigueBudgetConfig:
    """Copy of ``budget`` with the systemic limit scaled (deload, short sessions)."""
    return FatigueBudgetConfig(
        systemic_limit=round_half_up(budget.systemic_limit * systemic_factor),
        local_limit=budget.local_limit,
        min_sfr_threshold=budget.min_sfr_threshold,
        warning_threshold=budget.warning_threshold,
    )


# =============================================================================
# Per-exercise cost
# =============================================================================


def intensity_factor(rir: int) -> float:
    """1 + (3 − RIR) × 0.15: RIR 3 → 1.0, RIR 0 → 1.45."""
    return 1 + (3 - rir) * INTENSITY_FACTOR_PER_RIR


def volume_factor(sets: int) -> float:
    """sets × (1 + (sets − 1) × 0.1) × 0.15: super-linear in set count."""
    return sets * (1 + (sets - 1) * VOLUME_FACTOR_GROWTH) * VOLUME_FACTOR_SCALE


def base_sfr(pattern: str, equipment: str) -> float:
    return BASE_SFR.get(pattern, {}).get(equipment, DEFAULT_BASE_SFR)


def calculate_exercise_fatigue(
    exercise: ExerciseEntry,
    sets: int,
    reps: int,
    rir: int,
    position: int,
) -> ExerciseFatigueProfile:
    """
    Fatigue cost and efficiency of one prescribed exercise.

    systemic = pattern cost × equipment × volume_factor(sets)
               × intensity_factor(RIR) × (1 + 0.05 (position − 1)) × rep modifier
    local    = primary: sets × 8 × intensity, secondary: sets × 4 × intensity
    SFR      = base SFR × max(0.5, 1 − 0.1 (position − 1))

    Args:
        exercise: Catalog entry
        sets: Working sets
        reps: Reps per set (average of the prescribed range)
        rir: Reps in reserve
        position: 1-based slot in the session

    Returns:
        ExerciseFatigueProfile; costs rounded to 0.1, SFR to 0.01,
        recovery days to the nearest 0.5
    """
    pattern_cost = SYSTEMIC_FATIGUE_BY_PATTERN.get(exercise.pattern, DEFAULT_PATTERN_FATIGUE)
    equipment_mod = EQUIPMENT_FATIGUE_MODIFIER.get(exercise.equipment, 1.0)
    intensity = intensity_factor(rir)
    position_penalty = 1 + (position - 1) * POSITION_FATIGUE_PENALTY

    rep_modifier = 1.0
    if reps <= LOW_REP_THRESHOLD:
        rep_modifier = LOW_REP_MODIFIER
    elif reps >= HIGH_REP_THRESHOLD:
        rep_modifier = HIGH_REP_MODIFIER

    systemic = pattern_cost * equipment_mod * volume_factor(sets) * intensity * position_penalty * rep_modifier

    local: dict[str, float] = {exercise.primary_muscle: round_to(sets * LOCAL_COST_PRIMARY * intensity, 0.1)}
    for muscle in exercise.secondary_muscles:
        if muscle not in local:
            local[muscle] = round_to(sets * LOCAL_COST_SECONDARY * intensity, 0.1)

    sfr = base_sfr(exercise.pattern, exercise.equipment) * max(
        MIN_POSITION_SFR_FACTOR, 1 - (position - 1) * POSITION_SFR_DECAY
    )

    recovery_days = BASE_RECOVERY_DAYS
    if exercise.pattern in HEAVY_RECOVERY_PATTERNS:
        recovery_days += 1
    if rir <= 1:
        recovery_days += 0.5
    if get_fiber_type(exercise.primary_muscle) == "fast" and reps <= 6:
        recovery_days += 0.5

    return ExerciseFatigueProfile(
        systemic_cost=round_to(systemic, 0.1),
        local_cost=local,
        stimulus_per_fatigue=round_to(sfr, 0.01),
        recovery_days=round_to(recovery_days, 0.5),
    )


def classify_efficiency(sfr: float) -> Efficiency:
    if sfr >= SFR_OPTIMAL:
        return "optimal"
    if sfr >= SFR_ACCEPTABLE:
        return "acceptable"
    return "suboptimal"


# =============================================================================
# Session fatigue manager
# =============================================================================


class SessionFatigueManager:
    """
    Running fatigue totals for one session.

    can_add_exercise() is a pure check on the totals; add_exercise() is the
    only mutator and is called after an accepted check.  Systemic totals are
    therefore never above ``budget.systemic_limit``.
    """

    def __init__(self, budget: FatigueBudgetConfig):
        self.budget = budget
        self.current_systemic = 0.0
        self.current_local: dict[str, float] = {}
        self.exercise_count = 0
        self.average_sfr = 0.0
        self.warnings: list[str] = []

    def _local_violation(self, profile: ExerciseFatigueProfile) -> str | None:
        for muscle, cost in profile.local_cost.items():
            if self.current_local.get(muscle, 0.0) + cost > self.budget.local_limit:
                return muscle
        return None

    def can_add_exercise(self, profile: ExerciseFatigueProfile) -> ExerciseAddResult:
        """
        Check an exercise against the remaining budget.

        Rejections are checked in order: systemic limit, local limit per
        muscle, minimum SFR.  Nothing is recorded; see ``add_exercise``.
        """
        projected = self.current_systemic + profile.systemic_cost
        if projected > self.budget.systemic_limit:
            return ExerciseAddResult(
                allowed=False,
                efficiency="junk",
                reason=f"Would exceed systemic fatigue limit ({self.budget.systemic_limit:g})",
                rejection="systemic_limit",
            )

        muscle = self._local_violation(profile)
        if muscle is not None:
            return ExerciseAddResult(
                allowed=False,
                efficiency="junk",
                reason=f"Would exceed local fatigue limit for {muscle} ({self.budget.local_limit:g})",
                rejection="local_limit",
            )

        if profile.stimulus_per_fatigue < self.budget.min_sfr_threshold:
            return ExerciseAddResult(
                allowed=False,
                efficiency="junk",
                reason=(
                    f"SFR ({profile.stimulus_per_fatigue:.2f}) below threshold "
                    f"({self.budget.min_sfr_threshold:.2f})"
                ),
                rejection="sfr_below_threshold",
            )

        return ExerciseAddResult(allowed=True, efficiency=classify_efficiency(profile.stimulus_per_fatigue))

    def add_exercise(self, profile: ExerciseFatigueProfile) -> None:
        """
        Fold an accepted exercise into the running totals.

        The first time the recorded systemic usage goes past the warning
        threshold, a warning is kept for the session summary.

        Raises:
            ValueError: If the exercise would exceed the systemic or local limit
        """
        if self.current_systemic + profile.systemic_cost > self.budget.systemic_limit:
            raise ValueError("exercise exceeds the systemic fatigue limit")
        if self._local_violation(profile) is not None:
            raise ValueError("exercise exceeds a local fatigue limit")

        self.current_systemic += profile.systemic_cost
        for muscle, cost in profile.local_cost.items():
            self.current_local[muscle] = self.current_local.get(muscle, 0.0) + cost
        self.exercise_count += 1
        # incremental mean
        self.average_sfr += (profile.stimulus_per_fatigue - self.average_sfr) / self.exercise_count

        usage = self.current_systemic / self.budget.systemic_limit if self.budget.systemic_limit > 0 else 1.0
        if usage > self.budget.warning_threshold and not self.warnings:
            self.warnings.append(f"Approaching systemic fatigue limit ({round_half_up(usage * 100)}% used)")

    def get_remaining_budget(self) -> tuple[float, dict[str, float]]:
        """(systemic headroom, local headroom per muscle touched so far)."""
        systemic = max(0.0, self.budget.systemic_limit - self.current_systemic)
        local = {m: max(0.0, self.budget.local_limit - v) for m, v in self.current_local.items()}
        return round_to(systemic, 0.1), local

    def estimate_remaining_sets(self, pattern: str, equipment: str, rir: int = 2) -> int:
        """
        Rough count of further single-set units of a pattern that still fit
        in the systemic budget.
        """
        per_set = (
            SYSTEMIC_FATIGUE_BY_PATTERN.get(pattern, DEFAULT_PATTERN_FATIGUE)
            * EQUIPMENT_FATIGUE_MODIFIER.get(equipment, 1.0)
            * VOLUME_FACTOR_SCALE
            * intensity_factor(rir)
        )
        remaining, _ = self.get_remaining_budget()
        return math.floor(remaining / per_set) if per_set > 0 else 0

    def get_session_summary(self) -> SessionFatigueSummary:
        limit = self.budget.systemic_limit
        if limit > 0:
            used = round_half_up(self.current_systemic / limit * 100)
        else:
            used = 100 if self.current_systemic > 0 else 0

        recommendation = CAPACITY_MAX_RECOMMENDATION
        for upper, text in CAPACITY_BANDS:
            if used < upper:
                recommendation = text
                break

        return SessionFatigueSummary(
            total_systemic=round_to(self.current_systemic, 0.1),
            systemic_limit=limit,
            capacity_used_percent=used,
            local_by_muscle={m: round_to(v, 0.1) for m, v in self.current_local.items()},
            average_sfr=round_to(self.average_sfr, 0.01),
            exercise_count=self.exercise_count,
            warnings=list(self.warnings),
            recommendation=recommendation,
        )


# =============================================================================
# Weekly fatigue tracker
# =============================================================================


@dataclass
class MuscleFatigueState:
    last_trained_day: int
    fatigue_level: float
    recovery_rate: float


class WeeklyFatigueTracker:
    """
    Per-muscle residual fatigue across one training week.

    Fatigue decays linearly by ``recovery_rate`` units per elapsed day and
    never drops below zero.  Sessions must be recorded in day order.
    """

    def __init__(self, profile: UserProfile):
        self.profile = profile
        self._states: dict[str, MuscleFatigueState] = {}
        self._weekly_sets: dict[str, int] = {}
        self.reset_week()

    def recovery_rate(self, muscle: str) -> float:
        """
        Fatigue units recovered per day.

        30/day × 0.85 (age ≥ 45) × 0.75 (age ≥ 55) × (0.7 + 0.6 × sleep/5)
        × 0.9 fast-twitch / 1.1 slow-twitch.
        """
        rate = BASE_RECOVERY_RATE
        if self.profile.age >= 45:
            rate *= 0.85
        if self.profile.age >= 55:
            rate *= 0.75
        rate *= 0.7 + (self.profile.sleep_quality / 5) * 0.6
        rate *= FIBER_RECOVERY_MODIFIER[get_fiber_type(muscle)]
        return rate

    def reset_week(self) -> None:
        """Return every muscle to fully recovered and clear weekly set counts."""
        self._states = {m: self._fresh_state(m) for m in TRACKED_MUSCLES}
        self._weekly_sets = {m: 0 for m in TRACKED_MUSCLES}

    def _fresh_state(self, muscle: str) -> MuscleFatigueState:
        return MuscleFatigueState(
            last_trained_day=FULLY_RECOVERED_DAY,
            fatigue_level=0.0,
            recovery_rate=self.recovery_rate(muscle),
        )

    def muscle_state(self, muscle: str) -> MuscleFatigueState:
        if muscle not in self._states:
            self._states[muscle] = self._fresh_state(muscle)
            self._weekly_sets[muscle] = 0
        return self._states[muscle]

    def residual_fatigue(self, muscle: str, day: int) -> float:
        state = self.muscle_state(muscle)
        elapsed = max(0, day - state.last_trained_day)
        return max(0.0, state.fatigue_level - elapsed * state.recovery_rate)

    def can_train_muscle(self, muscle: str, day: int, planned_fatigue: float = 0.0) -> RecoveryCheck:
        """
        Readiness of ``muscle`` on ``day``.

        Ready iff the decayed residual is below 25.  ``days_until_ready`` is
        the smallest whole number of further days after which it would be.
        """
        state = self.muscle_state(muscle)
        current = self.residual_fatigue(muscle, day)
        ready = current < RECOVERY_READY_THRESHOLD

        days_until_ready = 0
        if not ready:
            days_until_ready = math.floor((current - RECOVERY_READY_THRESHOLD) / state.recovery_rate) + 1

        if current == 0:
            recommendation = FULLY_RECOVERED_RECOMMENDATION
        else:
            recommendation = NOT_RECOVERED_RECOMMENDATION
            for upper, text in RECOVERY_BANDS:
                if current < upper:
                    recommendation = text
                    break

        return RecoveryCheck(
            muscle=muscle,
            ready=ready,
            current_fatigue=round_to(current, 0.1),
            projected_fatigue=round_to(current + max(0.0, planned_fatigue), 0.1),
            days_until_ready=days_until_ready,
            recommendation=recommendation,
        )

    def record_training(self, muscle: str, day: int, fatigue_added: float, sets: int = 0) -> None:
        """Fold new fatigue onto the decayed residual and mark the muscle trained on ``day``."""
        if fatigue_added < 0:
            raise ValueError("fatigue_added must be non-negative")
        state = self.muscle_state(muscle)
        state.fatigue_level = self.residual_fatigue(muscle, day) + fatigue_added
        state.last_trained_day = day
        self._weekly_sets[muscle] += sets
        logger.debug("day %d: %s fatigue now %.1f", day, muscle, state.fatigue_level)

    def get_weekly_volume_status(self) -> dict[str, MuscleVolumeStatus]:
        status: dict[str, MuscleVolumeStatus] = {}
        for muscle, sets in self._weekly_sets.items():
            lo, hi = WEEKLY_SETS_SMALL if muscle in SMALL_MUSCLES else WEEKLY_SETS_LARGE
            if sets < lo:
                label = "under"
            elif sets > hi:
                label = "over"
            else:
                label = "optimal"
            status[muscle] = MuscleVolumeStatus(muscle, sets, lo, hi, label)  # type: ignore[arg-type]
        return status
