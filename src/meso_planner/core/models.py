"""
Data models for meso-planner.

Inputs (profile, catalog entries) are frozen dataclasses validated on
construction; generated program structures are plain dataclasses that the
engine builds once and never feeds back in.
"""

from dataclasses import dataclass, field
from typing import Literal, get_args

from .config import DEFAULT_TIER, ISOLATION_PATTERNS

Goal = Literal["cut", "bulk", "maintain"]
Experience = Literal["novice", "intermediate", "advanced"]
Equipment = Literal["barbell", "dumbbell", "cable", "machine", "bodyweight", "kettlebell"]
Difficulty = Literal["beginner", "intermediate", "advanced"]
MovementPattern = Literal[
    "squat",
    "hip_hinge",
    "horizontal_push",
    "horizontal_pull",
    "vertical_push",
    "vertical_pull",
    "lunge",
    "knee_flexion",
    "elbow_flexion",
    "elbow_extension",
    "shoulder_isolation",
    "calf_raise",
    "core",
    "isolation",
    "carry",
]
Tier = Literal["S", "A", "B", "C", "D", "F"]
FiberType = Literal["fast", "mixed", "slow"]
PositionCategory = Literal["first", "early", "mid", "late"]
PeriodizationModel = Literal["linear", "daily_undulating", "weekly_undulating", "block"]
DeloadStrategy = Literal["reactive", "proactive"]
SplitType = Literal["Full Body", "Upper/Lower", "PPL", "Arnold", "Bro Split"]
DupDayType = Literal["hypertrophy", "strength", "power"]
Efficiency = Literal["optimal", "acceptable", "suboptimal", "junk"]
RejectionReason = Literal["systemic_limit", "local_limit", "sfr_below_threshold"]
VolumeStatus = Literal["under", "optimal", "over"]
FfmiClass = Literal["below_average", "average", "above_average", "excellent", "superior", "suspicious"]

GOALS: tuple[str, ...] = get_args(Goal)
EXPERIENCE_LEVELS: tuple[str, ...] = get_args(Experience)
EQUIPMENT_KINDS: tuple[str, ...] = get_args(Equipment)
DIFFICULTIES: tuple[str, ...] = get_args(Difficulty)
MOVEMENT_PATTERNS: tuple[str, ...] = get_args(MovementPattern)
TIERS: tuple[str, ...] = get_args(Tier)
SPLIT_TYPES: tuple[str, ...] = get_args(SplitType)
PERIODIZATION_MODELS: tuple[str, ...] = get_args(PeriodizationModel)
DUP_DAY_TYPES: tuple[str, ...] = get_args(DupDayType)


def _check_choice(value: str, choices: tuple[str, ...], name: str) -> None:
    if value not in choices:
        raise ValueError(f"Invalid {name}: {value!r}. Must be one of {list(choices)}")


def _check_rating(value: int, name: str, low: int = 1, high: int = 5) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer from {low} to {high}, got {value!r}")
    if not low <= value <= high:
        raise ValueError(f"{name} must be between {low} and {high}, got {value}")


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BodyCompositionSnapshot:
    """Latest body-composition scan (e.g. DEXA)."""

    scan_date: str
    weight_kg: float
    lean_mass_kg: float
    fat_mass_kg: float
    body_fat_percent: float

    def __post_init__(self) -> None:
        """Validate scan values."""
        if self.weight_kg <= 0:
            raise ValueError("weight_kg must be positive")
        if self.lean_mass_kg <= 0:
            raise ValueError("lean_mass_kg must be positive")
        if self.fat_mass_kg < 0:
            raise ValueError("fat_mass_kg must be non-negative")
        if not 0 <= self.body_fat_percent <= 100:
            raise ValueError("body_fat_percent must be between 0 and 100")


@dataclass(frozen=True)
class UserProfile:
    """
    Trainee profile: the only per-user input to the engine.

    Set-like fields are normalized to frozensets so the profile is hashable
    and cannot be mutated by the caller after validation.
    """

    goal: Goal
    experience: Experience
    age: int
    sleep_quality: int = 3
    stress_level: int = 3
    training_age: float = 0.0
    available_equipment: frozenset[str] = frozenset(EQUIPMENT_KINDS)
    injury_history: frozenset[str] = frozenset()
    height_cm: float | None = None
    latest_body_composition: BodyCompositionSnapshot | None = None

    def __post_init__(self) -> None:
        """Validate profile data and normalize collections."""
        _check_choice(self.goal, GOALS, "goal")
        _check_choice(self.experience, EXPERIENCE_LEVELS, "experience")
        if self.age <= 0:
            raise ValueError("age must be positive")
        _check_rating(self.sleep_quality, "sleep_quality")
        _check_rating(self.stress_level, "stress_level")
        if self.training_age < 0:
            raise ValueError("training_age must be non-negative")
        if self.height_cm is not None and self.height_cm <= 0:
            raise ValueError("height_cm must be positive")

        equipment = frozenset(self.available_equipment)
        for kind in equipment:
            _check_choice(kind, EQUIPMENT_KINDS, "equipment")
        object.__setattr__(self, "available_equipment", equipment)
        object.__setattr__(
            self, "injury_history", frozenset(m.strip().lower() for m in self.injury_history)
        )


@dataclass(frozen=True)
class HypertrophyScore:
    """Qualitative muscle-building rating of an exercise."""

    tier: Tier
    stretch_under_load: int = 3
    resistance_profile: int = 3
    progression_ease: int = 3

    def __post_init__(self) -> None:
        _check_choice(self.tier, TIERS, "tier")
        _check_rating(self.stretch_under_load, "stretch_under_load")
        _check_rating(self.resistance_profile, "resistance_profile")
        _check_rating(self.progression_ease, "progression_ease")


@dataclass(frozen=True)
class ExerciseEntry:
    """One catalog exercise. Reference data; the engine never modifies it."""

    id: str
    name: str
    primary_muscle: str
    pattern: MovementPattern
    equipment: Equipment
    difficulty: Difficulty = "intermediate"
    secondary_muscles: tuple[str, ...] = ()
    fatigue_rating: int = 2
    hypertrophy_score: HypertrophyScore | None = None
    notes: str = ""

    def __post_init__(self) -> None:
        """Validate exercise fields."""
        if not self.id:
            raise ValueError("exercise id must be non-empty")
        _check_choice(self.pattern, MOVEMENT_PATTERNS, "pattern")
        _check_choice(self.equipment, EQUIPMENT_KINDS, "equipment")
        _check_choice(self.difficulty, DIFFICULTIES, "difficulty")
        _check_rating(self.fatigue_rating, "fatigue_rating", 1, 3)
        object.__setattr__(self, "secondary_muscles", tuple(self.secondary_muscles))

    @property
    def is_compound(self) -> bool:
        return self.pattern not in ISOLATION_PATTERNS

    @property
    def tier(self) -> str:
        return self.hypertrophy_score.tier if self.hypertrophy_score else DEFAULT_TIER


# ---------------------------------------------------------------------------
# Derived values
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RecoveryFactors:
    """Recovery-driven scaling applied to volume, frequency and deload cadence."""

    volume_multiplier: float
    frequency_multiplier: float
    deload_frequency_weeks: int
    warnings: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not 0.5 <= self.volume_multiplier <= 1.3:
            raise ValueError("volume_multiplier must be within [0.5, 1.3]")
        if not 0.7 <= self.frequency_multiplier <= 1.2:
            raise ValueError("frequency_multiplier must be within [0.7, 1.2]")
        if self.deload_frequency_weeks < 3:
            raise ValueError("deload_frequency_weeks must be at least 3")


@dataclass(frozen=True)
class FatigueBudgetConfig:
    """Per-session fatigue ceilings."""

    systemic_limit: float
    local_limit: float
    min_sfr_threshold: float
    warning_threshold: float = 0.8

    def __post_init__(self) -> None:
        if self.systemic_limit < 0 or self.local_limit < 0:
            raise ValueError("fatigue limits must be non-negative")
        if not 0 < self.warning_threshold <= 1:
            raise ValueError("warning_threshold must be within (0, 1]")


@dataclass(frozen=True)
class ExerciseFatigueProfile:
    """Fatigue cost and efficiency of one prescribed exercise."""

    systemic_cost: float
    local_cost: dict[str, float]
    stimulus_per_fatigue: float
    recovery_days: float

    def __post_init__(self) -> None:
        if self.systemic_cost < 0:
            raise ValueError("systemic_cost must be non-negative")
        if any(v < 0 for v in self.local_cost.values()):
            raise ValueError("local_cost values must be non-negative")


@dataclass(frozen=True)
class ExerciseAddResult:
    """Outcome of SessionFatigueManager.can_add_exercise."""

    allowed: bool
    efficiency: Efficiency
    reason: str | None = None
    rejection: RejectionReason | None = None


@dataclass
class SessionFatigueSummary:
    """End-of-session fatigue report."""

    total_systemic: float
    systemic_limit: float
    capacity_used_percent: int
    local_by_muscle: dict[str, float]
    average_sfr: float
    exercise_count: int
    warnings: list[str]
    recommendation: str


@dataclass(frozen=True)
class RecoveryCheck:
    """Readiness of one muscle on a given training day."""

    muscle: str
    ready: bool
    current_fatigue: float
    projected_fatigue: float
    days_until_ready: int
    recommendation: str


@dataclass(frozen=True)
class MuscleVolumeStatus:
    """Weekly sets of one muscle relative to its target band."""

    muscle: str
    sets: int
    target_min: int
    target_max: int
    status: VolumeStatus


@dataclass(frozen=True)
class RpeTarget:
    low: int
    high: int


@dataclass(frozen=True)
class WeeklyProgression:
    """Intensity/volume scaling for one mesocycle week."""

    week: int
    intensity_modifier: float
    volume_modifier: float
    rpe: RpeTarget
    focus: str
    is_deload: bool = False


@dataclass(frozen=True)
class PeriodizationPlan:
    """
    Periodization model plus week-by-week progression.

    The last progression entry is always the deload week.
    """

    model: PeriodizationModel
    training_weeks: int
    mesocycle_weeks: int
    weekly_progression: tuple[WeeklyProgression, ...]
    deload_strategy: DeloadStrategy
    deload_frequency_weeks: int

    def __post_init__(self) -> None:
        if self.mesocycle_weeks != self.training_weeks + 1:
            raise ValueError("mesocycle_weeks must equal training_weeks + 1")
        if len(self.weekly_progression) != self.mesocycle_weeks:
            raise ValueError("weekly_progression must have one entry per mesocycle week")
        if not self.weekly_progression[-1].is_deload:
            raise ValueError("the last mesocycle week must be a deload")


@dataclass(frozen=True)
class MuscleVolume:
    """Weekly set target and training frequency for one muscle."""

    muscle: str
    sets: int
    frequency: int
    lagging: bool = False


@dataclass(frozen=True)
class SplitRecommendation:
    split: SplitType
    reason: str
    alternatives: tuple[SplitType, ...] = ()


@dataclass(frozen=True)
class SessionTemplate:
    """Static day template of a split: label, focus and target muscles."""

    day: str
    focus: str
    muscles: tuple[str, ...]


@dataclass(frozen=True)
class RepRangeConfig:
    """Rep range, effort and tempo prescription for one exercise slot."""

    min_reps: int
    max_reps: int
    target_rir: int
    tempo: str
    rest_seconds: int
    notes: str = ""


# ---------------------------------------------------------------------------
# Generated program
# ---------------------------------------------------------------------------


@dataclass
class DetailedExercise:
    """A prescribed exercise inside a generated session."""

    exercise: ExerciseEntry
    target_muscle: str
    sets: int
    min_reps: int
    max_reps: int
    rir: int
    tempo: str
    rest_seconds: int
    fatigue: ExerciseFatigueProfile
    efficiency: Efficiency
    notes: str = ""
    load_guidance: str = ""


@dataclass
class DetailedSession:
    """One generated training day."""

    day: str
    name: str
    focus: str
    day_offset: int
    muscles: tuple[str, ...]
    warmup: list[str]
    exercises: list[DetailedExercise] = field(default_factory=list)
    estimated_minutes: int = 0
    fatigue_summary: SessionFatigueSummary | None = None
    day_type: DupDayType | None = None
    skipped: list[str] = field(default_factory=list)

    @property
    def total_sets(self) -> int:
        return sum(e.sets for e in self.exercises)


@dataclass
class MesocycleWeek:
    week_number: int
    focus: str
    intensity_modifier: float
    volume_modifier: float
    rpe: RpeTarget
    sessions: list[DetailedSession]
    is_deload: bool = False


@dataclass(frozen=True)
class BodyCompositionAnalysis:
    """FFMI-based read of the latest body-composition snapshot."""

    ffmi: float
    normalized_ffmi: float
    percent_of_natural_limit: float
    classification: FfmiClass
    body_fat_percent: float
    notes: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


@dataclass
class FullProgramRecommendation:
    """Complete generated program: the engine's only output record."""

    split: SplitType
    split_reason: str
    alternatives: tuple[SplitType, ...]
    weekly_schedule: tuple[str, ...]
    periodization: PeriodizationPlan
    recovery_factors: RecoveryFactors
    volume: dict[str, MuscleVolume]
    fatigue_budget: FatigueBudgetConfig
    weeks: list[MesocycleWeek]
    warnings: list[str] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    body_composition: BodyCompositionAnalysis | None = None

    @property
    def sessions(self) -> list[DetailedSession]:
        """Sessions of the first training week."""
        return self.weeks[0].sessions if self.weeks else []
