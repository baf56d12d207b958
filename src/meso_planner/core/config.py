"""
Configuration constants for the mesocycle engine.

All lookup tables and tunable parameters are centralized here.  Tables keyed
by one of the Literal types in models.py cover every member of that type;
tests/test_core_formulas.py checks this.
"""

from dataclasses import dataclass
from typing import Final

# =============================================================================
# MUSCLES
# =============================================================================

# Order in which muscles are trained inside a session (larger / compound first)
MUSCLE_TRAINING_ORDER: Final[tuple[str, ...]] = (
    "quads",
    "hamstrings",
    "glutes",
    "back",
    "chest",
    "shoulders",
    "biceps",
    "triceps",
    "calves",
    "abs",
)

TRACKED_MUSCLES: Final[tuple[str, ...]] = (
    "chest",
    "back",
    "shoulders",
    "biceps",
    "triceps",
    "quads",
    "hamstrings",
    "glutes",
    "calves",
    "abs",
)

LOWER_BODY_MUSCLES: Final[frozenset[str]] = frozenset({"quads", "hamstrings", "glutes", "calves"})
UPPER_BODY_MUSCLES: Final[frozenset[str]] = frozenset({"chest", "back", "shoulders", "biceps", "triceps"})

# =============================================================================
# FIBER / SFR TABLES
# =============================================================================

# Fiber-type dominance; muscles not listed are "mixed"
MUSCLE_FIBER_PROFILE: Final[dict[str, str]] = {
    "triceps": "fast",
    "hamstrings": "fast",
    "calves": "slow",
    "abs": "slow",
}

# Systemic fatigue per movement pattern (arbitrary units per "unit" of volume)
SYSTEMIC_FATIGUE_BY_PATTERN: Final[dict[str, float]] = {
    "squat": 25,
    "hip_hinge": 30,
    "horizontal_push": 12,
    "horizontal_pull": 10,
    "vertical_push": 10,
    "vertical_pull": 8,
    "lunge": 15,
    "knee_flexion": 5,
    "elbow_flexion": 3,
    "elbow_extension": 3,
    "shoulder_isolation": 4,
    "calf_raise": 4,
    "core": 5,
    "isolation": 3,
    "carry": 12,
}
DEFAULT_PATTERN_FATIGUE: Final[float] = 5

# Free weights demand more stabilization than machines
EQUIPMENT_FATIGUE_MODIFIER: Final[dict[str, float]] = {
    "barbell": 1.3,
    "dumbbell": 1.1,
    "kettlebell": 1.15,
    "cable": 0.8,
    "machine": 0.6,
    "bodyweight": 1.0,
}

# Baseline stimulus-to-fatigue ratio per pattern and equipment
BASE_SFR: Final[dict[str, dict[str, float]]] = {
    "squat": {"barbell": 0.7, "dumbbell": 0.8, "machine": 1.2, "cable": 0.9, "bodyweight": 0.6, "kettlebell": 0.75},
    "hip_hinge": {"barbell": 0.5, "dumbbell": 0.7, "machine": 1.0, "cable": 1.1, "bodyweight": 0.5, "kettlebell": 0.8},
    "horizontal_push": {"barbell": 0.8, "dumbbell": 0.9, "machine": 1.3, "cable": 1.1, "bodyweight": 0.7, "kettlebell": 0.7},
    "horizontal_pull": {"barbell": 0.7, "dumbbell": 0.9, "machine": 1.2, "cable": 1.2, "bodyweight": 0.8, "kettlebell": 0.7},
    "vertical_push": {"barbell": 0.8, "dumbbell": 0.9, "machine": 1.2, "cable": 1.0, "bodyweight": 0.6, "kettlebell": 0.7},
    "vertical_pull": {"barbell": 0.7, "dumbbell": 0.8, "machine": 1.1, "cable": 1.3, "bodyweight": 0.9, "kettlebell": 0.6},
    "lunge": {"barbell": 0.7, "dumbbell": 0.9, "machine": 1.0, "cable": 0.8, "bodyweight": 0.8, "kettlebell": 0.85},
    "knee_flexion": {"barbell": 0.8, "dumbbell": 0.9, "machine": 1.4, "cable": 1.2, "bodyweight": 0.7, "kettlebell": 0.7},
    "elbow_flexion": {"barbell": 0.9, "dumbbell": 1.0, "machine": 1.3, "cable": 1.5, "bodyweight": 0.8, "kettlebell": 0.8},
    "elbow_extension": {"barbell": 0.9, "dumbbell": 1.0, "machine": 1.3, "cable": 1.5, "bodyweight": 0.8, "kettlebell": 0.8},
    "shoulder_isolation": {"barbell": 0.8, "dumbbell": 1.0, "machine": 1.2, "cable": 1.4, "bodyweight": 0.7, "kettlebell": 0.8},
    "calf_raise": {"barbell": 0.8, "dumbbell": 0.9, "machine": 1.4, "cable": 1.0, "bodyweight": 0.7, "kettlebell": 0.7},
    "core": {"barbell": 0.7, "dumbbell": 0.8, "machine": 1.2, "cable": 1.3, "bodyweight": 1.0, "kettlebell": 0.9},
    "isolation": {"barbell": 0.9, "dumbbell": 1.0, "machine": 1.4, "cable": 1.5, "bodyweight": 0.8, "kettlebell": 0.8},
    "carry": {"barbell": 0.6, "dumbbell": 1.0, "machine": 0.5, "cable": 0.5, "bodyweight": 0.7, "kettlebell": 1.1},
}
DEFAULT_BASE_SFR: Final[float] = 1.0

ISOLATION_PATTERNS: Final[frozenset[str]] = frozenset(
    {
        "isolation",
        "knee_flexion",
        "elbow_flexion",
        "elbow_extension",
        "shoulder_isolation",
        "calf_raise",
        "core",
    }
)

HEAVY_RECOVERY_PATTERNS: Final[frozenset[str]] = frozenset({"squat", "hip_hinge"})

# =============================================================================
# EXERCISE FATIGUE FORMULA
# =============================================================================

VOLUME_FACTOR_SCALE: Final[float] = 0.15  # sets*(1+(sets-1)*0.1)*0.15
VOLUME_FACTOR_GROWTH: Final[float] = 0.1
INTENSITY_FACTOR_PER_RIR: Final[float] = 0.15  # 1+(3-RIR)*0.15
POSITION_FATIGUE_PENALTY: Final[float] = 0.05  # per slot after the first
POSITION_SFR_DECAY: Final[float] = 0.1  # SFR loss per slot after the first
MIN_POSITION_SFR_FACTOR: Final[float] = 0.5
LOW_REP_THRESHOLD: Final[int] = 5
LOW_REP_MODIFIER: Final[float] = 1.2
HIGH_REP_THRESHOLD: Final[int] = 15
HIGH_REP_MODIFIER: Final[float] = 0.9
LOCAL_COST_PRIMARY: Final[float] = 8  # per set
LOCAL_COST_SECONDARY: Final[float] = 4  # per set
BASE_RECOVERY_DAYS: Final[float] = 2.0

# =============================================================================
# FATIGUE BUDGET
# =============================================================================

BASE_SYSTEMIC_LIMIT: Final[float] = 100
BASE_LOCAL_LIMIT: Final[float] = 80
BASE_MIN_SFR: Final[float] = 0.6
WARNING_THRESHOLD: Final[float] = 0.8

# (min age, systemic mult, local mult, min SFR); checked top to bottom
AGE_BUDGET_ADJUSTMENTS: Final[tuple[tuple[int, float, float, float], ...]] = (
    (55, 0.7, 0.8, 0.8),
    (45, 0.85, 0.9, 0.7),
)

# experience -> (systemic mult, local mult, min SFR or None to keep)
EXPERIENCE_BUDGET_ADJUSTMENTS: Final[dict[str, tuple[float, float, float | None]]] = {
    "novice": (0.75, 0.8, 0.8),
    "intermediate": (1.0, 1.0, None),
    "advanced": (1.15, 1.1, 0.5),
}

CUT_SYSTEMIC_MULTIPLIER: Final[float] = 0.85
CUT_LOCAL_MULTIPLIER: Final[float] = 0.9

SFR_OPTIMAL: Final[float] = 1.0
SFR_ACCEPTABLE: Final[float] = 0.8

# Session summary bands: (upper bound of % capacity used, recommendation)
CAPACITY_BANDS: Final[tuple[tuple[float, str], ...]] = (
    (60, "Session may be too light - consider adding volume or intensity"),
    (80, "Good session intensity - sustainable long-term"),
    (95, "High intensity session - ensure adequate recovery"),
)
CAPACITY_MAX_RECOMMENDATION: Final[str] = "Maximum intensity reached - do not exceed, prioritize recovery"

# =============================================================================
# WEEKLY FATIGUE TRACKER
# =============================================================================

BASE_RECOVERY_RATE: Final[float] = 30  # fatigue units per day
RECOVERY_READY_THRESHOLD: Final[float] = 25
FULLY_RECOVERED_DAY: Final[int] = -7
FIBER_RECOVERY_MODIFIER: Final[dict[str, float]] = {"fast": 0.9, "mixed": 1.0, "slow": 1.1}

# (upper bound on residual fatigue, recommendation); 0 handled separately
RECOVERY_BANDS: Final[tuple[tuple[float, str], ...]] = (
    (15, "Well recovered - normal training"),
    (30, "Moderate residual fatigue - consider reducing intensity"),
    (50, "High residual fatigue - reduce volume significantly or skip"),
)
FULLY_RECOVERED_RECOMMENDATION: Final[str] = "Fully recovered - can train at full intensity"
NOT_RECOVERED_RECOMMENDATION: Final[str] = "Not recovered - skip this muscle today"

SMALL_MUSCLES: Final[frozenset[str]] = frozenset({"biceps", "triceps", "calves", "abs"})
WEEKLY_SETS_SMALL: Final[tuple[int, int]] = (8, 14)
WEEKLY_SETS_LARGE: Final[tuple[int, int]] = (10, 20)

# =============================================================================
# RECOVERY FACTORS
# =============================================================================

BASE_DELOAD_WEEKS: Final[int] = 5
MIN_DELOAD_WEEKS: Final[int] = 3
NOVICE_TRAINING_AGE_DELOAD_WEEKS: Final[int] = 8
VOLUME_MULTIPLIER_BOUNDS: Final[tuple[float, float]] = (0.5, 1.3)
FREQUENCY_MULTIPLIER_BOUNDS: Final[tuple[float, float]] = (0.7, 1.2)

# (upper age bound exclusive, volume, frequency, deload weeks or None, warning or None)
AGE_RECOVERY_BANDS: Final[tuple[tuple[float, float, float, int | None, str | None], ...]] = (
    (25, 1.05, 1.05, 6, None),
    (35, 1.0, 1.0, None, None),
    (45, 0.95, 1.0, 5, None),
    (55, 0.85, 0.95, 4, "Consider extra warm-up sets and joint-friendly exercise variations."),
    (float("inf"), 0.75, 0.90, 3, "Prioritize recovery. Consider 2-on-1-off training schedules."),
)

SLEEP_VOLUME_MULTIPLIER: Final[dict[int, float]] = {1: 0.70, 2: 0.85, 3: 1.0, 4: 1.05, 5: 1.10}
SLEEP_FREQUENCY_MULTIPLIER: Final[dict[int, float]] = {1: 0.90, 2: 0.95, 3: 1.0, 4: 1.0, 5: 1.05}
POOR_SLEEP_THRESHOLD: Final[int] = 2
POOR_SLEEP_WARNING: Final[str] = "Sleep quality is limiting recovery. Fix this before adding volume."

STRESS_VOLUME_MULTIPLIER: Final[dict[int, float]] = {1: 1.10, 2: 1.05, 3: 1.0, 4: 0.90, 5: 0.75}
STRESS_FREQUENCY_MULTIPLIER: Final[dict[int, float]] = {1: 1.05, 2: 1.0, 3: 1.0, 4: 0.95, 5: 0.90}
HIGH_STRESS_THRESHOLD: Final[int] = 4
HIGH_STRESS_WARNING: Final[str] = (
    "High life stress impairs recovery. Training should be a release, not another stressor."
)

BEGINNER_TRAINING_AGE: Final[float] = 1.0
BEGINNER_VOLUME_MULTIPLIER: Final[float] = 0.8
VETERAN_TRAINING_AGE: Final[float] = 5.0

# =============================================================================
# PERIODIZATION
# =============================================================================

DELOAD_INTENSITY: Final[float] = 0.6
DELOAD_VOLUME: Final[float] = 0.5
DELOAD_RPE: Final[tuple[int, int]] = (5, 6)
DELOAD_FOCUS: Final[str] = "DELOAD: Recovery and adaptation. Same exercises, 50% volume, light loads."

BLOCK_HYPERTROPHY_SHARE: Final[float] = 0.5
BLOCK_STRENGTH_SHARE: Final[float] = 0.35

# =============================================================================
# VOLUME
# =============================================================================

# Weekly hard sets: (novice, intermediate, advanced)
BASE_WEEKLY_SETS: Final[dict[str, tuple[int, int, int]]] = {
    "chest": (10, 14, 18),
    "back": (12, 16, 20),
    "shoulders": (10, 14, 18),
    "biceps": (8, 12, 16),
    "triceps": (8, 12, 16),
    "quads": (10, 14, 18),
    "hamstrings": (8, 12, 14),
    "glutes": (8, 12, 16),
    "calves": (10, 14, 18),
    "abs": (8, 12, 16),
}
DEFAULT_WEEKLY_SETS: Final[int] = 12

GOAL_VOLUME_MULTIPLIER: Final[dict[str, float]] = {"cut": 0.7, "bulk": 1.1, "maintain": 1.0}
LAGGING_VOLUME_BOOST: Final[float] = 1.15

LAGGING_AREA_MUSCLES: Final[dict[str, tuple[str, ...]]] = {
    "arms": ("biceps", "triceps"),
    "legs": ("quads", "hamstrings", "glutes", "calves"),
    "trunk": ("chest", "back", "shoulders", "abs"),
}

# Full Body hits the big movers up to 3x/week, everything else up to 2x
FULL_BODY_HIGH_FREQUENCY_MUSCLES: Final[frozenset[str]] = frozenset({"chest", "back", "shoulders", "quads"})
FIXED_SPLIT_FREQUENCY: Final[dict[str, int]] = {
    "Upper/Lower": 2,
    "Arnold": 2,
    "Bro Split": 1,
}

# =============================================================================
# SESSION PRESCRIPTION
# =============================================================================

# goal -> (compound rest s, isolation rest s)
REST_PERIODS: Final[dict[str, tuple[int, int]]] = {
    "cut": (120, 60),
    "bulk": (180, 90),
    "maintain": (150, 75),
}

COMPOUND_SET_SECONDS: Final[int] = 50
ISOLATION_SET_SECONDS: Final[int] = 35
WARMUP_SECONDS: Final[int] = 240
TRANSITION_SECONDS: Final[int] = 60
SESSION_OVERHEAD_MINUTES: Final[float] = 10
SET_MINUTES_ESTIMATE: Final[float] = 0.75  # minutes of work per set, rest excluded
TIME_BUDGET_SLACK_MINUTES: Final[int] = 5

QUICK_SESSION_MINUTES: Final[int] = 25
SHORT_SESSION_MINUTES: Final[int] = 45
REFERENCE_SESSION_MINUTES: Final[int] = 60
SESSION_TIME_WARNING_RATIO: Final[float] = 1.2

MAX_SETS_COMPOUND: Final[int] = 4
MAX_SETS_ISOLATION: Final[int] = 3
PROBE_SETS: Final[int] = 3
PROBE_REPS: Final[int] = 8
PROBE_RIR: Final[int] = 2

RESIDUAL_FATIGUE_SKIP: Final[float] = 50  # skip muscle when not ready and above this
LOW_SFR_WARNING: Final[float] = 0.8

TIER_ORDER: Final[tuple[str, ...]] = ("S", "A", "B", "C", "D", "F")
DEFAULT_TIER: Final[str] = "C"
TOP_TIERS: Final[frozenset[str]] = frozenset({"S", "A"})

# =============================================================================
# REP RANGES
# =============================================================================

# goal -> (compound (min, max), isolation (min, max))
BASE_REP_RANGES: Final[dict[str, tuple[tuple[int, int], tuple[int, int]]]] = {
    "cut": ((4, 6), (8, 12)),
    "bulk": ((6, 10), (10, 15)),
    "maintain": ((5, 8), (8, 12)),
}

NOVICE_MIN_REPS: Final[int] = 6
NOVICE_MAX_REPS: Final[int] = 8
REP_MIN_BOUNDS: Final[tuple[int, int]] = (1, 20)
REP_MAX_CEILING: Final[int] = 30
RIR_BOUNDS: Final[tuple[int, int]] = (0, 4)

# experience -> (starting RIR, RIR drop per unit of mesocycle progress)
RIR_PROGRESSION: Final[dict[str, tuple[int, float]]] = {
    "novice": (3, 1.5),
    "intermediate": (3, 2.0),
    "advanced": (2, 2.0),
}


@dataclass(frozen=True)
class DupDayParams:
    """Prescription for one daily-undulating day type."""

    compound_reps: tuple[int, int]
    isolation_reps: tuple[int, int]
    compound_tempo: str
    isolation_tempo: str
    compound_rest: int
    isolation_rest: int
    target_rir: int
    volume_modifier: float
    note: str


DUP_DAY_PARAMS: Final[dict[str, DupDayParams]] = {
    "hypertrophy": DupDayParams(
        compound_reps=(8, 12),
        isolation_reps=(12, 15),
        compound_tempo="3-0-1-1",
        isolation_tempo="3-1-1-0",
        compound_rest=120,
        isolation_rest=75,
        target_rir=2,
        volume_modifier=1.1,
        note="Focus on muscle contraction and time under tension",
    ),
    "strength": DupDayParams(
        compound_reps=(4, 6),
        isolation_reps=(6, 8),
        compound_tempo="2-1-1-0",
        isolation_tempo="2-1-1-0",
        compound_rest=180,
        isolation_rest=120,
        target_rir=1,
        volume_modifier=0.85,
        note="Focus on moving heavy weight with good form",
    ),
    "power": DupDayParams(
        compound_reps=(3, 5),
        isolation_reps=(6, 8),
        compound_tempo="1-0-X-0",
        isolation_tempo="1-0-X-0",
        compound_rest=180,
        isolation_rest=120,
        target_rir=2,
        volume_modifier=0.7,
        note="Focus on bar speed and explosiveness - stop if speed drops",
    ),
}

DUP_ROTATION: Final[tuple[str, ...]] = ("hypertrophy", "strength", "power")

# =============================================================================
# BODY COMPOSITION
# =============================================================================

FFMI_HEIGHT_REFERENCE_M: Final[float] = 1.8
FFMI_HEIGHT_SLOPE: Final[float] = 6.1
FFMI_NATURAL_LIMIT: Final[float] = 25.0
FFMI_NEAR_LIMIT_PERCENT: Final[float] = 90.0
BULK_BODY_FAT_CEILING: Final[float] = 20.0
CUT_BODY_FAT_FLOOR: Final[float] = 12.0

# (upper bound exclusive, class)
FFMI_CLASSES: Final[tuple[tuple[float, str], ...]] = (
    (18, "below_average"),
    (20, "average"),
    (22, "above_average"),
    (23, "excellent"),
    (25, "superior"),
)
