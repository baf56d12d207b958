"""Shared fixtures: a small in-memory catalog and profile helpers."""

import pytest

from meso_planner.core.catalog import InMemoryExerciseRepository
from meso_planner.core.models import ExerciseEntry, HypertrophyScore, UserProfile


def _ex(id, muscle, pattern, equipment, tier="B", difficulty="beginner", secondary=()):
    return ExerciseEntry(
        id=id,
        name=id.replace("-", " ").title(),
        primary_muscle=muscle,
        pattern=pattern,
        equipment=equipment,
        difficulty=difficulty,
        secondary_muscles=tuple(secondary),
        hypertrophy_score=HypertrophyScore(tier=tier),
    )


CATALOG = (
    _ex("bench-press", "chest", "horizontal_push", "barbell", "A", "intermediate", ("triceps", "shoulders")),
    _ex("machine-press", "chest", "horizontal_push", "machine", "A"),
    _ex("cable-fly", "chest", "isolation", "cable", "S"),
    _ex("barbell-row", "back", "horizontal_pull", "barbell", "B", "intermediate", ("biceps",)),
    _ex("lat-pulldown", "back", "vertical_pull", "cable", "A", secondary=("biceps",)),
    _ex("machine-row", "back", "horizontal_pull", "machine", "S"),
    _ex("ohp", "shoulders", "vertical_push", "barbell", "B", "intermediate", ("triceps",)),
    _ex("cable-raise", "shoulders", "shoulder_isolation", "cable", "S"),
    _ex("db-curl", "biceps", "elbow_flexion", "dumbbell", "B"),
    _ex("cable-curl", "biceps", "elbow_flexion", "cable", "A"),
    _ex("pushdown", "triceps", "elbow_extension", "cable", "A"),
    _ex("overhead-ext", "triceps", "elbow_extension", "cable", "S"),
    _ex("back-squat", "quads", "squat", "barbell", "A", "intermediate", ("glutes",)),
    _ex("hack-squat", "quads", "squat", "machine", "S", secondary=("glutes",)),
    _ex("leg-extension", "quads", "isolation", "machine", "A"),
    _ex("rdl", "hamstrings", "hip_hinge", "barbell", "A", "intermediate", ("glutes",)),
    _ex("leg-curl", "hamstrings", "knee_flexion", "machine", "S"),
    _ex("hip-thrust", "glutes", "hip_hinge", "barbell", "B", "intermediate"),
    _ex("abduction", "glutes", "isolation", "machine", "A"),
    _ex("calf-raise", "calves", "calf_raise", "machine", "A"),
    _ex("cable-crunch", "abs", "core", "cable", "A"),
    _ex("plank", "abs", "core", "bodyweight", "F"),
)


class CountingRepository(InMemoryExerciseRepository):
    """In-memory repository that counts fetch_all() calls."""

    def __init__(self, exercises):
        super().__init__(exercises)
        self.fetch_count = 0

    def fetch_all(self):
        self.fetch_count += 1
        return super().fetch_all()


@pytest.fixture
def catalog():
    return CATALOG


@pytest.fixture
def repository():
    return CountingRepository(CATALOG)


def make_profile(**overrides) -> UserProfile:
    """Intermediate 30-year-old maintaining, average sleep/stress, 2 years of training."""
    fields = dict(
        goal="maintain",
        experience="intermediate",
        age=30,
        sleep_quality=3,
        stress_level=3,
        training_age=2.0,
    )
    fields.update(overrides)
    return UserProfile(**fields)
