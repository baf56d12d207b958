"""
Exercise repository interface.

The engine only needs "fetch all exercises"; where they come from (bundled
YAML, a database, a test fixture) and how they are cached is up to the
repository implementation.  See io/catalog_loader.py for the YAML-backed one.
"""

from collections.abc import Iterable, Sequence
from typing import Protocol

from .models import ExerciseEntry


class ExerciseRepository(Protocol):
    def fetch_all(self) -> Sequence[ExerciseEntry]:
        """Return every exercise, in a stable order."""
        ...


class InMemoryExerciseRepository:
    """Repository over a fixed list of entries."""

    def __init__(self, exercises: Iterable[ExerciseEntry]):
        self._exercises = tuple(exercises)
        ids = [e.id for e in self._exercises]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Duplicate exercise ids: {duplicates}")

    def fetch_all(self) -> Sequence[ExerciseEntry]:
        return self._exercises

    def get(self, exercise_id: str) -> ExerciseEntry:
        """
        Look up an exercise by id.

        Raises:
            ValueError: If the id is unknown (message lists valid ids)
        """
        for exercise in self._exercises:
            if exercise.id == exercise_id:
                return exercise
        valid = ", ".join(sorted(e.id for e in self._exercises))
        raise ValueError(f"Unknown exercise '{exercise_id}'. Valid IDs: {valid}")

    def by_muscle(self, muscle: str) -> list[ExerciseEntry]:
        return [e for e in self._exercises if e.primary_muscle == muscle]
