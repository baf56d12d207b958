"""
YAML → ExerciseEntry loader.

Loads the exercise catalog from the bundled ``src/meso_planner/exercises/``
directory.  Each file (e.g. chest.yaml) holds an ``exercises:`` list of
entries matching the ExerciseEntry schema.

User overrides: place YAML files in ``~/.meso-planner/exercises/``.  An entry
whose ``id`` matches a bundled exercise is deep-merged over it, so only the
changed keys need to be listed; other entries are added to the catalog.

Usage:
    from meso_planner.io.catalog_loader import YamlExerciseRepository
    repo = YamlExerciseRepository()
    exercises = repo.fetch_all()
"""

from __future__ import annotations

import os
import warnings
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import yaml

from ..core.models import ExerciseEntry, HypertrophyScore

_REQUIRED_EXERCISE_FIELDS: frozenset[str] = frozenset(
    {
        "id",
        "name",
        "primary_muscle",
        "pattern",
        "equipment",
    }
)

_REQUIRED_SCORE_FIELDS: frozenset[str] = frozenset({"tier"})


def _score_from_dict(d: dict[str, Any]) -> HypertrophyScore:
    missing = _REQUIRED_SCORE_FIELDS - set(d)
    if missing:
        raise ValueError(f"HypertrophyScore missing fields: {sorted(missing)}")
    return HypertrophyScore(
        tier=str(d["tier"]),  # type: ignore[arg-type]
        stretch_under_load=int(d.get("stretch_under_load", 3)),
        resistance_profile=int(d.get("resistance_profile", 3)),
        progression_ease=int(d.get("progression_ease", 3)),
    )


def exercise_from_dict(d: dict[str, Any]) -> ExerciseEntry:
    """Convert a raw dict (from YAML) to an ExerciseEntry.

    Raises ValueError if a required field is absent or a value is invalid.
    """
    missing = _REQUIRED_EXERCISE_FIELDS - set(d)
    if missing:
        raise ValueError(f"ExerciseEntry missing fields: {sorted(missing)}")

    raw_score = d.get("hypertrophy_score")
    return ExerciseEntry(
        id=str(d["id"]),
        name=str(d["name"]),
        primary_muscle=str(d["primary_muscle"]).lower(),
        pattern=str(d["pattern"]),  # type: ignore[arg-type]
        equipment=str(d["equipment"]),  # type: ignore[arg-type]
        difficulty=str(d.get("difficulty", "intermediate")),  # type: ignore[arg-type]
        secondary_muscles=tuple(str(m).lower() for m in d.get("secondary_muscles") or ()),
        fatigue_rating=int(d.get("fatigue_rating", 2)),
        hypertrophy_score=_score_from_dict(raw_score) if raw_score else None,
        notes=str(d.get("notes", "")),
    )


def exercise_to_dict(exercise: ExerciseEntry) -> dict[str, Any]:
    d: dict[str, Any] = {
        "id": exercise.id,
        "name": exercise.name,
        "primary_muscle": exercise.primary_muscle,
        "secondary_muscles": list(exercise.secondary_muscles),
        "pattern": exercise.pattern,
        "equipment": exercise.equipment,
        "difficulty": exercise.difficulty,
        "fatigue_rating": exercise.fatigue_rating,
    }
    if exercise.hypertrophy_score is not None:
        s = exercise.hypertrophy_score
        d["hypertrophy_score"] = {
            "tier": s.tier,
            "stretch_under_load": s.stretch_under_load,
            "resistance_profile": s.resistance_profile,
            "progression_ease": s.progression_ease,
        }
    if exercise.notes:
        d["notes"] = exercise.notes
    return d


def _load_yaml_file(path: Path) -> list[dict[str, Any]]:
    """Load the ``exercises:`` list of a catalog file; warn and return [] on error."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"meso-planner: cannot read {path} ({exc})", stacklevel=3)
        return []
    if not isinstance(data, dict) or not isinstance(data.get("exercises"), list):
        warnings.warn(f"meso-planner: {path} has no 'exercises' list", stacklevel=3)
        return []
    return [e for e in data["exercises"] if isinstance(e, dict)]


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def get_bundled_exercises_dir() -> Path:
    # catalog_loader.py lives at src/meso_planner/io/catalog_loader.py
    return Path(__file__).parent.parent / "exercises"


def get_user_exercises_dir() -> Path | None:
    """Return ~/.meso-planner/exercises/ if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".meso-planner" / "exercises"
    return p if p.is_dir() else None


def load_exercises_from_yaml(
    bundled_dir: Path | None = None,
    user_dir: Path | None = None,
) -> list[ExerciseEntry]:
    """Load the catalog from YAML files.

    Files are read in sorted name order, entries in file order, so the
    resulting list is stable for a given set of files.  Invalid entries are
    skipped with a warning.

    Args:
        bundled_dir: Catalog directory (default: the bundled exercises/ dir)
        user_dir: Override directory (default: ~/.meso-planner/exercises if present)

    Returns:
        Exercises in load order, user-only entries last
    """
    if bundled_dir is None:
        bundled_dir = get_bundled_exercises_dir()
    if user_dir is None:
        user_dir = get_user_exercises_dir()

    raw: dict[str, dict[str, Any]] = {}
    for path in (sorted(bundled_dir.glob("*.yaml")) if bundled_dir.is_dir() else []):
        for entry in _load_yaml_file(path):
            if "id" in entry:
                raw[str(entry["id"])] = entry

    if user_dir is not None and user_dir.is_dir():
        for path in sorted(user_dir.glob("*.yaml")):
            for entry in _load_yaml_file(path):
                if "id" not in entry:
                    continue
                key = str(entry["id"])
                raw[key] = _deep_merge(raw[key], entry) if key in raw else entry

    exercises: list[ExerciseEntry] = []
    for key, entry in raw.items():
        try:
            exercises.append(exercise_from_dict(entry))
        except (ValueError, TypeError) as exc:
            warnings.warn(f"meso-planner: skipping exercise '{key}': {exc}", stacklevel=2)
    return exercises


class YamlExerciseRepository:
    """
    Exercise repository backed by the YAML catalog.

    The catalog is read on the first fetch_all() and cached for the life of
    the repository; create a new repository to pick up file changes.
    """

    def __init__(self, bundled_dir: Path | None = None, user_dir: Path | None = None):
        self.bundled_dir = bundled_dir
        self.user_dir = user_dir
        self._cache: tuple[ExerciseEntry, ...] | None = None

    def fetch_all(self) -> Sequence[ExerciseEntry]:
        if self._cache is None:
            self._cache = tuple(load_exercises_from_yaml(self.bundled_dir, self.user_dir))
        return self._cache

    def get(self, exercise_id: str) -> ExerciseEntry:
        """
        Look up an exercise by id.

        Raises:
            ValueError: If the id is unknown (message lists valid ids)
        """
        for exercise in self.fetch_all():
            if exercise.id == exercise_id:
                return exercise
        valid = ", ".join(sorted(e.id for e in self.fetch_all()))
        raise ValueError(f"Unknown exercise '{exercise_id}'. Valid IDs: {valid}")
