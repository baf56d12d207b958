"""
Tests for the io layer: YAML exercise catalog, CLI config file and
profile/program serialization.
"""

import json

import pytest

from meso_planner.core.config import TRACKED_MUSCLES
from meso_planner.core.mesocycle import generate_full_mesocycle
from meso_planner.io.catalog_loader import (
    YamlExerciseRepository,
    exercise_from_dict,
    exercise_to_dict,
    load_exercises_from_yaml,
)
from meso_planner.io.config_loader import DEFAULT_CLI_CONFIG, load_cli_config
from meso_planner.io.serializers import (
    ValidationError,
    dict_to_user_profile,
    load_profile,
    program_to_dict,
    save_profile,
    user_profile_to_dict,
)

from conftest import CountingRepository, CATALOG, make_profile


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def no_user_dir(tmp_path):
    return tmp_path / "no-user-overrides"


# ===========================================================================
# Bundled catalog
# ===========================================================================

class TestBundledCatalog:

    def test_loads_every_file(self, no_user_dir):
        exercises = load_exercises_from_yaml(user_dir=no_user_dir)
        ids = [e.id for e in exercises]
        assert len(ids) == 51
        assert len(set(ids)) == len(ids)
        # files are read in name order: arms.yaml first
        assert ids[0] == "barbell-curl"

    def test_every_muscle_has_a_top_tier_and_a_beginner_option(self, no_user_dir):
        exercises = load_exercises_from_yaml(user_dir=no_user_dir)
        for muscle in TRACKED_MUSCLES:
            options = [e for e in exercises if e.primary_muscle == muscle]
            assert any(e.tier in ("S", "A") for e in options), muscle
            assert any(e.difficulty == "beginner" for e in options), muscle

    def test_repository_caches(self, no_user_dir):
        repo = YamlExerciseRepository(user_dir=no_user_dir)
        assert repo.fetch_all() is repo.fetch_all()
        assert repo.get("cable-fly").tier == "S"

    def test_unknown_id_lists_valid_ids(self, no_user_dir):
        with pytest.raises(ValueError, match="Valid IDs:"):
            YamlExerciseRepository(user_dir=no_user_dir).get("smith-press")


# ===========================================================================
# Catalog files and user overrides
# ===========================================================================

CUSTOM = """\
exercises:
  - id: pec-deck
    name: Pec Deck
    primary_muscle: Chest
    pattern: isolation
    equipment: machine
    hypertrophy_score: {tier: A, stretch_under_load: 4}
  - id: broken
    name: Broken
    primary_muscle: chest
    pattern: isolation
    equipment: smith
"""


class TestCatalogFiles:

    def test_defaults_and_normalization(self, tmp_path, no_user_dir):
        _write(tmp_path / "cat" / "chest.yaml", CUSTOM)
        with pytest.warns(UserWarning, match="skipping exercise 'broken'"):
            exercises = load_exercises_from_yaml(tmp_path / "cat", no_user_dir)
        assert [e.id for e in exercises] == ["pec-deck"]
        pec = exercises[0]
        assert pec.primary_muscle == "chest"
        assert pec.difficulty == "intermediate"
        assert pec.hypertrophy_score.stretch_under_load == 4
        assert pec.hypertrophy_score.progression_ease == 3

    def test_user_override_is_deep_merged(self, tmp_path):
        user = tmp_path / "user"
        _write(
            user / "mine.yaml",
            "exercises:\n"
            "  - id: cable-fly\n"
            "    hypertrophy_score: {tier: B}\n"
            "  - id: band-fly\n"
            "    name: Band Fly\n"
            "    primary_muscle: chest\n"
            "    pattern: isolation\n"
            "    equipment: bodyweight\n",
        )
        exercises = load_exercises_from_yaml(user_dir=user)
        by_id = {e.id: e for e in exercises}
        fly = by_id["cable-fly"]
        assert fly.tier == "B"
        assert fly.hypertrophy_score.stretch_under_load == 5  # kept from the bundled entry
        assert fly.name == "Cable Fly"
        assert exercises[-1].id == "band-fly"

    def test_unparseable_file_is_skipped(self, tmp_path, no_user_dir):
        _write(tmp_path / "cat" / "a.yaml", "exercises: [\n")
        with pytest.warns(UserWarning, match="cannot read"):
            assert load_exercises_from_yaml(tmp_path / "cat", no_user_dir) == []

    def test_file_without_exercise_list(self, tmp_path, no_user_dir):
        _write(tmp_path / "cat" / "a.yaml", "moves: []\n")
        with pytest.warns(UserWarning, match="no 'exercises' list"):
            assert load_exercises_from_yaml(tmp_path / "cat", no_user_dir) == []

    def test_missing_required_field(self):
        with pytest.raises(ValueError, match="missing fields"):
            exercise_from_dict({"id": "x", "name": "X"})

    def test_exercise_dict_round_trip(self):
        entry = CATALOG[0]
        assert exercise_from_dict(exercise_to_dict(entry)) == entry


# ===========================================================================
# CLI config file
# ===========================================================================

class TestCliConfig:

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert load_cli_config() == DEFAULT_CLI_CONFIG

    def test_user_values_merge_over_defaults(self, tmp_path):
        path = _write(tmp_path / "config.yaml", "days_per_week: 5\nlagging_areas: [arms]\n")
        cfg = load_cli_config(path)
        assert cfg["days_per_week"] == 5
        assert cfg["lagging_areas"] == ["arms"]
        assert cfg["session_minutes"] == 60

    def test_picks_up_home_config(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        _write(tmp_path / ".meso-planner" / "config.yaml", "session_minutes: 45\n")
        assert load_cli_config()["session_minutes"] == 45

    def test_unknown_keys_warned_and_dropped(self, tmp_path):
        path = _write(tmp_path / "config.yaml", "days_per_week: 3\ncolour: blue\n")
        with pytest.warns(UserWarning, match="unknown config keys"):
            cfg = load_cli_config(path)
        assert "colour" not in cfg
        assert cfg["days_per_week"] == 3

    def test_broken_file_falls_back(self, tmp_path):
        path = _write(tmp_path / "config.yaml", "days_per_week: [\n")
        with pytest.warns(UserWarning):
            assert load_cli_config(path) == DEFAULT_CLI_CONFIG

    def test_non_mapping_falls_back(self, tmp_path):
        path = _write(tmp_path / "config.yaml", "- 1\n- 2\n")
        with pytest.warns(UserWarning, match="expected a mapping"):
            assert load_cli_config(path) == DEFAULT_CLI_CONFIG

    def test_defaults_not_mutated(self, tmp_path):
        path = _write(tmp_path / "config.yaml", "lagging_areas: [legs]\n")
        load_cli_config(path)
        assert DEFAULT_CLI_CONFIG["lagging_areas"] == []


# ===========================================================================
# Profiles
# ===========================================================================

class TestProfileSerialization:

    def test_minimal_dict(self):
        profile = dict_to_user_profile({"goal": "cut", "experience": "novice", "age": 41})
        assert profile.sleep_quality == 3
        assert profile.training_age == 0.0
        assert profile.height_cm is None

    @pytest.mark.parametrize(
        "patch",
        [
            {"goal": "shred"},
            {"experience": None},
            {"age": 0},
            {"age": True},
            {"sleep_quality": 6},
            {"stress_level": 2.5},
            {"training_age": -2},
            {"available_equipment": ["barbell", "smith"]},
            {"height_cm": 0},
            {"latest_body_composition": {"weight_kg": 80, "lean_mass_kg": 60, "body_fat_percent": 150}},
        ],
    )
    def test_invalid_fields(self, patch):
        data = {"goal": "bulk", "experience": "advanced", "age": 30, **patch}
        with pytest.raises(ValidationError):
            dict_to_user_profile(data)

    def test_not_a_mapping(self):
        with pytest.raises(ValidationError):
            dict_to_user_profile(["bulk"])

    def test_dict_is_sorted_and_round_trips(self):
        profile = make_profile(injury_history=frozenset({"knees", "elbows"}), height_cm=175.0)
        d = user_profile_to_dict(profile)
        assert d["injury_history"] == ["elbows", "knees"]
        assert d["available_equipment"] == sorted(d["available_equipment"])
        assert dict_to_user_profile(d) == profile

    def test_save_and_load_json(self, tmp_path):
        profile = make_profile(goal="bulk")
        path = save_profile(profile, tmp_path / "nested" / "profile.json")
        assert path.exists()
        assert load_profile(path) == profile

    def test_load_yaml(self, tmp_path):
        path = _write(
            tmp_path / "me.yaml",
            "goal: maintain\nexperience: intermediate\nage: 35\ninjury_history: [Shoulders]\n",
        )
        assert load_profile(path).injury_history == frozenset({"shoulders"})

    def test_unparseable_profile(self, tmp_path):
        path = _write(tmp_path / "p.json", "{not json")
        with pytest.raises(ValidationError, match="Cannot parse"):
            load_profile(path)

    def test_missing_profile(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_profile(tmp_path / "absent.json")


# ===========================================================================
# Program output
# ===========================================================================

class TestProgramToDict:

    def test_json_serializable(self):
        program = generate_full_mesocycle(make_profile(goal="bulk"), CountingRepository(CATALOG))
        d = program_to_dict(program)
        text = json.dumps(d)
        assert json.loads(text) == d

    def test_shape(self):
        program = generate_full_mesocycle(make_profile(), CountingRepository(CATALOG))
        d = program_to_dict(program)
        assert d["split"] == "Upper/Lower"
        assert len(d["weeks"]) == d["periodization"]["mesocycle_weeks"]
        assert d["weeks"][-1]["is_deload"] is True
        first = d["weeks"][0]["sessions"][0]["exercises"][0]
        assert set(first) >= {"exercise_id", "sets", "reps", "rir", "tempo", "rest_seconds", "sfr"}
        assert len(first["reps"]) == 2
        assert "body_composition" not in d
