"""
End-to-end tests for generate_full_mesocycle: whole programs generated from
a profile and a catalog, checked against the properties every program must
hold.
"""

import pytest

from meso_planner.core.config import TOP_TIERS
from meso_planner.core.mesocycle import generate_full_mesocycle
from meso_planner.core.models import BodyCompositionSnapshot
from meso_planner.io.catalog_loader import YamlExerciseRepository
from meso_planner.io.serializers import program_to_dict

from conftest import CATALOG, CountingRepository, make_profile


def _all_sessions(program):
    return [s for w in program.weeks for s in w.sessions]


def _training_sessions(program):
    return [s for w in program.weeks if not w.is_deload for s in w.sessions]


# ===========================================================================
# Structure
# ===========================================================================

class TestProgramStructure:

    def test_baseline_profile(self, repository):
        # deload cadence 5 → 5 training weeks + deload
        program = generate_full_mesocycle(make_profile(), repository)
        assert program.split == "Upper/Lower"
        assert program.periodization.model == "weekly_undulating"
        assert len(program.weeks) == 6
        assert [w.week_number for w in program.weeks] == [1, 2, 3, 4, 5, 6]
        assert program.weekly_schedule == ("Mon", "Tue", "Thu", "Fri")

    def test_last_week_is_the_only_deload(self, repository):
        program = generate_full_mesocycle(make_profile(), repository)
        assert program.weeks[-1].is_deload
        assert not any(w.is_deload for w in program.weeks[:-1])
        assert program.weeks[-1].volume_modifier == 0.5

    def test_one_session_per_training_day(self, repository):
        program = generate_full_mesocycle(make_profile(), repository, days_per_week=3)
        for week in program.weeks:
            assert [s.day for s in week.sessions] == ["Mon", "Wed", "Fri"]
            assert [s.day_offset for s in week.sessions] == [0, 2, 4]

    def test_sessions_property_is_first_week(self, repository):
        program = generate_full_mesocycle(make_profile(), repository)
        assert program.sessions is program.weeks[0].sessions

    def test_sessions_have_exercises_and_warmup(self, repository):
        program = generate_full_mesocycle(make_profile(), repository)
        for session in _all_sessions(program):
            assert session.exercises
            assert session.warmup
            assert session.estimated_minutes > 0
            assert session.fatigue_summary is not None

    def test_deload_week_is_lighter(self, repository):
        program = generate_full_mesocycle(make_profile(), repository)
        first = sum(s.total_sets for s in program.weeks[0].sessions)
        deload = sum(s.total_sets for s in program.weeks[-1].sessions)
        assert deload < first

    def test_recovery_limited_profile_shortens_mesocycle(self, repository):
        # deload cadence 3 → 3 training weeks + deload
        profile = make_profile(age=60, sleep_quality=1, stress_level=5, training_age=3)
        program = generate_full_mesocycle(profile, repository)
        assert len(program.weeks) == 4
        assert program.warnings[:3] == list(program.recovery_factors.warnings)


# ===========================================================================
# Invariants every generated program holds
# ===========================================================================

PROFILES = [
    make_profile(),
    make_profile(goal="bulk"),
    make_profile(goal="cut", experience="novice", training_age=0.5),
    make_profile(experience="advanced", training_age=6.0, age=48),
    make_profile(age=62, sleep_quality=2, stress_level=4, goal="cut"),
]


class TestProgramInvariants:

    @pytest.mark.parametrize("profile", PROFILES)
    @pytest.mark.parametrize("days", [2, 3, 4, 5, 6])
    def test_invariants(self, profile, days):
        program = generate_full_mesocycle(profile, CountingRepository(CATALOG), days_per_week=days)
        assert len(program.weeks) == program.periodization.mesocycle_weeks
        assert program.weeks[-1].is_deload
        for session in _all_sessions(program):
            summary = session.fatigue_summary
            assert summary.total_systemic <= summary.systemic_limit
            assert summary.systemic_limit <= program.fatigue_budget.systemic_limit
            for item in session.exercises:
                assert 0 <= item.rir <= 4
                assert item.sets >= 1
                assert 1 <= item.min_reps <= item.max_reps
                assert item.exercise.primary_muscle == item.target_muscle

    def test_deload_budget_is_halved(self, repository):
        program = generate_full_mesocycle(make_profile(), repository)
        # 97 × 0.5 = 48.5 → 49
        for session in program.weeks[-1].sessions:
            assert session.fatigue_summary.systemic_limit == 49

    def test_repository_fetched_once(self, repository):
        generate_full_mesocycle(make_profile(), repository, days_per_week=6)
        assert repository.fetch_count == 1

    def test_deterministic(self):
        profile = make_profile(goal="bulk", injury_history=frozenset({"abs"}))
        a = generate_full_mesocycle(profile, CountingRepository(CATALOG), 5, 50, ["arms"])
        b = generate_full_mesocycle(profile, CountingRepository(CATALOG), 5, 50, ["arms"])
        assert program_to_dict(a) == program_to_dict(b)


# ===========================================================================
# Modes and options
# ===========================================================================

class TestModesAndOptions:

    def test_daily_undulating_rotation(self, repository):
        program = generate_full_mesocycle(make_profile(goal="bulk"), repository)
        assert program.periodization.model == "daily_undulating"
        week1 = program.weeks[0].sessions
        assert [s.day_type for s in week1] == ["hypertrophy", "strength", "power", "hypertrophy"]
        assert week1[1].focus.endswith("STRENGTH Day")
        assert all(s.day_type is None for s in program.weeks[-1].sessions)

    def test_strength_day_prescription(self, repository):
        program = generate_full_mesocycle(make_profile(goal="bulk"), repository)
        strength = program.weeks[0].sessions[1]
        for item in strength.exercises:
            assert item.rest_seconds in (120, 180)
            assert item.max_reps <= 8

    def test_quick_session_mode(self, repository):
        program = generate_full_mesocycle(make_profile(), repository, session_minutes=20)
        assert program.fatigue_budget.systemic_limit == 49
        assert any(n.startswith("Quick session mode (20 min)") for n in program.notes)
        for session in _training_sessions(program):
            for item in session.exercises:
                assert item.exercise.tier in TOP_TIERS

    def test_short_session_mode(self, repository):
        # factor 35/60 = 0.583
        program = generate_full_mesocycle(make_profile(), repository, session_minutes=35)
        assert any("scaled to 58%" in n for n in program.notes)
        assert program.volume["chest"].sets == 8  # 14 × 0.583 = 8.17

    def test_split_override(self, repository):
        program = generate_full_mesocycle(make_profile(), repository, split="PPL")
        assert program.split == "PPL"
        assert program.split_reason == "Chosen over the recommended Upper/Lower"
        assert program.alternatives == ("Upper/Lower",)

    def test_override_matching_recommendation_keeps_reason(self, repository):
        program = generate_full_mesocycle(make_profile(), repository, split="Upper/Lower")
        assert program.split_reason.startswith("Upper/lower is the most time-efficient")

    def test_lagging_areas(self, repository):
        program = generate_full_mesocycle(make_profile(), repository, lagging_areas=["Left Arm"])
        assert program.volume["biceps"].lagging
        assert program.volume["triceps"].lagging
        assert "Extra volume (+15%) for lagging areas: biceps, triceps" in program.notes

    def test_injured_muscle_never_trained(self, repository):
        profile = make_profile(injury_history=frozenset({"triceps"}))
        program = generate_full_mesocycle(profile, repository)
        for session in _all_sessions(program):
            for item in session.exercises:
                assert item.target_muscle != "triceps"
                assert "triceps" not in item.exercise.secondary_muscles

    def test_injured_muscle_reported_as_skipped(self, repository):
        # Bro Split "Arms" day: biceps then triceps, well within the time budget
        profile = make_profile(injury_history=frozenset({"triceps"}))
        program = generate_full_mesocycle(profile, repository, days_per_week=5, split="Bro Split")
        arms = program.weeks[0].sessions[3]
        assert arms.name == "Arms"
        assert arms.skipped == ["triceps: skipped due to injury history"]

    def test_missing_equipment_warning(self, repository):
        profile = make_profile(available_equipment=frozenset({"dumbbell"}))
        program = generate_full_mesocycle(profile, repository)
        assert any(w.startswith("Some exercises require equipment you may not have") for w in program.warnings)

    def test_body_composition_notes(self, repository):
        scan = BodyCompositionSnapshot("2026-03-01", 80.0, 68.0, 12.0, 15.0)
        profile = make_profile(height_cm=180, latest_body_composition=scan)
        program = generate_full_mesocycle(profile, repository)
        assert program.body_composition is not None
        assert any(n.startswith("FFMI 21.0") for n in program.notes)

    def test_notes_describe_plan(self, repository):
        program = generate_full_mesocycle(make_profile(), repository)
        assert program.notes[0].startswith("Split: Upper/Lower")
        assert "Periodization: Weekly undulating (WUP)" in program.notes
        assert "Mesocycle length: 6 weeks (5 training + 1 deload)" in program.notes
        assert "Deload strategy: proactive - scheduled every 5 weeks" in program.notes

    def test_empty_catalog_warns_per_session(self):
        program = generate_full_mesocycle(make_profile(), CountingRepository(()))
        assert all(not s.exercises for s in _all_sessions(program))
        assert sum(w.startswith("No exercises could be scheduled") for w in program.warnings) == 4


class TestCallerErrors:

    @pytest.mark.parametrize(
        "kwargs",
        [{"days_per_week": 7}, {"days_per_week": 1}, {"session_minutes": 0}, {"split": "Bro"}],
    )
    def test_rejected(self, repository, kwargs):
        with pytest.raises(ValueError):
            generate_full_mesocycle(make_profile(), repository, **kwargs)


# ===========================================================================
# Bundled YAML catalog
# ===========================================================================

class TestBundledCatalog:

    def test_program_from_bundled_catalog(self, tmp_path):
        repo = YamlExerciseRepository(user_dir=tmp_path / "no-overrides")
        program = generate_full_mesocycle(make_profile(goal="bulk"), repo, days_per_week=5)
        assert program.split == "Arnold"
        for session in _training_sessions(program):
            assert session.exercises
            assert session.fatigue_summary.total_systemic <= session.fatigue_summary.systemic_limit

    def test_novice_on_bundled_catalog(self, tmp_path):
        repo = YamlExerciseRepository(user_dir=tmp_path / "no-overrides")
        profile = make_profile(experience="novice", training_age=0.0, goal="cut")
        program = generate_full_mesocycle(profile, repo, days_per_week=3)
        assert program.split == "Full Body"
        assert program.periodization.model == "linear"
        assert len(program.weeks) == 9
