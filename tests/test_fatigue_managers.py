"""
Tests for the stateful fatigue helpers: SessionFatigueManager (one session)
and WeeklyFatigueTracker (one week).
"""

import pytest

from meso_planner.core.fatigue import SessionFatigueManager, WeeklyFatigueTracker
from meso_planner.core.models import ExerciseFatigueProfile, FatigueBudgetConfig

from conftest import make_profile


def _cost(systemic, local=None, sfr=1.0):
    return ExerciseFatigueProfile(
        systemic_cost=systemic,
        local_cost=local if local is not None else {"chest": 10.0},
        stimulus_per_fatigue=sfr,
        recovery_days=2.0,
    )


@pytest.fixture
def manager():
    return SessionFatigueManager(FatigueBudgetConfig(systemic_limit=100, local_limit=80, min_sfr_threshold=0.6))


# ===========================================================================
# SessionFatigueManager
# ===========================================================================

class TestSessionFatigueManager:

    def test_accepts_within_budget(self, manager):
        result = manager.can_add_exercise(_cost(60, {"chest": 30.0}))
        assert result.allowed
        assert result.efficiency == "optimal"
        assert result.rejection is None

    def test_check_does_not_mutate(self, manager):
        manager.can_add_exercise(_cost(60))
        assert manager.current_systemic == 0.0
        assert manager.exercise_count == 0

    def test_rejects_past_systemic_limit(self, manager):
        manager.add_exercise(_cost(90))
        result = manager.can_add_exercise(_cost(15))
        assert not result.allowed
        assert result.efficiency == "junk"
        assert result.rejection == "systemic_limit"
        assert "100" in result.reason

    def test_exactly_at_limit_is_allowed(self, manager):
        manager.add_exercise(_cost(90))
        assert manager.can_add_exercise(_cost(10)).allowed

    def test_rejects_past_local_limit(self, manager):
        manager.add_exercise(_cost(10, {"chest": 60.0}))
        result = manager.can_add_exercise(_cost(10, {"chest": 25.0}))
        assert result.rejection == "local_limit"
        assert "chest" in result.reason

    def test_rejects_low_sfr(self, manager):
        result = manager.can_add_exercise(_cost(10, sfr=0.5))
        assert result.rejection == "sfr_below_threshold"

    def test_rejection_order_systemic_first(self, manager):
        # breaks all three rules; systemic is reported
        result = manager.can_add_exercise(_cost(150, {"chest": 100.0}, sfr=0.1))
        assert result.rejection == "systemic_limit"

    def test_rejection_order_local_before_sfr(self, manager):
        result = manager.can_add_exercise(_cost(10, {"chest": 100.0}, sfr=0.1))
        assert result.rejection == "local_limit"

    def test_add_exercise_refuses_overflow(self, manager):
        manager.add_exercise(_cost(95))
        with pytest.raises(ValueError):
            manager.add_exercise(_cost(10))
        assert manager.current_systemic == 95

    def test_add_exercise_refuses_local_overflow(self, manager):
        with pytest.raises(ValueError):
            manager.add_exercise(_cost(10, {"back": 81.0}))

    def test_warning_recorded_once(self, manager):
        manager.add_exercise(_cost(60))
        assert manager.can_add_exercise(_cost(30)).allowed
        manager.add_exercise(_cost(30))
        assert manager.warnings == ["Approaching systemic fatigue limit (90% used)"]
        assert manager.can_add_exercise(_cost(5)).allowed
        assert len(manager.warnings) == 1

    def test_no_warning_at_threshold(self, manager):
        # 80% is not "past" 80%
        manager.add_exercise(_cost(80))
        assert manager.warnings == []

    def test_check_alone_records_no_warning(self, manager):
        # 90 would be past 80%, but nothing was added
        assert manager.can_add_exercise(_cost(90)).allowed
        summary = manager.get_session_summary()
        assert summary.capacity_used_percent == 0
        assert summary.warnings == []

    def test_warning_reflects_recorded_usage(self, manager):
        manager.add_exercise(_cost(50))
        manager.add_exercise(_cost(35))
        # 85 / 100 after the second add
        assert manager.get_session_summary().warnings == ["Approaching systemic fatigue limit (85% used)"]

    def test_running_totals_and_mean_sfr(self, manager):
        manager.add_exercise(_cost(60, {"chest": 30.0}, sfr=1.0))
        manager.add_exercise(_cost(30, {"chest": 30.0, "triceps": 15.0}, sfr=0.8))
        assert manager.current_local == {"chest": 60.0, "triceps": 15.0}
        summary = manager.get_session_summary()
        assert summary.total_systemic == 90
        assert summary.capacity_used_percent == 90
        assert summary.average_sfr == pytest.approx(0.9)
        assert summary.exercise_count == 2
        assert summary.recommendation == "High intensity session - ensure adequate recovery"

    def test_empty_session_summary(self, manager):
        summary = manager.get_session_summary()
        assert summary.capacity_used_percent == 0
        assert summary.exercise_count == 0
        assert summary.recommendation.startswith("Session may be too light")

    def test_remaining_budget(self, manager):
        manager.add_exercise(_cost(60, {"chest": 30.0}))
        systemic, local = manager.get_remaining_budget()
        assert systemic == 40
        assert local == {"chest": 50.0}

    def test_estimate_remaining_sets(self, manager):
        # one cable isolation set at RIR 2: 3 × 0.8 × 0.15 × 1.15 = 0.414
        manager.add_exercise(_cost(90))
        assert manager.estimate_remaining_sets("isolation", "cable") == 24

    def test_zero_budget_rejects_everything(self):
        m = SessionFatigueManager(FatigueBudgetConfig(0, 80, 0.6))
        assert m.can_add_exercise(_cost(0.1)).rejection == "systemic_limit"
        assert m.get_session_summary().capacity_used_percent == 0

    def test_check_then_add_never_exceeds_limit(self, manager):
        costs = [17.5, 22.0, 9.9, 31.0, 14.2, 8.8, 25.0, 3.3, 12.1, 40.0, 1.0, 6.6]
        for systemic in costs:
            profile = _cost(systemic, {"quads": 5.0})
            if manager.can_add_exercise(profile).allowed:
                manager.add_exercise(profile)
            assert manager.current_systemic <= manager.budget.systemic_limit


# ===========================================================================
# WeeklyFatigueTracker
# ===========================================================================

class TestWeeklyFatigueTracker:
    """rate = 30 × age factors × (0.7 + 0.6 × sleep/5) × fiber modifier"""

    def test_recovery_rates(self):
        # age 30, sleep 3: 30 × 1.06 = 31.8
        tracker = WeeklyFatigueTracker(make_profile())
        assert tracker.recovery_rate("chest") == pytest.approx(31.8)
        assert tracker.recovery_rate("triceps") == pytest.approx(28.62)  # fast × 0.9
        assert tracker.recovery_rate("calves") == pytest.approx(34.98)  # slow × 1.1

    def test_older_lifter_recovers_slower(self):
        # 30 × 0.85 × 0.75 × 1.3 = 24.8625
        tracker = WeeklyFatigueTracker(make_profile(age=60, sleep_quality=5))
        assert tracker.recovery_rate("chest") == pytest.approx(24.8625)

    def test_untrained_muscle_is_fully_recovered(self):
        check = WeeklyFatigueTracker(make_profile()).can_train_muscle("back", 0)
        assert check.ready
        assert check.current_fatigue == 0
        assert check.days_until_ready == 0
        assert check.recommendation == "Fully recovered - can train at full intensity"

    def test_same_day_after_heavy_session(self):
        tracker = WeeklyFatigueTracker(make_profile())
        tracker.record_training("chest", 0, 40.0, sets=6)
        check = tracker.can_train_muscle("chest", 0, planned_fatigue=10)
        assert not check.ready
        # floor((40 − 25) / 31.8) + 1 = 1
        assert check.days_until_ready == 1
        assert check.projected_fatigue == 50
        assert check.recommendation == "High residual fatigue - reduce volume significantly or skip"

    def test_linear_decay(self):
        tracker = WeeklyFatigueTracker(make_profile())
        tracker.record_training("chest", 0, 40.0)
        check = tracker.can_train_muscle("chest", 1)
        assert check.ready
        assert check.current_fatigue == pytest.approx(8.2)  # 40 − 31.8
        assert check.recommendation == "Well recovered - normal training"
        assert tracker.residual_fatigue("chest", 2) == 0.0

    def test_fatigue_stacks_on_residual(self):
        tracker = WeeklyFatigueTracker(make_profile())
        tracker.record_training("chest", 0, 40.0)
        tracker.record_training("chest", 1, 30.0)
        assert tracker.residual_fatigue("chest", 1) == pytest.approx(38.2)

    def test_days_until_ready_counts_whole_days(self):
        # 100 on triceps: floor(75 / 28.62) + 1 = 3
        tracker = WeeklyFatigueTracker(make_profile())
        tracker.record_training("triceps", 0, 100.0)
        check = tracker.can_train_muscle("triceps", 0)
        assert check.days_until_ready == 3
        assert check.recommendation == "Not recovered - skip this muscle today"
        assert not tracker.can_train_muscle("triceps", 2).ready
        assert tracker.can_train_muscle("triceps", 3).ready

    def test_negative_fatigue_rejected(self):
        with pytest.raises(ValueError):
            WeeklyFatigueTracker(make_profile()).record_training("chest", 0, -1.0)

    def test_weekly_volume_status(self):
        tracker = WeeklyFatigueTracker(make_profile())
        tracker.record_training("chest", 0, 10, sets=12)
        tracker.record_training("calves", 0, 10, sets=16)
        status = tracker.get_weekly_volume_status()
        assert status["chest"].status == "optimal"
        assert (status["chest"].target_min, status["chest"].target_max) == (10, 20)
        assert status["calves"].status == "over"
        assert status["biceps"].status == "under"

    def test_reset_week_clears_state(self):
        tracker = WeeklyFatigueTracker(make_profile())
        tracker.record_training("quads", 0, 90.0, sets=8)
        tracker.reset_week()
        assert tracker.residual_fatigue("quads", 0) == 0.0
        assert tracker.get_weekly_volume_status()["quads"].sets == 0

    def test_unlisted_muscle_is_tracked_on_demand(self):
        tracker = WeeklyFatigueTracker(make_profile())
        tracker.record_training("forearms", 0, 30.0, sets=4)
        assert tracker.residual_fatigue("forearms", 0) == 30.0
