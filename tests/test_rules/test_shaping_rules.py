"""Tests for the RECOVERY, OPTIMIZATION, PREFERENCE and DRIVE tiers."""

from __future__ import annotations

from datetime import timedelta

import pytest

from coach_engine.history.variety import VarietyHistory
from coach_engine.history.zones import compute_zone_progression
from coach_engine.models.enums import ActivityKind, GoalPriority, TrainingZone, WorkoutType
from coach_engine.models.execution import ClosedLoopContext
from coach_engine.models.goal import Goal, GoalCalendar, TrainingBreak
from coach_engine.models.wellness import WellnessSample
from coach_engine.planning.skeleton import build_skeleton
from coach_engine.rules.drive.zone_target import ZoneTargetRule, workout_for_zone
from coach_engine.rules.optimization.execution_feedback import ExecutionFeedbackRule
from coach_engine.rules.optimization.pre_break_push import PreBreakPushRule
from coach_engine.rules.optimization.readiness_bias import ReadinessBiasRule
from coach_engine.rules.optimization.sport_ratio import SportRatioRule
from coach_engine.rules.optimization.volume_fit import VolumeFitRule
from coach_engine.rules.preference.recovery_week import RecoveryWeekRule, is_recovery_week
from coach_engine.rules.preference.variety import VarietyRule
from coach_engine.rules.recovery.readiness_gate import ReadinessGateRule
from tests.factories import MONDAY, make_activity, make_context, make_draft

W = WorkoutType
BASE_WEEK = (W.REST, W.ENDURANCE, W.TEMPO, W.ENDURANCE, W.RECOVERY, W.LONG_ENDURANCE, W.ENDURANCE)


class TestReadinessGate:
    def test_red_caps_today_and_tomorrow(self) -> None:
        context = make_context(today=MONDAY, samples=(WellnessSample(date=MONDAY, recovery_score=20),))
        draft = make_draft(MONDAY, W.THRESHOLD, W.VO2MAX, W.ENDURANCE, W.THRESHOLD, W.RECOVERY, W.LONG_ENDURANCE, W.ENDURANCE)
        result = ReadinessGateRule().apply(draft, context)
        assert result is not None
        assert draft.days[0].intensity <= 2
        assert draft.days[1].intensity <= 2
        assert draft.days[3].workout_type == W.THRESHOLD

    def test_yellow_eases_hard_session_today(self) -> None:
        context = make_context(today=MONDAY, samples=(WellnessSample(date=MONDAY, recovery_score=50),))
        draft = make_draft(MONDAY, W.VO2MAX, *BASE_WEEK[1:])
        ReadinessGateRule().apply(draft, context)
        assert draft.days[0].intensity == 4

    def test_unknown_does_nothing(self) -> None:
        draft = make_draft(MONDAY, *BASE_WEEK)
        assert ReadinessGateRule().apply(draft, make_context()) is None


class TestReadinessBias:
    def test_hard_session_moves_to_better_day(self) -> None:
        context = make_context(today=MONDAY, samples=(WellnessSample(date=MONDAY, recovery_score=50),))
        draft = make_draft(MONDAY, W.THRESHOLD, W.ENDURANCE, W.ENDURANCE, W.RECOVERY, W.ENDURANCE, W.LONG_ENDURANCE, W.ENDURANCE)
        result = ReadinessBiasRule().apply(draft, context)
        assert result is not None
        assert draft.days[0].workout_type == W.ENDURANCE
        assert draft.days[6].workout_type == W.THRESHOLD

    def test_full_readiness_keeps_placement(self) -> None:
        draft = make_draft(MONDAY, W.THRESHOLD, *BASE_WEEK[1:])
        assert ReadinessBiasRule().apply(draft, make_context()) is None


class TestSportRatio:
    def test_two_to_one_mix_on_easy_days(self) -> None:
        context = make_context()
        draft = build_skeleton(context)
        SportRatioRule().apply(draft, context)
        runs = [i for i, d in enumerate(draft.days) if d.activity == ActivityKind.RUN]
        assert len(runs) == 2
        assert all(b - a > 1 for a, b in zip(runs, runs[1:]))
        assert all(draft.days[i].workout_type != W.LONG_ENDURANCE for i in runs)

    def test_single_sport(self) -> None:
        context = make_context(sports=(ActivityKind.RUN,))
        draft = build_skeleton(context)
        SportRatioRule().apply(draft, context)
        assert all(d.activity == ActivityKind.RUN for d in draft.sessions)


class TestVolumeFit:
    def test_moves_toward_target(self) -> None:
        context = make_context()
        draft = build_skeleton(context)
        draft.target_tss = 300.0
        before = draft.total_tss
        result = VolumeFitRule().apply(draft, context)
        assert result is not None
        assert abs(draft.total_tss - 300.0) < abs(before - 300.0)

    def test_locked_days_keep_their_length(self) -> None:
        context = make_context()
        draft = build_skeleton(context)
        draft.days[5].locked = True
        draft.target_tss = 250.0
        VolumeFitRule().apply(draft, context)
        assert draft.days[5].duration_min == 150.0


class TestExecutionFeedback:
    def test_skipped_type_is_replaced(self) -> None:
        loop = ClosedLoopContext(completed_sessions=5, downweighted_types=frozenset({W.THRESHOLD}), volume_confidence=1.05)
        context = make_context(closed_loop=loop)
        draft = make_draft(MONDAY, W.REST, W.THRESHOLD, *BASE_WEEK[2:])
        result = ExecutionFeedbackRule().apply(draft, context)
        assert result is not None
        assert draft.days[1].workout_type == W.OVER_UNDER
        assert draft.volume_scale == pytest.approx(1.05)


class TestPreBreakPush:
    def test_push_before_holiday(self) -> None:
        holiday = TrainingBreak(start=MONDAY + timedelta(days=7), end=MONDAY + timedelta(days=13), name="Holiday")
        context = make_context(goals=GoalCalendar.from_goals(breaks=(holiday,)))
        draft = build_skeleton(context)
        result = PreBreakPushRule().apply(draft, context)
        assert result is not None
        assert draft.volume_scale == pytest.approx(1.10)
        assert draft.days[6].workout_type == W.SWEET_SPOT

    def test_no_break_no_push(self) -> None:
        context = make_context()
        assert PreBreakPushRule().apply(build_skeleton(context), context) is None


class TestRecoveryWeek:
    def test_fourth_week_is_lighter(self) -> None:
        start = MONDAY + timedelta(days=14)
        context = make_context(start=start)
        assert is_recovery_week(context)
        draft = make_draft(start, W.REST, W.THRESHOLD, W.ENDURANCE, W.VO2MAX, W.RECOVERY, W.LONG_ENDURANCE, W.ENDURANCE)
        result = RecoveryWeekRule().apply(draft, context)
        assert result is not None
        assert draft.volume_scale == pytest.approx(0.65)
        assert draft.days[1].workout_type == W.THRESHOLD
        assert draft.days[3].intensity == 3

    def test_upcoming_break_replaces_recovery_week(self) -> None:
        start = MONDAY + timedelta(days=14)
        holiday = TrainingBreak(start=start + timedelta(days=9), end=start + timedelta(days=13))
        context = make_context(start=start, goals=GoalCalendar.from_goals(breaks=(holiday,)))
        draft = make_draft(start, *BASE_WEEK)
        result = RecoveryWeekRule().apply(draft, context)
        assert result is not None
        assert draft.volume_scale == 1.0

    def test_ordinary_week(self) -> None:
        assert RecoveryWeekRule().apply(make_draft(MONDAY, *BASE_WEEK), make_context()) is None


class TestVariety:
    def test_overused_type_rotated(self) -> None:
        context = make_context(variety=VarietyHistory(counts={W.THRESHOLD: 2}))
        draft = make_draft(MONDAY, W.REST, W.THRESHOLD, *BASE_WEEK[2:])
        assert VarietyRule().apply(draft, context) is not None
        assert draft.days[1].workout_type == W.OVER_UNDER


class TestZoneTarget:
    def test_targets_least_trained_zone(self) -> None:
        race = Goal(name="Gran Fondo", date=MONDAY + timedelta(weeks=10), priority=GoalPriority.A)
        activities = [
            make_activity(
                MONDAY - timedelta(days=2 * (i + 1)),
                zone_seconds={TrainingZone.THRESHOLD: 1200, TrainingZone.TEMPO: 2400},
            )
            for i in range(3)
        ]
        context = make_context(
            goals=GoalCalendar.from_goals(race),
            zone_progression=compute_zone_progression(activities, MONDAY),
        )
        draft = build_skeleton(context)
        result = ZoneTargetRule().apply(draft, context)
        assert result is not None
        assert draft.days[1].workout_type == W.VO2MAX
        assert draft.days[1].anchored

    def test_workout_for_zone_avoids_overuse(self) -> None:
        assert workout_for_zone(TrainingZone.THRESHOLD, frozenset()) == W.THRESHOLD
        assert workout_for_zone(TrainingZone.THRESHOLD, frozenset({W.THRESHOLD})) == W.OVER_UNDER
