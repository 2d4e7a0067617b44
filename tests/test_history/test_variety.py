"""Tests for workout-type variety history."""

from __future__ import annotations

from datetime import timedelta

from coach_engine.history.variety import VarietyHistory
from coach_engine.models.enums import WorkoutType
from tests.factories import MONDAY, make_activity


class TestVarietyHistory:
    def test_counts_inside_window_only(self) -> None:
        activities = [
            make_activity(MONDAY - timedelta(days=2), workout_type=WorkoutType.THRESHOLD),
            make_activity(MONDAY - timedelta(days=9), workout_type=WorkoutType.THRESHOLD),
            make_activity(MONDAY - timedelta(days=20), workout_type=WorkoutType.THRESHOLD),
            make_activity(MONDAY, workout_type=WorkoutType.VO2MAX),
            make_activity(MONDAY - timedelta(days=3)),
        ]
        history = VarietyHistory.from_activities(activities, MONDAY)
        assert history.count(WorkoutType.THRESHOLD) == 2
        assert history.count(WorkoutType.VO2MAX) == 0

    def test_overused_and_recent_order(self) -> None:
        history = VarietyHistory(
            counts={WorkoutType.THRESHOLD: 2, WorkoutType.TEMPO: 1, WorkoutType.ENDURANCE: 3}
        )
        assert history.overused() == frozenset({WorkoutType.THRESHOLD, WorkoutType.ENDURANCE})
        assert history.recent_types()[0] == WorkoutType.ENDURANCE
