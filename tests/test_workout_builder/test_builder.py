"""Tests for WorkoutBuilder — template workouts from a brief."""

from __future__ import annotations

import pytest

from coach_engine.models.enums import ActivityKind, StepType, WorkoutType
from coach_engine.workout_builder.builder import WorkoutBuilder
from tests.factories import make_brief


@pytest.fixture
def builder() -> WorkoutBuilder:
    return WorkoutBuilder()


def _types(workout) -> list[StepType]:
    return [s.step_type for s in workout.steps]


class TestStructure:
    def test_threshold_fills_main_set_with_reps(self, builder: WorkoutBuilder) -> None:
        workout = builder.build(make_brief(WorkoutType.THRESHOLD, 70.0))
        assert _types(workout) == [StepType.WARMUP, StepType.REPEAT, StepType.COOLDOWN]
        warmup, block, cooldown = workout.steps
        assert warmup.duration_value == 15.0
        assert cooldown.duration_value == 10.0
        assert block.repeat_count == 3
        assert [c.duration_value for c in block.child_steps] == [10.0, 5.0]
        assert workout.total_duration_min == pytest.approx(70.0)

    def test_leftover_becomes_steady_filler(self, builder: WorkoutBuilder) -> None:
        workout = builder.build(make_brief(WorkoutType.THRESHOLD, 60.0))
        assert _types(workout) == [StepType.WARMUP, StepType.REPEAT, StepType.ACTIVE, StepType.COOLDOWN]
        assert workout.steps[1].repeat_count == 2
        filler = workout.steps[2]
        assert filler.duration_value == 5.0
        assert (filler.power_low, filler.power_high) == (0.60, 0.70)
        assert workout.total_duration_min == pytest.approx(60.0)

    def test_main_set_shorter_than_one_rep_shrinks_the_rep(self, builder: WorkoutBuilder) -> None:
        workout = builder.build(make_brief(WorkoutType.THRESHOLD, 20.0))
        warmup, block, cooldown = workout.steps
        assert (warmup.duration_value, cooldown.duration_value) == (8.0, 4.0)
        assert block.repeat_count == 1
        assert [c.duration_value for c in block.child_steps] == [5.3, 2.7]
        assert workout.total_duration_min == pytest.approx(20.0)

    def test_easy_session_uses_short_warmup(self, builder: WorkoutBuilder) -> None:
        workout = builder.build(make_brief(WorkoutType.ENDURANCE, 75.0))
        warmup, main, cooldown = workout.steps
        assert (warmup.duration_value, main.duration_value, cooldown.duration_value) == (10.0, 60.0, 5.0)

    def test_short_session_caps_warmup_and_cooldown(self, builder: WorkoutBuilder) -> None:
        workout = builder.build(make_brief(WorkoutType.TEMPO, 30.0))
        warmup, main, cooldown = workout.steps
        assert warmup.duration_value == 12.0
        assert cooldown.duration_value == 6.0
        assert main.duration_value == 12.0

    def test_long_ride_splits_main_set(self, builder: WorkoutBuilder) -> None:
        workout = builder.build(make_brief(WorkoutType.LONG_ENDURANCE, 150.0))
        assert [s.duration_value for s in workout.steps] == [10.0, 108.0, 27.0, 5.0]
        assert workout.steps[1].step_notes == "Fuel every 30 minutes."

    def test_rest_day(self, builder: WorkoutBuilder) -> None:
        workout = builder.build(make_brief(WorkoutType.REST, 0.0))
        assert _types(workout) == [StepType.REST]


class TestTargets:
    def test_readiness_scales_main_set_only(self, builder: WorkoutBuilder) -> None:
        workout = builder.build(make_brief(WorkoutType.THRESHOLD, 70.0, intensity_modifier=0.85))
        warmup, block, _ = workout.steps
        work = block.child_steps[0]
        assert (work.power_low, work.power_high) == (0.81, 0.87)
        assert (warmup.power_low, warmup.power_high) == (0.50, 0.60)

    def test_scaled_targets_never_drop_below_recovery(self, builder: WorkoutBuilder) -> None:
        workout = builder.build(make_brief(WorkoutType.ENDURANCE, 75.0, intensity_modifier=0.5))
        main = workout.steps[1]
        assert (main.power_low, main.power_high) == (0.45, 0.55)

    def test_runs_get_pace_targets(self, builder: WorkoutBuilder) -> None:
        brief = make_brief(WorkoutType.THRESHOLD, 70.0, ActivityKind.RUN, threshold_pace_s_per_km=300.0)
        work = builder.build(brief).steps[1].child_steps[0]
        # 300 / 1.02 and 300 / 0.95
        assert (work.pace_low, work.pace_high) == (294, 316)

    def test_rides_have_no_pace(self, builder: WorkoutBuilder) -> None:
        workout = builder.build(make_brief(WorkoutType.TEMPO, 60.0, threshold_pace_s_per_km=300.0))
        assert all(s.pace_low is None for s in workout.steps)

    def test_title_and_description(self, builder: WorkoutBuilder) -> None:
        workout = builder.build(make_brief(WorkoutType.VO2MAX, 65.0))
        assert workout.workout_title == "VO2max Ride 65m"
        assert workout.workout_description.startswith("Phase: Build Phase.")
