"""Tests for StructuredWorkout and WorkoutStep data models."""

from __future__ import annotations

from coach_engine.models.enums import ActivityKind, DurationType, StepType
from coach_engine.models.structured_workout import StructuredWorkout, WorkoutStep


class TestWorkoutStep:
    def test_create_simple_step(self) -> None:
        step = WorkoutStep(
            step_type=StepType.ACTIVE,
            duration_type=DurationType.TIME,
            duration_value=10.0,
        )
        assert step.step_type == StepType.ACTIVE
        assert step.duration_value == 10.0
        assert step.power_low is None
        assert step.pace_low is None
        assert step.repeat_count == 1
        assert step.child_steps == ()
        assert step.total_minutes == 10.0

    def test_step_is_frozen(self) -> None:
        step = WorkoutStep(step_type=StepType.WARMUP)
        try:
            step.step_type = StepType.COOLDOWN  # type: ignore[misc]
            assert False, "Should have raised FrozenInstanceError"
        except AttributeError:
            pass

    def test_repeat_block_minutes(self) -> None:
        work = WorkoutStep(step_type=StepType.ACTIVE, duration_value=8.0, power_low=0.95, power_high=1.0)
        recovery = WorkoutStep(step_type=StepType.RECOVERY, duration_value=4.0)
        repeat = WorkoutStep(step_type=StepType.REPEAT, repeat_count=3, child_steps=(work, recovery))
        assert repeat.total_minutes == 36.0

    def test_nested_repeat_minutes(self) -> None:
        inner = WorkoutStep(
            step_type=StepType.REPEAT,
            repeat_count=2,
            child_steps=(WorkoutStep(step_type=StepType.ACTIVE, duration_value=1.0),),
        )
        outer = WorkoutStep(step_type=StepType.REPEAT, repeat_count=3, child_steps=(inner,))
        assert outer.total_minutes == 6.0

    def test_distance_and_lap_steps_have_no_minutes(self) -> None:
        distance = WorkoutStep(step_type=StepType.ACTIVE, duration_type=DurationType.DISTANCE, duration_value=5.0)
        lap = WorkoutStep(step_type=StepType.COOLDOWN, duration_type=DurationType.LAP_BUTTON)
        assert distance.total_minutes == 0.0
        assert lap.total_minutes == 0.0


class TestStructuredWorkout:
    def test_total_duration(self) -> None:
        steps = (
            WorkoutStep(step_type=StepType.WARMUP, duration_value=15.0),
            WorkoutStep(
                step_type=StepType.REPEAT,
                repeat_count=3,
                child_steps=(
                    WorkoutStep(step_type=StepType.ACTIVE, duration_value=10.0),
                    WorkoutStep(step_type=StepType.RECOVERY, duration_value=5.0),
                ),
            ),
            WorkoutStep(step_type=StepType.COOLDOWN, duration_value=10.0),
        )
        workout = StructuredWorkout(activity=ActivityKind.RIDE, steps=steps, workout_title="Threshold Ride 70m")
        assert workout.total_duration_min == 70.0
        assert workout.workout_description == ""

    def test_empty_workout(self) -> None:
        workout = StructuredWorkout(activity=ActivityKind.RUN, steps=(), workout_title="Rest Day")
        assert workout.total_duration_min == 0

    def test_structured_workout_is_frozen(self) -> None:
        workout = StructuredWorkout(activity=ActivityKind.RUN, steps=(), workout_title="Test")
        try:
            workout.workout_title = "Other"  # type: ignore[misc]
            assert False, "Should have raised FrozenInstanceError"
        except AttributeError:
            pass
