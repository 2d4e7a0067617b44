"""Garmin Connect JSON serialization for StructuredWorkout objects.

Converts an accepted StructuredWorkout into the workout-service payload
Garmin Connect expects. Rides carry power targets in watts (fractions of
FTP); runs carry pace targets, derived from the threshold pace when a
step only has a power fraction.

All functions are pure (no I/O, no network calls).
"""

from __future__ import annotations

from coach_engine.math.critical_speed import equivalent_pace
from coach_engine.models.enums import ActivityKind, DurationType, StepType
from coach_engine.models.structured_workout import StructuredWorkout, WorkoutStep

# Garmin enforces limits on certain text fields.
_GARMIN_NAME_MAX = 32
_GARMIN_DESCRIPTION_MAX = 1024
_GARMIN_STEP_NOTES_MAX = 200

# StepType → Garmin stepTypeKey mapping.
_STEP_TYPE_KEYS = {
    StepType.WARMUP: "warmup",
    StepType.COOLDOWN: "cooldown",
    StepType.ACTIVE: "interval",
    StepType.RECOVERY: "recovery",
    StepType.REST: "rest",
    StepType.REPEAT: "repeat",
}

_SPORT_TYPES = {
    ActivityKind.RUN: {"sportTypeId": 1, "sportTypeKey": "running", "displayOrder": 1},
    ActivityKind.RIDE: {"sportTypeId": 2, "sportTypeKey": "cycling", "displayOrder": 2},
}


def sport_type(activity: ActivityKind) -> dict:
    return dict(_SPORT_TYPES.get(activity, _SPORT_TYPES[ActivityKind.RIDE]))


def to_garmin_json(
    workout: StructuredWorkout,
    ftp_watts: float | None = None,
    threshold_pace_s_per_km: float | None = None,
) -> dict:
    """Convert a StructuredWorkout to a Garmin Connect-compatible dict."""
    targets = _Targets(workout.activity, ftp_watts, threshold_pace_s_per_km)
    steps = []
    for order, step in enumerate(workout.steps, start=1):
        if step.step_type == StepType.REPEAT:
            steps.append(_convert_repeat_step(step, order, targets))
        else:
            steps.append(_convert_step(step, order, targets))

    return {
        "workoutName": workout.workout_title[:_GARMIN_NAME_MAX],
        "description": workout.workout_description[:_GARMIN_DESCRIPTION_MAX],
        "sportType": sport_type(workout.activity),
        "workoutSegments": [
            {
                "segmentOrder": 1,
                "sportType": sport_type(workout.activity),
                "workoutSteps": steps,
            }
        ],
    }


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


class _Targets:
    """Resolves a step's target for one sport and athlete."""

    def __init__(self, activity: ActivityKind, ftp_watts: float | None, threshold_pace: float | None) -> None:
        self.activity = activity
        self.ftp_watts = ftp_watts
        self.threshold_pace = threshold_pace

    def build(self, step: WorkoutStep) -> dict:
        """Pace for runs, power for rides, otherwise no target.

        Pace: faster pace (lower s/km) → higher m/s → targetValueOne.
        """
        if self.activity == ActivityKind.RUN:
            pace = self._pace_band(step)
            if pace is not None:
                return _target(6, "pace.zone", _pace_s_per_km_to_m_per_s(pace[0]), _pace_s_per_km_to_m_per_s(pace[1]))
        elif self.ftp_watts and step.power_low is not None and step.power_high is not None:
            return _target(2, "power.zone", round(step.power_low * self.ftp_watts), round(step.power_high * self.ftp_watts))
        return _target(1, "no.target", None, None)

    def _pace_band(self, step: WorkoutStep) -> tuple[float, float] | None:
        if step.pace_low is not None and step.pace_high is not None:
            return step.pace_low, step.pace_high
        if self.threshold_pace and step.power_low and step.power_high:
            # Higher fraction of threshold speed = faster pace
            return (
                equivalent_pace(step.power_high, self.threshold_pace),
                equivalent_pace(step.power_low, self.threshold_pace),
            )
        return None


def _target(type_id: int, key: str, one: float | None, two: float | None) -> dict:
    return {
        "targetType": {"workoutTargetTypeId": type_id, "workoutTargetTypeKey": key},
        "targetValueOne": one,
        "targetValueTwo": two,
    }


def _convert_step(step: WorkoutStep, step_order: int, targets: _Targets) -> dict:
    """Build an ExecutableStepDTO for a non-repeat step."""
    result = {
        "type": "ExecutableStepDTO",
        "stepOrder": step_order,
        "stepType": {
            "stepTypeId": step.step_type.value,
            "stepTypeKey": _STEP_TYPE_KEYS[step.step_type],
        },
    }

    if step.duration_type == DurationType.TIME and step.duration_value > 0:
        result["endCondition"] = {"conditionTypeId": 2, "conditionTypeKey": "time"}
        result["endConditionValue"] = round(step.duration_value * 60)  # min → sec
    elif step.duration_type == DurationType.DISTANCE and step.duration_value > 0:
        result["endCondition"] = {"conditionTypeId": 3, "conditionTypeKey": "distance"}
        result["endConditionValue"] = step.duration_value * 1000  # km → m
    else:
        # LAP_BUTTON or zero-duration → lap button press
        result["endCondition"] = {"conditionTypeId": 1, "conditionTypeKey": "lap.button"}
        result["endConditionValue"] = None

    result.update(targets.build(step))

    if step.step_notes:
        result["stepNotes"] = step.step_notes[:_GARMIN_STEP_NOTES_MAX]

    return result


def _convert_repeat_step(step: WorkoutStep, step_order: int, targets: _Targets) -> dict:
    """Build a RepeatGroupDTO for a REPEAT step with nested children."""
    child_steps = []
    for child_order, child in enumerate(step.child_steps, start=1):
        if child.step_type == StepType.REPEAT:
            child_steps.append(_convert_repeat_step(child, child_order, targets))
        else:
            child_steps.append(_convert_step(child, child_order, targets))

    return {
        "type": "RepeatGroupDTO",
        "stepOrder": step_order,
        "stepType": {
            "stepTypeId": StepType.REPEAT.value,
            "stepTypeKey": "repeat",
        },
        "endCondition": {"conditionTypeId": 7, "conditionTypeKey": "iterations"},
        "endConditionValue": step.repeat_count,
        "workoutSteps": child_steps,
    }


def _pace_s_per_km_to_m_per_s(s_per_km: float) -> float:
    """Convert pace in seconds/km to speed in meters/second.

    Example: 300 s/km (5:00/km) → 1000/300 ≈ 3.333 m/s
    """
    return 1000.0 / s_per_km
