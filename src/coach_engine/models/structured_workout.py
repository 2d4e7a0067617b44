"""Structured workout models — step-by-step workout decomposition."""

from __future__ import annotations

from dataclasses import dataclass, field

from coach_engine.models.enums import ActivityKind, DurationType, StepType


@dataclass(frozen=True)
class WorkoutStep:
    """A single step within a structured workout.

    Steps may be nested inside REPEAT blocks via ``child_steps``.
    Power targets are fractions of threshold (FTP on the bike, Critical
    Speed on foot); pace targets are seconds per km
    (lower = faster).
    """

    step_type: StepType
    duration_type: DurationType = DurationType.TIME
    duration_value: float = 0.0        # min if TIME, km if DISTANCE
    power_low: float | None = None     # fraction of FTP / threshold speed
    power_high: float | None = None
    pace_low: float | None = None      # faster bound (s/km)
    pace_high: float | None = None     # slower bound (s/km)
    step_notes: str = ""
    repeat_count: int = 1
    child_steps: tuple[WorkoutStep, ...] = field(default_factory=tuple)

    @property
    def total_minutes(self) -> float:
        if self.step_type == StepType.REPEAT:
            return self.repeat_count * sum(c.total_minutes for c in self.child_steps)
        if self.duration_type == DurationType.TIME:
            return self.duration_value
        return 0.0


@dataclass(frozen=True)
class StructuredWorkout:
    """Complete structured workout ready for device serialization."""

    activity: ActivityKind
    steps: tuple[WorkoutStep, ...]
    workout_title: str
    workout_description: str = ""

    @property
    def total_duration_min(self) -> float:
        return sum(s.total_minutes for s in self.steps)
