"""Assemble the WorkoutBrief for one planned session."""

from __future__ import annotations

from collections.abc import Sequence

from coach_engine.math.training_load import estimate_workout_tss
from coach_engine.models.enums import WORKOUT_ZONE, RecoveryStatus, TrainingZone, WorkoutType
from coach_engine.models.phase import TrainingPhase
from coach_engine.models.weekly_plan import PlannedDay
from coach_engine.models.workout import WorkoutBrief
from coach_engine.readiness.model import ReadinessAssessment


def build_brief(
    day: PlannedDay,
    phase: TrainingPhase,
    readiness: ReadinessAssessment | None = None,
    ftp_watts: float | None = None,
    threshold_pace_s_per_km: float | None = None,
    recent_types: Sequence[WorkoutType] = (),
    constraints: Sequence[str] = (),
    target_zone: TrainingZone | None = None,
) -> WorkoutBrief:
    """Brief for *day*: what the rules decided plus the context that shaped it.

    The day's own rule notes come first in the constraint list, then the
    week-level constraints, without duplicates.
    """
    merged: list[str] = []
    for note in (*day.notes, *constraints):
        if note and note not in merged:
            merged.append(note)

    return WorkoutBrief(
        date=day.date,
        activity=day.activity,
        workout_type=day.workout_type,
        intensity=day.intensity,
        duration_min=day.duration_min,
        target_tss=day.estimated_tss or estimate_workout_tss(day.workout_type, day.duration_min),
        phase_name=phase.phase_name,
        phase_focus=phase.focus,
        recovery_status=readiness.status if readiness else RecoveryStatus.UNKNOWN,
        intensity_modifier=readiness.intensity_modifier if readiness else 1.0,
        ftp_watts=ftp_watts,
        threshold_pace_s_per_km=threshold_pace_s_per_km,
        target_zone=target_zone or WORKOUT_ZONE[day.workout_type],
        constraints=tuple(merged),
        recent_types=tuple(recent_types),
    )
