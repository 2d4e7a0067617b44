"""Description builder — workout titles and plain-text context.

Titles stay short enough for device calendars; the description carries
phase, readiness and the constraints that shaped the session.
"""

from __future__ import annotations

from coach_engine.models.enums import ActivityKind, RecoveryStatus, WorkoutType
from coach_engine.models.workout import WorkoutBrief

_SPORT_LABELS: dict[ActivityKind, str] = {
    ActivityKind.RIDE: "Ride",
    ActivityKind.RUN: "Run",
}

_TYPE_LABELS: dict[WorkoutType, str] = {
    WorkoutType.REST: "Rest Day",
    WorkoutType.LONG_ENDURANCE: "Long",
    WorkoutType.SWEET_SPOT: "Sweet Spot",
    WorkoutType.OVER_UNDER: "Over-Unders",
    WorkoutType.VO2MAX: "VO2max",
}


def workout_title(workout_type: WorkoutType, activity: ActivityKind, duration_min: float) -> str:
    """Short title, e.g. "Threshold Ride 70m"."""
    if workout_type == WorkoutType.REST:
        return _TYPE_LABELS[WorkoutType.REST]
    label = _TYPE_LABELS.get(workout_type, workout_type.label)
    sport = _SPORT_LABELS.get(activity, "Workout")
    return f"{label} {sport} {duration_min:.0f}m"


def workout_type_from_title(title: str) -> WorkoutType | None:
    """WorkoutType a title produced by workout_title starts with."""
    lowered = (title or "").lower()
    labels = sorted(((_TYPE_LABELS.get(t, t.label).lower(), t) for t in WorkoutType), key=lambda p: -len(p[0]))
    for label, workout_type in labels:
        if lowered == label or lowered.startswith(label + " "):
            return workout_type
    return None


def build_workout_description(brief: WorkoutBrief) -> tuple[str, str]:
    """Build a (title, description) pair for a brief."""
    title = workout_title(brief.workout_type, brief.activity, brief.duration_min)

    lines = [
        f"Phase: {brief.phase_name}. {brief.phase_focus}",
        f"Target: {brief.duration_min:.0f} min, ~{brief.target_tss:.0f} TSS, intensity {brief.intensity}/5.",
    ]
    if brief.recovery_status != RecoveryStatus.UNKNOWN:
        lines.append(
            f"Readiness: {brief.recovery_status.label}, intensity x{brief.intensity_modifier:.2f}."
        )
    if brief.constraints:
        lines.append("Constraints:")
        lines.extend(f"  - {c}" for c in brief.constraints[:5])
    return title, "\n".join(lines)
