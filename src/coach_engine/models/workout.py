"""Workout briefs sent to a workout designer and the drafts it returns."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date

from coach_engine.models.enums import ActivityKind, RecoveryStatus, TrainingZone, WorkoutType


@dataclass(frozen=True)
class WorkoutBrief:
    """Structured request describing the session a designer must produce.

    The rule engine decides what the session must be; the designer only
    decides how the intervals look and how it is explained.
    """

    date: date
    activity: ActivityKind
    workout_type: WorkoutType
    intensity: int
    duration_min: float
    target_tss: float
    phase_name: str
    phase_focus: str
    recovery_status: RecoveryStatus = RecoveryStatus.UNKNOWN
    intensity_modifier: float = 1.0
    ftp_watts: float | None = None
    threshold_pace_s_per_km: float | None = None
    target_zone: TrainingZone | None = None
    constraints: tuple[str, ...] = field(default_factory=tuple)
    recent_types: tuple[WorkoutType, ...] = field(default_factory=tuple)
    amendments: tuple[str, ...] = field(default_factory=tuple)

    def amended(self, *notes: str) -> WorkoutBrief:
        """Copy of this brief with extra correction notes for a regeneration."""
        return replace(self, amendments=self.amendments + tuple(notes))


@dataclass(frozen=True)
class WorkoutDraft:
    """A designed workout before or after validation.

    Rides carry a ``workout_body`` (ZWO-style XML); runs carry a
    ``workout_description`` (sectioned text).
    """

    explanation: str
    suitability_score: float
    reason: str = ""
    workout_body: str | None = None
    workout_description: str | None = None
    source: str = "heuristic"  # heuristic | generative
