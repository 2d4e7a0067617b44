"""Execution tracking models — plan vs actual."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from coach_engine.models.enums import (
    ActivityKind,
    ExecutionStatus,
    Recommendation,
    TrainingZone,
    TriggerPriority,
    WorkoutType,
)
from coach_engine.models.weekly_plan import PlannedDay


@dataclass(frozen=True)
class ActualActivity:
    """A completed activity as reported by the provider."""

    date: date
    activity: ActivityKind
    duration_min: float
    training_load: float = 0.0
    name: str = ""
    workout_type: WorkoutType | None = None
    zone_seconds: dict[TrainingZone, float] = field(default_factory=dict)
    rpe: float | None = None
    feel: float | None = None


@dataclass(frozen=True)
class ExecutionRecord:
    """Outcome of one planned session, or of an unplanned extra one."""

    date: date
    status: ExecutionStatus
    planned: PlannedDay | None = None
    actual: ActualActivity | None = None
    tss_variance: float = 0.0
    duration_variance: float = 0.0

    def __post_init__(self) -> None:
        if self.status == ExecutionStatus.EXTRA and self.planned is not None:
            raise ValueError("EXTRA execution records cannot reference a planned day")
        if self.status != ExecutionStatus.EXTRA and self.planned is None:
            raise ValueError(f"{self.status.name} records need a planned day")


@dataclass(frozen=True)
class AdherenceResult:
    """Adherence score in [0, 100], or a no-data marker when nothing was planned."""

    score: float | None
    planned_sessions: int
    completed_sessions: int
    planned_tss: float = 0.0
    actual_tss: float = 0.0

    @property
    def has_data(self) -> bool:
        return self.score is not None

    @classmethod
    def no_data(cls, actual_tss: float = 0.0) -> AdherenceResult:
        return cls(
            score=None,
            planned_sessions=0,
            completed_sessions=0,
            actual_tss=actual_tss,
        )


@dataclass(frozen=True)
class AdaptationSignal:
    """Direction and size of the next intensity adjustment."""

    recommendation: Recommendation
    intensity_adjustment_pct: float
    confidence: float
    reasoning: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def neutral(cls, reason: str = "") -> AdaptationSignal:
        return cls(
            recommendation=Recommendation.MAINTAIN,
            intensity_adjustment_pct=0.0,
            confidence=0.0,
            reasoning=(reason,) if reason else (),
        )


@dataclass(frozen=True)
class MidWeekTrigger:
    """Result of the mid-week check."""

    fired: bool
    priority: TriggerPriority | None = None
    reasons: tuple[str, ...] = field(default_factory=tuple)
    families: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ClosedLoopContext:
    """What last week's execution tells the next plan.

    ``volume_confidence`` above 1.0 means the athlete consistently
    over-delivered and can take more volume.
    """

    completed_sessions: int | None = None
    downweighted_types: frozenset[WorkoutType] = frozenset()
    volume_confidence: float = 1.0
    adherence: AdherenceResult | None = None
    notes: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls) -> ClosedLoopContext:
        return cls()
