"""Weekly planning models: PlannedDay, WeeklyPlan and PlanRevision."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta

from coach_engine.models.decision_trace import PlanTrace
from coach_engine.models.enums import (
    HARD_INTENSITY,
    ActivityKind,
    PhaseName,
    WorkoutType,
)
from coach_engine.models.load_advice import LoadAdvice

PLAN_DAYS = 7


@dataclass(frozen=True)
class PlannedDay:
    """One day of the plan.

    ``locked`` days (user workouts, races, already-elapsed days in a
    revision) pass through the rule engine unchanged.
    """

    date: date
    activity: ActivityKind
    workout_type: WorkoutType
    intensity: int  # 1-5
    estimated_tss: float = 0.0
    duration_min: float = 0.0
    focus: str = ""
    source: str = "plan"  # plan | user | race | past
    locked: bool = False
    notes: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not 1 <= self.intensity <= 5:
            raise ValueError(f"intensity must be 1-5, got {self.intensity}")

    @property
    def is_rest(self) -> bool:
        return self.activity == ActivityKind.REST

    @property
    def is_hard(self) -> bool:
        return not self.is_rest and self.intensity >= HARD_INTENSITY


@dataclass(frozen=True)
class WeeklyPlan:
    """Seven consecutive PlannedDays plus strategy text and totals.

    A plan is never mutated; mid-week adaptation supersedes it with a
    PlanRevision covering the remaining days only.
    """

    start_date: date
    days: tuple[PlannedDay, ...]
    strategy: str = ""
    phase: PhaseName | None = None
    load_advice: LoadAdvice | None = None
    trace: PlanTrace = field(default_factory=PlanTrace)

    def __post_init__(self) -> None:
        if len(self.days) != PLAN_DAYS:
            raise ValueError(f"WeeklyPlan needs {PLAN_DAYS} days, got {len(self.days)}")
        expected = [self.start_date + timedelta(days=i) for i in range(PLAN_DAYS)]
        if [d.date for d in self.days] != expected:
            raise ValueError(
                "WeeklyPlan days must be the 7 consecutive dates from "
                f"{self.start_date.isoformat()}"
            )

    @property
    def end_date(self) -> date:
        return self.start_date + timedelta(days=PLAN_DAYS - 1)

    @property
    def total_tss(self) -> float:
        return sum(d.estimated_tss for d in self.days)

    @property
    def total_duration_min(self) -> float:
        return sum(d.duration_min for d in self.days)

    @property
    def session_count(self) -> int:
        return sum(1 for d in self.days if not d.is_rest)

    @property
    def hard_session_count(self) -> int:
        return sum(1 for d in self.days if d.is_hard)

    def day(self, on: date) -> PlannedDay | None:
        for planned in self.days:
            if planned.date == on:
                return planned
        return None

    def remaining(self, from_date: date) -> tuple[PlannedDay, ...]:
        """Days on or after *from_date*."""
        return tuple(d for d in self.days if d.date >= from_date)


@dataclass(frozen=True)
class PlanRevision:
    """Mid-week replacement for the remaining days of a WeeklyPlan."""

    supersedes: date  # start date of the plan being revised
    created_on: date
    days: tuple[PlannedDay, ...]
    reason: str = ""

    @property
    def total_tss(self) -> float:
        return sum(d.estimated_tss for d in self.days)
