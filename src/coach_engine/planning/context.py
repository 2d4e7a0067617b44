"""Frozen inputs to one weekly plan generation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta

from coach_engine.models.athlete_state import AthleteState
from coach_engine.models.calendar_event import PlaceholderEvent
from coach_engine.models.enums import ActivityKind, PhaseName
from coach_engine.models.execution import ClosedLoopContext
from coach_engine.models.goal import GoalCalendar
from coach_engine.models.load_advice import LoadAdvice
from coach_engine.models.phase import TrainingPhase
from coach_engine.models.weekly_plan import PLAN_DAYS, PlannedDay
from coach_engine.history.variety import VarietyHistory
from coach_engine.history.zones import ZoneProgression
from coach_engine.readiness.model import ReadinessAssessment, forecast_readiness


@dataclass(frozen=True)
class PlanningContext:
    """Everything the rules may look at while shaping a week.

    Attributes:
        start_date: First day of the plan week.
        today: The day readiness was measured; forecast offsets count from here.
        existing_events: Calendar events already on the plan dates.
        locked_days: Days that must pass through unchanged (elapsed days
            of a mid-week revision).
    """

    start_date: date
    today: date
    state: AthleteState
    phase: TrainingPhase
    load_advice: LoadAdvice
    readiness: ReadinessAssessment
    goals: GoalCalendar = field(default_factory=GoalCalendar)
    sports: tuple[ActivityKind, ...] = (ActivityKind.RIDE, ActivityKind.RUN)
    variety: VarietyHistory = field(default_factory=VarietyHistory)
    zone_progression: ZoneProgression | None = None
    existing_events: tuple[PlaceholderEvent, ...] = field(default_factory=tuple)
    closed_loop: ClosedLoopContext = field(default_factory=ClosedLoopContext)
    locked_days: tuple[PlannedDay, ...] = field(default_factory=tuple)
    ftp_watts: float | None = None
    threshold_pace_s_per_km: float | None = None

    @property
    def end_date(self) -> date:
        return self.start_date + timedelta(days=PLAN_DAYS - 1)

    @property
    def dates(self) -> tuple[date, ...]:
        return tuple(self.start_date + timedelta(days=i) for i in range(PLAN_DAYS))

    @property
    def phase_name(self) -> PhaseName:
        return self.phase.phase

    @property
    def last_week_completed(self) -> int | None:
        return self.closed_loop.completed_sessions

    def day_offset(self, day: date) -> int:
        return (day - self.today).days

    def forecast(self, day: date) -> float:
        """Forecast readiness modifier on *day*."""
        return forecast_readiness(self.readiness.intensity_modifier, self.day_offset(day))
