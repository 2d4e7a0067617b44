"""Data models for the coaching engine."""

from coach_engine.models.athlete_state import AthleteState
from coach_engine.models.calendar_event import PlaceholderEvent
from coach_engine.models.decision_trace import PlanTrace, RuleResult, RuleStatus
from coach_engine.models.enums import (
    ActivityKind,
    CalendarCategory,
    EventOwner,
    ExecutionStatus,
    GapInterpretation,
    GoalPriority,
    PhaseName,
    Priority,
    RampRateCategory,
    Recommendation,
    RecoveryStatus,
    TrainingZone,
    TriggerPriority,
    WorkoutType,
)
from coach_engine.models.execution import (
    ActualActivity,
    AdaptationSignal,
    AdherenceResult,
    ClosedLoopContext,
    ExecutionRecord,
    MidWeekTrigger,
)
from coach_engine.models.goal import Goal, GoalCalendar, TrainingBreak
from coach_engine.models.load_advice import LoadAdvice
from coach_engine.models.phase import TrainingPhase
from coach_engine.models.weekly_plan import PlannedDay, PlanRevision, WeeklyPlan
from coach_engine.models.wellness import (
    ActivityFeedback,
    RecoveryAssessment,
    WellnessSample,
    WellnessSummary,
)
from coach_engine.models.workout import WorkoutBrief, WorkoutDraft

__all__ = [
    "ActivityFeedback",
    "ActivityKind",
    "ActualActivity",
    "AdaptationSignal",
    "AdherenceResult",
    "AthleteState",
    "CalendarCategory",
    "ClosedLoopContext",
    "EventOwner",
    "ExecutionRecord",
    "ExecutionStatus",
    "GapInterpretation",
    "Goal",
    "GoalCalendar",
    "GoalPriority",
    "LoadAdvice",
    "MidWeekTrigger",
    "PhaseName",
    "PlaceholderEvent",
    "PlanRevision",
    "PlanTrace",
    "PlannedDay",
    "Priority",
    "RampRateCategory",
    "Recommendation",
    "RecoveryAssessment",
    "RecoveryStatus",
    "RuleResult",
    "RuleStatus",
    "TrainingBreak",
    "TrainingPhase",
    "TrainingZone",
    "TriggerPriority",
    "WeeklyPlan",
    "WellnessSample",
    "WellnessSummary",
    "WorkoutBrief",
    "WorkoutDraft",
    "WorkoutType",
]
