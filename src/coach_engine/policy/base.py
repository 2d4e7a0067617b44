"""PolicyProvider — the single seam between fixed thresholds and generative design.

Every place the coach can either apply a fixed rule or ask the generative
collaborator goes through one of these four methods, so the threshold
constants live in one implementation (HeuristicPolicy) and the generative
path always has it to fall back on.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import date
from typing import TYPE_CHECKING

from coach_engine.models.decision_trace import PlanTrace
from coach_engine.models.execution import AdaptationSignal
from coach_engine.models.weekly_plan import PlannedDay
from coach_engine.models.wellness import ActivityFeedback, RecoveryAssessment, WellnessSample
from coach_engine.models.workout import WorkoutBrief, WorkoutDraft

if TYPE_CHECKING:
    from coach_engine.planning.context import PlanningContext


class PolicyProvider(ABC):
    """Strategy interface used by the readiness model, generator and designer."""

    name: str = "policy"

    @abstractmethod
    def classify_recovery(
        self, today: WellnessSample | None, history: Sequence[WellnessSample]
    ) -> RecoveryAssessment:
        """Recovery status and intensity modifier for today's sample."""
        ...

    @abstractmethod
    def feedback_adjustment(
        self, feedback: Sequence[ActivityFeedback], as_of: date | None = None
    ) -> AdaptationSignal:
        """Adaptation signal from recent RPE / Feel feedback."""
        ...

    @abstractmethod
    def design_workout(self, brief: WorkoutBrief) -> WorkoutDraft:
        """Interval structure and explanation for one planned session."""
        ...

    @abstractmethod
    def describe_strategy(
        self, context: PlanningContext, days: Sequence[PlannedDay], trace: PlanTrace
    ) -> str:
        """Strategy narrative for a generated week."""
        ...
