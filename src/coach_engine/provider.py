"""FitnessProvider — what the engine needs from a fitness-data service.

Leaf reads return empty tuples (or None) when data is unavailable rather
than raising, so one missing endpoint never stops a run.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import date

from coach_engine.models.athlete_state import AthleteState
from coach_engine.models.execution import ActualActivity
from coach_engine.models.goal import GoalCalendar
from coach_engine.models.wellness import ActivityFeedback, WellnessSample


class FitnessProvider(ABC):
    """Activities, wellness and fitness for one athlete."""

    @abstractmethod
    def athlete_state(self, as_of: date) -> AthleteState:
        ...

    @abstractmethod
    def wellness(self, start: date, end: date) -> tuple[WellnessSample, ...]:
        """Daily wellness samples in [start, end], oldest first."""
        ...

    @abstractmethod
    def activities(self, start: date, end: date) -> tuple[ActualActivity, ...]:
        """Completed activities in [start, end], oldest first."""
        ...

    def goal_events(self, start: date, end: date) -> GoalCalendar:
        """Races and breaks the provider's own calendar knows about."""
        return GoalCalendar()


def feedback_from_activities(activities: Sequence[ActualActivity]) -> tuple[ActivityFeedback, ...]:
    """RPE / Feel entries of the activities that carry any."""
    return tuple(
        ActivityFeedback(date=a.date, rpe=a.rpe, feel=a.feel)
        for a in activities
        if a.rpe is not None or a.feel is not None
    )
