"""Workout-type variety over the trailing two weeks."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable

from coach_engine.models.enums import TYPE_HISTORY_DAYS, TYPE_OVERUSE_COUNT, WorkoutType
from coach_engine.models.execution import ActualActivity


@dataclass(frozen=True)
class VarietyHistory:
    """How often each workout type was done recently."""

    counts: dict[WorkoutType, int] = field(default_factory=dict)

    @classmethod
    def from_activities(
        cls, activities: Iterable[ActualActivity], as_of: date
    ) -> VarietyHistory:
        start = as_of - timedelta(days=TYPE_HISTORY_DAYS)
        counter: Counter[WorkoutType] = Counter(
            a.workout_type
            for a in activities
            if a.workout_type is not None and start <= a.date < as_of
        )
        return cls(counts=dict(counter))

    def count(self, workout_type: WorkoutType) -> int:
        return self.counts.get(workout_type, 0)

    def overused(self) -> frozenset[WorkoutType]:
        """Types used TYPE_OVERUSE_COUNT or more times in the window."""
        return frozenset(t for t, n in self.counts.items() if n >= TYPE_OVERUSE_COUNT)

    def recent_types(self) -> tuple[WorkoutType, ...]:
        return tuple(sorted(self.counts, key=lambda t: (-self.counts[t], t.value)))
