"""Calendar placeholder events as seen by the engine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from coach_engine.models.enums import (
    ActivityKind,
    CalendarCategory,
    EventOwner,
    WorkoutType,
)


@dataclass(frozen=True)
class PlaceholderEvent:
    """An external calendar record.

    ``owner`` is decided by the calendar adapter from its own naming
    convention; the engine only ever looks at this field. The plan
    metadata fields are populated for SYSTEM events only.
    """

    id: str | None
    date: date
    name: str
    category: CalendarCategory = CalendarCategory.WORKOUT
    description: str = ""
    activity: ActivityKind = ActivityKind.OTHER
    duration_min: float | None = None
    owner: EventOwner = EventOwner.USER

    workout_type: WorkoutType | None = None
    intensity: int | None = None
    planned_tss: float | None = None
    detail_deferred: bool = False

    @property
    def is_workout(self) -> bool:
        return self.category == CalendarCategory.WORKOUT

    @property
    def safe_to_update(self) -> bool:
        return self.owner in (EventOwner.SYSTEM, EventOwner.PLACEHOLDER)
