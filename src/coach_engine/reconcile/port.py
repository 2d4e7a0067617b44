"""CalendarPort — what the reconciler needs from an external calendar.

Adapters decide event ownership from their own naming convention and
hand the engine PlaceholderEvents with ``owner`` already set.
"""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import date

from coach_engine.models.calendar_event import PlaceholderEvent
from coach_engine.models.enums import ActivityKind, CalendarCategory, EventOwner, WorkoutType
from coach_engine.models.structured_workout import StructuredWorkout


@dataclass(frozen=True)
class EventWrite:
    """A system-authored event the reconciler wants on the calendar.

    ``workout`` carries pre-generated content (run days); rides are
    written with ``detail_deferred`` and detailed on the day itself.
    """

    date: date
    name: str
    activity: ActivityKind
    duration_min: float
    workout_type: WorkoutType
    intensity: int
    planned_tss: float
    description: str = ""
    detail_deferred: bool = False
    workout: StructuredWorkout | None = None

    def as_event(self, event_id: str | None) -> PlaceholderEvent:
        return PlaceholderEvent(
            id=event_id,
            date=self.date,
            name=self.name,
            category=CalendarCategory.WORKOUT,
            description=self.description,
            activity=self.activity,
            duration_min=self.duration_min,
            owner=EventOwner.SYSTEM,
            workout_type=self.workout_type,
            intensity=self.intensity,
            planned_tss=self.planned_tss,
            detail_deferred=self.detail_deferred,
        )


class CalendarPort(ABC):
    """External calendar as seen by the reconciler."""

    @abstractmethod
    def events_on(self, day: date) -> list[PlaceholderEvent]:
        """Fresh read of every event on *day*."""
        ...

    @abstractmethod
    def create_event(self, write: EventWrite) -> str:
        """Insert an event and return its identifier."""
        ...

    @abstractmethod
    def update_event(self, event_id: str, write: EventWrite) -> None:
        """Overwrite the event *event_id* in place."""
        ...

    @abstractmethod
    def delete_event(self, event_id: str) -> None:
        ...

    def events_between(self, start: date, end: date) -> list[PlaceholderEvent]:
        """Events on every day in [start, end]."""
        events: list[PlaceholderEvent] = []
        for offset in range((end - start).days + 1):
            events.extend(self.events_on(date.fromordinal(start.toordinal() + offset)))
        return events


class InMemoryCalendar(CalendarPort):
    """Dictionary-backed calendar for tests and dry runs.

    Every mutating call is appended to ``calls`` as ``(verb, event_id)``.
    """

    def __init__(self, events: list[PlaceholderEvent] | None = None) -> None:
        self._events: dict[str, PlaceholderEvent] = {}
        self._ids = itertools.count(1)
        self.calls: list[tuple[str, str]] = []
        for event in events or []:
            self.seed(event)

    def seed(self, event: PlaceholderEvent) -> PlaceholderEvent:
        """Place an existing event without recording a call."""
        if event.id is None:
            event = replace(event, id=self._next_id())
        self._events[event.id] = event
        return event

    def events_on(self, day: date) -> list[PlaceholderEvent]:
        return [e for e in self._events.values() if e.date == day]

    def create_event(self, write: EventWrite) -> str:
        event_id = self._next_id()
        self._events[event_id] = write.as_event(event_id)
        self.calls.append(("create", event_id))
        return event_id

    def update_event(self, event_id: str, write: EventWrite) -> None:
        if event_id not in self._events:
            raise KeyError(event_id)
        self._events[event_id] = write.as_event(event_id)
        self.calls.append(("update", event_id))

    def delete_event(self, event_id: str) -> None:
        self._events.pop(event_id)
        self.calls.append(("delete", event_id))

    def all_events(self) -> list[PlaceholderEvent]:
        return sorted(self._events.values(), key=lambda e: (e.date, e.id or ""))

    def _next_id(self) -> str:
        return f"mem-{next(self._ids)}"
