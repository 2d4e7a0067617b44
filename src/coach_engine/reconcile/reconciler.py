"""PlanReconciler — converge the external calendar onto a plan.

Per planned day, after a fresh read of that date:
    - today and earlier: skipped, plans only cover the future
    - a user-authored workout on the date: day skipped, nothing touched
    - rest day: stale system events removed, nothing created
    - otherwise the first system (else placeholder) event is the target:
        none          → create
        identical     → leave untouched
        sport or duration changed → replace (delete + create)
        anything else → update in place by id

Updates keyed by event id make a second pass a no-op. A failed mutation
is recorded and the remaining days still run.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import date

from coach_engine.errors import CoachError
from coach_engine.models.calendar_event import PlaceholderEvent
from coach_engine.models.enums import ActivityKind, EventOwner
from coach_engine.models.structured_workout import StructuredWorkout
from coach_engine.models.weekly_plan import PlannedDay
from coach_engine.reconcile.port import CalendarPort, EventWrite
from coach_engine.workout_builder.description_builder import workout_title

logger = logging.getLogger(__name__)

ContentProvider = Callable[[PlannedDay], StructuredWorkout | None]

# Sources the reconciler never writes: the athlete or goal calendar owns them
_EXTERNAL_SOURCES = ("user", "race", "break", "past")


@dataclass
class ReconcileReport:
    """What one reconciliation pass did, day by day."""

    created: list[date] = field(default_factory=list)
    updated: list[date] = field(default_factory=list)
    replaced: list[date] = field(default_factory=list)
    deleted: list[date] = field(default_factory=list)
    unchanged: list[date] = field(default_factory=list)
    skipped: list[tuple[date, str]] = field(default_factory=list)
    failures: list[tuple[date, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def mutation_count(self) -> int:
        return len(self.created) + len(self.updated) + len(self.replaced) + len(self.deleted)

    def summary(self) -> str:
        return (
            f"{len(self.created)} created, {len(self.updated)} updated, "
            f"{len(self.replaced)} replaced, {len(self.deleted)} deleted, "
            f"{len(self.unchanged)} unchanged, {len(self.skipped)} skipped, "
            f"{len(self.failures)} failed"
        )


def event_matches(event: PlaceholderEvent, write: EventWrite) -> bool:
    """Whether *event* already is exactly what *write* would produce."""
    return (
        event.owner == EventOwner.SYSTEM
        and event.activity == write.activity
        and event.duration_min == write.duration_min
        and event.workout_type == write.workout_type
        and event.intensity == write.intensity
        and event.name == write.name
        and event.detail_deferred == write.detail_deferred
    )


def needs_replace(event: PlaceholderEvent, write: EventWrite) -> bool:
    return event.activity != write.activity or event.duration_min != write.duration_min


class PlanReconciler:
    """Applies PlannedDays to a CalendarPort without harming user events.

    Args:
        calendar: The external calendar.
        content: Optional provider of pre-generated run content. Ride days,
            and run days it returns None for, are written detail-deferred.
    """

    def __init__(self, calendar: CalendarPort, content: ContentProvider | None = None) -> None:
        self.calendar = calendar
        self.content = content

    def reconcile(self, days: Sequence[PlannedDay], today: date) -> ReconcileReport:
        report = ReconcileReport()
        for day in days:
            if day.date <= today:
                report.skipped.append((day.date, "today or past"))
                continue
            try:
                self._reconcile_day(day, report)
            except CoachError as exc:
                logger.warning("Calendar update for %s failed: %s", day.date, exc)
                report.failures.append((day.date, str(exc)))
        logger.info("Reconciled %d day(s): %s", len(days), report.summary())
        return report

    def _reconcile_day(self, day: PlannedDay, report: ReconcileReport) -> None:
        workouts = [e for e in self.calendar.events_on(day.date) if e.is_workout]

        user = next((e for e in workouts if e.owner == EventOwner.USER), None)
        if user is not None:
            logger.info("Skipping %s: user workout '%s'", day.date, user.name)
            report.skipped.append((day.date, f"user workout '{user.name}'"))
            return

        system = [e for e in workouts if e.owner == EventOwner.SYSTEM]
        if day.is_rest:
            for stale in system:
                self.calendar.delete_event(stale.id)
                report.deleted.append(day.date)
            if not system:
                report.skipped.append((day.date, "rest day"))
            return

        if day.source in _EXTERNAL_SOURCES:
            report.skipped.append((day.date, f"{day.source} day"))
            return

        placeholders = [e for e in workouts if e.owner == EventOwner.PLACEHOLDER]
        target = system[0] if system else (placeholders[0] if placeholders else None)
        for duplicate in system[1:]:
            self.calendar.delete_event(duplicate.id)
            report.deleted.append(day.date)

        # Content is only generated when something is actually written
        write = self.build_write(day, with_content=False)
        if target is not None and event_matches(target, write):
            report.unchanged.append(day.date)
            return
        write = self.build_write(day)
        if target is None:
            self.calendar.create_event(write)
            report.created.append(day.date)
        elif needs_replace(target, write):
            self.calendar.delete_event(target.id)
            self.calendar.create_event(write)
            report.replaced.append(day.date)
        else:
            self.calendar.update_event(target.id, write)
            report.updated.append(day.date)

    def build_write(self, day: PlannedDay, with_content: bool = True) -> EventWrite:
        workout = None
        pre_generated = day.activity == ActivityKind.RUN and self.content is not None
        if pre_generated and with_content:
            workout = self.content(day)
        deferred = workout is None if with_content else not pre_generated
        lines = [day.focus] + [n for n in day.notes if n != day.focus]
        return EventWrite(
            date=day.date,
            name=workout_title(day.workout_type, day.activity, day.duration_min),
            activity=day.activity,
            duration_min=day.duration_min,
            workout_type=day.workout_type,
            intensity=day.intensity,
            planned_tss=day.estimated_tss,
            description="\n".join(line for line in lines if line),
            detail_deferred=deferred,
            workout=workout,
        )
