"""Tests for PlanReconciler against the in-memory calendar."""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from coach_engine.errors import TransientNetworkError
from coach_engine.models.enums import ActivityKind, EventOwner, WorkoutType
from coach_engine.models.structured_workout import StructuredWorkout
from coach_engine.reconcile.port import EventWrite, InMemoryCalendar
from coach_engine.reconcile.reconciler import PlanReconciler
from tests.factories import MONDAY, make_plan, placeholder_event, system_event, user_event

W = WorkoutType
WEEK = (W.REST, W.ENDURANCE, W.TEMPO, W.ENDURANCE, W.RECOVERY, W.LONG_ENDURANCE, W.ENDURANCE)
SUNDAY_BEFORE = MONDAY - timedelta(days=1)
TUESDAY = MONDAY + timedelta(days=1)


class _FlakyCalendar(InMemoryCalendar):
    """Fails every create on one date."""

    def __init__(self, failing_day) -> None:
        super().__init__()
        self.failing_day = failing_day

    def create_event(self, write: EventWrite) -> str:
        if write.date == self.failing_day:
            raise TransientNetworkError("503 Service Unavailable")
        return super().create_event(write)


@pytest.fixture
def plan():
    return make_plan(MONDAY, *WEEK)


class TestReconcile:
    def test_creates_sessions_and_skips_rest(self, plan) -> None:
        calendar = InMemoryCalendar()
        report = PlanReconciler(calendar).reconcile(plan.days, SUNDAY_BEFORE)

        assert len(report.created) == 6
        assert report.skipped == [(MONDAY, "rest day")]
        assert report.ok
        events = calendar.all_events()
        assert all(e.owner == EventOwner.SYSTEM for e in events)
        assert all(e.detail_deferred for e in events)
        assert [e.workout_type for e in events] == list(WEEK[1:])

    def test_second_pass_changes_nothing(self, plan) -> None:
        calendar = InMemoryCalendar()
        reconciler = PlanReconciler(calendar)
        reconciler.reconcile(plan.days, SUNDAY_BEFORE)
        calls_after_first = list(calendar.calls)

        report = reconciler.reconcile(plan.days, SUNDAY_BEFORE)
        assert report.mutation_count == 0
        assert len(report.unchanged) == 6
        assert calendar.calls == calls_after_first

    def test_user_workout_untouched(self, plan) -> None:
        calendar = InMemoryCalendar()
        mine = calendar.seed(user_event(TUESDAY, "Club ride"))
        report = PlanReconciler(calendar).reconcile(plan.days, SUNDAY_BEFORE)

        assert (TUESDAY, "user workout 'Club ride'") in report.skipped
        assert calendar.events_on(TUESDAY) == [mine]
        assert all(event_id != mine.id for _, event_id in calendar.calls)

    def test_rest_day_removes_stale_system_event(self, plan) -> None:
        calendar = InMemoryCalendar()
        stale = calendar.seed(system_event(MONDAY, W.THRESHOLD))
        report = PlanReconciler(calendar).reconcile(plan.days, SUNDAY_BEFORE)

        assert report.deleted == [MONDAY]
        assert ("delete", stale.id) in calendar.calls
        assert calendar.events_on(MONDAY) == []

    def test_rest_day_keeps_placeholder(self, plan) -> None:
        calendar = InMemoryCalendar()
        calendar.seed(placeholder_event(MONDAY))
        PlanReconciler(calendar).reconcile(plan.days, SUNDAY_BEFORE)
        assert len(calendar.events_on(MONDAY)) == 1

    def test_changed_type_updates_in_place(self, plan) -> None:
        calendar = InMemoryCalendar()
        existing = calendar.seed(system_event(TUESDAY, W.TEMPO, duration_min=plan.days[1].duration_min))
        report = PlanReconciler(calendar).reconcile(plan.days, SUNDAY_BEFORE)

        assert report.updated == [TUESDAY]
        assert ("update", existing.id) in calendar.calls
        (event,) = calendar.events_on(TUESDAY)
        assert event.id == existing.id
        assert event.workout_type == W.ENDURANCE

    def test_changed_sport_replaces(self, plan) -> None:
        calendar = InMemoryCalendar()
        existing = calendar.seed(
            system_event(TUESDAY, W.ENDURANCE, ActivityKind.RUN, duration_min=plan.days[1].duration_min)
        )
        report = PlanReconciler(calendar).reconcile(plan.days, SUNDAY_BEFORE)

        assert report.replaced == [TUESDAY]
        (event,) = calendar.events_on(TUESDAY)
        assert event.id != existing.id
        assert event.activity == ActivityKind.RIDE

    def test_placeholder_becomes_the_session(self, plan) -> None:
        calendar = InMemoryCalendar()
        calendar.seed(placeholder_event(TUESDAY))
        PlanReconciler(calendar).reconcile(plan.days, SUNDAY_BEFORE)

        (event,) = calendar.events_on(TUESDAY)
        assert event.owner == EventOwner.SYSTEM

    def test_duplicate_system_events_collapse(self, plan) -> None:
        calendar = InMemoryCalendar()
        calendar.seed(system_event(TUESDAY, W.ENDURANCE, duration_min=plan.days[1].duration_min))
        calendar.seed(system_event(TUESDAY, W.TEMPO))
        PlanReconciler(calendar).reconcile(plan.days, SUNDAY_BEFORE)
        assert len(calendar.events_on(TUESDAY)) == 1

    def test_today_and_past_are_skipped(self, plan) -> None:
        calendar = InMemoryCalendar()
        today = MONDAY + timedelta(days=3)
        report = PlanReconciler(calendar).reconcile(plan.days, today)

        assert [d for d, reason in report.skipped if reason == "today or past"] == [
            MONDAY + timedelta(days=i) for i in range(4)
        ]
        assert len(report.created) == 3

    def test_failure_recorded_and_rest_continue(self, plan) -> None:
        calendar = _FlakyCalendar(TUESDAY)
        report = PlanReconciler(calendar).reconcile(plan.days, SUNDAY_BEFORE)

        assert not report.ok
        assert report.failures == [(TUESDAY, "503 Service Unavailable")]
        assert len(report.created) == 5


class TestRunContent:
    def test_runs_are_pre_generated_once(self) -> None:
        plan = make_plan(MONDAY, *WEEK, activity=ActivityKind.RUN)
        content = MagicMock(
            side_effect=lambda day: StructuredWorkout(activity=day.activity, steps=(), workout_title="Run")
        )
        calendar = InMemoryCalendar()
        reconciler = PlanReconciler(calendar, content)

        reconciler.reconcile(plan.days, SUNDAY_BEFORE)
        assert content.call_count == 6
        assert not any(e.detail_deferred for e in calendar.all_events())

        report = reconciler.reconcile(plan.days, SUNDAY_BEFORE)
        assert content.call_count == 6
        assert len(report.unchanged) == 6

    def test_rides_stay_deferred_with_content_provider(self, plan) -> None:
        content = MagicMock()
        PlanReconciler(InMemoryCalendar(), content).reconcile(plan.days, SUNDAY_BEFORE)
        content.assert_not_called()

    def test_description_carries_focus_and_notes(self) -> None:
        plan = make_plan(MONDAY, *WEEK)
        write = PlanReconciler(InMemoryCalendar()).build_write(plan.days[2])
        assert write.description == "Tempo"
        assert write.name
