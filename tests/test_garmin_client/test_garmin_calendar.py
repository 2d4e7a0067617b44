"""Tests for GarminCalendar — the calendar port over a mocked GarminClient."""

from __future__ import annotations

from datetime import date
from unittest.mock import MagicMock

import pytest

from coach_engine.models.enums import ActivityKind, DurationType, EventOwner, StepType, WorkoutType
from coach_engine.models.structured_workout import StructuredWorkout, WorkoutStep
from coach_engine.reconcile.port import EventWrite
from garmin_client.calendar import GarminCalendar
from garmin_client.calendar_mapper import MARKER, system_description

DAY = date(2026, 3, 3)


def _write(**overrides) -> EventWrite:
    values = dict(
        date=DAY,
        name="Tempo Run 45m",
        activity=ActivityKind.RUN,
        duration_min=45.0,
        workout_type=WorkoutType.TEMPO,
        intensity=3,
        planned_tss=48.0,
        description="Steady tempo.",
    )
    values.update(overrides)
    return EventWrite(**values)


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def calendar(client):
    return GarminCalendar(client, ftp_watts=250.0, threshold_pace_s_per_km=300.0)


class TestEventsOn:
    def test_reads_workouts_and_races(self, calendar, client):
        client.calendar_items.return_value = [
            {"id": 1, "itemType": "workout", "date": "2026-03-03", "title": "Tempo Run 45m", "workoutId": 9001},
            {"id": 2, "itemType": "workout", "date": "2026-03-03", "title": "Ride 60m", "workoutId": 9002},
            {"id": 3, "itemType": "race", "date": "2026-03-03", "title": "Club TT"},
        ]
        workouts = {
            9001: {"workoutId": 9001, "description": system_description(_write())},
            9002: {"workoutId": 9002},
        }
        client.get_workout.side_effect = lambda workout_id: workouts[workout_id]

        events = calendar.events_on(DAY)

        client.calendar_items.assert_called_once_with(DAY, DAY)
        assert [e.id for e in events] == ["9001", "9002", "3"]
        assert [e.owner for e in events] == [EventOwner.SYSTEM, EventOwner.PLACEHOLDER, EventOwner.USER]
        assert client.get_workout.call_count == 2

    def test_items_without_date_are_skipped(self, calendar, client):
        client.calendar_items.return_value = [{"id": 4, "itemType": "note", "title": "?"}]
        assert calendar.events_on(DAY) == []

    def test_events_between_reads_each_day(self, calendar, client):
        client.calendar_items.return_value = []
        calendar.events_between(DAY, date(2026, 3, 5))
        assert client.calendar_items.call_count == 3


class TestWrites:
    def test_create_uploads_and_schedules(self, calendar, client):
        client.upload_and_schedule.return_value = 4242

        assert calendar.create_event(_write()) == "4242"

        payload, day = client.upload_and_schedule.call_args.args
        assert day == DAY
        assert payload["workoutName"] == "Tempo Run 45m"
        assert payload["description"].startswith(MARKER)
        assert payload["description"].endswith("Steady tempo.")

    def test_update_in_place(self, calendar, client):
        calendar.update_event("77", _write())
        workout_id, payload = client.update_workout.call_args.args
        assert workout_id == 77
        assert payload["workoutName"] == "Tempo Run 45m"

    def test_delete(self, calendar, client):
        calendar.delete_event("77")
        client.delete_workout.assert_called_once_with(77)


class TestWorkoutPayload:
    def test_untargeted_block_without_content(self, calendar):
        payload = calendar.workout_payload(_write(detail_deferred=True))

        steps = payload["workoutSegments"][0]["workoutSteps"]
        assert len(steps) == 1
        assert steps[0]["endConditionValue"] == 2700
        assert steps[0]["stepNotes"] == "Tempo"
        assert payload["sportType"]["sportTypeKey"] == "running"
        assert "deferred=1" in payload["description"]

    def test_detailed_ride_gets_power_targets(self, calendar):
        workout = StructuredWorkout(
            activity=ActivityKind.RIDE,
            steps=(
                WorkoutStep(step_type=StepType.WARMUP, duration_value=15, power_low=0.5, power_high=0.6),
                WorkoutStep(step_type=StepType.ACTIVE, duration_value=40, power_low=0.96, power_high=1.04),
                WorkoutStep(step_type=StepType.COOLDOWN, duration_type=DurationType.TIME, duration_value=10),
            ),
            workout_title="Threshold Ride 65m",
        )
        write = _write(
            name="Threshold Ride 65m",
            activity=ActivityKind.RIDE,
            duration_min=65.0,
            workout_type=WorkoutType.THRESHOLD,
            intensity=4,
            planned_tss=70.0,
            workout=workout,
        )

        payload = calendar.workout_payload(write)

        steps = payload["workoutSegments"][0]["workoutSteps"]
        assert len(steps) == 3
        assert (steps[1]["targetValueOne"], steps[1]["targetValueTwo"]) == (240, 260)
        assert payload["sportType"]["sportTypeKey"] == "cycling"
        assert payload["workoutName"] == "Threshold Ride 65m"

    def test_long_names_are_truncated(self, calendar):
        payload = calendar.workout_payload(_write(name="Sweet Spot Ride With A Very Long Name 90m"))
        assert len(payload["workoutName"]) == 32
