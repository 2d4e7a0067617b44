"""Tests for garmin_client.calendar_mapper — event ownership and race goals."""

from __future__ import annotations

from datetime import date

import pytest

from coach_engine.models.enums import (
    ActivityKind,
    CalendarCategory,
    EventOwner,
    GoalPriority,
    WorkoutType,
)
from coach_engine.reconcile.port import EventWrite
from garmin_client.calendar_mapper import (
    MARKER,
    goal_from_item,
    map_calendar_item,
    parse_marker,
    parse_placeholder,
    strip_marker,
    system_description,
    system_title,
)

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


def _workout_item(title: str, workout_id: int = 9001, **extra) -> dict:
    item = {
        "id": 111,
        "itemType": "workout",
        "date": DAY.isoformat(),
        "title": title,
        "workoutId": workout_id,
    }
    item.update(extra)
    return item


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


class TestSystemDescription:
    def test_marker_line_then_text(self):
        assert system_description(_write()) == (
            "[coach:plan] sport=RUN type=TEMPO intensity=3 tss=48.0 duration=45.0 deferred=0\n"
            "Steady tempo."
        )

    def test_marker_only_without_text(self):
        text = system_description(_write(description="", detail_deferred=True))
        assert "\n" not in text
        assert text.endswith("deferred=1")

    def test_title_fits_garmin_limit(self):
        assert system_title("x" * 40) == "x" * 32
        assert system_title("Tempo Run 45m") == "Tempo Run 45m"


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


class TestMarker:
    def test_parse_marker_reads_metadata(self):
        meta = parse_marker(system_description(_write()))
        assert meta == {
            "sport": "RUN",
            "type": "TEMPO",
            "intensity": "3",
            "tss": "48.0",
            "duration": "45.0",
            "deferred": "0",
        }

    @pytest.mark.parametrize("text", [None, "", "Hill repeats with the club", "notes\n" + MARKER])
    def test_no_marker_on_first_line(self, text):
        assert parse_marker(text) is None

    def test_strip_marker(self):
        assert strip_marker(system_description(_write())) == "Steady tempo."
        assert strip_marker("Just notes") == "Just notes"
        assert strip_marker(None) == ""


class TestParsePlaceholder:
    @pytest.mark.parametrize(
        ("title", "expected"),
        [
            ("Ride", (ActivityKind.RIDE, None)),
            ("run", (ActivityKind.RUN, None)),
            ("Run 60m", (ActivityKind.RUN, 60.0)),
            ("Bike 1.5h", (ActivityKind.RIDE, 90.0)),
            ("Running 45 min", (ActivityKind.RUN, 45.0)),
            ("  Cycling 2 hours ", (ActivityKind.RIDE, 120.0)),
        ],
    )
    def test_bare_titles(self, title, expected):
        assert parse_placeholder(title) == expected

    @pytest.mark.parametrize("title", ["Ride with Tom", "Long Run Sunday", "Threshold Ride 70m", ""])
    def test_anything_else_is_not_a_placeholder(self, title):
        assert parse_placeholder(title) is None


class TestMapCalendarItem:
    def test_system_workout(self):
        workout = {
            "workoutId": 9001,
            "description": system_description(_write()),
            "estimatedDurationInSecs": 2700,
        }
        event = map_calendar_item(_workout_item("Tempo Run 45m", sportTypeKey="running"), workout)

        assert event.id == "9001"
        assert event.date == DAY
        assert event.owner == EventOwner.SYSTEM
        assert event.category == CalendarCategory.WORKOUT
        assert event.activity == ActivityKind.RUN
        assert event.description == "Steady tempo."
        assert event.workout_type == WorkoutType.TEMPO
        assert event.intensity == 3
        assert event.planned_tss == 48.0
        assert event.duration_min == 45.0
        assert event.detail_deferred is False
        assert event.safe_to_update

    def test_deferred_system_ride(self):
        write = _write(
            name="Threshold Ride 75m",
            activity=ActivityKind.RIDE,
            duration_min=75.0,
            workout_type=WorkoutType.THRESHOLD,
            intensity=4,
            planned_tss=82.0,
            detail_deferred=True,
        )
        event = map_calendar_item(_workout_item(write.name), {"description": system_description(write)})
        assert event.activity == ActivityKind.RIDE
        assert event.detail_deferred is True

    def test_placeholder_with_duration_in_title(self):
        event = map_calendar_item(_workout_item("Ride 90m"))
        assert event.owner == EventOwner.PLACEHOLDER
        assert event.activity == ActivityKind.RIDE
        assert event.duration_min == 90.0
        assert event.id == "9001"

    def test_placeholder_takes_workout_length(self):
        event = map_calendar_item(_workout_item("Run"), {"estimatedDurationInSecs": 3600})
        assert event.owner == EventOwner.PLACEHOLDER
        assert event.duration_min == 60.0

    def test_user_workout(self):
        event = map_calendar_item(
            _workout_item("Club hill repeats", sportTypeKey="cycling"),
            {"description": "Bring lights", "estimatedDurationInSecs": 5400},
        )
        assert event.owner == EventOwner.USER
        assert event.activity == ActivityKind.RIDE
        assert event.duration_min == 90.0
        assert event.description == "Bring lights"
        assert not event.safe_to_update

    def test_race_item(self):
        item = {"id": 5, "itemType": "race", "date": "2026-05-10", "title": "Gran Fondo (A)"}
        event = map_calendar_item(item)
        assert event.category == CalendarCategory.RACE
        assert event.id == "5"
        assert event.owner == EventOwner.USER

    def test_note_item(self):
        event = map_calendar_item({"id": 6, "itemType": "note", "date": "2026-03-03", "title": "Travel"})
        assert event.category == CalendarCategory.NOTE
        assert not event.is_workout

    def test_item_without_date(self):
        assert map_calendar_item({"id": 7, "itemType": "workout", "title": "Ride"}) is None


class TestGoalFromItem:
    def test_priority_tag_in_title(self):
        goal = goal_from_item({"itemType": "race", "date": "2026-05-10", "title": "Gran Fondo (A)"})
        assert goal.name == "Gran Fondo"
        assert goal.priority == GoalPriority.A
        assert goal.date == date(2026, 5, 10)
        assert goal.activity == ActivityKind.RIDE

    def test_lowercase_tag(self):
        goal = goal_from_item({"itemType": "event", "date": "2026-04-12", "title": "Club TT (c)"})
        assert goal.priority == GoalPriority.C
        assert goal.name == "Club TT"

    def test_primary_event_is_a_race(self):
        goal = goal_from_item(
            {"itemType": "race", "date": "2026-09-20", "title": "City Marathon", "primaryEvent": True, "sportTypeKey": "running"}
        )
        assert goal.priority == GoalPriority.A
        assert goal.activity == ActivityKind.RUN

    def test_untagged_race_is_b(self):
        goal = goal_from_item({"itemType": "race", "date": "2026-06-01", "title": "Local Crit"})
        assert goal.priority == GoalPriority.B

    def test_workouts_are_not_goals(self):
        assert goal_from_item(_workout_item("Ride")) is None

    def test_race_without_date(self):
        assert goal_from_item({"itemType": "race", "title": "TBD (A)"}) is None
