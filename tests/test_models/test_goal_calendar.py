"""Tests for GoalCalendar, Goal and TrainingBreak models."""

from __future__ import annotations

from datetime import date

import pytest

from coach_engine.models.enums import ActivityKind, GoalPriority
from coach_engine.models.goal import Goal, GoalCalendar, TrainingBreak


@pytest.fixture
def goal_a() -> Goal:
    return Goal(name="Gran Fondo", date=date(2026, 9, 13), priority=GoalPriority.A)


@pytest.fixture
def goal_b() -> Goal:
    return Goal(
        name="City Half Marathon",
        date=date(2026, 6, 14),
        priority=GoalPriority.B,
        activity=ActivityKind.RUN,
    )


@pytest.fixture
def goal_c() -> Goal:
    return Goal(name="Spring Crit", date=date(2026, 3, 15), priority=GoalPriority.C)


@pytest.fixture
def holiday() -> TrainingBreak:
    return TrainingBreak(start=date(2026, 7, 6), end=date(2026, 7, 12), name="Holiday")


@pytest.fixture
def full_calendar(goal_a: Goal, goal_b: Goal, goal_c: Goal, holiday: TrainingBreak) -> GoalCalendar:
    return GoalCalendar.from_goals(goal_a, goal_b, goal_c, breaks=(holiday,))


class TestTrainingBreak:
    def test_days_inclusive(self, holiday: TrainingBreak) -> None:
        assert holiday.days == 7

    def test_contains_edges(self, holiday: TrainingBreak) -> None:
        assert holiday.contains(date(2026, 7, 6))
        assert holiday.contains(date(2026, 7, 12))
        assert not holiday.contains(date(2026, 7, 13))


class TestGoalCalendar:
    def test_empty(self) -> None:
        cal = GoalCalendar()
        assert cal.goals == ()
        assert cal.primary_goal(date(2026, 3, 1)) is None

    def test_sorted_chronologically(self, full_calendar: GoalCalendar) -> None:
        assert [g.name for g in full_calendar.goals] == ["Spring Crit", "City Half Marathon", "Gran Fondo"]

    def test_primary_goal_prefers_a(self, full_calendar: GoalCalendar, goal_a: Goal) -> None:
        assert full_calendar.primary_goal(date(2026, 3, 1)) == goal_a

    def test_primary_goal_falls_back_to_b(self, goal_b: Goal, goal_c: Goal) -> None:
        cal = GoalCalendar.from_goals(goal_b, goal_c)
        assert cal.primary_goal(date(2026, 3, 1)) == goal_b

    def test_primary_goal_ignores_c_races(self, goal_c: Goal) -> None:
        fallback = Goal(name="Autumn block", date=date(2026, 11, 1), priority=GoalPriority.B)
        cal = GoalCalendar.from_goals(goal_c)
        assert cal.primary_goal(date(2026, 3, 1), fallback=fallback) == fallback

    def test_passed_goals_are_skipped(self, full_calendar: GoalCalendar) -> None:
        assert full_calendar.primary_goal(date(2026, 9, 14)) is None

    def test_goal_on_race_day(self, full_calendar: GoalCalendar, goal_b: Goal) -> None:
        assert full_calendar.goal_on(date(2026, 6, 14)) == goal_b
        assert full_calendar.goal_on(date(2026, 6, 15)) is None

    def test_goals_in_range(self, full_calendar: GoalCalendar) -> None:
        found = full_calendar.goals_in_range(date(2026, 3, 15), date(2026, 6, 14))
        assert [g.priority for g in found] == [GoalPriority.C, GoalPriority.B]

    def test_break_lookup(self, full_calendar: GoalCalendar, holiday: TrainingBreak) -> None:
        assert full_calendar.break_on(date(2026, 7, 8)) == holiday
        assert full_calendar.break_on(date(2026, 7, 5)) is None

    def test_next_break_within_window(self, full_calendar: GoalCalendar, holiday: TrainingBreak) -> None:
        assert full_calendar.next_break(date(2026, 7, 1), within_days=7) == holiday
        assert full_calendar.next_break(date(2026, 6, 1), within_days=7) is None

    def test_next_break_minimum_length(self, full_calendar: GoalCalendar) -> None:
        assert full_calendar.next_break(date(2026, 7, 1), within_days=7, min_days=8) is None

    def test_merged_drops_duplicates(self, goal_a: Goal, goal_b: Goal) -> None:
        profile = GoalCalendar.from_goals(goal_a)
        provider = GoalCalendar.from_goals(
            Goal(name="GRAN FONDO", date=goal_a.date, priority=GoalPriority.B), goal_b
        )
        merged = profile.merged(provider)
        assert len(merged.goals) == 2
        # The first calendar wins a duplicate
        assert merged.goal_on(goal_a.date).priority == GoalPriority.A

    def test_is_frozen(self, full_calendar: GoalCalendar) -> None:
        with pytest.raises(AttributeError):
            full_calendar.goals = ()  # type: ignore[misc]
