"""Tests for the post-generation hard-constraint check."""

from __future__ import annotations

from datetime import timedelta

from coach_engine.models.athlete_state import AthleteState
from coach_engine.models.enums import GoalPriority, WorkoutType
from coach_engine.models.execution import ClosedLoopContext
from coach_engine.models.goal import Goal, GoalCalendar
from coach_engine.planning.constraints import check_hard_constraints
from tests.factories import MONDAY, make_context, make_plan, user_event

W = WorkoutType
EASY_WEEK = (W.REST, W.ENDURANCE, W.TEMPO, W.ENDURANCE, W.RECOVERY, W.LONG_ENDURANCE, W.ENDURANCE)


class TestCheckHardConstraints:
    def test_clean_week(self) -> None:
        assert check_hard_constraints(make_plan(MONDAY, *EASY_WEEK).days, make_context()) == []

    def test_consecutive_hard_days(self) -> None:
        plan = make_plan(MONDAY, W.REST, W.THRESHOLD, W.VO2MAX, *EASY_WEEK[3:])
        violations = check_hard_constraints(plan.days, make_context())
        assert any("Consecutive hard days" in v for v in violations)

    def test_not_easy_after_max_effort(self) -> None:
        plan = make_plan(MONDAY, W.REST, W.VO2MAX, W.TEMPO, *EASY_WEEK[3:])
        violations = check_hard_constraints(plan.days, make_context())
        assert any("max effort" in v for v in violations)

    def test_fatigue_needs_rest_day(self) -> None:
        context = make_context(state=AthleteState(as_of=MONDAY, ctl=50.0, atl=70.0))
        plan = make_plan(MONDAY, *([W.ENDURANCE] * 7))
        assert any("no rest day" in v for v in check_hard_constraints(plan.days, context))

    def test_session_cap(self) -> None:
        context = make_context(closed_loop=ClosedLoopContext(completed_sessions=3))
        violations = check_hard_constraints(make_plan(MONDAY, *EASY_WEEK).days, context)
        assert violations == ["6 sessions exceed the cap of 4"]

    def test_race_must_stay_a_race(self) -> None:
        race = Goal(name="Crit", date=MONDAY + timedelta(days=3), priority=GoalPriority.A)
        context = make_context(goals=GoalCalendar.from_goals(race))
        violations = check_hard_constraints(make_plan(MONDAY, *EASY_WEEK).days, context)
        assert any("not kept as a race day" in v for v in violations)

    def test_dropped_user_workout(self) -> None:
        context = make_context(existing_events=(user_event(MONDAY + timedelta(days=1)),))
        violations = check_hard_constraints(make_plan(MONDAY, *EASY_WEEK).days, context)
        assert any("was not kept" in v for v in violations)
