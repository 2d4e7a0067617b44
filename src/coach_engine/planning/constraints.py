"""Post-generation check of the hard constraints.

Rules shape the week; this module re-validates the frozen result so that
anything the rules could not resolve (two locked user workouts back to
back, say) is reported in the plan trace rather than silently shipped.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import timedelta

from coach_engine.models.enums import (
    HARD_INTENSITY,
    TAPER_HARD_SESSION_DAYS_OUT,
    TSB_REST_DAY_THRESHOLD,
    EventOwner,
    GoalPriority,
    WorkoutType,
)
from coach_engine.models.weekly_plan import PlannedDay
from coach_engine.planning.context import PlanningContext


def check_hard_constraints(days: Sequence[PlannedDay], context: PlanningContext) -> list[str]:
    """Return a human-readable message for every hard constraint *days* break."""
    violations: list[str] = []
    by_date = {d.date: d for d in days}

    for earlier, later in zip(days, days[1:]):
        if earlier.is_hard and later.is_hard:
            violations.append(f"Consecutive hard days {earlier.date} and {later.date}")
        elif not earlier.is_rest and earlier.intensity == 5 and not later.is_rest and later.intensity > 2:
            violations.append(f"{later.date} is not easy after the max effort on {earlier.date}")

    if context.state.tsb < TSB_REST_DAY_THRESHOLD and not any(d.is_rest for d in days):
        violations.append(f"TSB {context.state.tsb:.1f} but no rest day")

    if context.last_week_completed is not None:
        cap = context.last_week_completed + 1
        sessions = sum(1 for d in days if not d.is_rest)
        if sessions > cap:
            violations.append(f"{sessions} sessions exceed the cap of {cap}")

    for goal in context.goals.goals_in_range(context.start_date - timedelta(days=1), context.end_date + timedelta(days=1)):
        race_day = by_date.get(goal.date)
        if race_day is not None and race_day.workout_type != WorkoutType.RACE:
            violations.append(f"{goal.name} on {goal.date} is not kept as a race day")
        if goal.priority == GoalPriority.C:
            continue
        before = by_date.get(goal.date - timedelta(days=1))
        if before is not None and not before.is_rest and before.intensity > 2:
            violations.append(f"Day before {goal.name} is intensity {before.intensity}")
        after = by_date.get(goal.date + timedelta(days=1))
        if after is not None and not after.is_rest and after.intensity > 1:
            violations.append(f"Day after {goal.name} is intensity {after.intensity}")

    phase = context.phase
    if phase.is_taper and phase.goal is not None:
        for day in days:
            days_out = (phase.goal.date - day.date).days
            if 0 < days_out < min(TAPER_HARD_SESSION_DAYS_OUT) and day.intensity >= HARD_INTENSITY and not day.is_rest:
                violations.append(f"Hard session {days_out} day(s) before {phase.goal.name}")

    for event in context.existing_events:
        if event.owner != EventOwner.USER or not event.is_workout:
            continue
        planned = by_date.get(event.date)
        if planned is not None and planned.source not in ("user", "past", "race") and not planned.locked:
            violations.append(f"User workout '{event.name}' on {event.date} was not kept")

    return violations
