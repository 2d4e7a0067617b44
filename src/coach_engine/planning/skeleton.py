"""Week skeleton: weekday roles per phase, with fixed days placed first.

Fixed days come from, in order: elapsed days of a revision, goal races,
training breaks, and workouts the athlete put on the calendar. All of them
are locked so no rule can move or change them.

Reference:
    Friel (2009), The Cyclist's Training Bible: weekly structure with
    two quality days and a weekend long ride.
"""

from __future__ import annotations

import logging

from coach_engine.models.calendar_event import PlaceholderEvent
from coach_engine.models.enums import (
    WORKOUT_DURATION_MIN,
    WORKOUT_FOR_INTENSITY,
    ActivityKind,
    EventOwner,
    PhaseName,
    WorkoutType,
)
from coach_engine.planning.context import PlanningContext
from coach_engine.planning.draft import DraftDay, WeekDraft, clamp_duration

logger = logging.getLogger(__name__)

W = WorkoutType

# Monday .. Sunday
WEEKDAY_ROLES: dict[PhaseName, tuple[WorkoutType, ...]] = {
    PhaseName.BASE: (W.REST, W.ENDURANCE, W.TEMPO, W.ENDURANCE, W.RECOVERY, W.LONG_ENDURANCE, W.ENDURANCE),
    PhaseName.BUILD: (W.REST, W.THRESHOLD, W.ENDURANCE, W.SWEET_SPOT, W.RECOVERY, W.LONG_ENDURANCE, W.ENDURANCE),
    PhaseName.SPECIALTY: (W.REST, W.VO2MAX, W.ENDURANCE, W.THRESHOLD, W.RECOVERY, W.LONG_ENDURANCE, W.TEMPO),
    PhaseName.PEAK: (W.REST, W.THRESHOLD, W.RECOVERY, W.VO2MAX, W.RECOVERY, W.ENDURANCE, W.ENDURANCE),
    PhaseName.RACE_WEEK: (W.REST, W.OPENERS, W.ENDURANCE, W.RECOVERY, W.OPENERS, W.ENDURANCE, W.RECOVERY),
    PhaseName.TRANSITION: (W.REST, W.RECOVERY, W.ENDURANCE, W.REST, W.RECOVERY, W.ENDURANCE, W.REST),
}

# Effort assumed for a user workout that carries no plan metadata
USER_WORKOUT_INTENSITY = 3
USER_WORKOUT_DURATION_MIN = 60.0


def build_skeleton(context: PlanningContext) -> WeekDraft:
    """Initial WeekDraft for *context* before any rule runs."""
    primary = ActivityKind.RIDE if ActivityKind.RIDE in context.sports else ActivityKind.RUN
    roles = WEEKDAY_ROLES[context.phase_name]
    locked = {d.date: d for d in context.locked_days}

    days: list[DraftDay] = []
    for day in context.dates:
        events = [e for e in context.existing_events if e.date == day and e.is_workout]
        if day in locked:
            days.append(DraftDay.from_planned(locked[day], source="past"))
            continue

        goal = context.goals.goal_on(day)
        if goal is not None:
            race = DraftDay.session(day, WorkoutType.RACE, goal.activity)
            race.locked = True
            race.source = "race"
            race.focus = f"{goal.priority.name}-race: {goal.name}"
            days.append(race)
            continue

        brk = context.goals.break_on(day)
        if brk is not None:
            days.append(DraftDay.rest(day, locked=True, source="break", focus=brk.name))
            continue

        user = next((e for e in events if e.owner == EventOwner.USER), None)
        if user is not None:
            days.append(_user_day(user))
            continue

        role = roles[day.weekday()]
        if role == WorkoutType.REST:
            draft = DraftDay.rest(day)
        else:
            draft = DraftDay.session(day, role, primary)

        placeholder = next((e for e in events if e.owner == EventOwner.PLACEHOLDER), None)
        if placeholder is not None:
            _apply_placeholder_hint(draft, placeholder, context)
        days.append(draft)

    logger.debug(
        "Skeleton for %s (%s): %s",
        context.start_date,
        context.phase.phase_name,
        ", ".join(d.workout_type.name for d in days),
    )
    return WeekDraft(days=days, target_tss=context.load_advice.weekly_tss_target)


def _user_day(event: PlaceholderEvent) -> DraftDay:
    intensity = event.intensity or USER_WORKOUT_INTENSITY
    activity = event.activity if event.activity in (ActivityKind.RIDE, ActivityKind.RUN) else ActivityKind.RIDE
    return DraftDay(
        date=event.date,
        activity=activity,
        workout_type=event.workout_type or WORKOUT_FOR_INTENSITY[intensity],
        intensity=intensity,
        duration_min=event.duration_min or USER_WORKOUT_DURATION_MIN,
        focus=event.name,
        source="user",
        locked=True,
        planned_tss=event.planned_tss,
    )


def _apply_placeholder_hint(draft: DraftDay, event: PlaceholderEvent, context: PlanningContext) -> None:
    """A bare placeholder reserves the day and may name the sport and length."""
    if draft.is_rest:
        draft.set_workout(WorkoutType.ENDURANCE, f"Day reserved by '{event.name}'")
    if event.activity in context.sports:
        draft.activity = event.activity
        draft.sport_fixed = True
    if event.duration_min:
        draft.duration_min = clamp_duration(draft.workout_type, event.duration_min, draft.activity)
    elif draft.duration_min <= 0:
        draft.duration_min = WORKOUT_DURATION_MIN[draft.workout_type][0]
