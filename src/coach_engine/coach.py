"""Coach — composes provider, calendar, policy and cache into the four jobs.

    plan_week      generate next week and reconcile it onto the calendar
    review_week    plan-vs-actual for a finished window
    check_mid_week evaluate the week in progress and re-plan what is left
    daily_workout  design today's detail-deferred session and write it

Every job reads fresh provider and calendar data. Calendar mutations start
only once the plan or workout is fully built, so a failure while deciding
leaves the calendar as it was.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import date, timedelta

from coach_engine.advisor.load import advise_load
from coach_engine.advisor.phase import classify_phase
from coach_engine.config import CoachConfig
from coach_engine.errors import DataUnavailable
from coach_engine.execution.midweek import AdaptationOutcome, MidWeekAdapter, evaluate_mid_week
from coach_engine.execution.tracker import (
    ExecutionSummary,
    build_closed_loop,
    build_execution_records,
    compute_adherence,
    planned_day_from_event,
    summarize_execution,
)
from coach_engine.history.cache import TimestampedCache
from coach_engine.history.variety import VarietyHistory
from coach_engine.history.zones import ZoneProgression, compute_zone_progression
from coach_engine.math.critical_speed import cs_to_pace_s_per_km, threshold_pace_from_efforts
from coach_engine.math.training_load import days_since_last
from coach_engine.models.athlete_state import AthleteState
from coach_engine.models.calendar_event import PlaceholderEvent
from coach_engine.models.enums import (
    WELLNESS_WINDOW_DAYS,
    ZONE_HISTORY_DAYS,
    ActivityKind,
    EventOwner,
    WorkoutType,
)
from coach_engine.models.execution import ActualActivity, ClosedLoopContext
from coach_engine.models.structured_workout import StructuredWorkout
from coach_engine.models.weekly_plan import PLAN_DAYS, PlannedDay, WeeklyPlan
from coach_engine.models.workout import WorkoutBrief
from coach_engine.planning.brief import build_brief
from coach_engine.planning.context import PlanningContext
from coach_engine.planning.designer import DesignedWorkout, WorkoutDesigner
from coach_engine.planning.generator import WeeklyPlanGenerator
from coach_engine.policy.base import PolicyProvider
from coach_engine.policy.factory import make_policy
from coach_engine.provider import FitnessProvider, feedback_from_activities
from coach_engine.readiness.model import ReadinessModel
from coach_engine.reconcile.port import CalendarPort
from coach_engine.reconcile.reconciler import ContentProvider, PlanReconciler, ReconcileReport

logger = logging.getLogger(__name__)

# How far ahead the provider calendar is searched for goals
GOAL_LOOKAHEAD_DAYS = 365


def week_start(day: date) -> date:
    """Monday of the ISO week containing *day*."""
    return day - timedelta(days=day.weekday())


def next_week_start(day: date) -> date:
    """The Monday after *day* (a Monday maps to the following one)."""
    return week_start(day) + timedelta(days=PLAN_DAYS)


@dataclass(frozen=True)
class WeekResult:
    plan: WeeklyPlan
    report: ReconcileReport
    context: PlanningContext


class Coach:
    """One athlete's coach.

    Args:
        config: Immutable athlete / engine configuration.
        provider: Fitness-data source.
        calendar: External calendar the plan is written to.
        policy: Decision policy; built from ``config`` when omitted.
        cache: Zone-progression cache; built from ``config`` when omitted.
    """

    def __init__(
        self,
        config: CoachConfig,
        provider: FitnessProvider,
        calendar: CalendarPort,
        policy: PolicyProvider | None = None,
        cache: TimestampedCache[ZoneProgression] | None = None,
    ) -> None:
        self.config = config
        self.provider = provider
        self.calendar = calendar
        self.policy = policy or make_policy(config)
        self.generator = WeeklyPlanGenerator(self.policy)
        self.designer = WorkoutDesigner(self.policy, config.max_regenerations, config.min_suitability)
        self.cache = cache or TimestampedCache(
            ttl=timedelta(hours=config.cache_ttl_hours),
            path=config.cache_path,
            encode=ZoneProgression.to_dict,
            decode=ZoneProgression.from_dict,
        )

    # ------------------------------------------------------------------
    # Jobs
    # ------------------------------------------------------------------

    def plan_week(self, start: date | None = None, today: date | None = None) -> WeekResult:
        """Generate the week at *start* (default: next Monday) and reconcile it."""
        today = today or date.today()
        start = start or next_week_start(today)
        context = self.build_context(start, today)
        plan = self.generator.generate(context)

        reconciler = PlanReconciler(self.calendar, content=self._run_content(context))
        report = reconciler.reconcile(plan.days, today)
        return WeekResult(plan=plan, report=report, context=context)

    def review_week(self, start: date, end: date) -> ExecutionSummary:
        """Plan-vs-actual for [start, end] from system events and activities."""
        placeholders = self.calendar.events_between(start, end)
        actuals = self.provider.activities(start, end)
        records = build_execution_records(placeholders, actuals, start, end)
        return summarize_execution(records, start, end)

    def check_mid_week(self, today: date | None = None) -> AdaptationOutcome:
        """Evaluate the current week and re-plan the remaining days if triggered."""
        today = today or date.today()
        start = week_start(today)
        plan = self.plan_from_calendar(start)

        elapsed_end = today - timedelta(days=1)
        if elapsed_end >= start:
            records = build_execution_records(
                self.calendar.events_between(start, elapsed_end),
                self.provider.activities(start, elapsed_end),
                start,
                elapsed_end,
            )
        else:
            records = []
        adherence = compute_adherence(records)

        context = self.build_context(start, today)
        trigger = evaluate_mid_week(
            plan,
            records,
            adherence,
            today,
            context.readiness.status,
            context.state.tsb,
            classify_phase(today, context.phase.goal),
        )
        adapter = MidWeekAdapter(
            self.generator, PlanReconciler(self.calendar, content=self._run_content(context))
        )
        return adapter.adapt(context, plan, trigger, today)

    def daily_workout(self, today: date | None = None) -> DesignedWorkout | None:
        """Design today's detail-deferred system session and write it back.

        Returns None when there is nothing to detail today.
        """
        today = today or date.today()
        event = next(
            (
                e
                for e in self.calendar.events_on(today)
                if e.owner == EventOwner.SYSTEM and e.is_workout and e.detail_deferred
            ),
            None,
        )
        if event is None:
            logger.info("No deferred session to detail on %s", today)
            return None

        context = self.build_context(week_start(today), today)
        day = planned_day_from_event(event)
        designed = self.designer.design(self.brief_for(day, context))

        write = PlanReconciler(self.calendar).build_write(day, with_content=False)
        self.calendar.update_event(event.id, replace(write, workout=designed.workout, detail_deferred=False))
        logger.info("Detailed %s on %s (%s)", designed.workout.workout_title, today, event.id)
        return designed

    # ------------------------------------------------------------------
    # Context assembly
    # ------------------------------------------------------------------

    def build_context(self, start: date, today: date) -> PlanningContext:
        """Frozen PlanningContext for the week at *start*, measured on *today*."""
        state = self._athlete_state(today)
        samples = self.provider.wellness(today - timedelta(days=WELLNESS_WINDOW_DAYS), today)
        activities = self.provider.activities(today - timedelta(days=ZONE_HISTORY_DAYS), today)

        days_since = state.days_since_last_activity
        if days_since is None:
            days_since = days_since_last((a.date for a in activities), today)
        readiness = ReadinessModel(self.policy).assess(
            samples, feedback_from_activities(activities), days_since, as_of=today
        )

        lookahead = today + timedelta(days=GOAL_LOOKAHEAD_DAYS)
        goals = self.config.goals.merged(self.provider.goal_events(today, lookahead))
        phase = classify_phase(start, goals.primary_goal(start, self.config.fallback_goal))

        return PlanningContext(
            start_date=start,
            today=today,
            state=state,
            phase=phase,
            load_advice=advise_load(state, phase, readiness.wellness),
            readiness=readiness,
            goals=goals,
            sports=self.config.sports,
            variety=VarietyHistory.from_activities(activities, today),
            zone_progression=self._zone_progression(activities, today),
            existing_events=tuple(self.calendar.events_between(start, start + timedelta(days=PLAN_DAYS - 1))),
            closed_loop=self._closed_loop(start, today),
            ftp_watts=self.config.ftp_watts or state.eftp,
            threshold_pace_s_per_km=self._threshold_pace(state),
        )

    def brief_for(self, day: PlannedDay, context: PlanningContext) -> WorkoutBrief:
        constraints = list(context.closed_loop.notes)
        if context.load_advice.warning:
            constraints.insert(0, context.load_advice.warning)
        return build_brief(
            day,
            context.phase,
            context.readiness,
            ftp_watts=context.ftp_watts,
            threshold_pace_s_per_km=context.threshold_pace_s_per_km,
            recent_types=context.variety.recent_types(),
            constraints=constraints,
        )

    def plan_from_calendar(self, start: date) -> WeeklyPlan:
        """The week at *start* as the system events on the calendar describe it."""
        days: list[PlannedDay] = []
        events = self.calendar.events_between(start, start + timedelta(days=PLAN_DAYS - 1))
        for offset in range(PLAN_DAYS):
            day = start + timedelta(days=offset)
            system = _first_system_workout(events, day)
            if system is not None:
                days.append(planned_day_from_event(system))
            else:
                days.append(
                    PlannedDay(
                        date=day,
                        activity=ActivityKind.REST,
                        workout_type=WorkoutType.REST,
                        intensity=1,
                        source="calendar",
                    )
                )
        return WeeklyPlan(start_date=start, days=tuple(days))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _athlete_state(self, today: date) -> AthleteState:
        try:
            return self.provider.athlete_state(today)
        except DataUnavailable as exc:
            logger.warning("Fitness data unavailable (%s); planning from zero load", exc)
            return AthleteState(as_of=today, ctl=0.0, atl=0.0)

    def _zone_progression(self, activities: Sequence[ActualActivity], today: date) -> ZoneProgression:
        key = f"zones:{self.config.athlete_id}"
        return self.cache.get_or_compute(key, lambda: compute_zone_progression(activities, today))

    def _closed_loop(self, start: date, today: date) -> ClosedLoopContext:
        """What the week before *start* says about the next one."""
        end = min(start - timedelta(days=1), today)
        review_start = start - timedelta(days=PLAN_DAYS)
        if end < review_start:
            return ClosedLoopContext.empty()
        return build_closed_loop(self.review_week(review_start, end))

    def _threshold_pace(self, state: AthleteState) -> float | None:
        if self.config.threshold_pace_s_per_km:
            return self.config.threshold_pace_s_per_km
        pace = threshold_pace_from_efforts(self.config.run_best_efforts)
        if pace is None and state.critical_speed_m_per_s:
            pace = cs_to_pace_s_per_km(state.critical_speed_m_per_s)
        return pace

    def _run_content(self, context: PlanningContext) -> ContentProvider:
        """Pre-generated content for run days; rides are detailed on the day."""

        def content(day: PlannedDay) -> StructuredWorkout | None:
            if day.activity != ActivityKind.RUN:
                return None
            return self.designer.design(self.brief_for(day, context)).workout

        return content


def _first_system_workout(events: list[PlaceholderEvent], day: date) -> PlaceholderEvent | None:
    for event in events:
        if event.date == day and event.owner == EventOwner.SYSTEM and event.is_workout:
            return event
    return None
