"""GarminFitnessProvider — Garmin Connect as the engine's FitnessProvider.

CTL / ATL come from the daily training loads of the last
HISTORY_DAYS days through the pandas EWMA in coach_engine.math; Garmin's
own training status is not used. Failed leaf fetches log a warning and
return empty results.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta

from coach_engine.math.training_load import (
    calculate_fitness,
    calculate_ramp_rate,
    daily_load_series,
    days_since_last,
)
from coach_engine.models.athlete_state import AthleteState
from coach_engine.models.enums import ActivityKind
from coach_engine.models.execution import ActualActivity
from coach_engine.models.goal import GoalCalendar
from coach_engine.models.wellness import WellnessSample
from coach_engine.provider import FitnessProvider

from garmin_client.calendar_mapper import goal_from_item
from garmin_client.client import GarminClient
from garmin_client.exceptions import GarminClientError
from garmin_client.metrics_mapper import map_activity, map_threshold, map_weight_kg, map_wellness

logger = logging.getLogger(__name__)

# Long enough for the 42-day CTL constant to settle
HISTORY_DAYS = 120


class GarminFitnessProvider(FitnessProvider):
    def __init__(self, client: GarminClient) -> None:
        self.client = client

    def athlete_state(self, as_of: date) -> AthleteState:
        start = as_of - timedelta(days=HISTORY_DAYS)
        activities = self.activities(start, as_of)
        loads = daily_load_series(((a.date, a.training_load) for a in activities), start, as_of)
        ctl, atl = calculate_fitness(loads)

        profile = self.client.pull_profile()
        ftp, threshold_speed = map_threshold(profile)
        trained = [a.date for a in activities if a.activity in (ActivityKind.RIDE, ActivityKind.RUN)]

        state = AthleteState(
            as_of=as_of,
            ctl=round(ctl, 1),
            atl=round(atl, 1),
            ramp_rate=round(calculate_ramp_rate(loads), 2),
            eftp=ftp,
            weight_kg=map_weight_kg(profile),
            critical_speed_m_per_s=threshold_speed,
            days_since_last_activity=days_since_last(trained, as_of),
        )
        logger.info(
            "Athlete state %s: CTL %.1f, ATL %.1f, TSB %.1f, %d activities",
            as_of,
            state.ctl,
            state.atl,
            state.tsb,
            len(activities),
        )
        return state

    def wellness(self, start: date, end: date) -> tuple[WellnessSample, ...]:
        samples: list[WellnessSample] = []
        day = start
        while day <= end:
            sample = map_wellness(self.client.pull_wellness(day), day)
            if sample.has_signal:
                samples.append(sample)
            day += timedelta(days=1)
        if not samples:
            logger.warning("No wellness data between %s and %s", start, end)
        return tuple(samples)

    def activities(self, start: date, end: date) -> tuple[ActualActivity, ...]:
        try:
            raw = self.client.get_activities(start, end)
        except GarminClientError as exc:
            logger.warning("Failed to pull activities %s..%s: %s", start, end, exc)
            return ()
        mapped = [a for a in (map_activity(r) for r in raw) if a is not None]
        return tuple(sorted(mapped, key=lambda a: a.date))

    def goal_events(self, start: date, end: date) -> GoalCalendar:
        try:
            items = self.client.calendar_items(start, end)
        except GarminClientError as exc:
            logger.warning("Failed to read races from the Garmin calendar: %s", exc)
            return GoalCalendar()
        goals = [g for g in (goal_from_item(i) for i in items) if g is not None]
        return GoalCalendar.from_goals(*goals)
