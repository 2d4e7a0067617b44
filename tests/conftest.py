"""Shared test fixtures: athletes, goals, configs and planning contexts."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Callable

import pytest

from coach_engine.config import CoachConfig
from coach_engine.models.athlete_state import AthleteState
from coach_engine.models.enums import GoalPriority
from coach_engine.models.goal import Goal, TrainingBreak
from coach_engine.planning.context import PlanningContext
from tests.factories import MONDAY, make_context


@pytest.fixture
def monday() -> date:
    return MONDAY


@pytest.fixture
def rested_athlete() -> AthleteState:
    """CTL 60, fresh (TSB +5), FTP 250 W."""
    return AthleteState(
        as_of=MONDAY,
        ctl=60.0,
        atl=55.0,
        ramp_rate=2.0,
        eftp=250.0,
        weight_kg=72.0,
        days_since_last_activity=1,
    )


@pytest.fixture
def fatigued_athlete() -> AthleteState:
    """CTL 60, deeply fatigued (TSB -22)."""
    return AthleteState(as_of=MONDAY, ctl=60.0, atl=82.0, eftp=250.0, days_since_last_activity=1)


@pytest.fixture
def a_race() -> Goal:
    """A-race ten weeks after MONDAY."""
    return Goal(name="Gran Fondo", date=MONDAY + timedelta(weeks=10), priority=GoalPriority.A)


@pytest.fixture
def holiday() -> TrainingBreak:
    """Week-long break starting the Monday after MONDAY."""
    return TrainingBreak(start=MONDAY + timedelta(days=7), end=MONDAY + timedelta(days=13), name="Holiday")


@pytest.fixture
def coach_config() -> CoachConfig:
    return CoachConfig(athlete_id="athlete-1", ftp_watts=250.0, threshold_pace_s_per_km=300.0)


@pytest.fixture
def context_factory() -> Callable[..., PlanningContext]:
    return make_context
