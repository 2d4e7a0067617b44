"""Phase classification: goal date -> training phase band.

Bands by weeks out from the primary goal:
    < 0   Transition
    <= 1  Race Week (Taper)
    <= 3  Peak/Taper
    <= 8  Specialty (High Build)
    <= 16 Build Phase
    else  Base Building

References:
    Friel (2009), The Cyclist's Training Bible, 4th ed.
    Mujika & Padilla (2003), Scientific bases for precompetition tapering.
"""

from __future__ import annotations

import math
from datetime import date

from coach_engine.models.enums import (
    BUILD_MAX_WEEKS,
    PEAK_MAX_WEEKS,
    RACE_WEEK_MAX_WEEKS,
    SPECIALTY_MAX_WEEKS,
    PhaseName,
)
from coach_engine.models.goal import Goal
from coach_engine.models.phase import TrainingPhase

PHASE_FOCUS: dict[PhaseName, str] = {
    PhaseName.TRANSITION: "Active recovery and unstructured riding after the goal event.",
    PhaseName.RACE_WEEK: "Freshness: short openers, no new fitness, arrive rested.",
    PhaseName.PEAK: "Sharpen with short race-pace efforts while volume drops.",
    PhaseName.SPECIALTY: "Race-specific intensity: VO2max and threshold at event demands.",
    PhaseName.BUILD: "Raise threshold: sweet spot and threshold blocks on an aerobic base.",
    PhaseName.BASE: "Aerobic foundation: endurance volume with light tempo.",
}

# Bands when there is no goal at all
_NO_GOAL_WEEKS_OUT = BUILD_MAX_WEEKS + 1


def weeks_out(today: date, target: date) -> int:
    """ceil((target - today) / 7 days). Negative once the goal has passed."""
    return math.ceil((target - today).days / 7)


def phase_for_weeks_out(weeks: int) -> PhaseName:
    """Phase band for a given number of weeks out."""
    if weeks < 0:
        return PhaseName.TRANSITION
    if weeks <= RACE_WEEK_MAX_WEEKS:
        return PhaseName.RACE_WEEK
    if weeks <= PEAK_MAX_WEEKS:
        return PhaseName.PEAK
    if weeks <= SPECIALTY_MAX_WEEKS:
        return PhaseName.SPECIALTY
    if weeks <= BUILD_MAX_WEEKS:
        return PhaseName.BUILD
    return PhaseName.BASE


def classify_phase(today: date, goal: Goal | None) -> TrainingPhase:
    """Training phase for *today* relative to *goal*.

    Without a goal the athlete is treated as being in base building.
    """
    weeks = weeks_out(today, goal.date) if goal is not None else _NO_GOAL_WEEKS_OUT
    phase = phase_for_weeks_out(weeks)
    return TrainingPhase(phase=phase, weeks_out=weeks, focus=PHASE_FOCUS[phase], goal=goal)
