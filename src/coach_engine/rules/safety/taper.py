"""SAFETY rule: taper volume and intensity into the primary goal.

Keep intensity, cut volume. One short quality session 3-4 days out keeps
the athlete sharp; nothing hard inside the last 48 hours.

Reference:
    Bosquet et al. (2007). Effects of tapering on performance: a
    meta-analysis. Med Sci Sports Exerc 39(8):1358-1365.
    Mujika (2010). Intense training: the key to optimal performance
    before and during the taper. Scand J Med Sci Sports 20(s2):24-31.

Thresholds:
    PEAK       → session durations <= 75% of default
    RACE_WEEK  → session durations <= 60% of default, one hard session max
    1-2 days out → no hard session
    3-4 days out → one short threshold session
"""

from __future__ import annotations

from datetime import timedelta

from coach_engine.models.decision_trace import RuleResult
from coach_engine.models.enums import (
    HARD_INTENSITY,
    PEAK_VOLUME_FRACTION,
    RACE_WEEK_VOLUME_FRACTION,
    TAPER_HARD_SESSION_DAYS_OUT,
    WORKOUT_DURATION_MIN,
    PhaseName,
    Priority,
    WorkoutType,
)
from coach_engine.planning.context import PlanningContext
from coach_engine.planning.draft import DraftDay, WeekDraft, round_duration
from coach_engine.rules.base import PlanRule

_MIN_TAPER_SESSION_MIN = 20.0


class TaperRule(PlanRule):
    """Cuts volume and places one sharpening session ahead of the goal race."""

    rule_id = "taper"
    version = "1.0.0"
    priority = Priority.SAFETY
    order = 30

    def apply(self, draft: WeekDraft, context: PlanningContext) -> RuleResult | None:
        phase = context.phase
        if not phase.is_taper or phase.goal is None:
            return None
        race_day = phase.goal.date
        fraction = RACE_WEEK_VOLUME_FRACTION if phase.phase == PhaseName.RACE_WEEK else PEAK_VOLUME_FRACTION

        shortened = 0
        for day in draft.flexible:
            limit = round_duration(max(WORKOUT_DURATION_MIN[day.workout_type][0] * fraction, _MIN_TAPER_SESSION_MIN))
            if day.duration_min > limit:
                day.duration_min = limit
                shortened += 1

        downgraded: list[str] = []
        for day in draft.days:
            days_out = (race_day - day.date).days
            if 0 < days_out < min(TAPER_HARD_SESSION_DAYS_OUT) and day.cap(HARD_INTENSITY - 2, "Taper: last 48h easy"):
                downgraded.append(f"{day.date:%a}")

        sharpener = self._place_sharpener(draft, context)

        if phase.phase == PhaseName.RACE_WEEK:
            for day in draft.days:
                if day.is_hard and day is not sharpener and not day.locked and day.date != race_day:
                    day.cap(HARD_INTENSITY - 1, "Race week: one hard session")
                    downgraded.append(f"{day.date:%a}")

        parts = [f"{phase.phase_name} for {phase.goal.name} ({race_day.isoformat()})"]
        parts.append(f"{shortened} session(s) cut to {fraction:.0%} of normal length")
        if downgraded:
            parts.append(f"downgraded {', '.join(downgraded)}")
        if sharpener is not None:
            parts.append(f"sharpening session {sharpener.date:%a}")
        constraints = [
            f"Session length capped at {fraction:.0%} of normal",
            "No hard session in the last 48 hours before the race",
        ]
        if phase.phase == PhaseName.RACE_WEEK:
            constraints.append("At most one hard session in race week")
        return self.fired("; ".join(parts) + ".", *constraints)

    def _place_sharpener(self, draft: WeekDraft, context: PlanningContext) -> DraftDay | None:
        """Anchor one short threshold session 4 (else 3) days before the race."""
        race_day = context.phase.goal.date
        candidates = []
        for days_out in sorted(TAPER_HARD_SESSION_DAYS_OUT, reverse=True):
            index = draft.index_of(race_day - timedelta(days=days_out))
            if index is None:
                continue
            day = draft.days[index]
            if day.is_hard:
                return day
            candidates.append(index)

        for index in candidates:
            day = draft.days[index]
            if not day.flexible or not day.allows(WorkoutType.THRESHOLD):
                continue
            if not draft.fits_hard_spacing(index, HARD_INTENSITY):
                continue
            day.set_workout(WorkoutType.THRESHOLD, "Taper sharpener")
            fraction = (
                RACE_WEEK_VOLUME_FRACTION if context.phase.phase == PhaseName.RACE_WEEK else PEAK_VOLUME_FRACTION
            )
            day.duration_min = round_duration(WORKOUT_DURATION_MIN[WorkoutType.THRESHOLD][0] * fraction)
            day.anchored = True
            return day
        return None
