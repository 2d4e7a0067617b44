"""OPTIMIZATION rule: train a little harder right before a planned break.

A multi-day break (holiday, travel) is enforced recovery, so the week
leading into it can carry extra volume and one extra quality session.

Reference:
    Issurin (2010). New horizons for the methodology and physiology of
    training periodization. Sports Med 40(3):189-206 (overreaching
    followed by regeneration).

Thresholds:
    break >= 3 days starting inside this week or the day after it
    → weekly volume x1.10 and one endurance day upgraded to sweet spot
"""

from __future__ import annotations

from datetime import timedelta

from coach_engine.models.decision_trace import RuleResult
from coach_engine.models.enums import (
    BREAK_MIN_DAYS,
    PRE_BREAK_VOLUME_BOOST,
    WORKOUT_INTENSITY,
    Priority,
    WorkoutType,
)
from coach_engine.planning.context import PlanningContext
from coach_engine.planning.draft import WeekDraft
from coach_engine.rules.base import PlanRule

PUSH_WORKOUT = WorkoutType.SWEET_SPOT


class PreBreakPushRule(PlanRule):
    """Adds volume and one quality session ahead of a multi-day break."""

    rule_id = "pre_break_push"
    version = "1.0.0"
    priority = Priority.OPTIMIZATION
    order = 30

    def apply(self, draft: WeekDraft, context: PlanningContext) -> RuleResult | None:
        first = context.start_date + timedelta(days=1)
        window = (context.end_date + timedelta(days=1) - first).days
        brk = context.goals.next_break(first, window, BREAK_MIN_DAYS)
        if brk is None or context.phase.is_taper:
            return None

        draft.volume_scale *= PRE_BREAK_VOLUME_BOOST
        upgraded = None
        intensity = WORKOUT_INTENSITY[PUSH_WORKOUT]
        candidates = [
            i
            for i, d in enumerate(draft.days)
            if d.flexible
            and not d.anchored
            and d.date < brk.start
            and d.workout_type == WorkoutType.ENDURANCE
            and d.allows(PUSH_WORKOUT)
            and draft.fits_hard_spacing(i, intensity)
        ]
        if candidates:
            best = max(candidates, key=lambda i: (context.forecast(draft.days[i].date), i))
            upgraded = draft.days[best]
            upgraded.set_workout(PUSH_WORKOUT, f"Push before {brk.name}")

        detail = f"; {upgraded.date:%A} upgraded to {PUSH_WORKOUT.label}" if upgraded else ""
        return self.fired(
            f"{brk.name} ({brk.days} days) starts {brk.start.isoformat()}: "
            f"volume x{PRE_BREAK_VOLUME_BOOST:.2f}{detail}.",
            f"Load up before {brk.name}",
        )
