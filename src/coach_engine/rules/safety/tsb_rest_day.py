"""SAFETY rule: a deeply fatigued athlete always gets a full rest day.

Reference:
    Coggan & Allen (2010). Training and Racing with a Power Meter:
    TSB below -10 marks accumulated fatigue worth absorbing.

Thresholds:
    TSB < -10 → at least one rest day in the week
"""

from __future__ import annotations

from coach_engine.models.decision_trace import RuleResult
from coach_engine.models.enums import TSB_REST_DAY_THRESHOLD, Priority
from coach_engine.planning.context import PlanningContext
from coach_engine.planning.draft import WeekDraft
from coach_engine.rules.base import PlanRule


class TSBRestDayRule(PlanRule):
    """Inserts a rest day when form is negative enough and the week has none."""

    rule_id = "tsb_rest_day"
    version = "1.0.0"
    priority = Priority.SAFETY
    required_data = ["state"]
    order = 40

    def apply(self, draft: WeekDraft, context: PlanningContext) -> RuleResult | None:
        tsb = context.state.tsb
        if tsb >= TSB_REST_DAY_THRESHOLD:
            return None
        if any(d.is_rest for d in draft.days):
            return None

        candidates = [d for d in draft.flexible if not d.anchored] or draft.flexible
        if not candidates:
            return None
        # Easiest session on the day readiness is forecast lowest
        chosen = min(candidates, key=lambda d: (d.intensity, context.forecast(d.date), d.date))
        chosen.make_rest(f"TSB {tsb:.0f}")
        return self.fired(
            f"TSB {tsb:.1f} below {TSB_REST_DAY_THRESHOLD}; {chosen.date:%A} made a rest day.",
            "At least one full rest day",
        )
