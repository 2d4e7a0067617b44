"""PREFERENCE rule: rotate workout types the athlete has done a lot lately.

A type done twice or more in the last 14 days is swapped for a
same-intensity alternative when one exists.
"""

from __future__ import annotations

from coach_engine.models.decision_trace import RuleResult
from coach_engine.models.enums import WORKOUT_ALTERNATIVES, WORKOUT_INTENSITY, Priority
from coach_engine.planning.context import PlanningContext
from coach_engine.planning.draft import WeekDraft
from coach_engine.rules.base import PlanRule


class VarietyRule(PlanRule):
    """Swaps overused workout types for fresh ones of the same intensity."""

    rule_id = "variety"
    version = "1.0.0"
    priority = Priority.PREFERENCE
    required_data = ["variety"]
    order = 20

    def apply(self, draft: WeekDraft, context: PlanningContext) -> RuleResult | None:
        overused = context.variety.overused()
        if not overused:
            return None

        swaps: list[str] = []
        for day in draft.flexible:
            if day.workout_type not in overused:
                continue
            fresh = [
                t
                for t in WORKOUT_ALTERNATIVES.get(day.workout_type, ())
                if t not in overused and WORKOUT_INTENSITY[t] == day.intensity
            ]
            if not fresh:
                continue
            before = day.workout_type
            day.set_workout(fresh[0], f"{before.label} done {context.variety.count(before)}x recently")
            swaps.append(f"{day.date:%a} {before.label} -> {fresh[0].label}")

        if not swaps:
            return None
        return self.fired(
            f"Rotated overused types: {'; '.join(swaps)}.",
            *(f"Vary away from {t.label}" for t in sorted(overused)),
        )
