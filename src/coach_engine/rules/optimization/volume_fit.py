"""OPTIMIZATION rule: fit session durations to the weekly TSS target.

Runs last in its tier, once the sessions and their types are settled.
Locked days count toward the total at their own load; only flexible
session durations move, each within its archetype's bounds.
"""

from __future__ import annotations

from coach_engine.math.training_load import estimate_workout_tss
from coach_engine.models.decision_trace import RuleResult
from coach_engine.models.enums import WEEKLY_TSS_TOLERANCE, Priority
from coach_engine.planning.context import PlanningContext
from coach_engine.planning.draft import DraftDay, WeekDraft, clamp_duration, duration_bounds
from coach_engine.rules.base import PlanRule

_FIT_PASSES = 3
# Stop once within this fraction of the target
_FIT_TOLERANCE = WEEKLY_TSS_TOLERANCE / 2


def _tss(days: list[DraftDay]) -> float:
    return sum(estimate_workout_tss(d.workout_type, d.duration_min) for d in days)


class VolumeFitRule(PlanRule):
    """Scales flexible durations toward the weekly TSS target."""

    rule_id = "volume_fit"
    version = "1.0.0"
    priority = Priority.OPTIMIZATION
    required_data = ["load_advice"]
    order = 90

    def apply(self, draft: WeekDraft, context: PlanningContext) -> RuleResult | None:
        target = draft.target_tss * draft.volume_scale
        flexible = draft.flexible
        if target <= 0 or not flexible:
            return None
        fixed = sum(d.estimated_tss for d in draft.days if not d.flexible)
        before = draft.total_tss

        for _ in range(_FIT_PASSES):
            current = _tss(flexible)
            wanted = target - fixed
            if current <= 0 or abs(wanted - current) <= target * _FIT_TOLERANCE:
                break
            adjustable = [d for d in flexible if self._can_move(d, wanted > current)]
            if not adjustable:
                break
            movable_tss = _tss(adjustable)
            factor = max(0.0, (wanted - (current - movable_tss)) / movable_tss)
            for day in adjustable:
                day.duration_min = clamp_duration(day.workout_type, day.duration_min * factor, day.activity)

        after = draft.total_tss
        if round(after) == round(before):
            return None
        return self.fired(
            f"Weekly TSS {before:.0f} -> {after:.0f} (target {target:.0f}, "
            f"scale x{draft.volume_scale:.2f}).",
            f"Weekly load about {target:.0f} TSS",
        )

    @staticmethod
    def _can_move(day: DraftDay, up: bool) -> bool:
        low, high = duration_bounds(day.workout_type, day.activity)
        return day.duration_min < high if up else day.duration_min > low
