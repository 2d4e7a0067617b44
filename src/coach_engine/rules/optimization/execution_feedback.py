"""OPTIMIZATION rule: learn from how last week was executed.

Workout types the athlete keeps skipping are replaced by an alternative
of the same intensity (or one level easier). Consistent over-delivery
earns a small volume increase.
"""

from __future__ import annotations

from coach_engine.models.decision_trace import RuleResult
from coach_engine.models.enums import (
    WORKOUT_ALTERNATIVES,
    WORKOUT_FOR_INTENSITY,
    WORKOUT_INTENSITY,
    Priority,
    WorkoutType,
)
from coach_engine.planning.context import PlanningContext
from coach_engine.planning.draft import DraftDay, WeekDraft
from coach_engine.rules.base import PlanRule


def _replacement(day: DraftDay, avoid: frozenset[WorkoutType]) -> WorkoutType:
    for alternative in WORKOUT_ALTERNATIVES.get(day.workout_type, ()):
        if alternative not in avoid and WORKOUT_INTENSITY[alternative] == day.intensity:
            return alternative
    easier = WORKOUT_FOR_INTENSITY[max(1, day.intensity - 1)]
    return easier if easier not in avoid else WorkoutType.RECOVERY


class ExecutionFeedbackRule(PlanRule):
    """Down-weights skipped workout types and rewards over-delivery."""

    rule_id = "execution_feedback"
    version = "1.0.0"
    priority = Priority.OPTIMIZATION
    required_data = ["closed_loop"]
    order = 40

    def apply(self, draft: WeekDraft, context: PlanningContext) -> RuleResult | None:
        loop = context.closed_loop
        avoid = loop.downweighted_types
        changes: list[str] = []

        for day in draft.flexible:
            if day.anchored or day.workout_type not in avoid:
                continue
            before = day.workout_type
            day.set_workout(_replacement(day, avoid), f"{before.label} often skipped")
            changes.append(f"{day.date:%a} {before.label} -> {day.workout_type.label}")

        if loop.volume_confidence != 1.0:
            draft.volume_scale *= loop.volume_confidence
            changes.append(f"volume x{loop.volume_confidence:.2f}")

        if not changes:
            return None
        constraints = [f"Avoid {t.label} for now" for t in sorted(avoid)]
        return self.fired(f"Last week's execution: {'; '.join(changes)}.", *constraints)
