"""OPTIMIZATION rule: put hard sessions where readiness is forecast highest.

When today's readiness is reduced, the deficit is forecast to recover
over the coming days. A hard session on a low-forecast day is swapped
with an easier flexible day whose forecast is clearly better, as long as
hard-day spacing still holds.
"""

from __future__ import annotations

from coach_engine.models.decision_trace import RuleResult
from coach_engine.models.enums import FORECAST_SWAP_MARGIN, HARD_INTENSITY, Priority
from coach_engine.planning.context import PlanningContext
from coach_engine.planning.draft import DraftDay, WeekDraft
from coach_engine.rules.base import PlanRule

_SWAPPED_FIELDS = ("activity", "workout_type", "intensity", "duration_min", "focus", "sport_fixed")


def swap_sessions(a: DraftDay, b: DraftDay) -> None:
    for name in _SWAPPED_FIELDS:
        value_a, value_b = getattr(a, name), getattr(b, name)
        setattr(a, name, value_b)
        setattr(b, name, value_a)


def spacing_violations(draft: WeekDraft) -> int:
    count = 0
    for i in range(1, len(draft.days)):
        earlier, later = draft.days[i - 1], draft.days[i]
        if earlier.is_hard and later.is_hard:
            count += 1
        elif not earlier.is_rest and earlier.intensity == 5 and not later.is_rest and later.intensity > 2:
            count += 1
    return count


class ReadinessBiasRule(PlanRule):
    """Moves hard sessions off days with a poor readiness forecast."""

    rule_id = "readiness_bias"
    version = "1.0.0"
    priority = Priority.OPTIMIZATION
    required_data = ["readiness"]
    order = 20

    def apply(self, draft: WeekDraft, context: PlanningContext) -> RuleResult | None:
        if context.readiness.intensity_modifier >= 1.0:
            return None

        moves: list[str] = []
        baseline = spacing_violations(draft)
        hard_days = sorted(
            (d for d in draft.flexible if d.is_hard and not d.anchored),
            key=lambda d: context.forecast(d.date),
        )
        for hard in hard_days:
            hard_forecast = context.forecast(hard.date)
            candidates = sorted(
                (
                    d
                    for d in draft.flexible
                    if not d.anchored
                    and d.intensity < HARD_INTENSITY
                    and d.allows(hard.workout_type)
                    and context.forecast(d.date) > hard_forecast + FORECAST_SWAP_MARGIN
                ),
                key=lambda d: (-context.forecast(d.date), d.date),
            )
            for easy in candidates:
                swap_sessions(hard, easy)
                if spacing_violations(draft) <= baseline:
                    moves.append(f"{hard.date:%a} <-> {easy.date:%a}")
                    easy.notes.append(f"Moved from {hard.date:%a}: readiness forecast higher")
                    break
                swap_sessions(hard, easy)

        if not moves:
            return None
        return self.fired(
            f"Readiness {context.readiness.intensity_modifier:.2f} today; hard sessions moved later "
            f"({', '.join(moves)}).",
            "Hard sessions on the best-forecast days",
        )
