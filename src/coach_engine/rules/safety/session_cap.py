"""SAFETY rule: weekly session count may grow by at most one per week.

Reference:
    Gabbett (2016). The training-injury prevention paradox: should athletes
    be training smarter and harder? Br J Sports Med 50(5):273-280.
    Large week-to-week jumps in exposure drive injury risk.

Thresholds:
    sessions this week <= sessions completed last week + 1
"""

from __future__ import annotations

from coach_engine.models.decision_trace import RuleResult
from coach_engine.models.enums import Priority, WorkoutType
from coach_engine.planning.context import PlanningContext
from coach_engine.planning.draft import DraftDay, WeekDraft
from coach_engine.rules.base import PlanRule


def _drop_key(day: DraftDay) -> tuple[bool, bool, int, float]:
    # Least valuable first: un-anchored recovery spins, then the easiest and shortest
    return (day.anchored, day.workout_type != WorkoutType.RECOVERY, day.intensity, day.duration_min)


class SessionCapRule(PlanRule):
    """Turns the least valuable sessions into rest days when the week grows too fast."""

    rule_id = "session_cap"
    version = "1.0.0"
    priority = Priority.SAFETY
    required_data = ["last_week_completed"]
    order = 10

    def apply(self, draft: WeekDraft, context: PlanningContext) -> RuleResult | None:
        cap = (context.last_week_completed or 0) + 1
        excess = len(draft.sessions) - cap
        if excess <= 0:
            return None

        dropped: list[str] = []
        for day in sorted(draft.flexible, key=_drop_key)[:excess]:
            dropped.append(f"{day.date:%a} {day.workout_type.label}")
            day.make_rest(f"Session cap {cap}")

        return self.fired(
            f"Last week {context.last_week_completed} sessions completed; "
            f"capped at {cap}, dropped {', '.join(dropped) or 'nothing'}.",
            f"At most {cap} sessions this week",
        )
