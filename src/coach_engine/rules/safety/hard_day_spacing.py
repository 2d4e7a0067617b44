"""SAFETY rule: no back-to-back hard days.

Reference:
    Seiler (2010). What is best practice for training intensity and
    duration distribution in endurance athletes? Int J Sports Physiol
    Perform 5(3):276-291. Hard sessions need 48h to be absorbed.

Thresholds:
    intensity >= 4 on two consecutive days → downgrade the later day
    the day after an intensity-5 session    → intensity <= 2
    locked or anchored days are kept; their neighbour gives way
"""

from __future__ import annotations

from coach_engine.models.decision_trace import RuleResult
from coach_engine.models.enums import HARD_INTENSITY, Priority
from coach_engine.planning.context import PlanningContext
from coach_engine.planning.draft import DraftDay, WeekDraft
from coach_engine.rules.base import PlanRule

EASY_AFTER_HARD = 2


def _yield_order(earlier: DraftDay, later: DraftDay) -> list[DraftDay]:
    """Which of the two days should give way, most preferred first."""
    order = [later, earlier]
    firm = [d for d in order if d.anchored]
    loose = [d for d in order if not d.anchored]
    return [d for d in loose + firm if d.flexible]


class HardDaySpacingRule(PlanRule):
    """Keeps intensity sessions separated by an easy day."""

    rule_id = "hard_day_spacing"
    version = "1.0.0"
    priority = Priority.SAFETY
    order = 90

    def apply(self, draft: WeekDraft, context: PlanningContext) -> RuleResult | None:
        changes: list[str] = []
        for i in range(1, len(draft.days)):
            earlier, later = draft.days[i - 1], draft.days[i]

            if earlier.is_hard and later.is_hard:
                for day in _yield_order(earlier, later):
                    if day.cap(EASY_AFTER_HARD, "Hard-day spacing"):
                        changes.append(f"{day.date:%a}")
                        break

            if not earlier.is_rest and earlier.intensity == 5 and not later.is_rest and later.intensity > EASY_AFTER_HARD:
                if later.flexible and later.cap(EASY_AFTER_HARD, "Easy after max effort"):
                    changes.append(f"{later.date:%a}")
                elif earlier.flexible and earlier.cap(HARD_INTENSITY, "Eased before a fixed session"):
                    changes.append(f"{earlier.date:%a}")

        if not changes:
            return None
        return self.fired(
            f"Consecutive hard days split; downgraded {', '.join(changes)}.",
            "No two hard days in a row",
            "Easy day after every max-effort session",
        )
