"""RECOVERY rule: today's readiness gates the next days' intensity.

Reference:
    Plews et al. (2013). Training adaptation and heart rate variability
    in elite endurance athletes. Sports Med 43(9):773-781.
    Kiviniemi et al. (2007). Endurance training guided individually by
    daily HRV measurements. Eur J Appl Physiol 101(6):743-751.

Thresholds:
    Red     → today and tomorrow capped at intensity 2
    Yellow  → a hard session today drops one intensity level
    EASIER  → the hardest flexible session drops one intensity level
"""

from __future__ import annotations

from coach_engine.models.decision_trace import RuleResult
from coach_engine.models.enums import Priority, Recommendation, RecoveryStatus
from coach_engine.planning.context import PlanningContext
from coach_engine.planning.draft import WeekDraft
from coach_engine.rules.base import PlanRule

RED_MAX_INTENSITY = 2
RED_PROTECTED_DAYS = 2


class ReadinessGateRule(PlanRule):
    """Downgrades near-term sessions when recovery or feedback says so."""

    rule_id = "readiness_gate"
    version = "1.0.0"
    priority = Priority.RECOVERY
    required_data = ["readiness"]

    def apply(self, draft: WeekDraft, context: PlanningContext) -> RuleResult | None:
        readiness = context.readiness
        status = readiness.status
        changes: list[str] = []
        constraints: list[str] = []

        if status == RecoveryStatus.RED:
            for day in draft.days:
                if 0 <= context.day_offset(day.date) < RED_PROTECTED_DAYS:
                    if day.cap(RED_MAX_INTENSITY, "Red recovery"):
                        changes.append(f"{day.date:%a}")
            constraints.append("Red recovery: easy only today and tomorrow")
        elif status == RecoveryStatus.YELLOW:
            for day in draft.days:
                if context.day_offset(day.date) == 0 and day.is_hard:
                    if day.cap(day.intensity - 1, "Yellow recovery"):
                        changes.append(f"{day.date:%a}")
            constraints.append("Yellow recovery: no full-gas session today")

        if readiness.signal.recommendation == Recommendation.EASIER:
            candidates = [
                d for d in draft.flexible if not d.anchored and d.intensity >= 3 and context.day_offset(d.date) >= 0
            ]
            if candidates:
                hardest = max(candidates, key=lambda d: (d.intensity, -d.date.toordinal()))
                if hardest.cap(hardest.intensity - 1, "Recent sessions felt hard"):
                    changes.append(f"{hardest.date:%a}")
            constraints.append("Recent feedback: ease the hardest session")

        if not constraints:
            return None
        detail = f"downgraded {', '.join(changes)}" if changes else "no session needed changing"
        return self.fired(
            f"Readiness {status.label}, modifier {readiness.intensity_modifier:.2f}: {detail}.",
            *constraints,
        )
