"""PREFERENCE rule: every fourth week is a recovery week.

Reference:
    Pfitzinger & Douglas (2009). Advanced Marathoning: 3:1 loading
    cycles. Friel (2009). The Cyclist's Training Bible.

Thresholds:
    ISO week number divisible by 4 → volume x0.65, one hard session
    skipped when a break of >= 3 days starts within 14 days
    never applied during taper or transition
"""

from __future__ import annotations

from coach_engine.models.decision_trace import RuleResult
from coach_engine.models.enums import (
    BREAK_LOOKAHEAD_DAYS,
    BREAK_MIN_DAYS,
    HARD_INTENSITY,
    RECOVERY_WEEK_INTERVAL,
    RECOVERY_WEEK_VOLUME_FRACTION,
    PhaseName,
    Priority,
)
from coach_engine.planning.context import PlanningContext
from coach_engine.planning.draft import WeekDraft
from coach_engine.rules.base import PlanRule

RECOVERY_WEEK_MAX_HARD = 1
_LOADING_PHASES = (PhaseName.BASE, PhaseName.BUILD, PhaseName.SPECIALTY)


def is_recovery_week(context: PlanningContext) -> bool:
    return context.start_date.isocalendar()[1] % RECOVERY_WEEK_INTERVAL == 0


class RecoveryWeekRule(PlanRule):
    """Lightens every fourth loading week unless a break is coming anyway."""

    rule_id = "recovery_week"
    version = "1.0.0"
    priority = Priority.PREFERENCE
    order = 10

    def apply(self, draft: WeekDraft, context: PlanningContext) -> RuleResult | None:
        if context.phase_name not in _LOADING_PHASES or not is_recovery_week(context):
            return None

        brk = context.goals.next_break(context.start_date, BREAK_LOOKAHEAD_DAYS, BREAK_MIN_DAYS)
        if brk is not None:
            return self.fired(
                f"Recovery week skipped: {brk.name} ({brk.days} days) starts "
                f"{brk.start.isoformat()} and serves as recovery."
            )

        draft.volume_scale *= RECOVERY_WEEK_VOLUME_FRACTION
        hard = sorted(
            (d for d in draft.days if d.is_hard),
            key=lambda d: (not d.locked, not d.anchored, -context.forecast(d.date), d.date),
        )
        downgraded = []
        for day in hard[RECOVERY_WEEK_MAX_HARD:]:
            if day.cap(HARD_INTENSITY - 1, "Recovery week"):
                downgraded.append(f"{day.date:%a}")

        week = context.start_date.isocalendar()[1]
        detail = f"; eased {', '.join(downgraded)}" if downgraded else ""
        return self.fired(
            f"ISO week {week} is a recovery week: volume x{RECOVERY_WEEK_VOLUME_FRACTION:.2f}{detail}.",
            f"Recovery week: at most {RECOVERY_WEEK_MAX_HARD} hard session",
        )
