"""Mid-week trigger and adaptation.

Three independent families are checked against the days still to come:

    execution  - a missed intensity session, a TSS deficit over 100, or
                 adherence under 70 with at least 2 sessions planned so far
    readiness  - Red with 1+ intensity day left, Yellow with 2+,
                 TSB < -30 with 1+, TSB < -20 with 2+
    taper      - in a taper with more than one intensity day left, or the
                 taper starting inside the week with intensity still planned
                 on or after its first day

A readiness or taper trigger, or a missed intensity session, makes the
re-plan HIGH priority; anything else that fires is MEDIUM.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, timedelta

from coach_engine.models.enums import (
    MIDWEEK_ADHERENCE_MIN,
    MIDWEEK_MIN_PLANNED_SESSIONS,
    MIDWEEK_TSB_ANY,
    MIDWEEK_TSB_MULTI,
    MIDWEEK_TSS_DEFICIT,
    PEAK_MAX_WEEKS,
    ExecutionStatus,
    RecoveryStatus,
    TriggerPriority,
)
from coach_engine.models.execution import AdherenceResult, ExecutionRecord, MidWeekTrigger
from coach_engine.models.phase import TrainingPhase
from coach_engine.models.weekly_plan import PlannedDay, PlanRevision, WeeklyPlan
from coach_engine.planning.context import PlanningContext
from coach_engine.planning.generator import WeeklyPlanGenerator
from coach_engine.reconcile.reconciler import PlanReconciler, ReconcileReport

logger = logging.getLogger(__name__)

FAMILY_EXECUTION = "execution"
FAMILY_READINESS = "readiness"
FAMILY_TAPER = "taper"


def taper_start(goal_date: date) -> date:
    """First day the goal is within the peak band."""
    return goal_date - timedelta(days=PEAK_MAX_WEEKS * 7)


def evaluate_mid_week(
    plan: WeeklyPlan,
    records: Sequence[ExecutionRecord],
    adherence: AdherenceResult,
    today: date,
    recovery_status: RecoveryStatus,
    tsb: float,
    phase: TrainingPhase,
) -> MidWeekTrigger:
    """Decide whether the rest of *plan* needs re-planning.

    Args:
        plan: The week in progress.
        records: Execution records for the elapsed days of the week.
        adherence: Adherence over the same elapsed days.
        today: First day that can still change.
        recovery_status: Today's recovery classification.
        tsb: Current training stress balance.
        phase: Today's training phase.
    """
    remaining = [d for d in plan.remaining(today) if not d.locked]
    hard_left = sum(1 for d in remaining if d.is_hard)
    reasons: list[str] = []
    families: list[str] = []
    missed_intensity = False

    # Execution
    execution: list[str] = []
    missed = [r for r in records if r.status == ExecutionStatus.SKIPPED and r.planned.is_hard]
    if missed:
        missed_intensity = True
        names = ", ".join(f"{r.planned.workout_type.label} ({r.date})" for r in missed)
        execution.append(f"Missed intensity session(s): {names}")
    planned_tss = sum(r.planned.estimated_tss for r in records if r.planned is not None)
    actual_tss = sum(r.actual.training_load for r in records if r.actual is not None)
    if planned_tss - actual_tss > MIDWEEK_TSS_DEFICIT:
        execution.append(f"TSS deficit of {planned_tss - actual_tss:.0f} so far this week")
    if (
        adherence.has_data
        and adherence.planned_sessions >= MIDWEEK_MIN_PLANNED_SESSIONS
        and adherence.score < MIDWEEK_ADHERENCE_MIN
    ):
        execution.append(f"Adherence {adherence.score:.0f} across {adherence.planned_sessions} sessions")
    if execution:
        families.append(FAMILY_EXECUTION)
        reasons.extend(execution)

    # Readiness
    readiness: list[str] = []
    if recovery_status == RecoveryStatus.RED and hard_left >= 1:
        readiness.append(f"Recovery Red with {hard_left} intensity day(s) left")
    elif recovery_status == RecoveryStatus.YELLOW and hard_left >= 2:
        readiness.append(f"Recovery Yellow with {hard_left} intensity days left")
    if tsb < MIDWEEK_TSB_ANY and hard_left >= 1:
        readiness.append(f"TSB {tsb:.0f} with {hard_left} intensity day(s) left")
    elif tsb < MIDWEEK_TSB_MULTI and hard_left >= 2:
        readiness.append(f"TSB {tsb:.0f} with {hard_left} intensity days left")
    if readiness:
        families.append(FAMILY_READINESS)
        reasons.extend(readiness)

    # Taper
    taper: list[str] = []
    if phase.is_taper and hard_left > 1:
        taper.append(f"{phase.phase.label} with {hard_left} intensity days left")
    elif phase.goal is not None and not phase.is_taper:
        start = taper_start(phase.goal.date)
        if today < start <= plan.end_date and any(d.is_hard and d.date >= start for d in remaining):
            taper.append(f"Taper for {phase.goal.name} starts {start}")
    if taper:
        families.append(FAMILY_TAPER)
        reasons.extend(taper)

    if not families:
        return MidWeekTrigger(fired=False)

    urgent = missed_intensity or FAMILY_READINESS in families or FAMILY_TAPER in families
    priority = TriggerPriority.HIGH if urgent else TriggerPriority.MEDIUM
    logger.info("Mid-week trigger (%s): %s", priority.name, "; ".join(reasons))
    return MidWeekTrigger(
        fired=True,
        priority=priority,
        reasons=tuple(reasons),
        families=tuple(families),
    )


@dataclass(frozen=True)
class AdaptationOutcome:
    trigger: MidWeekTrigger
    revision: PlanRevision | None = None
    report: ReconcileReport | None = None

    @property
    def days(self) -> tuple[PlannedDay, ...]:
        return self.revision.days if self.revision is not None else ()


class MidWeekAdapter:
    """Re-plans the rest of a week and pushes the revision to the calendar."""

    def __init__(self, generator: WeeklyPlanGenerator, reconciler: PlanReconciler) -> None:
        self.generator = generator
        self.reconciler = reconciler

    def adapt(
        self,
        context: PlanningContext,
        plan: WeeklyPlan,
        trigger: MidWeekTrigger,
        today: date,
    ) -> AdaptationOutcome:
        if not trigger.fired:
            logger.info("No mid-week trigger for %s; plan stands", plan.start_date)
            return AdaptationOutcome(trigger=trigger)

        revision = self.generator.revise(context, plan, today, reason="; ".join(trigger.reasons))
        report = self.reconciler.reconcile(revision.days, today)
        return AdaptationOutcome(trigger=trigger, revision=revision, report=report)
