"""WeeklyPlanGenerator — the central orchestrator of weekly planning.

Flow:
    1. Build the skeleton: weekday roles for the phase, fixed days locked
    2. Apply every PlanRule, PREFERENCE tier first and SAFETY last
    3. Freeze the draft into seven PlannedDays
    4. Re-check the hard constraints and record any violation
    5. Ask the policy for the strategy narrative
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date

from coach_engine.models.decision_trace import PlanTrace, RuleResult, RuleStatus
from coach_engine.models.weekly_plan import PlanRevision, WeeklyPlan
from coach_engine.planning.constraints import check_hard_constraints
from coach_engine.planning.context import PlanningContext
from coach_engine.planning.draft import WeekDraft
from coach_engine.planning.skeleton import build_skeleton
from coach_engine.policy.base import PolicyProvider
from coach_engine.registry import RuleRegistry

logger = logging.getLogger(__name__)


class WeeklyPlanGenerator:
    """Turns a PlanningContext into a WeeklyPlan.

    Usage:
        generator = WeeklyPlanGenerator(HeuristicPolicy())
        plan = generator.generate(context)
    """

    def __init__(self, policy: PolicyProvider, registry: RuleRegistry | None = None) -> None:
        self.policy = policy
        if registry is None:
            registry = RuleRegistry()
            registry.discover_rules()
        self.registry = registry

    def generate(self, context: PlanningContext) -> WeeklyPlan:
        """Generate the week starting at ``context.start_date``."""
        draft = build_skeleton(context)
        results = self._apply_rules(draft, context)

        days = tuple(d.to_planned() for d in draft.days)
        violations = check_hard_constraints(days, context)
        for violation in violations:
            logger.warning("Unresolved constraint for week of %s: %s", context.start_date, violation)
        trace = PlanTrace(rule_results=tuple(results), violations=tuple(violations))

        strategy = self.policy.describe_strategy(context, days, trace)
        plan = WeeklyPlan(
            start_date=context.start_date,
            days=days,
            strategy=strategy,
            phase=context.phase_name,
            load_advice=context.load_advice,
            trace=trace,
        )
        logger.info(
            "Plan for %s: %d sessions, %d hard, %.0f TSS (target %.0f), %d rule(s) fired",
            plan.start_date,
            plan.session_count,
            plan.hard_session_count,
            plan.total_tss,
            draft.target_tss * draft.volume_scale,
            len(trace.fired),
        )
        return plan

    def revise(self, context: PlanningContext, plan: WeeklyPlan, today: date, reason: str = "") -> PlanRevision:
        """Re-plan the days of *plan* from *today* on, keeping elapsed days as they were."""
        elapsed = tuple(d for d in plan.days if d.date < today)
        revised_context = replace(context, start_date=plan.start_date, today=today, locked_days=elapsed)
        revised = self.generate(revised_context)
        logger.info("Revised %s from %s: %s", plan.start_date, today, reason or "no reason given")
        return PlanRevision(
            supersedes=plan.start_date,
            created_on=today,
            days=revised.remaining(today),
            reason=reason,
        )

    def _apply_rules(self, draft: WeekDraft, context: PlanningContext) -> list[RuleResult]:
        results: list[RuleResult] = []
        for rule in self.registry.application_order():
            if not rule.has_required_data(context):
                results.append(
                    RuleResult(rule.rule_id, RuleStatus.NOT_APPLICABLE, "Required data unavailable")
                )
                continue
            result = rule.apply(draft, context)
            if result is None:
                results.append(RuleResult(rule.rule_id, RuleStatus.SKIPPED))
                continue
            logger.debug("%s: %s", rule.rule_id, result.explanation)
            results.append(result)
        return results
