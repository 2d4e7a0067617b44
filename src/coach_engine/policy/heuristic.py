"""HeuristicPolicy — fixed-threshold decisions and template-built workouts."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from typing import TYPE_CHECKING

from coach_engine.models.decision_trace import PlanTrace
from coach_engine.models.enums import ActivityKind
from coach_engine.models.execution import AdaptationSignal
from coach_engine.models.weekly_plan import PlannedDay
from coach_engine.models.wellness import ActivityFeedback, RecoveryAssessment, WellnessSample
from coach_engine.models.workout import WorkoutBrief, WorkoutDraft
from coach_engine.policy.base import PolicyProvider
from coach_engine.readiness.feedback import score_feedback
from coach_engine.readiness.wellness import classify_recovery
from coach_engine.workout_builder.builder import WorkoutBuilder
from coach_engine.workout_builder.description_builder import build_workout_description
from coach_engine.workout_builder.formats import render_run_text, render_zwo

if TYPE_CHECKING:
    from coach_engine.planning.context import PlanningContext

# Template workouts always fit their brief
HEURISTIC_SUITABILITY = 8.0
_MAX_STRATEGY_CONSTRAINTS = 4


class HeuristicPolicy(PolicyProvider):
    """Deterministic policy: threshold classification and template workouts."""

    name = "heuristic"

    def __init__(self, builder: WorkoutBuilder | None = None) -> None:
        self.builder = builder or WorkoutBuilder()

    def classify_recovery(
        self, today: WellnessSample | None, history: Sequence[WellnessSample]
    ) -> RecoveryAssessment:
        return classify_recovery(today, history)

    def feedback_adjustment(
        self, feedback: Sequence[ActivityFeedback], as_of: date | None = None
    ) -> AdaptationSignal:
        return score_feedback(feedback, as_of)

    def design_workout(self, brief: WorkoutBrief) -> WorkoutDraft:
        workout = self.builder.build(brief)
        _, description = build_workout_description(brief)
        if brief.activity == ActivityKind.RUN:
            return WorkoutDraft(
                explanation=description,
                suitability_score=HEURISTIC_SUITABILITY,
                reason="Template session",
                workout_description=render_run_text(workout.steps),
            )
        return WorkoutDraft(
            explanation=description,
            suitability_score=HEURISTIC_SUITABILITY,
            reason="Template session",
            workout_body=render_zwo(workout.steps),
        )

    def describe_strategy(
        self, context: PlanningContext, days: Sequence[PlannedDay], trace: PlanTrace
    ) -> str:
        advice = context.load_advice
        sessions = [d for d in days if not d.is_rest]
        hard = [d for d in sessions if d.is_hard]
        total = sum(d.estimated_tss for d in days)
        low, high = advice.weekly_tss_range

        goal = context.phase.goal
        goal_text = f" toward {goal.name} ({goal.date.isoformat()})" if goal else ""
        lines = [
            f"{context.phase.phase_name}{goal_text}, {context.phase.weeks_out} week(s) out. {context.phase.focus}",
            f"{len(sessions)} sessions, {len(hard)} hard, ~{total:.0f} TSS "
            f"(advised {low:.0f}-{high:.0f}, ramp {advice.ramp_rate_category.name.lower()}).",
            f"Readiness: {context.readiness.status.label}, modifier {context.readiness.intensity_modifier:.2f}.",
        ]
        if advice.warning:
            lines.append(f"Warning: {advice.warning}")
        constraints = trace.constraints[:_MAX_STRATEGY_CONSTRAINTS]
        if constraints:
            lines.append("Key constraints: " + "; ".join(constraints) + ".")
        if trace.violations:
            lines.append("Unresolved: " + "; ".join(trace.violations) + ".")
        return "\n".join(lines)
