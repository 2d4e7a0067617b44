"""GenerativePolicy — workout design and narrative by the generative collaborator.

Recovery classification and feedback scoring stay on the fixed
thresholds. Workout design and the weekly strategy text go to the
collaborator; any collaborator error falls back to HeuristicPolicy.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol

from coach_engine.errors import CoachError
from coach_engine.models.decision_trace import PlanTrace
from coach_engine.models.weekly_plan import PlannedDay
from coach_engine.models.workout import WorkoutBrief, WorkoutDraft
from coach_engine.policy.heuristic import HeuristicPolicy
from coach_engine.workout_builder.builder import WorkoutBuilder

if TYPE_CHECKING:
    from coach_engine.planning.context import PlanningContext

logger = logging.getLogger(__name__)


class WorkoutCollaborator(Protocol):
    """What the policy needs from a generative client (see workout_ai)."""

    def generate(self, payload: dict[str, Any]) -> dict[str, Any]: ...

    def describe_strategy(self, payload: dict[str, Any]) -> str: ...


def brief_payload(brief: WorkoutBrief) -> dict[str, Any]:
    """JSON-ready view of a brief for the collaborator."""
    return {
        "date": brief.date.isoformat(),
        "sport": brief.activity.name.lower(),
        "workout_type": brief.workout_type.label,
        "intensity": brief.intensity,
        "duration_min": round(brief.duration_min),
        "target_tss": round(brief.target_tss),
        "phase": brief.phase_name,
        "phase_focus": brief.phase_focus,
        "recovery_status": brief.recovery_status.label,
        "intensity_modifier": round(brief.intensity_modifier, 2),
        "ftp_watts": brief.ftp_watts,
        "threshold_pace_s_per_km": brief.threshold_pace_s_per_km,
        "target_zone": brief.target_zone.name.title() if brief.target_zone else None,
        "constraints": list(brief.constraints),
        "recent_types": [t.label for t in brief.recent_types],
        "corrections": list(brief.amendments),
    }


def week_payload(context: PlanningContext, days: Sequence[PlannedDay], trace: PlanTrace) -> dict[str, Any]:
    return {
        "phase": context.phase.phase_name,
        "weeks_out": context.phase.weeks_out,
        "goal": context.phase.goal.name if context.phase.goal else None,
        "ctl": round(context.state.ctl, 1),
        "tsb": round(context.state.tsb, 1),
        "weekly_tss_range": [round(v) for v in context.load_advice.weekly_tss_range],
        "readiness": context.readiness.status.label,
        "days": [
            {
                "date": d.date.isoformat(),
                "sport": d.activity.name.lower(),
                "workout_type": d.workout_type.label,
                "intensity": d.intensity,
                "duration_min": round(d.duration_min),
                "tss": round(d.estimated_tss),
            }
            for d in days
        ],
        "constraints": list(trace.constraints),
        "violations": list(trace.violations),
    }


class GenerativePolicy(HeuristicPolicy):
    """Generative design and narrative with heuristic fallback."""

    name = "generative"

    def __init__(self, client: WorkoutCollaborator, builder: WorkoutBuilder | None = None) -> None:
        super().__init__(builder)
        self.client = client

    def design_workout(self, brief: WorkoutBrief) -> WorkoutDraft:
        try:
            raw = self.client.generate(brief_payload(brief))
        except CoachError as exc:
            logger.warning("Generative design failed for %s (%s); using template", brief.date, exc)
            return super().design_workout(brief)
        return WorkoutDraft(
            explanation=str(raw.get("explanation", "")),
            suitability_score=float(raw.get("suitability_score", 0)),
            reason=str(raw.get("reason", "")),
            workout_body=raw.get("workout_body"),
            workout_description=raw.get("workout_description"),
            source="generative",
        )

    def describe_strategy(
        self, context: PlanningContext, days: Sequence[PlannedDay], trace: PlanTrace
    ) -> str:
        try:
            text = self.client.describe_strategy(week_payload(context, days, trace))
        except CoachError as exc:
            logger.warning("Generative strategy failed (%s); using fixed summary", exc)
            return super().describe_strategy(context, days, trace)
        return text.strip() or super().describe_strategy(context, days, trace)
