"""WorkoutDesigner — bounded regeneration around the policy's workout design.

Each attempt is validated. Failures and low suitability scores are fed
back into the brief as corrections for the next attempt. The best valid
candidate wins; with none at all, the template builder's design is used.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from coach_engine.errors import ValidationFailure
from coach_engine.models.enums import MAX_REGENERATIONS, MIN_SUITABILITY_SCORE
from coach_engine.models.structured_workout import StructuredWorkout, WorkoutStep
from coach_engine.models.workout import WorkoutBrief, WorkoutDraft
from coach_engine.planning.validation import parse_draft, validate_workout
from coach_engine.policy.base import PolicyProvider
from coach_engine.policy.heuristic import HeuristicPolicy
from coach_engine.workout_builder.description_builder import workout_title

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DesignedWorkout:
    """An accepted workout and how it was arrived at."""

    brief: WorkoutBrief
    draft: WorkoutDraft
    workout: StructuredWorkout
    attempts: int
    fallback_used: bool = False

    @property
    def body(self) -> str | None:
        return self.draft.workout_body

    @property
    def description(self) -> str | None:
        return self.draft.workout_description


class WorkoutDesigner:
    """Designs, validates and if needed regenerates one workout."""

    def __init__(
        self,
        policy: PolicyProvider,
        max_regenerations: int = MAX_REGENERATIONS,
        min_suitability: float = MIN_SUITABILITY_SCORE,
        fallback: PolicyProvider | None = None,
    ) -> None:
        self.policy = policy
        self.max_regenerations = max(0, max_regenerations)
        self.min_suitability = min_suitability
        self.fallback = fallback or HeuristicPolicy()

    def design(self, brief: WorkoutBrief) -> DesignedWorkout:
        best: tuple[WorkoutDraft, tuple[WorkoutStep, ...]] | None = None
        request = brief
        attempts = 0

        for attempts in range(1, self.max_regenerations + 2):
            draft = self.policy.design_workout(request)
            try:
                steps = validate_workout(draft, brief)
            except ValidationFailure as exc:
                logger.warning(
                    "Attempt %d for %s rejected: %s", attempts, brief.date, "; ".join(exc.errors)
                )
                request = request.amended(*exc.errors)
                continue

            if best is None or draft.suitability_score > best[0].suitability_score:
                best = (draft, steps)
            if draft.suitability_score >= self.min_suitability:
                break
            logger.warning(
                "Attempt %d for %s scored %.1f (< %.1f): %s",
                attempts,
                brief.date,
                draft.suitability_score,
                self.min_suitability,
                draft.reason or "no reason given",
            )
            request = request.amended(
                f"Previous design scored {draft.suitability_score:.0f}/10: {draft.reason or 'improve fit to the brief'}"
            )

        if best is None:
            logger.warning("No valid design for %s after %d attempt(s); using template", brief.date, attempts)
            draft = self.fallback.design_workout(brief)
            try:
                steps = validate_workout(draft, brief)
            except ValidationFailure as exc:
                # last resort: accept the template as built
                logger.warning("Template for %s accepted despite: %s", brief.date, "; ".join(exc.errors))
                steps = parse_draft(draft, brief.activity)
            return self._accept(brief, draft, steps, attempts, fallback_used=True)

        return self._accept(brief, best[0], best[1], attempts)

    @staticmethod
    def _accept(
        brief: WorkoutBrief,
        draft: WorkoutDraft,
        steps: tuple[WorkoutStep, ...],
        attempts: int,
        fallback_used: bool = False,
    ) -> DesignedWorkout:
        workout = StructuredWorkout(
            activity=brief.activity,
            steps=steps,
            workout_title=workout_title(brief.workout_type, brief.activity, brief.duration_min),
            workout_description=draft.explanation,
        )
        logger.info(
            "Accepted %s for %s (%s, score %.1f, %d attempt(s))",
            workout.workout_title,
            brief.date,
            draft.source,
            draft.suitability_score,
            attempts,
        )
        return DesignedWorkout(brief, draft, workout, attempts, fallback_used)
