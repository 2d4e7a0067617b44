"""Structural validation of designed workouts before they are accepted.

Checks, all collected before raising:
    - the body / description parses (balanced tags, required sections,
      per-interval duration and target)
    - total duration within 25 % of the brief
    - no step harder than the brief's intensity allows
    - self-reported suitability on the 1-10 scale
"""

from __future__ import annotations

from coach_engine.errors import ValidationFailure
from coach_engine.models.enums import WORKOUT_DURATION_TOLERANCE, ActivityKind, WorkoutType
from coach_engine.models.structured_workout import WorkoutStep
from coach_engine.models.workout import WorkoutBrief, WorkoutDraft
from coach_engine.workout_builder.formats import estimated_minutes, parse_run_text, parse_zwo

# Highest power fraction any step may reach at each planned intensity
INTENSITY_POWER_CEILING: dict[int, float | None] = {
    1: 0.75,
    2: 0.90,
    3: 1.05,
    4: 1.20,
    5: None,
}
# Openers are easy overall but include a few short efforts above threshold
OPENERS_POWER_CEILING = 1.20


def _flatten(steps: tuple[WorkoutStep, ...]) -> list[WorkoutStep]:
    flat: list[WorkoutStep] = []
    for step in steps:
        flat.append(step)
        flat.extend(_flatten(step.child_steps))
    return flat


def parse_draft(draft: WorkoutDraft, activity: ActivityKind) -> tuple[WorkoutStep, ...]:
    """Steps of *draft* in the format its activity uses.

    Raises:
        ValidationFailure: If the body or description is missing or malformed.
    """
    if activity == ActivityKind.RUN:
        if not draft.workout_description:
            raise ValidationFailure("Missing workout_description", ["Run workouts need a workout_description"])
        return parse_run_text(draft.workout_description)
    if not draft.workout_body:
        raise ValidationFailure("Missing workout_body", ["Ride workouts need a workout_body"])
    return parse_zwo(draft.workout_body)


def validate_workout(draft: WorkoutDraft, brief: WorkoutBrief) -> tuple[WorkoutStep, ...]:
    """Parse and check *draft* against *brief*.

    Returns:
        The parsed steps.

    Raises:
        ValidationFailure: listing every problem found.
    """
    errors: list[str] = []
    steps: tuple[WorkoutStep, ...] = ()

    if not 1 <= draft.suitability_score <= 10:
        errors.append(f"Suitability score {draft.suitability_score} outside 1-10")

    try:
        steps = parse_draft(draft, brief.activity)
    except ValidationFailure as exc:
        errors.extend(exc.errors or [str(exc)])

    if steps:
        total = sum(estimated_minutes(s, brief.threshold_pace_s_per_km) for s in steps)
        allowed = brief.duration_min * WORKOUT_DURATION_TOLERANCE
        if brief.duration_min > 0 and abs(total - brief.duration_min) > allowed:
            errors.append(
                f"Duration {total:.0f} min is not within {WORKOUT_DURATION_TOLERANCE:.0%} "
                f"of the planned {brief.duration_min:.0f} min"
            )

        ceiling = (
            OPENERS_POWER_CEILING
            if brief.workout_type == WorkoutType.OPENERS
            else INTENSITY_POWER_CEILING.get(brief.intensity)
        )
        if ceiling is not None:
            peak = max((s.power_high for s in _flatten(steps) if s.power_high is not None), default=None)
            if peak is not None and peak > ceiling:
                errors.append(
                    f"Peak target {peak:.0%} of threshold exceeds {ceiling:.0%} "
                    f"allowed at intensity {brief.intensity}"
                )

    if errors:
        raise ValidationFailure(f"Workout for {brief.date} failed validation", errors)
    return steps
