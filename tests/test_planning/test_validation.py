"""Tests for structural validation of designed workouts."""

from __future__ import annotations

import pytest

from coach_engine.errors import ValidationFailure
from coach_engine.models.enums import WORKOUT_DURATION_MIN, ActivityKind, WorkoutType
from coach_engine.models.workout import WorkoutBrief, WorkoutDraft
from coach_engine.planning.validation import validate_workout
from coach_engine.policy.heuristic import HeuristicPolicy
from tests.factories import MONDAY, make_brief

RUN_TEXT = (
    "Warmup\n"
    "- 15min @ 6:10-6:40/km\n"
    "Main Set\n"
    "- 4x 5min @ 4:50-5:05/km, 2min @ 6:30/km\n"
    "Cooldown\n"
    "- 10min @ Z1"
)


def _brief(
    workout_type: WorkoutType = WorkoutType.THRESHOLD,
    intensity: int = 4,
    duration_min: float = 60.0,
    activity: ActivityKind = ActivityKind.RIDE,
) -> WorkoutBrief:
    return WorkoutBrief(
        date=MONDAY,
        activity=activity,
        workout_type=workout_type,
        intensity=intensity,
        duration_min=duration_min,
        target_tss=60.0,
        phase_name="Base Building",
        phase_focus="Aerobic foundation",
    )


def _ride(*middle: str, score: float = 8.0) -> WorkoutDraft:
    body = "\n".join(
        [
            "<workout>",
            '<Warmup Duration="900" PowerLow="0.50" PowerHigh="0.65"/>',
            *middle,
            '<Cooldown Duration="600" PowerLow="0.60" PowerHigh="0.45"/>',
            "</workout>",
        ]
    )
    return WorkoutDraft(explanation="", suitability_score=score, workout_body=body)


def _errors(draft: WorkoutDraft, brief: WorkoutBrief) -> list[str]:
    with pytest.raises(ValidationFailure) as excinfo:
        validate_workout(draft, brief)
    return excinfo.value.errors


class TestValidateWorkout:
    def test_valid_ride(self) -> None:
        draft = _ride('<SteadyState Duration="2100" Power="0.95"/>')
        assert len(validate_workout(draft, _brief())) == 3

    def test_too_short(self) -> None:
        draft = _ride('<SteadyState Duration="300" Power="0.95"/>')
        errors = _errors(draft, _brief())
        assert len(errors) == 1
        assert errors[0].startswith("Duration 30 min")

    def test_peak_above_intensity_ceiling(self) -> None:
        draft = _ride('<SteadyState Duration="2100" Power="1.00"/>')
        errors = _errors(draft, _brief(WorkoutType.ENDURANCE, intensity=2))
        assert any("exceeds 90%" in e for e in errors)

    def test_openers_may_touch_vo2(self) -> None:
        draft = _ride(
            '<SteadyState Duration="1500" Power="0.60"/>',
            '<IntervalsT Repeat="3" OnDuration="60" OffDuration="240" OnPower="1.15" OffPower="0.50"/>',
        )
        assert validate_workout(draft, _brief(WorkoutType.OPENERS, intensity=2, duration_min=55.0))

    def test_max_intensity_is_uncapped(self) -> None:
        draft = _ride('<IntervalsT Repeat="5" OnDuration="180" OffDuration="180" OnPower="1.30" OffPower="0.50"/>')
        assert validate_workout(draft, _brief(WorkoutType.VO2MAX, intensity=5, duration_min=55.0))

    def test_score_out_of_range(self) -> None:
        draft = _ride('<SteadyState Duration="2100" Power="0.95"/>', score=11.0)
        assert _errors(draft, _brief()) == ["Suitability score 11.0 outside 1-10"]

    def test_ride_needs_body(self) -> None:
        draft = WorkoutDraft(explanation="", suitability_score=7.0, workout_description=RUN_TEXT)
        assert _errors(draft, _brief()) == ["Ride workouts need a workout_body"]

    def test_all_problems_are_collected(self) -> None:
        draft = _ride('<SteadyState Duration="300" Power="1.10"/>', score=0.0)
        errors = _errors(draft, _brief(WorkoutType.TEMPO, intensity=3))
        assert len(errors) == 3

    def test_valid_run_text(self) -> None:
        brief = _brief(intensity=4, duration_min=55.0, activity=ActivityKind.RUN)
        draft = WorkoutDraft(explanation="", suitability_score=7.0, workout_description=RUN_TEXT)
        steps = validate_workout(draft, brief)
        assert len(steps) == 3
        assert steps[1].repeat_count == 4

    def test_run_missing_cooldown(self) -> None:
        text = RUN_TEXT.split("Cooldown")[0]
        brief = _brief(duration_min=45.0, activity=ActivityKind.RUN)
        draft = WorkoutDraft(explanation="", suitability_score=7.0, workout_description=text)
        assert "Missing 'Cooldown' section" in _errors(draft, brief)


_TEMPLATE_CASES = [
    (workout_type, activity, duration)
    for workout_type in WorkoutType
    if workout_type != WorkoutType.REST
    for activity in (ActivityKind.RIDE, ActivityKind.RUN)
    for duration in sorted({20.0, *WORKOUT_DURATION_MIN[workout_type]})
]


class TestTemplateWorkoutsValidate:
    @pytest.mark.parametrize(("workout_type", "activity", "duration"), _TEMPLATE_CASES)
    def test_template_fits_its_brief(
        self, workout_type: WorkoutType, activity: ActivityKind, duration: float
    ) -> None:
        brief = make_brief(workout_type, duration, activity)
        assert validate_workout(HeuristicPolicy().design_workout(brief), brief)
