"""Tests for the session template table."""

from __future__ import annotations

import pytest

from coach_engine.models.enums import WorkoutType
from coach_engine.workout_builder.session_templates import (
    RECOVERY_BAND,
    SESSION_TEMPLATES,
    get_template,
)

SESSION_TYPES = [t for t in WorkoutType if t != WorkoutType.REST]
EASY_TYPES = (WorkoutType.RECOVERY, WorkoutType.ENDURANCE, WorkoutType.LONG_ENDURANCE)


class TestTemplateTable:
    @pytest.mark.parametrize("workout_type", SESSION_TYPES)
    def test_every_session_type_has_a_template(self, workout_type: WorkoutType) -> None:
        template = get_template(workout_type)
        assert template.main_segments
        for segment in template.main_segments:
            low, high = segment.power
            assert 0 < low <= high

    def test_rest_has_no_template(self) -> None:
        with pytest.raises(KeyError):
            get_template(WorkoutType.REST)

    @pytest.mark.parametrize("workout_type", SESSION_TYPES)
    def test_quality_sessions_warm_up_longer(self, workout_type: WorkoutType) -> None:
        template = get_template(workout_type)
        if workout_type in EASY_TYPES:
            assert (template.warmup_duration_min, template.cooldown_duration_min) == (10, 5)
        else:
            assert (template.warmup_duration_min, template.cooldown_duration_min) == (15, 10)

    def test_split_fractions_cover_the_main_set(self) -> None:
        for template in SESSION_TEMPLATES.values():
            fractions = [s.fraction_of_main for s in template.main_segments if s.fraction_of_main]
            if fractions:
                assert sum(fractions) == pytest.approx(1.0)

    def test_repeats_have_work_and_recovery(self) -> None:
        for template in SESSION_TEMPLATES.values():
            for segment in template.main_segments:
                if segment.is_repeat:
                    assert segment.rep_work_min > 0
                    assert segment.rep_recovery_min > 0

    def test_recovery_is_easiest(self) -> None:
        assert get_template(WorkoutType.RECOVERY).main_segments[0].power == RECOVERY_BAND
