"""Tests for the training load advisor."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from coach_engine.advisor.load import advise_load, classify_ramp, required_ramp, target_ctl
from coach_engine.advisor.phase import classify_phase
from coach_engine.models.athlete_state import AthleteState
from coach_engine.models.enums import GoalPriority, PhaseName, RampRateCategory, RecoveryStatus
from coach_engine.models.goal import Goal
from coach_engine.models.wellness import WellnessSummary

TODAY = date(2026, 3, 2)


def _phase(weeks: int):
    goal = Goal(name="Target", date=TODAY + timedelta(weeks=weeks), priority=GoalPriority.A)
    return classify_phase(TODAY, goal)


class TestTargetCTL:
    def test_floor_applies_after_percentage_cap(self) -> None:
        # min(50, 40) = 40 -> min(40, 7.5) = 7.5 -> max(7.5, 10) = 10
        assert target_ctl(30, 10) == pytest.approx(40.0)

    def test_percentage_cap_applies_after_absolute_cap(self) -> None:
        # min(30, 40) = 30 -> min(30, 25) = 25 -> max(25, 10) = 25
        assert target_ctl(100, 6) == pytest.approx(125.0)

    def test_absolute_cap(self) -> None:
        # min(100, 40) = 40 -> min(40, 50) = 40
        assert target_ctl(200, 20) == pytest.approx(240.0)

    def test_no_gain_inside_peak(self) -> None:
        assert target_ctl(70, 3) == 70


class TestRamp:
    def test_required_ramp_leaves_taper_weeks(self) -> None:
        assert required_ramp(30, 40, 10) == pytest.approx(10 / 8)

    def test_ramp_clamped_to_eight(self) -> None:
        assert required_ramp(30, 130, 6) == 8.0

    def test_ramp_never_negative(self) -> None:
        assert required_ramp(50, 40, 10) == 0.0

    @pytest.mark.parametrize(
        ("ramp", "category", "warns"),
        [
            (2.0, RampRateCategory.MAINTAIN, False),
            (4.5, RampRateCategory.BUILD, False),
            (6.5, RampRateCategory.AGGRESSIVE, True),
            (7.5, RampRateCategory.CAUTION, True),
        ],
    )
    def test_classification(self, ramp: float, category: RampRateCategory, warns: bool) -> None:
        result, warning = classify_ramp(ramp)
        assert result == category
        assert (warning is not None) == warns


class TestAdviseLoad:
    def test_build_week_band(self) -> None:
        state = AthleteState(as_of=TODAY, ctl=60.0, atl=58.0)
        advice = advise_load(state, _phase(12))
        # gain min(60, 40, 15) = 15 over 10 weeks -> 1.5/week
        assert advice.target_ctl == 75.0
        assert advice.ramp_rate == 1.5
        assert advice.ramp_rate_category == RampRateCategory.MAINTAIN
        weekly = (60 + 1.5) * 7
        assert advice.weekly_tss_range == (round(weekly * 0.9), round(weekly * 1.1))

    def test_tsb_override_wins_over_phase(self) -> None:
        state = AthleteState(as_of=TODAY, ctl=60.0, atl=90.0)
        advice = advise_load(state, _phase(1))
        assert advice.ramp_rate_category == RampRateCategory.RECOVERY
        assert advice.weekly_tss_range == (227, 277)
        assert advice.warning is not None

    def test_race_week_holds_half_load(self) -> None:
        state = AthleteState(as_of=TODAY, ctl=60.0, atl=55.0)
        phase = _phase(1)
        assert phase.phase == PhaseName.RACE_WEEK
        advice = advise_load(state, phase)
        assert advice.ramp_rate_category == RampRateCategory.TAPER
        assert advice.weekly_tss_target == pytest.approx(60 * 7 * 0.5, abs=1)

    def test_yellow_recovery_scales_band(self) -> None:
        state = AthleteState(as_of=TODAY, ctl=60.0, atl=58.0)
        phase = _phase(12)
        neutral = advise_load(state, phase)
        yellow = WellnessSummary(today=None, recovery_status=RecoveryStatus.YELLOW, intensity_modifier=0.85)
        scaled = advise_load(state, phase, yellow)
        assert scaled.weekly_tss_range[1] < neutral.weekly_tss_range[1]
        assert "Yellow" in scaled.advice

    def test_daily_band_spreads_over_training_days(self) -> None:
        state = AthleteState(as_of=TODAY, ctl=60.0, atl=58.0)
        advice = advise_load(state, _phase(12))
        weekly = (60 + 1.5) * 7
        assert advice.daily_tss_range == (round(weekly * 0.9 / 6), round(weekly * 1.1 / 5))
