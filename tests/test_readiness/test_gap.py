"""Tests for training-gap interpretation."""

from __future__ import annotations

import pytest

from coach_engine.models.enums import GapInterpretation, RecoveryStatus
from coach_engine.readiness.gap import interpret_gap


class TestInterpretGap:
    def test_short_gap_is_normal(self) -> None:
        gap = interpret_gap(2, RecoveryStatus.RED)
        assert gap.interpretation == GapInterpretation.NORMAL
        assert gap.intensity_modifier == 1.0

    def test_unknown_length_never_penalizes(self) -> None:
        assert interpret_gap(None, RecoveryStatus.RED).intensity_modifier == 1.0

    def test_long_gap_green_is_fresh_without_extra_penalty(self) -> None:
        gap = interpret_gap(8, RecoveryStatus.GREEN)
        assert gap.interpretation == GapInterpretation.FRESH
        assert gap.intensity_modifier == 1.0

    def test_red_after_gap_reads_as_illness(self) -> None:
        gap = interpret_gap(5, RecoveryStatus.RED)
        assert gap.interpretation == GapInterpretation.RETURNING_FROM_ILLNESS
        assert gap.intensity_modifier == 0.7

    def test_extended_gap_costs_another_ten_percent(self) -> None:
        gap = interpret_gap(7, RecoveryStatus.YELLOW)
        assert gap.interpretation == GapInterpretation.CAUTIOUS_RETURN
        assert gap.intensity_modifier == pytest.approx(0.72)

    def test_unknown_status_after_gap(self) -> None:
        gap = interpret_gap(4, RecoveryStatus.UNKNOWN)
        assert gap.interpretation == GapInterpretation.UNKNOWN
        assert gap.intensity_modifier == 0.8

    def test_adjustment_pct(self) -> None:
        assert interpret_gap(5, RecoveryStatus.RED).adjustment_pct == -30.0
