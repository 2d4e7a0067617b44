"""ReadinessModel — combines wellness, training gap and feedback.

Recomputed on every run; nothing here is cached.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Sequence

from coach_engine.models.enums import FORECAST_HALF_LIFE_DAYS, Recommendation, RecoveryStatus
from coach_engine.models.execution import AdaptationSignal
from coach_engine.models.wellness import ActivityFeedback, WellnessSample, WellnessSummary
from coach_engine.readiness.gap import GapAssessment, interpret_gap
from coach_engine.readiness.wellness import summarize_wellness

if TYPE_CHECKING:
    from coach_engine.policy.base import PolicyProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReadinessAssessment:
    """Everything the planner needs to know about today's readiness.

    Attributes:
        wellness: Today's wellness summary (may be the unavailable sentinel).
        gap: Training-gap interpretation.
        feedback: Raw RPE / Feel adaptation signal.
        signal: Exposed signal, the more conservative of feedback and gap.
        intensity_modifier: min(wellness modifier, gap modifier).
    """

    wellness: WellnessSummary
    gap: GapAssessment
    feedback: AdaptationSignal
    signal: AdaptationSignal
    intensity_modifier: float

    @property
    def status(self) -> RecoveryStatus:
        return self.wellness.recovery_status


class ReadinessModel:
    """Produces a ReadinessAssessment through a PolicyProvider.

    Usage:
        model = ReadinessModel(HeuristicPolicy())
        readiness = model.assess(samples, feedback, days_since_last=2)
    """

    def __init__(self, policy: PolicyProvider) -> None:
        self.policy = policy

    def assess(
        self,
        samples: Sequence[WellnessSample],
        feedback: Sequence[ActivityFeedback] = (),
        days_since_last: int | None = None,
        as_of: date | None = None,
    ) -> ReadinessAssessment:
        wellness = summarize_wellness(samples, self.policy)
        gap = interpret_gap(days_since_last, wellness.recovery_status)
        feedback_signal = self.policy.feedback_adjustment(feedback, as_of)
        signal = _more_conservative(feedback_signal, gap)
        modifier = min(wellness.intensity_modifier, gap.intensity_modifier)

        logger.info(
            "Readiness: %s, gap=%s, signal=%s %+.0f%%, modifier=%.2f",
            wellness.recovery_status.label,
            gap.interpretation.name.lower(),
            signal.recommendation.name.lower(),
            signal.intensity_adjustment_pct,
            modifier,
        )
        return ReadinessAssessment(
            wellness=wellness,
            gap=gap,
            feedback=feedback_signal,
            signal=signal,
            intensity_modifier=modifier,
        )


def forecast_readiness(modifier: float, day_offset: int) -> float:
    """Expected modifier *day_offset* days ahead.

    The deficit below 1.0 halves every FORECAST_HALF_LIFE_DAYS days.
    """
    if day_offset <= 0:
        return modifier
    decay = 0.5 ** (day_offset / FORECAST_HALF_LIFE_DAYS)
    return 1.0 - (1.0 - modifier) * decay


def _more_conservative(feedback: AdaptationSignal, gap: GapAssessment) -> AdaptationSignal:
    if gap.adjustment_pct < feedback.intensity_adjustment_pct:
        return AdaptationSignal(
            recommendation=Recommendation.EASIER,
            intensity_adjustment_pct=gap.adjustment_pct,
            confidence=1.0,
            reasoning=(gap.reason,),
        )
    return feedback
