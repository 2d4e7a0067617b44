"""Daily wellness selection, 7-day averages and recovery classification.

References:
    Plews et al. (2013). Training adaptation and heart rate variability in
    elite endurance athletes. Int J Sports Physiol Perform 8(6):688-694.

    Buchheit (2014). Monitoring training status with HR measures.
    Int J Sports Physiol Perform 9(5):883-893.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from statistics import fmean
from typing import TYPE_CHECKING, Sequence

from coach_engine.models.enums import (
    HRV_ELEVATED_DEVIATION,
    HRV_ELEVATED_MODIFIER,
    HRV_NORMAL_MODIFIER,
    HRV_SUPPRESSED_DEVIATION,
    HRV_SUPPRESSED_MODIFIER,
    RECOVERY_GREEN_MIN_SCORE,
    RECOVERY_GREEN_MODIFIER,
    RECOVERY_RED_MODIFIER,
    RECOVERY_YELLOW_MIN_SCORE,
    RECOVERY_YELLOW_MODIFIER,
    WELLNESS_WINDOW_DAYS,
    RecoveryStatus,
)
from coach_engine.models.wellness import RecoveryAssessment, WellnessSample, WellnessSummary

if TYPE_CHECKING:
    from coach_engine.policy.base import PolicyProvider

logger = logging.getLogger(__name__)


def select_today(samples: Sequence[WellnessSample]) -> WellnessSample | None:
    """Most recent sample that carries at least one wellness value.

    The provider often syncs today's record before the watch has uploaded
    anything, so an empty latest record falls back to the previous one.
    """
    for sample in sorted(samples, key=lambda s: s.date, reverse=True):
        if sample.has_signal:
            return sample
    return None


def trailing_window(
    samples: Sequence[WellnessSample], today: WellnessSample
) -> list[WellnessSample]:
    """Samples in the WELLNESS_WINDOW_DAYS days before *today*'s record."""
    start = today.date - timedelta(days=WELLNESS_WINDOW_DAYS)
    return [s for s in samples if start <= s.date < today.date]


def classify_recovery(
    today: WellnessSample | None, history: Sequence[WellnessSample] = ()
) -> RecoveryAssessment:
    """Classify recovery from a recovery score, else HRV vs its 7-day mean.

    Score bands: >=67 Green (1.0), 34-66 Yellow (0.85), <34 Red (0.7).
    HRV fallback: deviation >=+5 % Green (1.0), >=-10 % Yellow (0.9),
    otherwise Red (0.75). Nothing usable gives Unknown with a neutral 1.0.
    """
    if today is None:
        return RecoveryAssessment(RecoveryStatus.UNKNOWN, 1.0, "No wellness data.")

    score = today.recovery_score
    if score is not None:
        if score >= RECOVERY_GREEN_MIN_SCORE:
            return RecoveryAssessment(
                RecoveryStatus.GREEN, RECOVERY_GREEN_MODIFIER, f"Recovery score {score:.0f}."
            )
        if score >= RECOVERY_YELLOW_MIN_SCORE:
            return RecoveryAssessment(
                RecoveryStatus.YELLOW, RECOVERY_YELLOW_MODIFIER, f"Recovery score {score:.0f}."
            )
        return RecoveryAssessment(
            RecoveryStatus.RED, RECOVERY_RED_MODIFIER, f"Recovery score {score:.0f}."
        )

    baseline = _mean([s.hrv for s in history])
    if today.hrv is None or baseline is None or baseline <= 0:
        return RecoveryAssessment(
            RecoveryStatus.UNKNOWN, 1.0, "No recovery score or HRV baseline."
        )

    deviation = (today.hrv - baseline) / baseline
    reason = f"HRV {today.hrv:.0f} vs 7-day mean {baseline:.0f} ({deviation:+.0%}). Ref: Plews et al. (2013)."
    if deviation >= HRV_ELEVATED_DEVIATION:
        return RecoveryAssessment(RecoveryStatus.GREEN, HRV_ELEVATED_MODIFIER, reason)
    if deviation >= HRV_SUPPRESSED_DEVIATION:
        return RecoveryAssessment(RecoveryStatus.YELLOW, HRV_NORMAL_MODIFIER, reason)
    return RecoveryAssessment(RecoveryStatus.RED, HRV_SUPPRESSED_MODIFIER, reason)


def summarize_wellness(
    samples: Sequence[WellnessSample], policy: PolicyProvider | None = None
) -> WellnessSummary:
    """Build today's WellnessSummary from a series of samples.

    Args:
        samples: Wellness samples in any order; may be empty.
        policy: Provider of the recovery classification. Defaults to the
            fixed thresholds in classify_recovery.
    """
    today = select_today(samples)
    if today is None:
        logger.warning("No wellness sample with data; recovery status unknown")
        return WellnessSummary.unavailable()

    window = trailing_window(samples, today)
    if policy is None:
        assessment = classify_recovery(today, window)
    else:
        assessment = policy.classify_recovery(today, window)

    averaged = window + [today]
    return WellnessSummary(
        today=today,
        recovery_status=assessment.status,
        intensity_modifier=assessment.intensity_modifier,
        reason=assessment.reason,
        sleep_avg_7d=_mean([s.sleep_hours for s in averaged]),
        hrv_avg_7d=_mean([s.hrv for s in averaged]),
        resting_hr_avg_7d=_mean([s.resting_hr for s in averaged]),
        recovery_avg_7d=_mean([s.recovery_score for s in averaged]),
    )


def _mean(values: Sequence[float | None]) -> float | None:
    present = [v for v in values if v is not None]
    if not present:
        return None
    return round(fmean(present), 1)
