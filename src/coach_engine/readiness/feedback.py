"""RPE / Feel feedback scoring.

Each factor adds or subtracts from a signed score; the score maps onto a
small set of intensity adjustments. Feel uses 1 (strong) .. 5 (weak).

Reference:
    Foster et al. (2001). A new approach to monitoring exercise training.
    J Strength Cond Res 15(1):109-115.
"""

from __future__ import annotations

from datetime import date, timedelta
from statistics import fmean
from typing import Sequence

from coach_engine.models.enums import (
    FEEDBACK_ADJUSTMENT_PCT,
    FEEDBACK_MIN_ENTRIES,
    FEEDBACK_WINDOW_DAYS,
    FEEL_GOOD_MAX,
    FEEL_NEGATIVE_SHARE,
    FEEL_NEGATIVE_VALUE,
    FEEL_POOR_MIN,
    FEEL_VERY_POOR_MIN,
    RPE_TARGET_HIGH,
    RPE_TARGET_LOW,
    Recommendation,
)
from coach_engine.models.execution import AdaptationSignal
from coach_engine.models.wellness import ActivityFeedback

_TREND_LENGTH = 3


def recent_feedback(
    feedback: Sequence[ActivityFeedback], as_of: date | None = None
) -> list[ActivityFeedback]:
    """Entries with an RPE or Feel value, oldest first, within the window."""
    entries = [f for f in feedback if f.rpe is not None or f.feel is not None]
    if as_of is not None:
        start = as_of - timedelta(days=FEEDBACK_WINDOW_DAYS)
        entries = [f for f in entries if start <= f.date <= as_of]
    return sorted(entries, key=lambda f: f.date)


def feedback_score(entries: Sequence[ActivityFeedback]) -> tuple[int, list[str]]:
    """Signed feedback score and the reasons behind each contribution."""
    score = 0
    reasons: list[str] = []

    feels = [f.feel for f in entries if f.feel is not None]
    rpes = [f.rpe for f in entries if f.rpe is not None]

    if feels:
        avg_feel = fmean(feels)
        if avg_feel > FEEL_VERY_POOR_MIN:
            score -= 2
            reasons.append(f"Average Feel {avg_feel:.1f} is very poor.")
        elif avg_feel > FEEL_POOR_MIN:
            score -= 1
            reasons.append(f"Average Feel {avg_feel:.1f} is below target.")
        elif avg_feel <= FEEL_GOOD_MAX:
            score += 1
            reasons.append(f"Average Feel {avg_feel:.1f} is strong.")

        negative = sum(1 for v in feels if v >= FEEL_NEGATIVE_VALUE) / len(feels)
        if negative > FEEL_NEGATIVE_SHARE:
            score -= 1
            reasons.append(f"{negative:.0%} of sessions felt poor.")

    if rpes:
        avg_rpe = fmean(rpes)
        if avg_rpe > RPE_TARGET_HIGH:
            score -= 1
            reasons.append(f"Average RPE {avg_rpe:.1f} above {RPE_TARGET_HIGH:.0f}.")
        elif avg_rpe < RPE_TARGET_LOW:
            score += 1
            reasons.append(f"Average RPE {avg_rpe:.1f} below {RPE_TARGET_LOW:.0f}.")

    trend = _trend(feels[-_TREND_LENGTH:])
    if trend > 0:
        score += 1
        reasons.append("Feel improving over the last 3 sessions.")
    elif trend < 0:
        score -= 1
        reasons.append("Feel worsening over the last 3 sessions.")

    return score, reasons


def adjustment_for_score(score: int) -> int:
    """Map a signed feedback score onto an intensity adjustment percent."""
    if score <= -3:
        return FEEDBACK_ADJUSTMENT_PCT["much_easier"]
    if score == -2:
        return FEEDBACK_ADJUSTMENT_PCT["easier"]
    if score <= 1:
        return FEEDBACK_ADJUSTMENT_PCT["maintain"]
    if score == 2:
        return FEEDBACK_ADJUSTMENT_PCT["harder"]
    return FEEDBACK_ADJUSTMENT_PCT["much_harder"]


def score_feedback(
    feedback: Sequence[ActivityFeedback], as_of: date | None = None
) -> AdaptationSignal:
    """Adaptation signal from recent RPE / Feel entries.

    Fewer than FEEDBACK_MIN_ENTRIES entries gives a neutral signal with
    zero confidence.
    """
    entries = recent_feedback(feedback, as_of)
    if len(entries) < FEEDBACK_MIN_ENTRIES:
        return AdaptationSignal.neutral(
            f"Only {len(entries)} feedback entries (need {FEEDBACK_MIN_ENTRIES})."
        )

    score, reasons = feedback_score(entries)
    pct = adjustment_for_score(score)
    return AdaptationSignal(
        recommendation=recommendation_for_pct(pct),
        intensity_adjustment_pct=float(pct),
        confidence=round(min(1.0, len(entries) / (2 * FEEDBACK_MIN_ENTRIES)), 2),
        reasoning=tuple(reasons) or ("Feedback within target bands.",),
    )


def recommendation_for_pct(pct: float) -> Recommendation:
    if pct < 0:
        return Recommendation.EASIER
    if pct > 0:
        return Recommendation.HARDER
    return Recommendation.MAINTAIN


def _trend(values: Sequence[float]) -> int:
    """+1 if strictly improving (Feel falling), -1 if strictly worsening."""
    if len(values) < _TREND_LENGTH:
        return 0
    pairs = list(zip(values, values[1:]))
    if all(later < earlier for earlier, later in pairs):
        return 1
    if all(later > earlier for earlier, later in pairs):
        return -1
    return 0
