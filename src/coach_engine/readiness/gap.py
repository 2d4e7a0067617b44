"""Training-gap interpretation.

A gap of four or more days is read against *today's* recovery status: a
rested athlete coming back Green is fresh, one coming back Red was most
likely ill. Gaps of a week or longer cost an extra 10 % for every reading
except fresh.

Reference:
    Mujika & Padilla (2000). Detraining: loss of training-induced
    physiological and performance adaptations. Sports Med 30(2):79-87.
"""

from __future__ import annotations

from dataclasses import dataclass

from coach_engine.models.enums import (
    GAP_CAUTIOUS_MODIFIER,
    GAP_ESCALATION_DAYS,
    GAP_EXTENDED_DAYS,
    GAP_EXTENDED_FACTOR,
    GAP_ILLNESS_MODIFIER,
    GAP_UNKNOWN_MODIFIER,
    GapInterpretation,
    RecoveryStatus,
)

_GAP_BY_STATUS: dict[RecoveryStatus, tuple[GapInterpretation, float]] = {
    RecoveryStatus.GREEN: (GapInterpretation.FRESH, 1.0),
    RecoveryStatus.RED: (GapInterpretation.RETURNING_FROM_ILLNESS, GAP_ILLNESS_MODIFIER),
    RecoveryStatus.YELLOW: (GapInterpretation.CAUTIOUS_RETURN, GAP_CAUTIOUS_MODIFIER),
    RecoveryStatus.UNKNOWN: (GapInterpretation.UNKNOWN, GAP_UNKNOWN_MODIFIER),
}


@dataclass(frozen=True)
class GapAssessment:
    """How the break since the last qualifying activity should be treated."""

    interpretation: GapInterpretation
    intensity_modifier: float
    days_since: int | None
    reason: str = ""

    @property
    def adjustment_pct(self) -> float:
        """The modifier expressed as a signed intensity adjustment in percent."""
        return round((self.intensity_modifier - 1.0) * 100.0, 1)


def interpret_gap(days_since: int | None, status: RecoveryStatus) -> GapAssessment:
    """Interpret *days_since* the last qualifying activity.

    An unknown gap length never penalizes: without activity history there is
    nothing to say about a break.
    """
    if days_since is None or days_since < GAP_ESCALATION_DAYS:
        return GapAssessment(GapInterpretation.NORMAL, 1.0, days_since)

    interpretation, modifier = _GAP_BY_STATUS[status]
    reason = f"{days_since} days since last workout, current status {status.label}."
    if days_since >= GAP_EXTENDED_DAYS and interpretation != GapInterpretation.FRESH:
        modifier *= GAP_EXTENDED_FACTOR
        reason += f" Extended break: extra x{GAP_EXTENDED_FACTOR}."
    return GapAssessment(interpretation, round(modifier, 3), days_since, reason)
