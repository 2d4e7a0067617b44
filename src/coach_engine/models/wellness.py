"""Wellness samples, subjective feedback and the daily wellness summary."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from coach_engine.models.enums import RecoveryStatus

_SIGNAL_FIELDS = (
    "sleep_hours",
    "sleep_score",
    "hrv",
    "resting_hr",
    "recovery_score",
    "soreness",
    "fatigue",
    "stress",
    "mood",
)


@dataclass(frozen=True)
class WellnessSample:
    """One day of wellness data as reported by the provider.

    Subjective fields (soreness, fatigue, stress, mood) use a 1-4 scale
    where 1 is best. Any field may be None.
    """

    date: date
    sleep_hours: float | None = None
    sleep_score: float | None = None
    hrv: float | None = None
    resting_hr: float | None = None
    recovery_score: float | None = None
    soreness: int | None = None
    fatigue: int | None = None
    stress: int | None = None
    mood: int | None = None

    @property
    def has_signal(self) -> bool:
        """True when at least one wellness field carries a value."""
        return any(getattr(self, name) is not None for name in _SIGNAL_FIELDS)


@dataclass(frozen=True)
class ActivityFeedback:
    """Post-session RPE (1-10) and Feel (1 = strong .. 5 = weak)."""

    date: date
    rpe: float | None = None
    feel: float | None = None


@dataclass(frozen=True)
class RecoveryAssessment:
    """Recovery status with the intensity modifier it implies."""

    status: RecoveryStatus
    intensity_modifier: float
    reason: str = ""


@dataclass(frozen=True)
class WellnessSummary:
    """Today's wellness record plus 7-day averages and recovery status."""

    today: WellnessSample | None
    recovery_status: RecoveryStatus
    intensity_modifier: float
    reason: str = ""
    sleep_avg_7d: float | None = None
    hrv_avg_7d: float | None = None
    resting_hr_avg_7d: float | None = None
    recovery_avg_7d: float | None = None

    @property
    def available(self) -> bool:
        return self.today is not None

    @classmethod
    def unavailable(cls) -> WellnessSummary:
        """Neutral summary used when the provider returned no wellness data."""
        return cls(
            today=None,
            recovery_status=RecoveryStatus.UNKNOWN,
            intensity_modifier=1.0,
            reason="No wellness data available.",
        )
