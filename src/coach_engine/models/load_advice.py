"""Load advisor output — weekly and daily TSS guidance."""

from __future__ import annotations

from dataclasses import dataclass

from coach_engine.models.enums import RampRateCategory


@dataclass(frozen=True)
class LoadAdvice:
    """Advisory training-load targets. Never applied to the calendar directly."""

    target_ctl: float
    weekly_tss_range: tuple[float, float]
    daily_tss_range: tuple[float, float]
    ramp_rate: float
    ramp_rate_category: RampRateCategory
    advice: str
    warning: str | None = None

    @property
    def weekly_tss_target(self) -> float:
        low, high = self.weekly_tss_range
        return (low + high) / 2.0
