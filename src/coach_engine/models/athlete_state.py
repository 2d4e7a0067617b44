"""Frozen athlete state — fitness snapshot refreshed on every run."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class AthleteState:
    """Immutable snapshot of the athlete's current fitness.

    Rebuilt from provider data at the start of every run and never
    persisted locally. Freezing prevents mutation bugs inside rules.
    """

    as_of: date

    # Performance Manager values
    ctl: float  # Chronic Training Load (fitness)
    atl: float  # Acute Training Load (fatigue)
    ramp_rate: float = 0.0  # CTL change over the last 7 days

    # Physiology
    eftp: float | None = None  # estimated FTP in watts
    weight_kg: float | None = None
    critical_speed_m_per_s: float | None = None

    # Days since the last qualifying activity, None when unknown
    days_since_last_activity: int | None = None

    @property
    def tsb(self) -> float:
        """Training Stress Balance (form) = CTL - ATL."""
        return self.ctl - self.atl

    @property
    def watts_per_kg(self) -> float | None:
        if self.eftp is None or not self.weight_kg:
            return None
        return self.eftp / self.weight_kg
