"""Critical Speed (CS) model and cross-sport intensity equivalency.

CS plays the same role for running that FTP plays for riding: the upper
boundary of the heavy domain. Fitting it from best efforts gives a running
threshold pace, and expressing a ride target as a fraction of FTP lets the
same fraction of CS stand in for it on a run day.

References:
    Poole et al. (2016). Critical power: an important fatigue threshold in
    exercise physiology. Med Sci Sports Exerc 48(11):2320-2334.

    Jones et al. (2019). The maximal metabolic steady state: redefining the
    'gold standard'. Physiol Rep 7(10):e14098.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from coach_engine.models.enums import CS_MIN_DATA_POINTS


@dataclass(frozen=True)
class CriticalSpeedResult:
    """Result of fitting the Critical Speed model.

    Attributes:
        critical_speed_m_per_s: CS in metres per second.
        d_prime_meters: D' (anaerobic distance reserve) in metres.
        r_squared: Coefficient of determination for the linear fit.
        residuals: Per-point residuals in metres.
    """

    critical_speed_m_per_s: float
    d_prime_meters: float
    r_squared: float
    residuals: tuple[float, ...] = field(default_factory=tuple)

    @property
    def threshold_pace_s_per_km(self) -> float:
        return cs_to_pace_s_per_km(self.critical_speed_m_per_s)


def fit_critical_speed(
    distance_time_pairs: tuple[tuple[float, float], ...] | list[tuple[float, float]],
) -> CriticalSpeedResult:
    """Fit the linear Critical Speed model: D = CS * t + D'.

    Args:
        distance_time_pairs: Iterable of (distance_m, time_s) pairs.
            Must have at least CS_MIN_DATA_POINTS entries.

    Raises:
        ValueError: If fewer than CS_MIN_DATA_POINTS pairs are provided,
            or if any distance/time value is non-positive.
    """
    pairs = list(distance_time_pairs)
    if len(pairs) < CS_MIN_DATA_POINTS:
        raise ValueError(
            f"Need at least {CS_MIN_DATA_POINTS} distance-time pairs, "
            f"got {len(pairs)}"
        )
    for d, t in pairs:
        if d <= 0 or t <= 0:
            raise ValueError(f"Distance and time must be positive, got d={d}, t={t}")

    times = np.array([t for _, t in pairs], dtype=np.float64)
    distances = np.array([d for d, _ in pairs], dtype=np.float64)

    # numpy.polyfit(x, y, 1) returns [slope, intercept]
    slope, intercept = np.polyfit(times, distances, 1)
    cs = float(slope)
    d_prime = float(intercept)

    predicted = cs * times + d_prime
    ss_res = float(np.sum((distances - predicted) ** 2))
    ss_tot = float(np.sum((distances - np.mean(distances)) ** 2))
    r_squared = 1.0 - (ss_res / ss_tot) if ss_tot > 0 else 0.0

    return CriticalSpeedResult(
        critical_speed_m_per_s=cs,
        d_prime_meters=d_prime,
        r_squared=r_squared,
        residuals=tuple(float(r) for r in distances - predicted),
    )


def cs_to_pace_s_per_km(cs_m_per_s: float) -> float:
    """Convert a speed in m/s to pace in seconds per km.

    Raises:
        ValueError: If cs_m_per_s is non-positive.
    """
    if cs_m_per_s <= 0:
        raise ValueError(f"CS must be positive, got {cs_m_per_s}")
    return 1000.0 / cs_m_per_s


def equivalent_pace(power_fraction: float, threshold_pace_s_per_km: float) -> float:
    """Running pace at the same fraction of CS as *power_fraction* of FTP.

    A 0.90 FTP tempo block on the bike maps to 90 % of threshold speed,
    i.e. threshold_pace / 0.90 seconds per km.
    """
    if power_fraction <= 0:
        raise ValueError(f"Power fraction must be positive, got {power_fraction}")
    return threshold_pace_s_per_km / power_fraction


def threshold_pace_from_efforts(
    best_efforts: tuple[tuple[float, float], ...] | list[tuple[float, float]],
) -> float | None:
    """Threshold pace (s/km) from best efforts, None when the fit is unusable."""
    if len(best_efforts) < CS_MIN_DATA_POINTS:
        return None
    result = fit_critical_speed(best_efforts)
    if result.critical_speed_m_per_s <= 0:
        return None
    return result.threshold_pace_s_per_km
