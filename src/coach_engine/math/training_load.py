"""Training load calculations: TSS estimates and the CTL / ATL / TSB model.

References:
    - Banister (1991): impulse-response fitness / fatigue model
    - Coggan & Allen (2010): TSS, Performance Manager Chart (CTL 42 d, ATL 7 d)
"""

from __future__ import annotations

from datetime import date
from typing import Iterable

import numpy as np
import pandas as pd

from coach_engine.models.enums import (
    ATL_TIME_CONSTANT_DAYS,
    CTL_TIME_CONSTANT_DAYS,
    WORKOUT_INTENSITY_FACTOR,
    WorkoutType,
)


def estimate_tss(duration_min: float, intensity_factor: float) -> float:
    """Estimate Training Stress Score from duration and intensity factor.

    TSS = hours × IF² × 100

    Reference:
        Coggan & Allen (2010). Training and Racing with a Power Meter.
    """
    if duration_min <= 0 or intensity_factor <= 0:
        return 0.0
    return (duration_min / 60.0) * intensity_factor**2 * 100.0


def estimate_workout_tss(workout_type: WorkoutType, duration_min: float) -> float:
    """TSS estimate for a planned session of *workout_type*."""
    return round(estimate_tss(duration_min, WORKOUT_INTENSITY_FACTOR[workout_type]), 1)


def calculate_ewma(values: list[float] | tuple[float, ...], time_constant: int) -> float:
    """Most recent value of an exponentially weighted moving average.

    Uses the Banister form ``x_t = x_{t-1} + (load_t - x_{t-1}) / tau``,
    which is pandas ``ewm(alpha=1/tau, adjust=False)``.

    Args:
        values: Time series of daily loads (oldest first).
        time_constant: Decay time constant in days (42 for CTL, 7 for ATL).

    Returns:
        The most recent EWMA value, 0.0 for an empty series.
    """
    if not values:
        return 0.0
    series = pd.Series(values, dtype=np.float64)
    ewma = series.ewm(alpha=1.0 / time_constant, adjust=False).mean()
    return float(ewma.iloc[-1])


def calculate_fitness(daily_loads: list[float] | tuple[float, ...]) -> tuple[float, float]:
    """Return (CTL, ATL) for a series of daily loads, oldest first."""
    return (
        calculate_ewma(daily_loads, CTL_TIME_CONSTANT_DAYS),
        calculate_ewma(daily_loads, ATL_TIME_CONSTANT_DAYS),
    )


def calculate_ramp_rate(daily_loads: list[float] | tuple[float, ...], days: int = 7) -> float:
    """CTL change over the last *days* days.

    Returns 0.0 when there is not enough history to compare.
    """
    if len(daily_loads) <= days:
        return 0.0
    now = calculate_ewma(daily_loads, CTL_TIME_CONSTANT_DAYS)
    before = calculate_ewma(daily_loads[:-days], CTL_TIME_CONSTANT_DAYS)
    return now - before


def daily_load_series(
    loads: Iterable[tuple[date, float]], start: date, end: date
) -> tuple[float, ...]:
    """Sum (date, load) pairs per day and fill missing days with zero.

    Args:
        loads: (day, training load) pairs, any order, duplicates allowed.
        start: First day of the series (inclusive).
        end: Last day of the series (inclusive).

    Returns:
        One value per day from *start* to *end*.
    """
    index = pd.date_range(start, end, freq="D")
    pairs = [(pd.Timestamp(d), float(v)) for d, v in loads if start <= d <= end]
    if not pairs:
        return tuple(0.0 for _ in index)
    frame = pd.DataFrame(pairs, columns=["day", "load"])
    per_day = frame.groupby("day")["load"].sum().reindex(index, fill_value=0.0)
    return tuple(float(v) for v in per_day.to_numpy())


def days_since_last(active_days: Iterable[date], as_of: date) -> int | None:
    """Whole days between the latest active day before *as_of* and *as_of*."""
    past = [d for d in active_days if d < as_of]
    if not past:
        return None
    return (as_of - max(past)).days
