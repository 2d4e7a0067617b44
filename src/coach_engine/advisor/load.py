"""Training load advisor: CTL target, weekly / daily TSS band, ramp advice.

Target CTL when more than three weeks out:
    gain = max(min(weeks_out * 5, 40, CTL * 0.25), 10)
i.e. the weekly-gain allowance is capped first by the absolute cap, then by
the percentage cap, and the floor is applied last.

References:
    Allen & Coggan (2010). Training and Racing with a Power Meter, 2nd ed.
    Performance Manager ramp-rate guidelines (3-7 CTL/week sustainable).
"""

from __future__ import annotations

import logging

from coach_engine.models.athlete_state import AthleteState
from coach_engine.models.enums import (
    CTL_GAIN_ABSOLUTE_CAP,
    CTL_GAIN_FLOOR,
    CTL_GAIN_PCT_CAP,
    CTL_GAIN_PER_WEEK,
    PEAK_LOAD_FRACTION,
    PEAK_MAX_WEEKS,
    RACE_WEEK_LOAD_FRACTION,
    RAMP_AGGRESSIVE_MAX,
    RAMP_BUILD_MAX,
    RAMP_CLAMP_MAX,
    RAMP_CLAMP_MIN,
    RAMP_MAINTAIN_MAX,
    RECOVERY_LOAD_FRACTION,
    TAPER_LEAD_WEEKS,
    TRAINING_DAYS_MAX,
    TRAINING_DAYS_MIN,
    TRANSITION_LOAD_FRACTION,
    TSB_RECOVERY_OVERRIDE,
    WEEKLY_TSS_TOLERANCE,
    PhaseName,
    RampRateCategory,
    RecoveryStatus,
)
from coach_engine.models.load_advice import LoadAdvice
from coach_engine.models.phase import TrainingPhase
from coach_engine.models.wellness import WellnessSummary

logger = logging.getLogger(__name__)

_PHASE_LOAD_FRACTION: dict[PhaseName, tuple[float, RampRateCategory, str]] = {
    PhaseName.RACE_WEEK: (
        RACE_WEEK_LOAD_FRACTION,
        RampRateCategory.TAPER,
        "Race week: hold about half of normal load and arrive fresh.",
    ),
    PhaseName.PEAK: (
        PEAK_LOAD_FRACTION,
        RampRateCategory.TAPER,
        "Taper: reduce volume to about 70% while keeping some intensity.",
    ),
    PhaseName.TRANSITION: (
        TRANSITION_LOAD_FRACTION,
        RampRateCategory.RECOVERY,
        "Transition: easy, unstructured training at about 40% of normal load.",
    ),
}


def target_ctl(ctl: float, weeks: int) -> float:
    """CTL the athlete should reach by the goal date."""
    if weeks <= PEAK_MAX_WEEKS:
        return ctl
    gain = min(weeks * CTL_GAIN_PER_WEEK, CTL_GAIN_ABSOLUTE_CAP)
    gain = min(gain, ctl * CTL_GAIN_PCT_CAP)
    gain = max(gain, CTL_GAIN_FLOOR)
    return ctl + gain


def required_ramp(ctl: float, target: float, weeks: int) -> float:
    """Weekly CTL ramp needed to reach *target*, clamped to [0, 8]."""
    ramp = (target - ctl) / max(weeks - TAPER_LEAD_WEEKS, 1)
    return min(max(ramp, RAMP_CLAMP_MIN), RAMP_CLAMP_MAX)


def classify_ramp(ramp: float) -> tuple[RampRateCategory, str | None]:
    """Ramp category plus a warning for aggressive or unsafe ramps."""
    if ramp <= RAMP_MAINTAIN_MAX:
        return RampRateCategory.MAINTAIN, None
    if ramp <= RAMP_BUILD_MAX:
        return RampRateCategory.BUILD, None
    if ramp <= RAMP_AGGRESSIVE_MAX:
        return (
            RampRateCategory.AGGRESSIVE,
            f"Ramp of {ramp:.1f} CTL/week is aggressive; watch fatigue closely.",
        )
    return (
        RampRateCategory.CAUTION,
        f"Ramp of {ramp:.1f} CTL/week exceeds sustainable limits; injury and illness risk.",
    )


def advise_load(
    state: AthleteState,
    phase: TrainingPhase,
    wellness: WellnessSummary | None = None,
) -> LoadAdvice:
    """Advisory load targets for the coming week.

    The TSB recovery override wins over every phase; phase overrides win
    over the ramp logic.
    """
    ctl = state.ctl
    target = target_ctl(ctl, phase.weeks_out)
    ramp = required_ramp(ctl, target, phase.weeks_out)
    warning: str | None = None

    if state.tsb < TSB_RECOVERY_OVERRIDE:
        weekly = ctl * 7 * RECOVERY_LOAD_FRACTION
        category = RampRateCategory.RECOVERY
        ramp = 0.0
        advice = f"TSB {state.tsb:.0f} is deeply negative: recovery week at 60% of normal load."
        warning = "Accumulated fatigue is high; prioritise sleep and easy days."
    elif phase.phase in _PHASE_LOAD_FRACTION:
        fraction, category, advice = _PHASE_LOAD_FRACTION[phase.phase]
        weekly = ctl * 7 * fraction
        ramp = 0.0
    else:
        weekly = (ctl + ramp) * 7
        category, warning = classify_ramp(ramp)
        advice = (
            f"{phase.phase_name}: build CTL {ctl:.0f} -> {target:.0f} "
            f"at {ramp:.1f}/week ({category.name.lower()})."
        )

    low = weekly * (1 - WEEKLY_TSS_TOLERANCE)
    high = weekly * (1 + WEEKLY_TSS_TOLERANCE)

    if wellness is not None and wellness.recovery_status in (
        RecoveryStatus.YELLOW,
        RecoveryStatus.RED,
    ):
        low *= wellness.intensity_modifier
        high *= wellness.intensity_modifier
        advice += f" Load scaled x{wellness.intensity_modifier:.2f} for {wellness.recovery_status.label}."

    result = LoadAdvice(
        target_ctl=round(target, 1),
        weekly_tss_range=(round(low), round(high)),
        daily_tss_range=(round(low / TRAINING_DAYS_MAX), round(high / TRAINING_DAYS_MIN)),
        ramp_rate=round(ramp, 2),
        ramp_rate_category=category,
        advice=advice,
        warning=warning,
    )
    logger.info(
        "Load advice: CTL %.0f -> %.0f, weekly TSS %s, %s",
        ctl,
        result.target_ctl,
        result.weekly_tss_range,
        category.name.lower(),
    )
    return result
