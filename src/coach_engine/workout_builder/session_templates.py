"""Session templates — structural patterns for each WorkoutType.

Each template defines the warmup / main-set / cooldown decomposition and
the power band (fraction of FTP) of every segment. Run sessions reuse the
same bands through the FTP <-> Critical Speed equivalency. The
WorkoutBuilder splits a brief's total duration across these segments.
"""

from __future__ import annotations

from dataclasses import dataclass

from coach_engine.models.enums import (
    COOLDOWN_DURATION_MIN,
    QUALITY_COOLDOWN_DURATION_MIN,
    QUALITY_WARMUP_DURATION_MIN,
    WARMUP_DURATION_MIN,
    WorkoutType,
)

Band = tuple[float, float]

EASY_BAND: Band = (0.50, 0.60)
RECOVERY_BAND: Band = (0.45, 0.55)


@dataclass(frozen=True)
class SegmentTemplate:
    """Template for a single main-set segment.

    Attributes:
        power: Work power band as fractions of FTP.
        is_repeat: Whether this segment is an interval repeat block.
        rep_work_min: Per-rep work duration in minutes.
        rep_recovery_min: Per-rep recovery duration in minutes.
        recovery_power: Power band of the recovery between reps.
        fraction_of_main: Share of main-set time for split steady segments.
        cue: Short coaching note attached to the step.
    """

    power: Band
    is_repeat: bool = False
    rep_work_min: float = 0.0
    rep_recovery_min: float = 0.0
    recovery_power: Band = EASY_BAND
    fraction_of_main: float = 0.0
    cue: str = ""


@dataclass(frozen=True)
class SessionTemplate:
    """Complete template for a workout type."""

    warmup_duration_min: float
    main_segments: tuple[SegmentTemplate, ...]
    cooldown_duration_min: float
    warmup_power: Band = EASY_BAND
    cooldown_power: Band = EASY_BAND


SESSION_TEMPLATES: dict[WorkoutType, SessionTemplate] = {
    WorkoutType.RECOVERY: SessionTemplate(
        warmup_duration_min=WARMUP_DURATION_MIN,
        main_segments=(SegmentTemplate(power=RECOVERY_BAND, cue="Truly easy, conversational."),),
        cooldown_duration_min=COOLDOWN_DURATION_MIN,
        warmup_power=RECOVERY_BAND,
        cooldown_power=RECOVERY_BAND,
    ),
    WorkoutType.ENDURANCE: SessionTemplate(
        warmup_duration_min=WARMUP_DURATION_MIN,
        main_segments=(SegmentTemplate(power=(0.60, 0.72), cue="Steady aerobic, smooth cadence."),),
        cooldown_duration_min=COOLDOWN_DURATION_MIN,
    ),
    # 80 % endurance, last 20 % upper endurance / low tempo
    WorkoutType.LONG_ENDURANCE: SessionTemplate(
        warmup_duration_min=WARMUP_DURATION_MIN,
        main_segments=(
            SegmentTemplate(power=(0.60, 0.72), fraction_of_main=0.80, cue="Fuel every 30 minutes."),
            SegmentTemplate(power=(0.72, 0.80), fraction_of_main=0.20, cue="Finish strong but aerobic."),
        ),
        cooldown_duration_min=COOLDOWN_DURATION_MIN,
    ),
    WorkoutType.OPENERS: SessionTemplate(
        warmup_duration_min=QUALITY_WARMUP_DURATION_MIN,
        main_segments=(
            SegmentTemplate(
                power=(1.05, 1.15),
                is_repeat=True,
                rep_work_min=1.0,
                rep_recovery_min=4.0,
                cue="Crisp, not hard. Wake the legs up.",
            ),
        ),
        cooldown_duration_min=QUALITY_COOLDOWN_DURATION_MIN,
    ),
    WorkoutType.TEMPO: SessionTemplate(
        warmup_duration_min=QUALITY_WARMUP_DURATION_MIN,
        main_segments=(SegmentTemplate(power=(0.76, 0.88), cue="Comfortably hard, steady breathing."),),
        cooldown_duration_min=QUALITY_COOLDOWN_DURATION_MIN,
    ),
    WorkoutType.SWEET_SPOT: SessionTemplate(
        warmup_duration_min=QUALITY_WARMUP_DURATION_MIN,
        main_segments=(
            SegmentTemplate(
                power=(0.88, 0.94),
                is_repeat=True,
                rep_work_min=12.0,
                rep_recovery_min=4.0,
                cue="Just under threshold, stay seated.",
            ),
        ),
        cooldown_duration_min=QUALITY_COOLDOWN_DURATION_MIN,
    ),
    WorkoutType.THRESHOLD: SessionTemplate(
        warmup_duration_min=QUALITY_WARMUP_DURATION_MIN,
        main_segments=(
            SegmentTemplate(
                power=(0.95, 1.02),
                is_repeat=True,
                rep_work_min=10.0,
                rep_recovery_min=5.0,
                cue="Hold threshold, even pacing across reps.",
            ),
        ),
        cooldown_duration_min=QUALITY_COOLDOWN_DURATION_MIN,
    ),
    # Over-unders: the "recovery" half of each rep sits just under FTP
    WorkoutType.OVER_UNDER: SessionTemplate(
        warmup_duration_min=QUALITY_WARMUP_DURATION_MIN,
        main_segments=(
            SegmentTemplate(
                power=(1.03, 1.08),
                is_repeat=True,
                rep_work_min=2.0,
                rep_recovery_min=2.0,
                recovery_power=(0.90, 0.95),
                cue="Surge over, settle under. No easy spinning.",
            ),
        ),
        cooldown_duration_min=QUALITY_COOLDOWN_DURATION_MIN,
    ),
    WorkoutType.VO2MAX: SessionTemplate(
        warmup_duration_min=QUALITY_WARMUP_DURATION_MIN,
        main_segments=(
            SegmentTemplate(
                power=(1.10, 1.20),
                is_repeat=True,
                rep_work_min=4.0,
                rep_recovery_min=4.0,
                cue="Hard and repeatable. Full recovery between.",
            ),
        ),
        cooldown_duration_min=QUALITY_COOLDOWN_DURATION_MIN,
    ),
    WorkoutType.ANAEROBIC: SessionTemplate(
        warmup_duration_min=QUALITY_WARMUP_DURATION_MIN,
        main_segments=(
            SegmentTemplate(
                power=(1.25, 1.50),
                is_repeat=True,
                rep_work_min=1.0,
                rep_recovery_min=4.0,
                cue="Near-maximal efforts, rest fully.",
            ),
        ),
        cooldown_duration_min=QUALITY_COOLDOWN_DURATION_MIN,
    ),
    WorkoutType.RACE: SessionTemplate(
        warmup_duration_min=QUALITY_WARMUP_DURATION_MIN,
        main_segments=(SegmentTemplate(power=(0.85, 0.95), cue="Race effort."),),
        cooldown_duration_min=QUALITY_COOLDOWN_DURATION_MIN,
    ),
}


def get_template(workout_type: WorkoutType) -> SessionTemplate:
    """Look up the session template for a workout type.

    Raises:
        KeyError: If no template is defined (e.g. REST).
    """
    return SESSION_TEMPLATES[workout_type]
