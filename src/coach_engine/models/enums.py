"""Enumerations and physiological constants for the coaching engine.

Thresholds and constants cite their published source where one exists.
Everything the heuristic policy decides on lives here so the numbers are
kept in one place.
"""

from enum import IntEnum, auto


class Priority(IntEnum):
    """Plan rule priority tiers — lower value = higher priority.

    Rules are applied from the lowest tier to the highest so SAFETY rules
    always have the final say over the week.
    """

    SAFETY = 0
    DRIVE = 1
    RECOVERY = 2
    OPTIMIZATION = 3
    PREFERENCE = 4


class PhaseName(IntEnum):
    """Training phase bands, ordered from furthest to closest to the goal."""

    BASE = auto()
    BUILD = auto()
    SPECIALTY = auto()
    PEAK = auto()
    RACE_WEEK = auto()
    TRANSITION = auto()

    @property
    def label(self) -> str:
        return _PHASE_LABELS[self]


_PHASE_LABELS = {
    PhaseName.BASE: "Base Building",
    PhaseName.BUILD: "Build Phase",
    PhaseName.SPECIALTY: "Specialty (High Build)",
    PhaseName.PEAK: "Peak/Taper",
    PhaseName.RACE_WEEK: "Race Week (Taper)",
    PhaseName.TRANSITION: "Transition",
}


class RecoveryStatus(IntEnum):
    """Daily recovery classification derived from wellness data."""

    GREEN = auto()
    YELLOW = auto()
    RED = auto()
    UNKNOWN = auto()

    @property
    def label(self) -> str:
        return _RECOVERY_LABELS[self]


_RECOVERY_LABELS = {
    RecoveryStatus.GREEN: "Green (Primed)",
    RecoveryStatus.YELLOW: "Yellow (Recovering)",
    RecoveryStatus.RED: "Red (Strained)",
    RecoveryStatus.UNKNOWN: "Unknown",
}


class GapInterpretation(IntEnum):
    """How a break since the last qualifying activity is read."""

    NORMAL = auto()
    FRESH = auto()
    RETURNING_FROM_ILLNESS = auto()
    CAUTIOUS_RETURN = auto()
    UNKNOWN = auto()


class Recommendation(IntEnum):
    """Direction of an adaptation signal."""

    EASIER = auto()
    MAINTAIN = auto()
    HARDER = auto()


class RampRateCategory(IntEnum):
    """Classification of the advised weekly CTL ramp."""

    MAINTAIN = auto()
    BUILD = auto()
    AGGRESSIVE = auto()
    CAUTION = auto()
    TAPER = auto()
    RECOVERY = auto()


class GoalPriority(IntEnum):
    """Race priority. A = goal race, B = supporting race, C = tune-up."""

    A = auto()
    B = auto()
    C = auto()


class ActivityKind(IntEnum):
    """Sport of a planned or completed session."""

    RIDE = auto()
    RUN = auto()
    REST = auto()
    OTHER = auto()


class WorkoutType(IntEnum):
    """Session archetypes. Intensity (1-5) lives in WORKOUT_INTENSITY."""

    REST = auto()
    RECOVERY = auto()
    ENDURANCE = auto()
    OPENERS = auto()
    LONG_ENDURANCE = auto()
    TEMPO = auto()
    SWEET_SPOT = auto()
    THRESHOLD = auto()
    OVER_UNDER = auto()
    VO2MAX = auto()
    ANAEROBIC = auto()
    RACE = auto()

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()


class TrainingZone(IntEnum):
    """Power / pace zones tracked for progression (Coggan 7-zone, Z1 omitted)."""

    ENDURANCE = 2
    TEMPO = 3
    THRESHOLD = 4
    VO2MAX = 5
    ANAEROBIC = 6


class EventOwner(IntEnum):
    """Who authored a calendar event. Set only by the calendar adapter."""

    SYSTEM = auto()       # carries the coach marker
    PLACEHOLDER = auto()  # bare "Ride" / "Run 60m" entry, safe to fill in
    USER = auto()         # anything else, never touched


class CalendarCategory(IntEnum):
    """Calendar item categories the engine distinguishes."""

    WORKOUT = auto()
    RACE = auto()
    HOLIDAY = auto()
    NOTE = auto()
    OTHER = auto()


class ExecutionStatus(IntEnum):
    """Outcome of a planned or unplanned session."""

    COMPLETED = auto()
    SKIPPED = auto()
    EXTRA = auto()


class TriggerPriority(IntEnum):
    """Urgency of a mid-week re-plan."""

    HIGH = auto()
    MEDIUM = auto()


class StepType(IntEnum):
    """Workout step types (Garmin-compatible numbering)."""

    WARMUP = 1
    COOLDOWN = 2
    ACTIVE = 3       # Main-set work interval
    RECOVERY = 4     # Easy spin / jog between intervals
    REST = 5         # Full stop rest
    REPEAT = 6       # Container for repeat blocks


class DurationType(IntEnum):
    """How a workout step's duration is measured."""

    TIME = auto()
    DISTANCE = auto()
    LAP_BUTTON = auto()


# ---------------------------------------------------------------------------
# Workout archetype properties
# ---------------------------------------------------------------------------

WORKOUT_INTENSITY: dict[WorkoutType, int] = {
    WorkoutType.REST: 1,
    WorkoutType.RECOVERY: 1,
    WorkoutType.ENDURANCE: 2,
    WorkoutType.OPENERS: 2,
    WorkoutType.LONG_ENDURANCE: 3,
    WorkoutType.TEMPO: 3,
    WorkoutType.SWEET_SPOT: 3,
    WorkoutType.THRESHOLD: 4,
    WorkoutType.OVER_UNDER: 4,
    WorkoutType.VO2MAX: 5,
    WorkoutType.ANAEROBIC: 5,
    WorkoutType.RACE: 5,
}

# Whole-session intensity factor (incl. warmup / cooldown) used for TSS
# estimates: TSS = hours * IF^2 * 100: Coggan & Allen (2010).
WORKOUT_INTENSITY_FACTOR: dict[WorkoutType, float] = {
    WorkoutType.REST: 0.0,
    WorkoutType.RECOVERY: 0.55,
    WorkoutType.ENDURANCE: 0.68,
    WorkoutType.OPENERS: 0.70,
    WorkoutType.LONG_ENDURANCE: 0.72,
    WorkoutType.TEMPO: 0.78,
    WorkoutType.SWEET_SPOT: 0.82,
    WorkoutType.THRESHOLD: 0.85,
    WorkoutType.OVER_UNDER: 0.86,
    WorkoutType.VO2MAX: 0.84,
    WorkoutType.ANAEROBIC: 0.80,
    WorkoutType.RACE: 0.95,
}

# Default, minimum and maximum session duration in minutes
WORKOUT_DURATION_MIN: dict[WorkoutType, tuple[float, float, float]] = {
    WorkoutType.REST: (0.0, 0.0, 0.0),
    WorkoutType.RECOVERY: (40.0, 30.0, 60.0),
    WorkoutType.ENDURANCE: (75.0, 45.0, 150.0),
    WorkoutType.OPENERS: (50.0, 40.0, 60.0),
    WorkoutType.LONG_ENDURANCE: (150.0, 90.0, 300.0),
    WorkoutType.TEMPO: (75.0, 50.0, 120.0),
    WorkoutType.SWEET_SPOT: (75.0, 55.0, 120.0),
    WorkoutType.THRESHOLD: (70.0, 50.0, 100.0),
    WorkoutType.OVER_UNDER: (70.0, 55.0, 100.0),
    WorkoutType.VO2MAX: (65.0, 45.0, 90.0),
    WorkoutType.ANAEROBIC: (60.0, 45.0, 80.0),
    WorkoutType.RACE: (90.0, 30.0, 360.0),
}

# Zone each archetype primarily trains
WORKOUT_ZONE: dict[WorkoutType, TrainingZone | None] = {
    WorkoutType.REST: None,
    WorkoutType.RECOVERY: None,
    WorkoutType.ENDURANCE: TrainingZone.ENDURANCE,
    WorkoutType.OPENERS: None,
    WorkoutType.LONG_ENDURANCE: TrainingZone.ENDURANCE,
    WorkoutType.TEMPO: TrainingZone.TEMPO,
    WorkoutType.SWEET_SPOT: TrainingZone.TEMPO,
    WorkoutType.THRESHOLD: TrainingZone.THRESHOLD,
    WorkoutType.OVER_UNDER: TrainingZone.THRESHOLD,
    WorkoutType.VO2MAX: TrainingZone.VO2MAX,
    WorkoutType.ANAEROBIC: TrainingZone.ANAEROBIC,
    WorkoutType.RACE: None,
}

# Same-intensity alternatives used when a type has been overused
WORKOUT_ALTERNATIVES: dict[WorkoutType, tuple[WorkoutType, ...]] = {
    WorkoutType.ENDURANCE: (WorkoutType.LONG_ENDURANCE,),
    WorkoutType.TEMPO: (WorkoutType.SWEET_SPOT,),
    WorkoutType.SWEET_SPOT: (WorkoutType.TEMPO,),
    WorkoutType.THRESHOLD: (WorkoutType.OVER_UNDER,),
    WorkoutType.OVER_UNDER: (WorkoutType.THRESHOLD,),
    WorkoutType.VO2MAX: (WorkoutType.ANAEROBIC,),
    WorkoutType.ANAEROBIC: (WorkoutType.VO2MAX,),
}

# Easiest archetype at each intensity, used when a rule downgrades a day
WORKOUT_FOR_INTENSITY: dict[int, WorkoutType] = {
    1: WorkoutType.RECOVERY,
    2: WorkoutType.ENDURANCE,
    3: WorkoutType.TEMPO,
    4: WorkoutType.THRESHOLD,
    5: WorkoutType.VO2MAX,
}

HARD_INTENSITY = 4  # intensity >= 4 counts as a hard / intensity session

# Runs are capped shorter than rides of the same archetype
RUN_MAX_DURATION_MIN = 90.0
RUN_LONG_MAX_DURATION_MIN = 150.0

# ---------------------------------------------------------------------------
# Recovery classification: canonical Green cutoff is 67
# ---------------------------------------------------------------------------
RECOVERY_GREEN_MIN_SCORE = 67
RECOVERY_YELLOW_MIN_SCORE = 34
RECOVERY_GREEN_MODIFIER = 1.0
RECOVERY_YELLOW_MODIFIER = 0.85
RECOVERY_RED_MODIFIER = 0.7

# HRV fallback vs trailing 7-day mean: Plews et al. (2013), Buchheit (2014)
HRV_ELEVATED_DEVIATION = 0.05
HRV_SUPPRESSED_DEVIATION = -0.10
HRV_ELEVATED_MODIFIER = 1.0
HRV_NORMAL_MODIFIER = 0.9
HRV_SUPPRESSED_MODIFIER = 0.75

WELLNESS_WINDOW_DAYS = 7

# ---------------------------------------------------------------------------
# Training gap: detraining literature, Mujika & Padilla (2000)
# ---------------------------------------------------------------------------
GAP_ESCALATION_DAYS = 4
GAP_EXTENDED_DAYS = 7
GAP_EXTENDED_FACTOR = 0.9
GAP_ILLNESS_MODIFIER = 0.7
GAP_CAUTIOUS_MODIFIER = 0.8
GAP_UNKNOWN_MODIFIER = 0.8

# ---------------------------------------------------------------------------
# RPE / Feel feedback: Foster et al. (2001) session-RPE
# Feel is 1 (strong) .. 5 (weak)
# ---------------------------------------------------------------------------
FEEDBACK_MIN_ENTRIES = 3
FEEDBACK_WINDOW_DAYS = 14
FEEL_GOOD_MAX = 2.0
FEEL_POOR_MIN = 3.0
FEEL_VERY_POOR_MIN = 3.5
FEEL_NEGATIVE_VALUE = 4
FEEL_NEGATIVE_SHARE = 0.40
RPE_TARGET_LOW = 5.0
RPE_TARGET_HIGH = 8.0

# Feedback score -> intensity adjustment percent
FEEDBACK_ADJUSTMENT_PCT = {
    "much_easier": -10,
    "easier": -5,
    "maintain": 0,
    "harder": 3,
    "much_harder": 5,
}

# ---------------------------------------------------------------------------
# Phase bands (weeks out from the primary goal)
# ---------------------------------------------------------------------------
RACE_WEEK_MAX_WEEKS = 1
PEAK_MAX_WEEKS = 3
SPECIALTY_MAX_WEEKS = 8
BUILD_MAX_WEEKS = 16

# ---------------------------------------------------------------------------
# Load advisor: Allen & Coggan (2010) Performance Manager guidelines
# ---------------------------------------------------------------------------
CTL_GAIN_PER_WEEK = 5
CTL_GAIN_ABSOLUTE_CAP = 40
CTL_GAIN_PCT_CAP = 0.25
CTL_GAIN_FLOOR = 10
TAPER_LEAD_WEEKS = 2
RAMP_CLAMP_MIN = 0.0
RAMP_CLAMP_MAX = 8.0
RAMP_MAINTAIN_MAX = 3.0
RAMP_BUILD_MAX = 5.0
RAMP_AGGRESSIVE_MAX = 7.0
RACE_WEEK_LOAD_FRACTION = 0.5
PEAK_LOAD_FRACTION = 0.7
TRANSITION_LOAD_FRACTION = 0.4
RECOVERY_LOAD_FRACTION = 0.6
TSB_RECOVERY_OVERRIDE = -25
WEEKLY_TSS_TOLERANCE = 0.10
TRAINING_DAYS_MIN = 5
TRAINING_DAYS_MAX = 6

# CTL / ATL time constants: Banister impulse-response model
CTL_TIME_CONSTANT_DAYS = 42
ATL_TIME_CONSTANT_DAYS = 7

# ---------------------------------------------------------------------------
# Weekly planning constraints
# ---------------------------------------------------------------------------
TSB_REST_DAY_THRESHOLD = -10
TYPE_HISTORY_DAYS = 14
TYPE_OVERUSE_COUNT = 2
RIDE_TO_RUN_RATIO = 2.0
TAPER_HARD_SESSION_DAYS_OUT = (3, 4)
RACE_WEEK_VOLUME_FRACTION = 0.6
PEAK_VOLUME_FRACTION = 0.75
BREAK_MIN_DAYS = 3
BREAK_LOOKAHEAD_DAYS = 14
PRE_BREAK_VOLUME_BOOST = 1.10
RECOVERY_WEEK_INTERVAL = 4  # every 4th ISO week, Pfitzinger & Douglas (2009)
RECOVERY_WEEK_VOLUME_FRACTION = 0.65
OVER_DELIVERY_VOLUME_BOOST = 1.05
SKIP_DOWNWEIGHT_COUNT = 2

# Readiness forecast: deficit halves every day of lower load
FORECAST_HALF_LIFE_DAYS = 1.0
FORECAST_SWAP_MARGIN = 0.05

# ---------------------------------------------------------------------------
# Zone progression: Coggan levels, minutes of zone time per level gained
# ---------------------------------------------------------------------------
ZONE_HISTORY_DAYS = 42
ZONE_LEVEL_MINUTES: dict[TrainingZone, float] = {
    TrainingZone.ENDURANCE: 120.0,
    TrainingZone.TEMPO: 40.0,
    TrainingZone.THRESHOLD: 20.0,
    TrainingZone.VO2MAX: 8.0,
    TrainingZone.ANAEROBIC: 3.0,
}
ZONE_MAX_LEVEL = 10.0
ZONE_CACHE_TTL_HOURS = 24

# Zones each phase wants developed, most important first
PHASE_ZONE_PRIORITIES: dict[PhaseName, tuple[TrainingZone, ...]] = {
    PhaseName.BASE: (TrainingZone.ENDURANCE, TrainingZone.TEMPO),
    PhaseName.BUILD: (TrainingZone.THRESHOLD, TrainingZone.TEMPO, TrainingZone.VO2MAX),
    PhaseName.SPECIALTY: (TrainingZone.VO2MAX, TrainingZone.THRESHOLD, TrainingZone.ANAEROBIC),
    PhaseName.PEAK: (TrainingZone.VO2MAX, TrainingZone.THRESHOLD),
    PhaseName.RACE_WEEK: (),
    PhaseName.TRANSITION: (),
}

ZONE_WORKOUT: dict[TrainingZone, WorkoutType] = {
    TrainingZone.ENDURANCE: WorkoutType.LONG_ENDURANCE,
    TrainingZone.TEMPO: WorkoutType.SWEET_SPOT,
    TrainingZone.THRESHOLD: WorkoutType.THRESHOLD,
    TrainingZone.VO2MAX: WorkoutType.VO2MAX,
    TrainingZone.ANAEROBIC: WorkoutType.ANAEROBIC,
}

# ---------------------------------------------------------------------------
# Execution tracking and mid-week triggers
# ---------------------------------------------------------------------------
ADHERENCE_COMPLETION_WEIGHT = 0.7
ADHERENCE_TSS_WEIGHT = 0.3
MIDWEEK_TSS_DEFICIT = 100.0
MIDWEEK_ADHERENCE_MIN = 70.0
MIDWEEK_MIN_PLANNED_SESSIONS = 2
MIDWEEK_TSB_ANY = -30
MIDWEEK_TSB_MULTI = -20
OVER_DELIVERY_TSS_RATIO = 1.10
OVER_DELIVERY_COMPLETION = 0.9

# ---------------------------------------------------------------------------
# Generated workout acceptance
# ---------------------------------------------------------------------------
MIN_SUITABILITY_SCORE = 6
MAX_REGENERATIONS = 2
WORKOUT_DURATION_TOLERANCE = 0.25

# ---------------------------------------------------------------------------
# Critical Speed constants: Poole et al. (2016), J Appl Physiol 120(4)
# ---------------------------------------------------------------------------
CS_MIN_DATA_POINTS = 3

# ---------------------------------------------------------------------------
# Workout structure: warmup/cooldown defaults (minutes)
# ---------------------------------------------------------------------------
WARMUP_DURATION_MIN = 10
COOLDOWN_DURATION_MIN = 5
QUALITY_WARMUP_DURATION_MIN = 15
QUALITY_COOLDOWN_DURATION_MIN = 10
