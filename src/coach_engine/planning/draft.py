"""Mutable working model of a week while rules shape it.

Rules edit DraftDays in place; the generator freezes them into
PlannedDays once every rule has run. ``locked`` days (user workouts,
races, breaks, elapsed days) are never edited. ``max_intensity`` is a cap
set by safety and recovery rules that later rules must respect.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from coach_engine.math.training_load import estimate_workout_tss
from coach_engine.models.enums import (
    HARD_INTENSITY,
    RUN_LONG_MAX_DURATION_MIN,
    RUN_MAX_DURATION_MIN,
    WORKOUT_DURATION_MIN,
    WORKOUT_FOR_INTENSITY,
    WORKOUT_INTENSITY,
    ActivityKind,
    WorkoutType,
)
from coach_engine.models.weekly_plan import PlannedDay

_DURATION_STEP_MIN = 5


def round_duration(minutes: float) -> float:
    return float(max(0, _DURATION_STEP_MIN * round(minutes / _DURATION_STEP_MIN)))


def duration_bounds(workout_type: WorkoutType, activity: ActivityKind = ActivityKind.RIDE) -> tuple[float, float]:
    _, low, high = WORKOUT_DURATION_MIN[workout_type]
    if activity == ActivityKind.RUN:
        cap = RUN_LONG_MAX_DURATION_MIN if workout_type == WorkoutType.LONG_ENDURANCE else RUN_MAX_DURATION_MIN
        high = max(low, min(high, cap))
    return low, high


def clamp_duration(
    workout_type: WorkoutType, minutes: float, activity: ActivityKind = ActivityKind.RIDE
) -> float:
    low, high = duration_bounds(workout_type, activity)
    return round_duration(min(max(minutes, low), high))


@dataclass
class DraftDay:
    date: date
    activity: ActivityKind
    workout_type: WorkoutType
    intensity: int
    duration_min: float
    focus: str = ""
    source: str = "plan"
    locked: bool = False
    anchored: bool = False
    sport_fixed: bool = False
    max_intensity: int = 5
    planned_tss: float | None = None
    notes: list[str] = field(default_factory=list)

    @classmethod
    def rest(cls, day: date, locked: bool = False, source: str = "plan", focus: str = "Rest") -> DraftDay:
        return cls(
            date=day,
            activity=ActivityKind.REST,
            workout_type=WorkoutType.REST,
            intensity=1,
            duration_min=0.0,
            focus=focus,
            source=source,
            locked=locked,
        )

    @classmethod
    def session(
        cls, day: date, workout_type: WorkoutType, activity: ActivityKind = ActivityKind.RIDE
    ) -> DraftDay:
        return cls(
            date=day,
            activity=activity,
            workout_type=workout_type,
            intensity=WORKOUT_INTENSITY[workout_type],
            duration_min=WORKOUT_DURATION_MIN[workout_type][0],
            focus=workout_type.label,
        )

    @classmethod
    def from_planned(cls, planned: PlannedDay, locked: bool = True, source: str | None = None) -> DraftDay:
        return cls(
            date=planned.date,
            activity=planned.activity,
            workout_type=planned.workout_type,
            intensity=planned.intensity,
            duration_min=planned.duration_min,
            focus=planned.focus,
            source=source or planned.source,
            locked=locked,
            planned_tss=planned.estimated_tss,
        )

    # -- Queries ----------------------------------------------------------

    @property
    def is_rest(self) -> bool:
        return self.activity == ActivityKind.REST

    @property
    def is_hard(self) -> bool:
        return not self.is_rest and self.intensity >= HARD_INTENSITY

    @property
    def flexible(self) -> bool:
        """Editable by any rule: not locked and not a rest day."""
        return not self.locked and not self.is_rest

    @property
    def estimated_tss(self) -> float:
        if self.is_rest:
            return 0.0
        if self.planned_tss is not None and self.locked:
            return self.planned_tss
        return estimate_workout_tss(self.workout_type, self.duration_min)

    def allows(self, workout_type: WorkoutType) -> bool:
        return WORKOUT_INTENSITY[workout_type] <= self.max_intensity

    # -- Edits ------------------------------------------------------------

    def set_workout(self, workout_type: WorkoutType, note: str = "", activity: ActivityKind | None = None) -> None:
        """Switch to *workout_type*, keeping the duration inside its bounds."""
        if self.locked:
            raise ValueError(f"{self.date} is locked")
        if workout_type == WorkoutType.REST:
            self.make_rest(note)
            return
        if activity is not None:
            self.activity = activity
        elif self.is_rest:
            self.activity = ActivityKind.RIDE
        if self.workout_type != workout_type or self.duration_min <= 0:
            self.duration_min = clamp_duration(
                workout_type, self.duration_min or WORKOUT_DURATION_MIN[workout_type][0], self.activity
            )
        self.workout_type = workout_type
        self.intensity = WORKOUT_INTENSITY[workout_type]
        self.focus = workout_type.label
        if note:
            self.notes.append(note)

    def make_rest(self, note: str = "") -> None:
        if self.locked:
            raise ValueError(f"{self.date} is locked")
        self.activity = ActivityKind.REST
        self.workout_type = WorkoutType.REST
        self.intensity = 1
        self.duration_min = 0.0
        self.focus = "Rest"
        self.anchored = False
        if note:
            self.notes.append(note)

    def cap(self, max_intensity: int, note: str = "") -> bool:
        """Cap intensity at *max_intensity*, downgrading if needed.

        Returns True when the day's workout changed.
        """
        self.max_intensity = min(self.max_intensity, max_intensity)
        if self.is_rest or self.locked or self.intensity <= max_intensity:
            return False
        self.anchored = False
        self.set_workout(WORKOUT_FOR_INTENSITY[max(max_intensity, 1)], note)
        return True

    def to_planned(self) -> PlannedDay:
        return PlannedDay(
            date=self.date,
            activity=self.activity,
            workout_type=self.workout_type,
            intensity=self.intensity,
            estimated_tss=round(self.estimated_tss, 1),
            duration_min=self.duration_min,
            focus=self.focus,
            source=self.source,
            locked=self.locked,
            notes=tuple(self.notes),
        )


@dataclass
class WeekDraft:
    """The seven DraftDays plus week-level volume intent."""

    days: list[DraftDay]
    target_tss: float
    volume_scale: float = 1.0
    notes: list[str] = field(default_factory=list)

    @property
    def sessions(self) -> list[DraftDay]:
        return [d for d in self.days if not d.is_rest]

    @property
    def flexible(self) -> list[DraftDay]:
        return [d for d in self.days if d.flexible]

    @property
    def total_tss(self) -> float:
        return sum(d.estimated_tss for d in self.days)

    def index_of(self, day: date) -> int | None:
        for i, draft_day in enumerate(self.days):
            if draft_day.date == day:
                return i
        return None

    def neighbours(self, index: int) -> tuple[DraftDay | None, DraftDay | None]:
        before = self.days[index - 1] if index > 0 else None
        after = self.days[index + 1] if index + 1 < len(self.days) else None
        return before, after

    def fits_hard_spacing(self, index: int, intensity: int) -> bool:
        """Whether day *index* could take *intensity* without breaking spacing."""
        before, after = self.neighbours(index)
        if intensity >= HARD_INTENSITY:
            if before is not None and before.is_hard:
                return False
            if after is not None and after.is_hard:
                return False
        if before is not None and not before.is_rest and before.intensity == 5 and intensity > 2:
            return False
        if intensity == 5 and after is not None and not after.is_rest and after.intensity > 2:
            return False
        return True
