"""Execution tracking — plan vs actual, adherence and closed-loop context.

Records are recomputed from scratch on every review; nothing is stored.

Matching is by date and sport: a planned ride is completed by a ride on
the same day. An activity of another sport on a planned day does not
complete it; it is counted as an extra session instead.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date

from coach_engine.models.calendar_event import PlaceholderEvent
from coach_engine.models.enums import (
    ADHERENCE_COMPLETION_WEIGHT,
    ADHERENCE_TSS_WEIGHT,
    OVER_DELIVERY_COMPLETION,
    OVER_DELIVERY_TSS_RATIO,
    OVER_DELIVERY_VOLUME_BOOST,
    SKIP_DOWNWEIGHT_COUNT,
    WORKOUT_FOR_INTENSITY,
    WORKOUT_INTENSITY,
    ActivityKind,
    EventOwner,
    ExecutionStatus,
    WorkoutType,
)
from coach_engine.models.execution import (
    ActualActivity,
    AdherenceResult,
    ClosedLoopContext,
    ExecutionRecord,
)
from coach_engine.models.weekly_plan import PlannedDay
from coach_engine.math.training_load import estimate_workout_tss

logger = logging.getLogger(__name__)

# Assumed shape of a system event whose plan metadata could not be read back
_UNKNOWN_PLANNED_INTENSITY = 2


@dataclass(frozen=True)
class ExecutionSummary:
    """One review window: every record plus the adherence score."""

    start: date
    end: date
    records: tuple[ExecutionRecord, ...]
    adherence: AdherenceResult
    skipped_types: dict[WorkoutType, int] = field(default_factory=dict)

    def by_status(self, status: ExecutionStatus) -> tuple[ExecutionRecord, ...]:
        return tuple(r for r in self.records if r.status == status)

    @property
    def completed(self) -> tuple[ExecutionRecord, ...]:
        return self.by_status(ExecutionStatus.COMPLETED)

    @property
    def skipped(self) -> tuple[ExecutionRecord, ...]:
        return self.by_status(ExecutionStatus.SKIPPED)

    @property
    def extra(self) -> tuple[ExecutionRecord, ...]:
        return self.by_status(ExecutionStatus.EXTRA)


def planned_day_from_event(event: PlaceholderEvent) -> PlannedDay:
    """The PlannedDay a system-authored calendar event stands for."""
    workout_type = event.workout_type
    intensity = event.intensity
    if workout_type is None:
        workout_type = WORKOUT_FOR_INTENSITY[intensity or _UNKNOWN_PLANNED_INTENSITY]
    if intensity is None:
        intensity = WORKOUT_INTENSITY[workout_type]
    duration = event.duration_min or 0.0
    tss = event.planned_tss
    if tss is None:
        tss = estimate_workout_tss(workout_type, duration)
    activity = event.activity if event.activity in (ActivityKind.RIDE, ActivityKind.RUN) else ActivityKind.RIDE
    return PlannedDay(
        date=event.date,
        activity=activity,
        workout_type=workout_type,
        intensity=intensity,
        estimated_tss=tss,
        duration_min=duration,
        focus=event.name,
        source="plan",
    )


def build_execution_records(
    placeholders: Sequence[PlaceholderEvent],
    actuals: Sequence[ActualActivity],
    start: date,
    end: date,
) -> list[ExecutionRecord]:
    """Records for the system-authored workouts and activities in [start, end]."""
    planned = [
        planned_day_from_event(e)
        for e in placeholders
        if e.owner == EventOwner.SYSTEM and e.is_workout and start <= e.date <= end
    ]
    return match_planned(planned, actuals, start, end)


def match_planned(
    planned: Sequence[PlannedDay],
    actuals: Sequence[ActualActivity],
    start: date,
    end: date,
) -> list[ExecutionRecord]:
    """Match planned sessions to actual activities by date and sport."""
    unused = [a for a in actuals if start <= a.date <= end]
    records: list[ExecutionRecord] = []

    for day in sorted(planned, key=lambda d: d.date):
        if day.is_rest or not start <= day.date <= end:
            continue
        actual = next((a for a in unused if a.date == day.date and a.activity == day.activity), None)
        if actual is None:
            records.append(ExecutionRecord(date=day.date, status=ExecutionStatus.SKIPPED, planned=day))
            continue
        unused.remove(actual)
        records.append(
            ExecutionRecord(
                date=day.date,
                status=ExecutionStatus.COMPLETED,
                planned=day,
                actual=actual,
                tss_variance=round(actual.training_load - day.estimated_tss, 1),
                duration_variance=round(actual.duration_min - day.duration_min, 1),
            )
        )

    for actual in unused:
        records.append(
            ExecutionRecord(
                date=actual.date,
                status=ExecutionStatus.EXTRA,
                actual=actual,
                tss_variance=actual.training_load,
                duration_variance=actual.duration_min,
            )
        )
    records.sort(key=lambda r: (r.date, r.status))
    return records


def compute_adherence(records: Sequence[ExecutionRecord]) -> AdherenceResult:
    """Adherence = 0.7 x completion + 0.3 x min(1, actual/planned TSS), as 0-100.

    Nothing planned gives ``AdherenceResult.no_data()``.
    """
    actual_tss = sum(r.actual.training_load for r in records if r.actual is not None)
    planned = [r for r in records if r.status != ExecutionStatus.EXTRA]
    if not planned:
        return AdherenceResult.no_data(actual_tss=round(actual_tss, 1))

    completed = sum(1 for r in planned if r.status == ExecutionStatus.COMPLETED)
    planned_tss = sum(r.planned.estimated_tss for r in planned)
    completion = completed / len(planned)
    tss_ratio = actual_tss / planned_tss if planned_tss > 0 else 1.0

    raw = ADHERENCE_COMPLETION_WEIGHT * completion + ADHERENCE_TSS_WEIGHT * min(1.0, tss_ratio)
    score = min(100.0, max(0.0, raw * 100.0))
    return AdherenceResult(
        score=round(score, 1),
        planned_sessions=len(planned),
        completed_sessions=completed,
        planned_tss=round(planned_tss, 1),
        actual_tss=round(actual_tss, 1),
    )


def summarize_execution(records: Sequence[ExecutionRecord], start: date, end: date) -> ExecutionSummary:
    adherence = compute_adherence(records)
    skipped = Counter(r.planned.workout_type for r in records if r.status == ExecutionStatus.SKIPPED)
    summary = ExecutionSummary(
        start=start,
        end=end,
        records=tuple(records),
        adherence=adherence,
        skipped_types=dict(skipped),
    )
    if adherence.has_data:
        logger.info(
            "Execution %s..%s: %d/%d sessions, adherence %.0f, %d extra",
            start,
            end,
            adherence.completed_sessions,
            adherence.planned_sessions,
            adherence.score,
            len(summary.extra),
        )
    else:
        logger.info("Execution %s..%s: nothing planned, %d extra session(s)", start, end, len(summary.extra))
    return summary


def build_closed_loop(summary: ExecutionSummary) -> ClosedLoopContext:
    """What the next plan should learn from *summary*."""
    adherence = summary.adherence
    sessions_done = len(summary.completed) + len(summary.extra)
    completed_sessions = sessions_done if adherence.has_data or sessions_done else None

    downweighted = frozenset(t for t, n in summary.skipped_types.items() if n >= SKIP_DOWNWEIGHT_COUNT)
    notes = [f"{t.label} skipped {summary.skipped_types[t]}x" for t in sorted(downweighted)]

    confidence = 1.0
    if adherence.has_data and adherence.planned_tss > 0:
        ratio = adherence.actual_tss / adherence.planned_tss
        completion = adherence.completed_sessions / adherence.planned_sessions
        if ratio >= OVER_DELIVERY_TSS_RATIO and completion >= OVER_DELIVERY_COMPLETION:
            confidence = OVER_DELIVERY_VOLUME_BOOST
            notes.append(f"Over-delivered: {ratio:.0%} of planned TSS")

    return ClosedLoopContext(
        completed_sessions=completed_sessions,
        downweighted_types=downweighted,
        volume_confidence=confidence,
        adherence=adherence,
        notes=tuple(notes),
    )
