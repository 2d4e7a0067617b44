"""Zone progression levels from recent time-in-zone.

Each zone earns a level from 1 to 10: one level per ZONE_LEVEL_MINUTES of
work in that zone over the trailing six weeks. The planner targets the
lowest-levelled zone among those the current phase cares about.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Iterable

from coach_engine.models.enums import (
    PHASE_ZONE_PRIORITIES,
    ZONE_HISTORY_DAYS,
    ZONE_LEVEL_MINUTES,
    ZONE_MAX_LEVEL,
    PhaseName,
    TrainingZone,
)
from coach_engine.models.execution import ActualActivity


@dataclass(frozen=True)
class ZoneProgression:
    """Per-zone progression levels as of a given day."""

    as_of: date
    levels: dict[TrainingZone, float] = field(default_factory=dict)
    minutes: dict[TrainingZone, float] = field(default_factory=dict)

    @property
    def has_data(self) -> bool:
        return any(m > 0 for m in self.minutes.values())

    def level(self, zone: TrainingZone) -> float:
        return self.levels.get(zone, 1.0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "as_of": self.as_of.isoformat(),
            "levels": {z.name: v for z, v in self.levels.items()},
            "minutes": {z.name: v for z, v in self.minutes.items()},
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> ZoneProgression:
        return cls(
            as_of=date.fromisoformat(raw["as_of"]),
            levels={TrainingZone[k]: float(v) for k, v in raw.get("levels", {}).items()},
            minutes={TrainingZone[k]: float(v) for k, v in raw.get("minutes", {}).items()},
        )


def compute_zone_progression(
    activities: Iterable[ActualActivity], as_of: date
) -> ZoneProgression:
    """Aggregate time-in-zone over ZONE_HISTORY_DAYS into levels."""
    start = as_of - timedelta(days=ZONE_HISTORY_DAYS)
    minutes: dict[TrainingZone, float] = {zone: 0.0 for zone in TrainingZone}
    for activity in activities:
        if not start <= activity.date < as_of:
            continue
        for zone, seconds in activity.zone_seconds.items():
            minutes[zone] += seconds / 60.0

    levels = {
        zone: round(min(ZONE_MAX_LEVEL, 1.0 + total / ZONE_LEVEL_MINUTES[zone]), 1)
        for zone, total in minutes.items()
    }
    return ZoneProgression(
        as_of=as_of,
        levels=levels,
        minutes={z: round(m, 1) for z, m in minutes.items()},
    )


def under_trained_zone(
    progression: ZoneProgression | None, phase: PhaseName
) -> TrainingZone | None:
    """Lowest-levelled zone among those *phase* prioritises.

    Ties go to the zone the phase lists first. None without zone data.
    """
    if progression is None or not progression.has_data:
        return None
    priorities = PHASE_ZONE_PRIORITIES[phase]
    if not priorities:
        return None
    return min(priorities, key=lambda z: (progression.level(z), priorities.index(z)))
