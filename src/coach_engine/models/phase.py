"""Training phase — where the athlete sits relative to the primary goal."""

from __future__ import annotations

from dataclasses import dataclass

from coach_engine.models.enums import PhaseName
from coach_engine.models.goal import Goal


@dataclass(frozen=True)
class TrainingPhase:
    """Phase band for a given day, derived purely from the goal date."""

    phase: PhaseName
    weeks_out: int
    focus: str
    goal: Goal | None = None

    @property
    def phase_name(self) -> str:
        return self.phase.label

    @property
    def is_taper(self) -> bool:
        return self.phase in (PhaseName.PEAK, PhaseName.RACE_WEEK)
