"""OPTIMIZATION rule: mix rides and runs roughly 2:1.

Runs carry more impact load per minute, so they land on easy, non-long
days and never on consecutive days. An athlete with a single sport gets
that sport everywhere.

Reference:
    Millet et al. (2009). Physiological and biomechanical adaptations to
    the cycle to run transition in Olympic triathlon. Sports Med 39(3).
"""

from __future__ import annotations

from coach_engine.models.decision_trace import RuleResult
from coach_engine.models.enums import (
    HARD_INTENSITY,
    RIDE_TO_RUN_RATIO,
    ActivityKind,
    Priority,
    WorkoutType,
)
from coach_engine.planning.context import PlanningContext
from coach_engine.planning.draft import DraftDay, WeekDraft, clamp_duration
from coach_engine.rules.base import PlanRule


def _switch(day: DraftDay, activity: ActivityKind) -> None:
    day.activity = activity
    day.duration_min = clamp_duration(day.workout_type, day.duration_min, activity)
    day.notes.append(f"Sport: {activity.name.lower()}")


class SportRatioRule(PlanRule):
    """Assigns ride or run to each session to hit the target sport mix."""

    rule_id = "sport_ratio"
    version = "1.0.0"
    priority = Priority.OPTIMIZATION
    order = 10

    def apply(self, draft: WeekDraft, context: PlanningContext) -> RuleResult | None:
        sports = [s for s in context.sports if s in (ActivityKind.RIDE, ActivityKind.RUN)]
        if not sports:
            return None
        movable = [d for d in draft.flexible if not d.sport_fixed]

        if len(sports) == 1:
            only = sports[0]
            changed = [d for d in movable if d.activity != only]
            for day in changed:
                _switch(day, only)
            if not changed:
                return None
            return self.fired(f"Single-sport athlete: all sessions are {only.name.lower()}s.")

        sessions = draft.sessions
        target_runs = round(len(sessions) / (RIDE_TO_RUN_RATIO + 1))
        runs = [d for d in sessions if d.activity == ActivityKind.RUN]
        changes: list[str] = []

        if len(runs) < target_runs:
            for day in sorted(movable, key=self._run_preference):
                if len(runs) >= target_runs:
                    break
                if day.activity == ActivityKind.RUN or not self._run_allowed(draft, day):
                    continue
                _switch(day, ActivityKind.RUN)
                runs.append(day)
                changes.append(f"{day.date:%a} run")
        elif len(runs) > target_runs:
            for day in sorted(movable, key=self._run_preference, reverse=True):
                if len(runs) <= target_runs:
                    break
                if day.activity != ActivityKind.RUN:
                    continue
                _switch(day, ActivityKind.RIDE)
                runs.remove(day)
                changes.append(f"{day.date:%a} ride")

        if not changes:
            return None
        return self.fired(
            f"Sport mix {len(sessions) - len(runs)} rides : {len(runs)} runs ({', '.join(changes)}).",
            "Runs on easy days, never back to back",
        )

    @staticmethod
    def _run_preference(day: DraftDay) -> tuple[bool, bool, int]:
        return (day.workout_type == WorkoutType.LONG_ENDURANCE, day.intensity >= HARD_INTENSITY, day.intensity)

    @staticmethod
    def _run_allowed(draft: WeekDraft, day: DraftDay) -> bool:
        if day.workout_type == WorkoutType.LONG_ENDURANCE or day.intensity >= HARD_INTENSITY:
            return False
        before, after = draft.neighbours(draft.days.index(day))
        return all(n is None or n.activity != ActivityKind.RUN for n in (before, after))
