"""SAFETY rule: protect the days around A and B races.

Reference:
    Mujika & Padilla (2003). Scientific bases for precompetition tapering
    strategies. Med Sci Sports Exerc 35(7):1182-1187.

Thresholds:
    day before an A/B race  → intensity <= 2 (openers)
    day after an A/B race   → intensity <= 1 (recovery or rest)
    C races are trained through: the race day itself is the only change
"""

from __future__ import annotations

from datetime import timedelta

from coach_engine.models.decision_trace import RuleResult
from coach_engine.models.enums import GoalPriority, Priority, WorkoutType
from coach_engine.planning.context import PlanningContext
from coach_engine.planning.draft import WeekDraft
from coach_engine.rules.base import PlanRule

PRE_RACE_MAX_INTENSITY = 2
POST_RACE_MAX_INTENSITY = 1


class RaceProximityRule(PlanRule):
    """Openers the day before an A/B race, recovery the day after."""

    rule_id = "race_proximity"
    version = "1.0.0"
    priority = Priority.SAFETY
    order = 20

    def apply(self, draft: WeekDraft, context: PlanningContext) -> RuleResult | None:
        window_start = context.start_date - timedelta(days=1)
        window_end = context.end_date + timedelta(days=1)
        races = [
            g
            for g in context.goals.goals_in_range(window_start, window_end)
            if g.priority in (GoalPriority.A, GoalPriority.B)
        ]
        if not races:
            return None

        changes: list[str] = []
        constraints: list[str] = []
        for race in races:
            before = draft.index_of(race.date - timedelta(days=1))
            if before is not None:
                day = draft.days[before]
                if day.cap(PRE_RACE_MAX_INTENSITY, f"Day before {race.name}"):
                    day.set_workout(WorkoutType.OPENERS)
                    changes.append(f"{day.date:%a} -> openers")
                constraints.append(f"Openers only the day before {race.name}")

            after = draft.index_of(race.date + timedelta(days=1))
            if after is not None:
                day = draft.days[after]
                if day.cap(POST_RACE_MAX_INTENSITY, f"Day after {race.name}"):
                    changes.append(f"{day.date:%a} -> recovery")
                constraints.append(f"Recovery only the day after {race.name}")

        if not constraints:
            return None
        summary = "; ".join(changes) if changes else "days around the race already easy"
        return self.fired(
            f"{len(races)} A/B race(s) near this week: {summary}.",
            *constraints,
        )
