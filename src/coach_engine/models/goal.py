"""Goals and external calendar context for periodization.

Supports A/B/C race priorities (e.g. A-race gran fondo in September,
B-race half marathon in June, C-race local crit as a tune-up) plus
multi-day breaks such as holidays.

Reference:
    Mujika (2010). Intense training: the key to optimal performance
    before and during the taper. Scand J Med Sci Sports 20(s2):24-31.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta

from coach_engine.models.enums import ActivityKind, GoalPriority


@dataclass(frozen=True)
class Goal:
    """A single dated goal (usually a race)."""

    name: str
    date: date
    priority: GoalPriority
    goal_type: str = "race"
    description: str = ""
    activity: ActivityKind = ActivityKind.RIDE


@dataclass(frozen=True)
class TrainingBreak:
    """A multi-day period without structured training (holiday, travel)."""

    start: date
    end: date  # inclusive
    name: str = "Break"

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class GoalCalendar:
    """Frozen calendar of goals and breaks with query helpers.

    Entries are stored sorted chronologically. Use ``from_goals()`` to
    build from unsorted inputs.
    """

    goals: tuple[Goal, ...] = field(default_factory=tuple)
    breaks: tuple[TrainingBreak, ...] = field(default_factory=tuple)

    # -- Factory ----------------------------------------------------------

    @classmethod
    def from_goals(
        cls, *goals: Goal, breaks: tuple[TrainingBreak, ...] = ()
    ) -> GoalCalendar:
        """Create a GoalCalendar with goals and breaks sorted chronologically."""
        return cls(
            goals=tuple(sorted(goals, key=lambda g: g.date)),
            breaks=tuple(sorted(breaks, key=lambda b: b.start)),
        )

    def merged(self, other: GoalCalendar) -> GoalCalendar:
        """Combine two calendars, dropping goals duplicated by (date, name)."""
        seen: dict[tuple[date, str], Goal] = {}
        for goal in self.goals + other.goals:
            seen.setdefault((goal.date, goal.name.lower()), goal)
        return GoalCalendar.from_goals(
            *seen.values(), breaks=tuple(set(self.breaks + other.breaks))
        )

    # -- Query helpers ----------------------------------------------------

    def primary_goal(self, as_of: date, fallback: Goal | None = None) -> Goal | None:
        """Earliest upcoming A goal, else earliest upcoming B, else *fallback*."""
        for priority in (GoalPriority.A, GoalPriority.B):
            goal = self.next_goal_by_priority(as_of, priority)
            if goal is not None:
                return goal
        return fallback

    def next_goal_by_priority(
        self, as_of: date, priority: GoalPriority
    ) -> Goal | None:
        """Return the next goal of *priority* on or after *as_of*."""
        for goal in self.goals:
            if goal.date >= as_of and goal.priority == priority:
                return goal
        return None

    def goals_in_range(self, start: date, end: date) -> tuple[Goal, ...]:
        """Return all goals whose date falls in [start, end] inclusive."""
        return tuple(g for g in self.goals if start <= g.date <= end)

    def goal_on(self, day: date) -> Goal | None:
        for goal in self.goals:
            if goal.date == day:
                return goal
        return None

    def break_on(self, day: date) -> TrainingBreak | None:
        for brk in self.breaks:
            if brk.contains(day):
                return brk
        return None

    def next_break(
        self, as_of: date, within_days: int, min_days: int = 1
    ) -> TrainingBreak | None:
        """First break of at least *min_days* starting within *within_days*."""
        horizon = as_of + timedelta(days=within_days)
        for brk in self.breaks:
            if as_of <= brk.start <= horizon and brk.days >= min_days:
                return brk
        return None
