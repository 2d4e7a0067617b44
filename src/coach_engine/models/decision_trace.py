"""Plan trace — audit trail of which rules shaped a weekly plan."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, auto


class RuleStatus(IntEnum):
    """Whether a rule changed the plan, had nothing to do, or lacked data."""

    FIRED = auto()
    SKIPPED = auto()
    NOT_APPLICABLE = auto()


@dataclass(frozen=True)
class RuleResult:
    """Record of a single rule's evaluation during plan generation."""

    rule_id: str
    status: RuleStatus
    explanation: str = ""
    constraints: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class PlanTrace:
    """Complete audit trail for one plan generation.

    Records every rule's outcome so the shape of the week is fully
    explainable, plus any hard-constraint violations that could not be
    resolved (e.g. two consecutive locked user workouts).
    """

    rule_results: tuple[RuleResult, ...] = field(default_factory=tuple)
    violations: tuple[str, ...] = field(default_factory=tuple)

    @property
    def fired(self) -> tuple[RuleResult, ...]:
        return tuple(r for r in self.rule_results if r.status == RuleStatus.FIRED)

    @property
    def constraints(self) -> tuple[str, ...]:
        """Constraint statements contributed by fired rules, in order."""
        out: list[str] = []
        for result in self.fired:
            out.extend(result.constraints)
        return tuple(out)
