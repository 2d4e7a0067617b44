"""Abstract base class for all weekly plan rules."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from coach_engine.models.decision_trace import RuleResult, RuleStatus
from coach_engine.models.enums import Priority

if TYPE_CHECKING:
    from coach_engine.planning.context import PlanningContext
    from coach_engine.planning.draft import WeekDraft


class PlanRule(ABC):
    """Base class for all rules that shape a weekly plan.

    Each rule encapsulates one planning constraint or preference. Rules are
    discovered automatically by the RuleRegistry and applied by the
    WeeklyPlanGenerator from the lowest priority tier (PREFERENCE) to the
    highest (SAFETY), so safety rules always have the final say. Within a
    tier, ``order`` decides.

    Subclasses must define:
        rule_id: unique identifier (e.g. "hard_day_spacing")
        version: semantic version string
        priority: Priority tier (SAFETY, DRIVE, RECOVERY, OPTIMIZATION, PREFERENCE)
        required_data: PlanningContext attribute names the rule needs
        apply(): the rule's logic, editing the WeekDraft in place
    """

    rule_id: str
    version: str
    priority: Priority
    required_data: list[str] = []
    order: int = 50

    def has_required_data(self, context: PlanningContext) -> bool:
        """Check that all required PlanningContext fields are present."""
        for field_name in self.required_data:
            value = getattr(context, field_name, None)
            if value is None:
                return False
            if isinstance(value, (list, tuple)) and len(value) == 0:
                return False
        return True

    @abstractmethod
    def apply(self, draft: WeekDraft, context: PlanningContext) -> RuleResult | None:
        """Shape *draft* in place.

        Returns a FIRED RuleResult describing what changed, or None if the
        rule had nothing to do.
        """
        ...

    def fired(self, explanation: str, *constraints: str) -> RuleResult:
        return RuleResult(
            rule_id=self.rule_id,
            status=RuleStatus.FIRED,
            explanation=explanation,
            constraints=constraints,
        )
