"""Rule registry with auto-discovery of PlanRule subclasses."""

from __future__ import annotations

import importlib
import logging
import pkgutil
from pathlib import Path

from coach_engine.rules.base import PlanRule

logger = logging.getLogger(__name__)


class RuleRegistry:
    """Discovers and manages all PlanRule implementations.

    Auto-discovers rules by scanning the rules/ package tree for any
    concrete subclasses of PlanRule. New rules are added simply by placing
    a .py file in the appropriate subdirectory; no manual registration
    needed.
    """

    def __init__(self) -> None:
        self._rules: dict[str, PlanRule] = {}

    def discover_rules(self) -> None:
        """Scan the rules package tree and register all PlanRule subclasses."""
        import coach_engine.rules as rules_pkg

        rules_path = Path(rules_pkg.__file__).parent  # type: ignore[arg-type]
        self._scan_package(rules_pkg.__name__, str(rules_path))

    def _scan_package(self, package_name: str, package_path: str) -> None:
        """Recursively import all modules under a package and register rules."""
        for _, module_name, _ in pkgutil.walk_packages([package_path], prefix=package_name + "."):
            module = importlib.import_module(module_name)
            for attr_name in dir(module):
                attr = getattr(module, attr_name)
                if (
                    isinstance(attr, type)
                    and issubclass(attr, PlanRule)
                    and attr is not PlanRule
                    and attr.__module__ == module.__name__
                    and not getattr(attr, "__abstractmethods__", set())
                ):
                    self.register(attr())

    def register(self, rule: PlanRule) -> None:
        """Register a rule instance by its rule_id."""
        if rule.rule_id in self._rules:
            logger.debug("Replacing rule %s", rule.rule_id)
        self._rules[rule.rule_id] = rule

    def get(self, rule_id: str) -> PlanRule | None:
        """Retrieve a rule by its rule_id."""
        return self._rules.get(rule_id)

    def get_all_rules(self) -> list[PlanRule]:
        """Return all registered rules sorted by priority (SAFETY first)."""
        return sorted(self._rules.values(), key=lambda r: (r.priority, r.order, r.rule_id))

    def application_order(self) -> list[PlanRule]:
        """Rules in the order they are applied: PREFERENCE tier first, SAFETY last."""
        return sorted(self._rules.values(), key=lambda r: (-r.priority, r.order, r.rule_id))

    @property
    def rule_ids(self) -> list[str]:
        """List all registered rule IDs."""
        return list(self._rules.keys())
