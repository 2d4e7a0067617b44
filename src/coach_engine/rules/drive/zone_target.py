"""DRIVE rule: develop the phase's least-trained zone.

Zone levels come from the last six weeks of time-in-zone (see
history.zones). Each phase lists the zones it wants developed; the one
with the lowest level gets a dedicated session on the best available day.

Reference:
    Coggan & Allen (2010). Training and Racing with a Power Meter:
    zone-specific adaptations and phase emphasis.
    Issurin (2010). New horizons for the methodology and physiology of
    training periodization. Sports Med 40(3):189-206.
"""

from __future__ import annotations

from coach_engine.history.zones import under_trained_zone
from coach_engine.models.decision_trace import RuleResult
from coach_engine.models.enums import (
    WORKOUT_ALTERNATIVES,
    WORKOUT_INTENSITY,
    WORKOUT_ZONE,
    ZONE_WORKOUT,
    Priority,
    TrainingZone,
    WorkoutType,
)
from coach_engine.planning.context import PlanningContext
from coach_engine.planning.draft import WeekDraft
from coach_engine.rules.base import PlanRule


def workout_for_zone(zone: TrainingZone, overused: frozenset[WorkoutType]) -> WorkoutType:
    """Default archetype for *zone*, or a same-zone alternative when overused."""
    preferred = ZONE_WORKOUT[zone]
    if preferred not in overused:
        return preferred
    for alternative in WORKOUT_ALTERNATIVES.get(preferred, ()):
        if WORKOUT_ZONE[alternative] == zone and alternative not in overused:
            return alternative
    return preferred


class ZoneTargetRule(PlanRule):
    """Places one session aimed at the phase's under-trained zone."""

    rule_id = "zone_target"
    version = "1.0.0"
    priority = Priority.DRIVE
    required_data = ["zone_progression"]

    def apply(self, draft: WeekDraft, context: PlanningContext) -> RuleResult | None:
        zone = under_trained_zone(context.zone_progression, context.phase_name)
        if zone is None:
            return None
        level = context.zone_progression.level(zone)
        zone_label = zone.name.title()
        constraint = f"Develop {zone_label} (level {level:.1f})"

        covered = next((d for d in draft.sessions if WORKOUT_ZONE[d.workout_type] == zone), None)
        if covered is not None:
            covered.anchored = covered.anchored or covered.flexible
            return self.fired(
                f"{zone_label} is the least developed zone; {covered.date:%A} already targets it.",
                constraint,
            )

        target = workout_for_zone(zone, context.variety.overused())
        intensity = WORKOUT_INTENSITY[target]
        slots = [
            i
            for i, d in enumerate(draft.days)
            if d.flexible
            and not d.anchored
            and d.allows(target)
            and context.day_offset(d.date) >= 0
            and draft.fits_hard_spacing(i, intensity)
        ]
        if not slots:
            return self.fired(
                f"{zone_label} is the least developed zone but no safe day is free this week.",
                constraint,
            )

        # Prefer replacing an existing quality day, then the best forecast readiness
        best = max(
            slots,
            key=lambda i: (
                draft.days[i].intensity >= 3,
                context.forecast(draft.days[i].date),
                -abs(draft.days[i].intensity - intensity),
                -i,
            ),
        )
        day = draft.days[best]
        replaced = day.workout_type.label
        day.set_workout(target, f"Targets {zone_label}")
        day.anchored = True
        return self.fired(
            f"{zone_label} is the least developed zone (level {level:.1f}); "
            f"{day.date:%A} {replaced} -> {target.label}.",
            constraint,
        )
