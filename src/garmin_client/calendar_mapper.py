"""Garmin calendar items ↔ PlaceholderEvent.

The only module that knows how the coach marks its own workouts:

    - a system workout carries ``[coach:plan]`` plus its plan metadata on
      the first line of the workout description
    - a bare placeholder is a workout titled just "Ride", "Run 60m",
      "Bike 1h" ...
    - every other workout belongs to the athlete

Races on the Garmin calendar become goals; a "(A)", "(B)" or "(C)" in
the title sets the priority, otherwise Garmin's primary event flag makes
it an A race and anything else a B race.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any, Optional

from coach_engine.models.calendar_event import PlaceholderEvent
from coach_engine.models.enums import ActivityKind, CalendarCategory, EventOwner, GoalPriority, WorkoutType
from coach_engine.models.goal import Goal
from coach_engine.reconcile.port import EventWrite

MARKER = "[coach:plan]"
GARMIN_NAME_MAX = 32

_PLACEHOLDER_RE = re.compile(
    r"^\s*(?P<sport>ride|bike|cycling|run|running)"
    r"(?:\s+(?P<amount>\d+(?:\.\d+)?)\s*(?P<unit>m|min|mins|minutes|h|hr|hrs|hours))?\s*$",
    re.IGNORECASE,
)
_META_RE = re.compile(r"(\w+)=(\S+)")
_PRIORITY_RE = re.compile(r"\(([ABC])\)", re.IGNORECASE)

_SPORT_KEYS = {
    "cycling": ActivityKind.RIDE,
    "road_biking": ActivityKind.RIDE,
    "indoor_cycling": ActivityKind.RIDE,
    "running": ActivityKind.RUN,
    "trail_running": ActivityKind.RUN,
}
_ITEM_CATEGORIES = {
    "workout": CalendarCategory.WORKOUT,
    "race": CalendarCategory.RACE,
    "event": CalendarCategory.RACE,
    "note": CalendarCategory.NOTE,
}


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


def system_title(name: str) -> str:
    return name[:GARMIN_NAME_MAX]


def system_description(write: EventWrite) -> str:
    """Marker line with the plan metadata, then the human description."""
    meta = (
        f"{MARKER} sport={write.activity.name} type={write.workout_type.name} intensity={write.intensity} "
        f"tss={write.planned_tss:.1f} duration={write.duration_min:.1f} "
        f"deferred={int(write.detail_deferred)}"
    )
    return f"{meta}\n{write.description}" if write.description else meta


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


def parse_marker(description: str | None) -> Optional[dict[str, str]]:
    """Plan metadata of a system description, None without the marker."""
    if not description:
        return None
    first = description.splitlines()[0]
    if MARKER not in first:
        return None
    return dict(_META_RE.findall(first))


def strip_marker(description: str | None) -> str:
    if not description:
        return ""
    lines = description.splitlines()
    if lines and MARKER in lines[0]:
        lines = lines[1:]
    return "\n".join(lines)


def parse_placeholder(title: str) -> Optional[tuple[ActivityKind, Optional[float]]]:
    """(sport, minutes) of a bare placeholder title, None otherwise."""
    match = _PLACEHOLDER_RE.match(title or "")
    if match is None:
        return None
    sport = match.group("sport").lower()
    kind = ActivityKind.RUN if sport.startswith("run") else ActivityKind.RIDE
    amount = match.group("amount")
    if amount is None:
        return (kind, None)
    minutes = float(amount)
    if match.group("unit").lower().startswith("h"):
        minutes *= 60
    return (kind, minutes)


def map_calendar_item(item: dict[str, Any], workout: Optional[dict[str, Any]] = None) -> Optional[PlaceholderEvent]:
    """Map one calendar item (plus its workout for workout items).

    Event ids of workouts are Garmin workout ids. Returns None for items
    without a date.
    """
    raw_date = item.get("date")
    if not raw_date:
        return None
    day = date.fromisoformat(str(raw_date)[:10])
    title = str(item.get("title") or "")
    category = _ITEM_CATEGORIES.get(str(item.get("itemType", "")).lower(), CalendarCategory.OTHER)
    sport = _SPORT_KEYS.get(str(item.get("sportTypeKey") or "").lower(), ActivityKind.OTHER)

    if category != CalendarCategory.WORKOUT:
        return PlaceholderEvent(
            id=str(item.get("id")) if item.get("id") is not None else None,
            date=day,
            name=title,
            category=category,
            activity=sport,
        )

    workout = workout or {}
    event_id = item.get("workoutId") or workout.get("workoutId") or item.get("id")
    description = workout.get("description") or item.get("description") or ""
    duration = _workout_minutes(item, workout)

    meta = parse_marker(description)
    if meta is not None:
        return PlaceholderEvent(
            id=str(event_id),
            date=day,
            name=title,
            category=category,
            description=strip_marker(description),
            activity=_meta_sport(meta) or sport,
            duration_min=_meta_float(meta, "duration") or duration,
            owner=EventOwner.SYSTEM,
            workout_type=_meta_type(meta),
            intensity=int(meta["intensity"]) if meta.get("intensity", "").isdigit() else None,
            planned_tss=_meta_float(meta, "tss"),
            detail_deferred=meta.get("deferred") == "1",
        )

    placeholder = parse_placeholder(title)
    if placeholder is not None:
        kind, minutes = placeholder
        return PlaceholderEvent(
            id=str(event_id),
            date=day,
            name=title,
            category=category,
            description=description,
            activity=kind,
            duration_min=minutes or duration,
            owner=EventOwner.PLACEHOLDER,
        )

    return PlaceholderEvent(
        id=str(event_id),
        date=day,
        name=title,
        category=category,
        description=description,
        activity=sport,
        duration_min=duration,
        owner=EventOwner.USER,
    )


def goal_from_item(item: dict[str, Any]) -> Optional[Goal]:
    """Goal for a race calendar item, None for anything else."""
    if _ITEM_CATEGORIES.get(str(item.get("itemType", "")).lower()) != CalendarCategory.RACE:
        return None
    raw_date = item.get("date")
    if not raw_date:
        return None
    title = str(item.get("title") or "Race")
    tagged = _PRIORITY_RE.search(title)
    if tagged:
        priority = GoalPriority[tagged.group(1).upper()]
    elif item.get("primaryEvent") or item.get("isPrimaryEvent"):
        priority = GoalPriority.A
    else:
        priority = GoalPriority.B
    return Goal(
        name=_PRIORITY_RE.sub("", title).strip(),
        date=date.fromisoformat(str(raw_date)[:10]),
        priority=priority,
        activity=_SPORT_KEYS.get(str(item.get("sportTypeKey") or "").lower(), ActivityKind.RIDE),
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _workout_minutes(item: dict[str, Any], workout: dict[str, Any]) -> Optional[float]:
    seconds = workout.get("estimatedDurationInSecs") or item.get("duration")
    try:
        return round(float(seconds) / 60.0, 1) if seconds else None
    except (TypeError, ValueError):
        return None


def _meta_float(meta: dict[str, str], key: str) -> Optional[float]:
    try:
        return float(meta[key])
    except (KeyError, ValueError):
        return None


def _meta_type(meta: dict[str, str]) -> Optional[WorkoutType]:
    try:
        return WorkoutType[meta["type"]]
    except KeyError:
        return None


def _meta_sport(meta: dict[str, str]) -> Optional[ActivityKind]:
    try:
        return ActivityKind[meta["sport"]]
    except KeyError:
        return None
