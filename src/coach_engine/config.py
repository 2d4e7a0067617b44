"""Immutable athlete / engine configuration.

A CoachConfig is built once per invocation (see ``scheduler.config``) and
passed explicitly to every component. Nothing in the engine reads
process-wide state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Mapping

from coach_engine.errors import ConfigurationError
from coach_engine.models.enums import (
    MAX_REGENERATIONS,
    MIN_SUITABILITY_SCORE,
    ZONE_CACHE_TTL_HOURS,
    ActivityKind,
    GoalPriority,
)
from coach_engine.models.goal import Goal, GoalCalendar, TrainingBreak

POLICY_HEURISTIC = "heuristic"
POLICY_GENERATIVE = "generative"
_POLICY_MODES = (POLICY_HEURISTIC, POLICY_GENERATIVE)
_DEFAULT_AI_MODEL = "gpt-4o-mini"

_SPORTS = {
    "ride": ActivityKind.RIDE,
    "cycling": ActivityKind.RIDE,
    "run": ActivityKind.RUN,
    "running": ActivityKind.RUN,
}


@dataclass(frozen=True)
class CoachConfig:
    """Everything the engine needs to know about the athlete and itself."""

    athlete_id: str
    sports: tuple[ActivityKind, ...] = (ActivityKind.RIDE, ActivityKind.RUN)
    ftp_watts: float | None = None
    threshold_pace_s_per_km: float | None = None
    run_best_efforts: tuple[tuple[float, float], ...] = field(default_factory=tuple)
    goals: GoalCalendar = field(default_factory=GoalCalendar)
    fallback_goal: Goal | None = None

    policy_mode: str = POLICY_HEURISTIC
    ai_model: str = _DEFAULT_AI_MODEL
    ai_api_key: str | None = None
    max_regenerations: int = MAX_REGENERATIONS
    min_suitability: float = MIN_SUITABILITY_SCORE

    cache_path: Path | None = None
    cache_ttl_hours: float = ZONE_CACHE_TTL_HOURS

    @property
    def rides(self) -> bool:
        return ActivityKind.RIDE in self.sports

    @property
    def runs(self) -> bool:
        return ActivityKind.RUN in self.sports

    @classmethod
    def from_profile(
        cls, profile: Mapping[str, Any], env: Mapping[str, str] | None = None
    ) -> CoachConfig:
        """Build a config from an athlete profile dict plus environment values.

        Raises:
            ConfigurationError: If a required setting is missing or malformed.
        """
        env = env or {}
        athlete_id = str(profile.get("athlete_id") or env.get("COACH_ATHLETE_ID") or "")
        if not athlete_id:
            raise ConfigurationError("athlete_id is required")

        sports = _parse_sports(profile.get("sports", ["ride", "run"]))

        policy = profile.get("policy") or {}
        mode = str(env.get("COACH_POLICY_MODE") or policy.get("mode") or POLICY_HEURISTIC)
        if mode not in _POLICY_MODES:
            raise ConfigurationError(
                f"Unknown policy mode {mode!r}; expected one of {_POLICY_MODES}"
            )
        api_key = env.get("OPENAI_API_KEY") or None
        if mode == POLICY_GENERATIVE and not api_key:
            raise ConfigurationError("Generative policy requires OPENAI_API_KEY")

        goals = tuple(_parse_goal(g) for g in profile.get("goals", []))
        breaks = tuple(_parse_break(b) for b in profile.get("breaks", []))
        fallback = profile.get("fallback_goal")

        cache = profile.get("cache") or {}
        cache_path = env.get("COACH_CACHE_PATH") or cache.get("path")

        return cls(
            athlete_id=athlete_id,
            sports=sports,
            ftp_watts=_optional_float(profile.get("ftp_watts"), "ftp_watts"),
            threshold_pace_s_per_km=_parse_pace(profile.get("threshold_pace")),
            run_best_efforts=tuple(
                (float(d), float(t)) for d, t in profile.get("run_best_efforts", [])
            ),
            goals=GoalCalendar.from_goals(*goals, breaks=breaks),
            fallback_goal=_parse_goal(fallback) if fallback else None,
            policy_mode=mode,
            ai_model=str(policy.get("model") or _DEFAULT_AI_MODEL),
            ai_api_key=api_key,
            max_regenerations=int(policy.get("max_regenerations", MAX_REGENERATIONS)),
            min_suitability=float(policy.get("min_suitability", MIN_SUITABILITY_SCORE)),
            cache_path=Path(cache_path).expanduser() if cache_path else None,
            cache_ttl_hours=float(cache.get("ttl_hours", ZONE_CACHE_TTL_HOURS)),
        )


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


def _parse_sports(raw: Any) -> tuple[ActivityKind, ...]:
    sports: list[ActivityKind] = []
    for name in raw or []:
        kind = _SPORTS.get(str(name).lower())
        if kind is None:
            raise ConfigurationError(f"Unsupported sport {name!r}")
        if kind not in sports:
            sports.append(kind)
    if not sports:
        raise ConfigurationError("At least one sport must be enabled")
    return tuple(sports)


def _parse_date(raw: Any, what: str) -> date:
    if isinstance(raw, date):
        return raw
    try:
        return date.fromisoformat(str(raw))
    except ValueError as exc:
        raise ConfigurationError(f"Invalid {what} date {raw!r}") from exc


def _parse_goal(raw: Mapping[str, Any]) -> Goal:
    try:
        name = str(raw["name"])
        priority = GoalPriority[str(raw.get("priority", "A")).upper()]
    except KeyError as exc:
        raise ConfigurationError(f"Invalid goal entry {raw!r}") from exc
    activity = _SPORTS.get(str(raw.get("activity", "ride")).lower(), ActivityKind.RIDE)
    return Goal(
        name=name,
        date=_parse_date(raw.get("date"), f"goal {name!r}"),
        priority=priority,
        goal_type=str(raw.get("type", "race")),
        description=str(raw.get("description", "")),
        activity=activity,
    )


def _parse_break(raw: Mapping[str, Any]) -> TrainingBreak:
    start = _parse_date(raw.get("start"), "break start")
    end = _parse_date(raw.get("end"), "break end")
    if end < start:
        raise ConfigurationError(f"Break ends before it starts: {raw!r}")
    return TrainingBreak(start=start, end=end, name=str(raw.get("name", "Break")))


def _parse_pace(raw: Any) -> float | None:
    """Accept seconds per km or an "m:ss" string."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, (int, float)):
        return float(raw)
    text = str(raw).strip().removesuffix("/km")
    try:
        minutes, seconds = text.split(":")
        return int(minutes) * 60 + float(seconds)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid threshold pace {raw!r}") from exc


def _optional_float(raw: Any, what: str) -> float | None:
    if raw is None or raw == "":
        return None
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid {what} {raw!r}") from exc
