"""Environment-variable-based configuration for the coach scheduler."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from coach_engine.config import CoachConfig
from coach_engine.errors import ConfigurationError

DEFAULT_PROFILE_PATH = "profiles/athlete.json"


@dataclass(frozen=True)
class SchedulerSettings:
    """Process settings: credentials, schedule and the athlete's CoachConfig."""

    coach: CoachConfig
    garmin_email: str
    garmin_password: str
    token_dir: Path
    weekly_day: str = "sun"
    weekly_hour: int = 20
    midweek_day: str = "wed"
    midweek_hour: int = 12
    daily_hour: int = 5
    minute: int = 0


def load_profile(path: Path) -> dict:
    """Load the athlete profile JSON from disk."""
    try:
        with open(path) as f:
            return json.load(f)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Profile not found at {path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Profile {path} is not valid JSON: {exc}") from exc


def load_settings(env: Mapping[str, str] | None = None) -> SchedulerSettings:
    """Build settings from *env* (default: ``os.environ``).

    Raises:
        ConfigurationError: On a missing profile or a malformed value.
    """
    env = os.environ if env is None else env
    profile_path = Path(
        env.get("COACH_PROFILE") or env.get("ATHLETE_PROFILE") or DEFAULT_PROFILE_PATH
    ).expanduser()
    coach = CoachConfig.from_profile(load_profile(profile_path), env)

    return SchedulerSettings(
        coach=coach,
        garmin_email=env.get("GARMIN_EMAIL", ""),
        garmin_password=env.get("GARMIN_PASSWORD", ""),
        token_dir=Path(env.get("GARMIN_TOKEN_DIR", "~/.garminconnect")).expanduser(),
        weekly_day=env.get("SCHEDULER_WEEKLY_DAY", "sun"),
        weekly_hour=_int(env, "SCHEDULER_WEEKLY_HOUR", 20),
        midweek_day=env.get("SCHEDULER_MIDWEEK_DAY", "wed"),
        midweek_hour=_int(env, "SCHEDULER_MIDWEEK_HOUR", 12),
        daily_hour=_int(env, "SCHEDULER_DAILY_HOUR", 5),
        minute=_int(env, "SCHEDULER_MINUTE", 0),
    )


def _int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}") from exc
