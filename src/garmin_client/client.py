"""High-level Garmin Connect client facade.

All methods wrap raw garminconnect / garth calls with error mapping and
retry logic. Nothing above this module sees a library exception.
"""

from __future__ import annotations

import logging
import time
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Callable, Optional

from garminconnect import (
    GarminConnectAuthenticationError,
    GarminConnectConnectionError,
    GarminConnectTooManyRequestsError,
)

from garmin_client.auth import DEFAULT_TOKEN_DIR, create_session
from garmin_client.exceptions import (
    GarminAPIError,
    GarminAuthError,
    GarminClientError,
    GarminConnectionError,
    GarminRateLimitError,
)

logger = logging.getLogger(__name__)

_MAX_RETRIES = 3
_BASE_BACKOFF_S = 2


class GarminClient:
    """Facade for Garmin Connect workout, calendar and metrics operations."""

    def __init__(
        self,
        email: str | None = None,
        password: str | None = None,
        token_dir: Path | str = DEFAULT_TOKEN_DIR,
        prompt_mfa: Optional[Callable[[], str]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._garmin = create_session(
            email=email or "",
            password=password or "",
            token_dir=token_dir,
            prompt_mfa=prompt_mfa,
        )
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Workout operations
    # ------------------------------------------------------------------

    def upload_workout(self, workout_json: dict) -> int:
        """Upload a workout to Garmin Connect.

        Returns the workoutId assigned by Garmin.
        """
        resp = self._safe_call(self._garmin.upload_workout, workout_json)
        if isinstance(resp, dict) and "workoutId" in resp:
            workout_id = int(resp["workoutId"])
            logger.info("Uploaded workout id=%d", workout_id)
            return workout_id
        raise GarminAPIError(f"Unexpected upload response: {resp}")

    def schedule_workout(self, workout_id: int, target_date: date) -> None:
        """Schedule an uploaded workout on a specific date.

        Uses garth directly since python-garminconnect has no schedule method.
        """
        date_str = target_date.isoformat()
        self._safe_call(
            self._garmin.garth.post,
            "connectapi",
            f"/workout-service/schedule/{workout_id}",
            json={"date": date_str},
            api=True,
        )
        logger.info("Scheduled workout %d for %s", workout_id, date_str)

    def upload_and_schedule(self, workout_json: dict, target_date: date) -> int:
        """Upload a workout and schedule it on a date. Returns workoutId."""
        workout_id = self.upload_workout(workout_json)
        self.schedule_workout(workout_id, target_date)
        return workout_id

    def update_workout(self, workout_id: int, workout_json: dict) -> None:
        """Overwrite an existing workout in place; its schedule is kept."""
        payload = dict(workout_json, workoutId=workout_id)
        self._safe_call(
            self._garmin.garth.put,
            "connectapi",
            f"/workout-service/workout/{workout_id}",
            json=payload,
            api=True,
        )
        logger.info("Updated workout %d", workout_id)

    def get_workout(self, workout_id: int) -> dict:
        return self._safe_call(self._garmin.get_workout_by_id, workout_id) or {}

    def delete_workout(self, workout_id: int) -> None:
        """Delete a workout from Garmin Connect (and its schedule with it)."""
        self._safe_call(self._garmin.delete_workout, workout_id)
        logger.info("Deleted workout %d", workout_id)

    # ------------------------------------------------------------------
    # Calendar
    # ------------------------------------------------------------------

    def calendar_month(self, year: int, month: int) -> list[dict]:
        """Calendar items for one month (month is 1-12; Garmin counts from 0)."""
        resp = self._safe_call(self._garmin.connectapi, f"/calendar-service/year/{year}/month/{month - 1}")
        if not isinstance(resp, dict):
            return []
        return list(resp.get("calendarItems") or [])

    def calendar_items(self, start: date, end: date) -> list[dict]:
        """Calendar items dated in [start, end]."""
        items: list[dict] = []
        month = date(start.year, start.month, 1)
        while month <= end:
            for item in self.calendar_month(month.year, month.month):
                day = item.get("date")
                if day and start.isoformat() <= day <= end.isoformat():
                    items.append(item)
            month = (month + timedelta(days=32)).replace(day=1)
        return items

    # ------------------------------------------------------------------
    # Activities and metrics
    # ------------------------------------------------------------------

    def get_activities(self, start: date, end: date) -> list[dict]:
        """Activity summaries started in [start, end]."""
        return self._safe_call(self._garmin.get_activities_by_date, start.isoformat(), end.isoformat()) or []

    def pull_wellness(self, cdate: date) -> dict[str, Any]:
        """Pull the wellness endpoints for one day.

        Returns a dict with keys: training_readiness, hrv, sleep, stats.
        Individual keys are None when their endpoint fails (partial data
        is OK).
        """
        date_str = cdate.isoformat()
        endpoints: dict[str, tuple] = {
            "training_readiness": (self._garmin.get_training_readiness, date_str),
            "hrv": (self._garmin.get_hrv_data, date_str),
            "sleep": (self._garmin.get_sleep_data, date_str),
            "stats": (self._garmin.get_stats, date_str),
        }
        return self._pull_each(endpoints, date_str)

    def pull_profile(self) -> dict[str, Any]:
        """User settings and the latest lactate threshold (FTP / threshold speed)."""
        endpoints: dict[str, tuple] = {
            "user_settings": (self._garmin.get_userprofile_settings,),
        }
        result = self._pull_each(endpoints, "profile")
        try:
            result["lactate_threshold"] = self._safe_call(self._garmin.get_lactate_threshold, latest=True)
        except GarminClientError as exc:
            logger.warning("Failed to pull lactate_threshold: %s", exc)
            result["lactate_threshold"] = None
        return result

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _pull_each(self, endpoints: dict[str, tuple], label: str) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key, (fn, *args) in endpoints.items():
            try:
                result[key] = self._safe_call(fn, *args)
            except GarminClientError as exc:
                logger.warning("Failed to pull %s for %s: %s", key, label, exc)
                result[key] = None
        return result

    def _safe_call(self, fn: Callable, *args: Any, **kwargs: Any) -> Any:
        """Call *fn* with retry + exponential backoff on 429 / transient errors."""
        last_exc: Exception | None = None
        for attempt in range(_MAX_RETRIES):
            try:
                return fn(*args, **kwargs)
            except GarminConnectAuthenticationError as exc:
                raise GarminAuthError(str(exc)) from exc
            except Exception as exc:
                status = _status_of(exc)
                if not _is_transient(exc, status):
                    raise GarminAPIError(str(exc), status_code=status) from exc
                last_exc = exc
                if attempt + 1 < _MAX_RETRIES:
                    wait = _BASE_BACKOFF_S * (2 ** attempt)
                    logger.warning(
                        "Transient Garmin error %s (attempt %d/%d), retrying in %ds",
                        status or type(exc).__name__,
                        attempt + 1,
                        _MAX_RETRIES,
                        wait,
                    )
                    self._sleep(wait)

        if _status_of(last_exc) == 429 or isinstance(last_exc, GarminConnectTooManyRequestsError):
            raise GarminRateLimitError(f"Rate limited after {_MAX_RETRIES} attempts: {last_exc}") from last_exc
        raise GarminConnectionError(
            f"Garmin unavailable after {_MAX_RETRIES} attempts: {last_exc}",
            status_code=_status_of(last_exc),
        ) from last_exc


def _status_of(exc: BaseException | None) -> int | None:
    if exc is None:
        return None
    status = getattr(exc, "status", None) or getattr(exc, "status_code", None)
    if status is None:
        response = getattr(exc, "response", None)
        status = getattr(response, "status_code", None)
    try:
        return int(status) if status is not None else None
    except (TypeError, ValueError):
        return None


def _is_transient(exc: Exception, status: int | None) -> bool:
    """429, 5xx, and connection failures without a status are retried."""
    if isinstance(exc, GarminConnectTooManyRequestsError) or status == 429:
        return True
    if status is not None:
        return status >= 500
    return isinstance(exc, (GarminConnectConnectionError, OSError))
