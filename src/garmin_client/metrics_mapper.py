"""Pure functions mapping Garmin API response dicts to engine models.

No I/O. Takes raw dicts from GarminClient methods and returns
WellnessSample / ActualActivity values, or None where data is missing.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from coach_engine.models.enums import ActivityKind, TrainingZone
from coach_engine.models.execution import ActualActivity
from coach_engine.models.wellness import WellnessSample
from coach_engine.workout_builder.description_builder import workout_type_from_title

_RIDE_KEYS = ("cycling", "biking", "ride", "virtual_ride", "indoor_cycling")
_RUN_KEYS = ("running", "run", "treadmill", "trail")

# Garmin power zones 2-6 line up with the Coggan zones the engine tracks
_POWER_ZONE_FIELDS = {
    TrainingZone.ENDURANCE: "powerTimeInZone_2",
    TrainingZone.TEMPO: "powerTimeInZone_3",
    TrainingZone.THRESHOLD: "powerTimeInZone_4",
    TrainingZone.VO2MAX: "powerTimeInZone_5",
    TrainingZone.ANAEROBIC: "powerTimeInZone_6",
}
# Five heart-rate zones: Z5 covers everything above threshold
_HR_ZONE_FIELDS = {
    TrainingZone.ENDURANCE: "hrTimeInZone_2",
    TrainingZone.TEMPO: "hrTimeInZone_3",
    TrainingZone.THRESHOLD: "hrTimeInZone_4",
    TrainingZone.VO2MAX: "hrTimeInZone_5",
}


def map_wellness(raw: dict[str, Any], cdate: date) -> WellnessSample:
    """Map a GarminClient.pull_wellness() result to a WellnessSample.

    Training Readiness (0-100) stands in for the recovery score. Garmin's
    average stress level (0-100) is folded onto the 1-4 subjective scale.
    Soreness, fatigue and mood have no Garmin counterpart and stay None.
    """
    stats = raw.get("stats") if isinstance(raw.get("stats"), dict) else {}
    rmssd, _ = _extract_hrv(raw.get("hrv"))
    return WellnessSample(
        date=cdate,
        sleep_hours=_extract_sleep_hours(raw.get("sleep")),
        sleep_score=_extract_sleep_score(raw.get("sleep")),
        hrv=rmssd,
        resting_hr=_as_float(stats.get("restingHeartRate")),
        recovery_score=_extract_readiness_score(raw.get("training_readiness")),
        stress=_stress_scale(stats.get("averageStressLevel")),
    )


def map_activity(raw: dict[str, Any]) -> Optional[ActualActivity]:
    """Map one activity summary. None when it has no usable start date."""
    started = _activity_date(raw.get("startTimeLocal") or raw.get("startTimeGMT"))
    if started is None:
        return None

    kind = activity_kind(raw)
    name = str(raw.get("activityName") or "")
    load = _as_float(raw.get("trainingStressScore"))
    if load is None:
        load = _as_float(raw.get("activityTrainingLoad")) or 0.0

    zone_fields = _POWER_ZONE_FIELDS if kind == ActivityKind.RIDE and "powerTimeInZone_2" in raw else _HR_ZONE_FIELDS
    zone_seconds = {
        zone: seconds
        for zone, field_name in zone_fields.items()
        if (seconds := _as_float(raw.get(field_name)))
    }

    return ActualActivity(
        date=started,
        activity=kind,
        duration_min=round((_as_float(raw.get("duration")) or 0.0) / 60.0, 1),
        training_load=round(load, 1),
        name=name,
        workout_type=workout_type_from_title(name),
        zone_seconds=zone_seconds,
        rpe=_rpe(raw.get("directWorkoutRpe")),
        feel=_feel(raw.get("directWorkoutFeel")),
    )


def activity_kind(raw: dict[str, Any]) -> ActivityKind:
    activity_type = raw.get("activityType")
    key = str(activity_type.get("typeKey", "")) if isinstance(activity_type, dict) else ""
    key = key.lower()
    if any(k in key for k in _RIDE_KEYS):
        return ActivityKind.RIDE
    if any(k in key for k in _RUN_KEYS):
        return ActivityKind.RUN
    return ActivityKind.OTHER


def map_threshold(raw: dict[str, Any]) -> tuple[Optional[float], Optional[float]]:
    """(FTP watts, threshold speed m/s) from a lactate threshold response."""
    lt = raw.get("lactate_threshold")
    if not isinstance(lt, dict):
        return (None, None)

    power = lt.get("power") if isinstance(lt.get("power"), dict) else lt
    ftp = _as_float(power.get("functionalThresholdPower"))

    speed: Optional[float] = None
    lt_speed = _as_float(lt.get("runningLactateThresholdSpeed"))
    if lt_speed:
        speed = lt_speed / 100.0  # cm/s → m/s
    return (ftp, speed)


def map_weight_kg(raw: dict[str, Any]) -> Optional[float]:
    settings = raw.get("user_settings")
    if not isinstance(settings, dict):
        return None
    user_data = settings.get("userData") or settings
    weight_g = _as_float(user_data.get("weight"))
    return round(weight_g / 1000.0, 1) if weight_g else None


# ---------------------------------------------------------------------------
# Internal extractors: each handles None input gracefully
# ---------------------------------------------------------------------------


def _extract_hrv(data: Any) -> tuple[Optional[float], Optional[float]]:
    """Extract HRV RMSSD and weekly baseline from Garmin HRV data.

    Returns (rmssd_last_night, weekly_average).
    """
    summary = data.get("hrvSummary") if isinstance(data, dict) else None
    if not summary:
        return (None, None)
    return (_as_float(summary.get("lastNightAvg")), _as_float(summary.get("weeklyAvg")))


def _sleep_dto(data: Any) -> dict:
    if not isinstance(data, dict):
        return {}
    dto = data.get("dailySleepDTO")
    return dto if isinstance(dto, dict) else {}


def _extract_sleep_score(data: Any) -> Optional[float]:
    """Path: dailySleepDTO.sleepScores.overall.value"""
    scores = _sleep_dto(data).get("sleepScores")
    if not isinstance(scores, dict):
        return None
    overall = scores.get("overall")
    if not isinstance(overall, dict):
        return None
    return _as_float(overall.get("value"))


def _extract_sleep_hours(data: Any) -> Optional[float]:
    seconds = _as_float(_sleep_dto(data).get("sleepTimeSeconds"))
    return round(seconds / 3600.0, 2) if seconds else None


def _extract_readiness_score(data: Any) -> Optional[float]:
    entry = data[0] if isinstance(data, list) and data else data
    if not isinstance(entry, dict):
        return None
    return _as_float(entry.get("score") or entry.get("readinessScore"))


def _stress_scale(value: Any) -> Optional[int]:
    """0-25 → 1, 26-50 → 2, 51-75 → 3, above → 4. Garmin uses -1/-2 for no data."""
    stress = _as_float(value)
    if stress is None or stress < 0:
        return None
    if stress <= 25:
        return 1
    if stress <= 50:
        return 2
    if stress <= 75:
        return 3
    return 4


def _rpe(value: Any) -> Optional[float]:
    """Garmin stores RPE as 10-100."""
    rpe = _as_float(value)
    return round(rpe / 10.0, 1) if rpe else None


def _feel(value: Any) -> Optional[float]:
    """Garmin Feel 0 (very weak) .. 100 (very strong) → 5 .. 1."""
    feel = _as_float(value)
    if feel is None:
        return None
    return round(1.0 + (100.0 - feel) / 25.0, 1)


def _activity_date(value: Any) -> Optional[date]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace(" ", "T")).date()
    except ValueError:
        return None


def _as_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
