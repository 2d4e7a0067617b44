"""Fixtures with realistic Garmin API response dicts for testing."""

from __future__ import annotations

import pytest


@pytest.fixture
def garmin_hrv_data() -> dict:
    """Realistic Garmin HRV API response."""
    return {
        "hrvSummary": {
            "calendarDate": "2026-03-02",
            "weeklyAvg": 52.0,
            "lastNight": 48.0,
            "lastNightAvg": 48.0,
            "lastNight5MinHigh": 65.0,
            "baseline": {
                "lowUpper": 40,
                "balancedLow": 45,
                "balancedUpper": 60,
                "markerValue": None,
            },
            "status": "BALANCED",
        },
        "hrvReadings": [
            {"readingTimeGMT": "2026-03-02T02:00:00.0", "hrvValue": 45},
            {"readingTimeGMT": "2026-03-02T03:00:00.0", "hrvValue": 50},
        ],
    }


@pytest.fixture
def garmin_sleep_data() -> dict:
    """Realistic Garmin sleep API response."""
    return {
        "dailySleepDTO": {
            "calendarDate": "2026-03-02",
            "sleepTimeSeconds": 27000,  # 7.5 hours
            "deepSleepSeconds": 5400,
            "lightSleepSeconds": 14400,
            "remSleepSeconds": 5400,
            "awakeSleepSeconds": 1800,
            "sleepScores": {
                "overall": {"value": 82.0, "qualifierKey": "GOOD"},
                "totalDuration": {"value": 75.0, "qualifierKey": "GOOD"},
            },
        }
    }


@pytest.fixture
def garmin_stats_data() -> dict:
    """Realistic Garmin daily stats API response."""
    return {
        "calendarDate": "2026-03-02",
        "totalSteps": 12345,
        "restingHeartRate": 52,
        "maxHeartRate": 178,
        "averageStressLevel": 35,
    }


@pytest.fixture
def garmin_training_readiness_data() -> list:
    """Realistic Garmin Training Readiness API response."""
    return [
        {
            "calendarDate": "2026-03-02",
            "score": 72.0,
            "level": "MODERATE",
            "sleepScore": 80,
            "recoveryScore": 65,
        }
    ]


@pytest.fixture
def garmin_full_wellness(
    garmin_hrv_data,
    garmin_sleep_data,
    garmin_stats_data,
    garmin_training_readiness_data,
) -> dict:
    """Full pull_wellness() return value with all endpoints populated."""
    return {
        "training_readiness": garmin_training_readiness_data,
        "hrv": garmin_hrv_data,
        "sleep": garmin_sleep_data,
        "stats": garmin_stats_data,
    }


@pytest.fixture
def garmin_ride_activity() -> dict:
    """Activity summary from get_activities_by_date() for a power-meter ride."""
    return {
        "activityId": 1234567890,
        "activityName": "Threshold Ride 75m",
        "startTimeLocal": "2026-03-03 17:30:00",
        "startTimeGMT": "2026-03-03 16:30:00",
        "activityType": {"typeId": 2, "typeKey": "road_biking"},
        "duration": 4512.0,
        "trainingStressScore": 82.4,
        "activityTrainingLoad": 140.0,
        "powerTimeInZone_1": 300.0,
        "powerTimeInZone_2": 1500.0,
        "powerTimeInZone_3": 600.0,
        "powerTimeInZone_4": 1800.0,
        "powerTimeInZone_5": 0.0,
        "hrTimeInZone_2": 2000.0,
        "directWorkoutRpe": 70,
        "directWorkoutFeel": 75,
    }


@pytest.fixture
def garmin_run_activity() -> dict:
    """Activity summary for a run without TSS or power zones."""
    return {
        "activityId": 1234567891,
        "activityName": "Morning Run",
        "startTimeLocal": "2026-03-04 07:05:12",
        "activityType": {"typeId": 1, "typeKey": "running"},
        "duration": 2700.0,
        "activityTrainingLoad": 55.3,
        "hrTimeInZone_2": 1800.0,
        "hrTimeInZone_3": 600.0,
        "hrTimeInZone_4": 0.0,
    }
