"""Garmin Connect adapter — all Garmin network I/O lives here."""

from garmin_client.calendar import GarminCalendar
from garmin_client.client import GarminClient
from garmin_client.exceptions import (
    GarminAPIError,
    GarminAuthError,
    GarminClientError,
    GarminConnectionError,
    GarminMFARequired,
    GarminRateLimitError,
)
from garmin_client.provider import GarminFitnessProvider

__all__ = [
    "GarminCalendar",
    "GarminClient",
    "GarminFitnessProvider",
    "GarminAPIError",
    "GarminAuthError",
    "GarminClientError",
    "GarminConnectionError",
    "GarminMFARequired",
    "GarminRateLimitError",
]
