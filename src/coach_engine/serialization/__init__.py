"""Serialization module — export workouts to device-compatible formats."""

from coach_engine.serialization.garmin import to_garmin_json

__all__ = ["to_garmin_json"]
