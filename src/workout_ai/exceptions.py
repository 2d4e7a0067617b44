"""Workout AI exceptions, placed inside the coach error taxonomy."""

from __future__ import annotations

from coach_engine.errors import CoachError, TransientNetworkError, UpstreamRejection


class WorkoutAIError(CoachError):
    """Base exception for all workout_ai errors."""


class WorkoutAIRateLimitError(WorkoutAIError, TransientNetworkError):
    """Rate limited, timed out or 5xx after every retry."""


class WorkoutAIRejection(WorkoutAIError, UpstreamRejection):
    """The API refused the request (bad key, bad request, content policy)."""


class WorkoutAIResponseError(WorkoutAIError):
    """The reply was empty, not JSON, or missing required fields."""
